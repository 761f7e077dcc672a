"""
Application entry point
Starts the Flask development server
"""
import os

from dotenv import load_dotenv

# .env must be loaded before the config module reads the environment
load_dotenv()

from attendance_app import create_app  # noqa: E402
from attendance_app.globals import get_services  # noqa: E402

app = create_app()


def main():
    host = os.getenv('FLASK_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_PORT', 5000))
    debug = os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes')

    app.logger.info(f"🚀 Starting Flask application on {host}:{port}")
    app.logger.info(f"🔧 Debug mode: {debug}")

    try:
        app.run(
            host=host,
            port=port,
            debug=debug,
            threaded=True
        )
    finally:
        get_services(app).close()
        app.logger.info("[SHUTDOWN] ✅ Services closed")


if __name__ == '__main__':
    main()
