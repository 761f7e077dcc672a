"""
API routes for Server-Sent Events (SSE)
Real-time notifications for the browser
"""
import json
import queue

from flask import Blueprint, Response, current_app, stream_with_context

from attendance_app.globals import get_services

events_api_bp = Blueprint('events_api', __name__, url_prefix='/api/events')


@events_api_bp.route('/stream')
def api_events_stream():
    """SSE stream of notifications and attendance updates"""
    broadcaster = get_services().event_broadcaster
    heartbeat = current_app.config.get('SSE_HEARTBEAT_SECONDS', 30)
    client_queue = broadcaster.add_client()

    def event_stream():
        try:
            yield f"data: {json.dumps({'type': 'connected'})}\n\n"

            while True:
                try:
                    yield client_queue.get(timeout=heartbeat)
                except queue.Empty:
                    # Keep the connection alive
                    yield f"data: {json.dumps({'type': 'heartbeat'})}\n\n"
        finally:
            broadcaster.remove_client(client_queue)

    return Response(stream_with_context(event_stream()), mimetype='text/event-stream')
