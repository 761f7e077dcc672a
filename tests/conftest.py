import base64
import io
import threading
from datetime import datetime, timedelta

import pytest
from PIL import Image

from attendance_app import create_app
from attendance_app.globals import get_services
from attendance_app.models import (
    AttendanceTracker,
    EnrollmentService,
    EventBroadcaster,
    FaceRecognitionManager,
)
from core.recognition.provider import EmbeddingProvider
from database import DatabaseManager


def make_png(color):
    buffer = io.BytesIO()
    Image.new('RGB', (16, 16), color).save(buffer, format='PNG')
    return buffer.getvalue()


def to_data_url(img_bytes):
    return 'data:image/png;base64,' + base64.b64encode(img_bytes).decode('ascii')


class FakeProvider(EmbeddingProvider):
    """Maps known image bytes to fixed descriptors; anything else has no face."""

    name = 'fake'

    def __init__(self, faces=None):
        super().__init__()
        self.faces = dict(faces or {})
        self.load_count = 0
        self.extract_calls = 0

    def _load(self):
        self.load_count += 1

    def _extract(self, image):
        self.extract_calls += 1
        return self.faces.get(image)


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def images():
    return {
        'alice': make_png((200, 30, 30)),
        'bob': make_png((30, 30, 200)),
        'alice_scan': make_png((30, 200, 30)),
        'stranger': make_png((250, 250, 250)),
        'no_face': make_png((0, 0, 0)),
    }


@pytest.fixture
def provider(images):
    return FakeProvider({
        images['alice']: [0.0, 0.0, 0.0],
        images['bob']: [1.0, 0.0, 0.0],
        images['alice_scan']: [0.3, 0.0, 0.0],
        images['stranger']: [0.0, 5.0, 0.0],
    })


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 4, 9, 0, 0))


@pytest.fixture
def database(tmp_path):
    return DatabaseManager(tmp_path / 'attendance.db')


@pytest.fixture
def broadcaster():
    return EventBroadcaster(queue_size=100)


@pytest.fixture
def face_manager(provider):
    return FaceRecognitionManager(provider, match_threshold=0.5)


@pytest.fixture
def services(database, face_manager, broadcaster, clock):
    lock = threading.Lock()
    kwargs = dict(
        database=database,
        face_manager=face_manager,
        broadcaster=broadcaster,
        lock=lock,
        clock=clock,
        image_limits={'min_size': 0},
    )
    return EnrollmentService(**kwargs), AttendanceTracker(**kwargs)


@pytest.fixture
def enrollment(services):
    return services[0]


@pytest.fixture
def tracker(services):
    return services[1]


@pytest.fixture
def app(tmp_path, provider, clock):
    app = create_app(
        config_overrides={
            'TESTING': True,
            'DATABASE_PATH': str(tmp_path / 'app.db'),
            'LOG_DIR': str(tmp_path / 'logs'),
            'MIN_IMAGE_SIZE': 0,
            'CLOCK': clock,
        },
        embedding_provider=provider,
    )
    yield app
    get_services(app).close()


@pytest.fixture
def client(app):
    return app.test_client()
