import json

from attendance_app.models import EventBroadcaster


def _payload(message):
    data_line = next(line for line in message.split('\n') if line.startswith('data: '))
    return json.loads(data_line[len('data: '):])


def test_format_sse_message():
    message = EventBroadcaster.format_sse_message({'type': 'notification', 'data': {'title': 'Hi'}})

    assert message.startswith('event: notification\n')
    assert message.endswith('\n\n')
    assert _payload(message)['data'] == {'title': 'Hi'}


def test_broadcast_reaches_every_client():
    broadcaster = EventBroadcaster()
    first = broadcaster.add_client()
    second = broadcaster.add_client()

    broadcaster.broadcast_notification('Attendance Marked', 'Alice marked present manually.')

    for client_queue in (first, second):
        payload = _payload(client_queue.get_nowait())
        assert payload['type'] == 'notification'
        assert payload['data']['variant'] == 'default'
        assert 'timestamp' in payload


def test_full_client_is_dropped():
    broadcaster = EventBroadcaster(queue_size=1)
    slow = broadcaster.add_client()

    broadcaster.broadcast_notification('One', 'first')
    broadcaster.broadcast_notification('Two', 'second')

    assert broadcaster.get_client_count() == 0
    assert _payload(slow.get_nowait())['data']['title'] == 'One'


def test_remove_client_and_cleanup():
    broadcaster = EventBroadcaster()
    client_queue = broadcaster.add_client()
    broadcaster.add_client()

    broadcaster.remove_client(client_queue)
    broadcaster.remove_client(client_queue)
    assert broadcaster.get_client_count() == 1

    broadcaster.cleanup()
    assert broadcaster.get_client_count() == 0
