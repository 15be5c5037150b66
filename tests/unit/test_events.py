import threading

from app.utils.events import EventBus


def test_emit_delivers_to_sync_handlers_without_waiting():
    bus = EventBus()
    received = []
    release = threading.Event()

    def slow_handler(data):
        release.wait(timeout=5)
        received.append(data)

    bus.subscribe("lesson.created", slow_handler)
    bus.emit("lesson.created", {"lesson_id": 1})
    assert received == []

    release.set()
    bus.wait_idle()
    assert received == [{"lesson_id": 1}]

def test_failing_handler_does_not_reach_the_emitter():
    bus = EventBus()
    received = []

    def broken(data):
        raise RuntimeError("sink down")

    bus.subscribe("lesson_completion.created", broken)
    bus.subscribe("lesson_completion.created", received.append)
    bus.emit("lesson_completion.created", {"lesson_id": 1, "student_id": 2})
    bus.wait_idle()
    assert received == [{"lesson_id": 1, "student_id": 2}]

def test_emit_runs_async_handlers_outside_a_loop():
    bus = EventBus()
    received = []

    async def handler(data):
        received.append(data)

    bus.subscribe("lesson.deleted", handler)
    bus.emit("lesson.deleted", {"lesson_id": 3})
    bus.wait_idle()
    assert received == [{"lesson_id": 3}]

def test_unsubscribed_handlers_are_not_called():
    bus = EventBus()
    received = []
    bus.subscribe("lesson.created", received.append)
    bus.unsubscribe("lesson.created", received.append)
    bus.emit("lesson.created", {"lesson_id": 1})
    bus.wait_idle()
    assert received == []
