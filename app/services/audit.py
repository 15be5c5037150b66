import logging
from typing import Any, Dict

from app.core.constants import LessonEventEnum
from app.utils.events import event_bus

logger = logging.getLogger(__name__)


def handle_lesson_event(event: LessonEventEnum):
    def handler(data: Dict[str, Any]):
        details = " ".join(f"{key}={value}" for key, value in sorted(data.items()))
        logger.info(f"{event.value} {details}")

    handler.__name__ = f"audit_{event.name.lower()}"
    return handler


_audit_handlers = {event: handle_lesson_event(event) for event in LessonEventEnum}


def register_audit_handlers():
    """Write every lesson, schedule and completion event to the audit log."""
    for event, handler in _audit_handlers.items():
        event_bus.unsubscribe(event.value, handler)
        event_bus.subscribe(event.value, handler)
