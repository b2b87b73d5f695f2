import logging
from typing import Any, Dict, Optional

from health.models import AuditEvent

logger = logging.getLogger(__name__)


def log_action(*, user, action: str, object_type: Optional[str] = None, object_id: Optional[int] = None,
               detail: Optional[Dict[str, Any]] = None) -> AuditEvent:
    """Append an audit row; anonymous or missing users are stored as NULL."""
    actor = user if getattr(user, 'is_authenticated', False) and getattr(user, 'pk', None) else None
    event = AuditEvent.objects.create(
        user=actor,
        action=action,
        object_type=object_type,
        object_id=object_id,
        detail=detail or {},
    )
    logger.debug("audit %s %s:%s by %s", action, object_type, object_id, actor.pk if actor else 'anonymous')
    return event
