import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db.models import Exists, OuterRef, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from health.models import Citizen, Notification, NotificationRead
from health.services.audit import log_action

logger = logging.getLogger(__name__)


def visible_notifications(user, now=None):
    """Notifications a citizen may see right now, annotated with ``is_read``.

    Scheduled notifications stay hidden until ``scheduled_for`` passes.
    Ward and zone targeting read the citizen record, never session state.
    ``is_read`` reflects this user's receipt only.
    """
    now = now or timezone.now()
    citizen = Citizen.objects.filter(user=user).first()
    audience = Q(target_audience='all') | Q(target_users=user)
    if citizen is not None:
        if citizen.ward:
            audience |= Q(target_audience='ward', ward=citizen.ward)
        if citizen.zone:
            audience |= Q(target_audience='zone', zone=citizen.zone)
    due = Q(scheduled_for__isnull=True) | Q(scheduled_for__lte=now)
    receipt = NotificationRead.objects.filter(notification=OuterRef('pk'), user=user)
    return (
        Notification.objects.filter(due & audience)
        .distinct()
        .annotate(is_read=Exists(receipt))
        .order_by('-created_at')
    )


def mark_read(user, notification_id=None, now=None) -> int:
    """Record read receipts for ``user``; other recipients are unaffected."""
    qs = visible_notifications(user, now)
    if notification_id is not None:
        target = qs.filter(id=notification_id).first()
        if target is None:
            raise NotFound('Notification not found')
        NotificationRead.objects.get_or_create(notification=target, user=user)
        return 1
    ids = list(qs.filter(is_read=False).values_list('id', flat=True))
    NotificationRead.objects.bulk_create(
        [NotificationRead(notification_id=pk, user=user) for pk in ids], ignore_conflicts=True,
    )
    return len(ids)


def audience_users(notification: Notification):
    """Users a notification is addressed to at this moment."""
    addressed = Q(notifications=notification)
    if notification.target_audience == 'all':
        addressed |= Q(role='citizen')
    elif notification.target_audience == 'ward' and notification.ward:
        addressed |= Q(citizen__ward=notification.ward)
    elif notification.target_audience == 'zone' and notification.zone:
        addressed |= Q(citizen__zone=notification.zone)
    return get_user_model().objects.filter(addressed).distinct()


def read_by_everyone(notification: Notification) -> bool:
    return not audience_users(notification).exclude(notification_reads__notification=notification).exists()


def delete_for_user(user, notification_id) -> bool:
    """Remove ``user`` from a targeted notification.

    Returns True when the notification itself was deleted because no
    target users remained.
    """
    notification = Notification.objects.filter(id=notification_id).first()
    if notification is None:
        raise NotFound('Notification not found')
    if notification.target_audience != 'specific_users':
        raise ValidationError('Broadcast notifications cannot be deleted')
    if not notification.target_users.filter(pk=user.pk).exists():
        raise NotFound('Notification not found')
    notification.target_users.remove(user)
    NotificationRead.objects.filter(notification=notification, user=user).delete()
    if not notification.target_users.exists():
        notification.delete()
        return True
    return False


def broadcast_emergency_alert(*, sender, title: str, message: str, priority: str = 'critical',
                              target_audience: str = 'all', ward: str = '', zone: str = '') -> Notification:
    notification = Notification.objects.create(
        type='emergency',
        priority=priority or 'critical',
        title=title,
        message=message,
        target_audience=target_audience or 'all',
        ward=ward if target_audience == 'ward' else '',
        zone=zone if target_audience == 'zone' else '',
        is_broadcast=True,
        sent_by=sender,
    )
    log_action(user=sender, action='emergency_broadcast', object_type='notification', object_id=notification.id,
               detail={'audience': notification.target_audience, 'ward': notification.ward})
    logger.info("emergency alert %s broadcast to %s", notification.id, notification.target_audience)
    return notification


def send_immediate_notification(user, *, type: str, title: str, message: str, priority: str = 'medium',
                                sender=None, related_entity_type: str = '',
                                related_entity_id: Optional[int] = None, scheduled_for=None) -> Notification:
    """Create a notification addressed to one user.

    Without ``scheduled_for`` it becomes visible at once.
    """
    notification = Notification.objects.create(
        type=type,
        priority=priority,
        title=title,
        message=message,
        target_audience='specific_users',
        sent_by=sender,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
        scheduled_for=scheduled_for or timezone.now(),
    )
    notification.target_users.add(user)
    logger.debug("notification %s queued for user %s", notification.id, user.pk)
    return notification


def format_notification(n: Notification) -> dict:
    return {
        'id': n.id,
        'type': n.type,
        'priority': n.priority,
        'title': n.title,
        'message': n.message,
        'targetAudience': n.target_audience,
        'ward': n.ward or None,
        'zone': n.zone or None,
        'isRead': bool(getattr(n, 'is_read', False)),
        'isBroadcast': n.is_broadcast,
        'relatedEntityType': n.related_entity_type or None,
        'relatedEntityId': n.related_entity_id,
        'scheduledFor': n.scheduled_for.isoformat() if n.scheduled_for else None,
        'createdAt': n.created_at.isoformat() if n.created_at else None,
    }
