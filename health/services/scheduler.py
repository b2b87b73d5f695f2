"""
Housekeeping jobs for notifications.

``program_reminders_due`` runs every morning at 06:00 and reports the
programme reminders that become visible today; ``cleanup_read_notifications``
runs on Sunday at midnight and purges notifications older than
``settings.NOTIFICATION_RETENTION_DAYS`` that every addressed user has
read.  Neither job is required for correctness: visibility of a
scheduled notification is decided at read time.
"""
from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from django.conf import settings
from django.utils import timezone

from health.models import Notification
from health.services.notifications import read_by_everyone

logger = logging.getLogger(__name__)

DAILY_RUN_AT = time(6, 0)
CLEANUP_WEEKDAY = 6  # Sunday


def _local_midnight(moment: datetime) -> datetime:
    local = timezone.localtime(moment)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def next_daily_run(now: datetime) -> datetime:
    local = timezone.localtime(now)
    target = local.replace(hour=DAILY_RUN_AT.hour, minute=DAILY_RUN_AT.minute, second=0, microsecond=0)
    if local > target:
        target += timedelta(days=1)
    return target


def next_weekly_cleanup(now: datetime) -> datetime:
    local = timezone.localtime(now)
    days_ahead = (CLEANUP_WEEKDAY - local.weekday()) % 7
    target = _local_midnight(now) + timedelta(days=days_ahead)
    if target <= local:
        target += timedelta(days=7)
    return target


def program_reminders_due(now: datetime | None = None) -> list[Notification]:
    """Reminders surfacing today that at least one recipient has not read."""
    now = now or timezone.now()
    start = _local_midnight(now)
    scheduled = Notification.objects.filter(
        type='program_reminder',
        scheduled_for__gte=start,
        scheduled_for__lt=start + timedelta(days=1),
    ).order_by('scheduled_for', 'id')
    due = []
    for notification in scheduled:
        pending = notification.target_users.exclude(notification_reads__notification=notification).count()
        if pending:
            logger.debug("reminder %s for %d users", notification.title, pending)
            due.append(notification)
    logger.info("%d program reminders scheduled for %s", len(due), start.date().isoformat())
    return due


def cleanup_read_notifications(now: datetime | None = None) -> int:
    """Purge old notifications once every addressed user has read them."""
    now = now or timezone.now()
    cutoff = now - timedelta(days=settings.NOTIFICATION_RETENTION_DAYS)
    candidates = Notification.objects.filter(created_at__lt=cutoff, reads__isnull=False).distinct()
    ids = [n.id for n in candidates if read_by_everyone(n)]
    if not ids:
        logger.info("no read notifications older than %d days", settings.NOTIFICATION_RETENTION_DAYS)
        return 0
    _, per_model = Notification.objects.filter(id__in=ids).delete()
    # per-model counts also include receipts and target_users link rows
    deleted = per_model.get(Notification._meta.label, 0)
    logger.info("removed %d read notifications older than %d days", deleted, settings.NOTIFICATION_RETENTION_DAYS)
    return deleted


JOBS = {
    'program_reminders': (next_daily_run, program_reminders_due),
    'cleanup': (next_weekly_cleanup, cleanup_read_notifications),
}


def run_all(now: datetime | None = None) -> dict:
    return {name: job(now) for name, (_, job) in JOBS.items()}


def next_job(now: datetime) -> tuple[str, datetime]:
    """Name and time of the job that fires next."""
    return min(((name, planner(now)) for name, (planner, _) in JOBS.items()), key=lambda item: item[1])
