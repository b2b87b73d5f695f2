from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from health.models import Notification, NotificationRead, User


@pytest.mark.django_db
def test_seed_admin_is_idempotent():
    out = StringIO()
    call_command('seed_admin', username='root', email='root@city.gov', password='first-pass', stdout=out)
    assert 'ok: root created (admin)' in out.getvalue()

    out = StringIO()
    call_command('seed_admin', username='root', email='root@city.gov', password='second-pass', stdout=out)
    assert 'ok: root updated (admin)' in out.getvalue()

    admin = User.objects.get(username='root')
    assert User.objects.filter(username='root').count() == 1
    assert admin.role == 'admin'
    assert admin.is_superuser and admin.is_staff
    assert admin.check_password('second-pass')


@pytest.mark.django_db
def test_seed_admin_needs_password(settings):
    settings.SEED_ADMIN_PASSWORD = ''
    with pytest.raises(CommandError):
        call_command('seed_admin', stdout=StringIO())
    assert not User.objects.filter(role='admin').exists()


@pytest.mark.django_db
def test_scheduler_once_reports_both_jobs(citizen_user):
    now = timezone.now()
    reminder = Notification.objects.create(
        type='program_reminder', title='Polio Sunday', message='Tomorrow', target_audience='specific_users',
        scheduled_for=now,
    )
    reminder.target_users.add(citizen_user)
    stale = Notification.objects.create(type='general', title='old', message='m', target_audience='specific_users')
    stale.target_users.add(citizen_user)
    NotificationRead.objects.create(notification=stale, user=citizen_user)
    Notification.objects.filter(pk=stale.pk).update(created_at=now - timedelta(days=45))

    out = StringIO()
    call_command('notification_scheduler', '--once', stdout=out)

    assert 'program reminders due today: 1; read notifications removed: 1' in out.getvalue()
    assert not Notification.objects.filter(pk=stale.pk).exists()
    assert Notification.objects.filter(pk=reminder.pk).exists()
