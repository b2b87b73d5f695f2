from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from health.models import Citizen, Notification, NotificationRead, User
from health.services.scheduler import (
    cleanup_read_notifications,
    next_daily_run,
    next_job,
    next_weekly_cleanup,
    program_reminders_due,
    run_all,
)


def local(*args):
    return timezone.make_aware(datetime(*args))


def test_next_daily_run():
    # 2024-06-05 is a Wednesday
    assert next_daily_run(local(2024, 6, 5, 5, 0)) == local(2024, 6, 5, 6, 0)
    assert next_daily_run(local(2024, 6, 5, 6, 0)) == local(2024, 6, 5, 6, 0)
    assert next_daily_run(local(2024, 6, 5, 7, 0)) == local(2024, 6, 6, 6, 0)


def test_next_weekly_cleanup_is_sunday_midnight():
    assert next_weekly_cleanup(local(2024, 6, 5, 7, 0)) == local(2024, 6, 9, 0, 0)
    assert next_weekly_cleanup(local(2024, 6, 9, 0, 0)) == local(2024, 6, 16, 0, 0)
    assert next_weekly_cleanup(local(2024, 6, 9, 10, 0)) == local(2024, 6, 16, 0, 0)


def test_next_job_picks_earliest():
    assert next_job(local(2024, 6, 5, 7, 0)) == ('program_reminders', local(2024, 6, 6, 6, 0))
    assert next_job(local(2024, 6, 8, 23, 0)) == ('cleanup', local(2024, 6, 9, 0, 0))


@pytest.mark.django_db
def test_cleanup_removes_only_old_read(citizen_user):
    now = timezone.now()
    old_read = Notification.objects.create(type='general', title='a', message='m',
                                           target_audience='specific_users', created_at=now - timedelta(days=40))
    old_read.target_users.add(citizen_user)
    NotificationRead.objects.create(notification=old_read, user=citizen_user)
    unread = Notification.objects.create(type='general', title='b', message='m', target_audience='specific_users',
                                         created_at=now - timedelta(days=40))
    unread.target_users.add(citizen_user)
    recent = Notification.objects.create(type='general', title='c', message='m', target_audience='specific_users',
                                         created_at=now - timedelta(days=5))
    recent.target_users.add(citizen_user)
    NotificationRead.objects.create(notification=recent, user=citizen_user)

    assert cleanup_read_notifications(now) == 1
    assert sorted(Notification.objects.values_list('title', flat=True)) == ['b', 'c']
    assert not NotificationRead.objects.filter(notification_id=old_read.id).exists()


@pytest.mark.django_db
def test_cleanup_keeps_broadcast_until_every_citizen_read(citizen):
    neighbour = User.objects.create_user(username='meera', password='x', role='citizen')
    Citizen.objects.create(user=neighbour, full_name='Meera Shah', phone='9876500000', dob=citizen.dob,
                           gender='Female', ward='Ward 1', zone='North', profile_completed=True)
    now = timezone.now()
    news = Notification.objects.create(type='general', title='news', message='m', target_audience='all',
                                       created_at=now - timedelta(days=40))
    camp = Notification.objects.create(type='general', title='camp', message='m', target_audience='ward',
                                       ward='Ward 1', created_at=now - timedelta(days=40))
    NotificationRead.objects.create(notification=news, user=citizen.user)
    NotificationRead.objects.create(notification=camp, user=citizen.user)

    assert cleanup_read_notifications(now) == 0

    NotificationRead.objects.create(notification=camp, user=neighbour)
    assert cleanup_read_notifications(now) == 1
    assert list(Notification.objects.values_list('title', flat=True)) == ['news']


@pytest.mark.django_db
def test_program_reminders_due_today(citizen_user):
    now = local(2024, 6, 5, 6, 0)
    reminders = {}
    for title, when in [('today', local(2024, 6, 5, 0, 0)), ('tomorrow', local(2024, 6, 6, 0, 0)),
                        ('seen', local(2024, 6, 5, 0, 0))]:
        reminders[title] = Notification.objects.create(type='program_reminder', title=title, message='m',
                                                       target_audience='specific_users', scheduled_for=when)
        reminders[title].target_users.add(citizen_user)
    NotificationRead.objects.create(notification=reminders['seen'], user=citizen_user)

    assert [n.title for n in program_reminders_due(now)] == ['today']
    assert set(run_all(now)) == {'program_reminders', 'cleanup'}
