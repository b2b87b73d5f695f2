from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from health.models import Citizen, Notification, NotificationRead, User
from health.services.notifications import (
    broadcast_emergency_alert,
    delete_for_user,
    format_notification,
    mark_read,
    send_immediate_notification,
    visible_notifications,
)

pytestmark = pytest.mark.django_db


def _notify(**kw):
    defaults = dict(type='general', title='t', message='m')
    defaults.update(kw)
    return Notification.objects.create(**defaults)


def test_visibility_rules(citizen, citizen_user):
    neighbour = User.objects.create_user(username='meera', password='x', role='citizen')
    visible = {
        _notify(title='everyone').id,
        _notify(title='my ward', target_audience='ward', ward='Ward 1').id,
        _notify(title='my zone', target_audience='zone', zone='North').id,
        send_immediate_notification(citizen_user, type='general', title='direct', message='m').id,
    }
    _notify(title='other ward', target_audience='ward', ward='Ward 2')
    _notify(title='later', scheduled_for=timezone.now() + timedelta(days=1))
    send_immediate_notification(neighbour, type='general', title='not mine', message='m')

    assert {n.id for n in visible_notifications(citizen_user)} == visible


def test_without_citizen_record_only_global_and_direct(citizen_user):
    _notify(target_audience='ward', ward='Ward 1')
    everyone = _notify()
    assert list(visible_notifications(citizen_user)) == [everyone]


def test_mark_single_and_all(citizen, citizen_user):
    a = _notify()
    _notify(target_audience='ward', ward='Ward 1')
    future = _notify(scheduled_for=timezone.now() + timedelta(hours=3))

    assert mark_read(citizen_user, a.id) == 1
    assert mark_read(citizen_user) == 1
    assert mark_read(citizen_user) == 0
    assert not NotificationRead.objects.filter(notification=future).exists()
    with pytest.raises(NotFound):
        mark_read(citizen_user, future.id)


def test_delete_removes_user_then_notification(citizen_user):
    other = User.objects.create_user(username='meera', password='x', role='citizen')
    n = send_immediate_notification(citizen_user, type='general', title='t', message='m')
    n.target_users.add(other)

    assert delete_for_user(citizen_user, n.id) is False
    assert list(n.target_users.all()) == [other]
    assert delete_for_user(other, n.id) is True
    assert not Notification.objects.filter(id=n.id).exists()


def test_broadcast_cannot_be_deleted(citizen_user):
    n = _notify()
    with pytest.raises(ValidationError):
        delete_for_user(citizen_user, n.id)


def test_delete_requires_being_targeted(citizen_user):
    other = User.objects.create_user(username='meera', password='x', role='citizen')
    n = send_immediate_notification(other, type='general', title='t', message='m')
    with pytest.raises(NotFound):
        delete_for_user(citizen_user, n.id)


def test_emergency_broadcast_targets_ward(citizen, citizen_user):
    admin = User.objects.create_user(username='boss', password='x', role='admin')
    alert = broadcast_emergency_alert(sender=admin, title='Flood', message='Move to shelters',
                                      target_audience='ward', ward='Ward 1', zone='ignored')
    assert alert.type == 'emergency'
    assert alert.is_broadcast
    assert alert.zone == ''
    assert alert in visible_notifications(citizen_user)


def test_read_state_is_per_citizen(citizen, citizen_user):
    neighbour = User.objects.create_user(username='meera', password='x', role='citizen')
    Citizen.objects.create(user=neighbour, full_name='Meera Shah', phone='9876500000', dob=citizen.dob,
                           gender='Female', ward='Ward 1', zone='North', profile_completed=True)
    news = _notify(title='City news')
    camp = _notify(title='Ward 1 camp', target_audience='ward', ward='Ward 1')

    assert mark_read(citizen_user) == 2

    mine = {n.id: format_notification(n)['isRead'] for n in visible_notifications(citizen_user)}
    theirs = {n.id: format_notification(n)['isRead'] for n in visible_notifications(neighbour)}
    assert mine == {news.id: True, camp.id: True}
    assert theirs == {news.id: False, camp.id: False}

    assert mark_read(neighbour, camp.id) == 1
    assert set(camp.read_by.all()) == {citizen_user, neighbour}
    assert list(news.read_by.all()) == [citizen_user]


def test_dismissing_drops_own_receipt(citizen_user):
    other = User.objects.create_user(username='meera', password='x', role='citizen')
    n = send_immediate_notification(citizen_user, type='general', title='t', message='m')
    n.target_users.add(other)
    mark_read(citizen_user, n.id)

    delete_for_user(citizen_user, n.id)
    assert not NotificationRead.objects.filter(notification=n).exists()
