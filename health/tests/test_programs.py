from datetime import date, timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from health.exceptions import Conflict
from health.models import Notification, Program, ProgramApplication
from health.services.notifications import visible_notifications
from health.services.programs import apply_to_program, create_program, program_start_moment

pytestmark = pytest.mark.django_db


@pytest.fixture
def program():
    start = timezone.localdate() + timedelta(days=7)
    return Program.objects.create(name='Measles drive', description='MR vaccine', type='vaccination',
                                  start_date=start, end_date=start + timedelta(days=30))


def test_apply_enrols_and_schedules_reminder(citizen, citizen_user, program):
    application = apply_to_program(citizen_user, program.id, {'preferredCenter': 'UPHC 3'})

    assert application.full_name == 'Ravi Kumar'
    assert application.mobile_number == '9876543210'
    assert application.preferred_center == 'UPHC 3'
    program.refresh_from_db()
    assert program.enrolled == 1

    reminder = Notification.objects.get(type='program_reminder')
    assert reminder.scheduled_for == program_start_moment(program)
    assert reminder.title == 'Measles drive starts today'
    assert list(reminder.target_users.all()) == [citizen_user]
    assert reminder not in visible_notifications(citizen_user)


def test_running_program_reminder_is_due_immediately(citizen, citizen_user, program):
    program.start_date = timezone.localdate() - timedelta(days=3)
    program.save()
    before = timezone.now()

    apply_to_program(citizen_user, program.id, {})

    reminder = Notification.objects.get(type='program_reminder')
    assert reminder.title == 'Measles drive is underway'
    assert before <= reminder.scheduled_for <= timezone.now()
    assert reminder.scheduled_for > program_start_moment(program)
    assert reminder in visible_notifications(citizen_user)


def test_second_application_conflicts(citizen, citizen_user, program):
    apply_to_program(citizen_user, program.id, {})
    with pytest.raises(Conflict):
        apply_to_program(citizen_user, program.id, {})
    program.refresh_from_db()
    assert program.enrolled == 1
    assert ProgramApplication.objects.count() == 1


def test_incomplete_profile_is_refused(citizen, citizen_user, program):
    citizen.profile_completed = False
    citizen.save()
    with pytest.raises(PermissionDenied):
        apply_to_program(citizen_user, program.id, {})


def test_inactive_program_is_refused(citizen, citizen_user, program):
    program.status = 'completed'
    program.save()
    with pytest.raises(ValidationError):
        apply_to_program(citizen_user, program.id, {})


def test_create_program_checks_date_order():
    with pytest.raises(ValidationError):
        create_program({'name': 'x', 'description': 'y', 'type': 'other',
                        'start_date': date(2024, 5, 2), 'end_date': date(2024, 5, 1)})
