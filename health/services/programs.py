"""
Health programme catalogue and citizen enrolment.
"""
from __future__ import annotations

import logging
from datetime import datetime, time

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from health.exceptions import Conflict
from health.models import Citizen, Program, ProgramApplication, calculate_age
from health.services.audit import log_action
from health.services.notifications import send_immediate_notification

logger = logging.getLogger(__name__)


def program_start_moment(program: Program) -> datetime:
    """Start of the programme's first day in the active time zone."""
    return timezone.make_aware(datetime.combine(program.start_date, time.min))


def apply_to_program(user, program_id, data: dict) -> ProgramApplication:
    """Enrol the citizen behind ``user``.

    One application per citizen per programme; the storage constraint
    decides, so concurrent double submits surface as :class:`Conflict`.
    """
    citizen = Citizen.objects.filter(user=user).first()
    if citizen is None or not citizen.profile_completed:
        raise PermissionDenied('Complete your profile before applying to programs')
    program = Program.objects.filter(id=program_id).first()
    if program is None:
        raise NotFound('Program not found')
    if program.status != 'active':
        raise ValidationError('This program is not accepting applications')

    dob = data.get('dateOfBirth') or citizen.dob
    try:
        with transaction.atomic():
            application = ProgramApplication.objects.create(
                program=program,
                citizen=citizen,
                user=user,
                full_name=data.get('fullName') or citizen.full_name,
                date_of_birth=dob,
                age=calculate_age(dob),
                gender=data.get('gender') or citizen.gender,
                mobile_number=data.get('mobileNumber') or citizen.phone,
                email=data.get('email') or citizen.email,
                street=data.get('street') or citizen.street,
                area=data.get('area') or '',
                ward=data.get('ward') or citizen.ward,
                pincode=data.get('pincode') or citizen.pincode,
                blood_group=data.get('bloodGroup') or citizen.blood_group,
                medical_history=data.get('medicalHistory') or '',
                allergies=data.get('allergies') or ', '.join(citizen.allergies or []),
                current_medications=data.get('currentMedications') or '',
                previous_vaccinations=data.get('previousVaccinations') or '',
                preferred_center=data.get('preferredCenter') or '',
                preferred_date=data.get('preferredDate'),
            )
    except IntegrityError:
        raise Conflict('You have already applied to this program') from None

    Program.objects.filter(pk=program.pk).update(enrolled=F('enrolled') + 1)
    # a programme that is already running is announced right away
    now = timezone.now()
    starts = program_start_moment(program)
    title = f"{program.name} starts today" if starts > now else f"{program.name} is underway"
    send_immediate_notification(
        user,
        type='program_reminder',
        title=title,
        message=f"Your enrolment in {program.name} is confirmed. Venue: {program.locations}.",
        priority='high',
        related_entity_type='program',
        related_entity_id=program.id,
        scheduled_for=max(starts, now),
    )
    log_action(user=user, action='program_apply', object_type='program', object_id=program.id,
               detail={'application': application.id})
    return application


def create_program(data: dict, *, user=None) -> Program:
    if data['end_date'] < data['start_date']:
        raise ValidationError({'endDate': 'End date must not precede start date'})
    program = Program.objects.create(**data)
    log_action(user=user, action='program_create', object_type='program', object_id=program.id,
               detail={'name': program.name})
    return program


def delete_program(program_id, *, user=None) -> None:
    deleted, _ = Program.objects.filter(id=program_id).delete()
    if not deleted:
        raise NotFound('Program not found')
    log_action(user=user, action='program_delete', object_type='program', object_id=int(program_id), detail={})


def active_programs():
    return Program.objects.filter(status='active').order_by('-created_at')


def format_program(p: Program) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'description': p.description,
        'type': p.type,
        'bannerImage': p.banner_image or None,
        'startDate': p.start_date.isoformat(),
        'endDate': p.end_date.isoformat(),
        'targetAudience': p.target_audience,
        'locations': p.locations,
        'coordinator': p.coordinator,
        'contactNumber': p.contact_number,
        'enrolled': p.enrolled,
        'status': p.status,
        'gradientFrom': p.gradient_from,
        'gradientTo': p.gradient_to,
    }


def format_application(a: ProgramApplication) -> dict:
    return {
        'id': a.id,
        'programId': a.program_id,
        'programName': a.program.name if a.program_id else None,
        'fullName': a.full_name,
        'age': a.age,
        'gender': a.gender,
        'mobileNumber': a.mobile_number,
        'ward': a.ward,
        'preferredCenter': a.preferred_center,
        'preferredDate': a.preferred_date.isoformat() if a.preferred_date else None,
        'status': a.status,
        'applicationDate': a.application_date.isoformat(),
    }
