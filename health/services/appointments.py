import logging

from rest_framework.exceptions import NotFound, ValidationError

from health.models import Appointment, Doctor, Hospital
from health.services.audit import log_action
from health.services.notifications import send_immediate_notification

logger = logging.getLogger(__name__)


def book_appointment(user, data: dict, citizen=None) -> Appointment:
    """Book a visit; ward and zone default to the citizen's address."""
    hospital = Hospital.objects.filter(id=data['hospitalId']).first()
    if hospital is None:
        raise NotFound('Hospital not found')
    doctor = None
    if data.get('doctorId'):
        doctor = Doctor.objects.filter(id=data['doctorId'], hospital=hospital).first()
        if doctor is None:
            raise ValidationError({'doctorId': 'Doctor does not work at this hospital'})

    appointment = Appointment.objects.create(
        hospital=hospital,
        doctor=doctor,
        citizen=user,
        patient_name=data['patientName'],
        patient_age=data['patientAge'],
        patient_gender=data['patientGender'],
        patient_phone=data['patientPhone'],
        appointment_date=data['appointmentDate'],
        appointment_time=data['appointmentTime'],
        reason=data['reason'],
        disease_type=data.get('diseaseType') or 'Other',
        severity=data.get('severity') or 'Low',
        ward=data.get('ward') or (citizen.ward if citizen else '') or hospital.ward,
        zone=data.get('zone') or (citizen.zone if citizen else '') or hospital.zone,
        status='pending',
    )
    log_action(user=user, action='appointment_book', object_type='appointment', object_id=appointment.id,
               detail={'hospital': hospital.id})
    return appointment


def cancel_appointment(user, appointment_id) -> Appointment:
    appointment = Appointment.objects.filter(id=appointment_id, citizen=user).first()
    if appointment is None:
        raise NotFound('Appointment not found')
    appointment.status = 'cancelled'
    appointment.save(update_fields=['status'])
    log_action(user=user, action='appointment_cancel', object_type='appointment', object_id=appointment.id,
               detail={})
    return appointment


def update_appointment_status(hospital: Hospital, appointment_id, status: str, notes: str = '',
                              *, user=None) -> Appointment:
    appointment = Appointment.objects.filter(id=appointment_id, hospital=hospital).first()
    if appointment is None:
        raise NotFound('Appointment not found')
    appointment.status = status
    fields = ['status']
    if notes:
        appointment.notes = notes
        fields.append('notes')
    appointment.save(update_fields=fields)

    send_immediate_notification(
        appointment.citizen,
        type='appointment',
        title=f"Appointment {status}",
        message=f"Your appointment at {hospital.name} on {appointment.appointment_date:%d %b %Y} is now {status}.",
        sender=user,
        related_entity_type='appointment',
        related_entity_id=appointment.id,
    )
    log_action(user=user, action='appointment_status', object_type='appointment', object_id=appointment.id,
               detail={'status': status})
    return appointment


def format_appointment(a: Appointment) -> dict:
    return {
        'id': a.id,
        'hospitalId': a.hospital_id,
        'hospitalName': a.hospital.name if a.hospital_id else None,
        'doctor': a.doctor.name if a.doctor_id and a.doctor else None,
        'patientName': a.patient_name,
        'patientAge': a.patient_age,
        'patientGender': a.patient_gender,
        'patientPhone': a.patient_phone,
        'appointmentDate': a.appointment_date.isoformat(),
        'appointmentTime': a.appointment_time,
        'reason': a.reason,
        'diseaseType': a.disease_type,
        'severity': a.severity,
        'ward': a.ward,
        'zone': a.zone,
        'status': a.status,
        'notes': a.notes,
    }
