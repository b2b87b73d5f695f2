import logging
from typing import Optional

from django.db import transaction
from django.db.models import Count, F, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from health.models import Doctor, Hospital, Medicine, Patient, PatientProfile, PrescriptionLine
from health.services.audit import log_action

logger = logging.getLogger(__name__)


def resolve_profile(hospital: Hospital, *, profile_id=None, phone: Optional[str] = None) -> Optional[PatientProfile]:
    """Find the identity a visit belongs to: by id first, then by phone."""
    profile = None
    if profile_id:
        profile = PatientProfile.objects.filter(id=profile_id, hospital=hospital).first()
    phone = (phone or '').strip()
    if profile is None and phone:
        profile = PatientProfile.objects.filter(hospital=hospital, phone=phone).order_by('id').first()
    return profile


def register_visit(hospital: Hospital, *, user=None, profile_id=None, name=None, age=None, gender='',
                   phone='', patient_type='OPD', disease='', doctor_id=None, bed_type='',
                   admission_date=None) -> Patient:
    profile = resolve_profile(hospital, profile_id=profile_id, phone=phone)
    if profile is None:
        name = (name or '').strip()
        if not name:
            raise ValidationError({'name': 'Patient name is required'})
        profile = PatientProfile.objects.create(
            hospital=hospital, name=name, age=age, gender=gender or '', phone=(phone or '').strip(),
        )

    doctor = None
    if doctor_id:
        doctor = Doctor.objects.filter(id=doctor_id, hospital=hospital).first()
        if doctor is None:
            raise ValidationError({'doctor': 'Doctor not found in this hospital'})

    is_ipd = patient_type == 'IPD'
    visit = Patient.objects.create(
        hospital=hospital,
        profile=profile,
        name=profile.name,
        age=profile.age,
        gender=profile.gender,
        phone=profile.phone,
        patient_type=patient_type,
        disease=disease or '',
        doctor=doctor,
        bed_type=bed_type if is_ipd else '',
        admission_date=admission_date if is_ipd and admission_date else timezone.now(),
    )
    log_action(user=user, action='patient_register', object_type='patient', object_id=visit.id,
               detail={'profile': profile.id, 'type': patient_type})
    return visit


def discharge_patient(patient_id, hospital: Hospital, *, user=None) -> bool:
    """Discharge a visit and free its bed in one transaction.

    Returns False when the patient was already discharged; nothing is
    written in that case.  The bed counter never rises above the pool total.
    """
    with transaction.atomic():
        patient = Patient.objects.select_for_update().filter(id=patient_id, hospital=hospital).first()
        if patient is None:
            raise NotFound('Patient not found')
        if patient.discharge_date is not None:
            return False
        patient.discharge_date = timezone.now()
        patient.save(update_fields=['discharge_date'])

        if patient.bed_type in Hospital.BED_TYPES:
            available = f'{patient.bed_type}_available'
            total = f'{patient.bed_type}_total'
            freed = Hospital.objects.filter(pk=patient.hospital_id, **{f'{available}__lt': F(total)}).update(
                **{available: F(available) + 1}
            )
            if not freed:
                logger.warning("bed pool %s of hospital %s already full on discharge of patient %s",
                               patient.bed_type, patient.hospital_id, patient.id)

    log_action(user=user, action='patient_discharge', object_type='patient', object_id=patient.id,
               detail={'bedType': patient.bed_type})
    return True


def save_prescription(patient_id, hospital: Hospital, lines: list[dict], *, user=None) -> list[PrescriptionLine]:
    """Attach prescription lines and take the quantities out of stock.

    Either every line is saved and every stock decremented, or nothing is.
    """
    with transaction.atomic():
        patient = Patient.objects.filter(id=patient_id, hospital=hospital).first()
        if patient is None:
            raise NotFound('Patient not found')
        wanted = [line for line in lines if line.get('quantity', 0) > 0]
        medicine_ids = [line['medicine'] for line in wanted]
        medicines = {
            m.id: m for m in Medicine.objects.select_for_update().filter(hospital=hospital, id__in=medicine_ids)
        }
        saved = []
        for line in wanted:
            med = medicines.get(line['medicine'])
            if med is None:
                raise ValidationError({'medicine': f"Medicine {line['medicine']} not found in this hospital"})
            if med.quantity < line['quantity']:
                raise ValidationError(f"Not enough stock for {med.name}")
            Medicine.objects.filter(pk=med.pk).update(
                quantity=F('quantity') - line['quantity'], last_updated=timezone.now()
            )
            med.quantity -= line['quantity']
            saved.append(PrescriptionLine.objects.create(
                patient=patient, medicine=med, quantity=line['quantity'], dosage=line.get('dosage') or '',
            ))
    log_action(user=user, action='prescription_save', object_type='patient', object_id=patient.id,
               detail={'lines': len(saved)})
    return saved


def doctor_workload(hospital: Hospital) -> list[dict]:
    doctors = Doctor.objects.filter(hospital=hospital).annotate(
        opd=Count('patients', filter=Q(patients__patient_type='OPD')),
        ipd_admitted=Count('patients', filter=Q(patients__patient_type='IPD', patients__discharge_date__isnull=True)),
        ipd_discharged=Count('patients', filter=Q(patients__patient_type='IPD', patients__discharge_date__isnull=False)),
    ).order_by('name')
    return [
        {
            'doctor': format_doctor(d),
            'opdCount': d.opd,
            'ipdAdmitted': d.ipd_admitted,
            'ipdDischarged': d.ipd_discharged,
            'total': d.opd + d.ipd_admitted + d.ipd_discharged,
        }
        for d in doctors
    ]


def lookup_profiles(hospital: Hospital, q: str, limit: int = 5) -> list[dict]:
    q = (q or '').strip()
    if len(q) < 2:
        return []
    qs = PatientProfile.objects.filter(hospital=hospital).filter(
        Q(name__icontains=q) | Q(phone__icontains=q)
    ).order_by('name')[:limit]
    return [format_profile(p) for p in qs]


def format_doctor(d: Doctor) -> dict:
    return {
        'id': d.id,
        'hospitalId': d.hospital_id,
        'name': d.name,
        'specialization': d.specialization,
        'opdTimings': d.opd_timings,
        'phone': d.phone,
        'experienceYears': d.experience_years,
        'isAvailable': d.is_available,
    }


def format_profile(p: PatientProfile) -> dict:
    return {'id': p.id, 'name': p.name, 'age': p.age, 'gender': p.gender, 'phone': p.phone}


def format_visit(v: Patient) -> dict:
    return {
        'id': v.id,
        'profileId': v.profile_id,
        'name': v.name,
        'age': v.age,
        'gender': v.gender,
        'phone': v.phone,
        'patientType': v.patient_type,
        'disease': v.disease,
        'doctor': v.doctor.name if v.doctor_id and v.doctor else None,
        'bedType': v.bed_type or None,
        'admissionDate': v.admission_date.isoformat() if v.admission_date else None,
        'dischargeDate': v.discharge_date.isoformat() if v.discharge_date else None,
        'prescription': [
            {
                'medicine': line.medicine.name if line.medicine_id and line.medicine else None,
                'quantity': line.quantity,
                'dosage': line.dosage,
            }
            for line in v.prescription.all()
        ],
    }


def profile_history(hospital: Hospital, profile_id) -> dict:
    profile = PatientProfile.objects.filter(id=profile_id, hospital=hospital).first()
    if profile is None:
        raise NotFound('Patient profile not found')
    visits = (
        Patient.objects.filter(profile=profile, hospital=hospital)
        .select_related('doctor')
        .prefetch_related('prescription__medicine')
        .order_by('-admission_date')
    )
    return {'profile': format_profile(profile), 'visits': [format_visit(v) for v in visits]}
