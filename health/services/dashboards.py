"""
View models for the three portal dashboards.

Each dashboard calls its aggregators one after another in the request
thread.  Every aggregator returns an ``AggregateResult``; a failure in
one becomes its fallback value plus an entry in ``degradedSections`` and
never stops the others.
"""
from __future__ import annotations

from django.db.models import Count, Q
from django.utils import timezone

from health.models import Appointment, Doctor, Equipment, Hospital, Medicine, Patient
from health.services.citizens import format_citizen, get_citizen
from health.services.fallback import aggregator, collect
from health.services.filters import SurveillanceFilters, surveillance_filter_options
from health.services.hospitals import format_hospital
from health.services.appointments import format_appointment
from health.services.patients import format_doctor
from health.services.programs import active_programs, format_program
from health.services.rollups import (
    appointment_spike_data,
    demographic_breakdown,
    disease_analytics,
    disease_trend_data,
    hospital_stats,
    recent_disease_counts,
    recent_outbreaks,
    ward_resource_data,
    ward_wise_disease_data,
    ward_wise_stats,
)
from health.services.scoring import HospitalOperationalScore, round_half_up
from health.services.summary import (
    bed_occupancy_stats,
    citizen_city_kpis,
    citizen_service_metrics,
    city_bed_pools,
    city_health_score,
    emergency_metrics,
    equipment_status,
    executive_summary,
    infrastructure_status,
    low_stock_medicines,
    medicine_alerts,
)
from health.services.surveillance import predictive_alerts, risk_level_data

HIGH_LOAD_THRESHOLD = 80
RECENT_APPOINTMENTS = 50


def _assemble(results, **extra) -> dict:
    values, degraded = collect(results)
    values.update(extra)
    values['degradedSections'] = degraded
    return values


def admin_dashboard(filters: SurveillanceFilters, now=None) -> dict:
    now = now or timezone.now()
    results = [
        executive_summary(now),
        bed_occupancy_stats(),
        medicine_alerts(),
        disease_analytics(now),
        ward_wise_stats(),
        recent_outbreaks(),
        infrastructure_status(),
        citizen_service_metrics(),
        emergency_metrics(now),
        disease_trend_data(filters),
        ward_wise_disease_data(filters),
        demographic_breakdown(filters),
        risk_level_data(filters, now),
        appointment_spike_data(filters),
        predictive_alerts(now),
        surveillance_filter_options(),
    ]
    return _assemble(results, filters=filters.as_dict())


def load_status(occupancy_percent: int) -> str:
    return 'High Load' if occupancy_percent >= HIGH_LOAD_THRESHOLD else 'Normal'


def bed_occupancy_percent(hospital: Hospital) -> int:
    if hospital.total_beds <= 0:
        return 0
    return round_half_up(hospital.occupied_beds / hospital.total_beds * 100)


@aggregator('stats', {'todaysOPD': 0, 'currentIPD': 0, 'bedOccupancyPercent': 0, 'emergencyStatus': 'Unknown'})
def hospital_stats_summary(hospital: Hospital, now=None) -> dict:
    now = now or timezone.now()
    today = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    patients = Patient.objects.filter(hospital=hospital)
    occupancy = bed_occupancy_percent(hospital)
    return {
        'todaysOPD': patients.filter(patient_type='OPD', admission_date__gte=today).count(),
        'currentIPD': patients.filter(patient_type='IPD', discharge_date__isnull=True).count(),
        'bedOccupancyPercent': occupancy,
        'emergencyStatus': load_status(occupancy),
    }


@aggregator('appointments', [])
def hospital_appointments(hospital: Hospital, limit: int = RECENT_APPOINTMENTS) -> list[dict]:
    qs = (
        Appointment.objects.filter(hospital=hospital)
        .select_related('hospital', 'doctor')
        .order_by('-appointment_date')[:limit]
    )
    return [format_appointment(a) for a in qs]


def hospital_dashboard(hospital: Hospital, now=None) -> dict:
    results = [hospital_stats_summary(hospital, now), hospital_appointments(hospital)]
    return _assemble(
        results,
        hospital=format_hospital(hospital),
        totalBeds=hospital.total_beds,
        availableBeds=hospital.available_beds,
        doctors=[format_doctor(d) for d in Doctor.objects.filter(hospital=hospital).order_by('name')],
    )


def operational_metrics(hospital: Hospital) -> dict:
    doctors = Doctor.objects.filter(hospital=hospital).aggregate(
        total=Count('id'), available=Count('id', filter=Q(is_available=True)),
    )
    medicine_status = dict(
        Medicine.objects.filter(hospital=hospital).order_by().values_list('status').annotate(n=Count('id'))
    )
    return {
        'totalBeds': hospital.total_beds,
        'occupiedBeds': hospital.occupied_beds,
        'totalDoctors': doctors['total'],
        'availableDoctors': doctors['available'],
        'activePatients': Patient.objects.filter(
            hospital=hospital, patient_type='IPD', discharge_date__isnull=True
        ).count(),
        'medicineStatus': medicine_status,
    }


@aggregator('patientCounts', {'opdCount': 0, 'ipdCount': 0, 'todayOpdCount': 0})
def hospital_patient_counts(hospital: Hospital, now=None) -> dict:
    now = now or timezone.now()
    today = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    counts = Patient.objects.filter(hospital=hospital).aggregate(
        opd=Count('id', filter=Q(patient_type='OPD')),
        ipd=Count('id', filter=Q(patient_type='IPD', discharge_date__isnull=True)),
        today_opd=Count('id', filter=Q(patient_type='OPD', admission_date__gte=today)),
    )
    return {'opdCount': counts['opd'], 'ipdCount': counts['ipd'], 'todayOpdCount': counts['today_opd']}


@aggregator('doctorStats', [])
def hospital_doctor_stats(hospital: Hospital) -> list[dict]:
    doctors = Doctor.objects.filter(hospital=hospital).annotate(patients_count=Count('patients')).order_by('name')
    return [
        {'name': d.name, 'specialization': d.specialization, 'patientsCount': d.patients_count}
        for d in doctors
    ]


@aggregator('inventory', {'medicineStats': [], 'equipmentStats': []})
def hospital_inventory(hospital: Hospital) -> dict:
    return {
        'medicineStats': [
            {'name': m.name, 'quantity': m.quantity, 'status': m.status}
            for m in Medicine.objects.filter(hospital=hospital).order_by('name')
        ],
        'equipmentStats': [
            {'name': e.name, 'quantity': e.quantity, 'condition': e.condition}
            for e in Equipment.objects.filter(hospital=hospital).order_by('name')
        ],
    }


@aggregator('healthScore', {'score': 0, 'components': {}})
def hospital_health_score(hospital: Hospital) -> dict:
    policy = HospitalOperationalScore()
    metrics = operational_metrics(hospital)
    return {
        'score': policy.compute_score(metrics),
        'components': {k: round_half_up(v) for k, v in policy.sub_scores(metrics).items()},
    }


def hospital_analytics(hospital: Hospital, now=None) -> dict:
    results = [
        hospital_patient_counts(hospital, now),
        hospital_doctor_stats(hospital),
        hospital_inventory(hospital),
        hospital_health_score(hospital),
    ]
    return _assemble(
        results,
        totalBeds=hospital.total_beds,
        availableBeds=hospital.available_beds,
        bedsByType=hospital.beds(),
    )


@aggregator('diseaseTrends', [])
def citizen_disease_trends(now=None, limit: int = 10) -> list[dict]:
    return recent_disease_counts.compute(now, threshold=1)[:limit]


@aggregator('programs', [])
def citizen_programs() -> list[dict]:
    return [format_program(p) for p in active_programs()]


def citizen_dashboard(user, now=None) -> dict:
    now = now or timezone.now()
    citizen = get_citizen(user)
    if citizen is not None:
        profile = format_citizen(citizen)
    else:
        profile = {
            'fullName': user.get_full_name() or user.username,
            'profileImage': '/default-avatar.png',
            'profileCompleted': False,
        }
    results = [
        citizen_city_kpis(),
        recent_disease_counts(now),
        city_bed_pools(),
        citizen_disease_trends(now),
        ward_resource_data(),
        hospital_stats(),
        low_stock_medicines(),
        citizen_programs(),
        equipment_status(),
        city_health_score(),
    ]
    data = _assemble(results, citizen=profile)
    data['kpis'] = dict(data.pop('cityKpis'), activeOutbreaks=len(data['outbreakDiseases']))
    data['outbreaks'] = data.pop('outbreakDiseases')
    return data
