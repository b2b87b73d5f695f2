"""
City-wide executive summary and the other admin KPI aggregators.
"""
from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Count, F, Q, Sum
from django.utils import timezone

from health.models import (
    Appointment, Citizen, Doctor, Equipment, Hospital, Medicine, Notification, Outbreak, Patient, Program,
    ProgramApplication,
)
from .fallback import aggregator
from .scoring import CityCompositeScore, CityKPIScore, round_half_up

CRITICAL_SEVERITIES = ('High', 'Critical')
SHORTAGE_STATUSES = ('low', 'out_of_stock')


def occupancy_rate(total: int, occupied: int) -> float:
    """Occupied share of ``total`` in percent, one decimal; 0 without beds."""
    if not total or total <= 0:
        return 0
    rate = round_half_up(occupied / total * 100, 1)
    return max(0.0, min(100.0, rate))


def classify_emergency_status(critical_outbreaks: int, active_outbreaks: int) -> str:
    if critical_outbreaks >= 3:
        return 'Critical'
    if critical_outbreaks >= 1:
        return 'Alert'
    if active_outbreaks > 5:
        return 'Monitoring'
    return 'Normal'


def bed_totals() -> dict:
    """City-wide sums of total and available beds per pool."""
    fields = {}
    for kind in Hospital.BED_TYPES:
        fields[f'{kind}_total'] = Sum(f'{kind}_total')
        fields[f'{kind}_available'] = Sum(f'{kind}_available')
    sums = Hospital.objects.aggregate(**fields)
    pools = {
        kind: {
            'total': sums[f'{kind}_total'] or 0,
            'available': sums[f'{kind}_available'] or 0,
        }
        for kind in Hospital.BED_TYPES
    }
    total = sum(p['total'] for p in pools.values())
    available = sum(p['available'] for p in pools.values())
    return {'pools': pools, 'total': total, 'available': available, 'occupied': total - available}


def summary_metrics(now=None) -> dict:
    now = now or timezone.now()
    active_outbreaks = Outbreak.objects.filter(status='Active').count()
    critical_outbreaks = Outbreak.objects.filter(status='Active', severity__in=CRITICAL_SEVERITIES).count()
    beds = bed_totals()
    today = timezone.localdate(now)
    return {
        'activeOutbreaks': active_outbreaks,
        'criticalOutbreaks': critical_outbreaks,
        'totalBeds': beds['total'],
        'occupiedBeds': beds['occupied'],
        'occupancyRate': occupancy_rate(beds['total'], beds['occupied']),
        'criticalMedicines': Medicine.objects.filter(status__in=SHORTAGE_STATUSES).count(),
        'emergencyStatus': classify_emergency_status(critical_outbreaks, active_outbreaks),
        'totalCitizens': Citizen.objects.count(),
        'todayAppointments': Appointment.objects.filter(appointment_date__date=today).count(),
    }


@aggregator('executiveSummary', {
    'activeOutbreaks': 0,
    'criticalOutbreaks': 0,
    'totalBeds': 0,
    'occupiedBeds': 0,
    'occupancyRate': 0,
    'criticalMedicines': 0,
    'emergencyStatus': 'Unknown',
    'totalCitizens': 0,
    'todayAppointments': 0,
})
def executive_summary(now=None) -> dict:
    return summary_metrics(now)


def hospital_occupancy_row(hospital: Hospital) -> dict:
    row = {'id': hospital.id, 'hospitalName': hospital.name, 'ward': hospital.ward}
    for kind in Hospital.BED_TYPES:
        pool = hospital.bed_pool(kind)
        row[f'{kind}Total'] = pool['total']
        row[f'{kind}Available'] = pool['available']
        row[f'{kind}Occupied'] = pool['total'] - pool['available']
    row['totalBeds'] = hospital.total_beds
    row['totalOccupied'] = hospital.occupied_beds
    row['occupancyRate'] = occupancy_rate(hospital.total_beds, hospital.occupied_beds)
    return row


@aggregator('bedOccupancy', [])
def bed_occupancy_stats() -> list[dict]:
    rows = [hospital_occupancy_row(h) for h in Hospital.objects.all()]
    rows.sort(key=lambda r: r['occupancyRate'], reverse=True)
    return rows


@aggregator('medicineAlerts', [])
def medicine_alerts(limit: int = 20) -> list[dict]:
    # 'out_of_stock' sorts after 'low', so descending status puts empty shelves first
    qs = (
        Medicine.objects.filter(status__in=SHORTAGE_STATUSES)
        .select_related('hospital')
        .order_by('-status', 'quantity')[:limit]
    )
    return [
        {
            'id': m.id,
            'name': m.name,
            'quantity': m.quantity,
            'unit': m.unit,
            'status': m.status,
            'hospitalName': m.hospital.name if m.hospital_id else None,
            'ward': m.hospital.ward if m.hospital_id else None,
            'lastUpdated': m.last_updated.isoformat() if m.last_updated else None,
        }
        for m in qs
    ]


@aggregator('infrastructureStatus', {
    'equipmentStatus': [],
    'medicineStock': [],
    'hospitalCount': 0,
    'doctorCount': 0,
})
def infrastructure_status() -> dict:
    equipment = (
        Equipment.objects.order_by().values('condition').annotate(count=Sum('quantity')).order_by('condition')
    )
    medicines = Medicine.objects.order_by().values('status').annotate(count=Count('id')).order_by('status')
    return {
        'equipmentStatus': [{'condition': row['condition'], 'count': row['count'] or 0} for row in equipment],
        'medicineStock': [{'status': row['status'], 'count': row['count']} for row in medicines],
        'hospitalCount': Hospital.objects.count(),
        'doctorCount': Doctor.objects.count(),
    }


@aggregator('citizenMetrics', {
    'totalAppointments': 0,
    'completedAppointments': 0,
    'pendingAppointments': 0,
    'completionRate': 0,
    'profileCompletion': [],
})
def citizen_service_metrics() -> dict:
    total = Appointment.objects.count()
    completed = Appointment.objects.filter(status='completed').count()
    pending = Appointment.objects.filter(status='pending').count()
    completion = (
        Citizen.objects.order_by().values('profile_completed').annotate(count=Count('id')).order_by('profile_completed')
    )
    return {
        'totalAppointments': total,
        'completedAppointments': completed,
        'pendingAppointments': pending,
        'completionRate': round_half_up(completed / total * 100, 1) if total else 0,
        'profileCompletion': [
            {'profileCompleted': row['profile_completed'], 'count': row['count']} for row in completion
        ],
    }


@aggregator('emergencyMetrics', {
    'criticalOutbreaks': 0,
    'emergencyNotifications': 0,
    'availableICUBeds': 0,
    'healthScore': 0,
})
def emergency_metrics(now=None) -> dict:
    now = now or timezone.now()
    metrics = summary_metrics(now)
    icu = Hospital.objects.aggregate(available=Sum(F('icu_available')))
    return {
        'criticalOutbreaks': metrics['criticalOutbreaks'],
        'emergencyNotifications': Notification.objects.filter(
            type='emergency', created_at__gte=now - timedelta(hours=24)
        ).count(),
        'availableICUBeds': icu['available'] or 0,
        'healthScore': CityKPIScore().compute_score(metrics),
    }


def equipment_tally() -> dict:
    rows = dict(Equipment.objects.order_by().values_list('condition').annotate(n=Count('id')))
    return {
        'working': rows.get('working', 0),
        'maintenance': rows.get('maintenance', 0),
        'outOfOrder': rows.get('out_of_order', 0),
        'total': sum(rows.values()),
    }


@aggregator('cityKpis', {
    'bedOccupancyPercent': 0,
    'criticalMedicineAlerts': 0,
    'emergencyStatus': 'Unknown',
    'totalHospitals': 0,
    'totalDoctors': 0,
    'totalPatients': 0,
    'activePatients': 0,
    'activeVaccinationPrograms': 0,
    'totalUsers': 0,
    'citizenUsers': 0,
})
def citizen_city_kpis() -> dict:
    """Headline numbers on the citizen dashboard.

    The emergency label here is a load signal (bed occupancy or medicine
    shortages), unlike the outbreak-driven tier of the executive summary.
    """
    beds = bed_totals()
    occupancy = round_half_up(beds['occupied'] / beds['total'] * 100) if beds['total'] else 0
    shortages = Medicine.objects.filter(status__in=SHORTAGE_STATUSES).count()
    users = get_user_model().objects.aggregate(
        total=Count('id'), citizens=Count('id', filter=Q(role='citizen')),
    )
    return {
        'bedOccupancyPercent': occupancy,
        'criticalMedicineAlerts': shortages,
        'emergencyStatus': 'Critical' if occupancy >= 80 or shortages > 5 else 'Normal',
        'totalHospitals': Hospital.objects.count(),
        'totalDoctors': Doctor.objects.count(),
        'totalPatients': Patient.objects.count(),
        'activePatients': Patient.objects.filter(patient_type='IPD', discharge_date__isnull=True).count(),
        'activeVaccinationPrograms': Program.objects.filter(status='active', type='vaccination').count(),
        'totalUsers': users['total'],
        'citizenUsers': users['citizens'],
    }


@aggregator('beds', {'total': 0, 'available': 0, 'general': {}, 'icu': {}, 'isolation': {}})
def city_bed_pools() -> dict:
    beds = bed_totals()
    return {'total': beds['total'], 'available': beds['available'], **beds['pools']}


@aggregator('lowStockMedicines', [])
def low_stock_medicines() -> list[dict]:
    qs = Medicine.objects.filter(status__in=SHORTAGE_STATUSES).select_related('hospital').order_by('quantity')
    return [
        {'id': m.id, 'name': m.name, 'quantity': m.quantity, 'status': m.status, 'hospitalName': m.hospital.name}
        for m in qs
    ]


@aggregator('equipment', {'working': 0, 'maintenance': 0, 'outOfOrder': 0, 'total': 0})
def equipment_status() -> dict:
    return equipment_tally()


def composite_metrics() -> dict:
    beds = bed_totals()
    equipment = equipment_tally()
    return {
        'activeOutbreaks': Outbreak.objects.filter(status='Active').count(),
        'totalBeds': beds['total'],
        'availableBeds': beds['available'],
        'totalEquipment': equipment['total'],
        'workingEquipment': equipment['working'],
        'vaccinationApplications': ProgramApplication.objects.filter(program__type='vaccination').count(),
        'totalCitizens': Citizen.objects.count(),
        'activePrograms': Program.objects.filter(status='active').count(),
        'icuTotal': beds['pools']['icu']['total'],
        'icuAvailable': beds['pools']['icu']['available'],
    }


@aggregator('healthScore', {'score': 0, 'components': {}})
def city_health_score() -> dict:
    policy = CityCompositeScore()
    metrics = composite_metrics()
    return {
        'score': policy.compute_score(metrics),
        'components': {k: round_half_up(v) for k, v in policy.sub_scores(metrics).items()},
    }
