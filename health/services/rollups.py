"""
Ward and disease rollups for the admin and citizen dashboards.

Severity maxima are always computed with the ordinal rank from
``health.models.SEVERITY_RANK``; string comparison would rank "Medium"
above "Critical".
"""
from __future__ import annotations

from collections import OrderedDict, defaultdict
from datetime import timedelta
from typing import Iterable, Mapping, Optional

from django.db.models import Count, Q
from django.db.models.functions import TruncDate
from django.utils import timezone

from health.models import SEVERITY_RANK, Appointment, Doctor, Hospital, Outbreak, Patient
from .fallback import aggregator
from .filters import SurveillanceFilters, filtered_appointments
from .scoring import round_half_up
from .summary import occupancy_rate

AGE_BUCKETS = [0, 12, 18, 35, 50, 65, 100]
RESOURCE_PRESSURE_THRESHOLD = 75


def max_severity(severities: Iterable[Optional[str]], default: str = 'Low') -> str:
    best = None
    for severity in severities:
        if severity not in SEVERITY_RANK:
            continue
        if best is None or SEVERITY_RANK[severity] > SEVERITY_RANK[best]:
            best = severity
    return best or default


def group_outbreaks_by_ward(rows: Iterable[Mapping]) -> dict[str, dict]:
    """Fold active outbreak rows (ward, disease, cases, severity) per ward."""
    groups: dict[str, dict] = OrderedDict()
    for row in rows:
        ward = row.get('ward')
        g = groups.setdefault(ward, {'ward': ward, 'outbreaks': 0, 'totalCases': 0, 'diseases': [], 'severities': []})
        g['outbreaks'] += 1
        g['totalCases'] += row.get('cases') or 0
        if row.get('disease') and row['disease'] not in g['diseases']:
            g['diseases'].append(row['disease'])
        g['severities'].append(row.get('severity'))
    for g in groups.values():
        g['maxSeverity'] = max_severity(g.pop('severities'))
    return groups


def merge_ward_outbreaks(ward_rows: Iterable[Mapping], outbreak_groups: Mapping[str, Mapping]) -> list[dict]:
    """Left join outbreak groups onto patient ward rows.

    Wards with outbreaks but no patients are appended with zero patient
    counts so an outbreak is never hidden by an empty ward.
    """
    merged = []
    seen = set()
    for row in ward_rows:
        ward = row.get('ward')
        seen.add(ward)
        outbreak = outbreak_groups.get(ward)
        merged.append({
            **row,
            'outbreaks': outbreak['outbreaks'] if outbreak else 0,
            'outbreakCases': outbreak['totalCases'] if outbreak else 0,
            'severity': outbreak['maxSeverity'] if outbreak else 'Low',
        })
    for ward, outbreak in outbreak_groups.items():
        if ward in seen:
            continue
        merged.append({
            'ward': ward,
            'totalPatients': 0,
            'activeCases': 0,
            'uniqueDiseases': 0,
            'outbreaks': outbreak['outbreaks'],
            'outbreakCases': outbreak['totalCases'],
            'severity': outbreak['maxSeverity'],
        })
    return merged


def active_outbreak_groups() -> dict[str, dict]:
    rows = Outbreak.objects.filter(status='Active').order_by('ward', '-reported_date').values(
        'ward', 'disease', 'cases', 'severity', 'longitude', 'latitude'
    )
    return group_outbreaks_by_ward(rows)


@aggregator('wardStats', [])
def ward_wise_stats() -> list[dict]:
    rows = (
        Patient.objects.order_by()
        .values('hospital__ward')
        .annotate(
            totalPatients=Count('id'),
            activeCases=Count('id', filter=Q(discharge_date__isnull=True)),
            uniqueDiseases=Count('disease', distinct=True),
        )
        .order_by('-activeCases')
    )
    ward_rows = [
        {
            'ward': row['hospital__ward'],
            'totalPatients': row['totalPatients'],
            'activeCases': row['activeCases'],
            'uniqueDiseases': row['uniqueDiseases'],
        }
        for row in rows
    ]
    return merge_ward_outbreaks(ward_rows, active_outbreak_groups())


def bucket_for_age(age: Optional[int]):
    """Lower bound of the age bucket holding ``age`` or ``'Unknown'``."""
    if age is None:
        return 'Unknown'
    for lower, upper in zip(AGE_BUCKETS, AGE_BUCKETS[1:]):
        if lower <= age < upper:
            return lower
    return 'Unknown'


@aggregator('diseaseAnalytics', {'diseaseDistribution': [], 'diseaseTrends': [], 'ageDistribution': []})
def disease_analytics(now=None) -> dict:
    now = now or timezone.now()
    distribution = (
        Patient.objects.exclude(disease='')
        .order_by()
        .values('disease')
        .annotate(totalCases=Count('id'), currentActive=Count('id', filter=Q(discharge_date__isnull=True)))
        .order_by('-totalCases', 'disease')
    )

    weekly: dict[tuple, int] = defaultdict(int)
    recent = Appointment.objects.filter(created_at__gte=now - timedelta(days=30)).exclude(reason='')
    for reason, created_at in recent.values_list('reason', 'created_at'):
        week = timezone.localtime(created_at).isocalendar()[1]
        weekly[(reason, week)] += 1
    trends = [
        {'disease': disease, 'week': week, 'cases': cases}
        for (disease, week), cases in sorted(weekly.items(), key=lambda item: (item[0][1], item[0][0]))
    ]

    buckets: dict = OrderedDict()
    for age in Patient.objects.values_list('age', flat=True):
        key = bucket_for_age(age)
        buckets[key] = buckets.get(key, 0) + 1
    numeric = sorted(k for k in buckets if k != 'Unknown')
    ages = [{'bucket': k, 'count': buckets[k]} for k in numeric]
    if 'Unknown' in buckets:
        ages.append({'bucket': 'Unknown', 'count': buckets['Unknown']})

    return {
        'diseaseDistribution': [
            {'disease': r['disease'], 'totalCases': r['totalCases'], 'currentActive': r['currentActive']}
            for r in distribution
        ],
        'diseaseTrends': trends,
        'ageDistribution': ages,
    }


@aggregator('diseaseTrends', [])
def disease_trend_data(filters: SurveillanceFilters) -> list[dict]:
    rows = (
        filtered_appointments(filters)
        .annotate(day=TruncDate('appointment_date'))
        .order_by()
        .values('day', 'disease_type')
        .annotate(count=Count('id'))
        .order_by('day', 'disease_type')
    )
    series: dict[str, list] = OrderedDict()
    for row in rows:
        series.setdefault(row['disease_type'], []).append({'date': row['day'].isoformat(), 'count': row['count']})
    return [{'disease': disease, 'data': data} for disease, data in series.items()]


@aggregator('wardWiseData', [])
def ward_wise_disease_data(filters: SurveillanceFilters, limit: int = 15) -> list[dict]:
    rows = (
        filtered_appointments(filters)
        .order_by()
        .values('ward', 'disease_type')
        .annotate(count=Count('id'))
        .order_by('ward', '-count')
    )
    wards: dict[str, dict] = OrderedDict()
    for row in rows:
        w = wards.setdefault(row['ward'], {'ward': row['ward'], 'diseases': [], 'total': 0})
        w['diseases'].append({'disease': row['disease_type'], 'count': row['count']})
        w['total'] += row['count']
    return sorted(wards.values(), key=lambda w: w['total'], reverse=True)[:limit]


def age_group_for(age: Optional[int]) -> str:
    if age is None:
        return '60+'
    if age <= 12:
        return '0-12'
    if age <= 25:
        return '13-25'
    if age <= 45:
        return '26-45'
    if age <= 60:
        return '46-60'
    return '60+'


@aggregator('demographicBreakdown', [])
def demographic_breakdown(filters: SurveillanceFilters) -> list[dict]:
    counts: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for age, disease in filtered_appointments(filters).values_list('patient_age', 'disease_type'):
        counts[age_group_for(age)][disease] += 1
    return [
        {
            'ageGroup': group,
            'diseases': [{'disease': d, 'count': c} for d, c in sorted(diseases.items())],
        }
        for group, diseases in sorted(counts.items())
    ]


@aggregator('appointmentSpikes', [])
def appointment_spike_data(filters: SurveillanceFilters, days: int = 30) -> list[dict]:
    rows = (
        filtered_appointments(filters)
        .annotate(day=TruncDate('appointment_date'))
        .order_by()
        .values('day')
        .annotate(count=Count('id'), criticalCount=Count('id', filter=Q(severity='Critical')))
        .order_by('-day')[:days]
    )
    spikes = [{'date': r['day'].isoformat(), 'count': r['count'], 'criticalCount': r['criticalCount']} for r in rows]
    spikes.reverse()
    return spikes


def format_outbreak(o: Outbreak) -> dict:
    return {
        'id': o.id,
        'disease': o.disease,
        'ward': o.ward,
        'zone': o.zone,
        'cases': o.cases,
        'severity': o.severity,
        'status': o.status,
        'location': o.location,
        'affectedPopulation': o.affected_population,
        'reportedDate': o.reported_date.isoformat() if o.reported_date else None,
        'resolvedDate': o.resolved_date.isoformat() if o.resolved_date else None,
        'description': o.description,
        'actionsTaken': o.actions_taken,
    }


@aggregator('recentOutbreaks', [])
def recent_outbreaks(limit: int = 10) -> list[dict]:
    outbreaks = list(Outbreak.objects.filter(status='Active').order_by('-reported_date'))
    outbreaks.sort(key=lambda o: SEVERITY_RANK.get(o.severity, -1), reverse=True)
    return [format_outbreak(o) for o in outbreaks[:limit]]


@aggregator('mapData', [])
def ward_map_data() -> list[dict]:
    rows = Outbreak.objects.filter(status='Active').order_by('ward', '-reported_date').values(
        'ward', 'disease', 'cases', 'severity', 'longitude', 'latitude'
    )
    locations: dict[str, dict] = {}
    for row in rows:
        locations.setdefault(row['ward'], {'type': 'Point', 'coordinates': [row['longitude'], row['latitude']]})
    return [
        {
            'ward': ward,
            'totalCases': g['totalCases'],
            'outbreaks': g['outbreaks'],
            'severity': g['maxSeverity'],
            'location': locations.get(ward),
            'diseases': g['diseases'],
        }
        for ward, g in group_outbreaks_by_ward(rows).items()
    ]


@aggregator('diseaseTimeSeries', [])
def disease_time_series(disease: Optional[str] = None, days: int = 30, now=None) -> list[dict]:
    now = now or timezone.now()
    qs = Patient.objects.filter(admission_date__gte=now - timedelta(days=days))
    if disease and disease != 'all':
        qs = qs.filter(disease=disease)
    rows = (
        qs.annotate(day=TruncDate('admission_date'))
        .order_by()
        .values('day', 'disease')
        .annotate(cases=Count('id'))
        .order_by('day', 'disease')
    )
    return [{'date': r['day'].isoformat(), 'disease': r['disease'], 'cases': r['cases']} for r in rows]


@aggregator('resourceSuggestions', [])
def resource_allocation_suggestions() -> list[dict]:
    hospitals = Hospital.objects.annotate(patient_count=Count('patients'))
    suggestions = []
    for h in hospitals:
        rate = occupancy_rate(h.total_beds, h.occupied_beds)
        if rate < RESOURCE_PRESSURE_THRESHOLD:
            continue
        suggestions.append({
            'id': h.id,
            'hospitalName': h.name,
            'ward': h.ward,
            'occupancyRate': rate,
            'availableBeds': h.available_beds,
            'patientCount': h.patient_count,
            'suggestion': (
                f"Increase bed capacity or transfer patients from {h.ward} ward ({rate}% occupancy)"
            ),
        })
    suggestions.sort(key=lambda s: s['occupancyRate'], reverse=True)
    return suggestions


@aggregator('outbreakDiseases', [])
def recent_disease_counts(now=None, days: int = 30, threshold: int = 5) -> list[dict]:
    """Patient diseases with at least ``threshold`` visits in the window."""
    now = now or timezone.now()
    rows = (
        Patient.objects.filter(admission_date__gte=now - timedelta(days=days))
        .exclude(disease='')
        .order_by()
        .values('disease')
        .annotate(count=Count('id'))
        .filter(count__gte=threshold)
        .order_by('-count', 'disease')
    )
    return [{'disease': r['disease'], 'count': r['count']} for r in rows]


@aggregator('wardData', {})
def ward_resource_data() -> dict[str, dict]:
    wards: dict[str, dict] = OrderedDict()
    for h in Hospital.objects.annotate(
        patient_count=Count('patients', distinct=True), doctor_count=Count('doctors', distinct=True)
    ).order_by('ward', 'name'):
        w = wards.setdefault(h.ward, {'hospitals': 0, 'totalBeds': 0, 'availableBeds': 0, 'patients': 0, 'doctors': 0})
        w['hospitals'] += 1
        w['totalBeds'] += h.total_beds
        w['availableBeds'] += h.available_beds
        w['patients'] += h.patient_count
        w['doctors'] += h.doctor_count
    return wards


@aggregator('hospitalStats', [])
def hospital_stats() -> list[dict]:
    hospitals = Hospital.objects.annotate(
        patient_count=Count('patients', distinct=True),
        doctor_count=Count('doctors', distinct=True),
        low_stock=Count('medicines', filter=Q(medicines__status__in=['low', 'out_of_stock']), distinct=True),
    ).order_by('name')
    return [
        {
            'id': h.id,
            'name': h.name,
            'ward': h.ward,
            'totalBeds': h.total_beds,
            'availableBeds': h.available_beds,
            'occupancyPercent': round_half_up(h.occupied_beds / h.total_beds * 100) if h.total_beds else 0,
            'totalPatients': h.patient_count,
            'totalDoctors': h.doctor_count,
            'lowStockMedicines': h.low_stock,
        }
        for h in hospitals
    ]


def ward_overview(ward: str) -> dict:
    hospitals = list(Hospital.objects.filter(ward=ward))
    ids = [h.id for h in hospitals]
    return {
        'hospitals': hospitals,
        'totalPatients': Patient.objects.filter(hospital_id__in=ids).count(),
        'totalDoctors': Doctor.objects.filter(hospital_id__in=ids).count(),
    }
