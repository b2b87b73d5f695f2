"""
Ward risk classification and predictive outbreak alerts.

Both work on appointment counts grouped by ward (and disease for the
alerts).  The classification and trend rules are plain functions so the
thresholds can be exercised without a database.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Mapping, Optional

from django.db.models import Count, Q
from django.utils import timezone

from health.models import Appointment
from .fallback import aggregator
from .filters import SurveillanceFilters, filtered_appointments
from .scoring import round_half_up

RISK_LEVELS = ('High', 'Medium', 'Safe')
ALERT_SEVERITY_ORDER = {'Critical': 0, 'High': 1, 'Medium': 2}
DEFAULT_RISK_WINDOW_DAYS = 14
ALERT_WINDOW_DAYS = 14
ALERT_SPLIT_DAYS = 7
MAX_ALERTS = 6


def classify_ward_risk(count: int, critical_cases: int, high_severity: int) -> str:
    if count > 50 or critical_cases > 5:
        return 'High'
    if count > 20 or high_severity > 3:
        return 'Medium'
    return 'Safe'


def tally_risk_levels(rows: Iterable[Mapping]) -> dict[str, int]:
    tally = {level: 0 for level in RISK_LEVELS}
    for row in rows:
        level = classify_ward_risk(row.get('count', 0), row.get('criticalCases', 0), row.get('highSeverity', 0))
        tally[level] += 1
    return tally


@aggregator('riskLevels', {'High': 0, 'Medium': 0, 'Safe': 0})
def risk_level_data(filters: SurveillanceFilters, now=None) -> dict[str, int]:
    qs = filtered_appointments(filters)
    if not filters.has_date_bound:
        now = now or timezone.now()
        qs = qs.filter(appointment_date__gte=now - timedelta(days=DEFAULT_RISK_WINDOW_DAYS))
    rows = (
        qs.order_by()
        .values('ward')
        .annotate(
            count=Count('id'),
            criticalCases=Count('id', filter=Q(severity='Critical')),
            highSeverity=Count('id', filter=Q(severity='High')),
        )
    )
    return tally_risk_levels(rows)


def percentage_increase(recent: int, previous: int) -> int:
    if previous > 0:
        return round_half_up((recent - previous) / previous * 100)
    return 100 if recent > 5 else 0


def evaluate_trend(ward: Optional[str], disease: Optional[str], recent: int, previous: int) -> Optional[dict]:
    """Return an alert for one (ward, disease) group or None."""
    pct = percentage_increase(recent, previous)
    if pct >= 50 and recent >= 5:
        return {
            'type': 'outbreak',
            'severity': 'Critical',
            'message': f"Ward {ward} - {disease} outbreak probability {pct}%",
            'ward': ward,
            'disease': disease,
            'caseCount': recent,
            'percentageIncrease': pct,
        }
    if pct >= 30 and recent >= 3:
        return {
            'type': 'spike',
            'severity': 'High',
            'message': f"Ward {ward} - {disease} spike detected (+{pct}%)",
            'ward': ward,
            'disease': disease,
            'caseCount': recent,
            'percentageIncrease': pct,
        }
    return None


def rank_alerts(alerts: Iterable[dict], limit: int = MAX_ALERTS) -> list[dict]:
    ranked = sorted(alerts, key=lambda a: ALERT_SEVERITY_ORDER.get(a.get('severity'), len(ALERT_SEVERITY_ORDER)))
    return ranked[:limit]


@aggregator('predictiveAlerts', [])
def predictive_alerts(now=None) -> list[dict]:
    now = now or timezone.now()
    split = now - timedelta(days=ALERT_SPLIT_DAYS)
    rows = (
        Appointment.objects.filter(appointment_date__gte=now - timedelta(days=ALERT_WINDOW_DAYS))
        .order_by()
        .values('ward', 'disease_type')
        .annotate(
            recent=Count('id', filter=Q(appointment_date__gte=split)),
            previous=Count('id', filter=Q(appointment_date__lt=split)),
        )
        .order_by('ward', 'disease_type')
    )
    alerts = []
    for row in rows:
        alert = evaluate_trend(row['ward'], row['disease_type'], row['recent'], row['previous'])
        if alert:
            alerts.append(alert)
    return rank_alerts(alerts)
