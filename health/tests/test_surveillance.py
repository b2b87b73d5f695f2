from datetime import timedelta

import pytest
from django.utils import timezone

from health.models import Appointment
from health.services.filters import SurveillanceFilters
from health.services.surveillance import (
    classify_ward_risk,
    evaluate_trend,
    percentage_increase,
    predictive_alerts,
    rank_alerts,
    risk_level_data,
    tally_risk_levels,
)


@pytest.mark.parametrize('count,critical,high,expected', [
    (51, 0, 0, 'High'),
    (10, 6, 0, 'High'),
    (21, 0, 0, 'Medium'),
    (5, 0, 4, 'Medium'),
    (50, 5, 3, 'Medium'),
    (20, 5, 3, 'Safe'),
])
def test_classify_ward_risk(count, critical, high, expected):
    assert classify_ward_risk(count, critical, high) == expected


def test_tally_counts_every_level():
    rows = [{'count': 60}, {'count': 25}, {'count': 1}, {'count': 2, 'criticalCases': 9}]
    assert tally_risk_levels(rows) == {'High': 2, 'Medium': 1, 'Safe': 1}


def test_percentage_increase():
    assert percentage_increase(6, 4) == 50
    assert percentage_increase(4, 3) == 33
    assert percentage_increase(6, 0) == 100
    assert percentage_increase(5, 0) == 0


def test_evaluate_trend_outbreak_and_spike():
    outbreak = evaluate_trend('Ward 1', 'Dengue', 6, 4)
    assert outbreak['type'] == 'outbreak'
    assert outbreak['severity'] == 'Critical'
    assert outbreak['message'] == 'Ward Ward 1 - Dengue outbreak probability 50%'

    spike = evaluate_trend('Ward 2', 'Malaria', 4, 3)
    assert spike['type'] == 'spike'
    assert spike['percentageIncrease'] == 33

    assert evaluate_trend('Ward 3', 'TB', 2, 1) is None


def test_evaluate_trend_thresholds_are_inclusive():
    spike = evaluate_trend('Ward 4', 'Dengue', 13, 10)
    assert spike['type'] == 'spike'
    assert spike['percentageIncrease'] == 30
    assert spike['message'] == 'Ward Ward 4 - Dengue spike detected (+30%)'

    assert evaluate_trend('Ward 4', 'Dengue', 12, 10) is None
    assert evaluate_trend('Ward 5', 'Cholera', 3, 2)['type'] == 'spike'
    assert evaluate_trend('Ward 5', 'Cholera', 5, 3)['type'] == 'outbreak'


def test_rank_alerts_orders_by_severity_and_limits():
    alerts = [{'severity': 'High', 'id': i} for i in range(5)] + [{'severity': 'Critical', 'id': 9}]
    ranked = rank_alerts(alerts, limit=3)
    assert [a['id'] for a in ranked] == [9, 0, 1]


def _appointment(hospital, user, when, **kw):
    defaults = dict(
        hospital=hospital, citizen=user, patient_name='P', patient_age=30, patient_gender='Male',
        patient_phone='9000000000', appointment_date=when, appointment_time='10:00', reason='fever',
        disease_type='Dengue', ward='Ward 1',
    )
    defaults.update(kw)
    return Appointment.objects.create(**defaults)


@pytest.mark.django_db
def test_predictive_alert_from_weekly_growth(hospital, citizen_user):
    now = timezone.now()
    for _ in range(4):
        _appointment(hospital, citizen_user, now - timedelta(days=10))
    for _ in range(6):
        _appointment(hospital, citizen_user, now - timedelta(days=2))

    result = predictive_alerts(now)
    assert not result.degraded
    assert len(result.value) == 1
    assert result.value[0]['severity'] == 'Critical'
    assert result.value[0]['ward'] == 'Ward 1'


@pytest.mark.django_db
def test_risk_levels_default_to_recent_window(hospital, citizen_user):
    now = timezone.now()
    for _ in range(6):
        _appointment(hospital, citizen_user, now - timedelta(days=1), severity='Critical')
    # outside the default window, ignored without an explicit date range
    _appointment(hospital, citizen_user, now - timedelta(days=40), ward='Ward 2')

    result = risk_level_data(SurveillanceFilters(), now)
    assert result.value == {'High': 1, 'Medium': 0, 'Safe': 0}

    dated = SurveillanceFilters(start_date=(now - timedelta(days=60)).date())
    assert risk_level_data(dated, now).value == {'High': 1, 'Medium': 0, 'Safe': 1}
