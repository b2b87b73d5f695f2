from datetime import timedelta

import pytest
from django.utils import timezone

from health.models import Outbreak, Patient
from health.services.rollups import (
    age_group_for,
    bucket_for_age,
    group_outbreaks_by_ward,
    max_severity,
    merge_ward_outbreaks,
    recent_disease_counts,
    recent_outbreaks,
    resource_allocation_suggestions,
    ward_map_data,
    ward_wise_stats,
)


def test_max_severity_uses_ordinal_rank():
    assert max_severity(['Medium', 'Critical', 'High']) == 'Critical'
    assert max_severity(['Low', 'Medium']) == 'Medium'
    assert max_severity([None, 'bogus']) == 'Low'


def test_group_outbreaks_by_ward():
    rows = [
        {'ward': 'A', 'disease': 'Dengue', 'cases': 4, 'severity': 'Medium'},
        {'ward': 'A', 'disease': 'Dengue', 'cases': 3, 'severity': 'Critical'},
        {'ward': 'A', 'disease': 'Malaria', 'cases': 1, 'severity': 'Low'},
        {'ward': 'B', 'disease': 'TB', 'cases': 2, 'severity': 'Low'},
    ]
    groups = group_outbreaks_by_ward(rows)
    assert groups['A'] == {
        'ward': 'A', 'outbreaks': 3, 'totalCases': 8, 'diseases': ['Dengue', 'Malaria'], 'maxSeverity': 'Critical',
    }
    assert groups['B']['maxSeverity'] == 'Low'


def test_merge_keeps_outbreak_only_wards():
    ward_rows = [{'ward': 'A', 'totalPatients': 3, 'activeCases': 1, 'uniqueDiseases': 1}]
    groups = {
        'A': {'outbreaks': 1, 'totalCases': 5, 'maxSeverity': 'High'},
        'B': {'outbreaks': 2, 'totalCases': 9, 'maxSeverity': 'Critical'},
    }
    merged = merge_ward_outbreaks(ward_rows, groups)
    assert merged[0] == {
        'ward': 'A', 'totalPatients': 3, 'activeCases': 1, 'uniqueDiseases': 1,
        'outbreaks': 1, 'outbreakCases': 5, 'severity': 'High',
    }
    assert merged[1]['ward'] == 'B'
    assert merged[1]['totalPatients'] == 0
    assert merged[1]['severity'] == 'Critical'


def test_merge_defaults_wards_without_outbreaks():
    merged = merge_ward_outbreaks([{'ward': 'C', 'totalPatients': 1}], {})
    assert merged == [{'ward': 'C', 'totalPatients': 1, 'outbreaks': 0, 'outbreakCases': 0, 'severity': 'Low'}]


def test_age_helpers():
    assert bucket_for_age(None) == 'Unknown'
    assert bucket_for_age(15) == 12
    assert bucket_for_age(120) == 'Unknown'
    assert age_group_for(12) == '0-12'
    assert age_group_for(60) == '46-60'
    assert age_group_for(61) == '60+'


@pytest.mark.django_db
def test_ward_stats_include_outbreak_wards_without_patients(hospital):
    Patient.objects.create(hospital=hospital, patient_type='OPD', name='A', disease='Dengue')
    Outbreak.objects.create(disease='Cholera', ward='Ward 9', cases=12, severity='High')

    rows = ward_wise_stats.compute()
    by_ward = {r['ward']: r for r in rows}
    assert by_ward['Ward 1']['totalPatients'] == 1
    assert by_ward['Ward 1']['outbreaks'] == 0
    assert by_ward['Ward 9']['totalPatients'] == 0
    assert by_ward['Ward 9']['severity'] == 'High'


@pytest.mark.django_db
def test_recent_outbreaks_rank_by_severity_not_alphabet():
    for severity in ('Medium', 'Critical', 'Low', 'High'):
        Outbreak.objects.create(disease='Dengue', ward='Ward 1', severity=severity)
    Outbreak.objects.create(disease='Dengue', ward='Ward 1', severity='Critical', status='Resolved')

    severities = [o['severity'] for o in recent_outbreaks.compute()]
    assert severities == ['Critical', 'High', 'Medium', 'Low']


@pytest.mark.django_db
def test_map_data_groups_active_outbreaks():
    Outbreak.objects.create(disease='Dengue', ward='Ward 3', cases=4, severity='Medium', longitude=75.9, latitude=17.6)
    Outbreak.objects.create(disease='Malaria', ward='Ward 3', cases=6, severity='High')
    Outbreak.objects.create(disease='TB', ward='Ward 4', cases=1, status='Controlled')

    data = ward_map_data.compute()
    assert len(data) == 1
    assert data[0]['ward'] == 'Ward 3'
    assert data[0]['totalCases'] == 10
    assert data[0]['severity'] == 'High'
    assert data[0]['location']['type'] == 'Point'


@pytest.mark.django_db
def test_resource_suggestions_only_for_pressured_hospitals(hospital, other_hospital):
    hospital.general_available = 0
    hospital.icu_available = 0
    hospital.isolation_available = 1
    hospital.save()

    suggestions = resource_allocation_suggestions.compute()
    assert [s['id'] for s in suggestions] == [hospital.id]
    assert suggestions[0]['occupancyRate'] == 93.8


@pytest.mark.django_db
def test_recent_disease_counts_threshold(hospital):
    now = timezone.now()
    for _ in range(5):
        Patient.objects.create(hospital=hospital, patient_type='OPD', disease='Dengue')
    Patient.objects.create(hospital=hospital, patient_type='OPD', disease='TB')
    Patient.objects.create(hospital=hospital, patient_type='OPD', disease='Dengue',
                           admission_date=now - timedelta(days=45))

    assert recent_disease_counts.compute(now) == [{'disease': 'Dengue', 'count': 5}]
    assert recent_disease_counts.compute(now, threshold=1)[-1] == {'disease': 'TB', 'count': 1}
