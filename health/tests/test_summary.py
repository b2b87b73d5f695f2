import pytest

from health.models import Equipment, Medicine, Outbreak, Program, ProgramApplication
from health.services import summary
from health.services.summary import (
    citizen_city_kpis,
    city_health_score,
    classify_emergency_status,
    emergency_metrics,
    equipment_tally,
    executive_summary,
    occupancy_rate,
)


def test_occupancy_rate_rounds_and_clamps():
    assert occupancy_rate(0, 0) == 0
    assert occupancy_rate(3, 1) == 33.3
    assert occupancy_rate(8, 3) == 37.5
    assert occupancy_rate(10, 12) == 100.0


@pytest.mark.parametrize('critical,active,expected', [
    (3, 3, 'Critical'),
    (1, 1, 'Alert'),
    (0, 6, 'Monitoring'),
    (0, 5, 'Normal'),
])
def test_emergency_status_tiers(critical, active, expected):
    assert classify_emergency_status(critical, active) == expected


@pytest.mark.django_db
def test_executive_summary(hospital, other_hospital):
    Outbreak.objects.create(disease='Dengue', ward='Ward 1', severity='High')
    Outbreak.objects.create(disease='Malaria', ward='Ward 2', severity='Low')
    Outbreak.objects.create(disease='TB', ward='Ward 2', severity='Critical', status='Resolved')
    Medicine.objects.create(hospital=hospital, name='ORS', quantity=2, status='low')

    data = executive_summary.compute()
    assert data['activeOutbreaks'] == 2
    assert data['criticalOutbreaks'] == 1
    assert data['totalBeds'] == 21
    assert data['occupiedBeds'] == 6
    assert data['occupancyRate'] == 28.6
    assert data['criticalMedicines'] == 1
    assert data['emergencyStatus'] == 'Alert'


@pytest.mark.django_db
def test_emergency_metrics_health_score(hospital):
    Outbreak.objects.create(disease='Dengue', ward='Ward 1', severity='Critical')
    data = emergency_metrics.compute()
    assert data['availableICUBeds'] == 2
    # 100 - 5 (active) - 10 (critical); occupancy 37.5% carries no penalty
    assert data['healthScore'] == 85


@pytest.mark.django_db
def test_citizen_kpis_load_signal(hospital):
    hospital.general_available = 0
    hospital.icu_available = 0
    hospital.isolation_available = 2
    hospital.save()
    Program.objects.create(name='Polio drive', description='d', type='vaccination',
                           start_date='2024-01-01', end_date='2024-12-31')
    Program.objects.create(name='Camp', description='d', type='health_camp',
                           start_date='2024-01-01', end_date='2024-12-31')

    data = citizen_city_kpis.compute()
    assert data['bedOccupancyPercent'] == 88
    assert data['emergencyStatus'] == 'Critical'
    assert data['activeVaccinationPrograms'] == 1
    assert data['totalHospitals'] == 1


@pytest.mark.django_db
def test_equipment_tally_counts_records(hospital):
    Equipment.objects.create(hospital=hospital, name='Ventilator', quantity=5, condition='working')
    Equipment.objects.create(hospital=hospital, name='X-Ray', quantity=1, condition='maintenance')
    Equipment.objects.create(hospital=hospital, name='ECG', quantity=2, condition='out_of_order')
    assert equipment_tally() == {'working': 1, 'maintenance': 1, 'outOfOrder': 1, 'total': 3}


@pytest.mark.django_db
def test_city_health_score_counts_vaccination_applications(hospital, citizen):
    vaccine = Program.objects.create(name='Polio drive', description='d', type='vaccination',
                                     start_date='2024-01-01', end_date='2024-12-31')
    ProgramApplication.objects.create(
        program=vaccine, citizen=citizen, user=citizen.user, full_name=citizen.full_name,
        date_of_birth=citizen.dob, age=citizen.age, gender='Male', mobile_number=citizen.phone, ward='Ward 1',
    )
    data = city_health_score.compute()
    assert data['components']['vaccination'] == 100
    assert 0 <= data['score'] <= 100


@pytest.mark.django_db
def test_failing_aggregator_degrades_alone(hospital, monkeypatch):
    def boom():
        raise RuntimeError('aggregate failed')

    monkeypatch.setattr(summary, 'bed_totals', boom)
    kpis = citizen_city_kpis()
    assert kpis.degraded
    assert kpis.value['emergencyStatus'] == 'Unknown'
    assert not summary.equipment_status().degraded
