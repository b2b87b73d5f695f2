import pytest
from rest_framework.exceptions import NotFound, ValidationError

from health.models import Doctor, Hospital, Medicine, Patient, PatientProfile, PrescriptionLine
from health.services.patients import (
    discharge_patient,
    doctor_workload,
    lookup_profiles,
    profile_history,
    register_visit,
    save_prescription,
)

pytestmark = pytest.mark.django_db


def test_repeat_visit_joins_profile_by_phone(hospital):
    first = register_visit(hospital, name='Asha Patil', age=34, gender='Female', phone='9822000001',
                           patient_type='OPD', disease='Viral Fever')
    second = register_visit(hospital, name='Someone Else', phone='9822000001', patient_type='OPD')

    assert first.profile_id == second.profile_id
    assert second.name == 'Asha Patil'
    assert PatientProfile.objects.count() == 1


def test_profile_id_from_another_hospital_is_ignored(hospital, other_hospital):
    foreign = PatientProfile.objects.create(hospital=other_hospital, name='Foreign', phone='9000000009')
    visit = register_visit(hospital, profile_id=foreign.id, name='Local', phone='9000000001', patient_type='OPD')
    assert visit.profile_id != foreign.id
    assert visit.profile.hospital_id == hospital.id


def test_new_profile_requires_a_name(hospital):
    with pytest.raises(ValidationError):
        register_visit(hospital, phone='9000000001', patient_type='OPD')


def test_doctor_must_belong_to_hospital(hospital, other_hospital):
    outsider = Doctor.objects.create(hospital=other_hospital, name='Kale')
    with pytest.raises(ValidationError):
        register_visit(hospital, name='A', patient_type='OPD', doctor_id=outsider.id)


def test_ipd_admission_leaves_bed_counts_alone(hospital):
    visit = register_visit(hospital, name='B', patient_type='IPD', bed_type='icu')
    hospital.refresh_from_db()
    assert visit.bed_type == 'icu'
    assert hospital.icu_available == 2


def test_opd_visit_drops_bed_type(hospital):
    visit = register_visit(hospital, name='C', patient_type='OPD', bed_type='general')
    assert visit.bed_type == ''


def test_discharge_frees_one_bed_once(hospital):
    patient = Patient.objects.create(hospital=hospital, patient_type='IPD', name='D', bed_type='general')

    assert discharge_patient(patient.id, hospital) is True
    hospital.refresh_from_db()
    assert hospital.general_available == 7

    assert discharge_patient(patient.id, hospital) is False
    hospital.refresh_from_db()
    assert hospital.general_available == 7


def test_discharge_never_exceeds_pool_total(hospital):
    Hospital.objects.filter(pk=hospital.pk).update(isolation_available=2, isolation_total=2)
    patient = Patient.objects.create(hospital=hospital, patient_type='IPD', name='E', bed_type='isolation')

    assert discharge_patient(patient.id, hospital) is True
    hospital.refresh_from_db()
    assert hospital.isolation_available == 2
    patient.refresh_from_db()
    assert patient.discharge_date is not None


def test_discharge_of_foreign_patient_is_not_found(hospital, other_hospital):
    patient = Patient.objects.create(hospital=other_hospital, patient_type='IPD', name='F', bed_type='general')
    with pytest.raises(NotFound):
        discharge_patient(patient.id, hospital)


def test_prescription_decrements_stock(hospital):
    patient = Patient.objects.create(hospital=hospital, patient_type='OPD', name='G')
    paracetamol = Medicine.objects.create(hospital=hospital, name='Paracetamol', quantity=10)

    lines = save_prescription(patient.id, hospital, [
        {'medicine': paracetamol.id, 'quantity': 3, 'dosage': '1-0-1'},
        {'medicine': paracetamol.id, 'quantity': 0},
    ])
    assert len(lines) == 1
    paracetamol.refresh_from_db()
    assert paracetamol.quantity == 7


def test_prescription_is_all_or_nothing(hospital):
    patient = Patient.objects.create(hospital=hospital, patient_type='OPD', name='H')
    ors = Medicine.objects.create(hospital=hospital, name='ORS', quantity=10)
    insulin = Medicine.objects.create(hospital=hospital, name='Insulin', quantity=1)

    with pytest.raises(ValidationError) as exc:
        save_prescription(patient.id, hospital, [
            {'medicine': ors.id, 'quantity': 3},
            {'medicine': insulin.id, 'quantity': 5},
        ])
    assert 'Not enough stock for Insulin' in str(exc.value.detail)
    ors.refresh_from_db()
    assert ors.quantity == 10
    assert not PrescriptionLine.objects.exists()


def test_doctor_workload_counts(hospital):
    doctor = Doctor.objects.create(hospital=hospital, name='Joshi')
    Patient.objects.create(hospital=hospital, doctor=doctor, patient_type='OPD', name='a')
    Patient.objects.create(hospital=hospital, doctor=doctor, patient_type='IPD', name='b', bed_type='general')
    discharged = Patient.objects.create(hospital=hospital, doctor=doctor, patient_type='IPD', name='c',
                                        bed_type='general')
    discharge_patient(discharged.id, hospital)

    [row] = doctor_workload(hospital)
    assert row['doctor']['name'] == 'Joshi'
    assert (row['opdCount'], row['ipdAdmitted'], row['ipdDischarged'], row['total']) == (1, 1, 1, 3)


def test_lookup_needs_two_characters(hospital):
    PatientProfile.objects.create(hospital=hospital, name='Asha', phone='9822000001')
    assert lookup_profiles(hospital, 'A') == []
    assert [p['name'] for p in lookup_profiles(hospital, 'as')] == ['Asha']
    assert [p['name'] for p in lookup_profiles(hospital, '98220')] == ['Asha']


def test_profile_history_lists_visits_with_prescriptions(hospital):
    visit = register_visit(hospital, name='Asha', phone='9822000001', patient_type='OPD')
    med = Medicine.objects.create(hospital=hospital, name='ORS', quantity=5)
    save_prescription(visit.id, hospital, [{'medicine': med.id, 'quantity': 2}])

    history = profile_history(hospital, visit.profile_id)
    assert history['profile']['name'] == 'Asha'
    assert history['visits'][0]['prescription'] == [{'medicine': 'ORS', 'quantity': 2, 'dosage': ''}]
