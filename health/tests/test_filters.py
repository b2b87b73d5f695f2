from datetime import date

from health.services.filters import AGE_GROUPS, SurveillanceFilters, build_match_stage


def test_from_params_trims_and_drops_blanks():
    f = SurveillanceFilters.from_params({
        'disease': ' Dengue ',
        'ward': '',
        'zone': '   ',
        'startDate': '2024-01-05T10:00:00',
        'endDate': 'not-a-date',
        'ageGroup': '13-25',
    })
    assert f.disease == 'Dengue'
    assert f.ward is None
    assert f.zone is None
    assert f.start_date == date(2024, 1, 5)
    assert f.end_date is None
    assert f.age_group == '13-25'


def test_impossible_calendar_date_is_dropped():
    f = SurveillanceFilters.from_params({'startDate': '2024-02-30'})
    assert f.start_date is None
    assert not f.has_date_bound


def test_match_stage_without_filters_is_empty():
    assert build_match_stage(SurveillanceFilters()) == {}


def test_match_stage_maps_every_filter():
    f = SurveillanceFilters(
        disease='Malaria', zone='North', ward='Ward 3', gender='Female',
        start_date=date(2024, 3, 1), end_date=date(2024, 3, 31), age_group='46-60',
    )
    assert build_match_stage(f) == {
        'disease_type': 'Malaria',
        'zone': 'North',
        'ward': 'Ward 3',
        'patient_gender': 'Female',
        'appointment_date__date__gte': date(2024, 3, 1),
        'appointment_date__date__lte': date(2024, 3, 31),
        'patient_age__gte': 46,
        'patient_age__lte': 60,
    }


def test_unknown_age_group_adds_no_age_bounds():
    match = build_match_stage(SurveillanceFilters(age_group='90-100'))
    assert 'patient_age__gte' not in match
    assert 'patient_age__lte' not in match


def test_age_groups_cover_adults_over_sixty():
    assert AGE_GROUPS['60+'] == (61, 150)


def test_as_dict_uses_camel_case_and_iso_dates():
    f = SurveillanceFilters(disease='TB', end_date=date(2024, 12, 31), age_group='0-12')
    assert f.as_dict() == {
        'disease': 'TB', 'zone': None, 'ward': None, 'gender': None,
        'startDate': None, 'endDate': '2024-12-31', 'ageGroup': '0-12',
    }
