from datetime import date

import pytest
from django.core.cache import cache

from health.models import Citizen, Hospital, User


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def hospital(db):
    return Hospital.objects.create(
        name='Civil Hospital', ward='Ward 1', zone='North',
        general_total=10, general_available=6,
        icu_total=4, icu_available=2,
        isolation_total=2, isolation_available=2,
    )


@pytest.fixture
def other_hospital(db):
    return Hospital.objects.create(name='Lakeside Clinic', ward='Ward 2', zone='South',
                                   general_total=5, general_available=5)


@pytest.fixture
def citizen_user(db):
    return User.objects.create_user(username='ravi', password='ravi-pass-123', role='citizen')


@pytest.fixture
def citizen(citizen_user):
    return Citizen.objects.create(
        user=citizen_user, full_name='Ravi Kumar', phone='9876543210', dob=date(1990, 5, 1),
        gender='Male', ward='Ward 1', zone='North', profile_completed=True,
    )
