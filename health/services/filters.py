"""
Surveillance filter parsing and the appointment match-stage builder.

``build_match_stage`` turns a :class:`SurveillanceFilters` into keyword
lookups for ``Appointment.objects.filter(**match)``.  It performs no
database access.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date
from typing import Mapping, Optional

from django.conf import settings
from django.core.cache import cache
from django.utils.dateparse import parse_date

from health.models import Appointment
from .fallback import aggregator

# Inclusive patient-age ranges per age group label.
AGE_GROUPS: dict[str, tuple[int, int]] = {
    '0-12': (0, 12),
    '13-25': (13, 25),
    '26-45': (26, 45),
    '46-60': (46, 60),
    '60+': (61, 150),
}
GENDERS = ['Male', 'Female', 'Other']
DEFAULT_DISEASES = ['Dengue', 'Malaria', 'TB', 'Viral Fever', 'Diabetes']

FILTER_OPTIONS_CACHE_KEY = 'surveillance:filter-options'


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    value = _clean(value)
    if not value:
        return None
    try:
        return parse_date(value[:10])
    except ValueError:
        return None


@dataclass(frozen=True)
class SurveillanceFilters:
    disease: Optional[str] = None
    zone: Optional[str] = None
    ward: Optional[str] = None
    gender: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    age_group: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> 'SurveillanceFilters':
        """Build filters from query parameters; blanks and bad dates are dropped."""
        return cls(
            disease=_clean(params.get('disease')),
            zone=_clean(params.get('zone')),
            ward=_clean(params.get('ward')),
            gender=_clean(params.get('gender')),
            start_date=_date(params.get('startDate')),
            end_date=_date(params.get('endDate')),
            age_group=_clean(params.get('ageGroup')),
        )

    @property
    def has_date_bound(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def as_dict(self) -> dict:
        data = asdict(self)
        return {
            'disease': data['disease'],
            'zone': data['zone'],
            'ward': data['ward'],
            'gender': data['gender'],
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'ageGroup': data['age_group'],
        }


def build_match_stage(filters: SurveillanceFilters) -> dict:
    match: dict = {}
    if filters.disease:
        match['disease_type'] = filters.disease
    if filters.zone:
        match['zone'] = filters.zone
    if filters.ward:
        match['ward'] = filters.ward
    if filters.gender:
        match['patient_gender'] = filters.gender
    if filters.start_date:
        match['appointment_date__date__gte'] = filters.start_date
    if filters.end_date:
        match['appointment_date__date__lte'] = filters.end_date
    age_range = AGE_GROUPS.get(filters.age_group or '')
    if age_range:
        match['patient_age__gte'], match['patient_age__lte'] = age_range
    return match


def filtered_appointments(filters: SurveillanceFilters):
    return Appointment.objects.filter(**build_match_stage(filters))


@aggregator('filterOptions', {
    'diseases': DEFAULT_DISEASES,
    'zones': [],
    'wards': [],
    'ageGroups': list(AGE_GROUPS),
    'genders': GENDERS,
})
def surveillance_filter_options() -> dict:
    payload = cache.get(FILTER_OPTIONS_CACHE_KEY)
    if payload is not None:
        return payload

    def distinct(field: str) -> list[str]:
        values = Appointment.objects.order_by().values_list(field, flat=True).distinct()
        return [v for v in values if v]

    payload = {
        'diseases': distinct('disease_type'),
        'zones': distinct('zone'),
        'wards': sorted(distinct('ward')),
        'ageGroups': list(AGE_GROUPS),
        'genders': GENDERS,
    }
    cache.set(FILTER_OPTIONS_CACHE_KEY, payload, settings.FILTER_OPTIONS_CACHE_SECONDS)
    return payload
