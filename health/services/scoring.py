"""
Health score policies.

Three separately named scoring strategies share one contract,
``compute_score(metrics) -> int`` in ``[0, 100]``:

* :class:`CityKPIScore` - deductions from 100 for outbreaks, bed
  occupancy and medicine shortages (admin executive view).
* :class:`HospitalOperationalScore` - mean of the hospital sub-scores
  whose denominators are non-zero.
* :class:`CityCompositeScore` - weighted blend of five city sub-scores.

They measure different things and are intentionally kept apart.
"""
from __future__ import annotations

import abc
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping


def round_half_up(value: float, digits: int = 0):
    """Round like a person would (2.5 -> 3); returns int when digits == 0."""
    quant = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def clamp_score(value: float) -> int:
    return int(max(0, min(100, value)))


def _num(metrics: Mapping, key: str) -> float:
    try:
        return float(metrics.get(key) or 0)
    except (TypeError, ValueError):
        return 0.0


class HealthScorePolicy(abc.ABC):
    name: str = ''

    @abc.abstractmethod
    def compute_score(self, metrics: Mapping) -> int:
        raise NotImplementedError


class CityKPIScore(HealthScorePolicy):
    """City score from the executive summary metrics.

    Expects ``activeOutbreaks``, ``criticalOutbreaks``, ``occupancyRate``
    and ``criticalMedicines``.
    """
    name = 'city_kpi'

    @staticmethod
    def occupancy_penalty(occupancy_rate: float) -> int:
        if occupancy_rate > 90:
            return 15
        if occupancy_rate > 75:
            return 10
        if occupancy_rate > 60:
            return 5
        return 0

    def compute_score(self, metrics: Mapping) -> int:
        score = 100.0
        score -= 5 * _num(metrics, 'activeOutbreaks')
        score -= 10 * _num(metrics, 'criticalOutbreaks')
        score -= self.occupancy_penalty(_num(metrics, 'occupancyRate'))
        score -= 2 * _num(metrics, 'criticalMedicines')
        return clamp_score(score)


class HospitalOperationalScore(HealthScorePolicy):
    """Average of bed management, resource, medicine stock and patient care.

    Expects ``totalBeds``, ``occupiedBeds``, ``totalDoctors``,
    ``availableDoctors``, ``activePatients`` and ``medicineStatus`` (a
    mapping of medicine status to count).
    """
    name = 'hospital_operational'
    MEDICINE_WEIGHTS = {'adequate': 100, 'low': 50, 'out_of_stock': 0}

    def sub_scores(self, metrics: Mapping) -> dict[str, float]:
        scores: dict[str, float] = {}
        total_beds = _num(metrics, 'totalBeds')
        if total_beds > 0:
            scores['bedManagement'] = 100 - (_num(metrics, 'occupiedBeds') / total_beds * 100)
        total_doctors = _num(metrics, 'totalDoctors')
        if total_doctors > 0:
            scores['resources'] = _num(metrics, 'availableDoctors') / total_doctors * 100
        status_counts = metrics.get('medicineStatus') or {}
        total_medicines = sum(status_counts.get(k, 0) for k in self.MEDICINE_WEIGHTS)
        if total_medicines > 0:
            weighted = sum(status_counts.get(k, 0) * w for k, w in self.MEDICINE_WEIGHTS.items())
            scores['medicineStock'] = weighted / total_medicines
        if total_beds > 0:
            scores['patientCare'] = min(_num(metrics, 'activePatients') / total_beds * 100, 100)
        return scores

    def compute_score(self, metrics: Mapping) -> int:
        scores = self.sub_scores(metrics)
        if not scores:
            return 0
        return clamp_score(round_half_up(sum(scores.values()) / len(scores)))


class CityCompositeScore(HealthScorePolicy):
    """Weighted city blend used on the citizen analytics view."""
    name = 'city_composite'
    WEIGHTS = {
        'diseaseControl': 0.25,
        'infrastructure': 0.20,
        'vaccination': 0.20,
        'healthPrograms': 0.15,
        'emergencyResponse': 0.20,
    }

    def sub_scores(self, metrics: Mapping) -> dict[str, float]:
        disease_control = 100 - min(100, 10 * _num(metrics, 'activeOutbreaks'))

        parts = []
        total_beds = _num(metrics, 'totalBeds')
        if total_beds > 0:
            parts.append(_num(metrics, 'availableBeds') / total_beds * 100)
        total_equipment = _num(metrics, 'totalEquipment')
        if total_equipment > 0:
            parts.append(_num(metrics, 'workingEquipment') / total_equipment * 100)
        infrastructure = sum(parts) / len(parts) if parts else 0

        citizens = _num(metrics, 'totalCitizens')
        vaccination = min(100, _num(metrics, 'vaccinationApplications') / citizens * 100) if citizens > 0 else 0

        health_programs = min(100, 20 * _num(metrics, 'activePrograms'))

        icu_total = _num(metrics, 'icuTotal')
        emergency = _num(metrics, 'icuAvailable') / icu_total * 100 if icu_total > 0 else 0

        return {
            'diseaseControl': disease_control,
            'infrastructure': infrastructure,
            'vaccination': vaccination,
            'healthPrograms': health_programs,
            'emergencyResponse': emergency,
        }

    def compute_score(self, metrics: Mapping) -> int:
        scores = self.sub_scores(metrics)
        blended = sum(scores[k] * w for k, w in self.WEIGHTS.items())
        return clamp_score(round_half_up(blended))


SCORE_POLICIES: dict[str, HealthScorePolicy] = {
    policy.name: policy
    for policy in (CityKPIScore(), HospitalOperationalScore(), CityCompositeScore())
}


def compute_score(policy_name: str, metrics: Mapping) -> int:
    try:
        policy = SCORE_POLICIES[policy_name]
    except KeyError:
        raise ValueError(f"unknown score policy: {policy_name}") from None
    return policy.compute_score(metrics)
