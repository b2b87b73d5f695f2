"""
Hospital lookups, bed pools and inventory helpers shared by the portals.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from health.models import Equipment, Hospital, Medicine
from health.services.audit import log_action
from health.services.patients import format_doctor

logger = logging.getLogger(__name__)


def search_hospitals(ward: Optional[str] = None, has_available_beds: bool = False) -> list[Hospital]:
    qs = Hospital.objects.all().order_by('name')
    if ward:
        qs = qs.filter(ward=ward)
    hospitals = list(qs)
    if has_available_beds:
        hospitals = [h for h in hospitals if h.available_beds > 0]
    return hospitals


def get_hospital(hospital_id) -> Hospital:
    hospital = Hospital.objects.filter(id=hospital_id).first()
    if hospital is None:
        raise NotFound('Hospital not found')
    return hospital


def update_beds(hospital: Hospital, changes: dict, *, user=None) -> Hospital:
    """Apply partial bed counts; ``changes`` maps kind -> {total?, available?}.

    Counts left out are taken from the locked row, so a concurrent admit or
    discharge is never overwritten with a stale value.
    """
    with transaction.atomic():
        locked = Hospital.objects.select_for_update().get(pk=hospital.pk)
        pools = {}
        for kind, change in changes.items():
            if kind not in Hospital.BED_TYPES:
                continue
            pool = {**locked.bed_pool(kind), **change}
            if pool['available'] > pool['total']:
                raise ValidationError({f'{kind}Available': f'Available {kind} beds cannot exceed total'})
            setattr(locked, f'{kind}_total', pool['total'])
            setattr(locked, f'{kind}_available', pool['available'])
            pools[kind] = pool
        locked.save()
    log_action(user=user, action='beds_update', object_type='hospital', object_id=locked.id, detail=pools)
    return locked


def hospital_detail(hospital: Hospital) -> dict:
    return {
        'hospital': format_hospital(hospital),
        'doctors': [format_doctor(d) for d in hospital.doctors.all().order_by('name')],
        'medicines': [format_medicine(m) for m in hospital.medicines.all().order_by('name')],
        'equipment': [format_equipment(e) for e in hospital.equipment.all().order_by('name')],
    }


def save_medicine(hospital: Hospital, data: dict, medicine: Optional[Medicine] = None) -> Medicine:
    medicine = medicine or Medicine(hospital=hospital)
    for field in ('name', 'quantity', 'unit', 'status'):
        if field in data:
            setattr(medicine, field, data[field])
    medicine.last_updated = timezone.now()
    medicine.save()
    return medicine


def save_equipment(hospital: Hospital, data: dict, equipment: Optional[Equipment] = None) -> Equipment:
    equipment = equipment or Equipment(hospital=hospital)
    for field in ('name', 'quantity', 'condition'):
        if field in data:
            setattr(equipment, field, data[field])
    equipment.last_updated = timezone.now()
    equipment.save()
    return equipment


def format_hospital(h: Hospital) -> dict:
    return {
        'id': h.id,
        'name': h.name,
        'ward': h.ward,
        'localArea': h.local_area,
        'zone': h.zone,
        'address': h.address,
        'contactNumber': h.contact_number,
        'beds': h.beds(),
        'totalBeds': h.total_beds,
        'availableBeds': h.available_beds,
    }


def format_medicine(m: Medicine) -> dict:
    return {
        'id': m.id,
        'name': m.name,
        'quantity': m.quantity,
        'unit': m.unit,
        'status': m.status,
        'lastUpdated': m.last_updated.isoformat() if m.last_updated else None,
    }


def format_equipment(e: Equipment) -> dict:
    return {
        'id': e.id,
        'name': e.name,
        'quantity': e.quantity,
        'condition': e.condition,
        'lastUpdated': e.last_updated.isoformat() if e.last_updated else None,
    }
