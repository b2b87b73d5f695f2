from typing import Optional

from rest_framework.exceptions import NotFound

from health.models import Citizen
from health.services.audit import log_action

PROFILE_FIELDS = {
    'fullName': 'full_name',
    'phone': 'phone',
    'email': 'email',
    'dob': 'dob',
    'gender': 'gender',
    'occupation': 'occupation',
    'street': 'street',
    'ward': 'ward',
    'pincode': 'pincode',
    'city': 'city',
    'zone': 'zone',
    'emergencyContactName': 'emergency_contact_name',
    'emergencyContactPhone': 'emergency_contact_phone',
    'emergencyContactRelation': 'emergency_contact_relation',
    'bloodGroup': 'blood_group',
    'allergies': 'allergies',
    'chronicConditions': 'chronic_conditions',
}


def get_citizen(user) -> Optional[Citizen]:
    return Citizen.objects.filter(user=user).first()


def save_profile(user, data: dict) -> Citizen:
    """Create or update the citizen profile and mark it completed."""
    citizen = get_citizen(user) or Citizen(user=user)
    for key, field in PROFILE_FIELDS.items():
        if key in data:
            setattr(citizen, field, data[key])
    citizen.profile_completed = True
    citizen.save()

    user.first_name = citizen.full_name
    user.save(update_fields=['first_name'])
    log_action(user=user, action='citizen_profile_save', object_type='citizen', object_id=citizen.id,
               detail={'ward': citizen.ward})
    return citizen


def delete_profile(user) -> Citizen:
    """Soft delete: the record stays, feature access is withdrawn."""
    citizen = get_citizen(user)
    if citizen is None:
        raise NotFound('Profile not found')
    citizen.profile_completed = False
    citizen.save(update_fields=['profile_completed', 'updated_at'])
    log_action(user=user, action='citizen_profile_delete', object_type='citizen', object_id=citizen.id, detail={})
    return citizen


def format_citizen(c: Citizen) -> dict:
    return {
        'id': c.id,
        'fullName': c.full_name,
        'phone': c.phone,
        'email': c.email or None,
        'dob': c.dob.isoformat() if c.dob else None,
        'age': c.age,
        'gender': c.gender,
        'occupation': c.occupation,
        'address': {'street': c.street, 'ward': c.ward, 'pincode': c.pincode, 'city': c.city},
        'zone': c.zone or None,
        'emergencyContact': {
            'name': c.emergency_contact_name,
            'phone': c.emergency_contact_phone,
            'relation': c.emergency_contact_relation,
        },
        'profileImage': c.profile_image,
        'profileCompleted': c.profile_completed,
        'healthMetadata': {
            'bloodGroup': c.blood_group,
            'allergies': c.allergies,
            'chronicConditions': c.chronic_conditions,
        },
    }
