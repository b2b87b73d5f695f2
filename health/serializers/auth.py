import bleach
from django.contrib.auth import get_user_model
from rest_framework import serializers

from health.models import Hospital


def clean_text(value: str) -> str:
    return bleach.clean((value or '').strip(), tags=[], strip=True)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField()

    def validate(self, attrs):
        identifier = (attrs.get('username') or attrs.get('email') or '').strip()
        if not identifier:
            raise serializers.ValidationError('Username or email is required')
        attrs['identifier'] = identifier
        return attrs


def validate_bed_pool(attrs: dict, kind: str, *, default_available_to_total: bool = True) -> dict:
    """Read ``<kind>Total``/``<kind>Available`` and enforce available <= total."""
    total = attrs.get(f'{kind}Total') or 0
    available = attrs.get(f'{kind}Available')
    if available is None:
        available = total if default_available_to_total else 0
    if available > total:
        raise serializers.ValidationError({f'{kind}Available': f'Available {kind} beds cannot exceed total'})
    return {'total': total, 'available': available}


class BedPoolFieldsMixin(serializers.Serializer):
    generalTotal = serializers.IntegerField(required=False, min_value=0, default=0)
    generalAvailable = serializers.IntegerField(required=False, min_value=0, allow_null=True, default=None)
    icuTotal = serializers.IntegerField(required=False, min_value=0, default=0)
    icuAvailable = serializers.IntegerField(required=False, min_value=0, allow_null=True, default=None)
    isolationTotal = serializers.IntegerField(required=False, min_value=0, default=0)
    isolationAvailable = serializers.IntegerField(required=False, min_value=0, allow_null=True, default=None)

    def bed_pools(self, attrs: dict) -> dict:
        return {kind: validate_bed_pool(attrs, kind) for kind in Hospital.BED_TYPES}


class RegisterSerializer(BedPoolFieldsMixin):
    ROLES = ['citizen', 'hospital', 'lab']

    name = serializers.CharField(max_length=150)
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=ROLES, default='citizen')
    hospitalName = serializers.CharField(max_length=255, required=False, allow_blank=True)
    ward = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zone = serializers.CharField(max_length=100, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    contactNumber = serializers.CharField(max_length=20, required=False, allow_blank=True)

    def validate_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters')
        return v

    def validate_email(self, v):
        v = v.strip().lower()
        if get_user_model().objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError('Email already registered')
        return v

    def validate(self, attrs):
        username = (attrs.get('username') or '').strip() or attrs['email']
        if get_user_model().objects.filter(username__iexact=username).exists():
            raise serializers.ValidationError({'username': 'Username already taken'})
        attrs['username'] = username
        if attrs['role'] == 'hospital':
            if not clean_text(attrs.get('hospitalName', '')):
                raise serializers.ValidationError({'hospitalName': 'Hospital name is required'})
            if not clean_text(attrs.get('ward', '')):
                raise serializers.ValidationError({'ward': 'Ward is required'})
            attrs['beds'] = self.bed_pools(attrs)
        return attrs


class BedUpdateSerializer(BedPoolFieldsMixin):
    """Partial bed update; only the counts actually sent end up in ``changes``.

    Merging with the stored counts happens under the row lock in
    ``update_beds``.
    """

    def validate(self, attrs):
        changes = {}
        for kind in Hospital.BED_TYPES:
            total_key, available_key = f'{kind}Total', f'{kind}Available'
            change = {}
            if total_key in self.initial_data:
                change['total'] = attrs[total_key]
            if available_key in self.initial_data:
                change['available'] = attrs.get(available_key) or 0
            if change:
                changes[kind] = change
        if not changes:
            raise serializers.ValidationError('No bed counts supplied')
        attrs['changes'] = changes
        return attrs
