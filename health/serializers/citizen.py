from rest_framework import serializers

from health.models import GENDER_CHOICES, SEVERITY_CHOICES, Appointment, Citizen
from health.serializers.auth import clean_text

GENDERS = [c[0] for c in GENDER_CHOICES]


class CommaListField(serializers.Field):
    """Accepts ``"a, b"`` or ``["a", "b"]``; always yields a list of strings."""

    def to_internal_value(self, data):
        if data in (None, ''):
            return []
        if isinstance(data, str):
            items = data.split(',')
        elif isinstance(data, (list, tuple)):
            items = data
        else:
            raise serializers.ValidationError('Expected a list or comma separated text')
        return [clean_text(str(item)) for item in items if str(item).strip()]

    def to_representation(self, value):
        return list(value or [])


class ProfileSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=255)
    phone = serializers.RegexField(r'^\d{10}$', error_messages={'invalid': 'Phone must be 10 digits'})
    email = serializers.EmailField(required=False, allow_blank=True)
    dob = serializers.DateField()
    gender = serializers.CharField()
    occupation = serializers.CharField(max_length=100, required=False, allow_blank=True)
    street = serializers.CharField(max_length=255, required=False, allow_blank=True)
    ward = serializers.CharField(max_length=100)
    pincode = serializers.RegexField(r'^\d{6}$', required=False, allow_blank=True,
                                     error_messages={'invalid': 'Pincode must be 6 digits'})
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zone = serializers.CharField(max_length=100, required=False, allow_blank=True)
    emergencyContactName = serializers.CharField(max_length=255, required=False, allow_blank=True)
    emergencyContactPhone = serializers.CharField(max_length=15, required=False, allow_blank=True)
    emergencyContactRelation = serializers.CharField(max_length=50, required=False, allow_blank=True)
    bloodGroup = serializers.ChoiceField(choices=[c[0] for c in Citizen.BLOOD_GROUP_CHOICES], required=False,
                                         allow_blank=True)
    allergies = CommaListField(required=False)
    chronicConditions = CommaListField(required=False)

    TEXT_FIELDS = ('fullName', 'occupation', 'street', 'ward', 'city', 'zone',
                   'emergencyContactName', 'emergencyContactRelation')

    def validate_gender(self, v):
        v = (v or '').strip().capitalize()
        if v not in GENDERS:
            raise serializers.ValidationError(f"Gender must be one of {', '.join(GENDERS)}")
        return v

    def validate(self, attrs):
        for key in self.TEXT_FIELDS:
            if key in attrs:
                attrs[key] = clean_text(attrs[key])
        if not attrs.get('fullName'):
            raise serializers.ValidationError({'fullName': 'Full name is required'})
        if not attrs.get('ward'):
            raise serializers.ValidationError({'ward': 'Ward is required'})
        return attrs


class AppointmentSerializer(serializers.Serializer):
    hospitalId = serializers.IntegerField()
    doctorId = serializers.IntegerField(required=False, allow_null=True)
    patientName = serializers.CharField(max_length=255)
    patientAge = serializers.IntegerField(min_value=0, max_value=150)
    patientGender = serializers.ChoiceField(choices=GENDERS)
    patientPhone = serializers.CharField(max_length=20)
    appointmentDate = serializers.DateTimeField()
    appointmentTime = serializers.CharField(max_length=20)
    reason = serializers.CharField(max_length=255)
    diseaseType = serializers.ChoiceField(choices=[c[0] for c in Appointment.DISEASE_CHOICES], required=False)
    severity = serializers.ChoiceField(choices=[c[0] for c in SEVERITY_CHOICES], required=False)
    ward = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zone = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate_patientName(self, v):
        return clean_text(v)

    def validate_reason(self, v):
        return clean_text(v)


class HospitalSearchSerializer(serializers.Serializer):
    ward = serializers.CharField(required=False, allow_blank=True)
    hasAvailableBeds = serializers.BooleanField(required=False, default=False)


class NotificationReadSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True)
    markAll = serializers.BooleanField(required=False, default=False)


class NotificationDeleteSerializer(serializers.Serializer):
    id = serializers.IntegerField()


class ProgramApplicationSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=255, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=GENDERS, required=False)
    mobileNumber = serializers.RegexField(r'^\d{10}$', required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    street = serializers.CharField(max_length=255, required=False, allow_blank=True)
    area = serializers.CharField(max_length=255, required=False, allow_blank=True)
    ward = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.RegexField(r'^\d{6}$', required=False, allow_blank=True)
    bloodGroup = serializers.CharField(max_length=10, required=False, allow_blank=True)
    medicalHistory = serializers.CharField(required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    currentMedications = serializers.CharField(required=False, allow_blank=True)
    previousVaccinations = serializers.CharField(required=False, allow_blank=True)
    preferredCenter = serializers.CharField(max_length=255, required=False, allow_blank=True)
    preferredDate = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        for key, value in attrs.items():
            if isinstance(value, str):
                attrs[key] = clean_text(value)
        return attrs
