from rest_framework import serializers

from health.models import Appointment, Equipment, Hospital, Medicine
from health.serializers.auth import clean_text


class VisitSerializer(serializers.Serializer):
    profileId = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=150)
    gender = serializers.CharField(max_length=10, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    patientType = serializers.ChoiceField(choices=['OPD', 'IPD'])
    disease = serializers.CharField(max_length=255, required=False, allow_blank=True)
    doctorId = serializers.IntegerField(required=False, allow_null=True)
    bedType = serializers.ChoiceField(choices=list(Hospital.BED_TYPES), required=False, allow_blank=True)
    admissionDate = serializers.DateTimeField(required=False, allow_null=True)

    def validate_name(self, v):
        return clean_text(v)

    def validate_disease(self, v):
        return clean_text(v)

    def validate(self, attrs):
        if attrs['patientType'] == 'IPD' and not attrs.get('bedType'):
            raise serializers.ValidationError({'bedType': 'Bed type is required for IPD admission'})
        if not attrs.get('profileId') and not attrs.get('phone') and not attrs.get('name'):
            raise serializers.ValidationError('Provide an existing profile, a phone number or a name')
        return attrs


class LookupQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')


class PrescriptionLineSerializer(serializers.Serializer):
    medicine = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=0)
    dosage = serializers.CharField(max_length=50, required=False, allow_blank=True)


class PrescriptionSerializer(serializers.Serializer):
    medicines = PrescriptionLineSerializer(many=True, allow_empty=False)


class DoctorSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    specialization = serializers.CharField(max_length=255, required=False, allow_blank=True)
    opdTimings = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    experienceYears = serializers.IntegerField(required=False, min_value=0, default=0)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Doctor name is required')
        return v


class MedicineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=0)
    unit = serializers.CharField(max_length=50, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=[c[0] for c in Medicine.STATUS_CHOICES], required=False)

    def validate_name(self, v):
        return clean_text(v)


class EquipmentSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=0, required=False, default=1)
    condition = serializers.ChoiceField(choices=[c[0] for c in Equipment.CONDITION_CHOICES], required=False)

    def validate_name(self, v):
        return clean_text(v)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Appointment.STATUS_CHOICES])
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_notes(self, v):
        return clean_text(v)

