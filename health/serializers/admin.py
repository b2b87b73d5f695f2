from rest_framework import serializers

from health.models import SEVERITY_CHOICES, Notification, Outbreak, Program
from health.serializers.auth import clean_text


class EmergencyAlertSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    priority = serializers.ChoiceField(choices=[c[0] for c in Notification.PRIORITY_CHOICES], default='critical')
    targetAudience = serializers.ChoiceField(choices=['all', 'ward', 'zone'], default='all')
    ward = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    zone = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

    def validate_title(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Title is required')
        return v

    def validate_message(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Message is required')
        return v

    def validate(self, attrs):
        audience = attrs['targetAudience']
        if audience in ('ward', 'zone') and not clean_text(attrs.get(audience, '')):
            raise serializers.ValidationError({audience: f'{audience.capitalize()} is required for this audience'})
        return attrs


class DiseaseTrendsQuerySerializer(serializers.Serializer):
    disease = serializers.CharField(required=False, allow_blank=True)
    days = serializers.IntegerField(required=False, min_value=1, max_value=365, default=30)


class OutbreakSerializer(serializers.Serializer):
    disease = serializers.ChoiceField(choices=[c[0] for c in Outbreak.DISEASE_CHOICES])
    ward = serializers.CharField(max_length=100)
    zone = serializers.CharField(max_length=100, required=False, allow_blank=True)
    cases = serializers.IntegerField(min_value=0, required=False)
    severity = serializers.ChoiceField(choices=[c[0] for c in SEVERITY_CHOICES], required=False)
    status = serializers.ChoiceField(choices=[c[0] for c in Outbreak.STATUS_CHOICES], required=False)
    longitude = serializers.FloatField(required=False, min_value=-180, max_value=180)
    latitude = serializers.FloatField(required=False, min_value=-90, max_value=90)
    affectedPopulation = serializers.IntegerField(min_value=0, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    actionsTaken = serializers.CharField(required=False, allow_blank=True)

    FIELD_MAP = {
        'disease': 'disease',
        'ward': 'ward',
        'zone': 'zone',
        'cases': 'cases',
        'severity': 'severity',
        'status': 'status',
        'longitude': 'longitude',
        'latitude': 'latitude',
        'affectedPopulation': 'affected_population',
        'description': 'description',
        'actionsTaken': 'actions_taken',
    }

    def model_fields(self) -> dict:
        data = self.validated_data
        return {field: data[key] for key, field in self.FIELD_MAP.items() if key in data}

    def validate(self, attrs):
        for key in ('ward', 'zone', 'description', 'actionsTaken'):
            if key in attrs:
                attrs[key] = clean_text(attrs[key])
        return attrs


class ProgramSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField()
    type = serializers.ChoiceField(choices=[c[0] for c in Program.TYPE_CHOICES])
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    targetAudience = serializers.CharField(max_length=255, required=False, allow_blank=True)
    locations = serializers.CharField(max_length=255, required=False, allow_blank=True)
    coordinator = serializers.CharField(max_length=255, required=False, allow_blank=True)
    contactNumber = serializers.CharField(max_length=20, required=False, allow_blank=True)
    bannerImage = serializers.CharField(max_length=255, required=False, allow_blank=True)
    gradientFrom = serializers.CharField(max_length=30, required=False, allow_blank=True)
    gradientTo = serializers.CharField(max_length=30, required=False, allow_blank=True)

    def model_fields(self) -> dict:
        d = self.validated_data
        fields = {
            'name': clean_text(d['name']),
            'description': clean_text(d['description']),
            'type': d['type'],
            'start_date': d['startDate'],
            'end_date': d['endDate'],
        }
        optional = {
            'targetAudience': 'target_audience',
            'locations': 'locations',
            'coordinator': 'coordinator',
            'contactNumber': 'contact_number',
            'bannerImage': 'banner_image',
            'gradientFrom': 'gradient_from',
            'gradientTo': 'gradient_to',
        }
        for key, field in optional.items():
            if d.get(key):
                fields[field] = clean_text(d[key])
        return fields
