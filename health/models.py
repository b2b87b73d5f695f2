"""
Database models for the public health portal.

These models capture the city health records used by the three portals:
hospitals with their bed pools and inventory, patient visits, citizen
profiles and appointments, outbreaks, notifications and health
programmes.  Ward is the geographic key shared by hospitals, outbreaks,
appointments and citizens.
"""
from __future__ import annotations

from datetime import date

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


GENDER_CHOICES = [
    ('Male', 'Male'),
    ('Female', 'Female'),
    ('Other', 'Other'),
]

SEVERITY_CHOICES = [
    ('Low', 'Low'),
    ('Medium', 'Medium'),
    ('High', 'High'),
    ('Critical', 'Critical'),
]

# Ordinal rank used whenever severities are compared or maximised.
SEVERITY_RANK = {'Low': 0, 'Medium': 1, 'High': 2, 'Critical': 3}


class Hospital(models.Model):
    """A hospital and its three bed pools.

    Each pool is stored as a ``<pool>_total`` / ``<pool>_available``
    pair.  ``available <= total`` is validated by the serializers that
    write these fields.
    """
    BED_TYPES = ('general', 'icu', 'isolation')

    name = models.CharField(max_length=255)
    ward = models.CharField(max_length=100, blank=True, db_index=True)
    local_area = models.CharField(max_length=255, blank=True)
    zone = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    contact_number = models.CharField(max_length=20, blank=True)

    general_total = models.PositiveIntegerField(default=0)
    general_available = models.PositiveIntegerField(default=0)
    icu_total = models.PositiveIntegerField(default=0)
    icu_available = models.PositiveIntegerField(default=0)
    isolation_total = models.PositiveIntegerField(default=0)
    isolation_available = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    def bed_pool(self, kind: str) -> dict:
        if kind not in self.BED_TYPES:
            raise ValueError(f"unknown bed type: {kind}")
        return {
            'total': getattr(self, f'{kind}_total'),
            'available': getattr(self, f'{kind}_available'),
        }

    def beds(self) -> dict:
        return {kind: self.bed_pool(kind) for kind in self.BED_TYPES}

    @property
    def total_beds(self) -> int:
        return self.general_total + self.icu_total + self.isolation_total

    @property
    def available_beds(self) -> int:
        return self.general_available + self.icu_available + self.isolation_available

    @property
    def occupied_beds(self) -> int:
        return self.total_beds - self.available_beds

    def __str__(self) -> str:
        return f"{self.name} ({self.ward})"


class User(AbstractUser):
    """Custom user model with a portal role.

    A hospital-role user owns exactly one :class:`Hospital`, referenced
    through ``hospital``.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('hospital', 'Hospital'),
        ('citizen', 'Citizen'),
        ('lab', 'Laboratory'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='citizen', db_index=True)
    hospital = models.ForeignKey(
        Hospital, null=True, blank=True, on_delete=models.SET_NULL, related_name='users'
    )

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Doctor(models.Model):
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='doctors')
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=255, blank=True)
    opd_timings = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    experience_years = models.PositiveIntegerField(default=0)
    is_available = models.BooleanField(default=True)

    def __str__(self) -> str:
        return f"Dr. {self.name}"


class Medicine(models.Model):
    STATUS_CHOICES = [
        ('adequate', 'Adequate'),
        ('low', 'Low'),
        ('out_of_stock', 'Out of stock'),
    ]
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='medicines')
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=0)
    unit = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='adequate', db_index=True)
    last_updated = models.DateTimeField(default=timezone.now)

    def __str__(self) -> str:
        return f"{self.name} ({self.quantity} {self.unit})"


class Equipment(models.Model):
    CONDITION_CHOICES = [
        ('working', 'Working'),
        ('maintenance', 'Maintenance'),
        ('out_of_order', 'Out of order'),
    ]
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='equipment')
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, default='working')
    last_updated = models.DateTimeField(default=timezone.now)

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"


class PatientProfile(models.Model):
    """Hospital-scoped patient identity shared by repeat visits.

    Visits are matched to an existing profile by id first and by phone
    number second.
    """
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='patient_profiles')
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=10, blank=True)
    phone = models.CharField(max_length=20, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.phone})"


class Patient(models.Model):
    """A single OPD or IPD visit.

    Name, age, gender and phone are snapshotted from the profile at
    registration.  ``discharge_date`` being empty means an IPD patient
    still occupies a bed of ``bed_type``.
    """
    TYPE_CHOICES = [
        ('OPD', 'Out-patient'),
        ('IPD', 'In-patient'),
    ]
    BED_TYPE_CHOICES = [(kind, kind) for kind in Hospital.BED_TYPES]

    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='patients')
    profile = models.ForeignKey(
        PatientProfile, null=True, blank=True, on_delete=models.SET_NULL, related_name='visits'
    )
    doctor = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients'
    )
    patient_type = models.CharField(max_length=3, choices=TYPE_CHOICES, db_index=True)
    name = models.CharField(max_length=255, blank=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=10, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    disease = models.CharField(max_length=255, blank=True)
    bed_type = models.CharField(max_length=10, choices=BED_TYPE_CHOICES, blank=True)
    admission_date = models.DateTimeField(default=timezone.now, db_index=True)
    discharge_date = models.DateTimeField(null=True, blank=True)

    @property
    def is_discharged(self) -> bool:
        return self.discharge_date is not None

    def __str__(self) -> str:
        return f"{self.name} [{self.patient_type}]"


class PrescriptionLine(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='prescription')
    medicine = models.ForeignKey(Medicine, null=True, on_delete=models.SET_NULL, related_name='prescribed')
    quantity = models.PositiveIntegerField()
    dosage = models.CharField(max_length=50, blank=True)

    def __str__(self) -> str:
        return f"{self.medicine} x{self.quantity}"


def calculate_age(dob: date | None, today: date | None = None) -> int:
    """Full years between ``dob`` and ``today`` (0 when dob is unknown)."""
    if not dob:
        return 0
    today = today or timezone.localdate()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


class Citizen(models.Model):
    """Citizen profile, one-to-one with a citizen-role user.

    The ward and ``profile_completed`` flag read from this record are the
    only source for ward targeting and feature gating.
    """
    BLOOD_GROUP_CHOICES = [(g, g) for g in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')] + [('', 'Unknown')]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='citizen')
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=15, db_index=True)
    email = models.EmailField(blank=True)
    dob = models.DateField()
    age = models.PositiveIntegerField(default=0)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    occupation = models.CharField(max_length=100, blank=True)

    street = models.CharField(max_length=255, blank=True)
    ward = models.CharField(max_length=100, db_index=True)
    pincode = models.CharField(max_length=6, blank=True)
    city = models.CharField(max_length=100, blank=True)
    zone = models.CharField(max_length=100, blank=True)

    emergency_contact_name = models.CharField(max_length=255, blank=True)
    emergency_contact_phone = models.CharField(max_length=15, blank=True)
    emergency_contact_relation = models.CharField(max_length=50, blank=True)

    profile_image = models.CharField(max_length=255, default='/default-avatar.png')
    profile_completed = models.BooleanField(default=False, db_index=True)

    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES, blank=True)
    allergies = models.JSONField(default=list, blank=True)
    chronic_conditions = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if not self.city:
            self.city = settings.DEFAULT_CITY
        if self.dob:
            self.age = calculate_age(self.dob)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.ward})"


class Appointment(models.Model):
    """A citizen booking, carrying the disease surveillance fields.

    ``disease_type``, ``severity``, ``ward`` and ``zone`` feed the
    surveillance analytics and are kept apart from the free-text
    ``reason``.
    """
    DISEASE_CHOICES = [(d, d) for d in (
        'Dengue', 'Malaria', 'TB', 'Viral Fever', 'Diabetes', 'Typhoid', 'Cholera', 'COVID-19', 'Other',
    )]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    citizen = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='appointments')
    patient_name = models.CharField(max_length=255)
    patient_age = models.PositiveIntegerField()
    patient_gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    patient_phone = models.CharField(max_length=20)
    appointment_date = models.DateTimeField(db_index=True)
    appointment_time = models.CharField(max_length=20)
    reason = models.CharField(max_length=255)
    disease_type = models.CharField(max_length=20, choices=DISEASE_CHOICES, default='Other', db_index=True)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, default='Low')
    ward = models.CharField(max_length=100, blank=True, db_index=True)
    zone = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending', db_index=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self) -> str:
        return f"{self.patient_name} @ {self.hospital_id} on {self.appointment_date:%Y-%m-%d}"


class Outbreak(models.Model):
    DISEASE_CHOICES = [(d, d) for d in (
        'Dengue', 'Malaria', 'Typhoid', 'TB', 'COVID-19', 'Cholera', 'Chikungunya', 'Other',
    )]
    STATUS_CHOICES = [
        ('Active', 'Active'),
        ('Controlled', 'Controlled'),
        ('Resolved', 'Resolved'),
    ]

    disease = models.CharField(max_length=20, choices=DISEASE_CHOICES)
    ward = models.CharField(max_length=100, db_index=True)
    zone = models.CharField(max_length=100, blank=True)
    cases = models.PositiveIntegerField(default=1)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, default='Low')
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='Active', db_index=True)
    longitude = models.FloatField(default=75.9064)
    latitude = models.FloatField(default=17.6599)
    affected_population = models.PositiveIntegerField(default=0)
    reported_date = models.DateTimeField(default=timezone.now)
    resolved_date = models.DateTimeField(null=True, blank=True)
    description = models.TextField(blank=True)
    actions_taken = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['disease', 'status'], name='outbreak_disease_status_idx'),
        ]

    @property
    def location(self) -> dict:
        return {'type': 'Point', 'coordinates': [self.longitude, self.latitude]}

    def __str__(self) -> str:
        return f"{self.disease} in {self.ward} ({self.status})"


class Notification(models.Model):
    TYPE_CHOICES = [(t, t) for t in (
        'outbreak_alert', 'vaccination', 'emergency', 'medicine_stock', 'appointment', 'general', 'program_reminder',
    )]
    PRIORITY_CHOICES = [(p, p) for p in ('low', 'medium', 'high', 'critical')]
    AUDIENCE_CHOICES = [(a, a) for a in ('all', 'ward', 'zone', 'specific_users')]
    ENTITY_CHOICES = [(e, e) for e in ('outbreak', 'appointment', 'hospital', 'medicine', 'program')]

    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    title = models.CharField(max_length=255)
    message = models.TextField()
    target_audience = models.CharField(max_length=20, choices=AUDIENCE_CHOICES, default='all')
    ward = models.CharField(max_length=100, blank=True)
    zone = models.CharField(max_length=100, blank=True)
    target_users = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='notifications')
    # Read state is per recipient; a broadcast is read by each citizen separately.
    read_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL, through='NotificationRead', blank=True, related_name='read_notifications'
    )
    is_broadcast = models.BooleanField(default=False)
    sent_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='sent_notifications'
    )
    related_entity_type = models.CharField(max_length=20, choices=ENTITY_CHOICES, blank=True)
    related_entity_id = models.IntegerField(null=True, blank=True)
    # Hidden from citizens until this moment when set.
    scheduled_for = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['target_audience', 'ward'], name='notif_audience_ward_idx'),
        ]

    def __str__(self) -> str:
        return f"[{self.type}] {self.title}"


class NotificationRead(models.Model):
    notification = models.ForeignKey(Notification, on_delete=models.CASCADE, related_name='reads')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notification_reads')
    read_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['notification', 'user'], name='unique_notification_read'),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} read {self.notification_id}"


class Program(models.Model):
    TYPE_CHOICES = [(t, t) for t in (
        'vaccination', 'health_camp', 'maternal_health', 'child_health', 'awareness', 'other',
    )]
    STATUS_CHOICES = [(s, s) for s in ('active', 'completed', 'cancelled')]

    name = models.CharField(max_length=255)
    description = models.TextField()
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    banner_image = models.CharField(max_length=255, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    target_audience = models.CharField(max_length=255, default='All Citizens')
    locations = models.CharField(max_length=255, default='All Health Centers')
    coordinator = models.CharField(max_length=255, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)
    enrolled = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    gradient_from = models.CharField(max_length=30, default='blue-600')
    gradient_to = models.CharField(max_length=30, default='blue-800')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class ProgramApplication(models.Model):
    """A citizen's enrolment in a programme, at most one per pair."""
    STATUS_CHOICES = [('approved', 'approved'), ('completed', 'completed')]

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name='applications')
    citizen = models.ForeignKey(Citizen, on_delete=models.CASCADE, related_name='program_applications')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='program_applications')
    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField()
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    mobile_number = models.CharField(max_length=15)
    email = models.EmailField(blank=True)
    street = models.CharField(max_length=255, blank=True)
    area = models.CharField(max_length=255, blank=True)
    ward = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6, blank=True)
    blood_group = models.CharField(max_length=10, blank=True)
    medical_history = models.TextField(blank=True)
    allergies = models.TextField(blank=True)
    current_medications = models.TextField(blank=True)
    previous_vaccinations = models.TextField(blank=True)
    preferred_center = models.CharField(max_length=255, blank=True)
    preferred_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='approved', db_index=True)
    application_date = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['program', 'citizen'], name='unique_program_application'),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} -> {self.program_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]
