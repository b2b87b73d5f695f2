"""
Django admin registrations.

Mounted at ``/django-admin/`` so the ``/admin/`` prefix stays with the
city administrator portal.
"""

from django.contrib import admin

from .models import (
    Appointment,
    AuditEvent,
    Citizen,
    Doctor,
    Equipment,
    Hospital,
    Medicine,
    Notification,
    NotificationRead,
    Outbreak,
    Patient,
    PatientProfile,
    Program,
    ProgramApplication,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'role', 'hospital', 'is_staff')
    list_filter = ('role',)
    search_fields = ('username', 'email', 'first_name')


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('name', 'ward', 'zone', 'total_beds', 'available_beds')
    list_filter = ('zone',)
    search_fields = ('name', 'ward')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'hospital', 'specialization', 'is_available')
    list_filter = ('is_available',)
    search_fields = ('name', 'specialization')


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ('name', 'hospital', 'quantity', 'status')
    list_filter = ('status',)


@admin.register(Equipment)
class EquipmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'hospital', 'quantity', 'condition')
    list_filter = ('condition',)


@admin.register(PatientProfile)
class PatientProfileAdmin(admin.ModelAdmin):
    list_display = ('name', 'hospital', 'phone', 'age', 'gender')
    search_fields = ('name', 'phone')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'hospital', 'patient_type', 'disease', 'admission_date', 'discharge_date')
    list_filter = ('patient_type', 'bed_type')
    search_fields = ('name', 'phone', 'disease')


@admin.register(Citizen)
class CitizenAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'ward', 'zone', 'profile_completed')
    list_filter = ('profile_completed', 'zone')
    search_fields = ('full_name', 'phone')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('patient_name', 'hospital', 'appointment_date', 'disease_type', 'severity', 'status')
    list_filter = ('status', 'disease_type', 'severity')


@admin.register(Outbreak)
class OutbreakAdmin(admin.ModelAdmin):
    list_display = ('disease', 'ward', 'cases', 'severity', 'status', 'reported_date')
    list_filter = ('status', 'severity', 'disease')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'priority', 'target_audience', 'scheduled_for')
    list_filter = ('type', 'priority', 'target_audience')


@admin.register(NotificationRead)
class NotificationReadAdmin(admin.ModelAdmin):
    list_display = ('notification', 'user', 'read_at')


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'start_date', 'end_date', 'enrolled', 'status')
    list_filter = ('status', 'type')


@admin.register(ProgramApplication)
class ProgramApplicationAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'program', 'ward', 'status', 'application_date')
    list_filter = ('status',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
