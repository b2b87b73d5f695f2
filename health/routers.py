"""
URL mappings for the public health portal.

Routes are grouped by role.  Trailing slashes are omitted (``APPEND_SLASH``
is off) so page routes and JSON endpoints share one style.
"""
from django.urls import include, path

from .auth_views import dashboard_redirect, jwt_refresh_view, login_view, logout_view, register_view
from .views import admin, citizen, hospital

auth_patterns = [
    path('login', login_view, name='login'),
    path('logout', logout_view, name='logout'),
    path('register', register_view, name='register'),
    path('dashboard', dashboard_redirect, name='dashboard'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt-refresh'),
]

admin_patterns = [
    path('admin/dashboard', admin.dashboard, name='admin-dashboard'),
    path('admin/api/map-data', admin.map_data, name='admin-map-data'),
    path('admin/api/disease-trends', admin.disease_trends, name='admin-disease-trends'),
    path('admin/api/resource-suggestions', admin.resource_suggestions, name='admin-resource-suggestions'),
    path('admin/api/emergency-alert', admin.emergency_alert, name='admin-emergency-alert'),
    path('admin/api/outbreaks', admin.outbreaks, name='admin-outbreaks'),
    path('admin/api/outbreaks/<int:pk>', admin.outbreak_update, name='admin-outbreak-update'),
    path('admin/api/programs', admin.programs, name='admin-programs'),
    path('admin/api/programs/<int:pk>/delete', admin.program_delete, name='admin-program-delete'),
    path('admin/api/programs/<int:pk>/applications', admin.program_applications, name='admin-program-applications'),
    path('admin/api/hospitals', admin.hospitals, name='admin-hospitals'),
]

hospital_patterns = [
    path('hospital/dashboard', hospital.dashboard, name='hospital-dashboard'),
    path('hospital/analytics', hospital.analytics, name='hospital-analytics'),
    path('hospital/patients', hospital.patient_register, name='hospital-patient-register'),
    path('hospital/patients/lookup', hospital.patient_lookup, name='hospital-patient-lookup'),
    path('hospital/patients/profile/<int:profile_id>', hospital.patient_history, name='hospital-patient-history'),
    path('hospital/patients/<int:pk>/discharge', hospital.patient_discharge, name='hospital-patient-discharge'),
    path('hospital/patients/<int:pk>/prescription', hospital.patient_prescription,
         name='hospital-patient-prescription'),
    path('hospital/doctors', hospital.doctors, name='hospital-doctors'),
    path('hospital/doctors/workload', hospital.doctors_workload, name='hospital-doctors-workload'),
    path('hospital/doctors/<int:pk>/toggle', hospital.doctor_toggle, name='hospital-doctor-toggle'),
    path('hospital/resources', hospital.resources, name='hospital-resources'),
    path('hospital/equipment', hospital.equipment_create, name='hospital-equipment-create'),
    path('hospital/equipment/<int:pk>/edit', hospital.equipment_edit, name='hospital-equipment-edit'),
    path('hospital/equipment/<int:pk>/delete', hospital.equipment_delete, name='hospital-equipment-delete'),
    path('hospital/medicine', hospital.medicine_create, name='hospital-medicine-create'),
    path('hospital/medicine/<int:pk>/edit', hospital.medicine_edit, name='hospital-medicine-edit'),
    path('hospital/medicine/<int:pk>/delete', hospital.medicine_delete, name='hospital-medicine-delete'),
    path('hospital/beds/update', hospital.beds_update, name='hospital-beds-update'),
    path('hospital/appointments/json', hospital.appointments_json, name='hospital-appointments'),
    path('hospital/appointments/<int:pk>/status', hospital.appointment_status, name='hospital-appointment-status'),
]

citizen_patterns = [
    path('citizen/dashboard', citizen.dashboard, name='citizen-dashboard'),
    path('citizen/profile', citizen.profile, name='citizen-profile'),
    path('citizen/search', citizen.hospital_search, name='citizen-hospital-search'),
    path('citizen/ward/<str:ward>', citizen.ward_stats, name='citizen-ward-stats'),
    path('citizen/hospital/<int:pk>', citizen.hospital_info, name='citizen-hospital-info'),
    path('citizen/hospital/<int:pk>/doctors', citizen.hospital_doctors, name='citizen-hospital-doctors'),
    path('citizen/appointment', citizen.appointment_book, name='citizen-appointment-book'),
    path('citizen/my-appointments', citizen.my_appointments, name='citizen-my-appointments'),
    path('citizen/appointment/<int:pk>/cancel', citizen.appointment_cancel, name='citizen-appointment-cancel'),
    path('citizen/notifications', citizen.notifications, name='citizen-notifications'),
    path('citizen/programs', citizen.programs, name='citizen-programs'),
    path('citizen/programs/<int:pk>/apply', citizen.program_apply, name='citizen-program-apply'),
]

urlpatterns = [
    # Prometheus metrics endpoint
    path('metrics', include('django_prometheus.urls')),
    *auth_patterns,
    *admin_patterns,
    *hospital_patterns,
    *citizen_patterns,
]
