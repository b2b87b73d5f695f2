"""
Citizen portal.

Ward targeting and feature gating come from the Citizen record on every
request; nothing about the profile is cached in the session.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, TemplateHTMLRenderer
from rest_framework.response import Response

from ..models import Appointment, Doctor
from ..permissions import IsCitizenRole, RequiresCompletedProfile
from ..serializers.citizen import (
    AppointmentSerializer,
    HospitalSearchSerializer,
    NotificationDeleteSerializer,
    NotificationReadSerializer,
    ProfileSerializer,
    ProgramApplicationSerializer,
)
from ..services.appointments import book_appointment, cancel_appointment, format_appointment
from ..services.citizens import delete_profile, format_citizen, get_citizen, save_profile
from ..services.dashboards import citizen_dashboard
from ..services.hospitals import format_hospital, get_hospital, hospital_detail, search_hospitals
from ..services.notifications import delete_for_user, format_notification, mark_read, visible_notifications
from ..services.patients import format_doctor
from ..services.programs import active_programs, apply_to_program, format_program
from ..services.rollups import ward_overview

CITIZEN_PERMISSIONS = [IsAuthenticated, IsCitizenRole]


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
@renderer_classes([JSONRenderer, TemplateHTMLRenderer])
def dashboard(request):
    data = citizen_dashboard(request.user)
    return Response(data, template_name='health/dashboards/citizen.html')


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes(CITIZEN_PERMISSIONS)
def profile(request):
    if request.method == 'GET':
        citizen = get_citizen(request.user)
        if citizen is None:
            return Response({'success': False, 'error': 'Profile not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response({'success': True, 'citizen': format_citizen(citizen)})
    if request.method == 'DELETE':
        delete_profile(request.user)
        return Response({'success': True, 'message': 'Profile marked as incomplete'})
    s = ProfileSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    citizen = save_profile(request.user, s.validated_data)
    return Response({
        'success': True,
        'message': 'Profile saved successfully!',
        'citizen': {
            'id': citizen.id,
            'fullName': citizen.full_name,
            'profileImage': citizen.profile_image,
            'profileCompleted': citizen.profile_completed,
            'ward': citizen.ward,
        },
    })


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
def hospital_search(request):
    q = HospitalSearchSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    hospitals = search_hospitals(q.validated_data.get('ward') or None, q.validated_data['hasAvailableBeds'])
    return Response([format_hospital(h) for h in hospitals])


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
def ward_stats(request, ward: str):
    overview = ward_overview(ward)
    return Response({
        'hospitals': [format_hospital(h) for h in overview['hospitals']],
        'totalPatients': overview['totalPatients'],
        'totalDoctors': overview['totalDoctors'],
    })


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
def hospital_info(request, pk: int):
    return Response(hospital_detail(get_hospital(pk)))


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
def hospital_doctors(request, pk: int):
    hospital = get_hospital(pk)
    qs = Doctor.objects.filter(hospital=hospital, is_available=True).order_by('name')
    return Response([format_doctor(d) for d in qs])


@api_view(['POST'])
@permission_classes(CITIZEN_PERMISSIONS)
def appointment_book(request):
    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = book_appointment(request.user, s.validated_data, citizen=get_citizen(request.user))
    return Response({'success': True, 'appointment': format_appointment(appointment)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
def my_appointments(request):
    qs = (
        Appointment.objects.filter(citizen=request.user)
        .select_related('hospital', 'doctor')
        .order_by('-appointment_date')
    )
    return Response([format_appointment(a) for a in qs])


@api_view(['POST'])
@permission_classes(CITIZEN_PERMISSIONS)
def appointment_cancel(request, pk: int):
    cancel_appointment(request.user, pk)
    return Response({'success': True})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes(CITIZEN_PERMISSIONS)
def notifications(request):
    """List, mark read (``PUT``) or dismiss (``DELETE``) notifications.

    ``PUT`` with ``id`` marks one notification, without it marks every
    visible one.  ``DELETE`` only works on notifications addressed to
    specific users; broadcasts answer 400.
    """
    if request.method == 'GET':
        items = [format_notification(n) for n in visible_notifications(request.user)]
        unread = sum(1 for n in items if not n['isRead'])
        return Response({'success': True, 'notifications': items, 'unreadCount': unread})
    if request.method == 'PUT':
        s = NotificationReadSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        target = None if s.validated_data['markAll'] else s.validated_data.get('id')
        updated = mark_read(request.user, target)
        return Response({'success': True, 'updated': updated})
    s = NotificationDeleteSerializer(data=request.data or request.query_params)
    s.is_valid(raise_exception=True)
    removed = delete_for_user(request.user, s.validated_data['id'])
    return Response({'success': True, 'deleted': removed})


@api_view(['GET'])
@permission_classes(CITIZEN_PERMISSIONS)
def programs(request):
    return Response({'success': True, 'programs': [format_program(p) for p in active_programs()]})


@api_view(['POST'])
@permission_classes(CITIZEN_PERMISSIONS + [RequiresCompletedProfile])
def program_apply(request, pk: int):
    s = ProgramApplicationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    application = apply_to_program(request.user, pk, s.validated_data)
    return Response(
        {'success': True, 'message': 'Application submitted successfully', 'applicationId': application.id},
        status=status.HTTP_201_CREATED,
    )
