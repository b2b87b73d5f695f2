"""
City administrator portal.

The dashboard renders HTML for browsers and JSON for API clients; the
``/admin/api/*`` endpoints always answer JSON.  Only users with the
``admin`` role may reach these views.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, TemplateHTMLRenderer
from rest_framework.response import Response

from ..models import Hospital, Program, ProgramApplication
from ..permissions import IsAdminRole
from ..serializers.admin import (
    DiseaseTrendsQuerySerializer,
    EmergencyAlertSerializer,
    OutbreakSerializer,
    ProgramSerializer,
)
from ..services.dashboards import admin_dashboard
from ..services.filters import SurveillanceFilters
from ..services.hospitals import format_hospital
from ..services.notifications import broadcast_emergency_alert
from ..services.outbreaks import create_outbreak, list_outbreaks, update_outbreak
from ..services.programs import create_program, delete_program, format_application, format_program
from ..services.rollups import disease_time_series, format_outbreak, resource_allocation_suggestions, ward_map_data


def _section(result):
    """JSON body for a single aggregator, flagging a degraded answer."""
    body = {'success': not result.degraded, 'data': result.value}
    if result.degraded:
        body['degraded'] = True
        body['error'] = 'Data temporarily unavailable'
    return body


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
@renderer_classes([JSONRenderer, TemplateHTMLRenderer])
def dashboard(request):
    """Surveillance dashboard; query params narrow the appointment analytics.

    Accepted filters: ``disease``, ``zone``, ``ward``, ``gender``,
    ``startDate``, ``endDate`` and ``ageGroup``.
    """
    filters = SurveillanceFilters.from_params(request.query_params)
    data = admin_dashboard(filters)
    return Response(data, template_name='health/dashboards/admin.html')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def map_data(request):
    result = ward_map_data()
    return Response(_section(result), status=500 if result.degraded else 200)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def disease_trends(request):
    q = DiseaseTrendsQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    result = disease_time_series(q.validated_data.get('disease') or None, q.validated_data['days'])
    return Response(_section(result), status=500 if result.degraded else 200)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def resource_suggestions(request):
    result = resource_allocation_suggestions()
    return Response(_section(result), status=500 if result.degraded else 200)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def emergency_alert(request):
    s = EmergencyAlertSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    notification = broadcast_emergency_alert(
        sender=request.user,
        title=v['title'],
        message=v['message'],
        priority=v['priority'],
        target_audience=v['targetAudience'],
        ward=v.get('ward', ''),
        zone=v.get('zone', ''),
    )
    return Response({'success': True, 'message': 'Emergency alert broadcast successfully', 'id': notification.id})

emergency_alert.cls.throttle_scope = 'emergency'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def outbreaks(request):
    if request.method == 'GET':
        qs = list_outbreaks(status=request.query_params.get('status'), ward=request.query_params.get('ward'))
        return Response({'success': True, 'data': [format_outbreak(o) for o in qs]})
    s = OutbreakSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    outbreak = create_outbreak(s.model_fields(), user=request.user)
    return Response({'success': True, 'data': format_outbreak(outbreak)}, status=status.HTTP_201_CREATED)


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def outbreak_update(request, pk: int):
    s = OutbreakSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    outbreak = update_outbreak(pk, s.model_fields(), user=request.user)
    return Response({'success': True, 'data': format_outbreak(outbreak)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def programs(request):
    if request.method == 'GET':
        qs = Program.objects.all().order_by('-created_at')
        return Response({'success': True, 'data': [format_program(p) for p in qs]})
    s = ProgramSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    program = create_program(s.model_fields(), user=request.user)
    return Response({'success': True, 'data': format_program(program)}, status=status.HTTP_201_CREATED)


@api_view(['DELETE', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def program_delete(request, pk: int):
    delete_program(pk, user=request.user)
    return Response({'success': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def program_applications(request, pk: int):
    qs = ProgramApplication.objects.filter(program_id=pk).select_related('program').order_by('-application_date')
    return Response({'success': True, 'data': [format_application(a) for a in qs]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def hospitals(request):
    qs = Hospital.objects.all().order_by('ward', 'name')
    return Response({'success': True, 'data': [format_hospital(h) for h in qs]})
