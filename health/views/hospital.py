"""
Hospital portal.

Every view is scoped to ``request.hospital``, the hospital bound to the
signed-in staff account (set by ``HospitalContextMiddleware``).  Objects
belonging to another hospital answer 404.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, TemplateHTMLRenderer
from rest_framework.response import Response

from ..models import Appointment, Doctor, Equipment, Medicine
from ..permissions import IsHospitalRole
from ..serializers.auth import BedUpdateSerializer
from ..serializers.hospital import (
    AppointmentStatusSerializer,
    DoctorSerializer,
    EquipmentSerializer,
    LookupQuerySerializer,
    MedicineSerializer,
    PrescriptionSerializer,
    VisitSerializer,
)
from ..services.appointments import format_appointment, update_appointment_status
from ..services.audit import log_action
from ..services.dashboards import hospital_analytics, hospital_dashboard
from ..services.hospitals import (
    format_equipment,
    format_hospital,
    format_medicine,
    save_equipment,
    save_medicine,
    update_beds,
)
from ..services.patients import (
    discharge_patient,
    doctor_workload,
    format_doctor,
    format_visit,
    lookup_profiles,
    profile_history,
    register_visit,
    save_prescription,
)

HOSPITAL_PERMISSIONS = [IsAuthenticated, IsHospitalRole]


def _owned(model, pk, hospital, label):
    obj = model.objects.filter(id=pk, hospital=hospital).first()
    if obj is None:
        raise NotFound(f'{label} not found')
    return obj


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
@renderer_classes([JSONRenderer, TemplateHTMLRenderer])
def dashboard(request):
    data = hospital_dashboard(request.hospital)
    return Response(data, template_name='health/dashboards/hospital.html')


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
def analytics(request):
    return Response(hospital_analytics(request.hospital))


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def patient_register(request):
    """Register a visit.

    The visit joins an existing profile when ``profileId`` matches, then
    when ``phone`` matches a profile of this hospital; otherwise a new
    profile is created from the submitted demographics.
    """
    s = VisitSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    visit = register_visit(
        request.hospital,
        user=request.user,
        profile_id=v.get('profileId'),
        name=v.get('name'),
        age=v.get('age'),
        gender=v.get('gender', ''),
        phone=v.get('phone', ''),
        patient_type=v['patientType'],
        disease=v.get('disease', ''),
        doctor_id=v.get('doctorId'),
        bed_type=v.get('bedType', ''),
        admission_date=v.get('admissionDate'),
    )
    return Response({'success': True, 'data': format_visit(visit)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
def patient_lookup(request):
    q = LookupQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(lookup_profiles(request.hospital, q.validated_data['q']))


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
def patient_history(request, profile_id: int):
    return Response(profile_history(request.hospital, profile_id))


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def patient_discharge(request, pk: int):
    discharged = discharge_patient(pk, request.hospital, user=request.user)
    if not discharged:
        return Response({'success': True, 'discharged': False, 'message': 'Patient already discharged'})
    return Response({'success': True, 'discharged': True})


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def patient_prescription(request, pk: int):
    s = PrescriptionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    lines = save_prescription(pk, request.hospital, s.validated_data['medicines'], user=request.user)
    return Response({'success': True, 'lines': len(lines)})


@api_view(['GET', 'POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def doctors(request):
    hospital = request.hospital
    if request.method == 'GET':
        qs = Doctor.objects.filter(hospital=hospital).order_by('name')
        return Response([format_doctor(d) for d in qs])
    s = DoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    doctor = Doctor.objects.create(
        hospital=hospital,
        name=v['name'],
        specialization=v.get('specialization', ''),
        opd_timings=v.get('opdTimings', ''),
        phone=v.get('phone', ''),
        experience_years=v.get('experienceYears', 0),
    )
    return Response({'success': True, 'data': format_doctor(doctor)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def doctor_toggle(request, pk: int):
    doctor = _owned(Doctor, pk, request.hospital, 'Doctor')
    doctor.is_available = not doctor.is_available
    doctor.save(update_fields=['is_available'])
    return Response({'success': True, 'isAvailable': doctor.is_available})


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
def doctors_workload(request):
    return Response(doctor_workload(request.hospital))


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
def resources(request):
    hospital = request.hospital
    return Response({
        'hospital': format_hospital(hospital),
        'equipment': [format_equipment(e) for e in Equipment.objects.filter(hospital=hospital).order_by('name')],
        'medicines': [format_medicine(m) for m in Medicine.objects.filter(hospital=hospital).order_by('name')],
    })


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def equipment_create(request):
    s = EquipmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    equipment = save_equipment(request.hospital, s.validated_data)
    return Response({'success': True, 'data': format_equipment(equipment)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def equipment_edit(request, pk: int):
    equipment = _owned(Equipment, pk, request.hospital, 'Equipment')
    s = EquipmentSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    equipment = save_equipment(request.hospital, s.validated_data, equipment)
    return Response({'success': True, 'data': format_equipment(equipment)})


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def equipment_delete(request, pk: int):
    equipment = _owned(Equipment, pk, request.hospital, 'Equipment')
    equipment.delete()
    log_action(user=request.user, action='equipment_delete', object_type='equipment', object_id=pk, detail={})
    return Response({'success': True})


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def medicine_create(request):
    s = MedicineSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    medicine = save_medicine(request.hospital, s.validated_data)
    return Response({'success': True, 'data': format_medicine(medicine)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def medicine_edit(request, pk: int):
    medicine = _owned(Medicine, pk, request.hospital, 'Medicine')
    s = MedicineSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    medicine = save_medicine(request.hospital, s.validated_data, medicine)
    return Response({'success': True, 'data': format_medicine(medicine)})


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def medicine_delete(request, pk: int):
    medicine = _owned(Medicine, pk, request.hospital, 'Medicine')
    medicine.delete()
    log_action(user=request.user, action='medicine_delete', object_type='medicine', object_id=pk, detail={})
    return Response({'success': True})


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def beds_update(request):
    s = BedUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hospital = update_beds(request.hospital, s.validated_data['changes'], user=request.user)
    return Response({'success': True, 'beds': hospital.beds()})


@api_view(['POST'])
@permission_classes(HOSPITAL_PERMISSIONS)
def appointment_status(request, pk: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = update_appointment_status(
        request.hospital, pk, s.validated_data['status'], s.validated_data.get('notes', ''), user=request.user,
    )
    return Response({'success': True, 'data': format_appointment(appointment)})


@api_view(['GET'])
@permission_classes(HOSPITAL_PERMISSIONS)
def appointments_json(request):
    qs = (
        Appointment.objects.filter(hospital=request.hospital)
        .select_related('hospital', 'doctor')
        .order_by('-appointment_date')
    )
    return Response([format_appointment(a) for a in qs])
