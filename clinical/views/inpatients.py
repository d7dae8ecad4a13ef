"""
In-patient views: admit, discharge and the doctor/nurse slots.

Workflow errors propagate as ``ClinicalError`` and are rendered by
``clinical.exceptions.api_exception_handler``.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from clinical.permissions import ClinicianOrReadOnly, IsClinician, IsStaffMember
from clinical.serializers.inpatients import (
    AdmitSerializer,
    AssignStaffSerializer,
    DischargeSerializer,
    RemoveStaffSerializer,
)
from clinical.services import admissions, assignments


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ClinicianOrReadOnly])
def inpatients(request):
    if request.method == 'GET':
        return Response({'ok': True, 'data': admissions.list_active_admissions()})
    s = AdmitSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    a = admissions.admit(
        patient_id=d['patientId'],
        room_id=d['roomId'],
        admission_date=d['admissionDate'],
        doctor_id=d.get('assignedDoctorId'),
        nurse_id=d.get('assignedNurseId'),
    )
    return Response({'ok': True, 'inpatientId': a.id}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def inpatient_detail(request, admission_id: int):
    return Response({'ok': True, 'data': admissions.admission_detail(admission_id)})


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsClinician])
def inpatient_discharge(request, admission_id: int):
    s = DischargeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    a = admissions.discharge(admission_id=admission_id, discharge_date=s.validated_data['dischargeDate'])
    return Response({'ok': True, 'inpatientId': a.id, 'dischargeDate': a.discharge_date.isoformat()})


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsClinician])
def inpatient_assign_staff(request, admission_id: int):
    s = AssignStaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    a = assignments.assign(
        admission_id=admission_id,
        staff_id=s.validated_data['staffId'],
        role=s.validated_data['role'],
    )
    return Response({'ok': True, 'data': admissions.admission_detail(a.id)})


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsClinician])
def inpatient_remove_staff(request, admission_id: int):
    s = RemoveStaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    a = assignments.remove(admission_id=admission_id, role=s.validated_data['role'])
    return Response({'ok': True, 'data': admissions.admission_detail(a.id)})
