"""
Appointment and surgery views.

Both resources share the booking service; the serializers translate the
camelCase request fields into its arguments.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from clinical.permissions import AdminToDelete, ClinicianOrReadOnly, IsClinician, IsStaffMember
from clinical.serializers.bookings import (
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
    AppointmentUpdateSerializer,
    RoomDayQuerySerializer,
    SurgeryCreateSerializer,
    SurgeryListQuerySerializer,
    SurgeryUpdateSerializer,
)
from clinical.services import bookings, directory
from clinical.services.bookings import APPOINTMENT, SURGERY, BookingChanges


def _update(kind, serializer_cls, request, booking_id):
    s = serializer_cls(data=request.data)
    s.is_valid(raise_exception=True)
    booking = bookings.update(kind, booking_id, BookingChanges.from_mapping(s.to_changes()))
    return Response({'ok': True, 'data': bookings.booking_detail(kind, booking.id)})


# ---------------------------------------------------------------------------
# appointments
# ---------------------------------------------------------------------------

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ClinicianOrReadOnly])
def appointments(request):
    if request.method == 'GET':
        q = AppointmentListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        d = q.validated_data
        data = bookings.query(
            APPOINTMENT,
            patient_id=d.get('patientId'),
            provider_id=d.get('doctorId'),
            day=d.get('date'),
            status=d.get('status'),
        )
        return Response({'ok': True, 'data': data})
    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    a = bookings.book_appointment(
        patient_id=d['patientId'],
        doctor_id=d['doctorId'],
        appointment_date=d['appointmentDate'],
        reason=d.get('reason', ''),
        status=d.get('status'),
    )
    return Response({'ok': True, 'appointmentId': a.id}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, ClinicianOrReadOnly, AdminToDelete])
def appointment_detail(request, booking_id: int):
    if request.method == 'GET':
        return Response({'ok': True, 'data': bookings.booking_detail(APPOINTMENT, booking_id)})
    if request.method == 'DELETE':
        bookings.delete(APPOINTMENT, booking_id)
        return Response({'ok': True})
    return _update(APPOINTMENT, AppointmentUpdateSerializer, request, booking_id)


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsClinician])
def appointment_cancel(request, booking_id: int):
    a = bookings.cancel(APPOINTMENT, booking_id)
    return Response({'ok': True, 'appointmentId': a.id, 'status': a.status})


# ---------------------------------------------------------------------------
# surgeries
# ---------------------------------------------------------------------------

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ClinicianOrReadOnly])
def surgeries(request):
    if request.method == 'GET':
        q = SurgeryListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        d = q.validated_data
        data = bookings.query(
            SURGERY,
            patient_id=d.get('patientId'),
            provider_id=d.get('surgeonId'),
            day=d.get('date'),
            status=d.get('status'),
            operation_theatre=d.get('operationTheatre'),
        )
        return Response({'ok': True, 'data': data})
    s = SurgeryCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    sg = bookings.book_surgery(
        patient_id=d['patientId'],
        surgeon_id=d['surgeonId'],
        surgery_type_id=d['surgeryTypeId'],
        scheduled_at=d['scheduledDateTime'],
        operation_theatre=d.get('operationTheatre', ''),
        status=d.get('status'),
    )
    return Response({'ok': True, 'surgeryId': sg.id}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, ClinicianOrReadOnly, AdminToDelete])
def surgery_detail(request, booking_id: int):
    if request.method == 'GET':
        return Response({'ok': True, 'data': bookings.booking_detail(SURGERY, booking_id)})
    if request.method == 'DELETE':
        bookings.delete(SURGERY, booking_id)
        return Response({'ok': True})
    return _update(SURGERY, SurgeryUpdateSerializer, request, booking_id)


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsClinician])
def surgery_cancel(request, booking_id: int):
    sg = bookings.cancel(SURGERY, booking_id)
    return Response({'ok': True, 'surgeryId': sg.id, 'status': sg.status})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def surgeries_by_room(request, room_id: int):
    q = RoomDayQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': bookings.surgeries_for_room_on(room_id, q.validated_data['date'])})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def surgery_types(request):
    data = [
        {
            'id': t.id,
            'surgeryCode': t.surgery_code,
            'name': t.name,
            'category': t.category,
            'anatomicalLocation': t.anatomical_location,
            'specialNeeds': t.special_needs,
        }
        for t in sorted(directory.find('surgery_type'), key=lambda t: t.surgery_code)
    ]
    return Response({'ok': True, 'data': data})
