import bleach
from rest_framework import serializers

from clinical.models import Appointment, Surgery

APPOINTMENT_STATUSES = [s for s, _ in Appointment.STATUS_CHOICES]
SURGERY_STATUSES = [s for s, _ in Surgery.STATUS_CHOICES]


def _clean_text(v):
    return bleach.clean((v or '').strip(), strip=True)


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    doctorId = serializers.IntegerField(min_value=1)
    appointmentDate = serializers.DateTimeField()
    reason = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUSES, required=False)

    def validate_reason(self, v):
        return _clean_text(v)


class AppointmentUpdateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    doctorId = serializers.IntegerField(min_value=1, required=False)
    appointmentDate = serializers.DateTimeField(required=False)
    reason = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUSES, required=False)

    def validate_reason(self, v):
        return _clean_text(v)

    def to_changes(self) -> dict:
        d = self.validated_data
        names = {
            'patientId': 'patient_id',
            'doctorId': 'provider_id',
            'appointmentDate': 'scheduled_at',
            'reason': 'reason',
            'status': 'status',
        }
        return {names[k]: v for k, v in d.items() if k in names}


class AppointmentListQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    doctorId = serializers.IntegerField(min_value=1, required=False)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUSES, required=False)


class SurgeryCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    surgeonId = serializers.IntegerField(min_value=1)
    surgeryTypeId = serializers.IntegerField(min_value=1)
    scheduledDateTime = serializers.DateTimeField()
    operationTheatre = serializers.CharField(max_length=32, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=SURGERY_STATUSES, required=False)

    def validate_operationTheatre(self, v):
        return _clean_text(v)


class SurgeryUpdateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    surgeonId = serializers.IntegerField(min_value=1, required=False)
    surgeryTypeId = serializers.IntegerField(min_value=1, required=False)
    scheduledDateTime = serializers.DateTimeField(required=False)
    operationTheatre = serializers.CharField(max_length=32, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=SURGERY_STATUSES, required=False)

    def validate_operationTheatre(self, v):
        return _clean_text(v)

    def to_changes(self) -> dict:
        d = self.validated_data
        names = {
            'patientId': 'patient_id',
            'surgeonId': 'provider_id',
            'surgeryTypeId': 'subject_id',
            'scheduledDateTime': 'scheduled_at',
            'operationTheatre': 'operation_theatre',
            'status': 'status',
        }
        return {names[k]: v for k, v in d.items() if k in names}


class SurgeryListQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    surgeonId = serializers.IntegerField(min_value=1, required=False)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=SURGERY_STATUSES, required=False)
    operationTheatre = serializers.CharField(max_length=32, required=False)


class RoomDayQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
