from rest_framework import serializers

ROLE_CHOICES = ['Doctor', 'Nurse']

class AdmitSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    roomId = serializers.IntegerField(min_value=1)
    admissionDate = serializers.DateField()
    assignedDoctorId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    assignedNurseId = serializers.IntegerField(min_value=1, required=False, allow_null=True)

class DischargeSerializer(serializers.Serializer):
    dischargeDate = serializers.DateField()

class AssignStaffSerializer(serializers.Serializer):
    staffId = serializers.IntegerField(min_value=1)
    role = serializers.ChoiceField(choices=ROLE_CHOICES)

class RemoveStaffSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=ROLE_CHOICES)

class RoomListQuerySerializer(serializers.Serializer):
    isOccupied = serializers.BooleanField(required=False, allow_null=True, default=None)
