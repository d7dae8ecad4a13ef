from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from clinical.permissions import IsClinician, IsStaffMember
from clinical.serializers.history import AddAllergySerializer, AddIllnessSerializer
from clinical.services import history


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinician])
def medical_history(request, patient_id: int):
    return Response({'ok': True, 'data': history.medical_history(patient_id)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinician])
def add_illness(request, patient_id: int):
    s = AddIllnessSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    history.add_illness(
        patient_id=patient_id,
        illness_code=s.validated_data['illnessCode'],
        diagnosed_date=s.validated_data.get('diagnosedDate'),
    )
    return Response({'ok': True, 'message': 'Illness added to patient history.'}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinician])
def add_allergy(request, patient_id: int):
    s = AddAllergySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    history.add_allergy(patient_id=patient_id, allergy_code=s.validated_data['allergyCode'])
    return Response({'ok': True, 'message': 'Allergy added to patient history.'}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def catalog(request, kind: str):
    return Response({'ok': True, 'data': history.list_catalog(kind)})
