from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.permissions import IsStaffMember
from clinical.serializers.inpatients import RoomListQuerySerializer
from clinical.services import rooms


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def list_rooms(request):
    q = RoomListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': rooms.list_rooms(occupied=q.validated_data.get('isOccupied'))})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def available_rooms(request):
    return Response({'ok': True, 'data': rooms.available_rooms()})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def room_detail(request, room_id: int):
    return Response({'ok': True, 'data': rooms.room_detail(room_id)})
