"""Room ledger: the occupancy bit of every bed.

``reserve`` is a conditional update, so of two concurrent callers only
the one whose UPDATE flips the bit wins; the other sees zero changed
rows and gets :class:`RoomUnavailable`.
"""
import logging
from typing import Optional

from clinical.exceptions import RoomNotFound, RoomUnavailable
from clinical.models import Room
from clinical.services import directory

logger = logging.getLogger(__name__)


def reserve(room_id) -> None:
    changed = Room.objects.filter(id=room_id, is_occupied=False).update(is_occupied=True)
    if not changed:
        logger.warning('room reserve rejected room_id=%s', room_id)
        raise RoomUnavailable(room_id=room_id)
    logger.info('room reserved room_id=%s', room_id)


def release(room_id) -> None:
    # releasing a free (or vanished) room is a no-op
    changed = Room.objects.filter(id=room_id, is_occupied=True).update(is_occupied=False)
    logger.info('room released room_id=%s changed=%s', room_id, changed)


def format_room(room: Room) -> dict:
    return {
        'id': room.id,
        'nursingUnit': room.nursing_unit,
        'wing': room.wing,
        'roomNumber': room.room_number,
        'bedLabel': room.bed_label,
        'isOccupied': room.is_occupied,
    }


def list_rooms(occupied: Optional[bool] = None) -> list[dict]:
    qs = Room.objects.all()
    if occupied is not None:
        qs = qs.filter(is_occupied=occupied)
    qs = qs.order_by('nursing_unit', 'wing', 'room_number', 'bed_label')
    return [format_room(r) for r in qs]


def available_rooms() -> list[dict]:
    return list_rooms(occupied=False)


def room_detail(room_id) -> dict:
    room = directory.get('room', room_id)
    if not room:
        raise RoomNotFound(room_id=room_id)
    return format_room(room)
