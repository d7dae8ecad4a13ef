"""
Error types raised by the clinical workflows and the DRF handler that
renders them.

Every workflow failure is a :class:`ClinicalError` with one of four
kinds.  The kind decides the HTTP status; the ``code`` names the rule
that failed and ``context`` carries the ids and values needed to
explain it (e.g. the job type found versus the role required).
"""
from __future__ import annotations

from typing import Any

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

NOT_FOUND = 'not_found'
CONFLICT = 'conflict'
INVALID = 'invalid'
NO_CHANGES = 'no_changes'

KIND_STATUS = {
    NOT_FOUND: 404,
    CONFLICT: 409,
    INVALID: 400,
    NO_CHANGES: 400,
}


class ClinicalError(Exception):
    """Base class for all workflow errors."""
    kind = INVALID
    code = 'clinical_error'
    default_message = 'Clinical workflow error'

    def __init__(self, message: str | None = None, **context: Any):
        self.message = message or self.default_message
        self.context = {k: v for k, v in context.items() if v is not None}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {'code': self.code, 'kind': self.kind, 'message': self.message, **self.context}


# ---------------------------------------------------------------------------
# not_found
# ---------------------------------------------------------------------------

class NotFoundError(ClinicalError):
    kind = NOT_FOUND
    code = 'not_found'
    default_message = 'Not found.'


class PatientNotFound(NotFoundError):
    code = 'patient_not_found'
    default_message = 'Patient not found.'


class StaffNotFound(NotFoundError):
    code = 'staff_not_found'
    default_message = 'Staff member not found.'


class AdmissionNotFound(NotFoundError):
    code = 'admission_not_found'
    default_message = 'In-patient record not found.'


class NotAdmitted(NotFoundError):
    """No *active* admission with the given id (absent or already discharged)."""
    code = 'not_admitted'
    default_message = 'Active in-patient record not found or already discharged.'


class SurgeryTypeNotFound(NotFoundError):
    code = 'surgery_type_not_found'
    default_message = 'Surgery type not found.'


class CatalogEntryNotFound(NotFoundError):
    code = 'catalog_entry_not_found'
    default_message = 'Catalog entry not found.'


class BookingNotFound(NotFoundError):
    code = 'booking_not_found'
    default_message = 'Booking not found.'


class RoomNotFound(NotFoundError):
    code = 'room_not_found'
    default_message = 'Room not found.'


# ---------------------------------------------------------------------------
# conflict
# ---------------------------------------------------------------------------

class ConflictError(ClinicalError):
    kind = CONFLICT
    code = 'conflict'
    default_message = 'Conflicting state.'


class AlreadyAdmitted(ConflictError):
    code = 'already_admitted'
    default_message = 'Patient is already admitted.'


class RoomUnavailable(ConflictError):
    code = 'room_unavailable'
    default_message = 'Room not found or is occupied.'


class DuplicateEntry(ConflictError):
    code = 'duplicate_entry'
    default_message = 'Entry already recorded for this patient.'


class SlotOccupied(ConflictError):
    """The doctor/nurse slot already holds another staff member."""
    code = 'slot_occupied'
    default_message = 'Assignment slot is already filled; remove the current assignee first.'


# ---------------------------------------------------------------------------
# invalid
# ---------------------------------------------------------------------------

class InvalidError(ClinicalError):
    kind = INVALID
    code = 'invalid'
    default_message = 'Invalid input.'


class InvalidInput(InvalidError):
    code = 'invalid_input'


class InvalidDoctor(InvalidError):
    code = 'invalid_doctor'
    default_message = 'Invalid or non-doctor/surgeon staff ID for assigned doctor.'


class InvalidNurse(InvalidError):
    code = 'invalid_nurse'
    default_message = 'Invalid or non-nurse staff ID for assigned nurse.'


class InvalidProvider(InvalidError):
    code = 'invalid_provider'
    default_message = 'Staff member cannot perform this booking.'


class RoleMismatch(InvalidError):
    code = 'role_mismatch'
    default_message = 'Staff member does not hold the required role.'


# ---------------------------------------------------------------------------
# no_changes
# ---------------------------------------------------------------------------

class NoChanges(ClinicalError):
    kind = NO_CHANGES
    code = 'no_changes'
    default_message = 'No fields provided for update.'


def api_exception_handler(exc, context):
    if isinstance(exc, ClinicalError):
        return Response({'ok': False, 'error': exc.to_dict()}, status=KIND_STATUS[exc.kind])
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code)
