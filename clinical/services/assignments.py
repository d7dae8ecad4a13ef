"""Doctor/nurse slots on an active admission."""
import logging

from django.db import transaction

from clinical.exceptions import (
    InvalidInput,
    NotAdmitted,
    RoleMismatch,
    SlotOccupied,
    StaffNotFound,
)
from clinical.models import Admission, Staff
from clinical.services import directory
from clinical.services.admissions import find_active

logger = logging.getLogger(__name__)

ROLE_DOCTOR = 'Doctor'
ROLE_NURSE = 'Nurse'

# role -> (admission field, eligible job types)
ROLE_FIELDS = {
    ROLE_DOCTOR: ('assigned_doctor', Staff.DOCTOR_JOB_TYPES),
    ROLE_NURSE: ('assigned_nurse', Staff.NURSE_JOB_TYPES),
}


def _role_field(role: str):
    try:
        return ROLE_FIELDS[role]
    except KeyError:
        raise InvalidInput(
            f"Invalid role '{role}'. Must be 'Doctor' or 'Nurse'.", field='role', value=role
        ) from None


@transaction.atomic
def assign(*, admission_id, staff_id, role: str) -> Admission:
    """Put ``staff_id`` into the ``role`` slot of an active admission.

    Re-assigning the member already in the slot is a no-op.  A slot held
    by someone else raises :class:`SlotOccupied`; remove first.
    """
    field, job_types = _role_field(role)

    admission = find_active(admission_id, lock=True)
    if admission is None:
        raise NotAdmitted(admission_id=admission_id)

    staff = directory.get('staff', staff_id)
    if staff is None:
        raise StaffNotFound(staff_id=staff_id)
    if staff.job_type not in job_types:
        raise RoleMismatch(
            f'Staff member with ID {staff.id} is not a valid {role}. Job type is {staff.job_type}',
            staff_id=staff.id,
            job_type=staff.job_type,
            required_role=role,
        )

    current_id = getattr(admission, f'{field}_id')
    if current_id == staff.id:
        return admission
    if current_id is not None:
        raise SlotOccupied(admission_id=admission.id, role=role, current_staff_id=current_id)

    changed = Admission.objects.filter(
        id=admission.id, discharge_date__isnull=True, **{f'{field}__isnull': True}
    ).update(**{f'{field}_id': staff.id})
    if not changed:
        # the row is locked above, so only a vanished admission lands here
        raise NotAdmitted(admission_id=admission.id)

    admission.refresh_from_db()
    logger.info(
        'staff assigned admission_id=%s role=%s staff_id=%s', admission.id, role, staff.id
    )
    return admission


@transaction.atomic
def remove(*, admission_id, role: str) -> Admission:
    """Clear the ``role`` slot. Clearing an empty slot succeeds."""
    field, _ = _role_field(role)

    admission = find_active(admission_id, lock=True)
    if admission is None:
        raise NotAdmitted(admission_id=admission_id)

    if getattr(admission, f'{field}_id') is None:
        return admission

    setattr(admission, f'{field}_id', None)
    admission.save(update_fields=[field])
    logger.info('staff removed admission_id=%s role=%s', admission.id, role)
    return admission
