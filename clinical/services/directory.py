"""Read-only lookups over the directory records and catalogs.

A missing id is an ordinary outcome here: ``get`` returns ``None`` and
the calling workflow decides which error to raise.
"""
from typing import Optional

from django.db.models import Model

from clinical.models import Allergy, Illness, Patient, Room, Staff, SurgeryType

KINDS: dict[str, type[Model]] = {
    'patient': Patient,
    'staff': Staff,
    'room': Room,
    'surgery_type': SurgeryType,
    'illness': Illness,
    'allergy': Allergy,
}

# catalog kind -> code column
CATALOG_CODE_FIELDS = {
    'illness': 'code',
    'allergy': 'code',
    'surgery_type': 'surgery_code',
}


def _model(kind: str) -> type[Model]:
    try:
        return KINDS[kind]
    except KeyError:
        raise ValueError(f'unknown directory kind: {kind!r}') from None


def get(kind: str, pk, *, lock: bool = False) -> Optional[Model]:
    model = _model(kind)
    if pk in (None, ''):
        return None
    qs = model.objects.all()
    if lock:
        # caller must be inside transaction.atomic
        qs = qs.select_for_update()
    try:
        return qs.filter(pk=pk).first()
    except (TypeError, ValueError):
        # non-numeric ids never match
        return None


def find(kind: str, **filters) -> list[Model]:
    return list(_model(kind).objects.filter(**filters))


def get_by_code(kind: str, code: str) -> Optional[Model]:
    if kind not in CATALOG_CODE_FIELDS:
        raise ValueError(f'{kind!r} is not a catalog')
    if not code:
        return None
    return _model(kind).objects.filter(**{CATALOG_CODE_FIELDS[kind]: code}).first()


def staff_with_job(staff_id, job_types) -> tuple[Optional[Staff], bool]:
    """Return ``(staff, eligible)`` for a staff id against allowed job types."""
    staff = get('staff', staff_id)
    return staff, bool(staff and staff.job_type in job_types)
