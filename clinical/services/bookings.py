"""
Appointments and surgeries.

Both are "a patient booked with a provider at a time", so one set of
functions handles both, parameterised by a :class:`BookingKind`.  A
surgery additionally names a surgery type and an operation theatre.

Double booking of a provider or theatre is not checked.
"""
import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from django.db import transaction
from django.db.models import Model

from clinical.exceptions import (
    BookingNotFound,
    InvalidInput,
    InvalidProvider,
    NoChanges,
    PatientNotFound,
    RoomNotFound,
    SurgeryTypeNotFound,
)
from clinical.models import Admission, Appointment, Staff, Surgery
from clinical.services import directory
from clinical.services.dates import as_date, as_datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingKind:
    name: str
    model: type[Model]
    provider_field: str
    provider_job_types: frozenset
    when_field: str
    statuses: tuple
    subject_field: Optional[str] = None
    extra_fields: tuple = ()

    @property
    def default_status(self) -> str:
        return self.model.STATUS_SCHEDULED

    @property
    def cancelled_status(self) -> str:
        return self.model.STATUS_CANCELLED


APPOINTMENT = BookingKind(
    name='appointment',
    model=Appointment,
    provider_field='doctor',
    provider_job_types=Staff.DOCTOR_JOB_TYPES,
    when_field='appointment_date',
    statuses=tuple(s for s, _ in Appointment.STATUS_CHOICES),
    extra_fields=('reason',),
)

SURGERY = BookingKind(
    name='surgery',
    model=Surgery,
    provider_field='surgeon',
    provider_job_types=Staff.SURGEON_JOB_TYPES,
    when_field='scheduled_at',
    statuses=tuple(s for s, _ in Surgery.STATUS_CHOICES),
    subject_field='surgery_type',
    extra_fields=('operation_theatre',),
)

KINDS = {k.name: k for k in (APPOINTMENT, SURGERY)}


class _Unset:
    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET: Any = _Unset()


@dataclass
class BookingChanges:
    """Partial update of a booking; fields left as ``UNSET`` are not touched."""
    patient_id: Any = UNSET
    provider_id: Any = UNSET
    scheduled_at: Any = UNSET
    status: Any = UNSET
    subject_id: Any = UNSET
    reason: Any = UNSET
    operation_theatre: Any = UNSET

    def present(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    @classmethod
    def from_mapping(cls, data: Mapping) -> 'BookingChanges':
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


def _check_status(kind: BookingKind, status) -> str:
    if status not in kind.statuses:
        raise InvalidInput(
            f"Invalid status '{status}'. Must be one of: {', '.join(kind.statuses)}.",
            field='status', value=status,
        )
    return status


def _check_provider(kind: BookingKind, provider_id) -> Staff:
    staff, eligible = directory.staff_with_job(provider_id, kind.provider_job_types)
    if not eligible:
        raise InvalidProvider(
            f'Invalid or non-{kind.provider_field} staff ID.',
            staff_id=provider_id,
            job_type=staff.job_type if staff else None,
            required=sorted(kind.provider_job_types),
        )
    return staff


def _check_subject(kind: BookingKind, subject_id):
    if subject_id in (None, ''):
        raise InvalidInput(f'{kind.subject_field} is required.', field=kind.subject_field)
    subject = directory.get(kind.subject_field, subject_id)
    if subject is None:
        raise SurgeryTypeNotFound(surgery_type_id=subject_id)
    return subject


def _check_patient(patient_id):
    patient = directory.get('patient', patient_id)
    if patient is None:
        raise PatientNotFound(patient_id=patient_id)
    return patient


def _get(kind: BookingKind, booking_id, *, lock: bool = False):
    qs = kind.model.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.filter(id=booking_id).first()
    except (TypeError, ValueError):
        return None


@transaction.atomic
def book(kind: BookingKind, *, patient_id, provider_id, scheduled_at, subject_id=None,
         status=None, **extra) -> Model:
    when = as_datetime(scheduled_at, kind.when_field)
    status = _check_status(kind, status) if status else kind.default_status

    patient = _check_patient(patient_id)
    provider = _check_provider(kind, provider_id)

    values = {
        'patient': patient,
        kind.provider_field: provider,
        kind.when_field: when,
        'status': status,
    }
    if kind.subject_field:
        values[kind.subject_field] = _check_subject(kind, subject_id)
    for name in kind.extra_fields:
        values[name] = extra.get(name) or ''

    booking = kind.model.objects.create(**values)
    logger.info(
        '%s booked id=%s patient_id=%s provider_id=%s',
        kind.name, booking.id, patient.id, provider.id,
    )
    return booking


def book_appointment(*, patient_id, doctor_id, appointment_date, reason='', status=None):
    return book(
        APPOINTMENT, patient_id=patient_id, provider_id=doctor_id,
        scheduled_at=appointment_date, status=status, reason=reason,
    )


def book_surgery(*, patient_id, surgeon_id, surgery_type_id, scheduled_at, operation_theatre='',
                 status=None):
    return book(
        SURGERY, patient_id=patient_id, provider_id=surgeon_id, scheduled_at=scheduled_at,
        subject_id=surgery_type_id, status=status, operation_theatre=operation_theatre,
    )


@transaction.atomic
def update(kind: BookingKind, booking_id, changes: BookingChanges) -> Model:
    present = changes.present()
    if not kind.subject_field:
        present.pop('subject_id', None)
    for name in ('reason', 'operation_theatre'):
        if name not in kind.extra_fields:
            present.pop(name, None)
    if not present:
        raise NoChanges()

    booking = _get(kind, booking_id, lock=True)
    if booking is None:
        raise BookingNotFound(kind=kind.name, booking_id=booking_id)

    updated = []
    if 'patient_id' in present:
        booking.patient = _check_patient(present['patient_id'])
        updated.append('patient')
    if 'provider_id' in present:
        setattr(booking, kind.provider_field, _check_provider(kind, present['provider_id']))
        updated.append(kind.provider_field)
    if 'subject_id' in present:
        setattr(booking, kind.subject_field, _check_subject(kind, present['subject_id']))
        updated.append(kind.subject_field)
    if 'scheduled_at' in present:
        setattr(booking, kind.when_field, as_datetime(present['scheduled_at'], kind.when_field))
        updated.append(kind.when_field)
    if 'status' in present:
        booking.status = _check_status(kind, present['status'])
        updated.append('status')
    for name in kind.extra_fields:
        if name in present:
            setattr(booking, name, present[name] or '')
            updated.append(name)

    booking.save(update_fields=updated)
    logger.info('%s updated id=%s fields=%s', kind.name, booking.id, ','.join(updated))
    return booking


@transaction.atomic
def cancel(kind: BookingKind, booking_id) -> Model:
    booking = _get(kind, booking_id, lock=True)
    if booking is None:
        raise BookingNotFound(kind=kind.name, booking_id=booking_id)
    if booking.status != kind.cancelled_status:
        booking.status = kind.cancelled_status
        booking.save(update_fields=['status'])
        logger.info('%s cancelled id=%s', kind.name, booking.id)
    return booking


def delete(kind: BookingKind, booking_id) -> None:
    try:
        deleted, _ = kind.model.objects.filter(id=booking_id).delete()
    except (TypeError, ValueError):
        deleted = 0
    if not deleted:
        raise BookingNotFound(kind=kind.name, booking_id=booking_id)
    logger.info('%s deleted id=%s', kind.name, booking_id)


def format_booking(kind: BookingKind, b) -> dict:
    provider = getattr(b, kind.provider_field)
    if kind is SURGERY:
        st = b.surgery_type
        return {
            'id': b.id,
            'scheduledDateTime': b.scheduled_at.isoformat(),
            'status': b.status,
            'operationTheatre': b.operation_theatre,
            'patientId': b.patient_id,
            'patientName': b.patient.name,
            'surgeonId': provider.id,
            'surgeonName': provider.name,
            'surgeryTypeId': st.id,
            'surgeryTypeName': st.name,
            'surgeryCode': st.surgery_code,
            'surgeryCategory': st.category,
        }
    return {
        'id': b.id,
        'appointmentDate': b.appointment_date.isoformat(),
        'reason': b.reason,
        'status': b.status,
        'patientId': b.patient_id,
        'patientName': b.patient.name,
        'doctorId': provider.id,
        'doctorName': provider.name,
    }


def _with_relations(kind: BookingKind, qs):
    related = ['patient', kind.provider_field]
    if kind.subject_field:
        related.append(kind.subject_field)
    return qs.select_related(*related)


def query(kind: BookingKind, *, patient_id=None, provider_id=None, day=None, status=None,
          operation_theatre=None) -> list[dict]:
    qs = _with_relations(kind, kind.model.objects.all())
    # unset filters are omitted; the rest AND together
    if patient_id not in (None, ''):
        qs = qs.filter(patient_id=patient_id)
    if provider_id not in (None, ''):
        qs = qs.filter(**{f'{kind.provider_field}_id': provider_id})
    if day not in (None, ''):
        qs = qs.filter(**{f'{kind.when_field}__date': as_date(day, 'date')})
    if status not in (None, ''):
        qs = qs.filter(status=status)
    if operation_theatre not in (None, '') and 'operation_theatre' in kind.extra_fields:
        qs = qs.filter(operation_theatre=operation_theatre)
    try:
        rows = list(qs.order_by(kind.when_field, 'id'))
    except (TypeError, ValueError) as exc:
        raise InvalidInput('Invalid filter value.', detail=str(exc)) from exc
    return [format_booking(kind, b) for b in rows]


def booking_detail(kind: BookingKind, booking_id) -> dict:
    try:
        booking = _with_relations(kind, kind.model.objects.filter(id=booking_id)).first()
    except (TypeError, ValueError):
        booking = None
    if booking is None:
        raise BookingNotFound(kind=kind.name, booking_id=booking_id)
    return format_booking(kind, booking)


def surgeries_for_room_on(room_id, day) -> list[dict]:
    """Surgeries on ``day`` for patients whose stay in ``room_id`` covers that day."""
    day = as_date(day, 'date')
    room = directory.get('room', room_id)
    if room is None:
        raise RoomNotFound(room_id=room_id)

    stays = (
        Admission.objects
        .filter(room_id=room.id, admission_date__lte=day)
        .exclude(discharge_date__lt=day)
        .values_list('patient_id', flat=True)
    )
    qs = _with_relations(SURGERY, Surgery.objects.filter(
        patient_id__in=list(stays), scheduled_at__date=day,
    ))
    return [format_booking(SURGERY, s) for s in qs.order_by('scheduled_at', 'id')]
