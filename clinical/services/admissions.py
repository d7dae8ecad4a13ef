"""
Admission workflow: admit and discharge in-patients.

Every check runs before the first write, so a rejected admit changes
nothing.  The patient row is read ``select_for_update`` so two admits
of one patient run one after the other even where the partial unique
constraints are not enforced (MySQL).  The two writes of an admit (create the
admission, reserve the room) run in one transaction: if the room is
taken between the check and the reservation, the transaction is rolled
back and the caller gets :class:`RoomUnavailable` with no admission left
behind.  The partial unique constraints on :class:`Admission` catch the
same race one step earlier when a concurrent admit has already
committed.
"""
import logging
from typing import Optional

from django.db import IntegrityError, transaction

from clinical.exceptions import (
    AdmissionNotFound,
    AlreadyAdmitted,
    InvalidDoctor,
    InvalidNurse,
    NotAdmitted,
    PatientNotFound,
    RoomUnavailable,
)
from clinical.models import Admission, Staff
from clinical.services import directory, rooms
from clinical.services.dates import as_date

logger = logging.getLogger(__name__)


def find_active(admission_id, *, lock: bool = False) -> Optional[Admission]:
    qs = Admission.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.active().filter(id=admission_id).first()
    except (TypeError, ValueError):
        return None


@transaction.atomic
def admit(*, patient_id, room_id, admission_date, doctor_id=None, nurse_id=None) -> Admission:
    admission_date = as_date(admission_date, 'admissionDate')

    # the patient row lock serializes admits of one patient on every backend
    patient = directory.get('patient', patient_id, lock=True)
    if patient is None:
        raise PatientNotFound(patient_id=patient_id)

    if Admission.objects.active().filter(patient_id=patient.id).exists():
        raise AlreadyAdmitted(patient_id=patient.id)

    room = directory.get('room', room_id)
    if room is None or room.is_occupied:
        raise RoomUnavailable(room_id=room_id)

    if doctor_id:
        _, eligible = directory.staff_with_job(doctor_id, Staff.DOCTOR_JOB_TYPES)
        if not eligible:
            raise InvalidDoctor(staff_id=doctor_id)

    if nurse_id:
        _, eligible = directory.staff_with_job(nurse_id, Staff.NURSE_JOB_TYPES)
        if not eligible:
            raise InvalidNurse(staff_id=nurse_id)

    try:
        with transaction.atomic():
            admission = Admission.objects.create(
                patient_id=patient.id,
                room_id=room.id,
                admission_date=admission_date,
                assigned_doctor_id=doctor_id or None,
                assigned_nurse_id=nurse_id or None,
            )
    except IntegrityError as exc:
        # a concurrent admit committed first
        if Admission.objects.active().filter(patient_id=patient.id).exists():
            logger.warning('admit lost race on patient patient_id=%s', patient.id)
            raise AlreadyAdmitted(patient_id=patient.id) from exc
        logger.warning('admit lost race on room room_id=%s', room.id)
        raise RoomUnavailable(room_id=room.id) from exc

    try:
        rooms.reserve(room.id)
    except RoomUnavailable:
        logger.warning(
            'admit rolled back admission_id=%s: room %s was reserved concurrently',
            admission.id, room.id,
        )
        raise

    logger.info(
        'patient admitted admission_id=%s patient_id=%s room_id=%s',
        admission.id, patient.id, room.id,
    )
    return admission


@transaction.atomic
def discharge(*, admission_id, discharge_date) -> Admission:
    discharge_date = as_date(discharge_date, 'dischargeDate')

    admission = find_active(admission_id, lock=True)
    if admission is None:
        raise NotAdmitted(admission_id=admission_id)

    admission.discharge_date = discharge_date
    admission.save(update_fields=['discharge_date'])

    if admission.room_id:
        rooms.release(admission.room_id)

    logger.info(
        'patient discharged admission_id=%s patient_id=%s room_id=%s',
        admission.id, admission.patient_id, admission.room_id,
    )
    return admission


def format_admission(a: Admission, *, detail: bool = False) -> dict:
    room = a.room
    doctor = a.assigned_doctor
    nurse = a.assigned_nurse
    data = {
        'id': a.id,
        'patientId': a.patient_id,
        'patientName': a.patient.name,
        'roomId': a.room_id,
        'nursingUnit': room.nursing_unit if room else None,
        'wing': room.wing if room else None,
        'roomNumber': room.room_number if room else None,
        'bedLabel': room.bed_label if room else None,
        'admissionDate': a.admission_date.isoformat(),
        'dischargeDate': a.discharge_date.isoformat() if a.discharge_date else None,
        'assignedDoctorId': a.assigned_doctor_id,
        'assignedDoctorName': doctor.name if doctor else None,
        'assignedNurseId': a.assigned_nurse_id,
        'assignedNurseName': nurse.name if nurse else None,
    }
    if detail:
        data.update({
            'patientDob': a.patient.dob.isoformat() if a.patient.dob else None,
            'patientGender': a.patient.gender,
        })
    return data


def _with_relations(qs):
    return qs.select_related('patient', 'room', 'assigned_doctor', 'assigned_nurse')


def list_active_admissions() -> list[dict]:
    qs = _with_relations(Admission.objects.active()).order_by('patient__name', 'id')
    return [format_admission(a) for a in qs]


def admission_detail(admission_id) -> dict:
    try:
        admission = _with_relations(Admission.objects.filter(id=admission_id)).first()
    except (TypeError, ValueError):
        admission = None
    if admission is None:
        raise AdmissionNotFound(admission_id=admission_id)
    return format_admission(admission, detail=True)
