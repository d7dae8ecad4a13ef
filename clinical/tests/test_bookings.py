import pytest

from clinical.exceptions import (
    BookingNotFound,
    InvalidInput,
    InvalidProvider,
    NoChanges,
    PatientNotFound,
    RoomNotFound,
    SurgeryTypeNotFound,
)
from clinical.models import Appointment, Surgery
from clinical.services import admissions, bookings
from clinical.services.bookings import APPOINTMENT, SURGERY, BookingChanges

pytestmark = pytest.mark.django_db


def test_book_appointment(patient, physician):
    a = bookings.book_appointment(
        patient_id=patient.id, doctor_id=physician.id,
        appointment_date='2024-08-01 10:00:00', reason='Checkup',
    )
    assert a.status == Appointment.STATUS_SCHEDULED
    row = bookings.booking_detail(APPOINTMENT, a.id)
    assert row['doctorName'] == 'Dr. Bob Adams'
    assert row['patientName'] == 'John Doe'
    assert row['reason'] == 'Checkup'


def test_nurse_cannot_take_appointments(patient, nurse):
    with pytest.raises(InvalidProvider) as exc:
        bookings.book_appointment(patient_id=patient.id, doctor_id=nurse.id, appointment_date='2024-08-01 10:00:00')
    assert exc.value.context['job_type'] == 'Nurse'
    assert not Appointment.objects.exists()


def test_appointment_unknown_patient(physician):
    with pytest.raises(PatientNotFound):
        bookings.book_appointment(patient_id=999, doctor_id=physician.id, appointment_date='2024-08-01 10:00:00')


def test_appointment_bad_status(patient, physician):
    with pytest.raises(InvalidInput):
        bookings.book_appointment(
            patient_id=patient.id, doctor_id=physician.id,
            appointment_date='2024-08-01 10:00:00', status='Pending',
        )


def test_no_double_booking_check(patient, other_patient, physician):
    for p in (patient, other_patient):
        bookings.book_appointment(patient_id=p.id, doctor_id=physician.id, appointment_date='2024-08-01 10:00:00')
    assert Appointment.objects.count() == 2


def test_book_surgery(patient, surgeon, appendectomy):
    s = bookings.book_surgery(
        patient_id=patient.id, surgeon_id=surgeon.id, surgery_type_id=appendectomy.id,
        scheduled_at='2024-08-02 09:00:00', operation_theatre='OT-1',
    )
    row = bookings.booking_detail(SURGERY, s.id)
    assert row['surgeryCode'] == 'APP001'
    assert row['surgeryCategory'] == 'H'
    assert row['operationTheatre'] == 'OT-1'
    assert row['surgeonName'] == 'Dr. Charles Davis'


def test_physician_cannot_operate(patient, physician, appendectomy):
    with pytest.raises(InvalidProvider):
        bookings.book_surgery(
            patient_id=patient.id, surgeon_id=physician.id, surgery_type_id=appendectomy.id,
            scheduled_at='2024-08-02 09:00:00',
        )
    assert not Surgery.objects.exists()


def test_unknown_surgery_type(patient, surgeon):
    with pytest.raises(SurgeryTypeNotFound):
        bookings.book_surgery(
            patient_id=patient.id, surgeon_id=surgeon.id, surgery_type_id=999,
            scheduled_at='2024-08-02 09:00:00',
        )


def test_query_filters(patient, other_patient, physician, surgeon):
    bookings.book_appointment(patient_id=patient.id, doctor_id=physician.id, appointment_date='2024-08-01 11:00:00')
    bookings.book_appointment(patient_id=patient.id, doctor_id=surgeon.id, appointment_date='2024-08-01 09:00:00')
    c = bookings.book_appointment(patient_id=other_patient.id, doctor_id=physician.id,
                                  appointment_date='2024-08-02 10:00:00')
    bookings.cancel(APPOINTMENT, c.id)

    all_rows = bookings.query(APPOINTMENT)
    assert [r['appointmentDate'][:16] for r in all_rows] == [
        '2024-08-01T09:00', '2024-08-01T11:00', '2024-08-02T10:00',
    ]
    assert len(bookings.query(APPOINTMENT, patient_id=patient.id)) == 2
    assert len(bookings.query(APPOINTMENT, provider_id=physician.id)) == 2
    assert len(bookings.query(APPOINTMENT, patient_id=patient.id, provider_id=physician.id)) == 1
    assert len(bookings.query(APPOINTMENT, day='2024-08-01')) == 2
    assert [r['id'] for r in bookings.query(APPOINTMENT, status='Cancelled')] == [c.id]
    assert len(bookings.query(APPOINTMENT, patient_id='', status=None)) == 3


def test_query_surgeries_by_theatre(patient, surgeon, appendectomy):
    for theatre in ('OT-1', 'OT-2'):
        bookings.book_surgery(
            patient_id=patient.id, surgeon_id=surgeon.id, surgery_type_id=appendectomy.id,
            scheduled_at='2024-08-02 09:00:00', operation_theatre=theatre,
        )
    rows = bookings.query(SURGERY, operation_theatre='OT-2')
    assert [r['operationTheatre'] for r in rows] == ['OT-2']


def test_update_applies_only_present_fields(patient, physician, surgeon):
    a = bookings.book_appointment(
        patient_id=patient.id, doctor_id=physician.id,
        appointment_date='2024-08-01 10:00:00', reason='Checkup',
    )
    bookings.update(APPOINTMENT, a.id, BookingChanges(provider_id=surgeon.id, status='Completed'))
    a.refresh_from_db()
    assert a.doctor_id == surgeon.id
    assert a.status == 'Completed'
    assert a.reason == 'Checkup'


def test_update_without_changes(patient, physician):
    a = bookings.book_appointment(patient_id=patient.id, doctor_id=physician.id, appointment_date='2024-08-01 10:00:00')
    with pytest.raises(NoChanges):
        bookings.update(APPOINTMENT, a.id, BookingChanges())
    with pytest.raises(NoChanges):
        bookings.update(APPOINTMENT, 999, BookingChanges.from_mapping({}))


def test_update_unknown_booking():
    with pytest.raises(BookingNotFound):
        bookings.update(APPOINTMENT, 999, BookingChanges(reason='x'))


def test_update_validates_references(patient, physician, nurse):
    a = bookings.book_appointment(patient_id=patient.id, doctor_id=physician.id, appointment_date='2024-08-01 10:00:00')
    with pytest.raises(InvalidProvider):
        bookings.update(APPOINTMENT, a.id, BookingChanges(provider_id=nurse.id))
    with pytest.raises(PatientNotFound):
        bookings.update(APPOINTMENT, a.id, BookingChanges(patient_id=999))
    a.refresh_from_db()
    assert a.doctor_id == physician.id


def test_cancel_and_delete(patient, physician):
    a = bookings.book_appointment(patient_id=patient.id, doctor_id=physician.id, appointment_date='2024-08-01 10:00:00')
    assert bookings.cancel(APPOINTMENT, a.id).status == 'Cancelled'
    assert bookings.cancel(APPOINTMENT, a.id).status == 'Cancelled'
    bookings.delete(APPOINTMENT, a.id)
    assert not Appointment.objects.exists()
    with pytest.raises(BookingNotFound):
        bookings.delete(APPOINTMENT, a.id)
    with pytest.raises(BookingNotFound):
        bookings.cancel(APPOINTMENT, a.id)


def test_surgeries_for_room_on(patient, other_patient, room, surgeon, appendectomy):
    a = admissions.admit(patient_id=patient.id, room_id=room.id, admission_date='2024-08-01')
    for p, when in ((patient, '2024-08-02 09:00:00'), (patient, '2024-08-03 09:00:00'),
                    (other_patient, '2024-08-02 12:00:00')):
        bookings.book_surgery(
            patient_id=p.id, surgeon_id=surgeon.id, surgery_type_id=appendectomy.id, scheduled_at=when,
        )

    rows = bookings.surgeries_for_room_on(room.id, '2024-08-02')
    assert [r['patientId'] for r in rows] == [patient.id]

    admissions.discharge(admission_id=a.id, discharge_date='2024-08-02')
    assert len(bookings.surgeries_for_room_on(room.id, '2024-08-02')) == 1
    assert bookings.surgeries_for_room_on(room.id, '2024-08-03') == []

    with pytest.raises(RoomNotFound):
        bookings.surgeries_for_room_on(999, '2024-08-02')
