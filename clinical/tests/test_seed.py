import pytest
from django.core.management import call_command

from clinical.models import Appointment, Room, Staff, User
from clinical.services import admissions

pytestmark = pytest.mark.django_db


def test_seed_is_idempotent():
    call_command('seed_clinic')
    call_command('seed_clinic')
    assert User.objects.count() == 4
    assert Staff.objects.count() == 5
    assert Room.objects.count() == 6
    assert Appointment.objects.count() == 2
    assert Staff.objects.get(employment_number='EMP002').user.role == User.ROLE_NURSE


def test_seeded_data_is_admittable():
    call_command('seed_clinic')
    room = Room.objects.filter(room_number='103').get()
    patient = User.objects.get(username='doc_adams').staff_profile.primary_patients.order_by('id').first()
    a = admissions.admit(patient_id=patient.id, room_id=room.id, admission_date='2024-08-01')
    room.refresh_from_db()
    assert room.is_occupied
    assert a.patient_id == patient.id
