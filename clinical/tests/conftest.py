import datetime as dt

import pytest

from clinical.models import Allergy, Illness, Patient, Room, Staff, SurgeryType


def make_staff(name, job_type, n):
    return Staff.objects.create(
        name=name, job_type=job_type, employment_number=f'EMP{n:03d}', email=f'staff{n}@nma.com',
    )


@pytest.fixture
def physician(db):
    return make_staff('Dr. Bob Adams', Staff.PHYSICIAN, 1)


@pytest.fixture
def nurse(db):
    return make_staff('Nurse Betty Clark', Staff.NURSE, 2)


@pytest.fixture
def surgeon(db):
    return make_staff('Dr. Charles Davis', Staff.SURGEON, 3)


@pytest.fixture
def support(db):
    return make_staff('Support Sam Smith', Staff.SUPPORT_STAFF, 4)


@pytest.fixture
def patient(db):
    return Patient.objects.create(name='John Doe', gender='Male', dob=dt.date(1980, 5, 15), ssn='111-00-0001')


@pytest.fixture
def other_patient(db):
    return Patient.objects.create(name='Jane Smith', gender='Female', dob=dt.date(1992, 9, 20), ssn='111-00-0002')


@pytest.fixture
def room(db):
    return Room.objects.create(nursing_unit='1', wing='Blue', room_number='101', bed_label='A')


@pytest.fixture
def other_room(db):
    return Room.objects.create(nursing_unit='2', wing='Green', room_number='205', bed_label='B')


@pytest.fixture
def catalogs(db):
    Illness.objects.create(code='FLU001', description='Influenza')
    Illness.objects.create(code='HYP001', description='Hypertension')
    Allergy.objects.create(code='PNCL01', name='Penicillin')
    Allergy.objects.create(code='ALR001', name='Pollen')


@pytest.fixture
def appendectomy(db):
    return SurgeryType.objects.create(
        surgery_code='APP001', name='Appendectomy', category=SurgeryType.CATEGORY_HOSPITALIZATION,
        anatomical_location='Abdomen',
    )
