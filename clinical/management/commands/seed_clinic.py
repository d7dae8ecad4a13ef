"""
Management command to populate the database with demo clinic data.

Safe to run repeatedly: every record is looked up by its natural key
(username, employment number, SSN, bed location, catalog code) first.
"""
from datetime import datetime

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from rest_framework.authtoken.models import Token

from clinical.models import (
    User, Staff, Patient, Room, Illness, Allergy, SurgeryType, Appointment,
)

USERS = [
    ('admin', 'adminpass', User.ROLE_ADMIN),
    ('doc_adams', 'docpass', User.ROLE_DOCTOR),
    ('nurse_betty', 'nursepass', User.ROLE_NURSE),
    ('support_sam', 'supportpass', User.ROLE_SUPPORT),
]

STAFF = [
    dict(username='admin', name='Dr. Alice Admin', job_type=Staff.ADMIN,
         specialty='Hospital Administration', employment_number='EMP000', salary=150000,
         gender='Female', address='10 Admin Way', telephone='555-0100',
         email='alice.admin@nma.com', dob='1975-03-10', hire_date='2010-06-01'),
    dict(username='doc_adams', name='Dr. Bob Adams', job_type=Staff.PHYSICIAN,
         specialty='Cardiology', employment_number='EMP001', salary=200000,
         gender='Male', address='123 Heart St', telephone='555-0101',
         email='bob.adams@nma.com', dob='1980-11-22', hire_date='2015-08-15'),
    dict(username='nurse_betty', name='Nurse Betty Clark', job_type=Staff.NURSE,
         grade='Senior Nurse', years_experience=10, employment_number='EMP002', salary=80000,
         gender='Female', address='456 Care Ave', telephone='555-0102',
         email='betty.clark@nma.com', dob='1988-07-14', hire_date='2012-03-01'),
    dict(username=None, name='Dr. Charles Davis', job_type=Staff.SURGEON,
         specialty='Orthopedics', contract_type='Full-Time', contract_length_years=5,
         employment_number='EMP003', gender='Male', address='789 Bone Rd',
         telephone='555-0103', email='charles.davis@nma.com', dob='1970-02-20',
         hire_date='2018-01-10'),
    dict(username='support_sam', name='Support Sam Smith', job_type=Staff.SUPPORT_STAFF,
         employment_number='EMP004', salary=50000, gender='Male', address='1 Support Ln',
         telephone='555-0104', email='sam.smith@nma.com', dob='1990-06-25',
         hire_date='2019-07-20'),
]

PATIENTS = [
    dict(name='John Doe', gender='Male', dob='1980-05-15', address='1 Patient Lane',
         telephone='555-0200', ssn='111-00-0001', blood_type='O+', pcp='EMP001'),
    dict(name='Jane Smith', gender='Female', dob='1992-09-20', address='2 Sick Street',
         telephone='555-0201', ssn='111-00-0002', blood_type='A-', pcp='EMP001'),
    dict(name='Old Man River', gender='Male', dob='1950-01-01', address='3 River Bend',
         telephone='555-0202', ssn='111-00-0003', blood_type='B+', pcp='EMP000'),
]

ROOMS = [
    ('1', 'Blue', '101', 'A'),
    ('1', 'Blue', '103', 'A'),
    ('2', 'Green', '205', 'B'),
    ('2', 'Green', '206', 'B'),
    ('1', 'Blue', '104', 'A'),
    ('2', 'Green', '207', 'B'),
]

ILLNESSES = [('FLU001', 'Influenza'), ('HYP001', 'Hypertension')]
ALLERGIES = [('PNCL01', 'Penicillin'), ('ALR001', 'Pollen')]
SURGERY_TYPES = [
    ('APP001', 'Appendectomy', SurgeryType.CATEGORY_HOSPITALIZATION, 'Abdomen'),
    ('CAT001', 'Cataract Surgery', SurgeryType.CATEGORY_OUTPATIENT, 'Eye'),
]

APPOINTMENTS = [
    ('111-00-0001', 'EMP001', '2024-08-01 10:00:00', 'Checkup'),
    ('111-00-0002', 'EMP001', '2024-08-01 11:00:00', 'Follow-up'),
]


class Command(BaseCommand):
    help = 'Populate database with demo clinic data'

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding clinic data...')
        users = self.create_users()
        staff = self.create_staff(users)
        patients = self.create_patients(staff)
        self.create_rooms()
        self.create_catalogs()
        self.create_appointments(patients, staff)
        self.stdout.write(self.style.SUCCESS('Clinic data ready.'))
        for username, user in users.items():
            token, _ = Token.objects.get_or_create(user=user)
            self.stdout.write(f'  {username} ({user.role}) token={token.key}')

    def create_users(self):
        users = {}
        for username, password, role in USERS:
            user, created = User.objects.get_or_create(username=username, defaults={'role': role})
            if created:
                user.set_password(password)
                user.is_staff = role == User.ROLE_ADMIN
                user.is_superuser = role == User.ROLE_ADMIN
                user.save()
            users[username] = user
        return users

    def create_staff(self, users):
        staff = {}
        for row in STAFF:
            row = dict(row)
            username = row.pop('username')
            row['user'] = users.get(username) if username else None
            obj, _ = Staff.objects.get_or_create(employment_number=row['employment_number'], defaults=row)
            staff[obj.employment_number] = obj
        return staff

    def create_patients(self, staff):
        patients = {}
        for row in PATIENTS:
            row = dict(row)
            row['primary_care_physician'] = staff.get(row.pop('pcp'))
            obj, _ = Patient.objects.get_or_create(ssn=row['ssn'], defaults=row)
            patients[obj.ssn] = obj
        return patients

    def create_rooms(self):
        for unit, wing, number, bed in ROOMS:
            Room.objects.get_or_create(nursing_unit=unit, wing=wing, room_number=number, bed_label=bed)

    def create_catalogs(self):
        for code, description in ILLNESSES:
            Illness.objects.get_or_create(code=code, defaults={'description': description})
        for code, name in ALLERGIES:
            Allergy.objects.get_or_create(code=code, defaults={'name': name})
        for code, name, category, location in SURGERY_TYPES:
            SurgeryType.objects.get_or_create(
                surgery_code=code,
                defaults={'name': name, 'category': category, 'anatomical_location': location},
            )

    def create_appointments(self, patients, staff):
        for ssn, emp, when, reason in APPOINTMENTS:
            at = timezone.make_aware(datetime.strptime(when, '%Y-%m-%d %H:%M:%S'))
            Appointment.objects.get_or_create(
                patient=patients[ssn], doctor=staff[emp], appointment_date=at,
                defaults={'reason': reason},
            )
