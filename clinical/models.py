"""
Database models for the clinical operations backend.

The directory records (patients, staff, rooms and the illness, allergy
and surgery-type catalogs) are owned by the hospital's master data and
are only read by the allocation workflows.  Admissions, appointments,
surgeries and medical-history entries are written by the services in
:mod:`clinical.services` and only ever *reference* directory records.

Room occupancy is the one denormalised field: ``Room.is_occupied`` must
be true exactly when one active :class:`Admission` points at the room.
The partial unique constraints on :class:`Admission` back that rule at
the database level.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Login identity of a caller.

    The role is the capability the API layer checks before invoking a
    workflow.  It mirrors the four login roles of the clinic: 'Admin',
    'Doctor', 'Nurse' and 'Support'.
    """
    ROLE_ADMIN = 'Admin'
    ROLE_DOCTOR = 'Doctor'
    ROLE_NURSE = 'Nurse'
    ROLE_SUPPORT = 'Support'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_SUPPORT, 'Support'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_SUPPORT)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Staff(models.Model):
    """A member of staff.  ``job_type`` decides clinical eligibility."""
    PHYSICIAN = 'Physician'
    SURGEON = 'Surgeon'
    NURSE = 'Nurse'
    SUPPORT_STAFF = 'Support Staff'
    ADMIN = 'Admin'
    TECHNICIAN = 'Technician'
    PHARMACIST = 'Pharmacist'
    JOB_TYPE_CHOICES = [
        (PHYSICIAN, 'Physician'),
        (SURGEON, 'Surgeon'),
        (NURSE, 'Nurse'),
        (SUPPORT_STAFF, 'Support Staff'),
        (ADMIN, 'Admin'),
        (TECHNICIAN, 'Technician'),
        (PHARMACIST, 'Pharmacist'),
    ]
    GENDER_CHOICES = [('Male', 'Male'), ('Female', 'Female'), ('Other', 'Other')]

    # eligibility for the clinical roles
    DOCTOR_JOB_TYPES = frozenset({PHYSICIAN, SURGEON})
    NURSE_JOB_TYPES = frozenset({NURSE})
    SURGEON_JOB_TYPES = frozenset({SURGEON})

    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='staff_profile'
    )
    name = models.CharField(max_length=255)
    # 按岗位过滤医生/护士是分配流程的热点查询
    job_type = models.CharField(max_length=20, choices=JOB_TYPE_CHOICES, db_index=True)
    specialty = models.CharField(max_length=255, blank=True)
    contract_type = models.CharField(max_length=64, blank=True)
    contract_length_years = models.PositiveIntegerField(null=True, blank=True)
    grade = models.CharField(max_length=64, blank=True)
    years_experience = models.PositiveIntegerField(null=True, blank=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    employment_number = models.CharField(max_length=32, unique=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    address = models.CharField(max_length=255, blank=True)
    telephone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(unique=True)
    dob = models.DateField(null=True, blank=True)
    hire_date = models.DateField(null=True, blank=True)

    class Meta:
        verbose_name_plural = 'staff'

    def __str__(self) -> str:
        return f"{self.name} ({self.job_type})"


class Patient(models.Model):
    """Demographic record of a patient."""
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
        ('Prefer not to say', 'Prefer not to say'),
    ]
    name = models.CharField(max_length=255)
    gender = models.CharField(max_length=20, choices=GENDER_CHOICES, blank=True)
    dob = models.DateField()
    address = models.CharField(max_length=255, blank=True)
    telephone = models.CharField(max_length=32, blank=True)
    ssn = models.CharField(max_length=32, unique=True, null=True, blank=True)
    blood_type = models.CharField(max_length=8, blank=True)
    cholesterol_hdl = models.FloatField(null=True, blank=True)
    cholesterol_ldl = models.FloatField(null=True, blank=True)
    cholesterol_triglyceride = models.FloatField(null=True, blank=True)
    blood_sugar = models.FloatField(null=True, blank=True)
    primary_care_physician = models.ForeignKey(
        Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='primary_patients'
    )

    def __str__(self) -> str:
        return f"{self.name} (#{self.id})"


class Room(models.Model):
    """A single bed, addressed by nursing unit, wing, room number and bed label."""
    WING_CHOICES = [('Blue', 'Blue'), ('Green', 'Green')]
    BED_CHOICES = [('A', 'A'), ('B', 'B')]

    nursing_unit = models.CharField(max_length=8)
    wing = models.CharField(max_length=8, choices=WING_CHOICES)
    room_number = models.CharField(max_length=16)
    bed_label = models.CharField(max_length=2, choices=BED_CHOICES)
    # 空床查询频繁，加索引
    is_occupied = models.BooleanField(default=False, db_index=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['nursing_unit', 'wing', 'room_number', 'bed_label'],
                name='uniq_room_bed_location',
            ),
        ]
        ordering = ['nursing_unit', 'wing', 'room_number', 'bed_label']

    def __str__(self) -> str:
        return f"Unit {self.nursing_unit} {self.wing} {self.room_number}{self.bed_label}"


class Illness(models.Model):
    code = models.CharField(max_length=32, unique=True)
    description = models.CharField(max_length=255)

    def __str__(self) -> str:
        return f"{self.code} {self.description}"


class Allergy(models.Model):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)

    class Meta:
        verbose_name_plural = 'allergies'

    def __str__(self) -> str:
        return f"{self.code} {self.name}"


class SurgeryType(models.Model):
    CATEGORY_HOSPITALIZATION = 'H'
    CATEGORY_OUTPATIENT = 'O'
    CATEGORY_CHOICES = [
        (CATEGORY_HOSPITALIZATION, 'Hospitalization'),
        (CATEGORY_OUTPATIENT, 'Outpatient'),
    ]
    surgery_code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=1, choices=CATEGORY_CHOICES, blank=True)
    anatomical_location = models.CharField(max_length=255, blank=True)
    special_needs = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.surgery_code} {self.name}"


class AdmissionQuerySet(models.QuerySet):
    def active(self):
        return self.filter(discharge_date__isnull=True)


class Admission(models.Model):
    """An in-patient episode.

    Created on admit and closed exactly once on discharge by setting
    ``discharge_date``.  Rows are never deleted.  The two partial unique
    constraints allow any number of discharged episodes per patient and
    per room but only one *active* one.
    """
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='admissions')
    room = models.ForeignKey(
        Room, null=True, blank=True, on_delete=models.SET_NULL, related_name='admissions'
    )
    admission_date = models.DateField()
    discharge_date = models.DateField(null=True, blank=True, db_index=True)
    assigned_doctor = models.ForeignKey(
        Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_admissions'
    )
    assigned_nurse = models.ForeignKey(
        Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='nurse_admissions'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AdmissionQuerySet.as_manager()

    class Meta:
        constraints = [
            # 每位患者同一时间只允许一条在院记录
            models.UniqueConstraint(
                fields=['patient'],
                condition=models.Q(discharge_date__isnull=True),
                name='uniq_active_admission_per_patient',
            ),
            # 每张床同一时间只允许一位在院患者
            models.UniqueConstraint(
                fields=['room'],
                condition=models.Q(discharge_date__isnull=True),
                name='uniq_active_admission_per_room',
            ),
        ]

    @property
    def is_active(self) -> bool:
        return self.discharge_date is None

    def __str__(self) -> str:
        state = 'active' if self.is_active else f'discharged {self.discharge_date}'
        return f"Admission #{self.id} p={self.patient_id} r={self.room_id} ({state})"


class Appointment(models.Model):
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_NO_SHOW = 'No Show'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No Show'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='appointments')
    appointment_date = models.DateTimeField()
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=['doctor', 'appointment_date']),
            models.Index(fields=['patient', 'appointment_date']),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.id} p={self.patient_id} d={self.doctor_id} @ {self.appointment_date}"


class Surgery(models.Model):
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='surgeries')
    surgeon = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='surgeries')
    surgery_type = models.ForeignKey(SurgeryType, on_delete=models.CASCADE, related_name='surgeries')
    operation_theatre = models.CharField(max_length=32, blank=True)
    scheduled_at = models.DateTimeField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)

    class Meta:
        verbose_name_plural = 'surgeries'
        indexes = [
            models.Index(fields=['surgeon', 'scheduled_at']),
            models.Index(fields=['operation_theatre', 'scheduled_at']),
        ]

    def __str__(self) -> str:
        return f"Surgery #{self.id} p={self.patient_id} s={self.surgeon_id} @ {self.scheduled_at}"


class PatientIllness(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='illnesses')
    illness = models.ForeignKey(Illness, on_delete=models.CASCADE, related_name='patient_entries')
    diagnosed_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['patient', 'illness'], name='uniq_patient_illness'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_id}: {self.illness_id}"


class PatientAllergy(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='allergies')
    allergy = models.ForeignKey(Allergy, on_delete=models.CASCADE, related_name='patient_entries')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'patient allergies'
        constraints = [
            models.UniqueConstraint(fields=['patient', 'allergy'], name='uniq_patient_allergy'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_id}: {self.allergy_id}"
