"""
Django admin registrations for the clinical models.

Admissions are shown read-mostly: occupancy is kept consistent by the
admit/discharge workflow, so editing ``discharge_date`` or a room's
``is_occupied`` flag by hand here bypasses it.
"""

from django.contrib import admin

from .models import (
    User,
    Staff,
    Patient,
    Room,
    Illness,
    Allergy,
    SurgeryType,
    Admission,
    Appointment,
    Surgery,
    PatientIllness,
    PatientAllergy,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'job_type', 'specialty', 'employment_number')
    list_filter = ('job_type', 'contract_type')
    search_fields = ('name', 'employment_number', 'email')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'gender', 'dob', 'primary_care_physician')
    list_filter = ('gender', 'blood_type')
    search_fields = ('name', 'ssn', 'telephone')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('id', 'nursing_unit', 'wing', 'room_number', 'bed_label', 'is_occupied')
    list_filter = ('nursing_unit', 'wing', 'is_occupied')
    readonly_fields = ('is_occupied',)


@admin.register(Illness)
class IllnessAdmin(admin.ModelAdmin):
    list_display = ('code', 'description')
    search_fields = ('code', 'description')


@admin.register(Allergy)
class AllergyAdmin(admin.ModelAdmin):
    list_display = ('code', 'name')
    search_fields = ('code', 'name')


@admin.register(SurgeryType)
class SurgeryTypeAdmin(admin.ModelAdmin):
    list_display = ('surgery_code', 'name', 'category', 'anatomical_location')
    list_filter = ('category',)
    search_fields = ('surgery_code', 'name')


@admin.register(Admission)
class AdmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'room', 'admission_date', 'discharge_date',
                    'assigned_doctor', 'assigned_nurse')
    list_filter = ('discharge_date',)
    search_fields = ('patient__name',)
    readonly_fields = ('patient', 'room', 'admission_date', 'discharge_date', 'created_at')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment_date', 'status')
    list_filter = ('status',)
    search_fields = ('patient__name', 'doctor__name')


@admin.register(Surgery)
class SurgeryAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'surgeon', 'surgery_type', 'scheduled_at', 'operation_theatre', 'status')
    list_filter = ('status', 'operation_theatre')
    search_fields = ('patient__name', 'surgeon__name', 'surgery_type__surgery_code')


@admin.register(PatientIllness)
class PatientIllnessAdmin(admin.ModelAdmin):
    list_display = ('patient', 'illness', 'diagnosed_date')
    search_fields = ('patient__name', 'illness__code')


@admin.register(PatientAllergy)
class PatientAllergyAdmin(admin.ModelAdmin):
    list_display = ('patient', 'allergy')
    search_fields = ('patient__name', 'allergy__code')
