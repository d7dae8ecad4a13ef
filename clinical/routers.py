"""
URL mappings for the clinical API.

Trailing slashes are omitted, as in the rest of the backend.
"""
from django.urls import path, include
from rest_framework.authtoken.views import obtain_auth_token

from .views import bookings
from .views import health
from .views import history
from .views import inpatients
from .views import rooms


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', obtain_auth_token),
    # In-patients
    path('api/inpatients', inpatients.inpatients),
    path('api/inpatients/<int:admission_id>', inpatients.inpatient_detail),
    path('api/inpatients/<int:admission_id>/discharge', inpatients.inpatient_discharge),
    path('api/inpatients/<int:admission_id>/assign-staff', inpatients.inpatient_assign_staff),
    path('api/inpatients/<int:admission_id>/remove-staff', inpatients.inpatient_remove_staff),
    # Rooms
    path('api/rooms', rooms.list_rooms),
    path('api/rooms/available', rooms.available_rooms),
    path('api/rooms/<int:room_id>', rooms.room_detail),
    path('api/rooms/<int:room_id>/surgeries', bookings.surgeries_by_room),
    # Appointments
    path('api/appointments', bookings.appointments),
    path('api/appointments/<int:booking_id>', bookings.appointment_detail),
    path('api/appointments/<int:booking_id>/cancel', bookings.appointment_cancel),
    # Surgeries
    path('api/surgeries', bookings.surgeries),
    path('api/surgeries/types', bookings.surgery_types),
    path('api/surgeries/<int:booking_id>', bookings.surgery_detail),
    path('api/surgeries/<int:booking_id>/cancel', bookings.surgery_cancel),
    # 病史
    path('api/patients/<int:patient_id>/history', history.medical_history),
    path('api/patients/<int:patient_id>/history/illnesses', history.add_illness),
    path('api/patients/<int:patient_id>/history/allergies', history.add_allergy),
    path('api/catalogs/<str:kind>', history.catalog),
]
