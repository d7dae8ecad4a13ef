"""Clinical application for the clinical operations backend.

This package contains the models, workflow services, serializers, views
and route registrations for in-patient admissions, room occupancy, staff
assignment, appointment and surgery bookings and medical history.
"""
