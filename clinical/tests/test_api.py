"""
Integration tests for the clinical API.

These exercise the HTTP surface: role based access control, the error
envelope produced by ``api_exception_handler`` and the admit, assign,
discharge flow end to end.  The tests use Django REST Framework's
APIClient within the APITestCase base class.
"""
import datetime as dt

from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from clinical.models import Admission, Allergy, Appointment, Illness, Patient, Room, Staff, User


class ClinicalAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin_user = User.objects.create_user(username='admin', password='adminpass', role=User.ROLE_ADMIN)
        self.doctor_user = User.objects.create_user(username='doc_adams', password='docpass', role=User.ROLE_DOCTOR)
        self.support_user = User.objects.create_user(username='support_sam', password='supportpass',
                                                     role=User.ROLE_SUPPORT)

        self.physician = Staff.objects.create(
            user=self.doctor_user, name='Dr. Bob Adams', job_type=Staff.PHYSICIAN,
            employment_number='EMP001', email='bob.adams@nma.com',
        )
        self.nurse = Staff.objects.create(
            name='Nurse Betty Clark', job_type=Staff.NURSE,
            employment_number='EMP002', email='betty.clark@nma.com',
        )
        self.patient = Patient.objects.create(name='John Doe', gender='Male', dob=dt.date(1980, 5, 15))
        self.room = Room.objects.create(nursing_unit='1', wing='Blue', room_number='101', bed_label='A')
        Illness.objects.create(code='FLU001', description='Influenza')
        Allergy.objects.create(code='PNCL01', name='Penicillin')

        self.client = APIClient()
        self.client.force_authenticate(user=self.doctor_user)

    def admit(self, **extra):
        body = {'patientId': self.patient.id, 'roomId': self.room.id, 'admissionDate': '2024-08-01'}
        body.update(extra)
        return self.client.post('/api/inpatients', body, format='json')

    def test_requires_authentication(self):
        anon = APIClient()
        resp = anon.get('/api/inpatients')
        self.assertIn(resp.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(resp.data['ok'])

    def test_support_can_read_but_not_admit(self):
        self.client.force_authenticate(user=self.support_user)
        self.assertEqual(self.client.get('/api/rooms/available').status_code, status.HTTP_200_OK)
        resp = self.admit()
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Admission.objects.exists())

    def test_admit_assign_discharge_flow(self):
        resp = self.admit()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        admission_id = resp.data['inpatientId']
        self.room.refresh_from_db()
        self.assertTrue(self.room.is_occupied)

        resp = self.client.put(f'/api/inpatients/{admission_id}/assign-staff',
                               {'staffId': self.nurse.id, 'role': 'Nurse'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['assignedNurseName'], 'Nurse Betty Clark')

        resp = self.client.get('/api/inpatients')
        self.assertEqual(len(resp.data['data']), 1)

        resp = self.client.put(f'/api/inpatients/{admission_id}/discharge',
                               {'dischargeDate': '2024-08-05'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['dischargeDate'], '2024-08-05')
        self.room.refresh_from_db()
        self.assertFalse(self.room.is_occupied)

        resp = self.client.put(f'/api/inpatients/{admission_id}/discharge',
                               {'dischargeDate': '2024-08-06'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error']['code'], 'not_admitted')

    def test_conflict_envelope(self):
        self.admit()
        resp = self.admit()
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(resp.data['ok'])
        self.assertEqual(resp.data['error']['code'], 'already_admitted')
        self.assertEqual(resp.data['error']['kind'], 'conflict')
        self.assertEqual(resp.data['error']['patient_id'], self.patient.id)

    def test_role_mismatch_envelope(self):
        admission_id = self.admit().data['inpatientId']
        resp = self.client.put(f'/api/inpatients/{admission_id}/assign-staff',
                               {'staffId': self.nurse.id, 'role': 'Doctor'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['code'], 'role_mismatch')
        self.assertEqual(resp.data['error']['job_type'], 'Nurse')

    def test_validation_error_envelope(self):
        resp = self.client.post('/api/inpatients', {'patientId': self.patient.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data['ok'])
        self.assertEqual(resp.data['error']['code'], 'api_error')

    def test_appointment_lifecycle(self):
        resp = self.client.post('/api/appointments', {
            'patientId': self.patient.id,
            'doctorId': self.physician.id,
            'appointmentDate': '2024-08-01T10:00:00',
            'reason': '<b>Checkup</b>',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        appt_id = resp.data['appointmentId']

        detail = self.client.get(f'/api/appointments/{appt_id}').data['data']
        self.assertEqual(detail['reason'], 'Checkup')

        resp = self.client.put(f'/api/appointments/{appt_id}', {}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['code'], 'no_changes')

        resp = self.client.put(f'/api/appointments/{appt_id}', {'reason': 'Follow-up'}, format='json')
        self.assertEqual(resp.data['data']['reason'], 'Follow-up')

        resp = self.client.get('/api/appointments', {'doctorId': self.physician.id, 'date': '2024-08-01'})
        self.assertEqual([r['id'] for r in resp.data['data']], [appt_id])

        resp = self.client.post(f'/api/appointments/{appt_id}/cancel')
        self.assertEqual(resp.data['status'], 'Cancelled')

        resp = self.client.delete(f'/api/appointments/{appt_id}')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Appointment.objects.filter(id=appt_id).exists())

        self.client.force_authenticate(user=self.admin_user)
        self.assertEqual(self.client.delete(f'/api/appointments/{appt_id}').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.delete(f'/api/appointments/{appt_id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_nurse_cannot_be_booked_as_doctor(self):
        resp = self.client.post('/api/appointments', {
            'patientId': self.patient.id,
            'doctorId': self.nurse.id,
            'appointmentDate': '2024-08-01T10:00:00',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['code'], 'invalid_provider')

    def test_medical_history(self):
        url = f'/api/patients/{self.patient.id}/history'
        resp = self.client.post(f'{url}/illnesses', {'illnessCode': 'FLU001'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        resp = self.client.post(f'{url}/illnesses', {'illnessCode': 'FLU001'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        resp = self.client.post(f'{url}/allergies', {'allergyCode': 'NOPE'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error']['code'], 'catalog_entry_not_found')

        data = self.client.get(url).data['data']
        self.assertEqual([i['code'] for i in data['illnesses']], ['FLU001'])
        self.assertEqual(data['allergies'], [])

    def test_rooms(self):
        Room.objects.create(nursing_unit='2', wing='Green', room_number='205', bed_label='B', is_occupied=True)
        resp = self.client.get('/api/rooms', {'isOccupied': 'true'})
        self.assertEqual([r['roomNumber'] for r in resp.data['data']], ['205'])
        resp = self.client.get('/api/rooms/available')
        self.assertEqual([r['id'] for r in resp.data['data']], [self.room.id])
        self.assertEqual(self.client.get('/api/rooms/999').status_code, status.HTTP_404_NOT_FOUND)

    def test_healthz(self):
        resp = APIClient().get('/healthz')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()['ok'])
