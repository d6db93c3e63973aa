"""
Integration tests for the clinic API.

These tests exercise authentication, the role matrix, soft deletion of
patients and the booking rules through Django REST framework's
APIClient within the APITestCase base class.

To run the tests:

```
pytest -q clinic/tests
```
"""
from datetime import date

from rest_framework import status
from rest_framework.test import APITestCase

from ..authentication import issue_token
from ..models import Appointment, AuditEvent, Patient, User


def patient_payload(**overrides):
    body = {
        'firstName': 'Maria',
        'lastName': 'Garcia',
        'email': 'maria@example.com',
        'phone': '555-0101',
        'dateOfBirth': '1985-06-15',
        'gender': 'female',
        'address': {'street': '1 Main St', 'city': 'Springfield', 'state': 'IL', 'zipCode': '62701'},
        'emergencyContact': {'name': 'Luis Garcia', 'relationship': 'spouse', 'phone': '555-0102'},
        'currentMedications': [
            {'name': 'Lisinopril', 'dosage': '10mg', 'frequency': 'daily',
             'startDate': '2023-01-01', 'prescribedBy': 'Dr. House'},
            {'name': 'Amoxicillin', 'dosage': '500mg', 'frequency': 'tid',
             'startDate': '2023-03-01', 'endDate': '2023-03-10', 'prescribedBy': 'Dr. House',
             'isActive': False},
        ],
        'medicalHistory': [{'condition': 'Hypertension', 'status': 'chronic'}],
        'allergies': [{'allergen': 'Penicillin', 'severity': 'severe'}],
        'bloodType': 'O+',
    }
    body.update(overrides)
    return body


class ClinicAPITests(APITestCase):
    def setUp(self) -> None:
        """Create one account per role and an existing patient."""
        self.admin = User.objects.create_user(
            username='admin1', email='admin1@example.com', password='adminpass', role='admin',
            first_name='Ada', last_name='Admin',
        )
        self.doctor = User.objects.create_user(
            username='doctor1', email='doctor1@example.com', password='doctorpass', role='doctor',
            first_name='Gregory', last_name='House',
        )
        self.nurse = User.objects.create_user(
            username='nurse1', email='nurse1@example.com', password='nursepass', role='nurse',
            first_name='Carla', last_name='Espinosa',
        )
        self.staff = User.objects.create_user(
            username='staff1', email='staff1@example.com', password='staffpass', role='staff',
            first_name='Sam', last_name='Desk',
        )
        self.patient = Patient.objects.create(
            first_name='John', last_name='Doe', email='john@example.com', phone='555-0100',
            date_of_birth=date(1970, 5, 20), gender='male',
            address={'street': '2 Elm St', 'city': 'Springfield', 'state': 'IL',
                     'zipCode': '62702', 'country': 'United States'},
            emergency_contact={'name': 'Jane Doe', 'relationship': 'spouse', 'phone': '555-0103'},
        )

    def auth(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user)}')

    def book(self, **overrides):
        body = {
            'patient': self.patient.id,
            'doctor': self.doctor.id,
            'type': 'consultation',
            'date': '2024-02-01',
            'time': '10:00',
            'duration': 30,
            'reason': 'Follow-up on blood pressure',
        }
        body.update(overrides)
        return self.client.post('/api/appointments', body, format='json')

    # -----------------------------------------------------------------
    # Authentication and the role matrix
    # -----------------------------------------------------------------
    def test_missing_token_is_unauthorized(self):
        r = self.client.get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(r.json(), {'success': False, 'message': 'Access denied. No token provided.'})

    def test_staff_reads_patients_but_cannot_create(self):
        self.auth(self.staff)
        r = self.client.get('/api/patients')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertTrue(r.json()['success'])

        r = self.client.post('/api/patients', patient_payload(), format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.json()['message'], 'Insufficient permissions.')
        self.assertFalse(Patient.objects.filter(email='maria@example.com').exists())

    def test_staff_cannot_book_appointments(self):
        self.auth(self.staff)
        self.assertEqual(self.book().status_code, status.HTTP_403_FORBIDDEN)

    def test_users_list_is_admin_only(self):
        self.auth(self.doctor)
        self.assertEqual(self.client.get('/api/users').status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.admin)
        r = self.client.get('/api/users', {'role': 'doctor'})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        body = r.json()
        self.assertEqual([u['username'] for u in body['data']], ['doctor1'])
        self.assertEqual(body['pagination'], {
            'currentPage': 1, 'totalPages': 1, 'totalItems': 1, 'itemsPerPage': 10,
        })

    def test_doctors_listing_is_open_to_every_role(self):
        self.auth(self.staff)
        r = self.client.get('/api/users/doctors')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()['data'], [{
            'id': self.doctor.id, 'firstName': 'Gregory', 'lastName': 'House', 'email': 'doctor1@example.com',
        }])

    def test_account_profile_is_self_or_admin(self):
        self.auth(self.staff)
        self.assertEqual(self.client.get(f'/api/users/{self.staff.id}').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'/api/users/{self.doctor.id}').status_code, status.HTTP_403_FORBIDDEN)
        r = self.client.put(f'/api/users/{self.doctor.id}', {'firstName': 'X'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_non_admin_cannot_change_own_role(self):
        self.auth(self.staff)
        r = self.client.put(f'/api/users/{self.staff.id}', {'role': 'admin', 'firstName': 'Samuel'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.staff.refresh_from_db()
        self.assertEqual(self.staff.role, 'staff')
        self.assertEqual(self.staff.first_name, 'Samuel')

    def test_admin_changes_role(self):
        self.auth(self.admin)
        r = self.client.put(f'/api/users/{self.nurse.id}', {'role': 'doctor'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()['data']['role'], 'doctor')

    def test_profile_update_rejects_taken_email(self):
        self.auth(self.staff)
        r = self.client.put(f'/api/users/{self.staff.id}', {'email': 'Doctor1@example.com'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'User with this email already exists')

    def test_admin_cannot_deactivate_self(self):
        self.auth(self.admin)
        r = self.client.delete(f'/api/users/{self.admin.id}')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'Cannot delete your own account')

    def test_deactivated_account_loses_access(self):
        token = issue_token(self.staff)
        self.auth(self.admin)
        r = self.client.delete(f'/api/users/{self.staff.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.get(id=self.staff.id).is_active)

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        r = self.client.get('/api/auth/me')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(r.json()['message'], 'Account is deactivated.')

        self.client.credentials()
        r = self.client.post('/api/auth/login', {'email': 'staff1@example.com', 'password': 'staffpass'},
                             format='json')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(r.json()['message'], 'Account is deactivated')

        self.auth(self.admin)
        self.assertEqual(self.client.get(f'/api/users/{self.staff.id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_creates_account_without_token(self):
        self.auth(self.admin)
        r = self.client.post('/api/users', {
            'username': 'nurse2', 'email': 'nurse2@example.com', 'password': 'secret1',
            'firstName': 'Elliot', 'lastName': 'Reid', 'role': 'nurse',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('token', r.json()['data'])
        self.assertTrue(User.objects.get(username='nurse2').check_password('secret1'))

    # -----------------------------------------------------------------
    # Patients
    # -----------------------------------------------------------------
    def test_nurse_creates_patient(self):
        self.auth(self.nurse)
        r = self.client.post('/api/patients', patient_payload(email='Maria@Example.com'), format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        data = r.json()['data']
        self.assertEqual(data['email'], 'maria@example.com')
        self.assertEqual(data['address']['country'], 'United States')
        self.assertEqual(data['allergies'][0]['severity'], 'severe')
        self.assertTrue(AuditEvent.objects.filter(action='patient.create', object_id=data['id']).exists())

    def test_duplicate_patient_email_is_rejected(self):
        self.auth(self.doctor)
        r = self.client.post('/api/patients', patient_payload(email='john@example.com'), format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'Patient with this email already exists')

    def test_patient_validation_errors_are_reported(self):
        self.auth(self.doctor)
        r = self.client.post('/api/patients', patient_payload(gender='unknown', email='bad'), format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        body = r.json()
        self.assertEqual(body['message'], 'Validation failed')
        self.assertIn('Gender must be male, female, or other', body['error'])
        self.assertIn('Please provide a valid email', body['error'])

    def test_partial_patient_update_merges_address(self):
        self.auth(self.nurse)
        r = self.client.put(f'/api/patients/{self.patient.id}',
                            {'phone': '555-9999', 'address': {'city': 'Shelbyville'}}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.patient.refresh_from_db()
        self.assertEqual(self.patient.phone, '555-9999')
        self.assertEqual(self.patient.address['city'], 'Shelbyville')
        self.assertEqual(self.patient.address['street'], '2 Elm St')

    def test_partial_update_rejects_incomplete_list_entries(self):
        self.auth(self.nurse)
        url = f'/api/patients/{self.patient.id}'
        r = self.client.put(url, {'currentMedications': [{'name': 'Metformin'}]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'Validation failed')
        self.assertIn('This field is required.', r.json()['error'])

        r = self.client.put(url, {'medicalHistory': [{'notes': 'no condition given'}]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('This field is required.', r.json()['error'])

        r = self.client.put(url, {'allergies': [{'severity': 'mild'}]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

        self.patient.refresh_from_db()
        self.assertEqual(self.patient.current_medications, [])
        self.assertEqual(self.patient.medical_history, [])
        self.assertEqual(self.patient.allergies, [])

    def test_medication_end_date_without_start_date_is_rejected(self):
        self.auth(self.nurse)
        r = self.client.put(f'/api/patients/{self.patient.id}',
                            {'currentMedications': [{'name': 'Metformin', 'endDate': '2024-01-01'}]},
                            format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('This field is required.', r.json()['error'])

        r = self.client.put(f'/api/patients/{self.patient.id}', {'currentMedications': [
            {'name': 'Metformin', 'dosage': '500mg', 'frequency': 'bid', 'prescribedBy': 'Dr. House',
             'startDate': '2024-02-01', 'endDate': '2024-01-01'},
        ]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Medication end date cannot precede its start date', r.json()['error'])

    def test_partial_list_replacement_applies_entry_defaults(self):
        self.auth(self.nurse)
        r = self.client.put(f'/api/patients/{self.patient.id}', {
            'medicalHistory': [{'condition': 'Asthma'}],
            'allergies': [{'allergen': 'Latex'}],
            'currentMedications': [{'name': 'Albuterol', 'dosage': '90mcg', 'frequency': 'as needed',
                                    'startDate': '2024-01-15', 'prescribedBy': 'Dr. House'}],
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.patient.refresh_from_db()
        self.assertEqual(self.patient.medical_history[0]['status'], 'active')
        self.assertEqual(self.patient.allergies[0]['severity'], 'moderate')
        self.assertTrue(self.patient.current_medications[0]['isActive'])
        self.assertEqual(self.patient.current_medications[0]['startDate'], '2024-01-15')
        self.assertEqual(self.patient.phone, '555-0100')

    def test_patient_soft_delete(self):
        self.auth(self.nurse)
        self.assertEqual(self.client.delete(f'/api/patients/{self.patient.id}').status_code,
                         status.HTTP_403_FORBIDDEN)

        self.auth(self.admin)
        r = self.client.delete(f'/api/patients/{self.patient.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)

        r = self.client.get(f'/api/patients/{self.patient.id}')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.json()['message'], 'Patient not found')
        self.assertFalse(Patient.objects.filter(id=self.patient.id).exists())
        self.assertFalse(Patient.all_objects.get(id=self.patient.id).is_active)

        r = self.client.get('/api/patients')
        self.assertEqual(r.json()['pagination']['totalItems'], 0)
        r = self.client.get('/api/patients', {'includeInactive': 'true'})
        self.assertEqual(r.json()['pagination']['totalItems'], 1)

        # the email is free again once the holder is inactive
        r = self.client.post('/api/patients', patient_payload(email='john@example.com'), format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

    def test_include_inactive_is_ignored_for_non_admins(self):
        Patient.objects.filter(id=self.patient.id).update(is_active=False)
        self.auth(self.doctor)
        r = self.client.get('/api/patients', {'includeInactive': 'true'})
        self.assertEqual(r.json()['pagination']['totalItems'], 0)

    def test_patient_search_and_filters(self):
        Patient.objects.create(
            first_name='Alice', last_name='Smith', email='alice@example.com', phone='1',
            date_of_birth=date(2000, 1, 1), gender='female', blood_type='A+',
        )
        self.auth(self.staff)
        r = self.client.get('/api/patients', {'search': 'smi'})
        self.assertEqual([p['firstName'] for p in r.json()['data']], ['Alice'])
        r = self.client.get('/api/patients', {'gender': 'male'})
        self.assertEqual([p['firstName'] for p in r.json()['data']], ['John'])
        r = self.client.get('/api/patients', {'bloodType': 'A+'})
        self.assertEqual(r.json()['pagination']['totalItems'], 1)

    def test_pagination_bounds(self):
        self.auth(self.staff)
        r = self.client.get('/api/patients', {'limit': 0})
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Limit must be between 1 and 100', r.json()['error'])
        r = self.client.get('/api/patients', {'page': 0})
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = self.client.get('/api/patients', {'page': 3, 'limit': 1})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()['data'], [])
        self.assertEqual(r.json()['pagination']['totalPages'], 1)

    def test_medications_lists_only_active(self):
        self.auth(self.doctor)
        r = self.client.post('/api/patients', patient_payload(), format='json')
        pid = r.json()['data']['id']
        r = self.client.get(f'/api/patients/{pid}/medications')
        self.assertEqual([m['name'] for m in r.json()['data']], ['Lisinopril'])
        r = self.client.get(f'/api/patients/{pid}/medical-history')
        self.assertEqual(r.json()['data'][0]['condition'], 'Hypertension')

    def test_malformed_id_is_not_found(self):
        self.auth(self.staff)
        r = self.client.get('/api/patients/not-an-id')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(r.json()['success'])

    # -----------------------------------------------------------------
    # Appointments
    # -----------------------------------------------------------------
    def test_book_appointment(self):
        self.auth(self.nurse)
        r = self.book(time='9:30')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        data = r.json()['data']
        self.assertEqual(data['time'], '09:30')
        self.assertEqual(data['endTime'], '10:00')
        self.assertEqual(data['status'], 'scheduled')
        self.assertEqual(data['createdBy']['id'], self.nurse.id)
        self.assertEqual(data['doctor']['id'], self.doctor.id)

    def test_same_slot_twice_is_a_conflict(self):
        self.auth(self.doctor)
        self.assertEqual(self.book().status_code, status.HTTP_201_CREATED)
        r = self.book(reason='Another visit')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json(), {'success': False, 'message': 'Doctor is not available at this time'})
        self.assertEqual(Appointment.objects.count(), 1)

    def test_overlapping_booking_with_different_start_is_accepted(self):
        self.auth(self.doctor)
        self.assertEqual(self.book(duration=60).status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.book(time='10:30').status_code, status.HTTP_201_CREATED)

    def test_cancelled_slot_is_still_held_by_storage(self):
        self.auth(self.doctor)
        appt_id = self.book().json()['data']['id']
        r = self.client.delete(f'/api/appointments/{appt_id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(Appointment.objects.get(id=appt_id).status, 'cancelled')

        r = self.book()
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'Doctor is not available at this time')
        self.assertEqual(Appointment.objects.count(), 1)

    def test_booking_requires_a_doctor_account(self):
        self.auth(self.doctor)
        r = self.book(doctor=self.nurse.id)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'Doctor not found')

        r = self.book(doctor=self.admin.id)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

    def test_booking_requires_an_active_patient(self):
        Patient.objects.filter(id=self.patient.id).update(is_active=False)
        self.auth(self.doctor)
        r = self.book()
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json()['message'], 'Patient not found')

    def test_booking_validation(self):
        self.auth(self.doctor)
        r = self.book(time='25:00')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Please provide a valid time format (HH:MM)', r.json()['error'])
        r = self.book(duration=10)
        self.assertIn('Duration must be between 15 and 480 minutes', r.json()['error'])
        r = self.book(type='surgery')
        self.assertIn('Invalid appointment type', r.json()['error'])

    def test_update_checks_conflicts_excluding_itself(self):
        self.auth(self.doctor)
        first = self.book().json()['data']['id']
        second = self.book(time='11:00').json()['data']['id']

        r = self.client.put(f'/api/appointments/{first}', {'time': '10:00', 'notes': 'same slot'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()['data']['updatedBy']['id'], self.doctor.id)

        r = self.client.put(f'/api/appointments/{second}', {'time': '10:00'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Appointment.objects.get(id=second).time, '11:00')

        r = self.client.put(f'/api/appointments/{second}', {'status': 'confirmed'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()['data']['status'], 'confirmed')

    def test_partial_update_validates_prescriptions(self):
        self.auth(self.doctor)
        appt = self.book().json()['data']['id']
        url = f'/api/appointments/{appt}'

        r = self.client.put(url, {'prescriptions': [{'medication': 'Ibuprofen'}]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('This field is required.', r.json()['error'])
        self.assertEqual(Appointment.objects.get(id=appt).prescriptions, [])

        r = self.client.put(url, {'prescriptions': [
            {'medication': 'Ibuprofen', 'dosage': '400mg', 'frequency': 'tid', 'duration': '5 days'},
        ]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(Appointment.objects.get(id=appt).prescriptions[0]['medication'], 'Ibuprofen')

    def test_appointment_filters(self):
        self.auth(self.doctor)
        self.book()
        self.book(date='2024-02-03', time='11:00')
        self.book(date='2024-03-01', time='12:00')

        r = self.client.get('/api/appointments', {'date': '2024-02-01'})
        self.assertEqual(r.json()['pagination']['totalItems'], 1)
        r = self.client.get('/api/appointments', {'dateFrom': '2024-02-01', 'dateTo': '2024-02-29'})
        self.assertEqual([a['date'] for a in r.json()['data']], ['2024-02-01', '2024-02-03'])
        r = self.client.get('/api/appointments', {'doctor': self.doctor.id, 'status': 'scheduled'})
        self.assertEqual(r.json()['pagination']['totalItems'], 3)
        r = self.client.get('/api/appointments', {'status': 'completed'})
        self.assertEqual(r.json()['data'], [])

    def test_missing_appointment_is_not_found(self):
        self.auth(self.staff)
        r = self.client.get('/api/appointments/999999')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.json()['message'], 'Appointment not found')

    def test_availability_requires_date(self):
        self.auth(self.staff)
        r = self.client.get(f'/api/appointments/doctor/{self.doctor.id}/availability')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Date is required', r.json()['error'])

    # -----------------------------------------------------------------
    # End to end
    # -----------------------------------------------------------------
    def test_register_login_book_and_check_availability(self):
        r = self.client.post('/api/auth/register', {
            'username': 'dr_new', 'email': 'DrNew@example.com', 'password': 'secret1',
            'firstName': 'Jan', 'lastName': 'Itor', 'role': 'doctor',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertTrue(r.json()['data']['token'])
        doctor_id = r.json()['data']['user']['id']

        r = self.client.post('/api/auth/login', {'email': 'drnew@example.com', 'password': 'secret1'},
                             format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.json()['data']['token']}")

        r = self.client.post('/api/patients', patient_payload(), format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        patient_id = r.json()['data']['id']

        r = self.client.post('/api/appointments', {
            'patient': patient_id, 'doctor': doctor_id, 'type': 'checkup',
            'date': '2024-02-01', 'time': '10:00', 'duration': 30, 'reason': 'Initial visit',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

        r = self.client.get(f'/api/appointments/doctor/{doctor_id}/availability', {'date': '2024-02-01'})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        data = r.json()['data']
        self.assertEqual(data['date'], '2024-02-01')
        self.assertNotIn('10:00', data['availableSlots'])
        self.assertIn('09:30', data['availableSlots'])
        self.assertIn('10:30', data['availableSlots'])
        self.assertEqual(data['bookedSlots'], [{'time': '10:00', 'duration': 30}])
