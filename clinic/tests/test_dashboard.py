from datetime import date, timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from clinic.authentication import issue_token
from clinic.models import Appointment, Patient, User, calendar_age
from clinic.services.dashboard import age_bracket, dashboard_stats, months_before, recent_activity

pytestmark = pytest.mark.django_db


def make_patient(n, born=date(1990, 1, 1), gender='female', **extra):
    return Patient.objects.create(
        first_name=f'P{n}', last_name='Test', email=f'p{n}@example.com', phone='555',
        date_of_birth=born, gender=gender, **extra,
    )


@pytest.fixture
def doctor():
    return User.objects.create_user(username='doc', email='doc@example.com', password='secret1',
                                    role='doctor', first_name='Meredith', last_name='Grey')


def book(patient, doctor, day, time, status='scheduled'):
    return Appointment.objects.create(
        patient=patient, doctor=doctor, created_by=doctor, type='checkup',
        date=day, time=time, duration=30, reason='visit', status=status,
    )


@pytest.mark.parametrize('age, label', [
    (0, '0-17'), (17, '0-17'), (18, '18-34'), (34, '18-34'), (35, '35-49'),
    (49, '35-49'), (50, '50-64'), (64, '50-64'), (65, '65+'), (102, '65+'),
])
def test_age_bracket_edges(age, label):
    assert age_bracket(age) == label


def test_calendar_age_turns_on_the_birthday():
    today = date(2026, 3, 15)
    assert calendar_age(date(2008, 3, 15), today) == 18
    assert calendar_age(date(2008, 3, 16), today) == 17


def test_born_exactly_eighteen_years_ago_is_an_adult():
    today = date(2026, 3, 15)
    make_patient(1, born=date(2008, 3, 15))
    make_patient(2, born=date(2008, 3, 16))
    age = dashboard_stats(today=today)['demographics']['age']
    assert {'range': '18-34', 'count': 1} in age
    assert {'range': '0-17', 'count': 1} in age


@pytest.mark.parametrize('start, months, expected', [
    (date(2026, 8, 31), 6, date(2026, 2, 28)),
    (date(2026, 3, 15), 6, date(2025, 9, 15)),
    (date(2024, 8, 29), 6, date(2024, 2, 29)),
])
def test_months_before(start, months, expected):
    assert months_before(start, months) == expected


def test_overview_counts(doctor):
    today = timezone.localdate()
    active = make_patient(1, gender='male')
    make_patient(2)
    make_patient(3, is_active=False)
    User.objects.create_user(username='doc_off', email='off@example.com', password='x', role='doctor',
                             is_active=False)

    book(active, doctor, today, '09:00')
    book(active, doctor, today, '10:00', status='completed')
    book(active, doctor, today, '11:00', status='cancelled')
    book(active, doctor, today + timedelta(days=1), '09:00', status='confirmed')
    book(active, doctor, today - timedelta(days=1), '09:00', status='completed')

    stats = dashboard_stats(today=today)
    assert stats['overview'] == {
        'totalPatients': 2,
        'totalDoctors': 1,
        'todayAppointments': 3,
        'pendingAppointments': 2,
        'completedAppointments': 1,
        'newPatientsThisMonth': 2,
    }
    statuses = {row['status']: row['count'] for row in stats['appointmentStats']}
    assert statuses == {'scheduled': 1, 'completed': 2, 'cancelled': 1, 'confirmed': 1}
    genders = {row['gender']: row['count'] for row in stats['demographics']['gender']}
    assert genders == {'male': 1, 'female': 1}


def test_upcoming_lists_pending_from_today(doctor):
    today = timezone.localdate()
    p = make_patient(1)
    book(p, doctor, today - timedelta(days=1), '09:00')
    book(p, doctor, today + timedelta(days=2), '09:00')
    book(p, doctor, today, '15:00', status='confirmed')
    book(p, doctor, today, '08:00', status='cancelled')
    upcoming = dashboard_stats(today=today)['upcomingAppointments']
    assert [(u['date'], u['time']) for u in upcoming] == [
        (today, '15:00'),
        (today + timedelta(days=2), '09:00'),
    ]
    assert upcoming[0]['patientName'] == 'P1 Test'
    assert upcoming[0]['doctorName'] == 'Meredith Grey'


def test_upcoming_and_recent_patients_are_capped_at_five(doctor):
    today = timezone.localdate()
    for n in range(7):
        p = make_patient(n)
        book(p, doctor, today, f'{9 + n:02d}:00')
    stats = dashboard_stats(today=today)
    assert len(stats['upcomingAppointments']) == 5
    assert len(stats['recentPatients']) == 5
    assert stats['recentPatients'][0]['name'] == 'P6 Test'


def test_monthly_trends_skip_old_appointments(doctor):
    today = date(2026, 3, 15)
    p = make_patient(1)
    book(p, doctor, date(2026, 3, 1), '09:00')
    book(p, doctor, date(2026, 3, 2), '09:00')
    book(p, doctor, date(2026, 1, 10), '09:00', status='completed')
    book(p, doctor, date(2025, 6, 1), '09:00')
    trends = dashboard_stats(today=today)['monthlyTrends']
    assert trends == [
        {'year': 2026, 'month': 1, 'status': 'completed', 'count': 1},
        {'year': 2026, 'month': 3, 'status': 'scheduled', 'count': 2},
    ]


def test_recent_activity_merges_newest_first(doctor):
    today = timezone.localdate()
    patients = [make_patient(n) for n in range(3)]
    for n, p in enumerate(patients):
        book(p, doctor, today, f'{9 + n:02d}:00')

    feed = recent_activity(limit=4)
    assert len(feed) == 4
    assert sorted(item['type'] for item in feed) == ['appointment', 'appointment', 'patient', 'patient']
    stamps = [item['timestamp'] for item in feed]
    assert stamps == sorted(stamps, reverse=True)
    appt = next(item for item in feed if item['type'] == 'appointment')
    assert appt['description'].startswith('New appointment scheduled for P')
    assert appt['user'] == 'Meredith Grey'


def test_recent_activity_limit_of_one_is_empty(doctor):
    make_patient(1)
    assert recent_activity(limit=1) == []


def test_dashboard_endpoints_are_open_to_staff():
    staff = User.objects.create_user(username='desk', email='desk@example.com', password='secret1', role='staff')
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(staff)}')
    r = client.get('/api/dashboard/stats')
    assert r.status_code == 200
    assert set(r.json()['data']) == {
        'overview', 'upcomingAppointments', 'recentPatients', 'appointmentStats', 'monthlyTrends', 'demographics',
    }
    r = client.get('/api/dashboard/recent-activity', {'limit': 10})
    assert r.status_code == 200
    assert r.json()['data'] == []
    assert client.get('/api/dashboard/recent-activity', {'limit': 0}).status_code == 400

    client.credentials()
    assert client.get('/api/dashboard/stats').status_code == 401
