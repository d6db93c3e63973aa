"""
URL mappings for the clinic API.

All resource endpoints live under ``/api``.  Identifiers are matched
with the ``int`` converter, so a malformed id never reaches a view and
answers with the JSON 404 handler.  Trailing slashes are omitted.
"""
from django.urls import include, path

from .views import appointments, auth, dashboard, health, patients, users

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/register', auth.register_view),
    path('api/auth/login', auth.login_view),
    path('api/auth/me', auth.me_view),
    path('api/auth/logout', auth.logout_view),
    path('api/auth/refresh', auth.refresh_view),
    # Accounts
    path('api/users', users.users_view),
    path('api/users/doctors', users.doctors_view),
    path('api/users/<int:pk>', users.user_detail_view),
    # Patients
    path('api/patients', patients.patients_view),
    path('api/patients/<int:pk>', patients.patient_detail_view),
    path('api/patients/<int:pk>/medical-history', patients.medical_history_view),
    path('api/patients/<int:pk>/medications', patients.medications_view),
    # Appointments
    path('api/appointments', appointments.appointments_view),
    path('api/appointments/<int:pk>', appointments.appointment_detail_view),
    path('api/appointments/doctor/<int:doctor_id>/availability', appointments.availability_view),
    # Dashboard
    path('api/dashboard/stats', dashboard.stats_view),
    path('api/dashboard/recent-activity', dashboard.recent_activity_view),
]
