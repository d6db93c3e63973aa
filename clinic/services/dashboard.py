"""
Read-only aggregates for the dashboard home screen.

Nothing here is cached; each call reflects the current tables.
"""
from __future__ import annotations

import calendar
from collections import Counter
from datetime import date as date_cls
from typing import Optional

from django.db.models import Count
from django.db.models.functions import ExtractMonth, ExtractYear
from django.utils import timezone

from clinic.models import Appointment, Patient, User, calendar_age

AGE_BRACKETS = (
    (18, '0-17'),
    (35, '18-34'),
    (50, '35-49'),
    (65, '50-64'),
)
OLDEST_BRACKET = '65+'


def age_bracket(age: int) -> str:
    for upper, label in AGE_BRACKETS:
        if age < upper:
            return label
    return OLDEST_BRACKET


def months_before(d: date_cls, months: int) -> date_cls:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    year, month = divmod(d.year * 12 + (d.month - 1) - months, 12)
    month += 1
    return date_cls(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def _overview(today: date_cls) -> dict:
    month_start = today.replace(day=1)
    return {
        'totalPatients': Patient.objects.count(),
        'totalDoctors': User.objects.filter(role=User.ROLE_DOCTOR, is_active=True).count(),
        'todayAppointments': Appointment.objects.filter(date=today).count(),
        'pendingAppointments': Appointment.objects.filter(status__in=Appointment.PENDING_STATUSES).count(),
        'completedAppointments': Appointment.objects.filter(
            status=Appointment.STATUS_COMPLETED, date=today).count(),
        'newPatientsThisMonth': Patient.objects.filter(created_at__date__gte=month_start,
                                                       created_at__date__lte=today).count(),
    }


def _upcoming(today: date_cls) -> list[dict]:
    rows = (Appointment.objects
            .select_related('patient', 'doctor')
            .filter(date__gte=today, status__in=Appointment.PENDING_STATUSES)
            .order_by('date', 'time', 'id')[:5])
    return [{
        'id': a.id,
        'patientName': a.patient.full_name,
        'doctorName': a.doctor.get_full_name(),
        'date': a.date,
        'time': a.time,
        'type': a.type,
        'status': a.status,
    } for a in rows]


def _recent_patients() -> list[dict]:
    return [{
        'id': p.id,
        'name': p.full_name,
        'email': p.email,
        'createdAt': p.created_at,
    } for p in Patient.objects.order_by('-created_at', '-id')[:5]]


def _monthly_trends(today: date_cls) -> list[dict]:
    rows = (Appointment.objects
            .filter(date__gte=months_before(today, 6))
            .annotate(year=ExtractYear('date'), month=ExtractMonth('date'))
            .values('year', 'month', 'status')
            .annotate(count=Count('id'))
            .order_by('year', 'month', 'status'))
    return [dict(r) for r in rows]


def _age_distribution(today: date_cls) -> list[dict]:
    counts = Counter(age_bracket(calendar_age(born, today))
                     for born in Patient.objects.values_list('date_of_birth', flat=True))
    labels = [label for _, label in AGE_BRACKETS] + [OLDEST_BRACKET]
    return [{'range': label, 'count': counts[label]} for label in labels if counts[label]]


def dashboard_stats(today: Optional[date_cls] = None) -> dict:
    today = today or timezone.localdate()
    by_status = (Appointment.objects.values('status').annotate(count=Count('id')).order_by('status'))
    by_gender = (Patient.objects.values('gender').annotate(count=Count('id')).order_by('gender'))
    return {
        'overview': _overview(today),
        'upcomingAppointments': _upcoming(today),
        'recentPatients': _recent_patients(),
        'appointmentStats': [dict(r) for r in by_status],
        'monthlyTrends': _monthly_trends(today),
        'demographics': {
            'gender': [dict(r) for r in by_gender],
            'age': _age_distribution(today),
        },
    }


def recent_activity(limit: int = 20) -> list[dict]:
    half = limit // 2
    activities = []
    appointments = (Appointment.objects
                    .select_related('patient', 'doctor', 'created_by')
                    .order_by('-created_at', '-id')[:half])
    for a in appointments:
        activities.append({
            'id': a.id,
            'type': 'appointment',
            'action': 'created',
            'description': (f'New appointment scheduled for {a.patient.full_name} '
                            f'with Dr. {a.doctor.get_full_name()}'),
            'timestamp': a.created_at,
            'user': a.created_by.get_full_name() if a.created_by_id else 'System',
        })
    for p in Patient.objects.order_by('-created_at', '-id')[:half]:
        activities.append({
            'id': p.id,
            'type': 'patient',
            'action': 'registered',
            'description': f'New patient registered: {p.full_name}',
            'timestamp': p.created_at,
            'user': 'System',
        })
    activities.sort(key=lambda x: x['timestamp'], reverse=True)
    return activities[:limit]
