"""
Appointment booking.

Every write resolves its patient and doctor first, then asks the
scheduling rules whether the exact (doctor, date, time) start is taken.
The database keeps (doctor, date, time) unique across all statuses, so a
slot freed by cancellation still cannot be re-booked at the same start
time; that collision surfaces as the same conflict error.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound

from clinic.exceptions import BadRequest, ConflictError
from clinic.models import Appointment, Patient, User
from clinic.permissions import DOCTOR_ROLES
from clinic.services.audit import log_action
from clinic.services.scheduling import has_conflict

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = 'Doctor is not available at this time'

_FIELD_MAP = {
    'type': 'type',
    'status': 'status',
    'date': 'date',
    'time': 'time',
    'duration': 'duration',
    'reason': 'reason',
    'notes': 'notes',
    'symptoms': 'symptoms',
    'diagnosis': 'diagnosis',
    'treatment': 'treatment',
    'prescriptions': 'prescriptions',
    'followUpRequired': 'follow_up_required',
    'followUpDate': 'follow_up_date',
}


def _person(user: Optional[User]):
    if user is None:
        return None
    return {'id': user.id, 'firstName': user.first_name, 'lastName': user.last_name}


def format_appointment(a: Appointment) -> dict:
    p = a.patient
    doctor = a.doctor
    return {
        'id': a.id,
        'patient': {
            'id': p.id, 'firstName': p.first_name, 'lastName': p.last_name,
            'email': p.email, 'phone': p.phone,
            'dateOfBirth': p.date_of_birth, 'gender': p.gender,
        },
        'doctor': {'id': doctor.id, 'firstName': doctor.first_name,
                   'lastName': doctor.last_name, 'email': doctor.email},
        'type': a.type,
        'status': a.status,
        'date': a.date,
        'time': a.time,
        'endTime': a.end_time,
        'duration': a.duration,
        'reason': a.reason,
        'notes': a.notes,
        'symptoms': a.symptoms,
        'diagnosis': a.diagnosis,
        'treatment': a.treatment,
        'prescriptions': a.prescriptions,
        'followUpRequired': a.follow_up_required,
        'followUpDate': a.follow_up_date,
        'createdBy': _person(a.created_by),
        'updatedBy': _person(a.updated_by),
        'createdAt': a.created_at,
        'updatedAt': a.updated_at,
    }


def _base_queryset():
    return Appointment.objects.select_related('patient', 'doctor', 'created_by', 'updated_by')


def get_appointment(appointment_id: int) -> Appointment:
    a = _base_queryset().filter(id=appointment_id).first()
    if a is None:
        raise NotFound('Appointment not found')
    return a


def list_appointments(*, status=None, type=None, doctor=None, patient=None,
                      date=None, date_from=None, date_to=None):
    qs = _base_queryset()
    if status:
        qs = qs.filter(status=status)
    if type:
        qs = qs.filter(type=type)
    if doctor:
        qs = qs.filter(doctor_id=doctor)
    if patient:
        qs = qs.filter(patient_id=patient)
    # a complete range wins over a single day
    if date_from and date_to:
        qs = qs.filter(date__gte=date_from, date__lte=date_to)
    elif date:
        qs = qs.filter(date=date)
    return qs.order_by('date', 'time', 'id')


def _resolve_patient(patient_id: int) -> Patient:
    p = Patient.objects.filter(id=patient_id).first()
    if p is None:
        raise BadRequest('Patient not found')
    return p


def _resolve_doctor(doctor_id: int) -> User:
    d = User.objects.filter(id=doctor_id, is_active=True, role__in=DOCTOR_ROLES).first()
    if d is None:
        raise BadRequest('Doctor not found')
    return d


def _save_or_conflict(a: Appointment):
    # savepoint so the outer request transaction survives the rollback
    try:
        with transaction.atomic():
            a.save()
    except IntegrityError:
        logger.warning('slot %s %s for doctor %s rejected by storage', a.date, a.time, a.doctor_id)
        raise ConflictError(CONFLICT_MESSAGE)


@transaction.atomic
def create_appointment(data: dict, *, actor: User) -> Appointment:
    patient = _resolve_patient(data['patient'])
    doctor = _resolve_doctor(data['doctor'])
    if has_conflict(doctor.id, data['date'], data['time']):
        logger.warning('doctor %s already booked at %s %s', doctor.id, data['date'], data['time'])
        raise ConflictError(CONFLICT_MESSAGE)

    a = Appointment(patient=patient, doctor=doctor, created_by=actor)
    for key, attr in _FIELD_MAP.items():
        if key in data:
            setattr(a, attr, data[key])
    _save_or_conflict(a)
    log_action(user=actor, action='appointment.create', object_type='appointment', object_id=a.id,
               detail={'doctor': doctor.id, 'date': str(a.date), 'time': a.time})
    logger.info('appointment %s booked for doctor %s at %s %s', a.id, doctor.id, a.date, a.time)
    return a


@transaction.atomic
def update_appointment(appointment_id: int, data: dict, *, actor: User) -> Appointment:
    a = get_appointment(appointment_id)
    if 'patient' in data:
        a.patient = _resolve_patient(data['patient'])
    if 'doctor' in data:
        a.doctor = _resolve_doctor(data['doctor'])

    if any(k in data for k in ('date', 'time', 'doctor')):
        date = data.get('date', a.date)
        time = data.get('time', a.time)
        if has_conflict(a.doctor_id, date, time, exclude_id=a.id):
            logger.warning('doctor %s already booked at %s %s', a.doctor_id, date, time)
            raise ConflictError(CONFLICT_MESSAGE)

    for key, attr in _FIELD_MAP.items():
        if key in data:
            setattr(a, attr, data[key])
    a.updated_by = actor
    _save_or_conflict(a)
    log_action(user=actor, action='appointment.update', object_type='appointment', object_id=a.id,
               detail={'fields': sorted(data)})
    return a


@transaction.atomic
def cancel_appointment(appointment_id: int, *, actor: User) -> Appointment:
    a = get_appointment(appointment_id)
    a.status = Appointment.STATUS_CANCELLED
    a.updated_by = actor
    a.save(update_fields=['status', 'updated_by', 'updated_at'])
    log_action(user=actor, action='appointment.cancel', object_type='appointment', object_id=a.id)
    logger.info('appointment %s cancelled by %s', a.id, actor.username)
    return a
