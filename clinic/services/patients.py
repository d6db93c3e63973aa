"""
Patient records.

Reads go through ``Patient.objects`` so soft-deleted rows behave as if
they do not exist; only administrators listing with
``includeInactive`` see ``Patient.all_objects``.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound

from clinic.exceptions import BadRequest, ConflictError
from clinic.models import Patient, User
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)

# request key -> model attribute
_FIELD_MAP = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'email': 'email',
    'phone': 'phone',
    'dateOfBirth': 'date_of_birth',
    'gender': 'gender',
    'address': 'address',
    'emergencyContact': 'emergency_contact',
    'medicalHistory': 'medical_history',
    'currentMedications': 'current_medications',
    'allergies': 'allergies',
    'bloodType': 'blood_type',
    'insuranceProvider': 'insurance_provider',
    'insuranceNumber': 'insurance_number',
    'notes': 'notes',
}
# nested objects merged key by key on update instead of replaced
_MERGED = ('address', 'emergency_contact')


def format_doctor_ref(user: Optional[User]):
    if user is None:
        return None
    return {'id': user.id, 'firstName': user.first_name, 'lastName': user.last_name, 'email': user.email}


def format_patient(p: Patient) -> dict:
    return {
        'id': p.id,
        'firstName': p.first_name,
        'lastName': p.last_name,
        'fullName': p.full_name,
        'email': p.email,
        'phone': p.phone,
        'dateOfBirth': p.date_of_birth,
        'age': p.age,
        'gender': p.gender,
        'address': p.address,
        'emergencyContact': p.emergency_contact,
        'medicalHistory': p.medical_history,
        'currentMedications': p.current_medications,
        'allergies': p.allergies,
        'bloodType': p.blood_type or None,
        'insuranceProvider': p.insurance_provider,
        'insuranceNumber': p.insurance_number,
        'primaryDoctor': format_doctor_ref(p.primary_doctor),
        'notes': p.notes,
        'isActive': p.is_active,
        'createdAt': p.created_at,
        'updatedAt': p.updated_at,
    }


def get_patient(patient_id: int) -> Patient:
    p = Patient.objects.select_related('primary_doctor').filter(id=patient_id).first()
    if p is None:
        raise NotFound('Patient not found')
    return p


def list_patients(*, search: Optional[str] = None, gender: Optional[str] = None,
                  blood_type: Optional[str] = None, include_inactive: bool = False):
    qs = Patient.all_objects.all() if include_inactive else Patient.objects.all()
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search) | Q(last_name__icontains=search) | Q(email__icontains=search)
        )
    if gender:
        qs = qs.filter(gender=gender)
    if blood_type:
        qs = qs.filter(blood_type=blood_type)
    return qs.select_related('primary_doctor').order_by('-created_at', '-id')


def _resolve_primary_doctor(doctor_id):
    if doctor_id is None:
        return None
    doctor = User.objects.filter(id=doctor_id, is_active=True).first()
    if doctor is None:
        raise BadRequest('Primary doctor not found')
    return doctor


def _ensure_email_free(email: str, exclude_id: Optional[int] = None):
    qs = Patient.objects.filter(email=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise ConflictError('Patient with this email already exists')


@transaction.atomic
def create_patient(data: dict, *, actor: User) -> Patient:
    _ensure_email_free(data['email'])
    p = Patient(primary_doctor=_resolve_primary_doctor(data.get('primaryDoctor')))
    for key, attr in _FIELD_MAP.items():
        if key in data:
            setattr(p, attr, data[key])
    p.save()
    log_action(user=actor, action='patient.create', object_type='patient', object_id=p.id)
    logger.info('patient %s created by %s', p.id, actor.username)
    return p


@transaction.atomic
def update_patient(patient_id: int, data: dict, *, actor: User) -> Patient:
    p = get_patient(patient_id)
    if 'email' in data and data['email'] != p.email:
        _ensure_email_free(data['email'], exclude_id=p.id)
    if 'primaryDoctor' in data:
        p.primary_doctor = _resolve_primary_doctor(data['primaryDoctor'])
    for key, attr in _FIELD_MAP.items():
        if key not in data:
            continue
        value = data[key]
        if attr in _MERGED:
            value = {**(getattr(p, attr) or {}), **value}
        setattr(p, attr, value)
    p.save()
    log_action(user=actor, action='patient.update', object_type='patient', object_id=p.id,
               detail={'fields': sorted(data)})
    return p


@transaction.atomic
def soft_delete_patient(patient_id: int, *, actor: User) -> Patient:
    p = get_patient(patient_id)
    p.is_active = False
    p.save(update_fields=['is_active', 'updated_at'])
    log_action(user=actor, action='patient.delete', object_type='patient', object_id=p.id)
    logger.info('patient %s deactivated by %s', p.id, actor.username)
    return p


def medical_history(patient_id: int) -> list:
    return get_patient(patient_id).medical_history


def active_medications(patient_id: int) -> list:
    return [m for m in get_patient(patient_id).current_medications if m.get('isActive', True)]
