"""
Database models for the front-desk backend.

These models capture the three stores of the system: staff accounts,
patient records and appointments.  Nested, ordered collections on a
patient or an appointment (medical history, medications, allergies,
prescriptions) are kept as JSON documents on the owning row and are
validated by the request serializers before they reach the database.
"""
from __future__ import annotations

from datetime import date as date_cls, datetime, timedelta

from django.contrib.auth.models import AbstractUser
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


def calendar_age(born: date_cls, today: date_cls | None = None) -> int:
    """Whole years between ``born`` and ``today``."""
    today = today or timezone.localdate()
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


class User(AbstractUser):
    """Staff account with a role.

    Roles mirror the dashboard roles: 'admin', 'doctor', 'nurse' and
    'staff'.  Accounts are never removed; deactivation clears
    ``is_active`` and ``last_login`` records the last successful login.
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_NURSE = 'nurse'
    ROLE_STAFF = 'staff'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_STAFF, 'Staff'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_STAFF, db_index=True)

    class Meta(AbstractUser.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['email'], condition=Q(is_active=True), name='uniq_active_user_email'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class ActivePatientManager(models.Manager):
    """Default read view: soft-deleted patients are invisible."""

    def get_queryset(self):
        return super().get_queryset().filter(is_active=True)


class Patient(models.Model):
    """A person receiving care.

    ``Patient.objects`` only returns active records; ``Patient.all_objects``
    is the include-inactive view used for administrative audits.
    """
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]
    BLOOD_TYPE_CHOICES = [(t, t) for t in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')]

    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(max_length=254)
    phone = models.CharField(max_length=32)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    address = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    emergency_contact = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    medical_history = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    current_medications = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    allergies = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, blank=True)
    insurance_provider = models.CharField(max_length=100, blank=True)
    insurance_number = models.CharField(max_length=100, blank=True)
    # Weak reference: losing the doctor account must not remove the patient
    primary_doctor = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='primary_patients'
    )
    notes = models.TextField(max_length=1000, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    all_objects = models.Manager()
    objects = ActivePatientManager()

    class Meta:
        default_manager_name = 'all_objects'
        indexes = [
            models.Index(fields=['first_name', 'last_name'], name='clinic_patient_name_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['email'], condition=Q(is_active=True), name='uniq_active_patient_email'
            ),
        ]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def age(self) -> int:
        return calendar_age(self.date_of_birth)

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"


class Appointment(models.Model):
    """A scheduled encounter between one patient and one doctor account.

    The (doctor, date, time) triple is unique across every row, whatever
    its status, so a cancelled booking still occupies its exact slot at
    the storage level.
    """
    TYPE_CHOICES = [
        ('checkup', 'Checkup'),
        ('consultation', 'Consultation'),
        ('followup', 'Follow-up'),
        ('emergency', 'Emergency'),
        ('procedure', 'Procedure'),
    ]

    STATUS_SCHEDULED = 'scheduled'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_IN_PROGRESS = 'in-progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_NO_SHOW = 'no-show'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No-show'),
    ]
    # Rows in these states never block a doctor's time
    INACTIVE_STATUSES = (STATUS_CANCELLED, STATUS_NO_SHOW)
    PENDING_STATUSES = (STATUS_SCHEDULED, STATUS_CONFIRMED)

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='doctor_appointments')
    type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    date = models.DateField()
    # Wall-clock start, stored as zero-padded "HH:MM"
    time = models.CharField(max_length=5)
    duration = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(15), MaxValueValidator(480)]
    )
    reason = models.CharField(max_length=500)
    notes = models.TextField(max_length=1000, blank=True)
    symptoms = models.JSONField(default=list, blank=True)
    diagnosis = models.CharField(max_length=500, blank=True)
    treatment = models.TextField(max_length=1000, blank=True)
    prescriptions = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    follow_up_required = models.BooleanField(default=False)
    follow_up_date = models.DateField(null=True, blank=True)
    created_by = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name='appointments_created'
    )
    updated_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments_updated'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'date'], name='clinic_appt_patient_date_idx'),
            models.Index(fields=['doctor', 'date'], name='clinic_appt_doctor_date_idx'),
            models.Index(fields=['date', 'time'], name='clinic_appt_date_time_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'date', 'time'], name='uniq_doctor_date_time'),
        ]

    @property
    def start_minutes(self) -> int:
        hours, minutes = self.time.split(':')
        return int(hours) * 60 + int(minutes)

    @property
    def starts_at(self) -> datetime:
        naive = datetime.combine(self.date, datetime.min.time()) + timedelta(minutes=self.start_minutes)
        return timezone.make_aware(naive)

    @property
    def end_time(self) -> str:
        end = (self.start_minutes + self.duration) % (24 * 60)
        return f"{end // 60:02d}:{end % 60:02d}"

    def __str__(self) -> str:
        return f"{self.date} {self.time} d={self.doctor_id} p={self.patient_id} ({self.status})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinic_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
