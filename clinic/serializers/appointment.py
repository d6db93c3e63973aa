from rest_framework import serializers

from clinic.models import Appointment
from clinic.serializers.common import clean_text, full_items
from clinic.services.scheduling import TIME_PATTERN, normalize_time

TIME_MESSAGE = 'Please provide a valid time format (HH:MM)'


class PrescriptionSerializer(serializers.Serializer):
    medication = serializers.CharField(max_length=200)
    dosage = serializers.CharField(max_length=100)
    frequency = serializers.CharField(max_length=100)
    duration = serializers.CharField(max_length=100)
    instructions = serializers.CharField(max_length=500, required=False, allow_blank=True)


class AppointmentWriteSerializer(serializers.Serializer):
    """Create/update body for an appointment.

    ``time`` accepts a one- or two-digit hour and is stored zero padded,
    so ``9:00`` and ``09:00`` name the same slot.
    """
    patient = serializers.IntegerField(min_value=1, error_messages={'invalid': 'Valid patient ID is required'})
    doctor = serializers.IntegerField(min_value=1, error_messages={'invalid': 'Valid doctor ID is required'})
    type = serializers.ChoiceField(choices=[c[0] for c in Appointment.TYPE_CHOICES],
                                   error_messages={'invalid_choice': 'Invalid appointment type'})
    date = serializers.DateField(error_messages={'invalid': 'Please provide a valid date'})
    time = serializers.RegexField(TIME_PATTERN, error_messages={'invalid': TIME_MESSAGE})
    duration = serializers.IntegerField(
        min_value=15, max_value=480,
        error_messages={'min_value': 'Duration must be between 15 and 480 minutes',
                        'max_value': 'Duration must be between 15 and 480 minutes'},
    )
    reason = serializers.CharField(max_length=500,
                                   error_messages={'blank': 'Reason is required and cannot exceed 500 characters',
                                                   'max_length': 'Reason is required and cannot exceed 500 characters'})
    status = serializers.ChoiceField(choices=[c[0] for c in Appointment.STATUS_CHOICES], required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    symptoms = serializers.ListField(child=serializers.CharField(max_length=200), required=False)
    diagnosis = serializers.CharField(max_length=500, required=False, allow_blank=True)
    treatment = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    prescriptions = PrescriptionSerializer(many=True, required=False)
    followUpRequired = serializers.BooleanField(required=False)
    followUpDate = serializers.DateField(required=False, allow_null=True)

    def validate_time(self, v):
        return normalize_time(v)

    def validate_reason(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Reason is required and cannot exceed 500 characters')
        return v

    def validate_notes(self, v):
        return clean_text(v)

    def validate_prescriptions(self, v):
        return full_items(PrescriptionSerializer, v)


class AppointmentListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Appointment.STATUS_CHOICES], required=False)
    type = serializers.ChoiceField(choices=[c[0] for c in Appointment.TYPE_CHOICES], required=False)
    doctor = serializers.IntegerField(min_value=1, required=False)
    patient = serializers.IntegerField(min_value=1, required=False)
    date = serializers.DateField(required=False)
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)


class AvailabilityQuerySerializer(serializers.Serializer):
    date = serializers.DateField(error_messages={'required': 'Date is required',
                                                 'invalid': 'Please provide a valid date'})
