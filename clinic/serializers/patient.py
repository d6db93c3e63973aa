from rest_framework import serializers

from clinic.models import Patient
from clinic.serializers.common import clean_text, full_items


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=200)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zipCode = serializers.CharField(max_length=20)
    country = serializers.CharField(max_length=100, default='United States')


class EmergencyContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    relationship = serializers.CharField(max_length=50)
    phone = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)

    def validate_email(self, v):
        return (v or '').strip().lower()


class MedicalHistoryEntrySerializer(serializers.Serializer):
    condition = serializers.CharField(max_length=200)
    diagnosedDate = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=['active', 'resolved', 'chronic'], default='active')
    notes = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    dosage = serializers.CharField(max_length=100)
    frequency = serializers.CharField(max_length=100)
    startDate = serializers.DateField()
    endDate = serializers.DateField(required=False, allow_null=True)
    prescribedBy = serializers.CharField(max_length=100)
    isActive = serializers.BooleanField(default=True)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and end < start:
            raise serializers.ValidationError('Medication end date cannot precede its start date')
        return attrs


class AllergySerializer(serializers.Serializer):
    allergen = serializers.CharField(max_length=200)
    severity = serializers.ChoiceField(choices=['mild', 'moderate', 'severe'], default='moderate')
    reaction = serializers.CharField(required=False, allow_blank=True, max_length=500)


class PatientWriteSerializer(serializers.Serializer):
    """Create/update body for a patient record.

    Used with ``partial=True`` for updates so that omitted fields keep
    their stored values.
    """
    firstName = serializers.CharField(max_length=50,
                                      error_messages={'blank': 'First name is required and cannot exceed 50 characters'})
    lastName = serializers.CharField(max_length=50,
                                     error_messages={'blank': 'Last name is required and cannot exceed 50 characters'})
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email'})
    phone = serializers.CharField(max_length=32, error_messages={'blank': 'Phone number is required'})
    dateOfBirth = serializers.DateField(error_messages={'invalid': 'Please provide a valid date of birth'})
    gender = serializers.ChoiceField(choices=[c[0] for c in Patient.GENDER_CHOICES],
                                     error_messages={'invalid_choice': 'Gender must be male, female, or other'})
    address = AddressSerializer()
    emergencyContact = EmergencyContactSerializer()
    medicalHistory = MedicalHistoryEntrySerializer(many=True, required=False)
    currentMedications = MedicationSerializer(many=True, required=False)
    allergies = AllergySerializer(many=True, required=False)
    bloodType = serializers.ChoiceField(choices=[c[0] for c in Patient.BLOOD_TYPE_CHOICES],
                                        required=False, allow_blank=True)
    insuranceProvider = serializers.CharField(max_length=100, required=False, allow_blank=True)
    insuranceNumber = serializers.CharField(max_length=100, required=False, allow_blank=True)
    primaryDoctor = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_firstName(self, v):
        return clean_text(v)

    def validate_lastName(self, v):
        return clean_text(v)

    def validate_notes(self, v):
        return clean_text(v)

    def validate_medicalHistory(self, v):
        return full_items(MedicalHistoryEntrySerializer, v)

    def validate_currentMedications(self, v):
        return full_items(MedicationSerializer, v)

    def validate_allergies(self, v):
        return full_items(AllergySerializer, v)


class PatientListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(max_length=64, required=False, allow_blank=True)
    gender = serializers.ChoiceField(choices=[c[0] for c in Patient.GENDER_CHOICES], required=False)
    bloodType = serializers.ChoiceField(choices=[c[0] for c in Patient.BLOOD_TYPE_CHOICES], required=False)
    includeInactive = serializers.BooleanField(default=False)
