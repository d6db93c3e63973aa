"""
Django admin registrations.

The patient admin reads through ``Patient.all_objects`` so soft-deleted
records stay reachable for audits.
"""
from django.contrib import admin

from .models import Appointment, AuditEvent, Patient, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'email', 'gender', 'is_active', 'created_at')
    list_filter = ('is_active', 'gender', 'blood_type')
    search_fields = ('first_name', 'last_name', 'email', 'phone')

    def get_queryset(self, request):
        return Patient.all_objects.select_related('primary_doctor')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'date', 'time', 'duration', 'doctor', 'patient', 'type', 'status')
    list_filter = ('status', 'type', 'date')
    search_fields = ('patient__first_name', 'patient__last_name', 'doctor__username', 'reason')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'user', 'object_type', 'object_id')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
