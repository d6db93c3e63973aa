"""Appointment booking endpoints and the doctor availability lookup."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import AppointmentAccess
from clinic.serializers.appointment import (
    AppointmentListQuerySerializer,
    AppointmentWriteSerializer,
    AvailabilityQuerySerializer,
)
from clinic.serializers.common import PaginationQuerySerializer
from clinic.services import appointments
from clinic.services.pagination import paginate
from clinic.services.scheduling import doctor_availability


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AppointmentAccess])
def appointments_view(request):
    if request.method == 'POST':
        s = AppointmentWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        a = appointments.create_appointment(s.validated_data, actor=request.user)
        return Response({
            'success': True,
            'message': 'Appointment created successfully',
            'data': appointments.format_appointment(a),
        }, status=status.HTTP_201_CREATED)

    pq = PaginationQuerySerializer(data=request.query_params)
    pq.is_valid(raise_exception=True)
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = appointments.list_appointments(
        status=vd.get('status'), type=vd.get('type'),
        doctor=vd.get('doctor'), patient=vd.get('patient'),
        date=vd.get('date'), date_from=vd.get('dateFrom'), date_to=vd.get('dateTo'),
    )
    rows, pagination = paginate(qs, pq.validated_data['page'], pq.validated_data['limit'])
    return Response({
        'success': True,
        'data': [appointments.format_appointment(a) for a in rows],
        'pagination': pagination,
    })


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, AppointmentAccess])
def appointment_detail_view(request, pk: int):
    if request.method == 'DELETE':
        appointments.cancel_appointment(pk, actor=request.user)
        return Response({'success': True, 'message': 'Appointment cancelled successfully'})

    if request.method == 'PUT':
        s = AppointmentWriteSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        a = appointments.update_appointment(pk, s.validated_data, actor=request.user)
        return Response({
            'success': True,
            'message': 'Appointment updated successfully',
            'data': appointments.format_appointment(a),
        })

    return Response({'success': True, 'data': appointments.format_appointment(appointments.get_appointment(pk))})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def availability_view(request, doctor_id: int):
    q = AvailabilityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'success': True, 'data': doctor_availability(doctor_id, q.validated_data['date'])})
