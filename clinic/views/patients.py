"""
Patient record endpoints.

Every authenticated role may read; admin, doctor and nurse may write;
only admin may deactivate a record.  Deactivated records answer 404.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import ADMIN_ROLES, PatientAccess
from clinic.serializers.common import PaginationQuerySerializer
from clinic.serializers.patient import PatientListQuerySerializer, PatientWriteSerializer
from clinic.services import patients
from clinic.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, PatientAccess])
def patients_view(request):
    if request.method == 'POST':
        s = PatientWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        p = patients.create_patient(s.validated_data, actor=request.user)
        return Response({
            'success': True,
            'message': 'Patient created successfully',
            'data': patients.format_patient(p),
        }, status=status.HTTP_201_CREATED)

    pq = PaginationQuerySerializer(data=request.query_params)
    pq.is_valid(raise_exception=True)
    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = patients.list_patients(
        search=vd.get('search'),
        gender=vd.get('gender'),
        blood_type=vd.get('bloodType'),
        # the include-inactive view is reserved for administrators
        include_inactive=vd.get('includeInactive', False) and request.user.role in ADMIN_ROLES,
    )
    rows, pagination = paginate(qs, pq.validated_data['page'], pq.validated_data['limit'])
    return Response({
        'success': True,
        'data': [patients.format_patient(p) for p in rows],
        'pagination': pagination,
    })


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, PatientAccess])
def patient_detail_view(request, pk: int):
    if request.method == 'DELETE':
        patients.soft_delete_patient(pk, actor=request.user)
        return Response({'success': True, 'message': 'Patient deleted successfully'})

    if request.method == 'PUT':
        s = PatientWriteSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        p = patients.update_patient(pk, s.validated_data, actor=request.user)
        return Response({
            'success': True,
            'message': 'Patient updated successfully',
            'data': patients.format_patient(p),
        })

    return Response({'success': True, 'data': patients.format_patient(patients.get_patient(pk))})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medical_history_view(request, pk: int):
    return Response({'success': True, 'data': patients.medical_history(pk)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medications_view(request, pk: int):
    return Response({'success': True, 'data': patients.active_medications(pk)})
