"""Account administration and profile endpoints."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import AccountAccess, IsAdminRole, is_self_or_admin
from clinic.serializers.auth import RegisterSerializer
from clinic.serializers.common import PaginationQuerySerializer
from clinic.serializers.user import UserListQuerySerializer, UserUpdateSerializer
from clinic.services import accounts
from clinic.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def users_view(request):
    if request.method == 'POST':
        s = RegisterSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        user = accounts.create_account(
            username=vd['username'], email=vd['email'], password=vd['password'],
            first_name=vd['firstName'], last_name=vd['lastName'], role=vd.get('role'),
            actor=request.user,
        )
        return Response({
            'success': True,
            'message': 'User created successfully',
            'data': accounts.format_user(user),
        }, status=status.HTTP_201_CREATED)

    pq = PaginationQuerySerializer(data=request.query_params)
    pq.is_valid(raise_exception=True)
    q = UserListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = accounts.list_accounts(role=q.validated_data.get('role'), search=q.validated_data.get('search'))
    rows, pagination = paginate(qs, pq.validated_data['page'], pq.validated_data['limit'])
    return Response({
        'success': True,
        'data': [accounts.format_user(u) for u in rows],
        'pagination': pagination,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctors_view(request):
    return Response({
        'success': True,
        'data': [accounts.format_doctor(d) for d in accounts.list_doctors()],
    })


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, AccountAccess])
def user_detail_view(request, pk: int):
    if request.method == 'DELETE':
        accounts.deactivate_account(pk, actor=request.user)
        return Response({'success': True, 'message': 'User deleted successfully'})

    if request.method == 'PUT':
        s = UserUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = accounts.update_account(pk, s.validated_data, actor=request.user)
        return Response({
            'success': True,
            'message': 'User updated successfully',
            'data': accounts.format_user(user),
        })

    user = accounts.get_active_account(pk)
    if not is_self_or_admin(request.user, user.id):
        raise PermissionDenied('Access denied')
    return Response({'success': True, 'data': accounts.format_user(user)})
