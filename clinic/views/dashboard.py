"""Dashboard aggregates, available to every authenticated role."""
from __future__ import annotations

from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.services.dashboard import dashboard_stats, recent_activity


class RecentActivityQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, default=20)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats_view(request):
    return Response({'success': True, 'data': dashboard_stats()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def recent_activity_view(request):
    q = RecentActivityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'success': True, 'data': recent_activity(q.validated_data['limit'])})
