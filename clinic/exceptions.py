"""
Unified error envelope for the API.

Every failure leaves the service as ``{"success": false, "message": ...}``
with an optional ``error`` detail.  Storage-level uniqueness violations
are reported as conflicts (400) rather than server errors.
"""
from __future__ import annotations

import logging
import traceback

from django.conf import settings
from django.db import IntegrityError
from django.http import JsonResponse
from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ConflictError(APIException):
    """Duplicate email/handle or a scheduling collision."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource already exists'
    default_code = 'conflict'


class BadRequest(APIException):
    """A well-formed request the current state cannot honour."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request'
    default_code = 'bad_request'


def _flatten_messages(data) -> list[str]:
    if isinstance(data, dict):
        out: list[str] = []
        for value in data.values():
            out.extend(_flatten_messages(value))
        return out
    if isinstance(data, (list, tuple)):
        out = []
        for value in data:
            out.extend(_flatten_messages(value))
        return out
    return [str(data)]


def _show_stack() -> bool:
    return getattr(settings, 'ENV', 'dev') != 'prod'


def api_exception_handler(exc, context):
    if isinstance(exc, IntegrityError):
        logger.warning('integrity violation: %s', exc)
        return Response(
            {'success': False, 'message': 'Resource already exists', 'error': str(exc)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', getattr(context.get('view'), '__name__', 'view'), exc_info=exc)
        body = {'success': False, 'message': 'Internal server error'}
        if _show_stack():
            body['error'] = str(exc)
            body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        return Response(
            {'success': False, 'message': 'Validation failed', 'error': ', '.join(_flatten_messages(resp.data))},
            status=resp.status_code,
            headers=_passthrough_headers(resp),
        )

    if isinstance(exc, NotAuthenticated):
        return Response({'success': False, 'message': 'Access denied. No token provided.'},
                        status=resp.status_code, headers=_passthrough_headers(resp))

    # normalize response
    if isinstance(resp.data, dict) and 'detail' in resp.data:
        message = str(resp.data['detail'])
    else:
        message = ', '.join(_flatten_messages(resp.data))
    return Response({'success': False, 'message': message}, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    return {k: v for k, v in resp.items() if k in ('WWW-Authenticate', 'Retry-After')}


def json_not_found(request, exception=None):
    return JsonResponse({'success': False, 'message': 'Resource not found'}, status=404)


def json_server_error(request):
    return JsonResponse({'success': False, 'message': 'Internal server error'}, status=500)
