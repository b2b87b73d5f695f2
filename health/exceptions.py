import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


def _flatten(detail):
    if isinstance(detail, dict):
        if 'detail' in detail and len(detail) == 1:
            return _flatten(detail['detail'])
        parts = []
        for field, value in detail.items():
            text = _flatten(value)
            parts.append(text if field in ('non_field_errors', 'detail') else f"{field}: {text}")
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return ', '.join(_flatten(item) for item in detail)
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception("unhandled error in %s", getattr(view, '__class__', type(view)).__name__, exc_info=exc)
        return Response({'success': False, 'error': 'Internal server error'}, status=500)
    body = {'success': False, 'error': _flatten(resp.data)}
    if isinstance(resp.data, dict) and resp.status_code == 400:
        body['details'] = resp.data
    resp.data = body
    return resp
