from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
import logging

logger = logging.getLogger(__name__)


class InsufficientStock(APIException):
    """Issuing or deducting more units than an item has in stock."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'insufficient_stock'
    default_detail = 'Insufficient stock.'

    def __init__(self, item_name: str, available: int, requested: int):
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f'Insufficient stock for {item_name}: {available} available, {requested} requested.'
        )


class InUse(APIException):
    """Deleting a record that other records still reference."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'in_use'
    default_detail = 'This record is still in use.'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view').__class__.__name__ if context.get('view') else 'view')
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data if isinstance(resp.data, list) else str(resp.data)
    code = getattr(exc, 'default_code', None) if isinstance(exc, (InsufficientStock, InUse)) else 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
