"""Utility functions for audit logging and pagination"""
import logging

from django.conf import settings
from django.core.paginator import Paginator

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, stock_adjust, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., part number)
        object_reference: Reference identifier (e.g., no transaksi)
    """
    audit_user = user
    if audit_user is None and request is not None and hasattr(request, 'user'):
        audit_user = request.user

    if not action or not model_name or object_id in (None, ''):
        logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
        return None

    try:
        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        # Audit logging never fails the main operation
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def paginate(request, queryset, serializer_class, context=None):
    """
    Paginate a queryset from ``page``/``limit`` query params.

    Returns the response payload used by every list endpoint.
    """
    try:
        page = max(int(request.query_params.get('page', 1)), 1)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = max(int(request.query_params.get('limit', settings.ITEMS_PER_PAGE)), 1)
    except (TypeError, ValueError):
        limit = settings.ITEMS_PER_PAGE

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)
    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return {
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    }
