"""Utility functions for activity logging and password reset tokens"""
import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from .models import ActivityLog

logger = logging.getLogger('primegestor.core')


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


def log_activity(request=None, action=None, entity_type=None, entity_id=None,
                 entity_name=None, details='', user=None):
    """
    Create an activity log entry

    Args:
        request: Django/DRF request (for user and IP) - optional if user is provided
        action: CREATE, UPDATE or DELETE
        entity_type: PRODUCT, PURCHASE, SALE, SUPPLIER, CUSTOMER, WAREHOUSE, USER...
        entity_id: ID of the object acted upon
        entity_name: Human-readable name of the object
        details: Free-text description of what happened
        user: Optional user override (defaults to request.user)
    """
    try:
        log_user = user
        if log_user is None and request is not None and hasattr(request, 'user'):
            log_user = request.user

        if not action or not entity_type:
            logger.warning(f"Activity log skipped: missing required fields (action={action}, entity_type={entity_type})")
            return None

        return ActivityLog.objects.create(
            user=log_user if log_user is not None and log_user.is_authenticated else None,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            entity_name=entity_name,
            details=details or '',
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        # Logging the activity must never fail the main operation
        logger.error(f"Failed to create activity log: {str(e)}")
        return None


def generate_reset_token():
    return secrets.token_urlsafe(32)


def reset_token_expiry():
    hours = getattr(settings, 'PASSWORD_RESET_TIMEOUT_HOURS', 1)
    return timezone.now() + timedelta(hours=hours)
