"""Utility functions for activity logging"""
import logging

from .models import ActivityLog

logger = logging.getLogger(__name__)


def _activity_kwargs(context, action_type, table_name, record_id, details):
    if not action_type or not table_name or record_id in (None, ''):
        logger.warning(
            f"Activity log creation skipped: missing required fields "
            f"(action_type={action_type}, table_name={table_name}, record_id={record_id})"
        )
        return None
    return {
        'user_id': context.user_id if context else None,
        'action_type': action_type,
        'table_name': table_name,
        'record_id': str(record_id),
        'details': details or {},
        'ip_address': context.ip_address if context else None,
    }


def create_activity_log(context=None, action_type=None, table_name=None, record_id=None, details=None):
    """
    Create an activity log entry

    Args:
        context: SessionContext of the acting user (optional)
        action_type: create, update, delete, settings_update, ...
        table_name: Database table the action touched
        record_id: Primary key of the affected row (stored as string)
        details: Dictionary of field values or changes
    """
    kwargs = _activity_kwargs(context, action_type, table_name, record_id, details)
    if kwargs is None:
        return None
    try:
        return ActivityLog.objects.create(**kwargs)
    except Exception as e:
        # Don't fail the main operation if activity logging fails
        logger.error(f"Failed to create activity log: {str(e)}")
        return None


async def acreate_activity_log(context=None, action_type=None, table_name=None, record_id=None, details=None):
    """Async counterpart of create_activity_log for screen controllers"""
    kwargs = _activity_kwargs(context, action_type, table_name, record_id, details)
    if kwargs is None:
        return None
    try:
        return await ActivityLog.objects.acreate(**kwargs)
    except Exception as e:
        logger.error(f"Failed to create activity log: {str(e)}")
        return None
