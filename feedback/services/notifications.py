import logging

from django.db import DatabaseError, transaction

from core.models import Notification

logger = logging.getLogger(__name__)


def emit_notification_safe(type, title, message='', link='', organization_id=None, department_id=None, role_scope='DepartmentAdmin'):
	"""Create an inbox notification; never lets a failure reach the caller."""
	try:
		with transaction.atomic():
			return Notification.objects.create(
				type=type,
				title=title,
				message=message or '',
				link=link or '',
				role_scope=role_scope,
				organization_id=organization_id,
				department_id=department_id,
			)
	except (DatabaseError, ValueError) as exc:
		logger.warning("Notification %s not emitted: %s", type, exc)
		return None
