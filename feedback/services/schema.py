import logging
from functools import lru_cache

from django.db import DatabaseError, connection

from core.models import StaffSubject

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def staff_subject_mapping_available():
	"""Whether this deployment has the staff/subject assignment table.

	Resolved once per process; older databases were migrated without it.
	"""
	try:
		return StaffSubject._meta.db_table in connection.introspection.table_names()
	except DatabaseError:
		logger.warning("Could not inspect tables, assuming no staff/subject mapping")
		return False
