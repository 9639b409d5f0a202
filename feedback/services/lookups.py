"""Display-name lookups for subjects, staff and departments.

A failed lookup only costs the names: callers fall back to "<Type> <id>".
"""
import logging
from collections import namedtuple

from django.db import DatabaseError

from core.models import Department, Staff, Subject

logger = logging.getLogger(__name__)

SubjectInfo = namedtuple('SubjectInfo', ['name', 'code', 'semester'])


def subject_label(subject_id, subjects):
	info = subjects.get(subject_id)
	return info.name if info and info.name else f"Subject {subject_id}"


def staff_label(staff_id, staff_names):
	return staff_names.get(staff_id) or f"Staff {staff_id}"


def department_label(department_id, departments):
	return departments.get(department_id) or f"Dept {department_id}"


def subject_directory(department_id=None, organization_id=None):
	qs = Subject.objects.all()
	if department_id is not None:
		qs = qs.filter(department_id=department_id)
	if organization_id is not None:
		qs = qs.filter(department__organization_id=organization_id)
	try:
		return {
			row['id']: SubjectInfo(row['name'], row['code'], row['semester'] or '')
			for row in qs.values('id', 'name', 'code', 'semester')
		}
	except DatabaseError as exc:
		logger.warning("Subject lookup failed, using fallback labels: %s", exc)
		return {}


def staff_directory(organization_id=None, department_id=None):
	qs = Staff.objects.all()
	if organization_id is not None:
		qs = qs.filter(organization_id=organization_id)
	if department_id is not None:
		qs = qs.filter(department_id=department_id)
	try:
		return {row['id']: row['name'] for row in qs.values('id', 'name') if row['name']}
	except DatabaseError as exc:
		logger.warning("Staff lookup failed, using fallback labels: %s", exc)
		return {}


def department_directory(organization_id):
	try:
		return dict(Department.objects.filter(organization_id=organization_id).values_list('id', 'name'))
	except DatabaseError as exc:
		logger.warning("Department lookup failed, using fallback labels: %s", exc)
		return {}
