"""
Cascading filter lists for the department dashboard.

Given any of semester, subject and staff, narrow the other two lists. The
staff/subject assignment table is missing on some deployments, so every step
has a broader fallback and the lists are never an error.
"""
import logging

from django.db import DatabaseError, transaction

from core.models import Staff, StaffSubject, Subject
from .parsing import parse_id_list
from .schema import staff_subject_mapping_available

logger = logging.getLogger(__name__)


class MappingUnavailable(Exception):
	pass


def _semester_key(value):
	return (int(value), '') if value.isdigit() else (999, value)


def department_semesters(department_id):
	values = (
		Subject.objects.filter(department_id=department_id)
		.exclude(semester='')
		.values_list('semester', flat=True)
		.distinct()
	)
	return sorted({value for value in values if value}, key=_semester_key)


def _subject_rows(qs):
	return [
		{'id': s.id, 'name': s.name, 'code': s.code, 'semester': s.semester}
		for s in qs.order_by('name', 'id')
	]


def _staff_rows(qs):
	rows = [{'id': s.id, 'name': s.display_name} for s in qs.distinct()]
	return sorted(rows, key=lambda row: (row['name'].lower(), row['id']))


def resolve_subjects(department_id, semester=None, staff_id=None):
	qs = Subject.objects.filter(department_id=department_id)
	if semester:
		qs = qs.filter(semester=str(semester))
	if not staff_id:
		return _subject_rows(qs)
	try:
		if not staff_subject_mapping_available():
			raise MappingUnavailable()
		with transaction.atomic():
			return _subject_rows(qs.filter(staff_links__staff_id=staff_id).distinct())
	except (MappingUnavailable, DatabaseError):
		logger.warning("Staff/subject mapping unavailable, listing all subjects for semester %s", semester or '*')
		return _subject_rows(qs)


def _mapped_staff(department_id, semester=None, subject_id=None):
	if not staff_subject_mapping_available():
		raise MappingUnavailable()
	qs = Staff.objects.filter(department_id=department_id)
	if subject_id:
		links = StaffSubject.objects.filter(subject_id=subject_id)
		if semester:
			links = links.filter(subject__semester=str(semester))
		return _staff_rows(qs.filter(id__in=links.values('staff_id')))
	if semester:
		links = StaffSubject.objects.filter(subject__semester=str(semester), subject__department_id=department_id)
		return _staff_rows(qs.filter(id__in=links.values('staff_id')))
	return _staff_rows(qs)


def _denormalized_staff(department_id, semester=None, subject_id=None):
	if subject_id:
		allowed = {subject_id}
	else:
		subjects = Subject.objects.filter(department_id=department_id)
		if semester:
			subjects = subjects.filter(semester=str(semester))
		allowed = set(subjects.values_list('id', flat=True))
	roster = list(Staff.objects.filter(department_id=department_id))
	matched = [s for s in roster if allowed.intersection(parse_id_list(s.subjects))]
	return _staff_rows(Staff.objects.filter(id__in=[s.id for s in (matched or roster)]))


def resolve_staff(department_id, semester=None, subject_id=None):
	try:
		with transaction.atomic():
			return _mapped_staff(department_id, semester, subject_id)
	except (MappingUnavailable, DatabaseError):
		logger.warning("Staff/subject mapping unavailable, matching per-staff subject lists")
	try:
		with transaction.atomic():
			return _denormalized_staff(department_id, semester, subject_id)
	except DatabaseError as exc:
		logger.warning("Per-staff subject lists unreadable, returning the department roster: %s", exc)
		return _staff_rows(Staff.objects.filter(department_id=department_id))


def resolve_meta(department_id, semester=None, subject_id=None, staff_id=None):
	return {
		'semesters': department_semesters(department_id),
		'subjects': resolve_subjects(department_id, semester, staff_id),
		'staff': resolve_staff(department_id, semester, subject_id),
	}
