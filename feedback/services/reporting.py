"""Organization-wide activity feed and response counts across both form shapes."""
import logging
from collections import Counter
from itertools import chain

from ..models import FeedbackResponse, LegacyResponse
from .export import csv_lines
from .lookups import (
	department_directory, department_label, staff_directory, staff_label, subject_directory, subject_label,
)
from .readers import scope_readers
from .store import format_submitted_at

logger = logging.getLogger(__name__)

ACTIVITY_MAX_LIMIT = 1000
ACTIVITY_CSV_HEADER = ['id', 'submittedAt', 'name', 'email', 'phone', 'department', 'subject', 'staff', 'source']


def organization_records(organization_id, date_from=None, date_to=None, department_id=None, staff_id=None, subject_id=None):
	records = chain.from_iterable(
		reader.read(date_from=date_from, date_to=date_to) for reader in scope_readers(organization_id)
	)
	for record in records:
		if department_id and record.department_id != department_id:
			continue
		if staff_id and record.staff_id != staff_id:
			continue
		if subject_id and record.subject_id != subject_id:
			continue
		yield record


def organization_activity(organization_id, limit=None, **filters):
	records = sorted(
		organization_records(organization_id, **filters),
		key=lambda r: (r.submitted_at is not None, r.submitted_at, r.id),
		reverse=True,
	)
	if limit is not None:
		records = records[:limit]
	departments = department_directory(organization_id)
	subjects = subject_directory(organization_id=organization_id)
	staff_names = staff_directory(organization_id=organization_id)
	return [
		{
			'id': record.id,
			'submittedAt': format_submitted_at(record.submitted_at),
			'name': record.name or '',
			'email': record.email or '',
			'phone': record.phone or '',
			'departmentId': record.department_id,
			'subjectId': record.subject_id,
			'staffId': record.staff_id,
			'departmentName': department_label(record.department_id, departments) if record.department_id else None,
			'subjectName': subject_label(record.subject_id, subjects) if record.subject_id else None,
			'staffName': staff_label(record.staff_id, staff_names) if record.staff_id else None,
			'source': record.source,
		}
		for record in records
	]


def activity_csv_lines(organization_id, **filters):
	rows = (
		{
			'id': item['id'],
			'submittedAt': item['submittedAt'],
			'name': item['name'],
			'email': item['email'],
			'phone': item['phone'],
			'answers': {
				'department': item['departmentName'] or '',
				'subject': item['subjectName'] or '',
				'staff': item['staffName'] or '',
				'source': item['source'],
			},
		}
		for item in organization_activity(organization_id, **filters)
	)
	return csv_lines(rows, header=ACTIVITY_CSV_HEADER)


def total_feedback(organization_id):
	master = FeedbackResponse.objects.filter(form__organization_id=organization_id).count()
	legacy = LegacyResponse.objects.filter(form__organization_id=organization_id).count()
	return {'total': master + legacy}


def _counted(counts, label):
	rows = [{'id': key, 'name': label(key), 'responseCount': count} for key, count in counts.items()]
	return sorted(rows, key=lambda row: (row['name'].lower(), row['id']))


def subject_responses(organization_id, department_id=None):
	counts = Counter(
		record.subject_id
		for record in organization_records(organization_id, department_id=department_id)
		if record.subject_id
	)
	subjects = subject_directory(organization_id=organization_id)
	return _counted(counts, lambda subject_id: subject_label(subject_id, subjects))


def staff_responses(organization_id, department_id=None):
	counts = Counter(
		record.staff_id
		for record in organization_records(organization_id, department_id=department_id)
		if record.staff_id
	)
	staff_names = staff_directory(organization_id=organization_id)
	return _counted(counts, lambda staff_id: staff_label(staff_id, staff_names))


def department_responses(organization_id):
	"""Every department of the organization, including those without responses."""
	departments = department_directory(organization_id)
	counts = Counter(record.department_id for record in organization_records(organization_id))
	rows = [
		{'id': department_id, 'name': name, 'responseCount': counts.get(department_id, 0)}
		for department_id, name in departments.items()
	]
	return sorted(rows, key=lambda row: (row['name'].lower(), row['id']))
