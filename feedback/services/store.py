"""
Form schema store: department-scoped CRUD for simplified forms, public
form payloads, and the response listing/export reads behind them.
"""
import logging
import math
import re
from datetime import timezone as dt_timezone

from django.conf import settings
from django.db.models import Count, Max

from core.auth import can_access_form
from core.models import Staff, Subject
from ..errors import NotFound, Unauthorized
from ..models import FeedbackForm, FeedbackResponse, LegacyForm
from .lookups import staff_directory, staff_label, subject_directory, subject_label
from .notifications import emit_notification_safe
from .parsing import first_id, load_json, parse_answer_map, parse_id_list
from .readers import LegacyResponseReader, form_questions

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
SUBMITTED_AT_FORMAT = '%Y-%m-%d %H:%M:%S'


def serialize_form(form):
	return {
		'id': form.id,
		'title': form.title,
		'semester': form.semester,
		'description': form.description,
		'startDate': form.start_date,
		'endDate': form.end_date,
		'audience': form.audience,
		'staffIds': parse_id_list(form.staff_ids),
		'subjectIds': parse_id_list(form.subject_ids),
		'questions': load_json(form.questions, default=[]),
		'isActive': form.is_active,
		'accessCode': form.access_code,
		'shareUrl': form.share_url,
		'createdAt': form.created_at,
		'updatedAt': form.updated_at,
	}


def department_forms(account):
	return FeedbackForm.objects.filter(organization_id=account.organization_id, department_id=account.department_id)


def scoped_form(account, form_id):
	form = department_forms(account).filter(id=form_id).first()
	if form is None:
		raise NotFound('Form not found')
	return form


def list_forms(account):
	return [serialize_form(form) for form in department_forms(account).order_by('-id')]


def _apply(form, data):
	form.title = data['title']
	form.semester = data['semester']
	form.description = data.get('description') or None
	form.start_date = data.get('startDate')
	form.end_date = data.get('endDate')
	form.audience = data.get('audience') or None
	form.staff_ids = data['staffIds']
	form.subject_ids = data['subjectIds']
	form.questions = data['questions']
	form.is_active = bool(data.get('isActive'))


def create_form(account, data):
	form = FeedbackForm(organization_id=account.organization_id, department_id=account.department_id)
	_apply(form, data)
	form.save()
	logger.info("Created feedback form %s (%s) for department %s", form.id, form.access_code, form.department_id)
	notify_new_form(form)
	return form


def notify_new_form(form):
	message = f"Semester {form.semester}"
	subject_id = first_id(form.subject_ids)
	if subject_id:
		message += f" • Subject: {subject_label(subject_id, subject_directory(organization_id=form.organization_id))}"
	staff_id = first_id(form.staff_ids)
	if staff_id:
		message += f" • Staff: {staff_label(staff_id, staff_directory(organization_id=form.organization_id))}"
	emit_notification_safe(
		'new_form',
		f"New form: {form.title}",
		message=message,
		link='/department-admin/feedback/generate',
		organization_id=form.organization_id,
		department_id=form.department_id,
	)


def update_form(account, form_id, data):
	form = scoped_form(account, form_id)
	_apply(form, data)
	form.save()
	return form


def delete_form(account, form_id):
	form = scoped_form(account, form_id)
	form.delete()
	logger.info("Deleted feedback form %s", form_id)


def share_url(access_code):
	origin = getattr(settings, 'FEEDBACK_FRONTEND_ORIGIN', 'http://localhost:5173')
	return f"{origin.rstrip('/')}/feedback/public/simple/{access_code}"


def publish_form(account, form_id):
	form = scoped_form(account, form_id)
	form.is_active = True
	if not form.access_code:
		form.save()
	form.share_url = share_url(form.access_code)
	form.save()
	return {'ok': True, 'accessCode': form.access_code, 'url': form.share_url}


def forms_with_counts(account):
	qs = (
		department_forms(account)
		.annotate(response_count=Count('responses'), last_submitted_at=Max('responses__submitted_at'))
		.order_by('-id')
	)
	return [
		{
			'id': form.id,
			'title': form.title,
			'semester': form.semester,
			'slug': form.access_code or None,
			'teacherId': first_id(form.staff_ids),
			'subjectId': first_id(form.subject_ids),
			'responseCount': form.response_count,
			'lastSubmittedAt': form.last_submitted_at,
		}
		for form in qs
	]


def public_form(access_code):
	form = FeedbackForm.objects.filter(access_code=access_code).first()
	if form is None:
		raise NotFound('Form not found')
	if not form.is_active:
		raise NotFound('Form not found or inactive')
	staff = [
		{'id': s.id, 'name': s.display_name, 'departmentId': s.department_id}
		for s in Staff.objects.filter(id__in=parse_id_list(form.staff_ids))
	]
	subjects = list(
		Subject.objects.filter(id__in=parse_id_list(form.subject_ids))
		.values('id', 'name', 'code', 'semester', 'department_id')
	)
	return {
		'id': form.id,
		'title': form.title,
		'description': form.description,
		'startDate': form.start_date,
		'endDate': form.end_date,
		'semester': form.semester,
		'audience': form.audience,
		'staff': staff,
		'subjects': [
			{'id': s['id'], 'name': s['name'], 'code': s['code'], 'semester': s['semester'], 'departmentId': s['department_id']}
			for s in subjects
		],
		'questions': [question.as_dict() for question in form_questions(form)],
	}


def legacy_public_form(access_code):
	form = LegacyForm.objects.filter(access_code=access_code, is_active=True).first()
	if form is None:
		raise NotFound('Form not found or inactive')
	return {
		'id': form.id,
		'title': form.title,
		'description': form.description,
		'questions': [question.as_dict() for question in LegacyResponseReader.questions_of(form)],
	}


def resolve_form(slug, account):
	"""Form by numeric id, access code, or a share URL containing ``slug``; then authorize."""
	slug = str(slug).strip()
	form = None
	if re.fullmatch(r'\d+', slug):
		form = FeedbackForm.objects.filter(id=int(slug)).first()
	if form is None and slug:
		form = FeedbackForm.objects.filter(access_code=slug).first()
		if form is None:
			form = FeedbackForm.objects.filter(share_url__contains=slug).order_by('id').first()
	if form is None:
		raise NotFound('Form not found')
	if not can_access_form(account, form):
		logger.warning("Account %s denied access to form %s", account.pk, form.id)
		raise Unauthorized()
	return form


def form_responses(form, subject_id=None):
	qs = FeedbackResponse.objects.filter(form=form)
	if subject_id:
		qs = qs.filter(subject_id=subject_id)
	return qs.order_by('-submitted_at', '-id')


def format_submitted_at(value):
	return value.astimezone(dt_timezone.utc).strftime(SUBMITTED_AT_FORMAT) if value else ''


def list_responses(form, page=1, limit=DEFAULT_PAGE_SIZE, subject_id=None):
	qs = form_responses(form, subject_id)
	total = qs.count()
	offset = (page - 1) * limit
	items = []
	for response in qs[offset:offset + limit]:
		answers = parse_answer_map(response.answers, context=f"response {response.id}")
		for field in ('name', 'email', 'phone'):
			value = getattr(response, field)
			if value is not None:
				answers[field] = value
		items.append({'id': response.id, 'submittedAt': format_submitted_at(response.submitted_at), 'answers': answers})
	return {'items': items, 'total': total, 'page': page, 'limit': limit, 'totalPages': math.ceil(total / limit)}


def export_rows(form, subject_id=None):
	for response in form_responses(form, subject_id).iterator():
		yield {
			'id': response.id,
			'submittedAt': format_submitted_at(response.submitted_at),
			'name': response.name or '',
			'email': response.email or '',
			'phone': response.phone or '',
			'answers': parse_answer_map(response.answers, context=f"response {response.id}"),
		}


def notify_export_done(form, account, row_count):
	emit_notification_safe(
		'export_done',
		'CSV export is ready',
		message=f"{form.title} • {row_count} row(s) exported" if form.title else f"{row_count} row(s) exported",
		link='/department-admin/feedback/responses',
		organization_id=account.organization_id,
		department_id=account.department_id,
	)
