"""
Public submissions, keyed by a form's access code.

A non-empty email may answer a form only once. The lookup before the insert
gives the friendly error; the conditional unique constraint on
(form, email) decides races, and its IntegrityError is reported the same way.
"""
import logging

from django.db import IntegrityError, transaction

from ..errors import Conflict, NotFound, ValidationFailed
from ..models import FeedbackForm, FeedbackResponse, LegacyAnswer, LegacyForm, LegacyResponse
from .lookups import staff_directory, staff_label, subject_directory, subject_label
from .notifications import emit_notification_safe
from .parsing import first_id, to_int

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = 'Email already used: a response with this email already exists for this form.'
INACTIVE_MESSAGE = 'Form not found or inactive'
ANSWER_KEY_FIELDS = ('questionKey', 'questionId', 'id')


def normalize_answers(answers):
	"""Answer map from a map or from a list of ``{questionKey|questionId|id, answer}`` items.

	Later items win when a key repeats.
	"""
	if answers is None:
		return {}
	if isinstance(answers, dict):
		return {str(key): value for key, value in answers.items()}
	if not isinstance(answers, list):
		raise ValidationFailed(errors={'answers': ['Expected a map or a list of answers.']})
	normalized = {}
	for item in answers:
		if not isinstance(item, dict):
			continue
		key = next((item[field] for field in ANSWER_KEY_FIELDS if item.get(field) is not None), None)
		if key is None:
			continue
		normalized[str(key)] = item.get('answer')
	return normalized


def active_form(access_code):
	form = FeedbackForm.objects.filter(access_code=access_code).first()
	if form is None:
		raise NotFound('Form not found')
	if not form.is_active:
		raise NotFound(INACTIVE_MESSAGE)
	return form


def submit_response(access_code, name=None, email=None, phone=None, answers=None):
	form = active_form(access_code)
	email = (email or '').strip() or None
	normalized = normalize_answers(answers)
	if email and FeedbackResponse.objects.filter(form=form, email=email).exists():
		raise Conflict(DUPLICATE_EMAIL_MESSAGE)
	try:
		with transaction.atomic():
			response = FeedbackResponse.objects.create(
				form=form,
				organization_id=form.organization_id,
				department_id=form.department_id,
				subject_id=first_id(form.subject_ids),
				staff_id=first_id(form.staff_ids),
				access_code=access_code,
				name=(name or '').strip() or None,
				email=email,
				phone=(phone or '').strip() or None,
				answers=normalized,
			)
	except IntegrityError:
		logger.info("Duplicate submission for form %s rejected by the unique constraint", form.id)
		raise Conflict(DUPLICATE_EMAIL_MESSAGE)
	logger.info("Stored response %s for form %s", response.id, form.id)
	notify_new_response(form, response)
	return response


def notify_new_response(form, response):
	parts = []
	if response.name:
		parts.append(f"Student: {response.name}")
	if response.subject_id:
		subjects = subject_directory(organization_id=form.organization_id)
		parts.append(f"Subject: {subject_label(response.subject_id, subjects)}")
	if response.staff_id:
		staff_names = staff_directory(organization_id=form.organization_id)
		parts.append(f"Staff: {staff_label(response.staff_id, staff_names)}")
	emit_notification_safe(
		'new_response',
		f"New response: {form.title or 'Feedback'}",
		message=' • '.join(parts),
		link='/department-admin/feedback/responses',
		organization_id=form.organization_id,
		department_id=form.department_id,
	)


def submit_legacy_response(access_code, answers=None):
	"""Store one legacy response; answers are ``[{formQuestionId, answer}]``."""
	form = LegacyForm.objects.filter(access_code=access_code, is_active=True).first()
	if form is None:
		raise NotFound(INACTIVE_MESSAGE)
	question_ids = set(form.form_questions.values_list('id', flat=True))
	rows = []
	for item in answers if isinstance(answers, list) else []:
		if not isinstance(item, dict):
			continue
		question_id = to_int(item.get('formQuestionId'))
		if question_id not in question_ids:
			continue
		rows.append((question_id, item.get('answer')))
	with transaction.atomic():
		response = LegacyResponse.objects.create(form=form)
		LegacyAnswer.objects.bulk_create([
			LegacyAnswer(response=response, question_id=question_id, answer=answer)
			for question_id, answer in rows
		])
	return response
