"""
One reading interface over both response storage shapes.

Simplified forms keep their answers as a JSON map on the response row; legacy
forms keep one answer row per question. Both readers yield ``ResponseRecord``
objects, so the analytics and the activity feed never know which table a row
came from.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from django.db import DatabaseError

from ..models import FeedbackForm, FeedbackResponse, LegacyForm, LegacyResponse, Question
from .normalizer import NormalizedQuestion, normalize_questions, question_lookup, referenced_ids
from .parsing import first_id, load_json, parse_answer_map, parse_id_list

logger = logging.getLogger(__name__)

MASTER = 'MASTER'
LEGACY = 'LEGACY'


@dataclass
class ResponseRecord:
	source: str
	id: int
	form_id: int
	submitted_at: Optional[datetime]
	organization_id: Optional[int] = None
	department_id: Optional[int] = None
	subject_id: Optional[int] = None
	staff_id: Optional[int] = None
	name: Optional[str] = None
	email: Optional[str] = None
	phone: Optional[str] = None
	answers: Dict[str, object] = field(default_factory=dict)
	questions: Dict[str, NormalizedQuestion] = field(default_factory=dict)


def question_catalog(*entry_lists):
	"""Catalog rows (by id string) for every id-only or partial question entry."""
	ids = set()
	for entries in entry_lists:
		ids.update(referenced_ids(load_json(entries, default=[])))
	if not ids:
		return {}
	try:
		rows = Question.objects.filter(id__in=ids).values('id', 'type', 'text', 'options', 'required')
		return {str(row['id']): row for row in rows}
	except DatabaseError as exc:
		logger.warning("Question catalog lookup failed, using placeholders: %s", exc)
		return {}


def form_questions(form, catalog=None):
	if catalog is None:
		catalog = question_catalog(form.questions)
	return normalize_questions(form.questions, catalog)


class ResponseReader:
	"""Responses of one tenant scope, optionally narrowed by date and assignment."""

	source = None

	def __init__(self, organization_id, department_id=None):
		self.organization_id = organization_id
		self.department_id = department_id

	def read(self, date_from=None, date_to=None, staff_id=None, subject_id=None) -> Iterator[ResponseRecord]:
		raise NotImplementedError

	def _scoped(self, qs):
		if self.organization_id is not None:
			qs = qs.filter(organization_id=self.organization_id)
		if self.department_id is not None:
			qs = qs.filter(department_id=self.department_id)
		return qs

	@staticmethod
	def _dated(qs, date_from, date_to):
		if date_from:
			qs = qs.filter(submitted_at__date__gte=date_from)
		if date_to:
			qs = qs.filter(submitted_at__date__lte=date_to)
		return qs


class MasterResponseReader(ResponseReader):
	source = MASTER

	def forms(self, staff_id=None, subject_id=None) -> List[FeedbackForm]:
		matched = []
		for form in self._scoped(FeedbackForm.objects.all()):
			if staff_id and staff_id not in parse_id_list(form.staff_ids):
				continue
			if subject_id and subject_id not in parse_id_list(form.subject_ids):
				continue
			matched.append(form)
		return matched

	def read(self, date_from=None, date_to=None, staff_id=None, subject_id=None):
		forms = {form.id: form for form in self.forms(staff_id, subject_id)}
		if not forms:
			return
		catalog = question_catalog(*[form.questions for form in forms.values()])
		lookups = {form_id: question_lookup(form_questions(form, catalog)) for form_id, form in forms.items()}
		qs = self._dated(FeedbackResponse.objects.filter(form_id__in=list(forms)), date_from, date_to)
		for response in qs.order_by('-submitted_at', '-id').iterator():
			form = forms[response.form_id]
			yield ResponseRecord(
				source=self.source,
				id=response.id,
				form_id=response.form_id,
				submitted_at=response.submitted_at,
				organization_id=response.organization_id or form.organization_id,
				department_id=response.department_id or form.department_id,
				subject_id=response.subject_id or first_id(form.subject_ids),
				staff_id=response.staff_id or first_id(form.staff_ids),
				name=response.name,
				email=response.email,
				phone=response.phone,
				answers=parse_answer_map(response.answers, context=f"response {response.id}"),
				questions=lookups[response.form_id],
			)


class LegacyResponseReader(ResponseReader):
	source = LEGACY

	def forms(self, staff_id=None, subject_id=None) -> List[LegacyForm]:
		matched = []
		qs = self._scoped(LegacyForm.objects.all()).prefetch_related('assignments', 'form_questions')
		for form in qs:
			assignments = list(form.assignments.all())
			if staff_id and not any(a.staff_id == staff_id for a in assignments):
				continue
			if subject_id and not any(a.subject_id == subject_id for a in assignments):
				continue
			matched.append(form)
		return matched

	@staticmethod
	def questions_of(form):
		entries = [
			{'id': q.id, 'text': q.text, 'type': q.type, 'options': q.options, 'required': q.required}
			for q in form.form_questions.all()
		]
		return normalize_questions(entries)

	def read(self, date_from=None, date_to=None, staff_id=None, subject_id=None):
		forms = {form.id: form for form in self.forms(staff_id, subject_id)}
		if not forms:
			return
		lookups = {form_id: question_lookup(self.questions_of(form)) for form_id, form in forms.items()}
		qs = self._dated(LegacyResponse.objects.filter(form_id__in=list(forms)), date_from, date_to)
		for response in qs.order_by('-submitted_at', '-id').prefetch_related('answers'):
			form = forms[response.form_id]
			assignment = next(iter(form.assignments.all()), None)
			yield ResponseRecord(
				source=self.source,
				id=response.id,
				form_id=response.form_id,
				submitted_at=response.submitted_at,
				organization_id=form.organization_id,
				department_id=form.department_id,
				subject_id=assignment.subject_id if assignment else None,
				staff_id=assignment.staff_id if assignment else None,
				answers={str(answer.question_id): answer.answer for answer in response.answers.all()},
				questions=lookups[response.form_id],
			)


def scope_readers(organization_id, department_id=None):
	return [MasterResponseReader(organization_id, department_id), LegacyResponseReader(organization_id, department_id)]
