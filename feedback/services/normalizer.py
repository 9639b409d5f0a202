"""
Question normalization.

Forms reference their questions in several shapes: a bare catalog id (int or
numeric string), a partial object carrying little more than an id, or a fully
inlined object. Stored type names also come from more than one vocabulary.
Everything is resolved here, once, into a ``NormalizedQuestion`` so renderers
and the analytics never look at the stored shape again.
"""
import logging
import re
from dataclasses import dataclass, field

from .parsing import load_json, to_int

logger = logging.getLogger(__name__)

SINGLE_CHOICE = 'single-choice'
MULTI_CHOICE = 'multi-choice'
RATING = 'rating'
TEXT = 'text'

BOOLEAN_MARKERS = {'TRUE_FALSE', 'TRUEFALSE', 'TF', 'BOOLEAN', 'BOOL'}
SINGLE_CHOICE_MARKERS = {'SINGLE-CHOICE', 'MULTIPLE-CHOICE', 'MULTIPLE_CHOICE', 'RADIO'}
MULTI_CHOICE_MARKERS = {'MULTI-CHOICE', 'MULTIPLE-CHOICE-MULTI', 'CHECKBOX'}
LONG_TEXT_MARKERS = {'LONG', 'LONG_TEXT', 'LONG-TEXT'}

DEFAULT_BOOLEAN_OPTIONS = ['True', 'False']
DEFAULT_SCALE_OPTIONS = ['1', '2', '3', '4', '5']
DROPDOWN_THRESHOLD = 6

OPTION_DELIMITERS = re.compile(r'\r?\n|\||,|;|\t')


@dataclass
class NormalizedQuestion:
	id: object
	text: str
	type: str = TEXT
	options: list = field(default_factory=list)
	multi_select: bool = False
	long_text: bool = False
	render_as_dropdown: bool = False
	required: bool = False

	def as_dict(self):
		return {
			'id': self.id,
			'text': self.text,
			'type': self.type,
			'options': list(self.options),
			'multiSelect': self.multi_select,
			'longText': self.long_text,
			'renderAsDropdown': self.render_as_dropdown,
			'required': self.required,
		}


def _marker(raw_type):
	return str(raw_type or '').upper().strip()


def map_type(raw_type):
	marker = _marker(raw_type)
	if marker.startswith('MCQ_S') or marker in BOOLEAN_MARKERS or marker in SINGLE_CHOICE_MARKERS:
		return SINGLE_CHOICE
	if marker.startswith('MCQ_M') or marker in MULTI_CHOICE_MARKERS:
		return MULTI_CHOICE
	if marker.startswith('NUM') or marker.startswith('RATING'):
		return RATING
	return TEXT


def is_long_text(raw_type):
	return _marker(raw_type) in LONG_TEXT_MARKERS


def _default_options(raw_type):
	marker = _marker(raw_type)
	if marker in BOOLEAN_MARKERS:
		return list(DEFAULT_BOOLEAN_OPTIONS)
	if map_type(raw_type) == RATING:
		return list(DEFAULT_SCALE_OPTIONS)
	return []


def _option_value(item):
	if isinstance(item, dict):
		value = item.get('value', item.get('label'))
		return None if value is None else str(value)
	if item is None or isinstance(item, (list, tuple)):
		return None
	return str(item)


def resolve_options(raw_type, options):
	"""Plain option strings from whichever representation is stored.

	Accepts a list of strings, a list of ``{"key", "value"}`` pairs, a JSON
	encoding of either, or a delimited string. Unreadable payloads give an
	empty list; types with an implicit scale fall back to their defaults.
	"""
	values = []
	parsed = options
	if isinstance(options, str):
		parsed = load_json(options)
		if parsed is None or isinstance(parsed, (int, float, str)):
			parsed = [part.strip() for part in OPTION_DELIMITERS.split(options)]
	if isinstance(parsed, list):
		for item in parsed:
			value = _option_value(item)
			if value is not None and value.strip():
				values.append(value.strip())
	if not values and raw_type is not None:
		return _default_options(raw_type)
	return values


def referenced_ids(entries):
	"""Catalog ids a question list needs looked up (id-only and partial entries)."""
	ids = []
	for entry in entries or []:
		if isinstance(entry, dict):
			number = to_int(entry.get('id'))
			if number is not None and (not entry.get('text') or entry.get('options') is None):
				ids.append(number)
		else:
			number = to_int(entry) if isinstance(entry, (int, str)) else None
			if number is not None:
				ids.append(number)
	return ids


def _placeholder(question_id, index):
	return NormalizedQuestion(id=question_id, text=f"Question {index + 1}")


def _build(question_id, text, raw_type, options, required=False, multi_select=False, long_text=False):
	q_type = map_type(raw_type)
	if multi_select and q_type == SINGLE_CHOICE:
		q_type = MULTI_CHOICE
	multi = q_type == MULTI_CHOICE
	resolved = resolve_options(raw_type, options)
	return NormalizedQuestion(
		id=question_id,
		text=text,
		type=q_type,
		options=resolved,
		multi_select=multi,
		long_text=long_text or is_long_text(raw_type),
		render_as_dropdown=q_type == SINGLE_CHOICE and not multi and len(resolved) > DROPDOWN_THRESHOLD,
		required=bool(required),
	)


def normalize_question(entry, index=0, catalog=None):
	catalog = catalog or {}
	if isinstance(entry, bool):
		return _placeholder(index + 1, index)
	if isinstance(entry, (int, str)):
		number = to_int(entry)
		if number is None:
			return _placeholder(index + 1, index)
		found = catalog.get(str(number))
		if not found:
			return _placeholder(number, index)
		return _build(
			found.get('id', number),
			found.get('text') or f"Question {index + 1}",
			found.get('type'),
			found.get('options'),
			required=found.get('required', False),
		)
	if isinstance(entry, dict):
		number = to_int(entry.get('id'))
		text = entry.get('text') or entry.get('question') or entry.get('label')
		raw_type = entry.get('type')
		options = entry.get('options')
		required = entry.get('required')
		found = catalog.get(str(number)) if number is not None else None
		if found and (not text or options is None):
			text = text or found.get('text')
			raw_type = raw_type or found.get('type')
			if not resolve_options(None, options):
				options = found.get('options')
			if required is None:
				required = found.get('required', False)
		question_id = entry.get('id') if entry.get('id') is not None else index + 1
		return _build(
			question_id,
			text or f"Question {index + 1}",
			raw_type,
			options,
			required=required or False,
			multi_select=bool(entry.get('multiSelect')),
			long_text=bool(entry.get('longText')),
		)
	return _placeholder(index + 1, index)


def normalize_questions(entries, catalog=None):
	entries = load_json(entries, default=[])
	if not isinstance(entries, list):
		logger.warning("Question list is not a list, treating as empty")
		return []
	normalized = []
	for index, entry in enumerate(entries):
		try:
			normalized.append(normalize_question(entry, index, catalog))
		except (TypeError, ValueError, AttributeError):
			logger.warning("Could not normalize question #%s, using a placeholder", index + 1)
			normalized.append(_placeholder(index + 1, index))
	return normalized


def question_lookup(questions):
	return {str(q.id): q for q in questions}
