import json
import logging

logger = logging.getLogger(__name__)


def load_json(value, default=None):
	"""Decode a JSON-ish stored value; anything unreadable becomes ``default``."""
	if value is None:
		return default
	if isinstance(value, (list, dict, int, float, bool)):
		return value
	if isinstance(value, bytes):
		value = value.decode('utf-8', errors='replace')
	if isinstance(value, str):
		if not value.strip():
			return default
		try:
			return json.loads(value)
		except ValueError:
			return default
	return default


def to_int(value):
	"""Positive integer id or None. Booleans are not ids."""
	if isinstance(value, bool) or value is None:
		return None
	try:
		number = int(str(value).strip())
	except (TypeError, ValueError):
		return None
	return number if number > 0 else None


def parse_id_list(value):
	"""Ids from a JSON array (or array of {"id"} objects) or a comma separated string."""
	parsed = load_json(value)
	if parsed is None and isinstance(value, str):
		parsed = [part for part in value.split(',') if part.strip()]
	if isinstance(parsed, (int, str)) and not isinstance(parsed, bool):
		parsed = [parsed]
	if not isinstance(parsed, list):
		return []
	ids = []
	for item in parsed:
		if isinstance(item, dict):
			item = item.get('id', item.get('subjectId'))
		number = to_int(item)
		if number is not None:
			ids.append(number)
	return ids


def first_id(value):
	ids = parse_id_list(value)
	return ids[0] if ids else None


def parse_answer_map(value, context=None):
	parsed = load_json(value, default={})
	if not isinstance(parsed, dict):
		logger.warning("Discarding unreadable answer map%s", f" ({context})" if context else '')
		return {}
	return {str(k): v for k, v in parsed.items()}
