"""
Rating inference: turn whatever a respondent answered into a 1..5 star rating.

``infer_rating`` is pure. It only looks at the normalized question (type and
options) and the raw answer value, and returns an int in [1, 5] or None when
the answer carries no rating.
"""
import math

from .normalizer import RATING

MIN_RATING = 1
MAX_RATING = 5
SINGLE_OPTION_RATING = 3

# Highest tier first; the first tier with a matching keyword wins.
# Keywords match as substrings of the answer: "disagree" lands in tier 4,
# "very poor" in tier 2 and "not sure" in tier 2. Stored ratings depend on
# this order, so tiers are not reordered or made word-exact.
KEYWORD_TIERS = (
	(5, ('excellent', 'strongly agree', 'stronglyagree', 'very satisfied', 'very good', 'outstanding')),
	(4, ('good', 'agree', 'satisfied', 'yes')),
	(3, ('neutral', 'average', 'ok', 'okay', 'maybe')),
	(2, ('poor', 'disagree', 'no')),
	(1, ('very poor', 'strongly disagree', 'stronglydisagree', 'terrible', 'bad')),
)


def round_half_up(number):
	return int(math.floor(number + 0.5))


def clamp(rating):
	return max(MIN_RATING, min(MAX_RATING, rating))


def coerce_number(value):
	"""Finite float from a number or numeric string, else None."""
	if isinstance(value, bool) or value is None:
		return None
	if isinstance(value, (int, float)):
		number = float(value)
	elif isinstance(value, str):
		text = value.strip()
		if not text:
			return None
		try:
			number = float(text)
		except ValueError:
			return None
	else:
		return None
	return number if math.isfinite(number) else None


def answer_text(value):
	if value is None:
		return ''
	if isinstance(value, bool):
		return 'true' if value else 'false'
	if isinstance(value, (list, tuple)):
		return ','.join(answer_text(item) for item in value)
	return str(value).strip().lower()


def keyword_rating(text):
	for rating, keywords in KEYWORD_TIERS:
		for keyword in keywords:
			if keyword in text:
				return rating
	return None


def position_rating(text, options):
	lowered = [str(option).strip().lower() for option in options or []]
	if text not in lowered:
		return None
	if len(lowered) == 1:
		return SINGLE_OPTION_RATING
	fraction = lowered.index(text) / (len(lowered) - 1)
	return clamp(round_half_up(1 + fraction * 4))


def infer_rating(question, value):
	"""Star rating for one answer, or None when it contributes no rating.

	Rating questions coerce the value to a number, round it half up and clamp
	it into range. Any other answer is matched against the keyword tiers, and
	only an answer no keyword matches falls back to its position among the
	question's declared options (first option lowest).
	"""
	if question is not None and question.type == RATING:
		number = coerce_number(value)
		if number is None:
			return None
		return clamp(round_half_up(number))
	text = answer_text(value)
	if not text:
		return None
	rating = keyword_rating(text)
	if rating is not None:
		return rating
	options = question.options if question is not None else None
	return position_rating(text, options)
