"""
Rating aggregation over response records.

``aggregate`` works on any iterable of ``ResponseRecord``; ``department_analytics``
feeds it both storage shapes for one department.
"""
import logging
from itertools import chain

from .lookups import staff_directory, staff_label, subject_directory, subject_label
from .rating import MAX_RATING, MIN_RATING, infer_rating
from .readers import scope_readers

logger = logging.getLogger(__name__)

NO_SEMESTER = 'N/A'


def empty_buckets():
	return {rating: 0 for rating in range(MIN_RATING, MAX_RATING + 1)}


class Tally:
	__slots__ = ('responses', 'rating_sum', 'rating_count')

	def __init__(self):
		self.responses = 0
		self.rating_sum = 0
		self.rating_count = 0

	def add_rating(self, rating):
		self.rating_sum += rating
		self.rating_count += 1

	@property
	def average(self):
		return round(self.rating_sum / self.rating_count, 2) if self.rating_count else 0


def _is_rateable_key(key, questions):
	# Identity fields stored next to the answers are not answers.
	return key in questions or key.lstrip('-').isdigit()


def record_ratings(record):
	"""Ratings inferred from one record's answers, in answer order."""
	ratings = []
	for key, value in record.answers.items():
		if not _is_rateable_key(key, record.questions):
			continue
		rating = infer_rating(record.questions.get(key), value)
		if rating is not None:
			ratings.append(rating)
	return ratings


def aggregate(records, subjects=None, staff_names=None, semester=None):
	"""Distribution, averages and per subject/staff/semester slices of ``records``.

	``subjects`` maps subject id to ``SubjectInfo`` and ``staff_names`` maps
	staff id to a display name; both only feed labels and the semester lookup.
	With ``semester`` set, records whose subject is in another semester are
	skipped and not counted; records without a subject are kept.
	"""
	subjects = subjects or {}
	staff_names = staff_names or {}
	buckets = empty_buckets()
	overall = Tally()
	by_subject = {}
	by_staff = {}
	by_semester = {}

	for record in records:
		info = subjects.get(record.subject_id) if record.subject_id else None
		record_semester = (info.semester if info else '') or NO_SEMESTER
		if semester and record.subject_id and (info is None or str(info.semester) != str(semester)):
			continue

		slices = [by_semester.setdefault(record_semester, Tally())]
		if record.subject_id:
			slices.append(by_subject.setdefault(record.subject_id, Tally()))
		if record.staff_id:
			slices.append(by_staff.setdefault(record.staff_id, Tally()))

		overall.responses += 1
		for tally in slices:
			tally.responses += 1
		for rating in record_ratings(record):
			buckets[rating] += 1
			overall.add_rating(rating)
			for tally in slices:
				tally.add_rating(rating)

	return {
		'totalResponses': overall.responses,
		'ratingCount': overall.rating_count,
		'avgRating': overall.average,
		'ratingBuckets': buckets,
		'subjectStats': [
			{
				'subjectId': subject_id,
				'subjectName': subject_label(subject_id, subjects),
				'responses': tally.responses,
				'avgRating': tally.average,
			}
			for subject_id, tally in by_subject.items()
		],
		'staffStats': [
			{
				'staffId': staff_id,
				'staffName': staff_label(staff_id, staff_names),
				'responses': tally.responses,
				'avgRating': tally.average,
			}
			for staff_id, tally in by_staff.items()
		],
		'semesterStats': [
			{'semester': key, 'responses': tally.responses, 'avgRating': tally.average}
			for key, tally in by_semester.items()
		],
	}


def department_analytics(account, date_from=None, date_to=None, staff_id=None, subject_id=None, semester=None):
	readers = scope_readers(account.organization_id, account.department_id)
	records = chain.from_iterable(
		reader.read(date_from=date_from, date_to=date_to, staff_id=staff_id, subject_id=subject_id)
		for reader in readers
	)
	subjects = subject_directory(organization_id=account.organization_id)
	staff_names = staff_directory(organization_id=account.organization_id)
	result = aggregate(records, subjects, staff_names, semester)
	logger.info(
		"Analytics for department %s: %s responses, %s ratings",
		account.department_id, result['totalResponses'], result['ratingCount'],
	)
	return result
