from django.test import SimpleTestCase, TestCase

from feedback.models import FeedbackResponse
from feedback.services.analytics import aggregate, department_analytics
from feedback.services.lookups import SubjectInfo
from feedback.services.normalizer import NormalizedQuestion
from feedback.services.readers import MasterResponseReader, ResponseRecord
from feedback.tests.helpers import make_form, make_staff, make_subject, make_tenant, make_user

SUBJECTS = {
    1: SubjectInfo('Data Structures', 'CS301', '3'),
    2: SubjectInfo('Compilers', 'CS501', '5'),
}
STAFF = {7: 'R. Iyer'}


def record(pk, answers, subject_id=1, staff_id=7, questions=None):
    return ResponseRecord(
        source='MASTER',
        id=pk,
        form_id=1,
        submitted_at=None,
        subject_id=subject_id,
        staff_id=staff_id,
        answers=answers,
        questions=questions or {},
    )


class AggregateTests(SimpleTestCase):
    def test_ten_responses_six_rated(self):
        records = [record(i, {'1': 'good'}) for i in range(6)]
        records += [record(6, {'1': ''}), record(7, {}), record(8, {'1': None}), record(9, {'1': 'purple'})]
        result = aggregate(records, SUBJECTS, STAFF)
        self.assertEqual(result['totalResponses'], 10)
        self.assertEqual(result['ratingCount'], 6)
        self.assertEqual(result['avgRating'], 4.0)
        self.assertEqual(result['ratingBuckets'], {1: 0, 2: 0, 3: 0, 4: 6, 5: 0})

    def test_empty_input(self):
        result = aggregate([])
        self.assertEqual(result['totalResponses'], 0)
        self.assertEqual(result['avgRating'], 0)
        self.assertEqual(list(result['ratingBuckets']), [1, 2, 3, 4, 5])
        self.assertEqual(result['subjectStats'], [])
        self.assertEqual(result['staffStats'], [])
        self.assertEqual(result['semesterStats'], [])

    def test_buckets_sum_to_rating_count(self):
        records = [
            record(1, {'1': 'Excellent', '2': 'bad', '3': 'ok'}),
            record(2, {'1': 'yes', '2': 'nothing to add'}),
        ]
        result = aggregate(records, SUBJECTS, STAFF)
        self.assertEqual(sum(result['ratingBuckets'].values()), result['ratingCount'])
        self.assertEqual(result['ratingCount'], 5)

    def test_averages_are_rounded_at_the_end(self):
        records = [record(1, {'1': 'excellent'}), record(2, {'1': 'good'}), record(3, {'1': 'good'})]
        self.assertEqual(aggregate(records)['avgRating'], 4.33)

    def test_slices_and_fallback_names(self):
        records = [
            record(1, {'1': 'excellent'}, subject_id=1, staff_id=7),
            record(2, {'1': 'poor'}, subject_id=2, staff_id=8),
        ]
        result = aggregate(records, SUBJECTS, STAFF)
        subjects = {row['subjectId']: row for row in result['subjectStats']}
        self.assertEqual(subjects[1]['subjectName'], 'Data Structures')
        self.assertEqual(subjects[1]['avgRating'], 5.0)
        self.assertEqual(subjects[2]['responses'], 1)
        staff = {row['staffId']: row for row in result['staffStats']}
        self.assertEqual(staff[7]['staffName'], 'R. Iyer')
        self.assertEqual(staff[8]['staffName'], 'Staff 8')
        self.assertEqual(aggregate(records)['subjectStats'][0]['subjectName'], 'Subject 1')

    def test_semester_counts_once_per_response(self):
        records = [
            record(1, {'1': 'good', '2': 'good'}, subject_id=1),
            record(2, {'1': 'good'}, subject_id=2),
            record(3, {'1': 'good'}, subject_id=None),
        ]
        result = aggregate(records, SUBJECTS, STAFF)
        semesters = {row['semester']: row['responses'] for row in result['semesterStats']}
        self.assertEqual(semesters, {'3': 1, '5': 1, 'N/A': 1})

    def test_semester_filter_skips_other_semesters(self):
        records = [
            record(1, {'1': 'excellent'}, subject_id=1),
            record(2, {'1': 'bad'}, subject_id=2),
            record(3, {'1': 'bad'}, subject_id=None),
        ]
        result = aggregate(records, SUBJECTS, STAFF, semester='3')
        self.assertEqual(result['totalResponses'], 2)
        self.assertEqual(result['avgRating'], 3.0)
        self.assertEqual([row['subjectId'] for row in result['subjectStats']], [1])

    def test_semester_filter_keeps_records_without_subject(self):
        records = [
            record(1, {'1': 'good'}, subject_id=1, staff_id=None),
            record(2, {'1': 'excellent'}, subject_id=None, staff_id=7),
        ]
        result = aggregate(records, SUBJECTS, STAFF, semester='3')
        self.assertEqual(result['ratingCount'], 2)
        self.assertEqual(result['staffStats'], [{'staffId': 7, 'staffName': 'R. Iyer', 'responses': 1, 'avgRating': 5.0}])

    def test_semester_filter_skips_unknown_subjects(self):
        result = aggregate([record(1, {'1': 'good'}, subject_id=99)], SUBJECTS, STAFF, semester='3')
        self.assertEqual(result['totalResponses'], 0)

    def test_identity_fields_are_not_rated(self):
        result = aggregate([record(1, {'name': 'Good Samaritan', 'email': 'ok@example.com', '1': 'average'})])
        self.assertEqual(result['ratingCount'], 1)
        self.assertEqual(result['ratingBuckets'][3], 1)

    def test_rating_questions_use_numeric_values(self):
        questions = {'q1': NormalizedQuestion(id='q1', text='Score', type='rating')}
        result = aggregate([record(1, {'q1': '7'}, questions=questions), record(2, {'q1': 'n/a'}, questions=questions)])
        self.assertEqual(result['ratingBuckets'][5], 1)
        self.assertEqual(result['ratingCount'], 1)
        self.assertEqual(result['totalResponses'], 2)


class UnreadableAnswersTests(TestCase):
    def setUp(self):
        org, dept = make_tenant()
        subject = make_subject(dept, 'Data Structures', semester='3')
        staff = make_staff(org, dept, 'R. Iyer')
        self.account = make_user('hod', 'DEPT', org, dept).account
        self.form = make_form(org, dept, [staff.id], [subject.id])
        for answers in ({'1': 'good'}, '{broken', ['not', 'a', 'map'], '[1, 2]'):
            FeedbackResponse.objects.create(form=self.form, organization=org, department=dept, answers=answers)

    def test_reader_yields_every_response(self):
        records = list(MasterResponseReader(self.account.organization_id, self.account.department_id).read())
        self.assertEqual(len(records), 4)
        self.assertEqual(sum(1 for r in records if r.answers), 1)

    def test_analytics_counts_the_readable_response(self):
        result = department_analytics(self.account)
        self.assertEqual(result['totalResponses'], 4)
        self.assertEqual(result['ratingCount'], 1)
        self.assertEqual(result['ratingBuckets'][4], 1)
