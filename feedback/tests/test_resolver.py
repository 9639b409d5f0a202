import json
from unittest import mock

from django.test import TestCase

from feedback.services import resolver
from feedback.services.schema import staff_subject_mapping_available
from feedback.tests.helpers import make_staff, make_subject, make_tenant


def names(rows):
    return [row['name'] for row in rows]


class ResolverTestBase(TestCase):
    def setUp(self):
        self.org, self.dept = make_tenant()
        self.os = make_subject(self.dept, 'Operating Systems', semester='3')
        self.dbms = make_subject(self.dept, 'Databases', semester='3')
        self.ml = make_subject(self.dept, 'Machine Learning', semester='5')
        self.anil = make_staff(self.org, self.dept, 'Anil', teaches=[self.os])
        self.bina = make_staff(self.org, self.dept, 'Bina', teaches=[self.ml])
        self.chitra = make_staff(self.org, self.dept, 'Chitra', subjects=json.dumps([self.dbms.id]))
        _, other_dept = make_tenant('Elsewhere', 'Physics')
        make_staff(other_dept.organization, other_dept, 'Outsider', teaches=[self.os])


class MappedResolverTests(ResolverTestBase):
    def setUp(self):
        super().setUp()
        patcher = mock.patch.object(resolver, 'staff_subject_mapping_available', return_value=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_staff_for_subject_only_assigned(self):
        self.assertEqual(names(resolver.resolve_staff(self.dept.id, subject_id=self.os.id)), ['Anil'])

    def test_staff_for_unassigned_subject_is_empty(self):
        self.assertEqual(resolver.resolve_staff(self.dept.id, subject_id=self.dbms.id), [])

    def test_staff_for_subject_in_other_semester(self):
        self.assertEqual(resolver.resolve_staff(self.dept.id, semester='5', subject_id=self.os.id), [])

    def test_staff_for_semester(self):
        self.assertEqual(names(resolver.resolve_staff(self.dept.id, semester='5')), ['Bina'])

    def test_no_filters_lists_department(self):
        self.assertEqual(names(resolver.resolve_staff(self.dept.id)), ['Anil', 'Bina', 'Chitra'])

    def test_subjects_for_staff_in_semester(self):
        rows = resolver.resolve_subjects(self.dept.id, semester='3', staff_id=self.anil.id)
        self.assertEqual([row['id'] for row in rows], [self.os.id])

    def test_subjects_for_semester(self):
        rows = resolver.resolve_subjects(self.dept.id, semester='3')
        self.assertEqual([row['name'] for row in rows], ['Databases', 'Operating Systems'])
        self.assertEqual(sorted(rows[0]), ['code', 'id', 'name', 'semester'])


class UnmappedResolverTests(ResolverTestBase):
    def setUp(self):
        super().setUp()
        patcher = mock.patch.object(resolver, 'staff_subject_mapping_available', return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_falls_back_to_roster(self):
        rows = resolver.resolve_staff(self.dept.id, subject_id=self.os.id)
        self.assertEqual(names(rows), ['Anil', 'Bina', 'Chitra'])

    def test_uses_per_staff_subject_lists(self):
        rows = resolver.resolve_staff(self.dept.id, subject_id=self.dbms.id)
        self.assertEqual(names(rows), ['Chitra'])

    def test_comma_separated_lists(self):
        self.bina.subjects = f"{self.ml.id}, {self.dbms.id}"
        self.bina.save()
        rows = resolver.resolve_staff(self.dept.id, semester='3')
        self.assertEqual(names(rows), ['Bina', 'Chitra'])

    def test_subjects_ignore_staff_filter(self):
        rows = resolver.resolve_subjects(self.dept.id, semester='3', staff_id=self.anil.id)
        self.assertEqual(len(rows), 2)


class MetaTests(ResolverTestBase):
    def test_semesters_numeric_first(self):
        make_subject(self.dept, 'Ethics', semester='Elective')
        make_subject(self.dept, 'Project', semester='10')
        make_subject(self.dept, 'Untagged', semester='')
        self.assertEqual(resolver.department_semesters(self.dept.id), ['3', '5', '10', 'Elective'])

    def test_meta_shape(self):
        with mock.patch.object(resolver, 'staff_subject_mapping_available', return_value=True):
            meta = resolver.resolve_meta(self.dept.id, semester='5')
        self.assertEqual(sorted(meta), ['semesters', 'staff', 'subjects'])
        self.assertEqual([row['name'] for row in meta['subjects']], ['Machine Learning'])
        self.assertEqual(names(meta['staff']), ['Bina'])

    def test_mapping_detection(self):
        staff_subject_mapping_available.cache_clear()
        self.assertTrue(staff_subject_mapping_available())
