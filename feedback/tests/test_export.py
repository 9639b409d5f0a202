import io

from django.test import SimpleTestCase, TestCase

from feedback.models import FeedbackResponse
from feedback.services.export import csv_lines, export_header, format_cell, write_csv
from feedback.services.store import export_rows
from feedback.tests.helpers import make_form, make_tenant

ROWS = [
    {
        'id': 1,
        'submittedAt': '2024-01-01 10:00:00',
        'name': 'Asha',
        'email': 'asha@example.com',
        'phone': '',
        'answers': {'1': 'Good', '2': 'More labs'},
    },
    {
        'id': 2,
        'submittedAt': '2024-01-02 11:00:00',
        'name': '',
        'email': '',
        'phone': '',
        'answers': {'3': ['Trees', 'Graphs'], '1': 'Average'},
    },
]


class ExportTests(SimpleTestCase):
    def test_header_is_union_in_first_seen_order(self):
        self.assertEqual(export_header(ROWS), ['id', 'submittedAt', 'name', 'email', 'phone', '1', '2', '3'])

    def test_missing_keys_render_empty_cells(self):
        text = ''.join(csv_lines(ROWS))
        self.assertEqual(
            text.splitlines(),
            [
                '"id","submittedAt","name","email","phone","1","2","3"',
                '"1","2024-01-01 10:00:00","Asha","asha@example.com","","Good","More labs",""',
                '"2","2024-01-02 11:00:00","","","","Average","","Trees; Graphs"',
            ],
        )

    def test_quotes_are_doubled(self):
        rows = [dict(ROWS[1], answers={'1': 'He said "great"'})]
        self.assertIn('"He said ""great"""', ''.join(csv_lines(rows)))

    def test_identity_column_wins_over_answer_key(self):
        rows = [dict(ROWS[0], answers={'name': 'Someone else'})]
        header, line = ''.join(csv_lines(rows)).splitlines()
        self.assertEqual(header.count('"name"'), 1)
        self.assertIn('"Asha"', line)
        self.assertNotIn('Someone else', line)

    def test_cell_formatting(self):
        self.assertEqual(format_cell(True), 'true')
        self.assertEqual(format_cell(False), 'false')
        self.assertEqual(format_cell(None), '')
        self.assertEqual(format_cell(4), '4')
        self.assertEqual(format_cell({'a': 1}), '{"a": 1}')

    def test_no_rows_still_has_header(self):
        self.assertEqual(''.join(csv_lines([])), '"id","submittedAt","name","email","phone"\n')

    def test_write_csv(self):
        handle = io.StringIO()
        write_csv(ROWS, handle)
        self.assertEqual(len(handle.getvalue().splitlines()), 3)


class UnreadableAnswersExportTests(TestCase):
    def test_other_rows_are_still_exported(self):
        org, dept = make_tenant()
        form = make_form(org, dept, [1], [1])
        FeedbackResponse.objects.create(form=form, name='Asha', answers={'1': 'Clear'})
        FeedbackResponse.objects.create(form=form, name='Ravi', answers='{broken')
        FeedbackResponse.objects.create(form=form, name='Meera', answers=['not', 'a', 'map'])
        lines = ''.join(csv_lines(export_rows(form))).splitlines()
        self.assertEqual(lines[0], '"id","submittedAt","name","email","phone","1"')
        self.assertEqual(len(lines), 4)
        self.assertTrue(any('"Asha","","","Clear"' in line for line in lines))
        self.assertTrue(any('"Ravi","","",""' in line for line in lines))
