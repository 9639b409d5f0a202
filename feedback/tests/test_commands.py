import os
import tempfile
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase

from feedback.services.submission import submit_response
from feedback.tests.helpers import make_form, make_staff, make_subject, make_tenant


class ExportResponsesCommandTests(TestCase):
    def setUp(self):
        org, dept = make_tenant()
        subject = make_subject(dept, 'Compilers', semester='5')
        staff = make_staff(org, dept, 'S. Nair')
        self.form = make_form(org, dept, [staff.id], [subject.id])
        submit_response(self.form.access_code, name='Asha', email='asha@example.com', answers={'1': 'Clear'})

    def test_writes_csv_to_stdout(self):
        out = StringIO()
        call_command('export_responses', self.form.id, stdout=out)
        lines = out.getvalue().splitlines()
        self.assertEqual(lines[0], '"id","submittedAt","name","email","phone","1"')
        self.assertIn('"Asha","asha@example.com","","Clear"', lines[1])

    def test_writes_csv_to_file(self):
        handle, path = tempfile.mkstemp(suffix='.csv')
        os.close(handle)
        self.addCleanup(os.remove, path)
        out = StringIO()
        call_command('export_responses', self.form.id, output=path, stdout=out)
        self.assertIn('Exported 1 response(s)', out.getvalue())
        with open(path, encoding='utf-8') as exported:
            self.assertEqual(len(exported.read().splitlines()), 2)

    def test_unknown_form(self):
        with self.assertRaises(CommandError):
            call_command('export_responses', self.form.id + 1000)
