from django.core.management.base import BaseCommand, CommandError

from feedback.models import FeedbackForm
from feedback.services.export import write_csv
from feedback.services.store import export_rows


class Command(BaseCommand):
    help = 'Write the responses of a feedback form as CSV (stdout unless --output is given)'

    def add_arguments(self, parser):
        parser.add_argument('form_id', type=int)
        parser.add_argument('--subject-id', type=int, default=None, help='Only responses for this subject')
        parser.add_argument('--output', default=None, help='File to write instead of stdout')

    def handle(self, *args, **options):
        form = FeedbackForm.objects.filter(id=options['form_id']).first()
        if form is None:
            raise CommandError(f"Feedback form {options['form_id']} does not exist")
        rows = list(export_rows(form, options['subject_id']))
        if options['output']:
            with open(options['output'], 'w', newline='', encoding='utf-8') as handle:
                write_csv(rows, handle)
            self.stdout.write(self.style.SUCCESS(f"Exported {len(rows)} response(s) to {options['output']}"))
        else:
            write_csv(rows, self.stdout)
