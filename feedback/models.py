from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.crypto import get_random_string

from core.models import Organization, Department, Subject


QUESTION_TYPE_CHOICES = [
	('MCQ_SINGLE', 'Multiple choice (single)'),
	('MCQ_MULTI', 'Multiple choice (multi)'),
	('TRUE_FALSE', 'True / False'),
	('SHORT', 'Short text'),
	('LONG', 'Long text'),
	('NUMERIC', 'Numeric'),
	('RATING', 'Rating scale'),
]

RESPONDENT_TYPE_CHOICES = [
	('Student', 'Student'),
	('Staff', 'Staff'),
	('Anonymous', 'Anonymous'),
]

ACCESS_CODE_CHARS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'


def generate_access_code():
	return get_random_string(getattr(settings, 'FEEDBACK_ACCESS_CODE_LENGTH', 8), allowed_chars=ACCESS_CODE_CHARS)


def option_values(options):
	"""Plain option values of a catalog question, whatever shape they were stored in."""
	from .services.normalizer import resolve_options
	return resolve_options(None, options)


class Question(models.Model):
	organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='questions')
	department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='questions')
	subject = models.ForeignKey(Subject, on_delete=models.SET_NULL, null=True, blank=True)
	type = models.CharField(max_length=20, choices=QUESTION_TYPE_CHOICES)
	text = models.TextField()
	# list of strings, list of {"key", "value"} pairs, or a delimited string
	options = models.JSONField(null=True, blank=True)
	correct = models.JSONField(null=True, blank=True)
	required = models.BooleanField(default=False)
	points = models.PositiveIntegerField(default=1)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ['id']

	def clean(self):
		if self.type not in ('MCQ_SINGLE', 'MCQ_MULTI') or self.correct in (None, '', []):
			return
		correct = self.correct if isinstance(self.correct, list) else [self.correct]
		allowed = set(option_values(self.options))
		missing = [str(c) for c in correct if str(c) not in allowed]
		if missing:
			raise ValidationError({'correct': f"Not among the declared options: {', '.join(missing)}"})

	def __str__(self):
		return f"Q: {self.text} ({self.type})"


class FeedbackForm(models.Model):
	organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='feedback_forms')
	department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='feedback_forms')
	title = models.CharField(max_length=255)
	description = models.TextField(blank=True, null=True)
	semester = models.CharField(max_length=50, blank=True, default='')
	start_date = models.DateField(null=True, blank=True)
	end_date = models.DateField(null=True, blank=True)
	audience = models.CharField(max_length=30, blank=True, null=True)
	# JSON lists; older rows may hold them as strings.
	staff_ids = models.JSONField(default=list, blank=True)
	subject_ids = models.JSONField(default=list, blank=True)
	questions = models.JSONField(default=list, blank=True, help_text="Question ids or inline question objects, in display order")
	is_active = models.BooleanField(default=False)
	access_code = models.CharField(max_length=32, unique=True, editable=False)
	share_url = models.CharField(max_length=512, blank=True, null=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ['-id']

	def save(self, *args, **kwargs):
		if not self.access_code:
			code = generate_access_code()
			while FeedbackForm.objects.filter(access_code=code).exists():
				code = generate_access_code()
			self.access_code = code
		super().save(*args, **kwargs)

	def __str__(self):
		return f"{self.title} ({self.semester or 'N/A'})"


class FeedbackResponse(models.Model):
	form = models.ForeignKey(FeedbackForm, on_delete=models.CASCADE, related_name='responses')
	organization = models.ForeignKey(Organization, on_delete=models.SET_NULL, null=True, blank=True)
	department = models.ForeignKey(Department, on_delete=models.SET_NULL, null=True, blank=True)
	# First assigned subject/staff of the form at submission time
	subject_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)
	staff_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)
	access_code = models.CharField(max_length=32, blank=True, null=True)
	name = models.CharField(max_length=255, blank=True, null=True)
	email = models.CharField(max_length=255, blank=True, null=True)
	phone = models.CharField(max_length=50, blank=True, null=True)
	answers = models.JSONField(default=dict, blank=True)
	submitted_at = models.DateTimeField(auto_now_add=True, db_index=True)

	class Meta:
		ordering = ['-submitted_at', '-id']
		constraints = [
			models.UniqueConstraint(
				fields=['form', 'email'],
				condition=models.Q(email__isnull=False) & ~models.Q(email=''),
				name='uniq_response_form_email',
			),
		]

	def __str__(self):
		return f"{self.name or 'Anonymous'} -> {self.form_id}"


class LegacyForm(models.Model):
	organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='legacy_forms')
	department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='legacy_forms')
	title = models.CharField(max_length=255)
	description = models.TextField(blank=True, null=True)
	is_active = models.BooleanField(default=False)
	access_code = models.CharField(max_length=32, unique=True, editable=False)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ['-created_at']

	def save(self, *args, **kwargs):
		if not self.access_code:
			code = generate_access_code()
			while LegacyForm.objects.filter(access_code=code).exists():
				code = generate_access_code()
			self.access_code = code
		super().save(*args, **kwargs)

	def __str__(self):
		return self.title


class LegacyFormQuestion(models.Model):
	form = models.ForeignKey(LegacyForm, on_delete=models.CASCADE, related_name='form_questions')
	question_order = models.PositiveIntegerField()
	type = models.CharField(max_length=20, choices=QUESTION_TYPE_CHOICES)
	text = models.TextField()
	options = models.JSONField(null=True, blank=True)
	required = models.BooleanField(default=False)
	points = models.PositiveIntegerField(default=1)

	class Meta:
		ordering = ['form', 'question_order']

	def __str__(self):
		return f"{self.question_order}. {self.text}"


class LegacyFormAssignment(models.Model):
	form = models.ForeignKey(LegacyForm, on_delete=models.CASCADE, related_name='assignments')
	organization = models.ForeignKey(Organization, on_delete=models.CASCADE)
	department = models.ForeignKey(Department, on_delete=models.CASCADE)
	semester = models.CharField(max_length=50)
	staff_id = models.PositiveIntegerField()
	subject_id = models.PositiveIntegerField()
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ['id']


class LegacyResponse(models.Model):
	form = models.ForeignKey(LegacyForm, on_delete=models.CASCADE, related_name='responses')
	respondent_id = models.PositiveIntegerField(null=True, blank=True)
	respondent_type = models.CharField(max_length=10, choices=RESPONDENT_TYPE_CHOICES, default='Anonymous')
	submitted_at = models.DateTimeField(auto_now_add=True, db_index=True)

	class Meta:
		ordering = ['-submitted_at', '-id']


class LegacyAnswer(models.Model):
	response = models.ForeignKey(LegacyResponse, on_delete=models.CASCADE, related_name='answers')
	question = models.ForeignKey(LegacyFormQuestion, on_delete=models.CASCADE, related_name='answers')
	answer = models.JSONField(null=True, blank=True)
