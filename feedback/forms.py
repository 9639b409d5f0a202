from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError


def _positive_int(value):
	return isinstance(value, int) and not isinstance(value, bool) and value > 0


class FeedbackFormPayload(forms.Form):
	"""Create/update payload of a simplified feedback form (JSON body, camelCase keys)."""
	title = forms.CharField(max_length=255)
	semester = forms.CharField(max_length=50)
	description = forms.CharField(required=False)
	startDate = forms.DateField(required=False)
	endDate = forms.DateField(required=False)
	audience = forms.CharField(max_length=30, required=False)
	staffIds = forms.JSONField()
	subjectIds = forms.JSONField()
	# Catalog question ids or inline {id, text, type, options?} objects
	questions = forms.JSONField()
	isActive = forms.BooleanField(required=False)

	def _id_list(self, name):
		value = self.cleaned_data.get(name)
		if not isinstance(value, list) or not value:
			raise ValidationError('Select at least one.')
		if not all(_positive_int(item) for item in value):
			raise ValidationError('Ids must be positive integers.')
		return value

	def clean_staffIds(self):
		return self._id_list('staffIds')

	def clean_subjectIds(self):
		return self._id_list('subjectIds')

	def clean_questions(self):
		questions = self.cleaned_data.get('questions')
		if not isinstance(questions, list) or not questions:
			raise ValidationError('Add at least one question.')
		for index, item in enumerate(questions, start=1):
			if _positive_int(item):
				continue
			if not isinstance(item, dict):
				raise ValidationError(f"Question #{index} must be an id or an object.")
			if not _positive_int(item.get('id')):
				raise ValidationError(f"Question #{index} needs a positive integer id.")
			if not isinstance(item.get('text'), str) or not isinstance(item.get('type'), str):
				raise ValidationError(f"Question #{index} needs text and type.")
			options = item.get('options')
			if options is not None and not (isinstance(options, list) and all(isinstance(o, str) for o in options)):
				raise ValidationError(f"Question #{index} options must be a list of strings.")
		return questions


class SubmissionForm(forms.Form):
	"""Respondent identity of a public submission; the answers are checked by the gateway."""
	name = forms.CharField(max_length=255, required=False)
	email = forms.EmailField(max_length=255, required=False)
	phone = forms.CharField(max_length=50, required=False)

	def __init__(self, *args, **kwargs):
		super().__init__(*args, **kwargs)
		for field in getattr(settings, 'FEEDBACK_REQUIRED_IDENTITY_FIELDS', ['name']):
			if field in self.fields:
				self.fields[field].required = True
