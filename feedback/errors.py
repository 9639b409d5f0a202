class FeedbackError(Exception):
	"""Caller-facing failure; ``status`` is the HTTP status the API answers with."""

	status = 400
	default_message = 'Request failed'

	def __init__(self, message=None, errors=None):
		self.message = message or self.default_message
		self.errors = errors
		super().__init__(self.message)

	def as_dict(self):
		payload = {'message': self.message}
		if self.errors:
			payload['errors'] = self.errors
		return payload


class NotFound(FeedbackError):
	status = 404
	default_message = 'Not found'


class Conflict(FeedbackError):
	status = 409
	default_message = 'Conflict'


class ValidationFailed(FeedbackError):
	status = 400
	default_message = 'Invalid payload'


class Unauthorized(FeedbackError):
	status = 403
	default_message = 'Not authorized for this form'

	def __init__(self, errors=None):
		# Same message whatever the reason, so other tenants' forms stay invisible.
		super().__init__(self.default_message, errors)
