import json
import logging
from functools import wraps

from django.conf import settings
from django.http import JsonResponse, StreamingHttpResponse
from django.utils.dateparse import parse_date
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.auth import scope_required
from .errors import FeedbackError, ValidationFailed
from .forms import FeedbackFormPayload, SubmissionForm
from .services import analytics, reporting, resolver, store, submission
from .services.export import csv_lines
from .services.parsing import to_int

logger = logging.getLogger(__name__)


def json_api(failure_message):
	"""Render service errors as JSON; anything unexpected becomes a logged 500."""
	def decorator(view_func):
		@wraps(view_func)
		def wrapper(request, *args, **kwargs):
			try:
				return view_func(request, *args, **kwargs)
			except FeedbackError as exc:
				return JsonResponse(exc.as_dict(), status=exc.status)
			except Exception:
				logger.exception(failure_message)
				return JsonResponse({'message': failure_message}, status=500)
		return wrapper
	return decorator


def _json_body(request):
	try:
		data = json.loads(request.body.decode('utf-8') or '{}')
	except (UnicodeDecodeError, ValueError):
		raise ValidationFailed('Request body is not valid JSON')
	if not isinstance(data, dict):
		raise ValidationFailed('Request body must be a JSON object')
	return data


def _validated(form_class, data):
	form = form_class(data)
	if not form.is_valid():
		raise ValidationFailed(errors=form.errors.get_json_data())
	return form.cleaned_data


def _date_param(request, name):
	value = request.GET.get(name)
	if not value:
		return None
	try:
		parsed = parse_date(value)
	except ValueError:
		parsed = None
	if parsed is None:
		raise ValidationFailed(errors={name: ['Expected a date (YYYY-MM-DD).']})
	return parsed


def _bounded_int(value, default, low, high):
	try:
		number = int(value)
	except (TypeError, ValueError):
		return default
	if number == 0:
		return default
	return max(low, min(high, number))


def _csv_response(lines, filename):
	response = StreamingHttpResponse(lines, content_type='text/csv')
	response['Content-Disposition'] = f'attachment; filename="{filename}"'
	return response


# Department dashboard

@require_GET
@scope_required('DEPT', 'STAFF')
@json_api('Failed to compute analytics')
def department_analytics(request):
	result = analytics.department_analytics(
		request.account,
		date_from=_date_param(request, 'from'),
		date_to=_date_param(request, 'to'),
		staff_id=to_int(request.GET.get('staffId')),
		subject_id=to_int(request.GET.get('subjectId')),
		semester=request.GET.get('semester') or None,
	)
	return JsonResponse(result)


@require_GET
@scope_required('DEPT', 'STAFF')
@json_api('Failed to load department forms')
def department_forms_with_counts(request):
	return JsonResponse({'items': store.forms_with_counts(request.account)})


@require_GET
@scope_required('DEPT')
@json_api('Failed to load filters')
def meta(request):
	return JsonResponse(resolver.resolve_meta(
		request.account.department_id,
		semester=request.GET.get('semester') or None,
		subject_id=to_int(request.GET.get('subjectId')),
		staff_id=to_int(request.GET.get('staffId')),
	))


@require_http_methods(['GET', 'POST'])
@scope_required('DEPT')
@json_api('Failed to save form')
def simple_forms(request):
	if request.method == 'GET':
		return JsonResponse({'items': store.list_forms(request.account)})
	data = _validated(FeedbackFormPayload, _json_body(request))
	form = store.create_form(request.account, data)
	return JsonResponse(store.serialize_form(form), status=201)


@require_http_methods(['PUT', 'DELETE'])
@scope_required('DEPT')
@json_api('Failed to save form')
def simple_form_detail(request, form_id):
	if request.method == 'DELETE':
		store.delete_form(request.account, form_id)
		return JsonResponse({'ok': True})
	data = _validated(FeedbackFormPayload, _json_body(request))
	store.update_form(request.account, form_id, data)
	return JsonResponse({'ok': True})


@require_POST
@scope_required('DEPT')
@json_api('Failed to publish form')
def simple_form_publish(request, form_id):
	return JsonResponse(store.publish_form(request.account, form_id))


@require_GET
@scope_required('DEPT', 'STAFF')
@json_api('Failed to load responses')
def form_responses(request, slug):
	form = store.resolve_form(slug, request.account)
	max_limit = getattr(settings, 'FEEDBACK_RESPONSES_MAX_LIMIT', 1000)
	page = _bounded_int(request.GET.get('page'), 1, 1, 10 ** 9)
	limit = _bounded_int(request.GET.get('limit'), store.DEFAULT_PAGE_SIZE, 1, max_limit)
	return JsonResponse(store.list_responses(form, page, limit, to_int(request.GET.get('subjectId'))))


@require_GET
@scope_required('DEPT', 'STAFF')
@json_api('Failed to export CSV')
def form_responses_csv(request, slug):
	form = store.resolve_form(slug, request.account)
	subject_id = to_int(request.GET.get('subjectId'))
	store.notify_export_done(form, request.account, store.form_responses(form, subject_id).count())
	return _csv_response(csv_lines(store.export_rows(form, subject_id)), 'responses.csv')


# Public (access code) endpoints

@require_GET
@json_api('Failed to load form')
def public_simple_form(request, access_code):
	return JsonResponse(store.public_form(access_code))


@csrf_exempt
@require_POST
@json_api('Failed to submit response')
def public_simple_submit(request, access_code):
	submission.active_form(access_code)
	data = _json_body(request)
	identity = _validated(SubmissionForm, {key: data.get(key) for key in ('name', 'email', 'phone')})
	response = submission.submit_response(access_code, answers=data.get('answers'), **identity)
	return JsonResponse({'ok': True, 'responseId': response.id}, status=201)


@require_GET
@json_api('Failed to load form')
def public_legacy_form(request, access_code):
	return JsonResponse(store.legacy_public_form(access_code))


@csrf_exempt
@require_POST
@json_api('Failed to submit response')
def public_legacy_submit(request, access_code):
	data = _json_body(request)
	response = submission.submit_legacy_response(access_code, data.get('answers'))
	return JsonResponse({'ok': True, 'responseId': response.id}, status=201)


# Organization reporting

def _activity_filters(request):
	return {
		'date_from': _date_param(request, 'from'),
		'date_to': _date_param(request, 'to'),
		'department_id': to_int(request.GET.get('departmentId')),
		'staff_id': to_int(request.GET.get('staffId')),
		'subject_id': to_int(request.GET.get('subjectId')),
	}


@require_GET
@scope_required('ORG')
@json_api('Failed to load activity')
def org_activity(request):
	default_limit = getattr(settings, 'FEEDBACK_ACTIVITY_DEFAULT_LIMIT', 100)
	limit = _bounded_int(request.GET.get('limit'), default_limit, 1, reporting.ACTIVITY_MAX_LIMIT)
	items = reporting.organization_activity(request.account.organization_id, limit=limit, **_activity_filters(request))
	return JsonResponse({'items': items})


@require_GET
@scope_required('ORG')
@json_api('Failed to export activity')
def org_activity_csv(request):
	lines = reporting.activity_csv_lines(request.account.organization_id, **_activity_filters(request))
	return _csv_response(lines, 'org_activity.csv')


@require_GET
@scope_required('ORG')
@json_api('Failed to load total feedback')
def org_total_feedback(request):
	return JsonResponse(reporting.total_feedback(request.account.organization_id))


@require_GET
@scope_required('ORG')
@json_api('Failed to load subject response stats')
def org_subject_responses(request):
	rows = reporting.subject_responses(request.account.organization_id, to_int(request.GET.get('departmentId')))
	return JsonResponse(rows, safe=False)


@require_GET
@scope_required('ORG')
@json_api('Failed to load staff response stats')
def org_staff_responses(request):
	rows = reporting.staff_responses(request.account.organization_id, to_int(request.GET.get('departmentId')))
	return JsonResponse(rows, safe=False)


@require_GET
@scope_required('ORG')
@json_api('Failed to load organization feedback stats')
def org_department_responses(request):
	return JsonResponse(reporting.department_responses(request.account.organization_id), safe=False)
