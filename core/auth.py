from functools import wraps

from django.http import JsonResponse


def get_account(user):
    if not user or not user.is_authenticated:
        return None
    return getattr(user, 'account', None)


def scope_required(*roles):
    """Allow the view only for authenticated accounts with one of ``roles``.

    The caller's account is exposed as ``request.account`` so views can scope
    their queries to its organization and department.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return JsonResponse({'message': 'Authentication required'}, status=401)
            account = get_account(request.user)
            if account is None or (roles and account.role not in roles):
                return JsonResponse({'message': 'Forbidden'}, status=403)
            request.account = account
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator


def can_access_form(account, form):
    # Only the dimensions set on the account are compared, so an org admin
    # without a department may reach every department of its organization.
    if account.organization_id is not None and account.organization_id != form.organization_id:
        return False
    if account.department_id is not None and account.department_id != form.department_id:
        return False
    return True
