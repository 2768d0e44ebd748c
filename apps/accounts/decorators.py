# Decorators in this file:
# 1. login_required_json - Anonymous requests get a JSON 401
# 2. role_required - Only the given roles can access
# 3. admin_required - Only admins can access
# 4. counselor_or_admin_required - Counselors and admins
#
# All of them answer with JSON (the front-end is a separate app), never
# with a redirect.
# ==============================================================================

from functools import wraps
from django.http import JsonResponse
from django.utils.translation import gettext as _

from .actor import ADMIN, COUNSELOR


def _unauthenticated():
    return JsonResponse({
        'success': False,
        'error': _('Please login to continue.')
    }, status=401)


def login_required_json(view_func):
    """
    Decorator: only authenticated users can access this view

    Unlike django.contrib.auth's login_required, answers 401 JSON instead of
    redirecting to a login page.
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return _unauthenticated()
        return view_func(request, *args, **kwargs)

    return wrapper


def role_required(*allowed_roles):
    """
    Decorator: Only specific roles can access

    Superusers always pass (they act as admins).

    Usage:
        @role_required('admin', 'counselor')
        def my_view(request): ...
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return _unauthenticated()

            if request.user.role in allowed_roles or request.user.is_superuser:
                return view_func(request, *args, **kwargs)

            return JsonResponse({
                'success': False,
                'error': _('You do not have permission to access this page.')
            }, status=403)

        return wrapper

    return decorator


def admin_required(view_func):
    """
    Decorator: Only admins can access this view

    Checks:
    1. User is authenticated (401 otherwise)
    2. User role is 'admin' OR is superuser (403 otherwise)
    """
    return role_required(ADMIN)(view_func)


def counselor_or_admin_required(view_func):
    return role_required(ADMIN, COUNSELOR)(view_func)
