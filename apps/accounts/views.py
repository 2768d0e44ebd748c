import logging

from django.contrib.auth import authenticate, login, logout
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext as _
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from apps.core import exceptions
from apps.core.stats import counselor_stats
from apps.core.utils import parse_request_data
from .decorators import admin_required, login_required_json
from .forms import LoginForm, SignupForm, CounselorCreateForm, RoleChangeForm
from .models import User

logger = logging.getLogger(__name__)


# HELPER FUNCTIONS
def serialize_user(user):
    return {
        'id': user.pk,
        'email': user.email,
        'username': user.username,
        'display_name': user.get_display_name(),
        'role': user.as_actor().role,
    }


def _form_error_response(form, status=400):
    error = exceptions.ValidationError.from_form(form)
    return JsonResponse(error.as_dict(), status=status)


# AUTHENTICATION VIEWS
@never_cache
@require_POST
def login_view(request):
    form = LoginForm(parse_request_data(request))

    if not form.is_valid():
        return _form_error_response(form)

    email = form.cleaned_data['email']
    password = form.cleaned_data['password']

    # Authenticate user (check email + password)
    # Returns User object if valid, None if invalid or inactive
    user = authenticate(request, username=email, password=password)

    if user is None:
        logger.info(f"Failed login attempt for {email}")
        return JsonResponse({
            'success': False,
            'error': _('Invalid email or password. Please try again.')
        }, status=401)

    # Login user (creates session)
    login(request, user)

    if form.cleaned_data.get('remember'):
        # Session expires in 30 days
        request.session.set_expiry(30 * 24 * 60 * 60)
    else:
        # Session expires when browser closes
        request.session.set_expiry(0)

    logger.info(f"User {user.pk} logged in")

    return JsonResponse({'success': True, 'user': serialize_user(user)})


@require_POST
@login_required_json
def logout_view(request):
    user_id = request.user.pk

    # Logout user (clears session)
    logout(request)

    logger.info(f"User {user_id} logged out")

    return JsonResponse({'success': True})


@never_cache
@ensure_csrf_cookie
@require_GET
@login_required_json
def me_view(request):
    """
    Current user

    Also hands the CSRF cookie to the front-end, which must echo it in the
    X-CSRFToken header of every POST.
    """
    return JsonResponse({'success': True, 'user': serialize_user(request.user)})


@never_cache
@require_POST
def signup_view(request):
    form = SignupForm(parse_request_data(request))

    if not form.is_valid():
        return _form_error_response(form)

    user = form.save()
    login(request, user, backend='django.contrib.auth.backends.ModelBackend')

    logger.info(f"Agent account {user.pk} registered")

    return JsonResponse({'success': True, 'user': serialize_user(user)}, status=201)


# COUNSELOR MANAGEMENT
@require_GET
@admin_required
def counselor_list_view(request):
    """Counselors with their application workload (admin only)"""
    return JsonResponse({'success': True, 'counselors': counselor_stats()})


@require_GET
@login_required_json
def counselor_options_view(request):
    """Choices for the counselor picker of the assignment form"""
    counselors = User.objects.counselors().order_by('username', 'email')

    return JsonResponse({
        'success': True,
        'counselors': [
            {'id': counselor.pk, 'role': counselor.role, 'username': counselor.get_display_name()}
            for counselor in counselors
        ],
    })


@require_POST
@admin_required
def counselor_create_view(request):
    form = CounselorCreateForm(parse_request_data(request))

    if not form.is_valid():
        return _form_error_response(form)

    counselor = form.save()

    logger.info(f"Counselor {counselor.pk} created by admin {request.user.pk}")

    return JsonResponse({'success': True, 'user': serialize_user(counselor)}, status=201)


@require_POST
@admin_required
def user_role_view(request, pk):
    user = get_object_or_404(User, pk=pk)

    form = RoleChangeForm(parse_request_data(request))
    if not form.is_valid():
        return _form_error_response(form)

    role = form.cleaned_data['role']

    # Admins cannot demote themselves (would lock the last admin out)
    if user == request.user and role != user.role:
        raise exceptions.Forbidden(_('You cannot change your own role.'))

    user.role = role
    user.save(update_fields=['role', 'updated_at'])

    logger.info(f"User {user.pk} role set to {role} by admin {request.user.pk}")

    return JsonResponse({'success': True, 'user': serialize_user(user)})
