import logging

from django.conf import settings
from django.core.paginator import Paginator
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.accounts.decorators import login_required_json, admin_required
from apps.core import exceptions
from apps.core.utils import parse_request_data, get_actor
from . import repository, workflow
from .forms import ApplicationImportForm
from .importers import import_file

logger = logging.getLogger(__name__)


@require_GET
@login_required_json
def application_list_view(request):
    """
    Applications visible to the current user

    Query parameters: status, search, sort_by, sort_order, page
    """
    applications = repository.list_applications(
        get_actor(request),
        status=request.GET.get('status') or None,
        search=request.GET.get('search', '').strip() or None,
        sort_by=request.GET.get('sort_by') or 'created_at',
        sort_order=request.GET.get('sort_order') or 'desc',
    )

    paginator = Paginator(applications, getattr(settings, 'PAGINATION_SIZE', 25))
    # get_page() falls back to the first / last page for bad page numbers
    page_obj = paginator.get_page(request.GET.get('page', 1))

    return JsonResponse({
        'success': True,
        'applications': [repository.serialize_application(application) for application in page_obj],
        'total_count': paginator.count,
        'page': page_obj.number,
        'num_pages': paginator.num_pages,
    })


@require_POST
@login_required_json
def application_create_view(request):
    application = repository.create_application(get_actor(request), parse_request_data(request))

    return JsonResponse({
        'success': True,
        'message': 'Application created successfully',
        'application': repository.serialize_application(application),
    }, status=201)


@require_GET
@login_required_json
def application_detail_view(request, pk):
    application = repository.get_application(get_actor(request), pk)

    return JsonResponse({
        'success': True,
        'application': repository.serialize_application(application),
    })


@require_POST
@login_required_json
def application_update_view(request, pk):
    application = repository.update_application(get_actor(request), pk, parse_request_data(request))

    return JsonResponse({
        'success': True,
        'message': 'Application updated successfully',
        'application': repository.serialize_application(application),
    })


@require_POST
@login_required_json
def application_change_status_view(request, pk):
    data = parse_request_data(request)
    new_status = data.get('status', data.get('application_status'))

    if not new_status:
        raise exceptions.ValidationError('Status is required', errors={'status': ['This field is required.']})

    application = workflow.set_status(get_actor(request), pk, new_status)

    return JsonResponse({
        'success': True,
        'message': f'Status changed to {application.get_application_status_display()}',
        'application': repository.serialize_application(application),
    })


@require_POST
@login_required_json
def application_add_note_view(request, pk):
    data = parse_request_data(request)
    note = repository.append_note(get_actor(request), pk, data.get('text', ''))

    return JsonResponse({
        'success': True,
        'message': 'Note added successfully',
        'note': repository.serialize_note(note),
    }, status=201)


@require_POST
@admin_required
def application_import_view(request):
    """
    Bulk import from an uploaded .csv / .xlsx file (admin only)

    Good rows are kept even when others fail; the report lists every
    failed row as "Row N: reason".
    """
    form = ApplicationImportForm(request.POST, request.FILES)

    if not form.is_valid():
        raise exceptions.ValidationError.from_form(form)

    uploaded_file = form.cleaned_data['file']
    report = import_file(get_actor(request), uploaded_file)

    logger.info(f"Import of {uploaded_file.name}: {report.success} created, {report.failed} failed")

    return JsonResponse({
        'success': not report.errors,
        'message': f'Import completed: {report.success} application(s) created, failed: {report.failed}',
        'report': report.as_dict(),
    })
