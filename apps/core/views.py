from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.accounts.decorators import login_required_json
from apps.applications import repository
from .stats import compute_stats
from .utils import get_actor


@require_GET
@login_required_json
def dashboard_view(request):
    """
    Main dashboard
    - Admin: every application, plus counselor/agent head counts
    - Counselor: applications assigned to them
    - Agent: applications they submitted
    """
    actor = get_actor(request)

    # 1. Key Metrics
    stats = compute_stats(actor)

    # 2. Applications table (same scope as the metrics)
    applications = repository.list_applications(actor)

    return JsonResponse({
        'success': True,
        'role': actor.role,
        'stats': stats.as_dict(),
        'applications': [repository.serialize_application(application) for application in applications],
    })
