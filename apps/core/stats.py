"""
Dashboard statistics

compute_stats(actor) -> DashboardStats

Statuses are counted by the database (GROUP BY) when possible. If that
aggregate fails the raw status column of the same rows is fetched and
tallied here instead. Each status is then folded into one of the four
report buckets through REPORT_BUCKETS.
"""

import logging
from dataclasses import dataclass, asdict

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.db.models import Count, Q

from apps.accounts.actor import AGENT, COUNSELOR
from apps.applications import repository
from apps.applications.models import (
    STATUS_CHOICES,
    STARTED,
    PROCESSING,
    DOCUMENTS_SUBMITTED,
    PAYMENTS_PROCESSED,
    COMPLETED,
)
from . import exceptions

logger = logging.getLogger(__name__)

User = get_user_model()

NEW = 'new'
IN_PROGRESS = 'in_progress'
REJECTED = 'rejected'

# status value -> report bucket
REPORT_BUCKETS = {
    STARTED: NEW,
    PROCESSING: IN_PROGRESS,
    DOCUMENTS_SUBMITTED: IN_PROGRESS,
    PAYMENTS_PROCESSED: IN_PROGRESS,
    COMPLETED: COMPLETED,

    # Older vocabulary, still present in imported data
    'pending': NEW,
    'review': IN_PROGRESS,
    'interview': IN_PROGRESS,
    'accepted': COMPLETED,
    'rejected': REJECTED,
}


@dataclass
class DashboardStats:
    total: int = 0
    new: int = 0
    in_progress: int = 0
    completed: int = 0
    rejected: int = 0
    total_counselors: int = 0
    total_agents: int = 0

    def as_dict(self):
        return asdict(self)


def count_statuses(queryset):
    """
    {status: count} for the rows of ``queryset``

    Falls back to a client-side tally when the grouped query fails.
    """
    try:
        with transaction.atomic():
            return queryset.status_counts()
    except DatabaseError as exc:
        logger.warning(f"Status aggregate failed, counting rows instead: {exc}")

    with exceptions.backend_errors():
        return queryset.tally_statuses()


def bucket_counts(status_counts):
    """
    Fold per-status counts into report buckets

    Unknown statuses are logged and left out of every bucket.
    """
    buckets = {NEW: 0, IN_PROGRESS: 0, COMPLETED: 0, REJECTED: 0}

    for status, count in status_counts.items():
        bucket = REPORT_BUCKETS.get(status)
        if bucket is None:
            logger.warning(f"Unmapped application status {status!r} ({count} row(s)) left out of dashboard stats")
            continue
        buckets[bucket] += count

    return buckets


def compute_stats(actor):
    """
    Dashboard numbers for the applications ``actor`` can see

    Admins also get the number of counselor and agent profiles.
    Read-only; calling it twice gives the same answer.
    """
    queryset = repository.scope_applications(actor)

    status_counts = count_statuses(queryset)
    buckets = bucket_counts(status_counts)

    stats = DashboardStats(
        total=sum(status_counts.values()),
        new=buckets[NEW],
        in_progress=buckets[IN_PROGRESS],
        completed=buckets[COMPLETED],
        rejected=buckets[REJECTED],
    )

    if actor.is_admin:
        with exceptions.backend_errors():
            role_counts = dict(
                User.objects.filter(role__in=[COUNSELOR, AGENT])
                .order_by()
                .values_list('role')
                .annotate(count=Count('pk'))
            )
        stats.total_counselors = role_counts.get(COUNSELOR, 0)
        stats.total_agents = role_counts.get(AGENT, 0)

    return stats


def counselor_stats():
    """
    Workload per counselor, one grouped query

    Returns:
        list[dict]: {'id', 'username', 'email', 'total', <status>: count, ...}
                    ordered by display name; counselors without
                    applications report zeros
    """
    annotations = {
        status: Count('counseled_applications', filter=Q(counseled_applications__application_status=status))
        for status, _label in STATUS_CHOICES
    }

    with exceptions.backend_errors():
        counselors = (
            User.objects.counselors()
            .annotate(total=Count('counseled_applications'), **annotations)
            .order_by('username', 'email')
        )

        return [
            {
                'id': counselor.pk,
                'username': counselor.get_display_name(),
                'email': counselor.email,
                'total': counselor.total,
                **{status: getattr(counselor, status) for status in annotations},
            }
            for counselor in counselors
        ]
