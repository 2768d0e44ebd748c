"""
Application status workflow

Five states, any reachable from any other. There is no transition table
and no terminal state: moving backwards, skipping ahead and re-opening a
completed application are all allowed. What is enforced is membership in
the enumeration and who may move an application.
"""

import logging

from django.utils import timezone

from apps.accounts.actor import ADMIN, COUNSELOR
from apps.core import exceptions
from .models import (
    Application,
    STATUS_CHOICES,
    INITIAL_STATUS,
    STARTED,
    PROCESSING,
    DOCUMENTS_SUBMITTED,
    PAYMENTS_PROCESSED,
    COMPLETED,
)

logger = logging.getLogger(__name__)

__all__ = [
    'STATUS_CHOICES', 'STATUS_VALUES', 'INITIAL_STATUS',
    'STARTED', 'PROCESSING', 'DOCUMENTS_SUBMITTED', 'PAYMENTS_PROCESSED', 'COMPLETED',
    'validate_status', 'can_change_status', 'set_status',
]

STATUS_VALUES = frozenset(value for value, _label in STATUS_CHOICES)

STATUS_CHANGE_ROLES = (ADMIN, COUNSELOR)


def validate_status(value):
    if not isinstance(value, str) or value not in STATUS_VALUES:
        raise exceptions.InvalidStatus(
            f'Invalid status "{value}". Allowed: {", ".join(v for v, _label in STATUS_CHOICES)}'
        )
    return value


def can_change_status(actor):
    return actor.has_role(*STATUS_CHANGE_ROLES)


def set_status(actor, application_id, new_status):
    """
    Move an application to ``new_status``

    Status and updated_at are written by one UPDATE statement.

    Raises:
        Forbidden: actor is not a counselor or admin (checked first)
        InvalidStatus: new_status is not one of the five states
        NotFound: no such application within the actor's scope

    Returns:
        Application: the refreshed record with counselor/agent names resolved
    """
    # Imported here: repository imports this module for validate_status
    from . import repository

    if not can_change_status(actor):
        raise exceptions.Forbidden('Only counselors and admins can change application status')

    validate_status(new_status)
    application_id = repository.coerce_application_id(application_id)

    with exceptions.backend_errors():
        updated = repository.scope_applications(actor).filter(pk=application_id).update(
            application_status=new_status,
            updated_at=timezone.now(),
        )

    if not updated:
        raise exceptions.NotFound(f'Application {application_id} not found')

    logger.info(f"Application {application_id} status set to {new_status} by user {actor.id}")

    return repository.get_application(actor, application_id)
