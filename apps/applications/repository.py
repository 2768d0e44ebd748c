"""
Role-scoped read/write access to applications

Every function takes the acting ``Actor`` explicitly. Visibility:
    admin     -> every application
    counselor -> applications assigned to them (counselor_id)
    agent     -> applications they submitted (agent_id)
Records outside the actor's scope behave as if they did not exist
(NotFound), both for reads and writes.
"""

import logging
import uuid

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.actor import ADMIN, AGENT, COUNSELOR
from apps.core import exceptions
from .forms import ApplicationForm, ApplicationPatchForm, NoteForm
from .models import Application, ApplicationNote, INITIAL_STATUS
from .workflow import validate_status

logger = logging.getLogger(__name__)

User = get_user_model()

# Sentinel sent by assignment pickers for "no counselor"
NO_COUNSELOR = 'none'

UNKNOWN_COUNSELOR = 'Unknown Counselor'
UNKNOWN_AGENT = 'Unknown Agent'

SORT_FIELDS = ('created_at', 'updated_at', 'client_name')

UPDATABLE_FIELDS = (
    'client_name',
    'client_email',
    'phone_number',
    'completed_course',
    'planned_courses',
    'preferred_locations',
    'preferred_colleges',
    'counselor_id',
    'application_status',
)

CREATE_ROLES = (ADMIN, AGENT)
UPDATE_ROLES = (ADMIN, COUNSELOR)
NOTE_ROLES = (ADMIN, COUNSELOR)


# HELPERS

def coerce_application_id(application_id):
    """Parse an application id, treating anything malformed as missing"""
    if isinstance(application_id, uuid.UUID):
        return application_id
    try:
        return uuid.UUID(str(application_id))
    except (TypeError, ValueError):
        raise exceptions.NotFound(f'Application {application_id} not found')


def scope_applications(actor):
    queryset = Application.objects.all()

    if actor.is_admin:
        return queryset
    if actor.is_counselor:
        return queryset.for_counselor(actor.id)
    if actor.is_agent:
        return queryset.for_agent(actor.id)
    return queryset.none()


def normalize_counselor_id(value):
    """Map the "none" sentinel and blanks to None"""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value or value.lower() == NO_COUNSELOR:
            return None
    return value


def normalize_patch(patch):
    """
    Boundary clean-up of an incoming patch: reject unknown keys, map sentinels

    Returns:
        dict: a copy of the patch, safe to hand to ApplicationPatchForm
    """
    unknown = sorted(set(patch) - set(UPDATABLE_FIELDS))
    if unknown:
        raise exceptions.ValidationError(
            f'Cannot update field(s): {", ".join(unknown)}',
            errors={field: ['This field cannot be updated.'] for field in unknown},
        )

    patch = dict(patch)
    if 'counselor_id' in patch:
        patch['counselor_id'] = normalize_counselor_id(patch['counselor_id'])
    return patch


def resolve_counselor(counselor_id):
    """
    Fetch the counselor a record should point to

    Raises:
        NotFound: no profile with that id
        ValidationError: the profile is not a counselor
    """
    if counselor_id is None:
        return None

    with exceptions.backend_errors():
        try:
            counselor = User.objects.get(pk=counselor_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise exceptions.NotFound(f'Counselor {counselor_id} not found')

    if not counselor.is_counselor():
        raise exceptions.ValidationError(
            f'User {counselor_id} is not a counselor',
            errors={'counselor_id': ['Selected user is not a counselor.']},
        )
    return counselor


def resolve_profile_names(applications):
    """
    Attach ``counselor_name`` and ``agent_name`` to each application

    One query for all distinct referenced profiles. Unassigned -> None.
    A missing profile, an empty display name or a failed lookup gives the
    "Unknown ..." label; the listing itself never fails here.
    """
    applications = list(applications)
    profile_ids = set()
    for application in applications:
        if application.counselor_id:
            profile_ids.add(application.counselor_id)
        if application.agent_id:
            profile_ids.add(application.agent_id)

    names = {}
    if profile_ids:
        try:
            with transaction.atomic():
                names = dict(User.objects.filter(pk__in=profile_ids).values_list('pk', 'username'))
        except DatabaseError as exc:
            logger.warning(f"Profile name lookup failed for {len(profile_ids)} profile(s): {exc}")

    for application in applications:
        application.counselor_name = (
            (names.get(application.counselor_id) or UNKNOWN_COUNSELOR) if application.counselor_id else None
        )
        application.agent_name = (
            (names.get(application.agent_id) or UNKNOWN_AGENT) if application.agent_id else None
        )

    return applications


# READ OPERATIONS

def list_applications(actor, status=None, search=None, sort_by='created_at', sort_order='desc'):
    """
    Applications visible to ``actor``, newest first by default

    Args:
        status (str, optional): only this workflow state
        search (str, optional): matches client name, email or phone
        sort_by (str): created_at | updated_at | client_name
        sort_order (str): asc | desc

    Returns:
        list[Application]: with counselor_name / agent_name and prefetched notes
    """
    queryset = scope_applications(actor)

    if status:
        queryset = queryset.filter(application_status=validate_status(status))

    if search:
        search = search.strip()
        queryset = queryset.filter(
            Q(client_name__icontains=search) |
            Q(client_email__icontains=search) |
            Q(phone_number__icontains=search)
        )

    if sort_by not in SORT_FIELDS:
        raise exceptions.ValidationError(
            f'Cannot sort by "{sort_by}"',
            errors={'sort_by': [f'Choose one of: {", ".join(SORT_FIELDS)}']},
        )
    ordering = sort_by if sort_order == 'asc' else f'-{sort_by}'

    with exceptions.backend_errors():
        applications = list(queryset.order_by(ordering).prefetch_related('notes'))

    return resolve_profile_names(applications)


def get_application(actor, application_id):
    application_id = coerce_application_id(application_id)

    with exceptions.backend_errors():
        try:
            application = scope_applications(actor).prefetch_related('notes').get(pk=application_id)
        except Application.DoesNotExist:
            raise exceptions.NotFound(f'Application {application_id} not found')

    return resolve_profile_names([application])[0]


# WRITE OPERATIONS

def create_application(actor, data):
    """
    Insert a new application submitted by ``actor``

    Defaults: status "started", no notes, preferred_colleges [] and the
    actor recorded as submitting agent.

    Raises:
        Forbidden: counselors cannot submit applications
        ValidationError: blank client_name / phone_number or other bad input
        NotFound: counselor_id does not exist
    """
    if not actor.has_role(*CREATE_ROLES):
        raise exceptions.Forbidden('Only agents and admins can submit applications')

    data = dict(data)
    counselor_id = normalize_counselor_id(data.pop('counselor_id', None))

    form = ApplicationForm(data)
    if not form.is_valid():
        raise exceptions.ValidationError.from_form(form)

    counselor = resolve_counselor(counselor_id)

    with exceptions.backend_errors():
        application = Application.objects.create(
            **form.cleaned_data,
            counselor=counselor,
            agent_id=actor.id,
            application_status=INITIAL_STATUS,
        )

    logger.info(f"Application {application.pk} created by user {actor.id}")

    return get_application(actor, application.pk)


def update_application(actor, application_id, patch):
    """
    Partial update; every key in ``patch`` overwrites the stored value

    Admins may change any updatable field. Counselors may edit the
    applications assigned to them but not reassign them.

    Raises:
        Forbidden: agent actor, or counselor changing counselor_id
        ValidationError: unknown/immutable key or invalid value
        InvalidStatus: application_status outside the workflow
        NotFound: application (or new counselor) does not exist
    """
    if not actor.has_role(*UPDATE_ROLES):
        raise exceptions.Forbidden('Only counselors and admins can update applications')

    patch = normalize_patch(patch)

    if 'counselor_id' in patch and not actor.is_admin:
        raise exceptions.Forbidden('Only admins can reassign applications')

    if 'application_status' in patch:
        validate_status(patch['application_status'])

    application_id = coerce_application_id(application_id)
    with exceptions.backend_errors():
        try:
            application = scope_applications(actor).get(pk=application_id)
        except Application.DoesNotExist:
            raise exceptions.NotFound(f'Application {application_id} not found')

    form = ApplicationPatchForm(patch)
    if not form.is_valid():
        raise exceptions.ValidationError.from_form(form)
    changes = form.changed_values()

    if 'counselor_id' in patch:
        changes['counselor'] = resolve_counselor(patch['counselor_id'])

    for field, value in changes.items():
        setattr(application, field, value)
    application.updated_at = timezone.now()

    with exceptions.backend_errors():
        application.save(update_fields=[*changes, 'updated_at'])

    logger.info(f"Application {application_id} updated by user {actor.id}: {', '.join(sorted(changes)) or 'no fields'}")

    return get_application(actor, application_id)


def append_note(actor, application_id, text):
    """
    Add a note to an application

    The note is its own row, so two actors adding notes at the same time
    both keep theirs. Also refreshes the application's updated_at.

    Returns:
        ApplicationNote: the stored note
    """
    if not actor.has_role(*NOTE_ROLES):
        raise exceptions.Forbidden('Only counselors and admins can add notes')

    form = NoteForm({'text': text})
    if not form.is_valid():
        raise exceptions.ValidationError.from_form(form)

    application_id = coerce_application_id(application_id)

    with exceptions.backend_errors():
        if not scope_applications(actor).filter(pk=application_id).exists():
            raise exceptions.NotFound(f'Application {application_id} not found')

        author = User.objects.filter(pk=actor.id).first()
        note = ApplicationNote.objects.create(
            application_id=application_id,
            author=author,
            author_name=author.get_full_name() if author else actor.email,
            text=form.cleaned_data['text'],
        )
        Application.objects.filter(pk=application_id).update(updated_at=note.created_at)

    logger.info(f"Note {note.pk} added to application {application_id} by user {actor.id}")

    return note


# SERIALIZATION

def serialize_note(note):
    return {
        'id': note.id,
        'text': note.text,
        'created_at': note.created_at.isoformat(),
        'author_id': note.author_id,
        'author_name': note.author_name,
    }


def serialize_application(application):
    return {
        'application_id': str(application.application_id),
        'client_name': application.client_name,
        'client_email': application.client_email,
        'phone_number': application.phone_number,
        'completed_course': application.completed_course,
        'planned_courses': application.planned_courses,
        'preferred_locations': application.preferred_locations,
        'preferred_colleges': application.preferred_colleges or [],
        'counselor_id': application.counselor_id,
        'counselor_name': getattr(application, 'counselor_name', None),
        'agent_id': application.agent_id,
        'agent_name': getattr(application, 'agent_name', None),
        'application_status': application.application_status,
        'application_status_display': application.get_application_status_display(),
        'notes': [serialize_note(note) for note in application.notes.all()],
        'created_at': application.created_at.isoformat(),
        'updated_at': application.updated_at.isoformat(),
    }
