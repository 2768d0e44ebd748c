"""
Error taxonomy shared by the accounts, applications and core apps.

Every error carries the HTTP status code the JSON layer answers with
(see ``apps.core.middleware.ApplicationErrorMiddleware``).
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for errors raised by the core operations"""

    status_code = 400
    default_message = 'Request failed'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)

    def as_dict(self):
        data = {'success': False, 'error': self.message}
        if self.errors:
            data['errors'] = self.errors
        return data


class ValidationError(ApplicationError):
    """Required field missing or malformed; ``errors`` maps field -> messages"""

    default_message = 'Invalid data'

    @classmethod
    def from_form(cls, form):
        errors = {
            field: [str(message) for message in messages]
            for field, messages in form.errors.items()
        }
        # "client_name: This field is required."
        summary = '; '.join(
            f"{field}: {' '.join(messages)}" for field, messages in errors.items()
        )
        return cls(summary or cls.default_message, errors=errors)


class InvalidStatus(ApplicationError):
    default_message = 'Invalid status'


class Forbidden(ApplicationError):
    status_code = 403
    default_message = 'You do not have permission to perform this action'


class NotFound(ApplicationError):
    status_code = 404
    default_message = 'Not found'


class BackendError(ApplicationError):
    """Database failure, message passed through unchanged"""

    status_code = 502
    default_message = 'Backend error'


@contextmanager
def backend_errors():
    """
    Re-raise database failures as BackendError

    Usage:
        with backend_errors():
            Application.objects.filter(pk=pk).update(...)
    """
    try:
        yield
    except DatabaseError as exc:
        logger.error(f"Backend error: {exc}")
        raise BackendError(str(exc)) from exc
