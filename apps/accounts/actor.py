from dataclasses import dataclass

from django.utils.translation import gettext_lazy as _


ADMIN = 'admin'
COUNSELOR = 'counselor'
AGENT = 'agent'

ROLE_CHOICES = [
    (ADMIN, _('Administrator')),
    (COUNSELOR, _('Counselor')),
    (AGENT, _('Agent')),
]

ROLES = frozenset(role for role, _label in ROLE_CHOICES)


@dataclass(frozen=True)
class Actor:
    """
    The authenticated identity performing an operation

    Built from ``request.user`` at the view layer (``User.as_actor()``) and
    handed explicitly to the repository, workflow and stats functions.
    """

    id: int
    role: str
    email: str = ''

    @property
    def is_admin(self):
        return self.role == ADMIN

    @property
    def is_counselor(self):
        return self.role == COUNSELOR

    @property
    def is_agent(self):
        return self.role == AGENT

    def has_role(self, *roles):
        return self.role in roles
