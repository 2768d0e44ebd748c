# Models:
# 1. User - Custom user model; doubles as the "profile" record (display name + role)


from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .actor import Actor, ADMIN, COUNSELOR, AGENT, ROLE_CHOICES


# Shown wherever a profile has no username
DISPLAY_NAME_PLACEHOLDER = 'Unknown'


# USER MANAGER (handles user creation)
class UserManager(BaseUserManager):
    """
    Custom user manager for User model

    Provides methods to:
    - Create regular users (agents by default)
    - Create counselors
    - Create superusers (admins)
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user

        Args:
            email (str): User's email address (required)
            password (str): User's password
            **extra_fields: Additional fields (username, role, etc.)

        Returns:
            User: The created user object

        Raises:
            ValueError: If email is not provided

        Example:
            user = User.objects.create_user(
                email='agent@agency.com',
                password='securepass123',
                username='Sara',
                role='agent'
            )
        """
        if not email:
            raise ValueError(_('Users must have an email address'))

        email = self.normalize_email(email)

        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        return user

    def create_counselor(self, email, password=None, **extra_fields):
        extra_fields['role'] = COUNSELOR
        return self.create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser (admin)

        Superusers have all permissions and can access admin panel
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True'))

        return self.create_user(email, password, **extra_fields)

    def counselors(self):
        return self.filter(role=COUNSELOR, is_active=True)

    def agents(self):
        return self.filter(role=AGENT, is_active=True)


# USER MODEL
class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model

    Features:
    - Email-based authentication (no login username)
    - Optional display name (``username``)
    - Role-based access (admin, counselor, agent)
    """

    email = models.EmailField(_('email address'), unique=True, max_length=255, db_index=True, help_text=_('Required. Used for login.'))
    username = models.CharField(_('display name'), max_length=150, blank=True, help_text=_('Name shown next to assigned applications and notes'))

    role = models.CharField(_('role'), max_length=20, choices=ROLE_CHOICES, default=AGENT, db_index=True,
                            help_text=_('admin (full access), counselor (assigned applications) or agent (submits applications)'))

    is_active = models.BooleanField(_('active'), default=True, help_text=_('Designates whether this user should be treated as active. Unselect this instead of deleting accounts.'))
    is_staff = models.BooleanField(_('staff status'), default=False, help_text=_('Designates whether the user can log into admin site.'))
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    # MANAGER & SETTINGS
    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-date_joined']  # Newest first
        indexes = [
            models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
        ]

    def __str__(self):
        """
        Example:
            "Sara (sara@agency.com)"
        """
        if self.username:
            return f"{self.username} ({self.email})"
        return self.email

    # HELPER METHODS
    def get_display_name(self):
        return self.username or DISPLAY_NAME_PLACEHOLDER

    def get_full_name(self):
        return self.username or self.email

    def get_short_name(self):
        return self.username or self.email

    # ROLE CHECKS
    def is_admin(self):

        return self.role == ADMIN or self.is_superuser

    def is_counselor(self):

        return self.role == COUNSELOR

    def is_agent(self):

        return self.role == AGENT

    def as_actor(self):
        """
        Identity passed into every core operation

        Superusers act as admins whatever their stored role.
        """
        role = ADMIN if self.is_superuser else self.role
        return Actor(id=self.pk, role=role, email=self.email)
