from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AccountsConfig(AppConfig):
    """
    Configuration class for accounts app

    This app contains:
    - User model (email login, display name, role); it is the "profile"
      every application and note points to
    - Actor, the identity value handed to core operations
    - Session login/logout views and the JSON access decorators
    """

    # BigAutoField = 64-bit integer primary keys
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.accounts'

    # Human-readable app name (shown in admin panel)
    verbose_name = _('Accounts')
