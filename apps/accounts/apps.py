from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AccountsConfig(AppConfig):
    """
    Configuration class for accounts app

    Holds the custom email-login User model that owns every CRM record,
    and the access decorators used by the JSON views.
    """

    # BigAutoField = 64-bit integer primary keys
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.accounts'

    # Human-readable app name (shown in admin panel)
    verbose_name = _('Accounts')
