from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains:
        - OwnedRecord abstract model (owner + custom_fields + timestamps)
        - Entity type registry (contact, deal)
        - The shared list pipeline used by the contact and deal lists
        - JSON request/response helpers and Excel export
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'
