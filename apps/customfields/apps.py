from django.apps import AppConfig


class CustomFieldsConfig(AppConfig):
    """
    Configuration for Custom Fields application

    This app contains:
        - CustomFieldDefinition model (user-declared fields on contacts/deals)
        - Typed coercion of the custom_fields bag (values.py)
        - Clean-up tasks for values of deleted definitions
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.customfields'
    verbose_name = 'Custom Fields'

    def ready(self):
        import apps.customfields.signals  # noqa: F401
