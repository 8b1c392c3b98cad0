from django.apps import AppConfig


class ColumnsConfig(AppConfig):
    """
    Configuration for Columns application

    Per-session column layout of the contact and deal lists:
        - visibility, labels and order of columns
        - the single active sort directive
    State lives in the Django session; the app has no models.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.columns'
    verbose_name = 'Columns'
