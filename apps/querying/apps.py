from django.apps import AppConfig


class QueryingConfig(AppConfig):
    """
    Configuration for Querying application

    This app contains no models. It holds:
        - Field catalogs (which columns can be filtered and how)
        - The filter compiler (column filters -> expression tree)
        - Backends that run a compiled tree against a queryset or plain dicts
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.querying'
    verbose_name = 'Querying'
