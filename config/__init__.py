# ==============================================================================
# DEALDESK CRM - CONFIG PACKAGE INITIALIZER
# ==============================================================================

# Import Celery app so it is configured with Django settings and its tasks
# (e.g. apps.customfields.tasks) are discovered when Django starts
from .celery import app as celery_app

__all__ = ('celery_app',)
