# Celery runs the CRM's background jobs:
# - Remove values of deleted custom fields from records
# - Periodic clean-up of custom field values without a definition
#
# Start worker: celery -A config worker -l info
# Start beat: celery -A config beat -l info
# ==============================================================================

import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for Celery
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# 'dealdesk' is the app name (appears in logs and monitoring)
app = Celery('dealdesk')

# All settings prefixed with 'CELERY_' will be used
# Example: CELERY_BROKER_URL, CELERY_RESULT_BACKEND
app.config_from_object('django.conf:settings', namespace='CELERY')

# Looks for tasks.py in each installed app
app.autodiscover_tasks()


# CELERY BEAT SCHEDULE (Periodic Tasks)

app.conf.beat_schedule = {
    # Sunday 3:00 AM
    'prune-orphaned-custom-field-values': {
        'task': 'apps.customfields.tasks.prune_orphaned_custom_field_values',
        'schedule': crontab(hour=3, minute=0, day_of_week=0),
    },
}


# CELERY TASK ANNOTATIONS

app.conf.task_annotations = {
    'apps.customfields.tasks.prune_orphaned_custom_field_values': {
        'time_limit': 600,  # 10 minutes
        'soft_time_limit': 540,  # 9 minutes
    },
}
