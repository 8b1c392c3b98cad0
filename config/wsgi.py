# WSGI (Web Server Gateway Interface) configuration for production deployment
#
# Run: gunicorn config.wsgi:application --bind 0.0.0.0:8000 --workers 4
#
# Set environment variables in production:
#    - DEBUG=False
#    - SECRET_KEY=<random-value>
#    - ALLOWED_HOSTS=yourdomain.com
#    - DB_ENGINE=django.db.backends.postgresql (plus DB_NAME, DB_USER, ...)
# ==============================================================================

import os
from django.core.wsgi import get_wsgi_application

# Set the default Django settings module
# Points to config/settings.py
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()
