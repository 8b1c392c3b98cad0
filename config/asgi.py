# ASGI (Asynchronous Server Gateway Interface) configuration
#
# The CRM views are synchronous; ASGI is offered for servers such as
# Uvicorn or Daphne:
#   uvicorn config.asgi:application --host 0.0.0.0 --port 8000
# ==============================================================================

import os
from django.core.asgi import get_asgi_application

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_asgi_application()
