"""ASGI config for the space booking service."""

import os
from django.core.asgi import get_asgi_application

# Production servers should set DJANGO_SETTINGS_MODULE explicitly.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
