"""
ASGI config for the public health portal (HTTP only).
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "phms.settings")

application = get_asgi_application()
