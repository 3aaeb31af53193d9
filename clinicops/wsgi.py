"""
WSGI config for the clinicops project.

Exposes the WSGI callable as a module-level variable named ``application``.
Static files are served by WhiteNoise through the middleware stack.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clinicops.settings')

application = get_wsgi_application()
