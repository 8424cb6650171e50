"""
gym_config/wsgi.py
WSGI config — used by Gunicorn in production.
"""
import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gym_config.settings.development")
application = get_wsgi_application()
