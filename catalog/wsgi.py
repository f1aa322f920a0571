"""
WSGI entrypoint for the catalog site
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "catalog.settings_dev")

application = get_wsgi_application()
