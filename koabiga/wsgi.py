"""
WSGI config for koabiga project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'koabiga.settings')

application = get_wsgi_application()
