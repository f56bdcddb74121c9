"""
ASGI config for koabiga project.
"""

import os
import logging

from django.core.asgi import get_asgi_application

logger = logging.getLogger(__name__)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'koabiga.settings')

application = get_asgi_application()

logger.info("ASGI application initialized")
