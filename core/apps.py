# core/apps.py
from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'

    def ready(self):
        from django.conf import settings

        logger.info(
            f"Core application initialized - session timeout {settings.SESSION_TIMEOUT_MINUTES} minutes, "
            f"activity write throttle {settings.ACTIVITY_WRITE_THROTTLE_SECONDS}s"
        )
