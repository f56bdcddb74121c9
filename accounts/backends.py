import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.contrib.auth.backends import ModelBackend

logger = logging.getLogger(__name__)
User = get_user_model()


class PhonePinBackend(ModelBackend):
    """
    Authenticates leaders and members by phone number and PIN.
    Admin accounts are refused so they always go through email login.
    """

    def authenticate(self, request, phone=None, pin=None, **kwargs):
        if not phone or not pin:
            return None

        try:
            user = User.objects.get(phone=phone)
        except User.DoesNotExist:
            # Run the hasher anyway to keep timing uniform
            make_password(pin)
            return None

        if not user.can_use_phone_login():
            logger.warning(f"Phone login refused for admin account {user.pk}")
            return None

        if user.check_pin(pin) and self.user_can_authenticate(user):
            return user
        return None
