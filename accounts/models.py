from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class CustomUser(AbstractUser):
    ROLE_ADMIN = 'admin'
    ROLE_ZONE_LEADER = 'zone_leader'
    ROLE_UNIT_LEADER = 'unit_leader'
    ROLE_MEMBER = 'member'

    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_ZONE_LEADER, 'Zone Leader'),
        (ROLE_UNIT_LEADER, 'Unit Leader'),
        (ROLE_MEMBER, 'Member'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_SUSPENDED = 'suspended'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_SUSPENDED, 'Suspended'),
    ]

    christian_name = models.CharField(max_length=100, blank=True)
    family_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_MEMBER, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    # Hashed with the configured password hashers, never stored raw
    pin = models.CharField(max_length=128, blank=True, null=True)
    last_login_at = models.DateTimeField(null=True, blank=True)
    # Denormalized copy of the latest activity across all sessions
    last_activity_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'status'], name='user_role_status_idx'),
        ]

    def __str__(self):
        return self.email or self.phone or self.username

    def get_full_name(self):
        parts = [part for part in (self.christian_name, self.family_name) if part]
        if parts:
            return ' '.join(parts)
        return super().get_full_name() or 'Unknown User'

    def is_admin_role(self):
        return self.role == self.ROLE_ADMIN

    def is_zone_leader(self):
        return self.role == self.ROLE_ZONE_LEADER

    def is_unit_leader(self):
        return self.role == self.ROLE_UNIT_LEADER

    def is_member(self):
        return self.role == self.ROLE_MEMBER

    def is_account_active(self):
        return self.status == self.STATUS_ACTIVE

    def get_dashboard_url_name(self):
        return 'admin_dashboard' if self.is_admin_role() else 'dashboard'

    def can_use_email_login(self):
        """Admins sign in with email and password."""
        return self.is_admin_role()

    def can_use_phone_login(self):
        """Leaders and members sign in with phone and PIN."""
        return not self.is_admin_role()

    def set_pin(self, raw_pin):
        self.pin = make_password(raw_pin) if raw_pin else None

    def check_pin(self, raw_pin):
        if not self.pin or not raw_pin:
            return False
        return check_password(raw_pin, self.pin)

    def mark_login(self, at=None):
        at = at or timezone.now()
        type(self).objects.filter(pk=self.pk).update(last_login_at=at, last_activity_at=at)
        self.last_login_at = at
        self.last_activity_at = at
