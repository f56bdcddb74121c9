# core/security/timeout.py
"""
Inactivity timeout rules.

The evaluator only reads and writes a per-session key/value bag (Django's
request.session in production, a plain dict in tests) and reports what the
caller should persist. It performs no I/O itself.
"""
import time

from django.conf import settings

LAST_ACTIVITY = 'last_activity'
LAST_USER_UPDATE = 'last_user_update'
LAST_SESSION_UPDATE = 'last_session_update'

DEFAULT_TIMEOUT_MINUTES = 15
DEFAULT_THROTTLE_SECONDS = 5 * 60


class TimeoutDecision:
    """Result of one evaluation. Times are epoch seconds."""

    def __init__(self, expired, now, elapsed=None, persist_user=False, persist_session=False):
        self.expired = expired
        self.now = now
        self.elapsed = elapsed
        self.persist_user = persist_user
        self.persist_session = persist_session

    def __repr__(self):
        return (
            f"<TimeoutDecision expired={self.expired} elapsed={self.elapsed} "
            f"persist_user={self.persist_user} persist_session={self.persist_session}>"
        )


class TimeoutEvaluator:
    """
    Sliding-window expiry with two independent write throttles.

    A session expires when strictly more than ``timeout_seconds`` passed
    since its last recorded activity. Every alive evaluation moves the
    activity marker to ``now``. The user and session throttle markers each
    allow one persisted write per ``throttle_seconds``; a fresh session has
    neither marker so its first alive request always persists.
    """

    def __init__(self, timeout_seconds, throttle_seconds=DEFAULT_THROTTLE_SECONDS, clock=time.time):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.timeout_seconds = timeout_seconds
        self.throttle_seconds = throttle_seconds
        self.clock = clock

    @classmethod
    def from_settings(cls, clock=time.time):
        minutes = getattr(settings, 'SESSION_TIMEOUT_MINUTES', DEFAULT_TIMEOUT_MINUTES)
        throttle = getattr(settings, 'ACTIVITY_WRITE_THROTTLE_SECONDS', DEFAULT_THROTTLE_SECONDS)
        return cls(minutes * 60, throttle, clock=clock)

    def evaluate(self, state, now=None):
        if now is None:
            now = self.clock()

        last_activity = state.get(LAST_ACTIVITY)
        elapsed = None
        if last_activity is not None:
            elapsed = now - last_activity
            if elapsed > self.timeout_seconds:
                return TimeoutDecision(True, now, elapsed=elapsed)

        state[LAST_ACTIVITY] = now

        persist_user = self._due(state.get(LAST_USER_UPDATE), now)
        if persist_user:
            state[LAST_USER_UPDATE] = now

        persist_session = self._due(state.get(LAST_SESSION_UPDATE), now)
        if persist_session:
            state[LAST_SESSION_UPDATE] = now

        return TimeoutDecision(
            False, now, elapsed=elapsed,
            persist_user=persist_user, persist_session=persist_session,
        )

    def _due(self, marker, now):
        return marker is None or now - marker >= self.throttle_seconds
