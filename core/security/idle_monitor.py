# core/security/idle_monitor.py
"""
Idle monitor.

Tracks user inactivity locally and warns, then logs out, without asking
the server. This class is the reference model for
core/static/core/js/idle_monitor.js: the browser script must follow the
same thresholds, once-per-cycle warning and delayed logout, and
``from_settings`` reads the same settings the context processor hands the
script. Here the rules can be driven by a fake clock and a fake event
source in tests, or by real threads.
"""
import logging
import threading
import time

logger = logging.getLogger(__name__)

ACTIVITY_EVENTS = ('pointerdown', 'pointermove', 'keypress', 'scroll', 'touchstart', 'click')

STATE_IDLE_OK = 'ok'
STATE_WARNING = 'warning'
STATE_LOGGED_OUT = 'logged_out'


def _thread_timer(delay, callback):
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class IdleMonitor:
    """
    ``events`` must offer ``subscribe(callback)`` and ``unsubscribe(callback)``;
    callbacks receive the event name. ``scheduler(delay, callback)`` runs
    a callback later and returns an object with ``cancel()``.
    """

    def __init__(self, timeout_minutes=15, warning_minutes=2, check_interval_ms=30000,
                 logout_delay_seconds=2, clock=time.monotonic, events=None, scheduler=None,
                 on_warning=None, on_expired=None, on_logout=None):
        if warning_minutes >= timeout_minutes:
            raise ValueError("warning_minutes must be smaller than timeout_minutes")
        self.timeout_seconds = timeout_minutes * 60
        self.warning_seconds = (timeout_minutes - warning_minutes) * 60
        self.warning_minutes = warning_minutes
        self.check_interval = check_interval_ms / 1000
        self.logout_delay = logout_delay_seconds
        self.clock = clock
        self.events = events
        self.scheduler = scheduler or _thread_timer
        self.on_warning = on_warning
        self.on_expired = on_expired
        self.on_logout = on_logout

        self.last_activity = clock()
        self.warning_shown = False
        self.logged_out = False

        self._subscribed = False
        self._lock = threading.RLock()
        self._stopped = threading.Event()
        self._thread = None
        self._logout_timer = None

    @classmethod
    def from_settings(cls, **kwargs):
        from django.conf import settings

        kwargs.setdefault('timeout_minutes', settings.SESSION_TIMEOUT_MINUTES)
        kwargs.setdefault('warning_minutes', settings.IDLE_WARNING_MINUTES)
        kwargs.setdefault('check_interval_ms', settings.IDLE_CHECK_INTERVAL_MS)
        kwargs.setdefault('logout_delay_seconds', settings.IDLE_LOGOUT_DELAY_SECONDS)
        return cls(**kwargs)

    # ---- lifecycle ----

    def start(self, poll=True):
        if self.events is not None and not self._subscribed:
            self.events.subscribe(self.handle_event)
            self._subscribed = True
        self._stopped.clear()
        if poll:
            self._thread = threading.Thread(target=self._poll, name='idle-monitor', daemon=True)
            self._thread.start()
        self.check()

    def stop(self):
        """Cancel polling, any pending logout and the event subscription."""
        self._stopped.set()
        if self._subscribed:
            self.events.unsubscribe(self.handle_event)
            self._subscribed = False
        if self._logout_timer is not None:
            self._logout_timer.cancel()
            self._logout_timer = None
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.check_interval)
        self._thread = None

    def _poll(self):
        while not self._stopped.wait(self.check_interval):
            self.check()

    # ---- activity ----

    def handle_event(self, name):
        if name in ACTIVITY_EVENTS:
            self.extend_session()

    def visibility_changed(self, visible):
        # Timers can be throttled in background tabs
        if visible:
            return self.check()
        return None

    def extend_session(self):
        with self._lock:
            if self.logged_out:
                return
            self.last_activity = self.clock()
            self.warning_shown = False

    def idle_seconds(self):
        return self.clock() - self.last_activity

    # ---- evaluation ----

    def check(self):
        with self._lock:
            if self.logged_out:
                return STATE_LOGGED_OUT

            idle = self.idle_seconds()
            state = STATE_IDLE_OK

            if idle >= self.warning_seconds:
                state = STATE_WARNING
                if not self.warning_shown:
                    self.warning_shown = True
                    logger.info(f"Idle for {idle:.0f}s, warning before logout")
                    if self.on_warning:
                        self.on_warning(self.warning_minutes)

            if idle >= self.timeout_seconds:
                self._logout(idle)
                state = STATE_LOGGED_OUT

            return state

    def _logout(self, idle):
        self.logged_out = True
        self._stopped.set()
        logger.info(f"Idle for {idle:.0f}s, logging out")
        if self.on_expired:
            self.on_expired()
        if self.on_logout:
            self._logout_timer = self.scheduler(self.logout_delay, self.on_logout)
