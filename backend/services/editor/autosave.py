"""
Debounced auto-save.

Every edit marks the saver dirty and re-arms a timer; when the timer
fires the module is persisted, unless an edit session is open, in which
case the save waits for resume(). States:

    CLEAN --mark_dirty--> DIRTY --timer/flush--> SAVING --ok--> CLEAN
                                                       --error--> DIRTY
"""
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from core.config import AUTOSAVE_DEBOUNCE_SECONDS
from core.notifications import Notifier

logger = logging.getLogger(__name__)


class SaveState(Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"


class AutoSaver:
    """State machine driving debounced persistence of one module."""

    def __init__(
        self,
        persist: Callable[[], None],
        notifier: Optional[Notifier] = None,
        is_blocked: Callable[[], bool] = lambda: False,
        delay: float = AUTOSAVE_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.persist = persist
        self.notifier = notifier or Notifier()
        self.is_blocked = is_blocked
        self.delay = delay
        self.timer_factory = timer_factory

        self.state = SaveState.CLEAN
        self._timer: Optional[threading.Timer] = None
        self._edits_during_save = False
        self._lock = threading.RLock()

    @property
    def pending(self) -> bool:
        """True when unsaved edits exist."""
        return self.state == SaveState.DIRTY or self._edits_during_save

    def mark_dirty(self) -> None:
        """Record an edit and restart the debounce window."""
        with self._lock:
            if self.state == SaveState.SAVING:
                self._edits_during_save = True
            else:
                self.state = SaveState.DIRTY
            self._arm()

    def flush(self) -> bool:
        """Persist now if dirty and not blocked. Returns True on success."""
        with self._lock:
            self._disarm()
            if self.state != SaveState.DIRTY:
                return self.state == SaveState.CLEAN
            if self.is_blocked():
                logger.debug("Save deferred: edit session open")
                return False
            self.state = SaveState.SAVING
            self._edits_during_save = False

        # persist outside the lock so edits during a slow save still register
        try:
            self.persist()
        except Exception as e:
            logger.error(f"Auto-save failed: {e}")
            with self._lock:
                self.state = SaveState.DIRTY
                self._edits_during_save = False
            self.notifier.error(f"Failed to save changes: {getattr(e, 'message', str(e))}")
            return False

        with self._lock:
            if self._edits_during_save:
                self.state = SaveState.DIRTY
                self._edits_during_save = False
                self._arm()
            else:
                self.state = SaveState.CLEAN
        logger.debug(f"Auto-save complete, state={self.state.value}")
        return True

    def resume(self) -> None:
        """Called when an edit session closes; re-arms a deferred save."""
        with self._lock:
            if self.state == SaveState.DIRTY:
                self._arm()

    def cancel(self) -> None:
        """Disarm the timer without changing state."""
        with self._lock:
            self._disarm()

    def reset(self) -> None:
        """Drop pending edits, e.g. when the module is replaced."""
        with self._lock:
            self._disarm()
            if self.state != SaveState.SAVING:
                self.state = SaveState.CLEAN
            self._edits_during_save = False

    def _arm(self) -> None:
        self._disarm()
        self._timer = self.timer_factory(self.delay, self._on_timer)
        self._timer.daemon = True
        self._timer.start()

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        with self._lock:
            self._timer = None
        self.flush()
