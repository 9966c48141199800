# resume_guard.py -- One-shot re-lock guard for the access log view.
# Implements DESIGN.md Component 3.4: decides whether a view showing
# sensitive audit data may be shown again when it regains the foreground.

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class GuardState(Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class ResumeDecision(Enum):
    ALLOW = "allow"
    DENY = "deny"


class ResumeGuard:
    """Two-state machine permitting exactly one foreground regain per grant.

    A fresh guard is unlocked, since the view has just been opened on purpose
    and its first foreground event is legitimate. Every regain after that is
    denied unless the user went through the sanctioned back navigation, so
    leaving the application in any other way forces the view closed and the
    master password to be entered again.
    """

    def __init__(self) -> None:
        self._state = GuardState.UNLOCKED

    @property
    def state(self) -> GuardState:
        return self._state

    def grant_next_resume(self) -> None:
        """Allow the next foreground regain, whatever the current state."""
        logger.debug("Next resume granted")
        self._state = GuardState.UNLOCKED

    def on_foreground_regain(self) -> ResumeDecision:
        """Consume the grant if there is one.

        Returns:
            ALLOW if the guard was unlocked (it is now locked), DENY otherwise.
        """
        if self._state is GuardState.UNLOCKED:
            self._state = GuardState.LOCKED
            return ResumeDecision.ALLOW
        logger.debug("Resume not allowed")
        return ResumeDecision.DENY
