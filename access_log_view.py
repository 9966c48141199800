# access_log_view.py -- Controller for the view that displays a secret's access log.
# Implements DESIGN.md Component 3.5: renders the log newest first and drives
# the resume guard from the host's foreground and back-navigation signals.

import logging
from enum import Enum
from typing import Callable

import audit
from access_log import AccessLog, AccessLogError
from log_format import LogEntryFormatter
from resume_guard import ResumeDecision, ResumeGuard

logger = logging.getLogger(__name__)


class ViewClosedError(AccessLogError):
    """Raised when a closed view is asked to render."""
    pass


class ViewResult(Enum):
    """Result reported to the parent view when this one finishes."""

    CANCELED = "canceled"
    OK = "ok"


class AccessLogView:
    """Display surface for the access log of one secret.

    Each view owns its own ResumeGuard. A denied resume closes the view for
    good; the parent then sees a CANCELED result and should ask for the
    master password again. Only the back navigation reports OK.

    Args:
        description: Description of the secret, shown in the title.
        access_log: The secret's log, oldest entry first.
        formatter: Renders each entry.
        on_finish: Called with the ViewResult once the view closes.
        audit_file: Optional path where view decisions are recorded.
    """

    def __init__(
        self,
        description: str,
        access_log: AccessLog,
        formatter: LogEntryFormatter | None = None,
        on_finish: Callable[[ViewResult], None] | None = None,
        audit_file: str | None = None,
    ) -> None:
        self.description = description
        self.access_log = access_log
        self.formatter = formatter or LogEntryFormatter()
        self.on_finish = on_finish
        self.audit_file = audit_file
        self.guard = ResumeGuard()
        self.result = ViewResult.CANCELED
        self.finished = False
        self.title = self.formatter.templates.title(description)
        self._audit("open", "success", f"{len(access_log)} entries")

    def _audit(self, event: str, outcome: str, detail: str | None = None) -> None:
        if self.audit_file:
            audit.log_event(self.audit_file, self.description, event, outcome, detail)

    def rows(self, reference_time: int = 0) -> list[str]:
        """Return one display string per entry, most recent first.

        Args:
            reference_time: The "now" to measure from; zero means the current time.

        Raises:
            ViewClosedError: If the view has finished.
        """
        if self.finished:
            raise ViewClosedError(f"Access log view for '{self.description}' is closed")
        if reference_time == 0:
            reference_time = self.formatter.clock()
        return [
            self.formatter.format(entry, reference_time)
            for entry in self.access_log.newest_first()
        ]

    def on_resume(self) -> bool:
        """Handle the view regaining the foreground.

        Returns:
            True if the view may show its content. False if the resume was
            not allowed, in which case the view has been closed.
        """
        if self.finished:
            return False
        if self.guard.on_foreground_regain() is ResumeDecision.DENY:
            logger.debug("Resume of access log for '%s' not allowed", self.description)
            self._audit("resume", "denied")
            self.finish()
            return False
        self._audit("resume", "allowed")
        return True

    def on_back(self) -> None:
        """Handle the user pressing back, the only sanctioned way out."""
        if self.finished:
            return
        self.result = ViewResult.OK
        self.guard.grant_next_resume()
        self._audit("back", "success")
        self.finish()

    def finish(self) -> None:
        """Close the view and report its result to the parent."""
        if self.finished:
            return
        self.finished = True
        logger.debug("Access log view for '%s' finished: %s", self.description, self.result.value)
        if self.on_finish is not None:
            self.on_finish(self.result)
