# audit.py -- Append-only record of access log view decisions.
# Implements DESIGN.md Component 3.6: one pipe-separated line per view
# lifecycle decision (opened, resume allowed or denied, back).

import datetime
from pathlib import Path


def log_event(
    audit_file: str,
    secret: str,
    event: str,
    outcome: str,
    detail: str | None = None,
) -> None:
    """Append a single audit entry to the audit file.

    Each entry is one line of pipe-separated fields:
    timestamp | secret | event | outcome [| detail]

    Args:
        audit_file: Path to the audit file.
        secret: Description of the secret whose log was on display.
        event: The view event (open, resume, back).
        outcome: The outcome (success, allowed, denied).
        detail: Optional additional context string.
    """
    timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
    line = f"{timestamp} | {secret} | {event} | {outcome}"
    if detail:
        line += f" | {detail}"
    with open(audit_file, "a", encoding="utf-8") as f:
        f.write(line + "\n")


def read_log(audit_file: str, last_n: int | None = None) -> list[str]:
    """Return the recorded view decisions, oldest first.

    Blank lines are skipped. With last_n, only the most recent decisions
    are returned, which is what `access-log audit-log --last N` prints.

    Raises:
        FileNotFoundError: If nothing has been recorded at audit_file yet.
    """
    if not Path(audit_file).exists():
        raise FileNotFoundError(f"Audit file not found at {audit_file}")
    with open(audit_file, "r", encoding="utf-8") as f:
        decisions = [line.rstrip() for line in f if line.strip()]
    if last_n is not None and last_n > 0:
        decisions = decisions[-last_n:]
    return decisions
