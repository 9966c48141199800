# access_log.py -- Access log data model for the Access Log Viewer.
# Implements DESIGN.md Component 3.1: immutable log entries recorded on each
# lifecycle action of a secret, and the ordered log that holds them.

from dataclasses import dataclass
from enum import Enum


class AccessLogError(Exception):
    """Base exception for access log errors."""
    pass


class EventType(str, Enum):
    """Lifecycle actions recorded against a secret."""

    CREATED = "created"
    CHANGED = "changed"
    VIEWED = "viewed"
    EXPORTED = "exported"
    SYNCED = "synced"


def parse_event_type(value: str) -> "EventType | str":
    """Return the EventType for value, or value itself if it is not recognized.

    Unknown types are kept rather than rejected so that a log written by a
    newer client still renders.
    """
    try:
        return EventType(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class LogEntry:
    """One recorded lifecycle event on a secret.

    Args:
        event_type: The action performed (or a raw unrecognized value).
        time: When it happened, in milliseconds since the epoch.
    """

    event_type: EventType | str
    time: int

    def to_dict(self) -> dict:
        kind = self.event_type
        if isinstance(kind, EventType):
            kind = kind.value
        return {"type": kind, "time": self.time}

    @classmethod
    def from_dict(cls, data: dict) -> "LogEntry":
        """Build an entry from its serialized form.

        Raises:
            AccessLogError: If the type or time field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise AccessLogError(f"Malformed log entry: {data!r}")
        kind = data.get("type")
        time = data.get("time")
        if not isinstance(kind, str) or not kind:
            raise AccessLogError(f"Log entry has no event type: {data!r}")
        # bool is an int subclass
        if not isinstance(time, int) or isinstance(time, bool) or time < 0:
            raise AccessLogError(f"Log entry has an invalid time: {data!r}")
        return cls(parse_event_type(kind), time)


class AccessLog:
    """Ordered sequence of log entries for a single secret.

    Insertion order is the order the entries were recorded. Entries are
    never removed; consumers display them most recent first.

    Args:
        entries: Initial entries, oldest first.
    """

    def __init__(self, entries=None) -> None:
        self._entries: list[LogEntry] = list(entries or [])

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def record(self, event_type: EventType | str, time: int) -> LogEntry:
        """Create an entry for event_type at time and append it.

        Returns:
            The new entry.
        """
        entry = LogEntry(event_type, time)
        self._entries.append(entry)
        return entry

    def newest_first(self) -> list[LogEntry]:
        return list(reversed(self._entries))

    def to_list(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, items: list) -> "AccessLog":
        """Build a log from a list of serialized entries, oldest first.

        Raises:
            AccessLogError: If items is not a list or an entry is malformed.
        """
        if not isinstance(items, list):
            raise AccessLogError("Access log must be a list of entries")
        return cls(LogEntry.from_dict(item) for item in items)

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AccessLog({self._entries!r})"
