# log_format.py -- Relative-time rendering of access log entries.
# Implements DESIGN.md Component 3.3: day-boundary arithmetic in the active
# time zone and selection of the seconds/minutes/today/yesterday/dated text.

import datetime
import time
from typing import Callable

from access_log import LogEntry
from templates import Bucket, TemplateTable

ONE_MINUTE_IN_SECS = 60
ONE_HOUR_IN_SECS = 3600

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_ONE_MS = datetime.timedelta(milliseconds=1)

# Limits of datetime, less two days so that any UTC offset and the
# previous calendar day stay representable.
MIN_CALENDAR_MS = (datetime.datetime(1, 1, 3, tzinfo=datetime.timezone.utc) - _EPOCH) // _ONE_MS
MAX_CALENDAR_MS = (datetime.datetime(9999, 12, 29, tzinfo=datetime.timezone.utc) - _EPOCH) // _ONE_MS

# Raised by the host's localtime() outside the range it supports.
_HOST_TIME_ERRORS = (OverflowError, OSError, ValueError)


def current_time_millis() -> int:
    """Return the wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def _clamp(ms: int) -> int:
    return max(MIN_CALENDAR_MS, min(ms, MAX_CALENDAR_MS))


def _div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // b
    return q if a >= 0 else -q


class LocalCalendar:
    """Calendar-day arithmetic in one time zone.

    When tz is None the host's local zone is used. Instants the host cannot
    convert (typically far from the present) are handled in UTC instead.

    Args:
        tz: The active time zone, or None for the host's local zone.
    """

    def __init__(self, tz: datetime.tzinfo | None = None) -> None:
        self.tz = tz

    def to_datetime(self, ms: int) -> datetime.datetime:
        """Return ms as an aware datetime in the active time zone."""
        utc = _EPOCH + datetime.timedelta(milliseconds=_clamp(ms))
        if self.tz is not None:
            return utc.astimezone(self.tz)
        try:
            return utc.astimezone()
        except _HOST_TIME_ERRORS:
            return utc

    def _midnight(self, day: datetime.date) -> int:
        start = datetime.datetime(day.year, day.month, day.day)
        if self.tz is not None:
            start = start.replace(tzinfo=self.tz)
        else:
            try:
                # naive astimezone() resolves the host offset for that wall time
                start = start.astimezone()
            except _HOST_TIME_ERRORS:
                start = start.replace(tzinfo=datetime.timezone.utc)
        return (start - _EPOCH) // _ONE_MS

    def start_of_day(self, ms: int) -> int:
        """Return the first millisecond of the calendar day containing ms."""
        return self._midnight(self.to_datetime(ms).date())

    def start_of_previous_day(self, ms: int) -> int:
        """Return the first millisecond of the calendar day before the one containing ms."""
        day = self.to_datetime(ms).date() - datetime.timedelta(days=1)
        return self._midnight(day)


class LogEntryFormatter:
    """Render log entries as "how long ago" strings.

    Holds no mutable state, so one instance may be shared freely.

    Args:
        templates: Verbs and patterns for the active locale.
        calendar: Day-boundary facility for the active time zone.
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        templates: TemplateTable | None = None,
        calendar: LocalCalendar | None = None,
        clock: Callable[[], int] = current_time_millis,
    ) -> None:
        self.templates = templates or TemplateTable()
        self.calendar = calendar or LocalCalendar()
        self.clock = clock

    def select(self, entry: LogEntry, reference_time: int = 0) -> tuple[Bucket, tuple]:
        """Choose the bucket for entry and the arguments for its pattern.

        Args:
            entry: The log entry to describe.
            reference_time: The "now" to measure from, in epoch milliseconds.
                Zero means the current time.

        Returns:
            (bucket, args) where args are the positional pattern arguments.
        """
        if reference_time == 0:
            reference_time = self.clock()

        diff = _div_trunc(reference_time - entry.time, 1000)
        verb = self.templates.verb(entry.event_type)

        if diff < ONE_MINUTE_IN_SECS:
            return Bucket.SECONDS, (verb,)
        if diff < ONE_HOUR_IN_SECS:
            return Bucket.MINUTES, (verb, diff // 60)

        midnight = self.calendar.start_of_day(reference_time)
        yesterday_midnight = self.calendar.start_of_previous_day(reference_time)
        if entry.time > midnight:
            bucket = Bucket.TODAY
        elif entry.time > yesterday_midnight:
            bucket = Bucket.YESTERDAY
        else:
            bucket = Bucket.DATED
        return bucket, (verb, self.calendar.to_datetime(entry.time))

    def format(self, entry: LogEntry, reference_time: int = 0) -> str:
        """Return the display string for entry relative to reference_time.

        The string takes a different shape depending on how much time has
        elapsed, for example "Viewed 5 minutes ago" or "Viewed today at 09:15".
        """
        bucket, args = self.select(entry, reference_time)
        return self.templates.pattern(bucket).format(*args)
