from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from access_log import EventType, LogEntry
from log_format import LocalCalendar, LogEntryFormatter
from templates import Bucket, TemplateTable

UTC = timezone.utc


def ms(dt):
    return int(dt.timestamp() * 1000)


NOW = ms(datetime(2024, 3, 15, 14, 30, tzinfo=UTC))
MIDNIGHT = ms(datetime(2024, 3, 15, tzinfo=UTC))
YESTERDAY_MIDNIGHT = ms(datetime(2024, 3, 14, tzinfo=UTC))


@pytest.fixture
def formatter():
    return LogEntryFormatter(calendar=LocalCalendar(UTC), clock=lambda: NOW)


@pytest.mark.parametrize("event_type", list(EventType))
@pytest.mark.parametrize("age_ms", [0, 999, 30_000, 59_999, -5_000, -10**15])
def test_under_a_minute_uses_seconds_bucket(formatter, event_type, age_ms):
    bucket, args = formatter.select(LogEntry(event_type, NOW - age_ms), NOW)
    assert bucket is Bucket.SECONDS
    assert len(args) == 1


def test_thirty_seconds_ago_viewed(formatter):
    text = formatter.format(LogEntry(EventType.VIEWED, NOW - 30_000), NOW)
    assert text == "Viewed less than a minute ago"


@pytest.mark.parametrize(
    "age_seconds,minutes",
    [(60, 1), (119, 1), (125, 2), (3599, 59)],
)
def test_minutes_are_floored(formatter, age_seconds, minutes):
    entry = LogEntry(EventType.CHANGED, NOW - age_seconds * 1000)
    bucket, args = formatter.select(entry, NOW)
    assert bucket is Bucket.MINUTES
    assert args == ("Changed", minutes)
    assert formatter.format(entry, NOW) == f"Changed {minutes} minutes ago"


def test_partial_seconds_are_truncated(formatter):
    # 59.999 seconds is still under a minute
    bucket, _ = formatter.select(LogEntry(EventType.VIEWED, NOW - 59_999), NOW)
    assert bucket is Bucket.SECONDS
    bucket, _ = formatter.select(LogEntry(EventType.VIEWED, NOW - 60_000), NOW)
    assert bucket is Bucket.MINUTES


def test_two_hours_ago_same_day_is_today(formatter):
    entry = LogEntry(EventType.EXPORTED, NOW - 7_200_000)
    bucket, args = formatter.select(entry, NOW)
    assert bucket is Bucket.TODAY
    assert args[1] == datetime(2024, 3, 15, 12, 30, tzinfo=UTC)
    assert formatter.format(entry, NOW) == "Exported today at 12:30"


def test_just_after_midnight_is_today(formatter):
    bucket, _ = formatter.select(LogEntry(EventType.VIEWED, MIDNIGHT + 1), NOW)
    assert bucket is Bucket.TODAY


def test_exactly_midnight_is_yesterday(formatter):
    entry = LogEntry(EventType.VIEWED, MIDNIGHT)
    bucket, _ = formatter.select(entry, NOW)
    assert bucket is Bucket.YESTERDAY
    assert formatter.format(entry, NOW) == "Viewed yesterday at 00:00"


def test_yesterday(formatter):
    entry = LogEntry(EventType.SYNCED, ms(datetime(2024, 3, 14, 21, 5, tzinfo=UTC)))
    assert formatter.format(entry, NOW) == "Synced yesterday at 21:05"


def test_exactly_yesterday_midnight_is_dated(formatter):
    bucket, _ = formatter.select(LogEntry(EventType.VIEWED, YESTERDAY_MIDNIGHT), NOW)
    assert bucket is Bucket.DATED


def test_older_entries_are_dated(formatter):
    entry = LogEntry(EventType.CREATED, ms(datetime(2023, 11, 2, 8, 45, tzinfo=UTC)))
    assert formatter.format(entry, NOW) == "Created on 2023-11-02 at 08:45"


def test_day_boundaries_follow_the_time_zone():
    # 01:30 in Tokyo on 15 March is 16:30 UTC on 14 March
    tokyo = LogEntryFormatter(calendar=LocalCalendar(ZoneInfo("Asia/Tokyo")))
    now = ms(datetime(2024, 3, 15, 1, 30, tzinfo=ZoneInfo("Asia/Tokyo")))
    entry = LogEntry(EventType.VIEWED, now - 2 * 3600 * 1000)
    assert tokyo.select(entry, now)[0] is Bucket.YESTERDAY
    assert tokyo.format(entry, now) == "Viewed yesterday at 23:30"


def test_yesterday_is_a_calendar_day_across_dst():
    # 10 March 2024 was 23 hours long in New York
    tz = ZoneInfo("America/New_York")
    calendar = LocalCalendar(tz)
    now = ms(datetime(2024, 3, 11, 9, 0, tzinfo=tz))
    assert calendar.start_of_day(now) == ms(datetime(2024, 3, 11, tzinfo=tz))
    assert calendar.start_of_previous_day(now) == ms(datetime(2024, 3, 10, tzinfo=tz))


def test_unknown_event_type_uses_placeholder(formatter):
    text = formatter.format(LogEntry("deleted", NOW - 10_000), NOW)
    assert text == "? less than a minute ago"


def test_zero_reference_time_uses_clock(formatter):
    entry = LogEntry(EventType.VIEWED, NOW - 125_000)
    assert formatter.format(entry, 0) == "Viewed 2 minutes ago"
    assert formatter.format(entry) == formatter.format(entry, NOW)


def test_format_is_idempotent(formatter):
    entry = LogEntry(EventType.CHANGED, NOW - 5 * 24 * 3600 * 1000)
    assert formatter.format(entry, NOW) == formatter.format(entry, NOW)


@pytest.mark.parametrize(
    "entry_time,reference,text",
    [
        (0, NOW, "Viewed on 1970-01-01 at 00:00"),
        (0, 2**62, "Viewed on 1970-01-01 at 00:00"),
        (2**62, NOW, "Viewed less than a minute ago"),
        (NOW, -(2**62), "Viewed less than a minute ago"),
        (10**20, 10**20 + 7_200_000, "Viewed today at 00:00"),
    ],
)
def test_extreme_values(formatter, entry_time, reference, text):
    assert formatter.format(LogEntry(EventType.VIEWED, entry_time), reference) == text


def test_first_days_after_epoch_keep_their_time(formatter):
    day = 24 * 3600 * 1000
    assert formatter.format(LogEntry(EventType.CREATED, 0), 10 * day) == "Created on 1970-01-01 at 00:00"
    bucket, args = formatter.select(LogEntry(EventType.VIEWED, 1000), day + 3_600_000)
    assert bucket is Bucket.YESTERDAY
    assert args[1] == datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)
    assert formatter.calendar.start_of_day(day + 3_600_000) == day
    assert formatter.calendar.start_of_previous_day(day + 3_600_000) == 0


def test_uses_injected_templates():
    german = TemplateTable(
        verbs={"viewed": "Angesehen"},
        patterns={"minutes_ago": "{0} vor {1} Minuten"},
    )
    formatter = LogEntryFormatter(german, LocalCalendar(UTC), clock=lambda: NOW)
    assert formatter.format(LogEntry(EventType.VIEWED, NOW - 300_000)) == "Angesehen vor 5 Minuten"
