# templates.py -- Display text table for the Access Log Viewer.
# Implements DESIGN.md Component 3.2: the locale-specific verbs and patterns
# injected into the formatter, with a JSON loader that validates them up front.

import datetime
import json
import logging
from enum import Enum
from pathlib import Path

from access_log import AccessLogError, EventType

logger = logging.getLogger(__name__)

UNKNOWN_VERB = "?"


class TemplateError(AccessLogError):
    """Raised when a template table cannot be loaded or is invalid."""
    pass


class Bucket(str, Enum):
    """Relative-time categories; each value is the key of its pattern."""

    SECONDS = "seconds_ago"
    MINUTES = "minutes_ago"
    TODAY = "today"
    YESTERDAY = "yesterday"
    DATED = "dated"


DEFAULT_VERBS: dict[str, str] = {
    EventType.CREATED.value: "Created",
    EventType.CHANGED.value: "Changed",
    EventType.VIEWED.value: "Viewed",
    EventType.EXPORTED.value: "Exported",
    EventType.SYNCED.value: "Synced",
}

# Positional arguments: {0} verb, {1} minute count or entry datetime.
DEFAULT_PATTERNS: dict[str, str] = {
    Bucket.SECONDS.value: "{0} less than a minute ago",
    Bucket.MINUTES.value: "{0} {1} minutes ago",
    Bucket.TODAY.value: "{0} today at {1:%H:%M}",
    Bucket.YESTERDAY.value: "{0} yesterday at {1:%H:%M}",
    Bucket.DATED.value: "{0} on {1:%Y-%m-%d} at {1:%H:%M}",
}

DEFAULT_TITLE = "Access log for {0}"

_SAMPLE_TIME = datetime.datetime(2000, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)


class TemplateTable:
    """Verbs and patterns for one locale.

    Args:
        verbs: Event type value -> display verb.
        patterns: Bucket key -> positional format pattern.
        title: Pattern for the view title, given the secret description.
    """

    def __init__(
        self,
        verbs: dict[str, str] | None = None,
        patterns: dict[str, str] | None = None,
        title: str = DEFAULT_TITLE,
    ) -> None:
        self.verbs = dict(DEFAULT_VERBS)
        self.verbs.update(verbs or {})
        self.patterns = dict(DEFAULT_PATTERNS)
        self.patterns.update(patterns or {})
        self.title_pattern = title
        self.validate()

    def verb(self, event_type: EventType | str) -> str:
        """Return the display verb for event_type, or "?" if it is unknown."""
        if not isinstance(event_type, EventType):
            return UNKNOWN_VERB
        return self.verbs.get(event_type.value, UNKNOWN_VERB)

    def pattern(self, bucket: Bucket) -> str:
        return self.patterns[bucket.value]

    def title(self, description: str) -> str:
        return self.title_pattern.format(description)

    def validate(self) -> None:
        """Trial-format every pattern with sample arguments.

        Raises:
            TemplateError: If a value is not a string or a pattern does not
                format with the arguments its bucket supplies.
        """
        for name, value in list(self.verbs.items()) + list(self.patterns.items()):
            if not isinstance(value, str):
                raise TemplateError(f"Template '{name}' must be a string")
        if not isinstance(self.title_pattern, str):
            raise TemplateError("Template 'title' must be a string")

        # Every verb the table can hand out, including the placeholder
        verbs = sorted(set(self.verbs.values())) + [UNKNOWN_VERB]
        for verb in verbs:
            samples = {
                Bucket.SECONDS: (verb,),
                Bucket.MINUTES: (verb, 5),
                Bucket.TODAY: (verb, _SAMPLE_TIME),
                Bucket.YESTERDAY: (verb, _SAMPLE_TIME),
                Bucket.DATED: (verb, _SAMPLE_TIME),
            }
            for bucket, args in samples.items():
                _trial_format(bucket.value, self.pattern(bucket), args)
        for description in ("", "secret"):
            _trial_format("title", self.title_pattern, (description,))


def _trial_format(name: str, pattern: str, args: tuple) -> None:
    try:
        pattern.format(*args)
    except (IndexError, KeyError, ValueError, TypeError) as e:
        raise TemplateError(f"Template '{name}' is invalid: {e}")


def load_templates(templates_file: str) -> TemplateTable:
    """Load a template table from a JSON file.

    The file is an object with optional "verbs", "patterns" and "title"
    members. Anything it leaves out falls back to the built-in English text.

    Args:
        templates_file: Path to the JSON template file.

    Returns:
        The validated TemplateTable.

    Raises:
        TemplateError: If the file is missing or unreadable, is not valid
            JSON, or holds invalid templates.
    """
    if not Path(templates_file).exists():
        raise TemplateError(f"Template file not found at {templates_file}")
    try:
        with open(templates_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Template file {templates_file} is not valid JSON: {e}")
    except (UnicodeDecodeError, OSError) as e:
        raise TemplateError(f"Template file {templates_file} cannot be read: {e}")

    if not isinstance(data, dict):
        raise TemplateError(f"Template file {templates_file} must hold a JSON object")
    for section in ("verbs", "patterns"):
        if not isinstance(data.get(section, {}), dict):
            raise TemplateError(f"Template section '{section}' must be an object")

    logger.debug("Loaded templates from %s", templates_file)
    return TemplateTable(
        verbs=data.get("verbs"),
        patterns=data.get("patterns"),
        title=data.get("title", DEFAULT_TITLE),
    )
