import json

import pytest

from access_log import EventType
from templates import UNKNOWN_VERB, Bucket, TemplateError, TemplateTable, load_templates


def test_defaults_cover_every_event_and_bucket():
    table = TemplateTable()
    for event_type in EventType:
        assert table.verb(event_type) != UNKNOWN_VERB
    for bucket in Bucket:
        assert table.pattern(bucket)


def test_unknown_verb():
    assert TemplateTable().verb("archived") == "?"


def test_load_merges_over_defaults(tmp_path):
    path = tmp_path / "fr.json"
    path.write_text(json.dumps({
        "verbs": {"viewed": "Consulté"},
        "patterns": {"seconds_ago": "{0} il y a moins d'une minute"},
        "title": "Journal d'accès de {0}",
    }), encoding="utf-8")
    table = load_templates(str(path))
    assert table.verb(EventType.VIEWED) == "Consulté"
    assert table.verb(EventType.CREATED) == "Created"
    assert table.pattern(Bucket.SECONDS) == "{0} il y a moins d'une minute"
    assert table.title("banque") == "Journal d'accès de banque"


def test_missing_file(tmp_path):
    with pytest.raises(TemplateError, match="not found"):
        load_templates(str(tmp_path / "missing.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(TemplateError, match="not valid JSON"):
        load_templates(str(path))


@pytest.mark.parametrize(
    "patterns",
    [
        {"seconds_ago": "{0} {1} seconds ago"},
        {"minutes_ago": "{0} at {1:%H:%M}"},
        {"today": "{0} {2}"},
        {"dated": "{verb}"},
        {"yesterday": 5},
    ],
)
def test_invalid_patterns_rejected(patterns):
    with pytest.raises(TemplateError):
        TemplateTable(patterns=patterns)


def test_section_must_be_object(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"verbs": ["Viewed"]}), encoding="utf-8")
    with pytest.raises(TemplateError, match="verbs"):
        load_templates(str(path))


@pytest.mark.parametrize(
    "patterns",
    [
        {"seconds_ago": "{0[2]} x"},
        {"today": "{0[3]} at {1:%H:%M}"},
    ],
)
def test_patterns_must_format_with_placeholder_verb(patterns):
    # "{0[2]}" works for every default verb but not for "?"
    with pytest.raises(TemplateError):
        TemplateTable(patterns=patterns)


def test_patterns_must_format_with_every_configured_verb():
    with pytest.raises(TemplateError):
        TemplateTable(
            verbs={"synced": "Sy"},
            patterns={"minutes_ago": "{0[1]}{0[2]} {1} min"},
        )


def test_title_must_format_with_empty_description():
    with pytest.raises(TemplateError):
        TemplateTable(title="Log {0[0]}")


def test_non_utf8_file(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes('{"verbs": {"viewed": "Consulté"}}'.encode("latin-1"))
    with pytest.raises(TemplateError, match="cannot be read"):
        load_templates(str(path))


def test_directory_path(tmp_path):
    with pytest.raises(TemplateError, match="cannot be read"):
        load_templates(str(tmp_path))
