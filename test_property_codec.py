"""Tests for decoding remote property values and records."""

import logging

import pytest

from notion_orm.execution import PropertyValueCodec, ResultFormatter


@pytest.fixture
def codec():
    return PropertyValueCodec()


@pytest.mark.parametrize(
    "prop, expected",
    [
        ({"type": "title", "title": [{"plain_text": "Write tests"}, {"plain_text": " twice"}]}, "Write tests"),
        ({"type": "title", "title": []}, ""),
        ({"type": "rich_text", "rich_text": [{"plain_text": "notes"}]}, "notes"),
        ({"type": "number", "number": 4.5}, 4.5),
        ({"type": "number", "number": None}, 0),
        ({"type": "select", "select": {"name": "Open"}}, "Open"),
        ({"type": "select", "select": None}, ""),
        ({"type": "multi_select", "multi_select": [{"name": "a"}, {"name": "b"}]}, ["a", "b"]),
        ({"type": "multi_select", "multi_select": []}, []),
        ({"type": "date", "date": {"start": "2024-01-31", "end": None}}, "2024-01-31"),
        ({"type": "date", "date": None}, None),
        ({"type": "checkbox", "checkbox": True}, True),
        ({"type": "checkbox"}, False),
        ({"type": "relation", "relation": [{"id": "p1"}, {"id": "p2"}]}, [{"id": "p1"}, {"id": "p2"}]),
        ({"type": "url", "url": "https://example.com"}, "https://example.com"),
        ({"type": "email", "email": None}, ""),
        ({"type": "phone_number", "phone_number": "+1 555"}, "+1 555"),
    ],
)
def test_decode(codec, prop, expected):
    assert codec.decode(prop) == expected


def test_decode_people(codec):
    prop = {
        "type": "people",
        "people": [
            {"id": "u1", "name": "Ada", "avatar_url": "https://img/ada.png"},
            {"id": "u2", "name": None},
        ],
    }
    assert codec.decode(prop) == [
        {"id": "u1", "name": "Ada", "avatar_url": "https://img/ada.png"},
        {"id": "u2", "name": ""},
    ]


@pytest.mark.parametrize(
    "formula, expected",
    [
        ({"type": "string", "string": "ok"}, "ok"),
        ({"type": "number", "number": 3.0}, "3"),
        ({"type": "number", "number": 2.5}, "2.5"),
        ({"type": "boolean", "boolean": True}, ""),
    ],
)
def test_decode_formula(codec, formula, expected):
    assert codec.decode({"type": "formula", "formula": formula}) == expected


def test_decode_files(codec):
    prop = {
        "type": "files",
        "files": [
            {"name": "brief.pdf", "type": "file", "file": {"url": "https://files/brief.pdf"}},
            {"name": "link", "type": "external", "external": {"url": "https://example.com/x"}},
        ],
    }
    assert codec.decode(prop) == [
        {"name": "brief.pdf", "url": "https://files/brief.pdf"},
        {"name": "link", "url": "https://example.com/x"},
    ]


def test_unknown_type_warns_and_decodes_to_empty_string(codec, caplog):
    with caplog.at_level(logging.WARNING):
        assert codec.decode({"type": "rollup", "rollup": {"number": 3}}) == ""
    assert "Unsupported Notion property type: rollup" in caplog.text


def test_missing_property_decodes_to_none(codec):
    assert codec.decode(None) is None
    assert codec.decode({}) is None


def test_format_record():
    record = {
        "id": "page-1",
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
        "properties": {
            "Name": {"type": "title", "title": [{"plain_text": "Task one"}]},
            "Done": {"type": "checkbox", "checkbox": True},
        },
    }

    assert ResultFormatter().format_record(record) == {
        "id": "page-1",
        "Name": "Task one",
        "Done": True,
        "createdTime": "2024-01-01T00:00:00.000Z",
        "lastEditedTime": "2024-01-02T00:00:00.000Z",
    }
