from __future__ import annotations

import json

import pytest

from slide_chords.chords.export import export_chordpro, export_json, parse_export_json
from slide_chords.store.types import SlideKey

TEXTS = {
    SlideKey("Verse 1", 1): "[G]Amazing [C]grace",
    SlideKey("", 1): "how sweet",
}


def test_export_json_shape():
    data = json.loads(export_json("sunday", TEXTS))
    assert data["document"] == "sunday"
    assert data["slides"][0] == {"section": "Verse 1", "index": 1, "text": "[G]Amazing [C]grace"}


def test_parse_export_json_reads_back_edits():
    doc, edits = parse_export_json(export_json("sunday", TEXTS))
    assert doc == "sunday"
    assert edits == TEXTS


@pytest.mark.parametrize(
    "payload",
    [
        "[]",
        '{"slides": {}}',
        '{"slides": [{"section": "V"}]}',
        '{"slides": [{"section": "V", "index": "one", "text": "x"}]}',
        '{"slides": [{"section": "V", "index": 1, "text": 5}]}',
        "not json",
    ],
)
def test_parse_export_json_rejects(payload):
    with pytest.raises(ValueError):
        parse_export_json(payload)


def test_export_chordpro():
    assert export_chordpro("sunday", TEXTS) == (
        "{title: sunday}\n"
        "\n"
        "{comment: Verse 1 1}\n"
        "[G]Amazing [C]grace\n"
        "\n"
        "{comment: Unnamed 1}\n"
        "how sweet\n"
    )
