from __future__ import annotations

import pytest

from slide_chords.chords.codec import clamp_annotations, decode, decode_with_stats, encode, is_chord_name
from slide_chords.chords.model import ChordAnnotation as C
from slide_chords.errors import InvalidOffset


def test_encode_decode_amazing_grace():
    chords = (C("C", 0), C("G", 8))
    text = encode("Amazing grace", chords)
    assert text == "[C]Amazing [G]grace"
    assert decode(text) == ("Amazing grace", chords)


def test_unclosed_bracket_stays_literal():
    assert decode("Some [X lyric") == ("Some [X lyric", ())


@pytest.mark.parametrize(
    "text, plain, chords",
    [
        ("[]empty", "[]empty", ()),
        ("[x]lower", "[x]lower", ()),
        ("(Chorus) [2x]", "(Chorus) [2x]", ()),
        ("[Bb/D]la", "la", (C("Bb/D", 0),)),
        ("[F#m7b5]la[E7sus4]", "la", (C("F#m7b5", 0), C("E7sus4", 2))),
        ("x [A[G]y", "x [Ay", (C("G", 4),)),
        ("[C][G]both", "both", (C("C", 0), C("G", 0))),
    ],
)
def test_decode_grammar(text, plain, chords):
    assert decode(text) == (plain, chords)


@pytest.mark.parametrize(
    "plain, chords",
    [
        ("", ()),
        ("", (C("C", 0),)),
        ("Amazing grace", ()),
        ("Amazing grace", (C("D", 13),)),
        ("How sweet the sound", (C("G", 0), C("G7", 4), C("C", 4), C("G", 14))),
        ("a [bracket", (C("Am", 2), C("E", 3))),
        ("x [A", (C("G", 4),)),
        ("We’re reaching out", (C("Db", 0), C("Ebm7", 6))),
        ("line one\nline two", (C("A", 0), C("E", 9))),
    ],
)
def test_round_trip(plain, chords):
    assert decode(encode(plain, chords)) == (plain, chords)


def test_decode_stats():
    plain, chords, stats = decode_with_stats("[G]Some [X lyric [D]here")
    assert plain == "Some [X lyric here"
    assert [c.name for c in chords] == ["G", "D"]
    assert stats.tokens == 2
    assert stats.literal_brackets == 1


@pytest.mark.parametrize(
    "chords",
    [
        (C("C", -1),),
        (C("C", 14),),
        (C("G", 8), C("C", 0)),
    ],
)
def test_encode_rejects_bad_offsets(chords):
    with pytest.raises(InvalidOffset):
        encode("Amazing grace", chords)


def test_clamp_annotations_pulls_into_range_and_sorts():
    out = clamp_annotations((C("G", 40), C("C", -2), C("D", 3)), 13)
    assert out == (C("C", 0), C("D", 3), C("G", 13))


@pytest.mark.parametrize("name, ok", [("C", True), ("F#m7", True), ("Bb/D", True), ("H7", False), ("", False), ("c", False)])
def test_is_chord_name(name, ok):
    assert is_chord_name(name) is ok
