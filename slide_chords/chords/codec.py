from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from slide_chords.errors import InvalidOffset

from .model import ChordAnnotation, DecodeStats

logger = logging.getLogger(__name__)

# [G], [Am7], [F#m7b5], [Bb/D] ... brackets never nest
CHORD_TOKEN_RE = re.compile(r"\[([A-G][#b]?[^\[\]]*)\]")
_CHORD_NAME_RE = re.compile(r"[A-G][#b]?[^\[\]]*")


def is_chord_name(name: str) -> bool:
    return _CHORD_NAME_RE.fullmatch(name) is not None


def clamp_annotations(annotations: Iterable[ChordAnnotation], length: int) -> tuple[ChordAnnotation, ...]:
    """Pull offsets into [0, length] and sort; each adjustment is logged."""
    out: list[ChordAnnotation] = []
    for a in annotations:
        offset = min(max(a.offset, 0), max(length, 0))
        if offset != a.offset:
            logger.warning("Chord %r at offset %d clamped to %d", a.name, a.offset, offset)
            a = a.moved(offset)
        out.append(a)
    out.sort(key=lambda a: a.offset)
    return tuple(out)


def encode(plain_text: str, annotations: Sequence[ChordAnnotation]) -> str:
    """
    Render annotations inline as ``[name]`` tokens.

    Annotations must be sorted by offset and lie within the text, else
    InvalidOffset. Names are written verbatim.
    """
    prev = 0
    for a in annotations:
        if not (0 <= a.offset <= len(plain_text)):
            raise InvalidOffset(f"Chord {a.name!r} offset {a.offset} outside [0, {len(plain_text)}]")
        if a.offset < prev:
            raise InvalidOffset(f"Chord {a.name!r} offset {a.offset} out of order")
        prev = a.offset
        if not is_chord_name(a.name):
            logger.debug("Chord name %r will not be recognized when decoding", a.name)

    # highest offset first, so earlier insertion points stay valid
    out = plain_text
    for a in reversed(annotations):
        out = f"{out[: a.offset]}[{a.name}]{out[a.offset :]}"
    return out


def decode_with_stats(text: str) -> tuple[str, tuple[ChordAnnotation, ...], DecodeStats]:
    parts: list[str] = []
    annotations: list[ChordAnnotation] = []
    plain_len = 0
    pos = 0

    for m in CHORD_TOKEN_RE.finditer(text):
        chunk = text[pos : m.start()]
        parts.append(chunk)
        plain_len += len(chunk)
        annotations.append(ChordAnnotation(name=m.group(1), offset=plain_len))
        pos = m.end()
    tail = text[pos:]
    parts.append(tail)

    plain_text = "".join(parts)
    literal = plain_text.count("[")
    if literal:
        logger.debug("%d bracket(s) kept as literal lyric text", literal)
    stats = DecodeStats(tokens=len(annotations), literal_brackets=literal)
    return plain_text, tuple(annotations), stats


def decode(text: str) -> tuple[str, tuple[ChordAnnotation, ...]]:
    """
    Strip chord tokens, returning the plain text and the chords with offsets
    into that plain text. Bracket runs that are not chord tokens stay as text.
    """
    plain_text, annotations, _stats = decode_with_stats(text)
    return plain_text, annotations
