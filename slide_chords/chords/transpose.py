from __future__ import annotations

import logging
from dataclasses import dataclass

from .codec import CHORD_TOKEN_RE

logger = logging.getLogger(__name__)

CHROMATIC_SCALE: tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

_FLAT_TO_SHARP = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}


@dataclass(frozen=True, slots=True)
class TransposeStats:
    transposed: int
    unrecognized: tuple[str, ...]


def normalize_root(note: str) -> str:
    return _FLAT_TO_SHARP.get(note, note)


def split_chord(token: str) -> tuple[str, str]:
    # "F#m7" -> ("F#", "m7"), "Am" -> ("A", "m")
    if len(token) >= 2 and token[1] in "#b":
        return token[:2], token[2:]
    return token[:1], token[1:]


def interval_between(from_key: str, to_key: str) -> int:
    """Semitones in [0, 12) taking ``from_key`` to ``to_key``."""
    try:
        src = CHROMATIC_SCALE.index(normalize_root(from_key))
        dst = CHROMATIC_SCALE.index(normalize_root(to_key))
    except ValueError as e:
        raise ValueError(f"Unknown key: {from_key!r} -> {to_key!r}") from e
    return (dst - src) % 12


def _transpose(token: str, interval: int) -> str | None:
    root, suffix = split_chord(token)
    try:
        idx = CHROMATIC_SCALE.index(normalize_root(root))
    except ValueError:
        return None
    return CHROMATIC_SCALE[(idx + interval) % 12] + suffix


def transpose_chord(token: str, interval: int) -> str:
    """
    Move the chord root by ``interval`` semitones, keeping the suffix as is.

    Flat roots come back spelled with sharps. Unknown roots (Cb, E#, ...) are
    returned unchanged.
    """
    if not token or interval % 12 == 0:
        return token
    out = _transpose(token, interval)
    if out is None:
        logger.debug("Unrecognized chord root in %r, left unchanged", token)
        return token
    return out


def transpose_text_with_stats(text: str, interval: int) -> tuple[str, TransposeStats]:
    if not text or interval % 12 == 0:
        return text, TransposeStats(transposed=0, unrecognized=())

    transposed = 0
    unrecognized: list[str] = []

    def _sub(m) -> str:
        nonlocal transposed
        chord = m.group(1)
        out = _transpose(chord, interval)
        if out is None:
            unrecognized.append(chord)
            return m.group(0)
        transposed += 1
        return f"[{out}]"

    out = CHORD_TOKEN_RE.sub(_sub, text)
    if unrecognized:
        logger.debug("Left %d unrecognized chord(s) unchanged: %s", len(unrecognized), ", ".join(unrecognized))
    return out, TransposeStats(transposed=transposed, unrecognized=tuple(unrecognized))


def transpose_text(text: str, interval: int) -> str:
    out, _stats = transpose_text_with_stats(text, interval)
    return out
