from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ChordAnnotation:
    name: str
    offset: int

    def moved(self, offset: int) -> "ChordAnnotation":
        return ChordAnnotation(name=self.name, offset=offset)


@dataclass(frozen=True, slots=True)
class DecodeStats:
    tokens: int
    literal_brackets: int
