from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from slide_chords.chords.model import ChordAnnotation


@dataclass(frozen=True, slots=True)
class Anchor:
    rich: int
    plain: int


@dataclass(frozen=True, slots=True)
class OffsetTable:
    """
    Parallel columns of anchor coordinates, strictly increasing in both.

    The last anchor is the terminal one: (len(rich_text), len(plain_text)).
    """

    rich: tuple[int, ...]
    plain: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.rich or len(self.rich) != len(self.plain):
            raise ValueError("Offset table needs matching, non-empty columns")
        for prev_r, r, prev_p, p in zip(self.rich, self.rich[1:], self.plain, self.plain[1:]):
            if r <= prev_r or p <= prev_p:
                raise ValueError(f"Anchors not strictly increasing at ({r}, {p})")

    @classmethod
    def build(cls, rich_offsets: Sequence[int], rich_length: int) -> "OffsetTable":
        # one anchor per plain character, then the terminal anchor
        rich = (*rich_offsets, rich_length)
        return cls(rich=tuple(rich), plain=tuple(range(len(rich))))

    @classmethod
    def from_anchors(cls, anchors: Iterable[tuple[int, int]]) -> "OffsetTable":
        pairs = list(anchors)
        return cls(rich=tuple(r for r, _ in pairs), plain=tuple(p for _, p in pairs))

    def __len__(self) -> int:
        return len(self.rich)

    def __iter__(self) -> Iterator[Anchor]:
        for r, p in zip(self.rich, self.plain):
            yield Anchor(rich=r, plain=p)

    @property
    def rich_length(self) -> int:
        return self.rich[-1]

    @property
    def plain_length(self) -> int:
        return self.plain[-1]


def _lookup(keys: tuple[int, ...], values: tuple[int, ...], query: int) -> int:
    # clamp, then greatest anchor whose key <= query
    if query <= keys[0]:
        return values[0]
    if query >= keys[-1]:
        return values[-1]
    return values[bisect_right(keys, query) - 1]


def to_plain(rich_offset: int, table: OffsetTable) -> int:
    return _lookup(table.rich, table.plain, rich_offset)


def to_rich(plain_offset: int, table: OffsetTable) -> int:
    return _lookup(table.plain, table.rich, plain_offset)


def scale_offset(offset: int, old_length: int, new_length: int) -> int:
    """Proportionally carry an offset in text of ``new_length`` over to text of ``old_length``."""
    if new_length <= 0 or old_length <= 0:
        return 0
    # round half up, integer only
    scaled = (2 * offset * old_length + new_length) // (2 * new_length)
    return min(max(scaled, 0), old_length)


def _sorted(annotations: Iterable[ChordAnnotation]) -> tuple[ChordAnnotation, ...]:
    return tuple(sorted(annotations, key=lambda a: a.offset))


@dataclass(frozen=True, slots=True)
class OffsetMapper:
    """Lookups in both directions over one table, O(log n) each."""

    table: OffsetTable

    def to_plain(self, rich_offset: int) -> int:
        return to_plain(rich_offset, self.table)

    def to_rich(self, plain_offset: int) -> int:
        return to_rich(plain_offset, self.table)

    def is_exact_rich(self, rich_offset: int) -> bool:
        i = bisect_right(self.table.rich, rich_offset) - 1
        return i >= 0 and self.table.rich[i] == rich_offset

    def annotations_to_plain(self, annotations: Iterable[ChordAnnotation]) -> tuple[ChordAnnotation, ...]:
        return _sorted(a.moved(self.to_plain(a.offset)) for a in annotations)

    def annotations_to_rich(self, annotations: Iterable[ChordAnnotation]) -> tuple[ChordAnnotation, ...]:
        return _sorted(a.moved(self.to_rich(a.offset)) for a in annotations)
