from __future__ import annotations

import pytest

from slide_chords.chords.model import ChordAnnotation
from slide_chords.rtf.offsets import OffsetMapper, OffsetTable, scale_offset, to_plain, to_rich

TABLE = OffsetTable.from_anchors([(5, 0), (6, 1), (10, 2), (12, 3)])


@pytest.mark.parametrize(
    "rich, plain",
    [
        (5, 0),
        (6, 1),
        (10, 2),
        (12, 3),
        (8, 1),  # inside removed markup: preceding anchor
        (11, 2),
        (0, 0),  # before the first anchor
        (-3, 0),
        (100, 3),  # past the terminal anchor
    ],
)
def test_to_plain(rich, plain):
    assert to_plain(rich, TABLE) == plain


@pytest.mark.parametrize("plain, rich", [(0, 5), (1, 6), (2, 10), (3, 12), (-1, 5), (7, 12)])
def test_to_rich(plain, rich):
    assert to_rich(plain, TABLE) == rich


def test_build_numbers_plain_column():
    table = OffsetTable.build([3, 4, 9], 11)
    assert list((a.rich, a.plain) for a in table) == [(3, 0), (4, 1), (9, 2), (11, 3)]
    assert table.rich_length == 11
    assert table.plain_length == 3


@pytest.mark.parametrize(
    "anchors",
    [
        [],
        [(1, 0), (1, 1)],
        [(1, 0), (2, 0)],
        [(5, 0), (4, 1)],
    ],
)
def test_table_rejects_non_increasing_anchors(anchors):
    with pytest.raises(ValueError):
        OffsetTable.from_anchors(anchors)


@pytest.mark.parametrize(
    "offset, old_len, new_len, expected",
    [
        (5, 10, 20, 3),  # 2.5 rounds up
        (20, 10, 20, 10),
        (0, 10, 20, 0),
        (8, 13, 15, 7),
        (30, 10, 20, 10),  # clamped to the old text
        (3, 10, 0, 0),
        (3, 0, 10, 0),
    ],
)
def test_scale_offset(offset, old_len, new_len, expected):
    assert scale_offset(offset, old_len, new_len) == expected


def test_mapper_converts_annotation_lists():
    mapper = OffsetMapper(TABLE)
    rich = (ChordAnnotation("G", 11), ChordAnnotation("C", 5))
    assert mapper.annotations_to_plain(rich) == (ChordAnnotation("C", 0), ChordAnnotation("G", 2))
    plain = (ChordAnnotation("C", 0), ChordAnnotation("G", 2))
    assert mapper.annotations_to_rich(plain) == (ChordAnnotation("C", 5), ChordAnnotation("G", 10))


def test_mapper_exact_anchor_check():
    mapper = OffsetMapper(TABLE)
    assert mapper.is_exact_rich(10)
    assert not mapper.is_exact_rich(11)
    assert not mapper.is_exact_rich(0)
