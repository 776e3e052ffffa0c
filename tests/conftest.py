from __future__ import annotations

import pytest

from slide_chords.chords.model import ChordAnnotation
from slide_chords.store.tree import Cue, CueGroup, MediaAction, Presentation, ShapeElement, SlideAction, TextElement
from tests.fixtures import COCOA_RTF, SIMPLE_BASE, SIMPLE_RTF


@pytest.fixture
def presentation() -> Presentation:
    """
    Verse 1 -> c1 (shape + text), c2 (media, then text)
    ""      -> c3 (skipped: unnamed group)
    Chorus  -> c3, a dangling cue id, c4 (no lyrics)
    """
    chords = (ChordAnnotation("C", SIMPLE_BASE), ChordAnnotation("G", SIMPLE_BASE + 8))
    return Presentation(
        name="Sunday",
        cue_groups=(
            CueGroup("Verse 1", ("c1", "c2")),
            CueGroup("", ("c3",)),
            CueGroup("Chorus", ("c3", "missing", "c4")),
        ),
        cues=(
            Cue("c1", (SlideAction((ShapeElement("background"), TextElement(SIMPLE_RTF, chords))),)),
            Cue("c2", (MediaAction("loop.mp4"), SlideAction((TextElement(COCOA_RTF.encode("utf-8")),)))),
            Cue("c3", (SlideAction((TextElement("{\\rtf1 How sweet the sound}"),)),)),
            Cue("c4", (SlideAction((TextElement("{\\rtf1\\ansi }"),)),)),
        ),
    )
