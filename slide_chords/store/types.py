from __future__ import annotations

from dataclasses import dataclass, field

from slide_chords.chords.model import ChordAnnotation


@dataclass(frozen=True, slots=True, order=True)
class SlideKey:
    section_name: str
    slide_index: int

    @property
    def display(self) -> str:
        return f"{self.section_name or 'Unnamed'} {self.slide_index}"


@dataclass(frozen=True, slots=True)
class Slide:
    """A slide's lyric field as exchanged with a document store.

    ``annotations`` carry rich-text offsets. ``plain_text`` is whatever the store
    already knows about the lyrics; the synchronizer always recomputes it.
    """

    section_name: str
    slide_index: int
    rich_text: str
    annotations: tuple[ChordAnnotation, ...] = ()
    plain_text: str = field(default="", compare=False)

    @property
    def key(self) -> SlideKey:
        return SlideKey(section_name=self.section_name, slide_index=self.slide_index)
