from __future__ import annotations

from typing import Mapping

from slide_chords.chords.model import ChordAnnotation

from .types import Slide, SlideKey


class DocumentStore:
    """
    Where slides come from and where replacement chord sets go.

    ``replace_annotations`` applies every update or none of them.
    """

    name: str

    def slides(self, document_id: str) -> list[Slide]:
        raise NotImplementedError

    def replace_annotations(
        self,
        document_id: str,
        updates: Mapping[SlideKey, tuple[ChordAnnotation, ...]],
    ) -> None:
        raise NotImplementedError
