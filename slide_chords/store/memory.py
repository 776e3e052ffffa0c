from __future__ import annotations

import logging
from typing import Mapping

from slide_chords.chords.model import ChordAnnotation

from .base import DocumentStore
from .tree import Presentation, iter_slides, with_annotations
from .types import Slide, SlideKey

logger = logging.getLogger(__name__)


class PresentationStore(DocumentStore):
    """Presentations held in memory; an update swaps in a fully rebuilt tree."""

    name = "memory"

    def __init__(self, documents: Mapping[str, Presentation] | None = None):
        self._documents: dict[str, Presentation] = dict(documents or {})

    def get(self, document_id: str) -> Presentation:
        try:
            return self._documents[document_id]
        except KeyError:
            raise KeyError(f"Unknown document {document_id!r}") from None

    def slides(self, document_id: str) -> list[Slide]:
        return list(iter_slides(self.get(document_id)))

    def replace_annotations(
        self,
        document_id: str,
        updates: Mapping[SlideKey, tuple[ChordAnnotation, ...]],
    ) -> None:
        updated = with_annotations(self.get(document_id), updates)
        self._documents[document_id] = updated
        logger.debug("Replaced chords on %d slide(s) of %s", len(updates), document_id)
