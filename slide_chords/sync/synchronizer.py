from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator, Mapping

from slide_chords.chords.codec import clamp_annotations, decode, encode, is_chord_name
from slide_chords.chords.model import ChordAnnotation
from slide_chords.chords.transpose import transpose_text
from slide_chords.errors import Busy, PersistenceFailure
from slide_chords.rtf.normalize import normalize
from slide_chords.rtf.offsets import OffsetMapper, scale_offset
from slide_chords.store.base import DocumentStore
from slide_chords.store.types import Slide, SlideKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadedSlide:
    slide: Slide
    plain_text: str
    mapper: OffsetMapper
    annotations: tuple[ChordAnnotation, ...]  # plain-text offsets
    annotated_text: str
    # stored chords that cannot be written as [name] tokens; rich offsets, saved back untouched
    held: tuple[ChordAnnotation, ...] = ()

    @property
    def key(self) -> SlideKey:
        return self.slide.key


@dataclass(frozen=True, slots=True)
class SlideUpdate:
    key: SlideKey
    plain_text: str
    annotations: tuple[ChordAnnotation, ...]  # rich-text offsets
    approximate: bool = False


@dataclass(frozen=True, slots=True)
class SaveReport:
    document_id: str
    updates: tuple[SlideUpdate, ...]

    @property
    def approximate(self) -> tuple[SlideKey, ...]:
        return tuple(u.key for u in self.updates if u.approximate)


@dataclass(slots=True)
class Session:
    """One open document. Owned by the caller, never shared between documents."""

    document_id: str
    store: DocumentStore
    slides: dict[SlideKey, LoadedSlide] = field(default_factory=dict)
    _save_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def saving(self) -> bool:
        return self._save_lock.locked()

    @contextmanager
    def exclusive_save(self) -> Iterator[None]:
        if not self._save_lock.acquire(blocking=False):
            raise Busy(f"A save for {self.document_id} is already in progress")
        try:
            yield
        finally:
            self._save_lock.release()

    def annotated_texts(self) -> dict[SlideKey, str]:
        return {key: loaded.annotated_text for key, loaded in self.slides.items()}


def _with_held(loaded: LoadedSlide, mapped: tuple[ChordAnnotation, ...]) -> tuple[ChordAnnotation, ...]:
    if not loaded.held:
        return mapped
    return tuple(sorted((*loaded.held, *mapped), key=lambda a: a.offset))


class DocumentSynchronizer:
    def __init__(self, *, debug_slides: int = 0):
        self.debug_slides = debug_slides

    def load_slide(self, slide: Slide, *, debug: bool = False) -> LoadedSlide:
        """
        Rich text -> plain text + offset table; stored chords -> plain offsets ->
        bracketed text for editing. MalformedDocument propagates.
        """
        normalized = normalize(slide.rich_text)
        mapper = OffsetMapper(normalized.table)

        editable: list[ChordAnnotation] = []
        held: list[ChordAnnotation] = []
        for a in slide.annotations:
            if is_chord_name(a.name):
                editable.append(a)
            else:
                logger.warning(
                    "Slide %s: chord %r cannot be edited inline; kept as stored",
                    slide.key.display,
                    a.name,
                )
                held.append(a)

        plain = mapper.annotations_to_plain(editable)
        plain = clamp_annotations(plain, len(normalized.plain_text))
        annotated = encode(normalized.plain_text, plain)

        if debug:
            logger.debug("Slide %s raw RTF: %s", slide.key.display, slide.rich_text)
            logger.debug("Slide %s plain text: %r", slide.key.display, normalized.plain_text)
            for a in slide.annotations:
                snapped = "" if mapper.is_exact_rich(a.offset) else " (inside markup, snapped)"
                logger.debug("  chord %r at rich offset %d%s", a.name, a.offset, snapped)

        return LoadedSlide(
            slide=slide,
            plain_text=normalized.plain_text,
            mapper=mapper,
            annotations=plain,
            annotated_text=annotated,
            held=tuple(held),
        )

    def save_slide(self, loaded: LoadedSlide, edited_text: str) -> SlideUpdate:
        """Bracketed text -> chords in rich-text offsets, ready for the store."""
        new_plain, chords = decode(edited_text)

        if new_plain == loaded.plain_text:
            return SlideUpdate(
                key=loaded.key,
                plain_text=new_plain,
                annotations=_with_held(loaded, loaded.mapper.annotations_to_rich(chords)),
            )

        # lyrics changed: the load-time table no longer lines up with the new
        # text, so carry each chord over by its relative position instead
        old_len, new_len = len(loaded.plain_text), len(new_plain)
        scaled = tuple(c.moved(scale_offset(c.offset, old_len, new_len)) for c in chords)
        logger.warning(
            "Lyrics of %s were edited (%d -> %d chars); chord placement is approximate",
            loaded.key.display,
            old_len,
            new_len,
        )
        return SlideUpdate(
            key=loaded.key,
            plain_text=new_plain,
            annotations=_with_held(loaded, loaded.mapper.annotations_to_rich(scaled)),
            approximate=True,
        )

    def load(self, session: Session) -> list[LoadedSlide]:
        slides = session.store.slides(session.document_id)
        loaded: list[LoadedSlide] = []
        with_chords = 0
        for slide in slides:
            item = self.load_slide(slide, debug=len(loaded) < self.debug_slides)
            if not item.plain_text:
                logger.debug("Skipping %s: no lyric text", slide.key.display)
                continue
            loaded.append(item)
            if item.annotations:
                with_chords += 1

        session.slides = {item.key: item for item in loaded}
        logger.info(
            "Loaded %s: %d slides with lyrics, %d with chords",
            session.document_id,
            len(loaded),
            with_chords,
        )
        return loaded

    def transpose(self, session: Session, interval: int) -> dict[SlideKey, str]:
        return {key: transpose_text(text, interval) for key, text in session.annotated_texts().items()}

    def save(self, session: Session, edits: Mapping[SlideKey, str]) -> SaveReport:
        """
        Replace the chord sets of the edited slides in one store call.

        Raises Busy if a save on this session is already running and
        PersistenceFailure if the store rejects the update; in both cases
        the session keeps its previous state.
        """
        with session.exclusive_save():
            unknown = [k for k in edits if k not in session.slides]
            if unknown:
                raise KeyError(f"Slide {unknown[0].display} was not loaded in this session")

            updates = tuple(self.save_slide(session.slides[key], text) for key, text in edits.items())
            for u in updates:
                logger.info(
                    "Slide %s: %d chord(s)%s",
                    u.key.display,
                    len(u.annotations),
                    " (approximate)" if u.approximate else "",
                )

            try:
                session.store.replace_annotations(
                    session.document_id,
                    {u.key: u.annotations for u in updates},
                )
            except Exception as e:
                raise PersistenceFailure(f"Saving {session.document_id} failed: {e}") from e

            refreshed = dict(session.slides)
            for u in updates:
                slide = replace(refreshed[u.key].slide, annotations=u.annotations)
                refreshed[u.key] = self.load_slide(slide)
            session.slides = refreshed

            logger.info("Saved %d slide(s) of %s", len(updates), session.document_id)
            return SaveReport(document_id=session.document_id, updates=updates)
