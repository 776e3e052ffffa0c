"""
Presentation object graph: groups reference cues, cues hold actions, slide
actions hold elements. Only text elements carry lyrics and chords.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Mapping, Union

from slide_chords.chords.model import ChordAnnotation
from slide_chords.rtf.normalize import as_text

from .types import Slide, SlideKey


@dataclass(frozen=True, slots=True)
class TextElement:
    rtf_data: str | bytes
    annotations: tuple[ChordAnnotation, ...] = ()


@dataclass(frozen=True, slots=True)
class ShapeElement:
    name: str = ""


@dataclass(frozen=True, slots=True)
class SlideAction:
    elements: tuple["Element", ...] = ()


@dataclass(frozen=True, slots=True)
class MediaAction:
    path: str = ""


@dataclass(frozen=True, slots=True)
class Cue:
    uuid: str
    actions: tuple["Action", ...] = ()


@dataclass(frozen=True, slots=True)
class CueGroup:
    name: str
    cue_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Presentation:
    name: str
    cue_groups: tuple[CueGroup, ...] = ()
    cues: tuple[Cue, ...] = ()


Element = Union[TextElement, ShapeElement]
Action = Union[SlideAction, MediaAction]


@dataclass(frozen=True, slots=True)
class _TextPath:
    key: SlideKey
    cue_uuid: str
    action_pos: int
    element_pos: int
    element: TextElement


def _first_text(elements: tuple[Element, ...]) -> tuple[int, TextElement] | None:
    for pos, element in enumerate(elements):
        match element:
            case TextElement():
                return pos, element
            case ShapeElement():
                continue
            case _:
                raise TypeError(f"Unknown slide element: {element!r}")
    return None


def _walk(presentation: Presentation) -> Iterator[_TextPath]:
    cues = {cue.uuid: cue for cue in presentation.cues}
    for group in presentation.cue_groups:
        if not group.name:
            continue
        slide_index = 1
        for cue_id in group.cue_ids:
            cue = cues.get(cue_id)
            if cue is None:
                continue
            for action_pos, action in enumerate(cue.actions):
                match action:
                    case SlideAction(elements=elements):
                        found = _first_text(elements)
                        if found is None:
                            continue
                        element_pos, element = found
                        key = SlideKey(section_name=group.name, slide_index=slide_index)
                        yield _TextPath(key, cue.uuid, action_pos, element_pos, element)
                        slide_index += 1
                    case MediaAction():
                        continue
                    case _:
                        raise TypeError(f"Unknown cue action: {action!r}")


def iter_slides(presentation: Presentation) -> Iterator[Slide]:
    """Text-bearing slides in group order, numbered from 1 within each group."""
    for path in _walk(presentation):
        yield Slide(
            section_name=path.key.section_name,
            slide_index=path.key.slide_index,
            rich_text=as_text(path.element.rtf_data),
            annotations=path.element.annotations,
        )


def with_annotations(
    presentation: Presentation,
    updates: Mapping[SlideKey, tuple[ChordAnnotation, ...]],
) -> Presentation:
    """Copy of the tree with the chord sets of the given slides replaced."""
    targets: dict[tuple[str, int, int], tuple[ChordAnnotation, ...]] = {}
    seen: set[SlideKey] = set()
    for path in _walk(presentation):
        if path.key in updates:
            targets[(path.cue_uuid, path.action_pos, path.element_pos)] = tuple(updates[path.key])
            seen.add(path.key)

    missing = [k for k in updates if k not in seen]
    if missing:
        raise KeyError(f"No slide {missing[0].display} in {presentation.name!r}")

    cues: list[Cue] = []
    for cue in presentation.cues:
        actions: list[Action] = []
        for action_pos, action in enumerate(cue.actions):
            match action:
                case SlideAction(elements=elements):
                    new_elements = tuple(
                        replace(element, annotations=targets[(cue.uuid, action_pos, element_pos)])
                        if (cue.uuid, action_pos, element_pos) in targets
                        else element
                        for element_pos, element in enumerate(elements)
                    )
                    actions.append(replace(action, elements=new_elements))
                case MediaAction():
                    actions.append(action)
                case _:
                    raise TypeError(f"Unknown cue action: {action!r}")
        cues.append(replace(cue, actions=tuple(actions)))
    return replace(presentation, cues=tuple(cues))
