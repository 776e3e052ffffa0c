from __future__ import annotations

import json
from typing import Mapping

from slide_chords.store.types import SlideKey


def export_json(document_id: str, texts: Mapping[SlideKey, str]) -> str:
    return json.dumps(
        {
            "document": document_id,
            "slides": [
                {"section": k.section_name, "index": k.slide_index, "text": t}
                for k, t in texts.items()
            ],
        },
        ensure_ascii=False,
        indent=2,
    )


def parse_export_json(text: str) -> tuple[str | None, dict[SlideKey, str]]:
    """Inverse of export_json. Raises ValueError on anything else."""
    data = json.loads(text)
    if not isinstance(data, dict) or not isinstance(data.get("slides"), list):
        raise ValueError("Expected an object with a 'slides' list")
    out: dict[SlideKey, str] = {}
    for i, item in enumerate(data["slides"]):
        try:
            key = SlideKey(section_name=str(item["section"]), slide_index=int(item["index"]))
            body = item["text"]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed slide entry #{i}") from e
        if not isinstance(body, str):
            raise ValueError(f"Slide entry #{i} has no text")
        out[key] = body
    document = data.get("document")
    return (str(document) if document is not None else None), out


def export_chordpro(document_id: str, texts: Mapping[SlideKey, str]) -> str:
    out: list[str] = [f"{{title: {document_id}}}"]
    for k, t in texts.items():
        out.append("")
        out.append(f"{{comment: {k.display}}}")
        out.append(t)
    return "\n".join(out) + "\n"
