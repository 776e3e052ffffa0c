from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path
from typing import Mapping

from slide_chords.chords.model import ChordAnnotation

from .base import DocumentStore
from .types import Slide, SlideKey

logger = logging.getLogger(__name__)


class SqliteSlideStore(DocumentStore):
    name = "sqlite"

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(self.db_path)
        con.row_factory = sqlite3.Row
        con.execute("PRAGMA foreign_keys = ON")
        return con

    def _init_db(self) -> None:
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS slides (
                    document_id  TEXT NOT NULL,
                    section_name TEXT NOT NULL,
                    slide_index  INTEGER NOT NULL,
                    position     INTEGER NOT NULL,
                    rich_text    TEXT NOT NULL,
                    plain_text   TEXT NOT NULL DEFAULT '',
                    updated_at   INTEGER NOT NULL,
                    PRIMARY KEY (document_id, section_name, slide_index)
                );
                """
            )
            # point annotations: range_start == range_end
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS chord_annotations (
                    document_id  TEXT NOT NULL,
                    section_name TEXT NOT NULL,
                    slide_index  INTEGER NOT NULL,
                    seq          INTEGER NOT NULL,
                    chord        TEXT NOT NULL,
                    range_start  INTEGER NOT NULL,
                    range_end    INTEGER NOT NULL,
                    PRIMARY KEY (document_id, section_name, slide_index, seq),
                    FOREIGN KEY (document_id, section_name, slide_index)
                        REFERENCES slides(document_id, section_name, slide_index) ON DELETE CASCADE
                );
                """
            )
            con.execute(
                "CREATE INDEX IF NOT EXISTS idx_slides_position ON slides(document_id, position);"
            )

    def put_slide(self, document_id: str, slide: Slide) -> None:
        """Insert or overwrite a slide together with its chords."""
        now = int(time.time())
        with self._connect() as con:
            row = con.execute(
                "SELECT position FROM slides WHERE document_id=? AND section_name=? AND slide_index=?",
                (document_id, slide.section_name, slide.slide_index),
            ).fetchone()
            if row is None:
                row = con.execute(
                    "SELECT COALESCE(MAX(position) + 1, 0) AS position FROM slides WHERE document_id=?",
                    (document_id,),
                ).fetchone()
            con.execute(
                """
                INSERT INTO slides(document_id, section_name, slide_index, position, rich_text, plain_text, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(document_id, section_name, slide_index) DO UPDATE SET
                    rich_text=excluded.rich_text,
                    plain_text=excluded.plain_text,
                    updated_at=excluded.updated_at
                """,
                (
                    document_id,
                    slide.section_name,
                    slide.slide_index,
                    row["position"],
                    slide.rich_text,
                    slide.plain_text,
                    now,
                ),
            )
            self._write_annotations(con, document_id, slide.key, slide.annotations)

    def documents(self) -> list[str]:
        with self._connect() as con:
            rows = con.execute("SELECT DISTINCT document_id FROM slides ORDER BY document_id").fetchall()
            return [r["document_id"] for r in rows]

    def slides(self, document_id: str) -> list[Slide]:
        with self._connect() as con:
            rows = con.execute(
                """
                SELECT section_name, slide_index, rich_text, plain_text
                FROM slides WHERE document_id=? ORDER BY position
                """,
                (document_id,),
            ).fetchall()
            chords = con.execute(
                """
                SELECT section_name, slide_index, chord, range_start
                FROM chord_annotations WHERE document_id=?
                ORDER BY section_name, slide_index, range_start, seq
                """,
                (document_id,),
            ).fetchall()

        by_slide: dict[SlideKey, list[ChordAnnotation]] = {}
        for c in chords:
            key = SlideKey(section_name=c["section_name"], slide_index=c["slide_index"])
            by_slide.setdefault(key, []).append(ChordAnnotation(name=c["chord"], offset=c["range_start"]))

        out: list[Slide] = []
        for r in rows:
            key = SlideKey(section_name=r["section_name"], slide_index=r["slide_index"])
            out.append(
                Slide(
                    section_name=key.section_name,
                    slide_index=key.slide_index,
                    rich_text=r["rich_text"],
                    annotations=tuple(by_slide.get(key, ())),
                    plain_text=r["plain_text"],
                )
            )
        return out

    def replace_annotations(
        self,
        document_id: str,
        updates: Mapping[SlideKey, tuple[ChordAnnotation, ...]],
    ) -> None:
        # one transaction: the context manager rolls back if any slide fails
        now = int(time.time())
        with self._connect() as con:
            for key, annotations in updates.items():
                cur = con.execute(
                    "UPDATE slides SET updated_at=? WHERE document_id=? AND section_name=? AND slide_index=?",
                    (now, document_id, key.section_name, key.slide_index),
                )
                if cur.rowcount == 0:
                    raise KeyError(f"No slide {key.display} in {document_id!r}")
                self._write_annotations(con, document_id, key, annotations)
        logger.debug("Replaced chords on %d slide(s) of %s", len(updates), document_id)

    @staticmethod
    def _write_annotations(
        con: sqlite3.Connection,
        document_id: str,
        key: SlideKey,
        annotations: tuple[ChordAnnotation, ...],
    ) -> None:
        con.execute(
            "DELETE FROM chord_annotations WHERE document_id=? AND section_name=? AND slide_index=?",
            (document_id, key.section_name, key.slide_index),
        )
        con.executemany(
            """
            INSERT INTO chord_annotations(document_id, section_name, slide_index, seq, chord, range_start, range_end)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (document_id, key.section_name, key.slide_index, seq, a.name, a.offset, a.offset)
                for seq, a in enumerate(annotations)
            ],
        )

