from __future__ import annotations

from pathlib import Path

import colorama
import typer

from slide_chords.chords.export import export_chordpro, export_json, parse_export_json
from slide_chords.chords.transpose import interval_between, transpose_text_with_stats
from slide_chords.config import load_config, save_config_key
from slide_chords.errors import ChordSyncError, MalformedDocument
from slide_chords.logging_setup import setup_logging
from slide_chords.render.ansi import PLAIN, Theme, render_slide
from slide_chords.rtf.normalize import normalize
from slide_chords.store.sqlite import SqliteSlideStore
from slide_chords.store.types import Slide
from slide_chords.sync.synchronizer import DocumentSynchronizer, Session


app = typer.Typer(no_args_is_help=True, add_completion=False)

_DB_HELP = "SQLite slide store (default: $SLIDE_CHORDS_DB or XDG data dir)"


@app.callback()
def _main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")):
    setup_logging(debug)


def _open(db: Path | None, document: str) -> tuple[DocumentSynchronizer, Session]:
    cfg = load_config()
    store = SqliteSlideStore(db or cfg.store_db_path)
    sync = DocumentSynchronizer(debug_slides=cfg.debug_slides)
    session = Session(document_id=document, store=store)
    try:
        sync.load(session)
    except MalformedDocument as e:
        typer.echo(f"Error: {document}: {e}", err=True)
        raise typer.Exit(code=1)
    return sync, session


def _interval(from_key: str | None, to_key: str | None) -> int:
    if not to_key:
        return 0
    try:
        return interval_between(from_key or load_config().default_key, to_key)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _theme(no_color: bool) -> Theme:
    if no_color or not load_config().use_color:
        return PLAIN
    colorama.just_fix_windows_console()
    return Theme()


@app.command()
def plain(
    rtf_path: Path,
    anchors: bool = typer.Option(False, "--anchors", help="Also print the rich/plain offset table"),
):
    """Print the lyric text of an RTF field."""
    try:
        normalized = normalize(rtf_path.read_bytes())
    except MalformedDocument as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(normalized.plain_text)
    if anchors:
        for a in normalized.table:
            typer.echo(f"{a.rich}\t{a.plain}")


@app.command()
def transpose(
    path: Path,
    from_key: str | None = typer.Option(None, "--from", help="Original key (default: configured key)"),
    to_key: str = typer.Option(..., "--to", help="Target key"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
):
    """Transpose every [chord] in a bracketed text file."""
    text = path.read_text(encoding="utf-8")
    data, stats = transpose_text_with_stats(text, _interval(from_key, to_key))
    if stats.unrecognized:
        typer.echo(f"Left unchanged: {', '.join(stats.unrecognized)}", err=True)
    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command("import-rtf")
def import_rtf(
    document: str,
    section: str,
    index: int,
    rtf_path: Path,
    db: Path | None = typer.Option(None, "--db", help=_DB_HELP),
):
    """Add (or overwrite) one slide's RTF field in the store."""
    cfg = load_config()
    rich = rtf_path.read_bytes().decode("utf-8", errors="replace")
    try:
        plain_text = normalize(rich).plain_text
    except MalformedDocument as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    store = SqliteSlideStore(db or cfg.store_db_path)
    store.put_slide(
        document,
        Slide(section_name=section, slide_index=index, rich_text=rich, plain_text=plain_text),
    )
    typer.echo(f"Imported {section} {index} into {document}")


@app.command()
def documents(db: Path | None = typer.Option(None, "--db", help=_DB_HELP)):
    """List documents in the store."""
    store = SqliteSlideStore(db or load_config().store_db_path)
    for d in store.documents():
        typer.echo(d)


@app.command()
def show(
    document: str,
    db: Path | None = typer.Option(None, "--db", help=_DB_HELP),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Print every slide of a document with its chords inline."""
    theme = _theme(no_color)
    _sync, session = _open(db, document)
    for key, text in session.annotated_texts().items():
        typer.echo(render_slide(key, text, theme=theme))
        typer.echo()


@app.command()
def export(
    document: str,
    fmt: str = typer.Option("json", "--format", case_sensitive=False, help="json|chordpro"),
    from_key: str | None = typer.Option(None, "--from", help="Original key (default: configured key)"),
    to_key: str | None = typer.Option(None, "--to", help="Transpose to this key"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
    db: Path | None = typer.Option(None, "--db", help=_DB_HELP),
):
    """Export a document's slides as bracketed text."""
    fmt_l = fmt.lower()
    if fmt_l not in ("json", "chordpro"):
        raise typer.BadParameter("format must be one of: json, chordpro")
    interval = _interval(from_key, to_key)

    sync, session = _open(db, document)
    texts = sync.transpose(session, interval)
    data = export_json(document, texts) if fmt_l == "json" else export_chordpro(document, texts)

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data)


@app.command()
def save(
    document: str,
    edits_path: Path,
    db: Path | None = typer.Option(None, "--db", help=_DB_HELP),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Write chords from an edited JSON export back to the store."""
    try:
        exported_doc, edits = parse_export_json(edits_path.read_text(encoding="utf-8"))
    except ValueError as e:
        typer.echo(f"Error: {edits_path}: {e}", err=True)
        raise typer.Exit(code=1)
    if exported_doc and exported_doc != document:
        typer.echo(f"Warning: edits were exported from {exported_doc}", err=True)

    theme = _theme(no_color)
    sync, session = _open(db, document)
    try:
        report = sync.save(session, edits)
    except (ChordSyncError, KeyError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Saved {len(report.updates)} slide(s) of {document}")
    for u in report.updates:
        typer.echo()
        typer.echo(render_slide(u.key, session.slides[u.key].annotated_text, theme=theme, approximate=u.approximate))


@app.command()
def key(set_key: str | None = typer.Option(None, "--set", help="Persist a new default key")):
    """Show or set the default original key for transposition."""
    if set_key:
        try:
            save_config_key(set_key)
        except ValueError as e:
            raise typer.BadParameter(str(e))
    typer.echo(load_config().default_key)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
