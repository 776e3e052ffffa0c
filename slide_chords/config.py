from __future__ import annotations

import json
from dataclasses import dataclass
import os
from pathlib import Path

from slide_chords.chords.transpose import CHROMATIC_SCALE, normalize_root


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "slide-chords"
    return Path.home() / ".config" / "slide-chords"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    # Storage
    data_dir: Path
    store_db_path: Path
    config_dir: Path

    # Transposition
    default_key: str

    # Diagnostics
    debug_slides: int  # slides whose raw RTF is logged at debug level

    # Rendering
    use_color: bool


def load_config() -> AppConfig:
    xdg = os.getenv("XDG_DATA_HOME")
    data_dir = Path(xdg) if xdg else Path.home() / ".local" / "share"
    data_dir = data_dir / "slide-chords"

    db_env = os.getenv("SLIDE_CHORDS_DB")
    store_db_path = Path(db_env) if db_env else data_dir / "slides.sqlite3"

    use_color = os.getenv("SLIDE_CHORDS_COLOR", "1") not in ("0", "false", "False")

    config_dir = _config_dir()

    return AppConfig(
        data_dir=data_dir,
        store_db_path=store_db_path,
        config_dir=config_dir,
        default_key=_load_default_key(config_dir),
        debug_slides=int(os.getenv("SLIDE_CHORDS_DEBUG_SLIDES", "5")),
        use_color=use_color,
    )


def _valid_key(raw: str | None) -> str | None:
    if not raw:
        return None
    key = raw.strip()
    if key[:1].islower():
        key = key[:1].upper() + key[1:]
    return key if normalize_root(key) in CHROMATIC_SCALE else None


def _load_default_key(config_dir: Path) -> str:
    # Priority: config.json → SLIDE_CHORDS_KEY → "C"
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
            key = _valid_key(data.get("default_key"))
            if key:
                return key
        except (OSError, ValueError):
            pass
    key = _valid_key(os.getenv("SLIDE_CHORDS_KEY"))
    return key or "C"


def save_config_key(key: str) -> None:
    valid = _valid_key(key)
    if valid is None:
        raise ValueError(f"Unknown key: {key!r}")
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            pass
    data["default_key"] = valid
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
