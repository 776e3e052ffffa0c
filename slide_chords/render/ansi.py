from __future__ import annotations

from dataclasses import dataclass

from colorama import Fore, Style

from slide_chords.chords.codec import CHORD_TOKEN_RE
from slide_chords.store.types import SlideKey


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = Fore.CYAN + Style.BRIGHT
    chord: str = Fore.GREEN + Style.BRIGHT
    warning: str = Fore.YELLOW + Style.BRIGHT
    reset: str = Style.RESET_ALL


PLAIN = Theme(title="", chord="", warning="", reset="")


def highlight_chords(text: str, theme: Theme) -> str:
    if not theme.chord:
        return text
    return CHORD_TOKEN_RE.sub(lambda m: f"{theme.chord}{m.group(0)}{theme.reset}", text)


def render_slide(key: SlideKey, annotated_text: str, *, theme: Theme = PLAIN, approximate: bool = False) -> str:
    header = f"{theme.title}♫ {key.display}{theme.reset}"
    if approximate:
        header += f" {theme.warning}[approximate chord placement]{theme.reset}"
    return f"{header}\n{highlight_chords(annotated_text, theme)}"
