from __future__ import annotations

import logging
from dataclasses import dataclass

from slide_chords.errors import MalformedDocument

from .offsets import OffsetTable

logger = logging.getLogger(__name__)

# \'hh codes folded into one typographic character
_HEX_SUBSTITUTIONS: dict[int, str] = {
    0x85: "…",  # ellipsis
    0x91: "‘",
    0x92: "’",  # curly apostrophe
    0x93: "“",
    0x94: "”",
    0x96: "–",  # en dash
    0x97: "—",  # em dash
}

# control words that stand for a single character
_CHAR_WORDS: dict[str, str] = {
    "lquote": "‘",
    "rquote": "’",
    "ldblquote": "“",
    "rdblquote": "”",
    "endash": "–",
    "emdash": "—",
    "bullet": "•",
}

_BREAK_WORDS = frozenset({"par", "line", "tab", "page", "sect", "row", "cell"})

# groups whose content is never lyric text
_DESTINATIONS = frozenset(
    {
        "fonttbl",
        "colortbl",
        "expandedcolortbl",
        "stylesheet",
        "info",
        "pict",
        "header",
        "footer",
        "footnote",
        "listtable",
        "listoverridetable",
        "rsidtbl",
        "generator",
        "fldinst",
        "themedata",
        "latentstyles",
    }
)

_SPACE = " "
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, slots=True)
class NormalizedText:
    plain_text: str
    table: OffsetTable


def _is_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _hex_char(code: int) -> str:
    sub = _HEX_SUBSTITUTIONS.get(code)
    if sub is not None:
        return sub
    return bytes([code]).decode("cp1252", errors="replace")


def as_text(rich_text: str | bytes) -> str:
    if isinstance(rich_text, bytes):
        return rich_text.decode("utf-8", errors="replace")
    return rich_text


class _Scanner:
    def __init__(self, rich: str):
        self.rich = rich
        self.chars: list[str] = []
        self.anchors: list[int] = []
        # open groups: (position of "{", \uc value in force outside the group)
        self.groups: list[tuple[int, int]] = []
        self.skip_depth: int | None = None
        self.group_start = False
        self.uc = 1
        self.fallback = 0

    @property
    def skipping(self) -> bool:
        return self.skip_depth is not None

    def emit(self, ch: str, at: int) -> None:
        if self.skipping:
            return
        if self.fallback:
            # \u replacement characters for readers without unicode support
            self.fallback -= 1
            return
        if ch in " \t\r\n":
            if not self.chars or self.chars[-1] == _SPACE:
                return
            ch = _SPACE
        self.chars.append(ch)
        self.anchors.append(at)

    def brk(self, at: int) -> None:
        if self.skipping:
            return
        self.fallback = 0
        self.emit(_SPACE, at)

    def open_destination(self) -> None:
        if self.group_start and not self.skipping:
            self.skip_depth = len(self.groups)
        self.group_start = False

    def run(self) -> NormalizedText:
        rich = self.rich
        n = len(rich)
        i = 0
        while i < n:
            c = rich[i]
            if c == "{":
                self.groups.append((i, self.uc))
                self.group_start = True
                self.fallback = 0
                i += 1
            elif c == "}":
                if not self.groups:
                    raise MalformedDocument("Unmatched group delimiter '}'", i)
                if self.skip_depth is not None and len(self.groups) <= self.skip_depth:
                    self.skip_depth = None
                _, self.uc = self.groups.pop()
                self.group_start = False
                self.fallback = 0
                i += 1
            elif c == "\\":
                i = self._control(i)
            elif c in "\r\n":
                # raw line breaks carry no meaning in RTF
                i += 1
            else:
                self.group_start = False
                self.emit(c, i)
                i += 1

        if self.groups:
            raise MalformedDocument("Unclosed group delimiter '{'", self.groups[-1][0])

        # trailing whitespace left by final breaks
        while self.chars and self.chars[-1] == _SPACE:
            self.chars.pop()
            self.anchors.pop()

        return NormalizedText(
            plain_text="".join(self.chars),
            table=OffsetTable.build(self.anchors, n),
        )

    def _control(self, i: int) -> int:
        rich = self.rich
        n = len(rich)
        if i + 1 >= n:
            raise MalformedDocument("Dangling escape", i)
        nxt = rich[i + 1]

        if _is_letter(nxt):
            return self._control_word(i)

        if nxt == "*":
            self.open_destination()
            return i + 2

        self.group_start = False
        if nxt == "'":
            digits = rich[i + 2 : i + 4]
            if len(digits) < 2:
                raise MalformedDocument("Truncated hex escape", i)
            if not all(ch in _HEX_DIGITS for ch in digits):
                raise MalformedDocument(f"Invalid hex escape {digits!r}", i)
            self.emit(_hex_char(int(digits, 16)), i)
            return i + 4
        if nxt in "\\{}":
            self.emit(nxt, i)
        elif nxt in "\r\n":
            self.brk(i)
        elif nxt == "~":
            self.emit("\u00a0", i)
        elif nxt == "_":
            self.emit("-", i)
        # \- optional hyphen, \| \: and unknown symbols produce nothing
        return i + 2

    def _control_word(self, i: int) -> int:
        rich = self.rich
        n = len(rich)
        j = i + 1
        while j < n and _is_letter(rich[j]):
            j += 1
        word = rich[i + 1 : j]

        param: int | None = None
        k = j + 1 if j < n and rich[j] == "-" else j
        d = k
        while d < n and _is_digit(rich[d]):
            d += 1
        if d > k:
            param = int(rich[j:d])
            j = d
        if j < n and rich[j] == " ":
            j += 1  # delimiter belongs to the control word

        if word == "bin" and param:
            # raw payload, may contain unbalanced braces
            self.group_start = False
            return min(j + max(param, 0), n)
        if word in _DESTINATIONS:
            self.open_destination()
            return j
        self.group_start = False
        if self.skipping:
            return j

        if word == "uc" and param is not None:
            self.uc = max(param, 0)
        elif word == "u" and param is not None:
            code = param + 65536 if param < 0 else param
            if not 0 <= code <= 0x10FFFF:
                raise MalformedDocument(f"Invalid unicode escape \\u{param}", i)
            self.fallback = 0
            self.emit(chr(code), i)
            self.fallback = self.uc
        elif word in _BREAK_WORDS:
            self.brk(i)
        elif word in _CHAR_WORDS:
            self.emit(_CHAR_WORDS[word], i)
        return j


def normalize(rich_text: str | bytes) -> NormalizedText:
    """
    Strip RTF markup, keeping one anchor per plain character.

    Raises MalformedDocument for unbalanced groups or a dangling escape;
    nothing is returned in that case.
    """
    rich = as_text(rich_text)
    result = _Scanner(rich).run()
    logger.debug("Normalized %d rich chars into %d plain chars", len(rich), len(result.plain_text))
    return result
