"""Parsing of ANSI escape sequences and extraction of colour spans."""

from __future__ import annotations

import enum
import re
from collections.abc import Callable
from dataclasses import dataclass, replace


class Attr(enum.IntFlag):
    """Text attributes carried by SGR sequences."""

    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINE = enum.auto()
    BLINK = enum.auto()
    REVERSE = enum.auto()
    STRIKE_THROUGH = enum.auto()


_ATTR_CODES = (
    (Attr.BOLD, "1"),
    (Attr.DIM, "2"),
    (Attr.ITALIC, "3"),
    (Attr.UNDERLINE, "4"),
    (Attr.BLINK, "5"),
    (Attr.REVERSE, "7"),
    (Attr.STRIKE_THROUGH, "9"),
)

_SET_ATTRS = {
    1: Attr.BOLD,
    2: Attr.DIM,
    3: Attr.ITALIC,
    4: Attr.UNDERLINE,
    5: Attr.BLINK,
    7: Attr.REVERSE,
    9: Attr.STRIKE_THROUGH,
}

_RESET_ATTRS = {
    22: Attr.BOLD | Attr.DIM,
    23: Attr.ITALIC,
    24: Attr.UNDERLINE,
    25: Attr.BLINK,
    27: Attr.REVERSE,
    29: Attr.STRIKE_THROUGH,
}


def _color_code(color: int, offset: int) -> str:
    if color == -1:
        code = str(offset + 9)
    elif color < 8:
        code = str(offset + color)
    elif color < 16:
        code = str(offset - 30 + 90 + color - 8)
    elif color < 256:
        code = f"{offset + 8};5;{color}"
    elif color >= 1 << 24:
        r, g, b = (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF
        code = f"{offset + 8};2;{r};{g};{b}"
    else:
        code = ""
    return code + ";"


@dataclass(frozen=True)
class AnsiState:
    """Colours and attributes in effect; -1 means the terminal default."""

    fg: int = -1
    bg: int = -1
    attr: Attr = Attr(0)
    lbg: int = -1

    def colored(self) -> bool:
        """Whether this state differs from the plain default."""
        return self.fg != -1 or self.bg != -1 or self.attr > 0 or self.lbg >= 0

    def to_ansi(self) -> str:
        """Return the SGR sequence that sets this state, or "" if uncoloured."""
        if not self.colored():
            return ""
        codes = "".join(code + ";" for flag, code in _ATTR_CODES if self.attr & flag)
        codes += _color_code(self.fg, 30) + _color_code(self.bg, 40)
        return "\x1b[" + codes.removesuffix(";") + "m"


@dataclass
class AnsiOffset:
    """A span of characters, in the stripped text, drawn with one colour."""

    start: int
    end: int
    color: AnsiState


_SPECIAL = re.compile("[\x08\x0e\x0f\x1b]")
_CTRL_SEQ_START = "\\[()"
_CTRL_SEQ_BODY = frozenset("0123456789;:?")


def _is_print(char: str) -> bool:
    return " " <= char <= "~"


def _is_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "@"


def _match_control_sequence(text: str, start: int) -> int | None:
    # \x1b[\[()][0-9;:?]*[a-zA-Z@], with the two-character prefix already seen
    for i in range(start + 2, len(text)):
        char = text[i]
        if char in _CTRL_SEQ_BODY:
            continue
        return i + 1 if _is_alpha(char) else None
    return None


def _match_operating_system_command(text: str, start: int) -> int | None:
    # \x1b][0-9][;:][[:print:]]+(?:\x1b\\|\x07), with five characters seen
    i = start + 5
    n = len(text)
    while i < n and _is_print(text[i]):
        i += 1
    if i < n:
        if text[i] == "\x07":
            return i + 1
        if text[i] == "\x1b" and i < n - 1 and text[i + 1] == "\\":
            return i + 2
    return None


def _find_escape(text: str, pos: int) -> tuple[int, int] | None:
    n = len(text)
    match = _SPECIAL.search(text, pos)
    while match is not None:
        i = match.start()
        char = text[i]
        if char == "\x08":
            if i > pos and text[i - 1] != "\n":
                return i - 1, i + 1
        elif char == "\x1b":
            if i + 2 < n and text[i + 1] in _CTRL_SEQ_START:
                end = _match_control_sequence(text, i)
                if end is not None:
                    return i, end
            if (
                i + 5 < n
                and text[i + 1] == "]"
                and "0" <= text[i + 2] <= "9"
                and text[i + 3] in ";:"
                and _is_print(text[i + 4])
            ):
                end = _match_operating_system_command(text, i)
                if end is not None:
                    return i, end
            if i + 1 < n and text[i + 1] != "\n":
                return i, i + 2
        else:
            return i, i + 1
        match = _SPECIAL.search(text, i + 1)
    return None


def next_ansi_escape_sequence(text: str) -> tuple[int, int] | None:
    """Return the (start, end) span of the first escape sequence, or None."""
    return _find_escape(text, 0)


def parse_ansi_code(text: str, delimiter: str = "") -> tuple[int | None, str, str]:
    """Split off the first numeric parameter of an SGR body.

    Returns the parsed number (None when it is not a plain non-negative
    integer), the delimiter in use and the remaining text.
    """
    if delimiter:
        i = text.find(delimiter)
    else:
        i = text.find(";")
        if i < 0:
            i = text.find(":")
    remaining = ""
    if i >= 0:
        delimiter = text[i]
        remaining = text[i + 1 :]
        text = text[:i]
    if text and text.isascii() and text.isdigit():
        return int(text), delimiter, remaining
    return None, delimiter, remaining


def interpret_code(ansi_code: str, prev_state: AnsiState | None = None) -> AnsiState:
    """Return the state that results from applying ``ansi_code``."""
    base = prev_state if prev_state is not None else AnsiState()
    if not (ansi_code.startswith("\x1b[") and ansi_code.endswith("m")):
        if prev_state is not None and ansi_code.endswith("0K"):
            return replace(base, lbg=prev_state.bg)
        return base

    if len(ansi_code) <= 3:
        return replace(base, fg=-1, bg=-1, attr=Attr(0))

    colors = {"fg": base.fg, "bg": base.bg}
    attr = base.attr
    target = "fg"
    mode = 0
    delimiter = ""
    body = ansi_code[2:-1]
    while body:
        num, delimiter, body = parse_ansi_code(body, delimiter)
        if num is None:
            continue
        if mode == 0:
            if num == 38:
                target, mode = "fg", 1
            elif num == 48:
                target, mode = "bg", 1
            elif num == 39:
                colors["fg"] = -1
            elif num == 49:
                colors["bg"] = -1
            elif num in _SET_ATTRS:
                attr = Attr(attr | _SET_ATTRS[num])
            elif num in _RESET_ATTRS:
                attr = Attr(int(attr) & ~int(_RESET_ATTRS[num]))
            elif num == 0:
                colors["fg"] = colors["bg"] = -1
                attr = Attr(0)
            elif 30 <= num <= 37:
                colors["fg"] = num - 30
            elif 40 <= num <= 47:
                colors["bg"] = num - 40
            elif 90 <= num <= 97:
                colors["fg"] = num - 90 + 8
            elif 100 <= num <= 107:
                colors["bg"] = num - 100 + 8
        elif mode == 1:
            mode = {2: 10, 5: 2}.get(num, 0)
        elif mode == 2:
            colors[target] = num
            mode = 0
        elif mode == 10:
            colors[target] = (1 << 24) | (num << 16)
            mode = 11
        elif mode == 11:
            colors[target] |= num << 8
            mode = 12
        elif mode == 12:
            colors[target] |= num
            mode = 0

    if mode > 0:
        colors[target] = -1
    return AnsiState(colors["fg"], colors["bg"], attr, base.lbg)


def _same_state(new_state: AnsiState, state: AnsiState | None) -> bool:
    if state is None:
        return not new_state.colored()
    return new_state == state


def extract_color(
    text: str,
    state: AnsiState | None = None,
    proc: Callable[[str, AnsiState | None], bool] | None = None,
) -> tuple[str, list[AnsiOffset] | None, AnsiState | None]:
    """Strip escape sequences from ``text`` and collect its coloured spans.

    ``state`` is the state carried over from previous text. ``proc`` is
    called with each plain segment and the state in effect; returning False
    stops processing, and ``("", None, None)`` is returned. Otherwise the
    result is the stripped text, the colour spans (None if there are none)
    and the state at the end of the text.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, state))

    parts: list[str] = []
    prev_idx = 0
    char_count = 0
    idx = 0
    while idx < len(text):
        found = _find_escape(text, idx)
        if found is None:
            break
        start, idx = found

        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", None, None
        prev_idx = idx

        if prev:
            char_count += len(prev)
            parts.append(prev)

        new_state = interpret_code(text[start:idx], state)
        if not _same_state(new_state, state):
            if state is not None:
                offsets[-1].end = char_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(char_count, char_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = text
        trimmed = text
    else:
        rest = text[prev_idx:]
        parts.append(rest)
        trimmed = "".join(parts)
    if proc is not None:
        proc(rest, state)
    if offsets:
        if rest and state is not None:
            char_count += len(rest)
            offsets[-1].end = char_count
        return trimmed, offsets, state
    return trimmed, None, state