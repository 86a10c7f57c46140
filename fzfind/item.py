"""Input lines as the matcher sees them."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ansi import AnsiOffset, extract_color


@dataclass
class Item:
    """One input line.

    ``text`` is what is matched against, ``index`` its position in the input,
    ``orig_text`` the untransformed line when fields were selected, and
    ``colors`` the colour spans found in ``text``.
    """

    text: str
    index: int = 0
    orig_text: str | None = None
    colors: list[AnsiOffset] = field(default_factory=list)

    def as_string(self, strip_ansi: bool) -> str:
        """Return the original line, without escape sequences if asked."""
        if self.orig_text is not None:
            if strip_ansi:
                trimmed, _, _ = extract_color(self.orig_text, None, None)
                return trimmed
            return self.orig_text
        return self.text


MIN_ITEM = Item("", index=-1)