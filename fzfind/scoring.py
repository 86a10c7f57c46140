"""Character classes, bonus points and the scoring rules shared by the matchers."""

from __future__ import annotations

import enum
import os
import unicodedata
from dataclasses import dataclass

from .normalize import normalize_rune

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Bonus for matches at the start of a word. It is cancelled out once the gap
# between matched characters grows beyond about eight characters.
BONUS_BOUNDARY = SCORE_MATCH // 2

# Bonus for non-word characters; needed for consecutive chunks that start
# with one.
BONUS_NON_WORD = SCORE_MATCH // 2

# Edge-triggered bonus for camelCase and letter-to-digit transitions.
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION

# Minimum bonus given to each character of a consecutive chunk.
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)

# The first pattern character's bonus counts this many times.
BONUS_FIRST_CHAR_MULTIPLIER = 2

_ASCII_WHITE = " \t\n\v\f\r"
_SPACES = frozenset(
    "\t\n\v\f\r \x85\xa0\u1680\u2028\u2029\u202f\u205f\u3000"
    + "".join(chr(cp) for cp in range(0x2000, 0x200B))
)


class CharClass(enum.IntEnum):
    """Class of a character, ordered so that word characters come last."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


@dataclass(frozen=True)
class Scheme:
    """Tuning of bonus points for a kind of input."""

    name: str
    bonus_boundary_white: int
    bonus_boundary_delimiter: int
    delimiter_chars: str
    initial_char_class: CharClass


DEFAULT_SCHEME = Scheme(
    name="default",
    bonus_boundary_white=BONUS_BOUNDARY + 2,
    bonus_boundary_delimiter=BONUS_BOUNDARY + 1,
    delimiter_chars="/,:;|",
    initial_char_class=CharClass.WHITE,
)

PATH_SCHEME = Scheme(
    name="path",
    bonus_boundary_white=BONUS_BOUNDARY,
    bonus_boundary_delimiter=BONUS_BOUNDARY + 1,
    delimiter_chars="/" if os.sep == "/" else os.sep + "/",
    initial_char_class=CharClass.DELIMITER,
)

HISTORY_SCHEME = Scheme(
    name="history",
    bonus_boundary_white=BONUS_BOUNDARY,
    bonus_boundary_delimiter=BONUS_BOUNDARY,
    delimiter_chars="/,:;|",
    initial_char_class=CharClass.WHITE,
)

_SCHEMES = {s.name: s for s in (DEFAULT_SCHEME, PATH_SCHEME, HISTORY_SCHEME)}


def scheme_for(name: str) -> Scheme:
    """Return the scheme called ``name``; raise ValueError for unknown names."""
    try:
        return _SCHEMES[name]
    except KeyError:
        raise ValueError(f"unknown scoring scheme: {name!r}") from None


def is_space(char: str) -> bool:
    """Whether ``char`` is a Unicode white-space character."""
    return char in _SPACES


def lower_rune(char: str) -> str:
    """Lower-case a single character, keeping it a single character."""
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 0x7F:
        lowered = char.lower()
        return lowered[0] if lowered else char
    return char


def _ascii_class(char: str, scheme: Scheme) -> CharClass:
    if "a" <= char <= "z":
        return CharClass.LOWER
    if "A" <= char <= "Z":
        return CharClass.UPPER
    if "0" <= char <= "9":
        return CharClass.NUMBER
    if char in _ASCII_WHITE:
        return CharClass.WHITE
    if char in scheme.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def _non_ascii_class(char: str, scheme: Scheme) -> CharClass:
    category = unicodedata.category(char)
    if category == "Ll":
        return CharClass.LOWER
    if category == "Lu":
        return CharClass.UPPER
    if category.startswith("N"):
        return CharClass.NUMBER
    if category.startswith("L"):
        return CharClass.LETTER
    if is_space(char):
        return CharClass.WHITE
    if char in scheme.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def char_class_of(char: str, scheme: Scheme = DEFAULT_SCHEME) -> CharClass:
    """Classify a single character."""
    if ord(char) <= 0x7F:
        return _ascii_class(char, scheme)
    return _non_ascii_class(char, scheme)


def bonus_for(
    prev_class: CharClass, char_class: CharClass, scheme: Scheme = DEFAULT_SCHEME
) -> int:
    """Bonus for a character of ``char_class`` following one of ``prev_class``."""
    if char_class > CharClass.NON_WORD:
        if prev_class == CharClass.WHITE:
            return scheme.bonus_boundary_white
        if prev_class == CharClass.DELIMITER:
            return scheme.bonus_boundary_delimiter
        if prev_class == CharClass.NON_WORD:
            return BONUS_BOUNDARY
    if (prev_class == CharClass.LOWER and char_class == CharClass.UPPER) or (
        prev_class != CharClass.NUMBER and char_class == CharClass.NUMBER
    ):
        return BONUS_CAMEL123
    if char_class == CharClass.NON_WORD:
        return BONUS_NON_WORD
    if char_class == CharClass.WHITE:
        return scheme.bonus_boundary_white
    return 0


def bonus_at(text: str, idx: int, scheme: Scheme = DEFAULT_SCHEME) -> int:
    """Bonus for the character of ``text`` at ``idx``."""
    if idx == 0:
        return scheme.bonus_boundary_white
    return bonus_for(
        char_class_of(text[idx - 1], scheme), char_class_of(text[idx], scheme), scheme
    )


def calculate_score(
    case_sensitive: bool,
    normalize: bool,
    text: str,
    pattern: str,
    sidx: int,
    eidx: int,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> tuple[int, list[int] | None]:
    """Score the match of ``pattern`` within ``text[sidx:eidx]``.

    ``pattern`` must already be lower-cased when matching case-insensitively
    and normalized when ``normalize`` is set. Returns the score and, when
    ``with_pos`` is set, the matched positions.
    """
    pidx = 0
    score = 0
    in_gap = False
    consecutive = 0
    first_bonus = 0
    positions: list[int] | None = [] if with_pos else None
    prev_class = (
        char_class_of(text[sidx - 1], scheme) if sidx > 0 else scheme.initial_char_class
    )
    for idx, char in enumerate(text[sidx:eidx], start=sidx):
        char_class = char_class_of(char, scheme)
        if not case_sensitive:
            char = lower_rune(char)
        if normalize:
            char = normalize_rune(char)
        if pidx < len(pattern) and char == pattern[pidx]:
            if positions is not None:
                positions.append(idx)
            score += SCORE_MATCH
            bonus = bonus_for(prev_class, char_class, scheme)
            if consecutive == 0:
                first_bonus = bonus
            else:
                if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            score += bonus * BONUS_FIRST_CHAR_MULTIPLIER if pidx == 0 else bonus
            in_gap = False
            consecutive += 1
            pidx += 1
        else:
            score += SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            in_gap = True
            consecutive = 0
            first_bonus = 0
        prev_class = char_class
    return score, positions