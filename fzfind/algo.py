"""Matching algorithms: fuzzy, exact, prefix, suffix and equal matches.

Every matcher takes the same arguments and returns a :class:`MatchResult`,
or None when the pattern does not match. The pattern must already be
lower-cased when matching case-insensitively and normalized when
``normalize`` is set.

``fuzzy_match_v1`` finds the first fuzzy occurrence of the pattern in linear
time and then scans backwards for a shorter match. ``fuzzy_match_v2`` fills a
score matrix (a variant of Smith-Waterman without omissions) to find the
alignment with the highest score, falling back to the greedy matcher when
the matrix would be too large.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .constants import SLAB16_SIZE
from .normalize import normalize_rune
from .scoring import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    DEFAULT_SCHEME,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    Scheme,
    bonus_at,
    bonus_for,
    calculate_score,
    char_class_of,
    is_space,
    lower_rune,
)


@dataclass(frozen=True)
class MatchResult:
    """Span and score of a match, with matched positions when requested."""

    start: int
    end: int
    score: int
    positions: list[int] | None = None


Algo = Callable[[bool, bool, bool, str, str, bool, Scheme], "MatchResult | None"]


def _index_at(index: int, size: int, forward: bool) -> int:
    return index if forward else size - index - 1


def _fold(char: str, case_sensitive: bool, normalize: bool) -> str:
    if not case_sensitive:
        char = lower_rune(char)
    if normalize:
        char = normalize_rune(char)
    return char


def _leading_whitespaces(text: str) -> int:
    count = 0
    for char in text:
        if not is_space(char):
            break
        count += 1
    return count


def _trailing_whitespaces(text: str) -> int:
    count = 0
    for char in reversed(text):
        if not is_space(char):
            break
        count += 1
    return count


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    found = text.find(char, start)
    if found == start:
        return start
    # A case-insensitive search must also look for the upper-case letter.
    if not case_sensitive and "a" <= char <= "z":
        end = found if found >= 0 else len(text)
        upper = text.find(char.upper(), start, end)
        if upper >= 0:
            found = upper
    return found


def _ascii_fuzzy_index(text: str, pattern: str, case_sensitive: bool) -> int:
    """Return where a scan may start, or -1 when a match is impossible."""
    if not text.isascii():
        return 0
    if not pattern.isascii():
        return -1
    first_idx = 0
    idx = 0
    for pidx, char in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, char, idx)
        if idx < 0:
            return -1
        if pidx == 0 and idx > 0:
            # Step back so the bonus of the first character is right
            first_idx = idx - 1
        idx += 1
    return first_idx


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> MatchResult | None:
    """Find the highest-scoring fuzzy occurrence of ``pattern`` in ``text``."""
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0, [] if with_pos else None)
    n = len(text)
    if n * m > SLAB16_SIZE:
        return fuzzy_match_v1(
            case_sensitive, normalize, forward, text, pattern, with_pos, scheme
        )

    idx = _ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return None

    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first = [0] * m
    chars = list(text)

    # Fold characters, compute bonuses and the first row of scores.
    max_score = 0
    max_pos = 0
    pidx = 0
    last_idx = 0
    pchar0 = pchar = pattern[0]
    prev_h0 = 0
    prev_class = scheme.initial_char_class
    in_gap = False
    for i in range(idx, n):
        char = chars[i]
        if ord(char) <= 0x7F:
            char_class = char_class_of(char, scheme)
            if not case_sensitive and char_class == CharClass.UPPER:
                char = chr(ord(char) + 32)
        else:
            char_class = char_class_of(char, scheme)
            if not case_sensitive and char_class == CharClass.UPPER:
                char = lower_rune(char)
            if normalize:
                char = normalize_rune(char)

        chars[i] = char
        bonus = bonus_for(prev_class, char_class, scheme)
        bonuses[i] = bonus
        prev_class = char_class

        if char == pchar:
            if pidx < m:
                first[pidx] = i
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = i

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[i] = score
            c0[i] = 1
            if m == 1 and (
                (forward and score > max_score) or (not forward and score >= max_score)
            ):
                max_score, max_pos = score, i
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[i] = max(prev_h0 + gap, 0)
            c0[i] = 0
            in_gap = True
        prev_h0 = h0[i]

    if pidx != m:
        return None
    if m == 1:
        return MatchResult(max_pos, max_pos + 1, max_score, [max_pos] if with_pos else None)

    # Fill in the score matrix; omissions are not allowed.
    f0 = first[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0 : last_idx + 1]
    runs = [0] * (width * m)
    runs[:width] = c0[f0 : last_idx + 1]

    for pidx in range(1, m):
        f = first[pidx]
        pchar = pattern[pidx]
        row = pidx * width
        in_gap = False
        scores[row + f - f0 - 1] = 0
        for col in range(f, last_idx + 1):
            j = col - f0
            s2 = scores[row + j - 1] + (SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START)
            s1 = 0
            consecutive = 0
            if pchar == chars[col]:
                s1 = scores[row - width + j - 1] + SCORE_MATCH
                bonus = bonuses[col]
                consecutive = runs[row - width + j - 1] + 1
                if consecutive > 1:
                    first_bonus = bonuses[col - consecutive + 1]
                    # Break the consecutive chunk
                    if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                        consecutive = 1
                    else:
                        bonus = max(bonus, BONUS_CONSECUTIVE, first_bonus)
                if s1 + bonus < s2:
                    s1 += bonuses[col]
                    consecutive = 0
                else:
                    s1 += bonus
            runs[row + j] = consecutive

            in_gap = s1 < s2
            score = max(s1, s2, 0)
            if pidx == m - 1 and (
                (forward and score > max_score) or (not forward and score >= max_score)
            ):
                max_score, max_pos = score, col
            scores[row + j] = score

    # Trace back to find the matched positions.
    positions: list[int] | None = None
    j = f0
    if with_pos:
        positions = []
        i = m - 1
        j = max_pos
        prefer_match = True
        while True:
            base = i * width
            j0 = j - f0
            s = scores[base + j0]
            s1 = scores[base - width + j0 - 1] if i > 0 and j >= first[i] else 0
            s2 = scores[base + j0 - 1] if j > first[i] else 0
            if s > s1 and (s > s2 or (s == s2 and prefer_match)):
                positions.append(j)
                if i == 0:
                    break
                i -= 1
            below = base + width + j0 + 1
            prefer_match = runs[base + j0] > 1 or (below < len(runs) and runs[below] > 0)
            j -= 1

    # The start offset is only exact when positions were traced.
    return MatchResult(j, max_pos + 1, max_score, positions)


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> MatchResult | None:
    """Find the first fuzzy occurrence of ``pattern``, then shorten it."""
    if not pattern:
        return MatchResult(0, 0, 0)
    if _ascii_fuzzy_index(text, pattern, case_sensitive) < 0:
        return None

    n = len(text)
    m = len(pattern)
    pidx = 0
    sidx = -1
    eidx = -1
    for index in range(n):
        char = _fold(text[_index_at(index, n, forward)], case_sensitive, normalize)
        if char == pattern[_index_at(pidx, m, forward)]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == m:
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return None

    pidx -= 1
    for index in range(eidx - 1, sidx - 1, -1):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = lower_rune(char)
        if char == pattern[_index_at(pidx, m, forward)]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = n - eidx, n - sidx

    score, positions = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, with_pos, scheme
    )
    return MatchResult(sidx, eidx, score, positions)


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> MatchResult | None:
    """Find the occurrence of ``pattern`` whose first character has the best bonus."""
    if not pattern:
        return MatchResult(0, 0, 0)

    n = len(text)
    m = len(pattern)
    if n < m:
        return None
    if _ascii_fuzzy_index(text, pattern, case_sensitive) < 0:
        return None

    pidx = 0
    best_pos = -1
    bonus = 0
    best_bonus = -1
    index = 0
    while index < n:
        text_idx = _index_at(index, n, forward)
        char = _fold(text[text_idx], case_sensitive, normalize)
        pattern_idx = _index_at(pidx, m, forward)
        if pattern[pattern_idx] == char:
            if pattern_idx == 0:
                bonus = bonus_at(text, text_idx, scheme)
            pidx += 1
            if pidx == m:
                if bonus > best_bonus:
                    best_pos, best_bonus = index, bonus
                if bonus >= BONUS_BOUNDARY:
                    break
                index -= pidx - 1
                pidx, bonus = 0, 0
        else:
            index -= pidx
            pidx, bonus = 0, 0
        index += 1

    if best_pos < 0:
        return None
    if forward:
        sidx, eidx = best_pos - m + 1, best_pos + 1
    else:
        sidx, eidx = n - (best_pos + 1), n - (best_pos - m + 1)
    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, False, scheme
    )
    return MatchResult(sidx, eidx, score)


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> MatchResult | None:
    """Match ``pattern`` at the start of ``text``, after leading white space."""
    if not pattern:
        return MatchResult(0, 0, 0)

    trimmed = 0 if is_space(pattern[0]) else _leading_whitespaces(text)
    if len(text) - trimmed < len(pattern):
        return None

    for offset, pchar in enumerate(pattern):
        if _fold(text[trimmed + offset], case_sensitive, normalize) != pchar:
            return None
    end = trimmed + len(pattern)
    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, trimmed, end, False, scheme
    )
    return MatchResult(trimmed, end, score)


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> MatchResult | None:
    """Match ``pattern`` at the end of ``text``, before trailing white space."""
    trimmed_len = len(text)
    if not pattern or not is_space(pattern[-1]):
        trimmed_len -= _trailing_whitespaces(text)
    if not pattern:
        return MatchResult(trimmed_len, trimmed_len, 0)

    diff = trimmed_len - len(pattern)
    if diff < 0:
        return None

    for offset, pchar in enumerate(pattern):
        if _fold(text[diff + offset], case_sensitive, normalize) != pchar:
            return None
    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, diff, trimmed_len, False, scheme
    )
    return MatchResult(diff, trimmed_len, score)


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme = DEFAULT_SCHEME,
) -> MatchResult | None:
    """Match when ``text``, stripped of surrounding white space, equals ``pattern``."""
    m = len(pattern)
    if m == 0:
        return None

    leading = 0 if is_space(pattern[0]) else _leading_whitespaces(text)
    trailing = 0 if is_space(pattern[-1]) else _trailing_whitespaces(text)
    if len(text) - leading - trailing != m:
        return None

    if normalize:
        matched = True
        for offset, pchar in enumerate(pattern):
            char = text[leading + offset]
            if not case_sensitive:
                char = lower_rune(char)
            if normalize_rune(pchar) != normalize_rune(char):
                matched = False
                break
    else:
        body = text[leading : len(text) - trailing]
        if not case_sensitive:
            body = body.lower()
        matched = body == pattern

    if not matched:
        return None
    white = scheme.bonus_boundary_white
    score = (SCORE_MATCH + white) * m + (BONUS_FIRST_CHAR_MULTIPLIER - 1) * white
    return MatchResult(leading, leading + m, score)