import random
import re

import pytest

from fzfind.ansi import (
    AnsiOffset,
    AnsiState,
    Attr,
    extract_color,
    interpret_code,
    next_ansi_escape_sequence,
    parse_ansi_code,
)

_REFERENCE = re.compile(
    r"\x1b[\[()][0-9;:]*[a-zA-Z@]|\x1b\][0-9][;:][ -~]+(?:\x1b\\|\x07)|\x1b.|[\x0e\x0f]|.\x08"
)

ANSI_BENCHMARK_STRING = (
    "\x1b[38;5;81m\x1b[01;31m\x1b[Kkernel/\x1b[0m\x1b[38:5:81mbpf/"
    "\x1b[0m\x1b[38:5:81mpreload/\x1b[0m\x1b[38;5;81miterators/"
    "\x1b[0m\x1b[38:5:149mMakefile\x1b[m\x1b[K\x1b[0m"
)

BASE_STRINGS = [
    "\x1b[0mhello world",
    "\x1b[1mhello world",
    "椙\x1b[1m椙",
    "椙\x1b[1椙m椙",
    "\x1b[1mhello \x1b[mw\x1b7o\x1b8r\x1b(Bl\x1b[2@d",
    "\x1b[1mhello \x1b[Kworld",
    "hello \x1b[34;45;1mworld",
    "hello \x1b[34;45;1mwor\x1b[34;45;1mld",
    "hello \x1b[34;45;1mwor\x1b[0mld",
    "hello \x1b[34;48;5;233;1mwo\x1b[38;5;161mr\x1b[0ml\x1b[38;5;161md",
    "hello \x1b[38;5;38;48;5;48;1mwor\x1b[38;5;48;48;5;38ml\x1b[0md",
    "hello \x1b[32;1mworld",
    "hello world",
    "hello \x1b[0;38;5;200;48;5;100mworld",
]


def _check_against_reference(text):
    rest = text
    while True:
        got = next_ansi_escape_sequence(rest)
        match = _REFERENCE.search(rest)
        expected = match.span() if match else None
        assert got == expected, repr(rest)
        if expected is None:
            return
        rest = rest[expected[1]:]


@pytest.mark.parametrize(
    "text",
    BASE_STRINGS
    + [
        "\x1b椙",
        "椙\x08",
        "\n\x08",
        "X\x08",
        "",
        "\x1b]4;3;rgb:aa/bb/cc\x07 ",
        "\x1b]4;3;rgb:aa/bb/cc\x1b\\ ",
        ANSI_BENCHMARK_STRING,
    ],
)
def test_next_ansi_escape_sequence(text):
    _check_against_reference(text)


def test_next_ansi_escape_sequence_spans():
    assert next_ansi_escape_sequence("\x1b[0mhello") == (0, 4)
    assert next_ansi_escape_sequence("椙\x08") == (0, 2)
    assert next_ansi_escape_sequence("\x1b]4;3;rgb:aa/bb/cc\x07 ") == (0, 19)
    assert next_ansi_escape_sequence("hello world") is None


def _random_char(rng):
    while True:
        cp = rng.randrange(0x110000)
        if not 0xD800 <= cp <= 0xDFFF:
            return chr(cp)


def _modify(text, rng):
    chars = list(text)
    for _ in range(rng.randrange(len(text)) + 1):
        if not chars:
            break
        i = rng.randrange(len(chars))
        op = rng.randrange(4)
        if op == 0:
            del chars[i]
        elif op == 1:
            chars[i] = rng.choice("\x0e\x0f\x1b")
        else:
            chars[i] = _random_char(rng)
    return "".join(chars)


def test_next_ansi_escape_sequence_fuzz_modified():
    rng = random.Random(1)
    for text in BASE_STRINGS + [ANSI_BENCHMARK_STRING]:
        for _ in range(200):
            _check_against_reference(_modify(text, rng))


def test_next_ansi_escape_sequence_fuzz_random():
    rng = random.Random(1)
    for _ in range(2000):
        text = "".join(_random_char(rng) for _ in range(rng.randrange(50)))
        _check_against_reference(text)


def _summary(offset, bold):
    assert offset.color.attr == (Attr.BOLD if bold else Attr(0))
    return offset.start, offset.end, offset.color.fg, offset.color.bg


def test_extract_color():
    def check(src, state):
        output, offsets, new_state = extract_color(src, state)
        assert output == "hello world"
        return offsets, new_state

    offsets, state = check("hello world", None)
    assert offsets is None

    offsets, state = check("\x1b[0mhello world", None)
    assert offsets is None

    offsets, state = check("\x1b[1mhello world", None)
    assert len(offsets) == 1
    assert _summary(offsets[0], True) == (0, 11, -1, -1)

    offsets, state = check("\x1b[1mhello \x1b[mw\x1b7o\x1b8r\x1b(Bl\x1b[2@d", None)
    assert len(offsets) == 1
    assert _summary(offsets[0], True) == (0, 6, -1, -1)

    offsets, state = check("\x1b[1mhello \x1b[Kworld", None)
    assert len(offsets) == 1
    assert _summary(offsets[0], True) == (0, 11, -1, -1)

    offsets, state = check("hello \x1b[34;45;1mworld", None)
    assert len(offsets) == 1
    assert _summary(offsets[0], True) == (6, 11, 4, 5)

    offsets, state = check("hello \x1b[34;45;1mwor\x1b[34;45;1mld", None)
    assert len(offsets) == 1
    assert _summary(offsets[0], True) == (6, 11, 4, 5)

    offsets, state = check("hello \x1b[34;45;1mwor\x1b[0mld", None)
    assert len(offsets) == 1
    assert _summary(offsets[0], True) == (6, 9, 4, 5)

    offsets, state = check(
        "hello \x1b[34;48;5;233;1mwo\x1b[38;5;161mr\x1b[0ml\x1b[38;5;161md", None
    )
    assert len(offsets) == 3
    assert _summary(offsets[0], True) == (6, 8, 4, 233)
    assert _summary(offsets[1], True) == (8, 9, 161, 233)
    assert _summary(offsets[2], False) == (10, 11, 161, -1)

    offsets, state = check(
        "hello \x1b[38;5;38;48;5;48;1mwor\x1b[38;5;48;48;5;38ml\x1b[0md", None
    )
    assert len(offsets) == 2
    assert _summary(offsets[0], True) == (6, 9, 38, 48)
    assert _summary(offsets[1], True) == (9, 10, 48, 38)

    offsets, state = check("hello \x1b[32;1mworld", state)
    assert len(offsets) == 1
    assert state.fg == 2 and state.bg == -1 and state.attr != 0
    assert _summary(offsets[0], True) == (6, 11, 2, -1)

    offsets, state = check("hello world", state)
    assert len(offsets) == 1
    assert state.fg == 2 and state.bg == -1 and state.attr != 0
    assert _summary(offsets[0], True) == (0, 11, 2, -1)

    offsets, state = check("hello \x1b[0;38;5;200;48;5;100mworld", state)
    assert len(offsets) == 2
    assert state.fg == 200 and state.bg == 100 and state.attr == 0
    assert _summary(offsets[0], True) == (0, 6, 2, -1)
    assert _summary(offsets[1], False) == (6, 11, 200, 100)


def test_extract_color_proc_sees_segments():
    seen = []

    def proc(segment, state):
        seen.append((segment, state))
        return True

    output, offsets, state = extract_color("a\x1b[1mb", None, proc)
    assert output == "ab"
    assert [segment for segment, _ in seen] == ["a", "b"]
    assert seen[0][1] is None
    assert seen[1][1] == AnsiState(attr=Attr.BOLD)
    assert offsets == [AnsiOffset(1, 2, AnsiState(attr=Attr.BOLD))]


def test_extract_color_proc_can_stop():
    result = extract_color("a\x1b[1mb", None, lambda segment, state: False)
    assert result == ("", None, None)


@pytest.mark.parametrize(
    "code, prev, expected",
    [
        ("\x1b[m", None, ""),
        ("\x1b[m", AnsiState(fg=0, bg=0, attr=Attr.BLINK, lbg=-1), ""),
        ("\x1b[31m", None, "\x1b[31;49m"),
        ("\x1b[41m", None, "\x1b[39;41m"),
        ("\x1b[92m", None, "\x1b[92;49m"),
        ("\x1b[102m", None, "\x1b[39;102m"),
        ("\x1b[31m", AnsiState(fg=4, bg=4, lbg=-1), "\x1b[31;44m"),
        (
            "\x1b[1;2;31m",
            AnsiState(fg=2, bg=-1, attr=Attr.REVERSE, lbg=-1),
            "\x1b[1;2;7;31;49m",
        ),
        ("\x1b[38;5;100;48;5;200m", None, "\x1b[38;5;100;48;5;200m"),
        ("\x1b[38:5:100:48:5:200m", None, "\x1b[38;5;100;48;5;200m"),
        ("\x1b[48;5;100;38;5;200m", None, "\x1b[38;5;200;48;5;100m"),
        ("\x1b[48;5;100;38;2;10;20;30;1m", None, "\x1b[1;38;2;10;20;30;48;5;100m"),
        (
            "\x1b[48;5;100;38;2;10;20;30;7m",
            AnsiState(fg=1, bg=1, attr=Attr.DIM | Attr.ITALIC, lbg=0),
            "\x1b[2;3;7;38;2;10;20;30;48;5;100m",
        ),
    ],
)
def test_ansi_code_string_conversion(code, prev, expected):
    assert interpret_code(code, prev).to_ansi() == expected


def test_interpret_code_erase_line_keeps_background():
    prev = AnsiState(fg=1, bg=3)
    state = interpret_code("\x1b[0K", prev)
    assert state.lbg == 3
    assert state.fg == 1


@pytest.mark.parametrize(
    "text, remaining, number",
    [
        ("123", "", 123),
        ("1a", "", None),
        ("1a;12", "12", None),
        ("12;a", "a", 12),
        ("-2", "", None),
    ],
)
def test_parse_ansi_code(text, remaining, number):
    num, _, rest = parse_ansi_code(text, "")
    assert num == number
    assert rest == remaining


def test_parse_ansi_code_reports_delimiter():
    assert parse_ansi_code("38:5:100", "") == (38, ":", "5:100")
    assert parse_ansi_code("5:100", ":") == (5, ":", "100")