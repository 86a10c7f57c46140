# fzfind

The building blocks of a command-line fuzzy finder as a pure Python library:
matching algorithms and their scoring, folding of accented letters, ANSI
escape-sequence stripping, item storage, result merging and a query history
file. It uses only the standard library.

## Install

```
pip install fzfind
```

To run the tests:

```
pip install "fzfind[test]"
pytest
```

## Modules

### `fzfind.algo`: matching

`fuzzy_match_v1`, `fuzzy_match_v2`, `exact_match_naive`, `prefix_match`,
`suffix_match` and `equal_match` all take the same arguments:

```
(case_sensitive, normalize, forward, text, pattern, with_pos=False, scheme=DEFAULT_SCHEME)
```

Each returns a `MatchResult` (`start`, `end`, `score`, `positions`) or `None`
when the pattern does not match. The pattern must already be lower-cased when
matching case-insensitively, and already normalized when `normalize` is set.

- `fuzzy_match_v1` finds the first fuzzy occurrence, then scans backwards for
  a shorter one.
- `fuzzy_match_v2` fills a score matrix to find the highest-scoring alignment.
  When the text length times the pattern length is larger than
  `constants.SLAB16_SIZE`, it uses `fuzzy_match_v1` instead. Positions are
  traced only when `with_pos` is set; the start offset is exact only then.
- `exact_match_naive` finds the occurrence whose first character has the best
  bonus.
- `prefix_match` and `suffix_match` ignore leading or trailing white space in
  the text unless the pattern itself starts or ends with white space.
- `equal_match` matches when the text, stripped of surrounding white space,
  equals the pattern. An empty pattern never matches.

`forward` chooses which occurrence wins when scores tie (the first when true,
the last when false).

```python
from fzfind.algo import fuzzy_match_v2
from fzfind.scoring import scheme_for

scheme = scheme_for("default")
result = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True, scheme)
print(result.start, result.end, result.score, result.positions)
```

### `fzfind.scoring`: character classes and bonuses

`CharClass`, `char_class_of`, `bonus_for`, `bonus_at` and `calculate_score`,
plus the score constants (`SCORE_MATCH`, `BONUS_BOUNDARY`, `BONUS_CAMEL123`
and so on). Bonuses depend on a `Scheme`; `scheme_for(name)` returns one of
`"default"`, `"path"` or `"history"` and raises `ValueError` for anything
else.

### `fzfind.normalize`: latin letter folding

`normalize_rune(char)` folds one accented latin letter to its plain form
(and raises `ValueError` if given more than one character);
`normalize_text(text)` folds a whole string.

```python
from fzfind.normalize import normalize_text

normalize_text("Danço")  # "Danco"
```

### `fzfind.ansi`: escape sequences and colors

`extract_color(text, state=None, proc=None)` strips escape sequences and
returns the plain text, a list of `AnsiOffset` spans (or `None` if nothing is
colored) and the `AnsiState` in effect at the end, which can be passed in for
the next line. `proc`, if given, is called with each plain segment and the
current state; returning `False` stops processing.

```python
from fzfind.ansi import extract_color

text, offsets, state = extract_color("hello \x1b[32;1mworld")
print(text)     # hello world
print(offsets)  # one AnsiOffset from 6 to 11, fg=2, attr=Attr.BOLD
```

Also available: `next_ansi_escape_sequence`, `parse_ansi_code`,
`interpret_code`, the `Attr` flags, and `AnsiState.to_ansi()`, which renders
a state back into an SGR sequence.

### `fzfind.item`, `fzfind.chunklist`, `fzfind.cache`: storage

- `Item(text, index=0, orig_text=None, colors=[])` is one input line;
  `as_string(strip_ansi)` returns the original line.
- `ChunkList(builder)` stores items in `Chunk`s of `constants.CHUNK_SIZE`.
  `builder` turns a line into an `Item`, or returns `None` to drop it.
  `push`, `clear` and `snapshot` are thread-safe; `snapshot()` returns a list
  of chunks that later pushes do not change, and the item count.
  `count_items(chunks)` counts the items in such a list.
- `ChunkCache` remembers results per full chunk and query (`add`, `lookup`,
  `clear`); `search` returns the results of the longest cached prefix or
  suffix of a query. Results longer than `constants.QUERY_CACHE_MAX` are not
  kept.

```python
from fzfind.chunklist import ChunkList
from fzfind.item import Item

items = ChunkList(lambda line: Item(line))
items.push("hello")
chunks, count = items.snapshot()
```

### `fzfind.merger`: one view over partial results

`Merger(lists, sorted=False, tac=False, revision=0, pattern=None, key=None)`
presents several lists as one. With `sorted`, each list must already be
ordered by `key`, and results come out in global order, merged lazily.
Otherwise the lists are concatenated, reversed with `tac`. `empty_merger`
and `pass_merger(chunks, tac, revision)` build the special cases; the latter
yields chunk items in input order. `get` (or indexing), `first`, `find_index`
and `cacheable` are available; out-of-range access raises `IndexError`.

```python
from fzfind.merger import Merger

merged = Merger([[1, 4], [2, 3]], sorted=True)
[merged[i] for i in range(len(merged))]  # [1, 2, 3, 4]
```

### `fzfind.history`: query history

`History(path, max_size)` reads a history file, creating it if missing, and
keeps at most `max_size` entries. `append` saves a new entry, `previous` and
`next` move the cursor, `current` returns the entry under it and `override`
edits it in memory. Read and write failures raise `HistoryError`.

### `fzfind.constants`

Limits and timings shared by the modules, the `EventType` and `ExitCode`
enums.

## What it does not do

This is a library, not a finder. There is no command-line program, no
terminal interface, no reading of input from a command or standard input, no
query-syntax parser and no background matcher; callers combine the pieces
above themselves.