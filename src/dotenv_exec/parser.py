"""Parse the contents of `.env` files.

## Format

```sh
#!/usr/bin/env bash  (shebang lines are comments)
# full-line comments are ignored
SIMPLE=value              # inline comments are stripped
QUOTED="keep # this"      # ...except inside quotes
ESCAPED="tab\\there"      # escapes are decoded in quoted values
MULTILINE="first line
second line"
CONTINUED=a long \\
value
```

Entries that can't be parsed (no `=`, an empty key, or an empty value) are skipped; a single bad line never
prevents the rest of the file from loading.

>>> parse('GREETING="Hello, World!"  # say hi')
{'GREETING': 'Hello, World!'}
"""

from __future__ import annotations

import logging
import typing

__all__ = [
    'MAX_CONTINUATION_LINES',
    'QUOTES',
    'Entry',
    'decode_escapes',
    'invalid_reason',
    'parse',
    'parse_entry',
    'strip_inline_comment',
]

logger = logging.getLogger(__name__)

ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '\\': '\\', '"': '"', "'": "'"}
"""Map the character following a backslash to the character it decodes to."""

MAX_CONTINUATION_LINES = 100
"""Give up on an unterminated multiline value (or continuation) after this many additional lines."""

QUOTES = ('"', "'")


class Entry(typing.NamedTuple):
    """A single parsed variable, and the number of physical lines it was read from."""

    key: str
    value: str
    consumed: int = 1


def split_lines(text: str) -> list[str]:
    r"""Split `text` on newlines; a carriage return is dropped along with its `\n`.

    >>> split_lines('A=1\r\nB=2\n')
    ['A=1', 'B=2']
    """
    lines = text.split('\n')
    if lines and not lines[-1]:
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def strip_inline_comment(line: str) -> str:
    """Remove a trailing `# comment` from the line, unless the `#` is quoted.

    >>> strip_inline_comment('KEY=value  # comment')
    'KEY=value'
    >>> strip_inline_comment('URL="https://example.com#section"')
    'URL="https://example.com#section"'
    >>> strip_inline_comment('''CMD="echo 'Hello # World'"  # comment''')
    'CMD="echo \\'Hello # World\\'"'
    """
    quote: str | None = None
    escaped = False

    for idx, char in enumerate(line):
        if escaped:
            escaped = False
        elif quote:
            if char == '\\':
                escaped = True
            elif char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
        elif char == '#':
            return line[:idx].rstrip()

    return line


def count_trailing_backslashes(text: str) -> int:
    """Count the consecutive backslashes at the end of `text`."""
    return len(text) - len(text.rstrip('\\'))


def ends_with_unescaped_quote(text: str, quote: str) -> bool:
    r"""Check whether `text` ends with a `quote` that isn't escaped by a backslash.

    >>> ends_with_unescaped_quote('"done"', '"')
    True
    >>> ends_with_unescaped_quote(r'"not done\"', '"')
    False
    >>> ends_with_unescaped_quote(r'"done\\"', '"')
    True
    """
    if not text.endswith(quote):
        return False
    return count_trailing_backslashes(text[:-1]) % 2 == 0


def find_unescaped_quote(text: str, quote: str) -> int | None:
    """Return the index of the first `quote` in `text` not preceded by an escaping backslash."""
    escaped = False
    for idx, char in enumerate(text):
        if escaped:
            escaped = False
        elif char == '\\':
            escaped = True
        elif char == quote:
            return idx
    return None


def decode_escapes(text: str) -> str:
    r"""Decode the backslash escapes supported in quoted values.

    Unrecognized escapes are kept as-is:

    >>> decode_escapes(r'Line 1\nLine 2\tand a \d')
    'Line 1\nLine 2\tand a \\d'
    """
    out: list[str] = []
    idx = 0
    while idx < len(text):
        char = text[idx]
        if char == '\\' and idx + 1 < len(text) and text[idx + 1] in ESCAPES:
            out.append(ESCAPES[text[idx + 1]])
            idx += 2
            continue
        out.append(char)
        idx += 1
    return ''.join(out)


def _unquote(value: str) -> str | None:
    """Strip matching outer quotes from `value`; return `None` if it isn't quoted."""
    if len(value) > 1 and value[0] in QUOTES and value[-1] == value[0]:
        return value[1:-1].strip()
    return None


def _read_multiline(key: str, value: str, lookahead: typing.Sequence[str]) -> Entry | None:
    """Read a quoted value whose closing quote is on a later line."""
    quote = value[0]
    parts = [value[1:]]

    for consumed, line in enumerate(lookahead[:MAX_CONTINUATION_LINES], start=2):
        end = find_unescaped_quote(line, quote)
        if end is not None:
            parts.append(line[:end])
            return Entry(key, decode_escapes('\n'.join(parts)), consumed)
        parts.append(line)

    return None


def _read_continuation(key: str, value: str, lookahead: typing.Sequence[str]) -> Entry:
    """Join a value split across lines with trailing backslashes."""
    parts = [value[:-1]]
    consumed = 1

    for raw in lookahead:
        consumed += 1
        line = raw.strip()
        if count_trailing_backslashes(line) % 2:
            parts.append(line[:-1])
        else:
            parts.append(line)
            break

        if consumed > MAX_CONTINUATION_LINES:
            break

    return Entry(key, decode_escapes(''.join(parts)), consumed)


def invalid_reason(line: str) -> str:
    """Describe why `line` does not start a valid entry.

    >>> invalid_reason('INVALID')
    'missing "="'
    >>> invalid_reason('MSG="never closed')
    'unterminated quote'
    """
    key, sep, value = line.partition('=')
    if not sep:
        return 'missing "="'
    if not key.strip():
        return 'empty key'
    if not value.strip():
        return 'empty value'
    return 'unterminated quote'


def parse_entry(first: str, lookahead: typing.Sequence[str]) -> Entry | None:
    """Parse the entry starting at `first`, reading further lines from `lookahead` when the value spans lines.

    >>> parse_entry('KEY = VALUE', [])
    Entry(key='KEY', value='VALUE', consumed=1)
    >>> parse_entry('MSG="one', ['two"', 'NEXT=1'])
    Entry(key='MSG', value='one\\ntwo', consumed=2)
    >>> parse_entry('NOTHING=', []) is None
    True
    """
    key, sep, value = first.partition('=')
    key, value = key.strip(), value.strip()
    if not (sep and key and value):
        return None

    if value[0] in QUOTES and not ends_with_unescaped_quote(value, value[0]):
        return _read_multiline(key, value, lookahead)

    if count_trailing_backslashes(value) % 2:
        return _read_continuation(key, value, lookahead)

    unquoted = _unquote(value)
    if unquoted is None:
        return Entry(key, value)
    return Entry(key, decode_escapes(unquoted))


def parse(text: str) -> dict[str, str]:
    """Parse the contents of a `.env` file into a `dict` of variables.

    When a variable is defined more than once, the last definition wins:

    >>> parse('''
    ... # comment
    ... KEY=first
    ... KEY=second
    ... INVALID
    ... ''')
    {'KEY': 'second'}
    """
    variables: dict[str, str] = {}
    lines = split_lines(text)
    idx = 0

    while idx < len(lines):
        line = lines[idx].strip()
        if not line or line.startswith('#'):
            idx += 1
            continue

        line = strip_inline_comment(line)
        if not line:
            idx += 1
            continue

        entry = parse_entry(line, lines[idx + 1 : idx + 1 + MAX_CONTINUATION_LINES])
        if entry is None:
            logger.debug('skipping invalid entry on line %d: %s', idx + 1, invalid_reason(line))
            idx += 1
            continue

        variables[entry.key] = entry.value
        idx += entry.consumed

    return variables


logger.debug('successfully imported %s', __name__)
