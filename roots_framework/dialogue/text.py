"""
Text utilities for dialogue scripts.

split_lines() turns a raw script into display lines; wrap_text() breaks one
line into fixed-width rows joined by ROW_BREAK. Both are pure.

    >>> split_lines("a\\n\\nb\\n")
    ['a', 'b']
    >>> wrap_text("the quick brown fox", 10)
    'the quick\\nbrown fox'
"""

from __future__ import annotations

from typing import Optional

ROW_BREAK = "\n"


def split_lines(raw: Optional[str]) -> list[str]:
    """
    Split raw dialogue text into non-empty lines.

    Splits on line feeds only and does not trim, with one deliberate
    exception: a trailing carriage return (CRLF sources) is dropped before
    the emptiness check, so a Windows-authored script splits like a Unix
    one. All other whitespace is kept as is.

    Args:
        raw: Script text, or None

    Returns:
        Lines in order, never containing an empty string
    """
    if not raw:
        return []

    lines = []
    for entry in raw.split("\n"):
        if entry.endswith("\r"):
            entry = entry[:-1]
        if entry:
            lines.append(entry)
    return lines


def wrap_text(line: str, max_width: int) -> str:
    """
    Greedy word wrap of a single line.

    Words are separated by single spaces, so a run of spaces yields empty
    words that keep the spacing inside a row. A word longer than max_width
    is never split; it gets a row of its own. No row is ever empty.

    Args:
        line: Text to wrap
        max_width: Maximum characters per row

    Returns:
        Rows joined by ROW_BREAK, or line unchanged if it already fits

    Raises:
        ValueError: If max_width is not positive
    """
    if max_width <= 0:
        raise ValueError(f"max_width must be positive, got {max_width}")

    if len(line) <= max_width:
        return line

    rows: list[str] = []
    current = ""

    for word in line.split(" "):
        # Empty words from runs of spaces stay in the row
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_width:
            current = f"{current} {word}"
        else:
            rows.append(current)
            current = word

    if current:
        rows.append(current)

    return ROW_BREAK.join(rows)


def unwrap_text(text: str) -> str:
    """Join wrapped rows back into a single line."""
    return " ".join(row for row in text.split(ROW_BREAK) if row)


def rows_of(text: str) -> list[str]:
    """Rows of a wrapped string."""
    return text.split(ROW_BREAK) if text else []
