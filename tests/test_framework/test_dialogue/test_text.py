import pytest
from roots_framework.dialogue.text import ROW_BREAK, split_lines, wrap_text, unwrap_text, rows_of

def test_split_drops_empty_entries():
    assert split_lines("a\n\nb\n") == ["a", "b"]

def test_split_none_and_empty():
    assert split_lines(None) == []
    assert split_lines("") == []
    assert split_lines("\n\n") == []

def test_split_keeps_inner_whitespace():
    assert split_lines("  indented \nnext") == ["  indented ", "next"]

def test_split_handles_crlf():
    assert split_lines("Hello there\r\nGeneral Kenobi\r\n") == ["Hello there", "General Kenobi"]
    assert split_lines("\r\n") == []

def test_split_is_idempotent():
    raw = "one\ntwo\n\nthree"
    assert split_lines(raw) == split_lines(raw)

def test_wrap_short_line_unchanged():
    assert wrap_text("Hello there", 40) == "Hello there"
    assert wrap_text("", 10) == ""
    assert wrap_text("exactly10!", 10) == "exactly10!"

def test_wrap_quick_brown_fox():
    assert wrap_text("the quick brown fox", 10) == "the quick\nbrown fox"

def test_wrap_long_word_gets_own_row():
    result = wrap_text("a supercalifragilistic word", 10)
    assert result == "a\nsupercalifragilistic\nword"

def test_wrap_rows_respect_width():
    line = "It was a bright cold day in April and the clocks were striking thirteen"
    for width in (10, 15, 22, 40):
        rows = rows_of(wrap_text(line, width))
        assert all(len(row) <= width for row in rows)
        assert "" not in rows

def test_wrap_is_reversible():
    line = "It was a bright cold day in April and the clocks were striking thirteen"
    wrapped = wrap_text(line, 12)
    assert unwrap_text(wrapped) == line
    # Re-wrapping the stripped text groups the words identically
    assert wrap_text(unwrap_text(wrapped), 12) == wrapped

def test_wrap_is_deterministic():
    line = "the same words wrapped twice give the same rows"
    assert wrap_text(line, 11) == wrap_text(line, 11)

def test_wrap_keeps_repeated_spaces():
    line = "one  two   three four"
    wrapped = wrap_text(line, 9)

    assert wrapped == ROW_BREAK.join(["one  two ", "three", "four"])
    assert "" not in rows_of(wrapped)
    assert unwrap_text(wrapped).split(" ")[:3] == ["one", "", "two"]
    assert unwrap_text(wrapped).split() == line.split()

def test_wrap_spaces_only_line():
    assert wrap_text("      ", 3) == ""

def test_wrap_invalid_width():
    with pytest.raises(ValueError):
        wrap_text("anything", 0)
