"""Tests for key decoding and raw mode handling."""

import io
import os
import termios

import pytest
from animanga_tui.exceptions import InputError
from animanga_tui.keys import Action, action_for
from animanga_tui.terminal import TerminalKeyReader, decode_key, raw_mode


@pytest.mark.parametrize(
    "data, key",
    [
        (b"a", "a"),
        (b"+", "+"),
        (b"\x1b[A", "up"),
        (b"\x1b[B", "down"),
        (b"\x1b[C", "right"),
        (b"\x1b[D", "left"),
        (b"\x1bOA", "up"),
        (b"\x1b[3~", "delete"),
        (b"\x1b", "esc"),
        (b"\r", "enter"),
        (b"\t", "tab"),
        (b"\x7f", "backspace"),
        ("é".encode(), "é"),
        (b"\x1b[99~", ""),
        (b"\x01", ""),
        (b"", ""),
    ],
)
def test_decode_key(data, key):
    """Test byte sequences decode to key names."""
    assert decode_key(data) == key


def test_keymap():
    """Test the bindings, with q reserved for quit."""
    assert action_for("a") == Action.SELECT_ANIME
    assert action_for("m") == Action.SELECT_MANGA
    assert action_for("q") == Action.QUIT
    assert action_for("d") == Action.REMOVE
    assert action_for("delete") == Action.REMOVE
    assert action_for("+") == Action.INCREMENT
    assert action_for("left") == Action.CATEGORY_LEFT
    assert action_for("z") is None


def test_raw_mode_requires_a_terminal():
    """Test non-tty input is refused."""
    with pytest.raises(InputError):
        with raw_mode(io.StringIO()):
            pass


@pytest.fixture
def pty_stream():
    master, slave = os.openpty()
    stream = os.fdopen(slave, "r")
    yield master, stream
    stream.close()
    os.close(master)


def test_raw_mode_restores_on_error(pty_stream):
    """Test terminal attributes come back even when the block raises."""
    _, stream = pty_stream
    before = termios.tcgetattr(stream.fileno())

    with pytest.raises(RuntimeError):
        with raw_mode(stream):
            during = termios.tcgetattr(stream.fileno())
            assert not during[3] & termios.ICANON
            raise RuntimeError("boom")

    assert termios.tcgetattr(stream.fileno()) == before


def test_reader_decodes_arrow_from_pty(pty_stream):
    """Test the reader joins an escape sequence into one key."""
    master, stream = pty_stream
    reader = TerminalKeyReader(stream)

    with raw_mode(stream):
        assert not reader.poll(0)
        os.write(master, b"\x1b[B")
        assert reader.poll(1.0)
        assert reader.read() == "down"
        os.write(master, b"x")
        assert reader.poll(1.0)
        assert reader.read() == "x"


def read_keys(reader):
    keys = []
    while reader.poll(0.1):
        keys.append(reader.read())
    return keys


@pytest.mark.parametrize(
    "data, keys",
    [
        (b"\x1b[B\x1b[B", ["down", "down"]),
        (b"\x1b[A\x1b[3~j", ["up", "delete", "j"]),
        (b"\x1bx", ["esc", "x"]),
        (b"\x1bOC+", ["right", "+"]),
    ],
)
def test_reader_splits_buffered_keys(pty_stream, data, keys):
    """Test keys that arrive together are each decoded on their own."""
    master, stream = pty_stream
    reader = TerminalKeyReader(stream)

    with raw_mode(stream):
        os.write(master, data)
        assert read_keys(reader) == keys
