"""Terminal input: raw (cbreak) mode and key decoding."""

import contextlib
import logging
import os
import select
import sys
import termios
import tty
from typing import Iterator, Optional, TextIO

from .exceptions import InputError

logger = logging.getLogger(__name__)

# Escape sequences for the keys the UI uses (without the leading ESC)
ESCAPE_SEQUENCES = {
    b"[A": "up",
    b"[B": "down",
    b"[C": "right",
    b"[D": "left",
    b"OA": "up",
    b"OB": "down",
    b"OC": "right",
    b"OD": "left",
    b"[3~": "delete",
    b"[H": "home",
    b"[F": "end",
}

CONTROL_KEYS = {
    b"\r": "enter",
    b"\n": "enter",
    b"\t": "tab",
    b"\x7f": "backspace",
    b"\x08": "backspace",
    b"\x1b": "esc",
}

# Time to wait for the rest of an escape sequence after ESC
ESCAPE_TIMEOUT = 0.02


def decode_key(data: bytes) -> str:
    """Translate the bytes of one key press into a key name.

    Printable characters map to themselves; special keys map to names
    such as "up", "delete" or "enter". Unknown sequences decode to "".
    """
    if not data:
        return ""
    if data in CONTROL_KEYS:
        return CONTROL_KEYS[data]
    if data.startswith(b"\x1b"):
        return ESCAPE_SEQUENCES.get(data[1:], "")
    text = data.decode("utf-8", errors="ignore")
    return text if text.isprintable() else ""


@contextlib.contextmanager
def raw_mode(stream: Optional[TextIO] = None) -> Iterator[None]:
    """Put the terminal in cbreak mode for the duration of the block.

    The previous terminal attributes are restored on every exit path,
    including exceptions raised inside the block.
    """
    stream = stream or sys.stdin
    if not stream.isatty():
        raise InputError("an interactive terminal is required")
    fd = stream.fileno()
    try:
        saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
    except termios.error as e:
        raise InputError(f"cannot switch the terminal to raw mode: {e}", e) from e
    logger.debug("Terminal switched to raw mode")
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("Terminal mode restored")


class TerminalKeyReader:
    """Reads single key presses from a terminal file descriptor.

    Bytes are consumed one key at a time: an escape sequence ends at its
    final byte, and anything read past the current key is kept for the
    next call. Errors from select() or read() propagate to the caller.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self._pending = bytearray()

    @property
    def fd(self) -> int:
        return (self.stream or sys.stdin).fileno()

    def poll(self, timeout: float) -> bool:
        """Wait up to timeout seconds for input to become available."""
        if self._pending:
            return True
        ready, _, _ = select.select([self.fd], [], [], timeout)
        return bool(ready)

    def _read_byte(self) -> bytes:
        if self._pending:
            byte = bytes(self._pending[:1])
            del self._pending[:1]
            return byte
        data = os.read(self.fd, 1)
        if not data:
            raise EOFError("terminal input closed")
        return data

    def _read_escape(self) -> bytes:
        """The bytes following ESC, up to the final byte of the sequence."""
        if not self.poll(ESCAPE_TIMEOUT):
            return b""
        introducer = self._read_byte()
        if introducer == b"O":
            return introducer + (self._read_byte() if self.poll(ESCAPE_TIMEOUT) else b"")
        if introducer != b"[":
            # ESC followed by an ordinary key; that key is read next time
            self._pending[:0] = introducer
            return b""
        sequence = introducer
        while self.poll(ESCAPE_TIMEOUT):
            byte = self._read_byte()
            sequence += byte
            if 0x40 <= byte[0] <= 0x7E:
                break
        return sequence

    def read(self) -> str:
        """Read and decode one key press."""
        data = self._read_byte()
        if data == b"\x1b":
            data += self._read_escape()
        elif data[0] >= 0xC0:
            # Rest of a multi-byte UTF-8 character
            for _ in range(3 if data[0] >= 0xF0 else 2 if data[0] >= 0xE0 else 1):
                data += self._read_byte()
        return decode_key(data)
