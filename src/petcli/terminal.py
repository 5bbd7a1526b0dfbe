"""Terminal access for the interactive session.

``raw_input_mode`` puts stdin into cbreak mode (keys arrive one at a time,
without echo) for the duration of a ``with`` block and always restores the
saved attributes on the way out. Output post-processing is left on so that
rich can keep drawing with plain newlines.

``KeyReader`` supplies the ``poll``/``read_key`` pair used by
:class:`petcli.events.EventSource`. It reads the file descriptor directly
and never touches the terminal attributes, so bytes already waiting in the
input queue are never flushed.
"""

from __future__ import annotations

import codecs
import os
import select
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO, Tuple

from readchar import key

from .shared import bug_msg

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"

KEY_UP = key.UP
KEY_DOWN = key.DOWN

# application cursor mode sends SS3 instead of CSI for the arrows
_SS3_KEYS = {
    "\x1bOA": key.UP,
    "\x1bOB": key.DOWN,
    "\x1bOC": key.RIGHT,
    "\x1bOD": key.LEFT,
}

READ_SIZE = 64


class TerminalError(Exception):
    """Entering, leaving or reading the terminal failed."""


@contextmanager
def raw_input_mode(
    stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
) -> Iterator[None]:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    try:
        fd = stdin.fileno()
        saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
    except (OSError, ValueError, termios.error) as e:
        raise TerminalError(f"cannot enter raw input mode: {e}") from e

    stdout.write(_HIDE_CURSOR)
    stdout.flush()
    failed = False
    try:
        yield
    except BaseException:
        failed = True
        raise
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except termios.error as e:
            if not failed:
                raise TerminalError(f"cannot restore terminal mode: {e}") from e
            # the error already on its way out is the one to report
            bug_msg(f"cannot restore terminal mode: {e}")
        finally:
            stdout.write(_SHOW_CURSOR)
            stdout.flush()


def split_key(buffer: str) -> Tuple[str, str]:
    """Take one key off the front of ``buffer``; return ``(key, rest)``.

    Escape sequences (``ESC [ ... final`` and ``ESC O final``) count as a
    single key and use the ``readchar.key`` names.
    """
    if buffer[:2] in ("\x1b[", "\x1bO"):
        for i in range(2, len(buffer)):
            if "@" <= buffer[i] <= "~":
                seq = buffer[: i + 1]
                return _SS3_KEYS.get(seq, seq), buffer[i + 1 :]
        return buffer, ""
    return buffer[0], buffer[1:]


class KeyReader:
    """
    Read keys from a terminal file descriptor.

    Everything ``os.read`` returns is decoded and kept, so several keys
    arriving in one read are handed out one per ``read_key`` call.
    """

    def __init__(self, fd: Optional[int] = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def poll(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for a key to become readable."""
        if self._pending:
            return True
        try:
            readable, _, _ = select.select([self.fd], [], [], timeout)
        except (OSError, ValueError) as e:
            raise TerminalError(f"cannot poll input: {e}") from e
        return bool(readable)

    def read_key(self) -> str:
        while not self._pending:
            try:
                data = os.read(self.fd, READ_SIZE)
            except OSError as e:
                raise TerminalError(f"cannot read key: {e}") from e
            if not data:
                raise TerminalError("input closed")
            self._pending += self._decoder.decode(data)
        found, self._pending = split_key(self._pending)
        return found
