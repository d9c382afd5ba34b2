"""Single-keypress input for the terminal frontend.

Keys are read without waiting for Enter and translated into action
names.  macOS / Linux go through tty+termios, Windows through msvcrt.
"""

from __future__ import annotations

import os
import sys

# -- key mapping ---------------------------------------------------------------

_ACTIONS: dict[str, tuple[str, ...]] = {
    "up": ("w", "W", "k"),
    "down": ("s", "S", "j"),
    "click": ("c", "C", " "),
    "rotate": ("r", "R"),
    "edit": ("e", "E"),
    "move": ("m", "M"),
    "hint": ("n", "N", "?"),
    "pause": ("p", "P"),
    "quit": ("q", "Q", "\x03"),
    "enter": ("\r", "\n"),
}

_KEY_MAP: dict[str, str] = {ch: action for action, keys in _ACTIONS.items() for ch in keys}

# Final byte of an ``ESC [ x`` arrow sequence.
_ARROWS: dict[str, str] = {"A": "up", "B": "down", "C": "right", "D": "left"}


def _translate(ch: str) -> str:
    """Map a raw character to an action; unmapped printables pass through."""
    if ch in _KEY_MAP:
        return _KEY_MAP[ch]
    return ch if ch.isprintable() else ""


# -- platform readers ------------------------------------------------------------


def _read_char_unix() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        return sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _read_char_windows() -> str:
    import msvcrt  # type: ignore[import-not-found]

    return msvcrt.getch().decode("utf-8", errors="ignore")


_read_char = _read_char_windows if os.name == "nt" else _read_char_unix


# -- public API ----------------------------------------------------------------


def read_key() -> str:
    """Block for one keypress and return its action name.

    Actions: "up", "down", "left", "right", "click", "rotate", "edit",
    "move", "hint", "pause", "quit", "enter"; any other printable
    character is returned as-is ("1", "2", "3" pick power-ups), and
    "" means the key was not recognised.
    """
    ch = _read_char()
    if ch != "\x1b":
        return _translate(ch)
    if _read_char() == "[":
        return _ARROWS.get(_read_char(), "")
    return "quit"  # bare Escape


def read_key_timeout(timeout: float) -> str | None:
    """Like :func:`read_key`, but give up after *timeout* seconds.

    Returns ``None`` when nothing was pressed, which lets the caller
    pump its clock between keys.
    """
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found]
        import time

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if msvcrt.kbhit():
                return read_key()
            time.sleep(0.02)
        return None

    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)

    def next_char(wait: float) -> str | None:
        ready, _, _ = select.select([fd], [], [], wait)
        # os.read is unbuffered, so select keeps seeing the rest of an escape sequence.
        return os.read(fd, 1).decode("utf-8", errors="ignore") if ready else None

    try:
        tty.setraw(fd)
        ch = next_char(timeout)
        if ch is None:
            return None
        if ch != "\x1b":
            return _translate(ch)
        if next_char(0.1) != "[":
            return "quit"
        final = next_char(0.1)
        return _ARROWS.get(final, "") if final else ""
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
