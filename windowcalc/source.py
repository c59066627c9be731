"""Character source shared by the lexer and every nested evaluation.

Reads strictly one character at a time. There is no pushback: once a
character has been read, the lexer must act on it.
"""

from __future__ import annotations

import io
from typing import TextIO, Union


class CharSource:
    """One-character-at-a-time reader over a string or a text stream."""

    def __init__(self, stream: Union[str, TextIO]) -> None:
        if isinstance(stream, str):
            stream = io.StringIO(stream)
        self._stream = stream
        self.position = 0

    def read(self) -> str:
        """Return the next character, or "" at end of input."""
        c = self._stream.read(1)
        if c:
            self.position += 1
        return c
