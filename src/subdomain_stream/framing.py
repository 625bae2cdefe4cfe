"""Line framing for chunked text streams."""

from __future__ import annotations

import codecs


class LineFramer:
    """Turn arbitrarily split chunks into complete lines.

    The last piece after the final newline is kept until more data arrives,
    so the same text yields the same lines however it is chunked.
    Undecodable bytes become U+FFFD instead of raising.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[str]:
        """Consume one chunk and return the lines it completed, in order."""
        if isinstance(chunk, (bytes, bytearray)):
            text = self._decoder.decode(bytes(chunk))
        else:
            text = chunk
        if not text:
            return []
        pieces = (self._buffer + text).split("\n")
        self._buffer = pieces.pop()
        return [_strip_cr(piece) for piece in pieces]

    def flush(self) -> list[str]:
        """Return any unterminated trailing line at end of stream."""
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        if not tail:
            return []
        return [_strip_cr(tail)]


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line
