"""
rawstr UTF-8 Walker

Splits a byte span into alternating runs of valid UTF-8 text and ill-formed
subparts, and renders spans lossily for display.

The boundaries are taken from CPython's own UTF-8 codec rather than from a
hand-written table. The codec reports each error as the "maximal subpart" of
an ill-formed sequence (Unicode ch. 3, U+FFFD substitution of maximal
subparts), which is exactly what the "replace" error handler substitutes:

    b"\\xf0\\x90\\x80"  -> one U+FFFD (truncated 4-byte sequence)
    b"\\xe0\\x80\\x80"  -> three U+FFFD (overlong: E0 must be followed by A0-BF)
    b"\\xed\\xa0\\x80"  -> three U+FFFD (surrogate code point)
    b"\\xff\\xfe"       -> two U+FFFD (invalid start bytes)

so rendering a chunk list and calling `render_lossy()` always agree.
"""

from __future__ import annotations

import codecs
import threading
from dataclasses import dataclass
from typing import Iterator, Optional


ENCODING = "utf-8"
REPLACEMENT_CHARACTER = "\ufffd"

# Error handler that records ill-formed subparts instead of replacing them
SPAN_HANDLER = "rawstr.spans"

_collector = threading.local()


@dataclass(frozen=True)
class Utf8Chunk:
    """A valid run of text followed by at most one ill-formed subpart.

    Attributes:
        start: Byte offset of the valid run within the walked span
        valid: Decoded text of the valid run (may be empty)
        invalid: The ill-formed bytes that follow it, 1-3 bytes long, or
            empty for a final chunk that reaches the end of the span cleanly
    """
    start: int
    valid: str
    invalid: bytes = b""

    @property
    def valid_len(self) -> int:
        """Length of the valid run in bytes."""
        return len(self.valid.encode(ENCODING))

    @property
    def end(self) -> int:
        return self.start + self.valid_len + len(self.invalid)

    @property
    def lossy(self) -> str:
        """The chunk as it appears in a lossy rendering."""
        if self.invalid:
            return self.valid + REPLACEMENT_CHARACTER
        return self.valid

    def __repr__(self) -> str:
        bad = f" + {self.invalid!r}" if self.invalid else ""
        return f"<Utf8Chunk [{self.start:#x}:{self.end:#x}] {self.valid!r}{bad}>"


def _record_span(exc: UnicodeError) -> tuple[str, int]:
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    _collector.spans.append((exc.start, exc.end))
    return "", exc.end


codecs.register_error(SPAN_HANDLER, _record_span)


def error_spans(data) -> list[tuple[int, int]]:
    """Byte ranges [start, end) of every ill-formed subpart in `data`.

    One pass of the codec: the decoder builds a single UnicodeDecodeError
    and moves its start/end for each later error, so the cost stays linear
    in the length of `data` however many errors it holds.
    """
    spans: list[tuple[int, int]] = []
    outer = getattr(_collector, "spans", None)
    _collector.spans = spans
    try:
        str(data, ENCODING, SPAN_HANDLER)
    finally:
        _collector.spans = outer
    return spans


def utf8_chunks(data) -> Iterator[Utf8Chunk]:
    """Walk `data` left to right, yielding one Utf8Chunk per error.

    An empty span yields nothing. A fully valid span yields a single chunk
    with no invalid part. Valid runs are decoded through memoryview slices
    between the error spans, so every byte is decoded at most twice.
    """
    view = memoryview(data)
    pos = 0
    for start, end in error_spans(view):
        text, _ = codecs.utf_8_decode(view[pos:start], "strict", True)
        yield Utf8Chunk(pos, text, view[start:end].tobytes())
        pos = end
    if pos < len(view):
        text, _ = codecs.utf_8_decode(view[pos:], "strict", True)
        yield Utf8Chunk(pos, text)


def first_error(data) -> Optional[tuple[int, Optional[int]]]:
    """Locate the first ill-formed sequence in `data`.

    Returns:
        None if `data` is entirely valid UTF-8, otherwise a tuple
        (valid_up_to, error_len). error_len is None when the span merely
        stops in the middle of a sequence that could still be completed.
    """
    view = memoryview(data)
    try:
        _, consumed = codecs.utf_8_decode(view, "strict", False)
    except UnicodeDecodeError as exc:
        return exc.start, exc.end - exc.start
    if consumed < len(view):
        return consumed, None
    return None


def render_lossy(data) -> str:
    """Decode `data`, substituting U+FFFD for every ill-formed subpart.

    Never raises for any byte content.
    """
    return str(data, ENCODING, "replace")


def decode_strict(data) -> str:
    """Decode `data` as UTF-8, raising UnicodeDecodeError on any error."""
    return str(data, ENCODING, "strict")
