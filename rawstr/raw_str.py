"""
rawstr View: RawStr

RawStr is a borrowed, read-only view over a byte span that may or may not be
valid UTF-8. It never validates at construction and never copies: it holds a
memoryview onto whatever object owns the bytes.

Everything text-like is defined here once:
- Rendering: str() / format() decode lossily, repr() quotes that rendering
- Comparison: ==, <, hash() work on the raw bytes, never on the rendering
- Conversion: to_text() is the only operation that demands valid UTF-8

RawString (the owned buffer) builds a temporary RawStr whenever it needs any
of the above.

Usage:
    name = RawStr(b"caf\\xe9.txt")    # Latin-1 bytes from a legacy system
    print(name)                       # caf�.txt
    name.is_utf8()                    # False
    name == RawStr(b"caf\\xe8.txt")   # False, even though both render alike
"""

from __future__ import annotations

import operator
from functools import total_ordering
from typing import Iterator, Optional, Union

from rawstr.errors import InvalidEncoding, OutOfBounds
from rawstr.utf8 import (
    ENCODING,
    Utf8Chunk,
    decode_strict,
    first_error,
    render_lossy,
    utf8_chunks,
)


def byte_view(data) -> memoryview:
    """Borrow `data` as a flat memoryview of unsigned bytes.

    Accepts RawStr, RawString, str (encoded as UTF-8) and any object that
    exports a C-contiguous buffer.
    """
    from rawstr.raw_string import RawString

    if isinstance(data, RawStr):
        return memoryview(data._view)
    if isinstance(data, RawString):
        return memoryview(data._buf)
    if isinstance(data, str):
        return memoryview(data.encode(ENCODING))
    view = memoryview(data)
    if not view.c_contiguous:
        raise TypeError("RawStr requires a contiguous buffer")
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _comparable(other) -> Optional[Union[bytes, bytearray, memoryview]]:
    """Bytes-like stand-in for `other`, or None if it is not byte data."""
    from rawstr.raw_string import RawString

    if isinstance(other, RawStr):
        return other._view
    if isinstance(other, RawString):
        return other._buf
    if isinstance(other, (bytes, bytearray)):
        return other
    if isinstance(other, memoryview):
        if not other.c_contiguous:
            return other.tobytes()
        return byte_view(other)
    return None


@total_ordering
class RawStr:
    """A borrowed view over bytes that behaves like a string for humans.

    The view stays valid for as long as the exporting object lives. Over a
    bytearray (including the buffer inside a RawString) the view holds a
    buffer export, which stops the owner from being resized underneath it;
    call release() or use the view as a context manager to end the borrow
    early:

        with owned.as_raw_str() as view:
            log.info("got %s", view)
        owned.extend(b"more")   # fine, the borrow has ended
    """

    __slots__ = ("_view", "__weakref__")

    def __init__(self, data=b"") -> None:
        self._view = byte_view(data)

    # ------------------------------------------------------------------
    # Size and raw access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._view)

    def is_empty(self) -> bool:
        return len(self._view) == 0

    def as_bytes(self) -> memoryview:
        """The underlying span as a read-only memoryview (no copy)."""
        return self._view.toreadonly()

    def __bytes__(self) -> bytes:
        return self._view.tobytes()

    def __iter__(self) -> Iterator[int]:
        return iter(self._view)

    def to_raw_string(self):
        """Copy the span into a new, independently owned RawString."""
        from rawstr.raw_string import RawString

        return RawString(self._view)

    # ------------------------------------------------------------------
    # Slicing
    # ------------------------------------------------------------------

    def __getitem__(self, key):
        if isinstance(key, slice):
            if key.step not in (None, 1):
                raise ValueError("RawStr slices must be contiguous (step 1)")
            return RawStr(self._view[key])
        length = len(self._view)
        index = operator.index(key)
        pos = index + length if index < 0 else index
        if not 0 <= pos < length:
            raise OutOfBounds(index, index + 1, length)
        return self._view[pos]

    def slice(self, start: int, end: Optional[int] = None) -> RawStr:
        """Strict sub-view over bytes [start, end).

        Unlike `view[start:end]`, nothing is clamped: a range that does not
        fit raises OutOfBounds. Cutting through a multi-byte character is
        allowed; the result simply renders the severed bytes as U+FFFD.
        """
        length = len(self._view)
        if end is None:
            end = length
        if start < 0 or end > length or start > end:
            raise OutOfBounds(start, end, length)
        return RawStr(self._view[start:end])

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def to_text(self) -> str:
        """Decode the whole span as UTF-8.

        Raises:
            InvalidEncoding: carrying the offset of the first bad byte
        """
        try:
            return decode_strict(self._view)
        except UnicodeDecodeError as exc:
            valid_up_to, error_len = first_error(self._view)
            raise InvalidEncoding(valid_up_to, error_len) from exc

    def is_utf8(self) -> bool:
        return first_error(self._view) is None

    def valid_up_to(self) -> int:
        """Length in bytes of the longest valid UTF-8 prefix."""
        error = first_error(self._view)
        if error is None:
            return len(self._view)
        return error[0]

    def utf8_chunks(self) -> Iterator[Utf8Chunk]:
        return utf8_chunks(self._view)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def display(self) -> str:
        """Lossy rendering: one U+FFFD per ill-formed subpart. Never fails."""
        return render_lossy(self._view)

    def debug(self) -> str:
        """The rendering quoted and escaped the way repr() shows a str."""
        return repr(self.display())

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return self.debug()

    def __format__(self, format_spec: str) -> str:
        return format(self.display(), format_spec)

    # ------------------------------------------------------------------
    # Comparison (byte-exact; the rendering is lossy and never consulted)
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        data = _comparable(other)
        if data is None:
            return NotImplemented
        return self._view == data

    def __lt__(self, other: object) -> bool:
        data = _comparable(other)
        if data is None:
            return NotImplemented
        return self._view.tobytes() < bytes(data)

    def __hash__(self) -> int:
        return hash(self._view.tobytes())

    # ------------------------------------------------------------------
    # Borrow lifetime
    # ------------------------------------------------------------------

    def release(self) -> None:
        """End the borrow. The view is unusable afterwards."""
        self._view.release()

    def __enter__(self) -> RawStr:
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
