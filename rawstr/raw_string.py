"""
rawstr Owned Buffer: RawString

RawString owns a growable bytearray whose contents may or may not be valid
UTF-8. Appending never validates or transforms anything: bytes, views and
text all go in as raw bytes.

All read-only behavior (rendering, comparison, hashing, validity checks) is
delegated to a short-lived RawStr over the buffer, so the two types can
never disagree about what a byte span looks like.

Views handed out by as_raw_str() or by slicing borrow the buffer. While one
is alive the buffer is frozen: growing, shrinking, overwriting bytes in place
and handing the buffer over with into_bytes() or into_text() all raise
BorrowError instead.
"""

from __future__ import annotations

import logging
import operator
from functools import total_ordering
from typing import Iterable, Iterator, Union

from rawstr.errors import BorrowError, InvalidEncoding, OutOfBounds
from rawstr.raw_str import RawStr, byte_view
from rawstr.utf8 import ENCODING, Utf8Chunk

logger = logging.getLogger(__name__)


@total_ordering
class RawString:
    """A mutable, growable string that may or may not contain valid UTF-8.

    Usage:
        out = RawString()
        out.extend(proc.stdout)        # whatever the subprocess wrote
        out.push_str(" (exit 0)")
        print(out)                     # readable even if stdout was garbage
        try:
            text = out.into_text()
        except InvalidEncoding as e:
            keep = e.raw               # same RawString, bytes untouched
    """

    __slots__ = ("_buf",)

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview, str, RawStr, RawString, Iterable[int]] = b"",
    ) -> None:
        if isinstance(data, (str, RawStr, RawString, memoryview)):
            self._buf = bytearray(byte_view(data))
        elif isinstance(data, int):
            raise TypeError("RawString() takes byte data, not a size")
        else:
            self._buf = bytearray(data)

    @classmethod
    def from_bytes(cls, buffer) -> RawString:
        """Wrap `buffer` without copying if it is a bytearray.

        The RawString takes ownership: the caller should stop using `buffer`
        directly. Any other bytes-like input is copied.
        """
        obj = cls.__new__(cls)
        if isinstance(buffer, bytearray):
            obj._buf = buffer
        else:
            obj._buf = bytearray(byte_view(buffer))
        return obj

    @classmethod
    def from_text(cls, text: str) -> RawString:
        """Lossless construction from a str."""
        return cls.from_bytes(bytearray(text.encode(ENCODING)))

    def as_raw_str(self) -> RawStr:
        """Borrow the current contents as a RawStr."""
        return RawStr(self)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _resize(self, operation: str, action):
        try:
            return action()
        except BufferError as exc:
            logger.debug(
                "Refused to %s a borrowed RawString (%d bytes)",
                operation, len(self._buf),
            )
            raise BorrowError(operation) from exc

    def _ensure_unborrowed(self, operation: str) -> None:
        """Refuse `operation` while any RawStr view borrows the buffer."""

        def touch() -> None:
            self._buf.append(0)
            self._buf.pop()

        self._resize(operation, touch)

    def append(self, byte: int) -> None:
        """Append a single byte value (0-255)."""
        self._resize("append", lambda: self._buf.append(byte))

    def extend(self, data: Union[bytes, bytearray, memoryview, RawStr, RawString]) -> None:
        """Append raw bytes from any bytes-like object, RawStr or RawString."""
        if isinstance(data, str):
            raise TypeError("use push_str() to append text to a RawString")
        if data is self:
            chunk = bytes(self._buf)
        elif isinstance(data, (RawStr, RawString, memoryview)):
            chunk = byte_view(data)
        else:
            chunk = data
        self._resize("extend", lambda: self._buf.extend(chunk))

    def push_str(self, text: str) -> None:
        """Append the UTF-8 encoding of `text`."""
        encoded = text.encode(ENCODING)
        self._resize("push_str", lambda: self._buf.extend(encoded))

    def __iadd__(self, other) -> RawString:
        if isinstance(other, str):
            self.push_str(other)
        else:
            self.extend(other)
        return self

    def pop(self) -> int:
        """Remove and return the last byte."""
        return self._resize("pop", self._buf.pop)

    def truncate(self, length: int) -> None:
        """Shorten the buffer to `length` bytes; longer lengths are a no-op.

        The cut is a byte cut and may split a multi-byte character.
        """
        if length < 0:
            raise ValueError("length must be non-negative")
        if length >= len(self._buf):
            return

        def cut() -> None:
            del self._buf[length:]

        self._resize("truncate", cut)

    def clear(self) -> None:
        self._resize("clear", self._buf.clear)

    def __setitem__(self, key, value) -> None:
        """Overwrite bytes in place. The length of the buffer never changes.

        `owned[i] = byte` sets one byte; `owned[a:b] = data` replaces a
        contiguous range with exactly as many bytes as it held.
        """
        length = len(self._buf)
        if isinstance(key, slice):
            if key.step not in (None, 1):
                raise ValueError("RawString slices must be contiguous (step 1)")
            if isinstance(value, (str, int)):
                raise TypeError("slice assignment takes byte data")
            start, stop, _ = key.indices(length)
            stop = max(start, stop)
            if value is self:
                chunk = bytes(self._buf)
            elif isinstance(value, (RawStr, RawString, memoryview)):
                chunk = bytes(byte_view(value))
            else:
                chunk = bytes(value)
            if len(chunk) != stop - start:
                raise ValueError(
                    f"slice assignment must keep the length: "
                    f"{stop - start} byte(s) replaced by {len(chunk)}"
                )
            self._ensure_unborrowed("assign to")
            self._buf[start:stop] = chunk
            return
        index = operator.index(key)
        pos = index + length if index < 0 else index
        if not 0 <= pos < length:
            raise OutOfBounds(index, index + 1, length)
        self._ensure_unborrowed("assign to")
        self._buf[pos] = value

    # ------------------------------------------------------------------
    # Consuming conversions
    # ------------------------------------------------------------------

    def into_bytes(self) -> bytearray:
        """Hand over the owned bytearray (no copy), leaving this empty."""
        self._ensure_unborrowed("into_bytes")
        buf = self._buf
        self._buf = bytearray()
        return buf

    def into_text(self) -> str:
        """Convert to str, handing over the contents.

        On success the RawString is left empty. On failure nothing is lost:
        the raised InvalidEncoding carries this RawString, unmodified, as
        its `raw` attribute.
        """
        self._ensure_unborrowed("into_text")
        try:
            with self.as_raw_str() as view:
                text = view.to_text()
        except InvalidEncoding as exc:
            logger.debug(
                "RawString of %d bytes is not UTF-8 (first error at %#x)",
                len(self._buf), exc.offset,
            )
            exc.raw = self
            raise
        self._buf = bytearray()
        return text

    # ------------------------------------------------------------------
    # Read-only behavior, delegated to RawStr
    # ------------------------------------------------------------------

    def to_text(self) -> str:
        with self.as_raw_str() as view:
            return view.to_text()

    def is_utf8(self) -> bool:
        with self.as_raw_str() as view:
            return view.is_utf8()

    def valid_up_to(self) -> int:
        with self.as_raw_str() as view:
            return view.valid_up_to()

    def utf8_chunks(self) -> Iterator[Utf8Chunk]:
        """Chunks of a snapshot of the current contents."""
        return RawStr(bytes(self._buf)).utf8_chunks()

    def is_empty(self) -> bool:
        return len(self._buf) == 0

    def __len__(self) -> int:
        return len(self._buf)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __iter__(self) -> Iterator[int]:
        return iter(bytes(self._buf))

    def __getitem__(self, key):
        """Index to a byte value; slice to a RawStr that borrows this buffer."""
        if isinstance(key, slice):
            return self.as_raw_str()[key]
        with self.as_raw_str() as view:
            return view[key]

    def copy(self) -> RawString:
        return RawString.from_bytes(bytearray(self._buf))

    def __copy__(self) -> RawString:
        return self.copy()

    def __deepcopy__(self, memo) -> RawString:
        return self.copy()

    def __str__(self) -> str:
        with self.as_raw_str() as view:
            return str(view)

    def __repr__(self) -> str:
        with self.as_raw_str() as view:
            return repr(view)

    def __format__(self, format_spec: str) -> str:
        with self.as_raw_str() as view:
            return format(view, format_spec)

    def __eq__(self, other: object) -> bool:
        with self.as_raw_str() as view:
            return view.__eq__(other)

    def __lt__(self, other: object) -> bool:
        with self.as_raw_str() as view:
            return view.__lt__(other)

    def __hash__(self) -> int:
        with self.as_raw_str() as view:
            return hash(view)
