"""
rawstr Errors

The error taxonomy is deliberately small. Construction, mutation, rendering,
comparison and byte extraction are total operations; only the calls that
demand something of the bytes can fail:

- InvalidEncoding: the span was asked to become a `str` but is not UTF-8
- OutOfBounds: a strict slice or an index fell outside the span
- BorrowError: an owned buffer was resized while a view still borrows it
"""

from __future__ import annotations

from typing import Any, Optional


class RawStrError(Exception):
    """Base class for all rawstr errors."""


class InvalidEncoding(RawStrError, ValueError):
    """The byte span is not valid UTF-8.

    Attributes:
        offset: Index of the first byte that is not part of a valid sequence
            (the length of the longest valid prefix)
        error_len: Length of the ill-formed subpart at `offset`, or None when
            the span ends in the middle of an otherwise valid sequence
        raw: The RawString handed back by a failed `into_text()`, untouched
    """

    def __init__(
        self,
        offset: int,
        error_len: Optional[int] = None,
        raw: Any = None,
    ) -> None:
        if error_len is None:
            detail = "incomplete UTF-8 sequence at end of data"
        else:
            detail = f"invalid UTF-8 sequence of {error_len} byte(s)"
        super().__init__(f"{detail} at offset {offset:#x}")
        self.offset = offset
        self.error_len = error_len
        self.raw = raw

    @property
    def valid_up_to(self) -> int:
        return self.offset


class OutOfBounds(RawStrError, IndexError):
    """A requested byte range does not fit inside the span."""

    def __init__(self, start: int, end: int, length: int) -> None:
        super().__init__(
            f"range [{start}:{end}] out of bounds for span of {length} byte(s)"
        )
        self.start = start
        self.end = end
        self.length = length


class BorrowError(RawStrError, BufferError):
    """An owned buffer cannot be resized while a RawStr view borrows it."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"cannot {operation}: buffer is borrowed by a live RawStr view "
            f"(release() it or leave its `with` block first)"
        )
        self.operation = operation
