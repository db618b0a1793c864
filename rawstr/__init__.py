"""
rawstr - Strings that may or may not be UTF-8
Text-like types for byte data that has to survive a round trip untouched.

RawStr: a borrowed view over bytes (display, comparison, hashing, slicing)
RawString: an owned, growable byte buffer that delegates to RawStr
"""

__version__ = "0.1.0"

import logging

from rawstr.errors import RawStrError, InvalidEncoding, OutOfBounds, BorrowError
from rawstr.utf8 import (
    ENCODING,
    REPLACEMENT_CHARACTER,
    Utf8Chunk,
    error_spans,
    first_error,
    render_lossy,
    utf8_chunks,
)
from rawstr.raw_str import RawStr
from rawstr.raw_string import RawString

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "RawStr",
    "RawString",
    "Utf8Chunk",
    "utf8_chunks",
    "error_spans",
    "first_error",
    "render_lossy",
    "ENCODING",
    "REPLACEMENT_CHARACTER",
    "RawStrError",
    "InvalidEncoding",
    "OutOfBounds",
    "BorrowError",
]
