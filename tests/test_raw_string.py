"""
rawstr RawString Test Suite

Tests the owned buffer:
1. Construction (copying, adopting, from text)
2. Mutation appends raw bytes unchanged
3. Borrow enforcement between RawString and its views
4. Consuming conversions: into_text(), into_bytes()
5. Delegated rendering, comparison and hashing
"""

import copy
import logging
import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rawstr import (
    RawStr,
    RawString,
    BorrowError,
    InvalidEncoding,
    OutOfBounds,
    REPLACEMENT_CHARACTER,
)


# --- Test 1: Construction ---

def test_new_is_empty():
    owned = RawString()
    assert len(owned) == 0
    assert owned.is_empty()
    assert str(owned) == ""
    assert owned.to_text() == ""


def test_constructor_copies():
    source = bytearray(b"ab")
    owned = RawString(source)
    source[0] = ord("x")
    assert owned == b"ab"


def test_from_bytes_adopts_bytearray():
    source = bytearray(b"ab")
    owned = RawString.from_bytes(source)
    source[0] = ord("x")
    assert owned == b"xb"
    assert RawString.from_bytes(b"\xff") == b"\xff"


def test_from_text_is_lossless():
    owned = RawString.from_text("héllo 🔬")
    assert bytes(owned) == "héllo 🔬".encode("utf-8")
    assert owned.to_text() == "héllo 🔬"
    assert RawString("héllo") == owned.as_raw_str().slice(0, 6)


def test_constructor_inputs():
    assert RawString([104, 105]) == b"hi"
    assert RawString(RawStr(b"\xfe")) == b"\xfe"
    assert RawString(RawString(b"x")) == b"x"
    assert RawString(memoryview(b"xyz")[1:]) == b"yz"
    with pytest.raises(TypeError):
        RawString(3)


# --- Test 2: Mutation ---

def test_appends_are_raw():
    owned = RawString()
    owned.extend(b"\xff")
    owned.push_str("é")
    owned.append(0x21)
    owned += "x"
    owned += b"y"
    owned += RawStr(b"z")
    owned += bytearray(b"\xc3")
    assert bytes(owned) == b"\xff\xc3\xa9!xyz\xc3"
    assert str(owned) == REPLACEMENT_CHARACTER + "é!xyz" + REPLACEMENT_CHARACTER


def test_extend_rejects_text():
    with pytest.raises(TypeError):
        RawString().extend("text")


def test_extend_with_itself():
    owned = RawString(b"ab")
    owned.extend(owned)
    assert owned == b"abab"


def test_pop_truncate_clear():
    owned = RawString("aé".encode("utf-8"))
    assert owned.pop() == 0xA9
    assert owned == b"a\xc3"
    owned.truncate(10)
    assert len(owned) == 2
    owned.truncate(1)
    assert owned == b"a"
    owned.clear()
    assert owned.is_empty()
    with pytest.raises(IndexError):
        owned.pop()
    with pytest.raises(ValueError):
        owned.truncate(-1)


# --- Test 3: Borrow enforcement ---

def test_live_view_blocks_resizing():
    owned = RawString(b"ab")
    view = owned.as_raw_str()
    for mutate in (
        lambda: owned.extend(b"c"),
        lambda: owned.push_str("c"),
        lambda: owned.append(0x63),
        owned.pop,
        lambda: owned.truncate(1),
        owned.clear,
    ):
        with pytest.raises(BorrowError):
            mutate()
    assert view == b"ab"
    view.release()
    owned.extend(b"c")
    assert owned == b"abc"


def test_live_view_blocks_hand_over():
    owned = RawString(b"ab")
    view = owned.as_raw_str()
    with pytest.raises(BorrowError):
        owned.into_text()
    with pytest.raises(BorrowError):
        owned.into_bytes()
    assert owned == b"ab"
    assert view == owned
    view.release()
    assert owned.into_text() == "ab"
    assert owned.is_empty()


def test_live_view_blocks_in_place_writes():
    owned = RawString(b"ab")
    with owned.as_raw_str() as view:
        with pytest.raises(BorrowError):
            owned[0] = 0x78
        with pytest.raises(BorrowError):
            owned[0:2] = b"xy"
        assert view == b"ab"
    owned[0] = 0x78
    assert owned == b"xb"


def test_borrow_error_is_a_buffer_error():
    owned = RawString(b"ab")
    with owned.as_raw_str():
        with pytest.raises(BufferError):
            owned.append(0)


def test_with_block_ends_borrow():
    owned = RawString(b"ab")
    with owned.as_raw_str() as view:
        assert str(view) == "ab"
    owned.push_str("c")
    assert owned == b"abc"


def test_slices_borrow_the_buffer():
    owned = RawString(b"hello")
    part = owned[1:3]
    assert isinstance(part, RawStr)
    assert part == b"el"
    with pytest.raises(BorrowError):
        owned.push_str("!")
    part.release()
    owned.push_str("!")
    assert owned[0] == ord("h")
    owned.push_str("?")
    assert owned == b"hello!?"


def test_delegated_reads_do_not_hold_borrows():
    owned = RawString(b"a\xff")
    str(owned)
    repr(owned)
    hash(owned)
    owned == b"x"
    owned.is_utf8()
    list(owned.utf8_chunks())
    owned.extend(b"b")
    assert owned == b"a\xffb"


def test_refused_resize_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="rawstr.raw_string")
    owned = RawString(b"ab")
    with owned.as_raw_str():
        with pytest.raises(BorrowError):
            owned.extend(b"c")
    assert "borrowed" in caplog.text


# --- Test 4: Consuming conversions ---

def test_into_text_success_hands_over_contents():
    owned = RawString("hé".encode("utf-8"))
    assert owned.into_text() == "hé"
    assert owned.is_empty()


def test_into_text_failure_returns_buffer_untouched():
    owned = RawString(b"ok\xffa")
    with pytest.raises(InvalidEncoding) as info:
        owned.into_text()
    assert info.value.raw is owned
    assert info.value.offset == 2
    assert bytes(owned) == b"ok\xffa"
    owned.push_str("!")
    assert owned == b"ok\xffa!"


def test_into_bytes_hands_over_buffer():
    source = bytearray(b"\xff\x00")
    owned = RawString.from_bytes(source)
    out = owned.into_bytes()
    assert out is source
    assert out == b"\xff\x00"
    assert owned.is_empty()


def test_non_consuming_validity_checks():
    owned = RawString(b"ab\xe2\x82")
    assert not owned.is_utf8()
    assert owned.valid_up_to() == 2
    with pytest.raises(InvalidEncoding):
        owned.to_text()
    assert owned == b"ab\xe2\x82"


# --- Test 5: Delegated behavior ---

def test_rendering_matches_view():
    owned = RawString(b"\xffa")
    assert str(owned) == REPLACEMENT_CHARACTER + "a"
    assert repr(RawString(b"hi")) == repr("hi")
    assert format(RawString(b"ab"), "<4") == "ab  "


def test_comparison_across_types():
    assert RawString(b"a") == RawStr(b"a")
    assert RawStr(b"a") == RawString(b"a")
    assert RawString(b"a") == b"a"
    assert RawString(b"a") != "a"
    assert RawString(b"\xff") != RawString(b"\xfe")
    assert RawString(b"a") < RawString(b"b")
    assert RawString(b"b") > RawStr(b"a")
    assert sorted([RawString(b"b"), RawString(b""), RawString(b"a")]) == [b"", b"a", b"b"]


def test_hash_matches_view():
    assert hash(RawString(b"\xff")) == hash(RawStr(b"\xff")) == hash(b"\xff")


def test_copy_is_independent():
    owned = RawString(b"ab")
    dup = copy.copy(owned)
    deep = copy.deepcopy(owned)
    owned.push_str("c")
    assert dup == b"ab"
    assert deep == b"ab"
    assert owned.copy() == b"abc"


def test_iteration_and_indexing():
    owned = RawString(b"ab")
    assert list(owned) == [97, 98]
    assert owned[-1] == 98


def test_in_place_writes():
    owned = RawString(b"hello")
    owned[0] = ord("j")
    owned[-1] = 0xFF
    assert owned == b"jell\xff"
    owned[1:3] = b"\xc3\xa9"
    assert owned == b"j\xc3\xa9l\xff"
    owned[3:] = RawStr(b"!?")
    owned[0:0] = b""
    assert owned == b"j\xc3\xa9!?"
    assert str(owned) == "jé!?"
    owned[:] = owned
    assert len(owned) == 5


def test_in_place_writes_keep_the_length():
    owned = RawString(b"abc")
    with pytest.raises(ValueError):
        owned[0:1] = b"xy"
    with pytest.raises(ValueError):
        owned[::2] = b"xy"
    with pytest.raises(TypeError):
        owned[0:1] = "x"
    with pytest.raises(ValueError):
        owned[0] = 256
    with pytest.raises(OutOfBounds) as info:
        owned[-4] = 0
    assert info.value.start == -4
    assert owned == b"abc"
