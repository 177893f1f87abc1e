from array import array

import pytest

from bx.cursor import Cursor
from bx.exceptions import EofError, TrailingDataError


def test_peek_does_not_consume() -> None:
    cursor = Cursor(b'ab')
    assert cursor.peek_byte() == ord('a')
    assert cursor.peek_byte() == ord('a')
    assert cursor.cur_pos() == 0
    assert cursor.read_byte() == ord('a')
    assert cursor.cur_pos() == 1


def test_read_past_end() -> None:
    cursor = Cursor(b'a')
    cursor.read_byte()
    assert cursor.is_empty()
    with pytest.raises(EofError) as e:
        cursor.peek_byte()
    assert e.value.pos == 1


def test_short_read_keeps_position() -> None:
    cursor = Cursor(b'abc')
    cursor.read_byte()
    with pytest.raises(EofError) as e:
        cursor.read_bytes(3)
    assert e.value.pos == 3
    assert cursor.cur_pos() == 1
    assert bytes(cursor.read_bytes(2)) == b'bc'


def test_read_bytes_negative() -> None:
    with pytest.raises(ValueError):
        Cursor(b'abc').read_bytes(-1)


def test_read_bytes_empty() -> None:
    cursor = Cursor(b'')
    assert bytes(cursor.read_bytes(0)) == b''
    cursor.finalize()


def test_views_alias_the_input() -> None:
    data = bytearray(b'spam')
    view = Cursor(data).read_bytes(4)
    assert view.readonly
    assert view.obj is data
    data[0] = ord('S')
    assert bytes(view) == b'Spam'


def test_views_over_bytes_are_hashable() -> None:
    data = b'spam'
    view = Cursor(data).read_bytes(4)
    assert hash(view) == hash(b'spam')
    assert {view: 1}[b'spam'] == 1


def test_other_buffer_formats_are_read_as_bytes() -> None:
    data = array('H', [1, 2])
    cursor = Cursor(data)
    assert bytes(cursor.read_bytes(4)) == data.tobytes()


def test_finalize_with_remaining_bytes() -> None:
    cursor = Cursor(b'ab')
    cursor.read_byte()
    with pytest.raises(TrailingDataError) as e:
        cursor.finalize()
    assert e.value.pos == 1
