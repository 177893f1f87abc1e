# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
The grammar walker.

    integer:     'i' ['-'] digit+ 'e'
    byte string: digit+ ':' <length bytes>
    list:        'l' value* 'e'
    dict:        'd' (byte-string value)* 'e'

Each primitive first peeks at the tag byte, so a value of the wrong shape fails before anything is consumed. The
terminator of lists and dicts is only peeked by the accessors, it is consumed by `decode_list`/`decode_dict` after
the visitor returns, which is also where a list with more elements than the visitor read is rejected.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Final, Iterator, Optional, TypeVar

from typing_extensions import override

from bx.adapters import get_decode_type
from bx.cursor import Cursor
from bx.de import NOT_EXPECTED, Decoder, DecodeTarget, DictAccess, ListAccess, Visitor
from bx.exceptions import (
    DepthLimitError,
    IntegerOverflowError,
    ParseError,
    TypeMismatchError,
    UnexpectedCharError,
)
from bx.settings import DecoderSettings
from bx.types import BYTES_SEPARATOR, MINUS, TAG_END, Buffer, Shape

T = TypeVar('T')
V = TypeVar('V')

INT64_MAX: Final[int] = 2**63 - 1
# magnitude of the most negative int64
INT64_MIN_MAGNITUDE: Final[int] = 2**63
UINT64_MAX: Final[int] = 2**64 - 1

_DIGIT_0: Final[int] = ord('0')
_DIGIT_9: Final[int] = ord('9')

_EXPECTED_REASON: Final[dict[Shape, str]] = {
    Shape.INT: 'Expected integer',
    Shape.BYTES: 'Expected byte string',
    Shape.LIST: 'Expected List',
    Shape.DICT: 'Expected Dict',
}


@contextmanager
def _mismatch_at(pos: int) -> Iterator[None]:
    """Attach `pos` to type mismatches raised by a leaf visit, which has no position of its own."""
    try:
        yield
    except TypeMismatchError as e:
        if e.pos is not None:
            raise
        raise TypeMismatchError(e.reason, pos) from None


class BenDecoder(Decoder):
    """Decoder over a single buffer, it owns the read position and must not be shared between threads."""

    __slots__ = ('_cursor', '_depth', '_max_depth', '_strict_dict_keys')

    def __init__(self, data: Buffer, *, settings: Optional[DecoderSettings] = None) -> None:
        if settings is None:
            settings = DecoderSettings()
        self._cursor = Cursor(data)
        self._depth = 0
        self._max_depth = settings.MAX_DEPTH
        self._strict_dict_keys = settings.STRICT_DICT_KEYS

    def cur_pos(self) -> int:
        return self._cursor.cur_pos()

    def finalize(self) -> None:
        """Check that the whole buffer was consumed."""
        self._cursor.finalize()

    @override
    def decode_int(self) -> int:
        self._check_tag(Shape.INT)
        self._cursor.skip_byte()
        return self._parse_i64(TAG_END)

    @override
    def decode_bytes(self) -> memoryview:
        self._check_tag(Shape.BYTES)
        length = self._parse_digits(BYTES_SEPARATOR, UINT64_MAX)
        return self._cursor.read_bytes(length)

    @override
    def decode_list(self, visitor: Visitor[V]) -> V:
        self._check_tag(Shape.LIST)
        self._check_accepts(visitor, Shape.LIST)
        self._enter()
        access = _BenListAccess(self)
        try:
            out = visitor.visit_list(access)
        finally:
            access.close()
            self._depth -= 1
        self._expect_end()
        return out

    @override
    def decode_dict(self, visitor: Visitor[V]) -> V:
        self._check_tag(Shape.DICT)
        self._check_accepts(visitor, Shape.DICT)
        self._enter()
        access = _BenDictAccess(self, self._strict_dict_keys)
        try:
            out = visitor.visit_dict(access)
        finally:
            access.close()
            self._depth -= 1
        self._expect_end()
        return out

    @override
    def decode_any(self, visitor: Visitor[V]) -> V:
        pos = self._cursor.cur_pos()
        shape = Shape.from_tag(self._cursor.peek_byte())
        if shape is Shape.INT:
            self._check_accepts(visitor, shape)
            int_value = self.decode_int()
            with _mismatch_at(pos):
                return visitor.visit_int(int_value)
        if shape is Shape.BYTES:
            self._check_accepts(visitor, shape)
            bytes_value = self.decode_bytes()
            with _mismatch_at(pos):
                return visitor.visit_bytes(bytes_value)
        if shape is Shape.LIST:
            return self.decode_list(visitor)
        if shape is Shape.DICT:
            return self.decode_dict(visitor)
        raise ParseError('Expected value', pos)

    def _at_end(self) -> bool:
        return self._cursor.peek_byte() == TAG_END

    def _check_tag(self, expected: Shape) -> None:
        """Peek at the next tag, the cursor is left untouched either way."""
        pos = self._cursor.cur_pos()
        shape = Shape.from_tag(self._cursor.peek_byte())
        if shape is expected:
            return
        if shape is None:
            raise ParseError(_EXPECTED_REASON[expected], pos)
        raise TypeMismatchError(_EXPECTED_REASON[expected], pos)

    def _check_accepts(self, visitor: Visitor[V], shape: Shape) -> None:
        """Reject a shape the visitor does not handle while the cursor is still at the value."""
        if not visitor.accepts(shape):
            raise TypeMismatchError(NOT_EXPECTED[shape], self._cursor.cur_pos())

    def _enter(self) -> None:
        if self._max_depth is not None and self._depth >= self._max_depth:
            raise DepthLimitError(self._cursor.cur_pos(), self._max_depth)
        self._cursor.skip_byte()
        self._depth += 1

    def _expect_end(self) -> None:
        pos = self._cursor.cur_pos()
        if self._cursor.read_byte() != TAG_END:
            raise UnexpectedCharError(pos)

    def _parse_i64(self, stop_char: int) -> int:
        negative = self._cursor.peek_byte() == MINUS
        if negative:
            self._cursor.skip_byte()
            return -self._parse_digits(stop_char, INT64_MIN_MAGNITUDE)
        return self._parse_digits(stop_char, INT64_MAX)

    def _parse_digits(self, stop_char: int, limit: int) -> int:
        """Parse a run of at least one digit terminated by `stop_char`, which is consumed.

        The value is checked against `limit` after every digit, an overflow is reported at the offending digit.
        """
        assert stop_char < _DIGIT_0 or stop_char > _DIGIT_9, 'stop_char cannot be a digit'
        cursor = self._cursor
        c = cursor.peek_byte()
        if c < _DIGIT_0 or c > _DIGIT_9:
            raise UnexpectedCharError(cursor.cur_pos())
        value = 0
        while True:
            pos = cursor.cur_pos()
            c = cursor.read_byte()
            if _DIGIT_0 <= c <= _DIGIT_9:
                value = value * 10 + (c - _DIGIT_0)
                if value > limit:
                    raise IntegerOverflowError(pos)
            elif c == stop_char:
                return value
            else:
                raise UnexpectedCharError(pos)


class _BenListAccess(ListAccess):
    __slots__ = ('_decoder',)

    _decoder: Optional[BenDecoder]

    def __init__(self, decoder: BenDecoder) -> None:
        self._decoder = decoder

    def close(self) -> None:
        self._decoder = None

    def _get_decoder(self) -> BenDecoder:
        if self._decoder is None:
            raise RuntimeError('list accessor used after visit_list() returned')
        return self._decoder

    @override
    def next_element(self, type_: DecodeTarget[T], /) -> Optional[T]:
        decoder = self._get_decoder()
        if decoder._at_end():
            return None
        return get_decode_type(type_).decode(decoder)


class _BenDictAccess(DictAccess):
    __slots__ = ('_decoder', '_strict', '_last_key', '_pending_value')

    _decoder: Optional[BenDecoder]
    _last_key: Optional[bytes]

    def __init__(self, decoder: BenDecoder, strict: bool) -> None:
        self._decoder = decoder
        self._strict = strict
        self._last_key = None
        self._pending_value = False

    def close(self) -> None:
        self._decoder = None

    def _get_decoder(self) -> BenDecoder:
        if self._decoder is None:
            raise RuntimeError('dict accessor used after visit_dict() returned')
        return self._decoder

    @override
    def next_key(self) -> Optional[memoryview]:
        decoder = self._get_decoder()
        if self._pending_value:
            raise RuntimeError('next_key() called before decoding the value of the previous key')
        if decoder._at_end():
            return None
        pos = decoder.cur_pos()
        key = decoder.decode_bytes()
        if self._strict:
            self._check_key_order(key, pos)
        self._pending_value = True
        return key

    @override
    def next_value(self, type_: DecodeTarget[T], /) -> T:
        decoder = self._get_decoder()
        if not self._pending_value:
            raise RuntimeError('next_value() called without a key')
        self._pending_value = False
        return get_decode_type(type_).decode(decoder)

    def _check_key_order(self, key: memoryview, pos: int) -> None:
        key_bytes = key.tobytes()
        if self._last_key is not None:
            if key_bytes == self._last_key:
                raise ParseError('Duplicate dict key', pos)
            if key_bytes < self._last_key:
                raise ParseError('Dict keys not sorted', pos)
        self._last_key = key_bytes
