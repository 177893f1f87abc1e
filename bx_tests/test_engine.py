from typing import Any

import pytest

from bx import parse
from bx.de import Decoder, DictAccess, ListAccess, Visitor
from bx.engine import INT64_MAX, INT64_MIN_MAGNITUDE, BenDecoder
from bx.exceptions import (
    DepthLimitError,
    EofError,
    IntegerOverflowError,
    ParseError,
    TypeMismatchError,
    UnexpectedCharError,
)
from bx.settings import DecoderSettings


def test_int_examples() -> None:
    assert parse(b'i42e', int) == 42
    assert parse(b'i-3e', int) == -3
    assert parse(b'i0e', int) == 0


def test_int_non_canonical_forms_are_accepted() -> None:
    assert parse(b'i-0e', int) == 0
    assert parse(b'i007e', int) == 7


def test_int_bounds() -> None:
    assert parse(b'i9223372036854775807e', int) == INT64_MAX
    assert parse(b'i-9223372036854775808e', int) == -INT64_MIN_MAGNITUDE


@pytest.mark.parametrize('data, pos', [
    (b'i35184372088832000000e', 20),
    (b'i9223372036854775808e', 19),
    (b'i-9223372036854775809e', 20),
    (b'i99999999999999999999999e', 19),
])
def test_int_overflow_position(data: bytes, pos: int) -> None:
    with pytest.raises(IntegerOverflowError) as e:
        parse(data, int)
    assert e.value.pos == pos
    assert str(e.value) == f'Numeric overflow occurred at {pos}'


@pytest.mark.parametrize('data, pos', [
    (b'ie', 1),
    (b'i-e', 2),
    (b'i--1e', 2),
    (b'i12xe', 3),
    (b'i1:e', 2),
])
def test_int_unexpected_char(data: bytes, pos: int) -> None:
    with pytest.raises(UnexpectedCharError) as e:
        parse(data, int)
    assert e.value.pos == pos


def test_bytes_examples() -> None:
    assert parse(b'4:spam', bytes) == b'spam'
    assert parse(b'0:', bytes) == b''
    assert parse(b'l4:spam4:eggse', list[bytes]) == [b'spam', b'eggs']


def test_bytes_payload_is_raw() -> None:
    assert parse(b'3:e:i', bytes) == b'e:i'


def test_bytes_length_overflow() -> None:
    with pytest.raises(IntegerOverflowError) as e:
        parse(b'18446744073709551616:', bytes)
    assert e.value.pos == 19


def test_bytes_length_too_large_for_buffer() -> None:
    with pytest.raises(EofError) as e:
        parse(b'18446744073709551615:abc', bytes)
    assert e.value.pos == 24


@pytest.mark.parametrize('data, pos', [
    (b'3spam', 1),
    (b'3-:abc', 1),
    (b'1e:a', 1),
])
def test_bytes_unexpected_char(data: bytes, pos: int) -> None:
    with pytest.raises(UnexpectedCharError) as e:
        parse(data, bytes)
    assert e.value.pos == pos


def test_negative_length_is_rejected_before_consuming() -> None:
    decoder = BenDecoder(b'-3:abc')
    with pytest.raises(ParseError) as e:
        decoder.decode_bytes()
    assert e.value.reason == 'Expected byte string'
    assert e.value.pos == 0
    assert decoder.cur_pos() == 0


def test_dict_example() -> None:
    value = parse(b'd3:cow3:moo4:spam4:eggse', dict[bytes, bytes])
    assert value == {b'cow': b'moo', b'spam': b'eggs'}


def test_empty_containers() -> None:
    assert parse(b'le', list[int]) == []
    assert parse(b'de', dict[str, int]) == {}


def test_nested_containers() -> None:
    value = parse(b'd4:listli1eli2ei3eee3:mapd1:ai1eee', dict[str, Any])
    assert value == {'list': [1, [2, 3]], 'map': {b'a': 1}}


@pytest.mark.parametrize('data, type_, reason', [
    (b'4:spam', int, 'Expected integer'),
    (b'li1ee', int, 'Expected integer'),
    (b'i1e', bytes, 'Expected byte string'),
    (b'de', bytes, 'Expected byte string'),
    (b'i1e', list[int], 'Expected List'),
    (b'de', list[int], 'Expected List'),
    (b'le', dict[str, int], 'Expected Dict'),
    (b'4:spam', dict[str, int], 'Expected Dict'),
])
def test_shape_mismatch(data: bytes, type_: Any, reason: str) -> None:
    with pytest.raises(TypeMismatchError) as e:
        parse(data, type_)
    assert e.value.reason == reason
    assert e.value.pos == 0
    assert str(e.value) == f'Type Mismatch at 0: {reason}'


@pytest.mark.parametrize('type_', [int, bytes, list[int], dict[str, int], Any])
def test_unknown_tag(type_: Any) -> None:
    with pytest.raises(ParseError) as e:
        parse(b'x', type_)
    assert e.value.pos == 0


def test_unknown_tag_reason() -> None:
    with pytest.raises(ParseError) as e:
        parse(b'li1exe', list[int])
    assert str(e.value) == 'Parse Error at 4: Expected integer'
    with pytest.raises(ParseError) as e:
        parse(b'x', Any)
    assert str(e.value) == 'Parse Error at 0: Expected value'


def test_mismatch_does_not_consume() -> None:
    decoder = BenDecoder(b'4:spam')
    with pytest.raises(TypeMismatchError):
        decoder.decode_int()
    with pytest.raises(TypeMismatchError):
        decoder.decode_list(Visitor())
    with pytest.raises(TypeMismatchError):
        decoder.decode_dict(Visitor())
    assert decoder.cur_pos() == 0
    assert decoder.decode_bytes() == b'spam'
    assert decoder.cur_pos() == 6


def test_element_mismatch_position() -> None:
    with pytest.raises(TypeMismatchError) as e:
        parse(b'li1e4:spame', list[int])
    assert e.value.pos == 4


def test_sequential_values_on_one_decoder() -> None:
    decoder = BenDecoder(b'i1e3:abcle')
    assert decoder.decode_int() == 1
    assert decoder.decode_bytes() == b'abc'

    class EmptyList(Visitor[list[int]]):
        def visit_list(self, access: ListAccess, /) -> list[int]:
            assert access.next_element(int) is None
            return []

    assert decoder.decode_list(EmptyList()) == []
    decoder.finalize()


def test_unread_elements_fail_at_terminator() -> None:
    class FirstOnly(Visitor[int]):
        def visit_list(self, access: ListAccess, /) -> int:
            value = access.next_element(int)
            assert value is not None
            return value

    with pytest.raises(UnexpectedCharError) as e:
        BenDecoder(b'li1ei2ee').decode_list(FirstOnly())
    assert e.value.pos == 4


class _Recorder(Visitor[str]):
    def visit_int(self, value: int, /) -> str:
        return f'int {value}'

    def visit_bytes(self, value: memoryview, /) -> str:
        return f'bytes {bytes(value)!r}'

    def visit_list(self, access: ListAccess, /) -> str:
        return f'list {list(access.iter_elements(int))}'

    def visit_dict(self, access: DictAccess, /) -> str:
        return f'dict {[(bytes(k), v) for k, v in access.iter_entries(int)]}'


@pytest.mark.parametrize('data, expected', [
    (b'i7e', 'int 7'),
    (b'2:hi', "bytes b'hi'"),
    (b'li1ei2ee', 'list [1, 2]'),
    (b'd1:ai1ee', "dict [(b'a', 1)]"),
])
def test_decode_any_dispatch(data: bytes, expected: str) -> None:
    assert BenDecoder(data).decode_any(_Recorder()) == expected


def test_default_visitor_rejects_everything() -> None:
    for data, reason in [
        (b'i1e', 'Integer not expected'),
        (b'1:a', 'Byte string not expected'),
        (b'le', 'List not expected'),
        (b'de', 'Dict not expected'),
    ]:
        decoder = BenDecoder(b'l' + data + b'e')
        decoder._cursor.skip_byte()
        with pytest.raises(TypeMismatchError) as e:
            decoder.decode_any(Visitor())
        assert e.value.reason == reason
        assert e.value.pos == 1
        assert str(e.value) == f'Type Mismatch at 1: {reason}'
        # the rejected value is left unread
        assert decoder.cur_pos() == 1


class _EvenOnly(Visitor[int]):
    def visit_int(self, value: int, /) -> int:
        if value % 2:
            raise TypeMismatchError('Expected an even integer')
        return value


class Even:
    @classmethod
    def decode(cls, decoder: Decoder) -> int:
        return decoder.decode_any(_EvenOnly())


def test_visit_error_gets_value_position() -> None:
    assert parse(b'li2ei4ee', list[Even]) == [2, 4]
    with pytest.raises(TypeMismatchError) as e:
        parse(b'li2ei3ee', list[Even])
    assert e.value.pos == 4
    assert str(e.value) == 'Type Mismatch at 4: Expected an even integer'


def test_depth_limit() -> None:
    settings = DecoderSettings(MAX_DEPTH=2)
    assert parse(b'llee', Any, settings=settings) == [[]]
    with pytest.raises(DepthLimitError) as e:
        parse(b'llleee', Any, settings=settings)
    assert e.value.pos == 2
    assert e.value.limit == 2
    assert str(e.value) == 'Parse Error at 2: Nesting deeper than 2'


def test_depth_limit_counts_dicts() -> None:
    settings = DecoderSettings(MAX_DEPTH=1)
    with pytest.raises(DepthLimitError) as e:
        parse(b'd1:ale', Any, settings=settings)
    assert e.value.pos == 4


def test_depth_limit_zero_allows_scalars() -> None:
    settings = DecoderSettings(MAX_DEPTH=0)
    assert parse(b'i1e', int, settings=settings) == 1
    with pytest.raises(DepthLimitError):
        parse(b'le', list[int], settings=settings)


def test_default_depth_limit() -> None:
    depth = DecoderSettings().MAX_DEPTH
    assert depth is not None
    ok = b'l' * depth + b'e' * depth
    parse(ok, Any)
    too_deep = b'l' * (depth + 1) + b'e' * (depth + 1)
    with pytest.raises(DepthLimitError) as e:
        parse(too_deep, Any)
    assert e.value.pos == depth


def test_depth_is_restored_after_containers() -> None:
    settings = DecoderSettings(MAX_DEPTH=2)
    assert parse(b'llelelee', Any, settings=settings) == [[], [], []]


def test_no_depth_limit() -> None:
    settings = DecoderSettings(MAX_DEPTH=None)
    data = b'l' * 40 + b'e' * 40
    parse(data, Any, settings=settings)


def test_duplicate_keys_last_write_wins() -> None:
    assert parse(b'd1:ai1e1:ai2ee', dict[str, int]) == {'a': 2}


def test_unsorted_keys_are_accepted_by_default() -> None:
    assert parse(b'd1:bi1e1:ai2ee', dict[str, int]) == {'b': 1, 'a': 2}


def test_strict_dict_keys() -> None:
    settings = DecoderSettings(STRICT_DICT_KEYS=True)
    assert parse(b'd1:ai1e1:bi2ee', dict[str, int], settings=settings) == {'a': 1, 'b': 2}

    with pytest.raises(ParseError) as e:
        parse(b'd1:bi1e1:ai2ee', dict[str, int], settings=settings)
    assert e.value.reason == 'Dict keys not sorted'
    assert e.value.pos == 7

    with pytest.raises(ParseError) as e:
        parse(b'd1:ai1e1:ai2ee', dict[str, int], settings=settings)
    assert e.value.reason == 'Duplicate dict key'
    assert e.value.pos == 7


def test_strict_dict_keys_are_per_dict() -> None:
    settings = DecoderSettings(STRICT_DICT_KEYS=True)
    value = parse(b'd1:bd1:ai1ee1:cd1:ai2eee', dict[str, dict[str, int]], settings=settings)
    assert value == {'b': {'a': 1}, 'c': {'a': 2}}


def test_strict_dict_keys_compare_bytewise() -> None:
    settings = DecoderSettings(STRICT_DICT_KEYS=True)
    assert parse(b'd1:ai1e2:aai2e1:bi3ee', dict[str, int], settings=settings) == {'a': 1, 'aa': 2, 'b': 3}
