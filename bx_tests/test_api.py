import re
from pathlib import Path
from typing import Any

import pytest
from structlog.testing import capture_logs

import bx.version
from bx import (
    BxError,
    EofError,
    FixedArray,
    LengthMismatchError,
    TrailingDataError,
    TypeMismatchError,
    UnexpectedCharError,
    parse,
    parse_prefix,
)
from bx.settings import DecoderSettings

VALID_ENCODINGS: list[tuple[bytes, Any]] = [
    (b'i42e', int),
    (b'i-3e', int),
    (b'4:spam', bytes),
    (b'0:', str),
    (b'l4:spam4:eggse', list[bytes]),
    (b'd3:cow3:moo4:spam4:eggse', dict[str, str]),
    (b'li1eli2ei3eee', tuple[int, list[int]]),
    (b'd4:infod6:lengthi10e4:name3:fooee', Any),
]


def _truncation_cases() -> list[tuple[bytes, Any]]:
    cases = []
    for data, type_ in VALID_ENCODINGS:
        for end in range(len(data)):
            cases.append((data[:end], type_))
    return cases


@pytest.mark.parametrize('data, type_', VALID_ENCODINGS)
def test_valid_encodings(data: bytes, type_: Any) -> None:
    _, consumed = parse_prefix(data, type_)
    assert consumed == len(data)


@pytest.mark.parametrize('data, type_', _truncation_cases())
def test_truncation_fails_with_eof(data: bytes, type_: Any) -> None:
    with pytest.raises(EofError) as e:
        parse(data, type_)
    assert e.value.pos <= len(data)


def test_errors_share_a_base() -> None:
    with pytest.raises(BxError):
        parse(b'i1', int)


def test_type_mismatch_message() -> None:
    assert str(TypeMismatchError('Expected List')) == 'Type Mismatch: Expected List'
    assert str(TypeMismatchError('Expected List', 5)) == 'Type Mismatch at 5: Expected List'
    with pytest.raises(TypeMismatchError) as e:
        parse(b'i1e', list[int])
    assert str(e.value) == 'Type Mismatch at 0: Expected List'


def test_short_tuple() -> None:
    with pytest.raises(LengthMismatchError) as e:
        parse(b'li1ee', tuple[int, int])
    assert e.value.expected == 2
    assert e.value.actual == 1
    assert str(e.value) == 'Length Mismatch: Expected: 2, Actual: 1'


def test_long_tuple_fails_at_terminator() -> None:
    with pytest.raises(UnexpectedCharError) as e:
        parse(b'li1ei2ei3ee', tuple[int, int])
    assert e.value.pos == 7


def test_short_fixed_array() -> None:
    with pytest.raises(LengthMismatchError) as e:
        parse(b'li1ei2ee', FixedArray(int, 3))
    assert (e.value.expected, e.value.actual) == (3, 2)


def test_trailing_data_is_ignored_by_default() -> None:
    assert parse(b'i1ei2e', int) == 1


def test_strict_eof() -> None:
    settings = DecoderSettings(STRICT_EOF=True)
    assert parse(b'i1e', int, settings=settings) == 1
    with pytest.raises(TrailingDataError) as e:
        parse(b'i1ei2e', int, settings=settings)
    assert e.value.pos == 3


def test_parse_prefix() -> None:
    data = b'i1e4:spamle'
    value, consumed = parse_prefix(data, int)
    assert (value, consumed) == (1, 3)
    value, consumed = parse_prefix(memoryview(data)[consumed:], bytes)
    assert (value, consumed) == (b'spam', 6)


def test_parse_prefix_ignores_strict_eof() -> None:
    settings = DecoderSettings(STRICT_EOF=True)
    assert parse_prefix(b'i1ei2e', int, settings=settings) == (1, 3)


def test_strict_eof_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('BX_STRICT_EOF', 'true')
    with pytest.raises(TrailingDataError):
        parse(b'i1ei2e', int)
    assert parse(b'i1ei2e', int, settings=DecoderSettings()) == 1


def test_memoryview_aliases_input() -> None:
    data = b'xx4:spam'
    value, _ = parse_prefix(memoryview(data)[2:], memoryview)
    assert value == b'spam'
    assert value.obj is data
    assert value.readonly


def test_mutable_input_is_visible_through_views() -> None:
    data = bytearray(b'l4:spame')
    value = parse(data, list[memoryview])
    data[3] = ord('S')
    assert value == [b'Spam']


def test_failure_is_logged() -> None:
    with capture_logs() as logs:
        with pytest.raises(EofError):
            parse(b'i12', int)
    assert len(logs) == 1
    log = logs[0]
    assert log['event'] == 'decode failed'
    assert log['log_level'] == 'debug'
    assert log['error'] == 'EofError'
    assert log['pos'] == 3


def test_version_is_readable_without_importing() -> None:
    # setup.py reads the version with a regex so that installing doesn't need the dependencies
    source = Path(bx.version.__file__).read_text()
    match = re.search(r"^__version__ = '([^']+)'", source, re.MULTILINE)
    assert match is not None
    assert match.group(1) == bx.version.__version__
