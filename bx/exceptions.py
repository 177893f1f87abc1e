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

from typing import Optional


class BxError(Exception):
    """Base class for every error raised while decoding a buffer."""


class EofError(BxError):
    """The buffer ended in the middle of a value."""

    def __init__(self, pos: int) -> None:
        super().__init__(f'Unexpected end of file at {pos}')
        self.pos = pos


class TypeMismatchError(BxError):
    """The shape found in the buffer is not one the target type accepts, or a text value is not valid UTF-8."""

    def __init__(self, reason: str, pos: Optional[int] = None) -> None:
        if pos is None:
            super().__init__(f'Type Mismatch: {reason}')
        else:
            super().__init__(f'Type Mismatch at {pos}: {reason}')
        self.reason = reason
        self.pos = pos


class LengthMismatchError(BxError):
    """A fixed-size container received fewer elements than it requires."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f'Length Mismatch: Expected: {expected}, Actual: {actual}')
        self.expected = expected
        self.actual = actual


class ParseError(BxError):
    """The grammar was violated at the given position."""

    def __init__(self, reason: str, pos: int) -> None:
        super().__init__(f'Parse Error at {pos}: {reason}')
        self.reason = reason
        self.pos = pos


class DepthLimitError(ParseError):
    """Lists and dicts are nested deeper than the configured limit."""

    def __init__(self, pos: int, limit: int) -> None:
        super().__init__(f'Nesting deeper than {limit}', pos)
        self.limit = limit


class TrailingDataError(ParseError):
    """Strict EOF was requested but bytes remain after the top-level value."""

    def __init__(self, pos: int) -> None:
        super().__init__('Trailing data', pos)


class UnexpectedCharError(BxError):
    """Malformed digit run, missing separator or wrong terminator."""

    def __init__(self, pos: int) -> None:
        super().__init__(f'Unexpected character at {pos}')
        self.pos = pos


class IntegerOverflowError(BxError):
    """A digit run does not fit in the allowed range."""

    def __init__(self, pos: int) -> None:
        super().__init__(f'Numeric overflow occurred at {pos}')
        self.pos = pos
