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

from __future__ import annotations

from typing import Any

from typing_extensions import Self, override

from bx.adapters.decode_type import DecodeType
from bx.de import Decoder
from bx.exceptions import TypeMismatchError


def decode_utf8(data: memoryview) -> str:
    """ Decode a byte string as UTF-8 text, failing with a type mismatch when it isn't valid.

    >>> decode_utf8(memoryview('π'.encode('utf-8')))
    'π'
    >>> decode_utf8(memoryview(b'\\xff'))
    Traceback (most recent call last):
    ...
    bx.exceptions.TypeMismatchError: Type Mismatch: Not a valid UTF-8 string
    """
    try:
        return str(data, 'utf-8')
    except UnicodeDecodeError:
        raise TypeMismatchError('Not a valid UTF-8 string') from None


class StrDecodeType(DecodeType[str]):
    """ Represents builtin `str` values, the byte string must be valid UTF-8.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if type_ is not str:
            raise TypeError('expected str type')
        return cls()

    @override
    def decode(self, decoder: Decoder, /) -> str:
        return decode_utf8(decoder.decode_bytes())
