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


class IntDecodeType(DecodeType[int]):
    """ Represents builtin `int` values, limited to the signed 64-bit range by the decoder.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if type_ is not int:
            raise TypeError('expected int type')
        return cls()

    @override
    def decode(self, decoder: Decoder, /) -> int:
        return decoder.decode_int()


class BoolDecodeType(DecodeType[bool]):
    """ Represents builtin `bool` values, encoded as the integers 0 and 1.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if type_ is not bool:
            raise TypeError('expected bool type')
        return cls()

    @override
    def decode(self, decoder: Decoder, /) -> bool:
        value = decoder.decode_int()
        if value not in (0, 1):
            raise TypeMismatchError('Not a valid boolean')
        return value == 1
