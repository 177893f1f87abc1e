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


class MemoryViewDecodeType(DecodeType[memoryview]):
    """ Represents byte strings without copying, the value is a read-only view into the input buffer.

    The buffer must outlive the value and must not be modified while the value is in use.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if type_ is not memoryview:
            raise TypeError('expected memoryview type')
        return cls()

    @override
    def decode(self, decoder: Decoder, /) -> memoryview:
        return decoder.decode_bytes()


class BytesDecodeType(DecodeType[bytes]):
    """ Represents builtin `bytes` values, this is the owning variant of `MemoryViewDecodeType`.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if type_ is not bytes:
            raise TypeError('expected bytes type')
        return cls()

    @override
    def decode(self, decoder: Decoder, /) -> bytes:
        return decoder.decode_bytes().tobytes()
