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
from bx.de import Decoder, DictAccess, ListAccess, Visitor


class _AnyVisitor(Visitor[Any]):
    """Accepts every shape, containers are built recursively with the same visitor."""

    @override
    def visit_int(self, value: int, /) -> int:
        return value

    @override
    def visit_bytes(self, value: memoryview, /) -> memoryview:
        return value

    @override
    def visit_list(self, access: ListAccess, /) -> list[Any]:
        return list(access.iter_elements(_ANY))

    @override
    def visit_dict(self, access: DictAccess, /) -> dict[bytes, Any]:
        return {key.tobytes(): value for key, value in access.iter_entries(_ANY)}


_ANY_VISITOR = _AnyVisitor()


class AnyDecodeType(DecodeType[Any]):
    """ Represents a value whose shape is only known at runtime.

    Integers become `int`, byte strings become `memoryview` (aliasing the input), lists become `list` and dicts
    become `dict` keyed by `bytes`, which unlike views stay hashable over a `bytearray` input. Views compare equal
    to `bytes`:

    >>> from bx import parse
    >>> value = parse(b'd3:cowl3:mooi2eee', Any)
    >>> value[b'cow'] == [b'moo', 2]
    True
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if type_ is not Any and type_ is not object:
            raise TypeError('expected Any or object')
        return cls()

    @override
    def decode(self, decoder: Decoder, /) -> Any:
        return decoder.decode_any(_ANY_VISITOR)


_ANY = AnyDecodeType()
