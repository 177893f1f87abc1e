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
Dataclasses are decoded from a dict, each key is matched with the field of the same name.

Keys that don't match any field are decoded as `Any` and dropped, fields without a default that never show up fail
with a `TypeMismatchError`. As with maps, a repeated key keeps the last value.

>>> from dataclasses import dataclass
>>> from bx import parse
>>> @dataclass
... class Peer:
...     ip: str
...     port: int
>>> parse(b'd2:ip9:127.0.0.14:porti6881ee', Peer)
Peer(ip='127.0.0.1', port=6881)
"""

from __future__ import annotations

from dataclasses import MISSING, fields, is_dataclass
from typing import TYPE_CHECKING, Any, TypeVar, get_type_hints

from typing_extensions import Self, override

from bx.adapters.any_decode_type import AnyDecodeType
from bx.adapters.decode_type import DecodeType
from bx.de import Decoder, DictAccess, Visitor
from bx.exceptions import TypeMismatchError

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

D = TypeVar('D', bound='DataclassInstance')

_SKIP = AnyDecodeType()


class _DataclassVisitor(Visitor[D]):
    __slots__ = ('_decode_type',)

    def __init__(self, decode_type: DataclassDecodeType[D]) -> None:
        self._decode_type = decode_type

    @override
    def visit_dict(self, access: DictAccess, /) -> D:
        fields_ = self._decode_type._fields
        kwargs: dict[str, Any] = {}
        while (key := access.next_key()) is not None:
            field = fields_.get(key.tobytes())
            if field is None:
                access.next_value(_SKIP)
                continue
            field_name, field_decode_type = field
            kwargs[field_name] = access.next_value(field_decode_type)
        for field_name in self._decode_type._required:
            if field_name not in kwargs:
                raise TypeMismatchError(f'Missing field {field_name}')
        return self._decode_type._class(**kwargs)


class DataclassDecodeType(DecodeType[D]):
    __slots__ = ('_fields', '_required', '_class')

    # maps the encoded key to the field name and how to decode its value
    _fields: dict[bytes, tuple[str, DecodeType]]
    _required: tuple[str, ...]
    _class: type[D]

    def __init__(self, fields_: dict[str, DecodeType], required: tuple[str, ...], class_: type[D]) -> None:
        self._fields = {name.encode('utf-8'): (name, decode_type) for name, decode_type in fields_.items()}
        self._required = required
        self._class = class_

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if not isinstance(type_, type) or not is_dataclass(type_):
            raise TypeError('expected a dataclass')
        hints = get_type_hints(type_)
        values: dict[str, DecodeType] = {}
        required: list[str] = []
        for field in fields(type_):
            if not field.init:
                continue
            values[field.name] = DecodeType.from_type(hints[field.name], type_map=type_map)
            if field.default is MISSING and field.default_factory is MISSING:
                required.append(field.name)
        return cls(values, tuple(required), type_)

    @override
    def decode(self, decoder: Decoder, /) -> D:
        return decoder.decode_dict(_DataclassVisitor(self))

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._class.__name__})'
