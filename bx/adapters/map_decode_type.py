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
Dict shapes decoded into mappings.

Keys in the encoding are always byte strings, so the key type of the annotation only decides how the raw key is
presented: `memoryview` keeps the zero-copy view, `bytes` copies it and `str` validates it as UTF-8. Views are only
hashable when the input is immutable, so `memoryview` keys over a `bytearray` fail with a type mismatch. Entries are
inserted in the order they appear, so a repeated key keeps the last value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar, get_args, get_origin

from sortedcontainers import SortedDict
from typing_extensions import Self, override

from bx.adapters.decode_type import DecodeType
from bx.adapters.str_decode_type import decode_utf8
from bx.adapters.utils import ensure_hashable, pretty_type
from bx.de import Decoder, DictAccess, Visitor

K = TypeVar('K')
T = TypeVar('T')

KeyBuilder = Callable[[memoryview], Any]

_KEY_BUILDERS: dict[type, KeyBuilder] = {
    memoryview: ensure_hashable,
    bytes: memoryview.tobytes,
    str: decode_utf8,
}


class _MapVisitor(Visitor[Mapping[K, T]]):
    __slots__ = ('_key', '_value', '_build')

    def __init__(self, key: KeyBuilder, value: DecodeType[T], build: Any) -> None:
        self._key = key
        self._value = value
        self._build = build

    @override
    def visit_dict(self, access: DictAccess, /) -> Mapping[K, T]:
        key_builder = self._key
        return self._build((key_builder(key), value) for key, value in access.iter_entries(self._value))


class _MapDecodeType(DecodeType[Mapping[K, T]], ABC):
    """ Base class to help implement DecodeType for mappings.
    """

    __slots__ = ('_key_type', '_value')

    _key_type: type
    _value: DecodeType[T]

    def __init__(self, key_type: type, value: DecodeType[T]) -> None:
        if key_type not in _KEY_BUILDERS:
            raise TypeError(f'map keys must be one of: {", ".join(t.__name__ for t in _KEY_BUILDERS)}')
        self._key_type = key_type
        self._value = value

    @abstractmethod
    def _build(self, items: Iterable[tuple[K, T]]) -> Mapping[K, T]:
        """ How to build the concrete map from an iterable of (key, value).
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Mapping):
            raise TypeError('expected Mapping type')
        args = get_args(type_)
        if not args or len(args) != 2:
            raise TypeError(f'expected {pretty_type(origin_type)}[<key type>, <value type>]')
        key_type, value_type = args
        return cls(key_type, DecodeType.from_type(value_type, type_map=type_map))

    @override
    def decode(self, decoder: Decoder, /) -> Mapping[K, T]:
        return decoder.decode_dict(_MapVisitor(_KEY_BUILDERS[self._key_type], self._value, self._build))

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._key_type.__name__}, {self._value!r})'


class DictDecodeType(_MapDecodeType[K, T]):
    """ Represents builtin `dict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[K, T]]) -> dict[K, T]:
        return dict(items)


class OrderedDictDecodeType(_MapDecodeType[K, T]):
    """ Represents `collections.OrderedDict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[K, T]]) -> OrderedDict[K, T]:
        return OrderedDict(items)


class SortedDictDecodeType(_MapDecodeType[K, T]):
    """ Represents `sortedcontainers.SortedDict` values, iterated in key order regardless of the encoded order.
    """

    def __init__(self, key_type: type, value: DecodeType[T]) -> None:
        if key_type is memoryview:
            raise TypeError('memoryview keys are not orderable, use bytes instead')
        super().__init__(key_type, value)

    @override
    def _build(self, items: Iterable[tuple[K, T]]) -> SortedDict:
        return SortedDict(items)
