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

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Collection, Hashable, Iterable
from typing import Any, TypeVar, get_args, get_origin

from sortedcontainers import SortedSet
from typing_extensions import Self, override

from bx.adapters.decode_type import DecodeType
from bx.adapters.utils import ensure_hashable, is_origin_hashable, pretty_type
from bx.de import Decoder, ListAccess, Visitor

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _CollectionVisitor(Visitor[Collection[T]]):
    __slots__ = ('_item', '_build')

    def __init__(self, item: DecodeType[T], build: Any) -> None:
        self._item = item
        self._build = build

    @override
    def visit_list(self, access: ListAccess, /) -> Collection[T]:
        return self._build(access.iter_elements(self._item))


class _CollectionDecodeType(DecodeType[Collection[T]], ABC):
    """ Used as base for DecodeType classes that build a collection from a list of any length.
    """

    __slots__ = ('_item',)

    _item: DecodeType[T]

    def __init__(self, item_decode_type: DecodeType[T], /) -> None:
        self._item = item_decode_type

    @abstractmethod
    def _build(self, items: Iterable[T]) -> Collection[T]:
        """ How to build the concrete collection from an iterable of items.
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        member_type = cls._get_member_type(type_)
        return cls(DecodeType.from_type(member_type, type_map=type_map))

    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Collection):
            raise TypeError('expected Collection type')
        args = get_args(type_)
        if not args or len(args) != 1:
            raise TypeError(f'expected {pretty_type(origin_type)}[<type>]')
        return args[0]

    @override
    def decode(self, decoder: Decoder, /) -> Collection[T]:
        return decoder.decode_list(_CollectionVisitor(self._item, self._build))

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._item!r})'


class ListDecodeType(_CollectionDecodeType[T]):
    """ Represents builtin `list` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)


class DequeDecodeType(_CollectionDecodeType[T]):
    """ Represents `collections.deque` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> deque[T]:
        return deque(items)


class SetDecodeType(_CollectionDecodeType[H]):
    """ Represents builtin `set` values, repeated members are merged.

    Members holding views of a mutable input are rejected with a type mismatch.
    """

    @override
    def _build(self, items: Iterable[H]) -> set[H]:
        return set(map(ensure_hashable, items))

    @override
    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        member_type = super()._get_member_type(type_)
        if member_type is Any or not is_origin_hashable(member_type):
            raise TypeError(f'{pretty_type(member_type)} is not hashable')
        return member_type


class FrozenSetDecodeType(SetDecodeType[H]):
    """ Represents builtin `frozenset` values.
    """

    @override
    def _build(self, items: Iterable[H]) -> frozenset[H]:
        return frozenset(map(ensure_hashable, items))


class SortedSetDecodeType(SetDecodeType[H]):
    """ Represents `sortedcontainers.SortedSet` values, the ordered counterpart of `set`.
    """

    @override
    def _build(self, items: Iterable[H]) -> SortedSet:
        return SortedSet(items)

    @override
    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        member_type = super()._get_member_type(type_)
        if (get_origin(member_type) or member_type) is memoryview:
            raise TypeError('memoryview members are not orderable, use bytes instead')
        return member_type
