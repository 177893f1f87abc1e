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
Fixed-size list shapes: `tuple[A, B, C]`, `FixedArray(T, n)` and `NamedTuple` subclasses.

All of them pull exactly as many elements as they need, in order, and fail with a `LengthMismatchError` if the list
ends early. A `NamedTuple` only needs its fields without defaults, so trailing defaulted fields may be left out. Extra elements are never read here, the decoder rejects them when it doesn't find the list terminator
after the visitor returns.

A homogeneous `tuple[T, ...]` has no fixed size, it is decoded like a `list[T]` and converted to a tuple.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, NamedTuple, Optional, TypeVar, get_args, get_origin, get_type_hints

from typing_extensions import Self, override

from bx.adapters.decode_type import DecodeType
from bx.de import Decoder, DecodeTarget, ListAccess, Visitor
from bx.exceptions import LengthMismatchError

T = TypeVar('T')
N = TypeVar('N', bound=tuple)


def _pull(access: ListAccess, items: Sequence[DecodeType[Any]], required: int) -> list[Any]:
    """Pull up to `len(items)` elements, the list may only end once `required` of them were read."""
    values: list[Any] = []
    for item in items:
        value = access.next_element(item)
        if value is None:
            if len(values) < required:
                raise LengthMismatchError(expected=required, actual=len(values))
            break
        values.append(value)
    return values


class _FixedVisitor(Visitor[list[Any]]):
    __slots__ = ('_items', '_required')

    def __init__(self, items: Sequence[DecodeType[Any]], required: Optional[int] = None) -> None:
        self._items = items
        self._required = len(items) if required is None else required

    @override
    def visit_list(self, access: ListAccess, /) -> list[Any]:
        return _pull(access, self._items, self._required)


class _VarsizeVisitor(Visitor[tuple]):
    __slots__ = ('_item',)

    def __init__(self, item: DecodeType[Any]) -> None:
        self._item = item

    @override
    def visit_list(self, access: ListAccess, /) -> tuple:
        return tuple(access.iter_elements(self._item))


# XXX: we can't usefully describe the tuple type
class TupleDecodeType(DecodeType[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.
    """

    __slots__ = ('_varsize', '_args')

    _varsize: bool
    _args: tuple[DecodeType, ...]

    def __init__(self, args: DecodeType | Iterable[DecodeType]) -> None:
        if isinstance(args, DecodeType):
            self._varsize = True
            self._args = (args,)
        else:
            self._varsize = False
            self._args = tuple(args)
            for arg in self._args:
                assert isinstance(arg, DecodeType)

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, tuple):
            raise TypeError('expected tuple type')
        if type_ is tuple:
            raise TypeError('expected tuple[<args...>]')
        args = list(get_args(type_))
        if args and args[-1] == Ellipsis:
            if len(args) != 2:
                raise TypeError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(DecodeType.from_type(arg, type_map=type_map))
        else:
            return cls(DecodeType.from_type(arg, type_map=type_map) for arg in args)

    @override
    def decode(self, decoder: Decoder, /) -> tuple:
        if self._varsize:
            item, = self._args
            return decoder.decode_list(_VarsizeVisitor(item))
        return tuple(decoder.decode_list(_FixedVisitor(self._args)))

    @override
    def __repr__(self) -> str:
        if self._varsize:
            return f'{type(self).__name__}({self._args[0]!r})'
        return f'{type(self).__name__}({list(self._args)!r})'


class FixedArrayDecodeType(DecodeType[list[T]]):
    """ Represents a list that must have exactly `length` elements of the same type.

    There is no builtin annotation for this, so instances are made directly, see `FixedArray`.
    """

    __slots__ = ('_items',)

    _items: tuple[DecodeType[T], ...]

    def __init__(self, item: DecodeType[T], length: int) -> None:
        if length < 1:
            raise ValueError('length must be at least 1')
        self._items = (item,) * length

    @property
    def length(self) -> int:
        return len(self._items)

    @override
    def decode(self, decoder: Decoder, /) -> list[T]:
        return decoder.decode_list(_FixedVisitor(self._items))

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._items[0]!r}, {self.length})'


def FixedArray(item_type: DecodeTarget[T], length: int) -> FixedArrayDecodeType[T]:
    """ Build a decode target for a list of exactly `length` elements.

    >>> from bx import parse
    >>> parse(b'li1ei2ei3ee', FixedArray(int, 3))
    [1, 2, 3]
    """
    from bx.adapters import get_decode_type
    return FixedArrayDecodeType(get_decode_type(item_type), length)


# XXX: we can't usefully describe the tuple type
class NamedTupleDecodeType(DecodeType[N]):
    """ Represents `typing.NamedTuple` subclasses, decoded from a list with one element per field in order.

    Fields with a default may be missing from the end of the list, the namedtuple fills them in.
    """

    __slots__ = ('_args', '_actual_type', '_required')

    _args: tuple[DecodeType, ...]
    _actual_type: type[N]
    _required: int

    def __init__(self, namedtuple: type[N], args: Iterable[DecodeType]) -> None:
        self._actual_type = namedtuple
        self._args = tuple(args)
        self._required = len(self._args) - len(namedtuple._field_defaults)  # type: ignore[attr-defined]

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if not issubclass(type_, tuple) or NamedTuple not in getattr(type_, '__orig_bases__', tuple()):
            raise TypeError('expected NamedTuple type')
        hints = get_type_hints(type_)
        args = [hints[field_name] for field_name in type_._fields]
        return cls(type_, (DecodeType.from_type(arg, type_map=type_map) for arg in args))

    @override
    def decode(self, decoder: Decoder, /) -> N:
        values = decoder.decode_list(_FixedVisitor(self._args, self._required))
        return self._actual_type(*values)

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._actual_type.__name__})'
