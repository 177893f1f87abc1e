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
Contracts between the grammar walker and the types being built.

There are four pieces:

- `Decode`: anything with a `decode(decoder)` callable that builds a value, this is the recursion point. User types
  implement it as a classmethod, the built-in adapters in `bx.adapters` implement it as a method.
- `Decoder`: the primitive operations, one per shape. A `Decode` implementation asks for exactly one of them.
- `Visitor`: what a list/dict-shaped type hands to the decoder, it only overrides the shapes it accepts, every other
  shape fails with a `TypeMismatchError`.
- `ListAccess`/`DictAccess`: given to a visitor while it is inside a list/dict, they pull one element/entry at a time
  and return `None` when the container ends.

A user type looks like this:

    class Point:
        def __init__(self, x: int, y: int) -> None:
            self.x = x
            self.y = y

        @classmethod
        def decode(cls, decoder: Decoder) -> 'Point':
            return decoder.decode_list(PointVisitor())

    class PointVisitor(Visitor['Point']):
        def visit_list(self, access: ListAccess) -> 'Point':
            x = access.next_element(int)
            y = access.next_element(int)
            if x is None or y is None:
                raise LengthMismatchError(2, 0 if x is None else 1)
            return Point(x, y)

The `type_` given to the accessors can be either a `Decode` implementation or a type annotation (`int`,
`list[bytes]`, `dict[str, int]`, ...) which is resolved with the default type map of `bx.adapters`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Final, Generic, Iterator, Optional, Protocol, TypeVar, Union

from bx.exceptions import TypeMismatchError
from bx.types import Shape

T = TypeVar('T')
T_co = TypeVar('T_co', covariant=True)
V = TypeVar('V')

# reasons given by the default visit methods
NOT_EXPECTED: Final[dict[Shape, str]] = {
    Shape.INT: 'Integer not expected',
    Shape.BYTES: 'Byte string not expected',
    Shape.LIST: 'List not expected',
    Shape.DICT: 'Dict not expected',
}

_VISIT_METHODS: Final[dict[Shape, str]] = {
    Shape.INT: 'visit_int',
    Shape.BYTES: 'visit_bytes',
    Shape.LIST: 'visit_list',
    Shape.DICT: 'visit_dict',
}


class Decode(Protocol[T_co]):
    def decode(self, decoder: Decoder, /) -> T_co:
        ...


# a Decode implementation or an annotation that the default type map knows how to resolve
DecodeTarget = Union[Decode[T], type[T]]


class Decoder(ABC):
    """The primitive decode operations, each call decodes exactly one value."""

    @abstractmethod
    def decode_int(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def decode_bytes(self) -> memoryview:
        """Decode a byte string, the result aliases the input buffer."""
        raise NotImplementedError

    @abstractmethod
    def decode_list(self, visitor: Visitor[V]) -> V:
        raise NotImplementedError

    @abstractmethod
    def decode_dict(self, visitor: Visitor[V]) -> V:
        raise NotImplementedError

    @abstractmethod
    def decode_any(self, visitor: Visitor[V]) -> V:
        """Decode whatever shape comes next, dispatching to the matching visit method."""
        raise NotImplementedError


class ListAccess(ABC):
    @abstractmethod
    def next_element(self, type_: DecodeTarget[T], /) -> Optional[T]:
        """Decode the next element as `type_`, or return None if the list ended.

        Because None marks the end of the list, Decode implementations must never produce None.
        """
        raise NotImplementedError

    def iter_elements(self, type_: DecodeTarget[T], /) -> Iterator[T]:
        """Decode the remaining elements as `type_`."""
        while (value := self.next_element(type_)) is not None:
            yield value


class DictAccess(ABC):
    @abstractmethod
    def next_key(self) -> Optional[memoryview]:
        """Decode the next key, or return None if the dict ended.

        Keys are always raw byte strings and alias the input buffer. Every key must be followed by exactly one call
        to `next_value`, this split lets the value type depend on the key.
        """
        raise NotImplementedError

    @abstractmethod
    def next_value(self, type_: DecodeTarget[T], /) -> T:
        """Decode the value that belongs to the key returned by the last `next_key` call."""
        raise NotImplementedError

    def next_entry(self, type_: DecodeTarget[T], /) -> Optional[tuple[memoryview, T]]:
        """Decode the next key and its value as `type_`, or return None if the dict ended."""
        key = self.next_key()
        if key is None:
            return None
        return key, self.next_value(type_)

    def iter_entries(self, type_: DecodeTarget[T], /) -> Iterator[tuple[memoryview, T]]:
        """Decode the remaining entries, all values as `type_`."""
        while (entry := self.next_entry(type_)) is not None:
            yield entry


class Visitor(Generic[V]):
    """ One-shot builder for a value, by default every shape is rejected.

    Subclasses override only the visit methods for the shapes they accept. Decoders use `accepts` to reject a shape
    before consuming it.
    """

    @classmethod
    def accepts(cls, shape: Shape) -> bool:
        """Whether the visit method for `shape` is overridden."""
        name = _VISIT_METHODS[shape]
        return getattr(cls, name) is not getattr(Visitor, name)

    def visit_int(self, value: int, /) -> V:
        raise TypeMismatchError(NOT_EXPECTED[Shape.INT])

    def visit_bytes(self, value: memoryview, /) -> V:
        raise TypeMismatchError(NOT_EXPECTED[Shape.BYTES])

    def visit_list(self, access: ListAccess, /) -> V:
        raise TypeMismatchError(NOT_EXPECTED[Shape.LIST])

    def visit_dict(self, access: DictAccess, /) -> V:
        raise TypeMismatchError(NOT_EXPECTED[Shape.DICT])
