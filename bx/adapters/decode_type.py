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
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, Optional, TypeVar, final

from typing_extensions import Self

from bx.adapters.utils import TypeAliasMap, TypeToDecodeTypeMap, get_aliased_type, get_usable_origin_type
from bx.de import Decoder

if TYPE_CHECKING:
    from bx.settings import DecoderSettings
    from bx.types import Buffer

T = TypeVar('T')


class DecodeType(ABC, Generic[T]):
    """ Models how a value of a known type signature is built from a decoder.

    Instances implement the `bx.de.Decode` protocol, so they can be given anywhere a decode target is expected. They
    are normally built from a type annotation with `DecodeType.from_type`, which uses a `TypeMap` to pick the concrete
    class and recurses into the annotation's arguments, so a `dict[str, list[int]]` becomes a map adapter holding a
    str key adapter and a list adapter that holds an int adapter.

    Instances are immutable and hold no state between calls, so they can be shared and reused freely.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        decode_types_map: TypeToDecodeTypeMap

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    @final
    @staticmethod
    def from_type(type_: Any, /, *, type_map: TypeMap) -> DecodeType[Any]:
        """ Instantiate a DecodeType instance from a type signature using the given maps.

        The `decode_types_map` associates concrete types to DecodeType classes, while the `alias_map` associates
        abstract types with the concrete types to use instead (`Sequence` becomes `list` for instance).
        """
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        decode_type = type_map.decode_types_map[usable_origin]
        aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=False)
        return decode_type._from_type(aliased_type, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: TypeMap) -> Self:
        """ Instantiate a DecodeType instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        use `DecodeType.from_type` on the args, forwarding the given `type_map`.
        """
        # XXX: a DecodeType that is only meant for local use does not need to implement _from_type
        raise TypeError(f'{cls} is not compatible with use in a DecodeType.TypeMap')

    @abstractmethod
    def decode(self, decoder: Decoder, /) -> T:
        """ Build a value by asking the decoder for exactly one primitive shape.
        """
        raise NotImplementedError

    @final
    def from_bytes(self, data: Buffer, /, *, settings: Optional[DecoderSettings] = None) -> T:
        """ Shortcut for `bx.parse(data, self, settings=settings)`.
        """
        from bx.api import parse
        return parse(data, self, settings=settings)

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'
