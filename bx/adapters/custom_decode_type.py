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

from typing import Any, TypeVar

from typing_extensions import Self, override

from bx.adapters.decode_type import DecodeType
from bx.adapters.utils import is_decode_class
from bx.de import Decoder

T = TypeVar('T')


class CustomDecodeType(DecodeType[T]):
    """ Wraps a class that implements `decode` as a classmethod, so it can be nested in other annotations.

    >>> from bx import parse, Decoder
    >>> class Celsius(float):
    ...     @classmethod
    ...     def decode(cls, decoder: Decoder) -> 'Celsius':
    ...         return cls(decoder.decode_int() / 100)
    >>> parse(b'li2150ei-300ee', list[Celsius])
    [21.5, -3.0]
    """

    __slots__ = ('_class',)

    _class: type[T]

    def __init__(self, class_: type[T]) -> None:
        self._class = class_

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DecodeType.TypeMap) -> Self:
        if not is_decode_class(type_):
            raise TypeError('expected a class with a decode classmethod')
        return cls(type_)

    @override
    def decode(self, decoder: Decoder, /) -> T:
        return self._class.decode(decoder)  # type: ignore[attr-defined]

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._class.__name__})'
