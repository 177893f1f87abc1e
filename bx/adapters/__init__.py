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
Built-in decode types and the maps used to pick them from type annotations.

Use `get_decode_type` to turn any decode target into something with a `decode(decoder)` method:

>>> get_decode_type(dict[str, list[int]])
DictDecodeType(str, ListDecodeType(IntDecodeType()))
"""

from collections import OrderedDict, deque
from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Sequence, Set
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, NamedTuple, TypeVar

from sortedcontainers import SortedDict, SortedSet

from bx.adapters.any_decode_type import AnyDecodeType
from bx.adapters.bytes_decode_type import BytesDecodeType, MemoryViewDecodeType
from bx.adapters.collection_decode_type import (
    DequeDecodeType,
    FrozenSetDecodeType,
    ListDecodeType,
    SetDecodeType,
    SortedSetDecodeType,
)
from bx.adapters.custom_decode_type import CustomDecodeType
from bx.adapters.dataclass_decode_type import DataclassDecodeType
from bx.adapters.decode_type import DecodeType
from bx.adapters.int_decode_type import BoolDecodeType, IntDecodeType
from bx.adapters.map_decode_type import DictDecodeType, OrderedDictDecodeType, SortedDictDecodeType
from bx.adapters.str_decode_type import StrDecodeType
from bx.adapters.tuple_decode_type import FixedArray, FixedArrayDecodeType, NamedTupleDecodeType, TupleDecodeType
from bx.adapters.utils import TypeAliasMap, TypeToDecodeTypeMap, is_decode_class
from bx.de import Decode, DecodeTarget

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_TO_DECODE_TYPE_MAP',
    'DEFAULT_TYPE_MAP',
    'AnyDecodeType',
    'BoolDecodeType',
    'BytesDecodeType',
    'CustomDecodeType',
    'DataclassDecodeType',
    'DecodeType',
    'DequeDecodeType',
    'DictDecodeType',
    'FixedArray',
    'FixedArrayDecodeType',
    'FrozenSetDecodeType',
    'IntDecodeType',
    'ListDecodeType',
    'MemoryViewDecodeType',
    'NamedTupleDecodeType',
    'OrderedDictDecodeType',
    'SetDecodeType',
    'SortedDictDecodeType',
    'SortedSetDecodeType',
    'StrDecodeType',
    'TupleDecodeType',
    'TypeAliasMap',
    'TypeToDecodeTypeMap',
    'get_decode_type',
    'make_decode_type',
]

T = TypeVar('T')

# abstract annotations are replaced with the concrete type that is built
DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    Sequence: list,
    MutableSequence: list,
    Set: frozenset,
    MutableSet: set,
    Mapping: dict,
    MutableMapping: dict,
    object: Any,
}

# Mapping between types and DecodeType classes.
DEFAULT_TYPE_TO_DECODE_TYPE_MAP: TypeToDecodeTypeMap = {
    # builtin types:
    bool: BoolDecodeType,
    bytes: BytesDecodeType,
    dict: DictDecodeType,
    frozenset: FrozenSetDecodeType,
    int: IntDecodeType,
    list: ListDecodeType,
    memoryview: MemoryViewDecodeType,
    set: SetDecodeType,
    str: StrDecodeType,
    tuple: TupleDecodeType,
    # other Python types:
    Any: AnyDecodeType,
    Decode: CustomDecodeType,
    NamedTuple: NamedTupleDecodeType,
    OrderedDict: OrderedDictDecodeType,
    dataclass: DataclassDecodeType,
    deque: DequeDecodeType,
    # sortedcontainers types:
    SortedDict: SortedDictDecodeType,
    SortedSet: SortedSetDecodeType,
}

DEFAULT_TYPE_MAP = DecodeType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_DECODE_TYPE_MAP)


@lru_cache(maxsize=512)
def make_decode_type(type_: Any, /) -> DecodeType[Any]:
    """ Like DecodeType.from_type, but with the default maps and cached, since adapters hold no state.

    If you need to customize the mapping use `DecodeType.from_type` instead.
    """
    return DecodeType.from_type(type_, type_map=DEFAULT_TYPE_MAP)


def get_decode_type(target: DecodeTarget[T], /) -> Decode[T]:
    """ Resolve a decode target into an object with a `decode(decoder)` method.

    DecodeType instances and objects with a `decode` method are used as is, a class counts only if `decode` is a
    classmethod, `bytes.decode` is an unrelated instance method. Anything else is resolved with the default maps.
    """
    if isinstance(target, DecodeType) or is_decode_class(target):
        return target
    if not isinstance(target, type) and callable(getattr(target, 'decode', None)):
        return target
    return make_decode_type(target)

