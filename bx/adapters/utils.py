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

import inspect
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, is_dataclass
from typing import TYPE_CHECKING, Any, NamedTuple, TypeAlias, TypeVar, get_args, get_origin

from structlog import get_logger

from bx.de import Decode
from bx.exceptions import TypeMismatchError

if TYPE_CHECKING:
    from bx.adapters.decode_type import DecodeType


logger = get_logger()

H = TypeVar('H', bound=Hashable)

TypeAliasMap: TypeAlias = Mapping[Any, type]
TypeToDecodeTypeMap: TypeAlias = Mapping[Any, type['DecodeType']]


def is_origin_hashable(type_: Any) -> bool:
    """ Checks whether the given type signature satisfies `collections.abc.Hashable`, arguments are ignored.

    >>> is_origin_hashable(bytes)
    True
    >>> is_origin_hashable(memoryview)
    True
    >>> is_origin_hashable(tuple[int, list[int]])
    True
    >>> is_origin_hashable(list[int])
    False
    >>> is_origin_hashable(dict)
    False
    """
    origin_type = get_origin(type_) or type_
    if not isinstance(origin_type, type):
        return False
    return issubclass(origin_type, Hashable)


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int)
    'int'
    >>> pretty_type(list[int])
    'list[int]'
    """
    if hasattr(type_, '__args__') or not hasattr(type_, '__name__'):
        return str(type_)
    return type_.__name__


def ensure_hashable(value: H) -> H:
    """ Hash the value up front so that views of a mutable input fail as a type mismatch.

    >>> ensure_hashable(memoryview(b'ok')).tobytes()
    b'ok'
    >>> ensure_hashable(memoryview(bytearray(b'no')).toreadonly())
    Traceback (most recent call last):
    ...
    bx.exceptions.TypeMismatchError: Type Mismatch: Views of a mutable input are not hashable
    """
    try:
        hash(value)
    except TypeError:
        raise TypeMismatchError('Views of a mutable input are not hashable') from None
    return value


# XXX: _verbose argument is used to help with doctest
def get_aliased_type(type_: Any, alias_map: TypeAliasMap, *, _verbose: bool = True) -> Any:
    """ Map a type to its usable alias including the type's arguments.

    >>> from collections.abc import Mapping, Sequence
    >>> from bx.adapters import DEFAULT_TYPE_ALIAS_MAP as alias_map
    >>> get_aliased_type(Mapping[str, Sequence[int]], alias_map, _verbose=False)
    dict[str, list[int]]
    >>> get_aliased_type(tuple[int, ...], alias_map, _verbose=False)
    tuple[int, ...]
    """
    new_type, replaced = _get_aliased_type(type_, alias_map)
    if replaced and _verbose:
        logger.debug('type replaced', old=pretty_type(type_), new=pretty_type(new_type))
    return new_type


def _get_aliased_type(type_: Any, alias_map: TypeAliasMap) -> tuple[Any, bool]:
    """ Implementation of get_aliased_type with indication of whether there was a replacement.
    """
    origin_type = get_origin(type_) or type_
    replaced = False
    aliased_origin = origin_type
    if _is_hashable_key(origin_type) and origin_type in alias_map:
        aliased_origin = alias_map[origin_type]
        replaced = True

    type_args = get_args(type_)
    if not type_args:
        return (aliased_origin if replaced else type_), replaced

    # aliased_args_replaced is list of [(arg1, replaced1), (arg2, replaced2), ...]
    aliased_args_replaced = [_get_aliased_type(arg, alias_map) for arg in type_args]
    aliased_args, args_replaced = zip(*aliased_args_replaced)
    replaced |= any(args_replaced)
    if not replaced:
        return type_, False

    assert hasattr(aliased_origin, '__class_getitem__'), 'we must have an indexable class at this point'
    return aliased_origin[*aliased_args], True


def is_decode_class(type_: Any) -> bool:
    """ Whether `type_` is a class that builds itself through a `decode` classmethod.

    >>> is_decode_class(bytes)
    False
    """
    if not isinstance(type_, type):
        return False
    decode = getattr(type_, 'decode', None)
    # XXX: `bytes.decode` and the like are instance methods, they must not count
    return inspect.ismethod(decode) and decode.__self__ is type_


def _is_hashable_key(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def get_usable_origin_type(type_: Any, /, *, type_map: 'DecodeType.TypeMap', _verbose: bool = True) -> Any:
    """ Map a given type into a key that exists in `type_map.decode_types_map`.

    Raises a `TypeError` if no adapter in the map can handle the type.

    >>> from bx.adapters import DEFAULT_TYPE_MAP as type_map
    >>> from collections.abc import Sequence
    >>> get_usable_origin_type(Sequence[bytes], type_map=type_map, _verbose=False)
    <class 'list'>
    """
    if isinstance(type_, str):
        raise NotImplementedError('string annotations are not currently supported')

    if Decode in type_map.decode_types_map and is_decode_class(type_):
        return Decode

    aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=_verbose)
    origin_aliased_type = get_origin(aliased_type) or aliased_type

    if _is_hashable_key(origin_aliased_type) and origin_aliased_type in type_map.decode_types_map:
        return origin_aliased_type

    if NamedTuple in type_map.decode_types_map and NamedTuple in getattr(type_, '__orig_bases__', tuple()):
        return NamedTuple

    if dataclass in type_map.decode_types_map and isinstance(type_, type) and is_dataclass(type_):
        return dataclass

    raise TypeError(f'type {pretty_type(type_)} is not supported by any DecodeType class')
