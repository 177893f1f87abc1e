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

from enum import Enum
from typing import Final, Optional

from typing_extensions import Buffer

__all__ = [
    'Buffer',
    'Shape',
    'TAG_INT',
    'TAG_LIST',
    'TAG_DICT',
    'TAG_END',
    'BYTES_SEPARATOR',
    'MINUS',
]

TAG_INT: Final[int] = ord('i')
TAG_LIST: Final[int] = ord('l')
TAG_DICT: Final[int] = ord('d')
TAG_END: Final[int] = ord('e')
BYTES_SEPARATOR: Final[int] = ord(':')
MINUS: Final[int] = ord('-')

_DIGIT_0: Final[int] = ord('0')
_DIGIT_9: Final[int] = ord('9')


class Shape(Enum):
    """The four value kinds of the grammar, this set is closed."""

    INT = 'integer'
    BYTES = 'byte string'
    LIST = 'list'
    DICT = 'dict'

    @staticmethod
    def from_tag(tag: int) -> Optional['Shape']:
        """ Shape that starts with the given byte, or None if no shape does.

        >>> Shape.from_tag(ord('i'))
        <Shape.INT: 'integer'>
        >>> Shape.from_tag(ord('7'))
        <Shape.BYTES: 'byte string'>
        >>> Shape.from_tag(ord('x')) is None
        True
        """
        if tag == TAG_INT:
            return Shape.INT
        if tag == TAG_LIST:
            return Shape.LIST
        if tag == TAG_DICT:
            return Shape.DICT
        if _DIGIT_0 <= tag <= _DIGIT_9:
            return Shape.BYTES
        return None
