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
Zero-copy typed bencode decoding.

>>> import bx
>>> bx.parse(b'l4:spam4:eggse', list[str])
['spam', 'eggs']
"""

from bx.adapters import FixedArray
from bx.api import parse, parse_prefix
from bx.de import Decode, Decoder, DictAccess, ListAccess, Visitor
from bx.exceptions import (
    BxError,
    DepthLimitError,
    EofError,
    IntegerOverflowError,
    LengthMismatchError,
    ParseError,
    TrailingDataError,
    TypeMismatchError,
    UnexpectedCharError,
)
from bx.settings import DecoderSettings
from bx.version import __version__

__all__ = [
    'BxError',
    'Decode',
    'Decoder',
    'DecoderSettings',
    'DepthLimitError',
    'DictAccess',
    'EofError',
    'FixedArray',
    'IntegerOverflowError',
    'LengthMismatchError',
    'ListAccess',
    'ParseError',
    'TrailingDataError',
    'TypeMismatchError',
    'UnexpectedCharError',
    'Visitor',
    '__version__',
    'parse',
    'parse_prefix',
]
