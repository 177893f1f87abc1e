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

from typing import Optional, TypeVar

from structlog import get_logger

from bx.adapters import get_decode_type
from bx.de import DecodeTarget
from bx.engine import BenDecoder
from bx.exceptions import BxError
from bx.settings import DecoderSettings, get_global_settings
from bx.types import Buffer

logger = get_logger()

T = TypeVar('T')


def parse(data: Buffer, type_: DecodeTarget[T], /, *, settings: Optional[DecoderSettings] = None) -> T:
    """ Decode one top-level value of type `type_` from `data`.

    Byte strings in the result may alias `data`, which must not be modified while they are in use. Bytes left after
    the value are ignored unless `settings.STRICT_EOF` is set.

    >>> parse(b'i42e', int)
    42
    >>> parse(b'l4:spam4:eggse', list[bytes])
    [b'spam', b'eggs']
    >>> parse(b'd3:cow3:moo4:spam4:eggse', dict[str, str])
    {'cow': 'moo', 'spam': 'eggs'}
    """
    if settings is None:
        settings = get_global_settings()
    value, _ = _decode(data, type_, settings, settings.STRICT_EOF)
    return value


def parse_prefix(data: Buffer, type_: DecodeTarget[T], /, *,
                 settings: Optional[DecoderSettings] = None) -> tuple[T, int]:
    """ Decode one value from the start of `data` and also return how many bytes it took.

    Trailing bytes are always allowed here, which makes it usable on concatenated values.

    >>> parse_prefix(b'i1ei2e', int)
    (1, 3)
    """
    if settings is None:
        settings = get_global_settings()
    return _decode(data, type_, settings, False)


def _decode(data: Buffer, type_: DecodeTarget[T], settings: DecoderSettings, strict_eof: bool) -> tuple[T, int]:
    decode_type = get_decode_type(type_)
    decoder = BenDecoder(data, settings=settings)
    try:
        value = decode_type.decode(decoder)
        if strict_eof:
            decoder.finalize()
    except BxError as e:
        logger.debug('decode failed', target=decode_type, error=type(e).__name__, pos=decoder.cur_pos())
        raise
    return value, decoder.cur_pos()
