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

r"""
Byte-level reading over a caller-owned buffer.

The cursor never copies: every slice it returns is a `memoryview` into the original buffer.

>>> data = b'4:spam'
>>> cursor = Cursor(data)
>>> cursor.read_byte()
52
>>> cursor.read_byte()
58
>>> view = cursor.read_bytes(4)
>>> view.obj is data
True
>>> bytes(view)
b'spam'
>>> cursor.cur_pos()
6
>>> cursor.finalize()
"""

from bx.exceptions import EofError, TrailingDataError
from bx.types import Buffer


class Cursor:
    """Read position over a read-only view of the input.

    Unlike a shrinking view, the offset is kept explicitly because every error needs to report where it happened.
    """

    __slots__ = ('_view', '_pos', '_len')

    def __init__(self, data: Buffer) -> None:
        view = memoryview(data)
        if view.ndim != 1 or view.format != 'B':
            view = view.cast('B')
        # XXX: read-only byte views over an immutable buffer hash and compare like bytes, so they work as dict keys
        self._view = view.toreadonly()
        self._pos = 0
        self._len = len(self._view)

    def cur_pos(self) -> int:
        return self._pos

    def is_empty(self) -> bool:
        return self._pos >= self._len

    def finalize(self) -> None:
        """Check that all bytes were consumed."""
        if not self.is_empty():
            raise TrailingDataError(self._pos)

    def peek_byte(self) -> int:
        """Read a single byte but don't consume from buffer."""
        if self._pos >= self._len:
            raise EofError(self._pos)
        return self._view[self._pos]

    def read_byte(self) -> int:
        """Read a single byte as unsigned int."""
        b = self.peek_byte()
        self._pos += 1
        return b

    def skip_byte(self) -> None:
        """Consume a byte that was already peeked."""
        assert self._pos < self._len, 'skip_byte() without a successful peek_byte()'
        self._pos += 1

    def read_bytes(self, n: int) -> memoryview:
        """Read exactly n bytes, the position only moves if there is enough data."""
        if n < 0:
            raise ValueError('value cannot be negative')
        end = self._pos + n
        if end > self._len:
            raise EofError(self._len)
        view = self._view[self._pos:end]
        self._pos = end
        return view
