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

"""CLI command to decode a bencoded file and print it as JSON.

Usage:
    bx-decode [--strict-eof] [--max-depth N|none] [file]

Options can also be given as `BX_DECODE_` environment variables, e.g. `BX_DECODE_MAX_DEPTH=none`. Defaults come from
the decoder settings, which read the `BX_` variables.

Byte strings are printed as text when they are valid UTF-8, otherwise as `hex:` followed by their hex digits. Dict
keys follow the same rule.
"""

import json
import sys
from argparse import SUPPRESS, ArgumentParser, FileType, Namespace
from typing import Any, Optional

from structlog import get_logger

from bx.api import parse
from bx.exceptions import BxError
from bx.settings import DecoderSettings, get_global_settings

logger = get_logger()

HEX_PREFIX = 'hex:'
ENV_VAR_PREFIX = 'bx_decode_'


def to_json_value(value: Any) -> Any:
    """ Convert a dynamically decoded value into something `json.dumps` accepts.

    >>> to_json_value({memoryview(b'a'): [1, memoryview(b'\\xff')]})
    {'a': [1, 'hex:ff']}
    """
    if isinstance(value, int):
        return value
    if isinstance(value, (memoryview, bytes)):
        return _bytes_to_text(value)
    if isinstance(value, list):
        return [to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {_bytes_to_text(key): to_json_value(item) for key, item in value.items()}
    raise TypeError(f'unexpected value of type {type(value).__name__}')


def _bytes_to_text(value: memoryview | bytes) -> str:
    try:
        return str(value, 'utf-8')
    except UnicodeDecodeError:
        return HEX_PREFIX + value.hex()


def parse_max_depth(value: str) -> Optional[int]:
    """ Parse a depth limit the same way the `BX_MAX_DEPTH` variable is read.

    >>> parse_max_depth('8')
    8
    >>> parse_max_depth('None') is None
    True
    """
    return None if value.lower() == 'none' else int(value)


def create_parser() -> ArgumentParser:
    from bx.cli.util import add_logging_arguments, create_parser
    parser = create_parser(prefix=ENV_VAR_PREFIX)
    parser.add_argument('--strict-eof', action='store_true', help='Fail if there are bytes after the value')
    parser.add_argument('--max-depth', type=parse_max_depth, default=SUPPRESS,
                        help='Maximum nesting of lists and dicts, `none` for no limit')
    parser.add_argument('--indent', type=int, default=None, help='Number of spaces to use for indentation')
    parser.add_argument('file', type=FileType('rb'), nargs='?', help='File to decode, stdin when missing')
    add_logging_arguments(parser)
    return parser


def get_settings(args: Namespace) -> DecoderSettings:
    settings = get_global_settings()
    overrides: dict[str, Any] = {}
    if args.strict_eof:
        overrides['STRICT_EOF'] = True
    if 'max_depth' in args:
        overrides['MAX_DEPTH'] = args.max_depth
    if not overrides:
        return settings
    return DecoderSettings.model_validate(settings.model_dump() | overrides)


def execute(args: Namespace) -> int:
    if args.file is None:
        data = sys.stdin.buffer.read()
    else:
        with args.file as fp:
            data = fp.read()

    try:
        value = parse(data, Any, settings=get_settings(args))
    except BxError as e:
        logger.debug('could not decode input', size=len(data), error=str(e))
        print(f'error: {e}', file=sys.stderr)
        return 1

    print(json.dumps(to_json_value(value), indent=args.indent))
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    from bx.cli.util import get_logging_output, setup_logging

    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(
        logging_output=get_logging_output(json_logs=args.json_logs, disable_logs=args.disable_logs),
        debug=args.debug,
    )
    sys.exit(execute(args))
