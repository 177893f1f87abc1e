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

import os
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import field_validator
from structlog import get_logger

from bx.utils import pydantic

logger = get_logger()

ENV_PREFIX = 'BX_'


class DecoderSettings(pydantic.BaseModel):
    # Maximum nesting of lists and dicts, `None` disables the check. Each level costs a handful of Python frames, the
    # default stays well below the interpreter's recursion limit.
    MAX_DEPTH: Optional[int] = 64

    # Fail with TrailingDataError when bytes remain after the top-level value.
    STRICT_EOF: bool = False

    # Require dict keys to be unique and in ascending byte order, as canonical bencode does.
    STRICT_DICT_KEYS: bool = False

    @field_validator('MAX_DEPTH')
    @classmethod
    def _validate_max_depth(cls, max_depth: Optional[int]) -> Optional[int]:
        if max_depth is not None and max_depth < 0:
            raise ValueError('MAX_DEPTH cannot be negative')
        return max_depth


_settings_singleton: Optional[DecoderSettings] = None


def get_global_settings() -> DecoderSettings:
    """ Returns the settings used when none are given explicitly.

    They are loaded once from the `BX_MAX_DEPTH`, `BX_STRICT_EOF` and `BX_STRICT_DICT_KEYS` environment variables,
    missing variables keep the defaults.
    """
    global _settings_singleton
    if _settings_singleton is None:
        _settings_singleton = load_settings_from_env(os.environ)
    return _settings_singleton


def load_settings_from_env(environ: Mapping[str, str]) -> DecoderSettings:
    values: dict[str, Any] = {}
    for name in DecoderSettings.model_fields:
        raw_value = environ.get(ENV_PREFIX + name)
        if raw_value is None:
            continue
        values[name] = None if raw_value.lower() == 'none' else raw_value
    if values:
        logger.debug('settings loaded from environment', **values)
    return DecoderSettings.model_validate(values)
