import pytest
from pydantic import ValidationError

from bx.settings import DecoderSettings, get_global_settings, load_settings_from_env


def test_defaults() -> None:
    settings = DecoderSettings()
    assert settings.MAX_DEPTH == 64
    assert settings.STRICT_EOF is False
    assert settings.STRICT_DICT_KEYS is False


def test_settings_are_frozen() -> None:
    settings = DecoderSettings()
    with pytest.raises(ValidationError):
        settings.MAX_DEPTH = 1  # type: ignore[misc]


def test_unknown_settings_are_rejected() -> None:
    with pytest.raises(ValidationError):
        DecoderSettings(MAX_DEPT=10)  # type: ignore[call-arg]


def test_negative_depth_is_rejected() -> None:
    with pytest.raises(ValidationError):
        DecoderSettings(MAX_DEPTH=-1)


def test_load_from_env() -> None:
    settings = load_settings_from_env({
        'BX_MAX_DEPTH': '10',
        'BX_STRICT_EOF': 'true',
        'BX_STRICT_DICT_KEYS': '0',
        'MAX_DEPTH': '20',
    })
    assert settings == DecoderSettings(MAX_DEPTH=10, STRICT_EOF=True, STRICT_DICT_KEYS=False)


def test_load_from_env_none() -> None:
    assert load_settings_from_env({'BX_MAX_DEPTH': 'None'}).MAX_DEPTH is None
    assert load_settings_from_env({}) == DecoderSettings()


def test_load_from_env_invalid() -> None:
    with pytest.raises(ValidationError):
        load_settings_from_env({'BX_STRICT_EOF': 'maybe'})


def test_global_settings_are_loaded_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('BX_MAX_DEPTH', '3')
    settings = get_global_settings()
    assert settings.MAX_DEPTH == 3
    monkeypatch.setenv('BX_MAX_DEPTH', '4')
    assert get_global_settings() is settings
