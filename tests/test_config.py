from __future__ import annotations

import pytest

from kothscale.config import ScalerConfig
from kothscale.exceptions import ScalerConfigError


def test_defaults() -> None:
    config = ScalerConfig(config_path="/srv/ServerSettings.json")

    assert config.poll_interval == 90.0
    assert config.threshold == 50
    assert config.divisor == 5
    assert config.change_key == "level"
    assert config.notify_tag == "[KOTH] Zone and Economy"
    assert config.strict_player_file is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"config_path": ""},
        {"config_path": "x", "poll_interval": 0},
        {"config_path": "x", "divisor": 0},
        {"config_path": "x", "threshold": -1},
        {"config_path": "x", "change_key": "players"},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(ScalerConfigError):
        ScalerConfig(**kwargs)


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KOTH_CONFIG_PATH", "/srv/ServerSettings.json")
    monkeypatch.setenv("KOTH_PLAYERS_PATH", "/srv/players.json")
    monkeypatch.setenv("KOTH_POLL_INTERVAL", "120")
    monkeypatch.setenv("KOTH_THRESHOLD", "40")
    monkeypatch.setenv("KOTH_DIVISOR", "10")
    monkeypatch.setenv("KOTH_CHANGE_KEY", "count")
    monkeypatch.setenv("KOTH_STRICT_PLAYER_FILE", "yes")

    config = ScalerConfig.from_env()

    assert config.config_path == "/srv/ServerSettings.json"
    assert config.players_path == "/srv/players.json"
    assert config.poll_interval == 120.0
    assert config.threshold == 40
    assert config.divisor == 10
    assert config.change_key == "count"
    assert config.strict_player_file is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KOTH_CONFIG_PATH", "/srv/ServerSettings.json")
    monkeypatch.setenv("KOTH_DIVISOR", "10")

    config = ScalerConfig.from_env(divisor=5, config_path="/tmp/other.json")

    assert config.divisor == 5
    assert config.config_path == "/tmp/other.json"


def test_from_env_requires_config_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KOTH_CONFIG_PATH", raising=False)

    with pytest.raises(ScalerConfigError):
        ScalerConfig.from_env()


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KOTH_CONFIG_PATH", "/srv/ServerSettings.json")
    monkeypatch.setenv("KOTH_THRESHOLD", "fifty")

    with pytest.raises(ScalerConfigError):
        ScalerConfig.from_env()
