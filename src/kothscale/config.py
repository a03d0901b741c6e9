"""Deployment configuration for kothscale."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from kothscale._constants import (
    DEFAULT_DIVISOR,
    DEFAULT_NOTIFY_TAG,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_THRESHOLD,
)
from kothscale.exceptions import ScalerConfigError

_CHANGE_KEYS = frozenset({"level", "count"})


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class ScalerConfig:
    """Scaler configuration.

    Parameters
    ----------
    config_path : str
        Path to the game server's settings document (``ServerSettings.json``).
    players_path : str or None
        Side-channel player list file. Used by the file-based player count
        provider when no live count is available.
    poll_interval : float
        Seconds between update cycles. Deployments use 90-120 seconds.
    threshold : int
        Player count at or above which scaling is suspended.
    divisor : int
        Players per intensity level. Observed deployments use 5 or 10.
    change_key : str
        ``"level"`` re-applies settings only when the resolved level changes;
        ``"count"`` re-applies whenever the raw player count changes.
    notify_tag : str
        Prefix of the broadcast message sent after each update.
    webhook_url : str or None
        Optional webhook receiving update notifications.
    schema_path : str or None
        Optional JSON file overriding the built-in scaling schema.
    strict_player_file : bool
        Treat an unreadable player list as "unknown" instead of zero players.
    """

    config_path: str
    players_path: str | None = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    threshold: int = DEFAULT_THRESHOLD
    divisor: int = DEFAULT_DIVISOR
    change_key: str = "level"
    notify_tag: str = DEFAULT_NOTIFY_TAG
    webhook_url: str | None = None
    schema_path: str | None = None
    strict_player_file: bool = False

    def __post_init__(self) -> None:
        if not self.config_path:
            raise ScalerConfigError("config_path is required")
        if self.poll_interval <= 0:
            raise ScalerConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.divisor <= 0:
            raise ScalerConfigError(f"divisor must be positive, got {self.divisor}")
        if self.threshold < 0:
            raise ScalerConfigError(f"threshold must not be negative, got {self.threshold}")
        if self.change_key not in _CHANGE_KEYS:
            raise ScalerConfigError(f"change_key must be one of {sorted(_CHANGE_KEYS)}, got {self.change_key!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> ScalerConfig:
        """Create configuration from environment variables.

        Reads ``KOTH_CONFIG_PATH`` and the optional ``KOTH_*`` variables.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ScalerConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "KOTH_CONFIG_PATH": "config_path",
            "KOTH_PLAYERS_PATH": "players_path",
            "KOTH_CHANGE_KEY": "change_key",
            "KOTH_NOTIFY_TAG": "notify_tag",
            "KOTH_WEBHOOK_URL": "webhook_url",
            "KOTH_SCHEMA_PATH": "schema_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields are parsed separately
        try:
            interval_env = env.get("KOTH_POLL_INTERVAL")
            if interval_env is not None and "poll_interval" not in overrides:
                config_kwargs["poll_interval"] = float(interval_env)

            threshold_env = env.get("KOTH_THRESHOLD")
            if threshold_env is not None and "threshold" not in overrides:
                config_kwargs["threshold"] = int(threshold_env)

            divisor_env = env.get("KOTH_DIVISOR")
            if divisor_env is not None and "divisor" not in overrides:
                config_kwargs["divisor"] = int(divisor_env)
        except ValueError as exc:
            raise ScalerConfigError(f"Invalid numeric KOTH_* environment value: {exc}") from exc

        if "strict_player_file" not in overrides:
            config_kwargs["strict_player_file"] = _env_bool(env.get("KOTH_STRICT_PLAYER_FILE"), False)

        config_kwargs.update(overrides)

        if not config_kwargs.get("config_path"):
            raise ScalerConfigError("KOTH_CONFIG_PATH is not set")

        return cls(**config_kwargs)
