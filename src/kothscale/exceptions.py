"""Custom exception hierarchy for kothscale."""

from __future__ import annotations

from pathlib import Path


class KothScaleError(Exception):
    """Base exception for all kothscale errors."""


class ScalerConfigError(KothScaleError):
    """Invalid or missing configuration."""


class ScalingSchemaError(ScalerConfigError):
    """Scaling schema could not be loaded or failed validation."""


class SignalUnavailableError(KothScaleError):
    """The current player count cannot be determined."""


class ConfigStoreError(KothScaleError):
    """Reading or writing the settings document failed."""

    def __init__(self, message: str, *, path: str | Path = "") -> None:
        self.path = str(path)
        super().__init__(message)


class ConfigNotFoundError(ConfigStoreError):
    """The settings document does not exist."""


class ConfigUnreadableError(ConfigStoreError):
    """The settings document exists but could not be read or decoded."""


class MalformedJsonError(ConfigStoreError):
    """Content does not start with the expected bracket or fails to parse."""


class ConfigUnwritableError(ConfigStoreError):
    """The settings document could not be rewritten.

    The on-disk file is left exactly as it was before the write attempt.
    """


class NotificationFailedError(KothScaleError):
    """An update notification could not be delivered.

    Never fatal: a completed write is not rolled back because of this.
    """
