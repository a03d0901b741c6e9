"""kothscale - Population-driven game mode settings scaler."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("kothscale")
except PackageNotFoundError:
    __version__ = "0+local"
from kothscale.config import ScalerConfig
from kothscale.coordinator import UpdateCoordinator
from kothscale.exceptions import (
    ConfigNotFoundError,
    ConfigStoreError,
    ConfigUnreadableError,
    ConfigUnwritableError,
    KothScaleError,
    MalformedJsonError,
    NotificationFailedError,
    ScalerConfigError,
    ScalingSchemaError,
    SignalUnavailableError,
)
from kothscale.interpolate import SettingsInterpolator
from kothscale.levels import LevelResolver, resolve_level
from kothscale.merge import deep_merge
from kothscale.models import (
    ChangeKeyPolicy,
    ConfigDocument,
    ConstantField,
    CycleOutcome,
    InterpolatedField,
    RewardSpec,
    ScalingSchema,
    UpdateState,
    default_schema,
)
from kothscale.notify import (
    CallbackNotificationSink,
    LogNotificationSink,
    NotificationSink,
    WebhookNotificationSink,
    format_update_message,
)
from kothscale.providers import FilePlayerCountProvider, LivePlayerCountProvider, PlayerCountProvider
from kothscale.store import ConfigStore

__all__ = [
    "__version__",
    "CallbackNotificationSink",
    "ChangeKeyPolicy",
    "ConfigDocument",
    "ConfigNotFoundError",
    "ConfigStore",
    "ConfigStoreError",
    "ConfigUnreadableError",
    "ConfigUnwritableError",
    "ConstantField",
    "CycleOutcome",
    "FilePlayerCountProvider",
    "InterpolatedField",
    "KothScaleError",
    "LevelResolver",
    "LivePlayerCountProvider",
    "LogNotificationSink",
    "MalformedJsonError",
    "NotificationFailedError",
    "NotificationSink",
    "PlayerCountProvider",
    "RewardSpec",
    "ScalerConfig",
    "ScalerConfigError",
    "ScalingSchema",
    "ScalingSchemaError",
    "SettingsInterpolator",
    "SignalUnavailableError",
    "UpdateCoordinator",
    "UpdateState",
    "WebhookNotificationSink",
    "deep_merge",
    "default_schema",
    "format_update_message",
    "resolve_level",
]
