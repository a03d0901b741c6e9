"""Typed models used by the scaler."""

from kothscale.models.document import ConfigDocument
from kothscale.models.schema import (
    ConstantField,
    FieldSpec,
    InterpolatedField,
    RewardSpec,
    ScalingSchema,
    default_schema,
)
from kothscale.models.state import ChangeKeyPolicy, CycleOutcome, UpdateState

__all__ = [
    "ChangeKeyPolicy",
    "ConfigDocument",
    "ConstantField",
    "CycleOutcome",
    "FieldSpec",
    "InterpolatedField",
    "RewardSpec",
    "ScalingSchema",
    "UpdateState",
    "default_schema",
]
