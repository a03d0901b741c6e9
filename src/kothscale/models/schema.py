"""Declarative scaling schema.

A schema names every scaled field together with either its anchor pair
(the literal values at level 1 and level 10 plus a rounding rule) or a
level-invariant constant. The interpolator is driven entirely by this data,
so deployments with different anchors only need a different schema file.

Example schema file::

    {
        "blocks": {
            "zone": {
                "move interval": {"kind": "interpolated", "low": 60, "high": 300, "rounding": "int"},
                "half height": {"kind": "constant", "value": 10000}
            }
        },
        "rewards": [
            {
                "name": "Enemy Killed",
                "payouts": {
                    "xp": {"kind": "interpolated", "low": 200, "high": 100, "rounding": "int"},
                    "$": {"kind": "interpolated", "low": 200, "high": 100, "rounding": "int"}
                }
            }
        ]
    }
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from kothscale._constants import REWARD_IDENTITY_KEY, REWARDS_KEY
from kothscale.exceptions import ScalingSchemaError

Rounding = Literal["int", "2dp"]


class InterpolatedField(BaseModel):
    """A field blended linearly between its level-1 and level-10 anchors."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    kind: Literal["interpolated"] = "interpolated"
    low: float
    """Value at level 1."""

    high: float
    """Value at level 10."""

    rounding: Rounding = "int"
    """``"int"`` rounds to a whole number, ``"2dp"`` to two decimal places."""


class ConstantField(BaseModel):
    """A level-invariant value written as-is at every level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["constant"] = "constant"
    value: Any


FieldSpec = Annotated[InterpolatedField | ConstantField, Field(discriminator="kind")]


class RewardSpec(BaseModel):
    """Payout anchors for one named reward rule."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    payouts: dict[str, FieldSpec] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _non_empty_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("reward name must be non-empty")
        return value

    @field_validator("payouts")
    @classmethod
    def _no_identity_payout(cls, value: dict[str, Any]) -> dict[str, Any]:
        if REWARD_IDENTITY_KEY in value:
            raise ValueError(f"payout field may not be named {REWARD_IDENTITY_KEY!r}")
        return value


class ScalingSchema(BaseModel):
    """Complete description of the population-scaled settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    blocks: dict[str, dict[str, FieldSpec]] = Field(default_factory=dict)
    rewards: list[RewardSpec] = Field(default_factory=list)
    rewards_key: str = REWARDS_KEY

    @model_validator(mode="after")
    def _check_names(self) -> ScalingSchema:
        if self.rewards_key in self.blocks:
            raise ValueError(f"block name {self.rewards_key!r} collides with the rewards key")
        seen: set[str] = set()
        for reward in self.rewards:
            if reward.name in seen:
                raise ValueError(f"duplicate reward name {reward.name!r}")
            seen.add(reward.name)
        return self

    @classmethod
    def from_file(cls, path: str | Path) -> ScalingSchema:
        """Load and validate a schema from a JSON file.

        Raises :class:`ScalingSchemaError` on any read or validation failure.
        """
        try:
            text = Path(path).read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise ScalingSchemaError(f"Cannot read scaling schema {path}: {exc}") from exc
        try:
            return cls.model_validate_json(text)
        except ValidationError as exc:
            raise ScalingSchemaError(f"Invalid scaling schema {path}: {exc}") from exc


def _interpolated(low: float, high: float, rounding: Rounding = "int") -> InterpolatedField:
    return InterpolatedField(low=low, high=high, rounding=rounding)


def _reward(name: str, low: float, high: float) -> RewardSpec:
    return RewardSpec(name=name, payouts={"xp": _interpolated(low, high), "$": _interpolated(low, high)})


def default_schema() -> ScalingSchema:
    """Return the built-in KOTH zone and reward schema."""
    return ScalingSchema(
        blocks={
            "zone": {
                "move interval": _interpolated(60, 300),
                "move fraction": _interpolated(1, 0.5, "2dp"),
                "radius multiplier": _interpolated(0.5, 1, "2dp"),
                "prio radius multiplier": _interpolated(0.25, 1, "2dp"),
                "half height": ConstantField(value=10000),
                "reward update interval": ConstantField(value=20),
                "vehicle can capture": ConstantField(value=False),
                "prio vehicle can capture": ConstantField(value=False),
            },
        },
        rewards=[
            # Kill and priority rewards shrink as the server fills up
            _reward("Enemy Killed", 200, 100),
            _reward("Priority Offensive", 600, 200),
            _reward("Priority Defensive", 600, 200),
            _reward("Objective Offensive", 25, 100),
            _reward("Objective Defensive", 25, 100),
        ],
    )
