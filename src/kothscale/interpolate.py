"""Build a settings profile for an intensity level from a scaling schema."""

from __future__ import annotations

import copy
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from kothscale._constants import MAX_LEVEL, MIN_LEVEL, REWARD_IDENTITY_KEY
from kothscale.models.schema import ConstantField, FieldSpec, InterpolatedField, Rounding, ScalingSchema

_WHOLE = Decimal(1)
_HUNDREDTHS = Decimal("0.01")


def lerp(low: float, high: float, t: float) -> float:
    """Linear blend of *low* and *high*; ``t <= 0`` and ``t >= 1`` return the anchors exactly."""
    if t <= 0:
        return low
    if t >= 1:
        return high
    return low + (high - low) * t


def level_fraction(level: int) -> float:
    """Return ``t = (level - 1) / 9`` for a level in ``[1, 10]``."""
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValueError(f"level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {level}")
    return (level - MIN_LEVEL) / (MAX_LEVEL - MIN_LEVEL)


def round_value(value: float, rounding: Rounding) -> int | float:
    """Round half away from zero to a whole number or two decimal places."""
    # str() first so 0.945 rounds as written rather than as its binary approximation
    exact = Decimal(str(value))
    if rounding == "int":
        return int(exact.quantize(_WHOLE, rounding=ROUND_HALF_UP))
    return float(exact.quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))


def _field_value(spec: FieldSpec, t: float) -> Any:
    if isinstance(spec, ConstantField):
        return copy.deepcopy(spec.value)
    if isinstance(spec, InterpolatedField):
        return round_value(lerp(spec.low, spec.high, t), spec.rounding)
    raise TypeError(f"unsupported field spec: {type(spec).__name__}")


class SettingsInterpolator:
    """Produce settings profiles from a :class:`ScalingSchema`.

    Usage::

        interpolator = SettingsInterpolator(default_schema())
        profile = interpolator.profile(3)
    """

    def __init__(self, schema: ScalingSchema) -> None:
        self._schema = schema

    @property
    def schema(self) -> ScalingSchema:
        return self._schema

    def profile(self, level: int) -> dict[str, Any]:
        """Return the full parameter tree for *level*.

        Blocks come first in schema order, followed by the reward list under
        the schema's rewards key (only when the schema declares rewards).
        """
        t = level_fraction(level)
        result: dict[str, Any] = {}
        for block_name, fields in self._schema.blocks.items():
            result[block_name] = {name: _field_value(spec, t) for name, spec in fields.items()}

        if self._schema.rewards:
            rewards: list[dict[str, Any]] = []
            for reward in self._schema.rewards:
                entry: dict[str, Any] = {REWARD_IDENTITY_KEY: reward.name}
                for payout, spec in reward.payouts.items():
                    entry[payout] = _field_value(spec, t)
                rewards.append(entry)
            result[self._schema.rewards_key] = rewards
        return result
