"""Player count to intensity level mapping."""

from __future__ import annotations

from kothscale._constants import DEFAULT_DIVISOR, MAX_LEVEL, MIN_LEVEL


def resolve_level(count: int, divisor: int = DEFAULT_DIVISOR) -> int:
    """Return ``clamp(ceil(count / divisor), 1, 10)``.

    Raises :class:`ValueError` if *divisor* is not positive.
    """
    if divisor <= 0:
        raise ValueError(f"divisor must be positive, got {divisor}")
    level = -(-int(count) // divisor)
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


class LevelResolver:
    """Resolve intensity levels with a fixed, deployment-specific divisor."""

    def __init__(self, divisor: int = DEFAULT_DIVISOR) -> None:
        if divisor <= 0:
            raise ValueError(f"divisor must be positive, got {divisor}")
        self._divisor = divisor

    @property
    def divisor(self) -> int:
        return self._divisor

    def __call__(self, count: int) -> int:
        return resolve_level(count, self._divisor)
