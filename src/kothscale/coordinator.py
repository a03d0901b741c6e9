"""Timer-driven orchestration of the settings scaler."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

from kothscale._constants import REWARD_IDENTITY_KEY
from kothscale.config import ScalerConfig
from kothscale.exceptions import ConfigStoreError, NotificationFailedError, SignalUnavailableError
from kothscale.interpolate import SettingsInterpolator
from kothscale.levels import LevelResolver
from kothscale.merge import deep_merge
from kothscale.models.schema import ScalingSchema, default_schema
from kothscale.models.state import ChangeKeyPolicy, CycleOutcome, UpdateState
from kothscale.notify import NotificationSink, build_sink, format_update_message
from kothscale.providers import PlayerCountProvider
from kothscale.store import ConfigStore

_logger = logging.getLogger(__name__)


class UpdateCoordinator:
    """Poll the player count and rewrite the settings document when needed.

    The coordinator is either idle (population at or above the threshold, or
    unknown) or scaled to the last level it successfully applied. Only one
    cycle ever runs at a time; a tick that arrives while a cycle is still in
    progress is skipped.

    Usage::

        async with UpdateCoordinator(config, provider) as coordinator:
            await stop_event.wait()
    """

    def __init__(
        self,
        config: ScalerConfig,
        provider: PlayerCountProvider,
        *,
        schema: ScalingSchema | None = None,
        store: ConfigStore | None = None,
        sink: NotificationSink | None = None,
    ) -> None:
        self._config = config
        self._provider = provider
        if schema is None:
            schema = ScalingSchema.from_file(config.schema_path) if config.schema_path else default_schema()
        self._interpolator = SettingsInterpolator(schema)
        self._keyed_lists = {schema.rewards_key: REWARD_IDENTITY_KEY}
        self._resolver = LevelResolver(config.divisor)
        self._policy = ChangeKeyPolicy(config.change_key)
        self._store = store or ConfigStore()
        self._owns_sink = sink is None
        self._sink: NotificationSink = sink or build_sink(config.webhook_url)
        self._state = UpdateState()
        self._lock = asyncio.Lock()
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: asyncio.Future[CycleOutcome] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> UpdateCoordinator:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    @property
    def state(self) -> UpdateState:
        """Snapshot of the remembered update state."""
        return self._state.model_copy()

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        """Start polling. The first cycle runs immediately."""
        if self.is_running:
            return
        self._timer = asyncio.create_task(self._poll_loop(), name="kothscale-poll")
        _logger.info(
            "Settings scaler started for %s (every %.0fs, threshold %d)",
            self._config.config_path,
            self._config.poll_interval,
            self._config.threshold,
        )

    async def stop(self) -> None:
        """Cancel the timer and let an in-flight cycle finish."""
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await timer

        in_flight, self._in_flight = self._in_flight, None
        if in_flight is not None and not in_flight.done():
            _logger.debug("Waiting for in-flight update cycle to finish")
            await asyncio.gather(in_flight, return_exceptions=True)

        if self._owns_sink:
            close = getattr(self._sink, "close", None)
            if close is not None:
                await close()

    async def _poll_loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self._config.poll_interval
        next_tick = loop.time()
        while True:
            self._in_flight = asyncio.ensure_future(self.run_cycle())
            try:
                # Shielded so cancelling the timer never interrupts a write
                await asyncio.shield(self._in_flight)
            except asyncio.CancelledError:
                raise
            except Exception:
                _logger.exception("Unexpected error in settings update cycle")

            next_tick += interval
            now = loop.time()
            if now > next_tick:
                missed = int((now - next_tick) // interval) + 1
                _logger.debug("Update cycle overran the poll interval; skipping %d tick(s)", missed)
                next_tick += missed * interval
            await asyncio.sleep(next_tick - now)

    # ------------------------------------------------------------------
    # Update cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> CycleOutcome:
        """Run one update cycle and report what it did."""
        if self._lock.locked():
            _logger.debug("Previous update cycle still running; skipping this one")
            return CycleOutcome.BUSY
        async with self._lock:
            return await self._cycle()

    def _go_idle(self, reason: str) -> CycleOutcome:
        if self._state.is_set:
            _logger.info("Scaling suspended (%s); next low-population reading re-applies settings", reason)
        self._state.reset()
        return CycleOutcome.IDLE

    async def _cycle(self) -> CycleOutcome:
        try:
            count = await self._provider.count()
        except SignalUnavailableError as exc:
            _logger.debug("Player count unavailable: %s", exc)
            return self._go_idle("player count unavailable")

        if count >= self._config.threshold:
            return self._go_idle(f"{count} players")

        level = self._resolver(count)
        key = level if self._policy == ChangeKeyPolicy.LEVEL else count
        if key == self._state.last_key:
            _logger.debug("No change (%d players, level %d)", count, level)
            return CycleOutcome.UNCHANGED

        try:
            await self._apply(level)
        except ConfigStoreError as exc:
            _logger.error("Settings update aborted: %s", exc)
            return CycleOutcome.FAILED

        self._state.record(key=key, count=count, level=level)
        _logger.info("Applied level %d settings for %d players to %s", level, count, self._config.config_path)

        message = format_update_message(self._config.notify_tag, count, level)
        try:
            await self._sink.send(message)
        except NotificationFailedError as exc:
            _logger.warning("Update notification failed: %s", exc)
        except Exception:
            _logger.warning("Update notification sink raised unexpectedly", exc_info=True)
        return CycleOutcome.APPLIED

    async def _apply(self, level: int) -> None:
        document = await self._store.read(self._config.config_path)
        profile = self._interpolator.profile(level)
        deep_merge(document.settings, profile, keyed_lists=self._keyed_lists)
        await self._store.write(self._config.config_path, document)
