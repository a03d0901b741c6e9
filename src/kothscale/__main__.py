"""Run the settings scaler as a standalone process.

Usage
-----
Configure through ``KOTH_*`` environment variables or flags::

    kothscale run --config ServerSettings.json --players-file players.json
    kothscale once --config ServerSettings.json --players-file players.json
    kothscale preview --level 4

``run`` polls until interrupted, ``once`` runs a single update cycle and
``preview`` prints the settings profile for a level without touching any file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import Any

from kothscale.config import ScalerConfig
from kothscale.coordinator import UpdateCoordinator
from kothscale.exceptions import ScalerConfigError
from kothscale.interpolate import SettingsInterpolator
from kothscale.models.schema import ScalingSchema, default_schema
from kothscale.models.state import CycleOutcome
from kothscale.providers import FilePlayerCountProvider

_SUCCESS_OUTCOMES = frozenset({CycleOutcome.APPLIED, CycleOutcome.UNCHANGED, CycleOutcome.IDLE})

_FLAG_FIELDS = {
    "config": "config_path",
    "players_file": "players_path",
    "schema": "schema_path",
    "interval": "poll_interval",
    "threshold": "threshold",
    "divisor": "divisor",
    "change_key": "change_key",
    "webhook_url": "webhook_url",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kothscale", description="Scale KOTH settings with player population")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("run", "Poll until interrupted"), ("once", "Run a single update cycle")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--config", help="Path to ServerSettings.json (KOTH_CONFIG_PATH)")
        cmd.add_argument("--players-file", help="JSON player list (KOTH_PLAYERS_PATH)")
        cmd.add_argument("--schema", help="Scaling schema JSON file (KOTH_SCHEMA_PATH)")
        cmd.add_argument("--interval", type=float, help="Seconds between cycles (KOTH_POLL_INTERVAL)")
        cmd.add_argument("--threshold", type=int, help="Suspend scaling at this many players (KOTH_THRESHOLD)")
        cmd.add_argument("--divisor", type=int, help="Players per level (KOTH_DIVISOR)")
        cmd.add_argument("--change-key", choices=["level", "count"], help="Re-apply on level or raw count change")
        cmd.add_argument("--webhook-url", help="Webhook for update notifications (KOTH_WEBHOOK_URL)")

    preview = sub.add_parser("preview", help="Print the settings profile for a level")
    preview.add_argument("--level", type=int, required=True, help="Intensity level (1-10)")
    preview.add_argument("--schema", help="Scaling schema JSON file")
    return parser


def _config_from_args(args: argparse.Namespace) -> ScalerConfig:
    overrides: dict[str, Any] = {}
    for flag, field_name in _FLAG_FIELDS.items():
        value = getattr(args, flag, None)
        if value is not None:
            overrides[field_name] = value
    return ScalerConfig.from_env(**overrides)


def _build_coordinator(config: ScalerConfig) -> UpdateCoordinator:
    if not config.players_path:
        raise ScalerConfigError("A player list file is required (--players-file or KOTH_PLAYERS_PATH)")
    provider = FilePlayerCountProvider(config.players_path, strict=config.strict_player_file)
    return UpdateCoordinator(config, provider)


async def _run_forever(config: ScalerConfig) -> int:
    coordinator = _build_coordinator(config)
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops; KeyboardInterrupt still ends the run
            pass

    async with coordinator:
        await stop.wait()
    return 0


async def _run_once(config: ScalerConfig) -> int:
    coordinator = _build_coordinator(config)
    try:
        outcome = await coordinator.run_cycle()
    finally:
        await coordinator.stop()
    print(outcome.value)
    return 0 if outcome in _SUCCESS_OUTCOMES else 1


def _preview(args: argparse.Namespace) -> int:
    schema = ScalingSchema.from_file(args.schema) if args.schema else default_schema()
    try:
        profile = SettingsInterpolator(schema).profile(args.level)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(json.dumps(profile, indent="\t", ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        if args.command == "preview":
            return _preview(args)
        config = _config_from_args(args)
        if args.command == "once":
            return asyncio.run(_run_once(config))
        return asyncio.run(_run_forever(config))
    except ScalerConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
