"""Update notifications."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import aiohttp

from kothscale.exceptions import NotificationFailedError

_logger = logging.getLogger(__name__)


def format_update_message(tag: str, count: int, level: int) -> str:
    """Return ``"<tag> updated! - <count> players (Level <level>)"``."""
    return f"{tag} updated! - {count} players (Level {level})"


class NotificationSink(Protocol):
    """Destination for update notifications."""

    async def send(self, message: str) -> None:
        """Deliver *message*; raise :class:`NotificationFailedError` on failure."""
        ...


class LogNotificationSink:
    """Write notifications to the log only."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    async def send(self, message: str) -> None:
        self._logger.info("%s", message)


class CallbackNotificationSink:
    """Forward notifications to a host-supplied coroutine (e.g. an RCON broadcast)."""

    def __init__(self, callback: Callable[[str], Awaitable[Any]]) -> None:
        self._callback = callback

    async def send(self, message: str) -> None:
        try:
            await self._callback(message)
        except NotificationFailedError:
            raise
        except Exception as exc:
            raise NotificationFailedError(f"Broadcast callback failed: {exc}") from exc


class WebhookNotificationSink:
    """Post notifications to a chat webhook.

    The body is ``{"content": message}``, which Discord webhooks accept.

    Usage::

        async with WebhookNotificationSink(url) as sink:
            await sink.send("[KOTH] Zone and Economy updated! - 12 players (Level 3)")
    """

    def __init__(
        self,
        url: str,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = 10.0,
        username: str | None = None,
    ) -> None:
        self._url = url
        self._external_session = session is not None
        self._http_session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._username = username

    async def __aenter__(self) -> WebhookNotificationSink:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
        self._http_session = None

    def _session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self._http_session

    async def send(self, message: str) -> None:
        body: dict[str, Any] = {"content": message}
        if self._username:
            body["username"] = self._username

        try:
            async with self._session().post(self._url, json=body, timeout=self._timeout) as resp:
                if resp.status >= 300:
                    text = await resp.text()
                    raise NotificationFailedError(f"Webhook returned HTTP {resp.status}: {text[:200]}")
        except NotificationFailedError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NotificationFailedError(f"Webhook request failed: {exc}") from exc
        _logger.debug("Webhook notification delivered")


def build_sink(webhook_url: str | None) -> NotificationSink:
    """Pick a webhook sink when a URL is configured, logging otherwise."""
    if webhook_url:
        return WebhookNotificationSink(webhook_url)
    return LogNotificationSink()
