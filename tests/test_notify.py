from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest

from kothscale.exceptions import NotificationFailedError
from kothscale.notify import (
    CallbackNotificationSink,
    LogNotificationSink,
    WebhookNotificationSink,
    build_sink,
    format_update_message,
)


@dataclass
class _FakeResponse:
    status: int
    body: str = ""

    async def text(self) -> str:
        return self.body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class FakeHttpSession:
    status: int = 204
    body: str = ""
    error: Exception | None = None
    posts: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    closed: bool = False

    def post(self, url: str, *, json: dict[str, Any], timeout: Any = None) -> _FakeResponse:
        self.posts.append((url, json))
        if self.error is not None:
            raise self.error
        return _FakeResponse(self.status, self.body)

    async def close(self) -> None:
        self.closed = True


def test_format_update_message() -> None:
    assert (
        format_update_message("[KOTH] Zone and Economy", 12, 3)
        == "[KOTH] Zone and Economy updated! - 12 players (Level 3)"
    )


@pytest.mark.asyncio
async def test_webhook_posts_content() -> None:
    session = FakeHttpSession()
    sink = WebhookNotificationSink("https://hooks.example/abc", session=session)  # type: ignore[arg-type]

    await sink.send("hello")

    assert session.posts == [("https://hooks.example/abc", {"content": "hello"})]


@pytest.mark.asyncio
async def test_webhook_includes_username() -> None:
    session = FakeHttpSession()
    sink = WebhookNotificationSink("https://hooks.example/abc", session=session, username="KOTH")  # type: ignore[arg-type]

    await sink.send("hello")

    assert session.posts[0][1] == {"content": "hello", "username": "KOTH"}


@pytest.mark.asyncio
async def test_webhook_http_error_raises() -> None:
    session = FakeHttpSession(status=429, body="rate limited")
    sink = WebhookNotificationSink("https://hooks.example/abc", session=session)  # type: ignore[arg-type]

    with pytest.raises(NotificationFailedError, match="429"):
        await sink.send("hello")


@pytest.mark.asyncio
async def test_webhook_client_error_raises() -> None:
    session = FakeHttpSession(error=aiohttp.ClientConnectionError("connection refused"))
    sink = WebhookNotificationSink("https://hooks.example/abc", session=session)  # type: ignore[arg-type]

    with pytest.raises(NotificationFailedError, match="connection refused"):
        await sink.send("hello")


@pytest.mark.asyncio
async def test_webhook_does_not_close_external_session() -> None:
    session = FakeHttpSession()
    async with WebhookNotificationSink("https://hooks.example/abc", session=session) as sink:  # type: ignore[arg-type]
        await sink.send("hello")

    assert session.closed is False


@pytest.mark.asyncio
async def test_callback_sink_forwards_and_wraps_errors() -> None:
    sent: list[str] = []

    async def broadcast(message: str) -> None:
        sent.append(message)

    await CallbackNotificationSink(broadcast).send("hello")
    assert sent == ["hello"]

    async def broken(message: str) -> None:
        raise ConnectionResetError("rcon closed")

    with pytest.raises(NotificationFailedError):
        await CallbackNotificationSink(broken).send("hello")


@pytest.mark.asyncio
async def test_log_sink(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="kothscale.notify"):
        await LogNotificationSink().send("hello")
    assert "hello" in caplog.text


def test_build_sink() -> None:
    assert isinstance(build_sink(None), LogNotificationSink)
    assert isinstance(build_sink("https://hooks.example/abc"), WebhookNotificationSink)


@pytest.mark.asyncio
async def test_callback_sink_wraps_any_callback_error() -> None:
    async def not_connected(message: str) -> None:
        raise ValueError("rcon not connected")

    with pytest.raises(NotificationFailedError, match="rcon not connected"):
        await CallbackNotificationSink(not_connected).send("hello")
