"""Twitch chat helper tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from queuebot.twitch.components.queue_commands import chatter_name, send_response


class FakeContext:
    def __init__(self, name: str = "alice", display_name: str | None = "Alice", fail=False):
        self.chatter = SimpleNamespace(name=name, display_name=display_name)
        self.replies: list[str] = []
        self.fail = fail

    async def reply(self, content: str) -> None:
        if self.fail:
            raise ConnectionError("chat connection lost")
        self.replies.append(content)


def test_chatter_name_prefers_display_name():
    assert chatter_name(FakeContext()) == "Alice"
    assert chatter_name(FakeContext(display_name=None)) == "alice"


@pytest.mark.asyncio
async def test_send_response():
    ctx = FakeContext()
    assert await send_response(ctx, "hello") is True
    assert ctx.replies == ["hello"]


@pytest.mark.asyncio
async def test_empty_response_is_not_sent():
    ctx = FakeContext()
    assert await send_response(ctx, "") is False
    assert ctx.replies == []


@pytest.mark.asyncio
async def test_failed_send_keeps_queue_change(service):
    ctx = FakeContext(fail=True)
    response = service.handle_chat(chatter_name(ctx), "!join")

    assert await send_response(ctx, response) is False
    assert service.session.store.position("Alice") == 1


def test_oauth_url_encodes_scopes_and_redirect():
    from queuebot.core.config import BOT_SCOPES
    from queuebot.twitch.bot import oauth_url

    url = oauth_url("cid", BOT_SCOPES)

    assert url.startswith("https://id.twitch.tv/oauth2/authorize?client_id=cid")
    assert "redirect_uri=http%3A%2F%2Flocalhost%3A4343%2Foauth%2Fcallback" in url
    assert "scope=user%3Abot+user%3Aread%3Achat+user%3Awrite%3Achat" in url
