"""Twitch Bot class: chat connection for the queue service."""

from __future__ import annotations

import logging
from urllib.parse import quote

import twitchio
from twitchio.ext import commands

from queuebot.core.config import BOT_SCOPES, BROADCASTER_SCOPES
from queuebot.shared.queue_service import QueueService
from queuebot.shared.settings_store import SettingsStore
from queuebot.twitch.subscriptions import get_channel_subscriptions

LOGGER: logging.Logger = logging.getLogger("Bot")

COMPONENT_MODULES = ["queuebot.twitch.components.queue_commands"]

# twitchio's built-in adapter serves the OAuth callback here
DEFAULT_REDIRECT_URI = "http://localhost:4343/oauth/callback"


def oauth_url(client_id: str, scopes: list[str], redirect_uri: str = DEFAULT_REDIRECT_URI) -> str:
    scope_string = "+".join(s.replace(":", "%3A") for s in scopes)
    return (
        f"https://id.twitch.tv/oauth2/authorize"
        f"?client_id={client_id}"
        f"&redirect_uri={quote(redirect_uri, safe='')}"
        f"&response_type=code"
        f"&scope={scope_string}"
    )


class QueueBot(commands.Bot):
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        bot_id: str,
        owner_id: str,
        broadcaster_id: str,
        queue_service: QueueService,
        settings_store: SettingsStore,
    ) -> None:
        self.queue_service = queue_service
        self.settings_store = settings_store
        self._broadcaster_id = broadcaster_id
        self._client_id = client_id

        super().__init__(
            client_id=client_id,
            client_secret=client_secret,
            bot_id=bot_id,
            owner_id=owner_id,
            prefix="!",
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def setup_hook(self) -> None:
        for module_name in COMPONENT_MODULES:
            try:
                await self.load_module(module_name)
            except Exception as e:
                LOGGER.error(f"Failed to load component {module_name}: {e}")

        for payload in get_channel_subscriptions(self._broadcaster_id, self.bot_id):
            try:
                await self.subscribe_websocket(payload=payload)
            except Exception as e:
                LOGGER.error(
                    f"Failed to subscribe to channel {self._broadcaster_id}: "
                    f"{type(e).__name__}: {e}"
                )
                return
        LOGGER.info(f"Subscribed to chat for channel {self._broadcaster_id}")

    # ------------------------------------------------------------------
    # Token management
    # ------------------------------------------------------------------

    async def add_token(
        self, token: str, refresh: str
    ) -> twitchio.authentication.ValidateTokenPayload:
        resp: twitchio.authentication.ValidateTokenPayload = await super().add_token(token, refresh)

        if resp.user_id:
            try:
                saved = self.settings_store.save_token(resp.user_id, token, refresh)
            except OSError as e:
                LOGGER.error(f"Failed to save token for {resp.user_id}: {e}")
            else:
                login = resp.login or "unknown"
                if saved:
                    LOGGER.info(f"Saved token: {login} ({resp.user_id})")
                else:
                    LOGGER.debug(f"Token kept in memory only: {login} ({resp.user_id})")
        return resp

    async def load_tokens(self, path: str | None = None) -> None:
        tokens = dict(self.settings_store.config.twitch.tokens)
        if not tokens:
            LOGGER.warning("No saved Twitch tokens, authorize the accounts:")
            LOGGER.warning(f"  Bot: {oauth_url(self._client_id, BOT_SCOPES)}")
            LOGGER.warning(f"  Channel: {oauth_url(self._client_id, BROADCASTER_SCOPES)}")
            return
        for user_id, pair in tokens.items():
            try:
                await self.add_token(pair["accessToken"], pair["refreshToken"])
            except Exception as e:
                LOGGER.warning(f"Stored token for {user_id} rejected: {type(e).__name__}: {e}")

    async def save_tokens(self, path: str | None = None) -> None:
        # Tokens are written as they are added
        return None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def event_ready(self) -> None:
        LOGGER.info("Successfully logged in as: %s", self.bot_id)

    async def event_oauth_authorized(
        self, payload: twitchio.authentication.UserTokenPayload
    ) -> None:
        await self.add_token(payload.access_token, payload.refresh_token)

        if not payload.user_id:
            return

        if payload.user_id == self.bot_id:
            LOGGER.info("Bot account authorized")
            return

        users = await self.fetch_users(ids=[payload.user_id])
        if users and users[0].name:
            self.settings_store.update_twitch_credentials(channel=users[0].name)
            LOGGER.info(f"Channel authorized: {users[0].name} (ID: {payload.user_id})")

    async def event_message(self, payload: twitchio.ChatMessage) -> None:
        if payload.chatter.id == self.bot_id:
            return

        LOGGER.debug(f"[{payload.chatter.name}]: {payload.text}")
        self.queue_service.chat_log.add(
            payload.chatter.display_name or payload.chatter.name, payload.text
        )

        # Normalize command name to lowercase for case-insensitive matching
        # e.g. "!JOIN hello" → "!join hello", "!Pos" → "!pos"
        if payload.text and payload.text.startswith("!"):
            parts = payload.text.split(maxsplit=1)
            if parts:
                parts[0] = parts[0].lower()
                payload.text = " ".join(parts)

        await super().event_message(payload)
