"""Google OAuth2 credential provider.

Builds the consent URL, exchanges authorization codes, stores tokens on disk
and hands out a valid access token, refreshing it once it has expired.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import aiofiles
import aiofiles.os
from aiohttp import ClientError, ClientSession, ClientTimeout
from pydantic import ValidationError

from pomocal.config import Settings, get_settings
from pomocal.errors import ConfigurationError
from pomocal.integrations.google_calendar.schemas import GoogleTokens
from pomocal.utils.error_handler import safe_operation
from pomocal.utils.logger import sanitize_log_content
from pomocal.utils.mixins import LoggerMixin

SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events",
]

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"  # nosec: B105
REVOKE_URL = "https://oauth2.googleapis.com/revoke"


class GoogleOAuthClient(LoggerMixin):
    """OAuth2 client for a single Google account."""

    def __init__(
        self,
        settings: Settings | None = None,
        token_path: Path | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.token_path = Path(token_path or self.settings.google_token_path)
        self._refresh_lock = asyncio.Lock()

    # === consent flow ===

    def get_auth_url(self, state: str | None = None) -> str:
        client_id, _, redirect_uri = self._client_credentials()
        params = {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> GoogleTokens:
        client_id, client_secret, redirect_uri = self._client_credentials()
        payload = await self._post_form(
            TOKEN_URL,
            {
                "code": code,
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uri": redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        if not payload or not payload.get("access_token"):
            raise ConfigurationError("Failed to obtain access token")

        tokens = GoogleTokens.from_token_response(payload)
        await self.save_tokens(tokens)
        self.logger.info("Google OAuth code exchanged")
        return tokens

    # === token storage ===

    async def load_tokens(self) -> GoogleTokens | None:
        try:
            async with aiofiles.open(self.token_path, encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return None

        try:
            return GoogleTokens.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            self.logger.warning(
                "Stored Google tokens are unreadable",
                path=str(self.token_path),
                error=str(exc),
            )
            return None

    @safe_operation("save Google tokens")
    async def save_tokens(self, tokens: GoogleTokens) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.token_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(tokens.model_dump(), indent=2))

    async def delete_tokens(self) -> None:
        try:
            await aiofiles.os.remove(self.token_path)
        except FileNotFoundError:
            pass

    # === access ===

    async def get_access_token(self) -> str:
        """Return a usable access token, refreshing it when expired."""
        tokens = await self.load_tokens()
        if tokens is None:
            raise ConfigurationError(
                "No valid tokens found. Please authenticate first."
            )
        if not tokens.is_expired():
            return tokens.access_token

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited
            current = await self.load_tokens()
            if current is not None and not current.is_expired():
                return current.access_token
            refreshed = await self._refresh(current or tokens)
            return refreshed.access_token

    async def _refresh(self, tokens: GoogleTokens) -> GoogleTokens:
        client_id, client_secret, _ = self._client_credentials()
        if not tokens.refresh_token:
            raise ConfigurationError(
                "Access token expired and no refresh token is stored. "
                "Please re-authenticate."
            )

        payload = await self._post_form(
            TOKEN_URL,
            {
                "client_id": client_id,
                "client_secret": client_secret,
                "refresh_token": tokens.refresh_token,
                "grant_type": "refresh_token",
            },
        )
        if not payload or not payload.get("access_token"):
            raise ConfigurationError(
                "Failed to refresh access token. Please re-authenticate."
            )

        refreshed = GoogleTokens.from_token_response(payload, previous=tokens)
        await self.save_tokens(refreshed)
        self.logger.info("Google access token refreshed")
        return refreshed

    async def revoke(self) -> None:
        """Revoke stored tokens upstream (best effort) and delete them locally."""
        tokens = await self.load_tokens()
        if tokens is None:
            return

        payload = await self._post_form(REVOKE_URL, {"token": tokens.access_token})
        if payload is None:
            self.logger.warning("Failed to revoke Google tokens")

        await self.delete_tokens()

    # === helpers ===

    def _client_credentials(self) -> tuple[str, str, str]:
        client_id = self.settings.google_client_id
        client_secret = self.settings.google_client_secret
        redirect_uri = self.settings.google_redirect_uri
        if not (client_id and client_secret and redirect_uri):
            raise ConfigurationError(
                "Missing Google OAuth credentials. Please set GOOGLE_CLIENT_ID, "
                "GOOGLE_CLIENT_SECRET, and GOOGLE_REDIRECT_URI environment variables."
            )
        return (
            client_id.get_secret_value(),
            client_secret.get_secret_value(),
            redirect_uri,
        )

    async def _post_form(
        self, url: str, data: dict[str, str]
    ) -> dict[str, Any] | None:
        """POST a form to Google; returns the JSON body or None on failure."""
        try:
            async with ClientSession(timeout=ClientTimeout(total=30)) as session:
                async with session.post(url, data=data) as response:
                    if response.status != 200:
                        body = await response.text()
                        self.logger.warning(
                            "Google OAuth request failed",
                            url=url,
                            status=response.status,
                            body=sanitize_log_content(body),
                        )
                        return None
                    if url == REVOKE_URL:
                        return {}
                    return await response.json()
        except (ClientError, TimeoutError) as exc:
            self.logger.warning("Google OAuth request error", url=url, error=str(exc))
            return None
