"""
GitHub App Installations
========================

Authentication for a GitHub App and a cache of installation clients.

A GitHub App authenticates in two steps:
1. Sign a short-lived JWT with the App's private key (RS256)
2. Exchange it for an installation access token, valid for one hour,
   scoped to the repositories of that installation

InstallationClientCache keeps one GitHubClient per installation id. It is
owned by the composition root and shared by every run. Entries are never
modified after creation: a stale entry is replaced, not patched, and the
replaced client is closed. Two runs that miss on the same id at the same
time both build a client; the first one stored wins and the other is
closed right away.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx
from jose import jwt

from agentg.github.client import (
    GITHUB_API,
    GitHubClient,
    default_headers,
    raise_for_github_status,
)
from agentg.utils.logger import Logger

logger = Logger("Installations")

JWT_BACKDATE_SECONDS = 60
JWT_LIFETIME_SECONDS = 600
TOKEN_REFRESH_MARGIN = timedelta(seconds=60)


@dataclass(frozen=True)
class InstallationToken:
    token: str
    expires_at: datetime | None


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubApp:
    """
    Credentials of a GitHub App.

    Example:
        app = GitHubApp(app_id="12345", private_key=pem)
        client = await app.create_installation_client(42)
    """

    def __init__(
        self,
        app_id: str,
        private_key: str,
        *,
        base_url: str = GITHUB_API,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.app_id = app_id
        self.base_url = base_url
        self._private_key = private_key
        self._transport = transport

    def create_jwt(self, now: float | None = None) -> str:
        """Sign the App JWT used to request installation tokens."""
        issued = int(now if now is not None else time.time())
        claims = {
            "iat": issued - JWT_BACKDATE_SECONDS,
            "exp": issued + JWT_LIFETIME_SECONDS,
            "iss": str(self.app_id),
        }
        return jwt.encode(claims, self._private_key, algorithm="RS256")

    async def create_installation_token(self, installation_id: int) -> InstallationToken:
        """
        Exchange the App JWT for an installation access token.

        Raises:
            GitHubAPIError: If GitHub rejects the request
        """
        path = f"/app/installations/{installation_id}/access_tokens"
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=default_headers(f"Bearer {self.create_jwt()}"),
            timeout=30.0,
            transport=self._transport,
        ) as http:
            response = await http.post(path)
            await raise_for_github_status(response, "POST", path)
            data = response.json()

        return InstallationToken(
            token=data["token"],
            expires_at=_parse_timestamp(data.get("expires_at")),
        )

    async def create_installation_client(self, installation_id: int) -> GitHubClient:
        token = await self.create_installation_token(installation_id)
        return GitHubClient(
            token.token,
            base_url=self.base_url,
            expires_at=token.expires_at,
            transport=self._transport,
        )


class InstallationClientCache:
    """
    installation id -> GitHubClient.

    Example:
        cache = InstallationClientCache(app)
        client = await cache.get(42)   # creates
        client = await cache.get(42)   # reuses
        await cache.invalidate(42)     # closes it; next get() creates again
    """

    def __init__(self, app: GitHubApp, refresh_margin: timedelta = TOKEN_REFRESH_MARGIN):
        self._app = app
        self._refresh_margin = refresh_margin
        self._clients: dict[int, GitHubClient] = {}

    def _usable(self, client: GitHubClient | None) -> bool:
        return client is not None and not client.is_expired(self._refresh_margin)

    async def get(self, installation_id: int) -> GitHubClient:
        """
        Return the client for an installation, creating it on a miss.

        A client whose token is about to expire counts as a miss; it is
        closed once its replacement is stored.
        """
        stale = self._clients.get(installation_id)
        if self._usable(stale):
            logger.debug(f"Using cached client for installation {installation_id}")
            return stale

        logger.debug(f"Creating client for installation {installation_id}")
        client = await self._app.create_installation_client(installation_id)

        # Another run refreshed this installation while we were waiting
        current = self._clients.get(installation_id)
        if current is not stale and self._usable(current):
            logger.debug(f"Discarding duplicate client for installation {installation_id}")
            await client.aclose()
            return current

        self._clients[installation_id] = client
        if current is not None:
            await current.aclose()
        return client

    async def invalidate(self, installation_id: int | None = None) -> None:
        """Drop and close one installation's client, or every client when no id is given."""
        if installation_id is None:
            dropped = list(self._clients.values())
            self._clients.clear()
            logger.debug("Cleared all installation clients")
        else:
            client = self._clients.pop(installation_id, None)
            dropped = [client] if client is not None else []
            logger.debug(f"Cleared client for installation {installation_id}")

        for client in dropped:
            await client.aclose()

    def __contains__(self, installation_id: object) -> bool:
        return installation_id in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    async def aclose(self) -> None:
        """Close every cached client and empty the cache."""
        await self.invalidate()
