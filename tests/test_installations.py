"""Tests for GitHub App authentication and the installation client cache."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt

from agentg.github.client import GitHubAPIError, GitHubClient
from agentg.github.installations import GitHubApp, InstallationClientCache


@pytest.fixture(scope="module")
def rsa_keys() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


# ── GitHubApp ─────────────────────────────────────────────────────────────


class TestGitHubApp:
    def test_jwt_claims(self, rsa_keys):
        private_pem, public_pem = rsa_keys
        app = GitHubApp("12345", private_pem)

        token = app.create_jwt(now=1_700_000_000)
        claims = jwt.decode(token, public_pem, algorithms=["RS256"], options={"verify_exp": False})

        assert claims == {"iat": 1_700_000_000 - 60, "exp": 1_700_000_000 + 600, "iss": "12345"}

    @pytest.mark.asyncio
    async def test_installation_token_exchange(self, rsa_keys):
        private_pem, public_pem = rsa_keys
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"token": "ghs_abc", "expires_at": "2030-01-01T00:00:00Z"})

        app = GitHubApp("12345", private_pem, transport=httpx.MockTransport(handler))
        token = await app.create_installation_token(42)

        assert token.token == "ghs_abc"
        assert token.expires_at == datetime(2030, 1, 1, tzinfo=timezone.utc)
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/app/installations/42/access_tokens"
        bearer = request.headers["authorization"].removeprefix("Bearer ")
        assert jwt.decode(bearer, public_pem, algorithms=["RS256"])["iss"] == "12345"

    @pytest.mark.asyncio
    async def test_installation_token_rejected(self, rsa_keys):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "A JSON web token could not be decoded"})

        app = GitHubApp("12345", rsa_keys[0], transport=httpx.MockTransport(handler))

        with pytest.raises(GitHubAPIError) as exc:
            await app.create_installation_token(42)
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_installation_client(self, rsa_keys):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={"token": "ghs_abc", "expires_at": "2030-01-01T00:00:00Z"})

        app = GitHubApp("12345", rsa_keys[0], transport=httpx.MockTransport(handler))
        client = await app.create_installation_client(42)

        assert isinstance(client, GitHubClient)
        assert client.expires_at == datetime(2030, 1, 1, tzinfo=timezone.utc)
        await client.aclose()


# ── InstallationClientCache ───────────────────────────────────────────────


def _fake_client(expired: bool = False) -> MagicMock:
    client = MagicMock(spec=GitHubClient)
    client.is_expired.return_value = expired
    client.aclose = AsyncMock()
    return client


def _app(*clients) -> MagicMock:
    app = MagicMock(spec=GitHubApp)
    app.create_installation_client = AsyncMock(side_effect=list(clients))
    return app


class TestInstallationClientCache:
    @pytest.mark.asyncio
    async def test_miss_then_hit(self):
        first = _fake_client()
        app = _app(first)
        cache = InstallationClientCache(app)

        assert await cache.get(42) is first
        assert await cache.get(42) is first
        assert 42 in cache
        assert len(cache) == 1
        app.create_installation_client.assert_awaited_once_with(42)

    @pytest.mark.asyncio
    async def test_installations_are_separate(self):
        a, b = _fake_client(), _fake_client()
        cache = InstallationClientCache(_app(a, b))

        assert await cache.get(1) is a
        assert await cache.get(2) is b

    @pytest.mark.asyncio
    async def test_expired_client_is_replaced(self):
        stale, fresh = _fake_client(expired=True), _fake_client()
        app = _app(stale, fresh)
        cache = InstallationClientCache(app, refresh_margin=timedelta(seconds=120))

        await cache.get(42)
        assert await cache.get(42) is fresh
        stale.is_expired.assert_called_with(timedelta(seconds=120))
        stale.aclose.assert_awaited_once()
        fresh.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_refresh_keeps_first_stored(self):
        winner, loser = _fake_client(), _fake_client()
        app = MagicMock(spec=GitHubApp)
        cache = InstallationClientCache(app)

        async def create(installation_id):
            # a second run stores its client while this one is still waiting
            cache._clients[installation_id] = winner
            return loser

        app.create_installation_client = AsyncMock(side_effect=create)

        assert await cache.get(42) is winner
        assert await cache.get(42) is winner
        loser.aclose.assert_awaited_once()
        winner.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_refresh_of_expired_entry(self):
        stale, winner, loser = _fake_client(expired=True), _fake_client(), _fake_client()
        app = MagicMock(spec=GitHubApp)
        cache = InstallationClientCache(app)
        cache._clients[42] = stale

        async def create(installation_id):
            cache._clients[installation_id] = winner
            return loser

        app.create_installation_client = AsyncMock(side_effect=create)

        assert await cache.get(42) is winner
        loser.aclose.assert_awaited_once()
        winner.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalidate_one(self):
        first, second = _fake_client(), _fake_client()
        cache = InstallationClientCache(_app(first, second))

        await cache.get(42)
        await cache.invalidate(42)

        assert 42 not in cache
        first.aclose.assert_awaited_once()
        assert await cache.get(42) is second

    @pytest.mark.asyncio
    async def test_invalidate_all(self):
        a, b = _fake_client(), _fake_client()
        cache = InstallationClientCache(_app(a, b))
        await cache.get(1)
        await cache.get(2)

        await cache.invalidate()

        assert len(cache) == 0
        a.aclose.assert_awaited_once()
        b.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalidate_unknown_is_noop(self):
        kept = _fake_client()
        cache = InstallationClientCache(_app(kept))
        await cache.get(1)

        await cache.invalidate(999)

        assert len(cache) == 1
        kept.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_creation_failure_is_not_cached(self):
        app = MagicMock(spec=GitHubApp)
        app.create_installation_client = AsyncMock(side_effect=GitHubAPIError(401, "bad", "POST", "/app"))
        cache = InstallationClientCache(app)

        with pytest.raises(GitHubAPIError):
            await cache.get(42)
        assert 42 not in cache

    @pytest.mark.asyncio
    async def test_aclose(self):
        a, b = _fake_client(), _fake_client()
        cache = InstallationClientCache(_app(a, b))
        await cache.get(1)
        await cache.get(2)

        await cache.aclose()

        a.aclose.assert_awaited_once()
        b.aclose.assert_awaited_once()
        assert len(cache) == 0
