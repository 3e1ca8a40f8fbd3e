"""
GitHub REST Client
==================

Thin async wrapper around the GitHub REST API, one method per operation
the tools need. Every client is bound to one installation token.

GitHub API Notes:
- Uses httpx for async HTTP requests
- Installation tokens expire after one hour; expires_at records when
- Errors are raised as GitHubAPIError; nothing is retried here

Usage:
    async with GitHubClient(token) as client:
        await client.create_comment("acme", "api", 7, "Thanks for the report!")
"""

import base64
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote

import httpx

from agentg.utils.logger import Logger

logger = Logger("GitHubClient")

GITHUB_API = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubAPIError(Exception):
    """Raised when the GitHub API answers with a status >= 400."""

    def __init__(self, status_code: int, message: str, method: str = "", path: str = ""):
        self.status_code = status_code
        self.message = message
        self.method = method
        self.path = path
        super().__init__(f"GitHub API {status_code} on {method} {path}: {message}".strip())

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def default_headers(authorization: str | None = None) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": API_VERSION,
        "User-Agent": "agent-g",
    }
    if authorization:
        headers["Authorization"] = authorization
    return headers


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text or response.reason_phrase


async def raise_for_github_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise GitHubAPIError for any status >= 400."""
    if response.status_code < 400:
        return
    await response.aread()
    message = _error_message(response)
    logger.warning(f"{method} {path} -> {response.status_code}", {"message": message})
    raise GitHubAPIError(response.status_code, message, method, path)


class GitHubClient:
    """
    Installation-scoped GitHub API client.

    Attributes:
        expires_at: When the token stops working (None = never)
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = GITHUB_API,
        expires_at: datetime | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.expires_at = expires_at
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=default_headers(f"Bearer {token}"),
            timeout=timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    def is_expired(self, margin: timedelta = timedelta(seconds=60)) -> bool:
        """True when the token expires within `margin` from now."""
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) + margin >= self.expires_at

    # ── transport ──────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._client.request(method, path, json=json, params=params)
        logger.debug(f"{method} {path} -> {response.status_code}")
        await raise_for_github_status(response, method, path)
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    # ── issues ─────────────────────────────────────────────────────────────

    async def add_labels(
        self, owner: str, repo: str, issue_number: int, labels: list[str]
    ) -> list[dict[str, Any]]:
        """Add labels to an issue or PR. Returns every label now on it."""
        return await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/issues/{issue_number}/labels",
            json={"labels": labels},
        )

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/issues/{issue_number}/comments",
            json={"body": body},
        )

    async def add_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> dict[str, Any]:
        """Assign users to an issue or PR. Returns the updated issue."""
        return await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/issues/{issue_number}/assignees",
            json={"assignees": assignees},
        )

    # ── pull requests ──────────────────────────────────────────────────────

    async def list_pull_request_files(
        self, owner: str, repo: str, pull_number: int, per_page: int = 100
    ) -> list[dict[str, Any]]:
        """First page of files changed by a pull request (GitHub caps it at 100)."""
        return await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/pulls/{pull_number}/files",
            params={"per_page": per_page},
        )

    # ── contents ───────────────────────────────────────────────────────────

    async def get_contents(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> dict[str, Any] | list[dict[str, Any]]:
        """
        Read a file or list a directory.

        Returns:
            A dict for a file, a list of entries for a directory
        """
        params = {"ref": ref} if ref else None
        return await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/contents/{quote(path.strip('/'))}",
            params=params,
        )

    async def put_file_contents(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        content: str,
        message: str,
        branch: str | None = None,
        sha: str | None = None,
    ) -> dict[str, Any]:
        """
        Create or replace a file with a single commit.

        Args:
            content: New file text (encoded to base64 here)
            sha: Blob sha of the file being replaced; required when it exists
        """
        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if branch:
            payload["branch"] = branch
        if sha:
            payload["sha"] = sha
        return await self._request(
            "PUT",
            f"{self._repo_path(owner, repo)}/contents/{quote(path.strip('/'))}",
            json=payload,
        )
