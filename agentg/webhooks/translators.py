"""
Event Translators
=================

Turn raw GitHub webhook payloads into AgentContext values.

Only the fields the agents use are kept. A payload that cannot identify
its installation or repository raises PayloadError.
"""

from datetime import datetime, timezone
from typing import Any

from agentg.agent.models import AgentContext

CODE_EXTENSIONS = (".ts", ".js", ".tsx", ".jsx", ".py", ".java", ".go")


class PayloadError(ValueError):
    """A webhook payload is missing something the agents need."""


def _installation_id(payload: dict[str, Any]) -> int:
    installation_id = (payload.get("installation") or {}).get("id")
    if not installation_id:
        raise PayloadError("No installation ID found in payload")
    return int(installation_id)


def _repository(payload: dict[str, Any]) -> tuple[str, str]:
    repository = payload.get("repository") or {}
    owner = (repository.get("owner") or {}).get("login")
    name = repository.get("name")
    if not owner or not name:
        raise PayloadError("Payload has no repository owner/name")
    return owner, name


def _sender(payload: dict[str, Any]) -> str:
    return (payload.get("sender") or {}).get("login", "")


def _require(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    if not isinstance(value, dict) or not value.get("number"):
        raise PayloadError(f"Payload has no numbered '{key}' object")
    return value


def translate_issue_event(payload: dict[str, Any]) -> AgentContext:
    issue = _require(payload, "issue")
    owner, repo = _repository(payload)

    return AgentContext(
        owner=owner,
        repo=repo,
        installation_id=_installation_id(payload),
        event_type="issues",
        event_action=payload.get("action", ""),
        event_payload={
            "issue_number": issue.get("number"),
            "title": issue.get("title", ""),
            "body": issue.get("body"),
            "author": (issue.get("user") or {}).get("login", ""),
            "labels": [label.get("name") for label in issue.get("labels") or []],
            "state": issue.get("state"),
        },
        triggered_by=_sender(payload),
        triggered_at=datetime.now(timezone.utc),
    )


def translate_pull_request_event(payload: dict[str, Any]) -> AgentContext:
    pr = _require(payload, "pull_request")
    owner, repo = _repository(payload)

    return AgentContext(
        owner=owner,
        repo=repo,
        installation_id=_installation_id(payload),
        event_type="pull_request",
        event_action=payload.get("action", ""),
        event_payload={
            "pr_number": pr.get("number"),
            "title": pr.get("title", ""),
            "body": pr.get("body"),
            "author": (pr.get("user") or {}).get("login", ""),
            "head_branch": (pr.get("head") or {}).get("ref", ""),
            "head_sha": (pr.get("head") or {}).get("sha", ""),
            "base_branch": (pr.get("base") or {}).get("ref", ""),
            "is_draft": bool(pr.get("draft")),
            "state": pr.get("state"),
        },
        triggered_by=_sender(payload),
        triggered_at=datetime.now(timezone.utc),
    )


def branch_from_ref(ref: str) -> str:
    return ref.removeprefix("refs/heads/")


def changed_files(commits: list[dict[str, Any]]) -> list[str]:
    """Files added or modified across all commits, first-seen order."""
    seen: dict[str, None] = {}
    for commit in commits:
        for path in (commit.get("added") or []) + (commit.get("modified") or []):
            seen.setdefault(path, None)
    return list(seen)


def has_code_changes(paths: list[str]) -> bool:
    return any(path.endswith(CODE_EXTENSIONS) for path in paths)


def translate_push_event(payload: dict[str, Any]) -> AgentContext:
    owner, repo = _repository(payload)
    commits = payload.get("commits") or []

    return AgentContext(
        owner=owner,
        repo=repo,
        installation_id=_installation_id(payload),
        event_type="push",
        event_action="push",
        event_payload={
            "branch": branch_from_ref(payload.get("ref", "")),
            "default_branch": (payload.get("repository") or {}).get("default_branch", ""),
            "commits": [{"id": c.get("id"), "message": c.get("message")} for c in commits],
            "changed_files": changed_files(commits),
        },
        triggered_by=_sender(payload),
        triggered_at=datetime.now(timezone.utc),
    )
