"""Tests for webhook payload translation and signature verification."""

from __future__ import annotations

import pytest

from agentg.webhooks.signature import compute_signature, verify_signature
from agentg.webhooks.translators import (
    PayloadError,
    branch_from_ref,
    changed_files,
    has_code_changes,
    translate_issue_event,
    translate_pull_request_event,
    translate_push_event,
)

REPOSITORY = {"name": "api", "owner": {"login": "acme"}, "default_branch": "main"}


def issue_payload(action: str = "opened", **issue) -> dict:
    return {
        "action": action,
        "issue": {
            "number": 7,
            "title": "Crash on startup",
            "body": "Stack trace attached",
            "user": {"login": "alice"},
            "labels": [{"name": "needs-triage"}],
            "state": "open",
            **issue,
        },
        "repository": REPOSITORY,
        "installation": {"id": 42},
        "sender": {"login": "alice"},
    }


def pr_payload(action: str = "opened") -> dict:
    return {
        "action": action,
        "pull_request": {
            "number": 3,
            "title": "Add retries",
            "body": None,
            "user": {"login": "bob"},
            "head": {"ref": "feature/retries", "sha": "abc"},
            "base": {"ref": "main"},
            "draft": True,
            "state": "open",
        },
        "repository": REPOSITORY,
        "installation": {"id": 42},
        "sender": {"login": "bob"},
    }


def push_payload(ref: str = "refs/heads/main", commits: list | None = None) -> dict:
    return {
        "ref": ref,
        "commits": commits if commits is not None else [
            {"id": "c1", "message": "feat", "added": ["src/app.py"], "modified": ["README.md"]},
            {"id": "c2", "message": "fix", "added": [], "modified": ["src/app.py", "src/util.ts"]},
        ],
        "repository": REPOSITORY,
        "installation": {"id": 42},
        "sender": {"login": "carol"},
    }


# ── issues ────────────────────────────────────────────────────────────────


class TestIssueTranslation:
    def test_fields(self):
        context = translate_issue_event(issue_payload())

        assert (context.owner, context.repo, context.installation_id) == ("acme", "api", 42)
        assert context.event == "issues.opened"
        assert context.triggered_by == "alice"
        assert context.event_payload["issue_number"] == 7
        assert context.event_payload["labels"] == ["needs-triage"]
        assert context.event_payload["author"] == "alice"

    def test_missing_installation(self):
        payload = issue_payload()
        del payload["installation"]
        with pytest.raises(PayloadError, match="installation"):
            translate_issue_event(payload)

    def test_missing_issue(self):
        payload = issue_payload()
        payload["issue"] = None
        with pytest.raises(PayloadError):
            translate_issue_event(payload)

    def test_missing_repository(self):
        payload = issue_payload()
        payload["repository"] = {}
        with pytest.raises(PayloadError, match="repository"):
            translate_issue_event(payload)


# ── pull requests ─────────────────────────────────────────────────────────


class TestPullRequestTranslation:
    def test_fields(self):
        context = translate_pull_request_event(pr_payload())
        payload = context.event_payload

        assert context.event == "pull_request.opened"
        assert payload["pr_number"] == 3
        assert payload["head_branch"] == "feature/retries"
        assert payload["base_branch"] == "main"
        assert payload["is_draft"] is True
        assert payload["body"] is None


# ── push ──────────────────────────────────────────────────────────────────


class TestPushTranslation:
    def test_fields(self):
        context = translate_push_event(push_payload())
        payload = context.event_payload

        assert context.event == "push.push"
        assert payload["branch"] == "main"
        assert payload["default_branch"] == "main"
        assert payload["commits"] == [{"id": "c1", "message": "feat"}, {"id": "c2", "message": "fix"}]
        assert payload["changed_files"] == ["src/app.py", "README.md", "src/util.ts"]

    def test_branch_from_ref(self):
        assert branch_from_ref("refs/heads/feature/x") == "feature/x"
        assert branch_from_ref("refs/tags/v1") == "refs/tags/v1"

    def test_changed_files_skips_removed(self):
        assert changed_files([{"added": ["a.py"], "removed": ["b.py"]}]) == ["a.py"]

    @pytest.mark.parametrize("paths,expected", [
        (["src/app.py"], True),
        (["web/App.tsx"], True),
        (["cmd/main.go"], True),
        (["README.md", "docs/guide.md"], False),
        ([], False),
    ])
    def test_has_code_changes(self, paths, expected):
        assert has_code_changes(paths) is expected


# ── signature ─────────────────────────────────────────────────────────────


class TestSignature:
    BODY = b'{"action": "opened"}'

    def test_valid(self):
        signature = compute_signature(self.BODY, "s3cret")
        assert signature.startswith("sha256=")
        assert verify_signature(self.BODY, signature, "s3cret")

    def test_wrong_secret(self):
        assert not verify_signature(self.BODY, compute_signature(self.BODY, "other"), "s3cret")

    def test_tampered_body(self):
        signature = compute_signature(self.BODY, "s3cret")
        assert not verify_signature(self.BODY + b" ", signature, "s3cret")

    @pytest.mark.parametrize("signature,secret", [(None, "s3cret"), ("", "s3cret"), ("sha256=00", None)])
    def test_missing_parts(self, signature, secret):
        assert not verify_signature(self.BODY, signature, secret)
