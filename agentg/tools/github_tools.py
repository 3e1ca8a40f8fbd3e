"""
GitHub Tools
============

Tools that let the agent act on the repository that triggered it:
- Label, comment on and assign issues and pull requests
- Read a pull request's diff
- Browse repository contents and write files

Every tool receives `owner` and `repo` from ToolExecutor, which sets them
from the triggering event. They are left out of the schemas
shown to the model.

Each tool validates its input with a pydantic model first, so a bad call
comes back to the model as a precise validation error. Platform errors
(GitHubAPIError) propagate to ToolExecutor, which records them as a
failed result.
"""

from typing import Any

from pydantic import BaseModel, Field

from agentg.github.client import GitHubAPIError, GitHubClient
from agentg.tools import Tool, ToolDefinition, validate_input
from agentg.utils.logger import Logger

logger = Logger("GitHubTools")

MAX_PR_FILES = 100


class RepoInput(BaseModel):
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)


# ==============================================================================
# Tool: Add Label
# ==============================================================================

class AddLabelInput(RepoInput):
    issue_number: int = Field(gt=0)
    labels: list[str] = Field(min_length=1)


async def _add_label(client: GitHubClient, params: dict) -> dict:
    """Add labels to an issue or pull request."""
    args = validate_input(AddLabelInput, params)

    logger.info(
        f"Adding labels to {args.owner}/{args.repo}#{args.issue_number}",
        {"labels": ",".join(args.labels)}
    )

    response = await client.add_labels(args.owner, args.repo, args.issue_number, args.labels)
    labels = [label.get("name") for label in response]

    return {"labels": labels}


add_label_tool = Tool(
    definition=ToolDefinition(
        name="add_label",
        description=(
            "Add labels to a GitHub issue or pull request. Use this to categorize issues "
            "(bug, enhancement, question) or set priority (P0, P1, P2)."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "issue_number": {
                    "type": "integer",
                    "description": "The issue or PR number to add labels to"
                },
                "labels": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "Label names to add. Available labels: bug, enhancement, question, "
                        "documentation, refactor, test, chore, P0, P1, P2"
                    )
                }
            },
            "required": ["issue_number", "labels"]
        },
    ),
    execute=_add_label
)


# ==============================================================================
# Tool: Create Comment
# ==============================================================================

class CreateCommentInput(RepoInput):
    issue_number: int = Field(gt=0)
    body: str = Field(min_length=1)


async def _create_comment(client: GitHubClient, params: dict) -> dict:
    """Comment on an issue or pull request."""
    args = validate_input(CreateCommentInput, params)

    logger.info(f"Creating comment on {args.owner}/{args.repo}#{args.issue_number}")
    logger.debug("Comment body", {"preview": args.body[:100]})

    response = await client.create_comment(args.owner, args.repo, args.issue_number, args.body)

    return {
        "comment_id": response.get("id"),
        "url": response.get("html_url")
    }


create_comment_tool = Tool(
    definition=ToolDefinition(
        name="create_comment",
        description=(
            "Create a comment on a GitHub issue or pull request. Use this to explain your "
            "analysis, provide feedback, or communicate with the author."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "issue_number": {
                    "type": "integer",
                    "description": "The issue or PR number to comment on"
                },
                "body": {
                    "type": "string",
                    "description": "The comment in markdown. Be helpful and professional."
                }
            },
            "required": ["issue_number", "body"]
        },
    ),
    execute=_create_comment
)


# ==============================================================================
# Tool: Assign User
# ==============================================================================

class AssignUserInput(RepoInput):
    issue_number: int = Field(gt=0)
    assignees: list[str] = Field(min_length=1)


async def _assign_user(client: GitHubClient, params: dict) -> dict:
    """Assign users to an issue or pull request."""
    args = validate_input(AssignUserInput, params)

    logger.info(
        f"Assigning users to {args.owner}/{args.repo}#{args.issue_number}",
        {"assignees": ",".join(args.assignees)}
    )

    response = await client.add_assignees(
        args.owner, args.repo, args.issue_number, args.assignees
    )
    assignees = [user.get("login") for user in response.get("assignees") or []]

    return {"assignees": assignees}


assign_user_tool = Tool(
    definition=ToolDefinition(
        name="assign_user",
        description=(
            "Assign users to a GitHub issue or pull request. Only use this if you know "
            "who should handle it."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "issue_number": {
                    "type": "integer",
                    "description": "The issue or PR number to assign users to"
                },
                "assignees": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "GitHub usernames to assign"
                }
            },
            "required": ["issue_number", "assignees"]
        },
    ),
    execute=_assign_user
)


# ==============================================================================
# Tool: Get PR Diff
# ==============================================================================

class GetPRDiffInput(RepoInput):
    pull_number: int = Field(gt=0)


async def _get_pr_diff(client: GitHubClient, params: dict) -> dict:
    """
    Summarize the files changed by a pull request.

    Large files may come back without a patch; GitHub omits it.
    """
    args = validate_input(GetPRDiffInput, params)

    logger.info(f"Getting diff for {args.owner}/{args.repo}#{args.pull_number}")

    files = await client.list_pull_request_files(
        args.owner, args.repo, args.pull_number, per_page=MAX_PR_FILES
    )

    changes = [
        {
            "filename": f.get("filename"),
            "status": f.get("status"),
            "additions": f.get("additions", 0),
            "deletions": f.get("deletions", 0),
            "patch": f.get("patch"),
        }
        for f in files[:MAX_PR_FILES]
    ]
    result = {
        "total_files": len(changes),
        "total_additions": sum(c["additions"] for c in changes),
        "total_deletions": sum(c["deletions"] for c in changes),
        "files": changes,
    }

    logger.info(
        f"PR diff: {result['total_files']} files, "
        f"+{result['total_additions']}/-{result['total_deletions']}"
    )
    return result


get_pr_diff_tool = Tool(
    definition=ToolDefinition(
        name="get_pr_diff",
        description=(
            "Get the files changed by a pull request and their diffs. "
            "Use this before reviewing the code."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "pull_number": {
                    "type": "integer",
                    "description": "The pull request number"
                }
            },
            "required": ["pull_number"]
        },
    ),
    execute=_get_pr_diff
)


# ==============================================================================
# Tool: Get Repo Contents
# ==============================================================================

class GetRepoContentsInput(RepoInput):
    path: str = ""


def _repo_item(entry: dict[str, Any]) -> dict:
    return {
        "name": entry.get("name"),
        "type": "dir" if entry.get("type") == "dir" else "file",
        "path": entry.get("path"),
        "size": entry.get("size"),
    }


async def _get_repo_contents(client: GitHubClient, params: dict) -> dict:
    """List a directory, or describe a single file."""
    args = validate_input(GetRepoContentsInput, params)

    logger.info(f"Getting contents of {args.owner}/{args.repo}/{args.path or '(root)'}")

    data = await client.get_contents(args.owner, args.repo, args.path)

    if not isinstance(data, list):
        return {"items": [_repo_item(data)], "total_files": 1, "total_dirs": 0}

    items = [_repo_item(entry) for entry in data]
    total_dirs = sum(1 for item in items if item["type"] == "dir")

    logger.info(f"Found {len(items) - total_dirs} files, {total_dirs} directories")
    return {
        "items": items,
        "total_files": len(items) - total_dirs,
        "total_dirs": total_dirs,
    }


get_repo_contents_tool = Tool(
    definition=ToolDefinition(
        name="get_repo_contents",
        description=(
            "List the files and folders of the repository at a path. "
            "Use this to understand the project structure."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Path to list (default: repository root)"
                }
            },
            "required": []
        },
    ),
    execute=_get_repo_contents
)


# ==============================================================================
# Tool: Create Or Update File
# ==============================================================================

class CreateOrUpdateFileInput(RepoInput):
    path: str = Field(min_length=1)
    content: str
    message: str = Field(min_length=1)
    # None commits to the repository's default branch
    branch: str | None = None


async def _current_sha(client: GitHubClient, args: CreateOrUpdateFileInput) -> str | None:
    """Blob sha of the existing file, or None if it does not exist yet."""
    try:
        existing = await client.get_contents(args.owner, args.repo, args.path, ref=args.branch)
    except GitHubAPIError as e:
        if e.not_found:
            return None
        raise

    if isinstance(existing, dict) and existing.get("type") == "file":
        return existing.get("sha")
    raise ValueError(f"'{args.path}' exists but is not a file")


async def _create_or_update_file(client: GitHubClient, params: dict) -> dict:
    """
    Write a file with one commit.

    When the file exists its current sha is sent along, so the write fails
    instead of clobbering a change made since it was read.
    """
    args = validate_input(CreateOrUpdateFileInput, params)

    logger.info(f"Creating/updating file: {args.owner}/{args.repo}/{args.path}")

    sha = await _current_sha(client, args)
    response = await client.put_file_contents(
        args.owner,
        args.repo,
        args.path,
        content=args.content,
        message=args.message,
        branch=args.branch,
        sha=sha,
    )

    action = "updated" if sha else "created"
    commit_sha = (response.get("commit") or {}).get("sha") or ""
    logger.info(f"File {action}: {args.path}", {"commit": commit_sha})

    return {
        "action": action,
        "commit_sha": commit_sha,
        "url": (response.get("content") or {}).get("html_url") or "",
    }


create_or_update_file_tool = Tool(
    definition=ToolDefinition(
        name="create_or_update_file",
        description=(
            "Create or update a file in the repository, e.g. README.md. "
            "Commits directly to the given branch."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "File path, e.g. README.md"
                },
                "content": {
                    "type": "string",
                    "description": "Full new file content"
                },
                "message": {
                    "type": "string",
                    "description": "Commit message"
                },
                "branch": {
                    "type": "string",
                    "description": "Branch to commit to (default: the repository's default branch)"
                }
            },
            "required": ["path", "content", "message"]
        },
    ),
    execute=_create_or_update_file
)


GITHUB_TOOLS = (
    add_label_tool,
    create_comment_tool,
    assign_user_tool,
    get_pr_diff_tool,
    get_repo_contents_tool,
    create_or_update_file_tool,
)
