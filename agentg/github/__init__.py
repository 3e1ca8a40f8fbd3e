"""
GitHub Integration
==================

- GitHubClient: async REST client bound to one installation token
- GitHubApp: App JWT signing and installation token exchange
- InstallationClientCache: shared installation id -> client cache
"""

from agentg.github.client import GitHubAPIError, GitHubClient
from agentg.github.installations import GitHubApp, InstallationClientCache, InstallationToken

__all__ = [
    "GitHubAPIError",
    "GitHubApp",
    "GitHubClient",
    "InstallationClientCache",
    "InstallationToken",
]
