"""
Utility functions and helpers.
"""

from .github_api import (
    ActionsBilling,
    GitHubClient,
    GitHubError,
    GitHubSession,
    PackagesBilling,
    SharedStorageBilling,
)

__all__ = [
    "GitHubClient",
    "GitHubError",
    "GitHubSession",
    "ActionsBilling",
    "PackagesBilling",
    "SharedStorageBilling",
]
