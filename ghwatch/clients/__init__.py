"""
clients package for ghwatch

Remote repository access used to verify that pinned action commits belong
to the repository they claim to come from.
"""

from .base import Branch, RepoClient, Tag, normalize_repository, parse_repository
from .github import GitHubRepoClient
from .reachability import ReachabilityCache, check_commit_reachable

__all__ = [
    "Branch",
    "Tag",
    "RepoClient",
    "parse_repository",
    "normalize_repository",
    "GitHubRepoClient",
    "ReachabilityCache",
    "check_commit_reachable",
]
