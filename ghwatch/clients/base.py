"""
base.py - Remote repository client interface

The imposter commit rule needs only a small slice of a hosting service's
API: branch and tag listing, a reachability query, and the ability to open
a client for another repository.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

from ..core.errors import InvalidRepositoryError


@dataclass(frozen=True)
class Branch:
    name: str

    @property
    def ref(self) -> str:
        return f"refs/heads/{self.name}"


@dataclass(frozen=True)
class Tag:
    name: str

    @property
    def ref(self) -> str:
        return f"refs/tags/{self.name}"


def parse_repository(identifier: str) -> Tuple[str, str]:
    """
    Split a repository identifier into owner and repository name

    Identifiers may carry a sub-path after the repository name
    ('owner/repo/path/to/action'); the sub-path is ignored.

    Args:
        identifier: Repository identifier

    Returns:
        Tuple of (owner, repo)

    Raises:
        InvalidRepositoryError: If the identifier has fewer than two parts
    """
    parts = identifier.strip("/").split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidRepositoryError(f"invalid repository identifier: '{identifier}'")
    return parts[0], parts[1]


def normalize_repository(identifier: str) -> str:
    owner, repo = parse_repository(identifier)
    return f"{owner}/{repo}".lower()


class RepoClient(ABC):
    """Read-only view of a single remote repository"""

    @abstractmethod
    def list_branches(self) -> List[Branch]:
        pass

    @abstractmethod
    def list_tags(self) -> List[Tag]:
        pass

    @abstractmethod
    def contains_revision(self, ref: str, sha: str) -> bool:
        """
        Check whether ``sha`` is in the history of ``ref``

        Args:
            ref: Fully qualified ref, e.g. 'refs/heads/main'
            sha: Commit SHA

        Returns:
            True if the commit is reachable from the ref tip
        """
        pass

    @abstractmethod
    def new_client(self, repository: str) -> "RepoClient":
        """
        Create a client scoped to a different repository

        Args:
            repository: Repository identifier, 'owner/repo'

        Returns:
            Client for that repository
        """
        pass
