"""
reachability.py - Memoized commit reachability queries

Answers "is commit C reachable from any branch or tag of repository R" and
remembers the answer for the rest of the scan. Failed lookups are never
remembered, so the next call for the same pair queries again.
"""

import logging
import threading
from typing import Dict, Tuple

from .base import RepoClient, normalize_repository

logger = logging.getLogger(__name__)


def check_commit_reachable(client: RepoClient, sha: str) -> bool:
    """
    Check every branch, then every tag, for a ref that contains ``sha``

    Args:
        client: Client scoped to the repository that should own the commit
        sha: Commit SHA

    Returns:
        True as soon as one ref contains the commit, False if none does
    """
    for branch in client.list_branches():
        if client.contains_revision(branch.ref, sha):
            logger.debug("commit %s reachable from %s", sha, branch.ref)
            return True

    for tag in client.list_tags():
        if client.contains_revision(tag.ref, sha):
            logger.debug("commit %s reachable from %s", sha, tag.ref)
            return True

    return False


class ReachabilityCache:
    """
    Per-scan cache of (repository, sha) reachability results

    One instance is created for a scan and shared by every workflow analyzed
    in it. Map access is guarded by a lock; two callers missing on the same
    key at once may both query the remote, which is tolerated.
    """

    def __init__(self, client: RepoClient) -> None:
        self.client = client
        self._cache: Dict[Tuple[str, str], bool] = {}
        self._clients: Dict[str, RepoClient] = {}
        self._lock = threading.Lock()

    def _client_for(self, repository: str) -> RepoClient:
        with self._lock:
            client = self._clients.get(repository)
        if client is None:
            client = self.client.new_client(repository)
            with self._lock:
                client = self._clients.setdefault(repository, client)
        return client

    def contains(self, repository: str, sha: str) -> bool:
        """
        Check whether ``sha`` is reachable from a branch or tag of ``repository``

        Args:
            repository: Repository identifier, 'owner/repo'
            sha: Commit SHA or other revision

        Returns:
            True if reachable

        Raises:
            InvalidRepositoryError: If the identifier is malformed
            RepoClientError: If a remote call fails; nothing is cached
        """
        key = (normalize_repository(repository), sha)

        with self._lock:
            if key in self._cache:
                logger.debug("reachability cache hit for %s@%s", *key)
                return self._cache[key]

        logger.debug("reachability cache miss for %s@%s", *key)
        result = check_commit_reachable(self._client_for(key[0]), sha)

        with self._lock:
            return self._cache.setdefault(key, result)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
