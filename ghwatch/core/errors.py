"""
errors.py - Exception types for ghwatch

Errors fall into three groups: malformed input found in the scanned
repository, transport failures from the remote repository client, and
internal errors raised when a caller breaks the detector's contract.
"""

from typing import Optional


class GhwatchError(Exception):
    """Base class for all ghwatch errors"""

    pass


class MalformedWorkflowError(GhwatchError):
    """A workflow file could not be analyzed because its content is malformed"""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        self.path = path
        self.line = line
        self.reason = message
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.path or "<workflow>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.reason}"


class UnterminatedExpressionError(MalformedWorkflowError):
    """A '${{' expression opener has no closing '}}'"""

    pass


class InvalidActionReferenceError(MalformedWorkflowError):
    """An action reference is not of the form 'owner/repo@revision'"""

    pass


class InvalidRepositoryError(GhwatchError):
    """A repository identifier does not name an owner/repo pair"""

    pass


class RepoClientError(GhwatchError):
    """A remote repository call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RepoNotFoundError(RepoClientError):
    """The remote repository or resource does not exist"""

    pass


class InternalError(GhwatchError):
    """A collaborator was called with arguments of the wrong shape"""

    pass
