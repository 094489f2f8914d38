"""
Error types for remote scope access and the exit status classifier.

The remote side of the protocol signals failures through the exit status of
the executed command. ``classify`` turns that status into one of a fixed set
of exception kinds so callers can handle them by type.
"""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class ScopeLinkError(Exception):
    """Base exception for all scopelink errors."""

    pass


class ConnectionError(ScopeLinkError):
    """Raised when the SSH channel to the remote cannot be established."""

    def __init__(self, message: str, protocol: str = "ssh"):
        super().__init__(message)
        self.protocol = protocol
        self.suggestions = self._get_suggestions()

    def _get_suggestions(self) -> List[str]:
        """Get protocol-specific troubleshooting suggestions."""
        if self.protocol == "ssh":
            return [
                "Verify the host is listed in ~/.ssh/known_hosts",
                "Verify network connectivity and VPN if required",
                "Check the private key path or pass one with --key",
                "Check SSH key permissions: chmod 600 ~/.ssh/id_*",
            ]
        return []


class UsageError(ScopeLinkError):
    """Raised when an operation is attempted without an open connection."""

    pass


class RemoteError(ScopeLinkError):
    """Base exception for failures reported by (or while talking to) the remote."""

    pass


class UnexpectedNetworkError(RemoteError):
    """Raised for unclassified or silent remote failures."""

    def __init__(self, message: str = "unexpected network error", status=None):
        super().__init__(message)
        self.status = status


class RemoteTimeoutError(UnexpectedNetworkError):
    """Raised when a remote command does not complete within its timeout."""

    pass


class ComponentNotFound(RemoteError):
    """Raised when the remote scope has no component with the requested id."""

    def __init__(self, component_id: Optional[str] = None):
        self.id = component_id
        super().__init__(f"component {component_id} was not found")


class PermissionDenied(RemoteError):
    """Raised when the remote refuses access to the scope."""

    def __init__(self, message: str = "permission to the remote scope was denied"):
        super().__init__(message)


class RemoteScopeNotFound(RemoteError):
    """Raised when the remote path does not hold a scope."""

    def __init__(self, message: str = "remote scope was not found"):
        super().__init__(message)


class DecodeError(RemoteError):
    """Raised when a successful response cannot be rebuilt into a domain object."""

    def __init__(self, payload: str, message: Optional[str] = None):
        self.payload = payload
        super().__init__(message or f"unable to decode remote response: {payload!r}")


# Exit statuses with a meaning of their own; everything else is unexpected.
EXIT_COMPONENT_NOT_FOUND = 127
EXIT_PERMISSION_DENIED = 128
EXIT_SCOPE_NOT_FOUND = 129
EXIT_PERMISSION_DENIED_ALT = 130


def classify(
    status: Optional[int],
    fallback_id: Optional[str] = None,
    remote_id: Optional[str] = None,
) -> Optional[RemoteError]:
    """
    Map a command exit status to an error instance.

    Args:
        status: Exit status of the remote command, or None when the remote
            process ended without reporting one
        fallback_id: Component id supplied by the caller
        remote_id: Component id reported by the remote, if any

    Returns:
        None for a successful status, otherwise the matching error
    """
    if status is None:
        return UnexpectedNetworkError("remote command ended without a result")
    if status == 0:
        return None
    if status == EXIT_COMPONENT_NOT_FOUND:
        return ComponentNotFound(remote_id or fallback_id)
    if status in (EXIT_PERMISSION_DENIED, EXIT_PERMISSION_DENIED_ALT):
        return PermissionDenied()
    if status == EXIT_SCOPE_NOT_FOUND:
        return RemoteScopeNotFound()
    return UnexpectedNetworkError(
        f"remote command failed with exit status {status}", status=status
    )


def classify_outcome(outcome, fallback_id: Optional[str] = None):
    """Classify an ``Outcome``; the remote reports a missing id on stdout."""
    remote_id = (outcome.output or "").strip() or None
    error = classify(outcome.status, fallback_id=fallback_id, remote_id=remote_id)
    if error is not None and outcome.error:
        logger.debug(f"Remote stderr (status {outcome.status}): {outcome.error}")
    return error
