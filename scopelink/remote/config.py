"""
Remote endpoint description and SSH URL parsing.

An endpoint is written either as a URL (``ssh://user@host:port/path``) or in
scp form (``user@host:path``). Relative paths are resolved against the remote
user's home directory when the command line is built.
"""

import getpass
import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .errors import ScopeLinkError

logger = logging.getLogger(__name__)

DEFAULT_SSH_PORT = 22

_SCP_PATTERN = re.compile(r"^(?:(?P<user>[^@/:]+)@)?(?P<host>[^@/:]+):(?P<path>.*)$")


class RemoteConfigError(ScopeLinkError):
    """Base exception for remote configuration errors."""

    pass


class UnsupportedProtocolError(RemoteConfigError):
    """Raised when an unsupported protocol is specified."""

    pass


@dataclass(frozen=True)
class Endpoint:
    """Host, port, user and scope path of a remote scope."""

    host: str
    port: int = DEFAULT_SSH_PORT
    username: str = ""
    path: str = ""

    def __post_init__(self):
        if not self.host:
            raise RemoteConfigError("Endpoint must include a hostname")
        if not self.username:
            object.__setattr__(self, "username", getpass.getuser())

    @staticmethod
    def _supported_protocols() -> list[str]:
        """Get list of currently supported protocols."""
        return ["ssh"]

    @classmethod
    def from_url(cls, url: str) -> "Endpoint":
        """
        Parse an SSH URL or scp-style address.

        Args:
            url: 'ssh://user@host:port/path' or 'user@host:path'

        Returns:
            Endpoint for the address

        Raises:
            RemoteConfigError: If the address is malformed
            UnsupportedProtocolError: If the URL uses a protocol other than ssh
        """
        if "://" in url:
            parsed = urlparse(url)
            if parsed.scheme not in cls._supported_protocols():
                supported = ", ".join(cls._supported_protocols())
                raise UnsupportedProtocolError(
                    f"Protocol '{parsed.scheme}' not supported. "
                    f"Supported protocols: {supported}"
                )
            if not parsed.hostname:
                raise RemoteConfigError(f"URL must include hostname: {url}")
            try:
                port = parsed.port or DEFAULT_SSH_PORT
            except ValueError as e:
                raise RemoteConfigError(f"Invalid port in URL {url}: {e}") from e
            # ssh://host/path means an absolute path, ssh://host/~/path a home one
            path = parsed.path
            if path.startswith("/~/"):
                path = path[3:]
            return cls(
                host=parsed.hostname,
                port=port,
                username=parsed.username or "",
                path=path,
            )

        match = _SCP_PATTERN.match(url)
        if not match:
            raise RemoteConfigError(
                f"Remote address must look like ssh://user@host:port/path "
                f"or user@host:path: {url}"
            )
        return cls(
            host=match.group("host"),
            username=match.group("user") or "",
            path=match.group("path"),
        )

    def with_path(self, path: Optional[str]) -> "Endpoint":
        """Return a copy of this endpoint pointing at another scope path."""
        if path is None:
            return self
        return Endpoint(
            host=self.host, port=self.port, username=self.username, path=path
        )

    def compose_connection_url(self) -> str:
        return f"{self.username}@{self.host}:{self.port}"

    def __str__(self) -> str:
        separator = "" if self.path.startswith("/") else "/~/"
        return f"ssh://{self.compose_connection_url()}{separator}{self.path}"
