"""
SSH transport for remote scope commands.

Owns one authenticated paramiko connection per remote client and runs one
command line at a time over it, returning stdout, stderr and the exit status.
"""

import io
import logging
import socket
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import paramiko

from .config import Endpoint
from .errors import (
    ConnectionError,
    RemoteTimeoutError,
    UnexpectedNetworkError,
    UsageError,
)

logger = logging.getLogger(__name__)

DEFAULT_KEY_PATH = "~/.ssh/id_rsa"

# Key classes tried, in order, for in-memory key material
_KEY_CLASSES = (paramiko.RSAKey, paramiko.Ed25519Key, paramiko.ECDSAKey)


@dataclass
class Outcome:
    """Result of one remote command."""

    output: str
    status: Optional[int]
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0


@dataclass
class Connection:
    """Live SSH connection bound to one endpoint."""

    endpoint: Endpoint
    client: paramiko.SSHClient
    closed: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class CancelToken:
    """
    Thread-safe cancellation signal.

    Callbacks registered before or after ``cancel()`` run exactly once.
    Cancelling a remote client's token closes its connection; a command in
    flight fails and later commands raise ``UsageError``.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def add_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


def _load_key_material(material: str) -> paramiko.PKey:
    """Parse PEM/OpenSSH private key text with the first key type that accepts it."""
    for key_class in _KEY_CLASSES:
        try:
            return key_class.from_private_key(io.StringIO(material))
        except paramiko.SSHException:
            continue
    raise ConnectionError("Unsupported or encrypted private key material")


def resolve_private_key(key: Optional[str] = None) -> dict:
    """
    Turn a key argument into paramiko connect() keyword arguments.

    Args:
        key: Path to a private key file, the key text itself, or None for
            the default key (~/.ssh/id_rsa)

    Returns:
        Either {'pkey': PKey} or {'key_filename': path}

    Raises:
        ConnectionError: If the key file does not exist or cannot be parsed
    """
    if key and "PRIVATE KEY" in key:
        return {"pkey": _load_key_material(key)}

    key_path = Path(key or DEFAULT_KEY_PATH).expanduser()
    if not key_path.exists():
        raise ConnectionError(f"Private key not found: {key_path}")
    return {"key_filename": str(key_path)}


class SSHChannel:
    """Executes command lines on a remote host through paramiko."""

    def __init__(self, strict_host_keys: bool = True):
        self.strict_host_keys = strict_host_keys

    def connect(self, endpoint: Endpoint, private_key: Optional[str] = None) -> Connection:
        """
        Open an authenticated connection to an endpoint.

        Raises:
            ConnectionError: If key loading, authentication or network setup fails
        """
        key_kwargs = resolve_private_key(private_key)

        client = paramiko.SSHClient()
        client.load_system_host_keys()
        if self.strict_host_keys:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        logger.info(f"Connecting to {endpoint.compose_connection_url()}")
        try:
            client.connect(
                hostname=endpoint.host,
                port=endpoint.port,
                username=endpoint.username,
                look_for_keys=False,
                allow_agent=False,
                **key_kwargs,
            )
        except paramiko.AuthenticationException as e:
            client.close()
            raise ConnectionError(
                f"Authentication failed for {endpoint.compose_connection_url()}: {e}"
            ) from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise ConnectionError(
                f"Cannot connect to {endpoint.compose_connection_url()}: {e}"
            ) from e

        return Connection(endpoint=endpoint, client=client)

    def exec(
        self,
        connection: Optional[Connection],
        command_line: str,
        timeout: Optional[float] = None,
    ) -> Outcome:
        """
        Run one command line and wait for it to finish.

        Args:
            connection: Open connection
            command_line: Command to run on the remote host
            timeout: Seconds to wait for the command (None waits forever)

        Returns:
            Outcome with stdout, stderr and exit status (None when the remote
            process ended without one)

        Raises:
            UsageError: If the connection is absent or closed
            RemoteTimeoutError: If the command exceeds the timeout
            UnexpectedNetworkError: If the SSH session fails mid-command
        """
        if connection is None or connection.closed:
            raise UsageError("No open connection to the remote scope")

        with connection.lock:
            if connection.closed:
                raise UsageError("No open connection to the remote scope")
            logger.debug(f"Full remote command: {command_line}")
            try:
                _, stdout, stderr = connection.client.exec_command(
                    command_line, timeout=timeout
                )
                try:
                    output = stdout.read().decode("utf-8", errors="replace")
                    error = stderr.read().decode("utf-8", errors="replace")
                    status = stdout.channel.recv_exit_status()
                finally:
                    stdout.channel.close()
            except socket.timeout as e:
                raise RemoteTimeoutError(
                    f"Remote command timed out after {timeout} seconds"
                ) from e
            except (paramiko.SSHException, OSError, EOFError, AttributeError) as e:
                # close() from another thread leaves paramiko without a transport
                if connection.closed:
                    raise UsageError("Connection was closed during the command") from e
                raise UnexpectedNetworkError(f"SSH execution failed: {e}") from e

        # paramiko reports -1 when the channel closed without an exit status
        return Outcome(output=output, status=None if status < 0 else status, error=error)

    def close(self, connection: Optional[Connection]) -> None:
        """Close a connection; safe on closed or missing connections."""
        if connection is None or connection.closed:
            return
        connection.closed = True
        connection.client.close()
        logger.info(f"Closed connection to {connection.endpoint.compose_connection_url()}")
