"""
Remote scope client.

Turns scope operations into remote command lines, runs them over one SSH
connection and decodes the responses into domain objects.

Example:
    >>> endpoint = Endpoint.from_url("ssh://me@scopes.example.com/scopes/main")
    >>> with RemoteClient(endpoint).connect() as client:
    ...     components = client.list()
"""

import json
import logging
from typing import Any, Iterable, List, Optional

from ..models import BitId, ComponentObjects, ConsumerComponent, ScopeDescriptor
from .command_builder import DEFAULT_TOOL, build_command
from .config import Endpoint
from .errors import (
    DecodeError,
    RemoteScopeNotFound,
    UsageError,
    classify_outcome,
)
from .packing import decode_items, decode_one, is_nil, unpack
from .transport import CancelToken, Connection, SSHChannel

logger = logging.getLogger(__name__)

NO_DEPENDENCIES_FLAG = "-n"


class RemoteClient:
    """Client for the fixed set of remote scope operations."""

    def __init__(
        self,
        endpoint: Endpoint,
        channel: Optional[SSHChannel] = None,
        tool: str = DEFAULT_TOOL,
        timeout: Optional[float] = None,
        objects_type=ComponentObjects,
        component_type=ConsumerComponent,
    ):
        """
        Create a client for one remote endpoint.

        Args:
            endpoint: Remote scope address
            channel: Transport used to reach the host (default: SSHChannel)
            tool: Executable invoked on the remote host
            timeout: Seconds allowed per remote command (None waits forever)
            objects_type: Deserializer for pushed and fetched object bundles
            component_type: Deserializer for listed and shown components
        """
        self.endpoint = endpoint
        self.channel = channel or SSHChannel()
        self.tool = tool
        self.timeout = timeout
        self.objects_type = objects_type
        self.component_type = component_type
        self.connection: Optional[Connection] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def connected(self) -> bool:
        return self.connection is not None and not self.connection.closed

    def compose_connection_url(self) -> str:
        return self.endpoint.compose_connection_url()

    def connect(
        self, private_key: Optional[str] = None, cancel_token: Optional[CancelToken] = None
    ) -> "RemoteClient":
        """
        Open the connection to the remote host.

        Args:
            private_key: Key file path or key text (default: ~/.ssh/id_rsa)
            cancel_token: Token that closes the connection when cancelled

        Raises:
            UsageError: If the client is already connected
            ConnectionError: If the connection cannot be established
        """
        if self.connected:
            raise UsageError(f"Already connected to {self.compose_connection_url()}")
        self.connection = self.channel.connect(self.endpoint, private_key)
        if cancel_token is not None:
            cancel_token.add_callback(self.close)
        return self

    def close(self) -> "RemoteClient":
        self.channel.close(self.connection)
        return self

    def _exec(self, operation: str, *args: str, fallback_id: Optional[str] = None) -> str:
        """Run one operation and return its payload, raising on failure."""
        if not self.connected:
            raise UsageError("No open connection to the remote scope")

        command_line = build_command(operation, self.endpoint.path, *args, tool=self.tool)
        logger.info(f"Running {operation} on {self.endpoint.host}")
        outcome = self.channel.exec(self.connection, command_line, timeout=self.timeout)

        error = classify_outcome(outcome, fallback_id=fallback_id)
        if error is not None:
            raise error
        return outcome.output.strip()

    def _decode_json(self, payload: str) -> Any:
        try:
            return json.loads(decode_one(payload))
        except json.JSONDecodeError as e:
            raise DecodeError(payload, f"invalid JSON in remote response: {e}") from e

    def push(self, objects):
        """
        Send a component bundle to the remote scope.

        Returns:
            The bundle as acknowledged by the remote

        Raises:
            DecodeError: If the acknowledgment cannot be read back
        """
        payload = self._exec("_put", objects.to_string())
        try:
            echoed = self.objects_type.from_string(decode_one(payload))
        except Exception as e:
            raise DecodeError(payload) from e
        if echoed is None:
            raise DecodeError(payload)
        return echoed

    def describe_scope(self) -> ScopeDescriptor:
        """
        Read the remote scope descriptor.

        Every failure is reported as RemoteScopeNotFound; the cause is logged
        and chained.
        """
        try:
            payload = self._exec("_scope")
            return ScopeDescriptor.from_dict(self._decode_json(payload))
        except UsageError:
            raise
        except Exception as e:
            logger.warning(f"Describing scope at {self.endpoint} failed: {e}")
            raise RemoteScopeNotFound() from e

    @staticmethod
    def _deserialize_all(deserializer, payload: str) -> List[Any]:
        """Rebuild every item of a payload, dropping nil results in order."""
        results = []
        for raw in decode_items(payload):
            try:
                value = deserializer.from_string(raw)
            except Exception as e:
                raise DecodeError(raw) from e
            if value is not None:
                results.append(value)
        return results

    def list(self) -> List[Any]:
        """List the components held by the remote scope."""
        payload = self._exec("_list")
        return self._deserialize_all(self.component_type, payload)

    def search(self, query: str, reindex: bool = False) -> Any:
        """Search the remote scope; returns the decoded search results."""
        payload = self._exec("_search", query, str(bool(reindex)).lower())
        return self._decode_json(payload)

    def show(self, bit_id):
        """
        Show one component.

        Returns:
            The component, or None when the remote has nothing to show
        """
        component_id = str(bit_id)
        payload = self._exec("_show", component_id, fallback_id=component_id)
        items = unpack(payload)
        if not items:
            return None
        raw = decode_one(items[0])
        if is_nil(raw):
            return None
        try:
            return self.component_type.from_string(raw)
        except Exception as e:
            raise DecodeError(payload) from e

    def fetch(self, ids: Iterable, no_dependencies: bool = False) -> List[Any]:
        """
        Fetch object bundles for component ids.

        The remote decides the order of the returned bundles; it need not
        match the order of ``ids``.
        """
        id_strings = [str(bit_id) for bit_id in ids]
        args = [NO_DEPENDENCIES_FLAG] if no_dependencies else []
        payload = self._exec(
            "_fetch", *args, *id_strings, fallback_id=", ".join(id_strings) or None
        )
        return self._deserialize_all(self.objects_type, payload)


def parse_ids(values: Iterable[str]) -> List[BitId]:
    """Parse component id strings, e.g. from the command line."""
    return [BitId.parse(value) for value in values]
