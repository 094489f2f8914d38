"""
Remote scope access over SSH.

Main classes and functions:
- RemoteClient: push, fetch, list, search and show components on a remote scope
- Endpoint: host, port, user and scope path of a remote
- SSHChannel: paramiko transport running one command line at a time
- CancelToken: closes a client's connection when cancelled
- build_command / pack / unpack: wire format helpers

Error kinds raised by the client:
- ConnectionError, UsageError
- UnexpectedNetworkError, ComponentNotFound, PermissionDenied,
  RemoteScopeNotFound, DecodeError
"""

from .client import RemoteClient, parse_ids
from .command_builder import build_command, from_base64, to_base64
from .config import Endpoint, RemoteConfigError, UnsupportedProtocolError
from .errors import (
    ComponentNotFound,
    ConnectionError,
    DecodeError,
    PermissionDenied,
    RemoteError,
    RemoteScopeNotFound,
    RemoteTimeoutError,
    ScopeLinkError,
    UnexpectedNetworkError,
    UsageError,
    classify,
)
from .packing import FRAMING_VERSION, decode_items, pack, unpack
from .transport import CancelToken, Connection, Outcome, SSHChannel

__all__ = [
    # Client
    "RemoteClient",
    "parse_ids",
    "Endpoint",
    # Transport
    "SSHChannel",
    "Connection",
    "Outcome",
    "CancelToken",
    # Wire format
    "build_command",
    "to_base64",
    "from_base64",
    "pack",
    "unpack",
    "decode_items",
    "FRAMING_VERSION",
    # Errors
    "classify",
    "ScopeLinkError",
    "RemoteConfigError",
    "UnsupportedProtocolError",
    "ConnectionError",
    "UsageError",
    "RemoteError",
    "UnexpectedNetworkError",
    "RemoteTimeoutError",
    "ComponentNotFound",
    "PermissionDenied",
    "RemoteScopeNotFound",
    "DecodeError",
]
