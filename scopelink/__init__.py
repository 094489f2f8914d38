"""
This package provides a client for component scopes that live on remote hosts.
Scope operations (push, fetch, list, search, show, describe) are sent as
single command lines over an authenticated SSH connection and the responses
are decoded back into components or typed errors.
"""

# __init__.py

__version__ = "0.1.0"

from .models import BitId, ComponentObjects, ConsumerComponent, ScopeDescriptor
from .remote import (  # noqa: F401
    CancelToken,
    ComponentNotFound,
    ConnectionError,
    DecodeError,
    Endpoint,
    PermissionDenied,
    RemoteClient,
    RemoteScopeNotFound,
    UnexpectedNetworkError,
    UsageError,
)

__all__ = [
    "RemoteClient",
    "Endpoint",
    "CancelToken",
    "BitId",
    "ComponentObjects",
    "ConsumerComponent",
    "ScopeDescriptor",
    "ConnectionError",
    "UsageError",
    "UnexpectedNetworkError",
    "ComponentNotFound",
    "PermissionDenied",
    "RemoteScopeNotFound",
    "DecodeError",
]
