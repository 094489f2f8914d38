"""
Command line construction for remote scope operations.

Each operation is sent as a single command line of the form::

    <tool> <operation> <b64(working path)> <b64(arg1)> ... <b64(argN)>

Every argument is base64-encoded on its own so it survives shell quoting
without inspecting its contents.
"""

import base64
import binascii
from typing import Iterable

from .errors import DecodeError

DEFAULT_TOOL = "bit"


def to_base64(value: str) -> str:
    """Encode a string as standard base64 text."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def from_base64(value: str) -> str:
    """
    Decode standard base64 text back into a string.

    Raises:
        DecodeError: If the text is not valid base64 or not UTF-8
    """
    try:
        return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise DecodeError(value, f"invalid base64 payload: {e}") from e


def absolute_path(path: str) -> str:
    """Rewrite a relative remote path as relative to the remote home directory."""
    if not path.startswith("/"):
        return f"~/{path}"
    return path


def encode_arguments(args: Iterable[str]) -> str:
    """Base64-encode each argument and join them with spaces."""
    return " ".join(to_base64(str(arg)) for arg in args)


def build_command(
    operation: str, working_path: str, *args: str, tool: str = DEFAULT_TOOL
) -> str:
    """
    Build the command line for a remote scope operation.

    Args:
        operation: Remote operation name (e.g. '_list', '_fetch')
        working_path: Path of the scope on the remote host
        *args: Operation arguments, sent in order
        tool: Executable invoked on the remote host

    Returns:
        Command line string

    Examples:
        >>> build_command("_show", "/scopes/main", "a/b@1.0.0")
        'bit _show L3Njb3Blcy9tYWlu YS9iQDEuMC4w'
    """
    encoded = encode_arguments([absolute_path(working_path or ""), *args])
    return f"{tool} {operation} {encoded}"
