"""
Shared fixtures for scopelink tests.
"""

from unittest.mock import MagicMock

import pytest

from scopelink.remote import Connection, Endpoint, Outcome, SSHChannel, UsageError


class FakeChannel(SSHChannel):
    """SSH channel that records command lines and replays canned outcomes."""

    def __init__(self, outcomes=None):
        super().__init__()
        self.outcomes = list(outcomes or [])
        self.commands = []
        self.timeouts = []
        self.connects = 0

    def respond(self, output="", status=0, error=""):
        self.outcomes.append(Outcome(output=output, status=status, error=error))
        return self

    def connect(self, endpoint, private_key=None):
        self.connects += 1
        return Connection(endpoint=endpoint, client=MagicMock())

    def exec(self, connection, command_line, timeout=None):
        if connection is None or connection.closed:
            raise UsageError("No open connection to the remote scope")
        self.commands.append(command_line)
        self.timeouts.append(timeout)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def endpoint():
    return Endpoint(host="scopes.example.com", port=22, username="me", path="/scopes/main")


@pytest.fixture
def fake_channel():
    return FakeChannel()
