"""Result values for the command system.

Parsers return Ok(value) or Err(message, position). Command handlers return
Ok(...) or one of the failure values below; nothing here is raised. The
router is the only place that turns a failure into a reply.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Ok:
    value: Any
    ok = True

    def get(self, default=None):
        return self.value


@dataclass(frozen=True)
class Err:
    """A parser could not read what it needed."""
    message: str
    position: int  # cursor position where the mismatch was detected
    ok = False

    def get(self, default=None):
        return default

    def describe(self):
        return f"{self.message} (at position {self.position})"


@dataclass(frozen=True)
class SessionMiss:
    """A button referred to a session that is gone, or to an index it doesn't have."""
    key: str
    index: int
    ok = False

    def get(self, default=None):
        return default


@dataclass(frozen=True)
class AmbiguousLoad:
    """The index knows more (or fewer) than one element under one qualified name."""
    qualified_name: str
    count: int
    ok = False

    def get(self, default=None):
        return default
