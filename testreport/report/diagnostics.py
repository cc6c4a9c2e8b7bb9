"""Diagnostics recorded while accumulating a report.

Malformed events never abort accumulation.  Instead the builder records a
``Diagnostic`` and keeps going; callers read them back from
``ReportBuilder.diagnostics`` or receive them through an ``on_diagnostic``
callback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

# Diagnostic kinds
UNKNOWN_RESULT = "unknown_result"
UNRESOLVED_TEST = "unresolved_test"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found in the event stream."""

    kind: str
    name: str
    message: str


DiagnosticHandler = Callable[[Diagnostic], None]


class UnresolvedTestError(LookupError):
    """An end event named a test with no matching open test."""

    def __init__(self, name: str) -> None:
        super().__init__(f"no open test named {name!r}")
        self.name = name
