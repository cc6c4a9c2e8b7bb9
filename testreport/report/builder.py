"""Incremental report builder.

Accumulates test, benchmark, and output events into the current package
window and flushes the window into an immutable ``Package`` at each package
boundary.

Every test and benchmark in a window gets an identifier from one shared
counter, starting at 1 after each flush.  Identifiers index an arena of
slots, so iterating the arena in order recovers creation order for both
kinds.  The identifier of the most recently created or ended entity is
tracked as *last active* and receives output lines that are not addressed
to a named test.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from testreport.config import BuilderConfig
from testreport.report.diagnostics import (
    UNKNOWN_RESULT,
    UNRESOLVED_TEST,
    Diagnostic,
    DiagnosticHandler,
    UnresolvedTestError,
)
from testreport.report.model import Benchmark, Package, Report, Result, Test


@dataclass
class _OpenTest:
    """A test still accepting output within the current window."""

    name: str
    result: Result | None = None
    duration: float = 0.0
    output: list[str] = field(default_factory=list)

    @property
    def ended(self) -> bool:
        return self.result is not None

    def freeze(self) -> Test:
        return Test(
            name=self.name,
            result=self.result,
            duration=self.duration,
            output=tuple(self.output),
        )


_Slot = Union[_OpenTest, Benchmark]


class ReportBuilder:
    """Builds a ``Report`` from a sequence of test events.

    Not thread-safe: callers sharing a builder must serialise access.
    """

    def __init__(
        self,
        config: BuilderConfig | None = None,
        on_diagnostic: DiagnosticHandler | None = None,
    ) -> None:
        self.config = config if config is not None else BuilderConfig()
        self.on_diagnostic = on_diagnostic
        self._packages: list[Package] = []
        self._diagnostics: list[Diagnostic] = []

        # Per-window state, reset by create_package()
        self._slots: list[_Slot] = []
        self._last_id: int | None = None
        self._output: list[str] = []

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """All diagnostics recorded so far, oldest first."""
        return tuple(self._diagnostics)

    @property
    def pending(self) -> bool:
        """True if the current window holds any tests or benchmarks."""
        return bool(self._slots)

    def create_test(self, name: str) -> None:
        """Open a new test in the current window."""
        self._last_id = self._allocate(_OpenTest(name=name))

    def end_test(self, name: str, result: str, duration: float) -> None:
        """Close the most recently started open test named *name*.

        An unrecognised *result* token is recorded as ``Result.UNKNOWN``
        with a diagnostic.  If no open test matches, a diagnostic is
        recorded and nothing changes; in strict mode
        ``UnresolvedTestError`` is raised instead.
        """
        test_id = self._find_test(name)
        if test_id is None:
            if self.config.strict:
                raise UnresolvedTestError(name)
            self._report(
                UNRESOLVED_TEST, name,
                f"end event for {name!r} has no matching open test",
            )
            return

        parsed = Result.parse(result)
        if parsed is Result.UNKNOWN:
            self._report(
                UNKNOWN_RESULT, name, f"unknown result: {result!r}",
            )

        test = self._slots[test_id - 1]
        assert isinstance(test, _OpenTest)
        test.result = parsed
        test.duration = duration
        self._last_id = test_id

    def benchmark(
        self,
        name: str,
        iterations: int,
        ns_per_op: float,
        mb_per_sec: float,
        bytes_per_op: int,
        allocs_per_op: int,
    ) -> None:
        """Record a completed benchmark.

        Raises:
            ValueError: If any count is negative.  The window is unchanged.
        """
        for label, value in (
            ("iterations", iterations),
            ("bytes_per_op", bytes_per_op),
            ("allocs_per_op", allocs_per_op),
        ):
            if value < 0:
                raise ValueError(
                    f"benchmark {name!r}: {label} must be >= 0, got {value}"
                )
        self._last_id = self._allocate(Benchmark(
            name=name,
            result=Result.PASS,
            iterations=iterations,
            ns_per_op=ns_per_op,
            mb_per_sec=mb_per_sec,
            bytes_per_op=bytes_per_op,
            allocs_per_op=allocs_per_op,
        ))

    def append_output(self, line: str) -> None:
        """Attach an output line to the last active test.

        Lines arriving while no test is active (nothing tracked yet, or the
        last active entity is a benchmark) go to the package-level output.
        """
        if self._last_id is not None:
            slot = self._slots[self._last_id - 1]
            if isinstance(slot, _OpenTest):
                slot.output.append(line)
                return
        self._output.append(line)

    def create_package(self, name: str, duration: float) -> None:
        """Flush the current window into a new package and reset it."""
        tests: list[Test] = []
        benchmarks: list[Benchmark] = []

        # Arena order is creation order
        for slot in self._slots:
            if isinstance(slot, _OpenTest):
                tests.append(slot.freeze())
            else:
                benchmarks.append(slot)

        self._packages.append(Package(
            name=name,
            duration=duration,
            tests=tuple(tests),
            benchmarks=tuple(benchmarks),
            output=tuple(self._output),
        ))

        self._slots = []
        self._last_id = None
        self._output = []

    def build(self) -> Report:
        """Return the report, flushing any unterminated window first.

        The trailing window is flushed into a package named after the
        configured fallback name with zero duration.  The flush empties the
        window, so calling build() again returns an equal report.
        """
        if self.pending:
            self.create_package(self.config.fallback_package_name, 0.0)
        return Report(packages=tuple(self._packages))

    def _allocate(self, slot: _Slot) -> int:
        """Store *slot* in the arena and return its identifier."""
        self._slots.append(slot)
        return len(self._slots)

    def _find_test(self, name: str) -> int | None:
        """Resolve *name* to the identifier of an open test.

        The last active entity is checked first, since end events usually
        follow their start directly.  Otherwise the arena is scanned from
        the newest entity back, so among several open tests sharing a name
        the most recently created one wins.  Tests that already ended are
        never matched.
        """
        if self._last_id is not None and self._is_open_test(self._last_id, name):
            return self._last_id
        for test_id in range(len(self._slots), 0, -1):
            if self._is_open_test(test_id, name):
                return test_id
        return None

    def _is_open_test(self, test_id: int, name: str) -> bool:
        slot = self._slots[test_id - 1]
        return (
            isinstance(slot, _OpenTest)
            and not slot.ended
            and slot.name == name
        )

    def _report(self, kind: str, name: str, message: str) -> None:
        diagnostic = Diagnostic(kind=kind, name=name, message=message)
        self._diagnostics.append(diagnostic)
        if self.on_diagnostic is not None:
            self.on_diagnostic(diagnostic)
