"""Report data model: packages, tests, benchmarks, and their results.

All records are immutable values.  Tests are only mutable while the
builder is still accumulating them; once a package is flushed, its tests,
benchmarks, and output are frozen into tuples owned by the package.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class Result(enum.Enum):
    """Outcome of a test or benchmark."""

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, token: str) -> Result:
        """Classify a runner result token.

        Only the exact tokens ``"PASS"``, ``"FAIL"`` and ``"SKIP"`` are
        recognised; everything else (including lowercase variants) is
        ``UNKNOWN``.
        """
        return _RESULT_TOKENS.get(token, cls.UNKNOWN)


_RESULT_TOKENS: dict[str, Result] = {
    "PASS": Result.PASS,
    "FAIL": Result.FAIL,
    "SKIP": Result.SKIP,
}


@dataclass(frozen=True)
class Test:
    """A single test and the output it produced."""

    __test__ = False  # not a pytest test class

    name: str
    result: Result | None = None
    duration: float = 0.0
    output: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "result": self.result.value if self.result is not None else None,
            "duration_seconds": self.duration,
            "output": list(self.output),
        }


@dataclass(frozen=True)
class Benchmark:
    """A completed benchmark measurement."""

    name: str
    result: Result = Result.PASS
    iterations: int = 0
    ns_per_op: float = 0.0
    mb_per_sec: float = 0.0
    bytes_per_op: int = 0
    allocs_per_op: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "result": self.result.value,
            "iterations": self.iterations,
            "ns_per_op": self.ns_per_op,
            "mb_per_sec": self.mb_per_sec,
            "bytes_per_op": self.bytes_per_op,
            "allocs_per_op": self.allocs_per_op,
        }


@dataclass(frozen=True)
class Package:
    """A flushed package: its tests, benchmarks, and unattributed output."""

    name: str
    duration: float = 0.0
    tests: tuple[Test, ...] = ()
    benchmarks: tuple[Benchmark, ...] = ()
    output: tuple[str, ...] = ()

    def has_failures(self) -> bool:
        """True if any test in the package failed."""
        return any(t.result is Result.FAIL for t in self.tests)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "duration_seconds": self.duration,
            "tests": [t.to_dict() for t in self.tests],
            "benchmarks": [b.to_dict() for b in self.benchmarks],
            "output": list(self.output),
        }


@dataclass(frozen=True)
class Report:
    """The final report: an ordered sequence of packages."""

    packages: tuple[Package, ...] = field(default_factory=tuple)

    def has_failures(self) -> bool:
        """True if any test in any package failed."""
        return any(p.has_failures() for p in self.packages)

    def summary(self) -> dict[str, int]:
        """Count tests by result, plus the number of benchmarks.

        Tests that never received an end event are counted as
        ``"unfinished"``.
        """
        counts = {
            "total": 0,
            "pass": 0,
            "fail": 0,
            "skip": 0,
            "unknown": 0,
            "unfinished": 0,
            "benchmarks": 0,
        }
        for package in self.packages:
            counts["benchmarks"] += len(package.benchmarks)
            for test in package.tests:
                counts["total"] += 1
                if test.result is None:
                    counts["unfinished"] += 1
                else:
                    counts[test.result.value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "packages": [p.to_dict() for p in self.packages],
        }
