"""Unit tests for the report data model."""

from __future__ import annotations

import dataclasses

import pytest

from testreport.report.model import Benchmark, Package, Report, Result, Test


class TestResultParse:
    """Tests for Result.parse."""

    def test_exact_tokens(self):
        assert Result.parse("PASS") is Result.PASS
        assert Result.parse("FAIL") is Result.FAIL
        assert Result.parse("SKIP") is Result.SKIP

    def test_case_sensitive(self):
        """Lowercase tokens are not recognised."""
        assert Result.parse("pass") is Result.UNKNOWN

    def test_unknown_token(self):
        assert Result.parse("PAUSE") is Result.UNKNOWN


class TestImmutability:
    """Flushed records cannot be modified."""

    def test_test_is_frozen(self):
        t = Test(name="A")
        with pytest.raises(dataclasses.FrozenInstanceError):
            t.name = "B"  # type: ignore[misc]

    def test_package_is_frozen(self):
        p = Package(name="pkg")
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.tests = ()  # type: ignore[misc]


class TestFailures:
    """Tests for has_failures."""

    def test_no_failures(self):
        report = Report(packages=(
            Package(name="a", tests=(Test(name="T", result=Result.PASS),)),
        ))
        assert not report.has_failures()

    def test_failure_in_second_package(self):
        report = Report(packages=(
            Package(name="a", tests=(Test(name="T", result=Result.PASS),)),
            Package(name="b", tests=(Test(name="U", result=Result.FAIL),)),
        ))
        assert report.has_failures()
        assert not report.packages[0].has_failures()
        assert report.packages[1].has_failures()


class TestSummary:
    """Tests for Report.summary."""

    def test_empty_report(self):
        """Empty report has zero counts."""
        summary = Report().summary()
        assert summary["total"] == 0
        assert summary["benchmarks"] == 0

    def test_counts_by_result(self):
        """Tests are counted by result; unended tests are unfinished."""
        report = Report(packages=(
            Package(
                name="a",
                tests=(
                    Test(name="T1", result=Result.PASS),
                    Test(name="T2", result=Result.FAIL),
                    Test(name="T3"),
                ),
                benchmarks=(Benchmark(name="B1"),),
            ),
            Package(
                name="b",
                tests=(
                    Test(name="T4", result=Result.SKIP),
                    Test(name="T5", result=Result.UNKNOWN),
                ),
            ),
        ))
        assert report.summary() == {
            "total": 5,
            "pass": 1,
            "fail": 1,
            "skip": 1,
            "unknown": 1,
            "unfinished": 1,
            "benchmarks": 1,
        }


class TestToDict:
    """Tests for plain-data conversion."""

    def test_package_to_dict(self):
        pkg = Package(
            name="pkg",
            duration=1.5,
            tests=(Test(name="T", result=Result.FAIL, output=("boom",)),),
            benchmarks=(Benchmark(name="B", iterations=10, ns_per_op=2.5),),
            output=("ok",),
        )
        assert pkg.to_dict() == {
            "name": "pkg",
            "duration_seconds": 1.5,
            "tests": [{
                "name": "T",
                "result": "fail",
                "duration_seconds": 0.0,
                "output": ["boom"],
            }],
            "benchmarks": [{
                "name": "B",
                "result": "pass",
                "iterations": 10,
                "ns_per_op": 2.5,
                "mb_per_sec": 0.0,
                "bytes_per_op": 0,
                "allocs_per_op": 0,
            }],
            "output": ["ok"],
        }

    def test_unended_test_has_null_result(self):
        assert Test(name="T").to_dict()["result"] is None

    def test_report_to_dict_includes_summary(self):
        report = Report(packages=(Package(name="a"),))
        data = report.to_dict()
        assert data["summary"]["total"] == 0
        assert [p["name"] for p in data["packages"]] == ["a"]
