"""Report model and the incremental builder that accumulates it."""

from testreport.report.builder import ReportBuilder
from testreport.report.diagnostics import Diagnostic, UnresolvedTestError
from testreport.report.model import Benchmark, Package, Report, Result, Test

__all__ = [
    "Benchmark",
    "Diagnostic",
    "Package",
    "Report",
    "ReportBuilder",
    "Result",
    "Test",
    "UnresolvedTestError",
]
