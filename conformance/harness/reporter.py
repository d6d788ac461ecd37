"""
Report generation for payload conformance results.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from comparator import ComparisonResult, Divergence

_RULE = "=" * 60


@dataclass
class TestResult:
    """Result of a single test vector."""
    vector_name: str
    suite_name: str
    passed: bool
    execution_time_ms: float
    comparison: Optional[ComparisonResult] = None
    error: Optional[str] = None


@dataclass
class SuiteResult:
    """Result of one vector file."""
    suite_name: str
    execution_time_ms: float
    test_results: List[TestResult] = field(default_factory=list)
    skipped_tests: int = 0

    @property
    def total_tests(self) -> int:
        return len(self.test_results)

    @property
    def passed_tests(self) -> int:
        return sum(1 for r in self.test_results if r.passed)

    @property
    def failed_tests(self) -> int:
        return self.total_tests - self.passed_tests

    @property
    def pass_rate(self) -> float:
        if self.total_tests == 0:
            return 0.0
        return self.passed_tests / self.total_tests * 100


@dataclass
class ConformanceReport:
    """Complete conformance run."""
    timestamp: str
    clients: List[str]
    reference_client: str
    execution_time_ms: float
    suite_results: List[SuiteResult]
    divergences: List[Divergence]

    @property
    def total_tests(self) -> int:
        return sum(s.total_tests for s in self.suite_results)

    @property
    def total_passed(self) -> int:
        return sum(s.passed_tests for s in self.suite_results)

    @property
    def total_failed(self) -> int:
        return sum(s.failed_tests for s in self.suite_results)

    @property
    def pass_rate(self) -> float:
        return self.total_passed / max(self.total_tests, 1) * 100


class ReportGenerator:
    """Writes conformance reports to a result directory."""

    def __init__(self, result_dir: str):
        self.result_dir = result_dir
        os.makedirs(result_dir, exist_ok=True)

    def generate_report(
        self,
        suite_results: List[SuiteResult],
        clients: List[str],
        reference_client: str,
        execution_time_ms: float,
    ) -> ConformanceReport:
        divergences = [
            div
            for suite in suite_results
            for test in suite.test_results
            if test.comparison
            for div in test.comparison.divergences
        ]
        return ConformanceReport(
            timestamp=datetime.now(timezone.utc).isoformat(),
            clients=clients,
            reference_client=reference_client,
            execution_time_ms=execution_time_ms,
            suite_results=suite_results,
            divergences=divergences,
        )

    def write_json_report(
        self,
        report: ConformanceReport,
        filename: str = "conformance-report.json",
    ) -> str:
        """Write the report as JSON and return the file path."""
        path = os.path.join(self.result_dir, filename)
        with open(path, "w") as f:
            json.dump(self.report_to_dict(report), f, indent=2)
        return path

    def write_summary(
        self,
        report: ConformanceReport,
        filename: str = "conformance-summary.txt",
    ) -> str:
        """Write a human-readable summary and return the file path."""
        path = os.path.join(self.result_dir, filename)
        with open(path, "w") as f:
            f.write("\n".join(self.summary_lines(report)))
        return path

    def print_summary(self, report: ConformanceReport) -> None:
        print()
        for line in self.summary_lines(report, max_divergences=10):
            print(line)

    def summary_lines(self, report: ConformanceReport, max_divergences: Optional[int] = None) -> List[str]:
        lines = [
            _RULE,
            "Omni Payload Conformance Report",
            _RULE,
            f"Timestamp: {report.timestamp}",
            f"Clients: {', '.join(report.clients)}",
            f"Reference: {report.reference_client}",
            "",
            f"  Total Tests:  {report.total_tests}",
            f"  Passed:       {report.total_passed}",
            f"  Failed:       {report.total_failed}",
            f"  Divergences:  {len(report.divergences)}",
            f"  Pass Rate:    {report.pass_rate:.1f}%",
            f"  Duration:     {report.execution_time_ms:.2f}ms",
            "",
            "Suite Results:",
        ]
        for suite in report.suite_results:
            status = "PASS" if suite.failed_tests == 0 else "FAIL"
            lines.append(
                f"  [{status}] {suite.suite_name}: "
                f"{suite.passed_tests}/{suite.total_tests} ({suite.pass_rate:.1f}%)"
            )

        shown = report.divergences[:max_divergences] if max_divergences else report.divergences
        if shown:
            lines += ["", "Divergences:"]
            for div in shown:
                lines.append(f"  - {div.vector_name} [{div.client}] {div.field}")
                lines.append(f"      expected: {div.expected}")
                lines.append(f"      actual:   {div.actual}")
                if div.details:
                    lines.append(f"      {div.details}")
            hidden = len(report.divergences) - len(shown)
            if hidden:
                lines.append(f"  ... and {hidden} more")

        lines += ["", f"Overall: {'PASSED' if report.total_failed == 0 else 'FAILED'}", _RULE]
        return lines

    def report_to_dict(self, report: ConformanceReport) -> Dict[str, Any]:
        return {
            "timestamp": report.timestamp,
            "clients": report.clients,
            "reference_client": report.reference_client,
            "total_tests": report.total_tests,
            "total_passed": report.total_passed,
            "total_failed": report.total_failed,
            "execution_time_ms": report.execution_time_ms,
            "suite_results": [
                {
                    "suite_name": s.suite_name,
                    "total_tests": s.total_tests,
                    "passed_tests": s.passed_tests,
                    "failed_tests": s.failed_tests,
                    "skipped_tests": s.skipped_tests,
                    "pass_rate": s.pass_rate,
                    "failed_vectors": [
                        {"name": t.vector_name, "error": t.error}
                        for t in s.test_results
                        if not t.passed
                    ],
                }
                for s in report.suite_results
            ],
            "divergences": [asdict(d) for d in report.divergences],
        }
