"""
Pytest Configuration and Fixtures

This module provides:
- Timestamped result file generation
- Shared fixtures for all tests
- Test category organization
"""

import pytest
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any

from tests.test_config import (
    CONFIG, TEST_CATEGORIES,
    get_all_sample_projects,
)


# =============================================================================
# TEST RESULT FILE CONFIGURATION
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent
RESULTS_DIR = PROJECT_ROOT / "test_results"


def get_result_filename() -> str:
    """Generate timestamped result filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"test_results_{timestamp}.txt"


def ensure_results_dir():
    """Create results directory if it doesn't exist."""
    RESULTS_DIR.mkdir(exist_ok=True)


# =============================================================================
# PYTEST HOOKS FOR CUSTOM OUTPUT
# =============================================================================

class TestResultCollector:
    """Collects test results for formatted output."""
    
    __test__ = False
    
    def __init__(self):
        self.results: List[Dict[str, Any]] = []
        self.start_time: datetime = None
        self.end_time: datetime = None
        self.categories: Dict[str, List[Dict]] = {}
    
    def add_result(self, nodeid: str, outcome: str, duration: float, message: str = ""):
        """Add a test result."""
        category = self._extract_category(nodeid)
        
        result = {
            "nodeid": nodeid,
            "name": self._extract_test_name(nodeid),
            "category": category,
            "outcome": outcome,
            "duration": duration,
            "message": message,
        }
        
        self.results.append(result)
        self.categories.setdefault(category, []).append(result)
    
    def _extract_category(self, nodeid: str) -> str:
        """Extract test category from nodeid (tests/test_x.py::... -> x)."""
        filename = nodeid.split("::")[0].split("/")[-1]
        return filename.replace("test_", "", 1).replace(".py", "")
    
    def _extract_test_name(self, nodeid: str) -> str:
        """Extract readable test name from nodeid."""
        method_name = nodeid.split("::")[-1]
        return method_name.replace("test_", "", 1).replace("_", " ").title()
    
    def get_summary(self) -> Dict[str, int]:
        """Get test result summary."""
        return {
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r["outcome"] == "passed"),
            "failed": sum(1 for r in self.results if r["outcome"] == "failed"),
            "skipped": sum(1 for r in self.results if r["outcome"] == "skipped"),
        }


# Global collector instance
_collector = TestResultCollector()


def pytest_configure(config):
    """Register custom markers and start collecting."""
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )
    config.addinivalue_line(
        "markers", "session_invariants: Swipe state invariant tests"
    )
    
    _collector.start_time = datetime.now()
    ensure_results_dir()


def pytest_runtest_logreport(report):
    """Called after each test phase."""
    if report.when == "call":
        _collector.add_result(
            nodeid=report.nodeid,
            outcome=report.outcome,
            duration=report.duration,
            message=str(report.longrepr) if report.longrepr else "",
        )


def pytest_sessionfinish(session, exitstatus):
    """Called after all tests complete."""
    _collector.end_time = datetime.now()
    save_report(generate_formatted_report(_collector))
    print_summary(_collector)


def generate_formatted_report(collector: TestResultCollector) -> str:
    """Generate a formatted test report."""
    lines = [
        "=" * 80,
        "HACKSWIPE - TEST RESULTS REPORT",
        "=" * 80,
        "",
        f"Run Date:     {collector.start_time.strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    if collector.end_time:
        duration = (collector.end_time - collector.start_time).total_seconds()
        lines.append(f"Duration:     {duration:.2f} seconds")
    lines.append("")
    
    summary = collector.get_summary()
    lines.extend([
        "-" * 40,
        "SUMMARY",
        "-" * 40,
        f"Total Tests:  {summary['total']}",
        f"Passed:       {summary['passed']} ✓",
        f"Failed:       {summary['failed']} ✗",
        f"Skipped:      {summary['skipped']} ○",
        f"Pass Rate:    {(summary['passed'] / max(summary['total'], 1) * 100):.1f}%",
        "",
    ])
    
    for category, results in sorted(collector.categories.items()):
        cat_info = TEST_CATEGORIES.get(category, {
            "name": category.replace("_", " ").title(),
            "description": "Test category",
            "protects_against": [],
        })
        passed = sum(1 for r in results if r["outcome"] == "passed")
        failed = sum(1 for r in results if r["outcome"] == "failed")
        
        lines.append(f"{cat_info['name']} - {cat_info['description']}")
        lines.append(f"  Tests: {passed} passed, {failed} failed")
        for protection in cat_info.get("protects_against", []):
            lines.append(f"    • {protection}")
        
        for result in results:
            status = "✓" if result["outcome"] == "passed" else "✗" if result["outcome"] == "failed" else "○"
            duration_str = f"({result['duration']*1000:.0f}ms)"
            lines.append(f"    {status} {result['name']:<55} {duration_str:>10}")
            if result["outcome"] == "failed" and result["message"]:
                for msg_line in result["message"].split("\n")[:3]:
                    if msg_line.strip():
                        lines.append(f"      └─ {msg_line[:70]}")
        lines.append("")
    
    lines.extend(["=" * 80, "END OF REPORT", "=" * 80])
    return "\n".join(lines)


def save_report(report: str):
    """Save report to timestamped file."""
    ensure_results_dir()
    filepath = RESULTS_DIR / get_result_filename()
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(report)
    print(f"\n📄 Test results saved to: {filepath}")


def print_summary(collector: TestResultCollector):
    """Print summary to console."""
    summary = collector.get_summary()
    print("\n" + "=" * 60)
    print("TEST RUN COMPLETE")
    print("=" * 60)
    print(f"Total: {summary['total']} | Passed: {summary['passed']} | Failed: {summary['failed']} | Skipped: {summary['skipped']}")
    print("=" * 60)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def corpus():
    """The sample corpus as ProjectRecord instances."""
    from hackswipe.models import ProjectRecord
    return [ProjectRecord.from_dict(p) for p in get_all_sample_projects()]


@pytest.fixture
def mock_store():
    """An in-memory session store."""
    from hackswipe.storage import MockSessionStore
    return MockSessionStore()


@pytest.fixture
def scheduler():
    """A scheduler driven by the test."""
    from hackswipe.session import ManualScheduler
    return ManualScheduler()


@pytest.fixture
def make_session(corpus, mock_store, scheduler):
    """Factory for SwipeSession wired to the mock store and manual scheduler."""
    from hackswipe.session import SwipeSession
    
    def _make(projects=None, **overrides):
        options = {
            "store": mock_store,
            "seed": CONFIG["seed"],
            "scheduler": scheduler,
            "exit_delay": CONFIG["exit_delay"],
            "save_delay": CONFIG["save_delay"],
        }
        options.update(overrides)
        return SwipeSession(corpus if projects is None else projects, **options)
    
    return _make
