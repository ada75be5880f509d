"""
seed-tester: a statistical test battery for 64-bit seed sequences.

Runs frequency, entropy, poker, periodicity, correlation, run-length,
block chi-square, collision and pattern tests against a sequence of
unsigned 64-bit integers and reports one result record per test.
"""

__version__ = "0.1.0"

from seed_tester.battery import (
    FILE_ANALYSIS_BATTERY,
    LIVE_GENERATION_BATTERY,
    TestKind,
    analyze_file_data,
    run_battery,
    run_live_battery,
    summarize,
)
from seed_tester.generator import SeedGenerator
from seed_tester.test_suite import TestResult

__all__ = [
    "FILE_ANALYSIS_BATTERY",
    "LIVE_GENERATION_BATTERY",
    "SeedGenerator",
    "TestKind",
    "TestResult",
    "__version__",
    "analyze_file_data",
    "run_battery",
    "run_live_battery",
    "summarize",
]
