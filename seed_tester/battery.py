"""Battery orchestration.

Two named configurations are provided:

* ``FILE_ANALYSIS_BATTERY``: seven tests run on externally supplied seeds.
* ``LIVE_GENERATION_BATTERY``: the full set run on freshly generated seeds.

Results always come back in invocation order, whether the units ran
sequentially or on a thread pool.
"""

from __future__ import annotations

import enum
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, Sequence

import numpy as np

from seed_tester import test_suite as ts
from seed_tester.errors import InvalidConfigurationError
from seed_tester.generator import SeedGenerator
from seed_tester.stats import as_seed_array, validate_block_size
from seed_tester.test_suite import DEFAULT_BLOCK_SIZE, TestResult

logger = logging.getLogger(__name__)

Unit = Callable[[np.ndarray], TestResult]


class TestKind(str, enum.Enum):
    """One member per record-producing test unit."""
    __test__ = False

    FREQUENCY = "frequency"
    ENTROPY = "entropy"
    POKER = "poker"
    PERIODICITY = "periodicity"
    CORRELATION = "correlation"
    SEQUENCE_LENGTH = "sequence_length"
    BLOCK_CHI_SQUARE = "block_chi_square"
    IMPREVISIBILITY = "imprevisibility"
    PERIODICITY_ADVANCED = "periodicity_advanced"
    COLLISION = "collision"
    PATTERN_BIAS = "pattern_bias"


_DISPATCH: dict[TestKind, Callable[..., TestResult]] = {
    TestKind.FREQUENCY: ts.frequency_test,
    TestKind.ENTROPY: ts.entropy_test,
    TestKind.POKER: ts.poker_test,
    TestKind.PERIODICITY: ts.periodicity_test,
    TestKind.CORRELATION: ts.correlation_test,
    TestKind.SEQUENCE_LENGTH: ts.sequence_length_test,
    TestKind.BLOCK_CHI_SQUARE: ts.block_chi_square_test,
    TestKind.IMPREVISIBILITY: ts.imprevisibility_test,
    TestKind.PERIODICITY_ADVANCED: ts.periodicity_advanced_test,
    TestKind.COLLISION: ts.collision_test,
    TestKind.PATTERN_BIAS: ts.pattern_bias_test,
}

# ``test_name`` of the record each unit produces; also names error records.
RECORD_NAMES: dict[TestKind, str] = {
    TestKind.FREQUENCY: "Bit Frequency",
    TestKind.ENTROPY: "Shannon Entropy",
    TestKind.POKER: "Poker",
    TestKind.PERIODICITY: "Bit Periodicity",
    TestKind.CORRELATION: "Bit Correlation",
    TestKind.SEQUENCE_LENGTH: "Sequence Length",
    TestKind.BLOCK_CHI_SQUARE: "Block Chi-Square",
    TestKind.IMPREVISIBILITY: "Imprevisibility",
    TestKind.PERIODICITY_ADVANCED: "Advanced Periodicity",
    TestKind.COLLISION: "Collision",
    TestKind.PATTERN_BIAS: "Pattern Bias",
}

FILE_ANALYSIS_BATTERY: tuple[TestKind, ...] = (
    TestKind.FREQUENCY,
    TestKind.ENTROPY,
    TestKind.POKER,
    TestKind.PERIODICITY_ADVANCED,
    TestKind.CORRELATION,
    TestKind.SEQUENCE_LENGTH,
    TestKind.COLLISION,
)

LIVE_GENERATION_BATTERY: tuple[TestKind, ...] = (
    TestKind.FREQUENCY,
    TestKind.ENTROPY,
    TestKind.POKER,
    TestKind.PERIODICITY,
    TestKind.CORRELATION,
    TestKind.SEQUENCE_LENGTH,
    TestKind.BLOCK_CHI_SQUARE,
    TestKind.IMPREVISIBILITY,
    TestKind.PERIODICITY_ADVANCED,
    TestKind.COLLISION,
    TestKind.PATTERN_BIAS,
)

NO_DATA = "No Data"
INVALID_CONFIGURATION = "Invalid Configuration"


def no_data_result() -> TestResult:
    return TestResult.sentinel(NO_DATA, "No data supplied: the seed sequence is empty.")


def invalid_configuration_result(reason: str) -> TestResult:
    return TestResult.sentinel(INVALID_CONFIGURATION, reason)


def parse_kinds(names: Iterable[str]) -> tuple[TestKind, ...]:
    """Resolve test names (e.g. ``"poker"``) into :class:`TestKind` members."""
    kinds = []
    for name in names:
        key = name.strip().lower().replace("-", "_")
        try:
            kinds.append(TestKind(key))
        except ValueError:
            known = ", ".join(kind.value for kind in TestKind)
            raise InvalidConfigurationError(f"Unknown test '{name}'. Known tests: {known}") from None
    return tuple(kinds)


def _bind(kind: TestKind, block_size: int, block_threshold: float | None) -> Unit:
    unit = _DISPATCH[kind]
    if kind is TestKind.BLOCK_CHI_SQUARE:
        return partial(unit, block_size=block_size, threshold=block_threshold)
    return unit


def _run_unit(kind: TestKind, unit: Unit, seeds: np.ndarray) -> TestResult:
    t0 = time.monotonic()
    try:
        result = unit(seeds)
    except Exception as e:
        logger.exception("Test unit %s failed", kind.value)
        return TestResult.sentinel(RECORD_NAMES[kind], f"Error: {e}")
    logger.debug("%s finished in %.4fs (score=%.6g, passed=%s)",
                 kind.value, time.monotonic() - t0, result.score, result.passed)
    return result


def run_battery(
    sequence: Iterable[int] | np.ndarray,
    kinds: Sequence[TestKind] = FILE_ANALYSIS_BATTERY,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
    block_threshold: float | None = None,
    workers: int = 1,
) -> list[TestResult]:
    """Run *kinds* against *sequence* and return one record per test, in order.

    An empty sequence short-circuits to a single "No Data" record, and an
    invalid block size or worker count to a single "Invalid Configuration"
    record; no test unit is dispatched in either case.
    """
    seeds = as_seed_array(sequence)
    kinds = tuple(TestKind(kind) for kind in kinds)
    if len(seeds) == 0:
        logger.warning("Empty seed sequence; no tests were run")
        return [no_data_result()]
    if TestKind.BLOCK_CHI_SQUARE in kinds:
        try:
            validate_block_size(block_size)
        except InvalidConfigurationError as e:
            logger.warning("Rejected battery configuration: %s", e)
            return [invalid_configuration_result(str(e))]
    if workers < 1:
        return [invalid_configuration_result(f"Worker count must be at least 1, got {workers}")]

    units = [(kind, _bind(kind, block_size, block_threshold)) for kind in kinds]
    logger.info("Running %d test(s) on %d seeds (workers=%d)", len(units), len(seeds), workers)
    if workers == 1 or len(units) < 2:
        return [_run_unit(kind, unit, seeds) for kind, unit in units]

    with ThreadPoolExecutor(max_workers=min(workers, len(units))) as pool:
        return list(pool.map(lambda item: _run_unit(item[0], item[1], seeds), units))


def analyze_file_data(
    values: Iterable[int] | np.ndarray,
    kinds: Sequence[TestKind] = FILE_ANALYSIS_BATTERY,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
    block_threshold: float | None = None,
    workers: int = 1,
) -> list[TestResult]:
    """Entry point for seeds read from a file."""
    return run_battery(values, kinds, block_size=block_size,
                       block_threshold=block_threshold, workers=workers)


def run_live_battery(
    count: int,
    generator: SeedGenerator | None = None,
    kinds: Sequence[TestKind] = LIVE_GENERATION_BATTERY,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
    block_threshold: float | None = None,
    workers: int = 1,
) -> list[TestResult]:
    """Generate *count* seeds from *generator* and run the live battery on them."""
    if count <= 0:
        logger.warning("Rejected live battery request for %d seeds", count)
        return [invalid_configuration_result(f"The number of seeds must be greater than 0, got {count}.")]
    if generator is None:
        generator = SeedGenerator()
    seeds = generator.generate(count)
    return run_battery(seeds, kinds, block_size=block_size,
                       block_threshold=block_threshold, workers=workers)


@dataclass(frozen=True)
class BatterySummary:
    """Aggregate view of one battery run."""

    passed: int
    total: int
    success_rate: float
    mean_score: float

    @property
    def all_passed(self) -> bool:
        return self.total > 0 and self.passed == self.total


def summarize(results: Sequence[TestResult]) -> BatterySummary:
    total = len(results)
    if total == 0:
        return BatterySummary(passed=0, total=0, success_rate=0.0, mean_score=0.0)
    passed = sum(1 for r in results if r.passed)
    return BatterySummary(
        passed=passed,
        total=total,
        success_rate=100.0 * passed / total,
        mean_score=sum(r.score for r in results) / total,
    )
