"""Tests for the individual seed test units."""

import math

import numpy as np
import pytest

from seed_tester import test_suite as ts
from seed_tester.generator import SeedGenerator
from seed_tester.stats import UINT64_MAX, as_seed_array


def seeds(values):
    return as_seed_array(values)


@pytest.fixture(scope="module")
def random_seeds():
    return SeedGenerator(seed=20240601).generate(2000)


UNITS = [
    ts.frequency_test,
    ts.entropy_test,
    ts.poker_test,
    ts.periodicity_test,
    ts.periodicity_advanced_test,
    ts.correlation_test,
    ts.sequence_length_test,
    ts.block_chi_square_test,
    ts.collision_test,
    ts.imprevisibility_test,
    ts.pattern_bias_test,
]

SAMPLES = [
    [],
    [0],
    [UINT64_MAX],
    [0, UINT64_MAX],
    [1, 2, 3, 1, 2, 3, 1, 2, 3],
    list(range(64)),
    [UINT64_MAX] * 20,
    [0x0123456789ABCDEF, 0xFEDCBA9876543210, 0x0F0F0F0F0F0F0F0F],
]


class TestFrequency:
    def test_all_ones(self):
        r = ts.frequency_test(seeds([UINT64_MAX] * 10))
        assert r.score == 1.0
        assert not r.passed

    def test_half(self):
        r = ts.frequency_test(seeds([0xFFFFFFFF, 0xFFFFFFFF00000000]))
        assert r.score == 0.5
        assert r.passed

    def test_empty(self):
        r = ts.frequency_test(seeds([]))
        assert r.score == 0.0
        assert not r.passed

    def test_random(self, random_seeds):
        assert ts.frequency_test(random_seeds).passed


class TestEntropy:
    def test_all_zero(self):
        r = ts.entropy_test(seeds([0] * 10))
        assert r.score == 0.0
        assert not r.passed

    def test_balanced(self):
        r = ts.entropy_test(seeds([0xFFFFFFFF]))
        assert r.score == pytest.approx(1.0)
        assert r.passed

    def test_random(self, random_seeds):
        assert ts.entropy_test(random_seeds).passed


class TestPoker:
    def test_in_range(self):
        # Eight nibbles seen twice each: (16/16) * 8 * 4 - 16 = 16.
        r = ts.poker_test(seeds([v for v in range(8) for _ in range(2)]))
        assert r.score == pytest.approx(16.0)
        assert r.passed

    def test_perfectly_uniform_fails(self):
        r = ts.poker_test(seeds(list(range(16))))
        assert r.score == pytest.approx(0.0)
        assert not r.passed

    def test_empty_is_sentinel(self):
        r = ts.poker_test(seeds([]))
        assert not r.passed
        assert r.thresholds is None


class TestPeriodicity:
    def test_half_agreement(self):
        r = ts.periodicity_test(seeds([0, 0xFFFFFFFF]))
        assert r.score == 0.5
        assert r.passed

    def test_identical_neighbours(self):
        r = ts.periodicity_test(seeds([7, 7, 7]))
        assert r.score == 1.0
        assert not r.passed

    def test_single_value(self):
        r = ts.periodicity_test(seeds([42]))
        assert r.score == 0.0
        assert not r.passed


class TestPeriodicityAdvanced:
    @pytest.mark.parametrize("values", [[], [1], [1, 2]])
    def test_short_sequences_pass(self, values):
        r = ts.periodicity_advanced_test(seeds(values))
        assert r.score == 0.0
        assert r.passed

    def test_two_repeats_pass(self):
        r = ts.periodicity_advanced_test(seeds([1, 2, 3, 1, 2, 3]))
        assert r.score == 2.0
        assert r.passed
        assert "unique windows=3" in r.details

    def test_three_repeats_fail(self):
        r = ts.periodicity_advanced_test(seeds([1, 2, 3] * 3))
        assert r.score == 3.0
        assert not r.passed

    def test_random(self, random_seeds):
        assert ts.periodicity_advanced_test(random_seeds).score == 1.0


class TestCorrelation:
    def test_half_difference(self):
        r = ts.correlation_test(seeds([0, 0xFFFFFFFF, 0]))
        assert r.score == 0.5
        assert r.passed

    def test_opposites(self):
        r = ts.correlation_test(seeds([0, UINT64_MAX]))
        assert r.score == 1.0
        assert not r.passed

    def test_no_pairs(self):
        r = ts.correlation_test(seeds([5]))
        assert r.score == 0.0
        assert not r.passed

    def test_random(self, random_seeds):
        assert ts.correlation_test(random_seeds).passed


class TestSequenceLength:
    def test_all_bits_set(self):
        r = ts.sequence_length_test(seeds([UINT64_MAX]))
        assert r.score == 64.0
        assert not r.passed

    def test_zero(self):
        r = ts.sequence_length_test(seeds([0]))
        assert r.score == 0.0
        assert not r.passed

    def test_in_range(self):
        r = ts.sequence_length_test(seeds([0b101, (1 << 12) - 1, 1 << 40]))
        assert r.score == 12.0
        assert r.passed

    def test_no_wraparound(self):
        r = ts.sequence_length_test(seeds([(1 << 63) | 1]))
        assert r.score == 1.0

    def test_empty(self):
        r = ts.sequence_length_test(seeds([]))
        assert r.score == 0.0
        assert not r.passed


class TestBlockChiSquare:
    def test_uniform_blocks(self):
        r = ts.block_chi_square_test(seeds([0x0123456789ABCDEF] * 4))
        assert r.score == 0.0
        assert r.passed
        assert r.thresholds == (0.0, 25.0)

    def test_constant_blocks(self):
        r = ts.block_chi_square_test(seeds([0] * 4))
        assert r.score == pytest.approx(960.0)
        assert not r.passed

    def test_default_threshold(self):
        assert ts.block_chi_square_threshold(4) == 25.0

    def test_calibrated_threshold_for_bytes(self):
        assert ts.block_chi_square_threshold(8) == pytest.approx(293.25, abs=0.05)

    def test_explicit_threshold(self):
        r = ts.block_chi_square_test(seeds([0] * 4), threshold=1000.0)
        assert r.thresholds == (0.0, 1000.0)
        assert r.passed

    def test_byte_blocks_random(self, random_seeds):
        r = ts.block_chi_square_test(random_seeds, block_size=8)
        assert r.thresholds[1] > 250
        assert "B=8" in r.details

    def test_invalid_block_size(self):
        from seed_tester.errors import InvalidConfigurationError

        with pytest.raises(InvalidConfigurationError):
            ts.block_chi_square_test(seeds([1, 2, 3]), block_size=0)

    def test_empty_is_sentinel(self):
        r = ts.block_chi_square_test(seeds([]))
        assert not r.passed
        assert r.thresholds is None


class TestCollision:
    def test_no_collisions(self):
        r = ts.collision_test(seeds([1, 2, 3, 4, 5]))
        assert r.score == 0.0
        assert r.passed

    def test_empty(self):
        r = ts.collision_test(seeds([]))
        assert r.score == 100.0
        assert not r.passed
        assert "No data supplied" in r.details

    def test_some_collisions(self):
        r = ts.collision_test(seeds([1, 2, 2, 3, 4, 5, 5]))
        assert r.score == pytest.approx(100.0 * 2 / 7)
        assert not r.passed


class TestImprevisibility:
    def test_boundary_fails(self):
        # Four distinct differences over five seeds: exactly 0.8.
        r = ts.imprevisibility_test(seeds([1, 2, 4, 8, 16]))
        assert r.score == pytest.approx(0.8)
        assert not r.passed

    def test_repeated_differences(self):
        r = ts.imprevisibility_test(seeds([5, 3, 1]))
        assert r.score == pytest.approx(1 / 3)
        assert not r.passed

    def test_random(self, random_seeds):
        r = ts.imprevisibility_test(random_seeds)
        assert r.score > 0.99
        assert r.passed

    def test_empty_is_sentinel(self):
        assert ts.imprevisibility_test(seeds([])).thresholds is None


class TestPatternBias:
    def test_uniform_nibbles(self):
        r = ts.pattern_bias_test(seeds(list(range(32))))
        assert r.score == pytest.approx(2 / 32)
        assert r.passed

    def test_constant(self):
        r = ts.pattern_bias_test(seeds([0] * 10))
        assert r.score == 1.0
        assert not r.passed

    def test_too_few_patterns(self):
        r = ts.pattern_bias_test(seeds(list(range(10))))
        assert r.score == pytest.approx(0.1)
        assert not r.passed

    def test_random(self, random_seeds):
        assert ts.pattern_bias_test(random_seeds).passed


class TestInvariants:
    @pytest.mark.parametrize("unit", UNITS, ids=lambda u: u.__name__)
    @pytest.mark.parametrize("values", SAMPLES[1:], ids=lambda v: f"n{len(v)}")
    def test_finite_scores(self, unit, values):
        assert math.isfinite(unit(seeds(values)).score)

    @pytest.mark.parametrize("unit", UNITS, ids=lambda u: u.__name__)
    @pytest.mark.parametrize("values", SAMPLES, ids=lambda v: f"n{len(v)}")
    def test_verdict_matches_thresholds(self, unit, values):
        r = unit(seeds(values))
        if unit is ts.pattern_bias_test:
            assert not r.passed or ts.TestResult.within(r.score, r.thresholds)
        else:
            assert r.passed == ts.TestResult.within(r.score, r.thresholds)

    @pytest.mark.parametrize("unit", UNITS, ids=lambda u: u.__name__)
    def test_idempotent(self, unit, random_seeds):
        assert unit(random_seeds) == unit(random_seeds)

    def test_input_untouched(self):
        data = np.arange(100, dtype=np.uint64)
        arr = as_seed_array(data)
        for unit in UNITS:
            unit(arr)
        assert np.array_equal(arr, data)

    def test_to_dict(self):
        d = ts.collision_test(seeds([1, 2, 3])).to_dict()
        assert d == {
            "test_name": "Collision",
            "passed": True,
            "score": 0.0,
            "details": d["details"],
            "thresholds": [0.0, 1.0],
        }
