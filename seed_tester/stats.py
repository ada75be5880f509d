"""Bit-level statistics over sequences of unsigned 64-bit seeds."""

from __future__ import annotations

from math import log2
from typing import Iterable

import numpy as np
from scipy import stats as sp_stats

from seed_tester.errors import InvalidConfigurationError, InvalidSeedError

WORD_BITS = 64
UINT64_MAX = 2**64 - 1
MAX_BLOCK_SIZE = 16


def as_seed_array(seeds: Iterable[int] | np.ndarray) -> np.ndarray:
    """Validate *seeds* and return them as a read-only 1-D ``uint64`` array.

    Accepts any iterable of Python or NumPy integers in ``[0, 2**64)``,
    or an integer ndarray. The result never aliases the caller's buffer.
    """
    if isinstance(seeds, np.ndarray):
        if seeds.dtype == np.bool_ or not np.issubdtype(seeds.dtype, np.integer):
            raise InvalidSeedError(f"Seeds must be integers, got dtype {seeds.dtype}")
        if seeds.dtype != np.uint64 and seeds.size and int(seeds.min()) < 0:
            raise InvalidSeedError("Seeds must be unsigned; found a negative value")
        arr = np.array(seeds, dtype=np.uint64).ravel()
    else:
        values = list(seeds)
        for value in values:
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
                raise InvalidSeedError(f"Seed {value!r} is not an integer")
            if not 0 <= int(value) <= UINT64_MAX:
                raise InvalidSeedError(f"Seed {value} is outside the unsigned 64-bit range")
        arr = np.array([int(v) for v in values], dtype=np.uint64)
    arr.flags.writeable = False
    return arr


def bit_matrix(seeds: np.ndarray) -> np.ndarray:
    """Return an (N, 64) uint8 matrix; column ``j`` holds bit ``j`` of each seed."""
    words = np.ascontiguousarray(seeds, dtype="<u8")
    return np.unpackbits(words.view(np.uint8).reshape(-1, 8), axis=1, bitorder="little")


def popcounts(seeds: np.ndarray) -> np.ndarray:
    """Number of set bits in every seed."""
    return bit_matrix(seeds).sum(axis=1, dtype=np.int64)


def count_ones(seeds: np.ndarray) -> int:
    return int(popcounts(seeds).sum())


def adjacent_xor(seeds: np.ndarray) -> np.ndarray:
    """XOR of every adjacent pair ``(seeds[i], seeds[i + 1])``."""
    return np.bitwise_xor(seeds[:-1], seeds[1:])


def adjacent_abs_diff(seeds: np.ndarray) -> np.ndarray:
    """Absolute difference of adjacent seeds without unsigned wraparound."""
    a, b = seeds[:-1], seeds[1:]
    return np.where(b >= a, b - a, a - b)


def longest_runs(seeds: np.ndarray) -> np.ndarray:
    """Longest run of consecutive set bits inside each seed (bit 0..63, no wrap)."""
    bits = bit_matrix(seeds)
    current = np.zeros(len(seeds), dtype=np.int64)
    longest = np.zeros(len(seeds), dtype=np.int64)
    for column in bits.T:
        current = (current + 1) * column
        np.maximum(longest, current, out=longest)
    return longest


def binary_entropy(p: float) -> float:
    """Shannon entropy of a binary source emitting 1 with probability *p*."""
    if p <= 0.0 or p >= 1.0:
        return 0.0
    return -p * log2(p) - (1.0 - p) * log2(1.0 - p)


def low_nibble_counts(seeds: np.ndarray) -> np.ndarray:
    """Histogram of the low 4 bits of every seed (16 buckets)."""
    nibbles = (seeds & np.uint64(0xF)).astype(np.intp)
    return np.bincount(nibbles, minlength=16)


def validate_block_size(block_size: int) -> int:
    if isinstance(block_size, bool) or not isinstance(block_size, (int, np.integer)):
        raise InvalidConfigurationError(f"Block size must be an integer, got {block_size!r}")
    if not 1 <= block_size <= MAX_BLOCK_SIZE:
        raise InvalidConfigurationError(
            f"Block size must be between 1 and {MAX_BLOCK_SIZE} bits, got {block_size}"
        )
    return int(block_size)


def block_counts(seeds: np.ndarray, block_size: int) -> np.ndarray:
    """Count every ``block_size``-bit value over all non-overlapping blocks.

    Each seed contributes ``64 // block_size`` blocks starting at bit 0;
    leftover high bits are ignored.
    """
    block_size = validate_block_size(block_size)
    per_word = WORD_BITS // block_size
    shifts = np.arange(per_word, dtype=np.uint64) * np.uint64(block_size)
    mask = np.uint64((1 << block_size) - 1)
    blocks = (seeds[:, None] >> shifts[None, :]) & mask
    return np.bincount(blocks.ravel().astype(np.intp), minlength=1 << block_size)


def pearson_chi_square(counts: np.ndarray) -> float:
    """Pearson chi-square of *counts* against a uniform expectation."""
    counts = np.asarray(counts, dtype=np.float64)
    expected = counts.sum() / len(counts)
    if expected <= 0:
        return 0.0
    return float(np.sum((counts - expected) ** 2 / expected))


def chi_square_critical(degrees_of_freedom: int, confidence: float = 0.95) -> float:
    """Upper critical value of the chi-square distribution."""
    return float(sp_stats.chi2.ppf(confidence, degrees_of_freedom))


def chi_square_p_value(statistic: float, degrees_of_freedom: int) -> float:
    return float(sp_stats.chi2.sf(statistic, degrees_of_freedom))
