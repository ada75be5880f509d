"""Exception types raised by seed-tester."""

from __future__ import annotations


class SeedTesterError(Exception):
    """Base error type for seed-tester failures."""


class InvalidConfigurationError(SeedTesterError):
    """Raised when a battery or configuration option is invalid."""


class MissingFileError(SeedTesterError):
    """Raised when a seed or configuration file could not be located."""


class InvalidSeedError(SeedTesterError):
    """Raised when a value is not an unsigned 64-bit integer."""


__all__ = [
    "InvalidConfigurationError",
    "InvalidSeedError",
    "MissingFileError",
    "SeedTesterError",
]
