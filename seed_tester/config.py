"""INI configuration for battery runs."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path

from seed_tester.battery import FILE_ANALYSIS_BATTERY, LIVE_GENERATION_BATTERY, TestKind, parse_kinds
from seed_tester.errors import InvalidConfigurationError, MissingFileError
from seed_tester.stats import validate_block_size
from seed_tester.test_suite import DEFAULT_BLOCK_SIZE

DEFAULT_SEED_COUNT = 1000


@dataclass(frozen=True)
class BatterySection:
    """Which tests run for each entry point, and how."""

    live: tuple[TestKind, ...] = LIVE_GENERATION_BATTERY
    file: tuple[TestKind, ...] = FILE_ANALYSIS_BATTERY
    block_size: int = DEFAULT_BLOCK_SIZE
    block_threshold: float | None = None
    workers: int = 1


@dataclass(frozen=True)
class GeneratorSection:
    count: int = DEFAULT_SEED_COUNT
    seed: int | None = None


@dataclass(frozen=True)
class SeedTesterConfig:
    """Aggregate configuration returned by :func:`load_config`."""

    battery: BatterySection = field(default_factory=BatterySection)
    generator: GeneratorSection = field(default_factory=GeneratorSection)


DEFAULT_CONFIG = SeedTesterConfig()


def load_config(path: Path | str) -> SeedTesterConfig:
    """Load and validate an INI configuration file."""
    path = Path(path)
    parser = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
    try:
        with path.open("r", encoding="utf-8") as config_file:
            parser.read_file(config_file)
    except FileNotFoundError as exc:
        raise MissingFileError(f"Configuration file not found: {path}") from exc
    except configparser.Error as exc:
        raise InvalidConfigurationError(f"Malformed configuration file {path}: {exc}") from exc

    return SeedTesterConfig(
        battery=_parse_battery(parser),
        generator=_parse_generator(parser),
    )


def _parse_battery(parser: configparser.ConfigParser) -> BatterySection:
    if not parser.has_section("battery"):
        return BatterySection()
    section = parser["battery"]
    live = _parse_test_list(section.get("live"), LIVE_GENERATION_BATTERY, "live")
    file = _parse_test_list(section.get("file"), FILE_ANALYSIS_BATTERY, "file")
    block_size = validate_block_size(_get_int(section, "block_size", DEFAULT_BLOCK_SIZE))

    block_threshold = None
    raw_threshold = section.get("block_threshold")
    if raw_threshold is not None and raw_threshold.strip():
        try:
            block_threshold = float(raw_threshold)
        except ValueError as exc:
            raise InvalidConfigurationError("[battery] block_threshold must be numeric.") from exc
        if block_threshold <= 0:
            raise InvalidConfigurationError("[battery] block_threshold must be greater than zero.")

    workers = _get_int(section, "workers", 1)
    if workers < 1:
        raise InvalidConfigurationError("[battery] workers must be at least 1.")

    return BatterySection(
        live=live,
        file=file,
        block_size=block_size,
        block_threshold=block_threshold,
        workers=workers,
    )


def _parse_generator(parser: configparser.ConfigParser) -> GeneratorSection:
    if not parser.has_section("generator"):
        return GeneratorSection()
    section = parser["generator"]
    # A non-positive count is reported by the battery as an invalid request.
    count = _get_int(section, "count", DEFAULT_SEED_COUNT)
    seed = None
    if section.get("seed", "").strip():
        seed = _get_int(section, "seed", 0)
        if seed < 0:
            raise InvalidConfigurationError("[generator] seed must be non-negative.")
    return GeneratorSection(count=count, seed=seed)


def _parse_test_list(
    raw: str | None, default: tuple[TestKind, ...], option: str
) -> tuple[TestKind, ...]:
    if raw is None or not raw.strip():
        return default
    names = [name for name in raw.replace("\n", ",").split(",") if name.strip()]
    kinds = parse_kinds(names)
    if not kinds:
        raise InvalidConfigurationError(f"[battery] {option} must name at least one test.")
    return kinds


def _get_int(section: configparser.SectionProxy, option: str, default: int) -> int:
    try:
        return section.getint(option, fallback=default)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"[{section.name}] {option} must be an integer."
        ) from exc


__all__ = [
    "BatterySection",
    "DEFAULT_CONFIG",
    "GeneratorSection",
    "SeedTesterConfig",
    "load_config",
]
