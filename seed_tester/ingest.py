"""Reading seed sequences from text and JSON sources.

Unparsable entries never reach the battery: they are skipped and logged.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from seed_tester.errors import InvalidConfigurationError, MissingFileError
from seed_tester.stats import UINT64_MAX

logger = logging.getLogger(__name__)

FORMATS = ("auto", "text", "json")

_DECIMAL = re.compile(r"\+?[0-9]+", re.ASCII)


def _parse_decimal(token: str) -> int | None:
    if not _DECIMAL.fullmatch(token):
        return None
    value = int(token)
    return value if value <= UINT64_MAX else None


def parse_lines(text: str) -> list[int]:
    """Parse newline-delimited decimal integers.

    Blank lines are ignored. Lines that are not unsigned 64-bit decimals are
    skipped with a warning.
    """
    values: list[int] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        token = line.strip()
        if not token:
            continue
        value = _parse_decimal(token)
        if value is None:
            logger.warning("Skipping line %d: %r is not an unsigned 64-bit integer", lineno, token)
            continue
        values.append(value)
    return values


def parse_json(text: str) -> list[int]:
    """Parse a JSON array of unsigned 64-bit integers.

    Any malformed document yields an empty list.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON seed document: %s", e)
        return []
    if not isinstance(payload, list):
        logger.warning("JSON seed document must be an array, got %s", type(payload).__name__)
        return []
    for index, item in enumerate(payload):
        if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= UINT64_MAX:
            logger.warning("JSON item %d (%r) is not an unsigned 64-bit integer; "
                           "discarding the document", index, item)
            return []
    return payload


def read_seed_file(path: Path | str, fmt: str = "auto") -> list[int]:
    """Read seeds from *path*; ``auto`` picks JSON for ``.json`` files."""
    candidate = Path(path).expanduser()
    if fmt not in FORMATS:
        raise InvalidConfigurationError(f"Unknown seed file format '{fmt}'; expected one of {FORMATS}")
    if not candidate.is_file():
        raise MissingFileError(f"Seed file not found: {candidate}")
    text = candidate.read_text(encoding="utf-8", errors="replace")
    if fmt == "auto":
        fmt = "json" if candidate.suffix.lower() == ".json" else "text"
    values = parse_json(text) if fmt == "json" else parse_lines(text)
    logger.info("Read %d seed(s) from %s (%s)", len(values), candidate, fmt)
    return values
