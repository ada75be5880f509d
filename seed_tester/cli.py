"""CLI for seed-tester."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict
from pathlib import Path

import click

from seed_tester import __version__
from seed_tester.config import DEFAULT_CONFIG, SeedTesterConfig, load_config
from seed_tester.errors import SeedTesterError


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", count=True, help="Log progress to stderr (-vv for debug output).")
@click.option("--config", "config_path", default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="INI file with [battery] and [generator] settings.")
@click.pass_context
def main(ctx: click.Context, verbose: int, config_path: Path | None) -> None:
    """🎲 seed-tester — statistical test battery for 64-bit seed sequences."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )
    try:
        ctx.obj = load_config(config_path) if config_path else DEFAULT_CONFIG
    except SeedTesterError as e:
        raise click.UsageError(str(e)) from e


# ────────────────────────────────────────────────────────────
# Live generation
# ────────────────────────────────────────────────────────────


@main.command()
@click.option("--count", default=None, type=int, help="Number of seeds to generate.")
@click.option("--seed", default=None, type=click.IntRange(min=0), help="Generator seed (reproducible runs).")
@click.option("--block-size", default=None, type=int, help="Bit width of the block chi-square test.")
@click.option("--workers", default=None, type=click.IntRange(min=1), help="Run test units on N threads.")
@click.option("--json", "as_json", is_flag=True, help="Emit results as JSON.")
@click.pass_obj
def generate(config: SeedTesterConfig, count: int | None, seed: int | None,
             block_size: int | None, workers: int | None, as_json: bool) -> None:
    """Generate seeds and run the live-generation battery on them.

    Examples:

        seed-tester generate --count 5000 --seed 42

        seed-tester generate --block-size 8 --json
    """
    from seed_tester.battery import run_live_battery
    from seed_tester.generator import SeedGenerator

    count = config.generator.count if count is None else count
    seed = config.generator.seed if seed is None else seed
    generator = SeedGenerator(seed=seed)

    t0 = time.monotonic()
    results = run_live_battery(
        count,
        generator,
        config.battery.live,
        block_size=config.battery.block_size if block_size is None else block_size,
        block_threshold=config.battery.block_threshold,
        workers=config.battery.workers if workers is None else workers,
    )
    _emit(results, as_json, f"{max(count, 0):,} generated seeds", time.monotonic() - t0,
          generator=generator.state)


# ────────────────────────────────────────────────────────────
# File analysis
# ────────────────────────────────────────────────────────────


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", type=click.Choice(["auto", "text", "json"]), default="auto",
              help="Input format (auto: JSON for .json files, text otherwise).")
@click.option("--workers", default=None, type=click.IntRange(min=1), help="Run test units on N threads.")
@click.option("--json", "as_json", is_flag=True, help="Emit results as JSON.")
@click.pass_obj
def analyze(config: SeedTesterConfig, path: Path, fmt: str, workers: int | None, as_json: bool) -> None:
    """Run the file-analysis battery on seeds read from PATH.

    Text files hold one decimal integer per line; JSON files hold an array.
    """
    from seed_tester.battery import analyze_file_data
    from seed_tester.ingest import read_seed_file

    try:
        values = read_seed_file(path, fmt)
    except SeedTesterError as e:
        raise click.UsageError(str(e)) from e

    t0 = time.monotonic()
    results = analyze_file_data(
        values,
        config.battery.file,
        block_size=config.battery.block_size,
        block_threshold=config.battery.block_threshold,
        workers=config.battery.workers if workers is None else workers,
    )
    _emit(results, as_json, f"{len(values):,} seeds from {path.name}", time.monotonic() - t0)


# ────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────


def _emit(results, as_json: bool, label: str, elapsed: float, generator: dict | None = None) -> None:
    """Print *results* and exit with 0 only when every record passed."""
    from seed_tester.battery import summarize

    summary = summarize(results)
    if as_json:
        payload = {"results": [r.to_dict() for r in results], "summary": asdict(summary)}
        if generator is not None:
            payload["generator"] = generator
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(f"🔬 Battery on {label} [{elapsed:.2f}s]\n")
        click.echo(f"{'Test':<22} {'Result':>6} {'Score':>12} {'Range':>22}")
        click.echo("-" * 66)
        for r in results:
            verdict = "PASS" if r.passed else "FAIL"
            bounds = f"[{r.thresholds[0]:.4g}, {r.thresholds[1]:.4g}]" if r.thresholds else "-"
            click.echo(f"{r.test_name:<22} {verdict:>6} {r.score:>12.4f} {bounds:>22}")
            click.echo(f"    {r.details}")
        click.echo(f"\n{'='*66}")
        click.echo(
            f"Passed {summary.passed}/{summary.total} ({summary.success_rate:.1f}%), "
            f"mean score {summary.mean_score:.4f}"
        )
    click.get_current_context().exit(0 if summary.all_passed else 1)
