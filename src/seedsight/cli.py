"""
SeedSight CLI - Command Line Interface for ranked speedrun statistics

Provides commands for:
- Overview statistics and breakdowns for a player
- Per-phase run split statistics from match timelines
- Listing the filter values present in a player's matches
- Decoding seed variation tags
- Generating a default configuration file
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from seedsight import __version__
from seedsight.analysis.aggregate import (
    breakdown_by_key,
    completion_times,
    compute_overview,
    histogram,
    time_series,
)
from seedsight.analysis.filters import FilterSpec, apply_filters, bastion_key, filter_options
from seedsight.analysis.outcome import classify, derive_viewpoint_uuid
from seedsight.analysis.timeline import PhaseSeries, segment_timelines
from seedsight.analysis.variations import humanize_variation, implied_filters, parse_variations
from seedsight.core.config import SeedSightConfig, generate_default_config, load_config, set_config
from seedsight.core.constants import PHASE_LABELS
from seedsight.core.formatting import (
    format_date_sec,
    format_duration_ms,
    format_percent,
    format_seconds_short,
    humanize_biome,
    humanize_structure,
    type_label,
)
from seedsight.core.logging_setup import configure_logging
from seedsight.core.schemas import Match, parse_matches
from seedsight.export import export_report
from seedsight.infra.cache import DetailCache
from seedsight.infra.fetcher import DetailFetchCoordinator
from seedsight.integrations.mcsr import MCSRClient, UpstreamError

app = typer.Typer(
    name="seedsight",
    help="Ranked speedrun match analytics - outcomes, seed breakdowns and run splits",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)

_state: dict[str, SeedSightConfig] = {}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]SeedSight[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a YAML/TOML/JSON config file", dir_okay=False
    ),
) -> None:
    """SeedSight - ranked speedrun statistics"""
    config = load_config(config_file)
    set_config(config)
    _state["config"] = config
    configure_logging(config.logging, verbose=verbose)


def _config() -> SeedSightConfig:
    return _state.get("config") or load_config()


# ============================================================================
# Input helpers
# ============================================================================


def _parse_day(value: Optional[str], end_of_day: bool = False) -> Optional[int]:
    if not value:
        return None
    try:
        day = datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        console.print(f"[red]Invalid date:[/red] {value} (expected YYYY-MM-DD)")
        raise typer.Exit(1)
    seconds = int(day.timestamp())
    return seconds + 86399 if end_of_day else seconds


def _load_matches_file(path: Path) -> list[Match]:
    try:
        payload = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read {path}:[/red] {e}")
        raise typer.Exit(1)
    if isinstance(payload, dict):
        payload = payload.get("data") or payload.get("matches") or []
    return parse_matches(payload)


async def _fetch_matches(config: SeedSightConfig, identifier: str, types: list[int]) -> list[Match]:
    async with MCSRClient(config.api) as client:
        return await client.fetch_user_matches(identifier, types=types)


async def _fetch_details(config: SeedSightConfig, ids: list[str]) -> dict[str, Match]:
    async with MCSRClient(config.api) as client:
        coordinator = DetailFetchCoordinator(
            client.fetch_match_detail,
            DetailCache(ttl_seconds=config.fetch.cache_ttl_seconds),
            concurrency_limit=config.fetch.concurrency_limit,
        )
        result = await coordinator.fetch_details(ids)
    if result.errors:
        console.print(
            f"[yellow]Warning:[/yellow] {len(result.errors)} match details could not be fetched"
        )
    return result.details


def _load(
    identifier: str, input_file: Optional[Path], types: list[int]
) -> list[Match]:
    config = _config()
    if input_file:
        return _load_matches_file(input_file)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Fetching matches for {identifier}...", total=None)
        try:
            return asyncio.run(_fetch_matches(config, identifier, types))
        except UpstreamError as e:
            console.print(f"[red]Error fetching matches:[/red] {e}")
            raise typer.Exit(1)


def _build_spec(
    types: list[int],
    since: Optional[str],
    until: Optional[str],
    overworld: list[str],
    bastion: list[str],
    variation: list[str],
    hide_decayed: bool,
    hide_forfeits: bool,
    beginner_only: bool,
) -> FilterSpec:
    defaults = _config().filters
    # Some variations only occur with one bastion type
    implied = implied_filters(variation)
    return FilterSpec(
        types=types or defaults.types,
        start_date_sec=_parse_day(since),
        end_date_sec=_parse_day(until, end_of_day=True),
        overworld=overworld,
        bastion=set(bastion) | implied.get("bastion", set()),
        variations=variation,
        hide_decayed=hide_decayed or defaults.hide_decayed,
        hide_forfeits=hide_forfeits or defaults.hide_forfeits,
        beginner_only=beginner_only,
    )


def _export(
    report: dict,
    output: Path,
    series: Optional[list] = None,
    phases: Optional[dict[str, PhaseSeries]] = None,
) -> None:
    settings = _config().export
    if not output.suffix:
        output = output.with_suffix(f".{settings.default_format.lstrip('.')}")
    try:
        export_report(
            report,
            output,
            series=series,
            phases=phases,
            indent=settings.json_indent,
            delimiter=settings.csv_delimiter,
        )
    except ValueError as e:
        console.print(f"[red]Export failed:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Exported to {output}[/green]")


# ============================================================================
# Display helpers
# ============================================================================


def _display_overview(matches: list[Match], viewpoint: str) -> None:
    overview = compute_overview(matches, viewpoint)
    table = Table(title="Overview", show_header=False)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Matches", str(overview.total))
    table.add_row("Completions", str(overview.completions))
    table.add_row("Wins", str(overview.wins))
    table.add_row("Losses", "—" if overview.losses is None else str(overview.losses))
    table.add_row("Draws", str(overview.draws))
    table.add_row(
        "Forfeits",
        f"{overview.forfeits} ({overview.user_forfeits} by you, {overview.opponent_forfeits} by opponents)",
    )
    table.add_row("Decayed", str(overview.decays))
    table.add_row(
        "Avg Time",
        format_duration_ms(overview.avg_time_ms) if overview.avg_time_ms is not None else "—",
    )
    table.add_row("Win Rate", format_percent(overview.win_rate))
    console.print(table)


def _display_breakdown(title: str, rows) -> None:
    if not rows:
        return
    table = Table(title=title)
    table.add_column("Value", style="cyan")
    table.add_column("Matches", justify="right", style="green")
    for row in rows:
        table.add_row(humanize_structure(row.name), str(row.count))
    console.print(table)


def _display_histogram(times_ms: list[float]) -> None:
    buckets = histogram(times_ms)
    if not buckets:
        return
    peak = max(b.count for b in buckets)
    table = Table(title="Completion Times")
    table.add_column("Range", style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_column("")
    for bucket in buckets:
        table.add_row(bucket.label, str(bucket.count), "#" * max(1, round(20 * bucket.count / peak)))
    console.print(table)


def _display_recent(matches: list[Match], viewpoint: str, limit: int = 10) -> None:
    recent = sorted(matches, key=lambda m: m.date, reverse=True)[:limit]
    if not recent:
        return
    table = Table(title="Recent Matches")
    table.add_column("Date", style="dim")
    table.add_column("Type")
    table.add_column("Result", style="cyan")
    table.add_column("Time", justify="right", style="green")
    table.add_column("Seed")
    for match in recent:
        outcome = classify(match, viewpoint)
        time_ms = match.result.time_ms
        seed = match.seed
        seed_label = (
            f"{humanize_structure(seed.overworld)} / {humanize_structure(bastion_key(match))}" if seed else "—"
        )
        table.add_row(
            format_date_sec(match.date),
            type_label(match.type),
            outcome.kind.value,
            format_seconds_short(time_ms / 1000) if time_ms and not match.forfeited else "—",
            seed_label,
        )
    console.print(table)


def _display_phases(phases: dict[str, PhaseSeries]) -> None:
    table = Table(title="Run Phases")
    table.add_column("Phase", style="cyan")
    table.add_column("Samples", justify="right")
    table.add_column("Average", justify="right", style="green")
    table.add_column("Median", justify="right")
    table.add_column("Best", justify="right", style="yellow")

    def fmt(value):
        return format_duration_ms(value) if value is not None else "—"

    for name, series in phases.items():
        stats = series.stats()
        table.add_row(
            PHASE_LABELS.get(name, name),
            str(stats.count),
            fmt(stats.mean_ms),
            fmt(stats.median_ms),
            fmt(stats.best_ms),
        )
    console.print(table)


# ============================================================================
# Commands
# ============================================================================

TypeOption = typer.Option([], "--type", "-t", help="Match type code (1 casual, 2 ranked, 3 private, 4 event); repeatable")
SinceOption = typer.Option(None, "--since", help="Only matches on/after this day (YYYY-MM-DD, UTC)")
UntilOption = typer.Option(None, "--until", help="Only matches on/before this day (YYYY-MM-DD, UTC)")
OverworldOption = typer.Option([], "--overworld", help="Overworld structure key; repeatable (any of)")
BastionOption = typer.Option([], "--bastion", help="Bastion type; repeatable (any of)")
VariationOption = typer.Option([], "--variation", help="Raw variation tag; repeatable (all of)")
InputOption = typer.Option(
    None, "--input", "-i", help="Read matches from a JSON file instead of the API", exists=True, dir_okay=False
)
OutputOption = typer.Option(None, "--output", "-o", help="Export results (.json, .csv, .xlsx)")


@app.command()
def stats(
    identifier: str = typer.Argument(..., help="Player nickname or uuid"),
    match_type: list[int] = TypeOption,
    since: Optional[str] = SinceOption,
    until: Optional[str] = UntilOption,
    overworld: list[str] = OverworldOption,
    bastion: list[str] = BastionOption,
    variation: list[str] = VariationOption,
    hide_decayed: bool = typer.Option(False, "--hide-decayed", help="Exclude decayed matches"),
    hide_forfeits: bool = typer.Option(False, "--hide-forfeits", help="Exclude decisive forfeits"),
    beginner_only: bool = typer.Option(False, "--beginner-only", help="Only beginner matches"),
    input_file: Optional[Path] = InputOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """
    Show overview statistics for a player.

    Outcomes are computed from the player's point of view; overworld and
    bastion breakdowns follow the active filters.
    """
    spec = _build_spec(
        match_type, since, until, overworld, bastion, variation, hide_decayed, hide_forfeits, beginner_only
    )
    matches = apply_filters(_load(identifier, input_file, list(spec.types or [])), spec)
    console.print(f"\n[bold blue]SeedSight[/bold blue] - {len(matches)} matches for [bold]{identifier}[/bold]\n")

    _display_overview(matches, identifier)
    by_overworld = breakdown_by_key(matches, lambda m: m.seed.overworld if m.seed else None)
    by_bastion = breakdown_by_key(matches, bastion_key)
    _display_breakdown("Overworld structures", by_overworld)
    _display_breakdown("Bastions", by_bastion)
    _display_histogram(completion_times(matches, identifier))
    _display_recent(matches, identifier)

    if output:
        series = time_series(matches)
        report = {
            "identifier": identifier,
            "uuid": derive_viewpoint_uuid(matches, identifier),
            "overview": compute_overview(matches, identifier),
            "overworld": by_overworld,
            "bastion": by_bastion,
            "series": series,
        }
        _export(report, output, series=series)


@app.command()
def phases(
    identifier: str = typer.Argument(..., help="Player nickname or uuid"),
    match_type: list[int] = TypeOption,
    since: Optional[str] = SinceOption,
    until: Optional[str] = UntilOption,
    overworld: list[str] = OverworldOption,
    bastion: list[str] = BastionOption,
    variation: list[str] = VariationOption,
    input_file: Optional[Path] = InputOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """
    Show run split statistics (overworld, bastion, ..., end fight).

    Match timelines come from the detail endpoint, fetched in parallel and
    cached. With --input, records that already carry timelines are used as is.
    """
    spec = _build_spec(match_type, since, until, overworld, bastion, variation, False, False, False)
    matches = apply_filters(_load(identifier, input_file, list(spec.types or [])), spec)

    details = {m.id: m for m in matches if m.timelines}
    missing = [m.id for m in matches if m.id not in details]
    if missing and not input_file:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task(f"Fetching {len(missing)} match timelines...", total=None)
            details.update(asyncio.run(_fetch_details(_config(), missing)))

    segments = segment_timelines(matches, details, identifier)
    _display_phases(segments)

    if output:
        report = {
            "identifier": identifier,
            "phases": {name: series.stats() for name, series in segments.items()},
        }
        _export(report, output, phases=segments)


@app.command()
def options(
    identifier: str = typer.Argument(..., help="Player nickname or uuid"),
    match_type: list[int] = TypeOption,
    input_file: Optional[Path] = InputOption,
) -> None:
    """List the filter values present in a player's matches."""
    types = match_type or _config().filters.types
    found = filter_options(_load(identifier, input_file, list(types)))

    table = Table(title="Filter Options", show_header=False)
    table.add_column("Filter", style="cyan")
    table.add_column("Values", style="green")
    table.add_row("--type", ", ".join(type_label(t) for t in found.types) or "—")
    table.add_row("--overworld", ", ".join(found.overworld) or "—")
    table.add_row("--bastion", ", ".join(found.bastion) or "—")
    table.add_row("Bastion types", ", ".join(found.bastion_types) or "—")
    table.add_row("Fortress biomes", ", ".join(found.fortress_biomes) or "—")
    table.add_row("End towers", ", ".join(str(h) for h in found.end_tower_heights) or "—")
    table.add_row("--variation", ", ".join(found.variations) or "—")
    console.print(table)


@app.command()
def variations(
    tags: list[str] = typer.Argument(..., help="Variation tags, e.g. biome:fortress:crimson_forest"),
) -> None:
    """Decode seed variation tags into categories."""
    categories = parse_variations(tags)

    table = Table(title="Variation Categories", show_header=False)
    table.add_column("Category", style="cyan")
    table.add_column("Values", style="green")
    table.add_row("Structures", ", ".join(sorted(categories.structures)) or "—")
    table.add_row("Fortress biomes", ", ".join(humanize_biome(b) for b in sorted(categories.fortress_biomes)) or "—")
    table.add_row("Bastion biomes", ", ".join(humanize_biome(b) for b in sorted(categories.bastion_biomes)) or "—")
    table.add_row("Bastion type", categories.bastion_type or "—")
    table.add_row(
        "Buried end spawn",
        "—" if categories.end_spawn_buried is None else str(categories.end_spawn_buried),
    )
    table.add_row("Labels", ", ".join(humanize_variation(t) for t in categories.raw) or "—")
    console.print(table)


@app.command()
def config(
    init: Path = typer.Option(..., "--init", help="Write a default config file to this path"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Generate a default configuration file."""
    if init.exists() and not force:
        console.print(f"[red]{init} already exists[/red] (use --force to overwrite)")
        raise typer.Exit(1)
    try:
        generate_default_config(init)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Wrote default config to {init}[/green]")


if __name__ == "__main__":
    app()
