# ==============================================================================
# Report Commands
# ==============================================================================
"""
Report commands for the voicetime CLI.

Computes per-user presence inside the daily window for one target date,
reading activity either from PostgreSQL or from a CSV export, and optionally
delivers the result to the report API.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Optional

import psycopg2
import requests
import typer
from rich.console import Console
from rich.table import Table

from voicetime.base.repositories import ActivityRepository
from voicetime.cli.shared import C, I, configure_logging
from voicetime.core.errors import ConfigurationError, ParseError, ReportDeliveryError
from voicetime.core.formatting import DurationFormat, build_payload, format_duration
from voicetime.core.pipeline import PipelineResult, PresencePipeline
from voicetime.utils.config import Settings, get_settings


# ==============================================================================
# Helper Functions
# ==============================================================================


def _fail(message: str, json_output: bool) -> None:
    """Print an error and exit with status 1."""
    if json_output:
        print(json.dumps({"error": message}))
    else:
        print(f"\n{C.BRIGHT_RED}{I.CROSS} {message}{C.RESET}\n")
    raise typer.Exit(1)


def _resolve_date(target: Optional[datetime], settings: Settings) -> date:
    if target is not None:
        return target.date()
    return settings.aggregation.default_target_date()


def _build_pipeline(target_date: date, settings: Settings) -> PresencePipeline:
    aggregation = settings.aggregation
    return PresencePipeline(
        target_date,
        window=aggregation.window,
        grouping=aggregation.grouping,
        policy=aggregation.policy,
    )


def _print_result(result: PipelineResult, fmt: DurationFormat, settings: Settings) -> None:
    window = settings.aggregation.window
    records = sorted(result.records, key=lambda r: r.key)

    console = Console()
    table = Table(
        title=f"Presence {result.target_date.isoformat()} "
        f"(window +{window.start_offset} to +{window.end_offset} UTC)",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Name", justify="left")
    table.add_column("User ID", justify="left")
    table.add_column("Total", justify="right")
    for record in records:
        table.add_row(
            record.subject_key,
            record.user_id,
            str(format_duration(record.total_duration, fmt)),
        )

    print()
    console.print(table)
    print(
        f"  {C.BOLD}Sessions:{C.RESET}  {len(result.sessions)} reconstructed, "
        f"{len(result.filtered_sessions)} after nested filter"
    )
    print(f"  {C.BOLD}Users:{C.RESET}     {len(records)}")
    if result.failures:
        print(
            f"  {C.BRIGHT_YELLOW}{I.WARN} {len(result.failures)} malformed rows; "
            f"subjects isolated: {', '.join(sorted(result.failed_subjects))}{C.RESET}"
        )
    print()


def _result_json(result: PipelineResult, fmt: DurationFormat) -> dict:
    return {
        "date": result.target_date.isoformat(),
        "format": fmt.value,
        "sessions": len(result.sessions),
        "filtered_sessions": len(result.filtered_sessions),
        "records": build_payload(result.records, fmt),
        "failures": [str(f) for f in result.failures],
        "isolated_subjects": sorted(result.failed_subjects),
    }


def _execute(
    repository: ActivityRepository,
    settings: Settings,
    target: Optional[datetime],
    clan_id: Optional[int],
    fmt: Optional[DurationFormat],
    send: bool,
    json_output: bool,
) -> None:
    """Fetch, compute, print and optionally deliver one report."""
    fmt = fmt or settings.aggregation.format
    target_date = _resolve_date(target, settings)

    try:
        pipeline = _build_pipeline(target_date, settings)
    except ConfigurationError as e:
        _fail(f"Invalid configuration: {e}", json_output)

    try:
        with repository:
            records = repository.fetch_for_day(target_date, clan_id)
    except (psycopg2.Error, OSError, ValueError) as e:
        _fail(f"Could not read activity: {e}", json_output)

    try:
        result = pipeline.run(records)
    except ParseError as e:
        _fail(f"Aggregation failed: {e}", json_output)

    if json_output:
        print(json.dumps(_result_json(result, fmt), indent=2))
    else:
        _print_result(result, fmt, settings)

    if send:
        from voicetime.infrastructure.sinks import ApiReportSink

        try:
            delivered = ApiReportSink(settings, fmt).send(result.records)
        except ConfigurationError as e:
            _fail(f"Cannot send report: {e}", json_output)
        except (ReportDeliveryError, requests.exceptions.RequestException) as e:
            _fail(f"Report delivery failed: {e}", json_output)
        if not json_output:
            print(
                f"  {C.BRIGHT_GREEN}{I.CHECK} Sent {delivered} records to "
                f"{settings.api.server}{C.RESET}\n"
            )


# ==============================================================================
# Option Types
# ==============================================================================

DateOption = Annotated[
    Optional[datetime],
    typer.Option(
        "--date",
        "-d",
        formats=["%Y-%m-%d"],
        help="Target date (UTC, YYYY-MM-DD). Defaults to AGGREGATION_DAYS_AGO days ago.",
    ),
]
FormatOption = Annotated[
    Optional[DurationFormat],
    typer.Option("--format", "-f", help="Duration format (hms or minutes)"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]


# ==============================================================================
# Commands
# ==============================================================================


def report_run(
    target: DateOption = None,
    clan_id: Annotated[
        Optional[int],
        typer.Option("--clan-id", "-c", help="Only count activity in this clan"),
    ] = None,
    fmt: FormatOption = None,
    send: Annotated[
        bool, typer.Option("--send", "-s", help="Deliver the report to API_SERVER")
    ] = False,
    json_output: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Compute in-window presence from PostgreSQL activity.

    Examples:
        voicetime report run
        voicetime report run --date 2024-08-06 --send
        voicetime report run -d 2024-08-06 --clan-id 7 --format minutes --json
    """
    from voicetime.infrastructure.repositories import PostgreSQLActivityRepository

    settings = get_settings()
    configure_logging(settings, verbose)
    if clan_id is None:
        clan_id = settings.activity.clan_id

    try:
        repository = PostgreSQLActivityRepository(settings)
    except ConfigurationError as e:
        _fail(f"Invalid configuration: {e}", json_output)

    _execute(repository, settings, target, clan_id, fmt, send, json_output)


def report_file(
    path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="CSV export of activity"),
    ],
    target: DateOption = None,
    clan_id: Annotated[
        Optional[int],
        typer.Option("--clan-id", "-c", help="Only count activity in this clan"),
    ] = None,
    fmt: FormatOption = None,
    json_output: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Compute in-window presence from a CSV export.

    Examples:
        voicetime report file activity.csv --date 2024-08-06
        voicetime report file activity.csv -d 2024-08-06 --json
    """
    from voicetime.infrastructure.repositories import CsvActivityRepository

    settings = get_settings()
    configure_logging(settings, verbose)
    if clan_id is None:
        clan_id = settings.activity.clan_id

    repository = CsvActivityRepository(path)
    _execute(repository, settings, target, clan_id, fmt, False, json_output)
