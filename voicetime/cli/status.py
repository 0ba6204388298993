# ==============================================================================
# Status Command
# ==============================================================================
"""
Status command for the voicetime CLI.

Checks that PostgreSQL is reachable and that a report endpoint is configured,
in either formatted box output or JSON.
"""

import json as json_module
from typing import Any

import typer

from voicetime.cli.shared import (
    BOX_WIDTH,
    C,
    I,
    _box_bottom,
    _box_header,
    _box_line,
    _empty_line,
    _status_badge,
)
from voicetime.utils.config import Settings, get_settings
from voicetime.utils.versions import get_voicetime_version


# ==============================================================================
# Data Collection
# ==============================================================================


def _collect_status_data(settings: Settings) -> dict[str, Any]:
    """Collect service health for the report pipeline."""
    from voicetime.infrastructure.repositories import check_postgresql_connection

    return {
        "version": get_voicetime_version(),
        "postgresql": {
            "host": settings.postgres.host,
            "database": settings.postgres.database,
            "table": settings.activity.table,
            "reachable": check_postgresql_connection(settings),
        },
        "api": {
            "server": settings.api.server,
            "configured": settings.api.is_configured,
        },
    }


def _display_status(data: dict[str, Any]) -> None:
    W = BOX_WIDTH
    pg = data["postgresql"]
    api = data["api"]

    print()
    print(_box_header(f"VOICETIME v{data['version']}", W))
    print(_empty_line(W))

    pg_badge = _status_badge("reachable" if pg["reachable"] else "unreachable", pg["reachable"])
    print(_box_line(f"  {C.BOLD}{I.DATABASE} PostgreSQL{C.RESET}  {pg_badge}", W))
    print(_box_line(f"    {pg['host']}/{pg['database']} {I.ARROW} {pg['table']}", W))
    print(_empty_line(W))

    api_badge = _status_badge(
        "configured" if api["configured"] else "not configured", api["configured"]
    )
    print(_box_line(f"  {C.BOLD}{I.ARROW} Report API{C.RESET}  {api_badge}", W))
    if api["server"]:
        print(_box_line(f"    {api['server'][: W - 8]}", W))

    print(_empty_line(W))
    print(_box_bottom(W))
    print()


# ==============================================================================
# Commands
# ==============================================================================


def show_status(
    json_output: bool = typer.Option(False, "--json", help="Output status as JSON"),
) -> None:
    """Show database reachability and report API configuration."""
    data = _collect_status_data(get_settings())

    if json_output:
        print(json_module.dumps(data, indent=2))
    else:
        _display_status(data)

    if not data["postgresql"]["reachable"]:
        raise typer.Exit(1)
