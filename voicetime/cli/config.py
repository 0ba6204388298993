# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the voicetime CLI.
"""

import json
from typing import Annotated

import typer

from voicetime.cli.shared import C
from voicetime.core.errors import ConfigurationError
from voicetime.utils.config import get_settings


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (includes secrets in JSON mode)."""
    settings = get_settings()
    aggregation = settings.aggregation

    try:
        default_date = aggregation.default_target_date().isoformat()
        window = aggregation.window
        window_text = f"+{window.start_offset} to +{window.end_offset} UTC"
    except ConfigurationError as e:
        window_text = f"invalid ({e})"

    if json_output:
        config = {
            "postgresql": {
                "host": settings.postgres.host,
                "port": settings.postgres.port,
                "database": settings.postgres.database,
                "user": settings.postgres.username,
                "password": settings.postgres.password,
                "sslmode": settings.postgres.sslmode,
            },
            "activity": {
                "table": settings.activity.table,
                "clan_id": settings.activity.clan_id,
            },
            "aggregation": {
                "window_start_hours": aggregation.window_start_hours,
                "window_end_hours": aggregation.window_end_hours,
                "days_ago": aggregation.days_ago,
                "default_date": default_date,
                "duration_format": aggregation.duration_format,
                "failure_policy": aggregation.failure_policy,
                "group_by": aggregation.group_by,
            },
            "api": {
                "server": settings.api.server,
                "security_code": settings.api.security_code,
                "user_agent": settings.api.user_agent,
                "timeout_seconds": settings.api.timeout_seconds,
            },
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    # Human-readable output
    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    # PostgreSQL
    print(f"{C.CYAN}PostgreSQL{C.RESET}")
    print(f"  Host:       {C.WHITE}{settings.postgres.host}{C.RESET}")
    print(f"  Port:       {C.WHITE}{settings.postgres.port}{C.RESET}")
    print(f"  Database:   {C.WHITE}{settings.postgres.database}{C.RESET}")
    print(f"  User:       {C.WHITE}{settings.postgres.username}{C.RESET}")
    print(f"  SSL:        {C.WHITE}{settings.postgres.sslmode}{C.RESET}")
    print()

    # Activity source
    print(f"{C.CYAN}Activity{C.RESET}")
    print(f"  Table:      {C.WHITE}{settings.activity.table}{C.RESET}")
    clan = settings.activity.clan_id if settings.activity.clan_id is not None else "all"
    print(f"  Clan:       {C.WHITE}{clan}{C.RESET}")
    print()

    # Aggregation
    print(f"{C.CYAN}Aggregation{C.RESET}")
    print(f"  Window:     {C.WHITE}{window_text}{C.RESET}")
    print(f"  Date:       {C.WHITE}{default_date} ({aggregation.days_ago} days ago){C.RESET}")
    print(f"  Format:     {C.WHITE}{aggregation.duration_format}{C.RESET}")
    print(f"  Policy:     {C.WHITE}{aggregation.failure_policy}{C.RESET}")
    print(f"  Group by:   {C.WHITE}{aggregation.group_by}{C.RESET}")
    print()

    # Report API
    print(f"{C.CYAN}Report API{C.RESET}")
    server = settings.api.server or "not configured"
    print(f"  Server:     {C.WHITE}{server}{C.RESET}")
    print(f"  Timeout:    {C.WHITE}{settings.api.timeout_seconds} seconds{C.RESET}")
    print()
