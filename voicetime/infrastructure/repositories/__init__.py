# ==============================================================================
# Activity Repository Adapters
# ==============================================================================
"""
Adapters implementing ActivityRepository from base/repositories.py.

Currently supported:
- PostgreSQL (postgresql.py)
- CSV exports (csv_file.py)
"""

from voicetime.infrastructure.repositories.csv_file import CsvActivityRepository
from voicetime.infrastructure.repositories.postgresql import (
    PostgreSQLActivityRepository,
    check_postgresql_connection,
)

__all__ = [
    "CsvActivityRepository",
    "PostgreSQLActivityRepository",
    "check_postgresql_connection",
]
