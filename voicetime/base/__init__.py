# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the ports of the presence pipeline.

The core never touches I/O; these ports are what the CLI wires to concrete
adapters (PostgreSQL, CSV, HTTP).
"""

from voicetime.base.repositories import ActivityRepository, ReportSink

__all__ = [
    "ActivityRepository",
    "ReportSink",
]
