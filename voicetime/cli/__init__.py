# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the voicetime pipeline.

Commands are organized into separate modules for maintainability:
- shared.py: Common utilities, constants, and helpers
- report.py: Presence report computation and delivery
- config.py: Configuration display
- status.py: Service health
"""

from voicetime.cli.shared import (
    # Constants
    BOX_WIDTH,
    # Classes
    Box,
    Colors,
    Icons,
    # Aliases
    B,
    C,
    I,
    # Logging
    configure_logging,
)

__all__ = [
    "BOX_WIDTH",
    "Box",
    "Colors",
    "Icons",
    "B",
    "C",
    "I",
    "configure_logging",
]
