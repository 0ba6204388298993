# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities, constants, and helper functions used across CLI command modules.

This module provides:
- ANSI color codes and box-drawing characters
- Box drawing helpers for formatted output
- Console logging setup
"""

import logging
import re

from voicetime.utils.config import Settings

# ==============================================================================
# Constants
# ==============================================================================

# Box drawing width (unified for all commands)
BOX_WIDTH = 68

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ==============================================================================
# ANSI Colors and Box Drawing
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Colors
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Bright colors
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"


class Box:
    """Unicode box-drawing characters."""

    H = "─"  # horizontal
    V = "│"  # vertical
    TL = "┌"  # top-left
    TR = "┐"  # top-right
    BL = "└"  # bottom-left
    BR = "┘"  # bottom-right


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    WARN = "!"
    DATABASE = "◆"
    ARROW = "→"


# Module-level aliases for convenience
C, B, I = Colors, Box, Icons


# ==============================================================================
# Logging
# ==============================================================================


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """
    Configure console logging for a CLI command.

    Uses settings.log_level unless --verbose (or DEBUG=true) forces DEBUG. Logs go to stderr
    so that --json output on stdout stays parseable.
    """
    level = logging.DEBUG if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


# ==============================================================================
# Box Drawing Helpers
# ==============================================================================

# Regex pattern for stripping ANSI escape codes
_ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visible_len(s: str) -> int:
    """Calculate visible length of string, ignoring ANSI escape codes."""
    return len(_ANSI_ESCAPE_PATTERN.sub("", s))


def _box_header(title: str, width: int = BOX_WIDTH) -> str:
    """Create a single-line box header."""
    inner_width = width - 2
    title_padded = f" {title} "
    left_bar = (inner_width - len(title_padded)) // 2
    right_bar = inner_width - left_bar - len(title_padded)
    return (
        f"{C.CYAN}{B.TL}{B.H * left_bar}{C.BOLD}{C.WHITE}{title_padded}"
        f"{C.RESET}{C.CYAN}{B.H * right_bar}{B.TR}{C.RESET}"
    )


def _box_line(content: str, width: int = BOX_WIDTH) -> str:
    """Create a line inside the box with proper padding to right border."""
    inner_width = width - 2
    padding = inner_width - _visible_len(content)
    return f"{C.CYAN}{B.V}{C.RESET}{content}{' ' * padding}{C.CYAN}{B.V}{C.RESET}"


def _empty_line(width: int = BOX_WIDTH) -> str:
    """Create an empty line inside the box."""
    return f"{C.CYAN}{B.V}{' ' * (width - 2)}{B.V}{C.RESET}"


def _box_bottom(width: int = BOX_WIDTH) -> str:
    """Create a box bottom border."""
    return f"{C.CYAN}{B.BL}{B.H * (width - 2)}{B.BR}{C.RESET}"


def _status_badge(status: str, is_ok: bool) -> str:
    """Create a colored status badge."""
    if is_ok:
        return f"{C.BRIGHT_GREEN}{I.CHECK} {status}{C.RESET}"
    return f"{C.BRIGHT_RED}{I.CROSS} {status}{C.RESET}"
