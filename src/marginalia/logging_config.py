"""Logging configuration for the marginalia CLI.

Diagnostics go to stderr so that ``--json`` and ``--dry-run`` output on
stdout stays machine-readable.
"""

import sys
from pathlib import Path

from loguru import logger

_BRIEF_FORMAT = "{level.icon} {message}"
_DETAILED_FORMAT = "{level.icon} {name}:{function}:{line} {message}"


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure loguru for a CLI run.

    Args:
        verbose: Show debug messages with their source location.
        quiet: Show only warnings and errors. Ignored when ``verbose`` is set.
        log_file: Also write every debug-level message to this file.
    """
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_DETAILED_FORMAT)
    else:
        logger.add(sys.stderr, level="WARNING" if quiet else "INFO", format=_BRIEF_FORMAT)
    if log_file is not None:
        logger.add(log_file, level="DEBUG", format="{time:YYYY-MM-DD HH:mm:ss} {level} {message}")
