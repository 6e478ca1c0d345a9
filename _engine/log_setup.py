"""
Logging setup for the commit message generator.

Diagnostics go through the standard logging module and are rendered by
rich; user-facing status lines are printed by the themed console instead.
"""

import logging

from rich.logging import RichHandler


def setup_logging(is_verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        is_verbose (bool): Enable DEBUG level output (WARNING otherwise).
    """
    log_level = logging.DEBUG if is_verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicate logs if called multiple times
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = RichHandler(
        level=log_level,
        rich_tracebacks=True,
        show_time=is_verbose,
        show_path=is_verbose,
    )
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
