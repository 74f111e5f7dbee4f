"""Console logging for mwstack diagnostics."""
import logging

from rich.console import Console
from rich.logging import RichHandler

# Diagnostics go to stderr so operator output on stdout stays clean.
console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a Rich console handler to the package logger.

    Args:
        verbose: Enable debug-level logging

    Returns:
        The ``mwstack`` logger. Calling again only updates the level.
    """
    logger = logging.getLogger("mwstack")

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
