import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from post_insights.config import get_settings


def setup_logging(log_level: Optional[str] = None) -> None:
    """Route all logging to stderr through a Rich handler."""
    log_level = (log_level or get_settings().log_level).upper()
    # getLevelName maps known names to ints and anything else to "Level X"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown log level {log_level!r}")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
