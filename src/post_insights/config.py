"""
Configuration for post-insights.
Every setting can be overridden with a POST_INSIGHTS_* environment variable.
"""

import os
from pathlib import Path


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


class Settings:
    def __init__(self):
        # Logging
        self.log_level = os.getenv("POST_INSIGHTS_LOG_LEVEL", "INFO").upper()

        # Charts and tables
        self.output_dir = Path(os.getenv("POST_INSIGHTS_OUTPUT_DIR", "outputs"))
        self.top_n = _env_int("POST_INSIGHTS_TOP_N", 10)
        self.table_rows = _env_int("POST_INSIGHTS_TABLE_ROWS", 10)
        self.chart_top_n = _env_int("POST_INSIGHTS_CHART_TOP_N", 5)


# Singleton instance
_settings = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

def reset_settings() -> None:
    global _settings
    _settings = None
