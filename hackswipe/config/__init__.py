"""
Configuration module.

Handles environment variables, Supabase credentials, and session timing.
"""

from hackswipe.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    LOG_FORMAT,
    SUPABASE_URL,
    SUPABASE_KEY,
    SUPABASE_TABLE,
    REQUEST_TIMEOUT,
    PROJECTS_PATH,
    RAW_DATA_PATH,
    SHUFFLE_SEED,
    SAVE_DEBOUNCE_SECONDS,
    SWIPE_EXIT_DELAY_SECONDS,
    is_production,
    is_development,
    is_persistence_configured,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_TABLE",
    "REQUEST_TIMEOUT",
    "PROJECTS_PATH",
    "RAW_DATA_PATH",
    "SHUFFLE_SEED",
    "SAVE_DEBOUNCE_SECONDS",
    "SWIPE_EXIT_DELAY_SECONDS",
    "is_production",
    "is_development",
    "is_persistence_configured",
    "validate_config",
    "print_config_summary",
]
