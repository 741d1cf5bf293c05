"""
Configuration module for HackSwipe.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root (parent of hackswipe/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Root log level and output format ("text" or "json")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")


# =============================================================================
# Supabase Configuration
# =============================================================================

# Project URL, e.g. https://abcd1234.supabase.co
# Empty in development: sessions stay local-only
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

# Anon or service key sent as both apikey and bearer token
SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

# Table holding one row per user: user_id, liked_projects, passed_projects,
# history, current_index, updated_at
SUPABASE_TABLE: str = os.getenv("SUPABASE_TABLE", "user_data")

# HTTP request timeout in seconds
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))


# =============================================================================
# Corpus
# =============================================================================

# Converted corpus consumed by the app
PROJECTS_PATH: str = os.getenv("PROJECTS_PATH", "data/projects.json")

# Raw scraper output read by the converter
RAW_DATA_PATH: str = os.getenv("RAW_DATA_PATH", "data/devpost_winners.json")


# =============================================================================
# Session Behaviour
# =============================================================================

# Fixed seed so every user sees the same ordering
SHUFFLE_SEED: int = int(os.getenv("SHUFFLE_SEED", "42"))

# Quiet period before a burst of swipes is written to storage
SAVE_DEBOUNCE_SECONDS: float = float(os.getenv("SAVE_DEBOUNCE_SECONDS", "1.0"))

# Time the card takes to animate away before the next one is shown
SWIPE_EXIT_DELAY_SECONDS: float = float(os.getenv("SWIPE_EXIT_DELAY_SECONDS", "0.3"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def is_persistence_configured() -> bool:
    """Check if a remote session store can be used."""
    return bool(SUPABASE_URL and SUPABASE_KEY)


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.
    
    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []
    
    if is_production():
        if not SUPABASE_URL:
            errors.append("SUPABASE_URL is required in production")
        if not SUPABASE_KEY:
            errors.append("SUPABASE_KEY is required in production")
    
    if SUPABASE_URL and not SUPABASE_URL.startswith(("http://", "https://")):
        errors.append(f"SUPABASE_URL must start with http:// or https://, got {SUPABASE_URL}")
    
    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")
    
    if SAVE_DEBOUNCE_SECONDS < 0:
        errors.append("SAVE_DEBOUNCE_SECONDS cannot be negative")
    
    if SWIPE_EXIT_DELAY_SECONDS < 0:
        errors.append("SWIPE_EXIT_DELAY_SECONDS cannot be negative")
    
    if LOG_FORMAT not in ("text", "json"):
        errors.append(f"LOG_FORMAT must be 'text' or 'json', got {LOG_FORMAT}")
    
    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_KEY: {'***' if SUPABASE_KEY else '(not set)'}")
    print(f"  SUPABASE_TABLE: {SUPABASE_TABLE}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  PROJECTS_PATH: {PROJECTS_PATH}")
    print(f"  RAW_DATA_PATH: {RAW_DATA_PATH}")
    print(f"  SHUFFLE_SEED: {SHUFFLE_SEED}")
    print(f"  SAVE_DEBOUNCE_SECONDS: {SAVE_DEBOUNCE_SECONDS}s")
    print(f"  SWIPE_EXIT_DELAY_SECONDS: {SWIPE_EXIT_DELAY_SECONDS}s")
