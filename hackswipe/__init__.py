"""
HackSwipe - swipe through hackathon projects, like or pass.

Subpackages:
    config     - environment-driven settings
    models     - project records and persisted session snapshots
    session    - deterministic shuffle, swipe state machine, controller
    storage    - persistence adapters (Supabase, in-memory)
    converter  - reshapes scraped Devpost JSON into the app corpus
"""

__version__ = "1.0.0"
