"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes
CACHE_PREFIX_FILE_VIEW = "file_view"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Project workflow
MIN_STAGE = 1
MAX_STAGE = 5
STAGE_LABELS: tuple[str, ...] = (
    "Brief",
    "Concepts",
    "Refinement",
    "Finalisation",
    "Delivery",
)

# Overview
RECENT_PROJECTS_LIMIT = 5
