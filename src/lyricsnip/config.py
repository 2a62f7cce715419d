"""
lyricsnip configuration.

All settings are read from environment variables (optionally via a ``.env``
file) with sensible defaults.  The match thresholds are heuristics, not
laws; override them here rather than in the extraction code.
"""

import os

from dotenv import load_dotenv

_ = load_dotenv()

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Snippet matching
# ---------------------------------------------------------------------------
# Minimum keyword ratio when the guidance's section type was found.
SECTION_MATCH_THRESHOLD = float(os.getenv("LYRICSNIP_SECTION_MATCH_THRESHOLD", "0.4"))

# Minimum keyword ratio for the whole-song search, where no section
# type corroborates the match.
FALLBACK_MATCH_THRESHOLD = float(os.getenv("LYRICSNIP_FALLBACK_MATCH_THRESHOLD", "0.3"))

# Lines per snippet window.
DEFAULT_WINDOW_SIZE = int(os.getenv("LYRICSNIP_WINDOW_SIZE", "3"))

if DEFAULT_WINDOW_SIZE < 1:
    raise RuntimeError(
        f"LYRICSNIP_WINDOW_SIZE must be at least 1, got {DEFAULT_WINDOW_SIZE}."
    )

# ---------------------------------------------------------------------------
# Lyrics sources
# ---------------------------------------------------------------------------
HTTP_TIMEOUT = float(os.getenv("LYRICSNIP_HTTP_TIMEOUT", "15"))
USER_AGENT = os.getenv("LYRICSNIP_USER_AGENT", f"lyricsnip/{VERSION}")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LYRICSNIP_LOG_LEVEL", "WARNING")
