"""URL → lyrics provider lookup used by the CLI."""

from .exceptions import UnsupportedSourceError
from .sources.base import LyricsSource
from .sources.genius import GeniusSource
from .sources.lrclib import LrclibSource

# Checked in order; the first provider claiming a URL wins.
_SOURCES: list[type[LyricsSource]] = [
    LrclibSource,
    GeniusSource,
]


def get_source(url: str) -> LyricsSource:
    """Return the lyrics provider for *url*, ready to ``scrape`` it.

    Raises UnsupportedSourceError for URLs outside lrclib.net/api and
    genius.com.
    """
    for cls in _SOURCES:
        if cls.can_handle(url):
            return cls()
    raise UnsupportedSourceError(url)
