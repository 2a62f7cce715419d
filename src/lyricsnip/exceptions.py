"""Errors raised by lyricsnip's outer surface (sources, guidance files, CLI).

The parser and extractors never raise these; they report misses as result
values instead.
"""


class LyricSnipError(Exception):
    """Base exception for lyricsnip."""


class FetchError(LyricSnipError):
    """A lyrics provider request failed.

    ``status_code`` is 0 when no HTTP response was received at all.
    """

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class ParseError(LyricSnipError):
    """A provider answered, but its page or payload held no lyrics."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"No lyrics in {url}: {reason}")


class UnsupportedSourceError(LyricSnipError):
    """The URL belongs to no known lyrics provider."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No lyrics source found for URL: {url}")


class GuidanceError(LyricSnipError):
    """A snippet guidance payload is structurally unusable."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid snippet guidance: {reason}")
