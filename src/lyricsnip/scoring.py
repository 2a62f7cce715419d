"""Keyword scoring and line-window helpers shared by the extractors."""

from collections.abc import Iterator, Sequence

SNIPPET_SEPARATOR = " / "


def join_lines(lines: Sequence[str]) -> str:
    """Join lyric lines into snippet text, preserving order."""
    return SNIPPET_SEPARATOR.join(lines)


def keyword_score(text: str, keywords: Sequence[str]) -> float:
    """Return the fraction of *keywords* found in *text*.

    Matching is case-insensitive substring containment with no word
    boundaries, so "dream" also matches "dreaming".  An empty keyword list
    scores 0.
    """
    if not keywords:
        return 0.0
    haystack = text.lower()
    found = sum(1 for kw in keywords if kw.lower() in haystack)
    return found / len(keywords)


def iter_windows(lines: Sequence[str], size: int) -> Iterator[list[str]]:
    """Yield every run of *size* consecutive lines, left to right.

    When *lines* is shorter than *size*, the single (short) window starting at
    0 is still yielded, so a non-empty section always produces a candidate.
    """
    for start in range(max(0, len(lines) - size) + 1):
        yield list(lines[start:start + size])
