"""Snippet extraction without keyword guidance.

Used for replacement songs that come with lyrics but no guidance.  Sections
are assigned to tiers by how recognisable their type usually is:

+------------+------------------------------------------------------------+
| Difficulty | Section type preference                                    |
+============+============================================================+
| easy       | chorus, verse, other                                       |
+------------+------------------------------------------------------------+
| medium     | verse, chorus, other                                       |
+------------+------------------------------------------------------------+
| hard       | bridge, pre-chorus, intro, outro, verse, other             |
+------------+------------------------------------------------------------+

A section can be reused: its n-th use starts ``n * window`` lines in, so two
snippets taken from the same chorus never overlap.
"""

from collections.abc import Sequence

from loguru import logger

from . import config
from .models import DIFFICULTIES, BatchResult, LyricSection, LyricSnippet, sort_by_difficulty
from .scoring import join_lines

_TIER_PREFERENCES: list[tuple[str, tuple[str, ...]]] = [
    ("easy", ("chorus", "verse", "other")),
    ("medium", ("verse", "chorus", "other")),
    ("hard", ("bridge", "pre-chorus", "intro", "outro", "verse", "other")),
]

# Sections shorter than this are never used.
_MIN_SECTION_LINES = 2


class SectionUsage:
    """Tracks how many windows have been taken from each section.

    Sections are addressed by their index in the song, not by identity, so
    two textually identical choruses are tracked separately.
    """

    def __init__(self, sections: Sequence[LyricSection], window_size: int):
        self.sections = sections
        self.window_size = window_size
        self._counts: dict[int, int] = {}

    def is_used(self, index: int) -> bool:
        return index in self._counts

    def next_offset(self, index: int) -> int:
        return self._counts.get(index, 0) * self.window_size

    def is_available(self, index: int) -> bool:
        """True if the section is long enough and still has unread lines."""
        lines = self.sections[index].lines
        return len(lines) >= _MIN_SECTION_LINES and self.next_offset(index) < len(lines)

    def take(self, index: int) -> str:
        """Return the next window of *index* as snippet text and mark it used."""
        offset = self.next_offset(index)
        self._counts[index] = self._counts.get(index, 0) + 1
        return join_lines(self.sections[index].lines[offset:offset + self.window_size])

    def find(self, types: Sequence[str]) -> int | None:
        """Index of the best section for *types*, or None.

        Untouched sections are preferred over partly used ones; within each
        pass *types* is tried in order and the earliest section wins.
        """
        for section_type in types:
            for i, section in enumerate(self.sections):
                if (
                    section.type == section_type
                    and not self.is_used(i)
                    and len(section.lines) >= _MIN_SECTION_LINES
                ):
                    return i
        for section_type in types:
            for i, section in enumerate(self.sections):
                if section.type == section_type and self.is_available(i):
                    return i
        return None

    def first_available(self) -> int | None:
        for i in range(len(self.sections)):
            if self.is_available(i):
                return i
        return None


def extract_fallback_snippets(
    sections: Sequence[LyricSection],
    *,
    window_size: int | None = None,
) -> BatchResult:
    """Pick one snippet per difficulty by section type alone.

    Never raises; ``success`` is False with an explanatory error when three
    snippets cannot be assembled.
    """
    if not sections:
        return BatchResult(success=False, errors=["No sections available"])

    if window_size is None:
        window_size = config.DEFAULT_WINDOW_SIZE

    usage = SectionUsage(sections, window_size)
    snippets: list[LyricSnippet] = []

    for difficulty, types in _TIER_PREFERENCES:
        index = usage.find(types)
        if index is not None:
            snippets.append(LyricSnippet(text=usage.take(index), difficulty=difficulty))

    # Backfill missing tiers from whatever still has lines left.
    filled = {s.difficulty for s in snippets}
    for difficulty in DIFFICULTIES:
        if difficulty in filled or len(snippets) >= 3:
            continue
        index = usage.first_available()
        if index is not None:
            snippets.append(LyricSnippet(text=usage.take(index), difficulty=difficulty))

    success = len(snippets) == 3
    errors: list[str] = []
    if not success:
        errors.append("Could not extract 3 distinct snippets from lyrics")
        logger.warning("Fallback extraction produced {} of 3 snippets", len(snippets))

    return BatchResult(success=success, snippets=sort_by_difficulty(snippets), errors=errors)
