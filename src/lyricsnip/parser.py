"""Lyric section parser.

Turns raw lyrics text into an ordered list of typed, numbered
:class:`~lyricsnip.models.LyricSection` objects.  Section boundaries are
``[Label]`` header lines, the format used by Genius and most lyric sites::

    [Verse 1]
    Is this the real life
    Is this just fantasy

    [Chorus]
    ...
"""

import re

from .models import SECTION_TYPES, LyricSection

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# A whole line wrapped in a single pair of square brackets: [Verse 1], [Hook]
SECTION_HEADER_RE = re.compile(r"^\[([^\]]+)\]$")

# Label substrings → section type, checked in order, first match wins.
#
# "chorus" is tested before the pre-chorus spellings, so "[Pre-Chorus]" and
# "[Prechorus]" classify as chorus.  Existing guidance depends on this, keep it.
_LABEL_RULES: list[tuple[tuple[str, ...], str]] = [
    (("verse",), "verse"),
    (("chorus", "hook"), "chorus"),
    (("bridge",), "bridge"),
    (("pre-chorus", "prechorus", "pre chorus"), "pre-chorus"),
    (("intro",), "intro"),
    (("outro",), "outro"),
]


# ---------------------------------------------------------------------------
# Label classification
# ---------------------------------------------------------------------------


def classify_section_label(label: str) -> str:
    """Return the section type for a header label such as ``"Verse 2"``.

    Matching is case-insensitive substring containment.  Anything that
    matches no rule is ``"other"``.
    """
    name = label.lower()
    for needles, section_type in _LABEL_RULES:
        if any(needle in name for needle in needles):
            return section_type
    return "other"


class _SectionCounter:
    """Running per-type ordinals for a single parse."""

    def __init__(self) -> None:
        self._counts = {section_type: 0 for section_type in SECTION_TYPES}

    def next(self, section_type: str) -> int:
        self._counts[section_type] += 1
        return self._counts[section_type]


# ---------------------------------------------------------------------------
# Full parser
# ---------------------------------------------------------------------------


def parse_lyrics_into_sections(lyrics: str) -> list[LyricSection]:
    """Parse raw lyrics text into a list of sections.

    Algorithm
    ---------
    1. Split *lyrics* into lines and trim each one.
    2. A ``[Label]`` line closes the current section (if it has lines) and
       opens a new one, typed by :func:`classify_section_label` and numbered
       by its type's running count.
    3. Any other non-empty line is appended to the current section.  Lines
       before the first header go into an implicit verse.
    4. Empty lines are skipped; they never close a section.

    Sections without lines are never emitted, so empty or whitespace-only
    input returns ``[]``.
    """
    sections: list[LyricSection] = []
    counter = _SectionCounter()
    current: LyricSection | None = None

    for raw in lyrics.split("\n"):
        line = raw.strip()

        m = SECTION_HEADER_RE.match(line)
        if m:
            if current and current.lines:
                sections.append(current)
            section_type = classify_section_label(m.group(1))
            current = LyricSection(type=section_type, number=counter.next(section_type))
            continue

        if not line:
            continue

        if current is None:
            current = LyricSection(type="verse", number=counter.next("verse"))
        current.lines.append(line)

    if current and current.lines:
        sections.append(current)

    return sections
