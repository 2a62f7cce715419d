from dataclasses import dataclass, field
from typing import Any

from .exceptions import GuidanceError

SECTION_TYPES = ("verse", "chorus", "bridge", "pre-chorus", "intro", "outro", "other")
DIFFICULTIES = ("easy", "medium", "hard")

# Canonical output order for a song's snippets.
DIFFICULTY_ORDER = {"hard": 0, "medium": 1, "easy": 2}


@dataclass
class LyricSection:
    """One structural block of a song (verse, chorus, bridge, etc.)."""

    type: str  # one of SECTION_TYPES
    number: int | None = None  # 1-based ordinal among sections of the same type
    lines: list[str] = field(default_factory=list)


@dataclass
class LineRange:
    """1-based inclusive line window within a section."""

    start: int
    end: int


@dataclass
class SnippetGuidance:
    """Where to look for one snippet, without containing the snippet itself.

    Keywords are only used to verify a candidate window; they never end up in
    the output text.
    """

    difficulty: str
    section: str
    line_range: LineRange
    keywords: list[str]
    description: str = ""
    verse_number: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SnippetGuidance":
        """Build a guidance from a JSON-style dict (camelCase keys).

        Only the structure is checked here. Keyword counts and the number of
        guidances per song are the producer's responsibility.

        Raises GuidanceError if a required key is missing or malformed.
        """
        if not isinstance(data, dict):
            raise GuidanceError(f"expected an object, got {type(data).__name__}")

        difficulty = data.get("difficulty")
        if difficulty not in DIFFICULTIES:
            raise GuidanceError(f"unknown difficulty: {difficulty!r}")

        section = data.get("section")
        if section not in SECTION_TYPES:
            raise GuidanceError(f"unknown section type: {section!r}")

        raw_range = data.get("lineRange")
        try:
            line_range = LineRange(start=int(raw_range["start"]), end=int(raw_range["end"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GuidanceError(f"invalid lineRange: {raw_range!r}") from exc

        keywords = data.get("keywords")
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise GuidanceError(f"keywords must be a list of strings: {keywords!r}")

        verse_number = data.get("verseNumber")
        if verse_number is not None:
            try:
                verse_number = int(verse_number)
            except (TypeError, ValueError) as exc:
                raise GuidanceError(f"invalid verseNumber: {verse_number!r}") from exc

        return cls(
            difficulty=difficulty,
            section=section,
            line_range=line_range,
            keywords=keywords,
            description=data.get("description") or "",
            verse_number=verse_number,
        )


@dataclass
class LyricSnippet:
    """A short quoted excerpt of lyrics tagged with a difficulty tier."""

    text: str  # lines joined with " / "
    difficulty: str

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "difficulty": self.difficulty}


@dataclass
class ExtractionResult:
    """Outcome of locating a single snippet."""

    success: bool
    snippet: LyricSnippet | None = None
    error: str | None = None


@dataclass
class BatchResult:
    """Outcome of extracting all three snippets for one song.

    ``snippets`` keeps whatever was extracted even when ``success`` is False.
    """

    success: bool
    snippets: list[LyricSnippet] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "snippets": [s.to_dict() for s in self.snippets],
            "errors": list(self.errors),
        }


@dataclass
class ValidationResult:
    valid: bool
    missing: list[SnippetGuidance] = field(default_factory=list)


def sort_by_difficulty(snippets: list[LyricSnippet]) -> list[LyricSnippet]:
    """Return *snippets* ordered hard → medium → easy (stable)."""
    return sorted(snippets, key=lambda s: DIFFICULTY_ORDER[s.difficulty])
