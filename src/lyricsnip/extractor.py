"""Guided snippet extraction.

Locates the lyric window described by a
:class:`~lyricsnip.models.SnippetGuidance` using three search tiers, each
tried only when the previous one found nothing:

1. **Exact** -- the first section whose type matches the guidance and whose
   number matches ``verse_number`` (when given).  The guidance's line range is
   checked first, then a sliding window over the section.
2. **Type only** -- every section of the guidance's type, in order, same
   checks as above.
3. **Global** -- a sliding-window keyword search over the whole song using
   the lower ``FALLBACK_MATCH_THRESHOLD``.

Nothing here raises for bad guidance; failures come back as
:class:`~lyricsnip.models.ExtractionResult` values with an ``error`` message.

Usage::

    from lyricsnip.extractor import extract_all_snippets
    from lyricsnip.parser import parse_lyrics_into_sections

    result = extract_all_snippets(parse_lyrics_into_sections(text), guidances)
    if result.success:
        hard, medium, easy = result.snippets
"""

from collections.abc import Sequence

from loguru import logger

from . import config
from .models import (
    BatchResult,
    ExtractionResult,
    LyricSection,
    LyricSnippet,
    SnippetGuidance,
    ValidationResult,
    sort_by_difficulty,
)
from .scoring import iter_windows, join_lines, keyword_score


def extract_snippet(
    sections: Sequence[LyricSection],
    guidance: SnippetGuidance,
    *,
    section_threshold: float | None = None,
    fallback_threshold: float | None = None,
    window_size: int | None = None,
) -> ExtractionResult:
    """Find the snippet described by *guidance* in *sections*.

    Thresholds and window size default to the values in
    :mod:`lyricsnip.config`, read at call time.
    """
    if section_threshold is None:
        section_threshold = config.SECTION_MATCH_THRESHOLD
    if fallback_threshold is None:
        fallback_threshold = config.FALLBACK_MATCH_THRESHOLD
    if window_size is None:
        window_size = config.DEFAULT_WINDOW_SIZE

    # --- Tier 1: section type + number ---
    exact = [
        s for s in sections
        if s.type == guidance.section
        and (guidance.verse_number is None or s.number == guidance.verse_number)
    ]
    if exact:
        result = _extract_from_section(exact[0], guidance, section_threshold, window_size)
        if result.success:
            logger.debug("{} snippet found in {} {}", guidance.difficulty, exact[0].type, exact[0].number)
            return result

    # --- Tier 2: section type only ---
    for section in sections:
        if section.type != guidance.section:
            continue
        result = _extract_from_section(section, guidance, section_threshold, window_size)
        if result.success:
            logger.debug(
                "{} snippet found in {} {} (ignoring requested number {})",
                guidance.difficulty, section.type, section.number, guidance.verse_number,
            )
            return result

    # --- Tier 3: whole song ---
    logger.debug("{} snippet: no {} match, searching all sections", guidance.difficulty, guidance.section)
    return _extract_by_keywords(sections, guidance, fallback_threshold, window_size)


def extract_all_snippets(
    sections: Sequence[LyricSection],
    guidances: Sequence[SnippetGuidance],
    **options,
) -> BatchResult:
    """Extract one snippet per guidance.

    ``success`` is True only when exactly three snippets were found.  Snippets
    that were found are returned either way, ordered hard → medium → easy.
    Keyword *options* are passed through to :func:`extract_snippet`.
    """
    snippets: list[LyricSnippet] = []
    errors: list[str] = []

    for guidance in guidances:
        result = extract_snippet(sections, guidance, **options)
        if result.success and result.snippet:
            snippets.append(result.snippet)
        else:
            errors.append(result.error or f"Failed to extract {guidance.difficulty} snippet")

    success = len(snippets) == 3
    if not success:
        logger.info("Extracted {} of {} snippets: {}", len(snippets), len(guidances), errors)

    return BatchResult(success=success, snippets=sort_by_difficulty(snippets), errors=errors)


def validate_snippet_extraction(
    sections: Sequence[LyricSection],
    guidances: Sequence[SnippetGuidance],
    **options,
) -> ValidationResult:
    """Dry run: report which guidances could not be satisfied."""
    missing = [g for g in guidances if not extract_snippet(sections, g, **options).success]
    return ValidationResult(valid=not missing, missing=missing)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _found(text: str, guidance: SnippetGuidance) -> ExtractionResult:
    return ExtractionResult(success=True, snippet=LyricSnippet(text=text, difficulty=guidance.difficulty))


def _extract_from_section(
    section: LyricSection,
    guidance: SnippetGuidance,
    threshold: float,
    window_size: int,
) -> ExtractionResult:
    """Try the guidance's line range in *section*, then widen to the whole section."""
    lines = section.lines
    start = max(0, guidance.line_range.start - 1)
    end = min(len(lines), guidance.line_range.end)

    if start >= len(lines):
        # Range points past the end; the opening lines may still match.
        text = join_lines(lines[:min(window_size, len(lines))])
        if keyword_score(text, guidance.keywords) >= threshold:
            return _found(text, guidance)
        return ExtractionResult(success=False, error="Line range out of bounds")

    candidate = lines[start:end]
    if not candidate:
        return ExtractionResult(success=False, error="No lines in range")

    text = join_lines(candidate)
    if keyword_score(text, guidance.keywords) >= threshold:
        return _found(text, guidance)

    return _expanded_section_search(section, guidance, threshold, window_size)


def _expanded_section_search(
    section: LyricSection,
    guidance: SnippetGuidance,
    threshold: float,
    window_size: int,
) -> ExtractionResult:
    best_text, best_score = _best_window(iter_windows(section.lines, window_size), guidance.keywords)

    if best_text is not None and best_score >= threshold:
        return _found(best_text, guidance)

    return ExtractionResult(
        success=False,
        error=f"Could not find snippet matching keywords in section: {', '.join(guidance.keywords)}",
    )


def _extract_by_keywords(
    sections: Sequence[LyricSection],
    guidance: SnippetGuidance,
    threshold: float,
    window_size: int,
) -> ExtractionResult:
    """Best-scoring window of any size up to *window_size* anywhere in the song."""

    def candidates():
        for section in sections:
            yield from iter_windows(section.lines, window_size)
            # Smaller windows catch short sections and partial matches.
            for size in range(1, min(window_size, len(section.lines) + 1)):
                yield from iter_windows(section.lines, size)

    best_text, best_score = _best_window(candidates(), guidance.keywords)

    if best_text is not None and best_score >= threshold:
        logger.debug("{} snippet found by keyword search (score {:.2f})", guidance.difficulty, best_score)
        return _found(best_text, guidance)

    return ExtractionResult(
        success=False,
        error=f"Could not find snippet matching keywords: {', '.join(guidance.keywords)}",
    )


def _best_window(windows, keywords: Sequence[str]) -> tuple[str | None, float]:
    """Return ``(text, score)`` of the highest-scoring window; earliest wins ties."""
    best_text: str | None = None
    best_score = 0.0
    for window in windows:
        text = join_lines(window)
        score = keyword_score(text, keywords)
        if best_text is None or score > best_score:
            best_text, best_score = text, score
    return best_text, best_score
