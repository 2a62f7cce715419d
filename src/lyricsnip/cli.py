import json
import sys
from pathlib import Path

import click
from loguru import logger

from . import config
from .exceptions import FetchError, GuidanceError, LyricSnipError, ParseError, UnsupportedSourceError
from .extractor import extract_all_snippets
from .fallback import extract_fallback_snippets
from .models import BatchResult, LyricSection, SnippetGuidance
from .parser import parse_lyrics_into_sections
from .registry import get_source


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
    )


def _read_lyrics(source: str) -> str:
    """Return raw lyrics from a URL, a local file, or ``-`` (stdin)."""
    if source == "-":
        return click.get_text_stream("stdin").read()
    if source.startswith(("http://", "https://")):
        return get_source(source).scrape(source)
    return Path(source).read_text(encoding="utf-8")


def load_guidances(path: str) -> list[SnippetGuidance]:
    """Load guidance from a JSON file.

    Accepts a bare list of guidance objects or a song-selection object with a
    ``snippetGuidance`` list.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise GuidanceError(f"{path} is not UTF-8 text") from exc
    except json.JSONDecodeError as exc:
        raise GuidanceError(f"{path} is not valid JSON ({exc.msg})") from exc

    if isinstance(data, dict) and "snippetGuidance" in data:
        data = data["snippetGuidance"]
    if not isinstance(data, list):
        raise GuidanceError(f"{path} must contain a list of guidance objects")
    return [SnippetGuidance.from_dict(item) for item in data]


def _render_sections(sections: list[LyricSection]) -> str:
    parts: list[str] = []
    for section in sections:
        if parts:
            parts.append("")
        parts.append(f"[{section.type} {section.number}]")
        parts.extend(section.lines)
    return "\n".join(parts)


def _render_result(result: BatchResult) -> str:
    return "\n".join(f"{s.difficulty}: {s.text}" for s in result.snippets)


@click.command()
@click.argument("source")
@click.option("-g", "--guidance", "guidance_path", default=None, metavar="PATH",
              type=click.Path(exists=True, dir_okay=False),
              help="JSON file with snippet guidance (default: guess by section type).")
@click.option("--sections", "show_sections", is_flag=True, default=False,
              help="Print the parsed sections instead of snippets.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the extraction result as JSON.")
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True,
              help="Log level for diagnostics on stderr.")
def main(source: str, guidance_path: str | None, show_sections: bool, as_json: bool,
         log_level: str) -> None:
    """Extract hard/medium/easy lyric snippets for a song puzzle.

    \b
    SOURCE is one of:
      - an lrclib.net/api URL or a genius.com song page
      - a path to a plain-text lyrics file
      - "-" to read lyrics from stdin
    """
    _configure_logging(log_level)

    # --- Load lyrics ---
    try:
        lyrics = _read_lyrics(source)
    except UnsupportedSourceError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Supported sources: lrclib.net/api, genius.com", err=True)
        sys.exit(1)
    except FetchError as exc:
        msg = f"Error: Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        click.echo(msg, err=True)
        sys.exit(1)
    except ParseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except UnicodeDecodeError:
        click.echo(f"Error: Could not read {source}: not UTF-8 text", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"Error: Could not read {source}: {exc.strerror}", err=True)
        sys.exit(1)

    sections = parse_lyrics_into_sections(lyrics)
    if not sections:
        click.echo("Error: No lyrics found", err=True)
        sys.exit(1)

    if show_sections:
        click.echo(_render_sections(sections))
        return

    # --- Extract ---
    try:
        if guidance_path:
            result = extract_all_snippets(sections, load_guidances(guidance_path))
        else:
            result = extract_fallback_snippets(sections)
    except LyricSnipError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    # --- Output ---
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.snippets:
        click.echo(_render_result(result))

    if not result.success:
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)
