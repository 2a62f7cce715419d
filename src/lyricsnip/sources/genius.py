"""Source for genius.com song pages.

Page structure (lyrics are split across several containers, one per
ad break)::

    <div data-lyrics-container="true" class="Lyrics__Container-sc-...">
        [Verse 1]<br>
        <a href="/123/annotation"><span>Is this the real life?</span></a><br>
        Is this just fantasy?<br>
        ...
    </div>

Three extraction strategies are tried in order:

1. ``div[data-lyrics-container="true"]``
2. divs whose class starts with ``Lyrics__Container`` (older markup)
3. ``lyrics.text`` in a JSON-LD ``<script type="application/ld+json">`` block
"""

import json
import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from loguru import logger

from ..exceptions import ParseError
from .base import LyricsSource

_CONTAINER_CLASS_RE = re.compile(r"^Lyrics__Container")


class GeniusSource(LyricsSource):
    """Source for genius.com song pages."""

    @classmethod
    def can_handle(cls, url: str) -> bool:
        return "genius.com/" in url

    def extract(self, html: str, url: str) -> str:
        soup = BeautifulSoup(html, "html.parser")

        containers = soup.find_all("div", attrs={"data-lyrics-container": "true"})
        if not containers:
            containers = soup.find_all("div", class_=_CONTAINER_CLASS_RE)
        if containers:
            text = _clean_lyrics("\n".join(_container_text(c) for c in containers))
            if text:
                return text

        lyrics = _json_ld_lyrics(soup)
        if lyrics:
            return lyrics

        logger.warning(
            "Genius extraction failed for {} (html length {}, lyrics-container present: {})",
            url,
            len(html),
            "lyrics-container" in html,
        )
        raise ParseError(url, "Could not find lyrics (tried lyrics containers and JSON-LD)")


def _container_text(container: Tag) -> str:
    """Flatten a lyrics container to text, turning ``<br>`` into newlines.

    Annotation links and formatting tags keep their text; HTML comments and
    script or style contents are dropped.
    """
    parts: list[str] = []
    for node in container.descendants:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            if node.find_parent(["script", "style"]) is None:
                parts.append(str(node))
        elif isinstance(node, Tag) and node.name == "br":
            parts.append("\n")
    return "".join(parts)


def _clean_lyrics(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\xa0", " ")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _json_ld_lyrics(soup: BeautifulSoup) -> str | None:
    for script in soup.find_all("script", type="application/ld+json"):
        if not script.string:
            continue
        try:
            data = json.loads(script.string)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            lyrics = data.get("lyrics")
            if isinstance(lyrics, dict) and lyrics.get("text"):
                return lyrics["text"]
    return None
