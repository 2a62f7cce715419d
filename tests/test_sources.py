import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from lyricsnip.exceptions import FetchError, ParseError, UnsupportedSourceError
from lyricsnip.parser import parse_lyrics_into_sections
from lyricsnip.registry import get_source
from lyricsnip.sources.genius import GeniusSource
from lyricsnip.sources.lrclib import LrclibSource, lrclib_url

GENIUS_URL = "https://genius.com/Queen-bohemian-rhapsody-lyrics"

GENIUS_HTML = """
<html><body>
<h1>Bohemian Rhapsody</h1>
<div data-lyrics-container="true" class="Lyrics__Container-sc-1ynbvzw-1">[Verse 1]<br/>\
<a href="/123/annotation"><span>Is this the real life?</span></a><br/>\
Is this just fantasy?<br/></div>
<div data-lyrics-container="true">[Chorus]<br/>Mama &amp; papa<br/><i>ooh</i></div>
</body></html>
"""


def _response(status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def test_registry_genius():
    assert isinstance(get_source(GENIUS_URL), GeniusSource)


def test_registry_lrclib():
    assert isinstance(get_source(lrclib_url("Queen", "Bohemian Rhapsody")), LrclibSource)


def test_registry_unsupported():
    with pytest.raises(UnsupportedSourceError):
        get_source("https://example.com/song")


# ---------------------------------------------------------------------------
# GeniusSource
# ---------------------------------------------------------------------------


def test_genius_can_handle():
    assert GeniusSource.can_handle(GENIUS_URL)
    assert not GeniusSource.can_handle("https://lrclib.net/api/get?track_name=x")


def test_genius_extract_containers():
    text = GeniusSource().extract(GENIUS_HTML, GENIUS_URL)
    assert text.startswith("[Verse 1]\nIs this the real life?\nIs this just fantasy?")
    assert "Mama & papa" in text
    assert "ooh" in text
    assert "<" not in text


def test_genius_extract_parses_into_sections():
    sections = parse_lyrics_into_sections(GeniusSource().extract(GENIUS_HTML, GENIUS_URL))
    assert [s.type for s in sections] == ["verse", "chorus"]
    assert sections[0].lines == ["Is this the real life?", "Is this just fantasy?"]


def test_genius_extract_legacy_class():
    html = '<div class="Lyrics__Container-abc">[Bridge]<br>Galileo<br>Figaro</div>'
    assert GeniusSource().extract(html, GENIUS_URL) == "[Bridge]\nGalileo\nFigaro"


def test_genius_extract_json_ld():
    payload = json.dumps({"@type": "MusicRecording", "lyrics": {"text": "[Intro]\nGalileo"}})
    html = f'<script type="application/ld+json">{payload}</script>'
    assert GeniusSource().extract(html, GENIUS_URL) == "[Intro]\nGalileo"


def test_genius_extract_collapses_blank_runs():
    html = '<div data-lyrics-container="true">One<br><br><br><br>Two</div>'
    assert GeniusSource().extract(html, GENIUS_URL) == "One\n\nTwo"


def test_genius_extract_nothing_found():
    with pytest.raises(ParseError):
        GeniusSource().extract("<html><body><p>No lyrics</p></body></html>", GENIUS_URL)


def test_genius_extract_drops_html_comments():
    html = '<div data-lyrics-container="true">[Verse]<br/>Hello<!-- tracking note --><br/>World</div>'
    assert GeniusSource().extract(html, GENIUS_URL) == "[Verse]\nHello\nWorld"


# ---------------------------------------------------------------------------
# LrclibSource
# ---------------------------------------------------------------------------


def test_lrclib_url_get():
    url = lrclib_url("Queen", "Bohemian Rhapsody")
    assert url.startswith("https://lrclib.net/api/get?")
    params = httpx.URL(url).params
    assert params["artist_name"] == "Queen"
    assert params["track_name"] == "Bohemian Rhapsody"


def test_lrclib_url_search():
    assert lrclib_url("Queen", "Bohemian Rhapsody", search=True).startswith(
        "https://lrclib.net/api/search?"
    )


def test_lrclib_can_handle():
    assert LrclibSource.can_handle(lrclib_url("a", "b"))
    assert LrclibSource.can_handle(lrclib_url("a", "b", search=True))
    assert not LrclibSource.can_handle(GENIUS_URL)


def test_lrclib_extract_get_record():
    payload = json.dumps({"trackName": "Yesterday", "plainLyrics": "Yesterday\nAll my troubles"})
    text = LrclibSource().extract(payload, lrclib_url("The Beatles", "Yesterday"))
    assert text == "Yesterday\nAll my troubles"


def test_lrclib_extract_missing_lyrics():
    payload = json.dumps({"trackName": "Instrumental", "plainLyrics": None})
    with pytest.raises(ParseError):
        LrclibSource().extract(payload, lrclib_url("x", "Instrumental"))


def test_lrclib_extract_invalid_json():
    with pytest.raises(ParseError):
        LrclibSource().extract("<html>", lrclib_url("x", "y"))


def test_lrclib_search_prefers_matching_result():
    payload = json.dumps([
        {"artistName": "Cover Band", "trackName": "Something Else", "plainLyrics": "wrong"},
        {"artistName": "Beatles", "trackName": "Yesterday (Remastered)", "plainLyrics": "right"},
    ])
    url = lrclib_url("The Beatles", "Yesterday", search=True)
    assert LrclibSource().extract(payload, url) == "right"


def test_lrclib_search_falls_back_to_first_with_lyrics():
    payload = json.dumps([
        {"artistName": "A", "trackName": "B", "plainLyrics": None},
        {"artistName": "C", "trackName": "D", "plainLyrics": "first with lyrics"},
    ])
    url = lrclib_url("Nobody", "Nothing", search=True)
    assert LrclibSource().extract(payload, url) == "first with lyrics"


def test_lrclib_search_empty():
    with pytest.raises(ParseError):
        LrclibSource().extract("[]", lrclib_url("a", "b", search=True))


# ---------------------------------------------------------------------------
# fetch / scrape
# ---------------------------------------------------------------------------


def test_scrape_fetches_and_extracts():
    payload = json.dumps({"plainLyrics": "Hello\nIt's me"})
    with patch("lyricsnip.sources.base.httpx.get", return_value=_response(text=payload)) as get:
        text = LrclibSource().scrape(lrclib_url("Adele", "Hello"))
    assert text == "Hello\nIt's me"
    assert "User-Agent" in get.call_args.kwargs["headers"]


def test_fetch_http_error():
    with patch("lyricsnip.sources.base.httpx.get", return_value=_response(status_code=404)):
        with pytest.raises(FetchError) as exc_info:
            GeniusSource().fetch(GENIUS_URL)
    assert exc_info.value.status_code == 404


def test_fetch_transport_error():
    with patch("lyricsnip.sources.base.httpx.get", side_effect=httpx.ConnectError("boom")):
        with pytest.raises(FetchError) as exc_info:
            GeniusSource().fetch(GENIUS_URL)
    assert exc_info.value.status_code == 0


# ---------------------------------------------------------------------------
# LRCLIB exact-then-search lookup
# ---------------------------------------------------------------------------

QUEEN_SEARCH = json.dumps([
    {"artistName": "Queen", "trackName": "Bohemian Rhapsody", "plainLyrics": "Is this the real life"},
])


def _lrclib_server(get_response):
    """Fake ``httpx.get``: *get_response* for /api/get, a Queen hit for /api/search."""

    def fake_get(url, **kwargs):
        if "/api/search" in url:
            return _response(text=QUEEN_SEARCH)
        return get_response

    return fake_get


def test_lrclib_get_404_falls_back_to_search():
    with patch("lyricsnip.sources.base.httpx.get",
               side_effect=_lrclib_server(_response(status_code=404))) as get:
        text = LrclibSource().scrape(lrclib_url("Queen", "Bohemian Rhapsody"))
    assert text == "Is this the real life"
    urls = [c.args[0] for c in get.call_args_list]
    assert "/api/get?" in urls[0]
    assert "/api/search?" in urls[1]
    assert httpx.URL(urls[1]).params["track_name"] == "Bohemian Rhapsody"


def test_lrclib_get_without_lyrics_falls_back_to_search():
    empty = _response(text=json.dumps({"trackName": "Bohemian Rhapsody", "plainLyrics": None}))
    with patch("lyricsnip.sources.base.httpx.get", side_effect=_lrclib_server(empty)):
        text = LrclibSource().scrape(lrclib_url("Queen", "Bohemian Rhapsody"))
    assert text == "Is this the real life"


def test_lrclib_get_server_error_is_not_retried():
    with patch("lyricsnip.sources.base.httpx.get",
               side_effect=_lrclib_server(_response(status_code=500))) as get:
        with pytest.raises(FetchError) as exc_info:
            LrclibSource().scrape(lrclib_url("Queen", "Bohemian Rhapsody"))
    assert exc_info.value.status_code == 500
    assert get.call_count == 1


def test_lrclib_find_prefers_exact_match():
    exact = _response(text=json.dumps({"plainLyrics": "exact lyrics"}))
    with patch("lyricsnip.sources.base.httpx.get", side_effect=_lrclib_server(exact)) as get:
        assert LrclibSource().find("Queen", "Bohemian Rhapsody") == "exact lyrics"
    assert get.call_count == 1


def test_lrclib_find_searches_on_miss():
    with patch("lyricsnip.sources.base.httpx.get",
               side_effect=_lrclib_server(_response(status_code=404))):
        assert LrclibSource().find("Queen", "Bohemian Rhapsody") == "Is this the real life"
