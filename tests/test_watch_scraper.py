"""
Tests for the watch page parser.
"""

from desidub.models.records import EncryptedSource, IframeSource
from desidub.scrapers.watch import watch_scraper

from pages import WATCH_HTML, WATCH_NO_HEADING_HTML


def test_iframes_and_single_encrypted_config():
    watch = watch_scraper.parse(WATCH_HTML, "naruto-episode-1")

    iframes = [source for source in watch.sources if isinstance(source, IframeSource)]
    encrypted = [source for source in watch.sources if isinstance(source, EncryptedSource)]

    assert [source.url for source in iframes] == [
        "https://player.example/embed/1",
        "https://player.example/embed/2",
    ]
    assert len(encrypted) == 1
    assert encrypted[0].config == "U2FsdGVkX1+abc/def=="
    assert watch.title == "Naruto Episode 1"


def test_watch_json_tags_sources():
    payload = watch_scraper.parse(WATCH_HTML, "naruto-episode-1").to_json()

    assert [source["type"] for source in payload["sources"]] == ["iframe", "iframe", "encrypted"]
    assert payload["sources"][0] == {"type": "iframe", "url": "https://player.example/embed/1", "name": "Iframe"}
    assert payload["sources"][2]["description"].startswith("Encrypted player config")


def test_title_falls_back_to_document_title():
    watch = watch_scraper.parse(WATCH_NO_HEADING_HTML, "bleach-episode-2")

    assert watch.title == "Bleach Episode 2"
    assert len(watch.sources) == 1
    assert watch.sources[0].type == "iframe"


def test_ignored_hosts_are_not_player_urls():
    assert watch_scraper.is_player_url("https://player.example/embed/1")
    assert not watch_scraper.is_player_url("https://www.google.com/recaptcha")
    assert not watch_scraper.is_player_url("https://site.disqus.com/embed")
    assert not watch_scraper.is_player_url(None)


def test_site_suffix_is_stripped_once_from_document_title():
    html = "<html><head><title>Foo - Desi Dub Anime - Desi Dub Anime</title></head><body></body></html>"

    assert watch_scraper.parse(html, "foo").title == "Foo - Desi Dub Anime"


def test_unquoted_config_is_skipped_for_a_later_script():
    html = """
    <html><body>
    <script>var js_configs = window.fallback;</script>
    <script>var js_configs = 'second-payload';</script>
    </body></html>
    """
    encrypted = [source for source in watch_scraper.parse(html, "x").sources if isinstance(source, EncryptedSource)]

    assert [source.config for source in encrypted] == ["second-payload"]
