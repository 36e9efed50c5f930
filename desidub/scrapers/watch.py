import re
from typing import List, Optional

from desidub.config.settings import settings
from desidub.models.records import EncryptedSource, IframeSource, Source, WatchInfo
from desidub.scrapers.base import BaseDesidub
from desidub.scrapers.dom import Document, joined_text
from desidub.utils.http_client import http_client
from desidub.utils.logger import scraper_logger

# ===========================
# Constants
# ===========================
JS_CONFIGS_MARKER = "var js_configs"
JS_CONFIGS_PATTERN = re.compile(r"""var js_configs\s*=\s*["']([^"']+)["']""")

# ===========================
# Watch Scraper Class
# ===========================
class WatchScraper(BaseDesidub):

    async def scrape(self, episode_id: str) -> WatchInfo:
        url = f"{self.base_url}/watch/{episode_id}/"
        scraper_logger.info(f"Fetching watch page: {url}")

        html = await http_client.fetch_html(url)
        scraper_logger.debug(f"Fetched HTML length: {len(html)}")
        return self.parse(html, episode_id)

    def parse(self, html: str, episode_id: str) -> WatchInfo:
        document = self.load(html)

        title = self.parse_title(document)
        scraper_logger.debug(f"Parsed title: {title}")

        sources: List[Source] = self.find_iframe_sources(document)
        encrypted = self.find_encrypted_config(document)
        if encrypted:
            sources.append(encrypted)

        return WatchInfo(id=episode_id, title=title, sources=sources)

    @staticmethod
    def parse_title(document: Document) -> str:
        title = joined_text(document.select("h1"))
        if not title:
            title = joined_text(document.select("title")).replace(settings.SITE_TITLE_SUFFIX, "", 1).strip()
        return title

    @staticmethod
    def is_player_url(url: Optional[str]) -> bool:
        if not url:
            return False
        return not any(host in url for host in settings.IGNORED_IFRAME_HOSTS)

    def find_iframe_sources(self, document: Document) -> List[Source]:
        sources: List[Source] = []

        for iframe in document.select("iframe"):
            src = iframe.attr("src") or iframe.attr("data-src")
            if self.is_player_url(src):
                scraper_logger.debug(f"Found iframe source: {src}")
                sources.append(IframeSource(url=src))

        return sources

    @staticmethod
    def find_encrypted_config(document: Document) -> Optional[EncryptedSource]:
        for index, script in enumerate(document.select("script")):
            try:
                content = script.text()
            except UnicodeDecodeError as e:
                scraper_logger.warning(f"Error decoding script {index}: {type(e).__name__}")
                continue

            if JS_CONFIGS_MARKER not in content:
                continue

            match = JS_CONFIGS_PATTERN.search(content)
            if match:
                scraper_logger.debug("Found js_configs match.")
                return EncryptedSource(config=match.group(1))

        return None

# ===========================
# Global Watch Scraper Instance
# ===========================
watch_scraper = WatchScraper()
