from typing import Optional

from desidub.models.records import SearchPage, SearchResult
from desidub.scrapers.base import BaseDesidub
from desidub.scrapers.dom import Element, joined_text
from desidub.utils.helpers import build_search_url, last_path_segment
from desidub.utils.http_client import http_client
from desidub.utils.logger import scraper_logger

# ===========================
# Search Scraper Class
# ===========================
class SearchScraper(BaseDesidub):

    async def scrape(self, query: str, page: int = 1) -> SearchPage:
        html = await http_client.fetch_html(build_search_url(query, page))
        return self.parse(html, query, page)

    def parse(self, html: str, query: str, page: int = 1) -> SearchPage:
        document = self.load(html)

        results = []
        for article in document.select("div#archive-content article"):
            result = self.parse_article(article)
            if result:
                results.append(result)

        has_next_page = document.select_first(".pagination .next") is not None

        scraper_logger.debug(f"[Desidub] Search '{query}' page {page}: {len(results)} results (next: {has_next_page})")
        return SearchPage(results=results, page=page, has_next_page=has_next_page)

    def parse_article(self, article: Element) -> Optional[SearchResult]:
        title = joined_text(article.select_where(lambda e: e.tag == "h3" or e.has_class("entry-title")))
        link = self.extract_link(article)
        poster = self.extract_poster(article, lazy_first=False)

        if not self.is_complete(title, link):
            return None

        return SearchResult(
            id=self.extract_anime_id(link) or last_path_segment(link),
            title=title,
            poster=poster,
            url=link
        )

# ===========================
# Global Search Scraper Instance
# ===========================
search_scraper = SearchScraper()
