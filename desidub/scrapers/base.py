from typing import List, Optional

from desidub.config.settings import settings
from desidub.scrapers.dom import Document, Element, first_attr
from desidub.utils.helpers import segment_after

# ===========================
# Constants
# ===========================
ANIME_MARKER = "/anime/"
WATCH_MARKER = "/watch/"

# ===========================
# Base Desidub Scraper Class
# ===========================
class BaseDesidub:

    base_url = settings.DESIDUB_URL

    @staticmethod
    def load(html: str) -> Document:
        return Document(html)

    @staticmethod
    def extract_poster(element: Element, lazy_first: bool = True) -> Optional[str]:
        images = element.select("img")
        lazy = first_attr(images, "data-src")
        eager = first_attr(images, "src")
        if lazy_first:
            return lazy or eager
        return eager or lazy

    @staticmethod
    def extract_anime_id(url: Optional[str]) -> Optional[str]:
        return segment_after(url, ANIME_MARKER)

    @staticmethod
    def extract_watch_id(url: Optional[str]) -> Optional[str]:
        return segment_after(url, WATCH_MARKER)

    @staticmethod
    def extract_link(element: Element, selector: str = "a") -> Optional[str]:
        return first_attr(element.select(selector), "href")

    @staticmethod
    def is_title_span(element: Element) -> bool:
        if element.tag != "span":
            return False
        return element.has_attr("data-nt-title") or element.has_attr("data-en-title")

    @staticmethod
    def is_complete(*fields: Optional[str]) -> bool:
        return all(fields)

    def first_title(self, candidates: List[Element]) -> str:
        titles = [element for element in candidates if self.is_title_span(element)]
        return titles[0].text().strip() if titles else ""
