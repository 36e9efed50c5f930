from typing import List, Optional

from desidub.models.records import HomePage, LatestItem, LatestSection, SpotlightItem, TrendingItem
from desidub.scrapers.base import BaseDesidub
from desidub.scrapers.dom import Document, Element, joined_text
from desidub.utils.helpers import parse_leading_int
from desidub.utils.http_client import http_client
from desidub.utils.logger import scraper_logger

# ===========================
# Constants
# ===========================
EXCLUDED_SECTION_HEADINGS = ("Trending", "Spotlight")
EPISODE_LABEL_PREFIX = "E "
LATEST_ROW_CLASS = "odd:bg-tertiary"

# ===========================
# Home Scraper Class
# ===========================
class HomeScraper(BaseDesidub):

    async def scrape(self) -> HomePage:
        html = await http_client.fetch_html(self.base_url)
        return self.parse(html)

    def parse(self, html: str) -> HomePage:
        document = self.load(html)

        home = HomePage(
            spotlight=self.parse_spotlight(document),
            trending=self.parse_trending(document),
            latest=self.parse_latest(document)
        )

        scraper_logger.debug(
            f"[Desidub] Home: {len(home.spotlight)} spotlight, "
            f"{len(home.trending)} trending, {len(home.latest)} sections"
        )
        return home

    def parse_spotlight(self, document: Document) -> List[SpotlightItem]:
        spotlight = []

        for slide in document.select(".swiper-slide"):
            title = self.first_title(slide.select("h2 span"))
            description = joined_text(slide.select_where(lambda e: e.has_class("text-[13px]", "line-clamp-2")))
            poster = self.extract_poster(slide)
            link = self.extract_link(slide, "a[href*='/anime/']")
            anime_id = self.extract_anime_id(link)

            if not self.is_complete(title, anime_id):
                continue

            spotlight.append(SpotlightItem(
                id=anime_id,
                title=title,
                description=description,
                poster=poster,
                url=link
            ))

        return spotlight

    def parse_trending(self, document: Document) -> List[TrendingItem]:
        trending = []

        for slide in document.select(".swiper-trending .swiper-slide"):
            title = self.first_title(slide.select("span"))
            poster = self.extract_poster(slide)
            link = self.extract_link(slide)
            anime_id = self.extract_anime_id(link)

            if not self.is_complete(title, anime_id):
                continue

            trending.append(TrendingItem(
                id=anime_id,
                title=title,
                poster=poster,
                url=link,
                rank=self.parse_rank(joined_text(slide.select("span.absolute")))
            ))

        return trending

    @staticmethod
    def parse_rank(label: str) -> Optional[int]:
        rank = parse_leading_int(label)
        return rank if rank and rank > 0 else None

    def parse_latest(self, document: Document) -> List[LatestSection]:
        latest = []

        for section in document.select("section"):
            heading = joined_text(section.select("h2"))
            if any(excluded in heading for excluded in EXCLUDED_SECTION_HEADINGS):
                continue

            items = []
            for node in section.select_where(self.is_latest_item):
                item = self.parse_latest_item(node)
                if item:
                    items.append(item)

            if items:
                latest.append(LatestSection(title=heading, items=items))

        return latest

    @staticmethod
    def is_latest_item(element: Element) -> bool:
        if element.tag == "li":
            return element.has_class(LATEST_ROW_CLASS)
        if element.tag == "div":
            return element.has_ancestor(lambda parent: parent.has_class("grid"))
        return False

    def parse_latest_item(self, node: Element) -> Optional[LatestItem]:
        link = self.extract_link(node)
        title = joined_text(node.select_where(lambda e: e.tag == "h3" or e.has_class("dynamic-name")))
        poster = self.extract_poster(node)
        anime_id = self.extract_anime_id(link)

        if not self.is_complete(title, anime_id):
            return None

        episode_label = joined_text(span for span in node.select("span") if EPISODE_LABEL_PREFIX in span.text())
        episode_label = episode_label.replace(EPISODE_LABEL_PREFIX, "", 1)

        return LatestItem(
            id=anime_id,
            title=title,
            poster=poster,
            url=link,
            latest_episode=parse_leading_int(episode_label)
        )

# ===========================
# Global Home Scraper Instance
# ===========================
home_scraper = HomeScraper()
