from typing import Dict, List

from desidub.models.records import AnimeInfo, Episode
from desidub.scrapers.base import BaseDesidub
from desidub.scrapers.dom import Document, joined_text
from desidub.utils.helpers import first_number, parse_leading_int
from desidub.utils.http_client import http_client
from desidub.utils.logger import scraper_logger

# ===========================
# Episode Normalization
# ===========================
def normalize_episodes(episodes: List[Episode]) -> List[Episode]:
    """Deduplicate episodes by number and sort them ascending.

    When several episodes share a number the last one seen wins, so a
    fallback listing appended after the primary one overrides it.
    """
    by_number: Dict[int, Episode] = {}
    for episode in episodes:
        by_number[episode.number] = episode
    return sorted(by_number.values(), key=lambda episode: episode.number)

# ===========================
# Anime Info Scraper Class
# ===========================
class AnimeScraper(BaseDesidub):

    async def scrape(self, anime_id: str) -> AnimeInfo:
        html = await http_client.fetch_html(f"{self.base_url}/anime/{anime_id}/")
        return self.parse(html, anime_id)

    def parse(self, html: str, anime_id: str) -> AnimeInfo:
        document = self.load(html)

        title = joined_text(document.select("h1.entry-title"))
        description = document.select_first(".entry-content p")
        poster = document.select_first(".entry-content img")

        episodes = self.parse_episode_list(document)
        if not episodes:
            scraper_logger.debug(f"[Desidub] No episode list for '{anime_id}', trying carousel")
            episodes = self.parse_episode_carousel(document)

        episodes = normalize_episodes(episodes)
        scraper_logger.debug(f"[Desidub] Anime '{anime_id}': {len(episodes)} episodes")

        return AnimeInfo(
            id=anime_id,
            title=title,
            description=description.text().strip() if description else "",
            poster=poster.attr("src") if poster else None,
            episodes=episodes
        )

    def parse_episode_list(self, document: Document) -> List[Episode]:
        episodes = []

        for item in document.select(".episode-list-display-box .episode-list-item"):
            href = item.attr("href")
            number = parse_leading_int(item.attr("data-episode-search-query"))
            if not href or number is None:
                continue

            title = joined_text(item.select(".episode-list-item-title"))
            episodes.append(Episode(
                number=number,
                title=title or f"Episode {number}",
                url=href,
                id=self.extract_watch_id(href)
            ))

        return episodes

    def parse_episode_carousel(self, document: Document) -> List[Episode]:
        episodes = []

        for link in document.select(".swiper-slide a[href*='/watch/']"):
            href = link.attr("href")
            if not href:
                continue

            text = joined_text(link.select("span"))
            number = first_number(text)
            episodes.append(Episode(
                number=number if number is not None else len(episodes) + 1,
                title=text,
                url=href,
                id=self.extract_watch_id(href)
            ))

        return episodes

# ===========================
# Global Anime Scraper Instance
# ===========================
anime_scraper = AnimeScraper()
