from desidub.config.settings import settings
from desidub.models.records import AnimeInfo, HomePage, SearchPage, WatchInfo
from desidub.scrapers.anime import anime_scraper
from desidub.scrapers.home import home_scraper
from desidub.scrapers.search import search_scraper
from desidub.scrapers.watch import watch_scraper
from desidub.utils.cache import ResultCache, result_cache
from desidub.utils.helpers import create_cache_key

# ===========================
# Desidub Service Class
# ===========================
class DesidubService:
    """Cache-backed entry points for the four page kinds.

    Each call builds a cache key and hands the cache a producer that fetches
    and parses the page; fetch failures propagate to the caller unchanged.
    """

    def __init__(self, cache: ResultCache = result_cache):
        self.cache = cache

    async def get_home(self) -> HomePage:
        return await self.cache.get_or_set(
            create_cache_key("home"),
            settings.HOME_CACHE_TTL,
            home_scraper.scrape
        )

    async def search(self, query: str, page: int = 1) -> SearchPage:
        async def producer():
            return await search_scraper.scrape(query, page)

        return await self.cache.get_or_set(
            create_cache_key("search", query, page),
            settings.SEARCH_CACHE_TTL,
            producer
        )

    async def get_anime_info(self, anime_id: str) -> AnimeInfo:
        async def producer():
            return await anime_scraper.scrape(anime_id)

        return await self.cache.get_or_set(
            create_cache_key("anime", anime_id),
            settings.INFO_CACHE_TTL,
            producer
        )

    async def get_watch(self, episode_id: str) -> WatchInfo:
        async def producer():
            return await watch_scraper.scrape(episode_id)

        return await self.cache.get_or_set(
            create_cache_key("watch", episode_id),
            settings.WATCH_CACHE_TTL,
            producer
        )

# ===========================
# Global Desidub Service Instance
# ===========================
desidub_service = DesidubService()
