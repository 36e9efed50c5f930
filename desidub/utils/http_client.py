from typing import Optional, Dict

import httpx

from desidub.config.settings import settings
from desidub.utils.errors import FetchError
from desidub.utils.logger import http_logger

# ===========================
# Constants
# ===========================
TIMEOUT_STATUS = 504
TRANSPORT_ERROR_STATUS = 502

# ===========================
# HTTP Client Singleton
# ===========================
class HTTPClient:

    _instance: Optional['HTTPClient'] = None
    _client: Optional[httpx.AsyncClient] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @staticmethod
    def default_headers() -> Dict[str, str]:
        return {
            "User-Agent": settings.USER_AGENT,
            "Accept": settings.ACCEPT_HEADER,
            "Referer": settings.DESIDUB_URL,
        }

    async def get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            client_args = {
                "timeout": httpx.Timeout(float(settings.HTTP_TIMEOUT)),
                "follow_redirects": True,
                "headers": self.default_headers(),
                "limits": httpx.Limits(max_connections=None, max_keepalive_connections=None)
            }
            if settings.PROXY_URL:
                client_args["proxy"] = settings.PROXY_URL
            self._client = httpx.AsyncClient(**client_args)
        return self._client

    def set_client(self, client: Optional[httpx.AsyncClient]):
        self._client = client

    async def get(self, url: str, **kwargs) -> httpx.Response:
        client = await self.get_client()
        return await client.get(url, **kwargs)

    async def fetch_html(self, url: str) -> str:
        http_logger.info(f"Fetching: {url}")

        try:
            response = await self.get(url, headers=self.default_headers())
        except httpx.TimeoutException as e:
            http_logger.error(f"Timeout fetching {url}: {type(e).__name__}")
            raise FetchError(url, TIMEOUT_STATUS) from e
        except httpx.TransportError as e:
            http_logger.error(f"Transport error fetching {url}: {type(e).__name__}")
            raise FetchError(url, TRANSPORT_ERROR_STATUS) from e

        if not response.is_success:
            http_logger.error(f"Failed to fetch {url}: {response.status_code} {response.reason_phrase}")
            raise FetchError(url, response.status_code)

        return response.text

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

# ===========================
# Global HTTP Client Instance
# ===========================
http_client = HTTPClient()
