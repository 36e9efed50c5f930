from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ===========================
# Base Record
# ===========================
class Record(BaseModel):

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

# ===========================
# Home Records
# ===========================
class SpotlightItem(Record):
    id: str
    title: str
    description: str = ""
    poster: Optional[str] = None
    url: str
    is_dub: bool = True


class TrendingItem(Record):
    id: str
    title: str
    poster: Optional[str] = None
    url: str
    rank: Optional[int] = Field(default=None, gt=0)


class LatestItem(Record):
    id: str
    title: str
    poster: Optional[str] = None
    url: str
    latest_episode: Optional[int] = None


class LatestSection(Record):
    title: str
    items: List[LatestItem] = Field(min_length=1)


class HomePage(Record):
    spotlight: List[SpotlightItem] = []
    trending: List[TrendingItem] = []
    latest: List[LatestSection] = []

# ===========================
# Search Records
# ===========================
class SearchResult(Record):
    id: Optional[str] = None
    title: str
    poster: Optional[str] = None
    url: str


class SearchPage(Record):
    results: List[SearchResult] = []
    page: int = Field(default=1, ge=1)
    has_next_page: bool = False

# ===========================
# Anime Info Records
# ===========================
class Episode(Record):
    number: int
    title: str
    url: str
    id: Optional[str] = None


class AnimeInfo(Record):
    id: str
    title: str = ""
    description: str = ""
    poster: Optional[str] = None
    episodes: List[Episode] = []

# ===========================
# Watch Records
# ===========================
class IframeSource(Record):
    type: Literal["iframe"] = "iframe"
    url: str
    name: str = "Iframe"


class EncryptedSource(Record):
    """Opaque player configuration found in the watch page.

    ``config`` is passed through untouched; decoding it needs an external
    decryption step that is not part of this package.
    """

    type: Literal["encrypted"] = "encrypted"
    config: str
    description: str = "Encrypted player config. Requires decryption (AES/Salted)."


Source = Annotated[Union[IframeSource, EncryptedSource], Field(discriminator="type")]


class WatchInfo(Record):
    id: str
    title: str = ""
    sources: List[Source] = []
