from typing import Any, Dict

from fastapi import APIRouter, Path, Query
from fastapi.responses import JSONResponse

from desidub.config.settings import settings
from desidub.models.records import Record
from desidub.services.desidub import desidub_service
from desidub.utils.cache import result_cache
from desidub.utils.errors import DesidubError, HandlerFailure
from desidub.utils.logger import api_logger


# ===========================
# Router Instance
# ===========================
router = APIRouter()
provider_router = APIRouter(prefix=f"/{settings.PROVIDER_PREFIX}")


# ===========================
# Response Envelopes
# ===========================
def success_envelope(record: Record) -> Dict[str, Any]:
    return {"provider": settings.PROVIDER_NAME, "status": 200, "data": record.to_json()}


def failure_response(error: DesidubError) -> JSONResponse:
    return JSONResponse(
        content={"provider": settings.PROVIDER_NAME, "status": error.status, "message": error.message},
        status_code=error.status
    )


# ===========================
# Utility Endpoints
# ===========================
@router.get("/health", summary="Health check", description="Liveness check, does not contact the upstream site")
async def health():
    return JSONResponse(content={"status": "ok"})


# ===========================
# Provider Endpoints
# ===========================
@provider_router.get("/home", summary="Home", description="Spotlight, trending and latest sections")
async def get_home():
    home = await desidub_service.get_home()
    return JSONResponse(content=success_envelope(home))


@provider_router.get("/search/{query}", summary="Search", description="Paginated search results")
async def search(
    query: str = Path(..., description="Search query"),
    page: int = Query(1, ge=1, description="Result page")
):
    api_logger.debug(f"Search: '{query}' page {page}")
    results = await desidub_service.search(query, page)
    return JSONResponse(content=success_envelope(results))


@provider_router.get("/anime/{anime_id}", summary="Anime info", description="Title metadata and episode list")
async def get_anime_info(
    anime_id: str = Path(..., description="Anime identifier")
):
    info = await desidub_service.get_anime_info(anime_id)
    return JSONResponse(content=success_envelope(info))


@provider_router.get("/watch/{episode_id}", summary="Watch", description="Playback source candidates for an episode")
async def get_watch(
    episode_id: str = Path(..., description="Episode identifier")
):
    try:
        watch = await desidub_service.get_watch(episode_id)
        return JSONResponse(content=success_envelope(watch))
    except Exception as e:
        failure = HandlerFailure.from_exception(e)
        api_logger.error(f"Error in watch handler: {type(e).__name__} ({failure.status})")
        return failure_response(failure)


@provider_router.get("/cache/stats", summary="Cache statistics", description="Entries, in-flight producers, hits and misses")
async def cache_stats():
    return JSONResponse(content=result_cache.stats())


router.include_router(provider_router)
