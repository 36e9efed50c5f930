import asyncio
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from desidub.api.routes import failure_response, router
from desidub.config.settings import settings
from desidub.utils.cache import cleanup_expired_cache, result_cache
from desidub.utils.errors import DesidubError
from desidub.utils.http_client import http_client
from desidub.utils.logger import setup_logger, server_logger, api_logger


# ===========================
# Logger Setup
# ===========================
setup_logger(settings.LOG_LEVEL)


# ===========================
# Custom Middleware
# ===========================
class LoguruMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            api_logger.error(f"Exception: {type(e).__name__}")
            raise
        finally:
            process_time = time.time() - start_time
            if request.url.path != "/health":
                api_logger.debug(f"{request.method} {request.url.path} - {response.status_code if 'response' in locals() else '500'} - {process_time:.2f}s")
        return response


# ===========================
# Application Lifecycle
# ===========================
@asynccontextmanager
async def lifespan(app: FastAPI):
    cleanup_task = asyncio.create_task(cleanup_expired_cache(result_cache))

    yield

    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass

    await http_client.close()


# ===========================
# FastAPI Application Setup
# ===========================
app = FastAPI(
    title=settings.PROVIDER_NAME,
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(LoguruMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


# ===========================
# Error Mapping
# ===========================
@app.exception_handler(DesidubError)
async def desidub_error_handler(request: Request, error: DesidubError):
    api_logger.error(f"{request.url.path} failed: {type(error).__name__} ({error.status})")
    return failure_response(error)


# ===========================
# Application Entry Point
# ===========================
if __name__ == "__main__":
    server_logger.info(f"Starting {settings.PROVIDER_NAME} v{app.version}")
    server_logger.info(f"Server: http://localhost:{settings.PORT}/")
    server_logger.info(f"Source: {settings.DESIDUB_URL}")
    server_logger.info(f"Proxy: {'enabled' if settings.PROXY_URL else 'disabled'}")
    server_logger.info(f"Log level: {settings.LOG_LEVEL}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.PORT,
        log_config=None
    )
