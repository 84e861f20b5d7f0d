import logging
import os
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_200_OK, HTTP_500_INTERNAL_SERVER_ERROR

from portfolio.database import Base, engine
from portfolio.routers.auth import router as auth_router
from portfolio.routers.contact import router as contact_router
from portfolio.routers.gear import router as gear_router
from portfolio.routers.health import router as health_router
from portfolio.routers.media import router as media_router
from portfolio.routers.posts import router as posts_router
from portfolio.routers.stats import router as stats_router

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(), format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# Ensure database tables exist
Base.metadata.create_all(bind=engine)

DEV_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


class RequestErrorMiddleware(BaseHTTPMiddleware):
    """Log every request and turn unhandled exceptions into JSON 500 responses.
    Handlers raise HTTPException for expected outcomes; anything else that
    escapes a handler is reported with its message and no further recovery."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        logger.info("%s %s", request.method, request.url.path)
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": str(exc)},
            )


def allowed_origins() -> list[str]:
    """
    Origins allowed by CORS. Outside production every origin is allowed.
    """
    if os.getenv("ENVIRONMENT", "development").lower() != "production":
        return ["*"]
    frontend_url = os.getenv("FRONTEND_URL")
    return [*DEV_ORIGINS, frontend_url] if frontend_url else list(DEV_ORIGINS)


app = FastAPI(title="Photographer Portfolio API")

app.add_middleware(RequestErrorMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Range", "X-Content-Range"],
    max_age=600,
)

app.include_router(auth_router)
app.include_router(posts_router)
app.include_router(gear_router)
app.include_router(contact_router)
app.include_router(stats_router)
app.include_router(media_router)
app.include_router(health_router)

logger.info("Storage backend: %s", os.getenv("STORAGE_BACKEND", "filesystem"))

__all__ = [
    "HTTP_200_OK",
    "HTTP_500_INTERNAL_SERVER_ERROR",
    "app",
]
