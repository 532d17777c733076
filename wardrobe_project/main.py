# wardrobe_project/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send
import logging

# Configuration and Routers
from config.settings import settings
from .apis import (
    user_routes, category_routes, wardrobe_routes, outfit_routes, shopping_routes,
    recommendation_routes, analytics_routes, tryon_routes
)
from .db.database import engine
from .db.schema_sync import init_db

MAX_REQUEST_BODY_BYTES = settings.MAX_REQUEST_BODY_MB * 1024 * 1024

# Setup basic logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting up {settings.PROJECT_NAME}...")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set: virtual try-on will only return placeholder images.")
    await init_db(engine)
    yield
    await engine.dispose()
    logger.info("Shutting down...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

def _body_too_large() -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"success": False, "error": f"Request body exceeds {settings.MAX_REQUEST_BODY_MB}MB."}
    )

class RequestBodyLimitMiddleware:
    """
    Rejects request bodies above MAX_REQUEST_BODY_BYTES with a 413 JSON error.
    Requests without Content-Length (chunked uploads) are buffered up to the
    limit and replayed to the app.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = MAX_REQUEST_BODY_BYTES
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            if content_length.isdigit() and int(content_length) > limit:
                await _body_too_large()(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        messages = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                logger.warning(f"Rejected chunked request to {scope.get('path')}: body over {limit} bytes")
                await _body_too_large()(scope, receive, send)
                return
            more_body = message.get("more_body", False)

        async def replay_receive() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay_receive, send)

app.add_middleware(RequestBodyLimitMiddleware)

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) if settings.DEBUG else "Internal server error"}
    )

# Include all routers
app.include_router(user_routes.router, prefix=settings.API_V1_STR)
app.include_router(category_routes.router, prefix=settings.API_V1_STR)
app.include_router(wardrobe_routes.router, prefix=settings.API_V1_STR)
app.include_router(outfit_routes.router, prefix=settings.API_V1_STR)
app.include_router(shopping_routes.router, prefix=settings.API_V1_STR)
app.include_router(recommendation_routes.router, prefix=settings.API_V1_STR)
app.include_router(analytics_routes.router, prefix=settings.API_V1_STR)
app.include_router(tryon_routes.router)
