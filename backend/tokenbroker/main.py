from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from tokenbroker.deps import close_clients
from tokenbroker.logging import configure_logging
from tokenbroker.metrics import HTTP_REQUEST_DURATION
from tokenbroker.routers import identity_routes, relay_routes
from tokenbroker.secret_store import ConfigurationError
from tokenbroker.settings import settings


configure_logging(settings.log_level)

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_clients()


app = FastAPI(
    title="tokenbroker",
    version="0.1.0",
    description="Mints Fluid Relay tenant tokens and forwards Azure AD bearer tokens.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def prometheus_timing(request: Request, call_next):
    start = time.perf_counter()
    resp = await call_next(request)
    dur = time.perf_counter() - start
    # Label by route template to keep cardinality bounded.
    route = request.scope.get("route")
    path = getattr(route, "path", "unmatched")
    HTTP_REQUEST_DURATION.labels(method=request.method, path=path).observe(dur)
    return resp


@app.exception_handler(StarletteHTTPException)
async def plain_text_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(ConfigurationError)
async def configuration_error(request: Request, exc: ConfigurationError) -> PlainTextResponse:
    log.error("service misconfigured", exc_info=exc, extra={"url": str(request.url)})
    return PlainTextResponse("Server configuration error.", status_code=500)


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.get("/metrics", include_in_schema=False)
@app.get("/metrics/", include_in_schema=False)
async def metrics() -> Response:
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


app.include_router(relay_routes.router, prefix=settings.api_route_prefix)
app.include_router(identity_routes.router, prefix=settings.api_route_prefix)
