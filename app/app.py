# app.py
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exception_handlers import http_exception_handler as fastapi_http_exception_handler

from app.config import settings
from app.web import templates, STATIC_DIR
from app.routers import pages, search


log = logging.getLogger("uvicorn.error")
logging.getLogger("app").setLevel(settings.LOG_LEVEL)


def _wants_html(request: Request) -> bool:
    if request.url.path.startswith("/api/"):
        return False
    accepts = request.headers.get("accept", "")
    return ("text/html" in accepts) or ("*/*" in accepts)


# -----------------------------------------------------------------------------
# Lifespan : un client HTTP partagé vers le backend de recherche
# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    app.state.search_client = httpx.AsyncClient(timeout=settings.SEARCH_API_TIMEOUT)
    log.info(f"SEARCH_API_URL: {settings.SEARCH_API_URL} (page size {settings.SEARCH_PAGE_SIZE})")

    yield

    await app.state.search_client.aclose()
    log.info("Search client closed")


# -----------------------------------------------------------------------------
# Middlewares
# -----------------------------------------------------------------------------
class SearchRobotsHeaderMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        resp = await call_next(request)

        path = request.url.path
        if path == "/search" or path.startswith("/api/search"):
            tag = "noindex, nofollow" if path.startswith("/api/") else "noindex, follow"

            # supprime toute occurrence existante (casse-insensible), puis fixe une seule valeur
            for k in list(resp.headers.keys()):
                if k.lower() == "x-robots-tag":
                    del resp.headers[k]
            resp.headers["X-Robots-Tag"] = tag
        return resp


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Borne la durée d'une requête (le loader n'a pas de timeout propre)"""

    def __init__(self, app, timeout: float | None = None):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)

        except asyncio.TimeoutError:
            log.warning(f"Request timeout after {self.timeout}s: {request.method} {request.url.path}")
            if _wants_html(request) and request.headers.get("hx-request") != "true":
                resp = templates.TemplateResponse(request, "errors/timeout.html", status_code=408)
                resp.headers["X-Robots-Tag"] = "noindex, nofollow"
                return resp
            return JSONResponse(status_code=408, content={"detail": "Request timeout"})


# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------
app = FastAPI(title="Search", lifespan=lifespan)

# Middleware stack (executes in REVERSE order of addition)
app.add_middleware(SearchRobotsHeaderMiddleware)
app.add_middleware(TimeoutMiddleware, timeout=settings.REQUEST_TIMEOUT)
app.add_middleware(GZipMiddleware, minimum_size=1024)

app.add_middleware(ProxyHeadersMiddleware)
if settings.is_prod:
    app.add_middleware(HTTPSRedirectMiddleware)

if settings.is_prod:
    allowed_hosts = [settings.CANONICAL_HOST, "localhost", "127.0.0.1"]
else:
    allowed_hosts = ["*"]
app.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)


# -----------------------------------------------------------------------------
# Static + routers
# -----------------------------------------------------------------------------
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(pages.router)
app.include_router(search.router)


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    if _wants_html(request) and exc.status_code in (404, 500):
        resp = templates.TemplateResponse(
            request, f"errors/{exc.status_code}.html", status_code=exc.status_code
        )
        resp.headers["X-Robots-Tag"] = "noindex, follow" if exc.status_code == 404 else "noindex, nofollow"
        return resp

    return await fastapi_http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Erreurs non rattrapées (backend injoignable, JSON invalide...) -> 500"""
    log.error(f"Unhandled exception on {request.method} {request.url.path}: {exc!r}", exc_info=True)

    if _wants_html(request):
        resp = templates.TemplateResponse(request, "errors/500.html", status_code=500)
        resp.headers["X-Robots-Tag"] = "noindex, nofollow"
        return resp

    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
