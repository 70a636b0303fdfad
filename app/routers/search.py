# app/routers/search.py
from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from app.config import Settings
from app.dependencies import get_search_client, get_settings
from app.helpers import page_links, result_items
from app.loaders.search import LoaderResult, first_param, load_search_page, parse_page
from app.web import templates


router = APIRouter()


async def _run_loader(request: Request, client: httpx.AsyncClient, settings: Settings) -> LoaderResult:
    return await load_search_page(
        request.query_params,
        client,
        endpoint=settings.SEARCH_API_URL,
        limit=settings.SEARCH_PAGE_SIZE,
    )


# ===========================
#   /search
#   - q absent -> 301 vers /
#   - sinon rendu de la page de résultats (p = numéro de page, 0-based)
# ===========================
@router.get("/search", name="search", response_class=HTMLResponse)
async def search_page(
    request: Request,
    client: httpx.AsyncClient = Depends(get_search_client),
    settings: Settings = Depends(get_settings),
):
    result = await _run_loader(request, client, settings)
    if result.kind == "redirect":
        return RedirectResponse(result.location, status_code=result.status)

    data = result.payload["data"]
    page_num = parse_page(first_param(request.query_params, "p"))
    results = result_items(data)

    ctx = {
        "q": first_param(request.query_params, "q") or "",
        "page": page_num,
        "page_size": settings.SEARCH_PAGE_SIZE,
        "results": results,
        "pages": page_links(page_num, len(results), settings.SEARCH_PAGE_SIZE),
    }
    return templates.TemplateResponse(request, "search/results.html", ctx)


# Même loader, payload brut pour les clients JSON
@router.get("/api/search", name="search_data")
async def search_data(
    request: Request,
    client: httpx.AsyncClient = Depends(get_search_client),
    settings: Settings = Depends(get_settings),
):
    result = await _run_loader(request, client, settings)
    if result.kind == "redirect":
        return RedirectResponse(result.location, status_code=result.status)
    return JSONResponse(result.payload)
