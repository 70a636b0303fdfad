# app/loaders/search.py
"""
Loader de la page de résultats.

Lit `q` / `p` dans l'URL, construit la requête paginée, l'envoie au backend de
recherche (POST JSON) et renvoie le corps JSON tel quel, enveloppé dans
`{"data": ...}`. Sans `q`, renvoie une redirection 301 vers `/`.

Le loader ne rattrape rien : erreurs réseau (httpx) et corps non-JSON remontent
jusqu'aux exception handlers de l'app.
"""
from __future__ import annotations

import json
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Union

import httpx

from app.config import DEFAULT_PAGE_SIZE, DEFAULT_SEARCH_API_URL

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchRequest:
    query: str
    limit: int
    offset: int

    def to_payload(self) -> dict[str, Any]:
        return {"query": self.query, "limit": self.limit, "offset": self.offset}


@dataclass(frozen=True)
class Redirect:
    status: int = 301
    location: str = "/"
    kind: Literal["redirect"] = field(default="redirect", init=False)


@dataclass(frozen=True)
class Data:
    payload: dict[str, Any]
    kind: Literal["data"] = field(default="data", init=False)


LoaderResult = Union[Redirect, Data]

_page_re = re.compile(r"-?[0-9]+")


def first_param(params: Mapping[str, str], name: str) -> Optional[str]:
    """Première valeur d'un paramètre répété (?q=a&q=b -> "a")."""
    getlist = getattr(params, "getlist", None)
    if getlist is None:
        return params.get(name)
    values = getlist(name)
    return values[0] if values else None


def parse_page(raw: Optional[str]) -> int:
    """Numéro de page >= 0 ; absent, hors chiffres ASCII ou négatif -> 0."""
    if raw is None:
        return 0
    raw = raw.strip()
    if not _page_re.fullmatch(raw):
        return 0
    return max(int(raw), 0)


def build_search_request(query: str, page: Optional[str], limit: int = DEFAULT_PAGE_SIZE) -> SearchRequest:
    return SearchRequest(query=query, limit=limit, offset=limit * parse_page(page))


async def load_search_page(
    params: Mapping[str, str],
    client: httpx.AsyncClient,
    *,
    endpoint: str = DEFAULT_SEARCH_API_URL,
    limit: int = DEFAULT_PAGE_SIZE,
) -> LoaderResult:
    query = first_param(params, "q")
    if query is None:
        return Redirect(status=301, location="/")

    page = first_param(params, "p")
    if page is None:
        page = "0"

    search_request = build_search_request(query, page, limit)
    body = json.dumps(search_request.to_payload(), ensure_ascii=False, separators=(",", ":"))
    log.debug(f"POST {endpoint} {body}")

    res = await client.post(
        endpoint,
        content=body.encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )
    if res.is_error:
        # pas de raise_for_status : le corps est transmis tel quel
        log.warning(f"Search backend answered {res.status_code} for offset={search_request.offset}")

    return Data(payload={"data": res.json()})
