from typing import Protocol, cast

import httpx
from fastapi import Request

from app.config import Settings, settings as default_settings


class HasSearchClient(Protocol):
    search_client: httpx.AsyncClient


def get_search_client(request: Request) -> httpx.AsyncClient:
    state = cast(HasSearchClient, request.app.state)
    return state.search_client


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)
