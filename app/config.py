from dotenv import load_dotenv  # type: ignore
load_dotenv()  # lit .env en local; en prod les vars viennent de l'env

import os
from typing import Optional


DEFAULT_SEARCH_API_URL = "http://localhost:8080/search"
DEFAULT_PAGE_SIZE = 10
DEFAULT_REQUEST_TIMEOUT = 29.0


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = int(raw.strip())
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw.strip())


class Settings:
    """
    Configuration résolue une seule fois au démarrage du process.
    Chaque valeur peut être surchargée par une variable d'environnement (ou .env).
    """

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.CANONICAL_HOST = os.getenv("CANONICAL_HOST", "localhost")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Backend de recherche
        self.SEARCH_API_URL = (os.getenv("SEARCH_API_URL") or DEFAULT_SEARCH_API_URL).strip()
        self.SEARCH_PAGE_SIZE = _env_int("SEARCH_PAGE_SIZE", DEFAULT_PAGE_SIZE)
        # None = pas de timeout côté client, seul REQUEST_TIMEOUT borne la requête
        self.SEARCH_API_TIMEOUT = _env_float("SEARCH_API_TIMEOUT", None)

        self.REQUEST_TIMEOUT = _env_float("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"


settings = Settings()
