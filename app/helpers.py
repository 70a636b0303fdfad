# Helpers d'affichage des résultats de recherche
from __future__ import annotations
import re
from typing import Any, Optional
from urllib.parse import urlsplit


MAX_TEXT_LEN = 20_000

_tag_re = re.compile(r"<[^>]+>")
_space_re = re.compile(r"\s+")
# crochets de notes ([1], [edit]...) laissés par l'extraction du contenu
_brackets_re = re.compile(r"\[[^\]]*\]")


def clean_text_excerpt(text: Optional[str], max_chars: int = 300) -> str:
    """
    Extrait propre d'un résumé renvoyé par le backend
    - Supprime le HTML et les notes entre crochets
    - Remplace les sauts de ligne par des espaces
    - Limite à max_chars caractères, ajoute … si tronqué
    """
    if not text:
        return ""

    text = text[:MAX_TEXT_LEN]
    text = _tag_re.sub("", text)
    text = _brackets_re.sub("", text)
    text = _space_re.sub(" ", text).strip()

    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]

    # Essaie de couper à la fin d'une phrase
    last_sentence = max(truncated.rfind('.'), truncated.rfind('!'), truncated.rfind('?'))
    if last_sentence > max_chars * 0.7:
        return truncated[:last_sentence + 1]

    # Sinon coupe au dernier espace pour ne pas couper un mot
    last_space = truncated.rfind(' ')
    if last_space > 0:
        return truncated[:last_space] + '…'

    return truncated + '…'


def display_url(url: Optional[str]) -> str:
    """https://www.example.org/a/b/ -> example.org/a/b"""
    if not url:
        return ""
    parts = urlsplit(url)
    host = parts.netloc.lower()
    if host.startswith("www."):
        host = host[4:]
    if not host:
        return url
    path = parts.path.rstrip("/")
    return host + path


def _is_web_url(url: str) -> bool:
    # pas de javascript:, data:... dans les href
    return urlsplit(url).scheme.lower() in ("http", "https")


def format_score(score: Any) -> str:
    # bool est un int : on l'exclut
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return ""
    return f"{score * 100:.0f} %"


def result_items(data: Any) -> list[dict[str, Any]]:
    """
    Normalise le corps JSON du backend en liste de résultats pour le template.
    - liste -> ses éléments dict
    - {"results": [...]} -> cette liste
    - autre -> []
    """
    if isinstance(data, dict):
        data = data.get("results")
    if not isinstance(data, list):
        return []

    items = []
    for r in data:
        if not isinstance(r, dict):
            continue
        url = r.get("url") or ""
        if not isinstance(url, str):
            url = ""
        items.append({
            "url": url if _is_web_url(url) else "",
            "display_url": display_url(url),
            "score": format_score(r.get("score")),
            "summary": clean_text_excerpt(r.get("summary")),
        })
    return items


def page_links(page_num: int, count: int, limit: int) -> dict[str, Optional[int]]:
    """Pages précédente / suivante ; suivante seulement si la page est pleine."""
    return {
        "prev": page_num - 1 if page_num > 0 else None,
        "next": page_num + 1 if count >= limit else None,
    }
