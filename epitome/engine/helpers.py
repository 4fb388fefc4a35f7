"""
Хелперы относительных путей, внедряемые в контекст страницы.

assetPath и urlPath строят пути относительно глубины страницы
(page_depth: число вложенных каталогов в пути выходного файла).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

PAGE_DEPTH_KEY = "page_depth"
ASSET_PATH_KEY = "assetPath"
URL_PATH_KEY = "urlPath"


def depth_prefix(page_depth: int) -> str:
    """'../' * depth или './' на верхнем уровне."""
    return "../" * page_depth if page_depth > 0 else "./"


def asset_path(path: str, page_depth: int = 0) -> str:
    return f"{depth_prefix(page_depth)}{path}"


def url_path(path: str, page_depth: int = 0) -> str:
    """
    Путь к странице: корень дает только префикс; иначе снимается
    ведущий '/', суффикс '.html', добавляется завершающий '/'.
    """
    if path in ("/", ""):
        return depth_prefix(page_depth)

    if path.startswith("/"):
        path = path[1:]
    if path.endswith(".html"):
        path = path[: -len(".html")]
    if not path.endswith("/"):
        path += "/"

    return f"{depth_prefix(page_depth)}{path}"


def page_depth_of(context: Mapping[str, Any]) -> int:
    """Читает page_depth из контекста; отсутствует/некорректен → 0."""
    raw = context.get(PAGE_DEPTH_KEY, 0)
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        logger.warning(f"Invalid page_depth {raw!r}, using 0")
        return 0
    return raw


def augment_context(context: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Копия контекста страницы с хелперами assetPath/urlPath.

    Исходный словарь вызывающего не изменяется.
    """
    depth = page_depth_of(context)

    def _asset_path(path: str) -> str:
        return asset_path(str(path), depth)

    def _url_path(path: str) -> str:
        return url_path(str(path), depth)

    _asset_path.__name__ = ASSET_PATH_KEY
    _url_path.__name__ = URL_PATH_KEY

    enhanced = dict(context)
    enhanced[ASSET_PATH_KEY] = _asset_path
    enhanced[URL_PATH_KEY] = _url_path
    return enhanced


__all__ = [
    "asset_path",
    "url_path",
    "depth_prefix",
    "page_depth_of",
    "augment_context",
    "PAGE_DEPTH_KEY",
    "ASSET_PATH_KEY",
    "URL_PATH_KEY",
]
