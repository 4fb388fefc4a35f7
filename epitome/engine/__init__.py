"""
Движок шаблонов Epitome.

Реализует подмножество синтаксиса Handlebars: переменные, each/if,
partial и композицию layout-шаблонов через yield.
"""

from __future__ import annotations

from .engine import EpitomeEngine, RenderResult, cleanup_remaining_tags
from .helpers import asset_path, url_path
from .state import RenderState, Scope

__all__ = [
    "EpitomeEngine",
    "RenderResult",
    "RenderState",
    "Scope",
    "cleanup_remaining_tags",
    "asset_path",
    "url_path",
]
