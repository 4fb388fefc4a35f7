"""
Утилиты рендеринга для тестов.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from epitome.config import EngineConfig
from epitome.engine import EpitomeEngine
from epitome.engine.helpers import augment_context
from epitome.engine.state import RenderState, Scope


def make_engine(templates_dir: Path, **overrides: Any) -> EpitomeEngine:
    """Создает движок, читающий шаблоны из templates_dir."""
    return EpitomeEngine(EngineConfig(templates_dir=templates_dir, **overrides))


def make_scope(context: Optional[Mapping[str, Any]] = None) -> Scope:
    """Scope страницы с хелперами, как его строит движок."""
    return Scope.for_page(augment_context(context or {}), RenderState())
