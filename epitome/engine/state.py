"""
Состояние одного рендеринга.

RenderState создается заново на каждый вызов render() и хранит
захваченные yield-блоки и диагностику. Scope хранит неизменяемое окружение
разрешения путей, которое передается по значению через рекурсивное
раскрытие блоков: вход в итерацию порождает новый Scope, поэтому
сохранять и восстанавливать "текущий элемент" не требуется.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping

from .values import MISSING


@dataclass
class RenderState:
    """Изменяемое состояние, принадлежащее ровно одному вызову render()."""
    yield_blocks: Dict[str, str] = field(default_factory=dict)
    missing_paths: List[str] = field(default_factory=list)
    missing_partials: List[str] = field(default_factory=list)

    def record_missing_path(self, path: str) -> None:
        if path not in self.missing_paths:
            self.missing_paths.append(path)

    def record_missing_partial(self, name: str) -> None:
        if name not in self.missing_partials:
            self.missing_partials.append(name)


@dataclass(frozen=True)
class Scope:
    """
    Окружение разрешения путей.

    context: активный контекст (контекст страницы или контекст элемента);
    item: текущий элемент итерации (MISSING вне {{#each}});
    root: расширенный контекст страницы (для хелперов assetPath/urlPath);
    depth: глубина вложенности итераций (для диагностики).
    """
    context: Mapping[str, Any]
    root: Mapping[str, Any]
    state: RenderState
    item: Any = MISSING
    depth: int = 0

    @classmethod
    def for_page(cls, context: Mapping[str, Any], state: RenderState) -> Scope:
        return cls(context=context, root=context, state=state)

    def enter(self, item: Any, item_context: Mapping[str, Any]) -> Scope:
        """Новый Scope для одной итерации; текущий не изменяется."""
        return replace(self, context=item_context, item=item, depth=self.depth + 1)


__all__ = ["RenderState", "Scope"]
