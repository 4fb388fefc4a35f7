"""
Разрешение путей в контексте шаблона.

Порядок поиска для resolve_path / get_array:
  1. текущий элемент итерации (если это словарь и в нем есть ключ);
  2. прямой ключ активного контекста;
  3. context["this"] как запасной вариант;
  4. обход по точкам от корня активного контекста.
Промах никогда не приводит к исключению.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .. import values
from ..state import Scope
from ..values import MISSING

logger = logging.getLogger(__name__)

THIS_KEY = "this"
INDEX_KEY = "@index"


class ContextResolver:
    """
    Разрешает пути и строит контексты элементов для {{#each}}.

    Не хранит состояния: текущий элемент приходит вместе со Scope.
    """

    def resolve_path(self, scope: Scope, path: str) -> Any:
        """
        Разрешает путь вида "a", "a.b.c" или "this".

        Returns:
            Значение или MISSING, если путь не найден ни на одном этапе
        """
        path = path.strip()
        context = scope.context
        if not path:
            return context

        if path == THIS_KEY:
            return context.get(THIS_KEY, MISSING)

        for candidate in self._candidates(scope, path):
            return candidate

        return self._walk(context, path)

    def get_array(self, scope: Scope, path: str) -> List[Any]:
        """
        Находит последовательность по пути в том же порядке, что и resolve_path,
        но принимает только последовательности.

        Returns:
            Список элементов; пустой список при промахе или несовпадении типа
        """
        path = path.strip()

        for candidate in self._candidates(scope, path):
            if values.is_sequence(candidate):
                return list(candidate)

        match values.classify(self._walk(scope.context, path)):
            case values.Sequence(items=items):
                logger.debug(f"Found array '{path}' using dot notation")
                return list(items)
            case _:
                logger.debug(f"Could not find array: {path}")
                scope.state.record_missing_path(path)
                return []

    def create_item_context(self, item: Any, array_path: str, parent_context: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Создает контекст для одного элемента {{#each}}.

        Примитивный элемент дает {this: item}. Словарь разворачивается на
        верхний уровень и дополняется ключами родителя, которые не
        перекрыты элементом и не совпадают с ключом самого массива.
        """
        match values.classify(item):
            case values.Mapping(raw=mapping):
                item_context: Dict[str, Any] = {THIS_KEY: item}
                item_context.update(mapping)
                for key, value in parent_context.items():
                    if key not in item_context and key != array_path:
                        item_context[key] = value
                return item_context
            case _:
                return {THIS_KEY: item}

    def enter_item(self, scope: Scope, item: Any, array_path: str, index: int) -> Scope:
        """
        Возвращает Scope для итерации с номером index (с нуля).

        В контекст элемента добавляется @index (нумерация с 1).
        """
        item_context = self.create_item_context(item, array_path, scope.context)
        item_context[INDEX_KEY] = index + 1
        return scope.enter(item, item_context)

    # ======= Внутренние методы =======

    @staticmethod
    def _candidates(scope: Scope, path: str):
        """Значения этапов 1-3 в порядке приоритета (только найденные)."""
        match values.classify(scope.item):
            case values.Mapping(raw=item) if path in item:
                yield item[path]
            case _:
                pass

        if path in scope.context:
            yield scope.context[path]

        match values.classify(scope.context.get(THIS_KEY, MISSING)):
            case values.Mapping(raw=this) if path in this:
                yield this[path]
            case _:
                pass

    @staticmethod
    def _walk(root: Any, path: str) -> Any:
        """Обход по точкам: ключи словарей и целые индексы последовательностей."""
        current = root
        for part in path.split("."):
            match values.classify(current):
                case values.Mapping(raw=mapping) if part in mapping:
                    current = mapping[part]
                case values.Sequence(items=items) if part.isdigit() and int(part) < len(items):
                    current = items[int(part)]
                case _:
                    return MISSING
        return current


__all__ = ["ContextResolver", "THIS_KEY", "INDEX_KEY"]
