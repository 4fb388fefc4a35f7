"""
Итерационные блоки {{#each path}}…{{/each}} (алиас {{@each path}}).

Границы блоков находит стековый парсер, поэтому each может быть вложен
в другие each/if на любую глубину. Для каждого элемента строится новый
Scope, и тело блока проходит те же стадии, что и страница:
partial → вложенные each → if → переменные.
"""

from __future__ import annotations

import logging
from typing import List

from .base import NodeProcessor
from .conditionals import ConditionalProcessor
from .partials import PartialProcessor
from .variables import VariableProcessor
from ..context.resolver import ContextResolver
from ..nodes import BlockNode, source
from ..state import Scope

logger = logging.getLogger(__name__)


class EachProcessor(NodeProcessor):
    """Раскрывает each-блоки с корректной вложенной областью видимости."""

    markers = ("each",)

    def __init__(
        self,
        resolver: ContextResolver,
        partials: PartialProcessor,
        conditionals: ConditionalProcessor,
        variables: VariableProcessor,
    ):
        self.resolver = resolver
        self.partials = partials
        self.conditionals = conditionals
        self.variables = variables

    def process(self, template: str, scope: Scope) -> str:
        """
        Раскрывает все each-блоки шаблона в окружении scope.

        После раскрытия повторно обрабатываются partial-теги,
        аргументы которых зависят от полей элементов.
        """
        result = self.run(template, scope)
        return self.partials.process(result, scope)

    def transform_block(self, node: BlockNode, scope: Scope) -> str:
        if node.kind != "each":
            return super().transform_block(node, scope)
        return self._expand(node, scope)

    def _expand(self, node: BlockNode, scope: Scope) -> str:
        array_path = node.argument
        items = self.resolver.get_array(scope, array_path)
        if not items:
            logger.debug(f"Each block '{array_path}' has no items")
            return ""

        logger.debug(f"Processing array with {len(items)} items for {array_path} (depth {scope.depth})")
        body = source(node.children)

        rendered: List[str] = []
        for index, item in enumerate(items):
            item_scope = self.resolver.enter_item(scope, item, array_path, index)
            rendered.append(self._render_item(body, item_scope))
        return "".join(rendered)

    def _render_item(self, body: str, scope: Scope) -> str:
        text = self.partials.process(body, scope)
        text = self.process(text, scope)
        text = self.conditionals.process(text, scope)
        return self.variables.process(text, scope)


__all__ = ["EachProcessor"]
