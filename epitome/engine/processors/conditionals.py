"""
Условные блоки {{#if path}}…{{/if}} (алиас {{@if path}}).

Ветки else нет: невыполненное условие удаляет блок целиком.
Истинность определяется таблицей values.is_truthy.
"""

from __future__ import annotations

import logging

from .base import NodeProcessor
from .. import values
from ..context.resolver import ContextResolver
from ..nodes import BlockNode
from ..state import Scope
from ..utils.html import summarize_for_log

logger = logging.getLogger(__name__)


class ConditionalProcessor(NodeProcessor):
    """Раскрывает if-блоки любой глубины вложенности."""

    markers = ("if",)

    def __init__(self, resolver: ContextResolver):
        self.resolver = resolver

    def process(self, template: str, scope: Scope) -> str:
        return self.run(template, scope)

    def transform_block(self, node: BlockNode, scope: Scope) -> str:
        if node.kind != "if":
            return super().transform_block(node, scope)

        condition = node.argument
        value = self.resolver.resolve_path(scope, condition)
        truthy = values.is_truthy(value)
        logger.debug(
            f"Condition {condition} = {summarize_for_log(value)} is {'truthy' if truthy else 'falsy'}"
        )

        if not truthy:
            return ""
        return self.transform(node.children, scope)


__all__ = ["ConditionalProcessor"]
