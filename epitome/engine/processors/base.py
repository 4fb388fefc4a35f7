"""
Базовый обход AST для процессоров директив.

Каждый процессор является текстовым проходом: шаблон разбирается в дерево,
процессор переписывает только свои узлы, а все остальные возвращает
в исходном виде, чтобы их обработали следующие проходы конвейера.
"""

from __future__ import annotations

from typing import Any, Tuple

from ..nodes import BlockNode, TagNode, TemplateAST, TemplateNode, TextNode
from ..parser import parse_template


class NodeProcessor:
    """
    Процессор, переписывающий узлы AST обратно в текст.

    Подклассы переопределяют transform_block / transform_tag.
    env: окружение прохода (Scope, RenderState и т.п.), передается как есть.
    """

    # Подстроки, без которых проход заведомо ничего не меняет
    markers: Tuple[str, ...] = ()

    def applies_to(self, template: str) -> bool:
        return any(marker in template for marker in self.markers)

    def run(self, template: str, env: Any) -> str:
        """Разбирает шаблон и переписывает его; без маркеров возвращает как есть."""
        if not self.applies_to(template):
            return template
        return self.transform(parse_template(template), env)

    def transform(self, nodes: TemplateAST, env: Any) -> str:
        return "".join(self.transform_node(node, env) for node in nodes)

    def transform_node(self, node: TemplateNode, env: Any) -> str:
        if isinstance(node, BlockNode):
            return self.transform_block(node, env)
        if isinstance(node, TagNode):
            return self.transform_tag(node, env)
        if isinstance(node, TextNode):
            return node.text
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def transform_block(self, node: BlockNode, env: Any) -> str:
        """По умолчанию блок сохраняется, а его содержимое обрабатывается."""
        return node.open.value + self.transform(node.children, env) + node.close.value

    def transform_tag(self, node: TagNode, env: Any) -> str:
        return node.token.value


__all__ = ["NodeProcessor"]
