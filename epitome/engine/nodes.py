"""
AST-узлы шаблона.

Дерево строится только для блочных директив (each / if / yield);
все остальные теги остаются листовыми узлами TagNode. Любой список
узлов можно превратить обратно в точный исходный текст через source().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .lexer import Token


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class TagNode(TemplateNode):
    """
    Одиночный тег: переменная, partial, плейсхолдер yield, хелпер
    или непарный (осиротевший) тег блока.
    """
    token: Token


@dataclass(frozen=True)
class BlockNode(TemplateNode):
    """
    Парный блок {{#each}}…{{/each}}, {{#if}}…{{/if}} или {{@yield}}…{{/yield}}.
    """
    kind: str                   # "each" | "if" | "yield"
    open: Token
    children: List[TemplateNode]
    close: Token

    @property
    def argument(self) -> str:
        return self.open.argument


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


def source(nodes: TemplateAST) -> str:
    """Восстанавливает исходный текст списка узлов."""
    return "".join(node_source(node) for node in nodes)


def node_source(node: TemplateNode) -> str:
    if isinstance(node, TextNode):
        return node.text
    if isinstance(node, TagNode):
        return node.token.value
    if isinstance(node, BlockNode):
        return node.open.value + source(node.children) + node.close.value
    raise TypeError(f"Unknown node type: {type(node).__name__}")


__all__ = ["TemplateNode", "TextNode", "TagNode", "BlockNode", "TemplateAST", "source", "node_source"]
