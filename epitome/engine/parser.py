"""
Парсер блочной структуры шаблона.

Преобразует последовательность токенов в дерево с парными блоками
each / if / yield. Пары находятся явным стеком открытых блоков, поэтому
вложенность может быть произвольной глубины. Некорректная разметка
никогда не приводит к исключению: непарные теги превращаются в обычные
TagNode и позже вычищаются на этапе очистки.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .lexer import BLOCK_CLOSERS, BLOCK_OPENERS, Token, TokenType, tokenize_template
from .nodes import BlockNode, TagNode, TemplateAST, TemplateNode, TextNode

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """Открытый, еще не закрытый блок на стеке парсера."""
    kind: str
    open: Optional[Token]
    children: List[TemplateNode] = field(default_factory=list)


class BlockParser:
    """
    Стековый парсер блоков.

    Закрывающий тег сопоставляется с ближайшим открытым блоком того же вида.
    Блоки, оставшиеся открытыми между ними, разворачиваются обратно в
    одиночный тег + их содержимое (содержимое не теряется).
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens

    def parse(self) -> TemplateAST:
        """
        Строит AST из токенов.

        Returns:
            Список корневых узлов
        """
        stack: List[_Frame] = [_Frame(kind="root", open=None)]

        for token in self.tokens:
            if token.type == TokenType.EOF:
                break

            if token.type == TokenType.TEXT:
                stack[-1].children.append(TextNode(token.value))
            elif token.type in BLOCK_OPENERS:
                stack.append(_Frame(kind=BLOCK_OPENERS[token.type], open=token))
            elif token.type in BLOCK_CLOSERS:
                self._close_block(stack, BLOCK_CLOSERS[token.type], token)
            else:
                stack[-1].children.append(TagNode(token))

        # Незакрытые блоки в конце ввода
        while len(stack) > 1:
            self._demote(stack)

        return stack[0].children

    def _close_block(self, stack: List[_Frame], kind: str, close: Token) -> None:
        """Закрывает ближайший открытый блок вида kind или оставляет тег как есть."""
        match_index = None
        for index in range(len(stack) - 1, 0, -1):
            if stack[index].kind == kind:
                match_index = index
                break

        if match_index is None:
            logger.debug(f"Unmatched closing tag {close.value!r} at {close.line}:{close.column}")
            stack[-1].children.append(TagNode(close))
            return

        while len(stack) - 1 > match_index:
            self._demote(stack)

        frame = stack.pop()
        stack[-1].children.append(BlockNode(
            kind=frame.kind,
            open=frame.open,
            children=frame.children,
            close=close,
        ))

    @staticmethod
    def _demote(stack: List[_Frame]) -> None:
        """Превращает верхний незакрытый блок в одиночный тег и его содержимое."""
        frame = stack.pop()
        logger.debug(f"Unclosed tag {frame.open.value!r} at {frame.open.line}:{frame.open.column}")
        stack[-1].children.append(TagNode(frame.open))
        stack[-1].children.extend(frame.children)


def parse_template(text: str) -> TemplateAST:
    """
    Удобная функция: токенизация + разбор блоков.

    Args:
        text: Исходный текст шаблона

    Returns:
        AST шаблона
    """
    return BlockParser(tokenize_template(text)).parse()


__all__ = ["BlockParser", "parse_template"]
