"""
Композиция layout-шаблонов через yield.

Двухфазная схема:
  1. extract_blocks: блоки {{@yield name}}…{{/yield}} вырезаются из шаблона
     и сохраняются в RenderState;
  2. insert_blocks: плейсхолдеры {{@yield:placeholder:name}} заменяются
     сохраненным содержимым (или удаляются).

Извлечение выполняется до первого прохода partial, вставка между
двумя проходами partial: partial может как содержать плейсхолдеры,
так и быть источником yield-контента.
"""

from __future__ import annotations

import logging
import re

from .base import NodeProcessor
from ..lexer import TokenType
from ..nodes import BlockNode, TagNode, source
from ..state import RenderState

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_NAME = "default"

_NAME = re.compile(r"""^\s*(?:'([^']+)'|"([^"]+)"|(\S+))""")


def block_name(argument: str) -> str:
    """Имя yield-блока: строка в кавычках или первое слово аргумента."""
    match = _NAME.match(argument)
    if not match:
        return DEFAULT_BLOCK_NAME
    return next(group for group in match.groups() if group is not None)


class _YieldExtractor(NodeProcessor):
    markers = ("@yield",)

    def transform_block(self, node: BlockNode, state: RenderState) -> str:
        if node.kind != "yield":
            return super().transform_block(node, state)

        name = block_name(node.argument)
        state.yield_blocks[name] = source(node.children).strip()
        logger.debug(f"Extracted yield block: {name}")
        return ""


class _YieldInserter(NodeProcessor):
    markers = ("@yield",)

    def transform_block(self, node: BlockNode, state: RenderState) -> str:
        if node.kind != "yield":
            return super().transform_block(node, state)

        # Обернутый блок, пришедший из partial: содержимое по умолчанию + вставка
        name = block_name(node.argument)
        default = self.transform(node.children, state)
        custom = state.yield_blocks.get(name)
        if custom is None:
            logger.debug(f"Using default content for block: {name}")
            return default
        logger.debug(f"Inserting custom content in block: {name}")
        return default + custom

    def transform_tag(self, node: TagNode, state: RenderState) -> str:
        token = node.token
        # Незакрытый {{@yield name}} работает как простая точка вставки
        if token.type not in (TokenType.YIELD_PLACEHOLDER, TokenType.YIELD_OPEN):
            return token.value

        name = block_name(token.argument)
        content = state.yield_blocks.get(name)
        if content is None:
            logger.debug(f"No content to insert at point: {name}")
            return ""
        logger.debug(f"Inserting content at insertion point: {name}")
        return content


class YieldProcessor:
    """Извлечение и вставка yield-блоков."""

    def __init__(self):
        self._extractor = _YieldExtractor()
        self._inserter = _YieldInserter()

    def extract_blocks(self, template: str, state: RenderState) -> str:
        """
        Вырезает блоки {{@yield name}}…{{/yield}} и сохраняет их в state.

        Returns:
            Шаблон без блоков определения
        """
        return self._extractor.run(template, state)

    def insert_blocks(self, template: str, state: RenderState) -> str:
        """
        Заменяет плейсхолдеры сохраненными блоками; незаполненные удаляются.
        """
        if state.yield_blocks:
            logger.debug(f"Available yield blocks: {', '.join(state.yield_blocks)}")
        return self._inserter.run(template, state)


__all__ = ["YieldProcessor", "block_name", "DEFAULT_BLOCK_NAME"]
