"""
Лексический анализатор директив шаблона.

Разбивает текст шаблона на последовательность токенов: обычный текст
и теги {{...}} / {{{...}}}, классифицированные по виду директивы.
Текст, который лишь похож на фигурные скобки ("{", "}}", "{{x}"),
остается текстом.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import List


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент
    TEXT = "TEXT"

    # Подстановки
    VARIABLE = "VARIABLE"                    # {{path}}
    RAW_VARIABLE = "RAW_VARIABLE"            # {{{path}}}
    SPECIAL = "SPECIAL"                      # {{@index}}

    # Блоки
    EACH_OPEN = "EACH_OPEN"                  # {{#each path}} / {{@each path}}
    EACH_CLOSE = "EACH_CLOSE"                # {{/each}}
    IF_OPEN = "IF_OPEN"                      # {{#if path}} / {{@if path}}
    IF_CLOSE = "IF_CLOSE"                    # {{/if}}
    YIELD_OPEN = "YIELD_OPEN"                # {{@yield name}}
    YIELD_CLOSE = "YIELD_CLOSE"              # {{/yield}}

    # Композиция
    PARTIAL = "PARTIAL"                      # {{@partial name #id .cls path}}
    YIELD_PLACEHOLDER = "YIELD_PLACEHOLDER"  # {{@yield:placeholder:name}}

    # Встроенные функции
    HELPER = "HELPER"                        # {{@assetPath 'x'}} / {{@urlPath x}}
    LIST = "LIST"                            # {{@ul #id .cls path}} / {{@ol ...}}

    # Нераспознанная директива ({{#foo}}, {{/bar}}, {{}} ...)
    UNKNOWN = "UNKNOWN"

    EOF = "EOF"


# Директивы, которые открывают/закрывают блоки, по видам блоков
BLOCK_OPENERS = {
    TokenType.EACH_OPEN: "each",
    TokenType.IF_OPEN: "if",
    TokenType.YIELD_OPEN: "yield",
}
BLOCK_CLOSERS = {
    TokenType.EACH_CLOSE: "each",
    TokenType.IF_CLOSE: "if",
    TokenType.YIELD_CLOSE: "yield",
}

HELPER_NAMES = ("assetPath", "urlPath")
LIST_NAMES = ("ul", "ol")


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики.
    """
    type: TokenType
    value: str           # Исходный текст токена целиком ({{#each items}})
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)
    name: str = ""       # Ключевое слово директивы (each, partial, assetPath...)
    argument: str = ""   # Аргумент директивы без ключевого слова

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Ищет теги регулярным выражением: сначала тройные скобки, затем двойные.
    Содержимое тега не может содержать фигурных скобок, поэтому
    "{{{a}}" разбирается как текст "{" и переменная "a".
    """

    _TAG = re.compile(r"\{\{\{([^{}]*)\}\}\}|\{\{([^{}]*)\}\}")

    _YIELD_PLACEHOLDER = re.compile(r"^@yield:(?:placeholder|insert):(.+)$", re.DOTALL)

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        """
        tokens: List[Token] = []
        position = 0
        line, column = 1, 1

        for match in self._TAG.finditer(self.text):
            start, end = match.span()
            if start > position:
                chunk = self.text[position:start]
                tokens.append(Token(TokenType.TEXT, chunk, position, line, column))
                line, column = self._advance(chunk, line, column)

            raw = match.group(0)
            if match.group(1) is not None:
                tokens.append(Token(
                    TokenType.RAW_VARIABLE, raw, start, line, column,
                    argument=match.group(1).strip(),
                ))
            else:
                tokens.append(self._classify(match.group(2), raw, start, line, column))
            line, column = self._advance(raw, line, column)
            position = end

        if position < self.length:
            chunk = self.text[position:]
            tokens.append(Token(TokenType.TEXT, chunk, position, line, column))
            line, column = self._advance(chunk, line, column)

        tokens.append(Token(TokenType.EOF, "", self.length, line, column))
        return tokens

    def _classify(self, content: str, raw: str, position: int, line: int, column: int) -> Token:
        """Определяет тип директивы по содержимому тега {{...}}."""
        body = content.strip()

        def make(token_type: TokenType, name: str = "", argument: str = "") -> Token:
            return Token(token_type, raw, position, line, column, name=name, argument=argument)

        if not body:
            return make(TokenType.UNKNOWN)

        sigil = body[0]
        parts = body[1:].split(None, 1) if sigil in "#@/" else []
        keyword = parts[0] if parts else ""
        argument = parts[1].strip() if len(parts) > 1 else ""

        if sigil == "/":
            closers = {"each": TokenType.EACH_CLOSE, "if": TokenType.IF_CLOSE, "yield": TokenType.YIELD_CLOSE}
            token_type = closers.get(body[1:].strip())
            return make(token_type or TokenType.UNKNOWN, name=body[1:].strip())

        if sigil == "#":
            if keyword == "each" and argument:
                return make(TokenType.EACH_OPEN, keyword, argument)
            if keyword == "if" and argument:
                return make(TokenType.IF_OPEN, keyword, argument)
            return make(TokenType.UNKNOWN, keyword, argument)

        if sigil == "@":
            placeholder = self._YIELD_PLACEHOLDER.match(body)
            if placeholder:
                return make(TokenType.YIELD_PLACEHOLDER, "yield", placeholder.group(1).strip())
            if keyword == "each" and argument:
                return make(TokenType.EACH_OPEN, keyword, argument)
            if keyword == "if" and argument:
                return make(TokenType.IF_OPEN, keyword, argument)
            if keyword == "partial" and argument:
                return make(TokenType.PARTIAL, keyword, argument)
            if keyword == "yield" and argument:
                return make(TokenType.YIELD_OPEN, keyword, argument)
            if keyword in HELPER_NAMES and argument:
                return make(TokenType.HELPER, keyword, argument)
            if keyword in LIST_NAMES and argument:
                return make(TokenType.LIST, keyword, argument)
            if keyword and not argument:
                return make(TokenType.SPECIAL, keyword, body)
            return make(TokenType.UNKNOWN, keyword, argument)

        # Хелпер без @: {{assetPath 'img/a.png'}}
        words = body.split(None, 1)
        if len(words) == 2 and words[0] in HELPER_NAMES:
            return make(TokenType.HELPER, words[0], words[1].strip())

        return make(TokenType.VARIABLE, argument=body)

    @staticmethod
    def _advance(chunk: str, line: int, column: int):
        """Сдвигает номера строки и колонки на длину фрагмента."""
        newlines = chunk.count("\n")
        if newlines:
            return line + newlines, len(chunk) - chunk.rfind("\n")
        return line, column + len(chunk)


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов (последний всегда EOF)
    """
    return TemplateLexer(text).tokenize()


__all__ = [
    "TokenType",
    "Token",
    "TemplateLexer",
    "tokenize_template",
    "BLOCK_OPENERS",
    "BLOCK_CLOSERS",
    "HELPER_NAMES",
    "LIST_NAMES",
]
