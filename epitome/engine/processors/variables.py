"""
Подстановка переменных и встроенных функций.

  {{path}} → значение с HTML-экранированием
  {{{path}}} → значение без экранирования
  {{@index}} → специальная переменная (прямой доступ к контексту)
  {{@assetPath 'x'}} → вызов хелпера, внедренного в контекст
  {{@ul #id .c path}} → HTML-список из последовательности

Неразрешенные пути дают пустую строку. Прочие директивы не трогаются.
"""

from __future__ import annotations

import logging
from typing import Any, List

from .. import values
from ..context.resolver import ContextResolver
from ..lexer import Token, TokenType, tokenize_template
from ..state import Scope
from ..utils.html import escape_html, parse_attributes, stringify, unquote
from ..values import MISSING

logger = logging.getLogger(__name__)


class VariableProcessor:
    """Последний содержательный проход конвейера."""

    def __init__(self, resolver: ContextResolver):
        self.resolver = resolver

    def process(self, template: str, scope: Scope) -> str:
        if "{{" not in template:
            return template

        out: List[str] = []
        for token in tokenize_template(template):
            if token.type == TokenType.VARIABLE:
                out.append(escape_html(self._resolve(token, scope)))
            elif token.type == TokenType.RAW_VARIABLE:
                out.append(self._resolve(token, scope))
            elif token.type == TokenType.SPECIAL:
                out.append(escape_html(stringify(scope.context.get(token.argument, MISSING))))
            elif token.type == TokenType.HELPER:
                out.append(self._call_helper(token, scope))
            elif token.type == TokenType.LIST:
                out.append(self._render_list(token, scope))
            else:
                out.append(token.value)
        return "".join(out)

    # ======= Внутренние методы =======

    def _resolve(self, token: Token, scope: Scope) -> str:
        path = token.argument
        value = self.resolver.resolve_path(scope, path)
        if value is MISSING or value is None:
            if value is MISSING:
                scope.state.record_missing_path(path)
            self._log_unresolved(path, scope)
            return ""
        return stringify(value)

    def _log_unresolved(self, path: str, scope: Scope) -> None:
        """Подробная диагностика для неразрешенных вложенных путей."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        if "." not in path:
            logger.debug(f"Variable not found: {path}")
            return

        parent_path = path.split(".", 1)[0]
        parent = self.resolver.resolve_path(scope, parent_path)
        match values.classify(parent):
            case values.Missing():
                logger.debug(f"Could not resolve nested path: {path}; parent '{parent_path}' does not exist")
            case values.Mapping(raw=mapping):
                logger.debug(
                    f"Could not resolve nested path: {path}; "
                    f"available keys in '{parent_path}': {', '.join(map(str, mapping))}"
                )
            case values.Sequence(items=items):
                logger.debug(f"Could not resolve nested path: {path}; '{parent_path}' is an array with {len(items)} items")
            case _:
                logger.debug(f"Could not resolve nested path: {path}; '{parent_path}' is a {type(parent).__name__}")

    def _call_helper(self, token: Token, scope: Scope) -> str:
        """{{@assetPath 'style.css'}} или {{@urlPath page.link}}."""
        name = token.name
        helper = scope.root.get(name, scope.context.get(name, MISSING))

        match values.classify(helper):
            case values.Helper(func=func):
                pass
            case _:
                logger.debug(f"Function {name} not found in context")
                return ""

        argument = self._helper_argument(token.argument, scope)
        if argument is MISSING or argument is None:
            logger.warning(f"Variable {token.argument} not found for {name} call")
            return ""

        try:
            return str(func(stringify(argument)))
        except Exception as e:
            logger.warning(f"Error calling {name} with argument {argument!r}: {e}")
            return ""

    def _helper_argument(self, argument: str, scope: Scope) -> Any:
        literal = unquote(argument)
        if literal is not None:
            return literal
        return self.resolver.resolve_path(scope, argument.split()[0])

    def _render_list(self, token: Token, scope: Scope) -> str:
        """{{@ul #id .class path}} → <ul id=".." class=".."><li>…</li></ul>"""
        attributes = parse_attributes(token.argument)
        value = self.resolver.resolve_path(scope, attributes.path)

        match values.classify(value):
            case values.Sequence(items=items):
                pass
            case _:
                logger.debug(f"@{token.name} directive: {attributes.path} is not an array")
                return ""

        list_items = "".join(f"<li>{escape_html(stringify(item))}</li>" for item in items)
        return f"<{token.name}{attributes.to_html()}>{list_items}</{token.name}>"


__all__ = ["VariableProcessor"]
