"""
Включение partial-шаблонов.

Тег {{@partial name #id .class1 .class2 path}} заменяется содержимым файла
<templates_dir>/<partials_dir>/<name>.html. Отсутствующий partial не
прерывает рендеринг: он логируется и заменяется пустой строкой.

Атрибуты тега доступны внутри partial в пространстве имен partial:
{{partial.name}}, {{partial.id}}, {{partial.class}}, {{partial.path}}
(в том числе в условиях {{#if partial.id}}); аргументы директив,
начинающиеся с partial.data, перенаправляются на путь path вызывающего
контекста ({{#each partial.data}}).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional, Tuple

from .base import NodeProcessor
from .. import values
from ..context.resolver import ContextResolver
from ..lexer import Token, TokenType
from ..nodes import BlockNode, TagNode
from ..state import Scope
from ..utils.html import DirectiveAttributes, escape_html, parse_attributes, unquote
from ...config import EngineConfig

logger = logging.getLogger(__name__)

PARTIAL_NAMESPACE = "partial"
PARTIAL_DATA = "partial.data"

_NAME_AND_ATTRIBUTES = re.compile(r"""^\s*('[^']+'|"[^"]+"|\S+)\s*(.*)$""", re.DOTALL)

# Директивы, аргумент которых является путем в контексте
_PATH_ARGUMENT_TOKENS = (
    TokenType.VARIABLE,
    TokenType.RAW_VARIABLE,
    TokenType.EACH_OPEN,
    TokenType.IF_OPEN,
    TokenType.HELPER,
    TokenType.LIST,
)


@dataclass(frozen=True)
class _PartialEnv:
    scope: Scope
    depth: int = 0
    in_each: bool = False
    chain: Tuple[str, ...] = ()     # partial, раскрываемые в данный момент (от внешнего к внутреннему)


@dataclass(frozen=True)
class _Binding:
    """Значения пространства имен partial для одного включения."""
    values: Dict[str, str]
    data_path: str


@dataclass(frozen=True)
class PartialCall:
    """Разобранный тег {{@partial ...}}."""
    raw_name: str
    literal: Optional[str]          # имя в кавычках или None
    attributes: DirectiveAttributes


def parse_partial_call(argument: str) -> PartialCall:
    match = _NAME_AND_ATTRIBUTES.match(argument)
    raw_name, rest = (match.group(1), match.group(2)) if match else (argument.strip(), "")
    return PartialCall(raw_name=raw_name, literal=unquote(raw_name), attributes=parse_attributes(rest))


class PartialProcessor(NodeProcessor):
    """
    Рекурсивно раскрывает partial-теги.

    Вложенные partial раскрываются до тех пор, пока они есть. Partial, который
    уже раскрывается выше по цепочке включений, заменяется пустой строкой
    (цикл a → b → a); кроме того, глубина ограничена
    config.partial_recursion_limit.
    """

    markers = ("@partial",)

    def __init__(self, resolver: ContextResolver, config: EngineConfig):
        self.resolver = resolver
        self.config = config

    def process(self, template: str, scope: Scope) -> str:
        """
        Раскрывает все partial-теги шаблона в окружении scope.
        """
        return self.run(template, _PartialEnv(scope=scope))

    # ======= Обход =======

    def transform_block(self, node: BlockNode, env: _PartialEnv) -> str:
        if node.kind == "each" and not env.in_each:
            env = replace(env, in_each=True)
        return super().transform_block(node, env)

    def transform_tag(self, node: TagNode, env: _PartialEnv) -> str:
        if node.token.type != TokenType.PARTIAL:
            return node.token.value
        return self._include(node.token, env)

    # ======= Внутренние методы =======

    def _include(self, token: Token, env: _PartialEnv) -> str:
        call = parse_partial_call(token.argument)

        if env.depth >= self.config.partial_recursion_limit:
            logger.error(
                f"Partial recursion limit ({self.config.partial_recursion_limit}) exceeded "
                f"while including '{call.raw_name}'. Possible self-referencing partial."
            )
            return ""

        path = self._find_partial(call, env.scope)
        if path is None:
            if env.in_each and call.literal is None:
                # Имя может зависеть от полей элемента, раскроется в проходе итерации
                return token.value
            logger.warning(f"Partial template not found: {call.raw_name} (at {token.line}:{token.column})")
            env.scope.state.record_missing_partial(call.literal or call.raw_name)
            return ""

        name = self._partial_name(path)
        if name in env.chain:
            logger.error(
                f"Partial cycle detected: {' -> '.join(env.chain + (name,))}. "
                f"Skipping '{name}'."
            )
            return ""

        try:
            content = path.read_text(encoding=self.config.encoding)
        except OSError as e:
            logger.warning(f"Error loading partial {path}: {e}")
            env.scope.state.record_missing_partial(call.literal or call.raw_name)
            return ""

        logger.debug(f"Loading partial: {path.name} (depth {env.depth})")
        content = bind_partial_attributes(content, name, call.attributes)
        return self.run(content, replace(env, depth=env.depth + 1, chain=env.chain + (name,)))

    def _find_partial(self, call: PartialCall, scope: Scope) -> Optional[Path]:
        """
        Находит файл partial.

        Имя в кавычках берется буквально. Голое имя сначала ищется как файл,
        затем как переменная контекста (динамическое имя partial).
        """
        if call.literal is not None:
            candidates = [call.literal]
        else:
            candidates = [call.raw_name]
            match values.classify(self.resolver.resolve_path(scope, call.raw_name)):
                case values.Scalar(raw=str() as resolved) if resolved and resolved != call.raw_name:
                    candidates.append(resolved)
                case _:
                    pass

        for name in candidates:
            path = self.partial_path(name)
            if path is not None and path.is_file():
                return path
        return None

    def partial_path(self, name: str) -> Optional[Path]:
        """Путь к файлу partial или None, если имя выводит за пределы каталога partials."""
        if not name.endswith(self.config.template_suffix):
            name = f"{name}{self.config.template_suffix}"
        root = self.config.partials_root
        path = root / name
        try:
            path.resolve().relative_to(root.resolve())
        except ValueError:
            logger.warning(f"Partial path escapes partials directory: {name}")
            return None
        return path

    def _partial_name(self, path: Path) -> str:
        rel = path.relative_to(self.config.partials_root).as_posix()
        suffix = self.config.template_suffix
        return rel[: -len(suffix)] if rel.endswith(suffix) else rel


def _is_data(argument: str) -> bool:
    return argument == PARTIAL_DATA or argument.startswith(PARTIAL_DATA + ".")


def _is_attribute(argument: str) -> bool:
    return argument.startswith(PARTIAL_NAMESPACE + ".") and not _is_data(argument)


class _AttributeBinder(NodeProcessor):
    """
    Подставляет значения пространства имен partial в тело partial.

    Блоки {{#if partial.X}} раскрываются здесь же по значению атрибута:
    в контексте рендеринга ключа partial нет.
    """

    markers = (PARTIAL_NAMESPACE + ".",)

    def transform_block(self, node: BlockNode, binding: _Binding) -> str:
        if node.kind == "if" and _is_attribute(node.argument):
            if not values.is_truthy(binding.values.get(node.argument, "")):
                return ""
            return self.transform(node.children, binding)
        return self._bind(node.open, binding) + self.transform(node.children, binding) + node.close.value

    def transform_tag(self, node: TagNode, binding: _Binding) -> str:
        return self._bind(node.token, binding)

    @staticmethod
    def _bind(token: Token, binding: _Binding) -> str:
        argument = token.argument
        if token.type not in _PATH_ARGUMENT_TOKENS or not argument.startswith(PARTIAL_NAMESPACE + "."):
            return token.value
        if _is_data(argument):
            if not binding.data_path:
                return token.value
            return token.value.replace(argument, binding.data_path + argument[len(PARTIAL_DATA):], 1)
        if token.type == TokenType.VARIABLE:
            return escape_html(binding.values.get(argument, ""))
        if token.type == TokenType.RAW_VARIABLE:
            return binding.values.get(argument, "")
        return token.value


_binder = _AttributeBinder()


def bind_partial_attributes(content: str, name: str, attributes: DirectiveAttributes) -> str:
    """
    Подставляет атрибуты вызова в тело partial.

    {{partial.X}} / {{{partial.X}}} заменяются значениями атрибутов
    (неизвестные заменяются пустой строкой), блоки {{#if partial.X}}
    раскрываются или удаляются по значению атрибута; аргументы директив
    вида partial.data… перенаправляются на attributes.path.
    """
    binding = _Binding(
        values={
            "partial.name": name,
            "partial.id": attributes.id or "",
            "partial.class": attributes.class_attr,
            "partial.path": attributes.path,
        },
        data_path=attributes.path,
    )
    return _binder.run(content, binding)


__all__ = ["PartialProcessor", "PartialCall", "parse_partial_call", "bind_partial_attributes"]
