"""
Движок шаблонов Epitome.

Публичный API: render(template, context) -> html. Движок выполняет
фиксированный конвейер текстовых проходов:

  1. новое RenderState (yield-блоки и диагностика этого вызова);
  2. копия контекста + хелперы assetPath/urlPath;
  3. извлечение yield-блоков;
  4. partial;
  5. вставка yield-блоков в плейсхолдеры;
  6. partial повторно (partial внутри вставленного контента);
  7. each;
  8. if;
  9. переменные;
 10. очистка остатков разметки.

Композиция (yield/partial) идет раньше управляющих конструкций, потому что
вставленный контент сам может их содержать; переменные подставляются
последними, чтобы не срабатывать внутри еще не раскрытых блоков.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .context.resolver import ContextResolver
from .helpers import augment_context
from .lexer import TokenType, tokenize_template
from .processors import (
    ConditionalProcessor,
    EachProcessor,
    PartialProcessor,
    VariableProcessor,
    YieldProcessor,
)
from .state import RenderState, Scope
from .utils.html import summarize_context
from ..config import EngineConfig
from ..errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

# HTML-комментарии, которыми документируются сами шаблоны
_AUTHORING_COMMENT = re.compile(r"<!--\s*(?:This template|Instead of|The engine).*?-->", re.DOTALL)

_HTML_END_TAG = "</html>"
_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)


@dataclass(frozen=True)
class RenderResult:
    """Результат рендеринга с диагностикой."""
    html: str
    yield_blocks: List[str] = field(default_factory=list)
    missing_paths: List[str] = field(default_factory=list)
    missing_partials: List[str] = field(default_factory=list)


class EpitomeEngine:
    """
    Шаблонизатор с подмножеством синтаксиса Handlebars.

    Экземпляр не хранит состояния между вызовами: все, что относится
    к одному рендерингу, живет в RenderState и Scope этого вызова.
    """

    def __init__(self, config: Optional[EngineConfig] = None, *, templates_dir: Optional[Path] = None):
        """
        Args:
            config: Настройки движка (по умолчанию EngineConfig())
            templates_dir: Переопределение каталога шаблонов
        """
        config = config or EngineConfig()
        if templates_dir is not None:
            config = replace(config, templates_dir=Path(templates_dir))
        self.config = config

        self.resolver = ContextResolver()
        self.yields = YieldProcessor()
        self.partials = PartialProcessor(self.resolver, config)
        self.conditionals = ConditionalProcessor(self.resolver)
        self.variables = VariableProcessor(self.resolver)
        self.each = EachProcessor(self.resolver, self.partials, self.conditionals, self.variables)

        logger.debug(f"Initialized EpitomeEngine with templates directory: {config.templates_dir}")

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """
        Рендерит текст шаблона с контекстом.

        Args:
            template: Текст шаблона
            context: Данные страницы (включая page_depth)

        Returns:
            Итоговый HTML
        """
        return self.render_with_report(template, context).html

    def render_with_report(self, template: str, context: Mapping[str, Any]) -> RenderResult:
        """То же, что render(), но вместе с диагностикой рендеринга."""
        state = RenderState()
        enhanced = augment_context(context)
        scope = Scope.for_page(enhanced, state)

        logger.debug("Starting template processing")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Initial context: {summarize_context(enhanced)}")

        processed = self.yields.extract_blocks(template, state)
        processed = self.partials.process(processed, scope)
        processed = self.yields.insert_blocks(processed, state)
        processed = self.partials.process(processed, scope)
        processed = self.each.process(processed, scope)
        processed = self.conditionals.process(processed, scope)
        processed = self.variables.process(processed, scope)
        processed = cleanup_remaining_tags(processed)

        return RenderResult(
            html=processed,
            yield_blocks=list(state.yield_blocks),
            missing_paths=list(state.missing_paths),
            missing_partials=list(state.missing_partials),
        )

    # ======= Шаблоны из файлов =======

    def template_path(self, name: str) -> Path:
        suffix = self.config.template_suffix
        file_name = name if name.endswith(suffix) else f"{name}{suffix}"
        return self.config.templates_dir / file_name

    def load_template(self, name: str) -> str:
        """
        Загружает layout-шаблон <templates_dir>/<name>.html (например, тему страницы).

        Raises:
            TemplateNotFoundError: Если файл отсутствует или не читается
        """
        path = self.template_path(name)
        try:
            return path.read_text(encoding=self.config.encoding)
        except OSError as e:
            raise TemplateNotFoundError(name, path, e) from e

    def render_template(self, name: str, context: Mapping[str, Any]) -> str:
        """Загружает шаблон по имени и рендерит его."""
        return self.render(self.load_template(name), context)


def cleanup_remaining_tags(html: str) -> str:
    """
    Финальная очистка.

    • удаляет все теги директив, пережившие конвейер (непарные, неизвестные);
    • удаляет документирующие HTML-комментарии шаблонов;
    • отбрасывает содержимое после первого </html> (дубли от yield),
      если после него есть что-то кроме пробелов и HTML-комментариев.
    """
    if "{{" in html:
        kept: List[str] = []
        stripped = 0
        for token in tokenize_template(html):
            if token.type == TokenType.TEXT:
                kept.append(token.value)
            elif token.type != TokenType.EOF:
                stripped += 1
                logger.debug(f"Removing leftover tag {token.value!r} at {token.line}:{token.column}")
        if stripped:
            logger.warning(f"Removed {stripped} unresolved template tag(s) during cleanup")
        html = "".join(kept)

    html = _AUTHORING_COMMENT.sub("", html)

    end = html.find(_HTML_END_TAG)
    if end > -1:
        tail = html[end + len(_HTML_END_TAG):]
        if _HTML_COMMENT.sub("", tail).strip():
            logger.warning(f"Dropping {len(tail)} chars after closing {_HTML_END_TAG}")
            html = html[: end + len(_HTML_END_TAG)].strip()

    return html


__all__ = ["EpitomeEngine", "RenderResult", "cleanup_remaining_tags"]
