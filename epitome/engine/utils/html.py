"""
HTML helpers for the template engine.

Escaping, value stringification and parsing of directive attribute
strings in the "#id .class1 .class2 path" format.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .. import values

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

# Limit for values written into debug logs
_LOG_VALUE_LIMIT = 100


@dataclass(frozen=True)
class DirectiveAttributes:
    """Parsed "#id .class path" attribute string."""
    id: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    path: str = ""

    @property
    def class_attr(self) -> str:
        return " ".join(self.classes)

    def to_html(self) -> str:
        """Renders ` id="..." class="..."` (empty string when nothing is set)."""
        out = ""
        if self.id:
            out += f' id="{escape_html(self.id)}"'
        if self.classes:
            out += f' class="{escape_html(self.class_attr)}"'
        return out


def escape_html(text: Any) -> str:
    """Escape HTML special characters. None becomes an empty string."""
    if text is None:
        return ""
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in str(text))


def stringify(raw: Any) -> str:
    """
    Converts a context value to the text inserted into the template.

    - missing / None → ""
    - booleans → "true" / "false"
    - single-element sequence → its only element
    - other sequences → elements joined with ", "
    - mappings → JSON
    """
    match values.classify(raw):
        case values.Missing() | values.Scalar(raw=None):
            return ""
        case values.Scalar(raw=bool() as flag):
            return "true" if flag else "false"
        case values.Scalar(raw=scalar):
            return str(scalar)
        case values.Sequence(items=(only,)):
            return stringify(only)
        case values.Sequence(items=items):
            return ", ".join(stringify(item) for item in items)
        case values.Mapping(raw=mapping):
            return json.dumps(mapping, ensure_ascii=False, default=str)
        case _:
            return ""


def parse_attributes(attributes: str) -> DirectiveAttributes:
    """
    Parse ID and class attributes from a string like "#id .class1 .class2 path".

    Tokens starting with '#' set the id (last one wins), tokens starting
    with '.' add classes, everything else is joined back into the path.
    """
    element_id: Optional[str] = None
    classes: List[str] = []
    path_tokens: List[str] = []

    for token in attributes.split():
        if token.startswith("#") and len(token) > 1:
            element_id = token[1:]
        elif token.startswith(".") and len(token) > 1:
            classes.append(token[1:])
        else:
            path_tokens.append(token)

    return DirectiveAttributes(id=element_id, classes=classes, path=" ".join(path_tokens))


def unquote(text: str) -> Optional[str]:
    """Returns the content of a '...' or "..." literal, or None if text is not quoted."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return None


def summarize_for_log(raw: Any) -> str:
    """Short representation of a value for debug logs (long HTML is not dumped)."""
    if isinstance(raw, str) and len(raw) > _LOG_VALUE_LIMIT:
        if "<" in raw and ">" in raw:
            return f"[HTML content: {len(raw)} chars]"
        return f"[String: {len(raw)} chars]"
    if callable(raw):
        return f"<helper {getattr(raw, '__name__', 'fn')}>"
    return repr(raw)


def summarize_context(context: Any) -> dict:
    """Loggable copy of a context: every value summarized."""
    return {key: summarize_for_log(value) for key, value in dict(context).items()}


__all__ = [
    "DirectiveAttributes",
    "escape_html",
    "stringify",
    "parse_attributes",
    "unquote",
    "summarize_for_log",
    "summarize_context",
]
