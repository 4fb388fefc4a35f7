"""
Типизированное представление значений контекста.

Любое сырое значение контекста классифицируется в один из вариантов
Missing | Scalar | Sequence | Mapping | Helper, после чего потребители
разбирают его через match, а не через разрозненные isinstance-проверки.
"""

from __future__ import annotations

import collections.abc as abc
from dataclasses import dataclass
from typing import Any, Callable, Union


class _MissingType:
    """Маркер отсутствующего значения (в отличие от явного None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _MissingType()


@dataclass(frozen=True)
class Missing:
    """Путь не разрешился ни на одном этапе поиска."""
    pass


@dataclass(frozen=True)
class Scalar:
    """Строка, число, булево значение или None (bytes декодируются как UTF-8)."""
    raw: Any


@dataclass(frozen=True)
class Sequence:
    """Упорядоченная последовательность (list/tuple), но не строка."""
    items: tuple


@dataclass(frozen=True)
class Mapping:
    """Вложенный словарь."""
    raw: abc.Mapping


@dataclass(frozen=True)
class Helper:
    """Вызываемый хелпер, внедренный в контекст (assetPath, urlPath)."""
    func: Callable[[str], str]


Value = Union[Missing, Scalar, Sequence, Mapping, Helper]


def classify(raw: Any) -> Value:
    """Переводит сырое значение контекста в вариант Value."""
    if raw is MISSING:
        return Missing()
    if isinstance(raw, str):
        return Scalar(raw)
    if isinstance(raw, (bytes, bytearray)):
        return Scalar(bytes(raw).decode("utf-8", errors="replace"))
    if isinstance(raw, abc.Mapping):
        return Mapping(raw)
    if isinstance(raw, (list, tuple)):
        return Sequence(tuple(raw))
    if callable(raw):
        return Helper(raw)
    return Scalar(raw)


def is_sequence(raw: Any) -> bool:
    match classify(raw):
        case Sequence():
            return True
        case _:
            return False


def is_truthy(raw: Any) -> bool:
    """
    Таблица истинности для {{#if}}.

    Ложны: отсутствующее значение, None, False, пустая строка,
    пустая последовательность. Все остальное истинно, включая 0, "0"
    и пустой словарь.
    """
    match classify(raw):
        case Missing():
            return False
        case Scalar(raw=None) | Scalar(raw=False):
            return False
        case Scalar(raw=str() as text):
            return text != ""
        case Sequence(items=items):
            return len(items) > 0
        case _:
            return True


__all__ = [
    "MISSING",
    "Missing",
    "Scalar",
    "Sequence",
    "Mapping",
    "Helper",
    "Value",
    "classify",
    "is_sequence",
    "is_truthy",
]
