"""
Процессоры директив шаблона.

Каждый процессор является отдельным текстовым проходом конвейера EpitomeEngine.
"""

from .conditionals import ConditionalProcessor
from .each import EachProcessor
from .partials import PartialProcessor
from .variables import VariableProcessor
from .yields import YieldProcessor

__all__ = [
    "ConditionalProcessor",
    "EachProcessor",
    "PartialProcessor",
    "VariableProcessor",
    "YieldProcessor",
]
