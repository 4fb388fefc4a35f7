"""
Epitome: шаблонизатор HTML-страниц с layout/partial-композицией.
"""

from __future__ import annotations

from .config import EngineConfig, load_config
from .engine import EpitomeEngine, RenderResult
from .errors import ConfigError, EpitomeUserError, TemplateNotFoundError
from .version import tool_version

__version__ = tool_version()

__all__ = [
    "EpitomeEngine",
    "RenderResult",
    "EngineConfig",
    "load_config",
    "EpitomeUserError",
    "TemplateNotFoundError",
    "ConfigError",
    "__version__",
]
