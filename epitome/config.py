from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML

from .errors import ConfigError

DEFAULT_CFG_FILE = "epitome.yaml"

# Лимит вложенности partial-включений (защита от циклов вида a → b → a)
PARTIAL_RECURSION_LIMIT = 50

# --------------------------------------------------------------------------- #
# ДЕФОЛТЫ
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "templates_dir": "./src/templates",
    "partials_dir": "partials",
    "template_suffix": ".html",
    "partial_recursion_limit": PARTIAL_RECURSION_LIMIT,
    "encoding": "utf-8",
}

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class EngineConfig:
    """
    Настройки движка шаблонов.

    templates_dir: каталог с layout-шаблонами тем (<theme>.html);
    partials_dir: подкаталог templates_dir с partial-шаблонами.
    """
    templates_dir: Path = Path(_DEFAULT_CFG["templates_dir"])
    partials_dir: str = _DEFAULT_CFG["partials_dir"]
    template_suffix: str = _DEFAULT_CFG["template_suffix"]
    partial_recursion_limit: int = PARTIAL_RECURSION_LIMIT
    encoding: str = _DEFAULT_CFG["encoding"]

    @property
    def partials_root(self) -> Path:
        """Абсолютный (или относительный cwd) путь к каталогу partials."""
        return self.templates_dir / self.partials_dir

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], *, base_dir: Optional[Path] = None) -> EngineConfig:
        """
        Создает конфиг из словаря (например, из YAML).

        Относительный templates_dir разрешается от base_dir, если он задан.
        """
        unknown = sorted(set(raw) - set(_DEFAULT_CFG))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        cfg = _merge_defaults(raw)

        limit = cfg["partial_recursion_limit"]
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ConfigError(f"partial_recursion_limit must be a positive integer, got {limit!r}")

        for key in ("templates_dir", "partials_dir", "template_suffix", "encoding"):
            if not isinstance(cfg[key], str) or not cfg[key]:
                raise ConfigError(f"{key} must be a non-empty string, got {cfg[key]!r}")

        templates_dir = Path(cfg["templates_dir"])
        if base_dir is not None and not templates_dir.is_absolute():
            templates_dir = base_dir / templates_dir

        return cls(
            templates_dir=templates_dir,
            partials_dir=cfg["partials_dir"],
            template_suffix=cfg["template_suffix"],
            partial_recursion_limit=limit,
            encoding=cfg["encoding"],
        )


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)                      # пользовательские ключи перекрывают
    return cfg


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Path) -> EngineConfig:
    """
    Загрузить epitome.yaml.

    • Если файла нет, вернуть дефолты.
    • Относительные пути считаются от каталога конфига.
    • Неизвестные ключи и некорректные значения → ConfigError.
    """
    if not path.exists():
        return EngineConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except Exception as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    return EngineConfig.from_dict(raw, base_dir=path.parent)


__all__ = ["EngineConfig", "load_config", "DEFAULT_CFG_FILE", "PARTIAL_RECURSION_LIMIT"]
