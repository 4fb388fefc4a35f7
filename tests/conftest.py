from pathlib import Path

import pytest

from epitome.engine import EpitomeEngine
from tests.infrastructure import make_engine


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Пустой каталог шаблонов с подкаталогом partials/."""
    root = tmp_path / "templates"
    (root / "partials").mkdir(parents=True)
    return root


@pytest.fixture
def engine(templates_dir: Path) -> EpitomeEngine:
    """Движок, настроенный на временный каталог шаблонов."""
    return make_engine(templates_dir)
