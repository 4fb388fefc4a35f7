"""
Unified test infrastructure for Epitome.

Modules:
- file_utils: Utilities for creating template and partial files
- rendering_utils: Engine construction and rendering shortcuts
"""

from .file_utils import write, write_partial, write_template
from .rendering_utils import make_engine, make_scope

__all__ = [
    "write",
    "write_partial",
    "write_template",
    "make_engine",
    "make_scope",
]
