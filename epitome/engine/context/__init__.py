from .resolver import ContextResolver, THIS_KEY, INDEX_KEY

__all__ = ["ContextResolver", "THIS_KEY", "INDEX_KEY"]
