from .html import DirectiveAttributes, escape_html, parse_attributes, stringify, unquote

__all__ = ["DirectiveAttributes", "escape_html", "parse_attributes", "stringify", "unquote"]
