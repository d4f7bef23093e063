"""
Plain HTML code generator module.

Generates dependency-free HTML, CSS and JavaScript from component schemas.
"""

from .generator import HtmlGenerator, HtmlMarkupRenderer

__all__ = ["HtmlGenerator", "HtmlMarkupRenderer", "create_generator"]


def create_generator(config=None):
    """Create a plain HTML generator, optionally with a GeneratorConfig."""
    return HtmlGenerator(config)
