"""
React code generator module.

Generates React function components with hooks from component schemas.
"""

from .generator import ReactGenerator, ReactMarkupRenderer

__all__ = ["ReactGenerator", "ReactMarkupRenderer", "create_generator"]


def create_generator(config=None):
    """Create a React generator, optionally with a GeneratorConfig."""
    return ReactGenerator(config)
