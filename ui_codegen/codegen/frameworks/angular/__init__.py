"""
Angular code generator module.

Generates Angular standalone components from component schemas.
"""

from .generator import AngularGenerator, AngularMarkupRenderer

__all__ = ["AngularGenerator", "AngularMarkupRenderer", "create_generator"]


def create_generator(config=None):
    """Create an Angular generator, optionally with a GeneratorConfig."""
    return AngularGenerator(config)
