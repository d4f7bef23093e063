"""
Vue code generator module.

Generates Vue 3 single-file components from component schemas.
"""

from .generator import VueGenerator, VueMarkupRenderer

__all__ = ["VueGenerator", "VueMarkupRenderer", "create_generator"]


def create_generator(config=None):
    """Create a Vue generator, optionally with a GeneratorConfig."""
    return VueGenerator(config)
