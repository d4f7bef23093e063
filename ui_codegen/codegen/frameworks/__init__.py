"""
Framework-specific code generators.

This module maps every supported framework to its generator class.
"""

from typing import Dict, Type

from ..core.generator import CodeGenerator, Framework
from .angular import AngularGenerator
from .html import HtmlGenerator
from .react import ReactGenerator
from .vue import VueGenerator

# One generator per Framework member; registration order is the default order
FRAMEWORK_GENERATORS: Dict[Framework, Type[CodeGenerator]] = {
    Framework.REACT: ReactGenerator,
    Framework.VUE: VueGenerator,
    Framework.ANGULAR: AngularGenerator,
    Framework.HTML: HtmlGenerator,
}

__all__ = [
    "FRAMEWORK_GENERATORS",
    "AngularGenerator",
    "HtmlGenerator",
    "ReactGenerator",
    "VueGenerator",
]
