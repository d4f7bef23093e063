"""
Core code generation components.

Provides the template engine, schema storage, analysis and optimization
used by all framework generators.
"""

from .analyzer import SchemaAnalyzer
from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .generator import (
    CodeGenerator,
    Framework,
    GenerateOptions,
    GeneratedCode,
    GeneratedFile,
    GeneratorError,
    UnknownFrameworkError,
)
from .markup import MarkupRenderer
from .naming import NameSanitizer, NamingCase
from .optimizer import CodeOptimizer, ImportDescriptor
from .schema import ComponentSchema, NodeRecord, SchemaArena, SchemaError, wrap_siblings
from .store import (
    ARTIFACT_KINDS,
    TemplateError,
    TemplateNotFoundError,
    TemplateStore,
    TemplateStoreFrozenError,
)
from .templates import TemplateEngine, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "Framework",
    "GenerateOptions",
    "GeneratedCode",
    "GeneratedFile",
    "GeneratorError",
    "UnknownFrameworkError",
    # Schema system
    "ComponentSchema",
    "NodeRecord",
    "SchemaArena",
    "SchemaError",
    "wrap_siblings",
    # Analysis and markup
    "SchemaAnalyzer",
    "MarkupRenderer",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "ARTIFACT_KINDS",
    "TemplateEngine",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateStore",
    "TemplateStoreFrozenError",
    "create_template_engine",
    # Optimizer
    "CodeOptimizer",
    "ImportDescriptor",
]
