"""
UI Codegen Code Generation Module

Generates framework source code (React, Vue, Angular, plain HTML) from
component schemas.
"""

from .bundle import BundleAssembler, BundleError
from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.generator import (
    CodeGenerator,
    Framework,
    GenerateOptions,
    GeneratedCode,
    GeneratedFile,
    GeneratorError,
    UnknownFrameworkError,
)
from .core.optimizer import CodeOptimizer, ImportDescriptor
from .core.schema import ComponentSchema, SchemaArena, SchemaError
from .dispatcher import GeneratorDispatcher, generate, generate_page
from .registry import (
    GeneratorRegistry,
    NoGeneratorRegisteredError,
    RegistryError,
    create_registry,
)

# Version info
__version__ = "0.1.0"


def quick_generate(schema, framework="react", **options):
    """
    Quick code generation from a schema.

    Args:
        schema: Component schema (dict or ComponentSchema)
        framework: Target framework key
        **options: GenerateOptions fields (snake_case or camelCase)

    Returns:
        Content of the main generated file
    """
    generate_options = GenerateOptions.from_dict({**options, "framework": framework})
    return generate(schema, generate_options).main.content


# Export main interfaces
__all__ = [
    "BundleAssembler",
    "BundleError",
    "CodeGenerator",
    "CodeOptimizer",
    "ComponentSchema",
    "ConfigManager",
    "Framework",
    "GenerateOptions",
    "GeneratedCode",
    "GeneratedFile",
    "GeneratorConfig",
    "GeneratorDispatcher",
    "GeneratorError",
    "GeneratorRegistry",
    "ImportDescriptor",
    "NoGeneratorRegisteredError",
    "RegistryError",
    "SchemaArena",
    "SchemaError",
    "UnknownFrameworkError",
    "create_registry",
    "generate",
    "generate_page",
    "load_config",
    "quick_generate",
]
