"""
Generator dispatch.

Routes a generation request to the selected framework generator and runs
the pipeline: analyze, render the three artifacts against one context,
assemble the result and optionally optimize it.
"""

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ..logging_config import get_logger
from .core.config import get_config_manager
from .core.generator import CodeGenerator, GenerateOptions, GeneratedCode, GeneratedFile
from .core.optimizer import CodeOptimizer, ImportDescriptor
from .core.schema import SchemaInput
from .registry import GeneratorRegistry, create_registry

logger = get_logger(__name__)

OptionsInput = Union[GenerateOptions, Mapping[str, Any], None]


def _as_options(options: OptionsInput) -> GenerateOptions:
    if options is None:
        return GenerateOptions()
    if isinstance(options, GenerateOptions):
        return options
    return GenerateOptions.from_dict(options)


class GeneratorDispatcher:
    """Runs generation requests against a registry of framework generators."""

    def __init__(self, registry: GeneratorRegistry):
        self.registry = registry

    def generate(self, schema: SchemaInput, options: OptionsInput = None) -> GeneratedCode:
        """
        Generate a component from one schema tree.

        Raises:
            NoGeneratorRegisteredError: If the registry is empty
            TemplateNotFoundError: If a required template is missing
            SchemaError: If the schema is malformed
        """
        return self._dispatch(schema, _as_options(options), page=False)

    def generate_page(
        self, schemas: Sequence[SchemaInput], options: OptionsInput = None
    ) -> GeneratedCode:
        """Generate a page from a list of sibling section schemas."""
        return self._dispatch(list(schemas), _as_options(options), page=True)

    def _dispatch(self, schema: Any, options: GenerateOptions, page: bool) -> GeneratedCode:
        generator = self.registry.resolve(options.framework)
        # Registration is over once the first request is served
        self.registry.freeze()

        context = generator.analyze(schema, options, page=page)
        engine = self.registry.engine_for(generator)
        contents = generator.render_artifacts(context, engine, page=page)
        filenames = generator.filenames(context["componentName"], options, page=page)

        generated = GeneratedCode(
            files={
                kind: GeneratedFile(content, filenames[kind])
                for kind, content in contents.items()
            },
            framework=generator.framework,
            warnings=self._warnings(generator),
            metadata=self._metadata(context, page),
        )
        logger.info(
            "Generated %s %s '%s'",
            generator.framework.value,
            "page" if page else "component",
            context["componentName"],
        )

        if options.optimize:
            optimizer = CodeOptimizer(generator.config)
            generated = optimizer.optimize(
                generated, import_descriptors(context), lazy_imports=options.lazy_imports
            )
        return generated

    def _warnings(self, generator: CodeGenerator):
        return get_config_manager().validate_config(generator.config, generator.framework.value)

    @staticmethod
    def _metadata(context: Mapping[str, Any], page: bool) -> Dict[str, Any]:
        return {
            "componentName": context["componentName"],
            "page": page,
            "imports": [
                {"name": entry["name"], "source": entry["source"], "weight": entry["weight"]}
                for entry in context["imports"]
            ],
            "stateCount": len(context["state"]),
            "styleRuleCount": len(context["styles"]),
        }


def import_descriptors(context: Mapping[str, Any]):
    """Import descriptors for the optimizer; weights are clamped into [0, 1]."""
    descriptors = []
    for entry in context["imports"]:
        weight = min(max(float(entry["weight"]), 0.0), 1.0)
        if weight != entry["weight"]:
            logger.warning("Clamped weight of import '%s' to %s", entry["name"], weight)
        descriptors.append(ImportDescriptor(entry["name"], entry["source"], weight))
    return descriptors


def generate(
    schema: SchemaInput,
    options: OptionsInput = None,
    registry: Optional[GeneratorRegistry] = None,
) -> GeneratedCode:
    """
    Convenience function to generate a component.

    Builds a registry with every built-in generator when none is given.
    """
    return GeneratorDispatcher(registry or create_registry()).generate(schema, options)


def generate_page(
    schemas: Sequence[SchemaInput],
    options: OptionsInput = None,
    registry: Optional[GeneratorRegistry] = None,
) -> GeneratedCode:
    """Convenience function to generate a page."""
    return GeneratorDispatcher(registry or create_registry()).generate_page(schemas, options)
