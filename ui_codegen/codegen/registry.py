"""
Generator registry for managing available code generators.

A registry is constructed explicitly and passed to the dispatcher. It owns
the template store that generators register their templates and helpers
into; the store is frozen before the first render.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..logging_config import get_logger
from .core.config import GeneratorConfig, load_config
from .core.generator import CodeGenerator, Framework, GenerateOptions, GeneratorError
from .core.helpers import DEFAULT_HELPERS
from .core.store import TemplateStore
from .core.templates import TemplateEngine
from .frameworks import FRAMEWORK_GENERATORS

logger = get_logger(__name__)


class RegistryError(GeneratorError):
    """Exception raised for registry-related errors."""

    pass


class NoGeneratorRegisteredError(RegistryError):
    """Raised when dispatching with no generator registered."""

    pass


class GeneratorRegistry:
    """Registry of generator instances keyed by framework."""

    def __init__(self, store: Optional[TemplateStore] = None):
        """Initialize an empty registry with a fresh or given template store."""
        self.store = store if store is not None else TemplateStore()
        self._generators: Dict[Framework, CodeGenerator] = {}
        self._active: Optional[Framework] = None

    def register(self, generator: CodeGenerator, replace: bool = False) -> None:
        """
        Register a generator and its templates and helpers.

        Args:
            generator: Generator instance implementing CodeGenerator
            replace: If True, replace an existing registration. If False, skip if exists.

        Raises:
            RegistryError: If the generator is invalid
            TemplateStoreFrozenError: If the store is already frozen
        """
        if not isinstance(generator, CodeGenerator):
            raise RegistryError("Generator must inherit from CodeGenerator")

        framework = generator.framework
        if framework in self._generators and not replace:
            logger.debug("Generator for %s already registered, skipping", framework.value)
            return

        self.store.register_templates(framework.value, generator.templates)
        self.store.register_helpers(generator.helpers, framework.value)
        self._generators[framework] = generator
        logger.debug("Registered %s generator", framework.value)

    def set_active(self, framework: Union[str, Framework]) -> None:
        """
        Select the generator used when options name no framework.

        The active generator can be set once.

        Raises:
            RegistryError: If it is already set to another framework or not registered
        """
        framework = Framework.parse(framework)
        if framework not in self._generators:
            raise RegistryError(f"No generator registered for framework: {framework.value}")
        if self._active is not None and self._active is not framework:
            raise RegistryError(
                f"Active generator already set to '{self._active.value}'"
            )
        self._active = framework

    @property
    def active(self) -> Optional[Framework]:
        return self._active

    def resolve(self, framework: Optional[Union[str, Framework]] = None) -> CodeGenerator:
        """
        Pick the generator for a request.

        An explicit framework wins, then the active one, then the first
        registered.

        Raises:
            NoGeneratorRegisteredError: If nothing is registered
            RegistryError: If the requested framework is not registered
        """
        if not self._generators:
            raise NoGeneratorRegisteredError("No code generator has been registered")

        if framework is not None:
            return self.get_generator(framework)
        if self._active is not None:
            return self._generators[self._active]
        return next(iter(self._generators.values()))

    def get_generator(self, framework: Union[str, Framework]) -> CodeGenerator:
        """
        Get the registered generator for a framework.

        Raises:
            UnknownFrameworkError: If the key is not a framework
            RegistryError: If the framework is not registered
        """
        framework = Framework.parse(framework)
        try:
            return self._generators[framework]
        except KeyError:
            available = ", ".join(self.list_frameworks()) or "none"
            raise RegistryError(
                f"No generator registered for framework: {framework.value}. "
                f"Available: {available}"
            ) from None

    def engine_for(self, generator: CodeGenerator) -> TemplateEngine:
        return TemplateEngine(self.store, generator.framework.value)

    def freeze(self) -> None:
        self.store.freeze()

    def list_frameworks(self) -> List[str]:
        """Registered framework keys in registration order."""
        return [framework.value for framework in self._generators]

    def is_supported(self, framework: Union[str, Framework]) -> bool:
        try:
            return Framework.parse(framework) in self._generators
        except GeneratorError:
            return False

    def get_framework_info(self, framework: Union[str, Framework]) -> Dict[str, Any]:
        """
        Get information about a registered framework.

        Returns:
            Dict with framework information
        """
        generator = self.get_generator(framework)
        sample = generator.filenames("Example", GenerateOptions())
        return {
            "name": generator.framework.value,
            "class": type(generator).__name__,
            "module": type(generator).__module__,
            "active": generator.framework is self._active,
            "main_file": sample["main"],
            "helpers": sorted(generator.helpers),
        }


def create_registry(
    frameworks: Optional[Iterable[Union[str, Framework]]] = None,
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    active: Optional[Union[str, Framework]] = None,
) -> GeneratorRegistry:
    """
    Create a registry populated with the built-in generators.

    Args:
        frameworks: Frameworks to register, in order; all when None
        config: Configuration overrides as a dict or JSON file path
        active: Framework to mark active

    Returns:
        Registry whose store holds the shared helpers and every
        registered generator's templates
    """
    selected = (
        [Framework.parse(framework) for framework in frameworks]
        if frameworks is not None
        else list(FRAMEWORK_GENERATORS)
    )

    registry = GeneratorRegistry()
    registry.store.register_helpers(DEFAULT_HELPERS)

    for framework in selected:
        generator_class = FRAMEWORK_GENERATORS[framework]
        registry.register(generator_class(_framework_config(framework, config)))

    if active is not None:
        registry.set_active(active)
    return registry


def _framework_config(
    framework: Framework, config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]
) -> GeneratorConfig:
    if isinstance(config, GeneratorConfig):
        return config
    if isinstance(config, (str, Path)):
        return load_config(framework.value, config_file=config)
    if isinstance(config, dict):
        return load_config(framework.value, custom_config=config)
    if config is None:
        return load_config(framework.value)
    raise RegistryError(f"Invalid config type: {type(config)}")

