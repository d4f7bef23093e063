"""
Template and helper storage.

Templates are keyed by generator identity and artifact kind. The store is
filled while generators are registered and frozen before the first render;
after that it is read-only and can be shared between concurrent renders.
"""

from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from ...logging_config import get_logger

logger = get_logger(__name__)

ARTIFACT_KINDS: Tuple[str, ...] = ("component", "page", "styles", "index")

Helper = Callable[..., object]


class TemplateError(Exception):
    """Base exception for template-related errors."""

    pass


class TemplateNotFoundError(TemplateError):
    """Raised when rendering a template name that was never registered."""

    def __init__(self, generator: str, kind: str):
        self.generator = generator
        self.kind = kind
        super().__init__(f"No '{kind}' template registered for generator '{generator}'")


class TemplateConfigurationError(TemplateError):
    """Raised for invalid template or helper registrations."""

    pass


class TemplateStoreFrozenError(TemplateConfigurationError):
    """Raised when registering into a store that has been frozen."""

    pass


class TemplateStore:
    """Registry of named templates and helper functions."""

    def __init__(self):
        self._templates: Dict[Tuple[str, str], str] = {}
        self._shared_helpers: Dict[str, Helper] = {}
        self._generator_helpers: Dict[str, Dict[str, Helper]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the store read-only. Calling it again is a no-op."""
        if not self._frozen:
            logger.debug(
                "Freezing template store with %d templates", len(self._templates)
            )
        self._frozen = True

    def _check_writable(self) -> None:
        if self._frozen:
            raise TemplateStoreFrozenError(
                "Template store is frozen; register templates before rendering"
            )

    def register_templates(self, generator: str, templates: Mapping[str, str]) -> None:
        """
        Register the full template set of one generator.

        Args:
            generator: Generator identity (framework key)
            templates: Exactly one template per artifact kind

        Raises:
            TemplateConfigurationError: If kinds are missing or unexpected
            TemplateStoreFrozenError: If the store is frozen
        """
        self._check_writable()

        missing = [kind for kind in ARTIFACT_KINDS if kind not in templates]
        unexpected = sorted(set(templates) - set(ARTIFACT_KINDS))
        if missing or unexpected:
            raise TemplateConfigurationError(
                f"Generator '{generator}' must provide exactly the templates "
                f"{', '.join(ARTIFACT_KINDS)} (missing: {missing or 'none'}, "
                f"unexpected: {unexpected or 'none'})"
            )

        for kind in ARTIFACT_KINDS:
            self.register_template(generator, kind, templates[kind])

    def register_template(self, generator: str, kind: str, source: str) -> None:
        """Register or replace a single template."""
        self._check_writable()
        if kind not in ARTIFACT_KINDS:
            raise TemplateConfigurationError(f"Unknown artifact kind: {kind}")
        if not isinstance(source, str):
            raise TemplateConfigurationError(
                f"Template '{generator}.{kind}' must be a string"
            )
        self._templates[(generator, kind)] = source

    def register_helper(
        self, name: str, helper: Helper, generator: Optional[str] = None
    ) -> None:
        """
        Register a helper function.

        Args:
            name: Name used in ``{{name arg ...}}`` markers
            helper: Callable taking the resolved arguments
            generator: Restrict the helper to one generator; None shares it
        """
        self._check_writable()
        if not callable(helper):
            raise TemplateConfigurationError(f"Helper '{name}' is not callable")
        if not name.isidentifier():
            raise TemplateConfigurationError(f"Invalid helper name: {name!r}")

        if generator is None:
            self._shared_helpers[name] = helper
        else:
            self._generator_helpers.setdefault(generator, {})[name] = helper

    def register_helpers(
        self, helpers: Mapping[str, Helper], generator: Optional[str] = None
    ) -> None:
        for name, helper in helpers.items():
            self.register_helper(name, helper, generator)

    def get_template(self, generator: str, kind: str) -> str:
        try:
            return self._templates[(generator, kind)]
        except KeyError:
            raise TemplateNotFoundError(generator, kind) from None

    def has_template(self, generator: str, kind: str) -> bool:
        return (generator, kind) in self._templates

    def helpers_for(self, generator: Optional[str] = None) -> Mapping[str, Helper]:
        """Read-only view of shared helpers overlaid with the generator's own."""
        merged = dict(self._shared_helpers)
        if generator is not None:
            merged.update(self._generator_helpers.get(generator, {}))
        return MappingProxyType(merged)

    def generators(self) -> Tuple[str, ...]:
        return tuple(sorted({generator for generator, _ in self._templates}))
