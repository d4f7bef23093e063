"""
Base generator interface for all code generation targets.

Defines the closed set of target frameworks, the generation options and
output records, and the contract every framework generator implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ...logging_config import get_logger
from .analyzer import SchemaAnalyzer
from .config import GeneratorConfig
from .markup import MarkupRenderer
from .naming import component_name
from .schema import SchemaInput
from .templates import TemplateEngine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class UnknownFrameworkError(GeneratorError):
    """Raised for framework keys outside the supported set."""

    pass


class Framework(Enum):
    """Supported target frameworks."""

    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"
    HTML = "html"

    @classmethod
    def parse(cls, key: Union[str, "Framework"]) -> "Framework":
        """
        Resolve a framework key or alias.

        Raises:
            UnknownFrameworkError: If the key is not a supported framework
        """
        if isinstance(key, Framework):
            return key
        normalized = str(key).strip().lower()
        normalized = FRAMEWORK_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            available = ", ".join(member.value for member in cls)
            raise UnknownFrameworkError(
                f"Unknown framework: {key}. Available: {available}"
            ) from None


FRAMEWORK_ALIASES = {
    "reactjs": "react",
    "jsx": "react",
    "vue3": "vue",
    "vuejs": "vue",
    "ng": "angular",
    "vanilla": "html",
    "static": "html",
}


@dataclass(frozen=True)
class GenerateOptions:
    """Options for one generation call."""

    framework: Optional[Framework] = None
    typescript: bool = False
    component_name: Optional[str] = None
    description: Optional[str] = None
    is_module: bool = False
    page_name: Optional[str] = None
    page_title: Optional[str] = None
    optimize: bool = False
    lazy_imports: bool = False

    def __post_init__(self):
        # Fail fast on unknown framework keys
        if self.framework is not None:
            object.__setattr__(self, "framework", Framework.parse(self.framework))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerateOptions":
        """Build options from camelCase or snake_case keys."""
        aliases = {
            "componentName": "component_name",
            "isModule": "is_module",
            "pageName": "page_name",
            "pageTitle": "page_title",
            "lazyImports": "lazy_imports",
        }
        known = set(cls.__dataclass_fields__)
        kwargs = {}
        for key, value in data.items():
            key = aliases.get(key, key)
            if key in known:
                kwargs[key] = value
        return cls(**kwargs)

    def to_context(self) -> Dict[str, Any]:
        """Template-facing view of the options."""
        return {
            "typescript": self.typescript,
            "description": self.description,
            "isModule": self.is_module,
            "pageName": self.page_name,
            "pageTitle": self.page_title,
        }


@dataclass
class GeneratedFile:
    """One named artifact."""

    content: str
    filename: str


@dataclass
class GeneratedCode:
    """Output of one generation call, keyed by artifact kind (main, styles, index)."""

    files: Dict[str, GeneratedFile]
    framework: Framework
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def main(self) -> GeneratedFile:
        return self.files["main"]

    @property
    def styles(self) -> GeneratedFile:
        return self.files["styles"]

    @property
    def index(self) -> GeneratedFile:
        return self.files["index"]

    def replace_contents(self, contents: Mapping[str, str]) -> "GeneratedCode":
        """Copy with rewritten contents; filenames are unchanged."""
        files = {
            kind: GeneratedFile(contents.get(kind, generated.content), generated.filename)
            for kind, generated in self.files.items()
        }
        return GeneratedCode(files, self.framework, list(self.warnings), dict(self.metadata))


class CodeGenerator(ABC):
    """Abstract base class for all framework generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()

    @property
    @abstractmethod
    def framework(self) -> Framework:
        """Return the target framework."""
        pass

    @property
    @abstractmethod
    def templates(self) -> Mapping[str, str]:
        """Return the component, page, styles and index templates."""
        pass

    @property
    def helpers(self) -> Mapping[str, Callable[..., Any]]:
        """Return framework-specific template helpers."""
        return {}

    @abstractmethod
    def create_renderer(self, options: GenerateOptions) -> MarkupRenderer:
        """Return the markup renderer for this framework."""
        pass

    @abstractmethod
    def filenames(self, name: str, options: GenerateOptions, page: bool = False) -> Dict[str, str]:
        """Return filenames keyed by ``main``, ``styles`` and ``index``."""
        pass

    def build_context(
        self, context: Dict[str, Any], options: GenerateOptions, page: bool
    ) -> Dict[str, Any]:
        """Add framework-specific keys to the analyzed context."""
        return context

    # Pipeline steps

    def analyze(
        self,
        schema: Union[SchemaInput, Sequence[SchemaInput]],
        options: GenerateOptions,
        page: bool = False,
    ) -> Mapping[str, Any]:
        """
        Analyze a schema (or page sections) and merge in the options.

        Returns:
            Read-only render context
        """
        analyzer = SchemaAnalyzer(self.create_renderer(options), self.config)
        context = analyzer.analyze_page(schema) if page else analyzer.analyze(schema)

        if options.component_name:
            context["componentName"] = self.component_identifier(options.component_name)

        context.update(options.to_context())
        if not self.config.add_comments:
            context["description"] = None

        if page:
            # Pages are entry points and take no props
            if context["props"]:
                logger.debug("Ignoring %d prop definitions on page", len(context["props"]))
            context.update(hasProps=False, props=[], propBindings=[])
            page_name = self.component_identifier(
                options.page_name or options.component_name or "Page"
            )
            context["componentName"] = page_name
            context["pageName"] = page_name
            context["pageTitle"] = options.page_title or page_name
        else:
            context.update(pageName=None, pageTitle=None)

        files = self.filenames(context["componentName"], options, page)
        context["fileName"] = files["main"]
        context["styleFile"] = files["styles"]
        context["moduleName"] = files["main"].rsplit(".", 1)[0]

        context = self.build_context(context, options, page)
        return MappingProxyType(context)

    def render_artifacts(
        self, context: Mapping[str, Any], engine: TemplateEngine, page: bool = False
    ) -> Dict[str, str]:
        """Render main, styles and index artifacts from one context."""
        main_kind = "page" if page else "component"
        return {
            "main": self.format_code(engine.render(main_kind, context)),
            "styles": self.format_code(engine.render("styles", context)),
            "index": self.format_code(engine.render("index", context)),
        }

    def component_identifier(self, name: str) -> str:
        return component_name(name, self.config.default_component_name)

    def format_code(self, code: str) -> str:
        """
        Basic cleanup of rendered code.

        Strips trailing whitespace, collapses runs of blank lines and ends
        the text with exactly one newline (empty text stays empty).
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        text = "\n".join(formatted_lines).strip("\n")
        return f"{text}\n" if text else ""
