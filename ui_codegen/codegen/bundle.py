"""
Bundle assembly for generated artifacts.

Collects generated components and pages into a project layout, renders
scaffold files (package.json, README.md) with Jinja2 and writes the result
to a directory or a zip archive.
"""

import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..logging_config import get_logger
from .core.generator import Framework, GeneratedCode

logger = get_logger(__name__)

# Runtime packages a bundle needs per framework
FRAMEWORK_DEPENDENCIES: Dict[Framework, Dict[str, str]] = {
    Framework.REACT: {"react": "^18.2.0", "react-dom": "^18.2.0"},
    Framework.VUE: {"vue": "^3.4.0"},
    Framework.ANGULAR: {
        "@angular/common": "^17.0.0",
        "@angular/core": "^17.0.0",
        "@angular/platform-browser": "^17.0.0",
    },
    Framework.HTML: {},
}


class BundleError(Exception):
    """Exception raised for bundle assembly errors."""

    pass


@dataclass(frozen=True)
class BundleEntry:
    path: str
    content: str
    framework: str
    kind: str


def _env() -> Environment:
    template_dir = Path(__file__).parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class BundleAssembler:
    """Assembles generated code into a deployable project tree."""

    def __init__(self, name: str = "ui-bundle", version: str = "0.1.0", description: str = ""):
        self.name = name
        self.version = version
        self.description = description or "Components generated by ui-codegen."
        self._entries: Dict[str, BundleEntry] = {}
        self._frameworks: List[Framework] = []

    @property
    def entries(self) -> List[BundleEntry]:
        return list(self._entries.values())

    def add(self, generated: GeneratedCode, directory: Optional[str] = None) -> List[str]:
        """
        Add the artifacts of one generation call.

        Components go under ``src/components/<Name>`` and pages under
        ``src/pages/<Name>`` unless a directory is given. Empty artifacts
        are skipped.

        Returns:
            Bundle-relative paths that were added

        Raises:
            BundleError: If a path is already taken by different content
        """
        if directory is None:
            section = "pages" if generated.metadata.get("page") else "components"
            name = generated.metadata.get("componentName") or generated.main.filename.split(".")[0]
            directory = f"src/{section}/{name}"
        directory = directory.strip("/")

        added = []
        for kind, artifact in generated.files.items():
            if not artifact.content.strip():
                continue
            path = f"{directory}/{artifact.filename}" if directory else artifact.filename
            existing = self._entries.get(path)
            if existing is not None:
                if existing.content == artifact.content:
                    continue
                raise BundleError(f"Bundle path already holds different content: {path}")
            self._entries[path] = BundleEntry(path, artifact.content, generated.framework.value, kind)
            added.append(path)

        if generated.framework not in self._frameworks:
            self._frameworks.append(generated.framework)
        logger.debug("Added %d files to bundle '%s'", len(added), self.name)
        return added

    def dependencies(self) -> Dict[str, str]:
        merged: Dict[str, str] = {}
        for framework in self._frameworks:
            merged.update(FRAMEWORK_DEPENDENCIES[framework])
        return merged

    def render_scaffold(self) -> Dict[str, str]:
        """Render package.json and README.md for the current entries."""
        env = _env()
        context = {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "dependencies": self.dependencies(),
            "entries": sorted(self.entries, key=lambda entry: entry.path),
        }
        return {
            "package.json": env.get_template("package.json.j2").render(**context),
            "README.md": env.get_template("README.md.j2").render(**context),
        }

    def files(self) -> Dict[str, str]:
        """All bundle files keyed by relative path, scaffold included."""
        if not self._entries:
            raise BundleError("Bundle is empty")
        files = {path: entry.content for path, entry in sorted(self._entries.items())}
        for path, content in self.render_scaffold().items():
            if path in files:
                raise BundleError(f"Generated file collides with scaffold file: {path}")
            files[path] = content
        return files

    def write(self, output_dir: Union[str, Path]) -> List[Path]:
        """Write the bundle into a directory, creating it if needed."""
        root = Path(output_dir)
        files = self.files()
        written = []
        try:
            for relative, content in files.items():
                target = root / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                written.append(target)
        except OSError as e:
            raise BundleError(f"Failed to write bundle to {root}: {e}") from e
        logger.info("Wrote %d files to %s", len(written), root)
        return written

    def write_zip(self, archive_path: Union[str, Path]) -> Path:
        """Write the bundle as a zip archive rooted at the bundle name."""
        path = Path(archive_path)
        files = self.files()
        try:
            with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for relative, content in files.items():
                    archive.writestr(f"{self.name}/{relative}", content)
        except OSError as e:
            raise BundleError(f"Failed to write bundle archive {path}: {e}") from e
        logger.info("Wrote bundle archive %s", path)
        return path
