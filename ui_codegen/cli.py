"""
Command-line interface for ui-codegen.

Generates framework components and pages from schema JSON files or URLs,
lists the available frameworks and writes bundles.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    BundleAssembler,
    BundleError,
    GenerateOptions,
    GeneratedCode,
    GeneratorDispatcher,
    GeneratorError,
    create_registry,
)
from .codegen.core.config import ConfigError, get_config_manager
from .codegen.core.naming import to_kebab_case
from .codegen.core.schema import SchemaError
from .codegen.core.store import TemplateError
from .logging_config import configure_logging, get_logger
from .utils import SchemaLoaderError, load_page_sections, load_schema_source

logger = get_logger(__name__)

console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="ui-codegen",
        description="Generate framework source code from UI component schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ui-codegen generate card.json --framework react --typescript
  ui-codegen generate card.json -f vue --module --optimize -o out/
  ui-codegen page hero.json features.json -f html --title "Home" --bundle site/
  ui-codegen frameworks
        """.strip(),
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    generate_parser = subparsers.add_parser(
        "generate", help="Generate a component from one schema"
    )
    generate_parser.add_argument("schema", help="Schema JSON file or http(s) URL")
    _add_generation_args(generate_parser)
    generate_parser.add_argument("--name", help="Component name override")
    generate_parser.set_defaults(func=_handle_generate)

    page_parser = subparsers.add_parser(
        "page", help="Generate a page from section schemas"
    )
    page_parser.add_argument(
        "schemas", nargs="+", help="Section schema files or URLs (a file may hold a list)"
    )
    _add_generation_args(page_parser)
    page_parser.add_argument("--page-name", help="Page component name")
    page_parser.add_argument("--title", help="Page title")
    page_parser.set_defaults(func=_handle_page)

    frameworks_parser = subparsers.add_parser("frameworks", help="List supported frameworks")
    frameworks_parser.add_argument("--info", metavar="FRAMEWORK", help="Show details for one framework")
    frameworks_parser.set_defaults(func=_handle_frameworks)

    return parser


def _add_generation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--framework", "-f", help="Target framework (default: react)")
    parser.add_argument("--typescript", "--ts", action="store_true", help="Emit TypeScript")
    parser.add_argument("--description", help="Doc comment for the generated code")
    parser.add_argument("--module", action="store_true", help="Use CSS modules")
    parser.add_argument("--optimize", action="store_true", help="Run the optimizer passes")
    parser.add_argument(
        "--lazy", action="store_true", help="Lazy-load rarely used components (with --optimize)"
    )
    parser.add_argument("--config", help="Configuration file path (JSON)")
    parser.add_argument("--no-comments", action="store_true", help="Don't add comments")
    parser.add_argument(
        "--save-config", metavar="FILE", help="Save the effective configuration as JSON to FILE"
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument("--output", "-o", metavar="DIR", help="Write artifacts into DIR")
    output_group.add_argument("--bundle", metavar="DIR", help="Write a bundle with scaffold files into DIR")
    output_group.add_argument("--zip", metavar="FILE", help="Write a bundle as a zip archive")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``ui-codegen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except (GeneratorError, TemplateError, SchemaError, ConfigError, BundleError) as e:
        console.print(f"[red]✗ Generation failed:[/red] {e}")
        logger.debug("Generation failed", exc_info=True)
        return 1
    except (SchemaLoaderError, FileNotFoundError) as e:
        console.print(f"[red]✗ Failed to load input:[/red] {e}")
        return 1


def _build_registry(args: argparse.Namespace):
    config: Any = None
    if args.config or args.no_comments:
        config = {}
        if args.config:
            path = Path(args.config)
            try:
                config.update(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as e:
                raise CLIError(f"Failed to load config file {path}: {e}") from e
        if args.no_comments:
            config["add_comments"] = False
    return create_registry(config=config)


def _dispatcher(args: argparse.Namespace, options: GenerateOptions) -> GeneratorDispatcher:
    registry = _build_registry(args)
    if args.save_config:
        config = registry.get_generator(options.framework).config
        get_config_manager().save_config(config, args.save_config)
        console.print(f"[green]✓[/green] Configuration saved to [cyan]{args.save_config}[/cyan]")
    return GeneratorDispatcher(registry)


def _options(args: argparse.Namespace, **extra) -> GenerateOptions:
    return GenerateOptions(
        framework=args.framework or "react",
        typescript=args.typescript,
        description=args.description,
        is_module=args.module,
        optimize=args.optimize,
        lazy_imports=args.lazy,
        **extra,
    )


def _handle_generate(args: argparse.Namespace) -> int:
    source, schema = load_schema_source(args.schema)
    options = _options(args, component_name=args.name)
    dispatcher = _dispatcher(args, options)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"[green]Generating {options.framework.value} component...", total=None)
        generated = dispatcher.generate(schema, options)

    logger.info("Generated component from %s", source)
    return _output(generated, args)


def _handle_page(args: argparse.Namespace) -> int:
    sections = load_page_sections(args.schemas)
    options = _options(args, page_name=args.page_name, page_title=args.title)
    dispatcher = _dispatcher(args, options)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"[green]Generating {options.framework.value} page...", total=None)
        generated = dispatcher.generate_page(sections, options)

    return _output(generated, args)


def _output(generated: GeneratedCode, args: argparse.Namespace) -> int:
    """Write or display generated artifacts."""
    if args.bundle or args.zip:
        assembler = BundleAssembler(name=_bundle_name(generated))
        assembler.add(generated)
        if args.zip:
            path = assembler.write_zip(args.zip)
            console.print(f"[green]✓[/green] Bundle archive saved to [cyan]{path}[/cyan]")
        else:
            written = assembler.write(args.bundle)
            console.print(
                f"[green]✓[/green] Bundle with {len(written)} files saved to [cyan]{args.bundle}[/cyan]"
            )
    elif args.output:
        output_dir = Path(args.output)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            for artifact in generated.files.values():
                if not artifact.content:
                    continue
                target = output_dir / artifact.filename
                target.write_text(artifact.content, encoding="utf-8")
                console.print(f"[green]✓[/green] Saved [cyan]{target}[/cyan]")
        except OSError as e:
            raise CLIError(f"Failed to write to {output_dir}: {e}") from e
    else:
        for artifact in generated.files.values():
            if not artifact.content:
                continue
            lexer = Syntax.guess_lexer(artifact.filename, artifact.content)
            console.print(
                Panel(
                    Syntax(artifact.content, lexer, theme="monokai"),
                    title=f"📄 {artifact.filename}",
                    border_style="green",
                )
            )

    if args.verbose and generated.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")
        for key, value in generated.metadata.items():
            metadata_table.add_row(key, str(value))
        console.print(metadata_table)

    if generated.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in generated.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
    return 0


def _bundle_name(generated: GeneratedCode) -> str:
    return to_kebab_case(generated.metadata.get("componentName", "")) or "ui-bundle"


def _handle_frameworks(args: argparse.Namespace) -> int:
    registry = create_registry()

    if args.info:
        if not registry.is_supported(args.info):
            raise CLIError(
                f"Framework '{args.info}' is not supported. "
                f"Available: {', '.join(registry.list_frameworks())}"
            )
        info = registry.get_framework_info(args.info)
        info_text = (
            f"[bold]Framework:[/bold] {info['name']}\n"
            f"[bold]Main file:[/bold] {info['main_file']}\n"
            f"[bold]Generator Class:[/bold] {info['class']}\n"
            f"[bold]Module:[/bold] {info['module']}\n"
            f"[bold]Helpers:[/bold] {', '.join(info['helpers']) or 'none'}"
        )
        console.print(Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green"))
        return 0

    table = Table(title="📋 Supported Frameworks", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Framework", style="bold green", no_wrap=True)
    table.add_column("Main file", style="cyan")
    table.add_column("Generator Class", style="dim")

    for name in registry.list_frameworks():
        info = registry.get_framework_info(name)
        table.add_row(f"🔧 {name}", info["main_file"], info["class"])

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
