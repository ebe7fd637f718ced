"""
Command-line interface for cleango.

Provides subcommands that generate one layer or a whole feature for an
entity, manage the template directory and list the available layers.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    ConfigError,
    FileStore,
    GenerationResult,
    GeneratorConfig,
    MemoryStore,
    MergeAction,
    TemplateEngine,
    TemplateError,
    __version__,
    generate_entity,
    load_config,
)
from .codegen.core.config import DEFAULT_MODULE_NAME, SUPPORTED_DATABASES, detect_module_name
from .codegen.core.naming import FileNaming
from .codegen.registry import list_all_layer_info
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()

# Subcommand -> layers it generates
LAYER_COMMANDS = {
    "entity": (["domain"], "Generate a domain entity"),
    "dto": (["dto"], "Generate use case DTOs"),
    "repository": (["repository"], "Generate a repository interface and implementation"),
    "handler": (["handler"], "Generate an HTTP handler"),
    "messages": (["messages"], "Generate error and response messages and constants"),
    "feature": (None, "Generate every layer for an entity"),
}

_ACTION_STYLES = {
    MergeAction.WRITE_FRESH: "green",
    MergeAction.APPEND: "cyan",
    MergeAction.SKIP: "dim",
    MergeAction.REPLACE: "yellow",
    MergeAction.FALLBACK_APPEND: "magenta",
}


def _add_generation_args(parser: argparse.ArgumentParser):
    """Add the entity generation arguments shared by every layer command."""
    parser.add_argument("name", help="Entity name (e.g. Product, OrderItem)")
    parser.add_argument(
        "--fields",
        "-f",
        default="",
        help='Field descriptor, e.g. "name:string,price:float64"',
    )

    features = parser.add_argument_group("entity features")
    features.add_argument(
        "--validation", action="store_true", default=None, help="Add Validate() and validate tags"
    )
    features.add_argument(
        "--business-rules",
        action="store_true",
        default=None,
        help="Add business rule methods to the entity",
    )
    features.add_argument(
        "--timestamps", action="store_true", default=None, help="Add CreatedAt/UpdatedAt"
    )
    features.add_argument(
        "--soft-delete", action="store_true", default=None, help="Add DeletedAt and helpers"
    )
    features.add_argument(
        "--transactions",
        action="store_true",
        default=None,
        help="Add transaction-aware repository methods",
    )

    project = parser.add_argument_group("project options")
    project.add_argument("--module", help="Go module path (default: read from go.mod)")
    project.add_argument(
        "--database", choices=sorted(SUPPORTED_DATABASES), help="Database flavour"
    )
    project.add_argument(
        "--file-naming",
        choices=[n.value for n in FileNaming],
        help="File naming convention",
    )
    project.add_argument("--config", metavar="FILE", help="JSON configuration file")
    project.add_argument("--template-dir", metavar="DIR", help="Custom template directory")
    project.add_argument(
        "--no-materialize-templates",
        dest="materialize_templates",
        action="store_false",
        default=None,
        help="Do not write the built-in templates into an empty --template-dir",
    )
    project.add_argument(
        "--output-dir", "-o", default=".", help="Project root (default: current directory)"
    )

    output = parser.add_argument_group("output options")
    output.add_argument(
        "--dry-run", action="store_true", help="Show what would change without writing"
    )
    output.add_argument(
        "--verbose", "-v", action="store_true", help="Show generation metadata and logs"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="cleango",
        description="Generate Clean Architecture layers for Go projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cleango feature Product --fields "name:string,price:float64" --validation
  cleango entity User -f "email:string,age:int" --timestamps
  cleango repository Product -f "sku:string" --transactions --dry-run
  cleango templates init --dir templates
  cleango layers
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command")

    for command, (layers, help_text) in LAYER_COMMANDS.items():
        sub = subparsers.add_parser(command, help=help_text, description=help_text)
        _add_generation_args(sub)
        sub.set_defaults(func=_handle_generate, layers=layers)

    templates = subparsers.add_parser("templates", help="Manage the template directory")
    templates.add_argument("action", choices=["init", "list"])
    templates.add_argument(
        "--dir", default="templates", help="Template directory (default: templates)"
    )
    templates.add_argument(
        "--force", action="store_true", help="Overwrite existing templates on init"
    )
    templates.set_defaults(func=_handle_templates)

    layers = subparsers.add_parser("layers", help="List available layers")
    layers.set_defaults(func=_handle_layers)

    return parser


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from CLI arguments and an optional config file."""
    overrides = {
        "module_name": args.module,
        "database": args.database,
        "validation": args.validation,
        "business_rules": args.business_rules,
        "timestamps": args.timestamps,
        "soft_delete": args.soft_delete,
        "transactions": args.transactions,
        "file_naming": args.file_naming,
        "template_dir": args.template_dir,
        "materialize_templates": args.materialize_templates,
    }

    try:
        config = load_config(custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}")

    if not args.module and config.module_name == DEFAULT_MODULE_NAME:
        config.module_name = detect_module_name(args.output_dir)

    return config


def _handle_generate(args: argparse.Namespace) -> int:
    """Generate the layers of one subcommand."""
    config = _build_config(args)
    if args.dry_run:
        config.materialize_templates = False

    disk = FileStore(args.output_dir)
    store = MemoryStore(base=disk) if args.dry_run else disk

    with console.status(f"[green]Generating {args.name}..."):
        result = generate_entity(args.name, args.fields, config, store=store, layers=args.layers)

    if result.parse_error is not None:
        _print_parse_error(result)
        return 1

    if result.error_message:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    _print_outcomes(result, dry_run=args.dry_run)

    if args.dry_run:
        _print_dry_run(store, result)

    if args.verbose and result.metadata:
        _print_metadata(result)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    if result.failures:
        console.print("\n[red]✗ Some artifacts failed:[/red]")
        for failure in result.failures:
            console.print(f"  [red]•[/red] [bold]{failure.layer}[/bold]: {failure.message}")
        return 1

    return 0


def _print_parse_error(result: GenerationResult):
    error = result.parse_error
    text = (
        f"[bold]Problem:[/bold] {error.kind.value}\n"
        f"[bold]Position:[/bold] {error.position}\n"
        f"[bold]Declaration:[/bold] {error.token or '[dim](empty)[/dim]'}\n"
        f"[bold]Details:[/bold] {error.message}"
    )
    if error.suggestions:
        text += f"\n[bold]Did you mean:[/bold] [cyan]{', '.join(error.suggestions)}[/cyan]"
    console.print(Panel(text, title="✗ Invalid field descriptor", border_style="red"))
    console.print("[dim]No files were written.[/dim]")


def _print_outcomes(result: GenerationResult, dry_run: bool = False):
    title = "📄 Planned Changes (dry run)" if dry_run else "📄 Generated Files"
    table = Table(title=title, box=box.ROUNDED, title_style="bold cyan")
    table.add_column("File", style="bold")
    table.add_column("Action")
    table.add_column("Imports Added", style="dim")

    for outcome in result.outcomes:
        style = _ACTION_STYLES.get(outcome.action, "white")
        table.add_row(
            outcome.path,
            f"[{style}]{outcome.action.value}[/{style}]",
            ", ".join(outcome.imports_added),
        )

    console.print()
    console.print(table)


def _print_dry_run(store: MemoryStore, result: GenerationResult):
    for path in result.written:
        content = store.files.get(path)
        if content is None:
            continue
        console.print(f"\n[green]── {path} ──[/green]")
        console.print(Syntax(content, "go", theme="monokai"))


def _print_metadata(result: GenerationResult):
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in result.metadata.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value) or "-"
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def _handle_templates(args: argparse.Namespace) -> int:
    """Materialize or list templates."""
    engine = TemplateEngine(Path(args.dir))

    if args.action == "init":
        try:
            written = engine.materialize_builtins(force=args.force)
        except TemplateError as e:
            raise CLIError(str(e))

        if not written:
            console.print(
                f"[yellow]⚠️  {args.dir} already contains templates "
                "(use --force to overwrite)[/yellow]"
            )
            return 0

        console.print(
            f"[green]✓[/green] Wrote {len(written)} templates to [cyan]{args.dir}[/cyan]"
        )
        return 0

    table = Table(title="📋 Templates", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Template", style="bold green")
    table.add_column("Source", style="cyan")
    for name, origin in engine.list_templates().items():
        table.add_row(name, origin)

    console.print()
    console.print(table)
    return 0


def _handle_layers(args: argparse.Namespace) -> int:
    """List registered layers."""
    layer_info = list_all_layer_info()

    table = Table(title="📋 Available Layers", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Layer", style="bold green", no_wrap=True)
    table.add_column("Description")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for name, info in layer_info.items():
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {name}", info["description"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] cleango feature [cyan]Product[/cyan] "
            '--fields [dim]"name:string,price:float64"[/dim]',
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (sys.argv[1:] by default)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if getattr(args, "verbose", False) and not args.log_level:
        setup_logging("INFO")
    else:
        setup_logging(args.log_level)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        console.print(f"[red]✗ Unexpected error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
