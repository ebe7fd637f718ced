"""
Template engine wrapper for code generation.

Provides a Jinja2 environment that resolves logical template names
(``domain/entity``, ``usecase/dto``...) against a user template directory
first and the built-in set second, with the naming and type helpers
available to every template.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import jinja2
from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    DictLoader,
    Environment,
    StrictUndefined,
    TemplateNotFound,
)

from ...logging_config import get_logger
from ...utils import FileWriteError, atomic_write
from . import naming
from .builtin_templates import BUILTIN_TEMPLATES
from .types import get_type_registry, go_type, zero_value

logger = get_logger(__name__)

# Longest suffix first so "entity.go.j2" maps to "entity", not "entity.go"
TEMPLATE_SUFFIXES = (".go.j2", ".go.tmpl", ".j2", ".tmpl", ".tpl")
MATERIALIZED_SUFFIX = ".go.tmpl"


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


def logical_name(relative_path: str) -> Optional[str]:
    """
    Logical template name for a path relative to the template directory.

    Returns None when the file does not carry a template suffix.
    """
    posix = relative_path.replace("\\", "/")
    for suffix in TEMPLATE_SUFFIXES:
        if posix.endswith(suffix):
            return posix[: -len(suffix)]
    return None


class LogicalNameLoader(BaseLoader):
    """Loads templates from a directory by logical name."""

    def __init__(self, template_dir: Path):
        self.template_dir = Path(template_dir)

    def _scan(self) -> Dict[str, Path]:
        found: Dict[str, Path] = {}
        if not self.template_dir.is_dir():
            return found

        for path in sorted(self.template_dir.rglob("*")):
            if not path.is_file():
                continue
            name = logical_name(path.relative_to(self.template_dir).as_posix())
            if name and name not in found:
                found[name] = path
        return found

    def get_source(
        self, environment: Environment, template: str
    ) -> Tuple[str, str, Callable[[], bool]]:
        path = self._scan().get(template)
        if path is None:
            raise TemplateNotFound(template)

        mtime = path.stat().st_mtime
        source = path.read_text(encoding="utf-8")
        return source, str(path), lambda: path.exists() and path.stat().st_mtime == mtime

    def list_templates(self) -> List[str]:
        return sorted(self._scan().keys())


def optional_rule(rule: Optional[str]) -> str:
    """Turn a create-time validation rule into its partial-update form."""
    parts = [p for p in (rule or "").split(",") if p and p != "required"]
    return ",".join(["omitempty"] + parts)


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        builtins: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize template engine.

        Args:
            template_dir: Directory whose templates override the built-ins
            builtins: Built-in templates by logical name
        """
        self.template_dir = Path(template_dir) if template_dir else None
        self._builtins = DictLoader(dict(BUILTIN_TEMPLATES if builtins is None else builtins))
        self._custom = LogicalNameLoader(self.template_dir) if self.template_dir else None
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        loaders = [self._custom, self._builtins] if self._custom else [self._builtins]

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        helpers = {
            "to_camel": naming.to_camel,
            "to_pascal": naming.to_pascal,
            "to_snake": naming.to_snake,
            "to_kebab": naming.to_kebab,
            "to_plural": naming.to_plural,
            "to_singular": naming.to_singular,
            "camel": naming.to_camel,
            "pascal": naming.to_pascal,
            "snake": naming.to_snake,
            "kebab": naming.to_kebab,
            "plural": naming.to_plural,
            "singular": naming.to_singular,
            "param": naming.go_identifier,
            "go_type": go_type,
            "zero_value": zero_value,
            "optional_rule": optional_rule,
        }
        self._env.filters.update(helpers)
        self._env.globals.update(helpers)
        self._env.globals["type_info"] = get_type_registry().get
        self._env.filters["comment"] = self._comment_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Logical template name
            context: Variables to pass to template

        Returns:
            Rendered template content

        Raises:
            TemplateError: If the template is missing, malformed or references
                an undefined variable
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found: {template_name}") from e
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(
                f"Syntax error in template {template_name} (line {e.lineno}): {e.message}"
            ) from e
        except jinja2.UndefinedError as e:
            raise TemplateError(
                f"Undefined reference in template {template_name}: {e.message}"
            ) from e
        except Exception as e:
            raise TemplateError(f"Error rendering {template_name}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            template = self._env.from_string(template_string)
            return template.render(**context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        try:
            self._env.get_template(template_name)
            return True
        except TemplateNotFound:
            return False

    def template_origin(self, template_name: str) -> str:
        """Report whether a template comes from the user directory or the built-ins."""
        if self._custom and template_name in self._custom.list_templates():
            return "custom"
        if template_name in self._builtins.mapping:
            return "builtin"
        raise TemplateError(f"Template not found: {template_name}")

    def list_templates(self) -> Dict[str, str]:
        """Map every available logical name to its origin."""
        names = set(self._builtins.mapping)
        if self._custom:
            names.update(self._custom.list_templates())
        return {name: self.template_origin(name) for name in sorted(names)}

    def has_custom_templates(self) -> bool:
        return bool(self._custom and self._custom.list_templates())

    def materialize_builtins(self, force: bool = False) -> List[Path]:
        """
        Write the built-in templates into the template directory.

        Only happens when the directory holds no templates yet (or ``force``
        is set). Each file is written atomically, so an interrupted run
        leaves every template either complete or absent.

        Returns:
            Paths written
        """
        if self.template_dir is None:
            raise TemplateError("No template directory configured")

        if self.has_custom_templates() and not force:
            logger.debug("Custom templates present in %s, skipping", self.template_dir)
            return []

        written = []
        for name, content in sorted(self._builtins.mapping.items()):
            path = self.template_dir / f"{name}{MATERIALIZED_SUFFIX}"
            try:
                atomic_write(path, content)
            except FileWriteError as e:
                raise TemplateError(str(e)) from e
            written.append(path)

        logger.info("Materialized %d templates into %s", len(written), self.template_dir)
        return written

    def _comment_filter(self, value: str, style: str = "//") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)


# Default template engine instance
_default_engine = None


def get_default_template_engine() -> TemplateEngine:
    """Get the default template engine instance (built-ins only)."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TemplateEngine()
    return _default_engine


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """
    Create a template engine, using the shared built-in engine when no
    directory is configured.
    """
    if template_dir is None:
        return get_default_template_engine()
    return TemplateEngine(Path(template_dir))
