"""
Procedural Go source builder.

Composable helpers for variable-shape artifacts whose structure depends on
the field list (seed data, repository implementations, error catalogs).
Fixed-shape artifacts go through templates instead.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator, List


def render_imports(imports: Iterable[str]) -> str:
    """Render a Go import section (empty string when nothing is imported)."""
    imports = list(imports)
    if not imports:
        return ""

    lines = ["import ("]
    for imp in imports:
        lines.append(f'\t"{imp}"')
    lines.append(")")
    return "\n".join(lines) + "\n"


def go_header(package: str, imports: Iterable[str] = ()) -> str:
    """Package clause plus imports, followed by one blank line."""
    parts = [f"package {package}\n"]
    imports_section = render_imports(imports)
    if imports_section:
        parts.append(imports_section)
    return "\n".join(parts) + "\n"


class GoSourceBuilder:
    """Accumulates tab-indented Go source lines."""

    def __init__(self, indent: int = 0):
        self._lines: List[str] = []
        self._indent = indent

    def line(self, text: str = "") -> "GoSourceBuilder":
        """Add one line at the current indentation (blank lines stay empty)."""
        if text:
            self._lines.append("\t" * self._indent + text)
        else:
            self._lines.append("")
        return self

    def raw(self, text: str) -> "GoSourceBuilder":
        """Add a line verbatim, ignoring indentation (raw string literals)."""
        self._lines.append(text)
        return self

    def blank(self) -> "GoSourceBuilder":
        return self.line()

    def comment(self, text: str) -> "GoSourceBuilder":
        return self.line(f"// {text}")

    @contextmanager
    def indented(self) -> Iterator["GoSourceBuilder"]:
        self._indent += 1
        try:
            yield self
        finally:
            self._indent -= 1

    @contextmanager
    def block(self, opening: str, closing: str = "}") -> Iterator["GoSourceBuilder"]:
        """
        Emit ``opening``, an indented body and ``closing``.

        Example:
            with b.block("func (p *Product) IsDeleted() bool {"):
                b.line("return p.DeletedAt != nil")
        """
        self.line(opening)
        with self.indented():
            yield self
        self.line(closing)

    def func(self, signature: str) -> Iterator["GoSourceBuilder"]:
        """Shorthand for a function block."""
        return self.block(f"func {signature} {{")

    def build(self) -> str:
        """Return the accumulated source with a trailing newline."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
