"""
Field declaration parser.

Turns a ``name:type,name:type`` descriptor into an ordered list of fields,
validating names and resolving types against the type registry. Parsing is
pure: problems come back as structured errors inside the result.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum

from .naming import to_pascal, to_snake
from .schema import SYSTEM_FIELD_NAMES, Field
from .types import TypeRegistry, get_type_registry

_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class ParseErrorKind(Enum):
    """Categories of descriptor problems."""

    INVALID_DECLARATION = "invalid field declaration"
    UNSUPPORTED_TYPE = "unsupported type"


@dataclass(frozen=True)
class FieldSpecError:
    """Structured description of a descriptor problem."""

    kind: ParseErrorKind
    message: str
    token: str
    position: int  # 1-based index of the offending pair
    suggestions: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        text = f"{self.kind.value} at position {self.position} ('{self.token}'): {self.message}"
        if self.suggestions:
            text += f" (did you mean: {', '.join(self.suggestions)}?)"
        return text


class FieldSpecException(Exception):
    """Exception raised for invalid field descriptors."""

    def __init__(self, error: FieldSpecError):
        super().__init__(str(error))
        self.error = error


@dataclass
class ParseResult:
    """Container for parse results."""

    fields: List[Field] = field(default_factory=list)
    error: Optional[FieldSpecError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> List[Field]:
        """Return the fields or raise the parse error."""
        if self.error is not None:
            raise FieldSpecException(self.error)
        return self.fields


def _invalid(token: str, position: int, message: str) -> ParseResult:
    return ParseResult(
        error=FieldSpecError(
            kind=ParseErrorKind.INVALID_DECLARATION,
            message=message,
            token=token,
            position=position,
        )
    )


def parse_fields(text: Optional[str], registry: Optional[TypeRegistry] = None) -> ParseResult:
    """
    Parse a field descriptor.

    Args:
        text: Comma-separated ``name:type`` pairs
        registry: Type registry to resolve types against (global by default)

    Returns:
        ParseResult with the fields in declaration order, or the first error
    """
    registry = registry or get_type_registry()

    if text is None or not text.strip():
        return ParseResult()

    fields: List[Field] = []
    seen = set()

    for position, raw_pair in enumerate(text.split(","), start=1):
        pair = raw_pair.strip()

        if ":" not in pair:
            return _invalid(pair, position, "expected 'name:type'")

        raw_name, raw_type = pair.split(":", 1)
        name = raw_name.strip()
        type_token = raw_type.strip()

        if not name:
            return _invalid(pair, position, "field name is empty")
        if not type_token:
            return _invalid(pair, position, f"field '{name}' has no type")
        if not _IDENTIFIER.match(name):
            return _invalid(
                pair,
                position,
                f"field name '{name}' must start with a letter and contain "
                "only letters, digits or underscores",
            )
        canonical_name = to_pascal(name)
        column = to_snake(canonical_name)
        if column in SYSTEM_FIELD_NAMES:
            return _invalid(
                pair, position, f"field name '{name}' is managed automatically"
            )
        # Distinct spellings can still share a column ("ab" and "a_b").
        if column in seen:
            return _invalid(
                pair, position, f"duplicate field '{canonical_name}' (column '{column}')"
            )

        canonical_type = registry.resolve(type_token)
        if canonical_type is None:
            return ParseResult(
                error=FieldSpecError(
                    kind=ParseErrorKind.UNSUPPORTED_TYPE,
                    message=f"type '{type_token}' is not supported",
                    token=pair,
                    position=position,
                    suggestions=registry.suggest(type_token),
                )
            )

        seen.add(column)
        fields.append(Field(name=canonical_name, type=canonical_type))

    return ParseResult(fields=fields)


def serialize_fields(fields: List[Field]) -> str:
    """
    Serialize fields back into descriptor form.

    System-managed fields are skipped, so the output of ``parse_fields``
    always survives a serialize and re-parse unchanged.
    """
    return ",".join(f"{f.name}:{f.type}" for f in fields if not f.system)
