"""
Type registry for field declarations.

One capability record per supported DSL type: the Go type it maps to, its
zero value, validation rule, persistence column default, validity check and
sample-value generator. Adding a type is one registry entry.
"""

import difflib
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
from enum import Enum

from .naming import to_snake


class TypeKind(Enum):
    """Broad families of supported field types."""

    STRING = "string"
    INTEGER = "integer"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    OPAQUE = "opaque"


SampleGenerator = Callable[[str, int], str]


@dataclass(frozen=True)
class TypeSpec:
    """
    Immutable description of a supported field type.

    ``check`` is a Go boolean expression template with a ``{ref}``
    placeholder; it is true when the value is invalid. Types with no
    meaningful invalid value leave it unset.
    """

    name: str  # DSL name (e.g. "string", "time.Time")
    go_type: str  # Go type emitted in structs
    kind: TypeKind
    zero_value: str  # Go literal
    sample: SampleGenerator = field(compare=False)
    validation_rule: Optional[str] = None  # go-playground/validator rule
    column_default: str = "not null"  # gorm tag body
    check: Optional[str] = None
    searchable: bool = False  # type alone warrants a lookup accessor
    imports: Tuple[str, ...] = ()

    @property
    def is_numeric(self) -> bool:
        return self.kind in (TypeKind.INTEGER, TypeKind.UNSIGNED, TypeKind.FLOAT)

    @property
    def is_opaque(self) -> bool:
        return self.kind == TypeKind.OPAQUE

    def check_expression(self, ref: str) -> Optional[str]:
        """Render the invalid-value check for a Go expression, if any."""
        if self.check is None:
            return None
        return self.check.format(ref=ref)


# Sample generators: deterministic Go literals indexed by record number

_PEOPLE = ["Juan Pérez", "María García", "Carlos López", "Ana Martín", "Luis Rodríguez"]
_EMAIL_USERS = ["john", "maria", "carlos", "ana", "miguel"]
_STATUSES = ["active", "inactive", "pending"]
_PRICES = ["99.99", "149.50", "199.99", "249.00", "299.95"]


def _pick(values: List[str], index: int) -> str:
    return values[index % len(values)]


def _string_sample(name: str, index: int) -> str:
    key = to_snake(name)
    n = index + 1
    if key == "email" or key.endswith("_email"):
        return f'"{_pick(_EMAIL_USERS, index)}{n}@example.com"'
    if key in ("name", "full_name", "title") or key.endswith("_name"):
        return f'"{_pick(_PEOPLE, index)}"'
    if key == "username" or key.endswith("_username"):
        return f'"{_pick(_EMAIL_USERS, index)}{n}"'
    if key == "status":
        return f'"{_pick(_STATUSES, index)}"'
    if key in ("code", "sku") or key.endswith(("_code", "_sku")):
        return f'"{key.upper()}-{n:04d}"'
    if key == "slug" or key.endswith("_slug"):
        return f'"sample-{key.replace("_", "-")}-{n}"'
    if key == "phone" or key.endswith("_phone"):
        return f'"+1-555-010{n % 10}"'
    if "url" in key or "website" in key:
        return f'"https://example.com/{key.replace("_", "-")}/{n}"'
    return f'"Sample {name} {n}"'


def _int_sample(name: str, index: int) -> str:
    key = to_snake(name)
    if key == "age" or key.endswith("_age"):
        return str(18 + (index * 7) % 60)
    return str((index + 1) * 10)


def _float_sample(name: str, index: int) -> str:
    key = to_snake(name)
    if key == "price" or key.endswith("_price"):
        return _pick(_PRICES, index)
    return f"{index + 1}.5"


def _bool_sample(name: str, index: int) -> str:
    return "true" if index % 2 == 0 else "false"


def _time_sample(name: str, index: int) -> str:
    return f"time.Date(2024, time.January, {index + 1}, 0, 0, 0, 0, time.UTC)"


def _bytes_sample(name: str, index: int) -> str:
    return f'[]byte("sample-{index + 1}")'


def _opaque_sample(name: str, index: int) -> str:
    return "nil"


_STRING_CHECK = '{ref} == ""'
_NEGATIVE_CHECK = "{ref} < 0"
_NUMERIC_RULE = "required,gte=0"

BUILTIN_TYPES: List[TypeSpec] = [
    TypeSpec(
        name="string",
        go_type="string",
        kind=TypeKind.STRING,
        zero_value='""',
        sample=_string_sample,
        validation_rule="required,min=1",
        column_default="type:varchar(255)",
        check=_STRING_CHECK,
        searchable=True,
    ),
    TypeSpec(
        name="int",
        go_type="int",
        kind=TypeKind.INTEGER,
        zero_value="0",
        sample=_int_sample,
        validation_rule=_NUMERIC_RULE,
        column_default="type:integer;not null;default:0",
        check=_NEGATIVE_CHECK,
        searchable=True,
    ),
    TypeSpec(
        name="int64",
        go_type="int64",
        kind=TypeKind.INTEGER,
        zero_value="0",
        sample=_int_sample,
        validation_rule=_NUMERIC_RULE,
        column_default="type:bigint;not null;default:0",
        check=_NEGATIVE_CHECK,
    ),
    TypeSpec(
        name="uint",
        go_type="uint",
        kind=TypeKind.UNSIGNED,
        zero_value="0",
        sample=_int_sample,
        validation_rule=_NUMERIC_RULE,
        column_default="type:integer;not null;default:0",
        searchable=True,
    ),
    TypeSpec(
        name="uint64",
        go_type="uint64",
        kind=TypeKind.UNSIGNED,
        zero_value="0",
        sample=_int_sample,
        validation_rule=_NUMERIC_RULE,
        column_default="type:bigint;not null;default:0",
    ),
    TypeSpec(
        name="float32",
        go_type="float32",
        kind=TypeKind.FLOAT,
        zero_value="0",
        sample=_float_sample,
        validation_rule=_NUMERIC_RULE,
        column_default="type:real;not null;default:0",
        check=_NEGATIVE_CHECK,
    ),
    TypeSpec(
        name="float64",
        go_type="float64",
        kind=TypeKind.FLOAT,
        zero_value="0",
        sample=_float_sample,
        validation_rule=_NUMERIC_RULE,
        column_default="type:decimal(10,2);not null;default:0",
        check=_NEGATIVE_CHECK,
    ),
    TypeSpec(
        name="bool",
        go_type="bool",
        kind=TypeKind.BOOLEAN,
        zero_value="false",
        sample=_bool_sample,
        column_default="type:boolean;not null;default:false",
    ),
    TypeSpec(
        name="time.Time",
        go_type="time.Time",
        kind=TypeKind.TIMESTAMP,
        zero_value="time.Time{}",
        sample=_time_sample,
        validation_rule="required",
        column_default="type:timestamp",
        check="{ref}.IsZero()",
        imports=("time",),
    ),
    TypeSpec(
        name="[]byte",
        go_type="[]byte",
        kind=TypeKind.OPAQUE,
        zero_value="nil",
        sample=_bytes_sample,
        column_default="type:bytea",
    ),
    TypeSpec(
        name="interface{}",
        go_type="interface{}",
        kind=TypeKind.OPAQUE,
        zero_value="nil",
        sample=_opaque_sample,
        column_default="type:jsonb",
    ),
]

BUILTIN_ALIASES: Dict[str, str] = {
    "timestamp": "time.Time",
    "bytes": "[]byte",
    "any": "interface{}",
    "opaque": "interface{}",
}


class TypeRegistry:
    """Case-sensitive lookup table of supported field types."""

    def __init__(self):
        """Initialize empty registry."""
        self._types: Dict[str, TypeSpec] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, spec: TypeSpec, aliases: Optional[List[str]] = None):
        """
        Register a type and its aliases.

        Args:
            spec: Type capability record
            aliases: Alternative DSL names resolving to this type
        """
        self._types[spec.name] = spec
        for alias in aliases or []:
            self._aliases[alias] = spec.name

    def resolve(self, name: str) -> Optional[str]:
        """Return the canonical type name for a DSL token, or None."""
        if name in self._types:
            return name
        return self._aliases.get(name)

    def lookup(self, name: str) -> Optional[TypeSpec]:
        """Return the type record for a name or alias, or None."""
        canonical = self.resolve(name)
        if canonical is None:
            return None
        return self._types[canonical]

    def get(self, name: str) -> TypeSpec:
        """
        Return the type record for a name or alias.

        Raises:
            KeyError: If the type is not registered
        """
        spec = self.lookup(name)
        if spec is None:
            raise KeyError(f"Unsupported type: {name}")
        return spec

    def is_supported(self, name: str) -> bool:
        return self.resolve(name) is not None

    def names(self) -> List[str]:
        """Canonical type names in registration order."""
        return list(self._types.keys())

    def all_names(self) -> List[str]:
        """Canonical names followed by aliases."""
        return self.names() + list(self._aliases.keys())

    def aliases_for(self, name: str) -> List[str]:
        return sorted(alias for alias, target in self._aliases.items() if target == name)

    def suggest(self, name: str, limit: int = 3) -> List[str]:
        """
        Suggest valid type names close to an unknown token.

        Case-insensitive matches come first so ``String`` suggests ``string``.
        """
        candidates = self.all_names()
        exact_folded = [c for c in candidates if c.lower() == name.lower()]
        close = difflib.get_close_matches(name, candidates, n=limit, cutoff=0.5)
        close_folded = difflib.get_close_matches(
            name.lower(), candidates, n=limit, cutoff=0.5
        )

        suggestions: List[str] = []
        for candidate in exact_folded + close + close_folded:
            if candidate not in suggestions:
                suggestions.append(candidate)
        return suggestions[:limit]


# Global registry instance - created once
_type_registry: Optional[TypeRegistry] = None


def get_type_registry() -> TypeRegistry:
    """Get the global type registry, initializing if needed."""
    global _type_registry
    if _type_registry is None:
        _type_registry = TypeRegistry()
        for spec in BUILTIN_TYPES:
            aliases = [a for a, target in BUILTIN_ALIASES.items() if target == spec.name]
            _type_registry.register(spec, aliases=aliases)
    return _type_registry


def lookup_type(name: str) -> Optional[TypeSpec]:
    """Look up a type in the global registry."""
    return get_type_registry().lookup(name)


def go_type(name: str) -> str:
    """Go type for a DSL type name (unknown names pass through)."""
    spec = lookup_type(name)
    return spec.go_type if spec else name


def zero_value(name: str) -> str:
    """Go zero-value literal for a DSL type name."""
    spec = lookup_type(name)
    return spec.zero_value if spec else "nil"
