"""
Heuristic field classification.

Decides, from a field's name and type alone, its validation rule, column
default, whether it deserves a lookup accessor and whether that accessor
returns a single record. Missing an accessor is preferred over emitting one
with the wrong cardinality, so anything ambiguous is not unique.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from .naming import to_snake
from .schema import Cardinality, Field, SearchMethod
from .types import TypeKind, get_type_registry

SEARCHABLE_TERMS: FrozenSet[str] = frozenset({
    "email", "username", "name", "code", "sku", "slug", "phone",
    "document", "national_id", "passport", "license", "title",
})

UNIQUE_TERMS: FrozenSet[str] = frozenset({
    "email", "username", "code", "sku", "slug", "document",
    "national_id", "passport", "license",
})

SEARCHABLE_TYPES: FrozenSet[str] = frozenset({"string", "int", "uint"})

_UNIQUE_KINDS = (TypeKind.STRING, TypeKind.INTEGER, TypeKind.UNSIGNED)


@dataclass(frozen=True)
class FieldPlan:
    """Generation decisions for one field."""

    go_type: str
    zero_value: str
    validation_rule: Optional[str]
    column_default: str
    check_expression: Optional[str]  # template with {ref}
    searchable: bool
    unique: bool


def matches_term(name: str, terms: FrozenSet[str]) -> bool:
    """
    True if the snake-cased name is a term or ends with ``_<term>``.

    ``UserEmail`` matches ``email``; ``Emails`` and ``Nickname`` do not.
    """
    key = to_snake(name)
    return any(key == term or key.endswith(f"_{term}") for term in terms)


def is_searchable(name: str, type_name: str) -> bool:
    spec = get_type_registry().get(type_name)
    if spec.is_opaque:
        return False
    return matches_term(name, SEARCHABLE_TERMS) or spec.name in SEARCHABLE_TYPES


def is_unique(name: str, type_name: str) -> bool:
    spec = get_type_registry().get(type_name)
    return (
        is_searchable(name, type_name)
        and spec.kind in _UNIQUE_KINDS
        and matches_term(name, UNIQUE_TERMS)
    )


def classify(f: Field) -> FieldPlan:
    """
    Classify a field.

    Args:
        f: Field with a registry type

    Returns:
        FieldPlan that depends only on the field's name and type
    """
    spec = get_type_registry().get(f.type)
    unique = is_unique(f.name, f.type)
    return FieldPlan(
        go_type=spec.go_type,
        zero_value=spec.zero_value,
        validation_rule=spec.validation_rule,
        column_default=spec.column_default,
        check_expression=spec.check,
        searchable=is_searchable(f.name, f.type),
        unique=unique,
    )


def build_tag(f: Field, plan: FieldPlan, validation: bool = False) -> str:
    """Serialize the json, gorm and (optionally) validate struct tags."""
    gorm = plan.column_default
    if plan.unique:
        gorm += ";uniqueIndex"
    tag = f'json:"{f.json_name}" gorm:"column:{f.column};{gorm}"'
    if validation and plan.validation_rule:
        tag += f' validate:"{plan.validation_rule}"'
    return tag


def annotate(fields: List[Field], validation: bool = False) -> List[Field]:
    """
    Return user fields with classification and struct tags applied.

    System fields pass through untouched.
    """
    annotated = []
    for f in fields:
        if f.system:
            annotated.append(f)
            continue
        plan = classify(f)
        annotated.append(
            Field(
                name=f.name,
                type=f.type,
                tag=build_tag(f, plan, validation),
                searchable=plan.searchable,
                unique=plan.unique,
            )
        )
    return annotated


def search_methods(fields: List[Field]) -> List[SearchMethod]:
    """Derive lookup accessors for the searchable user fields."""
    methods = []
    for f in fields:
        if f.system:
            continue
        plan = classify(f)
        if not plan.searchable:
            continue
        methods.append(
            SearchMethod(
                method_name=f"FindBy{f.name}",
                field_name=f.name,
                field_type=plan.go_type,
                cardinality=Cardinality.ONE if plan.unique else Cardinality.MANY,
            )
        )
    return methods
