"""
Core field model for code generation.

Normalized, immutable representation of entity fields, derived search
accessors and the artifacts the layer generators emit.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional
from enum import Enum

from .naming import to_snake
from .types import TypeSpec, get_type_registry

SYSTEM_FIELD_NAMES = ("id", "created_at", "updated_at", "deleted_at")


@dataclass(frozen=True)
class Field:
    """Represents a single entity field."""

    name: str  # PascalCase Go field name
    type: str  # Canonical registry type name
    tag: str = ""  # Serialized struct tag bundle
    searchable: bool = False
    unique: bool = False
    system: bool = False  # Managed by feature flags, not DSL input
    nullable: bool = False  # Emitted as a pointer type

    @property
    def type_spec(self) -> TypeSpec:
        return get_type_registry().get(self.type)

    @property
    def go_type(self) -> str:
        base = self.type_spec.go_type
        return f"*{base}" if self.nullable else base

    @property
    def json_name(self) -> str:
        return to_snake(self.name)

    @property
    def column(self) -> str:
        return to_snake(self.name)


class Cardinality(Enum):
    """How many records a search accessor returns."""

    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class SearchMethod:
    """Derived lookup accessor for a searchable field; never persisted."""

    method_name: str  # FindByEmail
    field_name: str  # Email
    field_type: str  # Go type of the parameter
    cardinality: Cardinality

    @property
    def is_unique(self) -> bool:
        return self.cardinality == Cardinality.ONE

    def return_type(self, entity: str) -> str:
        """Go result tuple for this accessor."""
        if self.is_unique:
            return f"(*domain.{entity}, error)"
        return f"([]domain.{entity}, error)"

    @property
    def column(self) -> str:
        return to_snake(self.field_name)


def id_field() -> Field:
    return Field(
        name="ID",
        type="uint",
        tag='json:"id" gorm:"primaryKey;autoIncrement"',
        system=True,
    )


def timestamp_fields() -> List[Field]:
    return [
        Field(
            name="CreatedAt",
            type="time.Time",
            tag='json:"created_at" gorm:"autoCreateTime"',
            system=True,
        ),
        Field(
            name="UpdatedAt",
            type="time.Time",
            tag='json:"updated_at" gorm:"autoUpdateTime"',
            system=True,
        ),
    ]


def soft_delete_field() -> Field:
    return Field(
        name="DeletedAt",
        type="time.Time",
        tag='json:"deleted_at,omitempty" gorm:"index"',
        system=True,
        nullable=True,
    )


@dataclass
class FieldList:
    """
    Ordered entity fields including the system-managed ones.

    The identifier comes first, user fields keep their declaration order,
    and timestamp and soft-delete fields follow when enabled. Order drives
    struct layout and sample-data indexing.
    """

    fields: List[Field] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        user_fields: List[Field],
        timestamps: bool = False,
        soft_delete: bool = False,
    ) -> "FieldList":
        """
        Wrap user fields with the implicit system fields.

        Args:
            user_fields: Parsed (and usually classified) fields
            timestamps: Add CreatedAt and UpdatedAt
            soft_delete: Add DeletedAt

        Returns:
            Complete field list
        """
        fields = [id_field()]
        fields.extend(user_fields)
        if timestamps:
            fields.extend(timestamp_fields())
        if soft_delete:
            fields.append(soft_delete_field())
        return cls(fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def user_fields(self) -> List[Field]:
        return [f for f in self.fields if not f.system]

    def system_fields(self) -> List[Field]:
        return [f for f in self.fields if f.system]

    def get(self, name: str) -> Optional[Field]:
        """Get field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def imports(self) -> List[str]:
        """Go packages needed by the field types."""
        needed = set()
        for f in self.fields:
            needed.update(f.type_spec.imports)
        return sorted(needed)


@dataclass
class GeneratedArtifact:
    """
    A generated file, or the slice of a shared file owned by one entity.

    Mergeable artifacts carry only their own declarations in ``content``;
    ``header``, ``opener`` and ``closer`` describe the shared file around
    them so the merge writer can create it or splice into it. ``marker`` is
    the declaration name whose presence means the content is already there.
    """

    path: str
    content: str
    mergeable: bool = False
    marker: Optional[str] = None
    header: str = ""  # package clause and imports
    opener: str = ""  # e.g. "var (\n"
    closer: str = ""  # e.g. ")\n"
    layer: str = ""

    def render_fresh(self) -> str:
        """Full file text when nothing exists yet."""
        if not self.mergeable:
            return self.content
        return f"{self.header}{self.opener}{self.first_content()}{self.closer}"

    def render_block(self) -> str:
        """Self-contained block for appending to a file of unknown shape."""
        return f"{self.opener}{self.first_content()}{self.closer}"

    def first_content(self) -> str:
        # Leading blank lines only separate appended declarations
        return self.content.lstrip("\n")
