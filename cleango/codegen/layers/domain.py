"""
Domain layer generator.

Emits the entity struct with its validation and business-rule methods, the
shared domain error catalog and deterministic seed data.
"""

from typing import Any, Dict, List

from ..core.builder import GoSourceBuilder, go_header
from ..core.generator import ArtifactBuilder, EntityContext, LayerGenerator
from ..core.naming import split_words, to_snake
from ..core.schema import Field, GeneratedArtifact
from ..core.types import TypeKind

DOMAIN_DIR = "internal/domain"
SEED_COUNT = 3

# Field name -> (method, expression template, required kinds, extra import)
BUSINESS_RULES = {
    "Age": ("IsAdult", "{ref} >= 18", (TypeKind.INTEGER, TypeKind.UNSIGNED), None),
    "Price": (
        "IsExpensive",
        "{ref} > 1000.0",
        (TypeKind.FLOAT, TypeKind.INTEGER, TypeKind.UNSIGNED),
        None,
    ),
    "Email": ("HasValidEmail", 'strings.Contains({ref}, "@")', (TypeKind.STRING,), "strings"),
    "Status": ("IsActive", '{ref} == "active"', (TypeKind.STRING,), None),
}


def _field_label(f: Field) -> str:
    return " ".join(w.lower() for w in split_words(f.name))


def _sql_literal(f: Field, go_literal: str, index: int) -> str:
    """Translate a sample Go literal into SQL."""
    kind = f.type_spec.kind
    if kind == TypeKind.STRING:
        return "'" + go_literal.strip('"').replace("'", "''") + "'"
    if kind == TypeKind.TIMESTAMP:
        return f"'2024-01-{index + 1:02d}'"
    return go_literal


class DomainGenerator(LayerGenerator):
    """Entity struct, domain errors and seed data."""

    @property
    def name(self) -> str:
        return "domain"

    def artifact_builders(self, ctx: EntityContext) -> List[ArtifactBuilder]:
        builders = [self.build_entity]
        if ctx.config.validation:
            builders.append(self.build_errors)
        builders.append(self.build_seeds)
        return builders

    # Entity

    def business_rules(self, ctx: EntityContext) -> List[Dict[str, Any]]:
        """Business-rule methods warranted by well-known field names."""
        if not ctx.config.business_rules:
            return []

        rules = []
        for f in ctx.user_fields():
            rule = BUSINESS_RULES.get(f.name)
            if rule is None:
                continue
            method, expression, kinds, imp = rule
            if f.type_spec.kind not in kinds:
                continue
            rules.append({
                "name": method,
                "expression": expression.format(ref=f"{ctx.receiver}.{f.name}"),
                "import": imp,
            })
        return rules

    def validation_checks(self, ctx: EntityContext) -> List[Dict[str, str]]:
        checks = []
        for f in ctx.user_fields():
            condition = f.type_spec.check_expression(f"{ctx.receiver}.{f.name}")
            if condition is None:
                continue
            checks.append({
                "field": f.name,
                "condition": condition,
                "error": f"ErrInvalid{ctx.entity}{f.name}",
            })
        return checks

    def build_entity(self, ctx: EntityContext) -> GeneratedArtifact:
        rules = self.business_rules(ctx)
        imports = set(ctx.fields.imports())
        imports.update(rule["import"] for rule in rules if rule["import"])

        content = self.render_template(
            "domain/entity",
            ctx.template_context(
                imports=sorted(imports),
                checks=self.validation_checks(ctx),
                business_rules=rules,
            ),
        )
        return GeneratedArtifact(
            path=self.artifact_path(DOMAIN_DIR, ctx),
            content=content,
            layer=self.name,
        )

    # Errors

    def build_errors(self, ctx: EntityContext) -> GeneratedArtifact:
        b = GoSourceBuilder(indent=1)
        b.blank()
        b.comment(f"{ctx.entity} errors")
        b.line(f'ErrInvalid{ctx.entity}Data = errors.New("invalid {ctx.entity_label} data")')
        for f in ctx.user_fields():
            b.line(
                f"ErrInvalid{ctx.entity}{f.name} = "
                f'errors.New("{ctx.entity_label} {_field_label(f)} is invalid")'
            )

        return GeneratedArtifact(
            path=f"{DOMAIN_DIR}/errors.go",
            content=b.build(),
            mergeable=True,
            marker=f"\tErrInvalid{ctx.entity}Data ",
            header=go_header("domain", ["errors"]),
            opener="var (\n",
            closer=")\n",
            layer=self.name,
        )

    # Seeds

    def seed_rows(self, ctx: EntityContext) -> List[List[tuple]]:
        """Sample values per record as (field, go literal) pairs."""
        rows = []
        for index in range(SEED_COUNT):
            rows.append([
                (f, f.type_spec.sample(f.name, index)) for f in ctx.user_fields()
            ])
        return rows

    def build_seeds(self, ctx: EntityContext) -> GeneratedArtifact:
        rows = self.seed_rows(ctx)
        imports = sorted({imp for f in ctx.user_fields() for imp in f.type_spec.imports})

        b = GoSourceBuilder()
        b.comment(f"Get{ctx.entity}Seeds returns sample {ctx.entity_label} records.")
        with b.func(f"Get{ctx.entity}Seeds() []{ctx.entity}"):
            with b.block(f"return []{ctx.entity}{{"):
                for row in rows:
                    with b.block("{", "},"):
                        for f, literal in row:
                            b.line(f"{f.name}: {literal},")
        b.blank()

        sql_fields = [f for f in ctx.user_fields() if not f.type_spec.is_opaque]
        columns = ", ".join(to_snake(f.name) for f in sql_fields)
        b.comment(f"GetSQL{ctx.entity}Seeds returns SQL INSERT statements for {ctx.entity_label}.")
        with b.func(f"GetSQL{ctx.entity}Seeds() string"):
            if sql_fields:
                b.line(f"return `-- Sample data for table {ctx.table_name}")
                for index, row in enumerate(rows):
                    values = ", ".join(
                        _sql_literal(f, literal, index)
                        for f, literal in row
                        if not f.type_spec.is_opaque
                    )
                    b.raw(
                        f"INSERT INTO {ctx.table_name} ({columns}) VALUES ({values});"
                    )
                b.raw("`")
            else:
                b.line('return ""')

        return GeneratedArtifact(
            path=self.artifact_path(DOMAIN_DIR, ctx, "_seeds"),
            content=go_header("domain", imports) + b.build(),
            layer=self.name,
        )
