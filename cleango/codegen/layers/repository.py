"""
Repository layer generator.

Adds the entity's repository interface to the shared
``internal/repository/interfaces.go`` and writes a gorm-backed
implementation whose lookup accessors follow the classifier's search
methods.
"""

from typing import List

from ..core.builder import GoSourceBuilder, go_header
from ..core.generator import ArtifactBuilder, EntityContext, LayerGenerator
from ..core.naming import go_identifier, to_pascal
from ..core.schema import GeneratedArtifact, SearchMethod

REPOSITORY_DIR = "internal/repository"
GORM_IMPORT = "gorm.io/gorm"


class RepositoryGenerator(LayerGenerator):
    """Repository interface and database implementation."""

    @property
    def name(self) -> str:
        return "repository"

    def artifact_builders(self, ctx: EntityContext) -> List[ArtifactBuilder]:
        return [self.build_interface, self.build_implementation]

    def _search_imports(self, ctx: EntityContext) -> List[str]:
        imports = set()
        for method in ctx.search_methods:
            f = ctx.fields.get(method.field_name)
            if f is not None:
                imports.update(f.type_spec.imports)
        return sorted(imports)

    # Interface

    def interface_imports(self, ctx: EntityContext) -> List[str]:
        imports = self._search_imports(ctx) + [f"{ctx.module}/internal/domain"]
        if ctx.config.transactions:
            imports.append(GORM_IMPORT)
        return imports

    def build_interface(self, ctx: EntityContext) -> GeneratedArtifact:
        content = self.render_template("repository/interface", ctx.template_context())
        return GeneratedArtifact(
            path=f"{REPOSITORY_DIR}/interfaces.go",
            content=content,
            mergeable=True,
            marker=f"type {ctx.entity}Repository interface",
            header=go_header("repository", self.interface_imports(ctx)),
            layer=self.name,
        )

    # Implementation

    def struct_name(self, ctx: EntityContext) -> str:
        return f"{go_identifier(ctx.config.database)}{ctx.entity}Repository"

    def _search_method(self, b: GoSourceBuilder, ctx: EntityContext, method: SearchMethod):
        recv = f"r *{self.struct_name(ctx)}"
        param = go_identifier(method.field_name)
        if param in ("r", "result", ctx.entity_var, go_identifier(ctx.entity_plural)):
            param = f"{param}Value"
        signature = (
            f"({recv}) {method.method_name}({param} {method.field_type}) "
            f"{method.return_type(ctx.entity)}"
        )
        query = f'"{method.column} = ?", {param}'

        with b.func(signature):
            if method.is_unique:
                b.line(f"{ctx.entity_var} := &domain.{ctx.entity}{{}}")
                b.line(f"result := r.db.Where({query}).First({ctx.entity_var})")
                with b.block("if result.Error != nil {"):
                    b.line("return nil, result.Error")
                b.line(f"return {ctx.entity_var}, nil")
            else:
                plural = go_identifier(ctx.entity_plural)
                b.line(f"var {plural} []domain.{ctx.entity}")
                b.line(f"result := r.db.Where({query}).Find(&{plural})")
                with b.block("if result.Error != nil {"):
                    b.line("return nil, result.Error")
                b.line(f"return {plural}, nil")
        b.blank()

    def build_implementation(self, ctx: EntityContext) -> GeneratedArtifact:
        entity = ctx.entity
        var = ctx.entity_var
        plural = go_identifier(ctx.entity_plural)
        struct = self.struct_name(ctx)
        recv = f"r *{struct}"

        b = GoSourceBuilder()
        with b.block(f"type {struct} struct {{"):
            b.line("db *gorm.DB")
        b.blank()

        constructor = f"New{to_pascal(ctx.config.database)}{entity}Repository"
        with b.func(f"{constructor}(db *gorm.DB) {entity}Repository"):
            b.line(f"return &{struct}{{db: db}}")
        b.blank()

        with b.func(f"({recv}) Save({var} *domain.{entity}) error"):
            b.line(f"return r.db.Create({var}).Error")
        b.blank()

        with b.func(f"({recv}) FindByID(id uint) (*domain.{entity}, error)"):
            b.line(f"{var} := &domain.{entity}{{}}")
            b.line(f"result := r.db.First({var}, id)")
            with b.block("if result.Error != nil {"):
                b.line("return nil, result.Error")
            b.line(f"return {var}, nil")
        b.blank()

        for method in ctx.search_methods:
            self._search_method(b, ctx, method)

        with b.func(f"({recv}) Update({var} *domain.{entity}) error"):
            b.line(f"return r.db.Save({var}).Error")
        b.blank()

        with b.func(f"({recv}) Delete(id uint) error"):
            b.line(f"return r.db.Delete(&domain.{entity}{{}}, id).Error")
        b.blank()

        with b.func(f"({recv}) FindAll() ([]domain.{entity}, error)"):
            b.line(f"var {plural} []domain.{entity}")
            b.line(f"result := r.db.Find(&{plural})")
            with b.block("if result.Error != nil {"):
                b.line("return nil, result.Error")
            b.line(f"return {plural}, nil")

        if ctx.config.transactions:
            b.blank()
            with b.func(f"({recv}) SaveWithTx(tx *gorm.DB, {var} *domain.{entity}) error"):
                b.line(f"return tx.Create({var}).Error")
            b.blank()
            with b.func(f"({recv}) UpdateWithTx(tx *gorm.DB, {var} *domain.{entity}) error"):
                b.line(f"return tx.Save({var}).Error")
            b.blank()
            with b.func(f"({recv}) DeleteWithTx(tx *gorm.DB, id uint) error"):
                b.line(f"return tx.Delete(&domain.{entity}{{}}, id).Error")

        imports = self._search_imports(ctx) + [f"{ctx.module}/internal/domain", GORM_IMPORT]
        return GeneratedArtifact(
            path=f"{REPOSITORY_DIR}/{ctx.config.database}_{ctx.file_base}_repository.go",
            content=go_header("repository", imports) + b.build(),
            layer=self.name,
        )
