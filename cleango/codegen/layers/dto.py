"""
Use case DTO generator.

Appends Create/Update/List data transfer objects for an entity to the
shared ``internal/usecase/dto.go``.
"""

from typing import List

from ..core.builder import go_header
from ..core.generator import ArtifactBuilder, EntityContext, LayerGenerator
from ..core.schema import GeneratedArtifact

USECASE_DIR = "internal/usecase"


class DTOGenerator(LayerGenerator):
    """Input and output DTOs in the shared use case file."""

    @property
    def name(self) -> str:
        return "dto"

    def artifact_builders(self, ctx: EntityContext) -> List[ArtifactBuilder]:
        return [self.build_dto]

    def imports(self, ctx: EntityContext) -> List[str]:
        stdlib = sorted({imp for f in ctx.user_fields() for imp in f.type_spec.imports})
        return stdlib + [f"{ctx.module}/internal/domain"]

    def build_dto(self, ctx: EntityContext) -> GeneratedArtifact:
        content = self.render_template("usecase/dto", ctx.template_context())
        return GeneratedArtifact(
            path=f"{USECASE_DIR}/dto.go",
            content=content,
            mergeable=True,
            marker=f"type Create{ctx.entity}Input struct",
            header=go_header("usecase", self.imports(ctx)),
            layer=self.name,
        )
