"""
HTTP handler generator.

Renders a gorilla/mux handler with CRUD endpoints and route registration
for an entity.
"""

from typing import List

from ..core.generator import ArtifactBuilder, EntityContext, LayerGenerator
from ..core.schema import GeneratedArtifact

HANDLER_DIR = "internal/handler/http"


class HandlerGenerator(LayerGenerator):
    """HTTP handler with CRUD routes."""

    @property
    def name(self) -> str:
        return "handler"

    def artifact_builders(self, ctx: EntityContext) -> List[ArtifactBuilder]:
        return [self.build_handler]

    def build_handler(self, ctx: EntityContext) -> GeneratedArtifact:
        content = self.render_template("handler/http/handler", ctx.template_context())
        return GeneratedArtifact(
            path=self.artifact_path(HANDLER_DIR, ctx, "_handler"),
            content=content,
            layer=self.name,
        )
