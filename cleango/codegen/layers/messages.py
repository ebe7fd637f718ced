"""
Message and constant catalog generator.

Each entity contributes one group of constants to the shared error
message, response message and constants files.
"""

from typing import List

from ..core.builder import go_header
from ..core.generator import ArtifactBuilder, EntityContext, LayerGenerator
from ..core.schema import GeneratedArtifact


class MessagesGenerator(LayerGenerator):
    """Error messages, response messages and constants."""

    @property
    def name(self) -> str:
        return "messages"

    def artifact_builders(self, ctx: EntityContext) -> List[ArtifactBuilder]:
        return [self.build_errors, self.build_responses, self.build_constants]

    def _const_artifact(
        self, path: str, package: str, template: str, marker: str, ctx: EntityContext
    ) -> GeneratedArtifact:
        return GeneratedArtifact(
            path=path,
            content=self.render_template(template, ctx.template_context()),
            mergeable=True,
            marker=marker,
            header=go_header(package),
            opener="const (\n",
            closer=")\n",
            layer=self.name,
        )

    def build_errors(self, ctx: EntityContext) -> GeneratedArtifact:
        return self._const_artifact(
            "internal/messages/errors.go",
            "messages",
            "messages/errors",
            f"\tErr{ctx.entity}NotFound ",
            ctx,
        )

    def build_responses(self, ctx: EntityContext) -> GeneratedArtifact:
        return self._const_artifact(
            "internal/messages/responses.go",
            "messages",
            "messages/responses",
            f"\t{ctx.entity}CreatedSuccessfully ",
            ctx,
        )

    def build_constants(self, ctx: EntityContext) -> GeneratedArtifact:
        return self._const_artifact(
            "internal/constants/constants.go",
            "constants",
            "constants/constants",
            f"\t{ctx.entity}TableName ",
            ctx,
        )
