"""
Base layer generator interface and generation pipeline.

Defines the contract every layer generator implements, the per-entity
context they render from, and the sequential runner that feeds their
artifacts through the merge writer.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ...logging_config import get_logger
from . import naming
from .classifier import FieldPlan, annotate, classify, search_methods
from .config import GeneratorConfig
from .merge import ArtifactStore, MergeError, WriteOutcome, merge_write
from .schema import Field, FieldList, GeneratedArtifact, SearchMethod
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)

_ENTITY_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass
class EntityContext:
    """Everything a layer needs to render one entity."""

    entity: str  # PascalCase
    fields: FieldList
    config: GeneratorConfig
    plans: Dict[str, FieldPlan] = field(default_factory=dict)
    search_methods: List[SearchMethod] = field(default_factory=list)

    @property
    def receiver(self) -> str:
        return naming.receiver_name(self.entity)

    @property
    def entity_var(self) -> str:
        return naming.go_identifier(self.entity)

    @property
    def entity_plural(self) -> str:
        return naming.to_plural(self.entity)

    @property
    def entity_label(self) -> str:
        """Lower-case display name used in messages ("order item")."""
        return " ".join(w.lower() for w in naming.split_words(self.entity))

    @property
    def table_name(self) -> str:
        return naming.table_name(self.entity)

    @property
    def route(self) -> str:
        return naming.route_segment(self.entity)

    @property
    def file_base(self) -> str:
        return naming.file_name(self.entity, self.config.file_naming)

    @property
    def module(self) -> str:
        return self.config.module_name

    def user_fields(self) -> List[Field]:
        return self.fields.user_fields()

    def template_context(self, **extra: Any) -> Dict[str, Any]:
        """Variables shared by every template."""
        context = {
            "entity": self.entity,
            "entity_var": self.entity_var,
            "entity_plural": self.entity_plural,
            "entity_label": self.entity_label,
            "entity_plural_label": naming.to_plural(self.entity_label),
            "receiver": self.receiver,
            "table_name": self.table_name,
            "route": self.route,
            "module": self.module,
            "fields": list(self.fields),
            "user_fields": self.user_fields(),
            "plans": self.plans,
            "search_methods": self.search_methods,
            "validation": self.config.validation,
            "business_rules": self.config.business_rules,
            "timestamps": self.config.timestamps,
            "soft_delete": self.config.soft_delete,
            "transactions": self.config.transactions,
            "database": self.config.database,
        }
        context.update(extra)
        return context


def validate_entity_name(name: str) -> Optional[str]:
    """Return an error message for an unusable entity name, else None."""
    if not name or not name.strip():
        return "entity name is required"
    if not _ENTITY_NAME.match(name.strip()):
        return (
            f"entity name '{name}' must start with a letter and contain only "
            "letters, digits or underscores"
        )
    if naming.to_camel(name) in naming.GO_RESERVED:
        return f"entity name '{name}' is a Go keyword"
    return None


def build_context(
    entity: str, fields: List[Field], config: GeneratorConfig
) -> EntityContext:
    """
    Classify parsed fields and assemble the entity context.

    Args:
        entity: Entity name in any case
        fields: Parsed user fields
        config: Effective generation flags

    Returns:
        EntityContext ready for the layer generators

    Raises:
        GeneratorError: If the entity name is unusable
    """
    problem = validate_entity_name(entity)
    if problem:
        raise GeneratorError(problem)

    annotated = annotate(fields, validation=config.validation)
    field_list = FieldList.build(
        annotated, timestamps=config.timestamps, soft_delete=config.soft_delete
    )
    return EntityContext(
        entity=naming.to_pascal(entity.strip()),
        fields=field_list,
        config=config,
        plans={f.name: classify(f) for f in annotated},
        search_methods=search_methods(annotated),
    )


ArtifactBuilder = Callable[[EntityContext], GeneratedArtifact]


class LayerGenerator(ABC):
    """Abstract base class for all layer generators."""

    def __init__(self, template_engine: Optional[TemplateEngine] = None):
        """Initialize generator with an optional template engine."""
        self._template_engine = template_engine

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the layer name (e.g., 'domain', 'repository')."""
        pass

    @property
    def description(self) -> str:
        """First line of the class docstring."""
        return (self.__doc__ or "").strip().split("\n")[0]

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine()
        return self._template_engine

    @abstractmethod
    def artifact_builders(self, ctx: EntityContext) -> List[ArtifactBuilder]:
        """
        Return one builder per artifact this layer produces for ``ctx``.

        Builders run independently so a template failure in one does not
        stop its siblings.
        """
        pass

    def generate(self, ctx: EntityContext) -> List[GeneratedArtifact]:
        """Build every artifact for an entity, failing on the first error."""
        return [build(ctx) for build in self.artifact_builders(ctx)]

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Logical template name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)

    def artifact_path(self, directory: str, ctx: EntityContext, suffix: str = "") -> str:
        """Relative path of a per-entity Go file."""
        return f"{directory}/{ctx.file_base}{suffix}.go"


@dataclass
class ArtifactFailure:
    """An artifact that could not be produced or written."""

    layer: str
    message: str
    exception: Optional[Exception] = None


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        outcomes: List[WriteOutcome] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            outcomes: What happened to each written artifact
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.outcomes = outcomes or []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.failures: List[ArtifactFailure] = []
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None
        self.parse_error = None

    @property
    def success(self) -> bool:
        return self.error_message is None and not self.failures

    @property
    def written(self) -> List[str]:
        return [o.path for o in self.outcomes if o.changed]

    @property
    def errors(self) -> List[str]:
        """Every failure message, the fatal one first."""
        messages = [f"{f.layer}: {f.message}" for f in self.failures]
        if self.error_message:
            messages.insert(0, self.error_message)
        return messages

    def add_failure(self, layer: str, message: str, exception: Exception = None):
        self.failures.append(ArtifactFailure(layer, message, exception))

    @classmethod
    def error(
        cls, message: str, exception: Exception = None, parse_error=None
    ) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.error_message = message
        result.exception = exception
        result.parse_error = parse_error
        return result


def run_layers(
    ctx: EntityContext,
    layers: List[LayerGenerator],
    store: ArtifactStore,
    result: Optional[GenerationResult] = None,
) -> GenerationResult:
    """
    Generate and write every artifact of the given layers, in order.

    A template or write failure abandons only the artifact concerned;
    artifacts already written stay on disk.

    Args:
        ctx: Entity context
        layers: Layer generators to run
        store: Destination store
        result: Result to accumulate into

    Returns:
        GenerationResult with one outcome per artifact
    """
    result = result or GenerationResult()

    for layer in layers:
        logger.info("Generating %s layer for %s", layer.name, ctx.entity)
        for build in layer.artifact_builders(ctx):
            try:
                artifact = build(ctx)
            except TemplateError as e:
                logger.error("%s layer: %s", layer.name, e)
                result.add_failure(layer.name, str(e), e)
                continue

            try:
                outcome = merge_write(store, artifact)
            except MergeError as e:
                logger.error("%s layer: %s", layer.name, e)
                result.add_failure(layer.name, str(e), e)
                continue

            result.outcomes.append(outcome)
            if outcome.warning:
                result.warnings.append(outcome.warning)

    return result
