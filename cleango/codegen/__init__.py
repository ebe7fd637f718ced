"""
Clean Architecture code generation.

Turns an entity name and a field descriptor into the Go sources of every
layer, merging shared files incrementally.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..logging_config import get_logger
from .registry import LayerRegistry, RegistryError, get_registry, list_layers
from .core.config import (
    GeneratorConfig,
    ConfigManager,
    ConfigError,
    get_config_manager,
    load_config,
)
from .core.generator import (
    EntityContext,
    GenerationResult,
    GeneratorError,
    LayerGenerator,
    build_context,
    run_layers,
)
from .core.merge import ArtifactStore, FileStore, MemoryStore, MergeAction
from .core.parser import FieldSpecException, parse_fields
from .core.schema import Field
from .core.templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)

# Version info
__version__ = "0.1.0"


def _resolve_config(
    config: Union[GeneratorConfig, Dict[str, Any], str, Path, None]
) -> GeneratorConfig:
    if isinstance(config, GeneratorConfig):
        return config
    if isinstance(config, dict):
        return load_config(custom_config=config)
    if isinstance(config, (str, Path)):
        return load_config(config_file=config)
    return load_config()


def engine_for_config(config: GeneratorConfig) -> TemplateEngine:
    """
    Build the template engine a configuration asks for.

    When a template directory is configured and holds no templates yet, the
    built-ins are written there first unless ``materialize_templates`` is
    turned off.
    """
    engine = create_template_engine(config.template_dir)
    if config.template_dir and config.materialize_templates:
        engine.materialize_builtins()
    return engine


def generate_entity(
    entity: str,
    fields: Union[str, List[Field], None],
    config: Union[GeneratorConfig, Dict[str, Any], str, Path, None] = None,
    store: Optional[ArtifactStore] = None,
    layers: Optional[List[str]] = None,
    project_root: Union[str, Path] = ".",
) -> GenerationResult:
    """
    Generate the requested layers for one entity.

    Args:
        entity: Entity name in any case
        fields: Field descriptor (``name:type,...``) or already parsed fields
        config: GeneratorConfig, override dict or JSON config path
        store: Destination store (a FileStore on ``project_root`` by default)
        layers: Layer names or aliases; every layer when omitted
        project_root: Project directory used when no store is given

    Returns:
        GenerationResult; a descriptor error leaves every file untouched
    """
    if isinstance(fields, str) or fields is None:
        parsed = parse_fields(fields)
        if not parsed.success:
            logger.error("Invalid field descriptor: %s", parsed.error)
            return GenerationResult.error(
                str(parsed.error), FieldSpecException(parsed.error), parsed.error
            )
        fields = parsed.fields

    try:
        resolved = _resolve_config(config)
        ctx = build_context(entity, fields, resolved)
        engine = engine_for_config(resolved)
        generators = get_registry().create_generators(layers, engine)
    except (ConfigError, GeneratorError, RegistryError, TemplateError) as e:
        logger.error("Generation aborted: %s", e)
        return GenerationResult.error(str(e), e)

    result = GenerationResult(
        warnings=get_config_manager().validate_config(resolved),
        metadata={
            "entity": ctx.entity,
            "layers": [g.name for g in generators],
            "field_count": len(ctx.fields),
            "search_methods": [m.method_name for m in ctx.search_methods],
            "template_source": "custom" if engine.has_custom_templates() else "builtin",
        },
    )

    store = store if store is not None else FileStore(project_root)
    run_layers(ctx, generators, store, result)

    result.metadata["files_written"] = len(result.written)
    logger.info(
        "%s: %d artifact(s), %d written, %d failed",
        ctx.entity,
        len(result.outcomes),
        len(result.written),
        len(result.failures),
    )
    return result


def generate_feature(
    entity: str,
    fields: Union[str, List[Field], None],
    config: Union[GeneratorConfig, Dict[str, Any], str, Path, None] = None,
    store: Optional[ArtifactStore] = None,
    project_root: Union[str, Path] = ".",
) -> GenerationResult:
    """Generate every layer for one entity, domain first."""
    return generate_entity(
        entity, fields, config=config, store=store, layers=None, project_root=project_root
    )


# Export main interfaces
__all__ = [
    "ArtifactStore",
    "ConfigError",
    "ConfigManager",
    "EntityContext",
    "FileStore",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "LayerGenerator",
    "LayerRegistry",
    "MemoryStore",
    "MergeAction",
    "RegistryError",
    "TemplateEngine",
    "TemplateError",
    "engine_for_config",
    "generate_entity",
    "generate_feature",
    "get_registry",
    "list_layers",
    "load_config",
    "parse_fields",
]
