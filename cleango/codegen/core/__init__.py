"""
Core code generation components.

Provides the field model, descriptor parser, classifier, templates and
merge writer used by every layer generator.
"""

from .generator import (
    EntityContext,
    GeneratorError,
    GenerationResult,
    LayerGenerator,
    build_context,
    run_layers,
)
from .schema import Field, FieldList, GeneratedArtifact, SearchMethod, Cardinality
from .naming import NamingCase, FileNaming, convert_case
from .types import TypeKind, TypeSpec, TypeRegistry, get_type_registry
from .parser import (
    FieldSpecError,
    FieldSpecException,
    ParseErrorKind,
    ParseResult,
    parse_fields,
    serialize_fields,
)
from .classifier import FieldPlan, annotate, classify, search_methods
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine
from .merge import (
    ArtifactStore,
    FileStore,
    MemoryStore,
    MergeAction,
    MergeError,
    WriteOutcome,
    merge_write,
)

__all__ = [
    # Base generator interface
    "EntityContext",
    "GeneratorError",
    "GenerationResult",
    "LayerGenerator",
    "build_context",
    "run_layers",
    # Field model
    "Field",
    "FieldList",
    "GeneratedArtifact",
    "SearchMethod",
    "Cardinality",
    # Naming and types
    "NamingCase",
    "FileNaming",
    "convert_case",
    "TypeKind",
    "TypeSpec",
    "TypeRegistry",
    "get_type_registry",
    # Descriptor parsing and classification
    "FieldSpecError",
    "FieldSpecException",
    "ParseErrorKind",
    "ParseResult",
    "parse_fields",
    "serialize_fields",
    "FieldPlan",
    "annotate",
    "classify",
    "search_methods",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    # Merge writer
    "ArtifactStore",
    "FileStore",
    "MemoryStore",
    "MergeAction",
    "MergeError",
    "WriteOutcome",
    "merge_write",
]
