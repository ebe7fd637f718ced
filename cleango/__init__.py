"""
cleango - Clean Architecture scaffolding for Go projects.
"""

from .codegen import (
    GenerationResult,
    GeneratorConfig,
    __version__,
    generate_entity,
    generate_feature,
)

__all__ = [
    "GenerationResult",
    "GeneratorConfig",
    "__version__",
    "generate_entity",
    "generate_feature",
]
