"""Shared pytest fixtures for the cleango test suite.

Provides reusable fixtures for:
- Temporary Go project directories (with and without go.mod)
- Parsed sample fields and entity contexts
- Template engines backed by a temporary template directory
- In-memory artifact stores
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cleango.codegen.core.config import GeneratorConfig
from cleango.codegen.core.generator import EntityContext, build_context
from cleango.codegen.core.merge import MemoryStore
from cleango.codegen.core.parser import parse_fields
from cleango.codegen.core.templates import TemplateEngine


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Temporary Go project with a go.mod declaring github.com/acme/shop."""
    root = tmp_path / "shop"
    root.mkdir()
    (root / "go.mod").write_text("module github.com/acme/shop\n\ngo 1.21\n", encoding="utf-8")
    return root


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Empty template directory."""
    path = tmp_path / "templates"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Fields & Contexts
# ---------------------------------------------------------------------------

PRODUCT_FIELDS = "name:string,price:float64,email:string"


@pytest.fixture
def product_fields():
    """Parsed fields of the Product sample entity."""
    return parse_fields(PRODUCT_FIELDS).raise_for_error()


@pytest.fixture
def config() -> GeneratorConfig:
    """Configuration with every entity feature enabled."""
    return GeneratorConfig(
        module_name="github.com/acme/shop",
        validation=True,
        business_rules=True,
        timestamps=True,
        soft_delete=True,
        transactions=True,
    )


@pytest.fixture
def plain_config() -> GeneratorConfig:
    """Configuration with every entity feature disabled."""
    return GeneratorConfig(module_name="github.com/acme/shop")


@pytest.fixture
def product_ctx(product_fields, config) -> EntityContext:
    return build_context("Product", product_fields, config)


# ---------------------------------------------------------------------------
# Engines & Stores
# ---------------------------------------------------------------------------

@pytest.fixture
def engine() -> TemplateEngine:
    """Engine with only the built-in templates."""
    return TemplateEngine()


@pytest.fixture
def custom_engine(template_dir: Path) -> TemplateEngine:
    """Engine reading overrides from the temporary template directory."""
    return TemplateEngine(template_dir)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()
