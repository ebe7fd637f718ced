"""Unit tests for the template engine (cleango.codegen.core.templates).

Tests cover:
- Logical names derived from template paths
- Built-in rendering with naming helpers
- Custom directory overrides by exact logical name
- Undefined references, syntax errors and missing templates
- Materializing the built-ins into a template directory
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cleango.codegen.core.builtin_templates import BUILTIN_TEMPLATES
from cleango.codegen.core.templates import (
    MATERIALIZED_SUFFIX,
    TemplateEngine,
    TemplateError,
    logical_name,
    optional_rule,
)


def _write(directory: Path, relative: str, content: str) -> Path:
    path = directory / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Logical names
# ---------------------------------------------------------------------------

class TestLogicalName:
    @pytest.mark.parametrize(
        "relative, expected",
        [
            ("domain/entity.go.tmpl", "domain/entity"),
            ("domain/entity.go.j2", "domain/entity"),
            ("usecase/dto.j2", "usecase/dto"),
            ("handler/http/handler.tpl", "handler/http/handler"),
            ("README.md", None),
        ],
    )
    def test_suffixes(self, relative, expected):
        assert logical_name(relative) == expected

    def test_windows_separators(self):
        assert logical_name("domain\\entity.go.tmpl") == "domain/entity"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_render_string_helpers(self, engine):
        out = engine.render_string(
            "{{ name | pascal }} {{ name | snake }} {{ name | plural }} {{ to_kebab(name) }}",
            {"name": "order_item"},
        )
        assert out == "OrderItem order_item order_items order-item"

    def test_type_helpers(self, engine):
        out = engine.render_string(
            "{{ 'timestamp' | go_type }} {{ zero_value('int') }} {{ type_info('string').zero_value }}",
            {},
        )
        assert out == 'time.Time 0 ""'

    def test_param_filter_avoids_keywords(self, engine):
        assert engine.render_string("{{ 'Type' | param }}", {}) == "typeValue"

    def test_comment_filter(self, engine):
        assert engine.render_string("{{ text | comment }}", {"text": "a\nb"}) == "// a\n// b"

    def test_optional_rule(self):
        assert optional_rule("required,min=1") == "omitempty,min=1"
        assert optional_rule("required") == "omitempty"
        assert optional_rule(None) == "omitempty"

    def test_builtin_templates_exist(self, engine):
        for name in BUILTIN_TEMPLATES:
            assert engine.template_exists(name)
            assert engine.template_origin(name) == "builtin"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    def test_undefined_variable_is_an_error(self, engine):
        with pytest.raises(TemplateError):
            engine.render_string("{{ missing }}", {})

    def test_undefined_in_named_template(self, custom_engine, template_dir):
        _write(template_dir, "domain/entity.go.tmpl", "type {{ entity }} {{ nope }}\n")

        with pytest.raises(TemplateError, match="Undefined reference"):
            custom_engine.render_template("domain/entity", {"entity": "Product"})

    def test_syntax_error(self, custom_engine, template_dir):
        _write(template_dir, "domain/entity.go.tmpl", "{% for x in %}\n")

        with pytest.raises(TemplateError, match="Syntax error"):
            custom_engine.render_template("domain/entity", {})

    def test_filter_failure_is_a_template_error(self, custom_engine, template_dir):
        _write(template_dir, "domain/entity.go.tmpl", "{{ fields | plural }}\n")

        with pytest.raises(TemplateError, match="Error rendering domain/entity"):
            custom_engine.render_template("domain/entity", {"fields": ["Name"]})

    def test_missing_template(self, engine):
        with pytest.raises(TemplateError, match="Template not found"):
            engine.render_template("nothing/here", {})
        assert not engine.template_exists("nothing/here")


# ---------------------------------------------------------------------------
# Custom overrides
# ---------------------------------------------------------------------------

class TestOverrides:
    def test_custom_template_wins(self, custom_engine, template_dir):
        _write(template_dir, "messages/errors.go.tmpl", "\t// custom {{ entity }}\n")

        out = custom_engine.render_template("messages/errors", {"entity": "Product"})

        assert out == "\t// custom Product\n"
        assert custom_engine.template_origin("messages/errors") == "custom"
        assert custom_engine.template_origin("usecase/dto") == "builtin"

    def test_override_by_exact_name_only(self, custom_engine, template_dir):
        _write(template_dir, "messages/errors_extra.go.tmpl", "x")

        assert custom_engine.template_origin("messages/errors") == "builtin"
        assert custom_engine.template_origin("messages/errors_extra") == "custom"

    def test_list_templates(self, custom_engine, template_dir):
        _write(template_dir, "domain/entity.go.j2", "x")

        listing = custom_engine.list_templates()

        assert listing["domain/entity"] == "custom"
        assert listing["usecase/dto"] == "builtin"
        assert custom_engine.has_custom_templates()

    def test_edited_template_is_reloaded(self, custom_engine, template_dir):
        path = _write(template_dir, "messages/errors.go.tmpl", "one")
        assert custom_engine.render_template("messages/errors", {}) == "one"

        path.write_text("two", encoding="utf-8")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 5))

        assert custom_engine.render_template("messages/errors", {}) == "two"


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------

class TestMaterialize:
    def test_writes_every_builtin(self, custom_engine, template_dir):
        written = custom_engine.materialize_builtins()

        assert len(written) == len(BUILTIN_TEMPLATES)
        entity = template_dir / f"domain/entity{MATERIALIZED_SUFFIX}"
        assert entity.read_text(encoding="utf-8") == BUILTIN_TEMPLATES["domain/entity"]
        assert custom_engine.template_origin("domain/entity") == "custom"

    def test_skips_when_templates_exist(self, custom_engine, template_dir):
        _write(template_dir, "domain/entity.go.tmpl", "mine")

        assert custom_engine.materialize_builtins() == []
        assert (template_dir / "domain/entity.go.tmpl").read_text(encoding="utf-8") == "mine"

    def test_force_overwrites(self, custom_engine, template_dir):
        _write(template_dir, "domain/entity.go.tmpl", "mine")

        custom_engine.materialize_builtins(force=True)

        content = (template_dir / "domain/entity.go.tmpl").read_text(encoding="utf-8")
        assert content == BUILTIN_TEMPLATES["domain/entity"]

    def test_creates_missing_directory(self, tmp_path):
        engine = TemplateEngine(tmp_path / "new" / "templates")
        assert engine.materialize_builtins()
        assert (tmp_path / "new" / "templates" / "usecase" / "dto.go.tmpl").exists()

    def test_requires_directory(self, engine):
        with pytest.raises(TemplateError):
            engine.materialize_builtins()

    def test_no_temp_files_left(self, custom_engine, template_dir):
        custom_engine.materialize_builtins()
        assert not [p for p in template_dir.rglob("*") if ".tmp." in p.name]
