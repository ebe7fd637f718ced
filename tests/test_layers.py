"""Unit tests for the layer generators and the layer registry.

Tests cover:
- Domain entity, domain errors and seed data
- Use case DTOs
- Repository interface and gorm implementation
- HTTP handler
- Message and constant catalogs
- Layer registry lookups and aliases
- Per-artifact failure isolation in run_layers
"""

from __future__ import annotations

import pytest

from cleango.codegen.core.generator import (
    GeneratorError,
    build_context,
    run_layers,
    validate_entity_name,
)
from cleango.codegen.core.merge import MergeAction
from cleango.codegen.core.parser import parse_fields
from cleango.codegen.layers import (
    DomainGenerator,
    DTOGenerator,
    HandlerGenerator,
    MessagesGenerator,
    RepositoryGenerator,
)
from cleango.codegen.registry import LayerRegistry, RegistryError, get_registry


def _by_path(artifacts):
    return {a.path: a for a in artifacts}


# ---------------------------------------------------------------------------
# Entity context
# ---------------------------------------------------------------------------

class TestEntityContext:
    def test_names(self, plain_config):
        ctx = build_context("order_item", [], plain_config)

        assert ctx.entity == "OrderItem"
        assert ctx.entity_var == "orderItem"
        assert ctx.entity_plural == "OrderItems"
        assert ctx.entity_label == "order item"
        assert ctx.receiver == "o"
        assert ctx.table_name == "order_items"
        assert ctx.route == "order-items"
        assert ctx.file_base == "orderitem"

    def test_field_order(self, product_ctx):
        assert [f.name for f in product_ctx.fields] == [
            "ID", "Name", "Price", "Email", "CreatedAt", "UpdatedAt", "DeletedAt",
        ]
        assert [f.name for f in product_ctx.user_fields()] == ["Name", "Price", "Email"]

    @pytest.mark.parametrize("name", ["", "  ", "1Product", "Order Item", "type"])
    def test_invalid_entity_names(self, name, plain_config):
        assert validate_entity_name(name)
        with pytest.raises(GeneratorError):
            build_context(name, [], plain_config)


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------

class TestDomainGenerator:
    def test_plain_entity_exact_output(self, engine, plain_config):
        ctx = build_context("Product", parse_fields("name:string").fields, plain_config)
        artifacts = _by_path(DomainGenerator(engine).generate(ctx))

        assert set(artifacts) == {
            "internal/domain/product.go",
            "internal/domain/product_seeds.go",
        }
        assert artifacts["internal/domain/product.go"].content == (
            "package domain\n"
            "\n"
            "type Product struct {\n"
            '\tID uint `json:"id" gorm:"primaryKey;autoIncrement"`\n'
            '\tName string `json:"name" gorm:"column:name;type:varchar(255)"`\n'
            "}\n"
        )

    def test_validate_checks_per_type(self, engine, product_ctx):
        entity = _by_path(DomainGenerator(engine).generate(product_ctx))[
            "internal/domain/product.go"
        ].content

        assert "func (p *Product) Validate() error {" in entity
        assert '\tif p.Name == "" {\n\t\treturn ErrInvalidProductName\n\t}' in entity
        assert "\tif p.Price < 0 {\n\t\treturn ErrInvalidProductPrice\n\t}" in entity
        assert entity.count("\treturn nil\n") == 1

    def test_struct_tags_and_system_fields(self, engine, product_ctx):
        entity = _by_path(DomainGenerator(engine).generate(product_ctx))[
            "internal/domain/product.go"
        ].content

        assert (
            '\tEmail string `json:"email" gorm:"column:email;type:varchar(255);uniqueIndex" '
            'validate:"required,min=1"`'
        ) in entity
        assert '\tCreatedAt time.Time `json:"created_at" gorm:"autoCreateTime"`' in entity
        assert '\tDeletedAt *time.Time `json:"deleted_at,omitempty" gorm:"index"`' in entity

    def test_business_rules_and_soft_delete(self, engine, product_ctx):
        entity = _by_path(DomainGenerator(engine).generate(product_ctx))[
            "internal/domain/product.go"
        ].content

        assert 'import (\n\t"strings"\n\t"time"\n)\n' in entity
        assert "func (p *Product) IsExpensive() bool {\n\treturn p.Price > 1000.0\n}" in entity
        assert 'return strings.Contains(p.Email, "@")' in entity
        assert "func (p *Product) SoftDelete() {" in entity
        assert "return p.DeletedAt != nil" in entity

    def test_business_rule_needs_matching_type(self, engine, config):
        ctx = build_context("Person", parse_fields("age:string").fields, config)
        entity = DomainGenerator(engine).build_entity(ctx).content

        assert "IsAdult" not in entity

    def test_errors_artifact(self, engine, product_ctx):
        errors = _by_path(DomainGenerator(engine).generate(product_ctx))[
            "internal/domain/errors.go"
        ]

        assert errors.mergeable
        assert errors.opener == "var (\n"
        assert errors.marker == "\tErrInvalidProductData "
        assert '\tErrInvalidProductName = errors.New("product name is invalid")\n' in errors.content
        assert errors.render_fresh().startswith('package domain\n\nimport (\n\t"errors"\n)\n')
        assert errors.content.startswith("\n\t// Product errors\n")
        assert 'import (\n\t"errors"\n)\n\nvar (\n\t// Product errors\n' in errors.render_fresh()

    def test_no_errors_without_validation(self, engine, plain_config):
        ctx = build_context("Product", [], plain_config)
        paths = [a.path for a in DomainGenerator(engine).generate(ctx)]

        assert "internal/domain/errors.go" not in paths

    def test_seeds(self, engine, plain_config):
        ctx = build_context("Product", parse_fields("name:string,price:float64").fields, plain_config)
        seeds = DomainGenerator(engine).build_seeds(ctx).content

        assert "func GetProductSeeds() []Product {" in seeds
        assert '\t\t\tName: "Juan Pérez",' in seeds
        assert "INSERT INTO products (name, price) VALUES ('Juan Pérez', 99.99);" in seeds
        assert seeds.count("INSERT INTO") == 3
        assert seeds == DomainGenerator(engine).build_seeds(ctx).content

    def test_file_naming(self, engine, plain_config):
        plain_config.file_naming = "snake"
        ctx = build_context("OrderItem", [], plain_config)

        assert DomainGenerator(engine).build_entity(ctx).path == "internal/domain/order_item.go"


# ---------------------------------------------------------------------------
# DTO
# ---------------------------------------------------------------------------

class TestDTOGenerator:
    def test_dto_content(self, engine, product_ctx):
        dto = DTOGenerator(engine).build_dto(product_ctx)

        assert dto.path == "internal/usecase/dto.go"
        assert dto.marker == "type CreateProductInput struct"
        assert '\tName string `json:"name" validate:"required,min=1"`' in dto.content
        assert '\tName *string `json:"name,omitempty" validate:"omitempty,min=1"`' in dto.content
        assert '\tProducts []domain.Product `json:"products"`' in dto.content
        assert "type CreateProductOutput struct" in dto.content

    def test_dto_without_validation(self, engine, plain_config):
        ctx = build_context("Product", parse_fields("name:string").fields, plain_config)
        dto = DTOGenerator(engine).build_dto(ctx)

        assert "validate:" not in dto.content

    def test_time_import_only_when_needed(self, engine, plain_config):
        plain = build_context("Product", parse_fields("name:string").fields, plain_config)
        timed = build_context("Event", parse_fields("starts_at:timestamp").fields, plain_config)

        assert '"time"' not in DTOGenerator(engine).build_dto(plain).header
        assert '\t"time"\n' in DTOGenerator(engine).build_dto(timed).header
        assert '"github.com/acme/shop/internal/domain"' in DTOGenerator(engine).build_dto(timed).header


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class TestRepositoryGenerator:
    def test_interface(self, engine, product_ctx):
        interface = RepositoryGenerator(engine).build_interface(product_ctx)

        assert interface.path == "internal/repository/interfaces.go"
        assert interface.marker == "type ProductRepository interface"
        assert "\tFindByName(name string) ([]domain.Product, error)\n" in interface.content
        assert "\tFindByEmail(email string) (*domain.Product, error)\n" in interface.content
        assert "\tSaveWithTx(tx *gorm.DB, product *domain.Product) error\n" in interface.content
        assert '"gorm.io/gorm"' in interface.header

    def test_interface_without_transactions(self, engine, plain_config):
        ctx = build_context("Product", parse_fields("name:string").fields, plain_config)
        interface = RepositoryGenerator(engine).build_interface(ctx)

        assert "WithTx" not in interface.content
        assert "gorm" not in interface.header

    def test_implementation(self, engine, product_ctx):
        impl = RepositoryGenerator(engine).build_implementation(product_ctx)

        assert impl.path == "internal/repository/postgres_product_repository.go"
        assert "type postgresProductRepository struct {" in impl.content
        assert "func NewPostgresProductRepository(db *gorm.DB) ProductRepository {" in impl.content
        assert 'result := r.db.Where("email = ?", email).First(product)' in impl.content
        assert 'result := r.db.Where("name = ?", name).Find(&products)' in impl.content
        assert "func (r *postgresProductRepository) DeleteWithTx(tx *gorm.DB, id uint) error {" in impl.content

    def test_one_accessor_per_searchable_field(self, engine, product_ctx):
        impl = RepositoryGenerator(engine).build_implementation(product_ctx).content

        assert impl.count(") FindBy") == 3  # FindByID, FindByName, FindByEmail
        assert "FindByPrice" not in impl

    def test_parameter_collision(self, engine, plain_config):
        ctx = build_context("Result", parse_fields("result:string").fields, plain_config)
        impl = RepositoryGenerator(engine).build_implementation(ctx).content

        assert "FindByResult(resultValue string)" in impl

    def test_database_flavour(self, engine, plain_config):
        plain_config.database = "mysql"
        ctx = build_context("Product", [], plain_config)
        impl = RepositoryGenerator(engine).build_implementation(ctx)

        assert impl.path == "internal/repository/mysql_product_repository.go"
        assert "func NewMysqlProductRepository(" in impl.content


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------

class TestHandlerGenerator:
    def test_routes_and_imports(self, engine, plain_config):
        ctx = build_context("OrderItem", parse_fields("name:string").fields, plain_config)
        handler = HandlerGenerator(engine).build_handler(ctx)

        assert handler.path == "internal/handler/http/orderitem_handler.go"
        assert not handler.mergeable
        assert (
            'r.HandleFunc("/order-items", h.CreateOrderItem).Methods(http.MethodPost)'
            in handler.content
        )
        assert 'r.HandleFunc("/order-items/{id}", h.DeleteOrderItem)' in handler.content
        assert '"github.com/acme/shop/internal/usecase"' in handler.content
        assert "func (h *OrderItemHandler) ListOrderItems(" in handler.content


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class TestMessagesGenerator:
    def test_three_const_blocks(self, engine, product_ctx):
        artifacts = _by_path(MessagesGenerator(engine).generate(product_ctx))

        assert set(artifacts) == {
            "internal/messages/errors.go",
            "internal/messages/responses.go",
            "internal/constants/constants.go",
        }
        for artifact in artifacts.values():
            assert artifact.mergeable
            assert artifact.opener == "const (\n"
            assert artifact.closer == ")\n"

    def test_error_messages(self, engine, product_ctx):
        errors = MessagesGenerator(engine).build_errors(product_ctx).content

        assert '\tErrProductNotFound = "product not found"\n' in errors
        assert '\tErrProductPriceRequired = "product price is required"\n' in errors

    def test_responses_and_constants(self, engine, product_ctx):
        gen = MessagesGenerator(engine)

        assert '\tProductsListedSuccessfully = "products listed successfully"\n' in (
            gen.build_responses(product_ctx).content
        )
        constants = gen.build_constants(product_ctx).content
        assert '\tProductTableName = "products"\n' in constants
        assert '\tProductEndpoint = "/products"\n' in constants
        assert '\tProductEmailColumn = "email"\n' in constants


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_builtin_layers_in_order(self):
        assert get_registry().list_layers() == [
            "domain", "dto", "repository", "handler", "messages",
        ]

    def test_aliases(self):
        registry = get_registry()

        assert registry.resolve("entity") == "domain"
        assert registry.resolve("USECASE") == "dto"
        assert registry.is_supported("repo")
        assert not registry.is_supported("graphql")

    def test_unknown_layer(self):
        with pytest.raises(RegistryError, match="Unknown layer"):
            get_registry().resolve("graphql")

    def test_create_generators_dedupes_and_orders(self, engine):
        generators = get_registry().create_generators(["messages", "entity", "domain"], engine)
        assert [g.name for g in generators] == ["domain", "messages"]

    def test_layer_info(self):
        info = get_registry().get_layer_info("domain")

        assert info["class"] == "DomainGenerator"
        assert info["aliases"] == ["entity"]
        assert info["description"]

    def test_alias_conflict(self):
        registry = LayerRegistry()
        registry.register("domain", DomainGenerator, aliases=["entity"])

        with pytest.raises(RegistryError):
            registry.register("dto", DTOGenerator, aliases=["entity"])

    def test_rejects_non_generators(self):
        with pytest.raises(RegistryError):
            LayerRegistry().register("x", dict)

    def test_unregister(self):
        registry = LayerRegistry()
        registry.register("domain", DomainGenerator, aliases=["entity"])
        registry.unregister("domain")

        assert not registry.is_supported("domain")
        assert not registry.is_supported("entity")


# ---------------------------------------------------------------------------
# run_layers
# ---------------------------------------------------------------------------

class TestRunLayers:
    def test_template_failure_only_abandons_that_artifact(
        self, custom_engine, template_dir, product_ctx, store
    ):
        broken = template_dir / "repository" / "interface.go.tmpl"
        broken.parent.mkdir(parents=True)
        broken.write_text("type {{ entity }}Repository {{ not_defined }}\n", encoding="utf-8")

        layers = [
            DomainGenerator(custom_engine),
            RepositoryGenerator(custom_engine),
            MessagesGenerator(custom_engine),
        ]
        result = run_layers(product_ctx, layers, store)

        assert not result.success
        assert len(result.failures) == 1
        assert result.failures[0].layer == "repository"
        assert "internal/repository/interfaces.go" not in store.files
        assert "internal/repository/postgres_product_repository.go" in store.files
        assert "internal/domain/product.go" in store.files
        assert "internal/messages/errors.go" in store.files
        assert result.errors[0].startswith("repository:")

    def test_outcomes_recorded(self, engine, product_ctx, store):
        result = run_layers(product_ctx, [MessagesGenerator(engine)], store)

        assert result.success
        assert [o.action for o in result.outcomes] == [MergeAction.WRITE_FRESH] * 3
