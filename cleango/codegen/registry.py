"""
Layer registry for managing available layer generators.

Provides registration by name and alias, and instantiation of layer
generators sharing one template engine.
"""

from typing import Dict, List, Optional, Type

from .core.generator import LayerGenerator
from .core.templates import TemplateEngine


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class LayerRegistry:
    """Registry for managing available layer generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._layers: Dict[str, Type[LayerGenerator]] = {}
        self._aliases: Dict[str, str] = {}
        self._order: List[str] = []

    def register(
        self,
        layer: str,
        generator_class: Type[LayerGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator for a layer.

        Args:
            layer: Primary layer name (e.g., 'domain', 'repository')
            generator_class: Class implementing LayerGenerator
            aliases: Alternative names for this layer
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If generator class is invalid or conflicts exist
        """
        if not issubclass(generator_class, LayerGenerator):
            raise RegistryError("Generator class must inherit from LayerGenerator")

        layer_key = layer.lower()

        if layer_key in self._layers and not replace:
            return

        self._layers[layer_key] = generator_class
        if layer_key not in self._order:
            self._order.append(layer_key)

        for alias in aliases or []:
            alias_key = alias.lower()

            if alias_key == layer_key:
                continue

            if not replace:
                if alias_key in self._layers:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary layer"
                    )
                if alias_key in self._aliases and self._aliases[alias_key] != layer_key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = layer_key

    def unregister(self, layer: str):
        """
        Unregister a layer and its aliases.

        Args:
            layer: Layer name to unregister
        """
        layer_key = layer.lower()

        self._layers.pop(layer_key, None)
        if layer_key in self._order:
            self._order.remove(layer_key)

        for alias in [a for a, target in self._aliases.items() if target == layer_key]:
            del self._aliases[alias]

    def resolve(self, layer: str) -> str:
        """
        Resolve a layer name or alias to its primary name.

        Raises:
            RegistryError: If layer not found
        """
        layer_key = layer.lower()

        if layer_key in self._layers:
            return layer_key

        if layer_key in self._aliases:
            return self._aliases[layer_key]

        raise RegistryError(
            f"Unknown layer: {layer}. Available: {', '.join(self.list_layers())}"
        )

    def get_generator_class(self, layer: str) -> Type[LayerGenerator]:
        """Get generator class for a layer name or alias."""
        return self._layers[self.resolve(layer)]

    def create_generator(
        self, layer: str, template_engine: Optional[TemplateEngine] = None
    ) -> LayerGenerator:
        """
        Create generator instance for a layer.

        Args:
            layer: Layer name or alias
            template_engine: Engine shared by the generators of one run

        Returns:
            Layer generator instance
        """
        return self.get_generator_class(layer)(template_engine)

    def create_generators(
        self,
        layers: Optional[List[str]] = None,
        template_engine: Optional[TemplateEngine] = None,
    ) -> List[LayerGenerator]:
        """
        Create generators for several layers in registration order.

        Duplicates (including an alias next to its primary name) collapse.

        Args:
            layers: Layer names or aliases; all layers when omitted
            template_engine: Engine shared by the generators

        Returns:
            Generators ordered domain-first
        """
        wanted = {self.resolve(layer) for layer in layers} if layers else set(self._order)
        return [
            self.create_generator(layer, template_engine)
            for layer in self._order
            if layer in wanted
        ]

    def list_layers(self) -> List[str]:
        """Get list of registered primary layer names in generation order."""
        return list(self._order)

    def get_aliases_for_layer(self, layer: str) -> List[str]:
        layer_key = layer.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == layer_key)

    def is_supported(self, layer: str) -> bool:
        layer_key = layer.lower()
        return layer_key in self._layers or layer_key in self._aliases

    def get_layer_info(self, layer: str) -> Dict[str, object]:
        """
        Get information about a registered layer.

        Raises:
            RegistryError: If layer not found
        """
        layer_key = self.resolve(layer)
        generator_class = self._layers[layer_key]
        return {
            "name": layer_key,
            "class": generator_class.__name__,
            "description": generator_class(None).description,
            "aliases": self.get_aliases_for_layer(layer_key),
            "module": generator_class.__module__,
        }


# Global registry instance - created once
_global_registry: Optional[LayerRegistry] = None


def get_registry() -> LayerRegistry:
    """Get the global layer registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = LayerRegistry()
        _auto_register_layers()
    return _global_registry


def _auto_register_layers():
    """
    Register the built-in layers.

    Registration order is generation order: domain first so that later
    layers reference types that already exist.
    """
    from .layers import (
        DomainGenerator,
        DTOGenerator,
        HandlerGenerator,
        MessagesGenerator,
        RepositoryGenerator,
    )

    _global_registry.register("domain", DomainGenerator, aliases=["entity"])
    _global_registry.register("dto", DTOGenerator, aliases=["usecase"])
    _global_registry.register("repository", RepositoryGenerator, aliases=["repo"])
    _global_registry.register("handler", HandlerGenerator, aliases=["http"])
    _global_registry.register("messages", MessagesGenerator, aliases=["constants"])


def list_layers() -> List[str]:
    """List all registered layers from the global registry."""
    return get_registry().list_layers()


def get_layer_info(layer: str) -> Dict[str, object]:
    """Get information about a registered layer."""
    return get_registry().get_layer_info(layer)


def list_all_layer_info() -> Dict[str, Dict[str, object]]:
    """Get information about all registered layers."""
    return {layer: get_layer_info(layer) for layer in list_layers()}
