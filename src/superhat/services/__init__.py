"""Application services built on the config model."""

from .binding_store import ConfigBindingStore, PanelPersistence

__all__ = ["ConfigBindingStore", "PanelPersistence"]
