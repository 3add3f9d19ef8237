"""Terminal views over the marketplace catalog."""

from marketledger.monitor.renderer import CatalogRenderer

__all__ = ["CatalogRenderer"]
