"""Font registration adapters."""

from cachedfonts.adapters.registry.fonttools import FontToolsRegistry, RegisteredFont


__all__ = ["FontToolsRegistry", "RegisteredFont"]
