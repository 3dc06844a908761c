"""Domain protocols."""

from firequery.domain.protocols.completion import DynamicCompletionSupplier

__all__ = ["DynamicCompletionSupplier"]
