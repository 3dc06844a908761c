"""Dynamic completion supplier protocol."""

from typing import Protocol

from firequery.domain.types.completion import AutocompleteContext, Completion

__all__ = ["DynamicCompletionSupplier"]


class DynamicCompletionSupplier(Protocol):
    """Protocol for host-supplied, data-driven completion candidates.

    Hosts know the live collection and field names; the engine never fetches
    them. Suppliers are called synchronously on every keystroke and must not
    block.
    """

    def __call__(self, context: AutocompleteContext) -> list[Completion]:
        """Return candidates for the given cursor context.

        Args:
            context: The analyzed cursor context

        Returns:
            Completion candidates to merge with the static catalog
        """
        ...
