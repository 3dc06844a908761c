"""
Facade tying context analysis, ranking and edit application together.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from firequery.completion.applier import ApplyResult, apply_completion
from firequery.completion.catalog import EDITOR_COMPLETIONS
from firequery.completion.context import analyze_context, get_trigger_at_cursor
from firequery.completion.ranker import rank_completions
from firequery.core.config import EngineSettings
from firequery.core.query_builder import parse_structured_query
from firequery.domain.protocols.completion import DynamicCompletionSupplier
from firequery.domain.types.completion import AutocompleteContext, Completion
from firequery.domain.types.query import QueryParams, StructuredQuery
from firequery.logger import get_logger

logger = get_logger("completion.engine")


@dataclass(slots=True)
class CompletionResult:
    """Ranked completions for one cursor position."""

    trigger: str
    context: AutocompleteContext
    items: list[Completion] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return bool(self.items)


class QueryAutocomplete:
    """Entry point for editor hosts.

    Holds configuration only; every call recomputes from its arguments, so
    one instance can serve any number of editors.
    """

    def __init__(
        self,
        static_completions: Sequence[Completion] = EDITOR_COMPLETIONS,
        dynamic_supplier: DynamicCompletionSupplier | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._static_completions = tuple(static_completions)
        self._dynamic_supplier = dynamic_supplier
        self._settings = settings or EngineSettings()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def analyze(self, text: str, cursor: int) -> AutocompleteContext:
        return analyze_context(
            text,
            cursor,
            root_identifier=self._settings.root_identifier,
            context_window=self._settings.context_window,
        )

    def complete(self, text: str, cursor: int) -> CompletionResult:
        """Analyze the cursor position and rank candidates for it."""
        trigger = get_trigger_at_cursor(text, cursor)
        context = analyze_context(
            text,
            cursor,
            trigger,
            root_identifier=self._settings.root_identifier,
            context_window=self._settings.context_window,
        )
        items = rank_completions(
            self._static_completions,
            self._dynamic_supplier,
            trigger,
            context,
            max_results=self._settings.max_results,
            root_identifier=self._settings.root_identifier,
        )
        return CompletionResult(trigger=trigger, context=context, items=items)

    def apply(self, text: str, cursor: int, completion: Completion, trigger: str | None = None) -> ApplyResult:
        """Apply a chosen completion; the trigger is recomputed when not given."""
        if trigger is None:
            trigger = get_trigger_at_cursor(text, cursor)
        return apply_completion(text, cursor, completion, trigger)

    def build(self, text: str, collection_path: str | None = None) -> tuple[QueryParams, StructuredQuery]:
        """Parse an expression and build its structured query using the configured defaults."""
        default_collection = self._settings.default_collection if collection_path is None else collection_path
        params, query = parse_structured_query(text, default_collection, self._settings.default_limit)
        logger.info(f"Built structured query for collection {params.collection!r}")
        return params, query
