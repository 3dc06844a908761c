"""
Strategy interfaces for autocomplete completions, and the query strategy.

The query strategy adapts :class:`QueryAutocomplete` to textual-autocomplete,
so a Textual input can offer expression completions directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from textual_autocomplete import DropdownItem, TargetState

from firequery.completion.applier import ApplyResult
from firequery.completion.engine import QueryAutocomplete
from firequery.domain.types.completion import Completion, CompletionKind
from firequery.logger import get_logger

logger = get_logger("completion.strategy")

KIND_ICONS: dict[CompletionKind | None, str] = {
    CompletionKind.METHOD: "ƒ",
    CompletionKind.COLLECTION: "▤",
    CompletionKind.FIELD: "•",
    CompletionKind.OPERATOR: "≟",
    CompletionKind.DIRECTION: "⇅",
    CompletionKind.KEYWORD: "#",
    CompletionKind.SNIPPET: "✎",
    CompletionKind.VALUE: "\"",
    CompletionKind.PROPERTY: "◆",
    None: "·",
}


@dataclass(slots=True)
class CompletionRequest:
    """Snapshot of the target input state used by completion strategies."""

    state: TargetState

    @property
    def text(self) -> str:
        """Current input text for convenience."""
        return self.state.text

    @property
    def cursor_position(self) -> int:
        """Cursor position convenience accessor."""
        return self.state.cursor_position


class CompletionStrategy(Protocol):
    """Contract implemented by all autocomplete strategies."""

    def can_handle(self, request: CompletionRequest) -> bool:
        """Return ``True`` when this strategy should produce candidates."""

        ...

    def get_candidates(self, request: CompletionRequest) -> list[DropdownItem]:
        """Return dropdown items for the current state."""

        ...


def completion_label(completion: Completion) -> str:
    """Text shown for a candidate; unique within one ranked list."""
    return completion.dedup_key


def to_dropdown_item(completion: Completion) -> DropdownItem:
    return DropdownItem(main=completion_label(completion), prefix=KIND_ICONS.get(completion.kind, KIND_ICONS[None]))


class QueryCompletionStrategy(CompletionStrategy):
    """Offers ranked query-expression completions."""

    def __init__(self, autocomplete: QueryAutocomplete) -> None:
        self._autocomplete = autocomplete

    def can_handle(self, request: CompletionRequest) -> bool:
        context = self._autocomplete.analyze(request.text, request.cursor_position)
        return bool(
            context.trigger.strip()
            or context.method_call
            or context.is_in_string
            or context.is_after_dot
            or context.is_line_empty
        )

    def get_candidates(self, request: CompletionRequest) -> list[DropdownItem]:
        result = self._autocomplete.complete(request.text, request.cursor_position)
        logger.debug(f"QueryCompletionStrategy returning {len(result.items)} item(s) for {result.trigger!r}")
        return [to_dropdown_item(item) for item in result.items]

    def apply(self, value: str, state: TargetState) -> ApplyResult:
        """Apply the dropdown entry labelled ``value`` to the input state."""
        result = self._autocomplete.complete(state.text, state.cursor_position)
        for item in result.items:
            if completion_label(item) == value:
                return self._autocomplete.apply(state.text, state.cursor_position, item, result.trigger)

        logger.warning(f"Selected value {value!r} is no longer among the ranked completions")
        return ApplyResult(text=state.text, cursor=state.cursor_position)
