"""Completion candidates and cursor context types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "AutocompleteContext",
    "Completion",
    "CompletionKind",
    "MethodCallContext",
]

QUOTE_CHARS = ("'", '"')


class CompletionKind(str, Enum):
    """Category of a completion candidate."""

    METHOD = "method"
    COLLECTION = "collection"
    FIELD = "field"
    OPERATOR = "operator"
    DIRECTION = "direction"
    KEYWORD = "keyword"
    SNIPPET = "snippet"
    VALUE = "value"
    PROPERTY = "property"


@dataclass(frozen=True, slots=True)
class Completion:
    """A candidate completion.

    ``trigger`` is what the user types, ``suggestion`` what gets appended to it.
    ``insert_text`` overrides ``trigger + suggestion`` when set. ``cursor_offset``
    is added to the natural post-insert cursor position and may be negative.
    """

    trigger: str
    suggestion: str = ""
    cursor_offset: int = 0
    description: str = ""
    full_match: str | None = None
    kind: CompletionKind | None = None
    priority: int = 0
    keywords: tuple[str, ...] = ()
    insert_text: str | None = None

    @property
    def effective_text(self) -> str:
        if self.insert_text is not None:
            return self.insert_text
        return self.trigger + self.suggestion

    @property
    def dedup_key(self) -> str:
        return self.full_match or self.trigger

    @property
    def is_quoted(self) -> bool:
        return self.trigger.startswith(QUOTE_CHARS)


@dataclass(frozen=True, slots=True)
class MethodCallContext:
    """The fluent call enclosing the cursor and the zero-based argument index."""

    name: str
    arg_index: int


@dataclass(frozen=True, slots=True)
class AutocompleteContext:
    """Syntactic context at the cursor."""

    is_line_empty: bool
    trigger: str
    is_in_string: bool
    is_after_dot: bool
    is_db_access: bool
    method_call: MethodCallContext | None = None
