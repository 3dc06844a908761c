"""Context-aware completion for fluent query expressions."""

from firequery.completion.applier import ApplyResult, apply_completion
from firequery.completion.context import analyze_context, get_method_call_context, get_trigger_at_cursor
from firequery.completion.engine import CompletionResult, QueryAutocomplete
from firequery.completion.ranker import rank_completions, score_candidate
from firequery.completion.suppliers import console_completion_supplier, editor_completion_supplier

__all__ = [
    "ApplyResult",
    "apply_completion",
    "analyze_context",
    "get_method_call_context",
    "get_trigger_at_cursor",
    "CompletionResult",
    "QueryAutocomplete",
    "rank_completions",
    "score_candidate",
    "console_completion_supplier",
    "editor_completion_supplier",
]
