"""
Completion candidate ranking.

Merges the static catalog with host-supplied dynamic candidates, scores each
against the trigger and the cursor context, and returns the best distinct
candidates. Ranking is a pure function of its inputs: nothing is cached
between calls.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from firequery.core.config import DEFAULT_MAX_RESULTS, DEFAULT_ROOT_IDENTIFIER
from firequery.domain.protocols.completion import DynamicCompletionSupplier
from firequery.domain.types.completion import AutocompleteContext, Completion, CompletionKind
from firequery.logger import get_logger

logger = get_logger("completion.ranker")

K = CompletionKind

DESCRIPTION_WEIGHT = 0.6

METHOD_PRIORITY: dict[str, int] = {
    ".where": 40,
    ".orderBy": 35,
    ".limit": 30,
    ".limitToLast": 28,
    ".get": 32,
    ".doc": 28,
    ".collection": 27,
    ".collectionGroup": 26,
    ".select": 24,
    ".add": 18,
    ".set": 18,
    ".update": 18,
    ".delete": 18,
    ".count": 16,
    ".withConverter": 14,
    ".listDocuments": 12,
    ".listCollections": 12,
}

STRING_ARGUMENT_METHODS = frozenset({"collection", "collectionGroup", "doc", "where", "orderBy", "select"})
COLLECTION_METHODS = frozenset({"collection", "collectionGroup", "doc"})

_NORMALIZE_PREFIX = re.compile(r"^[\s.'\"`]+")


@dataclass(slots=True)
class ScoredCompletion:
    completion: Completion
    score: float


def normalize_for_match(value: str) -> str:
    """Lower-case and drop leading dots, quotes and whitespace."""
    return _NORMALIZE_PREFIX.sub("", value.lower())


def is_subsequence(needle: str, haystack: str) -> bool:
    """Return True when every character of ``needle`` appears in order in ``haystack``."""
    remaining = iter(haystack)
    return all(char in remaining for char in needle)


def score_candidate(trigger: str, candidate: str | None, weight: float = 1.0) -> float:
    """
    Score one candidate text against the trigger.

    Exact, prefix, substring and subsequence matches add up. A second pass
    compares the forms with leading dots and quotes removed, so ``'use``
    still prefixes ``users``.
    """
    if not candidate:
        return 0
    lower_trigger = trigger.lower()
    lower_candidate = candidate.lower()
    score = 0

    if lower_candidate == lower_trigger:
        score += 100
    if lower_candidate.startswith(lower_trigger):
        score += 80
    if lower_trigger in lower_candidate:
        score += 50
    if len(lower_trigger) >= 2 and is_subsequence(lower_trigger, lower_candidate):
        score += 30

    normalized_trigger = normalize_for_match(lower_trigger)
    normalized_candidate = normalize_for_match(lower_candidate)
    if normalized_trigger and normalized_candidate != lower_candidate:
        if normalized_candidate == normalized_trigger:
            score += 60
        if normalized_candidate.startswith(normalized_trigger):
            score += 40

    return score * weight


def infer_kind(completion: Completion, root_identifier: str = DEFAULT_ROOT_IDENTIFIER) -> CompletionKind | None:
    """Return the declared kind, or guess one from the trigger's shape."""
    if completion.kind:
        return completion.kind
    trigger = completion.trigger
    if trigger.startswith("."):
        return K.METHOD
    if trigger.startswith(root_identifier):
        return K.KEYWORD
    if completion.is_quoted:
        return K.VALUE
    if trigger.startswith("FieldValue"):
        return K.PROPERTY
    if "function" in trigger:
        return K.SNIPPET
    return None


def _text_score(trigger: str, completion: Completion) -> float:
    candidates: list[tuple[str | None, float]] = [
        (completion.trigger, 1.0),
        (completion.full_match, 1.0),
        (completion.description, DESCRIPTION_WEIGHT),
    ]
    candidates.extend((keyword, 1.0) for keyword in completion.keywords)
    return max(score_candidate(trigger, text, weight) for text, weight in candidates)


def _context_score(kind: CompletionKind | None, completion: Completion, context: AutocompleteContext) -> float:
    """Base score for an empty trigger, from the cursor context alone."""
    score = 0
    plain_line = not context.method_call and not context.is_in_string and not context.is_after_dot
    if context.is_line_empty and plain_line and kind is K.SNIPPET:
        score = 18

    if context.method_call:
        name, arg_index = context.method_call.name, context.method_call.arg_index
        if name == "where":
            if arg_index == 0 and kind in (K.FIELD, K.COLLECTION):
                score = 20
            if arg_index == 1 and kind is K.OPERATOR:
                score = 24
            if arg_index >= 2 and kind is K.VALUE:
                score = 16
        if name == "orderBy":
            if arg_index == 0 and kind is K.FIELD:
                score = 20
            if arg_index == 1 and kind is K.DIRECTION:
                score = 24
        if name == "select" and arg_index == 0 and kind is K.FIELD:
            score = 18
        if name in COLLECTION_METHODS and kind is K.COLLECTION:
            score = 18

    if context.is_in_string and kind in (K.COLLECTION, K.FIELD):
        score = max(score, 16)
    if context.is_after_dot and (kind is K.METHOD or completion.trigger.startswith(".")):
        score = max(score, 12)
    return score


def _adjust_score(
    score: float,
    kind: CompletionKind | None,
    completion: Completion,
    trigger: str,
    context: AutocompleteContext,
    root_identifier: str,
) -> float:
    """Apply context bonuses and penalties on top of a positive base score."""
    score += completion.priority
    is_method = kind is K.METHOD or completion.trigger.startswith(".")

    if context.is_after_dot or trigger.startswith("."):
        if is_method:
            score += 25
        if kind is K.KEYWORD:
            score -= 8

    if context.is_db_access and completion.trigger.startswith(root_identifier):
        score += 20

    if not context.is_after_dot and not context.is_in_string and not context.method_call and kind is K.SNIPPET:
        score += 18
    if (context.is_after_dot or context.is_in_string) and kind is K.SNIPPET:
        score -= 8

    if context.is_in_string:
        if kind in (K.COLLECTION, K.FIELD):
            score += 35
        if completion.is_quoted:
            score += 18
        if kind in (K.METHOD, K.KEYWORD):
            score -= 10

    expects_string = context.is_in_string or bool(
        context.method_call and context.method_call.name in STRING_ARGUMENT_METHODS
    )
    if not expects_string and completion.is_quoted:
        score -= 18

    if context.method_call:
        name, arg_index = context.method_call.name, context.method_call.arg_index
        if name in ("where", "orderBy"):
            if arg_index == 0 and kind is K.FIELD:
                score += 40
            if arg_index == 1 and kind is (K.OPERATOR if name == "where" else K.DIRECTION):
                score += 45
        if name == "select" and arg_index == 0 and kind is K.FIELD:
            score += 35
        if name in ("collection", "collectionGroup") and kind is K.COLLECTION:
            score += 30
        if name == "doc" and kind is K.COLLECTION:
            score += 20

    score += METHOD_PRIORITY.get(completion.dedup_key, 0)
    return score


def rank_completions(
    static_completions: Sequence[Completion],
    dynamic_supplier: DynamicCompletionSupplier | None,
    trigger: str,
    context: AutocompleteContext,
    *,
    max_results: int = DEFAULT_MAX_RESULTS,
    root_identifier: str = DEFAULT_ROOT_IDENTIFIER,
) -> list[Completion]:
    """
    Rank candidate completions for the current trigger and context.

    Args:
        static_completions: The static catalog
        dynamic_supplier: Host function returning data-driven candidates, or None
        trigger: Partial token before the cursor
        context: Cursor context from the analyzer
        max_results: Maximum number of candidates returned
        root_identifier: Identifier bound to the database root

    Returns:
        Distinct candidates, best first
    """
    return [
        item.completion
        for item in score_completions(
            static_completions,
            dynamic_supplier,
            trigger,
            context,
            max_results=max_results,
            root_identifier=root_identifier,
        )
    ]


def score_completions(
    static_completions: Sequence[Completion],
    dynamic_supplier: DynamicCompletionSupplier | None,
    trigger: str,
    context: AutocompleteContext,
    *,
    max_results: int = DEFAULT_MAX_RESULTS,
    root_identifier: str = DEFAULT_ROOT_IDENTIFIER,
) -> list[ScoredCompletion]:
    """Same as :func:`rank_completions` but keeps each candidate's score."""
    normalized_trigger = trigger.strip()
    has_trigger = bool(normalized_trigger)
    wants_candidates = bool(
        context.method_call or context.is_in_string or context.is_after_dot or context.is_line_empty
    )
    if not has_trigger and not wants_candidates:
        return []

    dynamic_items = list(dynamic_supplier(context)) if dynamic_supplier else []
    pool = [*static_completions, *dynamic_items]

    best_by_key: dict[str, ScoredCompletion] = {}
    for completion in pool:
        kind = infer_kind(completion, root_identifier)
        if has_trigger:
            base = _text_score(normalized_trigger, completion)
        else:
            base = _context_score(kind, completion, context)
        if base <= 0:
            continue

        score = _adjust_score(base, kind, completion, trigger, context, root_identifier)
        if score <= 0:
            continue

        key = completion.dedup_key
        existing = best_by_key.get(key)
        if existing is None or score > existing.score:
            best_by_key[key] = ScoredCompletion(completion, score)

    ranked = sorted(
        best_by_key.values(),
        key=lambda item: (-item.score, -len(item.completion.trigger)),
    )
    logger.debug(
        f"Ranked {len(pool)} candidate(s) ({len(dynamic_items)} dynamic) for trigger {trigger!r}: "
        f"{len(ranked)} kept, returning {min(len(ranked), max_results)}"
    )
    return ranked[:max_results]
