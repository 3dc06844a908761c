"""
Utilities for applying a selected completion to the editor text.
"""

from __future__ import annotations

from dataclasses import dataclass

from firequery.core.parsers.utils import STRING_QUOTES, is_escaped, strip_quotes
from firequery.domain.types.completion import Completion
from firequery.logger import get_logger

logger = get_logger("completion.applier")


@dataclass(slots=True)
class ApplyResult:
    """Result of applying a completion value."""

    text: str
    cursor: int


def apply_completion(text: str, cursor: int, completion: Completion, trigger: str) -> ApplyResult:
    """
    Insert a completion at the cursor.

    When the trigger starts with a quote and the cursor sits between an
    unescaped quote pair, only the literal's content is replaced and the
    quotes are kept. Otherwise the trigger is spliced out and the
    completion's text inserted, honouring its cursor offset.

    Args:
        text: Current editor text
        cursor: Cursor offset
        completion: The chosen candidate
        trigger: The trigger the candidate was ranked against

    Returns:
        ApplyResult with the new text and cursor; unchanged if the trigger
        does not fit before the cursor
    """
    full_text = completion.effective_text

    quote = trigger[:1] if trigger[:1] in STRING_QUOTES else None
    if quote:
        replaced = _replace_inside_quotes(text, cursor, quote, full_text)
        if replaced is not None:
            logger.debug(f"Replaced {quote}-quoted literal content at cursor {cursor}")
            return replaced

    if cursor < len(trigger) or cursor > len(text):
        logger.warning(f"Trigger {trigger!r} does not fit before cursor {cursor}, leaving text unchanged")
        return ApplyResult(text=text, cursor=cursor)

    insertion_point = cursor - len(trigger)
    new_text = f"{text[:insertion_point]}{full_text}{text[cursor:]}"
    new_cursor = insertion_point + len(full_text) + completion.cursor_offset
    new_cursor = max(0, min(new_cursor, len(new_text)))
    return ApplyResult(text=new_text, cursor=new_cursor)


def _replace_inside_quotes(text: str, cursor: int, quote: str, full_text: str) -> ApplyResult | None:
    start = -1
    for index in range(min(cursor, len(text)) - 1, -1, -1):
        if text[index] == quote and not is_escaped(text, index):
            start = index
            break
    if start == -1:
        return None

    end = -1
    for index in range(cursor, len(text)):
        if text[index] == quote and not is_escaped(text, index):
            end = index
            break
    if end == -1:
        return None

    value = strip_quotes(full_text)
    new_text = f"{text[: start + 1]}{value}{text[end:]}"
    return ApplyResult(text=new_text, cursor=start + 1 + len(value))
