"""
Cursor context analysis.

Given the full editor text and a cursor offset, works out the partial token
being typed (the trigger) and the syntactic situation around it: inside a
string literal, right after a dot, on the database root, or inside the
arguments of a fluent method call.
"""

from __future__ import annotations

import re

from firequery.core.config import DEFAULT_CONTEXT_WINDOW, DEFAULT_ROOT_IDENTIFIER
from firequery.core.parsers.utils import count_top_level_commas, get_string_context, scan_arguments
from firequery.domain.types.completion import AutocompleteContext, MethodCallContext

CONTEXT_METHODS = (
    "where",
    "orderBy",
    "select",
    "startAt",
    "startAfter",
    "endAt",
    "endBefore",
    "limit",
    "limitToLast",
    "collection",
    "collectionGroup",
    "doc",
)

_IDENT = r"[A-Za-z0-9_$]"
_SCOPED_TOKEN = re.compile(rf"(?<!{_IDENT}){_IDENT}+\.{_IDENT}*\Z")
_METHOD_CHAIN_TOKEN = re.compile(rf"\.{_IDENT}*\Z")
_WORD_TOKEN = re.compile(rf"{_IDENT}+\Z")
_METHOD_OPEN = re.compile(rf"\.({'|'.join(CONTEXT_METHODS)})\s*\(")


def _current_line(text: str, cursor: int) -> str:
    """Return the cursor's line up to the cursor, trailing whitespace removed."""
    cursor = max(0, min(cursor, len(text)))
    text_before = text[:cursor]
    return text_before[text_before.rfind("\n") + 1 :].rstrip()


def get_trigger_at_cursor(text: str, cursor: int) -> str:
    """
    Return the partial token immediately before the cursor.

    Inside an open string literal the trigger is the opening quote plus
    everything typed since. After ``(`` or ``,`` it is empty. Otherwise the
    longest of ``word.word``, ``.partial`` or a bare identifier.

    Examples:
        "db.collection('use" -> "'use"
        "db.col" -> "db.col"
        "x.where('a', " -> ""
        "query.lim" -> "query.lim"
        "foo).ord" -> ".ord"
    """
    line = _current_line(text, cursor)

    string_context = get_string_context(line)
    if string_context.in_string and string_context.quote:
        return string_context.quote + line[string_context.start_index + 1 :]

    if line.endswith(("(", ",")):
        return ""

    for pattern in (_SCOPED_TOKEN, _METHOD_CHAIN_TOKEN, _WORD_TOKEN):
        match = pattern.search(line)
        if match:
            return match.group(0)
    return ""


def get_method_call_context(text: str) -> MethodCallContext | None:
    """
    Find the innermost known fluent call still open at the end of ``text``.

    Examples:
        ".where('age', " -> MethodCallContext('where', 1)
        ".where('a', '==', 1).orderBy(" -> MethodCallContext('orderBy', 0)
        ".where('a', '==', 1)" -> None
    """
    for match in reversed(list(_METHOD_OPEN.finditer(text))):
        scan = scan_arguments(text, match.end())
        if scan.is_closed:
            continue
        return MethodCallContext(
            name=match.group(1),
            arg_index=count_top_level_commas(text[match.end() :]),
        )
    return None


def analyze_context(
    text: str,
    cursor: int,
    trigger: str | None = None,
    *,
    root_identifier: str = DEFAULT_ROOT_IDENTIFIER,
    context_window: int = DEFAULT_CONTEXT_WINDOW,
) -> AutocompleteContext:
    """
    Analyze the syntactic context at the cursor.

    Args:
        text: Full editor text
        cursor: Cursor offset, clamped to the text
        trigger: Trigger already computed for this position, derived when None
        root_identifier: Identifier bound to the database root
        context_window: Characters scanned backwards for the enclosing call

    Returns:
        AutocompleteContext for the position
    """
    cursor = max(0, min(cursor, len(text)))
    if trigger is None:
        trigger = get_trigger_at_cursor(text, cursor)

    text_before = text[:cursor]
    line = _current_line(text, cursor)
    string_context = get_string_context(line)
    recent = text_before[max(0, len(text_before) - context_window) :]
    db_access = re.compile(rf"(?<!{_IDENT}){re.escape(root_identifier)}\.{_IDENT}*\Z")

    return AutocompleteContext(
        is_line_empty=not line.strip(),
        trigger=trigger,
        is_in_string=string_context.in_string,
        is_after_dot=not string_context.in_string and bool(_METHOD_CHAIN_TOKEN.search(line)),
        is_db_access=bool(db_access.search(line)),
        method_call=get_method_call_context(recent),
    )
