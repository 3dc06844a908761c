"""
Ready-made dynamic completion suppliers.

Hosts that know the current collection, its field names and the project's
collections can use these instead of writing their own supplier.
"""

from __future__ import annotations

from collections.abc import Iterable

from firequery.completion.catalog import DIRECTION_COMPLETIONS, OPERATOR_COMPLETIONS
from firequery.core.config import DEFAULT_ROOT_IDENTIFIER
from firequery.domain.protocols.completion import DynamicCompletionSupplier
from firequery.domain.types.completion import AutocompleteContext, Completion, CompletionKind

K = CompletionKind

FIELD_METHODS = ("where", "orderBy", "select")
COLLECTION_METHODS = ("collection", "collectionGroup", "doc")


def _quoted(
    value: str,
    kind: CompletionKind,
    description: str,
    priority: int = 0,
    with_full_match: bool = True,
) -> list[Completion]:
    return [
        Completion(
            trigger=f"{quote}{value}",
            suggestion=quote,
            description=description,
            full_match=f"{quote}{value}{quote}" if with_full_match else None,
            kind=kind,
            priority=priority,
        )
        for quote in ("'", '"')
    ]


def _method_position(context: AutocompleteContext) -> tuple[str | None, int]:
    if context.method_call is None:
        return None, -1
    return context.method_call.name, context.method_call.arg_index


def _argument_completions(method_name: str | None, arg_index: int) -> list[Completion]:
    if method_name == "where" and arg_index == 1:
        return list(OPERATOR_COMPLETIONS)
    if method_name == "orderBy" and arg_index == 1:
        return list(DIRECTION_COMPLETIONS)
    return []


def _root_shortcuts(root: str, collection_path: str) -> list[Completion]:
    call = f"collection('{collection_path}')"
    full = f"{root}.{call}"
    shortcuts = [
        Completion(trigger=root, suggestion=f".{call}", description=full, full_match=full, kind=K.METHOD, priority=40)
    ]
    # Partial spellings of ``db.collection`` that should keep offering the shortcut.
    for typed, priority in ((".", 40), (".c", 36), (".col", 34), (".collection", 32)):
        trigger = f"{root}{typed}"
        shortcuts.append(
            Completion(
                trigger=trigger,
                suggestion=full[len(trigger) :],
                description=call,
                full_match=full,
                kind=K.METHOD,
                priority=priority,
            )
        )
    return shortcuts


def editor_completion_supplier(
    collection_path: str = "",
    field_names: Iterable[str] = (),
    collections: Iterable[str] = (),
    root_identifier: str = DEFAULT_ROOT_IDENTIFIER,
) -> DynamicCompletionSupplier:
    """
    Build the query editor's dynamic supplier.

    Args:
        collection_path: Collection currently open in the editor
        field_names: Field names known for that collection
        collections: All collection names of the project
        root_identifier: Identifier bound to the database root

    Returns:
        Supplier suitable for :func:`firequery.completion.ranker.rank_completions`
    """
    fields = tuple(field_names)
    other_collections = tuple(dict.fromkeys(name for name in collections if name != collection_path))

    def supply(context: AutocompleteContext) -> list[Completion]:
        method_name, arg_index = _method_position(context)
        in_bare_string = method_name is None and context.is_in_string
        wants_fields = (method_name in FIELD_METHODS and arg_index == 0) or in_bare_string
        wants_collections = method_name in COLLECTION_METHODS or in_bare_string

        completions = _argument_completions(method_name, arg_index)

        if collection_path:
            completions.extend(_root_shortcuts(root_identifier, collection_path))

        if wants_fields:
            for field in fields:
                completions.extend(_quoted(field, K.FIELD, f"Field: {field}"))
                completions.append(
                    Completion(trigger=field, description=f"Field: {field}", full_match=field, kind=K.FIELD)
                )

        if wants_collections:
            if collection_path:
                completions.extend(_quoted(collection_path, K.COLLECTION, "Current collection", priority=25))
            for name in other_collections:
                completions.extend(_quoted(name, K.COLLECTION, f"Collection: {name}"))

        return completions

    return supply


def console_completion_supplier(collections: Iterable[str] = ()) -> DynamicCompletionSupplier:
    """
    Build the inline console's dynamic supplier.

    Args:
        collections: All collection names of the project

    Returns:
        Supplier offering operators, directions and quoted collection names
    """
    names = tuple(dict.fromkeys(collections))

    def supply(context: AutocompleteContext) -> list[Completion]:
        method_name, arg_index = _method_position(context)
        completions = _argument_completions(method_name, arg_index)

        if method_name in COLLECTION_METHODS or (method_name is None and context.is_in_string):
            for name in names:
                completions.extend(_quoted(name, K.COLLECTION, f"Collection: {name}", with_full_match=False))
        return completions

    return supply
