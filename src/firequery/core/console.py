"""
Console command interpretation.

The inline console accepts a few keywords and single-line ``db.collection``
or ``db.doc`` reads. This module decides what a line asks for; running the
read is left to the host.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from firequery.core.config import DEFAULT_LIMIT, DEFAULT_ROOT_IDENTIFIER
from firequery.core.parsers.expression import parse_query_expression
from firequery.domain.types.query import QueryParams
from firequery.logger import get_logger

logger = get_logger("console")

HELP_TEXT = """Available commands:
• db.collection("path").get() - Get documents from a collection
• db.collection("path").limit(n).get() - Get n documents
• db.doc("collection/docId").get() - Get a single document
• clear - Clear console output
• help - Show this help message

Examples:
  db.collection("users").limit(10).get()
  db.doc("users/user123").get()"""

UNKNOWN_COMMAND_MESSAGE = "Unknown command. Type 'help' for available commands."
INVALID_COLLECTION_MESSAGE = 'Invalid collection path. Use: db.collection("path")'
INVALID_DOCUMENT_MESSAGE = 'Invalid document path. Use: db.doc("collection/docId")'


class ConsoleAction(str, Enum):
    """What a console line asks the host to do."""

    EMPTY = "empty"
    HELP = "help"
    CLEAR = "clear"
    FETCH_COLLECTION = "fetch_collection"
    COLLECTION_REFERENCE = "collection_reference"
    FETCH_DOCUMENT = "fetch_document"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ConsoleCommand:
    """Interpretation of one console line."""

    action: ConsoleAction
    path: str = ""
    limit: int | None = None
    message: str = ""
    params: QueryParams | None = None


def interpret_console_input(
    text: str,
    default_limit: int = DEFAULT_LIMIT,
    root_identifier: str = DEFAULT_ROOT_IDENTIFIER,
) -> ConsoleCommand:
    """
    Interpret a console line.

    Args:
        text: The line typed by the user
        default_limit: Limit used for collection reads without ``limit(n)``
        root_identifier: Identifier bound to the database root

    Returns:
        ConsoleCommand describing the requested action
    """
    command = text.strip()
    root = re.escape(root_identifier)

    if not command:
        return ConsoleCommand(ConsoleAction.EMPTY)
    if command == "help":
        return ConsoleCommand(ConsoleAction.HELP, message=HELP_TEXT)
    if command == "clear":
        return ConsoleCommand(ConsoleAction.CLEAR)

    if command.startswith(f"{root_identifier}.collection("):
        match = re.search(rf"{root}\.collection\(['\"](.+?)['\"]\)", command)
        if not match:
            return ConsoleCommand(ConsoleAction.ERROR, message=INVALID_COLLECTION_MESSAGE)

        collection_path = match.group(1)
        if ".get()" not in command:
            return ConsoleCommand(
                ConsoleAction.COLLECTION_REFERENCE,
                path=collection_path,
                message=f"Collection reference: {collection_path}\nAdd .get() to fetch documents.",
            )

        params = parse_query_expression(command, collection_path, default_limit)
        logger.debug(f"Console read of {collection_path!r} with limit {params.limit}")
        return ConsoleCommand(
            ConsoleAction.FETCH_COLLECTION,
            path=collection_path,
            limit=params.limit,
            params=params,
        )

    if command.startswith(f"{root_identifier}.doc("):
        match = re.search(rf"{root}\.doc\(['\"](.+?)['\"]\)", command)
        if not match:
            return ConsoleCommand(ConsoleAction.ERROR, message=INVALID_DOCUMENT_MESSAGE)
        return ConsoleCommand(ConsoleAction.FETCH_DOCUMENT, path=match.group(1))

    return ConsoleCommand(ConsoleAction.ERROR, message=UNKNOWN_COMMAND_MESSAGE)
