"""
Static completion catalogs.

Built once at import and never mutated; every tuple here is shared
read-only by all callers.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from firequery.domain.types.completion import Completion, CompletionKind

K = CompletionKind


def _method(name: str, suggestion: str, cursor_offset: int, description: str) -> Completion:
    return Completion(
        trigger=f".{name}",
        suggestion=suggestion,
        cursor_offset=cursor_offset,
        description=description,
        full_match=f".{name}",
    )


def _snippet(
    trigger: str,
    text: str,
    cursor_offset: int,
    description: str,
    keywords: tuple[str, ...],
    priority: int = 0,
) -> Completion:
    return Completion(
        trigger=trigger,
        suggestion=f" {text}",
        insert_text=text,
        cursor_offset=cursor_offset,
        description=description,
        kind=K.SNIPPET,
        keywords=keywords,
        priority=priority,
    )


ROOT_COMPLETIONS: tuple[Completion, ...] = (
    Completion("db.collection", "('')", -2, "Collection reference", full_match="db.collection"),
    Completion("db.doc", "('')", -2, "Document reference", full_match="db.doc"),
)

QUERY_METHOD_COMPLETIONS: tuple[Completion, ...] = (
    _method("collection", "('')", -2, "Sub-collection"),
    _method("collectionGroup", "('')", -2, "Collection group"),
    _method("doc", "('')", -2, "Document reference"),
    _method("where", "('', '==', '')", -11, "Where clause"),
    _method("orderBy", "('', 'asc')", -7, "Order by"),
    _method("limit", "(50)", -1, "Limit results"),
    _method("limitToLast", "(10)", -1, "Limit to last"),
    _method("offset", "(0)", -1, "Offset (pagination)"),
    _method("startAt", "()", -1, "Start at cursor"),
    _method("startAfter", "()", -1, "Start after cursor"),
    _method("endAt", "()", -1, "End at cursor"),
    _method("endBefore", "()", -1, "End before cursor"),
    _method("select", "('')", -2, "Select fields"),
)

READ_COMPLETIONS: tuple[Completion, ...] = (
    _method("get", "()", 0, "Get documents"),
    _method("stream", "()", 0, "Stream documents"),
    _method("onSnapshot", "((snapshot) => {\n  \n})", -3, "Real-time listener"),
    _method("count", "()", 0, "Count documents"),
)

WRITE_COMPLETIONS: tuple[Completion, ...] = (
    _method("add", "({})", -2, "Add document"),
    _method("set", "({})", -2, "Set document"),
    _method("update", "({})", -2, "Update document"),
    _method("delete", "()", -1, "Delete document"),
)

LISTING_COMPLETIONS: tuple[Completion, ...] = (
    _method("withConverter", "()", -1, "With converter"),
    _method("listDocuments", "()", 0, "List documents"),
    _method("listCollections", "()", 0, "List collections"),
)

BATCH_COMPLETIONS: tuple[Completion, ...] = (
    Completion("batch", " = db.batch()", 0, "Batch write", full_match="batch"),
    _method("batch", "()", 0, "Create batch"),
    Completion(
        "transaction",
        " = await db.runTransaction(async (t) => {\n  \n})",
        -3,
        "Transaction",
        full_match="transaction",
    ),
    _method("runTransaction", "(async (transaction) => {\n  \n})", -3, "Run transaction"),
)

FIELD_VALUE_COMPLETIONS: tuple[Completion, ...] = (
    Completion("FieldValue.serverTimestamp", "()", 0, "Server timestamp", full_match="FieldValue.serverTimestamp"),
    Completion("FieldValue.increment", "(1)", -1, "Increment field", full_match="FieldValue.increment"),
    Completion("FieldValue.arrayUnion", "([])", -2, "Array union", full_match="FieldValue.arrayUnion"),
    Completion("FieldValue.arrayRemove", "([])", -2, "Array remove", full_match="FieldValue.arrayRemove"),
    Completion("FieldValue.delete", "()", 0, "Delete field", full_match="FieldValue.delete"),
)

SNAPSHOT_COMPLETIONS: tuple[Completion, ...] = (
    _method("data", "()", 0, "Get document data"),
    _method("exists", "", 0, "Check if document exists"),
    _method("id", "", 0, "Get document ID"),
    _method("ref", "", 0, "Get document reference"),
    _method("docs", "", 0, "Get documents array"),
    _method("empty", "", 0, "Check if snapshot is empty"),
    _method("size", "", 0, "Get snapshot size"),
    _method("forEach", "(doc => {\n  \n})", -3, "Iterate documents"),
    _method("map", "(doc => doc.data())", -1, "Map documents"),
)

DATABASE_COMPLETIONS: tuple[Completion, ...] = (
    ROOT_COMPLETIONS
    + QUERY_METHOD_COMPLETIONS
    + READ_COMPLETIONS
    + WRITE_COMPLETIONS
    + LISTING_COMPLETIONS
    + BATCH_COMPLETIONS
    + FIELD_VALUE_COMPLETIONS
    + SNAPSHOT_COMPLETIONS
)

BOILERPLATE_COMPLETIONS: tuple[Completion, ...] = (
    Completion("async", " function run() {\n  \n}", -2, "Async run function"),
    Completion("asyncfn", " async () => {\n  \n}", -2, "Async arrow function"),
    Completion("await", " db.collection('').get()", -8, "Await collection get"),
    Completion("awaitDoc", " db.doc('').get()", -8, "Await doc get"),
    Completion("const", " snapshot = await ", 0, "Const snapshot"),
    Completion("snap", "shot.docs.map(doc => ({ id: doc.id, ...doc.data() }))", 0, "Map snapshot docs"),
    Completion("foreach", "snapshot.forEach(doc => {\n  console.log(doc.id, doc.data());\n})", 0, "ForEach docs"),
    Completion("return snap", "shot.docs.map(doc => ({ id: doc.id, ...doc.data() }))", 0, "Return mapped docs"),
    Completion("return doc", "s", 0, "Return docs"),
    Completion("trycatch", "try {\n  \n} catch (error) {\n  console.error(error);\n}", -40, "Try-catch block"),
    Completion("log", "console.log()", -1, "Console log"),
    Completion("console.", "log()", -1, "Console log"),
    Completion("JSON.str", "ingify(, null, 2)", -10, "JSON stringify"),
    Completion("JSON.par", "se()", -1, "JSON parse"),
)

TEMPLATE_COMPLETIONS: tuple[Completion, ...] = (
    _snippet(
        "find",
        "const snapshot = await db.collection('').where('', '==', '').limit(50).get()",
        -35,
        "Template: filter + limit + get",
        ("query", "where", "limit"),
        18,
    ),
    _snippet(
        "paginate",
        "const snapshot = await db.collection('').orderBy('').startAfter(lastDoc).limit(25).get()",
        -52,
        "Template: pagination (startAfter)",
        ("page", "cursor", "orderBy"),
        18,
    ),
    _snippet(
        "count",
        "const countSnapshot = await db.collection('').count().get()",
        -21,
        "Template: count documents",
        ("aggregate",),
        16,
    ),
    _snippet(
        "doc",
        "const docSnap = await db.doc('').get()",
        -9,
        "Template: get document",
        ("get", "document"),
        16,
    ),
    _snippet("create", "await db.collection('').add({})", -2, "Template: add document", ("insert", "add"), 14),
    _snippet("update", "await db.doc('').update({})", -2, "Template: update document", ("patch",), 14),
    _snippet("delete", "await db.doc('').delete()", -2, "Template: delete document", ("remove",), 14),
    _snippet(
        "group",
        "const snapshot = await db.collectionGroup('').where('', '==', '').get()",
        -30,
        "Template: collection group query",
        ("collectionGroup", "query"),
        16,
    ),
    _snippet(
        "compound",
        "const snapshot = await db.collection('').where('', '==', '').where('', '==', '').get()",
        -30,
        "Template: compound where",
        ("where", "and"),
        15,
    ),
    _snippet(
        "array",
        "const snapshot = await db.collection('').where('', 'array-contains', '').get()",
        -30,
        "Template: array-contains query",
        ("array-contains", "filter"),
        15,
    ),
    _snippet(
        "order",
        "const snapshot = await db.collection('').orderBy('').limit(25).get()",
        -24,
        "Template: order + limit",
        ("orderBy", "limit"),
        14,
    ),
    _snippet(
        "batch",
        "const batch = db.batch();\nconst ref = db.collection('').doc();\nbatch.set(ref, {});\nawait batch.commit();",
        -47,
        "Template: batch write",
        ("batch", "write"),
        14,
    ),
    _snippet(
        "transaction",
        "await db.runTransaction(async (t) => {\n  const ref = db.doc('');\n  const snap = await t.get(ref);\n"
        "  if (!snap.exists) return;\n  t.update(ref, {});\n});",
        -20,
        "Template: transaction",
        ("transaction", "runTransaction"),
        14,
    ),
    _snippet(
        "timestamp",
        "await db.doc('').update({ updatedAt: FieldValue.serverTimestamp() })",
        -2,
        "Template: server timestamp update",
        ("FieldValue", "serverTimestamp"),
        13,
    ),
)

EDITOR_COMPLETIONS: tuple[Completion, ...] = DATABASE_COMPLETIONS + BOILERPLATE_COMPLETIONS + TEMPLATE_COMPLETIONS

CONSOLE_COMPLETIONS: tuple[Completion, ...] = (
    ROOT_COMPLETIONS
    + QUERY_METHOD_COMPLETIONS
    + (_method("get", "()", 0, "Get documents"),)
    + WRITE_COMPLETIONS
    + (_method("count", "()", 0, "Count documents"),)
    + LISTING_COMPLETIONS
    + (
        Completion("help", "", 0, "Help", kind=K.KEYWORD, keywords=("?", "commands")),
        Completion("clear", "", 0, "Clear", kind=K.KEYWORD, keywords=("reset",)),
        _snippet(
            "find",
            "db.collection('').where('', '==', '').limit(10).get()",
            -32,
            "Template: filter + limit + get",
            ("query", "where"),
        ),
        _snippet("doc", "db.doc('').get()", -6, "Template: get document", ("get", "document")),
        _snippet("count", "db.collection('').count().get()", -15, "Template: count documents", ("aggregate",)),
        _snippet(
            "group",
            "db.collectionGroup('').where('', '==', '').get()",
            -24,
            "Template: collection group query",
            ("collectionGroup", "query"),
        ),
        _snippet(
            "array",
            "db.collection('').where('', 'array-contains', '').get()",
            -24,
            "Template: array-contains query",
            ("array-contains", "filter"),
        ),
        _snippet(
            "order",
            "db.collection('').orderBy('').limit(10).get()",
            -18,
            "Template: order + limit",
            ("orderBy", "limit"),
        ),
        _snippet("whereIn", "db.collection('').where('', 'in', []).get()", -10, "Template: where in", ("in", "filter")),
    )
)

OPERATOR_COMPLETIONS: tuple[Completion, ...] = (
    Completion("==", description="Equals", kind=K.OPERATOR, keywords=("eq", "equals")),
    Completion("!=", description="Not equal", kind=K.OPERATOR, keywords=("neq", "not")),
    Completion(">=", description="Greater or equal", kind=K.OPERATOR),
    Completion("<=", description="Less or equal", kind=K.OPERATOR),
    Completion(">", description="Greater than", kind=K.OPERATOR),
    Completion("<", description="Less than", kind=K.OPERATOR),
    Completion("array-contains", description="Array contains value", kind=K.OPERATOR),
    Completion("array-contains-any", description="Array contains any", kind=K.OPERATOR),
    Completion("in", description="Value in array", kind=K.OPERATOR),
    Completion("not-in", description="Value not in array", kind=K.OPERATOR),
)

DIRECTION_COMPLETIONS: tuple[Completion, ...] = (
    Completion("asc", description="Ascending order", kind=K.DIRECTION, keywords=("ascending", "up")),
    Completion("desc", description="Descending order", kind=K.DIRECTION, keywords=("descending", "down")),
)

_IDENTIFIER_CHAR = re.compile(r"[A-Za-z0-9_]")


def find_completion(text: str, completions: Sequence[Completion] = EDITOR_COMPLETIONS) -> Completion | None:
    """
    Find the completion whose trigger ends ``text``, longest trigger first.

    Triggers not starting with ``.`` only match at a word boundary, so
    ``xdoc`` does not match the ``doc`` trigger.
    """
    if not text:
        return None

    last_line = text.split("\n")[-1]
    for completion in sorted(completions, key=lambda item: len(item.trigger), reverse=True):
        trigger = completion.trigger
        if not (text.endswith(trigger) or last_line.endswith(trigger)):
            continue
        if not trigger.startswith("."):
            before_index = len(text) - len(trigger) - 1
            if before_index >= 0 and _IDENTIFIER_CHAR.match(text[before_index]):
                continue
        return completion
    return None


def get_matching_completions(prefix: str, completions: Sequence[Completion] = EDITOR_COMPLETIONS) -> list[Completion]:
    """Return completions whose trigger starts with, or description contains, ``prefix``."""
    if not prefix:
        return []
    lower_prefix = prefix.lower()
    return [
        completion
        for completion in completions
        if completion.trigger.lower().startswith(lower_prefix) or lower_prefix in completion.description.lower()
    ]
