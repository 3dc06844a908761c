"""Query-expression engine for a document database client.

Parses fluent ``db.collection(...).where(...)`` expressions into structured
queries, converts values to and from the wire format, and ranks context-aware
completions for an expression editor.
"""

__version__ = "0.1.0"
