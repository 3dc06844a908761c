"""Quote, escape and nesting-aware scanning helpers for fluent expressions."""

from __future__ import annotations

from dataclasses import dataclass, field

STRING_QUOTES = ("'", '"')
LITERAL_QUOTES = ("'", '"', "`")
_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass(slots=True)
class StringContext:
    """Whether a text ends inside an open string literal."""

    in_string: bool
    quote: str | None = None
    start_index: int = -1


@dataclass(slots=True)
class ArgumentScan:
    """Arguments of a call, split on top-level commas."""

    arguments: list[str] = field(default_factory=list)
    end_index: int | None = None

    @property
    def is_closed(self) -> bool:
        return self.end_index is not None


def is_escaped(text: str, index: int) -> bool:
    """Return True when the character at ``index`` follows an odd run of backslashes."""
    count = 0
    position = index - 1
    while position >= 0 and text[position] == "\\":
        count += 1
        position -= 1
    return count % 2 == 1


def get_string_context(text: str, quotes: tuple[str, ...] = STRING_QUOTES) -> StringContext:
    """
    Determine whether ``text`` ends inside an unterminated string literal.

    Examples:
        "db.collection('use" -> in_string=True, quote="'", start_index=14
        "where('a', 'b')" -> in_string=False
        "x('it\\'s" -> in_string=True (escaped quote does not close)
    """
    quote: str | None = None
    start_index = -1
    for index, char in enumerate(text):
        if char not in quotes or is_escaped(text, index):
            continue
        if quote is None:
            quote = char
            start_index = index
        elif char == quote:
            quote = None
            start_index = -1
    return StringContext(in_string=quote is not None, quote=quote, start_index=start_index)


def scan_arguments(text: str, start: int = 0, quotes: tuple[str, ...] = LITERAL_QUOTES) -> ArgumentScan:
    """
    Split call arguments starting just after an opening parenthesis.

    Commas inside string literals or nested brackets do not split. Scanning
    stops at the parenthesis closing the call; if there is none the call is
    reported as open and the arguments seen so far are returned.

    Args:
        text: Full text
        start: Index of the first character after ``(``

    Returns:
        ArgumentScan with stripped argument texts and the closing index
    """
    scan = ArgumentScan()
    quote: str | None = None
    depth = 0
    current_start = start

    for index in range(start, len(text)):
        char = text[index]
        if quote is not None:
            if char == quote and not is_escaped(text, index):
                quote = None
            continue
        if char in quotes and not is_escaped(text, index):
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            if depth == 0:
                if char == ")":
                    scan.arguments.append(text[current_start:index].strip())
                    scan.end_index = index
                    break
                continue
            depth -= 1
        elif char == "," and depth == 0:
            scan.arguments.append(text[current_start:index].strip())
            current_start = index + 1
    else:
        scan.arguments.append(text[current_start:].strip())

    if scan.arguments == [""]:
        scan.arguments = []
    return scan


def count_top_level_commas(text: str) -> int:
    """Count commas outside string literals and nested brackets."""
    return max(len(scan_arguments(text).arguments) - 1, 0)


def unquote(token: str, quotes: tuple[str, ...] = LITERAL_QUOTES) -> str | None:
    """
    Remove one layer of matching quotes.

    Returns:
        The inner text, or None when ``token`` is not a quoted literal
    """
    if len(token) >= 2 and token[0] in quotes and token[-1] == token[0]:
        return token[1:-1]
    return None


def strip_quotes(value: str, quotes: tuple[str, ...] = STRING_QUOTES) -> str:
    """
    Strip a surrounding quote pair, or a lone leading or trailing quote.

    Examples:
        "'orders'" -> "orders"
        "'orders" -> "orders"
        'orders"' -> "orders"
    """
    if len(value) >= 2 and value[0] in quotes and value[-1] == value[0]:
        return value[1:-1]
    if value[:1] in quotes:
        return value[1:]
    if value[-1:] in quotes:
        return value[:-1]
    return value
