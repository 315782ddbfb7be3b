"""Split a raw JavaScript argument list into individual arguments."""

QUOTE_CHARS = "\"'`"
OPENERS = {"{": "}", "(": ")", "[": "]"}


def tokenize_arguments(args_str: str) -> list[str]:
    """Split the text between a call's parentheses at top-level commas.

    Commas inside string literals, object/array literals and nested calls
    belong to the current argument. Each argument is stripped of surrounding
    whitespace.

    Args:
        args_str: Raw argument-list text, e.g. ``"'a, b', {x: 1}"``

    Returns:
        Ordered list of argument strings; empty for blank input
    """
    if not args_str.strip():
        return []

    arguments = []
    current = ""
    quote_char = None
    escaped = False
    depth = {opener: 0 for opener in OPENERS}
    closers = {closer: opener for opener, closer in OPENERS.items()}

    for char in args_str:
        if quote_char:
            current += char
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote_char:
                quote_char = None
            continue

        if char in QUOTE_CHARS:
            quote_char = char
        elif char in OPENERS:
            depth[char] += 1
        elif char in closers:
            depth[closers[char]] -= 1
        elif char == "," and not any(depth.values()):
            arguments.append(current.strip())
            current = ""
            continue
        current += char

    if current.strip():
        arguments.append(current.strip())

    return arguments


def find_call_end(text: str, open_index: int) -> int | None:
    """Return the index of the parenthesis closing the one at ``open_index``.

    Quotes are skipped the same way ``tokenize_arguments`` skips them.
    Returns ``None`` when the call is never closed.
    """
    depth = 0
    quote_char = None
    escaped = False

    for index in range(open_index, len(text)):
        char = text[index]
        if quote_char:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote_char:
                quote_char = None
        elif char in QUOTE_CHARS:
            quote_char = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def split_statements(body: str) -> list[str]:
    """Split a JavaScript function body into top-level statements.

    Statements end at a ``;`` or a line break outside strings, brackets and
    nested calls. A line starting with ``.`` continues the previous chain,
    so ``cy.get(x)\\n  .click()`` stays one statement. ``//`` line comments
    are dropped.
    """
    statements = []
    current = ""
    quote_char = None
    escaped = False
    depth = 0
    index = 0

    while index < len(body):
        char = body[index]
        if quote_char:
            current += char
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote_char:
                quote_char = None
            index += 1
            continue

        if body.startswith("//", index):
            newline = body.find("\n", index)
            index = len(body) if newline == -1 else newline
            continue

        if char in QUOTE_CHARS:
            quote_char = char
        elif char in OPENERS:
            depth += 1
        elif char in OPENERS.values():
            depth -= 1
        elif char == ";" and depth <= 0:
            statements.append(current.strip())
            current = ""
            index += 1
            continue
        elif char == "\n" and depth <= 0:
            rest = body[index:].lstrip()
            if rest.startswith("."):
                # chain continued on the next line
                current = current.rstrip()
                index = len(body) - len(rest)
                continue
            statements.append(current.strip())
            current = ""
            index += 1
            continue
        current += char
        index += 1

    statements.append(current.strip())
    return [s for s in statements if s]
