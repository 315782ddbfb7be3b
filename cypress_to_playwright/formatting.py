"""Render Python values as TypeScript source fragments.

Every string literal that ends up in generated Playwright code goes through
``escape_string`` so that all rules quote the same way.
"""

import re

from cypress_to_playwright.models import Value

_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\/]")


def escape_string(value: str) -> str:
    """Escape a string for use in a TypeScript single-quoted string."""
    return value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")


def quote(value: str) -> str:
    """Return ``value`` as a single-quoted TypeScript string literal."""
    return f"'{escape_string(value)}'"


def escape_regex(value: str) -> str:
    """Escape regex metacharacters (and ``/``) for a regex literal body."""
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), value)


def format_value(value: Value) -> str:
    """Format one literal argument as TypeScript.

    Strings containing ``${`` become template literals, other strings are
    single-quoted. Lists and dicts render as array and object literals.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "undefined"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        if "${" in value:
            escaped = value.replace("\\", "\\\\").replace("`", "\\`")
            return f"`{escaped}`"
        return quote(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        entries = ", ".join(f"{k}: {format_value(v)}" for k, v in value.items())
        return f"{{ {entries} }}"
    return str(value)


def format_arguments(args: list[Value]) -> str:
    """Format an argument list including the surrounding parentheses."""
    return "(" + ", ".join(format_value(a) for a in args) + ")"


def clean_quotes(text: str) -> str:
    """Strip one matching pair of surrounding quotes from an argument string."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text
