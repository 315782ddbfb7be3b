"""Render custom commands as Playwright page-object classes."""

import re
from dataclasses import dataclass, field

# Words too generic to name a page object after.
GENERIC_WORDS = frozenset({"Form", "Page", "Button", "Data", "Field", "Item"})

_PAGE_REFERENCE = re.compile(r"(^|[(\s])page(?=[.)])")
_STRING_LITERAL = re.compile(
    r"('(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|`(?:\\.|[^`\\])*`)"
)


@dataclass
class PageObjectMethod:
    """An async method of a generated page-object class."""

    name: str
    parameters: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)


def split_camel_case(name: str) -> list[str]:
    """Split ``fillLoginForm`` into ``["fill", "Login", "Form"]``."""
    return re.findall(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])", name)


def page_object_class_name(command_name: str) -> str:
    """Class name for a single command, e.g. ``login`` -> ``LoginPage``."""
    return command_name[:1].upper() + command_name[1:] + "Page"


def shared_class_name(command_names: list[str]) -> str:
    """Name a class after the word all command names share.

    ``fillLoginForm`` and ``submitLoginForm`` share ``Login`` so the class is
    ``LoginPage``. The leading verb of each name is ignored.
    """
    tails = [split_camel_case(name)[1:] for name in command_names]
    if tails and all(tails):
        common = set(tails[0]).intersection(*tails[1:])
        for word in tails[0]:
            if word in common and word not in GENERIC_WORDS:
                return f"{word[:1].upper()}{word[1:]}Page"
        for word in tails[0]:
            if word in common:
                return f"{word[:1].upper()}{word[1:]}Page"
    return "CustomCommandsPage"


def bind_to_instance(statement: str) -> str:
    """Rewrite ``page.x`` references to ``this.page.x`` for use in a method.

    String literals are left untouched.
    """
    parts = _STRING_LITERAL.split(statement)
    # odd indices are the captured string literals
    for index in range(0, len(parts), 2):
        parts[index] = _PAGE_REFERENCE.sub(r"\1this.page", parts[index])
    return "".join(parts)


def render_page_object(class_name: str, methods: list[PageObjectMethod]) -> str:
    """Render a TypeScript class wrapping ``page`` with one method per command."""
    lines = [
        f"class {class_name} {{",
        "  constructor(private readonly page: Page) {}",
    ]
    for method in methods:
        lines.append("")
        lines.append(f"  async {method.name}({', '.join(method.parameters)}) {{")
        for statement in method.body:
            lines.append(f"    {statement}")
        lines.append("  }")
    lines.append("}")
    return "\n".join(lines)
