"""Rewrite Cypress CSS selectors into Playwright locator expressions."""

import logging
import re

from cypress_to_playwright.formatting import quote

logger = logging.getLogger(__name__)

# Attributes that name a test id, most common first.
TEST_ID_ATTRIBUTES = ("data-testid", "data-cy", "data-test")

# Attribute -> semantic locator method, checked in order after test ids.
SEMANTIC_ATTRIBUTES = (
    ("role", "getByRole"),
    ("aria-label", "getByLabel"),
    ("placeholder", "getByPlaceholder"),
    ("title", "getByTitle"),
    ("alt", "getByAltText"),
)

COMBINATORS = frozenset({">", "+", "~"})

_CONTAINS_SUFFIX = re.compile(r"^(.*):contains\(\s*([\"']?)(.+?)\2\s*\)$")
_EQ_SUFFIX = re.compile(r"^(.+):eq\((\d+)\)$")
_NTH_CHILD_SUFFIX = re.compile(r"^(.+):nth-child\((\d+)\)$")
_ATTRIBUTE_SELECTOR = re.compile(
    r"^(?:[a-zA-Z][\w-]*)?\[(?P<name>[\w-]+)=([\"']?)(?P<value>[^\"'\]]+)\2\]$"
)

# Suffix pseudo-classes that map onto a method of the optimized base.
SUFFIX_METHODS = (
    (":first", "first()"),
    (":last", "last()"),
    (":visible", "filter({ visible: true })"),
    (":hidden", "filter({ visible: false })"),
)


def _single_attribute(selector: str) -> tuple[str, str] | None:
    """Return ``(name, value)`` when the selector is one ``[name=value]``.

    An optional leading tag name is allowed (``input[placeholder=x]``).
    Anything else around the attribute means the selector is not a single
    attribute selector.
    """
    match = _ATTRIBUTE_SELECTOR.match(selector)
    if match:
        return match["name"], match["value"].strip()
    return None


def _semantic_locator(selector: str, scope: str = "page") -> str | None:
    attribute = _single_attribute(selector)
    if attribute is None:
        return None
    name, value = attribute
    if name in TEST_ID_ATTRIBUTES:
        logger.debug(f"Selector {selector!r} optimized via {name}")
        return f"{scope}.getByTestId({quote(value)})"
    for semantic_name, method in SEMANTIC_ATTRIBUTES:
        if name == semantic_name:
            logger.debug(f"Selector {selector!r} optimized via {name}")
            return f"{scope}.{method}({quote(value)})"
    return None


def _top_level_parts(selector: str) -> list[str]:
    """Split a selector at whitespace outside brackets, parens and quotes."""
    parts = []
    current = ""
    quote_char = None
    depth = 0
    for char in selector:
        if quote_char:
            if char == quote_char:
                quote_char = None
        elif char in "\"'":
            quote_char = char
        elif char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
        elif char.isspace() and depth == 0:
            if current:
                parts.append(current)
                current = ""
            continue
        current += char
    if current:
        parts.append(current)
    return parts


def _optimize_descendant(selector: str) -> str | None:
    """Scope a trailing semantic attribute selector to its ancestor part.

    ``.sidebar [role="button"]`` becomes
    ``page.locator('.sidebar').getByRole('button')``.
    """
    parts = _top_level_parts(selector)
    if len(parts) < 2 or COMBINATORS.intersection(parts):
        return None
    scope = optimize_selector(" ".join(parts[:-1]))
    return _semantic_locator(parts[-1], scope)


def _optimize_pseudo(selector: str) -> str | None:
    """Handle jQuery-style pseudo suffixes that Cypress accepts."""
    match = _CONTAINS_SUFFIX.match(selector)
    if match:
        base, _, text = match.groups()
        if not base.strip():
            return f"page.getByText({quote(text)})"
        return f"{optimize_selector(base)}.filter({{ hasText: {quote(text)} }})"

    match = _EQ_SUFFIX.match(selector)
    if match:
        return f"{optimize_selector(match.group(1))}.nth({int(match.group(2))})"

    match = _NTH_CHILD_SUFFIX.match(selector)
    if match:
        base = optimize_selector(match.group(1))
        if base.startswith("page.locator("):
            # plain CSS keeps the real sibling-position semantics
            return None
        return f"{base}.nth({int(match.group(2)) - 1})"

    for suffix, method in SUFFIX_METHODS:
        if selector.endswith(suffix) and len(selector) > len(suffix):
            return f"{optimize_selector(selector[: -len(suffix)])}.{method}"

    return None


def optimize_selector(selector: str) -> str:
    """Turn a selector into the most semantic Playwright locator available.

    Priority order:
    1. :contains / :eq / :nth-child / :first / :last / :visible / :hidden
       suffixes, applied to the optimized base
    2. a single test id attribute (data-testid, then data-cy / data-test)
    3. a single role, aria-label, placeholder, title or alt attribute
    4. a semantic attribute scoped by a descendant selector
    5. page.locator() with the original selector

    Attribute rules only fire when the attribute is the whole selector, so
    surrounding CSS is never silently dropped.

    Args:
        selector: Raw Cypress selector

    Returns:
        TypeScript locator expression
    """
    selector = str(selector).strip()

    pseudo = _optimize_pseudo(selector)
    if pseudo:
        return pseudo

    semantic = _semantic_locator(selector) or _optimize_descendant(selector)
    if semantic:
        return semantic

    logger.debug(f"Selector {selector!r} kept as CSS locator")
    return f"page.locator({quote(selector)})"
