"""Rule-based translation of Cypress commands into Playwright statements."""

from cypress_to_playwright.converter.command_translator import (
    CommandTranslator,
    translate,
)
from cypress_to_playwright.converter.mappings import (
    AssertionRule,
    CommandRule,
    Matcher,
    Template,
    Transform,
    get_assertion_rule,
    get_command_rule,
)
from cypress_to_playwright.converter.selector_optimizer import optimize_selector

__all__ = [
    # Rules
    "CommandRule",
    "AssertionRule",
    "Template",
    "Transform",
    "Matcher",
    "get_command_rule",
    "get_assertion_rule",
    # Selectors
    "optimize_selector",
    # Translation
    "CommandTranslator",
    "translate",
]
