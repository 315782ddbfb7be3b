"""Conversion of Cypress custom commands into Playwright helpers."""

from cypress_to_playwright.custom_commands.classifier import (
    classify,
    classify_definition,
    classify_source,
    extract_calls,
)
from cypress_to_playwright.custom_commands.page_object import (
    PageObjectMethod,
    render_page_object,
)
from cypress_to_playwright.custom_commands.tokenizer import tokenize_arguments

__all__ = [
    # Classification
    "classify",
    "classify_definition",
    "classify_source",
    "extract_calls",
    # Page objects
    "PageObjectMethod",
    "render_page_object",
    # Tokenizing
    "tokenize_arguments",
]
