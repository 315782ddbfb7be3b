"""Convert Cypress test commands into Playwright Test code."""

from cypress_to_playwright.converter import optimize_selector, translate
from cypress_to_playwright.custom_commands import classify, tokenize_arguments
from cypress_to_playwright.models import (
    ChainedCall,
    ClassificationResult,
    ComplexityTag,
    ConversionStrategy,
    CustomCommandDefinition,
    ParsedCommand,
    TranslationResult,
)

__all__ = [
    "ChainedCall",
    "ClassificationResult",
    "ComplexityTag",
    "ConversionStrategy",
    "CustomCommandDefinition",
    "ParsedCommand",
    "TranslationResult",
    "classify",
    "optimize_selector",
    "tokenize_arguments",
    "translate",
]
