"""Data models shared by the command translator and the custom-command classifier."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Literal argument values as they appeared in Cypress source.
Value = Any


class CommandInputError(Exception):
    """A parsed-command payload does not have the expected shape."""


@dataclass(frozen=True)
class ChainedCall:
    """A method invoked on the result of a Cypress command."""

    method: str
    args: list[Value] = field(default_factory=list)


@dataclass(frozen=True)
class ParsedCommand:
    """One Cypress call-site with its chained calls, in source order."""

    name: str
    args: list[Value] = field(default_factory=list)
    chained_calls: list[ChainedCall] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedCommand":
        """Build a command from the JSON shape produced by the parser.

        Accepts both ``command``/``chainedCalls`` and ``name``/``chained_calls``
        keys.

        Raises:
            CommandInputError: If the payload is not a well-formed command
        """
        if not isinstance(data, dict):
            raise CommandInputError(f"Expected an object, got {type(data).__name__}")

        name = data.get("command", data.get("name"))
        if not isinstance(name, str) or not name:
            raise CommandInputError("Command is missing a 'command' name")

        args = data.get("args", [])
        if not isinstance(args, list):
            raise CommandInputError(f"Arguments of '{name}' must be a list")

        chained = data.get("chainedCalls", data.get("chained_calls")) or []
        if not isinstance(chained, list):
            raise CommandInputError(f"Chained calls of '{name}' must be a list")

        calls = []
        for call in chained:
            if not isinstance(call, dict) or not isinstance(call.get("method"), str):
                raise CommandInputError(f"Malformed chained call on '{name}': {call!r}")
            call_args = call.get("args", [])
            if not isinstance(call_args, list):
                raise CommandInputError(
                    f"Arguments of chained call '{call['method']}' must be a list"
                )
            calls.append(ChainedCall(method=call["method"], args=list(call_args)))

        return cls(name=name, args=list(args), chained_calls=calls)


@dataclass
class TranslationContext:
    """Per-call accumulator for imports and diagnostics."""

    required_imports: set[str] = field(
        default_factory=lambda: {"@playwright/test"}
    )
    diagnostics: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.diagnostics.append(message)


@dataclass(frozen=True)
class TranslationResult:
    """Playwright code generated for one Cypress command."""

    code: str
    requires_suspension: bool
    imports: list[str]
    diagnostics: list[str] = field(default_factory=list)

    @classmethod
    def from_context(
        cls, code: str, requires_suspension: bool, context: TranslationContext
    ) -> "TranslationResult":
        return cls(
            code=code,
            requires_suspension=requires_suspension,
            imports=sorted(context.required_imports),
            diagnostics=list(context.diagnostics),
        )


@dataclass(frozen=True)
class CustomCommandDefinition:
    """A ``Cypress.Commands.add`` definition."""

    name: str
    parameters: list[str] = field(default_factory=list)
    body_text: str = ""


class ConversionStrategy(str, Enum):
    """Shape of the code generated for a custom command."""

    DIRECT = "direct"
    UTILITY = "utility"
    PAGE_OBJECT = "pageObject"
    MANUAL = "manual"


class ComplexityTag(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class ClassificationResult:
    """Outcome of converting one custom command."""

    strategy: ConversionStrategy
    complexity: ComplexityTag
    generated_code: str
    notes: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "strategy": self.strategy.value,
            "complexity": self.complexity.value,
            "generated_code": self.generated_code,
            "notes": self.notes,
            "warnings": self.warnings,
            "errors": self.errors,
            "is_valid": self.is_valid,
        }
