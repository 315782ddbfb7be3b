"""Translate parsed Cypress command chains into Playwright statements."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from cypress_to_playwright.converter.mappings import (
    ALIAS_WAIT,
    ASSERTION_TABLE,
    COMMAND_TABLE,
    EXECUTE_FIRST_COMMANDS,
    AssertionRule,
    CommandRule,
    Template,
    Transform,
    is_alias,
)
from cypress_to_playwright.converter.selector_optimizer import optimize_selector
from cypress_to_playwright.formatting import (
    escape_regex,
    format_arguments,
    format_value,
    quote,
)
from cypress_to_playwright.models import (
    ChainedCall,
    ParsedCommand,
    TranslationContext,
    TranslationResult,
    Value,
)

logger = logging.getLogger(__name__)

ASSERTION_METHODS = frozenset({"should", "and"})
STATEMENT_SEPARATOR = ";\n"
ALIAS_WAIT_DIAGNOSTIC = (
    "cy.wait(@alias) converted to generic API wait - may need manual adjustment"
)

# Chained actions that map onto a fixed Playwright locator call.
SIMPLE_ACTIONS = {
    "click": "click()",
    "dblclick": "dblclick()",
    "rightclick": "click({ button: 'right' })",
    "clear": "clear()",
    "check": "check()",
    "uncheck": "uncheck()",
    "focus": "focus()",
    "blur": "blur()",
    "hover": "hover()",
    "scrollIntoView": "scrollIntoViewIfNeeded()",
    "tab": "press('Tab')",
    "submit": "evaluate((form) => (form as HTMLFormElement).requestSubmit())",
}

# Cypress type() special sequences -> Playwright key names.
KEY_SEQUENCES = {
    "{enter}": "Enter",
    "{esc}": "Escape",
    "{tab}": "Tab",
    "{backspace}": "Backspace",
    "{del}": "Delete",
    "{uparrow}": "ArrowUp",
    "{downarrow}": "ArrowDown",
}

HOVER_EVENTS = frozenset({"mouseover", "mouseenter"})

STORAGE_OBJECTS = frozenset({"localStorage", "sessionStorage"})

# invoke() targets that are plain locator actions.
INVOKE_ACTIONS = frozenset({"focus", "blur", "click", "hover"})

# its() properties readable from a locator, with the variable they bind.
LOCATOR_PROPERTIES = {
    "value": ("value", "inputValue()"),
    "text": ("text", "textContent()"),
    "length": ("count", "count()"),
}


@dataclass(frozen=True)
class _Step:
    """One rendered statement, or a refined subject for traversal calls."""

    statement: str
    requires_suspension: bool = False
    subject: str | None = None
    yields_value: bool = False


def _action(expression: str, suspend: bool = True) -> _Step:
    if suspend:
        return _Step(f"await {expression}", requires_suspension=True)
    return _Step(expression)


def _read(variable: str, expression: str) -> _Step:
    return _Step(
        f"const {variable} = await {expression}",
        requires_suspension=True,
        yields_value=True,
    )


def _refers_to_alias(target: Value) -> bool:
    return is_alias(target) or (
        isinstance(target, list) and any(is_alias(t) for t in target)
    )


def _waits_on_alias(command: ParsedCommand) -> bool:
    return command.name == "wait" and bool(command.args) and _refers_to_alias(
        command.args[0]
    )


class CommandTranslator:
    """Rule-based translator from one Cypress command chain to Playwright code.

    Holds only read-only rule tables, so one instance can serve any number of
    concurrent ``translate`` calls.
    """

    def __init__(
        self,
        command_table: Mapping[str, CommandRule] = COMMAND_TABLE,
        assertion_table: Mapping[str, AssertionRule] = ASSERTION_TABLE,
    ):
        self._commands = command_table
        self._assertions = assertion_table

    def translate(self, command: ParsedCommand) -> TranslationResult:
        """Translate a command and its chained calls.

        Never raises: unknown constructs become TODO comments and internal
        errors become an error TODO, each with a diagnostic.

        Args:
            command: The parsed Cypress command

        Returns:
            TranslationResult with code, suspension flag, imports and diagnostics
        """
        context = TranslationContext()
        try:
            code, requires_suspension = self._translate(command, context)
        except Exception as e:
            logger.warning(f"Error converting command {command.name}: {e}")
            context.warn(f"Error converting command {command.name}: {e}")
            return TranslationResult.from_context(
                f"// TODO: Error converting command: {command.name}", False, context
            )

        logger.debug(
            f"Translated {command.name} with {len(command.chained_calls)} chained "
            f"calls, {len(context.diagnostics)} diagnostics"
        )
        return TranslationResult.from_context(code, requires_suspension, context)

    def _translate(
        self, command: ParsedCommand, context: TranslationContext
    ) -> tuple[str, bool]:
        calls = command.chained_calls
        if not calls:
            step = self._base_statement(command, context)
            return step.statement, step.requires_suspension

        if command.name == "window":
            return self._window_statements(command, context)

        if command.name not in self._commands:
            return self._unknown_chain(command, context), False

        if len(calls) > 1 or command.name in EXECUTE_FIRST_COMMANDS:
            return self._translate_statements(command, context)

        call = calls[0]
        locator = self._base_locator(command, context)
        if call.method in ASSERTION_METHODS or command.name == "url":
            step = self._assertion_statement(command, locator, call, context)
        else:
            step = self._chain_step(locator, call, context)
        if step.subject is not None:
            return step.subject, False
        return step.statement, step.requires_suspension

    def _translate_statements(
        self, command: ParsedCommand, context: TranslationContext
    ) -> tuple[str, bool]:
        """Lower a chain into one statement per action or assertion.

        Assertions can only target a locator. After an execute-first base
        (whose subject is the bare ``page``) or a call that reads a value,
        they become TODOs with a diagnostic instead.
        """
        statements = []
        requires_suspension = False
        # what the chain currently yields when it is not a locator
        opaque = None

        if command.name in EXECUTE_FIRST_COMMANDS:
            base = self._base_statement(command, context)
            statements.append(base.statement)
            requires_suspension = base.requires_suspension
            opaque = f"cy.{command.name}()"

        subject = self._base_locator(command, context)
        for call in command.chained_calls:
            if call.method in ASSERTION_METHODS and opaque and command.name != "url":
                step = self._opaque_assertion(call, opaque, context)
            elif call.method in ASSERTION_METHODS:
                step = self._assertion_statement(command, subject, call, context)
            else:
                step = self._chain_step(subject, call, context)
                if step.subject is not None:
                    subject = step.subject
                    if step.subject != "page":
                        opaque = None
                    continue
                if step.yields_value:
                    opaque = f".{call.method}()"
            if step.statement:
                statements.append(step.statement)
                requires_suspension = requires_suspension or step.requires_suspension

        if not statements:
            return subject, False
        return STATEMENT_SEPARATOR.join(statements), requires_suspension

    def _render_rule(self, rule: CommandRule, args: list[Value]) -> str:
        if isinstance(rule.target, Transform):
            return rule.target.fn(args)
        return f"{rule.target.text}{format_arguments(args)}"

    def _base_statement(
        self, command: ParsedCommand, context: TranslationContext
    ) -> _Step:
        """Render a command as a standalone statement.

        The alias-wait diagnostic for a ``wait`` base command is emitted here
        and nowhere else.
        """
        rule = self._commands.get(command.name)
        if rule is None:
            context.warn(f"Unknown Cypress command: {command.name}")
            return _Step(f"// TODO: Convert unknown Cypress command: {command.name}")

        code = self._render_rule(rule, command.args)
        context.required_imports.update(rule.imports)
        if _waits_on_alias(command):
            context.warn(ALIAS_WAIT_DIAGNOSTIC)
        return _action(code, rule.requires_suspension)

    def _base_locator(
        self, command: ParsedCommand, context: TranslationContext
    ) -> str:
        """Expression that chained calls operate on."""
        if command.name == "get":
            return optimize_selector(command.args[0])
        if command.name == "contains":
            if len(command.args) >= 2:
                return (
                    f"{optimize_selector(command.args[0])}"
                    f".filter({{ hasText: {format_value(command.args[1])} }})"
                )
            return f"page.getByText({format_value(command.args[0])})"
        if command.name == "url":
            return "page.url()"
        if command.name in EXECUTE_FIRST_COMMANDS:
            return "page"

        rule = self._commands[command.name]
        context.required_imports.update(rule.imports)
        return self._render_rule(rule, command.args)

    def _unknown_chain(self, command: ParsedCommand, context: TranslationContext) -> str:
        context.warn(f"Unknown Cypress command: {command.name}")
        lines = [f"// TODO: Convert unknown Cypress command: {command.name}"]
        for call in command.chained_calls:
            lines.append(f"// TODO: Handle chained call: {call.method}")
        return "\n".join(lines)

    def _opaque_assertion(
        self, call: ChainedCall, opaque: str, context: TranslationContext
    ) -> _Step:
        key = call.args[0] if call.args else ""
        context.warn(
            f"Assertion '{key}' on the result of {opaque} needs manual conversion"
        )
        return _Step(f"// TODO: Convert assertion '{key}' on the result of {opaque}")

    def _window_statements(
        self, command: ParsedCommand, context: TranslationContext
    ) -> tuple[str, bool]:
        """Translate ``cy.window().its(storage).invoke(op, ...)`` chains."""
        statements = []
        calls = command.chained_calls
        index = 0
        while index < len(calls):
            call = calls[index]
            storage = call.args[0] if call.args else None
            following = calls[index + 1] if index + 1 < len(calls) else None
            if (
                call.method == "its"
                and storage in STORAGE_OBJECTS
                and following is not None
                and following.method == "invoke"
            ):
                statements.append(self._storage_operation(storage, following, context))
                index += 2
                continue
            if call.method in ASSERTION_METHODS:
                statements.append(
                    self._opaque_assertion(call, "cy.window()", context).statement
                )
            else:
                context.warn(f"Unsupported call on cy.window(): {call.method}")
                statements.append(f"// TODO: Convert cy.window().{call.method}()")
            index += 1

        if not statements:
            context.warn("cy.window() chain needs manual conversion")
            return "// TODO: Convert window operation", False
        requires_suspension = any("await " in s for s in statements)
        return STATEMENT_SEPARATOR.join(statements), requires_suspension

    def _storage_operation(
        self, storage: str, call: ChainedCall, context: TranslationContext
    ) -> str:
        operation = call.args[0] if call.args else ""
        arguments = ", ".join(format_value(a) for a in call.args[1:])
        if operation in ("setItem", "removeItem", "clear"):
            return f"await page.evaluate(() => {storage}.{operation}({arguments}))"
        if operation == "getItem":
            return (
                f"const value = await page.evaluate(() => "
                f"{storage}.getItem({arguments}))"
            )
        context.warn(f"{storage}.{operation}() may require manual conversion")
        return f"// TODO: Handle {storage}.{operation}()"

    def _assertion_statement(
        self,
        command: ParsedCommand,
        locator: str,
        call: ChainedCall,
        context: TranslationContext,
    ) -> _Step:
        if command.name == "url":
            return self._url_assertion(call, context)

        key = call.args[0] if call.args else None
        if not isinstance(key, str):
            context.warn(f"Unsupported {call.method}() arguments: {call.args!r}")
            return _Step(f"// TODO: Convert {call.method}() assertion on {locator}")

        rule = self._assertions.get(key)
        if rule is None:
            context.warn(f"Unknown assertion: {key}")
            return _Step(f"// TODO: Convert unknown assertion: {key}")

        extra = list(call.args[1:])
        if isinstance(rule.target, Transform):
            code = rule.target.fn(locator, extra)
        else:
            code = f"await expect({locator}).{rule.target.name}{format_arguments(extra)}"
        return _Step(code, requires_suspension=True)

    def _url_assertion(self, call: ChainedCall, context: TranslationContext) -> _Step:
        if call.method not in ASSERTION_METHODS:
            context.warn(f"Unsupported chained call on url(): {call.method}")
            return _Step(f"// TODO: Convert url().{call.method}()")

        kind = call.args[0] if call.args else None
        expected = call.args[1] if len(call.args) > 1 else ""

        if kind in ("include", "contain", "not.include", "not.contain"):
            negation = "not." if kind.startswith("not.") else ""
            pattern = escape_regex(str(expected))
            return _Step(
                f"await expect(page).{negation}toHaveURL(/.*{pattern}.*/)",
                requires_suspension=True,
            )
        if kind in ("eq", "equal"):
            return _Step(
                f"await expect(page).toHaveURL({format_value(expected)})",
                requires_suspension=True,
            )

        context.warn(f"Unknown URL assertion: {kind}")
        return _Step(f"// TODO: Convert unknown URL assertion: {kind}")

    def _chain_step(
        self, locator: str, call: ChainedCall, context: TranslationContext
    ) -> _Step:
        """Translate one non-assertion chained call against ``locator``."""
        method, args = call.method, call.args

        if method in SIMPLE_ACTIONS:
            if method == "click" and args and isinstance(args[-1], dict):
                return _action(f"{locator}.click({format_value(args[-1])})")
            return _action(f"{locator}.{SIMPLE_ACTIONS[method]}")

        if method == "type":
            text = args[0] if args else ""
            if isinstance(text, str) and text.lower() in KEY_SEQUENCES:
                return _action(f"{locator}.press({quote(KEY_SEQUENCES[text.lower()])})")
            if not isinstance(text, str):
                text = str(text)
            return _action(f"{locator}.fill({format_value(text)})")

        if method == "select":
            return _action(f"{locator}.selectOption({format_value(args[0])})")

        if method == "trigger":
            event = str(args[0]) if args else ""
            context.warn(
                f"cy.trigger('{event}') converted - verify event behavior matches expected"
            )
            if event in HOVER_EVENTS:
                return _action(f"{locator}.hover()")
            return _action(f"{locator}.dispatchEvent({quote(event)})")

        if method == "drag":
            return _action(f"{locator}.dragTo({optimize_selector(args[0])})")

        if method == "selectFile":
            context.required_imports.add("path")
            files = args[0] if isinstance(args[0], list) else [args[0]]
            paths = [f"path.join(__dirname, {format_value(f)})" for f in files]
            rendered = paths[0] if len(paths) == 1 else "[" + ", ".join(paths) + "]"
            return _action(f"{locator}.setInputFiles({rendered})")

        if method == "invoke":
            return self._invoke(locator, call, context)

        if method == "its":
            prop = str(args[0]) if args else ""
            if locator != "page" and prop in LOCATOR_PROPERTIES:
                variable, reader = LOCATOR_PROPERTIES[prop]
                return _read(variable, f"{locator}.{reader}")
            context.warn(f"its('{prop}') may require manual conversion")
            return _Step(
                f"// TODO: Handle its('{prop}') - may need page.evaluate()",
                yields_value=True,
            )

        if method == "then":
            context.warn("then() callback requires manual conversion to standard JavaScript")
            return _Step(
                "// TODO: Convert then() callback to standard JavaScript/TypeScript",
                yields_value=True,
            )

        if method == "within":
            context.warn(
                f"cy.within() callback needs manual conversion - scope its commands to {locator}"
            )
            return _Step("", subject=locator)

        if method == "wait":
            target = args[0] if args else None
            if _refers_to_alias(target):
                context.warn(ALIAS_WAIT_DIAGNOSTIC)
                return _action(ALIAS_WAIT)
            if isinstance(target, (int, float)) and not isinstance(target, bool):
                return _action(f"page.waitForTimeout({target})")

        if method == "as":
            name = args[0] if args else ""
            context.warn(
                f"Cypress .as('{name}') dropped - consider storing the locator in a variable instead"
            )
            return _Step("")

        subject = self._traverse(locator, call)
        if subject is not None:
            return _Step("", subject=subject)

        context.warn(f"Unknown chained method: {method} - consider manual conversion")
        return _Step(f"// TODO: Convert chained call .{method}() on {locator}")

    def _invoke(
        self, locator: str, call: ChainedCall, context: TranslationContext
    ) -> _Step:
        """Translate ``invoke(name, ...args)`` on a located element."""
        name = str(call.args[0]) if call.args else ""
        extra = call.args[1:]

        if name in INVOKE_ACTIONS:
            return _action(f"{locator}.{name}()")
        if name == "val":
            if extra:
                return _action(f"{locator}.fill({format_value(str(extra[0]))})")
            return _read("value", f"{locator}.inputValue()")
        if name == "text" and not extra:
            return _read("text", f"{locator}.textContent()")
        if name == "attr" and len(extra) == 1:
            return _read("attr", f"{locator}.getAttribute({format_value(extra[0])})")

        context.warn(f"invoke('{name}') may require manual conversion")
        return _Step(
            f"// TODO: Handle invoke('{name}') - may need page.evaluate()",
            yields_value=True,
        )

    def _traverse(self, locator: str, call: ChainedCall) -> str | None:
        """Refine a locator for DOM traversal calls; ``None`` if not one."""
        method, args = call.method, call.args
        selector = args[0] if args else None

        if method == "find":
            return f"{locator}.locator({format_value(selector)})"
        if method == "first":
            return f"{locator}.first()"
        if method == "last":
            return f"{locator}.last()"
        if method == "eq":
            return f"{locator}.nth({format_value(selector)})"
        if method == "contains":
            return f"{locator}.filter({{ hasText: {format_value(selector)} }})"
        if method == "filter":
            if selector is None:
                return locator
            return f"{locator}.filter({{ has: page.locator({format_value(selector)}) }})"
        if method == "not":
            if selector is None:
                return locator
            return f"{locator}.locator({quote(f':not({selector})')})"
        if method == "parent":
            parent = f"{locator}.locator('..')"
            if selector:
                return f"{parent}.locator({format_value(selector)})"
            return parent
        if method == "children":
            children = quote(f":scope > {selector or '*'}")
            return f"{locator}.locator({children})"
        if method in ("next", "prev"):
            # xpath sibling axes come back in document order
            axis, pick = (
                ("following-sibling", "first") if method == "next"
                else ("preceding-sibling", "last")
            )
            siblings = f"{locator}.locator('xpath={axis}::*')"
            if selector:
                siblings = f"{siblings}.and(page.locator({format_value(selector)}))"
            return f"{siblings}.{pick}()"
        if method == "siblings":
            siblings = f"{locator}.locator('xpath=preceding-sibling::* | following-sibling::*')"
            if selector:
                return f"{siblings}.and(page.locator({format_value(selector)}))"
            return siblings
        if method == "parents":
            ancestors = f"{locator}.locator('xpath=ancestor::*')"
            if selector:
                return f"{ancestors}.and(page.locator({format_value(selector)}))"
            return ancestors
        if method == "closest":
            candidates = f"{locator}.locator('xpath=ancestor-or-self::*')"
            if selector:
                # nearest match is the last one in document order
                return f"{candidates}.and(page.locator({format_value(selector)})).last()"
            return candidates
        return None


_default_translator = CommandTranslator()


def translate(command: ParsedCommand) -> TranslationResult:
    """Translate one parsed Cypress command with the built-in rule tables."""
    return _default_translator.translate(command)
