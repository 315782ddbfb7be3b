"""Classify Cypress custom commands and generate their Playwright replacement."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from cypress_to_playwright.converter.mappings import COMMAND_TABLE
from cypress_to_playwright.converter.selector_optimizer import optimize_selector
from cypress_to_playwright.custom_commands.page_object import (
    PageObjectMethod,
    bind_to_instance,
    page_object_class_name,
    render_page_object,
    shared_class_name,
)
from cypress_to_playwright.custom_commands.tokenizer import (
    find_call_end,
    split_statements,
    tokenize_arguments,
)
from cypress_to_playwright.formatting import clean_quotes, quote
from cypress_to_playwright.models import (
    ClassificationResult,
    ComplexityTag,
    ConversionStrategy,
    CustomCommandDefinition,
)

logger = logging.getLogger(__name__)

CALL_START = re.compile(r"\bcy\.(\w+)\s*\(")

# Callback bodies: (args) => { ... } or function (args) { ... }
CALLBACK_PATTERN = re.compile(
    r"^\s*(?:\([^)]*\)\s*=>|\w+\s*=>|function\s*\w*\s*\([^)]*\))\s*\{(.*)\}\s*$",
    re.DOTALL,
)

THEN_VISIBLE = re.compile(
    r"cy\.get\(\s*(['\"])(.*?)\1\s*\)\.should\(\s*['\"]be\.visible['\"]\s*\)"
)
THEN_CLICK = re.compile(r"cy\.get\(\s*(['\"])(.*?)\1\s*\)\.click\(\s*\)")

BRANCHING = re.compile(
    r"\bif\s*\(|\belse\b|\bswitch\s*\(|\bfor\s*\(|\bwhile\s*\(|\s\?\s|\.then\s*\(|\.each\s*\("
)

# Recognized statements inside a custom command body, most specific first.
_GET = (
    r"^cy\.get\(\s*(?:(['\"])(?P<selector>.+?)\1|(?P<variable>[A-Za-z_$][\w$.]*))\s*\)"
)
BODY_PATTERNS = [
    (
        re.compile(_GET + r"\.type\(\s*(?P<value>.+?)\s*\)$"),
        lambda m: f"await {_selector_locator(m)}.fill({_literal(m['value'])})",
    ),
    (
        re.compile(_GET + r"\.select\(\s*(?P<value>.+?)\s*\)$"),
        lambda m: f"await {_selector_locator(m)}.selectOption({_literal(m['value'])})",
    ),
    (
        re.compile(_GET + r"\.(?P<action>click|clear|check|uncheck|focus|blur)\(\s*\)$"),
        lambda m: f"await {_selector_locator(m)}.{m['action']}()",
    ),
    (
        re.compile(_GET + r"\.should\(\s*['\"]be\.visible['\"]\s*\)$"),
        lambda m: f"await expect({_selector_locator(m)}).toBeVisible()",
    ),
    (
        re.compile(r"^cy\.contains\(\s*(['\"])(?P<text>.+?)\1\s*\)\.click\(\s*\)$"),
        lambda m: f"await page.getByText({quote(m['text'])}).click()",
    ),
    (
        re.compile(r"^cy\.visit\(\s*(?P<url>.+?)\s*\)$"),
        lambda m: f"await page.goto({_literal(m['url'])})",
    ),
]


@dataclass
class CustomCall:
    """A ``cy.name(...)`` call found in custom-command source text."""

    name: str
    args_text: str
    args: list[str]


def _is_string_literal(arg: str) -> bool:
    arg = arg.strip()
    return len(arg) >= 2 and arg[0] == arg[-1] and arg[0] in "'\""


def _literal(arg: str) -> str:
    """Re-emit an argument: string literals requoted, anything else verbatim."""
    if _is_string_literal(arg):
        return quote(clean_quotes(arg))
    return arg.strip()


def _locator(arg: str) -> str:
    if _is_string_literal(arg):
        return optimize_selector(clean_quotes(arg))
    return f"page.locator({arg.strip()})"


def _selector_locator(match: re.Match) -> str:
    if match["selector"] is None:
        return f"page.locator({match['variable']})"
    return optimize_selector(match["selector"])


def extract_calls(text: str) -> list[CustomCall]:
    """Find top-level ``cy.name(...)`` calls in source order."""
    calls = []
    position = 0
    for match in CALL_START.finditer(text):
        if match.start() < position:
            continue  # nested inside the previous call
        open_index = match.end() - 1
        close_index = find_call_end(text, open_index)
        if close_index is None:
            continue
        args_text = text[open_index + 1 : close_index]
        calls.append(
            CustomCall(
                name=match.group(1),
                args_text=args_text,
                args=tokenize_arguments(args_text),
            )
        )
        position = close_index + 1
    return calls


def _error_result(message: str) -> ClassificationResult:
    return ClassificationResult(
        strategy=ConversionStrategy.MANUAL,
        complexity=ComplexityTag.HIGH,
        generated_code=f"// Error: {message}",
        errors=[message],
    )


def _convert_login(call: CustomCall) -> ClassificationResult:
    call_args = ", ".join(["page"] + [_literal(a) for a in call.args])
    code = "\n".join(
        [
            "async function login(page: Page, username: string, password: string) {",
            "  await page.getByRole('textbox', { name: /username|email/i }).fill(username);",
            "  await page.getByRole('textbox', { name: /password/i }).fill(password);",
            "  await page.getByRole('button', { name: /login|sign in/i }).click();",
            "}",
            "",
            f"await login({call_args});",
        ]
    )
    return ClassificationResult(
        strategy=ConversionStrategy.UTILITY,
        complexity=ComplexityTag.MEDIUM,
        generated_code=code,
        notes=["Login function requires implementation based on specific UI elements"],
    )


def _convert_select_dropdown(call: CustomCall) -> ClassificationResult:
    selector, value = call.args[0], call.args[1]
    return ClassificationResult(
        strategy=ConversionStrategy.DIRECT,
        complexity=ComplexityTag.LOW,
        generated_code=f"await {_locator(selector)}.selectOption({_literal(value)});",
    )


def _convert_upload_file(call: CustomCall) -> ClassificationResult:
    selector, file_name = call.args[0], call.args[1]
    return ClassificationResult(
        strategy=ConversionStrategy.DIRECT,
        complexity=ComplexityTag.LOW,
        generated_code=f"await {_locator(selector)}.setInputFiles({_literal(file_name)});",
    )


def _convert_custom_then(call: CustomCall) -> ClassificationResult:
    match = CALLBACK_PATTERN.match(call.args_text)
    if not match:
        return _error_result("Unable to parse customThen callback")

    lines = ["// customThen callback converted to Playwright statements"]
    warnings = []
    for line in match.group(1).strip().splitlines():
        line = line.strip()
        if not line:
            continue
        visible = THEN_VISIBLE.search(line)
        click = THEN_CLICK.search(line)
        if visible:
            lines.append(f"await expect({optimize_selector(visible.group(2))}).toBeVisible();")
        elif click:
            lines.append(f"await {optimize_selector(click.group(2))}.click();")
        else:
            warnings.append(f"Skipped unrecognized line in customThen callback: {line}")

    return ClassificationResult(
        strategy=ConversionStrategy.UTILITY,
        complexity=ComplexityTag.MEDIUM,
        generated_code="\n".join(lines),
        notes=["customThen callback converted line by line"],
        warnings=warnings,
    )


def _convert_custom_log(call: CustomCall) -> ClassificationResult:
    formatted = ", ".join(
        arg if arg.startswith("{") and arg.endswith("}") else _literal(arg)
        for arg in call.args
    )
    return ClassificationResult(
        strategy=ConversionStrategy.DIRECT,
        complexity=ComplexityTag.LOW,
        generated_code=f"console.log({formatted});",
    )


def _convert_navigate_to_section(call: CustomCall) -> ClassificationResult:
    names = ["section", "subsection"] + [
        f"segment{i}" for i in range(3, len(call.args) + 1)
    ]
    params = names[: len(call.args)]
    path = "/" + "/".join(f"${{{p}}}" for p in params)
    signature = ", ".join(["page: Page"] + [f"{p}: string" for p in params])
    call_args = ", ".join(["page"] + [_literal(a) for a in call.args])
    code = "\n".join(
        [
            f"async function navigateToSection({signature}) {{",
            f"  await page.goto(`{path}`);",
            "}",
            "",
            f"await navigateToSection({call_args});",
        ]
    )
    return ClassificationResult(
        strategy=ConversionStrategy.UTILITY,
        complexity=ComplexityTag.MEDIUM,
        generated_code=code,
        notes=[
            "Navigation implementation may need adjustment based on actual UI structure"
        ],
    )


def _convert_generic(call: CustomCall) -> ClassificationResult:
    code = "\n".join(
        [
            f"// TODO: Convert custom command cy.{call.name}() to Playwright equivalent",
            f"// Parameters: {', '.join(call.args)}",
            "// This custom command requires manual implementation",
        ]
    )
    return ClassificationResult(
        strategy=ConversionStrategy.UTILITY,
        complexity=ComplexityTag.HIGH,
        generated_code=code,
        notes=[f"Generic custom command {call.name} requires manual implementation"],
        warnings=[f"Custom command {call.name} needs manual conversion"],
    )


NAMED_HANDLERS: dict[str, Callable[[CustomCall], ClassificationResult]] = {
    "login": _convert_login,
    "selectDropdown": _convert_select_dropdown,
    "uploadFile": _convert_upload_file,
    "customThen": _convert_custom_then,
    "customLog": _convert_custom_log,
    "navigateToSection": _convert_navigate_to_section,
}


def _parameter_names(args: list[str]) -> list[str]:
    """Guess typed parameter names from call-site arguments."""
    params = []
    for index, arg in enumerate(args, start=1):
        value = clean_quotes(arg).lower()
        if arg.startswith("{"):
            name, type_ = "data", "any"
        elif _is_string_literal(arg) and "@" in value:
            name, type_ = "email", "string"
        elif _is_string_literal(arg) and "pass" in value:
            name, type_ = "password", "string"
        elif re.fullmatch(r"-?\d+(\.\d+)?", arg):
            name, type_ = f"value{index}", "number"
        else:
            name, type_ = f"arg{index}", "string"
        taken = {p.split(":")[0] for p in params}
        if name in taken:
            name = f"{name}{index}"
        params.append(f"{name}: {type_}")
    return params


def _group_into_page_object(calls: list[CustomCall]) -> ClassificationResult:
    """Collect several custom calls into one page-object class."""
    distinct: dict[str, CustomCall] = {}
    for call in calls:
        distinct.setdefault(call.name, call)

    class_name = shared_class_name(list(distinct))
    methods = [
        PageObjectMethod(
            name=call.name,
            parameters=_parameter_names(call.args),
            body=[f"// TODO: port the body of cy.{call.name}()"],
        )
        for call in distinct.values()
    ]

    instance = class_name[:1].lower() + class_name[1:]
    usage = [f"const {instance} = new {class_name}(page);"]
    for call in calls:
        usage.append(
            f"await {instance}.{call.name}({', '.join(_literal(a) for a in call.args)});"
        )

    code = render_page_object(class_name, methods) + "\n\n" + "\n".join(usage)
    return ClassificationResult(
        strategy=ConversionStrategy.PAGE_OBJECT,
        complexity=ComplexityTag.MEDIUM,
        generated_code=code,
        notes=[f"Grouped {len(methods)} custom commands into {class_name}"],
        warnings=[f"Method bodies of {class_name} need manual implementation"],
    )


def classify_source(text: str) -> ClassificationResult:
    """Classify custom-command call-site text such as ``cy.login('a', 'b')``."""
    calls = extract_calls(text)
    if not calls:
        logger.warning("No Cypress call found in custom command source")
        return _error_result("Invalid Cypress command format")

    names = {call.name for call in calls}
    known = set(COMMAND_TABLE) | set(NAMED_HANDLERS)
    if len(names) > 1 and not names & known:
        logger.info(f"Grouping {len(names)} custom commands into a page object")
        return _group_into_page_object(calls)

    call = calls[0]
    handler = NAMED_HANDLERS.get(call.name, _convert_generic)
    logger.info(f"Converting custom command {call.name} with {handler.__name__}")
    result = handler(call)
    skipped = dict.fromkeys(c.name for c in calls if c.name != call.name)
    for name in skipped:
        result.warnings.append(
            f"Only cy.{call.name}() was converted; cy.{name}() needs its own conversion"
        )
    return result


def _split_statements(body: str) -> list[str]:
    return [s for s in split_statements(body) if s not in ("{", "}")]


def classify_definition(definition: CustomCommandDefinition) -> ClassificationResult:
    """Classify a ``Cypress.Commands.add`` definition by analysing its body.

    Complexity is high when the body branches or contains statements no
    pattern recognizes, medium with three or more recognized operations and
    low otherwise. The strategy follows from the same signals: manual for
    high complexity, a page-object method for three or more operations, an
    inline statement for a single parameterless operation, and a standalone
    async function for everything else.
    """
    name, params = definition.name, list(definition.parameters)
    statements = _split_statements(definition.body_text)

    if not statements:
        return ClassificationResult(
            strategy=ConversionStrategy.MANUAL,
            complexity=ComplexityTag.LOW,
            generated_code=f"// TODO: cy.{name}() has an empty body",
            warnings=[f"Custom command {name} has an empty body"],
        )

    operations = []
    unknown = []
    for statement in statements:
        for pattern, render in BODY_PATTERNS:
            match = pattern.match(statement)
            if match:
                operations.append(render(match))
                break
        else:
            unknown.append(statement)

    branching = bool(BRANCHING.search(definition.body_text))
    logger.info(
        f"Custom command {name}: {len(operations)} operations, "
        f"{len(unknown)} unknown statements, branching={branching}"
    )

    if branching or unknown:
        signature = ", ".join(["page: Page"] + params)
        lines = [
            f"// TODO: Manual review required for custom command cy.{name}()",
            f"async function {name}({signature}) {{",
            "  // Original Cypress body:",
        ]
        lines.extend(f"  // {line}" for line in definition.body_text.strip().splitlines())
        lines.append("}")
        return ClassificationResult(
            strategy=ConversionStrategy.MANUAL,
            complexity=ComplexityTag.HIGH,
            generated_code="\n".join(lines),
            notes=[f"Unrecognized statement: {s}" for s in unknown],
            warnings=[
                f"Custom command {name} uses branching or unrecognized constructs "
                "and needs manual review"
            ],
        )

    complexity = ComplexityTag.MEDIUM if len(operations) >= 3 else ComplexityTag.LOW

    if len(operations) >= 3:
        class_name = page_object_class_name(name)
        method = PageObjectMethod(
            name=name,
            parameters=params,
            body=[bind_to_instance(op) + ";" for op in operations],
        )
        return ClassificationResult(
            strategy=ConversionStrategy.PAGE_OBJECT,
            complexity=complexity,
            generated_code=render_page_object(class_name, [method]),
            notes=[f"cy.{name}() converted to {class_name}.{name}()"],
        )

    if len(operations) == 1 and not params:
        return ClassificationResult(
            strategy=ConversionStrategy.DIRECT,
            complexity=complexity,
            generated_code=operations[0] + ";",
        )

    signature = ", ".join(["page: Page"] + params)
    lines = [f"async function {name}({signature}) {{"]
    lines.extend(f"  {op};" for op in operations)
    lines.append("}")
    return ClassificationResult(
        strategy=ConversionStrategy.UTILITY,
        complexity=complexity,
        generated_code="\n".join(lines),
    )


def classify(raw: CustomCommandDefinition | str) -> ClassificationResult:
    """Decide how a custom command should be re-expressed in Playwright.

    Accepts either a parsed definition or raw source text holding the call.
    Never raises: malformed input yields a manual result with ``errors`` set.
    """
    try:
        if isinstance(raw, CustomCommandDefinition):
            return classify_definition(raw)
        if isinstance(raw, str):
            return classify_source(raw)
        return _error_result(f"Unsupported custom command input: {type(raw).__name__}")
    except Exception as e:
        logger.warning(f"Custom command conversion failed: {e}")
        return _error_result(f"Conversion failed: {e}")
