"""Static Cypress -> Playwright rule tables for commands and assertions."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType

from cypress_to_playwright.converter.selector_optimizer import optimize_selector
from cypress_to_playwright.formatting import escape_regex, format_value, quote
from cypress_to_playwright.models import Value


@dataclass(frozen=True)
class Template:
    """Target call prefix; the formatted arguments are appended to it."""

    text: str


@dataclass(frozen=True)
class Transform:
    """Function that renders the whole target expression.

    Command transforms are called as ``fn(args)``; assertion transforms as
    ``fn(locator, args)`` and return a complete statement.
    """

    fn: Callable[..., str]


@dataclass(frozen=True)
class Matcher:
    """Playwright ``expect`` matcher name, e.g. ``toBeVisible``."""

    name: str


@dataclass(frozen=True)
class CommandRule:
    source_name: str
    target: Template | Transform
    requires_suspension: bool
    imports: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class AssertionRule:
    source_name: str
    target: Matcher | Transform


# Commands whose statement must run before anything chained on them.
EXECUTE_FIRST_COMMANDS = frozenset({"intercept", "wait", "visit"})

ALIAS_WAIT = (
    "page.waitForResponse(resp => resp.url().includes('/api/') && resp.status() === 200)"
)

VIEWPORT_PRESETS = {
    "iphone-6": (375, 667),
    "iphone-x": (375, 812),
    "ipad-2": (768, 1024),
    "macbook-13": (1280, 800),
    "macbook-15": (1440, 900),
}


def is_alias(value: Value) -> bool:
    """Whether an argument refers to a Cypress alias (``'@name'``)."""
    return isinstance(value, str) and value.startswith("@")


def _get(args: list[Value]) -> str:
    return optimize_selector(args[0])


def _contains(args: list[Value]) -> str:
    if len(args) >= 2:
        return f"{optimize_selector(args[0])}.filter({{ hasText: {format_value(args[1])} }})"
    return f"page.getByText({format_value(args[0])})"


def _wait(args: list[Value]) -> str:
    if not args:
        return "page.waitForLoadState('networkidle')"
    target = args[0]
    if is_alias(target) or (isinstance(target, list) and any(map(is_alias, target))):
        return ALIAS_WAIT
    return f"page.waitForTimeout({format_value(target)})"


def _route_handler(response: Value) -> str:
    if isinstance(response, dict):
        if "fixture" in response:
            fixture = f"cypress/fixtures/{response['fixture']}"
            return f"route => route.fulfill({{ path: {quote(fixture)} }})"
        status = response.get("statusCode", 200)
        if "body" in response:
            return (
                f"route => route.fulfill({{ status: {format_value(status)}, "
                f"json: {format_value(response['body'])} }})"
            )
        return f"route => route.fulfill({{ status: {format_value(status)} }})"
    if isinstance(response, str):
        return f"route => route.fulfill({{ body: {quote(response)} }})"
    return "route => route.continue()"


def _intercept(args: list[Value]) -> str:
    # intercept(url) | intercept(method, url) | intercept(method, url, response)
    if len(args) == 1:
        url, response = args[0], None
    else:
        url = args[1]
        response = args[2] if len(args) > 2 else None
    pattern = url if str(url).startswith(("*", "http")) else f"**{url}"
    return f"page.route({format_value(pattern)}, {_route_handler(response)})"


def _viewport(args: list[Value]) -> str:
    if isinstance(args[0], str):
        if args[0] not in VIEWPORT_PRESETS:
            raise ValueError(f"Unknown viewport preset: {args[0]}")
        width, height = VIEWPORT_PRESETS[args[0]]
        if len(args) > 1 and args[1] == "landscape":
            width, height = height, width
    else:
        width, height = args[0], args[1]
    return f"page.setViewportSize({{ width: {width}, height: {height} }})"


def _set_cookie(args: list[Value]) -> str:
    name, value = args[0], args[1]
    return (
        f"page.context().addCookies([{{ name: {format_value(name)}, "
        f"value: {format_value(value)}, url: page.url() }}])"
    )


def _fixture_variable(filename: str) -> str:
    stem = filename.rsplit("/", 1)[-1].split(".", 1)[0]
    words = [w for w in re.split(r"[^A-Za-z0-9]+", stem) if w]
    if not words:
        return "fixtureData"
    name = words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])
    return f"_{name}" if name[0].isdigit() else name


def _fixture(args: list[Value]) -> str:
    filename = str(args[0])
    if "." not in filename.rsplit("/", 1)[-1]:
        filename += ".json"
    fixture_path = quote(f"../fixtures/{filename}")
    return (
        f"const {_fixture_variable(filename)} = JSON.parse("
        f"fs.readFileSync(path.join(__dirname, {fixture_path}), 'utf-8'))"
    )


def _go(args: list[Value]) -> str:
    direction = args[0] if args else "back"
    if direction in ("back", -1):
        return "page.goBack()"
    if direction in ("forward", 1):
        return "page.goForward()"
    raise ValueError(f"Unsupported history step: {direction!r}")


def _screenshot(args: list[Value]) -> str:
    if args and isinstance(args[0], str):
        return f"page.screenshot({{ path: {quote(f'screenshots/{args[0]}.png')} }})"
    return "page.screenshot()"


def _log(args: list[Value]) -> str:
    return "console.log(" + ", ".join(format_value(a) for a in args) + ")"


COMMAND_RULES = (
    CommandRule("visit", Template("page.goto"), requires_suspension=True),
    CommandRule("get", Transform(_get), requires_suspension=False),
    CommandRule("contains", Transform(_contains), requires_suspension=False),
    CommandRule("url", Template("page.url"), requires_suspension=False),
    CommandRule("wait", Transform(_wait), requires_suspension=True),
    CommandRule("intercept", Transform(_intercept), requires_suspension=True),
    CommandRule("viewport", Transform(_viewport), requires_suspension=True),
    CommandRule("setCookie", Transform(_set_cookie), requires_suspension=True),
    CommandRule(
        "clearCookies",
        Template("page.context().clearCookies"),
        requires_suspension=True,
    ),
    CommandRule(
        "clearLocalStorage",
        Transform(lambda args: "page.evaluate(() => localStorage.clear())"),
        requires_suspension=True,
    ),
    CommandRule(
        "fixture",
        Transform(_fixture),
        requires_suspension=False,
        imports=("fs", "path"),
    ),
    CommandRule("reload", Template("page.reload"), requires_suspension=True),
    CommandRule("go", Transform(_go), requires_suspension=True),
    CommandRule("title", Template("page.title"), requires_suspension=True),
    CommandRule("screenshot", Transform(_screenshot), requires_suspension=True),
    CommandRule("log", Transform(_log), requires_suspension=False),
)


def _extra(args: list[Value], index: int = 0) -> str:
    return format_value(args[index]) if len(args) > index else "''"


def _include(locator: str, args: list[Value]) -> str:
    return f"await expect({locator}).toContainText({_extra(args)})"


def _have_class(negated: bool) -> Callable[[str, list[Value]], str]:
    prefix = "not." if negated else ""

    def render(locator: str, args: list[Value]) -> str:
        class_name = escape_regex(str(args[0]))
        return f"await expect({locator}).{prefix}toHaveClass(/{class_name}/)"

    return render


def _have_property(locator: str, args: list[Value]) -> str:
    rendered = ", ".join(format_value(a) for a in args[:2])
    return f"await expect({locator}).toHaveProperty({rendered})"


def _count_compare(matcher: str) -> Callable[[str, list[Value]], str]:
    def render(locator: str, args: list[Value]) -> str:
        return f"expect(await {locator}.count()).{matcher}({_extra(args)})"

    return render


def _matchers(pairs: dict[str, str]) -> list[AssertionRule]:
    return [AssertionRule(name, Matcher(matcher)) for name, matcher in pairs.items()]


ASSERTION_RULES = tuple(
    _matchers(
        {
            "be.visible": "toBeVisible",
            "not.be.visible": "not.toBeVisible",
            "be.hidden": "toBeHidden",
            "be.enabled": "toBeEnabled",
            "be.disabled": "toBeDisabled",
            "not.be.disabled": "not.toBeDisabled",
            "be.checked": "toBeChecked",
            "not.be.checked": "not.toBeChecked",
            "be.empty": "toBeEmpty",
            "be.focused": "toBeFocused",
            "have.focus": "toBeFocused",
            "not.have.focus": "not.toBeFocused",
            "contain.text": "toContainText",
            "not.contain.text": "not.toContainText",
            "contain": "toContainText",
            "not.contain": "not.toContainText",
            "have.text": "toHaveText",
            "have.value": "toHaveValue",
            "not.have.value": "not.toHaveValue",
            "have.length": "toHaveCount",
            "have.attr": "toHaveAttribute",
            "not.have.attr": "not.toHaveAttribute",
            "have.css": "toHaveCSS",
            "have.id": "toHaveId",
            "exist": "toBeAttached",
            "equal": "toBe",
            "eq": "toBe",
        }
    )
    + [
        AssertionRule("include", Transform(_include)),
        AssertionRule("have.class", Transform(_have_class(negated=False))),
        AssertionRule("not.have.class", Transform(_have_class(negated=True))),
        AssertionRule("have.property", Transform(_have_property)),
        AssertionRule(
            "not.exist",
            Transform(lambda locator, args: f"await expect({locator}).toHaveCount(0)"),
        ),
        AssertionRule("have.length.gt", Transform(_count_compare("toBeGreaterThan"))),
        AssertionRule(
            "have.length.greaterThan", Transform(_count_compare("toBeGreaterThan"))
        ),
        AssertionRule(
            "have.length.gte", Transform(_count_compare("toBeGreaterThanOrEqual"))
        ),
        AssertionRule(
            "have.length.at.least",
            Transform(_count_compare("toBeGreaterThanOrEqual")),
        ),
        AssertionRule("have.length.lt", Transform(_count_compare("toBeLessThan"))),
        AssertionRule(
            "have.length.lessThan", Transform(_count_compare("toBeLessThan"))
        ),
    ]
)


def _index(rules: tuple) -> MappingProxyType:
    table = {}
    for rule in rules:
        if rule.source_name in table:
            raise ValueError(f"Duplicate rule for {rule.source_name!r}")
        table[rule.source_name] = rule
    return MappingProxyType(table)


COMMAND_TABLE = _index(COMMAND_RULES)
ASSERTION_TABLE = _index(ASSERTION_RULES)


def get_command_rule(name: str) -> CommandRule | None:
    """Look up the rule for a Cypress command; ``None`` when unmapped."""
    return COMMAND_TABLE.get(name)


def get_assertion_rule(name: str) -> AssertionRule | None:
    """Look up the rule for a Chai assertion key; ``None`` when unmapped."""
    return ASSERTION_TABLE.get(name)
