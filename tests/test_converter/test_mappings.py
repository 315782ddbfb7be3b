"""Tests for the command and assertion rule tables."""

import pytest

from cypress_to_playwright.converter.mappings import (
    ALIAS_WAIT,
    ASSERTION_RULES,
    ASSERTION_TABLE,
    COMMAND_RULES,
    COMMAND_TABLE,
    CommandRule,
    Matcher,
    Template,
    Transform,
    _index,
    get_assertion_rule,
    get_command_rule,
    is_alias,
)


class TestRuleLookup:
    def test_command_names_are_unique(self):
        """Every command rule has its own source name."""
        names = [rule.source_name for rule in COMMAND_RULES]
        assert len(names) == len(set(names)) == len(COMMAND_TABLE)

    def test_assertion_names_are_unique(self):
        """Every assertion rule has its own source name."""
        names = [rule.source_name for rule in ASSERTION_RULES]
        assert len(names) == len(set(names)) == len(ASSERTION_TABLE)

    def test_known_command(self):
        """visit maps onto page.goto and must be awaited."""
        rule = get_command_rule("visit")
        assert rule.target == Template("page.goto")
        assert rule.requires_suspension is True

    def test_locator_commands_are_not_awaited(self):
        """get and contains produce locators, which are not awaited."""
        assert get_command_rule("get").requires_suspension is False
        assert get_command_rule("contains").requires_suspension is False

    def test_unknown_command(self):
        """Unmapped commands return None."""
        assert get_command_rule("doesNotExist") is None

    def test_known_assertion(self):
        """be.visible maps onto the toBeVisible matcher."""
        assert get_assertion_rule("be.visible").target == Matcher("toBeVisible")

    def test_unknown_assertion(self):
        """Unmapped assertion keys return None."""
        assert get_assertion_rule("be.sparkly") is None

    def test_tables_are_read_only(self):
        """The lookup tables cannot be modified."""
        with pytest.raises(TypeError):
            COMMAND_TABLE["visit"] = None

    def test_duplicate_rules_are_rejected(self):
        """Building a table with duplicate names fails."""
        rule = CommandRule("visit", Template("page.goto"), requires_suspension=True)
        with pytest.raises(ValueError, match="Duplicate"):
            _index((rule, rule))


class TestCommandTransforms:
    def render(self, name, *args):
        rule = get_command_rule(name)
        assert isinstance(rule.target, Transform)
        return rule.target.fn(list(args))

    def test_wait_without_arguments(self):
        """A bare wait waits for network idle."""
        assert self.render("wait") == "page.waitForLoadState('networkidle')"

    def test_wait_with_alias_list(self):
        """Waiting on several aliases uses the generic response wait."""
        assert self.render("wait", ["@a", "@b"]) == ALIAS_WAIT

    def test_intercept_url_only(self):
        """intercept(url) continues the route."""
        assert self.render("intercept", "/api/items") == (
            "page.route('**/api/items', route => route.continue())"
        )

    def test_intercept_keeps_absolute_url(self):
        """Absolute URLs are not prefixed with a glob."""
        assert self.render("intercept", "GET", "https://x.test/api") == (
            "page.route('https://x.test/api', route => route.continue())"
        )

    def test_intercept_with_body(self):
        """A static body is fulfilled as JSON."""
        rendered = self.render(
            "intercept", "POST", "/api/login", {"statusCode": 201, "body": {"ok": True}}
        )
        assert rendered == (
            "page.route('**/api/login', route => route.fulfill("
            "{ status: 201, json: { ok: true } }))"
        )

    def test_viewport_landscape(self):
        """The landscape orientation swaps preset dimensions."""
        assert self.render("viewport", "ipad-2", "landscape") == (
            "page.setViewportSize({ width: 1024, height: 768 })"
        )

    def test_viewport_unknown_preset(self):
        """Unknown presets raise."""
        with pytest.raises(ValueError, match="preset"):
            self.render("viewport", "nokia-3310")

    def test_fixture_without_extension(self):
        """Fixture names get a .json extension and a camelCase variable."""
        assert self.render("fixture", "admin-user") == (
            "const adminUser = JSON.parse(fs.readFileSync(path.join(__dirname, "
            "'../fixtures/admin-user.json'), 'utf-8'))"
        )

    def test_go_forward(self):
        """go('forward') becomes goForward."""
        assert self.render("go", "forward") == "page.goForward()"

    def test_go_invalid(self):
        """Numeric steps other than -1 and 1 raise."""
        with pytest.raises(ValueError):
            self.render("go", 3)

    def test_screenshot_named(self):
        """A named screenshot gets a file path."""
        assert self.render("screenshot", "home") == (
            "page.screenshot({ path: 'screenshots/home.png' })"
        )

    def test_log(self):
        """cy.log becomes console.log."""
        assert self.render("log", "done", 3) == "console.log('done', 3)"


class TestAssertionTransforms:
    def render(self, key, locator, *args):
        rule = get_assertion_rule(key)
        assert isinstance(rule.target, Transform)
        return rule.target.fn(locator, list(args))

    def test_include(self):
        """include checks the text content."""
        assert self.render("include", "loc", "abc") == (
            "await expect(loc).toContainText('abc')"
        )

    def test_not_have_class_escapes_regex(self):
        """Class names are escaped inside the regex literal."""
        assert self.render("not.have.class", "loc", "is.open") == (
            r"await expect(loc).not.toHaveClass(/is\.open/)"
        )

    def test_have_property(self):
        """have.property passes name and value through."""
        assert self.render("have.property", "loc", "checked", True) == (
            "await expect(loc).toHaveProperty('checked', true)"
        )

    def test_length_at_least(self):
        """have.length.at.least compares with >=."""
        assert self.render("have.length.at.least", "loc", 1) == (
            "expect(await loc.count()).toBeGreaterThanOrEqual(1)"
        )


class TestIsAlias:
    def test_alias(self):
        """Strings starting with @ are aliases."""
        assert is_alias("@users")

    def test_not_alias(self):
        """Other values are not aliases."""
        assert not is_alias("users")
        assert not is_alias(500)
