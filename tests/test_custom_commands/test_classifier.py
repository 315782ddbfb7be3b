"""Tests for custom command classification and code generation."""

from cypress_to_playwright.custom_commands import classify, extract_calls
from cypress_to_playwright.models import (
    ComplexityTag,
    ConversionStrategy,
    CustomCommandDefinition,
)


class TestExtractCalls:
    def test_top_level_calls_only(self):
        """Calls nested inside another call's arguments are not extracted."""
        calls = extract_calls("cy.customThen(() => { cy.get('a').click() })\ncy.log('x')")
        assert [call.name for call in calls] == ["customThen", "log"]

    def test_arguments_are_tokenized(self):
        """Call arguments are split with the tokenizer."""
        (call,) = extract_calls("cy.login('a, b', {x: 1})")
        assert call.args == ["'a, b'", "{x: 1}"]


class TestNamedHandlers:
    def when_classified(self, source):
        self.result = classify(source)

    def then_tagged(self, strategy, complexity):
        assert self.result.strategy == strategy
        assert self.result.complexity == complexity

    def test_select_dropdown(self):
        """selectDropdown becomes a direct selectOption call."""
        self.when_classified("cy.selectDropdown('#country', 'US')")
        self.then_tagged(ConversionStrategy.DIRECT, ComplexityTag.LOW)
        assert self.result.generated_code == (
            "await page.locator('#country').selectOption('US');"
        )
        assert self.result.is_valid

    def test_upload_file_uses_optimized_selector(self):
        """uploadFile becomes setInputFiles on the optimized locator."""
        self.when_classified("cy.uploadFile('[data-testid=\"file\"]', 'doc.pdf')")
        self.then_tagged(ConversionStrategy.DIRECT, ComplexityTag.LOW)
        assert self.result.generated_code == (
            "await page.getByTestId('file').setInputFiles('doc.pdf');"
        )

    def test_login(self):
        """login becomes a helper function plus a call."""
        self.when_classified("cy.login('user@example.com', 'secret')")
        self.then_tagged(ConversionStrategy.UTILITY, ComplexityTag.MEDIUM)
        code = self.result.generated_code
        assert code.startswith(
            "async function login(page: Page, username: string, password: string) {"
        )
        assert code.endswith("await login(page, 'user@example.com', 'secret');")
        assert self.result.notes

    def test_custom_log_keeps_object_literal(self):
        """customLog passes object literals through unchanged."""
        self.when_classified("cy.customLog('saved', {id: 1})")
        self.then_tagged(ConversionStrategy.DIRECT, ComplexityTag.LOW)
        assert self.result.generated_code == "console.log('saved', {id: 1});"

    def test_navigate_to_section(self):
        """navigateToSection becomes a goto helper built from the segments."""
        self.when_classified("cy.navigateToSection('books', 'fiction')")
        self.then_tagged(ConversionStrategy.UTILITY, ComplexityTag.MEDIUM)
        assert self.result.generated_code == "\n".join(
            [
                "async function navigateToSection(page: Page, section: string, "
                "subsection: string) {",
                "  await page.goto(`/${section}/${subsection}`);",
                "}",
                "",
                "await navigateToSection(page, 'books', 'fiction');",
            ]
        )

    def test_custom_then_converts_known_lines(self):
        """Recognized callback lines are converted and others reported."""
        self.when_classified(
            "cy.customThen(() => {\n"
            "  cy.get('.modal').should('be.visible')\n"
            "  cy.get('.close').click()\n"
            "  doSomething()\n"
            "})"
        )
        self.then_tagged(ConversionStrategy.UTILITY, ComplexityTag.MEDIUM)
        assert self.result.generated_code == "\n".join(
            [
                "// customThen callback converted to Playwright statements",
                "await expect(page.locator('.modal')).toBeVisible();",
                "await page.locator('.close').click();",
            ]
        )
        assert self.result.warnings == [
            "Skipped unrecognized line in customThen callback: doSomething()"
        ]
        assert self.result.is_valid

    def test_custom_then_without_callback(self):
        """A customThen call without a callback is an error."""
        self.when_classified("cy.customThen('nope')")
        assert not self.result.is_valid
        assert self.result.errors == ["Unable to parse customThen callback"]


class TestGenericAndInvalid:
    def test_generic_command(self):
        """Unknown custom commands get a TODO stub and a warning."""
        result = classify("cy.doMagic('x', 2)")
        assert result.strategy == ConversionStrategy.UTILITY
        assert result.complexity == ComplexityTag.HIGH
        assert result.generated_code == "\n".join(
            [
                "// TODO: Convert custom command cy.doMagic() to Playwright equivalent",
                "// Parameters: 'x', 2",
                "// This custom command requires manual implementation",
            ]
        )
        assert result.warnings == ["Custom command doMagic needs manual conversion"]

    def test_no_call(self):
        """Text without a cy call is rejected without raising."""
        result = classify("not a command")
        assert result.strategy == ConversionStrategy.MANUAL
        assert result.errors == ["Invalid Cypress command format"]
        assert result.generated_code == "// Error: Invalid Cypress command format"

    def test_unsupported_input_type(self):
        """Non-text, non-definition input is rejected without raising."""
        result = classify(123)
        assert result.errors == ["Unsupported custom command input: int"]

    def test_handler_failure_is_reported(self):
        """A handler failing on its arguments yields an error result."""
        result = classify("cy.selectDropdown('#only')")
        assert not result.is_valid
        assert result.errors[0].startswith("Conversion failed:")

    def test_to_dict(self):
        """Results serialize with enum values."""
        data = classify("cy.selectDropdown('#c', 'US')").to_dict()
        assert data["strategy"] == "direct"
        assert data["complexity"] == "low"
        assert data["is_valid"] is True


class TestPageObjectGrouping:
    def test_related_commands_are_grouped(self):
        """Several distinct custom calls become one page-object class."""
        result = classify(
            "cy.fillLoginForm('a@b.com', 'password123')\ncy.submitLoginForm()"
        )
        assert result.strategy == ConversionStrategy.PAGE_OBJECT
        assert result.complexity == ComplexityTag.MEDIUM
        code = result.generated_code
        assert code.startswith("class LoginPage {")
        assert "  async fillLoginForm(email: string, password: string) {" in code
        assert "  async submitLoginForm() {" in code
        assert code.endswith(
            "const loginPage = new LoginPage(page);\n"
            "await loginPage.fillLoginForm('a@b.com', 'password123');\n"
            "await loginPage.submitLoginForm();"
        )
        assert result.warnings == ["Method bodies of LoginPage need manual implementation"]

    def test_named_handler_is_not_grouped(self):
        """A known command among several calls is converted, the rest are flagged."""
        result = classify(
            "cy.selectDropdown('#country', 'NL');\ncy.uploadFile('#file', 'a.pdf');"
        )
        assert result.strategy == ConversionStrategy.DIRECT
        assert result.complexity == ComplexityTag.LOW
        assert result.generated_code == (
            "await page.locator('#country').selectOption('NL');"
        )
        assert result.warnings == [
            "Only cy.selectDropdown() was converted; cy.uploadFile() needs its own conversion"
        ]


class TestDefinitions:
    def when_classified(self, name, body, parameters=()):
        self.result = classify(
            CustomCommandDefinition(name=name, parameters=list(parameters), body_text=body)
        )

    def then_tagged(self, strategy, complexity):
        assert self.result.strategy == strategy
        assert self.result.complexity == complexity

    def test_empty_body(self):
        """An empty body needs manual work but is simple."""
        self.when_classified("noop", "  ")
        self.then_tagged(ConversionStrategy.MANUAL, ComplexityTag.LOW)

    def test_single_operation_without_parameters(self):
        """One parameterless operation is inlined."""
        self.when_classified("clickSave", "cy.get('#save').click()")
        self.then_tagged(ConversionStrategy.DIRECT, ComplexityTag.LOW)
        assert self.result.generated_code == "await page.locator('#save').click();"

    def test_parameterized_operations(self):
        """Parameterized bodies become an async helper function."""
        self.when_classified(
            "search",
            "cy.get('#q').type(term)\ncy.get('#go').click()",
            parameters=["term"],
        )
        self.then_tagged(ConversionStrategy.UTILITY, ComplexityTag.LOW)
        assert self.result.generated_code == "\n".join(
            [
                "async function search(page: Page, term) {",
                "  await page.locator('#q').fill(term);",
                "  await page.locator('#go').click();",
                "}",
            ]
        )

    def test_many_operations_become_page_object(self):
        """Three or more operations become a page-object method."""
        self.when_classified(
            "login",
            "cy.visit('/login');\n"
            "cy.get('[data-cy=user]').type(username);\n"
            "cy.get('[data-cy=pass]').type(password);\n"
            "cy.get('button').click();",
            parameters=["username", "password"],
        )
        self.then_tagged(ConversionStrategy.PAGE_OBJECT, ComplexityTag.MEDIUM)
        assert self.result.generated_code == "\n".join(
            [
                "class LoginPage {",
                "  constructor(private readonly page: Page) {}",
                "",
                "  async login(username, password) {",
                "    await this.page.goto('/login');",
                "    await this.page.getByTestId('user').fill(username);",
                "    await this.page.getByTestId('pass').fill(password);",
                "    await this.page.locator('button').click();",
                "  }",
                "}",
            ]
        )

    def test_branching_needs_manual_review(self):
        """Conditional bodies are flagged for manual review."""
        self.when_classified("maybeClose", "if (open) {\n  cy.get('.x').click()\n}")
        self.then_tagged(ConversionStrategy.MANUAL, ComplexityTag.HIGH)
        assert self.result.generated_code.startswith(
            "// TODO: Manual review required for custom command cy.maybeClose()"
        )
        assert len(self.result.warnings) == 1

    def test_unrecognized_statement(self):
        """Unknown statements are listed in the notes."""
        self.when_classified("weird", "doSomething()")
        self.then_tagged(ConversionStrategy.MANUAL, ComplexityTag.HIGH)
        assert self.result.notes == ["Unrecognized statement: doSomething()"]

    def test_selector_parameter(self):
        """A selector passed as a parameter is used as a locator expression."""
        self.when_classified(
            "fillField", "cy.get(selector).type(value)", parameters=["selector", "value"]
        )
        self.then_tagged(ConversionStrategy.UTILITY, ComplexityTag.LOW)
        assert self.result.generated_code == "\n".join(
            [
                "async function fillField(page: Page, selector, value) {",
                "  await page.locator(selector).fill(value);",
                "}",
            ]
        )

    def test_chain_split_across_lines(self):
        """A chain continued on the next line is one operation."""
        self.when_classified("go", "cy.get('#go')\n  .click()")
        self.then_tagged(ConversionStrategy.DIRECT, ComplexityTag.LOW)
        assert self.result.generated_code == "await page.locator('#go').click();"

    def test_semicolon_inside_typed_text(self):
        """A semicolon inside a string literal does not split the statement."""
        self.when_classified("typeList", "cy.get('#q').type('a; b');")
        self.then_tagged(ConversionStrategy.DIRECT, ComplexityTag.LOW)
        assert self.result.generated_code == "await page.locator('#q').fill('a; b');"
