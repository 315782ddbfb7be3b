"""Tests for the argument tokenizer."""

from cypress_to_playwright.custom_commands.tokenizer import (
    find_call_end,
    split_statements,
    tokenize_arguments,
)


class TestTokenizeArguments:
    def when_tokenized(self, text):
        self.arguments = tokenize_arguments(text)

    def then_arguments_are(self, expected):
        assert self.arguments == expected

    def test_mixed_literals(self):
        """Commas inside strings, objects and arrow functions are kept."""
        self.when_tokenized("'a, b', {x: 1, y: 2}, (a,b)=>a+b")
        self.then_arguments_are(["'a, b'", "{x: 1, y: 2}", "(a,b)=>a+b"])

    def test_empty_input(self):
        """Blank input yields no arguments."""
        self.when_tokenized("   ")
        self.then_arguments_are([])

    def test_whitespace_is_trimmed(self):
        """Each argument is stripped."""
        self.when_tokenized("  'user' ,   42  ")
        self.then_arguments_are(["'user'", "42"])

    def test_other_quote_is_not_a_delimiter(self):
        """A single quote inside a double-quoted string does not end it."""
        self.when_tokenized("\"it's, fine\", 'x'")
        self.then_arguments_are(["\"it's, fine\"", "'x'"])

    def test_escaped_quote(self):
        """Escaped quotes stay inside the string."""
        self.when_tokenized(r"'a\', b', c")
        self.then_arguments_are([r"'a\', b'", "c"])

    def test_template_literal(self):
        """Backtick strings are treated as strings."""
        self.when_tokenized("`${a}, ${b}`, 1")
        self.then_arguments_are(["`${a}, ${b}`", "1"])

    def test_nested_calls_and_arrays(self):
        """Nested calls and array literals are single arguments."""
        self.when_tokenized("fn(1, 2), [3, [4, 5]], {a: {b: 1, c: 2}}")
        self.then_arguments_are(["fn(1, 2)", "[3, [4, 5]]", "{a: {b: 1, c: 2}}"])

    def test_fragments_survive_joining(self):
        """Balanced fragments joined with commas come back unchanged."""
        fragments = ["'x,y'", "{ a: [1, 2] }", "() => { go(1, 2) }", "\"q\"", "7"]
        self.when_tokenized(", ".join(fragments))
        self.then_arguments_are(fragments)


class TestFindCallEnd:
    def test_finds_matching_paren(self):
        """The closing paren of the outer call is found."""
        text = "cy.login(fn(a), 'b')"
        assert find_call_end(text, text.index("(")) == len(text) - 1

    def test_parens_inside_strings_are_ignored(self):
        """Parentheses in string literals do not count."""
        text = "cy.log(')')"
        assert find_call_end(text, text.index("(")) == len(text) - 1

    def test_unclosed_call(self):
        """An unclosed call returns None."""
        assert find_call_end("cy.log('a'", 6) is None


class TestSplitStatements:
    def when_split(self, body):
        self.statements = split_statements(body)

    def then_statements_are(self, expected):
        assert self.statements == expected

    def test_semicolons_and_newlines(self):
        """Statements end at semicolons and line breaks."""
        self.when_split("cy.visit('/');cy.get('a').click()\ncy.log('x')")
        self.then_statements_are(["cy.visit('/')", "cy.get('a').click()", "cy.log('x')"])

    def test_chain_continued_on_next_line(self):
        """A line starting with a dot continues the previous chain."""
        self.when_split("cy.get('#go')\n  .click()\ncy.log('done')")
        self.then_statements_are(["cy.get('#go').click()", "cy.log('done')"])

    def test_semicolon_inside_string(self):
        """Semicolons inside strings do not end a statement."""
        self.when_split("cy.get('#q').type('a; b');")
        self.then_statements_are(["cy.get('#q').type('a; b')"])

    def test_block_is_one_statement(self):
        """Line breaks inside braces do not end a statement."""
        self.when_split("if (x) {\n  cy.get('a').click()\n}")
        self.then_statements_are(["if (x) {\n  cy.get('a').click()\n}"])

    def test_line_comments_are_dropped(self):
        """// comments are dropped, even with quotes in them."""
        self.when_split("// don't run this\ncy.reload()")
        self.then_statements_are(["cy.reload()"])
