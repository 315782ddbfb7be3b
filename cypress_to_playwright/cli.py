"""Command-line interface for cypress-to-playwright."""

import argparse
import json
import logging
import sys
from pathlib import Path

from cypress_to_playwright.custom_commands import classify
from cypress_to_playwright.models import CommandInputError, ParsedCommand
from cypress_to_playwright.report import build_report, render_statements

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cypress-to-playwright",
        description="Translate Cypress commands into Playwright Test code",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # translate subcommand
    translate_parser = subparsers.add_parser(
        "translate",
        help="Translate parsed Cypress commands (JSON list) into Playwright code",
    )
    translate_parser.add_argument(
        "input",
        help="JSON file containing a list of parsed commands",
    )
    translate_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Also write the generated statements to this file",
    )

    # classify subcommand
    classify_parser = subparsers.add_parser(
        "classify",
        help="Convert a Cypress custom command call into a Playwright helper",
    )
    classify_parser.add_argument(
        "input",
        help="File containing the custom command source text",
    )

    return parser


def load_commands(path: Path) -> list[ParsedCommand]:
    """Read parsed commands from a JSON file.

    Raises:
        CommandInputError: If the file is not valid JSON or not a list of commands
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CommandInputError(f"{path} is not UTF-8 text: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CommandInputError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CommandInputError(f"{path} must contain a JSON list of commands")
    return [ParsedCommand.from_dict(item) for item in data]


def run_translate(input_path: str, output: str | None = None) -> int:
    """Run the translate command.

    Args:
        input_path: JSON file with parsed commands
        output: Optional path for the generated TypeScript statements

    Returns:
        Exit code (0 for success, even with diagnostics)
    """
    try:
        commands = load_commands(Path(input_path))
    except (OSError, CommandInputError) as e:
        logger.error(f"Could not load commands: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = build_report(commands)
    print(report.to_json())

    if output:
        Path(output).write_text(render_statements(report))
        logger.info(f"Statements written to {output}")
        print(f"Wrote {len(report.entries)} statements to: {output}", file=sys.stderr)

    return 0


def run_classify(input_path: str) -> int:
    """Run the classify command."""
    try:
        source = Path(input_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read custom command source: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = classify(source)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.is_valid else 1


def run_cli(args: list[str]) -> int:
    """Run the CLI with the given arguments.

    Args:
        args: Command-line arguments (without program name)

    Returns:
        Exit code (0 for success, non-zero for fatal errors)
    """
    try:
        parsed = create_parser().parse_args(args)
    except SystemExit as e:
        return e.code if e.code else 1

    setup_logging(parsed.verbose)

    if parsed.command is None:
        create_parser().print_help(sys.stderr)
        return 1

    if parsed.command == "translate":
        return run_translate(parsed.input, parsed.output)
    elif parsed.command == "classify":
        return run_classify(parsed.input)

    return 1


def main():
    """Entry point for the CLI."""
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
