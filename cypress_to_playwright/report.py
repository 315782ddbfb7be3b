"""Aggregate per-command translation results into a conversion report."""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

from cypress_to_playwright.converter import translate
from cypress_to_playwright.models import ParsedCommand, TranslationResult

logger = logging.getLogger(__name__)

IMPORT_STATEMENTS = {
    "@playwright/test": "import { test, expect, Page } from '@playwright/test';",
    "fs": "import * as fs from 'fs';",
    "path": "import * as path from 'path';",
}


@dataclass
class ReportEntry:
    """Translation of one source command."""

    command: str
    code: str
    requires_suspension: bool
    diagnostics: list[str] = field(default_factory=list)


@dataclass
class ConversionReport:
    """Results for a batch of commands, with every diagnostic kept per entry."""

    generated_at: str
    entries: list[ReportEntry]
    imports: list[str]

    @property
    def diagnostic_count(self) -> int:
        return sum(len(e.diagnostics) for e in self.entries)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "generated_at": self.generated_at,
            "summary": {
                "commands": len(self.entries),
                "with_diagnostics": sum(1 for e in self.entries if e.diagnostics),
                "diagnostics": self.diagnostic_count,
            },
            "imports": self.imports,
            "entries": [asdict(e) for e in self.entries],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def build_report(commands: list[ParsedCommand]) -> ConversionReport:
    """Translate every command and collect the results.

    Args:
        commands: Parsed commands in source order

    Returns:
        ConversionReport with one entry per command and the merged imports
    """
    logger.info(f"Translating {len(commands)} commands")
    entries = []
    imports: set[str] = set()

    for command in commands:
        result: TranslationResult = translate(command)
        imports.update(result.imports)
        entries.append(
            ReportEntry(
                command=command.name,
                code=result.code,
                requires_suspension=result.requires_suspension,
                diagnostics=list(result.diagnostics),
            )
        )

    report = ConversionReport(
        generated_at=datetime.now(UTC).isoformat(),
        entries=entries,
        imports=sorted(imports),
    )
    logger.info(
        f"Translation complete: {len(entries)} commands, "
        f"{report.diagnostic_count} diagnostics"
    )
    return report


def _terminate(code: str) -> str:
    last_line = code.rstrip().splitlines()[-1].strip()
    if last_line.startswith("//") or code.rstrip().endswith(("}", ";")):
        return code
    return f"{code};"


def render_statements(report: ConversionReport) -> str:
    """Render the report's imports and statements as TypeScript source."""
    lines = [
        IMPORT_STATEMENTS.get(module, f"import '{module}';")
        for module in report.imports
    ]
    lines.append("")
    for entry in report.entries:
        if entry.code.strip():
            lines.append(_terminate(entry.code))
    return "\n".join(lines) + "\n"
