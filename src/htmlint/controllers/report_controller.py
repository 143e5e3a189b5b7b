# src/htmlint/controllers/report_controller.py
import json
import sys
from typing import Dict, Optional, TextIO, Type

from htmlint.model import LintResult, LintRunSummary, Severity

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
COLORS = {
    Severity.ERROR: "\033[31m",
    Severity.WARNING: "\033[33m",
}


class Reporter:
    """Writes the outcome of a run to a stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def report(self, summary: LintRunSummary) -> None:
        raise NotImplementedError


class TextReporter(Reporter):
    """
    One line per finding:
        templates/index.html:12:5: error: duplicate id 'main' (valid-id)
    followed by a summary line. Colours are only used when enabled.
    """

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        super().__init__(stream)
        self.color = color

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{RESET}" if self.color else text

    def format_result(self, result: LintResult) -> str:
        location = f"{result.filename}:{result.line}:{result.col}:"
        severity = f"{result.severity.value}:"
        return (
            f"{self._paint(location, BOLD)} "
            f"{self._paint(severity, COLORS[result.severity])} "
            f"{result.message} "
            f"{self._paint(f'({result.rule})', DIM)}"
        )

    def format_summary(self, summary: LintRunSummary) -> str:
        errors, warnings = summary.error_count, summary.warning_count
        files = f"{summary.files_checked} file{'s' if summary.files_checked != 1 else ''} checked"
        if not errors and not warnings:
            line = f"{files}, no problems found"
        else:
            line = (
                f"{files}, {errors} error{'s' if errors != 1 else ''}, "
                f"{warnings} warning{'s' if warnings != 1 else ''}"
            )
        if summary.failed_files:
            line += f", {len(summary.failed_files)} file(s) could not be linted"
        return line

    def report(self, summary: LintRunSummary) -> None:
        for result in summary.results:
            print(self.format_result(result), file=self.stream)
        for filename, reason in summary.failed_files.items():
            print(f"{filename}: {self._paint('failed:', COLORS[Severity.ERROR])} {reason}", file=self.stream)

        if summary.results or summary.failed_files:
            print(file=self.stream)
        print(self.format_summary(summary), file=self.stream)


class JSONReporter(Reporter):
    """Writes the findings as a JSON array of result records."""

    def report(self, summary: LintRunSummary) -> None:
        payload = [r.model_dump(mode="json") for r in summary.results]
        json.dump(payload, self.stream, indent=2)
        self.stream.write("\n")


REPORTERS: Dict[str, Type[Reporter]] = {
    "text": TextReporter,
    "json": JSONReporter,
}


def get_reporter(fmt: str, stream: Optional[TextIO] = None, color: bool = True) -> Reporter:
    if fmt not in REPORTERS:
        raise ValueError(f"Unknown output format '{fmt}'. Choose from: {', '.join(REPORTERS)}")
    if fmt == "text":
        return TextReporter(stream, color=color)
    return REPORTERS[fmt](stream)
