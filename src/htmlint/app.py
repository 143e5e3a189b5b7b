# src/htmlint/app.py
from __future__ import annotations

import argparse
import logging
import sys

from htmlint.controllers.lint_controller import LintController
from htmlint.controllers.report_controller import REPORTERS, get_reporter
from htmlint.dom.registry import RuleRegistry
from htmlint.managers.config_manager import ConfigManager
from htmlint.managers.ignore_manager import IgnoreManager
from htmlint.model import SUPPORTED_HTMX_VERSIONS
from htmlint.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LINT_ERRORS = 1
EXIT_USAGE = 2

EPILOG = """examples:
  htmlint web/
  htmlint -q web/**/*.html
  htmlint --format=json web/ > lint-results.json
  htmlint --htmx --htmx-version=4 templates/
  htmlint --disable=no-inline-style web/
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="htmlint",
        description="HTML linter for Go-style templates",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("paths", nargs="*", help="Files or directories to lint")
    parser.add_argument("-f", "--format", choices=sorted(REPORTERS), default="text", help="Output format (default: text)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only show errors, not warnings")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--ignore", action="append", default=[], metavar="PATTERN", help="Glob pattern to ignore (repeatable)")
    parser.add_argument("--disable", action="append", default=[], metavar="RULE", help="Disable a rule (repeatable)")
    parser.add_argument("--htmx", action="store_true", default=None, help="Enable htmx attribute validation")
    parser.add_argument("--htmx-version", default=None, help=f"htmx major version ({', '.join(SUPPORTED_HTMX_VERSIONS)})")
    parser.add_argument("--config", default=None, metavar="PATH", help="Path to a .htmlvalidate.json file")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--list-rules", action="store_true", help="List available rules and exit")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def print_rules() -> None:
    print("Available rules:")
    print()
    for rule_cls in RuleRegistry.rule_classes():
        print(f"  {rule_cls.name:<28} {rule_cls.description}")


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the command line. Returns the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    configure_logger(args.log_level, silenced_loggers={"bs4": "ERROR"})

    if args.list_rules:
        print_rules()
        return EXIT_OK

    if not args.paths:
        parser.print_usage(sys.stderr)
        print("htmlint: error: no files or directories specified", file=sys.stderr)
        return EXIT_USAGE

    if args.workers < 1:
        print("htmlint: error: --workers must be at least 1", file=sys.stderr)
        return EXIT_USAGE

    config_manager = ConfigManager(args.config)
    config = ConfigManager.apply_overrides(
        config_manager.load(),
        disable=args.disable,
        ignore=args.ignore,
        errors_only=True if args.quiet else None,
        htmx=args.htmx,
        htmx_version=args.htmx_version,
    )

    ignore_manager = IgnoreManager.from_directory(".", extra_patterns=config.ignore_patterns)
    controller = LintController(config, ignore_manager)
    summary = controller.run(args.paths, workers=args.workers, progress=args.format == "text" and sys.stderr.isatty())

    reporter = get_reporter(args.format, color=not args.no_color and sys.stdout.isatty())
    reporter.report(summary)

    return EXIT_LINT_ERRORS if summary.has_errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
