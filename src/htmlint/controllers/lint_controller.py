# src/htmlint/controllers/lint_controller.py
import logging
import re
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from tqdm import tqdm

from htmlint.dom.builder import DOMBuilder
from htmlint.dom.engine import LintEngine
from htmlint.dom.models import HTMLDocument
from htmlint.dom.registry import RuleRegistry
from htmlint.errors import HtmlintError
from htmlint.managers.ignore_manager import IgnoreManager
from htmlint.model import LintResult, LintRunSummary, LinterConfig

logger = logging.getLogger(__name__)

LINTABLE_EXTENSIONS = (".html", ".htm", ".tmpl", ".gohtml")

# A source is linted as a full page when it opens like one: a doctype or <html>
# preceded only by a BOM, whitespace, comments and template directives.
FULL_DOCUMENT_PATTERN = re.compile(
    rb'\A(?:\xef\xbb\xbf)?(?:\s|<!--.*?-->|\{\{.*?\}\})*(?:<!doctype|<html[\s>])',
    re.IGNORECASE | re.DOTALL,
)


def _worker_lint_file(path: str, config: LinterConfig) -> Dict[str, Any]:
    """
    Worker function to lint a single file in a separate process.
    Failures are returned, not raised, so one bad file never stops the run.
    """
    try:
        results = LintController(config).lint_file(path)
        return {"filename": path, "results": [r.model_dump() for r in results]}
    except (HtmlintError, OSError) as e:
        logger.error(f"Worker failed on {path}: {e}")
        return {"filename": path, "error": str(e)}


class LintController:
    """
    Orchestrates linting: file discovery, parsing, rule execution and
    aggregation of findings over a whole run.
    """

    def __init__(self, config: Optional[LinterConfig] = None, ignore_manager: Optional[IgnoreManager] = None):
        self.config = config or LinterConfig()
        self.ignore_manager = ignore_manager or IgnoreManager(self.config.ignore_patterns)

        self.builder = DOMBuilder()
        self.registry = RuleRegistry(self.config.frameworks)
        self.engine = LintEngine(self.registry, self.config.disabled_rules)

    # --- Single sources ---
    def lint_content(self, filename: str, content: Union[bytes, str]) -> List[LintResult]:
        """Lints a template fragment (the default entry point)."""
        raw = self._as_bytes(content)
        doc = self.builder.parse_fragment(filename, raw)
        return self._run_engine(doc, raw)

    def lint_document(self, filename: str, content: Union[bytes, str]) -> List[LintResult]:
        """Lints a complete page; page-level rules apply even without <html>."""
        raw = self._as_bytes(content)
        doc = self.builder.parse_doc(filename, raw)
        return self._run_engine(doc, raw)

    def lint_file(self, path: Union[str, Path]) -> List[LintResult]:
        filename = str(path)
        with open(path, "rb") as f:
            raw = f.read()

        if self.opens_like_page(raw):
            return self.lint_document(filename, raw)
        return self.lint_content(filename, raw)

    @staticmethod
    def opens_like_page(raw: bytes) -> bool:
        return bool(FULL_DOCUMENT_PATTERN.match(raw)) and not DOMBuilder.is_template_fragment(raw)

    def _run_engine(self, doc: HTMLDocument, raw: bytes) -> List[LintResult]:
        results = self.engine.run(doc, raw)
        if self.config.errors_only:
            results = [r for r in results if r.is_error]
        return results

    @staticmethod
    def _as_bytes(content: Union[bytes, str]) -> bytes:
        return content.encode("utf-8") if isinstance(content, str) else content

    # --- Runs over paths ---
    def discover_files(self, paths: Iterable[Union[str, Path]]) -> Tuple[List[str], Dict[str, str]]:
        """
        Expands files and directories into the list of files to lint.
        Explicit files are kept whatever their extension; directories are
        searched recursively for template extensions. Returns the files and
        the paths that do not exist.
        """
        files: List[str] = []
        missing: Dict[str, str] = {}
        seen = set()

        for raw_path in paths:
            path = Path(raw_path)
            if path.is_dir():
                candidates = sorted(
                    p for p in path.rglob("*")
                    if p.is_file() and p.suffix.lower() in LINTABLE_EXTENSIONS
                )
            elif path.is_file():
                candidates = [path]
            else:
                logger.error(f"Path not found: {raw_path}")
                missing[str(raw_path)] = "no such file or directory"
                continue

            for candidate in candidates:
                name = str(candidate)
                if name in seen:
                    continue
                seen.add(name)
                if self.ignore_manager.is_ignored(candidate):
                    logger.debug(f"Ignoring {name}")
                    continue
                files.append(name)

        return files, missing

    def run(self, paths: Iterable[Union[str, Path]], workers: int = 1, progress: bool = False) -> LintRunSummary:
        """Lints every file under `paths`, optionally across worker processes."""
        files, failed_files = self.discover_files(paths)
        results: List[LintResult] = []
        logger.info(f"Linting {len(files)} file(s) with {max(workers, 1)} worker(s)")

        func = partial(_worker_lint_file, config=self.config)

        if workers > 1 and len(files) > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                outcomes = self._collect(executor.map(func, files), len(files), progress)
        else:
            outcomes = self._collect((self._lint_one(f) for f in files), len(files), progress)

        for outcome in outcomes:
            if "error" in outcome:
                failed_files[outcome["filename"]] = outcome["error"]
                continue
            results.extend(LintResult(**r) for r in outcome["results"])

        results.sort(key=lambda r: (r.filename, r.line, r.col, r.rule))
        return LintRunSummary(
            results=results,
            files_checked=len(files) - sum(1 for f in files if f in failed_files),
            failed_files=failed_files,
        )

    def _lint_one(self, path: str) -> Dict[str, Any]:
        """Sequential counterpart of the worker; reuses this controller's registry."""
        try:
            return {"filename": path, "results": [r.model_dump() for r in self.lint_file(path)]}
        except (HtmlintError, OSError) as e:
            logger.error(f"Failed to lint {path}: {e}")
            return {"filename": path, "error": str(e)}

    @staticmethod
    def _collect(outcomes: Iterable[Dict[str, Any]], total: int, progress: bool) -> List[Dict[str, Any]]:
        return list(tqdm(outcomes, total=total, disable=not progress, desc="Linting", unit="file"))
