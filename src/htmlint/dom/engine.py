# src/htmlint/dom/engine.py
import logging
from typing import Iterable, List, Optional

from htmlint.model import LintResult
from .models import HTMLDocument
from .registry import RuleRegistry

logger = logging.getLogger(__name__)


class LintEngine:
    """
    Runs every enabled rule of a registry against one parsed document.

    Tree checks see the document, raw-byte checks see the original (not
    preprocessed) content. A rule that crashes is logged and skipped so it
    never fails the file.
    """

    def __init__(self, registry: RuleRegistry, disabled_rules: Optional[Iterable[str]] = None):
        self.registry = registry
        self.disabled_rules = set(disabled_rules or ())

        unknown = self.disabled_rules - set(registry.names())
        if unknown:
            logger.warning(f"Disabled rules not found in registry: {', '.join(sorted(unknown))}")

    def is_enabled(self, rule_name: str) -> bool:
        return rule_name not in self.disabled_rules

    def run(self, doc: HTMLDocument, raw_content: Optional[bytes] = None) -> List[LintResult]:
        results: List[LintResult] = []

        for rule in self.registry.all():
            if not self.is_enabled(rule.name):
                continue

            try:
                results.extend(rule.check(doc))
            except Exception as e:
                logger.error(f"Rule '{rule.name}' failed on {doc.filename}: {e}", exc_info=True)

            if rule.raw_checker and raw_content is not None:
                try:
                    results.extend(rule.check_raw(doc.filename, raw_content))
                except Exception as e:
                    logger.error(f"Raw check of rule '{rule.name}' failed on {doc.filename}: {e}", exc_info=True)

        return results
