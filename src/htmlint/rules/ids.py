# src/htmlint/rules/ids.py
import re
from typing import List

from htmlint.dom.core import Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import LintResult, Severity
from .names import RULE_VALID_ID

# Ids that can be used in CSS selectors without escaping.
SAFE_ID_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*$')


@rule_spec(name=RULE_VALID_ID, description="id attributes must be non-empty, without whitespace, and selector friendly")
class ValidId(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            if not node.has_attr("id"):
                continue
            value = node.get_attr("id")
            if is_template_expr(value):
                continue

            if value == "":
                results.append(self.result(doc.filename, node, "id must not be empty"))
            elif any(ch.isspace() for ch in value):
                results.append(self.result(doc.filename, node, f"id '{value}' must not contain whitespace"))
            elif value[0].isdigit():
                results.append(self.result(
                    doc.filename, node,
                    f"id '{value}' should not start with a digit",
                    Severity.WARNING,
                ))
            elif not SAFE_ID_PATTERN.match(value):
                results.append(self.result(
                    doc.filename, node,
                    f"id '{value}' contains characters that must be escaped in CSS selectors",
                    Severity.WARNING,
                ))

        return results


RULES = [ValidId]
