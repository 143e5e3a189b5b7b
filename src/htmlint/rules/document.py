# src/htmlint/rules/document.py
"""Page-level rules: document language and title."""
from typing import List

from htmlint.dom.core import Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import LintResult, Severity
from .names import RULE_LONG_TITLE, RULE_REQUIRE_LANG

MAX_TITLE_LENGTH = 70


@rule_spec(name=RULE_REQUIRE_LANG, description="<html> must declare the document language")
class RequireLang(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        if doc.is_template_fragment:
            return []

        html = doc.find("html")
        if html is None:
            # A snippet without <html> is not a page.
            if doc.is_fragment:
                return []
            return [self.result(doc.filename, None, "document has no <html> element declaring a lang attribute")]

        lang = html.get_attr("lang")
        if is_template_expr(lang):
            return []
        if not html.has_attr("lang"):
            return [self.result(doc.filename, html, "<html> is missing the lang attribute")]
        if not lang.strip():
            return [self.result(doc.filename, html, "<html> lang attribute must not be empty")]
        return []


@rule_spec(name=RULE_LONG_TITLE, description=f"<title> should not exceed {MAX_TITLE_LENGTH} characters")
class LongTitle(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            if node.tag != "title":
                continue
            text = " ".join(node.text_content().split())
            if len(text) > MAX_TITLE_LENGTH:
                results.append(self.result(
                    doc.filename, node,
                    f"title is {len(text)} characters long; keep it under {MAX_TITLE_LENGTH}",
                    Severity.WARNING,
                ))

        return results


RULES = [RequireLang, LongTitle]
