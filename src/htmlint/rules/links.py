# src/htmlint/rules/links.py
import re
from typing import List

from htmlint.dom.core import Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import LintResult
from htmlint.spec.attributes import DISALLOWED_URL_SCHEMES, LINK_ATTRIBUTES
from .names import RULE_ALLOWED_LINKS

SCHEME_PATTERN = re.compile(r'^([a-zA-Z][a-zA-Z0-9+.-]*):')

# Browsers ignore these characters inside a scheme ("java\tscript:" still runs).
_IGNORED_URL_CHARS = re.compile(r'[\t\n\r]')

# data: is only disallowed where the URL is navigated to; inline images are fine.
NAVIGATION_ATTRIBUTES = frozenset({"href", "action", "formaction"})


@rule_spec(name=RULE_ALLOWED_LINKS, description="Links must not use script or data URLs")
class AllowedLinks(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            for name, value in node.attrs:
                name = name.lower()
                if name not in LINK_ATTRIBUTES or is_template_expr(value):
                    continue

                url = _IGNORED_URL_CHARS.sub("", value.strip())
                match = SCHEME_PATTERN.match(url)
                if not match:
                    continue

                scheme = match.group(1).lower()
                if scheme not in DISALLOWED_URL_SCHEMES:
                    continue
                if scheme == "data" and name not in NAVIGATION_ATTRIBUTES:
                    continue

                results.append(self.result(
                    doc.filename, node,
                    f"<{node.tag}> {name} uses disallowed '{scheme}:' URL",
                ))

        return results


RULES = [AllowedLinks]
