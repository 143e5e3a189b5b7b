# src/htmlint/rules/char_refs.py
import re
from html.entities import html5
from typing import List

from htmlint.dom.core import Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import TEMPLATE_PATTERN
from htmlint.model import LintResult, Severity
from .names import RULE_UNRECOGNIZED_CHAR_REF

# Named references only; numeric ones (&#8212; &#x2014;) never match.
NAMED_CHAR_REF_PATTERN = re.compile(rb'&([a-zA-Z][a-zA-Z0-9]*);')


@rule_spec(name=RULE_UNRECOGNIZED_CHAR_REF, description="Named character references must exist")
class UnrecognizedCharRef(Rule):
    """
    The parser resolves or keeps references as plain text, so the tree cannot
    tell &foobar; from literal text. The check scans the original bytes instead,
    ignoring anything inside {{ ... }} directives.
    """

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        return []

    def check_raw(self, filename: str, content: bytes) -> List[LintResult]:
        results = []
        directives = [m.span() for m in TEMPLATE_PATTERN.finditer(content)]

        for match in NAMED_CHAR_REF_PATTERN.finditer(content):
            start = match.start()
            if any(s <= start < e for s, e in directives):
                continue

            name = match.group(1).decode("ascii")
            if f"{name};" in html5:
                continue

            line_start = content.rfind(b"\n", 0, start) + 1
            results.append(LintResult(
                rule=self.name,
                message=f"unrecognized character reference &{name};",
                filename=filename,
                line=content.count(b"\n", 0, start) + 1,
                col=start - line_start + 1,
                severity=Severity.WARNING,
            ))

        return results


RULES = [UnrecognizedCharRef]
