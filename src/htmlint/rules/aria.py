# src/htmlint/rules/aria.py
from typing import List

from htmlint.dom.core import Node, Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import LintResult, Severity
from htmlint.spec.aria import (
    ABSTRACT_ROLES,
    ARIA_LABELABLE_ELEMENTS,
    NAME_PROHIBITED_ROLES,
    implicit_role,
)
from htmlint.spec.elements import is_custom_element
from .names import RULE_ARIA_LABEL_MISUSE, RULE_NO_ABSTRACT_ROLE

NAMING_ATTRIBUTES = ("aria-label", "aria-labelledby")


@rule_spec(name=RULE_NO_ABSTRACT_ROLE, description="Abstract ARIA roles must not be used")
class NoAbstractRole(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            role = node.get_attr("role")
            if not role or is_template_expr(role):
                continue
            for token in role.lower().split():
                if token in ABSTRACT_ROLES:
                    results.append(self.result(
                        doc.filename, node,
                        f"role '{token}' is abstract and must not be used in content",
                    ))

        return results


@rule_spec(name=RULE_ARIA_LABEL_MISUSE, description="aria-label must only be used on elements that can be named")
class AriaLabelMisuse(Rule):
    """
    aria-label / aria-labelledby on a generic element (div, span, p, ...) is
    ignored by most assistive technology unless the element gets a role.
    """

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            for attr in NAMING_ATTRIBUTES:
                if node.has_attr(attr) and not self._can_be_named(node):
                    results.append(self.result(
                        doc.filename, node,
                        f"{attr} cannot be used on <{node.tag}> without a suitable role",
                        Severity.WARNING,
                    ))

        return results

    @staticmethod
    def _can_be_named(node: Node) -> bool:
        role = node.get_attr("role").strip().lower()
        if is_template_expr(role):
            return True
        if role:
            return role.split()[0] not in NAME_PROHIBITED_ROLES

        if node.tag in ARIA_LABELABLE_ELEMENTS or is_custom_element(node.tag):
            return True
        # Focusable elements are exposed as interactive.
        if node.has_attr("tabindex"):
            return True
        attrs = dict((k.lower(), v) for k, v in node.attrs)
        return implicit_role(node.tag, attrs) not in ("", *NAME_PROHIBITED_ROLES)


RULES = [NoAbstractRole, AriaLabelMisuse]
