# src/htmlint/rules/references.py
from typing import Dict, List

from htmlint.dom.core import Node, Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import LintResult
from htmlint.spec.attributes import ID_REFERENCE_ATTRIBUTES, ID_REFERENCE_LIST_ATTRIBUTES
from htmlint.spec.elements import LABELABLE_ELEMENTS
from .names import RULE_NO_MISSING_REFERENCES, RULE_VALID_FOR


def build_id_index(doc: HTMLDocument) -> Dict[str, Node]:
    """Maps every id in the document to the first element carrying it."""
    index: Dict[str, Node] = {}
    for node in doc.elements():
        if node.has_attr("id"):
            index.setdefault(node.get_attr("id"), node)
    return index


@rule_spec(name=RULE_NO_MISSING_REFERENCES, description="ID references must point to an existing element")
class NoMissingReferences(Rule):
    """
    Checks for, aria-labelledby and the other ID-reference attributes against
    the ids of the same parse unit. {{define}} partials are skipped: their
    references usually resolve in the page that includes them.
    """

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        if doc.is_template_fragment:
            return []

        index = build_id_index(doc)
        results = []

        for node in doc.elements():
            for name, value in node.attrs:
                name = name.lower()
                if name in ID_REFERENCE_ATTRIBUTES:
                    refs = [value.strip()]
                elif name in ID_REFERENCE_LIST_ATTRIBUTES:
                    refs = value.split()
                else:
                    continue

                for ref in refs:
                    if not ref or is_template_expr(ref) or ref in index:
                        continue
                    results.append(self.result(
                        doc.filename, node,
                        f"<{node.tag}> {name} references non-existent id '{ref}'",
                    ))

        return results


@rule_spec(name=RULE_VALID_FOR, description="label[for] must reference a labelable element")
class ValidFor(Rule):
    """Unresolved targets are left to no-missing-references."""

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        index = None
        results = []

        for label in doc.find_all("label"):
            target_id = label.get_attr("for").strip()
            if not target_id or is_template_expr(target_id):
                continue

            if index is None:
                index = build_id_index(doc)
            target = index.get(target_id)
            if target is None:
                continue

            if target.tag not in LABELABLE_ELEMENTS:
                results.append(self.result(
                    doc.filename, label,
                    f"label for attribute references non-labelable element <{target.tag}>",
                ))
            elif target.tag == "input" and target.get_attr("type").strip().lower() == "hidden":
                results.append(self.result(doc.filename, label, "label for attribute references hidden input"))

        return results


RULES = [NoMissingReferences, ValidFor]
