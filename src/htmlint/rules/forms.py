# src/htmlint/rules/forms.py
from typing import Dict, List

from htmlint.dom.core import Node, Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import LintResult
from htmlint.spec.elements import BUTTON_LIKE_INPUT_TYPES
from .names import RULE_FORM_DUP_NAME, RULE_MAP_ID_NAME

# Controls whose submitted name must be unique within a form.
NAMED_CONTROLS = frozenset({"input", "select", "textarea"})

# Input types meant to share a name.
SHARED_NAME_INPUT_TYPES = frozenset({"radio", "checkbox"}) | BUTTON_LIKE_INPUT_TYPES


def _shares_name(control: Node, name: str) -> bool:
    if name.endswith("[]"):
        # Array-style names (items[]) are submitted as a list on purpose.
        return True
    if control.tag == "input":
        return control.get_attr("type").strip().lower() in SHARED_NAME_INPUT_TYPES
    return False


@rule_spec(name=RULE_FORM_DUP_NAME, description="Form controls must not share a name")
class FormDupName(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for form in doc.find_all("form"):
            seen: Dict[str, Node] = {}
            for control in form.iter_descendants():
                if not control.is_element() or control.tag not in NAMED_CONTROLS:
                    continue
                name = control.get_attr("name").strip()
                if not name or is_template_expr(name) or _shares_name(control, name):
                    continue

                if name in seen:
                    first = seen[name]
                    results.append(self.result(
                        doc.filename, control,
                        f"duplicate form control name '{name}' (first used on line {first.line})",
                    ))
                else:
                    seen[name] = control

        return results


@rule_spec(name=RULE_MAP_ID_NAME, description="<map> must have a name matching its id")
class MapIdName(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.find_all("map"):
            name = node.get_attr("name")
            if is_template_expr(name):
                continue
            if not name.strip():
                results.append(self.result(doc.filename, node, "<map> must have a non-empty name attribute"))
                continue

            if node.has_attr("id"):
                map_id = node.get_attr("id")
                if not is_template_expr(map_id) and map_id != name:
                    results.append(self.result(
                        doc.filename, node,
                        f"<map> id '{map_id}' must match its name '{name}'",
                    ))

        return results


RULES = [FormDupName, MapIdName]
