# src/htmlint/rules/attributes.py
import re
from typing import List, Optional

from htmlint.dom.core import Node, Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import FrameworkConfig, LintResult, Severity
from htmlint.spec.attributes import (
    AUTOCOMPLETE_ADDRESS_TYPES,
    AUTOCOMPLETE_CONTACT_TYPES,
    AUTOCOMPLETE_SECTION_PREFIXES,
    AUTOCOMPLETE_TOKENS,
    BROWSING_CONTEXT_KEYWORDS,
    INPUT_TYPE_ATTRIBUTES,
    INPUT_TYPE_SPECIFIC_ATTRIBUTES,
    ATTRIBUTE_SPECS,
    get_attr_spec,
)
from htmlint.spec.elements import VALID_ELEMENTS
from htmlint.spec.htmlspec import AttrSpec, AttrType
from htmlint.spec.htmx import is_htmx_attribute
from .names import (
    RULE_ATTRIBUTE_ALLOWED_VALUES,
    RULE_ATTRIBUTE_MISUSE,
    RULE_INPUT_ATTRIBUTES,
    RULE_NO_DUP_CLASS,
    RULE_NO_INLINE_STYLE,
)

INTEGER_PATTERN = re.compile(r'^-?\d+$')
NON_NEGATIVE_PATTERN = re.compile(r'^\d+$')

# Attributes allowed to be negative (tabindex=-1, reversed list start).
SIGNED_INTEGER_ATTRIBUTES = frozenset({"tabindex", "start"})

TARGET_ATTRIBUTES = frozenset({"target", "formtarget"})


def input_type(node: Node) -> str:
    """The effective type of an <input>; a missing or empty type means 'text'."""
    return (node.get_attr("type") or "text").strip().lower()


@rule_spec(name=RULE_ATTRIBUTE_ALLOWED_VALUES, description="Attribute values must be valid for the attribute")
class AttributeAllowedValues(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            for name, value in node.attrs:
                name = name.lower()
                if is_template_expr(value):
                    continue

                if name == "autocomplete":
                    message = self._check_autocomplete(node, value)
                elif name in TARGET_ATTRIBUTES:
                    message = self._check_target(name, value)
                else:
                    spec = get_attr_spec(name, node.tag)
                    message = self._check_value(node, name, value, spec) if spec else None

                if message:
                    results.append(self.result(doc.filename, node, message))

        return results

    @staticmethod
    def _check_value(node: Node, name: str, value: str, spec: AttrSpec) -> Optional[str]:
        if spec.type == AttrType.ENUM:
            normalized = value.strip() if spec.case_sensitive else value.strip().lower()
            tokens = normalized.split() if spec.token_list else [normalized]
            for token in tokens:
                if token not in spec.allowed_values:
                    expected = ", ".join(v for v in spec.allowed_values if v)
                    return (f"invalid value '{token}' for attribute '{name}' on <{node.tag}>; "
                            f"expected one of: {expected}")

        elif spec.type in (AttrType.INTEGER, AttrType.POSITIVE):
            stripped = value.strip()
            pattern = INTEGER_PATTERN if name in SIGNED_INTEGER_ATTRIBUTES else NON_NEGATIVE_PATTERN
            if not pattern.match(stripped):
                kind = "an integer" if name in SIGNED_INTEGER_ATTRIBUTES else "a non-negative integer"
                if spec.type == AttrType.POSITIVE:
                    kind = "a positive integer"
                return f"attribute '{name}' on <{node.tag}> must be {kind}, got '{value}'"
            if spec.type == AttrType.POSITIVE and int(stripped) < 1:
                return f"attribute '{name}' on <{node.tag}> must be a positive integer, got '{value}'"

        elif spec.type == AttrType.PATTERN and spec.pattern:
            if not re.fullmatch(spec.pattern, value):
                return f"attribute '{name}' on <{node.tag}> does not match the expected format"

        return None

    @staticmethod
    def _check_target(name: str, value: str) -> Optional[str]:
        target = value.strip()
        # Names starting with an underscore are reserved for the keywords.
        if target.startswith("_") and target.lower() not in BROWSING_CONTEXT_KEYWORDS:
            return (f"invalid {name} '{target}'; reserved names must be one of: "
                    f"{', '.join(sorted(BROWSING_CONTEXT_KEYWORDS))}")
        return None

    @staticmethod
    def _check_autocomplete(node: Node, value: str) -> Optional[str]:
        tokens = value.strip().lower().split()
        if not tokens:
            return None

        if tokens in (["on"], ["off"]):
            return None
        if "on" in tokens or "off" in tokens:
            return f"autocomplete '{value}': 'on' and 'off' cannot be combined with other tokens"
        if node.tag == "form":
            return f"autocomplete on <form> must be 'on' or 'off', got '{value}'"

        index = 0
        if tokens[index].startswith(AUTOCOMPLETE_SECTION_PREFIXES):
            index += 1
        if index < len(tokens) and tokens[index] in AUTOCOMPLETE_ADDRESS_TYPES:
            index += 1
        if index < len(tokens) and tokens[index] in AUTOCOMPLETE_CONTACT_TYPES:
            index += 1

        if index >= len(tokens) or tokens[index] not in AUTOCOMPLETE_TOKENS:
            return f"invalid autocomplete value '{value}'"
        index += 1

        if index < len(tokens) and tokens[index] == "webauthn":
            index += 1
        if index != len(tokens):
            return f"invalid autocomplete value '{value}': unexpected token '{tokens[index]}'"
        return None


@rule_spec(name=RULE_ATTRIBUTE_MISUSE, description="Attributes must be used on elements that support them")
class AttributeMisuse(Rule):
    """
    Warns about attributes that belong to other elements, deprecated
    presentational attributes, and htmx attributes when htmx support is off.
    With htmx enabled, hx-* attributes are left to the htmx-attributes rule.
    """

    def __init__(self):
        self.htmx_enabled = False

    def configure(self, frameworks: FrameworkConfig) -> None:
        self.htmx_enabled = frameworks.htmx

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            for name in node.attr_names:
                message = self._check_attribute(node, name)
                if message:
                    results.append(self.result(doc.filename, node, message, Severity.WARNING))

        return results

    def _check_attribute(self, node: Node, name: str) -> Optional[str]:
        if is_htmx_attribute(name):
            if self.htmx_enabled:
                return None
            return f"htmx attribute '{name}' used but htmx not enabled"

        if name not in ATTRIBUTE_SPECS:
            return None

        spec = get_attr_spec(name, node.tag)
        if spec is None:
            # Custom and obsolete elements have no fixed attribute set.
            if node.tag not in VALID_ELEMENTS:
                return None
            return f"attribute '{name}' is not valid on <{node.tag}>"

        if spec.deprecated:
            message = f"attribute '{name}' is deprecated"
            if spec.deprecated_message:
                message += f": {spec.deprecated_message}"
            return message

        return None


@rule_spec(name=RULE_INPUT_ATTRIBUTES, description="Input attributes must be supported by the input type")
class InputAttributes(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            if node.tag != "input" or is_template_expr(node.get_attr("type")):
                continue
            kind = input_type(node)
            supported = INPUT_TYPE_ATTRIBUTES.get(kind)
            if supported is None:
                # Unknown types are reported by attribute-allowed-values.
                continue

            for name in node.attr_names:
                if name in INPUT_TYPE_SPECIFIC_ATTRIBUTES and name not in supported:
                    results.append(self.result(
                        doc.filename, node,
                        f"attribute '{name}' is not supported on <input type=\"{kind}\">",
                        Severity.WARNING,
                    ))

        return results


@rule_spec(name=RULE_NO_DUP_CLASS, description="class attributes must not repeat a class name")
class NoDupClass(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []

        for node in doc.html_elements():
            if not node.has_attr("class"):
                continue
            seen = set()
            reported = set()
            for token in node.get_attr("class").split():
                if is_template_expr(token):
                    continue
                if token in seen and token not in reported:
                    results.append(self.result(doc.filename, node, f"class '{token}' is duplicated"))
                    reported.add(token)
                seen.add(token)

        return results


@rule_spec(name=RULE_NO_INLINE_STYLE, description="Inline style attributes should be avoided")
class NoInlineStyle(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        return [
            self.result(
                doc.filename, node,
                "inline style attribute; move styling to a stylesheet",
                Severity.WARNING,
            )
            for node in doc.html_elements()
            if node.has_attr("style")
        ]


RULES = [
    AttributeAllowedValues,
    AttributeMisuse,
    InputAttributes,
    NoDupClass,
    NoInlineStyle,
]
