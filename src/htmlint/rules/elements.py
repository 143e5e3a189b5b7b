# src/htmlint/rules/elements.py
"""
Content-model rules: element names, parent/ancestor constraints, permitted and
forbidden content, void elements, required children and attributes, deprecation.

Each constraint is its own rule so it can be disabled independently; when
several apply to the same node all of them report.
"""
import re
from typing import List

from htmlint.dom.core import Node, NodeType, Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import TEMPLATE_PATTERN
from htmlint.model import LintResult
from htmlint.spec.elements import (
    ALWAYS_ALLOWED_CHILDREN,
    FORBIDDEN_DESCENDANTS,
    OBSOLETE_ELEMENTS,
    REQUIRED_ANCESTORS,
    VALID_ELEMENTS,
    VOID_ELEMENTS,
    get_spec,
    is_custom_element,
)
from .names import (
    RULE_DEPRECATED,
    RULE_ELEMENT_NAME,
    RULE_ELEMENT_PERMITTED_CONTENT,
    RULE_ELEMENT_PERMITTED_PARENT,
    RULE_ELEMENT_REQUIRED_ANCESTOR,
    RULE_ELEMENT_REQUIRED_ATTRIBUTES,
    RULE_ELEMENT_REQUIRED_CONTENT,
    RULE_VOID_CONTENT,
)

VOID_END_TAG_PATTERN = re.compile(
    rb'</(' + b'|'.join(t.encode() for t in sorted(VOID_ELEMENTS)) + rb')\s*>',
    re.IGNORECASE,
)


def _in_template_element(node: Node) -> bool:
    # <template> content is inert and has no fixed context.
    return node.has_ancestor("template")


def _required_parent(tag: str) -> tuple:
    spec = get_spec(tag)
    return (spec.required_parent,) if spec.required_parent else ()


@rule_spec(name=RULE_ELEMENT_NAME, description="Elements must be standard HTML or valid custom elements")
class ElementName(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            tag = node.tag
            if tag in VALID_ELEMENTS or tag in OBSOLETE_ELEMENTS or is_custom_element(tag):
                continue
            results.append(self.result(doc.filename, node, f"<{tag}> is not a valid element name"))
        return results


@rule_spec(name=RULE_ELEMENT_PERMITTED_PARENT, description="Elements must appear inside a permitted parent")
class ElementPermittedParent(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            permitted = get_spec(node.tag).permitted_parents
            parent = node.parent
            if not permitted or parent is None or parent.type != NodeType.ELEMENT:
                continue
            if parent.tag == "template" or parent.tag in permitted:
                continue
            results.append(self.result(
                doc.filename, node,
                f"<{node.tag}> is not permitted as a child of <{parent.tag}>; "
                f"expected parent: {', '.join(f'<{p}>' for p in permitted)}",
            ))
        return results


@rule_spec(name=RULE_ELEMENT_REQUIRED_ANCESTOR, description="Elements must have their required ancestor")
class ElementRequiredAncestor(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            required = REQUIRED_ANCESTORS.get(node.tag) or _required_parent(node.tag)
            if not required or _in_template_element(node):
                continue
            if node.has_ancestor(*required):
                continue
            if doc.is_template_fragment:
                # The chain ended at the root of a {{define}} partial; the
                # including template supplies the missing ancestor.
                continue
            results.append(self.result(
                doc.filename, node,
                f"<{node.tag}> must be used inside {' or '.join(f'<{a}>' for a in required)}",
            ))
        return results


@rule_spec(name=RULE_ELEMENT_PERMITTED_CONTENT, description="Elements may only contain permitted content")
class ElementPermittedContent(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            results.extend(self._check_children(doc, node))
            results.extend(self._check_forbidden_ancestors(doc, node))
        return results

    def _check_children(self, doc: HTMLDocument, node: Node) -> List[LintResult]:
        permitted = get_spec(node.tag).permitted_content
        if not permitted:
            return []

        results = []
        for child in node.element_children():
            if child.tag in permitted or child.tag in ALWAYS_ALLOWED_CHILDREN:
                continue
            results.append(self.result(
                doc.filename, child,
                f"<{child.tag}> is not permitted content of <{node.tag}>",
            ))
        return results

    def _check_forbidden_ancestors(self, doc: HTMLDocument, node: Node) -> List[LintResult]:
        # Reported once per offending node, at the closest ancestor that forbids it.
        if node.tag == "input" and node.get_attr("type").strip().lower() == "hidden":
            # Hidden inputs are not interactive content.
            return []
        for ancestor in node.ancestors():
            if ancestor.type != NodeType.ELEMENT:
                break
            forbidden = set(FORBIDDEN_DESCENDANTS.get(ancestor.tag, ()))
            forbidden.update(get_spec(ancestor.tag).forbidden_content)
            if node.tag in forbidden:
                return [self.result(
                    doc.filename, node,
                    f"<{node.tag}> must not be a descendant of <{ancestor.tag}>",
                )]
        return []


@rule_spec(name=RULE_VOID_CONTENT, description="Void elements cannot have content or an end tag")
class VoidContent(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            if node.tag in VOID_ELEMENTS and node.children:
                results.append(self.result(doc.filename, node, f"void element <{node.tag}> cannot have content"))
        return results

    def check_raw(self, filename: str, content: bytes) -> List[LintResult]:
        # The parser silently drops end tags of void elements, so look for them in the source.
        results = []
        directives = [m.span() for m in TEMPLATE_PATTERN.finditer(content)]
        for match in VOID_END_TAG_PATTERN.finditer(content):
            start = match.start()
            if any(s <= start < e for s, e in directives):
                continue
            line = content.count(b"\n", 0, start) + 1
            col = start - (content.rfind(b"\n", 0, start) + 1) + 1
            tag = match.group(1).decode().lower()
            results.append(LintResult(
                rule=self.name,
                message=f"void element <{tag}> must not have an end tag",
                filename=filename,
                line=line,
                col=col,
            ))
        return results


@rule_spec(name=RULE_ELEMENT_REQUIRED_CONTENT, description="Elements must contain their required children")
class ElementRequiredContent(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        if doc.is_template_fragment:
            return []

        results = []
        for node in doc.html_elements():
            required = get_spec(node.tag).required_children
            if not required:
                continue
            present = {c.tag for c in node.element_children()}
            for tag in required:
                if tag not in present:
                    results.append(self.result(
                        doc.filename, node,
                        f"<{node.tag}> is missing required child <{tag}>",
                    ))
        return results


@rule_spec(name=RULE_ELEMENT_REQUIRED_ATTRIBUTES, description="Elements must have their required attributes")
class ElementRequiredAttributes(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            for attr in get_spec(node.tag).required_attributes:
                if not node.has_attr(attr):
                    results.append(self.result(
                        doc.filename, node,
                        f"<{node.tag}> is missing required attribute '{attr}'",
                    ))
        return results


@rule_spec(name=RULE_DEPRECATED, description="Obsolete and deprecated elements should not be used")
class Deprecated(Rule):

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        results = []
        for node in doc.html_elements():
            guidance = OBSOLETE_ELEMENTS.get(node.tag)
            if guidance is None:
                spec = get_spec(node.tag)
                if not spec.deprecated:
                    continue
                guidance = spec.deprecated_message
            message = f"<{node.tag}> is deprecated"
            if guidance:
                message += f": {guidance}"
            results.append(self.result(doc.filename, node, message))
        return results


RULES = [
    ElementName,
    ElementPermittedParent,
    ElementRequiredAncestor,
    ElementPermittedContent,
    VoidContent,
    ElementRequiredContent,
    ElementRequiredAttributes,
    Deprecated,
]
