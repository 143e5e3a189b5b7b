# src/htmlint/rules/names.py
"""Stable rule identifiers. Configuration and reports key off these strings."""

RULE_VALID_ID = "valid-id"
RULE_ELEMENT_NAME = "element-name"
RULE_ATTRIBUTE_ALLOWED_VALUES = "attribute-allowed-values"
RULE_NO_MISSING_REFERENCES = "no-missing-references"
RULE_FORM_DUP_NAME = "form-dup-name"
RULE_MAP_ID_NAME = "map-id-name"
RULE_NO_DUP_CLASS = "no-dup-class"
RULE_ALLOWED_LINKS = "allowed-links"
RULE_REQUIRE_LANG = "require-lang"
RULE_LONG_TITLE = "long-title"
RULE_NO_INLINE_STYLE = "no-inline-style"
RULE_VALID_FOR = "valid-for"
RULE_UNRECOGNIZED_CHAR_REF = "unrecognized-char-ref"
RULE_ATTRIBUTE_MISUSE = "attribute-misuse"
RULE_HTMX_ATTRIBUTES = "htmx-attributes"

RULE_ELEMENT_PERMITTED_PARENT = "element-permitted-parent"
RULE_ELEMENT_REQUIRED_ANCESTOR = "element-required-ancestor"
RULE_ELEMENT_PERMITTED_CONTENT = "element-permitted-content"
RULE_VOID_CONTENT = "void-content"
RULE_ELEMENT_REQUIRED_CONTENT = "element-required-content"
RULE_ELEMENT_REQUIRED_ATTRIBUTES = "element-required-attributes"
RULE_DEPRECATED = "deprecated"
RULE_INPUT_ATTRIBUTES = "input-attributes"
RULE_NO_ABSTRACT_ROLE = "no-abstract-role"
RULE_ARIA_LABEL_MISUSE = "aria-label-misuse"
