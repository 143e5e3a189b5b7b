# src/htmlint/rules/htmx.py
"""
Validation of the small languages inside htmx attributes: hx-swap, hx-trigger,
hx-target, hx-on:* event names and the JSON of hx-vals / hx-headers, plus the
attribute vocabulary of the configured htmx major version.
"""
import json
import re
from typing import List, Optional

from htmlint.dom.core import Node, Rule, rule_spec
from htmlint.dom.models import HTMLDocument
from htmlint.dom.preprocessor import is_template_expr
from htmlint.model import FrameworkConfig, LintResult, Severity
from htmlint.spec.elements import VALID_ELEMENTS, is_custom_element
from htmlint.spec.htmx import (
    DOM_EVENTS,
    HTMX_ATTRIBUTES,
    HTMX_EVENT_PREFIX,
    HTMX_ON_PREFIXES,
    HTMX_V2_EVENTS_LOWER,
    HTMX_V4_ACTIONS_LOWER,
    HTMX_V4_DEPRECATED_ATTRIBUTES,
    HTMX_V4_ONLY_ATTRIBUTES,
    HTMX_V4_PHASES,
    HTMX_V4_STANDALONE_EVENTS,
    INTERSECT_OPTIONS,
    JS_VALUE_PREFIXES,
    JSON_ATTRIBUTES,
    QUEUE_MODES,
    REQUEST_ATTRIBUTES,
    SWAP_BOOLEAN_MODIFIERS,
    SWAP_MODIFIERS,
    SWAP_POSITION_MODIFIERS,
    SWAP_POSITIONS,
    SWAP_TIME_MODIFIERS,
    SWAP_VALUES,
    SWAP_VALUES_V4_ONLY,
    TARGET_KEYWORDS,
    TARGET_SPECIAL_VALUES,
    TIME_PATTERN,
    TRIGGER_MODIFIERS,
    TRIGGER_TIME_MODIFIERS,
    is_htmx_attribute,
    is_htmx_on_attribute,
    normalize_htmx_attribute,
)
from .names import RULE_HTMX_ATTRIBUTES

# Separator between an htmx 4 event phase and its action (htmx:after:request, htmx:after-request).
_V4_EVENT_SEPARATOR = re.compile(r'[:-]')


def _normalize_event(name: str) -> str:
    # htmx 2 fires both camelCase and kebab-case variants of its events.
    return name.lower().replace("-", "")


_V2_EVENTS_NORMALIZED = frozenset(_normalize_event(e) for e in HTMX_V2_EVENTS_LOWER)


@rule_spec(name=RULE_HTMX_ATTRIBUTES, description="htmx attribute names and values must be valid")
class HtmxAttributes(Rule):
    """
    Does nothing unless htmx support is enabled. The major version selects
    which swap strategies, events and attributes are known.
    """

    def __init__(self):
        self.htmx_enabled = False
        self.htmx_version = "2"

    def configure(self, frameworks: FrameworkConfig) -> None:
        self.htmx_enabled = frameworks.htmx
        self.htmx_version = frameworks.htmx_version

    @property
    def is_v4(self) -> bool:
        return self.htmx_version == "4"

    def check(self, doc: HTMLDocument) -> List[LintResult]:
        if not self.htmx_enabled:
            return []

        results: List[LintResult] = []
        for node in doc.html_elements():
            for key, value in node.attrs:
                if not is_htmx_attribute(key):
                    continue
                name = normalize_htmx_attribute(key)

                for message, severity in self._check_attribute(name, value):
                    results.append(self.result(doc.filename, node, message, severity))

            message = self._check_submit_button(node)
            if message:
                results.append(self.result(doc.filename, node, message, Severity.WARNING))

        return results

    def _check_attribute(self, name: str, value: str):
        if is_htmx_on_attribute(name):
            return self.validate_hx_on(name)

        findings = []
        vocabulary = self.validate_attribute_name(name)
        if vocabulary:
            findings.append((vocabulary, Severity.WARNING))

        if name == "hx-swap":
            findings.extend(self.validate_swap(value))
        elif name == "hx-trigger":
            findings.extend(self.validate_trigger(value))
        elif name == "hx-target":
            findings.extend(self.validate_target(value))
        elif name in JSON_ATTRIBUTES:
            findings.extend(self.validate_json(name, value))
        return findings

    # --- Attribute vocabulary ---

    def validate_attribute_name(self, name: str) -> Optional[str]:
        if name in HTMX_ATTRIBUTES:
            return None
        if name in HTMX_V4_ONLY_ATTRIBUTES:
            return None if self.is_v4 else f"htmx attribute '{name}' is only available in htmx 4"
        if name in HTMX_V4_DEPRECATED_ATTRIBUTES:
            return f"htmx attribute '{name}' is deprecated in htmx 4" if self.is_v4 else None
        return f"unknown htmx attribute '{name}'"

    # --- hx-swap ---

    def validate_swap(self, value: str):
        """hx-swap: a strategy followed by name:value modifiers."""
        if not value or is_template_expr(value):
            return []

        parts = value.split()
        if not parts:
            return []

        strategy = parts[0].lower()
        if strategy in SWAP_VALUES_V4_ONLY and not self.is_v4:
            return [(f"hx-swap value '{strategy}' is only available in htmx 4", Severity.WARNING)]
        if strategy not in SWAP_VALUES:
            return [(f"invalid hx-swap value '{parts[0]}'", Severity.ERROR)]

        findings = []
        for modifier in parts[1:]:
            if ":" not in modifier:
                findings.append((f"invalid hx-swap modifier '{modifier}' (missing colon)", Severity.ERROR))
                continue

            mod_name, mod_value = modifier.split(":", 1)
            mod_name = mod_name.lower()
            if mod_name not in SWAP_MODIFIERS:
                findings.append((f"unknown hx-swap modifier '{mod_name}'", Severity.WARNING))
                continue

            if mod_name in SWAP_TIME_MODIFIERS:
                if not TIME_PATTERN.match(mod_value):
                    findings.append((
                        f"hx-swap {mod_name} modifier requires a time value (e.g., '1s', '500ms')",
                        Severity.ERROR,
                    ))
            elif mod_name in SWAP_POSITION_MODIFIERS:
                if mod_value.lower() not in SWAP_POSITIONS and not mod_value.startswith("#"):
                    findings.append((
                        f"hx-swap {mod_name} modifier value should be 'top', 'bottom', or a selector",
                        Severity.WARNING,
                    ))
            elif mod_name in SWAP_BOOLEAN_MODIFIERS:
                if mod_value not in ("true", "false"):
                    findings.append((
                        f"hx-swap {mod_name} modifier should be 'true' or 'false'",
                        Severity.ERROR,
                    ))

        return findings

    # --- hx-trigger ---

    def validate_trigger(self, value: str):
        """hx-trigger: comma separated trigger specs, each validated on its own."""
        if not value or is_template_expr(value):
            return []

        findings = []
        for trigger in value.split(","):
            trigger = trigger.strip()
            if trigger:
                findings.extend(self._validate_single_trigger(trigger))
        return findings

    @staticmethod
    def _validate_single_trigger(trigger: str):
        parts = trigger.split()
        event = parts[0].lower()

        if event == "every":
            if len(parts) < 2:
                return [("hx-trigger 'every' requires a time value (e.g., 'every 1s')", Severity.ERROR)]
            if not TIME_PATTERN.match(parts[1]):
                return [("hx-trigger 'every' requires a valid time value (e.g., '1s', '500ms')", Severity.ERROR)]
            return []

        if event == "intersect":
            findings = []
            for option in parts[1:]:
                option_name = option.split(":", 1)[0]
                if option == "once" or (":" in option and option_name in INTERSECT_OPTIONS):
                    continue
                findings.append((f"unknown intersect modifier '{option}'", Severity.WARNING))
            return findings

        findings = []
        selector_follows = False
        for modifier in parts[1:]:
            if selector_follows:
                # from:closest form, target:find .item
                selector_follows = False
                continue
            if modifier.startswith("[") and modifier.endswith("]"):
                # Event filter expression, e.g. [ctrlKey]
                continue

            if ":" not in modifier:
                if modifier.lower() not in TRIGGER_MODIFIERS:
                    findings.append((f"unknown hx-trigger modifier '{modifier}'", Severity.WARNING))
                continue

            mod_name, mod_value = modifier.split(":", 1)
            mod_name = mod_name.lower()
            if mod_name not in TRIGGER_MODIFIERS:
                findings.append((f"unknown hx-trigger modifier '{mod_name}'", Severity.WARNING))
                continue

            if mod_name in ("from", "target") and mod_value.lower() in TARGET_KEYWORDS:
                selector_follows = True
            elif mod_name in TRIGGER_TIME_MODIFIERS and not TIME_PATTERN.match(mod_value):
                findings.append((
                    f"hx-trigger {mod_name} requires a time value (e.g., '1s', '500ms')",
                    Severity.ERROR,
                ))
            elif mod_name == "queue" and mod_value.lower() not in QUEUE_MODES:
                findings.append((
                    "hx-trigger queue mode should be 'first', 'last', 'all', or 'none'",
                    Severity.ERROR,
                ))

        return findings

    # --- hx-target ---

    @staticmethod
    def validate_target(value: str):
        """
        hx-target: a special value, a keyword followed by a selector, or a CSS
        selector. Selectors cannot be validated without a CSS parser, so only an
        unknown bare word in keyword position is reported.
        """
        if not value or is_template_expr(value):
            return []

        value = value.strip()
        if " " not in value:
            return []

        keyword = value.split(" ", 1)[0]
        lower = keyword.lower()
        if lower in TARGET_KEYWORDS or lower in TARGET_SPECIAL_VALUES:
            return []
        if keyword[:1] in ("#", ".", "[", "*", ":"):
            return []
        if lower in VALID_ELEMENTS or is_custom_element(lower):
            return []

        return [(
            f"invalid hx-target keyword '{keyword}'; expected 'this', 'closest', 'find', "
            f"'next', 'previous', or a CSS selector",
            Severity.WARNING,
        )]

    # --- hx-on:* ---

    def validate_hx_on(self, attr_name: str):
        """
        hx-on:click, hx-on-click (dash form), hx-on:htmx:after-request and the
        shorthands hx-on::after-request / hx-on--after-request for htmx events.
        """
        for prefix in HTMX_ON_PREFIXES:
            if attr_name.startswith(prefix):
                event = attr_name[len(prefix):]
                break
        else:
            return []

        if not event:
            return [("hx-on:* requires an event name", Severity.ERROR)]

        if event[0] in (":", "-"):
            event = HTMX_EVENT_PREFIX + event[1:]

        if event.lower() in DOM_EVENTS:
            return []

        if event.lower().startswith(HTMX_EVENT_PREFIX):
            return self.validate_htmx_event(event)

        return [(
            f"unknown event '{event}' in hx-on:*; if this is a custom event, ignore this warning",
            Severity.WARNING,
        )]

    def validate_htmx_event(self, event: str):
        if self.is_v4:
            return self._validate_v4_event(event)

        if _normalize_event(event) in _V2_EVENTS_NORMALIZED:
            return []
        return [(f"unknown htmx event '{event}'", Severity.WARNING)]

    @staticmethod
    def _validate_v4_event(event: str):
        remainder = event[len(HTMX_EVENT_PREFIX):]
        if not remainder:
            return [(f"invalid htmx event format '{event}'", Severity.ERROR)]

        parts = _V4_EVENT_SEPARATOR.split(remainder, maxsplit=1)
        phase = parts[0].lower()

        if phase not in HTMX_V4_PHASES:
            if phase in HTMX_V4_STANDALONE_EVENTS and len(parts) == 1:
                return []
            return [(f"unknown htmx 4 event phase '{parts[0]}' in '{event}'", Severity.WARNING)]

        if len(parts) > 1 and parts[1]:
            action = parts[1].split(":", 1)[0]
            if _normalize_event(action) not in HTMX_V4_ACTIONS_LOWER:
                return [(f"unknown htmx 4 event action '{action}' in '{event}'", Severity.WARNING)]

        return []

    # --- hx-vals / hx-headers ---

    @staticmethod
    def validate_json(attr_name: str, value: str):
        if not value or is_template_expr(value):
            return []
        if attr_name == "hx-vals" and value.lstrip().startswith(JS_VALUE_PREFIXES):
            # A JavaScript expression; evaluated by htmx at request time.
            return []

        try:
            json.loads(value)
        except json.JSONDecodeError as e:
            return [(f"{attr_name} contains invalid JSON: {e.msg} at position {e.pos}", Severity.ERROR)]
        return []

    # --- Submit buttons ---

    @staticmethod
    def _check_submit_button(node: Node) -> Optional[str]:
        """
        A request attribute on a form's submit button sends the request directly,
        skipping the browser's constraint validation on the form.
        """
        if node.tag == "button":
            if node.get_attr("type").strip().lower() not in ("", "submit"):
                return None
        elif node.tag == "input":
            if node.get_attr("type").strip().lower() != "submit":
                return None
        else:
            return None

        request_attr = next((a for a in REQUEST_ATTRIBUTES if node.has_attr(a)), None)
        if request_attr is None or not node.has_ancestor("form"):
            return None

        return (f"{request_attr} on submit button inside form may bypass form validation; "
                f"consider moving to the form element")


RULES = [HtmxAttributes]
