# src/htmlint/dom/preprocessor.py
import logging
import re
from typing import Tuple

logger = logging.getLogger(__name__)

# Placeholder for interpolated values. Valid as attribute value and as text.
PLACEHOLDER = b"TMPL"
TEMPLATE_OPEN = "{{"

# {{ ... }}, non-greedy so adjacent directives stay separate.
TEMPLATE_PATTERN = re.compile(rb'\{\{[\s\S]*?\}\}')

# {{if ...}}A{{else}}B{{end}} -> A (first branch only).
IF_ELSE_END_PATTERN = re.compile(
    rb'\{\{-?\s*if\s[^}]*\}\}(.*?)\{\{-?\s*else\s*-?\}\}.*?\{\{-?\s*end\s*-?\}\}',
    re.DOTALL,
)

# {{if ...}}A{{end}} -> A
IF_END_PATTERN = re.compile(
    rb'\{\{-?\s*if\s[^}]*\}\}(.*?)\{\{-?\s*end\s*-?\}\}',
    re.DOTALL,
)

# Leading tokens of directives that are removed entirely.
_DELETED_PREFIXES = (b"/*", b"if ", b"if(", b"else if", b"end", b"range ",
                     b"template ", b"block ", b"define ", b"with ", b"-")


class SourceMap:
    """
    Maps positions in preprocessed content back to the original source.

    Only directive spans change length and the preprocessor keeps every
    newline, so lines are preserved and the mapping is the identity.
    """

    def __init__(self, original: bytes, processed: bytes = b""):
        self.original = original
        self.processed = processed

    def original_position(self, line: int, col: int) -> Tuple[int, int]:
        return line, col


def is_template_expr(value: str) -> bool:
    """True if an attribute value or text was produced by (or still holds) a template directive."""
    if not value:
        return False
    return TEMPLATE_OPEN in value or PLACEHOLDER.decode() in value


def _kept_newlines(removed: bytes) -> bytes:
    return b"\n" * removed.count(b"\n")


class TemplatePreprocessor:
    """
    Rewrites double-brace template directives so the result parses as plain HTML.

    Conditionals keep their first branch (the content authors expect to be rendered),
    control-flow and comment directives are dropped, and value interpolations become
    the TMPL placeholder. Line count is preserved.
    """

    def process(self, content: bytes) -> Tuple[bytes, SourceMap]:
        source_map = SourceMap(original=content)

        processed = IF_ELSE_END_PATTERN.sub(self._keep_if_branch, content)
        processed = IF_END_PATTERN.sub(self._keep_if_branch, processed)
        processed = TEMPLATE_PATTERN.sub(self._replace_directive, processed)

        source_map.processed = processed
        return processed, source_map

    @staticmethod
    def _keep_if_branch(match: re.Match) -> bytes:
        branch = match.group(1)
        dropped = match.group(0).count(b"\n") - branch.count(b"\n")
        return branch + b"\n" * dropped

    @staticmethod
    def _replace_directive(match: re.Match) -> bytes:
        directive = match.group(0)
        newlines = _kept_newlines(directive)

        body = directive[2:-2].strip()
        # Trailing trim marker ({{ else -}}) does not change the directive.
        if body.endswith(b"-"):
            body = body[:-1].rstrip()

        if body.startswith(_DELETED_PREFIXES) or body == b"else":
            return newlines
        return PLACEHOLDER + newlines
