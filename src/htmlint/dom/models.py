# src/htmlint/dom/models.py
from typing import Any, Iterator, List, Optional

from pydantic import BaseModel, PrivateAttr

from htmlint.spec.elements import FOREIGN_ELEMENTS
from .core import Node, NodeType, WalkFunc


class HTMLDocument(BaseModel):
    """
    Represents one parsed source unit.

    The root is a DOCUMENT node. For fragment parses it is synthetic and holds
    every top-level node of the input. Documents are built per file by the
    DOMBuilder and are read-only once returned.
    """
    filename: str
    root: Node
    # Source begins with a {{define ...}} directive: a partial lacking page context.
    is_template_fragment: bool = False
    # Parsed through the fragment entry point rather than as a whole page.
    is_fragment: bool = True

    _source_map: Any = PrivateAttr(default=None)

    @property
    def source_map(self):
        return self._source_map

    def walk(self, fn: WalkFunc) -> None:
        self.root.walk(fn)

    def elements(self) -> Iterator[Node]:
        """All element nodes in document order."""
        for node in self.root.iter_descendants():
            if node.type == NodeType.ELEMENT:
                yield node

    def html_elements(self) -> Iterator[Node]:
        """Element nodes in document order, without the inside of SVG/MathML subtrees."""
        stack = list(reversed(self.root.children))
        while stack:
            node = stack.pop()
            if node.type != NodeType.ELEMENT:
                continue
            yield node
            if node.tag not in FOREIGN_ELEMENTS:
                stack.extend(reversed(node.children))

    def find_all(self, tag: str) -> List[Node]:
        tag = tag.lower()
        return [n for n in self.elements() if n.tag == tag]

    def find(self, tag: str) -> Optional[Node]:
        tag = tag.lower()
        return next((n for n in self.elements() if n.tag == tag), None)
