# src/htmlint/dom/core.py
import weakref
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field, PrivateAttr

from htmlint.model import FrameworkConfig, LintResult, Severity


def rule_spec(name: str, description: str = ""):
    """
    Decorator to declare the stable identifier and description of a lint rule class.
    Facilitates auto-discovery by the RuleRegistry.
    """
    def decorator(cls):
        cls.name = name
        cls.description = description
        return cls
    return decorator


class NodeType(str, Enum):
    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"


# Walk callbacks return False to stop the traversal.
WalkFunc = Callable[['Node'], bool]


class Node(BaseModel):
    """
    One node of the parsed tree: the document marker, an element or a text run.

    The parent owns its children; the child only keeps a weak back-reference.
    """
    type: NodeType = NodeType.ELEMENT
    tag: str = ""  # lower-case tag name for elements
    attrs: List[Tuple[str, str]] = Field(default_factory=list)
    data: str = ""  # text of text nodes
    line: int = 1
    col: int = 1
    children: List['Node'] = Field(default_factory=list)

    _parent_ref: Optional[weakref.ReferenceType] = PrivateAttr(default=None)

    @property
    def parent(self) -> Optional['Node']:
        return self._parent_ref() if self._parent_ref is not None else None

    def append_child(self, child: 'Node') -> None:
        child._parent_ref = weakref.ref(self)
        self.children.append(child)

    def insert_children(self, index: int, nodes: List['Node']) -> None:
        for child in nodes:
            child._parent_ref = weakref.ref(self)
        self.children[index:index] = nodes

    def detach_children_from(self, index: int) -> List['Node']:
        """Removes and returns children[index:]; the caller re-parents them."""
        detached = self.children[index:]
        del self.children[index:]
        for child in detached:
            child._parent_ref = None
        return detached

    # --- Queries ---

    def is_element(self, tag: Optional[str] = None) -> bool:
        if self.type != NodeType.ELEMENT:
            return False
        return tag is None or self.tag == tag.lower()

    def has_attr(self, name: str) -> bool:
        key = name.lower()
        return any(k.lower() == key for k, _ in self.attrs)

    def get_attr(self, name: str, default: str = "") -> str:
        """Case-insensitive attribute lookup. The first occurrence wins."""
        key = name.lower()
        for k, v in self.attrs:
            if k.lower() == key:
                return v
        return default

    @property
    def attr_names(self) -> List[str]:
        return [k.lower() for k, _ in self.attrs]

    def text_content(self) -> str:
        if self.type == NodeType.TEXT:
            return self.data
        return "".join(child.text_content() for child in self.children)

    def element_children(self) -> List['Node']:
        return [c for c in self.children if c.type == NodeType.ELEMENT]

    # --- Traversal ---

    def walk(self, fn: WalkFunc) -> bool:
        """Pre-order traversal. Returns False once fn has stopped it."""
        if fn(self) is False:
            return False
        for child in self.children:
            if not child.walk(fn):
                return False
        return True

    def iter_descendants(self) -> Iterator['Node']:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def ancestors(self) -> Iterator['Node']:
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent

    def has_ancestor(self, *tags: str) -> bool:
        return any(a.type == NodeType.ELEMENT and a.tag in tags for a in self.ancestors())

    def __repr__(self) -> str:
        if self.type == NodeType.TEXT:
            return f"Node(text={self.data[:20]!r})"
        return f"Node({self.type.value} <{self.tag}> at {self.line}:{self.col})"


class Rule(ABC):
    """
    Base class for all lint rules.

    A rule checks the parsed tree; rules that need the original bytes
    (constructs the tree does not preserve) override check_raw. Framework
    dependent rules override configure, which the registry calls once before use.
    """
    name: str = ""
    description: str = ""

    @abstractmethod
    def check(self, doc) -> List[LintResult]:
        ...

    def check_raw(self, filename: str, content: bytes) -> List[LintResult]:
        return []

    def configure(self, frameworks: FrameworkConfig) -> None:
        pass

    @property
    def raw_checker(self) -> bool:
        return type(self).check_raw is not Rule.check_raw

    @property
    def configurable(self) -> bool:
        return type(self).configure is not Rule.configure

    def result(self, filename: str, node: Optional[Node], message: str,
               severity: Severity = Severity.ERROR) -> LintResult:
        line, col = (node.line, node.col) if node is not None else (1, 1)
        return LintResult(
            rule=self.name,
            message=message,
            filename=filename,
            line=line,
            col=col,
            severity=severity,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
