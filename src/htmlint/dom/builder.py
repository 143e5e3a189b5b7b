# src/htmlint/dom/builder.py
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, ParserRejectedMarkup, Tag, UnicodeDammit
from bs4.element import PreformattedString

from htmlint.errors import DocumentParseError
from htmlint.spec.elements import IMPLIED_END_TAGS
from .core import Node, NodeType
from .models import HTMLDocument
from .preprocessor import TemplatePreprocessor

logger = logging.getLogger(__name__)

FRAGMENT_DIRECTIVE = b"{{define"


class DOMBuilder:
    """
    Builder responsible for turning raw (possibly templated) bytes into an HTMLDocument.

    Directives are neutralised by the TemplatePreprocessor, the result is parsed
    with BeautifulSoup's html.parser and converted into a Node tree. Failures raise
    DocumentParseError; a partially built document is never returned.
    """

    def __init__(self, preprocessor: Optional[TemplatePreprocessor] = None):
        self.preprocessor = preprocessor or TemplatePreprocessor()

    def parse_fragment(self, filename: str, content: bytes) -> HTMLDocument:
        """
        Parses content that may lack a document root (template partials, snippets).
        All top-level nodes hang under a synthetic document node at 1:1.
        """
        return self._parse(filename, content, is_fragment=True)

    def parse_doc(self, filename: str, content: bytes) -> HTMLDocument:
        """Parses content known to be a whole page. Whole-document rules apply to it."""
        return self._parse(filename, content, is_fragment=False)

    @staticmethod
    def is_template_fragment(content: bytes) -> bool:
        return content.strip().startswith(FRAGMENT_DIRECTIVE)

    def _parse(self, filename: str, content: bytes, is_fragment: bool) -> HTMLDocument:
        processed, source_map = self.preprocessor.process(content)
        markup = self._decode(filename, processed)

        try:
            # Keep class/rel as the raw strings the author wrote.
            soup = BeautifulSoup(markup, 'html.parser', multi_valued_attributes=None)
        except ParserRejectedMarkup as e:
            raise DocumentParseError(filename, f"markup rejected by parser: {e}") from e

        root = Node(type=NodeType.DOCUMENT, line=1, col=1)
        for child in soup.contents:
            node = self._build_tree(child, root)
            if node is not None:
                root.append_child(node)

        self._close_implied_elements(root)

        doc = HTMLDocument(
            filename=filename,
            root=root,
            is_template_fragment=self.is_template_fragment(content),
            is_fragment=is_fragment,
        )
        doc._source_map = source_map
        logger.debug(f"Parsed {filename} (fragment={is_fragment}, template={doc.is_template_fragment})")
        return doc

    @staticmethod
    def _decode(filename: str, content: bytes) -> str:
        if not content:
            return ""
        dammit = UnicodeDammit(content, is_html=True)
        if dammit.unicode_markup is None:
            raise DocumentParseError(filename, "unable to determine character encoding")
        # Strip a leading BOM so it does not become a text node.
        return dammit.unicode_markup.replace('\ufeff', '', 1)

    def _build_tree(self, item, parent: Node) -> Optional[Node]:
        """
        Recursively converts a BeautifulSoup element into a Node.

        Comments, doctypes and other declarations are dropped. Elements take the
        parser's source position when available, text runs inherit their parent's.
        """
        if isinstance(item, Tag):
            line = item.sourceline if item.sourceline is not None else parent.line
            col = item.sourcepos + 1 if item.sourcepos is not None else parent.col
            node = Node(
                type=NodeType.ELEMENT,
                tag=item.name.lower(),
                attrs=[(k, v if isinstance(v, str) else " ".join(v)) for k, v in item.attrs.items()],
                line=line,
                col=col,
            )
            for child in item.children:
                child_node = self._build_tree(child, node)
                if child_node is not None:
                    node.append_child(child_node)
            return node

        if isinstance(item, NavigableString) and not isinstance(item, PreformattedString):
            return Node(type=NodeType.TEXT, data=str(item), line=parent.line, col=parent.col)

        return None

    def _close_implied_elements(self, node: Node) -> List[Node]:
        """
        html.parser nests an element whose end tag was omitted around the siblings
        that follow it (<li>a<li>b becomes li > li). Moves such siblings back up
        the way a browser would, e.g. a <td> start tag closes the open <td>.

        Returns the nodes that must move out of `node` into its parent.
        """
        index = 0
        while index < len(node.children):
            child = node.children[index]
            if child.type == NodeType.ELEMENT:
                overflow = self._close_implied_elements(child)
                if overflow:
                    node.insert_children(index + 1, overflow)
            index += 1

        closers = IMPLIED_END_TAGS.get(node.tag) if node.type == NodeType.ELEMENT else None
        if not closers:
            return []

        for index, child in enumerate(node.children):
            if child.type == NodeType.ELEMENT and child.tag in closers:
                return node.detach_children_from(index)
        return []
