from typing import Callable, Iterable, Iterator, List, Optional

from selectolax.parser import HTMLParser, Node

# ===========================
# Element Wrapper
# ===========================
class Element:
    """Read-only view over a parsed node.

    Parsers only go through ``select``, ``attr`` and ``text`` (plus a few
    predicates built on them), so the extraction rules do not depend on the
    selectolax node API directly.
    """

    __slots__ = ("_node",)

    def __init__(self, node: Node):
        self._node = node

    @property
    def tag(self) -> str:
        return self._node.tag or ""

    def select(self, selector: str) -> List["Element"]:
        return [Element(node) for node in self._node.css(selector)]

    def select_first(self, selector: str) -> Optional["Element"]:
        nodes = self._node.css(selector)
        return Element(nodes[0]) if nodes else None

    def descendants(self) -> Iterator["Element"]:
        for child in self._node.iter(include_text=False):
            element = Element(child)
            yield element
            yield from element.descendants()

    def select_where(self, predicate: Callable[["Element"], bool]) -> List["Element"]:
        # document order, which selector groups do not guarantee; the element itself is excluded
        return [element for element in self.descendants() if predicate(element)]

    def attr(self, name: str) -> Optional[str]:
        value = self._node.attributes.get(name)
        return value if value else None

    def has_attr(self, name: str) -> bool:
        return name in self._node.attributes

    def text(self) -> str:
        return self._node.text(deep=True)

    def has_class(self, *names: str) -> bool:
        classes = (self.attr("class") or "").split()
        return all(name in classes for name in names)

    def has_ancestor(self, predicate: Callable[["Element"], bool]) -> bool:
        parent = self._node.parent
        while parent is not None:
            if predicate(Element(parent)):
                return True
            parent = parent.parent
        return False

# ===========================
# Document
# ===========================
class Document(Element):

    __slots__ = ("_tree",)

    def __init__(self, html: str):
        self._tree = HTMLParser(html)
        super().__init__(self._tree.root)

    def select(self, selector: str) -> List[Element]:
        return [Element(node) for node in self._tree.css(selector)]

    def select_first(self, selector: str) -> Optional[Element]:
        node = self._tree.css_first(selector)
        return Element(node) if node is not None else None

# ===========================
# Collection Helpers
# ===========================
def joined_text(elements: Iterable[Element]) -> str:
    return "".join(element.text() for element in elements).strip()


def first_attr(elements: List[Element], name: str) -> Optional[str]:
    return elements[0].attr(name) if elements else None
