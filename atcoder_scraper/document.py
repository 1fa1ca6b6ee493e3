"""Minimal document-tree capability used by the extraction engine.

The extractor only needs tag names, classes, attributes, ordered children and
text, so it is written against the :class:`Node` protocol rather than against
BeautifulSoup directly. :class:`SoupNode` adapts a parsed ``bs4`` tree.
"""

from collections.abc import Callable, Iterator, Sequence
from typing import Protocol, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag


class Node(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def classes(self) -> list[str]: ...

    def attribute(self, key: str) -> str | None: ...

    def contents(self) -> Sequence[Union[str, "Node"]]: ...

    def children(self) -> Sequence["Node"]: ...

    def text(self) -> str: ...

    def inner_html(self) -> str: ...


class SoupNode:
    def __init__(self, tag: Tag):
        self._tag = tag

    def __repr__(self) -> str:
        return f"SoupNode(<{self.name}>)"

    @classmethod
    def parse(cls, html: str) -> "SoupNode":
        return cls(BeautifulSoup(html, "html.parser"))

    @property
    def name(self) -> str:
        return self._tag.name or ""

    @property
    def classes(self) -> list[str]:
        cls = self._tag.get("class")
        if cls is None:
            return []
        if isinstance(cls, str):
            return cls.split()
        return list(cls)

    def attribute(self, key: str) -> str | None:
        value = self._tag.get(key)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def contents(self) -> list[Union[str, "SoupNode"]]:
        out: list[Union[str, SoupNode]] = []
        for child in self._tag.contents:
            if isinstance(child, Tag):
                out.append(SoupNode(child))
            elif isinstance(child, NavigableString) and not isinstance(child, Comment):
                out.append(str(child))
        return out

    def children(self) -> list["SoupNode"]:
        return [SoupNode(c) for c in self._tag.contents if isinstance(c, Tag)]

    def text(self) -> str:
        return self._tag.get_text()

    def inner_html(self) -> str:
        return self._tag.decode_contents()


def iter_descendants(node: Node) -> Iterator[Node]:
    """Element descendants of ``node`` in document order (pre-order)."""
    for child in node.children():
        yield child
        yield from iter_descendants(child)


def find_first(node: Node, predicate: Callable[[Node], bool]) -> Node | None:
    return next((d for d in iter_descendants(node) if predicate(d)), None)


def find_all(node: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    return [d for d in iter_descendants(node) if predicate(d)]


def has_class(node: Node, *names: str) -> bool:
    return any(c in names for c in node.classes)


def matches(
    tag: str | None = None, cls: str | None = None, element_id: str | None = None
):
    """Predicate builder: ``matches("span", "h2")`` ~ ``span.h2``."""

    def _pred(node: Node) -> bool:
        if tag is not None and node.name != tag:
            return False
        if cls is not None and cls not in node.classes:
            return False
        if element_id is not None and node.attribute("id") != element_id:
            return False
        return True

    return _pred


def iter_headed_runs(
    node: Node, heading: str
) -> Iterator[tuple[Node, list[Node]]]:
    """Yield ``(heading, following_siblings)`` for every ``heading`` tag.

    Headings come in document order; the siblings run up to (excluding) the
    next heading of the same tag in the same parent.
    """
    kids = node.children()
    for i, child in enumerate(kids):
        if child.name == heading:
            run: list[Node] = []
            for sib in kids[i + 1 :]:
                if sib.name == heading:
                    break
                run.append(sib)
            yield child, run
        yield from iter_headed_runs(child, heading)
