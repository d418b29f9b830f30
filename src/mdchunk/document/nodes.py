# document/nodes.py

"""Immutable markdown document tree.

Every construct is a frozen dataclass with a ``type`` tag. Nodes never
change after construction; use ``dataclasses.replace`` to derive new ones.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass(frozen=True)
class Position:
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, kw_only=True)
class Node:
    type: ClassVar[str] = "node"

    position: Position | None = field(default=None, compare=False)


@dataclass(frozen=True, kw_only=True)
class Parent(Node):
    children: tuple[Node, ...] = ()


# Block content


@dataclass(frozen=True, kw_only=True)
class Root(Parent):
    type: ClassVar[str] = "root"


@dataclass(frozen=True, kw_only=True)
class Paragraph(Parent):
    type: ClassVar[str] = "paragraph"


@dataclass(frozen=True, kw_only=True)
class Heading(Parent):
    type: ClassVar[str] = "heading"

    depth: int = 1


@dataclass(frozen=True, kw_only=True)
class ThematicBreak(Node):
    type: ClassVar[str] = "thematic_break"


@dataclass(frozen=True, kw_only=True)
class Blockquote(Parent):
    type: ClassVar[str] = "blockquote"


@dataclass(frozen=True, kw_only=True)
class List(Parent):
    type: ClassVar[str] = "list"

    ordered: bool = False
    start: int | None = None
    spread: bool = False
    # "-", "*" or "+" for bullets, "." or ")" for ordered lists
    marker: str = "-"


@dataclass(frozen=True, kw_only=True)
class ListItem(Parent):
    type: ClassVar[str] = "list_item"

    spread: bool = False


@dataclass(frozen=True, kw_only=True)
class Table(Parent):
    type: ClassVar[str] = "table"

    align: tuple[str | None, ...] = ()


@dataclass(frozen=True, kw_only=True)
class TableRow(Parent):
    type: ClassVar[str] = "table_row"


@dataclass(frozen=True, kw_only=True)
class TableCell(Parent):
    type: ClassVar[str] = "table_cell"


@dataclass(frozen=True, kw_only=True)
class Code(Node):
    type: ClassVar[str] = "code"

    value: str
    lang: str | None = None
    meta: str | None = None


@dataclass(frozen=True, kw_only=True)
class Html(Node):
    type: ClassVar[str] = "html"

    value: str


# Inline content


@dataclass(frozen=True, kw_only=True)
class Text(Node):
    type: ClassVar[str] = "text"

    value: str


@dataclass(frozen=True, kw_only=True)
class Emphasis(Parent):
    type: ClassVar[str] = "emphasis"


@dataclass(frozen=True, kw_only=True)
class Strong(Parent):
    type: ClassVar[str] = "strong"


@dataclass(frozen=True, kw_only=True)
class Delete(Parent):
    type: ClassVar[str] = "delete"


@dataclass(frozen=True, kw_only=True)
class InlineCode(Node):
    type: ClassVar[str] = "inline_code"

    value: str


@dataclass(frozen=True, kw_only=True)
class Break(Node):
    type: ClassVar[str] = "break"


@dataclass(frozen=True, kw_only=True)
class Link(Parent):
    type: ClassVar[str] = "link"

    url: str
    title: str | None = None


@dataclass(frozen=True, kw_only=True)
class Image(Node):
    type: ClassVar[str] = "image"

    url: str
    title: str | None = None
    alt: str = ""


BLOCK_TYPES = frozenset(
    {
        Paragraph.type,
        Heading.type,
        ThematicBreak.type,
        Blockquote.type,
        List.type,
        Code.type,
        Html.type,
        Table.type,
    }
)

FORMATTING_TYPES = frozenset({Emphasis.type, Strong.type, Delete.type})


def is_parent(node: Node) -> bool:
    return isinstance(node, Parent)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order."""
    yield node
    if isinstance(node, Parent):
        for child in node.children:
            yield from walk(child)
