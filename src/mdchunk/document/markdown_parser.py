import logging
from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from .base import DocumentParser
from .nodes import (
    Blockquote,
    Break,
    Code,
    Delete,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Position,
    Root,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)

logger = logging.getLogger(__name__)

_ALIGNMENTS = {
    "text-align:left": "left",
    "text-align:right": "right",
    "text-align:center": "center",
}


def create_markdown_it() -> MarkdownIt:
    """CommonMark plus GFM tables and strikethrough."""
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


class MarkdownParser(DocumentParser):
    """Parses markdown with markdown-it-py into the immutable node tree.

    Offsets refer to the input after line endings are normalized to ``\\n``.
    Only block-level nodes carry positions; markdown-it does not track
    inline source offsets.
    """

    def __init__(self, md: MarkdownIt | None = None) -> None:
        self._md = md or create_markdown_it()

    def parse(self, text: str) -> Root:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        tree = SyntaxTreeNode(self._md.parse(text))
        builder = _TreeBuilder(text)
        root = Root(
            children=builder.blocks(tree.children),
            position=Position(0, len(text)),
        )
        logger.debug("Parsed %d top-level nodes", len(root.children))
        return root


class _TreeBuilder:
    def __init__(self, text: str) -> None:
        self._text = text
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    def blocks(self, nodes: list[SyntaxTreeNode]) -> tuple[Node, ...]:
        return tuple(self._block(node) for node in nodes)

    def _position(self, node: SyntaxTreeNode) -> Position | None:
        if not node.map:
            return None
        first, last = node.map
        start = self._line_starts[min(first, len(self._line_starts) - 1)]
        end = (
            self._line_starts[last]
            if last < len(self._line_starts)
            else len(self._text)
        )
        while end > start and self._text[end - 1] in " \t\n":
            end -= 1
        return Position(start, end)

    def _block(self, node: SyntaxTreeNode) -> Node:
        position = self._position(node)

        if node.type == "paragraph":
            return Paragraph(children=self._inline_of(node), position=position)
        if node.type == "heading":
            return Heading(
                depth=int(node.tag[1:]),
                children=self._inline_of(node),
                position=position,
            )
        if node.type == "hr":
            return ThematicBreak(position=position)
        if node.type == "blockquote":
            return Blockquote(children=self.blocks(node.children), position=position)
        if node.type in ("bullet_list", "ordered_list"):
            return self._list(node, position)
        if node.type == "fence":
            lang, _, meta = node.info.strip().partition(" ")
            return Code(
                value=_strip_final_newline(node.content),
                lang=lang or None,
                meta=meta.strip() or None,
                position=position,
            )
        if node.type == "code_block":
            return Code(value=_strip_final_newline(node.content), position=position)
        if node.type == "html_block":
            return Html(value=node.content.rstrip("\n"), position=position)
        if node.type == "table":
            return self._table(node, position)

        raise ValueError(f"Unknown block type: {node.type}")

    def _list(self, node: SyntaxTreeNode, position: Position | None) -> List:
        ordered = node.type == "ordered_list"
        # paragraphs in tight lists are emitted as hidden tokens
        spread = any(
            not child.hidden
            for item in node.children
            for child in item.children
            if child.type == "paragraph"
        )
        items = tuple(
            ListItem(
                children=self.blocks(item.children),
                spread=spread,
                position=self._position(item),
            )
            for item in node.children
        )
        return List(
            children=items,
            ordered=ordered,
            start=int(node.attrs.get("start", 1)) if ordered else None,
            spread=spread,
            marker=node.markup or ("." if ordered else "-"),
            position=position,
        )

    def _table(self, node: SyntaxTreeNode, position: Position | None) -> Table:
        rows = []
        align: tuple[str | None, ...] = ()
        for section in node.children:
            for row in section.children:
                if not rows:
                    align = tuple(
                        _ALIGNMENTS.get(str(cell.attrs.get("style", "")))
                        for cell in row.children
                    )
                cells = tuple(
                    TableCell(children=self._inline_of(cell)) for cell in row.children
                )
                rows.append(TableRow(children=cells, position=self._position(row)))
        return Table(children=tuple(rows), align=align, position=position)

    def _inline_of(self, node: SyntaxTreeNode) -> tuple[Node, ...]:
        nodes: list[Node] = []
        for child in node.children:
            if child.type == "inline":
                nodes.extend(self._inlines(child.children))
        return _merge_text(nodes)

    def _inlines(self, nodes: list[SyntaxTreeNode]) -> list[Node]:
        return [self._inline(node) for node in nodes]

    def _inline(self, node: SyntaxTreeNode) -> Node:
        if node.type == "text":
            return Text(value=node.content)
        if node.type == "softbreak":
            return Text(value="\n")
        if node.type == "hardbreak":
            return Break()
        if node.type == "code_inline":
            return InlineCode(value=node.content)
        if node.type == "html_inline":
            return Html(value=node.content)
        if node.type == "em":
            return Emphasis(children=_merge_text(self._inlines(node.children)))
        if node.type == "strong":
            return Strong(children=_merge_text(self._inlines(node.children)))
        if node.type == "s":
            return Delete(children=_merge_text(self._inlines(node.children)))
        if node.type == "link":
            return Link(
                url=str(node.attrs.get("href", "")),
                title=_optional(node.attrs.get("title")),
                children=_merge_text(self._inlines(node.children)),
            )
        if node.type == "image":
            return Image(
                url=str(node.attrs.get("src", "")),
                title=_optional(node.attrs.get("title")),
                alt=_node_text(node.children),
            )

        raise ValueError(f"Unknown inline type: {node.type}")


def _merge_text(nodes: list[Node]) -> tuple[Node, ...]:
    merged: list[Node] = []
    for node in nodes:
        if isinstance(node, Text) and merged and isinstance(merged[-1], Text):
            merged[-1] = Text(value=merged[-1].value + node.value)
        else:
            merged.append(node)
    return tuple(merged)


def _node_text(nodes: list[SyntaxTreeNode]) -> str:
    parts = []
    for node in nodes:
        if node.type in ("text", "code_inline", "html_inline"):
            parts.append(node.content)
        elif node.type == "softbreak":
            parts.append("\n")
        else:
            parts.append(_node_text(node.children))
    return "".join(parts)


def _optional(value: str | int | float | None) -> str | None:
    return str(value) if value else None


def _strip_final_newline(value: str) -> str:
    return value[:-1] if value.endswith("\n") else value


@lru_cache(maxsize=1)
def default_parser() -> MarkdownParser:
    return MarkdownParser()
