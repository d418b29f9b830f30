import logging
from collections.abc import Iterator
from dataclasses import replace

from mdchunk.document.nodes import (
    BLOCK_TYPES,
    Node,
    Paragraph,
    Root,
    Table,
    TableCell,
    TableRow,
    Text,
)
from mdchunk.document.plaintext import to_plain_text

from ..size import content_size
from .base import AbstractNodeSplitter

logger = logging.getLogger(__name__)


class TableSplitter(AbstractNodeSplitter):
    """Splits a table by rows, repeating the header row in every part.

    The header row is not counted against the size limit. A row that is
    too large on its own becomes one single-column table per cell, each
    pairing the cell with its header cell.
    """

    node_type = "table"

    def split_node(self, node: Node) -> list[Node]:
        if not isinstance(node, Table):
            raise ValueError(f"Expected a table node, got {node.type}")
        if not self.can_split_node(node) or len(node.children) < 2:
            return [node]

        header, *rows = node.children
        fragments: list[Node] = []
        pending: list[Node] = []
        pending_size = 0

        for row in rows:
            size = content_size(row)
            if pending and pending_size + size > self.max_allowed_size:
                fragments.append(self._sub_table(node, header, pending))
                pending, pending_size = [], 0

            if size > self.max_allowed_size:
                logger.debug("Table row exceeds the allowed size, splitting by cell")
                fragments.extend(self._split_row(node, header, row))
                continue

            pending.append(row)
            pending_size += size

        if pending:
            fragments.append(self._sub_table(node, header, pending))
        return fragments

    def _sub_table(self, node: Table, header: Node, rows: list[Node]) -> Table:
        return replace(node, children=(header, *rows), position=None)

    def _split_row(self, node: Table, header: Node, row: Node) -> Iterator[Table]:
        if not isinstance(row, TableRow) or not isinstance(header, TableRow):
            raise ValueError("Table children must be table rows")
        for column, cell in enumerate(row.children):
            header_cell = (
                header.children[column]
                if column < len(header.children)
                else TableCell()
            )
            align = (node.align[column] if column < len(node.align) else None,)

            if content_size(cell) <= self.max_allowed_size:
                yield _mini_table(header_cell, cell, align)
                continue

            if not isinstance(cell, TableCell):
                raise ValueError(f"Expected a table cell, got {cell.type}")
            parts = self.fork().split_node(
                Root(children=(Paragraph(children=cell.children),))
            )
            for part in parts:
                yield _mini_table(header_cell, TableCell(children=_inline(part)), align)


def _mini_table(header_cell: Node, cell: Node, align: tuple[str | None, ...]) -> Table:
    return Table(
        children=(
            TableRow(children=(header_cell,)),
            TableRow(children=(cell,)),
        ),
        align=align,
    )


def _inline(node: Node) -> tuple[Node, ...]:
    """Inline content of a fragment, as it must fit inside a table cell."""
    if node.type in ("paragraph", "heading"):
        return node.children  # type: ignore[attr-defined]
    if isinstance(node, Root):
        content: list[Node] = []
        for index, child in enumerate(node.children):
            if index:
                content.append(Text(value=" "))
            content.extend(_inline(child))
        return tuple(content)
    if node.type in BLOCK_TYPES:
        return (Text(value=to_plain_text(node)),)
    return (node,)
