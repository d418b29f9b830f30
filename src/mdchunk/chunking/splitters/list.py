import logging
from dataclasses import replace

from mdchunk.document.nodes import List, ListItem, Node, Root

from ..size import content_size
from .base import AbstractNodeSplitter

logger = logging.getLogger(__name__)


class ListSplitter(AbstractNodeSplitter):
    """Splits a list into sub-lists, keeping ordered numbering continuous."""

    node_type = "list"

    def split_node(self, node: Node) -> list[Node]:
        if not isinstance(node, List):
            raise ValueError(f"Expected a list node, got {node.type}")
        if not self.can_split_node(node):
            return [node]

        fragments: list[Node] = []
        pending: list[ListItem] = []
        pending_size = 0
        pending_index = 0

        for index, item in enumerate(node.children):
            size = content_size(item)
            if pending and pending_size + size > self.max_allowed_size:
                fragments.append(self._sub_list(node, pending, pending_index))
                pending, pending_size = [], 0

            if size > self.max_allowed_size:
                fragments.extend(self._split_item(node, item, index))
                continue

            if not pending:
                pending_index = index
            pending.append(item)  # type: ignore[arg-type]
            pending_size += size

        if pending:
            fragments.append(self._sub_list(node, pending, pending_index))
        return fragments

    def _sub_list(self, node: List, items: list[ListItem], index: int) -> List:
        start = (node.start if node.start is not None else 1) + index
        return replace(
            node,
            children=tuple(items),
            start=start if node.ordered else None,
            position=None,
        )

    def _split_item(self, node: List, item: Node, index: int) -> list[Node]:
        """Split one oversized item; only the first fragment keeps the marker."""
        if not isinstance(item, ListItem):
            raise ValueError(f"Expected a list item, got {item.type}")
        logger.debug("List item %d exceeds the allowed size, splitting", index)
        parts = self.fork().split_node(Root(children=item.children))
        if not parts:
            return []

        first, *rest = parts
        children = first.children if isinstance(first, Root) else (first,)
        head_item = replace(item, children=children, position=None)
        head = self._sub_list(node, [head_item], index)
        return [head, *rest]
