from mdchunk.document.nodes import Blockquote, Node, Root

from .base import AbstractNodeSplitter


class BlockquoteSplitter(AbstractNodeSplitter):
    node_type = "blockquote"

    def split_node(self, node: Node) -> list[Node]:
        if not isinstance(node, Blockquote):
            raise ValueError(f"Expected a blockquote node, got {node.type}")
        if not self.can_split_node(node):
            return [node]

        parts = self.fork().split_node(Root(children=node.children))
        return [
            Blockquote(children=part.children if isinstance(part, Root) else (part,))
            for part in parts
        ]
