from mdchunk.document.nodes import Code, Node

from .base import AbstractNodeSplitter
from .text import TextSplitter


class CodeSplitter(AbstractNodeSplitter):
    """Splits oversized code blocks unless their rule forbids it.

    Each part is a complete fenced block with the original language.
    """

    node_type = "code"

    def split_node(self, node: Node) -> list[Node]:
        if not isinstance(node, Code):
            raise ValueError(f"Expected a code node, got {node.type}")
        if not self.can_split_node(node):
            return [node]
        return TextSplitter(self.options, self.parser).split_node(node)
