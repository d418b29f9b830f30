from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import ClassVar, Protocol

from mdchunk.document.base import DocumentParser
from mdchunk.document.markdown_parser import default_parser
from mdchunk.document.nodes import Node, Root
from mdchunk.document.renderer import to_markdown

from ..options import SplitterOptions
from ..size import content_size


class NodeSplitter(Protocol):
    def split_node(self, node: Node) -> list[Node]: ...


class AbstractNodeSplitter(ABC):
    # node type accepted by split_text, None for any document
    node_type: ClassVar[str | None] = None

    def __init__(
        self,
        options: SplitterOptions,
        parser: DocumentParser | None = None,
        fork: Callable[[], NodeSplitter] | None = None,
    ) -> None:
        self.options = options
        self.parser = parser or default_parser()
        self._fork = fork

    @property
    def chunk_size(self) -> int:
        return self.options.chunk_size

    @property
    def max_allowed_size(self) -> float:
        return self.options.max_allowed_size

    def can_split_node(self, node: Node) -> bool:
        """Apply the configured rule for the node's type.

        Without a rule a node is split only when it exceeds the allowed size.
        """
        rule = self.options.split_rule_for(node.type)
        if rule is None:
            return content_size(node) > self.max_allowed_size
        if rule.rule == "never-split":
            return False
        if rule.rule == "allow-split":
            return True
        return rule.size is not None and content_size(node) > rule.size

    def fork(self) -> NodeSplitter:
        """Orchestrator used to split content nested inside this construct."""
        if self._fork is not None:
            return self._fork()
        # deferred: the tree splitter module imports the construct splitters
        from .tree import TreeSplitter

        return TreeSplitter(self.options, self.parser)

    @abstractmethod
    def split_node(self, node: Node) -> list[Node]:
        """
        Split a node into fragments that fit the configured size.

        Requirements:
        - Fragments keep document order
        - No semantic text is lost or duplicated
        - Returns the node unchanged when it may not be split
        """
        raise NotImplementedError

    def split_text(self, text: str) -> list[str]:
        root = self.parser.parse(text)
        fragments = self.split_node(self._select(root))
        return [
            markdown
            for markdown in (to_markdown(fragment).strip() for fragment in fragments)
            if markdown
        ]

    def _select(self, root: Root) -> Node:
        if self.node_type is None:
            return root
        if not root.children or root.children[0].type != self.node_type:
            raise ValueError(f"Text is not a {self.node_type}")
        return root.children[0]
