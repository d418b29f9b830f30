import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .splitters.base import NodeSplitter

logger = logging.getLogger(__name__)


class SplitterRegistry:
    """Maps node types to the construct splitters that handle them."""

    def __init__(self) -> None:
        self._splitters: dict[str, "NodeSplitter"] = {}

    def register(self, node_type: str, splitter: "NodeSplitter") -> None:
        if node_type in self._splitters:
            raise ValueError(f"Splitter for '{node_type}' already registered")

        self._splitters[node_type] = splitter
        logger.debug("Registered splitter for node type: %s", node_type)

    def find(self, node_type: str) -> "NodeSplitter | None":
        return self._splitters.get(node_type)

    def __contains__(self, node_type: str) -> bool:
        return node_type in self._splitters
