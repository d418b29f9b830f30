# Chunking
from .chunking import (
    Breadcrumb,
    Chunk,
    NodeRule,
    SplitResult,
    SplitterOptions,
    split,
    split_node,
    split_text,
)
from .chunking.splitters import TreeSplitter

# Document model
from .document import MarkdownParser, Root, to_markdown, to_plain_text

# Observability
from .observability import MetricsHook, NoOpMetricsHook

__all__ = [
    # Chunking
    "Breadcrumb",
    "Chunk",
    "NodeRule",
    "SplitResult",
    "SplitterOptions",
    "TreeSplitter",
    "split",
    "split_node",
    "split_text",
    # Document model
    "MarkdownParser",
    "Root",
    "to_markdown",
    "to_plain_text",
    # Observability
    "MetricsHook",
    "NoOpMetricsHook",
]
