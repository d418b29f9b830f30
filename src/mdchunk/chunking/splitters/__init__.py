from .base import AbstractNodeSplitter, NodeSplitter
from .blockquote import BlockquoteSplitter
from .code import CodeSplitter
from .list import ListSplitter
from .table import TableSplitter
from .text import TextSplitter
from .tree import NodeChunk, TreeSplitter

__all__ = [
    "AbstractNodeSplitter",
    "BlockquoteSplitter",
    "CodeSplitter",
    "ListSplitter",
    "NodeChunk",
    "NodeSplitter",
    "TableSplitter",
    "TextSplitter",
    "TreeSplitter",
]
