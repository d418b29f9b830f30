from .boundaries import ProtectedRange, StructuralBoundary
from .chunking import Breadcrumb, Chunk, SplitResult, split, split_node, split_text
from .options import NodeRule, SplitRule, SplitterOptions, default_rules
from .preprocess import TransformContext, preprocess
from .registry import SplitterRegistry
from .sections import (
    HierarchicalRoot,
    Section,
    build_hierarchy,
    flatten_hierarchy,
    flatten_section,
    iter_headings,
)
from .size import content_size, raw_size, section_size

__all__ = [
    "Breadcrumb",
    "Chunk",
    "HierarchicalRoot",
    "NodeRule",
    "ProtectedRange",
    "Section",
    "SplitResult",
    "SplitRule",
    "SplitterOptions",
    "SplitterRegistry",
    "StructuralBoundary",
    "TransformContext",
    "build_hierarchy",
    "content_size",
    "default_rules",
    "flatten_hierarchy",
    "flatten_section",
    "iter_headings",
    "preprocess",
    "raw_size",
    "section_size",
    "split",
    "split_node",
    "split_text",
]
