"""Top-down orchestrator.

Sections that fit are emitted whole. Oversized sections first try to keep
their heading and immediate content together with as many leading
subsections as fit; everything left over is packed greedily with its
siblings or broken down further. Nodes too large on their own go to the
construct splitter registered for their type, or to the text splitter.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from mdchunk.document.base import DocumentParser
from mdchunk.document.nodes import Heading, Node, Root

from ..options import SplitterOptions
from ..registry import SplitterRegistry
from ..sections import Section, build_hierarchy, flatten_section
from ..size import content_size, section_size, size_of
from .base import AbstractNodeSplitter
from .blockquote import BlockquoteSplitter
from .code import CodeSplitter
from .list import ListSplitter
from .table import TableSplitter
from .text import TextSplitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeChunk:
    content: Node | Section
    breadcrumbs: tuple[Heading, ...] = ()


class TreeSplitter(AbstractNodeSplitter):
    def __init__(
        self,
        options: SplitterOptions,
        parser: DocumentParser | None = None,
        registry: SplitterRegistry | None = None,
    ) -> None:
        super().__init__(options, parser)
        self.text_splitter = TextSplitter(options, self.parser)
        if registry is None:
            registry = SplitterRegistry()
            registry.register("list", ListSplitter(options, self.parser, self.fork))
            registry.register("table", TableSplitter(options, self.parser, self.fork))
            registry.register(
                "blockquote", BlockquoteSplitter(options, self.parser, self.fork)
            )
            registry.register("code", CodeSplitter(options, self.parser))
        self.registry = registry

    def fork(self) -> "TreeSplitter":
        return TreeSplitter(self.options, self.parser, self.registry)

    def split_node(self, node: Node) -> list[Node]:
        """Split into fragments, each wrapped in its own root."""
        return [_as_root(chunk.content) for chunk in self.split_chunks(node)]

    def split_chunks(self, node: Node) -> list[NodeChunk]:
        """Split a document and flatten section chunks back into roots."""
        root = node if isinstance(node, Root) else Root(children=(node,))
        chunks = []
        for chunk in self._split_tree(root):
            content = chunk.content
            if isinstance(content, Section):
                content = flatten_section(content)
            chunks.append(NodeChunk(content, chunk.breadcrumbs))
        return chunks

    def _split_tree(self, root: Root) -> Iterator[NodeChunk]:
        for section in build_hierarchy(root).sections:
            if section_size(section) <= self.max_allowed_size:
                yield NodeChunk(section)
            else:
                yield from self._split_hierarchical_section(section, ())

    def _split_hierarchical_section(
        self, section: Section, ancestors: tuple[Heading, ...]
    ) -> Iterator[NodeChunk]:
        own = ancestors
        if section.heading is not None:
            own = ancestors + (section.heading,)
        content = tuple(c for c in section.children if not isinstance(c, Section))
        nested = [c for c in section.children if isinstance(c, Section)]

        parent = None
        if content or section.heading is not None:
            parent = Section(section.depth, section.heading, content)

        if not nested:
            if parent is not None:
                yield from self._split_section(parent, ancestors)
            return

        if parent is not None:
            total = section_size(parent)
            if total <= self.max_allowed_size:
                merged: list[Section] = []
                for child in nested:
                    size = section_size(child)
                    if total + size > self.max_allowed_size:
                        break
                    merged.append(child)
                    total += size

                if merged:
                    yield NodeChunk(
                        Section(
                            section.depth,
                            section.heading,
                            content + tuple(merged),
                        ),
                        ancestors,
                    )
                    remaining = nested[len(merged) :]
                    if remaining:
                        yield from self._merge_sibling_sections(remaining, own)
                    return

            yield from self._split_section(parent, ancestors)

        yield from self._merge_sibling_sections(nested, own)

    def _split_section(
        self, section: Section, ancestors: tuple[Heading, ...]
    ) -> Iterator[NodeChunk]:
        heading = section.heading
        items = [c for c in section.children if isinstance(c, Node)]
        inner = ancestors + (heading,) if heading is not None else ancestors

        if not items:
            if heading is not None:
                yield from self._split_sub_node(heading, ancestors)
            return

        group: list[Node] = []
        group_size = 0
        if heading is not None:
            heading_size = content_size(heading)
            if heading_size > self.max_allowed_size:
                yield from self._split_sub_node(heading, ancestors)
            else:
                group, group_size = [heading], heading_size

        for item in items:
            size = content_size(item)
            if group_size + size <= self.max_allowed_size:
                group.append(item)
                group_size += size
                continue

            if group:
                yield self._group_chunk(group, heading, ancestors, inner)
                group, group_size = [], 0

            if size <= self.max_allowed_size:
                group, group_size = [item], size
            else:
                yield from self._split_sub_node(item, inner)

        if group:
            yield self._group_chunk(group, heading, ancestors, inner)

    @staticmethod
    def _group_chunk(
        group: list[Node],
        heading: Heading | None,
        ancestors: tuple[Heading, ...],
        inner: tuple[Heading, ...],
    ) -> NodeChunk:
        breadcrumbs = ancestors if heading is not None and group[0] is heading else inner
        return NodeChunk(Root(children=tuple(group)), breadcrumbs)

    def _split_sub_node(
        self, node: Node, breadcrumbs: tuple[Heading, ...]
    ) -> Iterator[NodeChunk]:
        if content_size(node) <= self.max_allowed_size:
            yield NodeChunk(node, breadcrumbs)
            return

        splitter = self.registry.find(node.type) or self.text_splitter
        logger.debug(
            "Delegating oversized %s node to %s", node.type, type(splitter).__name__
        )
        for fragment in splitter.split_node(node):
            yield NodeChunk(fragment, breadcrumbs)

    def _merge_sibling_sections(
        self, sections: list[Section], breadcrumbs: tuple[Heading, ...]
    ) -> Iterator[NodeChunk]:
        depth = max(1, sections[0].depth) - 1
        group: list[Section] = []
        group_size = 0

        for section in sections:
            size = size_of(section)
            if size > self.max_allowed_size:
                if group:
                    yield self._sibling_chunk(group, depth, breadcrumbs)
                    group, group_size = [], 0
                yield from self._split_hierarchical_section(section, breadcrumbs)
                continue

            if group and group_size + size > self.max_allowed_size:
                yield self._sibling_chunk(group, depth, breadcrumbs)
                group, group_size = [], 0

            group.append(section)
            group_size += size

        if group:
            yield self._sibling_chunk(group, depth, breadcrumbs)

    @staticmethod
    def _sibling_chunk(
        group: list[Section], depth: int, breadcrumbs: tuple[Heading, ...]
    ) -> NodeChunk:
        if len(group) == 1:
            return NodeChunk(group[0], breadcrumbs)
        return NodeChunk(Section(depth, None, tuple(group)), breadcrumbs)


def _as_root(node: Node | Section) -> Root:
    if isinstance(node, Root):
        return node
    if isinstance(node, Section):
        return flatten_section(node)
    return Root(children=(node,))
