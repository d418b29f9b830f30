"""Hierarchical section model.

A flat document is regrouped into sections: a heading, the content it owns
and the sections of deeper headings nested under it. Content without an
owning heading lands in depth-0 "orphaned" sections, so the top level of a
hierarchy only ever holds sections.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar, Union

from mdchunk.document.nodes import Heading, Node, Root, ThematicBreak


@dataclass(frozen=True)
class Section:
    type: ClassVar[str] = "section"

    depth: int
    heading: Heading | None = None
    children: tuple[Union[Node, "Section"], ...] = ()


@dataclass(frozen=True)
class HierarchicalRoot:
    sections: tuple[Section, ...] = ()


def build_hierarchy(root: Root) -> HierarchicalRoot:
    sections: list[Section] = []
    orphans: list[Node] = []
    nodes = root.children
    index = 0

    while index < len(nodes):
        node = nodes[index]
        if isinstance(node, Heading):
            if orphans:
                sections.append(Section(depth=0, children=tuple(orphans)))
                orphans = []
            section, index = _build_section(node, nodes, index + 1)
            sections.append(section)
        else:
            orphans.append(node)
            index += 1

    if orphans:
        sections.append(Section(depth=0, children=tuple(orphans)))

    return HierarchicalRoot(sections=tuple(sections))


def _build_section(
    heading: Heading, nodes: tuple[Node, ...], index: int
) -> tuple[Section, int]:
    """Collect the nodes after ``heading`` that belong to its section."""
    owned: list[Node] = []
    while index < len(nodes):
        node = nodes[index]
        if isinstance(node, ThematicBreak):
            break
        if isinstance(node, Heading) and node.depth <= heading.depth:
            break
        owned.append(node)
        index += 1

    section = Section(
        depth=heading.depth, heading=heading, children=_nest(tuple(owned))
    )
    return section, index


def _nest(nodes: tuple[Node, ...]) -> tuple[Node | Section, ...]:
    """Turn deeper headings among a section's nodes into nested sections."""
    children: list[Node | Section] = []
    index = 0
    while index < len(nodes):
        node = nodes[index]
        if isinstance(node, Heading):
            section, index = _build_section(node, nodes, index + 1)
            children.append(section)
        else:
            children.append(node)
            index += 1
    return tuple(children)


def flatten_section(section: Section) -> Root:
    return Root(children=tuple(_flatten(section)))


def flatten_hierarchy(hierarchy: HierarchicalRoot) -> Root:
    nodes: list[Node] = []
    for section in hierarchy.sections:
        nodes.extend(_flatten(section))
    return Root(children=tuple(nodes))


def _flatten(section: Section) -> Iterator[Node]:
    if section.heading is not None:
        yield section.heading
    for child in section.children:
        if isinstance(child, Section):
            yield from _flatten(child)
        else:
            yield child


def iter_headings(item: Section | HierarchicalRoot) -> Iterator[Heading]:
    """Yield every heading of a section tree in document order."""
    sections = item.sections if isinstance(item, HierarchicalRoot) else (item,)
    for section in sections:
        if section.heading is not None:
            yield section.heading
        for child in section.children:
            if isinstance(child, Section):
                yield from iter_headings(child)
