"""Protected ranges and structural boundaries of rendered markdown.

Both are derived from the spans the renderer records, so they always refer
to offsets in the exact text being split.
"""

from bisect import bisect_left
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from mdchunk.document.nodes import Node
from mdchunk.document.renderer import Rendered

# Constructs whose rendering must not be cut through unless a rule allows it
PROTECTABLE_TYPES = frozenset(
    {"link", "image", "inline_code", "emphasis", "strong", "delete", "code"}
)

BOUNDARY_PRIORITIES = {
    "heading": 10,
    "thematic_break": 8,
    "code": 7,
    "blockquote": 6,
    "paragraph": 5,
    "list": 4,
    "list_item": 3,
}


@dataclass(frozen=True)
class ProtectedRange:
    start: int
    end: int
    kind: str

    def contains(self, position: int) -> bool:
        """True if a cut at ``position`` would fall inside the range."""
        return self.start < position < self.end


@dataclass(frozen=True)
class StructuralBoundary:
    position: int
    kind: str
    priority: int


def merge_ranges(ranges: Iterable[ProtectedRange]) -> list[ProtectedRange]:
    merged: list[ProtectedRange] = []
    for current in sorted(ranges, key=lambda r: (r.start, -r.end)):
        if merged and current.start < merged[-1].end:
            last = merged[-1]
            if current.end > last.end:
                merged[-1] = ProtectedRange(last.start, current.end, last.kind)
        else:
            merged.append(current)
    return merged


def find_protected_ranges(
    rendered: Rendered, is_protected: Callable[[Node], bool]
) -> list[ProtectedRange]:
    """Collect the ranges of ``rendered`` that must not be cut.

    Whole spans are protected when ``is_protected`` says so. Spans that may be
    split still protect their own syntax, including the first and last
    character of the content, so a cut never leaves an empty construct or a
    half-written marker. Hard breaks and escape sequences are always atomic.
    """
    ranges = []
    for span in rendered.spans:
        if span.type in PROTECTABLE_TYPES:
            if is_protected(span.node):
                ranges.append(ProtectedRange(span.start, span.end, span.type))
                continue
            syntax = f"{span.type}_syntax"
            if span.inner_start > span.start:
                ranges.append(ProtectedRange(span.start, span.inner_start + 1, syntax))
            if span.end > span.inner_end:
                ranges.append(ProtectedRange(span.inner_end - 1, span.end, syntax))
        elif span.type == "break":
            ranges.append(ProtectedRange(span.start, span.end, span.type))
        elif span.type == "heading" and span.inner_start > span.start:
            ranges.append(ProtectedRange(span.start, span.inner_start, "heading_syntax"))

    for position in rendered.escapes:
        ranges.append(ProtectedRange(position, position + 2, "escape"))

    return merge_ranges(ranges)


def find_structural_boundaries(rendered: Rendered) -> list[StructuralBoundary]:
    boundaries = []
    for span in rendered.spans:
        priority = BOUNDARY_PRIORITIES.get(span.type)
        if priority is None or span.start == 0:
            continue
        boundaries.append(StructuralBoundary(span.start, span.type, priority))
    return sorted(boundaries, key=lambda b: (b.position, -b.priority))


class RangeIndex:
    """Sorted, non-overlapping protected ranges with fast lookups."""

    def __init__(self, ranges: Iterable[ProtectedRange]) -> None:
        self.ranges = merge_ranges(ranges)
        self._starts = [r.start for r in self.ranges]

    def covering(self, position: int) -> ProtectedRange | None:
        index = bisect_left(self._starts, position) - 1
        if index >= 0 and self.ranges[index].contains(position):
            return self.ranges[index]
        return None

    def starting_at(self, position: int) -> ProtectedRange | None:
        index = bisect_left(self._starts, position)
        if index < len(self.ranges) and self.ranges[index].start == position:
            return self.ranges[index]
        return None

    def is_protected(self, position: int) -> bool:
        return self.covering(position) is not None
