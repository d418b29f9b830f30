from mdchunk.chunking.boundaries import (
    ProtectedRange,
    RangeIndex,
    StructuralBoundary,
    find_protected_ranges,
    find_structural_boundaries,
    merge_ranges,
)
from mdchunk.document import (
    Break,
    Emphasis,
    Heading,
    Link,
    Node,
    Paragraph,
    Root,
    Text,
    render,
)


def _links_only(node: Node) -> bool:
    return node.type == "link"


def _sample() -> Paragraph:
    return Paragraph(
        children=(
            Text(value="see "),
            Link(url="https://example.com", children=(Text(value="docs"),)),
            Text(value=" and "),
            Emphasis(children=(Text(value="wow"),)),
        )
    )


class TestFindProtectedRanges:
    def test_protected_span_and_splittable_syntax(self) -> None:
        rendered = render(_sample())

        ranges = find_protected_ranges(rendered, _links_only)

        assert rendered.text == "see [docs](https://example.com) and *wow*"
        assert ranges == [
            ProtectedRange(4, 31, "link"),
            ProtectedRange(36, 38, "emphasis_syntax"),
            ProtectedRange(39, 41, "emphasis_syntax"),
        ]

    def test_url_of_splittable_link_stays_protected(self) -> None:
        rendered = render(_sample())

        ranges = find_protected_ranges(rendered, lambda node: False)

        url_start = rendered.text.index("](")
        assert any(r.contains(url_start + 5) for r in ranges)

    def test_escapes_are_atomic(self) -> None:
        rendered = render(Paragraph(children=(Text(value="a*b"),)))

        assert find_protected_ranges(rendered, _links_only) == [
            ProtectedRange(1, 3, "escape")
        ]

    def test_breaks_are_atomic(self) -> None:
        rendered = render(
            Paragraph(children=(Text(value="a"), Break(), Text(value="b")))
        )

        assert rendered.text == "a\\\nb"
        assert find_protected_ranges(rendered, _links_only) == [
            ProtectedRange(1, 3, "break")
        ]

    def test_heading_marker(self) -> None:
        rendered = render(Heading(depth=2, children=(Text(value="T"),)))

        assert find_protected_ranges(rendered, _links_only) == [
            ProtectedRange(0, 3, "heading_syntax")
        ]


class TestFindStructuralBoundaries:
    def test_ranked_block_starts(self) -> None:
        root = Root(
            children=(
                Paragraph(children=(Text(value="one"),)),
                Heading(depth=1, children=(Text(value="Two"),)),
                Paragraph(children=(Text(value="three"),)),
            )
        )
        rendered = render(root)

        assert rendered.text == "one\n\n# Two\n\nthree"
        assert find_structural_boundaries(rendered) == [
            StructuralBoundary(5, "heading", 10),
            StructuralBoundary(12, "paragraph", 5),
        ]

    def test_inline_content_has_no_boundaries(self) -> None:
        assert find_structural_boundaries(render(_sample())) == []


class TestMergeRanges:
    def test_overlapping_ranges_merge(self) -> None:
        merged = merge_ranges([ProtectedRange(3, 8, "b"), ProtectedRange(0, 5, "a")])

        assert merged == [ProtectedRange(0, 8, "a")]

    def test_touching_ranges_stay_apart(self) -> None:
        ranges = [ProtectedRange(0, 5, "a"), ProtectedRange(5, 8, "b")]

        assert merge_ranges(ranges) == ranges

    def test_nested_range_is_absorbed(self) -> None:
        merged = merge_ranges([ProtectedRange(0, 10, "a"), ProtectedRange(2, 4, "b")])

        assert merged == [ProtectedRange(0, 10, "a")]


class TestRangeIndex:
    def test_lookups(self) -> None:
        index = RangeIndex([ProtectedRange(4, 31, "link")])

        assert index.covering(5) == ProtectedRange(4, 31, "link")
        assert index.covering(4) is None
        assert index.starting_at(4) == ProtectedRange(4, 31, "link")
        assert index.starting_at(5) is None
        assert index.is_protected(30)
        assert not index.is_protected(31)

    def test_empty_index(self) -> None:
        index = RangeIndex([])

        assert not index.is_protected(0)
        assert index.starting_at(0) is None
