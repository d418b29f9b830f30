import pytest

from mdchunk.chunking import SplitterOptions
from mdchunk.chunking.splitters import ListSplitter
from mdchunk.document import List, Paragraph, Text

ORDERED = "1. alpha item\n2. bravo item\n3. charlie item\n4. delta item"


def _splitter(chunk_size: int, **kwargs: object) -> ListSplitter:
    return ListSplitter(SplitterOptions(chunk_size=chunk_size, **kwargs))


class TestListSplitter:
    def test_groups_items_into_sub_lists(self) -> None:
        assert _splitter(20).split_text(ORDERED) == [
            "1. alpha item\n2. bravo item",
            "3. charlie item",
            "4. delta item",
        ]

    def test_numbering_continues_from_start(self) -> None:
        text = "5. alpha item\n6. bravo item\n7. charlie item"

        assert _splitter(20).split_text(text) == [
            "5. alpha item\n6. bravo item",
            "7. charlie item",
        ]

    def test_keeps_delimiter(self) -> None:
        text = "1) alpha item\n2) bravo item\n3) charlie item"

        assert _splitter(20).split_text(text)[-1] == "3) charlie item"

    def test_bullet_list(self) -> None:
        text = "- alpha item\n- bravo item\n- charlie item"

        assert _splitter(20).split_text(text) == [
            "- alpha item\n- bravo item",
            "- charlie item",
        ]

    def test_list_that_fits_is_unchanged(self) -> None:
        assert _splitter(100).split_text(ORDERED) == [ORDERED]

    def test_never_split_rule(self) -> None:
        splitter = _splitter(10, rules={"list": "never-split"})

        assert splitter.split_text(ORDERED) == [ORDERED]

    def test_oversized_item_keeps_marker_on_first_fragment(self) -> None:
        text = (
            "1. short\n"
            "2. First part of item two. Second part of item two. "
            "Third part of item two.\n"
            "3. tail"
        )

        assert _splitter(30).split_text(text) == [
            "1. short",
            "2. First part of item two.",
            "Second part of item two.",
            "Third part of item two.",
            "3. tail",
        ]

    def test_split_text_requires_list(self) -> None:
        with pytest.raises(ValueError, match="Text is not a list"):
            _splitter(10).split_text("plain text")

    def test_split_node_rejects_other_nodes(self) -> None:
        with pytest.raises(ValueError, match="Expected a list node"):
            _splitter(10).split_node(Paragraph(children=(Text(value="x"),)))

    def test_rejects_oversized_children_that_are_not_items(self) -> None:
        stray = Paragraph(children=(Text(value="x " * 30),))

        with pytest.raises(ValueError, match="Expected a list item"):
            _splitter(10).split_node(List(children=(stray,)))
