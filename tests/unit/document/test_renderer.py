from dataclasses import dataclass
from typing import ClassVar

import pytest

from mdchunk.document import (
    Blockquote,
    Code,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Root,
    Table,
    TableCell,
    TableRow,
    Text,
    default_parser,
    render,
    to_markdown,
    to_plain_text,
)


@dataclass(frozen=True, kw_only=True)
class Unsupported(Node):
    type: ClassVar[str] = "unsupported"


def _paragraph(*children: Node) -> Paragraph:
    return Paragraph(children=children)


def _roundtrip(markdown: str) -> str:
    return to_markdown(default_parser().parse(markdown))


class TestToMarkdown:
    @pytest.mark.parametrize(
        "markdown",
        [
            "Some *emphasis* and **strong** text.",
            "~~gone~~ and `code`",
            "## Title",
            "See [docs](https://example.com) for more.",
            "![a cat](cat.png)",
            "- a\n- b",
            "1. one\n2. two",
            "> quoted\n> more",
            "| a | b |\n| --- | --- |\n| 1 | 2 |",
            "```python\nx = 1\n```",
        ],
    )
    def test_canonical_markdown_is_stable(self, markdown: str) -> None:
        """Canonical markdown renders back unchanged."""
        assert _roundtrip(markdown) == markdown

    def test_normalizes_syntax_variants(self) -> None:
        assert _roundtrip("_em_ and __strong__") == "*em* and **strong**"
        assert _roundtrip("above\n\n---\n\nbelow") == "above\n\n***\n\nbelow"

    def test_loose_list_keeps_blank_lines(self) -> None:
        assert _roundtrip("- a\n\n- b") == "- a\n\n- b"

    def test_ordered_list_start(self) -> None:
        node = List(
            ordered=True,
            start=7,
            children=(
                ListItem(children=(_paragraph(Text(value="seven")),)),
                ListItem(children=(_paragraph(Text(value="eight")),)),
            ),
        )

        assert to_markdown(node) == "7. seven\n8. eight"

    def test_nested_list_indentation(self) -> None:
        assert _roundtrip("- outer\n  - inner") == "- outer\n  - inner"

    def test_escapes_markdown_characters(self) -> None:
        """Literal syntax characters in text stay literal."""
        assert to_markdown(_paragraph(Text(value="1 * 2 = [x]"))) == "1 \\* 2 = \\[x\\]"
        assert to_markdown(_paragraph(Text(value="# not a heading"))) == (
            "\\# not a heading"
        )
        assert to_markdown(_paragraph(Text(value="snake_case"))) == "snake_case"

    def test_escaped_text_parses_back(self) -> None:
        text = "a *b* [c] # d"
        parsed = default_parser().parse(to_markdown(_paragraph(Text(value=text))))

        assert to_plain_text(parsed) == text

    def test_code_fence_longer_than_content_backticks(self) -> None:
        node = Code(value="```\ninner\n```", lang="md")

        assert to_markdown(node) == "````md\n```\ninner\n```\n````"

    def test_table_alignment_row(self) -> None:
        node = Table(
            align=("left", "center"),
            children=(
                TableRow(
                    children=(
                        TableCell(children=(Text(value="a"),)),
                        TableCell(children=(Text(value="b"),)),
                    )
                ),
            ),
        )

        assert to_markdown(node) == "| a | b |\n| :--- | :---: |"

    def test_link_destination_with_spaces(self) -> None:
        node = Link(url="my file.md", title="Title", children=(Text(value="f"),))

        assert to_markdown(node) == '[f](<my file.md> "Title")'

    def test_blockquote_with_paragraphs(self) -> None:
        node = Blockquote(
            children=(_paragraph(Text(value="one")), _paragraph(Text(value="two")))
        )

        assert to_markdown(node) == "> one\n>\n> two"

    def test_line_start_escapes_follow_container_prefix(self) -> None:
        node = Blockquote(children=(_paragraph(Text(value="# not a heading")),))

        assert to_markdown(node) == "> \\# not a heading"

    def test_only_text_at_line_start_is_escaped(self) -> None:
        node = _paragraph(Text(value="a "), Text(value="# b"), Text(value="\n- c"))

        assert to_markdown(node) == "a # b\n\\- c"

    def test_unknown_node_type_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown node type: unsupported"):
            to_markdown(Root(children=(Unsupported(),)))


class TestRender:
    def test_records_spans_with_inner_range(self) -> None:
        link = Link(url="https://example.com", children=(Text(value="docs"),))
        rendered = render(_paragraph(Text(value="see "), link))

        span = next(s for s in rendered.spans if s.type == "link")
        assert rendered.text == "see [docs](https://example.com)"
        assert (span.start, span.inner_start, span.inner_end) == (4, 5, 9)
        assert span.end == len(rendered.text)
        assert span.opening(rendered.text) == "["
        assert span.closing(rendered.text) == "](https://example.com)"

    def test_content_size_ignores_syntax(self) -> None:
        link = Link(url="https://example.com", children=(Text(value="docs"),))
        rendered = render(_paragraph(Text(value="see "), link))

        assert rendered.content_size() == 8
        assert rendered.content_size(4) == 4
        assert rendered.content_size(0, 4) == 4

    def test_escapes_do_not_count_as_content(self) -> None:
        rendered = render(_paragraph(Text(value="a*b")))

        assert rendered.text == "a\\*b"
        assert rendered.escapes == (1,)
        assert rendered.content_size() == 3

    def test_heading_inner_range_excludes_marker(self) -> None:
        rendered = render(Heading(depth=3, children=(Text(value="Title"),)))

        span = rendered.spans[-1]
        assert span.type == "heading"
        assert rendered.text[span.inner_start : span.inner_end] == "Title"


class TestToPlainText:
    def test_strips_syntax(self) -> None:
        root = default_parser().parse(
            "Some **bold** [link](https://example.com) ![alt](i.png) `code`"
        )

        assert to_plain_text(root) == "Some bold link alt code"

    def test_code_block_value(self) -> None:
        assert to_plain_text(Code(value="x = 1", lang="python")) == "x = 1"

    def test_image_uses_alt(self) -> None:
        assert to_plain_text(Image(url="i.png", alt="diagram")) == "diagram"
