from dataclasses import replace

from mdchunk.chunking import NodeRule, TransformContext, preprocess
from mdchunk.document import (
    Image,
    Link,
    Node,
    Root,
    Text,
    default_parser,
    to_markdown,
    to_plain_text,
)


def _parse(markdown: str) -> Root:
    return default_parser().parse(markdown)


class TestPreprocess:
    def test_without_transforms_returns_same_tree(self) -> None:
        root = _parse("Some [link](https://example.com).")

        assert preprocess(root, {"link": NodeRule(split="never-split")}) is root

    def test_replaces_nodes(self) -> None:
        """Links are flattened to their text."""

        def unlink(node: Node, context: TransformContext) -> Node:
            assert isinstance(node, Link)
            return Text(value=to_plain_text(node))

        root = _parse("Read [the docs](https://example.com) now.")

        result = preprocess(root, {"link": NodeRule(transform=unlink)})

        assert to_markdown(result) == "Read the docs now."

    def test_none_removes_node(self) -> None:
        root = _parse("Before ![logo](logo.png) after.")

        result = preprocess(root, {"image": NodeRule(transform=lambda n, c: None)})

        assert to_markdown(result) == "Before  after."

    def test_returning_node_keeps_it(self) -> None:
        root = _parse("Keep ![logo](logo.png) here.")

        result = preprocess(root, {"image": NodeRule(transform=lambda n, c: n)})

        assert result == root

    def test_empty_paragraph_is_dropped(self) -> None:
        root = _parse("![only](only.png)\n\nText stays.")

        result = preprocess(root, {"image": NodeRule(transform=lambda n, c: None)})

        assert to_markdown(result) == "Text stays."

    def test_formatting_rule_covers_emphasis_family(self) -> None:
        def plain(node: Node, context: TransformContext) -> Node:
            return Text(value=node.children[0].value)  # type: ignore[attr-defined]

        root = _parse("*a* **b** ~~c~~")

        result = preprocess(root, {"formatting": NodeRule(transform=plain)})

        assert to_markdown(result) == "a b c"

    def test_context_points_at_parent(self) -> None:
        seen: list[TransformContext] = []

        def record(node: Node, context: TransformContext) -> Node:
            seen.append(context)
            return node

        root = _parse("Intro ![a](a.png)")
        preprocess(root, {"image": NodeRule(transform=record)})

        (context,) = seen
        assert context.root is root
        assert context.parent is not None
        assert context.parent.type == "paragraph"
        assert context.index == 1

    def test_transform_can_rewrite_attributes(self) -> None:
        def absolute(node: Node, context: TransformContext) -> Node:
            assert isinstance(node, Image)
            return replace(node, url="https://cdn.example.com/" + node.url)

        root = _parse("![a](a.png)")

        result = preprocess(root, {"image": NodeRule(transform=absolute)})

        assert to_markdown(result) == "![a](https://cdn.example.com/a.png)"
