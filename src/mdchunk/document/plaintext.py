from .nodes import Code, Html, Image, InlineCode, Node, Parent, Text


def to_plain_text(node: Node) -> str:
    """Semantic text of a node: values and image alt text, syntax stripped."""
    if isinstance(node, (Text, InlineCode, Code, Html)):
        return node.value
    if isinstance(node, Image):
        return node.alt
    if isinstance(node, Parent):
        return "".join(to_plain_text(child) for child in node.children)
    return ""
