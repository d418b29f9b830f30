from .base import DocumentParser
from .markdown_parser import MarkdownParser, create_markdown_it, default_parser
from .nodes import (
    Blockquote,
    Break,
    Code,
    Delete,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Parent,
    Position,
    Root,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    walk,
)
from .plaintext import to_plain_text
from .renderer import Rendered, RenderedSpan, render, to_markdown

__all__ = [
    # Parsing
    "DocumentParser",
    "MarkdownParser",
    "create_markdown_it",
    "default_parser",
    # Nodes
    "Blockquote",
    "Break",
    "Code",
    "Delete",
    "Emphasis",
    "Heading",
    "Html",
    "Image",
    "InlineCode",
    "Link",
    "List",
    "ListItem",
    "Node",
    "Paragraph",
    "Parent",
    "Position",
    "Root",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
    "walk",
    # Rendering
    "Rendered",
    "RenderedSpan",
    "render",
    "to_markdown",
    "to_plain_text",
]
