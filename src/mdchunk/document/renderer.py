# document/renderer.py

"""Deterministic markdown serializer.

Besides the text, rendering records where every node landed in the output
(``RenderedSpan``) and which output characters are semantic content rather
than syntax. The text splitter relies on both to find safe cut positions and
to measure any slice of the output without re-parsing it.
"""

import re
import string
from dataclasses import dataclass

from .nodes import (
    BLOCK_TYPES,
    Blockquote,
    Code,
    Heading,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Node,
    Parent,
    Table,
    TableRow,
    Text,
)

_ENTITY = re.compile(r"&#?[A-Za-z0-9]+;")
_ORDERED_MARKER = re.compile(r"\d{1,9}$")
_URL_NEEDS_BRACKETS = re.compile(r"[\s()<>]")

_ALIGN_DELIMITERS = {
    None: "---",
    "left": ":---",
    "right": "---:",
    "center": ":---:",
}

_INLINE_MARKERS = {
    "emphasis": "*",
    "strong": "**",
    "delete": "~~",
}


@dataclass(frozen=True)
class RenderedSpan:
    """Output interval of one node.

    ``inner_start``/``inner_end`` delimit the node's content, so
    ``text[start:inner_start]`` is its opening syntax and
    ``text[inner_end:end]`` its closing syntax.
    """

    node: Node
    start: int
    end: int
    inner_start: int
    inner_end: int

    @property
    def type(self) -> str:
        return self.node.type

    def opening(self, text: str) -> str:
        return text[self.start : self.inner_start]

    def closing(self, text: str) -> str:
        return text[self.inner_end : self.end]


@dataclass(frozen=True)
class Rendered:
    text: str
    spans: tuple[RenderedSpan, ...]
    # offsets[i] is the number of content characters in text[:i]
    offsets: tuple[int, ...]
    # positions of backslashes inserted as escapes
    escapes: tuple[int, ...] = ()

    def content_size(self, start: int = 0, end: int | None = None) -> int:
        if end is None:
            end = len(self.text)
        return self.offsets[end] - self.offsets[start]


def render(node: Node) -> Rendered:
    return _Writer().render(node)


def to_markdown(node: Node) -> str:
    return render(node).text


class _Writer:
    def __init__(self) -> None:
        self._parts: list[str] = []
        self._offsets: list[int] = [0]
        self._spans: list[RenderedSpan] = []
        self._escapes: list[int] = []
        # [first line, continuation lines] per open container
        self._prefixes: list[list[str]] = []
        self._at_line_start = True
        # output offset right after the current line's container prefixes
        self._line_origin = 0
        self._single_line = False
        self._in_table = False

    def render(self, node: Node) -> Rendered:
        self._node(node)
        return Rendered(
            text="".join(self._parts),
            spans=tuple(self._spans),
            offsets=tuple(self._offsets),
            escapes=tuple(self._escapes),
        )

    @property
    def _pos(self) -> int:
        return len(self._offsets) - 1

    # Low level output

    def _emit(self, value: str, content: bool = False) -> None:
        if not value:
            return
        self._parts.append(value)
        last = self._offsets[-1]
        if content:
            self._offsets.extend(range(last + 1, last + 1 + len(value)))
        else:
            self._offsets.extend([last] * len(value))

    def _take_prefix(self) -> str:
        parts = []
        for prefix in self._prefixes:
            parts.append(prefix[0])
            prefix[0] = prefix[1]
        return "".join(parts)

    def _open_line(self) -> bool:
        """Emit pending container prefixes; True if a new line was started."""
        if not self._at_line_start:
            return False
        self._emit(self._take_prefix())
        self._at_line_start = False
        self._line_origin = self._pos
        return True

    def _newline(self, content: bool = False) -> None:
        if self._at_line_start:
            self._emit(self._take_prefix().rstrip())
        self._emit("\n", content)
        self._at_line_start = True

    def write(self, value: str, content: bool = False, escape: bool = False) -> None:
        if self._single_line:
            value = value.replace("\n", " ")
        for index, line in enumerate(value.split("\n")):
            if index:
                self._newline(content)
            if not line:
                continue
            line_start = self._open_line() or self._pos == self._line_origin
            if escape:
                self._emit_escaped(line, line_start)
            else:
                self._emit(line, content)

    def _emit_escaped(self, line: str, line_start: bool) -> None:
        for index, char in enumerate(line):
            if self._needs_escape(line, index, line_start):
                self._escapes.append(self._pos)
                self._emit("\\")
            self._emit(char, content=True)

    def _needs_escape(self, line: str, index: int, line_start: bool) -> bool:
        char = line[index]
        prev = line[index - 1] if index else ""
        following = line[index + 1] if index + 1 < len(line) else ""

        if char in "*`[]":
            return True
        if char == "\\":
            return not following or following in string.punctuation
        if char == "_":
            return not (prev.isalnum() and following.isalnum())
        if char == "~":
            return prev == "~" or following == "~"
        if char == "<":
            return following.isalpha() or following in "/!?"
        if char == "&":
            return _ENTITY.match(line, index) is not None
        if char == "|":
            return self._in_table

        if not line_start:
            return False
        lead = line[:index]
        if lead.strip():
            if char in ".)" and _ORDERED_MARKER.match(lead.lstrip()):
                return following in ("", " ", "\t")
            return False
        if char in "#>":
            return True
        if char in "-+=":
            return following in ("", " ", "\t") or set(line.strip()) == {char}
        return False

    # Nodes

    def _node(self, node: Node, **kwargs) -> None:
        if node.type not in BLOCK_TYPES and node.type not in (
            "root",
            "list_item",
            "table_row",
        ):
            self._open_line()
        handler = getattr(self, f"_render_{node.type}", None)
        if handler is None:
            raise ValueError(f"Unknown node type: {node.type}")

        start = self._pos
        inner = handler(node, **kwargs)
        end = self._pos
        inner_start, inner_end = inner if inner else (start, end)
        self._spans.append(RenderedSpan(node, start, end, inner_start, inner_end))

    def _blocks(self, children: tuple[Node, ...], separator: str = "\n\n") -> None:
        previous_inline = False
        for index, child in enumerate(children):
            inline = child.type not in BLOCK_TYPES
            if index and not (inline and previous_inline):
                self.write(separator)
            self._node(child)
            previous_inline = inline

    def _inlines(self, children: tuple[Node, ...]) -> None:
        for child in children:
            self._node(child)

    def _render_root(self, node: Parent) -> None:
        self._blocks(node.children)

    def _render_paragraph(self, node: Parent) -> None:
        self._inlines(node.children)

    def _render_heading(self, node: Heading) -> tuple[int, int]:
        self.write("#" * node.depth + " ")
        inner_start = self._pos
        self._single_line = True
        self._inlines(node.children)
        self._single_line = False
        return inner_start, self._pos

    def _render_thematic_break(self, node: Node) -> None:
        self.write("***")

    def _render_code(self, node: Code) -> tuple[int, int]:
        longest = max((len(run) for run in re.findall(r"`+", node.value)), default=0)
        fence = "`" * max(3, longest + 1)
        info = " ".join(part for part in (node.lang, node.meta) if part)
        self.write(fence + info)
        self.write("\n")
        if node.value:
            self._open_line()
        inner_start = self._pos
        self.write(node.value, content=True)
        inner_end = self._pos
        if node.value:
            self.write("\n")
        self.write(fence)
        return inner_start, inner_end

    def _render_html(self, node: Node) -> None:
        self.write(node.value, content=True)

    def _render_blockquote(self, node: Blockquote) -> None:
        if not node.children:
            self.write(">")
            return
        self._prefixes.append(["> ", "> "])
        self._blocks(node.children)
        self._prefixes.pop()

    def _render_list(self, node: List) -> None:
        separator = "\n\n" if node.spread else "\n"
        first = node.start if node.start is not None else 1
        for index, item in enumerate(node.children):
            if index:
                self.write(separator)
            if node.ordered:
                delimiter = node.marker if node.marker in (".", ")") else "."
                marker = f"{first + index}{delimiter} "
            else:
                bullet = node.marker if node.marker in ("-", "*", "+") else "-"
                marker = f"{bullet} "
            self._node(item, marker=marker, separator=separator)

    def _render_list_item(
        self, node: ListItem, marker: str = "- ", separator: str = "\n"
    ) -> None:
        if not node.children:
            self.write(marker.rstrip())
            return
        self._prefixes.append([marker, " " * len(marker)])
        self._blocks(node.children, separator="\n\n" if node.spread else separator)
        self._prefixes.pop()

    def _render_table(self, node: Table) -> None:
        self._in_table = True
        self._single_line = True
        for index, row in enumerate(node.children):
            if index:
                self._newline()
            self._node(row)
            if index == 0:
                self._newline()
                columns = len(row.children) if isinstance(row, TableRow) else 0
                delimiters = [
                    _ALIGN_DELIMITERS.get(
                        node.align[column] if column < len(node.align) else None,
                        "---",
                    )
                    for column in range(max(columns, 1))
                ]
                self.write("| " + " | ".join(delimiters) + " |")
        self._single_line = False
        self._in_table = False

    def _render_table_row(self, node: TableRow) -> None:
        self.write("| ")
        for index, cell in enumerate(node.children):
            if index:
                self.write(" | ")
            self._node(cell)
        self.write(" |")

    def _render_table_cell(self, node: Parent) -> None:
        self._inlines(node.children)

    def _render_text(self, node: Text) -> None:
        self.write(node.value, content=True, escape=True)

    def _render_emphasis(self, node: Parent) -> tuple[int, int]:
        return self._wrapped(node, _INLINE_MARKERS["emphasis"])

    def _render_strong(self, node: Parent) -> tuple[int, int]:
        return self._wrapped(node, _INLINE_MARKERS["strong"])

    def _render_delete(self, node: Parent) -> tuple[int, int]:
        return self._wrapped(node, _INLINE_MARKERS["delete"])

    def _wrapped(self, node: Parent, marker: str) -> tuple[int, int]:
        self.write(marker)
        inner_start = self._pos
        self._inlines(node.children)
        inner_end = self._pos
        self.write(marker)
        return inner_start, inner_end

    def _render_inline_code(self, node: InlineCode) -> tuple[int, int]:
        value = node.value
        longest = max((len(run) for run in re.findall(r"`+", value)), default=0)
        fence = "`" * (longest + 1)
        padded = value.startswith("`") or value.endswith("`")
        if value.startswith(" ") and value.endswith(" ") and value.strip():
            padded = True
        pad = " " if padded else ""
        self.write(fence + pad)
        inner_start = self._pos
        self.write(value, content=True)
        inner_end = self._pos
        self.write(pad + fence)
        return inner_start, inner_end

    def _render_break(self, node: Node) -> None:
        self.write("\\")
        self.write("\n")

    def _render_link(self, node: Link) -> tuple[int, int]:
        self.write("[")
        inner_start = self._pos
        self._inlines(node.children)
        inner_end = self._pos
        self.write("](" + _destination(node.url, node.title) + ")")
        return inner_start, inner_end

    def _render_image(self, node: Image) -> tuple[int, int]:
        self.write("![")
        inner_start = self._pos
        self.write(node.alt, content=True, escape=True)
        inner_end = self._pos
        self.write("](" + _destination(node.url, node.title) + ")")
        return inner_start, inner_end


def _destination(url: str, title: str | None) -> str:
    if not url or _URL_NEEDS_BRACKETS.search(url):
        url = "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
    if title:
        escaped = title.replace("\\", "\\\\").replace('"', '\\"')
        return f'{url} "{escaped}"'
    return url
