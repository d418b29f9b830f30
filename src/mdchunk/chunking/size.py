import math
from collections.abc import Iterable, Iterator

from mdchunk.document.markdown_parser import default_parser
from mdchunk.document.nodes import Node
from mdchunk.document.plaintext import to_plain_text
from mdchunk.document.renderer import to_markdown

from .sections import Section


def content_size(node: Node | str) -> int:
    """Length of the semantic text, markdown syntax stripped.

    Strings are parsed as markdown first.
    """
    if isinstance(node, str):
        node = default_parser().parse(node)
    return len(to_plain_text(node))


def section_size(section: Section) -> int:
    size = content_size(section.heading) if section.heading is not None else 0
    for child in section.children:
        if isinstance(child, Section):
            size += section_size(child)
        else:
            size += content_size(child)
    return size


def size_of(item: Node | Section) -> int:
    if isinstance(item, Section):
        return section_size(item)
    return content_size(item)


def raw_size(node: Node | str) -> int:
    if isinstance(node, str):
        return len(node)
    if node.position is not None:
        return node.position.length
    return len(to_markdown(node))


def split_text_by_max_raw_size(
    text: str, max_raw_size: int, search_ratio: float = 0.8
) -> Iterator[str]:
    """Hard-wrap text to at most ``max_raw_size`` characters.

    Cuts at the last whitespace inside the trailing window of each piece
    (``search_ratio`` of the limit onwards), or exactly at the limit when the
    window holds none.
    """
    remaining = text
    lowest = math.floor(max_raw_size * search_ratio)

    while len(remaining) > max_raw_size:
        cut = max_raw_size
        at_whitespace = False
        for index in range(max_raw_size - 1, lowest - 1, -1):
            if remaining[index].isspace():
                cut = index
                at_whitespace = True
                break

        piece = remaining[:cut].strip()
        remaining = remaining[cut:].strip() if at_whitespace else remaining[cut:]
        if piece:
            yield piece

    if remaining:
        yield remaining


def split_by_max_raw_size(
    texts: Iterable[str], max_raw_size: int, search_ratio: float = 0.8
) -> Iterator[str]:
    for text in texts:
        if len(text) <= max_raw_size:
            yield text
        else:
            yield from split_text_by_max_raw_size(text, max_raw_size, search_ratio)
