import logging
from dataclasses import dataclass
from time import monotonic

from mdchunk.document.markdown_parser import default_parser
from mdchunk.document.nodes import Heading, Node, Root
from mdchunk.document.plaintext import to_plain_text
from mdchunk.document.renderer import to_markdown
from mdchunk.observability import names
from mdchunk.observability.base import MetricsHook, NoOpMetricsHook

from .options import SplitterOptions
from .preprocess import preprocess
from .sections import Section, flatten_section
from .size import content_size, split_text_by_max_raw_size
from .splitters.tree import TreeSplitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Breadcrumb:
    text: str
    depth: int


@dataclass(frozen=True)
class Chunk:
    text: str
    breadcrumbs: tuple[Breadcrumb, ...] = ()


@dataclass(frozen=True)
class SplitResult:
    chunks: list[Chunk]


def split(
    tree: Root,
    options: SplitterOptions | dict,
    *,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> SplitResult:
    start = monotonic()
    options = _validate(options)
    splitter = TreeSplitter(options)
    prepared = preprocess(tree, options.rules)

    chunks = []
    oversized = 0
    raw_cuts = 0
    for node_chunk in splitter.split_chunks(prepared):
        node = node_chunk.content
        if isinstance(node, Section):
            node = flatten_section(node)
        text = to_markdown(node).strip()
        if not text:
            continue
        if content_size(node) > options.max_allowed_size:
            oversized += 1

        breadcrumbs = tuple(_breadcrumb(h) for h in node_chunk.breadcrumbs)
        if options.max_raw_size is not None and len(text) > options.max_raw_size:
            pieces = list(
                split_text_by_max_raw_size(
                    text, options.max_raw_size, options.raw_search_ratio
                )
            )
            raw_cuts += len(pieces) - 1
            chunks.extend(Chunk(piece, breadcrumbs) for piece in pieces)
        else:
            chunks.append(Chunk(text, breadcrumbs))

    if oversized:
        logger.debug("%d chunks exceed the allowed size", oversized)

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.SPLIT_DURATION, elapsed_ms)
    metrics_hook.increment(names.SPLIT_CHUNKS_CREATED, len(chunks))
    metrics_hook.increment(names.SPLIT_OVERSIZED_CHUNKS, oversized)
    metrics_hook.increment(names.SPLIT_RAW_SIZE_CUTS, raw_cuts)
    metrics_hook.record_gauge(names.SPLIT_INPUT_SIZE, content_size(tree))
    return SplitResult(chunks=chunks)


def split_text(
    text: str,
    options: SplitterOptions | dict,
    *,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> SplitResult:
    return split(default_parser().parse(text), options, metrics_hook=metrics_hook)


def split_node(tree: Root, options: SplitterOptions | dict) -> list[Node]:
    """Split without serializing, for callers that keep working with trees."""
    options = _validate(options)
    return TreeSplitter(options).split_node(preprocess(tree, options.rules))


def _breadcrumb(heading: Heading) -> Breadcrumb:
    return Breadcrumb(text=to_plain_text(heading), depth=heading.depth)


def _validate(options: SplitterOptions | dict) -> SplitterOptions:
    if isinstance(options, SplitterOptions):
        return options
    return SplitterOptions(**options)
