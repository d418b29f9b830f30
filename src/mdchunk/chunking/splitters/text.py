"""Fallback splitter for content without a dedicated construct splitter.

The node is rendered once; every decision afterwards works on offsets into
that text. Cut preferences, from best to worst:

1. a structural boundary (heading, thematic break, code, blockquote,
   paragraph, list, list item) whose first piece is reasonably sized,
2. sentence ends, packed greedily,
3. for a single oversized sentence, the best scored position near a target
   offset (structural > sentence > clause > whitespace),
4. right after a protected range, else the nearest whitespace, word
   boundary or plain character that keeps the piece within the limit.

No cut ever lands inside a protected range. When a cut falls inside a
construct that may be split (emphasis, a splittable link, fenced code),
the first piece gets the closing syntax and the next piece the opening
syntax again.
"""

import logging
import math
from bisect import bisect_left
from collections.abc import Callable, Iterator

from mdchunk.document.nodes import Node
from mdchunk.document.renderer import Rendered, RenderedSpan, render

from ..boundaries import (
    PROTECTABLE_TYPES,
    RangeIndex,
    StructuralBoundary,
    find_protected_ranges,
    find_structural_boundaries,
)
from ..options import SplitterOptions
from .base import AbstractNodeSplitter

logger = logging.getLogger(__name__)

# how far around the target offset cut positions are considered
SEARCH_WINDOW = 200

SENTENCE_SCORE = 50
CLAUSE_SCORE = 30
WHITESPACE_SCORE = 10
DISTANCE_PENALTY = 0.1


class TextSplitter(AbstractNodeSplitter):
    def split_node(self, node: Node) -> list[Node]:
        pieces = self.split_rendered(render(node))
        if len(pieces) > 1:
            logger.debug("Split %s node into %d text pieces", node.type, len(pieces))
        return [self.parser.parse(piece) for piece in pieces]

    def split_text(self, text: str) -> list[str]:
        return self.split_rendered(render(self.parser.parse(text)))

    def split_rendered(self, rendered: Rendered) -> list[str]:
        cutter = _Cutter(rendered, self.options, self._is_protected)
        return cutter.split()

    def _is_protected(self, node: Node) -> bool:
        return not self.can_split_node(node)


class _Cutter:
    def __init__(
        self,
        rendered: Rendered,
        options: SplitterOptions,
        is_protected: Callable[[Node], bool],
    ) -> None:
        self.rendered = rendered
        self.text = rendered.text
        self.options = options
        self.chunk_size = options.chunk_size
        self.max_allowed = options.max_allowed_size
        self.index = RangeIndex(find_protected_ranges(rendered, is_protected))
        self.boundaries = find_structural_boundaries(rendered)
        self._boundary_positions = [b.position for b in self.boundaries]
        # splittable constructs whose syntax is re-balanced across cuts
        self.rebalanced = [
            span
            for span in rendered.spans
            if span.type in PROTECTABLE_TYPES
            and span.inner_end > span.inner_start
            and not is_protected(span.node)
        ]

    # Measuring

    def trim(self, start: int, end: int) -> tuple[int, int]:
        while start < end and self.text[start].isspace():
            start += 1
        while end > start and self.text[end - 1].isspace():
            end -= 1
        return start, end

    def size(self, start: int, end: int) -> int:
        start, end = self.trim(start, end)
        return self.rendered.content_size(start, end)

    # Splitting

    def split(self) -> list[str]:
        ranges = self.split_range(0, len(self.text))
        pieces = [self.materialize(start, end) for start, end in ranges]
        return [piece for piece in pieces if piece]

    def split_range(self, start: int, end: int) -> list[tuple[int, int]]:
        ranges: list[tuple[int, int]] = []
        while self.size(start, end) > self.max_allowed:
            cut = self.structural_cut(start, end)
            if cut is None:
                ranges.extend(self.split_sentences(start, end))
                return ranges
            ranges.append((start, cut))
            start = cut
        ranges.append((start, end))
        return ranges

    def structural_cut(self, start: int, end: int) -> int | None:
        lowest = self.chunk_size * self.options.structural_min_ratio
        highest = min(
            self.chunk_size * self.options.structural_max_ratio, self.max_allowed
        )
        best: StructuralBoundary | None = None
        best_key: tuple[int, float] | None = None

        first = bisect_left(self._boundary_positions, start + 1)
        for boundary in self.boundaries[first:]:
            position = boundary.position
            if position >= end:
                break
            if self.index.is_protected(position):
                continue
            size = self.size(start, position)
            if not lowest <= size <= highest or self.size(position, end) == 0:
                continue
            key = (boundary.priority, -abs(size - self.chunk_size))
            if best_key is None or key > best_key:
                best, best_key = boundary, key

        if best is None:
            return None
        logger.debug("Cutting at %s boundary, offset %d", best.kind, best.position)
        return best.position

    def sentence_ends(self, start: int, end: int) -> list[int]:
        return [
            position
            for position in range(start + 1, end)
            if self.is_sentence_end(position) and not self.index.is_protected(position)
        ]

    def is_sentence_end(self, position: int) -> bool:
        if position <= 0 or position >= len(self.text):
            return False
        mark = self.text[position - 1]
        if mark not in ".!?" or not self.text[position].isspace():
            return False
        # whitespace after the mark already rules out URL dots such as "example.com"
        if mark == ".":
            # single-letter abbreviations such as "e.g."
            if position >= 2 and self.text[position - 2].isalpha():
                before = self.text[position - 3] if position >= 3 else " "
                if not before.isalnum():
                    return False
        return True

    def split_sentences(self, start: int, end: int) -> list[tuple[int, int]]:
        cuts = [start, *self.sentence_ends(start, end), end]
        sentences = [
            (a, b) for a, b in zip(cuts, cuts[1:]) if self.size(a, b) > 0
        ]
        if not sentences:
            return [(start, end)]
        # keep leading and trailing whitespace attached so nothing is dropped
        sentences[0] = (start, sentences[0][1])
        sentences[-1] = (sentences[-1][0], end)
        for index in range(1, len(sentences)):
            sentences[index] = (sentences[index - 1][1], sentences[index][1])

        min_fragment = math.floor(self.chunk_size * self.options.min_fragment_ratio)
        ranges: list[tuple[int, int]] = []
        current: tuple[int, int] | None = None
        current_size = 0

        for sentence_start, sentence_end in sentences:
            sentence_size = self.size(sentence_start, sentence_end)
            if sentence_size > self.max_allowed:
                if current is not None:
                    ranges.append(current)
                    current, current_size = None, 0
                ranges.extend(self.reduce(sentence_start, sentence_end))
                continue

            if current is None:
                current, current_size = (sentence_start, sentence_end), sentence_size
                continue

            combined = self.size(current[0], sentence_end)
            if combined <= self.chunk_size:
                current, current_size = (current[0], sentence_end), combined
                continue

            small = current_size < min_fragment or sentence_size < min_fragment
            if small and combined <= self.max_allowed:
                logger.debug("Absorbing small fragment, chunk grows to %d", combined)
                current, current_size = (current[0], sentence_end), combined
                continue

            ranges.append(current)
            current, current_size = (sentence_start, sentence_end), sentence_size

        if current is not None:
            ranges.append(current)
        return ranges

    def reduce(self, start: int, end: int) -> list[tuple[int, int]]:
        ranges = []
        while self.size(start, end) > self.max_allowed:
            cut = self.find_cut(start, end)
            if cut is None:
                logger.debug(
                    "No safe cut between offsets %d and %d, emitting oversized",
                    start,
                    end,
                )
                break
            ranges.append((start, cut))
            start = cut
        ranges.append((start, end))
        return ranges

    def find_cut(self, start: int, end: int) -> int | None:
        total = self.size(start, end)
        target = start + math.floor((end - start) * self.chunk_size / total)
        target = min(max(target, start + 1), end - 1)

        best: int | None = None
        best_score = -math.inf
        for position in self._around(target, start, end, SEARCH_WINDOW):
            score = self.score(position, target, start)
            if score is not None and score > best_score:
                best, best_score = position, score
        if best is not None:
            return best

        return self.fallback_cut(start, end, target)

    def score(self, position: int, target: int, start: int) -> float | None:
        if self.index.is_protected(position):
            return None
        size = self.size(start, position)
        if size == 0 or size > self.max_allowed:
            return None

        priority = self.boundary_priority(position)
        if priority:
            score = priority * 100
        elif self.is_sentence_end(position):
            score = SENTENCE_SCORE
        elif self.text[position - 1] in ",;:" and self.text[position].isspace():
            score = CLAUSE_SCORE
        elif self.text[position].isspace() or self.text[position - 1].isspace():
            score = WHITESPACE_SCORE
        else:
            return None
        return score - abs(position - target) * DISTANCE_PENALTY

    def boundary_priority(self, position: int) -> int:
        index = bisect_left(self._boundary_positions, position)
        priority = 0
        while (
            index < len(self.boundaries) and self.boundaries[index].position == position
        ):
            priority = max(priority, self.boundaries[index].priority)
            index += 1
        return priority

    def fallback_cut(self, start: int, end: int, target: int) -> int | None:
        protected = self.index.covering(target) or self.index.starting_at(start)
        if protected is not None and start < protected.end < end:
            if self.size(protected.end, end) > 0:
                logger.debug("Cutting after protected %s range", protected.kind)
                return protected.end

        for accept in (self._at_whitespace, self._between_words):
            cut = self._nearest_cut(start, end, target, accept)
            if cut is not None:
                return cut

        cut = self._nearest_cut(start, end, target, lambda position: True)
        if cut is not None:
            logger.debug("Hard cut at offset %d", cut)
            return cut
        # every fitting position is protected, accept an oversized piece
        return self._nearest_cut(
            start, end, target, self._at_whitespace, limit=math.inf
        )

    def _nearest_cut(
        self,
        start: int,
        end: int,
        target: int,
        accept: Callable[[int], bool],
        limit: float | None = None,
    ) -> int | None:
        if limit is None:
            limit = self.max_allowed
        for position in self._around(target, start, end, end - start):
            if self.index.is_protected(position) or not accept(position):
                continue
            if 0 < self.size(start, position) <= limit:
                return position
        return None

    def _at_whitespace(self, position: int) -> bool:
        return self.text[position].isspace() or self.text[position - 1].isspace()

    def _between_words(self, position: int) -> bool:
        return not (
            self.text[position - 1].isalnum() and self.text[position].isalnum()
        )

    @staticmethod
    def _around(target: int, start: int, end: int, window: int) -> Iterator[int]:
        """Positions strictly inside (start, end), backward from target first."""
        low = max(start + 1, target - window)
        high = min(end - 1, target + window)
        yield from range(min(target, high), low - 1, -1)
        yield from range(max(target + 1, low), high + 1)

    # Output

    def materialize(self, start: int, end: int) -> str:
        inner_code = self._crossing(start, "code")
        if inner_code:
            # keep indentation of code lines
            while start < end and self.text[start] == "\n":
                start += 1
            trimmed_start = start
            _, trimmed_end = self.trim(start, end)
        else:
            trimmed_start, trimmed_end = self.trim(start, end)
        if trimmed_start >= trimmed_end:
            return ""

        opened = self._spans_across(start)
        closed = self._spans_across(end)
        opening = "".join(span.opening(self.text) for span in opened)
        closing = "".join(span.closing(self.text) for span in reversed(closed))
        return opening + self.text[trimmed_start:trimmed_end] + closing

    def _spans_across(self, position: int) -> list[RenderedSpan]:
        spans = [
            span
            for span in self.rebalanced
            if span.inner_start < position < span.inner_end
        ]
        return sorted(spans, key=lambda span: (span.start, -span.end))

    def _crossing(self, position: int, kind: str) -> bool:
        return any(span.type == kind for span in self._spans_across(position))
