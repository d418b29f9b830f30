import pytest

from mdchunk.chunking import SplitterOptions
from mdchunk.chunking.splitters import TableSplitter
from mdchunk.document import (
    Paragraph,
    Table,
    TableCell,
    TableRow,
    Text,
    default_parser,
    to_plain_text,
)

TABLE = (
    "| h1 | h2 |\n"
    "| :--- | ---: |\n"
    "| aa | bb |\n"
    "| cc | dd |\n"
    "| ee | ff |"
)


def _splitter(chunk_size: int, **kwargs: object) -> TableSplitter:
    return TableSplitter(SplitterOptions(chunk_size=chunk_size, **kwargs))


class TestTableSplitter:
    def test_header_repeats_in_every_part(self) -> None:
        assert _splitter(10).split_text(TABLE) == [
            "| h1 | h2 |\n| :--- | ---: |\n| aa | bb |\n| cc | dd |",
            "| h1 | h2 |\n| :--- | ---: |\n| ee | ff |",
        ]

    def test_table_that_fits_is_unchanged(self) -> None:
        assert _splitter(100).split_text(TABLE) == [TABLE]

    def test_never_split_rule(self) -> None:
        splitter = _splitter(5, rules={"table": "never-split"})

        assert splitter.split_text(TABLE) == [TABLE]

    def test_header_only_table_is_not_split(self) -> None:
        text = "| a very long header cell | another long header cell |\n| --- | --- |"

        assert _splitter(5).split_text(text) == [text]

    def test_oversized_row_becomes_mini_tables(self) -> None:
        """Each cell is paired with its header cell."""
        text = (
            "| name | description |\n"
            "| --- | --- |\n"
            "| widget | a very long description of the widget |"
        )

        pieces = _splitter(10).split_text(text)

        assert pieces[0] == "| name |\n| --- |\n| widget |"
        rest = pieces[1:]
        assert len(rest) > 1
        assert all(p.startswith("| description |\n| --- |\n| ") for p in rest)
        cells = []
        for piece in rest:
            table = default_parser().parse(piece).children[0]
            assert isinstance(table, Table)
            cells.append(to_plain_text(table.children[1]))
        assert " ".join(cells) == "a very long description of the widget"

    def test_rejects_rows_that_are_not_table_rows(self) -> None:
        header = TableRow(children=(TableCell(children=(Text(value="h"),)),))
        stray = Paragraph(children=(Text(value="x " * 30),))
        table = Table(children=(header, stray))

        with pytest.raises(ValueError, match="must be table rows"):
            _splitter(10).split_node(table)
