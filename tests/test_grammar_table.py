"""Test suite for running grammar tables."""

import pytest

from chronosca.grammar_table import run_grammar_table


@pytest.fixture
def cells():
    return [
        {"row": 0, "column": 0, "rules": "> s / _#"},
        {"row": 0, "column": 1, "rules": "V > / _#\n> en / _#"},
        {"row": 1, "column": 1, "rules": "P > X"},
    ]


def test_run_grammar_table(cells, category_rows):
    # when
    result = run_grammar_table(2, 2, cells, "kata", category_rows)
    # then
    assert result[0][0] == {"success": True, "result": "katas"}
    assert result[0][1] == {"success": True, "result": "katen"}
    assert result[1][0] is None
    assert result[1][1]["success"] is False
    assert result[1][1]["kind"] == "UnknownCategory"
    assert result[1][1]["line"] == 1


def test_empty_table():
    assert run_grammar_table(2, 3, [], "kata") == [[None] * 3, [None] * 3]


def test_cell_outside_table():
    cells = [{"row": 2, "column": 0, "rules": "> s / _#"}]
    with pytest.raises(ValueError):
        run_grammar_table(2, 2, cells, "kata")


@pytest.mark.parametrize(
    "cell",
    [
        {"row": -1, "column": 0, "rules": ""},
        {"row": 0, "column": "1", "rules": ""},
        {"row": 0, "column": 0},
    ],
    ids=["negative_row", "str_column", "no_rules"]
)
def test_invalid_cell(cell):
    with pytest.raises(ValueError):
        run_grammar_table(1, 1, [cell], "kata")
