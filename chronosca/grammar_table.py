"""Inflect a word through a grammar table.

Each filled cell of a table holds its own rule script, e.g. the suffix
rules of one case and number. Running the table applies every cell's
rules to the same word.
"""

import logging
from typing import Iterable, List, Optional

from .constants import grammar_cell_schema
from .engine import SoundChangeEngine
from .utils import validate_objects


def run_grammar_table(
        num_rows: int,
        num_columns: int,
        cells: Iterable[dict],
        word: str,
        categories: Iterable[dict] = None,
) -> List[List[Optional[dict]]]:
    """Apply each cell's rules to a word.

    Parameters
    ----------
    num_rows, num_columns: int
        Size of the table
    cells: Iterable[dict]
        Format is {"row": int, "column": int, "rules": str}
    word: str
    categories: Iterable[dict]
        Orthography categories of the table's language

    Returns
    -------
    list[list]
        One result dict per cell. Empty cells are None, and cells with
        invalid rules hold the error from ``SoundChangeEngine.set_rules``.
    """
    cells = validate_objects(cells, grammar_cell_schema)
    result: List[List[Optional[dict]]] = [[None] * num_columns for _ in range(num_rows)]
    engine = SoundChangeEngine(categories)
    for cell in cells:
        row, column = cell["row"], cell["column"]
        if row >= num_rows or column >= num_columns:
            raise ValueError(f"Cell ({row}, {column}) is outside the {num_rows}x{num_columns} table")
        set_rules_result = engine.set_rules(cell["rules"])
        if set_rules_result["success"]:
            result[row][column] = engine.apply_sound_changes(word)
        else:
            logging.debug("Invalid rules in cell (%s, %s)", row, column)
            result[row][column] = set_rules_result
    return result
