"""Rewrite every entry of a dictionary with a sound change engine."""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from .constants import (
    LEX_ERROR_COLUMN,
    LEX_SOURCE_COLUMN,
    LEX_TARGET_COLUMN,
    lexicon_schema,
)
from .engine import SoundChangeEngine


def rewrite_lexicon(
        lexicon: pd.DataFrame,
        engine: SoundChangeEngine,
        source_column: str = LEX_SOURCE_COLUMN,
        target_column: str = LEX_TARGET_COLUMN,
) -> pd.DataFrame:
    """Apply the engine's rules to one column of a dictionary.

    Parameters
    ----------
    lexicon: pd.DataFrame
        Dictionary entries, with the words to rewrite in ``source_column``
    engine: SoundChangeEngine
        An engine with rules loaded
    source_column: str
    target_column: str
        Column that receives the rewritten words

    Returns
    -------
    pd.DataFrame
        A copy of the lexicon with ``target_column`` and an "error" column.
        Entries that failed have None in ``target_column`` and the reason
        in "error".
    """
    validated = lexicon_schema(source_column).validate(lexicon)
    rewritten = validated.copy()
    results = engine.apply_many(validated[source_column].tolist())
    rewritten[target_column] = [r.get("result") if r["success"] else None for r in results]
    rewritten[LEX_ERROR_COLUMN] = [None if r["success"] else r["message"] for r in results]
    failed = sum(1 for r in results if not r["success"])
    if failed:
        logging.info("%s of %s entries could not be rewritten", failed, len(results))
    return rewritten


def read_lexicon(csv_path: Union[str, Path]) -> pd.DataFrame:
    """Load a dictionary from a csv file, keeping every value as a string."""
    logging.info("Read lexicon from %s", csv_path)
    return pd.read_csv(csv_path, header=0, index_col=None, dtype=str, keep_default_na=False)


def write_lexicon(output_file: Union[str, Path], data: pd.DataFrame):
    """Save a dictionary DataFrame to a csv file."""
    logging.info("Write lexicon data to %s", output_file)
    data.to_csv(output_file, header=True, index=False)
