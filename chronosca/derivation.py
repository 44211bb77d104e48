"""Derive a word of one language from a word of its ancestor."""

import logging
from typing import Iterable

from .constants import word_schema
from .engine import SoundChangeEngine
from .utils import validate_objects


def derive_word(
        word_record: dict,
        rules: str,
        orthography_categories: Iterable[dict] = None,
        phonology_categories: Iterable[dict] = None,
        from_ipa: bool = False,
) -> dict:
    """Apply a derivation ruleset to a source word.

    Parameters
    ----------
    word_record: dict
        Format is {"word": str, "ipa": str}; other keys are ignored.
    rules: str
        The derivation rule script.
    orthography_categories, phonology_categories: Iterable[dict]
        Category rows of the source language. The phonology categories
        are used when deriving from the pronunciation, the orthography
        categories otherwise.
    from_ipa: bool
        Derive from the record's "ipa" instead of its "word".

    Returns
    -------
    dict
        The result of applying the rules, or the failure dict of the
        rule script if it doesn't compile.

    Raises
    ------
    ValueError
        If the word record is malformed.
    """
    record, = validate_objects([word_record], word_schema)
    categories = phonology_categories if from_ipa else orthography_categories
    engine = SoundChangeEngine(categories)
    set_rules_result = engine.set_rules(rules)
    if not set_rules_result["success"]:
        return set_rules_result
    source = record["ipa"] if from_ipa else record["word"]
    logging.debug("Deriving %r from %s", source, "ipa" if from_ipa else "word")
    return engine.apply_sound_changes(source)
