"""Estimate the IPA pronunciation of a word from its spelling.

The spelling is first converted letter by letter, using explicit letter
replacements and the graphs of the language's phones. The result is then
passed through a rewrite ruleset, written against the phonology categories.
"""

import logging
from typing import Iterable, List, Tuple

from .constants import letter_replacement_schema, phone_schema
from .engine import SoundChangeEngine
from .utils import validate_objects

UNKNOWN_LETTER = "*"


def parse_letter_replacements(text) -> List[Tuple[str, str]]:
    """Parse ``spelling|ipa`` lines, longest spelling first.

    Lines without a ``|`` are ignored.
    """
    lines = text.split("\n") if isinstance(text, str) else list(text)
    lines = [line.rstrip("\r") for line in lines]
    pairs = [
        tuple(letter_replacement_schema.validate(line))
        for line in lines
        if letter_replacement_schema.is_valid(line)
    ]
    return sorted(
        ((spelling.lower(), ipa) for spelling, ipa in pairs if spelling),
        key=lambda pair: len(pair[0]), reverse=True)


class PronunciationEstimator:
    """Convert spellings to estimated pronunciations.

    Parameters
    ----------
    phones: Iterable[dict]
        Format is {"graph": str, "ipa": str}: the spelling of a phone
        and the IPA string it stands for.
    letter_replacements: str or list
        ``spelling|ipa`` lines, which take priority over the phones.
    rewrite_rules: str
        Sound change rules applied to the converted word.
    categories: Iterable[dict]
        Phonology categories used by the rewrite rules.

    Raises
    ------
    ParseError
        If the rewrite rules don't compile.
    """

    def __init__(
            self, phones: Iterable[dict] = (), letter_replacements="",
            rewrite_rules: str = "", categories: Iterable[dict] = None
    ):
        self.phones = sorted(
            ((p["graph"].lower(), p["ipa"]) for p in validate_objects(phones, phone_schema)
             if p["graph"]),
            key=lambda phone: len(phone[0]), reverse=True)
        self.letter_replacements = parse_letter_replacements(letter_replacements)
        self.engine = SoundChangeEngine(categories)
        result = self.engine.set_rules(rewrite_rules)
        if not result["success"]:
            raise self.engine.last_error

    def transliterate(self, word: str) -> str:
        """Convert a spelling to IPA letter by letter, without rewrite rules."""
        lowercase = word.lower()
        estimation = []
        idx = 0
        while idx < len(lowercase):
            if lowercase[idx] == " ":
                estimation.append(" ")
                idx += 1
                continue
            match = next(
                ((spelling, ipa) for spelling, ipa in self.letter_replacements
                 if lowercase.startswith(spelling, idx)),
                None)
            if match is None:
                match = next(
                    ((graph, ipa) for graph, ipa in self.phones
                     if lowercase.startswith(graph, idx)),
                    None)
            if match is None:
                logging.debug("No phone for %r in %r", lowercase[idx], word)
                estimation.append(UNKNOWN_LETTER)
                idx += 1
                continue
            estimation.append(match[1])
            idx += len(match[0])
        return "".join(estimation)

    def estimate(self, word: str) -> dict:
        """Estimate the pronunciation of a word."""
        return self.engine.apply_sound_changes(self.transliterate(word))

    def estimate_many(self, words: Iterable[str]) -> List[dict]:
        return self.engine.apply_many([self.transliterate(word) for word in words])
