"""
Sound change engine: the entry point used by the rest of the application.

Usage:
    from chronosca.engine import SoundChangeEngine

    engine = SoundChangeEngine([{"letter": "V", "members": ["a", "e", "i"]}])
    engine.set_rules("t > d / V_V")      # {"success": True}
    engine.apply_sound_changes("ata")    # {"success": True, "result": "ada"}
    engine.apply_many(["ata", "tap"])

Engines are cheap to build and are meant to be created per request.
They hold no state beyond the categories and the compiled ruleset.
"""

import logging
from typing import Iterable, List, Optional

from .categories import CategoryTable
from .constants import NO_RULES_MESSAGE
from .exceptions import ParseError
from .executor import apply_many, apply_ruleset
from .parser import parse_rules
from .rule_objects import CompiledRuleset, Failure


class SoundChangeEngine:
    """Compile rule scripts and apply them to words.

    The engine starts out uncompiled. A successful ``set_rules`` compiles
    it; a failed one leaves it as it was, so a broken script is never
    partially applied.

    Parameters
    ----------
    categories: Iterable[dict]
        Category rows, each of the form {"letter": str, "members": list[str]}
    max_steps: int
        Matching step budget per word. Defaults to config.MAX_MATCH_STEPS.
    """

    def __init__(self, categories: Iterable[dict] = None, max_steps: int = None):
        self.categories = CategoryTable.build(categories)
        self.max_steps = max_steps
        self._ruleset: Optional[CompiledRuleset] = None
        self.last_error: Optional[ParseError] = None

    def __repr__(self):
        return "{}(categories={!r}, compiled={!r})".format(
            self.__class__.__name__, self.categories, self.compiled)

    @property
    def compiled(self) -> bool:
        """Whether a ruleset has been loaded."""
        return self._ruleset is not None

    @property
    def ruleset(self) -> Optional[CompiledRuleset]:
        return self._ruleset

    def compile(self, script: str) -> CompiledRuleset:
        """Compile a rule script against the engine's categories, without storing it.

        Raises
        ------
        ParseError
        """
        return parse_rules(script, self.categories)

    def set_rules(self, script: str) -> dict:
        """Compile and load a rule script.

        Returns
        -------
        dict
            {"success": True}, or {"success": False, "message": str,
            "kind": str, "line": int} if the script has an error.
        """
        try:
            ruleset = self.compile(script)
        except ParseError as error:
            logging.info("Rejected rule script: %s", error)
            self.last_error = error
            return error.to_dict()
        self._ruleset = ruleset
        self.last_error = None
        logging.debug("Loaded %s rules", len(ruleset))
        return {"success": True}

    def validate_only(self, script: str) -> dict:
        """Check a rule script without loading it."""
        try:
            self.compile(script)
        except ParseError as error:
            return error.to_dict()
        return {"success": True}

    def apply_sound_changes(self, word) -> dict:
        """Apply the loaded rules to a single word."""
        if self._ruleset is None:
            return Failure(NO_RULES_MESSAGE).to_dict()
        return apply_ruleset(self._ruleset, word, self.max_steps).to_dict()

    def apply_many(self, words: Iterable) -> List[dict]:
        """Apply the loaded rules to each word.

        One word failing doesn't affect the others.
        """
        words = list(words)
        if self._ruleset is None:
            return [Failure(NO_RULES_MESSAGE).to_dict() for _ in words]
        return [
            result.to_dict()
            for result in apply_many(self._ruleset, words, self.max_steps)
        ]
