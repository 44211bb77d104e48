"""chronosca: sound change rule engine for constructed languages."""

from chronosca.categories import Category, CategoryTable
from chronosca.derivation import derive_word
from chronosca.engine import SoundChangeEngine
from chronosca.exceptions import BudgetExceeded, ErrorKind, InputError, ParseError
from chronosca.executor import apply_many, apply_ruleset
from chronosca.parser import parse_rules
from chronosca.rule_objects import (
    CompiledRuleset,
    Condition,
    Deletion,
    Environment,
    Failure,
    Insertion,
    Metathesis,
    Substitution,
    Success,
)

__all__ = [
    "Category", "CategoryTable",
    "SoundChangeEngine", "derive_word",
    "ParseError", "ErrorKind", "InputError", "BudgetExceeded",
    "parse_rules", "apply_ruleset", "apply_many",
    "CompiledRuleset", "Substitution", "Deletion", "Insertion", "Metathesis",
    "Condition", "Environment", "Success", "Failure",
]
