"""Compiled sound change rules and the values they are built from.

Patterns are tuples of pattern elements. Rules are a closed set of
frozen dataclasses: ``Substitution``, ``Deletion``, ``Insertion`` and
``Metathesis``. A ``CompiledRuleset`` is an immutable sequence of rules.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from .categories import Category
from .constants import (
    ALTERNATIVE,
    ARROW,
    BOUNDARY,
    CLOSE_GROUP,
    ESCAPE,
    NEGATION,
    OPEN_GROUP,
    PLACEHOLDER,
    RESERVED_CHARS,
    SLASH,
    WILDCARD,
)


def escape(grapheme: str) -> str:
    """Render a literal grapheme the way it must be written in a rule."""
    if grapheme[0] in RESERVED_CHARS or grapheme[0].isupper():
        return ESCAPE + grapheme
    return grapheme


@dataclass(frozen=True)
class Literal:
    """A single grapheme cluster, matched verbatim."""
    grapheme: str

    def __str__(self):
        return escape(self.grapheme)


@dataclass(frozen=True)
class CategoryRef:
    """Matches any one member of a category.

    Inline categories like ``{a,b}`` have their source text as letter.
    """
    category: Category

    @property
    def letter(self) -> str:
        return self.category.letter

    def __str__(self):
        return self.category.letter


@dataclass(frozen=True)
class Wildcard:
    """Matches any single grapheme cluster."""

    def __str__(self):
        return WILDCARD


@dataclass(frozen=True)
class Boundary:
    """Zero-width word boundary, matching only at either end of the word."""

    def __str__(self):
        return BOUNDARY


@dataclass(frozen=True)
class OptionalGroup:
    """A sub-pattern that may match once or not at all."""
    pattern: Tuple["Element", ...]

    def __str__(self):
        return OPEN_GROUP + pattern_to_str(self.pattern) + CLOSE_GROUP


Element = Union[Literal, CategoryRef, Wildcard, Boundary, OptionalGroup]
Pattern = Tuple[Element, ...]


def pattern_to_str(pattern: Optional[Pattern]) -> str:
    if not pattern:
        return ""
    return "".join(str(element) for element in pattern)


def category_refs(pattern: Pattern, optional: bool = False) -> Iterator[Tuple[CategoryRef, bool]]:
    """Yield the category references of a pattern in reading order.

    Each reference is paired with whether it sits inside an optional group.
    """
    for element in pattern:
        if isinstance(element, CategoryRef):
            yield element, optional
        elif isinstance(element, OptionalGroup):
            yield from category_refs(element.pattern, optional=True)


def pair_categories(
        target_refs: Sequence[CategoryRef], replacement: Pattern
) -> List[Optional[int]]:
    """Find the target category each replacement category takes its member index from.

    A replacement category pairs with the target category of the same
    letter, the k-th occurrence with the k-th occurrence (extra occurrences
    reuse the last one, so ``V > VV`` doubles a vowel). A letter that isn't
    in the target pairs by position, as in ``P > B``.

    Returns one index into ``target_refs`` per replacement category,
    or None where there is no counterpart.
    """
    letters = [ref.letter for ref in target_refs]
    seen = {}
    pairing = []
    for n, (ref, _) in enumerate(category_refs(replacement)):
        same_letter = [idx for idx, letter in enumerate(letters) if letter == ref.letter]
        if same_letter:
            k = seen.get(ref.letter, 0)
            seen[ref.letter] = k + 1
            pairing.append(same_letter[min(k, len(same_letter) - 1)])
        else:
            pairing.append(n if n < len(target_refs) else None)
    return pairing


@dataclass(frozen=True)
class Condition:
    """One context a match may appear in: ``BEFORE _ AFTER``.

    An empty side is ``None`` and always holds.
    A ``negated`` condition holds where the context does NOT match.
    """
    before: Optional[Pattern] = None
    after: Optional[Pattern] = None
    negated: bool = False

    def __str__(self):
        condition = pattern_to_str(self.before) + PLACEHOLDER + pattern_to_str(self.after)
        return NEGATION + condition if self.negated else condition


def _conditions_str(conditions: Tuple[Condition, ...]) -> str:
    return f" {ALTERNATIVE} ".join(str(condition) for condition in conditions)


@dataclass(frozen=True)
class Environment:
    """Where a rule applies.

    ``conditions`` are alternatives: any one of them is enough, and no
    conditions at all means everywhere. ``exceptions`` block the rule where
    any of them holds, even if a condition holds too. An empty tuple of
    exceptions means "wherever no condition holds", and ``None`` means the
    rule has no exception section.
    """
    conditions: Tuple[Condition, ...] = ()
    exceptions: Optional[Tuple[Condition, ...]] = None

    def __bool__(self):
        return bool(self.conditions) or self.exceptions is not None

    def sections(self) -> List[str]:
        """The environment and exception sections, as written in a rule."""
        sections = [_conditions_str(self.conditions)]
        if self.exceptions is not None:
            sections.append(_conditions_str(self.exceptions))
        return sections

    def __str__(self):
        return f" {SLASH} ".join(self.sections())


NO_ENVIRONMENT = Environment()


def _rule_str(
        target: str, replacement: str, environment: Environment,
        else_replacement: Optional[str] = None
) -> str:
    rule = f"{target} {ARROW} {replacement}".strip()
    sections = environment.sections() if environment else []
    if else_replacement is not None:
        if len(sections) < 2:
            sections = (sections or [""]) + [""]
        sections.append(else_replacement)
    for section in sections:
        rule += f" {SLASH} {section}".rstrip()
    return rule


@dataclass(frozen=True)
class Substitution:
    """Replace every match of ``target`` by ``replacement``.

    Where an exception holds, an ``else_replacement`` (if any) is written
    instead.
    """
    target: Pattern
    replacement: Pattern
    environment: Environment = NO_ENVIRONMENT
    line: int = 0
    else_replacement: Optional[Pattern] = None

    @cached_property
    def pairing(self) -> List[Optional[int]]:
        return pair_categories([ref for ref, _ in category_refs(self.target)], self.replacement)

    @cached_property
    def else_pairing(self) -> List[Optional[int]]:
        return pair_categories(
            [ref for ref, _ in category_refs(self.target)], self.else_replacement or ())

    def __str__(self):
        else_replacement = (
            None if self.else_replacement is None else pattern_to_str(self.else_replacement))
        return _rule_str(
            pattern_to_str(self.target), pattern_to_str(self.replacement),
            self.environment, else_replacement)


@dataclass(frozen=True)
class Deletion:
    """Remove every match of ``target``."""
    target: Pattern
    environment: Environment = NO_ENVIRONMENT
    line: int = 0

    def __str__(self):
        return _rule_str(pattern_to_str(self.target), "", self.environment)


@dataclass(frozen=True)
class Insertion:
    """Insert ``replacement`` at every position where the environment holds."""
    replacement: Pattern
    environment: Environment = NO_ENVIRONMENT
    line: int = 0

    def __str__(self):
        return _rule_str("", pattern_to_str(self.replacement), self.environment)


@dataclass(frozen=True)
class Metathesis:
    """Reorder adjacent matched segments.

    ``targets`` are matched back to back; ``order`` lists the target
    indices in the order they are written out, e.g. ``(1, 0)`` for a swap.
    """
    targets: Tuple[Pattern, ...]
    order: Tuple[int, ...]
    environment: Environment = NO_ENVIRONMENT
    line: int = 0

    def __str__(self):
        written = [pattern_to_str(target) for target in self.targets]
        return _rule_str(
            " ".join(written),
            " ".join(written[idx] for idx in self.order),
            self.environment,
        )


CompiledRule = Union[Substitution, Deletion, Insertion, Metathesis]


class CompiledRuleset:
    """An immutable, ordered collection of compiled rules."""
    __slots__ = ("_rules",)

    def __init__(self, rules=()):
        self._rules: Tuple[CompiledRule, ...] = tuple(rules)

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self._rules)!r})"

    def __str__(self):
        return "\n".join(str(rule) for rule in self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __len__(self):
        return len(self._rules)

    def __getitem__(self, idx):
        return self._rules[idx]

    def __eq__(self, other):
        if not isinstance(other, CompiledRuleset):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self):
        return hash(self._rules)


@dataclass(frozen=True)
class Success:
    result: str
    success = True

    def to_dict(self):
        return {"success": True, "result": self.result}


@dataclass(frozen=True)
class Failure:
    message: str
    success = False

    def to_dict(self):
        return {"success": False, "message": self.message}


ApplicationResult = Union[Success, Failure]
