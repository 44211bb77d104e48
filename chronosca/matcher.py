"""Match rule patterns against words split into grapheme clusters.

Matching is done by backtracking over the pattern elements. Every
generator yields its alternatives in order of preference: the longest
category member first, and optional groups present before absent.

All functions take an optional ``Budget`` that counts matching steps,
so that pathological patterns can't keep the process busy forever.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from . import config
from .exceptions import BudgetExceeded
from .rule_objects import (
    Boundary,
    CategoryRef,
    Condition,
    Environment,
    Literal,
    OptionalGroup,
    Pattern,
    Wildcard,
    category_refs,
)

Graphemes = Sequence[str]
Captures = Tuple[Optional[int], ...]


class Budget:
    """Counter of matching steps with an upper limit."""
    __slots__ = ("limit", "steps")

    def __init__(self, limit: Optional[int] = None):
        self.limit = config.MAX_MATCH_STEPS if limit is None else limit
        self.steps = 0

    def __repr__(self):
        return f"{self.__class__.__name__}(limit={self.limit!r}, steps={self.steps!r})"

    def spend(self, steps: int = 1):
        self.steps += steps
        if self.steps > self.limit:
            raise BudgetExceeded(f"Gave up after {self.limit} matching steps")


@dataclass(frozen=True)
class MatchSpan:
    """The graphemes ``[start:end]`` matched by a pattern.

    ``captures`` has the member index of each category reference matched,
    in reading order, with ``None`` for references in skipped optional groups.
    ``cuts`` holds the segment boundaries of a multi-pattern match.
    """
    start: int
    end: int
    captures: Captures = ()
    cuts: Tuple[int, ...] = ()


def _category_candidates(ref: CategoryRef, graphemes: Graphemes, pos: int):
    """Member indices that match at pos, paired with their lengths, longest first."""
    candidates = []
    for idx, member in enumerate(ref.category.segmented):
        size = len(member)
        if size and tuple(graphemes[pos:pos + size]) == member:
            candidates.append((size, idx))
    candidates.sort(key=lambda c: c[0], reverse=True)
    return candidates


def _match_element(element, graphemes: Graphemes, pos: int, budget: Budget):
    """Yield ``(end, captures)`` for each way a single element matches at pos."""
    if isinstance(element, Literal):
        if pos < len(graphemes) and graphemes[pos] == element.grapheme:
            yield pos + 1, ()
    elif isinstance(element, CategoryRef):
        for size, idx in _category_candidates(element, graphemes, pos):
            yield pos + size, (idx,)
    elif isinstance(element, Wildcard):
        if pos < len(graphemes):
            yield pos + 1, ()
    elif isinstance(element, Boundary):
        if pos in (0, len(graphemes)):
            yield pos, ()
    elif isinstance(element, OptionalGroup):
        yield from _match_elements(element.pattern, graphemes, 0, pos, budget)
        skipped = sum(1 for _ in category_refs(element.pattern))
        yield pos, (None,) * skipped
    else:
        raise TypeError(f"Unknown pattern element: {element!r}")


def _match_elements(
        pattern: Pattern, graphemes: Graphemes, idx: int, pos: int, budget: Budget
) -> Iterator[Tuple[int, Captures]]:
    """Yield ``(end, captures)`` for each way ``pattern[idx:]`` matches at pos."""
    budget.spend()
    if idx == len(pattern):
        yield pos, ()
        return
    element = pattern[idx]
    if isinstance(element, Boundary) and len(pattern) > 1:
        # A leading boundary is the start of the word, a trailing one the end
        edge = 0 if idx == 0 else len(graphemes) if idx == len(pattern) - 1 else None
        if edge is not None and pos != edge:
            return
    for end, captures in _match_element(element, graphemes, pos, budget):
        for final, rest in _match_elements(pattern, graphemes, idx + 1, end, budget):
            yield final, captures + rest


def iter_matches(
        pattern: Pattern, graphemes: Graphemes, position: int, budget: Budget = None
) -> Iterator[MatchSpan]:
    """Yield every span that ``pattern`` can match starting at ``position``."""
    budget = Budget() if budget is None else budget
    for end, captures in _match_elements(pattern, graphemes, 0, position, budget):
        yield MatchSpan(position, end, captures)


def try_match(
        pattern: Pattern, graphemes: Graphemes, position: int, budget: Budget = None
) -> Optional[MatchSpan]:
    """Return the preferred match of ``pattern`` at ``position``, if any."""
    return next(iter_matches(pattern, graphemes, position, budget), None)


def _match_sequence(patterns, graphemes, idx, pos, budget):
    if idx == len(patterns):
        yield (pos,), ()
        return
    for end, captures in _match_elements(patterns[idx], graphemes, 0, pos, budget):
        for cuts, rest in _match_sequence(patterns, graphemes, idx + 1, end, budget):
            yield (pos,) + cuts, captures + rest


def iter_sequence_matches(
        patterns: Sequence[Pattern], graphemes: Graphemes, position: int, budget: Budget = None
) -> Iterator[MatchSpan]:
    """Match several patterns back to back, recording where each one ends."""
    budget = Budget() if budget is None else budget
    for cuts, captures in _match_sequence(patterns, graphemes, 0, position, budget):
        yield MatchSpan(position, cuts[-1], captures, cuts)


def _before_holds(before, graphemes, start, budget):
    if not before:
        return True
    lefts = [0] if isinstance(before[0], Boundary) else range(start, -1, -1)
    for left in lefts:
        for end, _ in _match_elements(before, graphemes, 0, left, budget):
            if end == start:
                return True
    return False


def _after_holds(after, graphemes, end, budget):
    if not after:
        return True
    if isinstance(after[-1], Boundary):
        return any(
            final == len(graphemes)
            for final, _ in _match_elements(after, graphemes, 0, end, budget))
    return next(_match_elements(after, graphemes, 0, end, budget), None) is not None


def condition_holds(
        condition: Condition, graphemes: Graphemes, span: MatchSpan, budget: Budget = None
) -> bool:
    """Check the left and right context of a match.

    BEFORE must match text ending right at the start of the span,
    AFTER must match text starting right at its end.
    """
    budget = Budget() if budget is None else budget
    holds = (
        _before_holds(condition.before, graphemes, span.start, budget)
        and _after_holds(condition.after, graphemes, span.end, budget)
    )
    return holds != condition.negated


def environment_holds(
        environment: Environment, graphemes: Graphemes, span: MatchSpan, budget: Budget = None
) -> bool:
    """True if any of the alternative conditions holds, or there are none."""
    budget = Budget() if budget is None else budget
    return not environment.conditions or any(
        condition_holds(condition, graphemes, span, budget)
        for condition in environment.conditions)


def exception_holds(
        environment: Environment, graphemes: Graphemes, span: MatchSpan, budget: Budget = None
) -> bool:
    """True if any exception condition holds for the match."""
    budget = Budget() if budget is None else budget
    return any(
        condition_holds(condition, graphemes, span, budget)
        for condition in environment.exceptions or ())


CHANGE = "change"
ELSE = "else"


def match_outcome(
        environment: Environment, graphemes: Graphemes, span: MatchSpan, budget: Budget = None
) -> Optional[str]:
    """Decide what a match turns into.

    Returns ``CHANGE`` where the rule applies and ``ELSE`` where it is
    blocked by its exception section, which happens when an exception holds
    or when the exception section is empty and no condition holds.
    Otherwise returns None.
    """
    budget = Budget() if budget is None else budget
    if exception_holds(environment, graphemes, span, budget):
        return ELSE
    if environment_holds(environment, graphemes, span, budget):
        return CHANGE
    if environment.exceptions == ():
        return ELSE
    return None
