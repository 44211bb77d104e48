"""Apply a compiled ruleset to words."""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .exceptions import BudgetExceeded, InputError
from .matcher import (
    Budget,
    ELSE,
    MatchSpan,
    iter_matches,
    iter_sequence_matches,
    match_outcome,
)
from .rule_objects import (
    ApplicationResult,
    CategoryRef,
    CompiledRule,
    CompiledRuleset,
    Deletion,
    Failure,
    Insertion,
    Literal,
    Metathesis,
    Pattern,
    Substitution,
    Success,
)
from .utils import split_graphemes


def render_replacement(
        replacement: Pattern, captures: Sequence[Optional[int]],
        pairing: Sequence[Optional[int]] = None
) -> Tuple[str, ...]:
    """Build the graphemes written in place of a match.

    Each category of the replacement takes the member at the index captured
    for its paired target category. ``pairing`` defaults to the n-th
    replacement category pairing with the n-th target category.
    """
    output = []
    ref_idx = 0
    for element in replacement:
        if isinstance(element, Literal):
            output.append(element.grapheme)
        elif isinstance(element, CategoryRef):
            capture_idx = ref_idx if pairing is None else pairing[ref_idx]
            member_idx = captures[capture_idx]
            output.extend(element.category.segmented[member_idx])
            ref_idx += 1
        else:
            raise TypeError(f"Can't write {element!r} in a replacement")
    return tuple(output)


def _find_match(rule, graphemes, pos, budget) -> Tuple[Optional[MatchSpan], Optional[str]]:
    """Return the preferred match at pos that the rule acts on, and how it acts."""
    if isinstance(rule, Insertion):
        candidates = iter([MatchSpan(pos, pos)])
    elif isinstance(rule, Metathesis):
        candidates = iter_sequence_matches(rule.targets, graphemes, pos, budget)
    else:
        candidates = iter_matches(rule.target, graphemes, pos, budget)
    has_else = isinstance(rule, Substitution) and rule.else_replacement is not None
    for span in candidates:
        outcome = match_outcome(rule.environment, graphemes, span, budget)
        if outcome is None or (outcome == ELSE and not has_else):
            continue
        return span, outcome
    return None, None


def _rewrite(rule: CompiledRule, graphemes, span: MatchSpan, outcome: str) -> Tuple[str, ...]:
    if isinstance(rule, Substitution):
        if outcome == ELSE:
            return render_replacement(rule.else_replacement, span.captures, rule.else_pairing)
        return render_replacement(rule.replacement, span.captures, rule.pairing)
    if isinstance(rule, Deletion):
        return ()
    if isinstance(rule, Insertion):
        return render_replacement(rule.replacement, ())
    if isinstance(rule, Metathesis):
        pieces = [
            graphemes[span.cuts[idx]:span.cuts[idx + 1]]
            for idx in range(len(rule.targets))
        ]
        return tuple(g for idx in rule.order for g in pieces[idx])
    raise TypeError(f"Unknown rule type: {type(rule).__name__}")


def apply_rule(rule: CompiledRule, graphemes: Sequence[str], budget: Budget) -> Tuple[str, ...]:
    """Apply one rule in a single left-to-right pass.

    Environments are checked against the word as it was before the pass,
    and scanning resumes after each rewritten span, so a rule never
    applies to its own output.
    """
    output = []
    pos = 0
    changes = 0
    while pos <= len(graphemes):
        span, outcome = _find_match(rule, graphemes, pos, budget)
        if span is None:
            if pos < len(graphemes):
                output.append(graphemes[pos])
            pos += 1
            continue
        output.extend(_rewrite(rule, graphemes, span, outcome))
        changes += 1
        if span.end > span.start:
            pos = span.end
        else:
            # Zero-width match: keep the grapheme at pos and move on
            if pos < len(graphemes):
                output.append(graphemes[pos])
            pos += 1
    if changes:
        logging.debug("Line %s (%s) applied %s time(s)", rule.line, rule, changes)
    return tuple(output)


def apply_ruleset(
        ruleset: CompiledRuleset, word, max_steps: int = None
) -> ApplicationResult:
    """Apply every rule of the ruleset to a word, in order."""
    budget = Budget(max_steps)
    try:
        graphemes = split_graphemes(word)
        for rule in ruleset:
            graphemes = apply_rule(rule, graphemes, budget)
    except (InputError, BudgetExceeded) as error:
        logging.debug("Failed to apply rules to %r: %s", word, error)
        return Failure(str(error))
    return Success("".join(graphemes))


def apply_many(
        ruleset: CompiledRuleset, words: Iterable, max_steps: int = None
) -> List[ApplicationResult]:
    """Apply the ruleset to each word, with one result per word in the same order."""
    return [apply_ruleset(ruleset, word, max_steps) for word in words]
