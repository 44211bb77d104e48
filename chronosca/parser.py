"""Parse a sound change rule script into a compiled ruleset.

Each non-blank line holds one rule::

    TARGET > REPLACEMENT / ENVIRONMENT / EXCEPTION / ELSE

where every section after the replacement is optional, and the
environment and exception sections hold ``|`` separated conditions
of the form ``BEFORE _ AFTER``.

Functions:
    tokenise_rule -- split one rule line into tokens
    parse_rule    -- compile one rule line
    parse_rules   -- compile a whole script, atomically
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .categories import Category, CategoryTable
from .constants import (
    ALTERNATIVE,
    ARROW,
    BOUNDARY,
    CLOSE_CATEGORY,
    CLOSE_GROUP,
    COMMENT,
    ESCAPE,
    MEMBER_SEPARATOR,
    NEGATION,
    OPEN_CATEGORY,
    OPEN_GROUP,
    PLACEHOLDER,
    SLASH,
    WILDCARD,
)
from .exceptions import ErrorKind, InputError, ParseError
from .rule_objects import (
    Boundary,
    CategoryRef,
    CompiledRule,
    CompiledRuleset,
    Condition,
    Deletion,
    Environment,
    Insertion,
    Literal,
    Metathesis,
    OptionalGroup,
    Pattern,
    Substitution,
    Wildcard,
    category_refs,
    pair_categories,
)
from .utils import split_graphemes

# Token kinds
LITERAL = "LITERAL"
CATEGORY = "CATEGORY"
INLINE_CATEGORY = "INLINE_CATEGORY"
SPACE = "SPACE"
SYMBOLS = {
    ARROW: "ARROW",
    SLASH: "SLASH",
    PLACEHOLDER: "PLACEHOLDER",
    NEGATION: "NEGATION",
    BOUNDARY: "BOUNDARY",
    WILDCARD: "WILDCARD",
    OPEN_GROUP: "OPEN_GROUP",
    CLOSE_GROUP: "CLOSE_GROUP",
    ALTERNATIVE: "ALTERNATIVE",
}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    members: Tuple[str, ...] = ()


def _read_inline_category(graphemes, start, line_no):
    """Read ``{a,b,c}`` starting at the opening brace.

    Returns the token and the index after the closing brace.
    """
    members = []
    current = []
    idx = start + 1
    while idx < len(graphemes):
        grapheme = graphemes[idx]
        if grapheme == ESCAPE and idx + 1 < len(graphemes):
            current.append(graphemes[idx + 1])
            idx += 2
            continue
        if grapheme in (MEMBER_SEPARATOR, CLOSE_CATEGORY):
            if not current:
                raise ParseError(
                    ErrorKind.UNEXPECTED_TOKEN, line_no, "Empty inline category member")
            members.append("".join(current))
            current = []
            if grapheme == CLOSE_CATEGORY:
                text = "".join(graphemes[start:idx + 1])
                return Token(INLINE_CATEGORY, text, tuple(members)), idx + 1
        elif grapheme == OPEN_CATEGORY:
            raise ParseError(
                ErrorKind.UNBALANCED_GROUP, line_no, "Nested inline categories")
        else:
            current.append(grapheme)
        idx += 1
    raise ParseError(ErrorKind.UNBALANCED_GROUP, line_no, f"Unclosed '{OPEN_CATEGORY}'")


def tokenise_rule(line: str, categories: CategoryTable, line_no: int = 1) -> List[Token]:
    """Split a rule line into tokens, dropping any trailing comment."""
    try:
        graphemes = split_graphemes(line)
    except InputError as error:
        raise ParseError(ErrorKind.UNEXPECTED_TOKEN, line_no, str(error)) from error
    tokens = []
    idx = 0
    while idx < len(graphemes):
        grapheme = graphemes[idx]
        if grapheme == COMMENT:
            break
        if grapheme == ESCAPE:
            if idx + 1 >= len(graphemes):
                raise ParseError(
                    ErrorKind.UNEXPECTED_TOKEN, line_no, "Unfinished escape sequence")
            tokens.append(Token(LITERAL, graphemes[idx + 1]))
            idx += 2
            continue
        if grapheme == OPEN_CATEGORY:
            token, idx = _read_inline_category(graphemes, idx, line_no)
            tokens.append(token)
            continue
        if grapheme == CLOSE_CATEGORY:
            raise ParseError(
                ErrorKind.UNBALANCED_GROUP, line_no, f"Unmatched '{CLOSE_CATEGORY}'")
        if grapheme == MEMBER_SEPARATOR:
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN, line_no,
                f"'{MEMBER_SEPARATOR}' outside of an inline category")
        if grapheme in SYMBOLS:
            tokens.append(Token(SYMBOLS[grapheme], grapheme))
            idx += 1
            continue
        if grapheme.isspace():
            tokens.append(Token(SPACE, grapheme))
            idx += 1
            continue
        name = categories.match_name(graphemes, idx)
        if name is not None:
            tokens.append(Token(CATEGORY, "".join(name)))
            idx += len(name)
            continue
        if grapheme[0].isupper():
            raise ParseError(
                ErrorKind.UNKNOWN_CATEGORY, line_no, f"Unknown category {grapheme}")
        tokens.append(Token(LITERAL, grapheme))
        idx += 1
    return tokens


def _build_pattern(
        tokens: Sequence[Token], categories: CategoryTable, line_no: int
) -> Pattern:
    """Turn a flat list of tokens into a pattern with nested optional groups."""
    stack: List[list] = [[]]
    for token in tokens:
        if token.kind == "OPEN_GROUP":
            stack.append([])
        elif token.kind == "CLOSE_GROUP":
            if len(stack) == 1:
                raise ParseError(
                    ErrorKind.UNBALANCED_GROUP, line_no, f"Unmatched '{CLOSE_GROUP}'")
            group = stack.pop()
            if not group:
                raise ParseError(
                    ErrorKind.UNEXPECTED_TOKEN, line_no, "Empty optional group")
            stack[-1].append(OptionalGroup(tuple(group)))
        elif token.kind == LITERAL:
            stack[-1].append(Literal(token.text))
        elif token.kind == CATEGORY:
            stack[-1].append(CategoryRef(categories[token.text]))
        elif token.kind == INLINE_CATEGORY:
            stack[-1].append(CategoryRef(Category(token.text, token.members)))
        elif token.kind == "WILDCARD":
            stack[-1].append(Wildcard())
        elif token.kind == "BOUNDARY":
            stack[-1].append(Boundary())
        else:
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN, line_no, f"Unexpected '{token.text}'")
    if len(stack) > 1:
        raise ParseError(ErrorKind.UNBALANCED_GROUP, line_no, f"Unclosed '{OPEN_GROUP}'")
    return tuple(stack[0])


def _boundaries_at_edges(pattern: Pattern, allowed: Tuple[int, ...]) -> bool:
    """Whether every boundary in the pattern is at one of the allowed indices."""
    for idx, element in enumerate(pattern):
        if isinstance(element, Boundary) and idx not in allowed:
            return False
        if isinstance(element, OptionalGroup) and not _boundaries_at_edges(element.pattern, ()):
            return False
    return True


def _without_spaces(tokens: Sequence[Token]) -> List[Token]:
    return [token for token in tokens if token.kind != SPACE]


def _split_segments(tokens: Sequence[Token]) -> List[List[Token]]:
    """Split tokens into whitespace separated segments.

    Whitespace inside an optional group doesn't split, so ``(a b) c``
    has two segments.
    """
    segments: List[List[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.kind == "OPEN_GROUP":
            depth += 1
        elif token.kind == "CLOSE_GROUP":
            depth -= 1
        if token.kind == SPACE and depth <= 0:
            if segments[-1]:
                segments.append([])
        else:
            segments[-1].append(token)
    return [segment for segment in segments if segment]


def _segment_text(segment: Sequence[Token]) -> tuple:
    return tuple((token.kind, token.text) for token in _without_spaces(segment))


def _metathesis_order(target: Sequence[Token], replacement: Sequence[Token]):
    """Return the permutation written by a metathesis rule, or None.

    The replacement must be the target's whitespace separated segments
    in a different order.
    """
    target_segments = [_segment_text(s) for s in _split_segments(target)]
    replacement_segments = [_segment_text(s) for s in _split_segments(replacement)]
    if len(target_segments) < 2 or len(target_segments) != len(replacement_segments):
        return None
    if sorted(target_segments) != sorted(replacement_segments):
        return None
    order = []
    for text in replacement_segments:
        idx = next(
            i for i, t in enumerate(target_segments) if t == text and i not in order)
        order.append(idx)
    if order == list(range(len(order))):
        return None
    return tuple(order)


def _parse_condition(
        tokens: Sequence[Token], categories: CategoryTable, line_no: int
) -> Condition:
    if not tokens:
        raise ParseError(ErrorKind.INVALID_ENVIRONMENT, line_no, "Empty condition")
    negated = tokens[0].kind == "NEGATION"
    if negated:
        tokens = tokens[1:]
    if any(token.kind == "NEGATION" for token in tokens):
        raise ParseError(
            ErrorKind.INVALID_ENVIRONMENT, line_no,
            f"'{NEGATION}' must come first in the condition")
    placeholders = [i for i, token in enumerate(tokens) if token.kind == "PLACEHOLDER"]
    if len(placeholders) != 1:
        raise ParseError(
            ErrorKind.INVALID_ENVIRONMENT, line_no,
            f"A condition needs exactly one '{PLACEHOLDER}'")
    split_at = placeholders[0]
    before = _build_pattern(tokens[:split_at], categories, line_no)
    after = _build_pattern(tokens[split_at + 1:], categories, line_no)
    if not _boundaries_at_edges(before, (0,)) or not _boundaries_at_edges(
            after, (len(after) - 1,)):
        raise ParseError(
            ErrorKind.INVALID_ENVIRONMENT, line_no,
            f"'{BOUNDARY}' must be at the outer edge of the condition")
    return Condition(before=before or None, after=after or None, negated=negated)


def _parse_conditions(
        tokens: Sequence[Token], categories: CategoryTable, line_no: int
) -> Tuple[Condition, ...]:
    """Parse ``|`` separated alternative conditions."""
    tokens = _without_spaces(tokens)
    if not tokens:
        return ()
    alternatives: List[List[Token]] = [[]]
    for token in tokens:
        if token.kind == "ALTERNATIVE":
            alternatives.append([])
        else:
            alternatives[-1].append(token)
    return tuple(
        _parse_condition(alternative, categories, line_no) for alternative in alternatives)


def _check_correspondence(targets: Sequence[Pattern], replacement: Pattern, line_no: int):
    """Make sure every category in the replacement has a usable counterpart.

    Categories pair up by letter first and by position otherwise,
    see ``pair_categories``.
    """
    target_refs = [ref for target in targets for ref in category_refs(target)]
    pairing = pair_categories([ref for ref, _ in target_refs], replacement)
    for (ref, _), paired in zip(category_refs(replacement), pairing):
        if paired is None:
            raise ParseError(
                ErrorKind.AMBIGUOUS_CORRESPONDENCE, line_no,
                f"Category {ref.letter} in the replacement has no counterpart in the target")
        target_ref, optional = target_refs[paired]
        if optional:
            raise ParseError(
                ErrorKind.AMBIGUOUS_CORRESPONDENCE, line_no,
                f"Category {ref.letter} corresponds to the optional category {target_ref.letter}")
        if len(target_ref.category) > len(ref.category):
            raise ParseError(
                ErrorKind.AMBIGUOUS_CORRESPONDENCE, line_no,
                f"Category {target_ref.letter} has more members than {ref.letter}")


def _split_sections(tokens: Sequence[Token], line_no: int):
    """Split a rule into target, replacement and slash separated section tokens.

    The sections are, in order, the environment, the exceptions and the
    else-replacement. Only the last one given may not be empty.
    """
    arrows = [i for i, token in enumerate(tokens) if token.kind == "ARROW"]
    slashes = [i for i, token in enumerate(tokens) if token.kind == "SLASH"]
    if not arrows:
        raise ParseError(ErrorKind.UNEXPECTED_TOKEN, line_no, f"Missing '{ARROW}'")
    if len(arrows) > 1:
        raise ParseError(ErrorKind.UNEXPECTED_TOKEN, line_no, f"Too many '{ARROW}'")
    if len(slashes) > 3:
        raise ParseError(ErrorKind.INVALID_ENVIRONMENT, line_no, f"Too many '{SLASH}'")
    arrow = arrows[0]
    if slashes and slashes[0] < arrow:
        raise ParseError(
            ErrorKind.INVALID_ENVIRONMENT, line_no, f"Environment before '{ARROW}'")
    target = list(tokens[:arrow])
    ends = slashes + [len(tokens)]
    replacement = list(tokens[arrow + 1:ends[0]])
    sections = [list(tokens[start + 1:end]) for start, end in zip(slashes, ends[1:])]
    if sections and not _without_spaces(sections[-1]):
        raise ParseError(ErrorKind.INVALID_ENVIRONMENT, line_no, "Empty condition")
    return target, replacement, sections


def _check_replacement(replacement: Pattern, line_no: int):
    for element in replacement:
        if not isinstance(element, (Literal, CategoryRef)):
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN, line_no,
                f"Unexpected '{element}' in the replacement")


def parse_rule(line: str, categories: CategoryTable, line_no: int = 1) -> Optional[CompiledRule]:
    """Compile a single rule line.

    Returns None for blank and comment lines.

    Raises
    ------
    ParseError
    """
    tokens = tokenise_rule(line, categories, line_no)
    if not _without_spaces(tokens):
        return None
    target_tokens, replacement_tokens, sections = _split_sections(tokens, line_no)

    conditions = _parse_conditions(sections[0], categories, line_no) if sections else ()
    exceptions = (
        _parse_conditions(sections[1], categories, line_no) if len(sections) > 1 else None)
    environment = Environment(conditions, exceptions)
    else_replacement = None
    if len(sections) > 2:
        else_replacement = _build_pattern(_without_spaces(sections[2]), categories, line_no)
        _check_replacement(else_replacement, line_no)

    order = _metathesis_order(target_tokens, replacement_tokens)
    if order is not None:
        if else_replacement is not None:
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN, line_no, "Metathesis can't have an else section")
        targets = tuple(
            _build_pattern(_without_spaces(segment), categories, line_no)
            for segment in _split_segments(target_tokens)
        )
        for target in targets:
            if not _boundaries_at_edges(target, ()):
                raise ParseError(
                    ErrorKind.UNEXPECTED_TOKEN, line_no,
                    f"'{BOUNDARY}' can't be swapped by metathesis")
        _check_correspondence(targets, (), line_no)
        return Metathesis(targets, order, environment, line_no)

    target = _build_pattern(_without_spaces(target_tokens), categories, line_no)
    replacement = _build_pattern(_without_spaces(replacement_tokens), categories, line_no)
    if not _boundaries_at_edges(target, (0, len(target) - 1)):
        raise ParseError(
            ErrorKind.UNEXPECTED_TOKEN, line_no,
            f"'{BOUNDARY}' must be at the start or end of the target")
    _check_replacement(replacement, line_no)

    if not target and not replacement:
        raise ParseError(ErrorKind.EMPTY_TARGET, line_no, "Empty target and replacement")
    if not target:
        if not any(c.before or c.after or c.negated for c in conditions):
            raise ParseError(
                ErrorKind.EMPTY_TARGET, line_no, "An insertion needs an environment")
        if else_replacement is not None:
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN, line_no, "An insertion can't have an else section")
        _check_correspondence((), replacement, line_no)
        return Insertion(replacement, environment, line_no)
    _check_correspondence((target,), replacement, line_no)
    if else_replacement is not None:
        _check_correspondence((target,), else_replacement, line_no)
        return Substitution(target, replacement, environment, line_no, else_replacement)
    if not replacement:
        return Deletion(target, environment, line_no)
    return Substitution(target, replacement, environment, line_no)


def parse_rules(script: str, categories: CategoryTable) -> CompiledRuleset:
    """Compile a whole rule script.

    Either every rule compiles, or the first error is raised
    and nothing is returned.

    Raises
    ------
    ParseError
    """
    if not isinstance(script, str):
        raise ParseError(ErrorKind.UNEXPECTED_TOKEN, 1, "Rule script must be a string")
    rules = []
    for line_no, line in enumerate(script.split("\n"), start=1):
        rule = parse_rule(line.rstrip("\r"), categories, line_no)
        if rule is None:
            continue
        logging.debug("Compiled line %s: %s", line_no, rule)
        rules.append(rule)
    return CompiledRuleset(rules)
