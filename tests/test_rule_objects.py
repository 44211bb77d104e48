"""Test suite for compiled rules, patterns and results."""

import pytest

from chronosca import parser, rule_objects
from chronosca.rule_objects import (
    CompiledRuleset,
    Condition,
    Environment,
    Failure,
    Literal,
    OptionalGroup,
    Success,
)


@pytest.mark.parametrize(
    "grapheme,expected",
    [("a", "a"), ("_", r"\_"), ("#", r"\#"), ("V", r"\V"), (";", r"\;"), ("ʃ", "ʃ")]
)
def test_escape(grapheme, expected):
    assert rule_objects.escape(grapheme) == expected


@pytest.mark.parametrize(
    "rule",
    [
        "t > d / V_V",
        "h > / #_",
        "> e / #_sC",
        "a > / !#_",
        "C V > V C",
        "k(w) > p / _V#",
        "{s,z} > {h,ɦ}",
        r"\V > v",
        "t > d / V_V | #_",
        "t > d / V_ / _i",
        "t > d / V_V / / θ",
        "h > / #_ / _a / x",
        "(ab) c > c (ab)",
    ]
)
def test_rule_str(rule, category_table):
    # given
    compiled = parser.parse_rule(rule, category_table)
    # then
    assert str(compiled) == rule
    assert parser.parse_rule(str(compiled), category_table) == compiled


def test_category_refs(category_table):
    # given
    compiled = parser.parse_rule("C(V(P))F > x", category_table)
    # when
    result = [(ref.letter, optional) for ref, optional in rule_objects.category_refs(compiled.target)]
    # then
    assert result == [("C", False), ("V", True), ("P", True), ("F", False)]


def test_optional_group_str():
    group = OptionalGroup((Literal("n"), OptionalGroup((Literal("t"),))))
    assert str(group) == "(n(t))"


def test_environment_truthiness():
    assert not Environment()
    assert Environment((Condition(before=(Literal("a"),)),))
    assert Environment(exceptions=())


def test_compiled_ruleset(category_table):
    # given
    script = "a > e\ne > i"
    # when
    first = parser.parse_rules(script, category_table)
    second = parser.parse_rules(script, category_table)
    # then
    assert first == second
    assert hash(first) == hash(second)
    assert len(first) == 2
    assert str(first) == script
    assert str(first[1]) == "e > i"
    assert first != CompiledRuleset()


def test_results_to_dict():
    assert Success("ada").to_dict() == {"success": True, "result": "ada"}
    assert Failure("oops").to_dict() == {"success": False, "message": "oops"}
    assert Success("ada").success and not Failure("oops").success
