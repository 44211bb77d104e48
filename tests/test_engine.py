"""Test suite for the SoundChangeEngine class."""

import pytest

from chronosca.constants import NO_RULES_MESSAGE
from chronosca.engine import SoundChangeEngine
from chronosca.exceptions import ErrorKind


def test_uncompiled_engine(engine):
    # then
    assert not engine.compiled
    assert engine.ruleset is None
    assert engine.apply_sound_changes("pat") == {
        "success": False, "message": NO_RULES_MESSAGE
    }
    assert engine.apply_many(["pat", "tap"]) == [
        {"success": False, "message": NO_RULES_MESSAGE},
        {"success": False, "message": NO_RULES_MESSAGE},
    ]


def test_set_rules(engine):
    # when
    result = engine.set_rules("P > B / V_V")
    # then
    assert result == {"success": True}
    assert engine.compiled
    assert len(engine.ruleset) == 1
    assert engine.apply_sound_changes("apata") == {"success": True, "result": "abada"}


def test_set_rules_error(engine):
    # when
    result = engine.set_rules("a > e\nP > X")
    # then
    assert result == {
        "success": False,
        "message": "Unknown category X on line 2",
        "kind": "UnknownCategory",
        "line": 2,
    }
    assert engine.last_error.kind == ErrorKind.UNKNOWN_CATEGORY
    assert not engine.compiled


def test_failed_set_rules_keeps_previous_rules(compiled_engine):
    # given
    engine = compiled_engine("a > e")
    previous = engine.ruleset
    # when
    result = engine.set_rules("a > e\n(a > o")
    # then
    assert not result["success"]
    assert engine.ruleset is previous
    assert engine.apply_sound_changes("pa")["result"] == "pe"


def test_successful_set_rules_clears_last_error(engine):
    engine.set_rules("X > a")
    engine.set_rules("a > e")
    assert engine.last_error is None


def test_set_rules_replaces_previous_rules(compiled_engine):
    engine = compiled_engine("a > e")
    engine.set_rules("a > o")
    assert engine.apply_sound_changes("pa")["result"] == "po"


def test_validate_only_does_not_load(engine):
    # when
    result = engine.validate_only("a > e")
    error = engine.validate_only("a > B")
    # then
    assert result == {"success": True}
    assert error["kind"] == "AmbiguousCorrespondence"
    assert not engine.compiled


@pytest.mark.parametrize("script", [None, 42, b"a > e"], ids=["none", "int", "bytes"])
def test_non_string_script_is_a_failure(script, engine):
    # when
    result = engine.set_rules(script)
    # then
    assert result["success"] is False
    assert result["kind"] == "UnexpectedToken"
    assert result["line"] == 1
    assert engine.validate_only(script)["kind"] == "UnexpectedToken"
    assert not engine.compiled


def test_empty_script_is_identity(apply):
    assert apply("", "pataka") == "pataka"
    assert apply("; nothing to see here\n\n", "pataka") == "pataka"


def test_rule_order_matters(apply):
    assert apply("P > B / V_V\nV > / C_#", "pata") == "pad"
    assert apply("V > / C_#\nP > B / V_V", "pata") == "pat"


def test_apply_many(compiled_engine):
    # given
    engine = compiled_engine("t > d / V_V")
    # when
    result = engine.apply_many(["ata", b"\xff", "\udcff", "tap"])
    # then
    assert result[0] == {"success": True, "result": "ada"}
    assert not result[1]["success"]
    assert not result[2]["success"]
    assert result[3] == {"success": True, "result": "tap"}


def test_apply_many_accepts_generators(compiled_engine):
    engine = compiled_engine("a > e")
    result = engine.apply_many(word for word in ["pa", "ta"])
    assert [r["result"] for r in result] == ["pe", "te"]


def test_budget_is_per_word(category_rows):
    # given
    engine = SoundChangeEngine(category_rows, max_steps=40)
    engine.set_rules("a > e")
    # when
    result = engine.apply_many(["a" * 100, "pa"])
    # then
    assert not result[0]["success"]
    assert result[1] == {"success": True, "result": "pe"}


def test_engine_without_categories():
    # given
    engine = SoundChangeEngine()
    # then
    assert engine.set_rules("a > e")["success"]
    assert engine.set_rules("V > e")["kind"] == "UnknownCategory"


@pytest.mark.parametrize(
    "script,word,expected",
    [
        ("k > tʃ / _{i,e}", "kike", "tʃitʃe"),
        ("s > h / #_V\nh > / V_V", "sasa", "hasa"),
        ("V > / _V", "kaite", "kite"),
        ("n > m / _{p,b}", "anpa", "ampa"),
    ],
    ids=["palatalisation", "debuccalisation", "hiatus", "assimilation"]
)
def test_sound_changes(script, word, expected, apply):
    assert apply(script, word) == expected
