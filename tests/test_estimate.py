"""Test suite for estimating pronunciations from spellings."""

import pytest

from chronosca.estimate import PronunciationEstimator, parse_letter_replacements
from chronosca.exceptions import ErrorKind, ParseError


@pytest.fixture
def phones():
    return [
        {"graph": "sh", "ipa": "ʃ"},
        {"graph": "a", "ipa": "a"},
        {"graph": "e", "ipa": "ɛ"},
        {"graph": "t", "ipa": "t"},
        {"graph": "s", "ipa": "s"},
        {"graph": "", "ipa": "ʔ"},
    ]


@pytest.fixture
def estimator(phones):
    return PronunciationEstimator(
        phones=phones,
        letter_replacements="th|θ\nee|iː",
        rewrite_rules="t > d / V_V",
        categories=[{"letter": "V", "members": ["a", "ɛ", "iː"]}],
    )


def test_parse_letter_replacements():
    # given
    text = "a|b\nno separator here\nTh|θ\r\n|ʔ\nx|y|z"
    # when
    result = parse_letter_replacements(text)
    # then
    assert result == [("th", "θ"), ("a", "b"), ("x", "y|z")]


def test_parse_letter_replacements_from_list():
    assert parse_letter_replacements(["ch|tʃ", "k|k"]) == [("ch", "tʃ"), ("k", "k")]


@pytest.mark.parametrize(
    "word,expected",
    [
        ("shat", "ʃat"),
        ("Thas", "θas"),
        ("seet", "siːt"),
        ("tax", "ta*"),
        ("sa ta", "sa ta"),
    ],
    ids=["digraph_phone", "letter_replacement", "replacement_first", "unknown", "space"]
)
def test_transliterate(word, expected, estimator):
    assert estimator.transliterate(word) == expected


def test_estimate(estimator):
    assert estimator.estimate("atee") == {"success": True, "result": "adiː"}


def test_estimate_many(estimator):
    # when
    result = estimator.estimate_many(["ata", "tat"])
    # then
    assert result == [
        {"success": True, "result": "ada"},
        {"success": True, "result": "tat"},
    ]


def test_estimate_without_rewrite_rules(phones):
    estimator = PronunciationEstimator(phones=phones)
    assert estimator.estimate("shet") == {"success": True, "result": "ʃɛt"}


def test_invalid_rewrite_rules(phones):
    with pytest.raises(ParseError) as excinfo:
        PronunciationEstimator(phones=phones, rewrite_rules="a > e\nV > i")
    assert excinfo.value.kind == ErrorKind.UNKNOWN_CATEGORY
    assert excinfo.value.line == 2


def test_invalid_phones():
    with pytest.raises(ValueError):
        PronunciationEstimator(phones=[{"graph": "a"}])
