"""Test suite for deriving words from an ancestor language."""

import pytest

from chronosca.derivation import derive_word

ORTHOGRAPHY = [{"letter": "V", "members": ["a", "e", "i"]}]
PHONOLOGY = [{"letter": "V", "members": ["ɑ", "ɛ", "i"]}]


@pytest.fixture
def word_record():
    return {"word": "kata", "ipa": "kɑtɑ", "langId": "1"}


@pytest.mark.parametrize(
    "from_ipa,expected",
    [(False, "kada"), (True, "kɑdɑ")],
    ids=["from_word", "from_ipa"]
)
def test_derive_word(from_ipa, expected, word_record):
    # when
    result = derive_word(
        word_record, "t > d / V_V",
        orthography_categories=ORTHOGRAPHY,
        phonology_categories=PHONOLOGY,
        from_ipa=from_ipa,
    )
    # then
    assert result == {"success": True, "result": expected}


def test_derive_word_uses_the_matching_categories(word_record):
    # given: only the phonology has vowels matching the pronunciation
    result = derive_word(
        word_record, "V > o", orthography_categories=ORTHOGRAPHY,
        phonology_categories=[{"letter": "V", "members": ["x"]}], from_ipa=True)
    # then
    assert result["result"] == "kɑtɑ"


def test_derive_word_rule_error(word_record):
    # when
    result = derive_word(word_record, "V > o", orthography_categories=None)
    # then
    assert result["success"] is False
    assert result["kind"] == "UnknownCategory"
    assert result["line"] == 1


@pytest.mark.parametrize(
    "record",
    [{"word": "kata"}, {"word": 5, "ipa": "kɑtɑ"}],
    ids=["missing_ipa", "int_word"]
)
def test_derive_word_rejects_malformed_records(record):
    with pytest.raises(ValueError):
        derive_word(record, "a > e")
