"""
Test suite for the chronosca.py script in the chronosca package
"""

import pandas as pd
import pytest
from click.testing import CliRunner

from chronosca import chronosca


def test_apply(config_file):
    # given
    runner = CliRunner()
    # when
    result = runner.invoke(
        chronosca.main,
        ["-c", str(config_file), "apply", "pata", "ata", "tap"]
    )
    # then
    assert result.exit_code == 0, result.output
    assert "pata > pad" in result.output
    assert "ata > ad" in result.output
    assert "tap > tap" in result.output


def test_check(config_file):
    # given
    runner = CliRunner()
    # when
    result = runner.invoke(chronosca.main, ["-c", str(config_file), "check"])
    # then
    assert result.exit_code == 0, result.output
    assert "2 rules OK" in result.output


def test_rules_file_option(config_file, tmp_path):
    # given
    rules_file = tmp_path / "other_rules.txt"
    rules_file.write_text("a > e\n", encoding="utf-8")
    runner = CliRunner()
    # when
    result = runner.invoke(
        chronosca.main,
        ["-c", str(config_file), "-r", str(rules_file), "apply", "pata"]
    )
    # then
    assert result.exit_code == 0, result.output
    assert "pata > pete" in result.output


@pytest.mark.parametrize(
    "rules,exists",
    [("a > X\n", True), ("", False)],
    ids=["invalid_rules", "missing_file"]
)
def test_bad_rules_file(rules, exists, config_file, tmp_path):
    # given
    rules_file = tmp_path / "bad_rules.txt"
    if exists:
        rules_file.write_text(rules, encoding="utf-8")
    runner = CliRunner()
    # when
    result = runner.invoke(
        chronosca.main,
        ["-c", str(config_file), "-r", str(rules_file), "check"]
    )
    # then
    assert result.exit_code == 1


@pytest.fixture
def lexicon_file(tmp_path):
    csv_file = tmp_path / "lexicon.csv"
    pd.DataFrame({"word": ["pata", "ata"], "pos": ["NN", "VB"]}).to_csv(csv_file, index=False)
    return csv_file


def test_lexicon(config_file, lexicon_file, tmp_path):
    # given
    outfile = tmp_path / "rewritten.csv"
    runner = CliRunner()
    # when
    result = runner.invoke(
        chronosca.main,
        ["-c", str(config_file), "lexicon", str(lexicon_file), "-o", str(outfile)]
    )
    # then
    assert result.exit_code == 0, result.output
    assert outfile.exists()
    rewritten = pd.read_csv(outfile, dtype=str, keep_default_na=False)
    assert rewritten["derived"].tolist() == ["pad", "ad"]
    assert rewritten["pos"].tolist() == ["NN", "VB"]


def test_lexicon_default_outfile(config_file, lexicon_file, tmp_path):
    # given
    runner = CliRunner()
    # when
    result = runner.invoke(
        chronosca.main, ["-c", str(config_file), "lexicon", str(lexicon_file)]
    )
    # then
    assert result.exit_code == 0, result.output
    assert (tmp_path / "output" / "rewritten_lexicon_lexicon.csv").exists()


def test_lexicon_missing_column(config_file, lexicon_file):
    # given
    runner = CliRunner()
    # when
    result = runner.invoke(
        chronosca.main,
        ["-c", str(config_file), "lexicon", str(lexicon_file), "-s", "transcription"]
    )
    # then
    assert result.exit_code == 2
