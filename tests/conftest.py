"""Configuration values for the unit tests."""

import pytest

from chronosca.categories import CategoryTable
from chronosca.engine import SoundChangeEngine


@pytest.fixture(scope="session")
def category_rows():
    """Categories for a small orthography."""
    return [
        {"letter": "C", "members": ["p", "t", "k", "b", "d", "g", "s", "m", "n", "l", "r", "h"]},
        {"letter": "V", "members": ["a", "e", "i", "o", "u"]},
        {"letter": "P", "members": ["p", "t", "k"]},
        {"letter": "B", "members": ["b", "d", "g"]},
        {"letter": "F", "members": ["f", "θ"]},
    ]


@pytest.fixture
def category_table(category_rows):
    """Table built from the dummy categories."""
    return CategoryTable.build(category_rows)


@pytest.fixture
def engine(category_rows):
    """A fresh, uncompiled engine."""
    return SoundChangeEngine(category_rows)


@pytest.fixture
def compiled_engine(engine):
    """Engine factory: load a rule script and return the engine."""
    def _compile(script):
        result = engine.set_rules(script)
        assert result == {"success": True}, result
        return engine
    return _compile


@pytest.fixture
def apply(compiled_engine):
    """Apply a rule script to a word and return the rewritten word."""
    def _apply(script, word):
        result = compiled_engine(script).apply_sound_changes(word)
        assert result["success"], result
        return result["result"]
    return _apply


@pytest.fixture
def config_file(tmp_path):
    """Write a config file and a rules file for the CLI, and return the config path."""
    rules_file = tmp_path / "rules.txt"
    rules_file.write_text("P > B / V_V\nV >  / C_#\n", encoding="utf-8")
    config_path = tmp_path / "dummy_config.py"
    config_path.write_text(
        f'OUTPUT_DIR = r"{tmp_path / "output"}"\n'
        f'RULES_FILE = r"{rules_file}"\n'
        'CATEGORIES = [\n'
        '    {"letter": "C", "members": ["p", "t", "k", "b", "d", "g", "s", "m", "n"]},\n'
        '    {"letter": "V", "members": ["a", "e", "i", "o", "u"]},\n'
        '    {"letter": "P", "members": ["p", "t", "k"]},\n'
        '    {"letter": "B", "members": ["b", "d", "g"]},\n'
        ']\n',
        encoding="utf-8",
    )
    return config_path
