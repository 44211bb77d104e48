"""Constant values used by chronosca.

* Reserved characters of the rule script syntax.
* Validation schemas for categories, grammar table cells, phones and words.
* DataFrame schema for dictionaries that are rewritten in bulk.
"""

import pandera as pa
from pandera import Column, DataFrameSchema, Check
from schema import And, Or, Schema, Use

# Rule script syntax
ARROW = ">"
SLASH = "/"
PLACEHOLDER = "_"
NEGATION = "!"
ALTERNATIVE = "|"
BOUNDARY = "#"
WILDCARD = "*"
OPEN_GROUP = "("
CLOSE_GROUP = ")"
OPEN_CATEGORY = "{"
CLOSE_CATEGORY = "}"
MEMBER_SEPARATOR = ","
ESCAPE = "\\"
COMMENT = ";"

RESERVED_CHARS = frozenset(
    ARROW + SLASH + PLACEHOLDER + NEGATION + ALTERNATIVE + BOUNDARY + WILDCARD
    + OPEN_GROUP + CLOSE_GROUP + OPEN_CATEGORY + CLOSE_CATEGORY
    + MEMBER_SEPARATOR + ESCAPE + COMMENT
)
"""Characters that must be escaped to be matched literally."""

NO_RULES_MESSAGE = "No rules were provided"

# Define validation Schemas
category_schema = Schema({
    "letter": And(str, len, error="Category letters must be non-empty strings"),
    "members": Or([str], str, error="Category members must be a list of strings"),
}, ignore_extra_keys=True)

grammar_cell_schema = Schema({
    "row": And(int, lambda n: n >= 0),
    "column": And(int, lambda n: n >= 0),
    "rules": str,
}, ignore_extra_keys=True)

phone_schema = Schema({
    "graph": str,
    "ipa": str,
}, ignore_extra_keys=True)

word_schema = Schema({
    "word": str,
    "ipa": str,
}, ignore_extra_keys=True)

letter_replacement_schema = Schema(
    And(str, Use(lambda line: line.split("|", 1)), lambda pair: len(pair) == 2)
)

LEX_SOURCE_COLUMN = "word"
LEX_TARGET_COLUMN = "derived"
LEX_ERROR_COLUMN = "error"
LEX_PREFIX = "rewritten_lexicon"


def lexicon_schema(source_column: str = LEX_SOURCE_COLUMN) -> DataFrameSchema:
    """Schema for a dictionary DataFrame with words in ``source_column``."""
    return DataFrameSchema(
        {
            source_column: Column(
                pa.String,
                Check(lambda s: isinstance(s, str), element_wise=True),
                nullable=False,
            ),
        },
        strict=False,
    )
