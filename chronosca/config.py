#!/usr/bin/env python
# coding=utf-8

"""Default settings for applying sound changes.

A user config file (a .py file with upper case variables) may override
any of these values when running the command line tool.
"""

from pathlib import Path


__all__ = [
    "MAX_MATCH_STEPS",
    "OUTPUT_DIR",
    "RULES_FILE",
    "CATEGORIES",
    "LOG_FILE",
]
"""Variables that are available to be imported
by other modules.
"""


MAX_MATCH_STEPS = 100_000
"""Upper limit on pattern matching steps spent on a single word.

Words that need more steps than this fail with an error message
instead of blocking the process.
"""

OUTPUT_DIR = Path("data") / "output"
"""Path to the output folder for rewritten dictionaries and logs"""

RULES_FILE = "rules.txt"
"""Path to the sound change rule script.

Rules are applied in the order they are written,
and the ordering of the rules may matter.
"""

CATEGORIES = []
"""Category definitions used by the rules.

Each category is a dict of the form
``{"letter": "V", "members": ["a", "e", "i", "o", "u"]}``.
"""

LOG_FILE = "log.txt"
"""Name of the log file, relative to OUTPUT_DIR"""
