"""Configure input data for applying sound changes."""

OUTPUT_DIR = "data/output"
"""Path to the output folder for rewritten lexica and the log file"""

RULES_FILE = "rules.txt"
"""Path to file with sound change rules.

Note that the ordering of the rules matters:
each rule applies to the output of the rules before it.
"""

CATEGORIES = [
    {"letter": "C", "members": ["p", "t", "k", "b", "d", "g", "s", "m", "n", "l", "r"]},
    {"letter": "V", "members": ["a", "e", "i", "o", "u"]},
    {"letter": "P", "members": ["p", "t", "k"]},
    {"letter": "B", "members": ["b", "d", "g"]},
]
"""Categories referenced by the rules, by letter."""

MAX_MATCH_STEPS = 100000
"""Upper limit on matching steps per word."""
