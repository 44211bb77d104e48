"""Named letter classes ("categories") referenced by sound change rules."""

import logging
from types import MappingProxyType
from typing import Iterable, Optional, Sequence, Tuple

from .constants import category_schema
from .utils import make_list, split_graphemes, validate_objects


class Category:
    """An ordered list of interchangeable graphemes, e.g. all voiceless stops.

    Members may span several grapheme clusters (digraphs, IPA clusters),
    so each member is kept both as a string and as a tuple of clusters.
    """
    __slots__ = ("letter", "members", "segmented")

    def __init__(self, letter: str, members: Iterable[str]):
        self.letter = letter
        self.members: Tuple[str, ...] = tuple(members)
        self.segmented: Tuple[Tuple[str, ...], ...] = tuple(
            split_graphemes(member) for member in self.members
        )

    def __repr__(self):
        return f"{self.__class__.__name__}(letter={self.letter!r}, members={list(self.members)!r})"

    def __eq__(self, other):
        if not isinstance(other, Category):
            return NotImplemented
        return (self.letter, self.members) == (other.letter, other.members)

    def __hash__(self):
        return hash((self.letter, self.members))

    def __len__(self):
        return len(self.members)


class CategoryTable:
    """Read-only lookup of categories by letter.

    Build instances with ``CategoryTable.build(rows)``.
    """
    def __init__(self, categories: Iterable[Category] = ()):
        table = {}
        for category in categories:
            if category.letter in table:
                raise ValueError(f"Duplicate category letter: {category.letter}")
            table[category.letter] = category
        self._table = MappingProxyType(table)
        # Longest names first, so that multi-character names win
        self._names = tuple(sorted(table, key=len, reverse=True))
        self._segmented_names = tuple(split_graphemes(name) for name in self._names)

    @classmethod
    def build(cls, rows: Iterable[dict] = None):
        """Instantiate a table from category rows.

        Parameters
        ----------
        rows: Iterable[dict]
            Format is {"letter": str, "members": list[str]}.
            ``members`` may also be a comma separated string.
        """
        rows = [] if rows is None else list(rows)
        categories = []
        for row in validate_objects(rows, category_schema):
            members = [m for m in make_list(row["members"]) if m]
            categories.append(Category(row["letter"], members))
        logging.debug("Built category table with %s categories", len(categories))
        return cls(categories)

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self._table.values())!r})"

    def __contains__(self, letter):
        return letter in self._table

    def __getitem__(self, letter) -> Category:
        return self._table[letter]

    def __iter__(self):
        return iter(self._table.values())

    def __len__(self):
        return len(self._table)

    def get(self, letter: str) -> Optional[Category]:
        return self._table.get(letter)

    @property
    def names(self) -> Tuple[str, ...]:
        """Category letters, longest first."""
        return self._names

    def match_name(self, graphemes: Sequence[str], start: int = 0) -> Optional[Tuple[str, ...]]:
        """Return the longest category name found in ``graphemes`` at ``start``.

        The name is returned split into grapheme clusters, or None if no
        category name starts there.
        """
        for segmented in self._segmented_names:
            if tuple(graphemes[start:start + len(segmented)]) == segmented:
                return segmented
        return None
