# seedparse/peg/cursor.py
"""Parse cursor: source text, current offset and the memo tables.

A cursor is created for one `Grammar.parse` call and belongs to it alone.
Three memo collections are kept, all keyed by (rule_name, start):

- matches    : (name, start, end) triples in insertion order, no duplicates.
               One (name, start) may carry several ends, one per growth round.
- mismatches : confirmed total failures. Checked before anything else.
- started    : rule attempts currently in flight, used to fail a rule that
               refers to itself at the same offset before any seed exists.
"""

from __future__ import annotations
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

DEFAULT_MAX_DEPTH = 200

Key = Tuple[str, int]


class Match(NamedTuple):
    name: str
    start: int
    end: int


class Cursor:
    def __init__(self, text: str, max_depth: int = DEFAULT_MAX_DEPTH):
        self.text = text
        self._pos = 0
        self.max_depth = max_depth
        self.depth = 0

        self._matches: List[Match] = []
        self._match_set: Set[Match] = set()
        self._longest: Dict[Key, int] = {}
        self.mismatches: Set[Key] = set()
        self.started: Set[Key] = set()

    # ---- position ----
    @property
    def pos(self) -> int:
        return self._pos

    @pos.setter
    def pos(self, p: int) -> None:
        if not isinstance(p, int) or p < 0 or p > len(self.text):
            raise ValueError(f"Invalid position: {p!r} (text length {len(self.text)})")
        self._pos = p

    def at_end(self) -> bool:
        return self._pos == len(self.text)

    def remaining(self) -> str:
        return self.text[self._pos:]

    # ---- memo writes ----
    def save_match(self, name: str, start: int, end: int) -> bool:
        m = Match(name, start, end)
        if m in self._match_set:
            return False
        self._matches.append(m)
        self._match_set.add(m)
        key = (name, start)
        if end > self._longest.get(key, -1):
            self._longest[key] = end
        return True

    def save_mismatch(self, name: str, start: int) -> bool:
        key = (name, start)
        if key in self.mismatches:
            return False
        self.mismatches.add(key)
        return True

    def save_started(self, name: str, start: int) -> bool:
        key = (name, start)
        if key in self.started:
            return False
        self.started.add(key)
        return True

    # ---- memo reads ----
    @property
    def matches(self) -> List[Match]:
        """Recorded matches in the order they were saved."""
        return list(self._matches)

    def longest_match(self, name: str, start: int) -> Optional[int]:
        """Greatest recorded end for `name` at `start`, or None."""
        return self._longest.get((name, start))

    def is_mismatch(self, name: str, start: int) -> bool:
        return (name, start) in self.mismatches

    def is_started(self, name: str, start: int) -> bool:
        return (name, start) in self.started

    def furthest_mismatch(self) -> Optional[Key]:
        """The (name, start) failure with the greatest start offset.

        Ties keep the name that sorts first so the answer is stable.
        """
        if not self.mismatches:
            return None
        return min(self.mismatches, key=lambda k: (-k[1], k[0]))

    def __repr__(self) -> str:
        return (
            f"Cursor(pos={self._pos}, len={len(self.text)}, "
            f"matches={len(self._matches)}, mismatches={len(self.mismatches)}, "
            f"started={len(self.started)})"
        )