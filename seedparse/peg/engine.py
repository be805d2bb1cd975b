# seedparse/peg/engine.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import regex as re

from .cursor import Cursor, DEFAULT_MAX_DEPTH
from ..errors import GrammarError, RecursionLimitError

# Memoizing recursive-descent engine with seed growing:
# - Every successful alternative records (rule, start, end) in the cursor.
# - A rule keeps re-running its alternatives from the same start while the
#   longest match grows; references read the longest recorded match, so a
#   left-recursive alternative consumes the previous round's result.
# - A reference to a rule that is already in flight at the same offset with
#   no recorded match fails, which lets a non-recursive alternative seed it.
# - Only direct left recursion is handled.

_FLAG_MAP = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'A': re.ASCII,
}

# ---- Terms ----

@dataclass(frozen=True)
class Literal:
    text: str

@dataclass(frozen=True)
class Pattern:
    regex: Any  # compiled; anything with match(string, pos)

    @property
    def source(self) -> str:
        return getattr(self.regex, "pattern", repr(self.regex))

@dataclass(frozen=True)
class Reference:
    name: str

Term = Union[Literal, Pattern, Reference]


def compile_pattern(pattern: Any, flags: str = "") -> Pattern:
    """Build a Pattern term that matches only at the cursor offset.

    Strings are compiled with `regex`; compiled `re`/`regex` objects are used
    as they are. Patterns pinned to the start of the whole string (leading
    '^' or '\\A') cannot match at an arbitrary offset and are rejected.
    """
    if isinstance(pattern, str):
        f = 0
        for ch in flags:
            if ch not in _FLAG_MAP:
                raise GrammarError(f"Unknown pattern flag {ch!r} in /{pattern}/{flags}")
            f |= _FLAG_MAP[ch]
        try:
            compiled = re.compile(pattern, f)
        except re.error as e:
            raise GrammarError(f"Invalid pattern /{pattern}/: {e}") from None
    elif callable(getattr(pattern, "match", None)) and hasattr(pattern, "pattern"):
        if flags:
            raise GrammarError(f"Flags {flags!r} given for an already compiled pattern")
        compiled = pattern
    else:
        raise GrammarError(f"Pattern term needs a string or compiled pattern, got {pattern!r}")

    src = compiled.pattern
    if isinstance(src, str) and (src.startswith("^") or src.startswith("\\A")):
        raise GrammarError(
            f"Pattern /{src}/ is anchored to the start of the input and "
            f"cannot match at a cursor offset"
        )
    return Pattern(compiled)


def match_term(term: Term, cursor: Cursor, grammar: "Grammar") -> bool:
    pos = cursor.pos

    if isinstance(term, Literal):
        if cursor.text.startswith(term.text, pos):
            cursor.pos = pos + len(term.text)
            return True
        return False

    if isinstance(term, Pattern):
        m = term.regex.match(cursor.text, pos)
        if m is None:
            return False
        cursor.pos = m.end()
        return True

    if isinstance(term, Reference):
        return lookup_or_parse(cursor, grammar, term.name)

    raise AssertionError(f"unknown term: {term!r}")


def lookup_or_parse(cursor: Cursor, grammar: "Grammar", name: str) -> bool:
    """Resolve a rule reference at the cursor, from the memo when possible."""
    pos = cursor.pos
    if cursor.is_mismatch(name, pos):
        return False

    end = cursor.longest_match(name, pos)
    if end is not None:
        cursor.pos = end
        return True

    if cursor.is_started(name, pos):
        # in flight higher up the stack with no seed yet
        return False

    rule = grammar.rule(name)
    if cursor.depth >= cursor.max_depth:
        raise RecursionLimitError(name, pos, cursor.max_depth)
    cursor.depth += 1
    try:
        return rule.parse(cursor, grammar)
    finally:
        cursor.depth -= 1

# ---- Alternatives and rules ----

@dataclass(frozen=True)
class Alt:
    rule: str               # owning rule name
    terms: Tuple[Term, ...]

    def parse(self, cursor: Cursor, grammar: "Grammar") -> bool:
        save = cursor.pos
        for term in self.terms:
            if not match_term(term, cursor, grammar):
                cursor.pos = save
                return False
        cursor.save_match(self.rule, save, cursor.pos)
        return True


@dataclass(frozen=True)
class Rule:
    name: str
    alts: Tuple[Alt, ...]

    def parse(self, cursor: Cursor, grammar: "Grammar") -> bool:
        """Longest match over all alternatives, grown until it stops growing."""
        start = cursor.pos
        cursor.save_started(self.name, start)
        best_end = start

        while True:
            matched = False
            round_end = start
            for alt in self.alts:
                cursor.pos = start
                if alt.parse(cursor, grammar):
                    matched = True
                    round_end = max(round_end, cursor.pos)

            if not matched:
                cursor.save_mismatch(self.name, start)
                cursor.pos = start
                return False

            if round_end > best_end:
                best_end = round_end
                continue

            cursor.pos = best_end
            return True

# ---- Grammar ----

class Grammar:
    """Rules indexed by name. Read-only once built; safe to share."""

    def __init__(self, rules: Iterable[Rule] = (), start: Optional[str] = None):
        self._rules: Dict[str, Rule] = {}
        for r in rules:
            if r.name in self._rules:
                raise GrammarError(f"Duplicate rule '{r.name}'")
            self._rules[r.name] = r
        self.start = start

    def rule(self, name: str) -> Rule:
        try:
            return self._rules[name]
        except KeyError:
            raise GrammarError(f"No rule named: '{name}'") from None

    def rule_names(self) -> List[str]:
        return list(self._rules)

    def rules(self) -> List[Rule]:
        return list(self._rules.values())

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def check(self) -> None:
        """Fail now for every reference that names no rule."""
        missing: List[str] = []
        for r in self._rules.values():
            for alt in r.alts:
                for t in alt.terms:
                    if isinstance(t, Reference) and t.name not in self._rules:
                        missing.append(f"'{t.name}' (in rule '{r.name}')")
        if self.start is not None and self.start not in self._rules:
            missing.append(f"'{self.start}' (start rule)")
        if missing:
            raise GrammarError("Unresolved rule references: " + ", ".join(missing))

    def parse(self, text: str, start: Optional[str] = None,
              max_depth: int = DEFAULT_MAX_DEPTH) -> Cursor:
        """Run `start` from offset 0 and return the cursor, matched or not."""
        name = start if start is not None else self.start
        if name is None:
            raise GrammarError("No start rule given")
        if name not in self._rules:
            raise GrammarError(f"Found no rule named: '{name}'")
        rule = self._rules[name]

        cursor = Cursor(text, max_depth=max_depth)
        try:
            rule.parse(cursor, self)
        except RecursionError:
            raise RecursionLimitError(name, cursor.pos, cursor.max_depth) from None
        return cursor

    def __repr__(self) -> str:
        return f"Grammar(rules={self.rule_names()!r}, start={self.start!r})"
