"""Seed-growing packrat engine.

This package provides:
- the cursor and its memo tables
- Literal/Pattern/Reference terms, Alt, Rule and Grammar
- RuleSpec -> Grammar compilation
- parse-tree reconstruction from the recorded matches
"""

from .cursor import Cursor, Match, DEFAULT_MAX_DEPTH
from .engine import (
    Literal, Pattern, Reference, Alt, Rule, Grammar,
    compile_pattern, match_term, lookup_or_parse,
)
from .compile import compile_rules
from .tree import ParseNode, matches_to_tree
from .runtime import ParseResult, Program, parse
