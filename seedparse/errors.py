# seedparse/errors.py
"""Error types.

Grammar problems (bad references, empty alternatives, bad patterns, grammar
text that does not scan) are configuration errors and raise `GrammarError`.
A rule simply not matching the input is never an error: the engine reports it
with a boolean.
"""

from __future__ import annotations


class GrammarError(SyntaxError):
    """Malformed grammar or rule specification."""


class RecursionLimitError(RuntimeError):
    """Rule nesting went deeper than the cursor allows."""

    def __init__(self, rule: str, pos: int, depth: int):
        super().__init__(
            f"rule nesting exceeded {depth} levels at '{rule}' (pos {pos})"
        )
        self.rule = rule
        self.pos = pos
        self.depth = depth
