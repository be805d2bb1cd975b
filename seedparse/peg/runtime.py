# seedparse/peg/runtime.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from .compile import compile_rules
from .cursor import Cursor, DEFAULT_MAX_DEPTH
from .engine import Grammar
from .tree import ParseNode, matches_to_tree
from ..grammar.ast import RuleSpec
from ..grammar.loader import load_grammar_text
from ..grammar.parser import parse_grammar


@dataclass
class ParseResult:
    """Outcome of one parse: whole-input flag, tree and the spent cursor."""
    matched: bool
    tree: Optional[ParseNode]
    cursor: Cursor

    @property
    def end(self) -> int:
        return self.cursor.pos

    def __bool__(self) -> bool:
        return self.matched


def parse(text: str, rules: Union[RuleSpec, Grammar], start: Optional[str] = None,
          max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
    """Parse `text` from rule `start` and rebuild the tree.

    `rules` is a RuleSpec (compiled on the fly) or a compiled Grammar.
    `matched` is true only if the start rule's longest match ends exactly at
    the end of `text`; otherwise the tree covers whatever was matched.
    """
    grammar = rules if isinstance(rules, Grammar) else compile_rules(rules)
    cursor = grammar.parse(text, start, max_depth=max_depth)
    tree = matches_to_tree(cursor.matches)
    return ParseResult(cursor.at_end(), tree, cursor)


@dataclass
class Program:
    """Compiled grammar plus its default start rule."""
    grammar: Grammar

    @classmethod
    def from_spec(cls, spec: RuleSpec) -> "Program":
        return cls(compile_rules(spec))

    @classmethod
    def from_source(cls, src: str) -> "Program":
        return cls.from_spec(parse_grammar(src))

    @classmethod
    def from_file(cls, path: str) -> "Program":
        return cls.from_source(load_grammar_text(path))

    @property
    def start(self) -> Optional[str]:
        return self.grammar.start

    def run(self, text: str, start: Optional[str] = None,
            max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
        return parse(text, self.grammar, start, max_depth=max_depth)
