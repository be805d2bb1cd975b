"""seedparse: memoizing recursive-descent parsing with direct left recursion.

    from seedparse import define_rules, parse

    def rules(define, lit, pat):
        define("exp", "exp", lit("+"), "term")
        define("exp", "term")
        define("term", pat(r"[0-9]+"))

    result = parse("1+2+3", define_rules(rules), "exp")
    result.matched   # True
    print(result.tree.pretty("1+2+3"))
"""

from .errors import GrammarError, RecursionLimitError
from .grammar import (
    LitSpec, PatSpec, RefSpec, RuleSpec,
    define_rules, lit, pat, ref, load_grammar_text, parse_grammar, format_spec,
)
from .peg import (
    Cursor, Match, Grammar, ParseNode, ParseResult, Program,
    compile_rules, matches_to_tree, parse, DEFAULT_MAX_DEPTH,
)

__version__ = "0.1.0"
