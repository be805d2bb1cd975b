"""Rule specifications: Python builder, grammar-file parser and loader."""

from .ast import LitSpec, PatSpec, RefSpec, RuleSpec, TermSpec, format_spec
from .define import define_rules, lit, pat, ref
from .loader import load_grammar_text
from .parser import parse_grammar
