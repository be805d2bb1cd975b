# seedparse/peg/compile.py
from __future__ import annotations
from typing import List

from .engine import Alt, Grammar, Literal, Reference, Rule, Term, compile_pattern
from ..errors import GrammarError
from ..grammar.ast import LitSpec, PatSpec, RefSpec, RuleSpec, TermSpec


def _compile_term(t: TermSpec) -> Term:
    if isinstance(t, LitSpec):
        return Literal(t.text)
    if isinstance(t, PatSpec):
        return compile_pattern(t.pattern, t.flags)
    if isinstance(t, RefSpec):
        return Reference(t.name)
    raise GrammarError(f"Unknown term descriptor: {t!r}")


def compile_rules(spec: RuleSpec) -> Grammar:
    """Turn a RuleSpec into an executable Grammar.

    References are not resolved here; an unknown rule name only fails when
    the parser first reaches it (or on `Grammar.check()`).
    """
    rules: List[Rule] = []
    for name, alts in spec.rules.items():
        if not alts:
            raise GrammarError(f"Rule '{name}' has no alternatives")
        compiled: List[Alt] = []
        for i, alt in enumerate(alts):
            if not alt:
                raise GrammarError(f"Rule '{name}' alternative #{i + 1} is empty")
            compiled.append(Alt(name, tuple(_compile_term(t) for t in alt)))
        rules.append(Rule(name, tuple(compiled)))
    return Grammar(rules, start=spec.start)
