# seedparse/grammar/define.py
"""Rule authoring in Python code.

    spec = define_rules(build)

    def build(define, lit, pat):
        define("exp", "exp", lit("+"), "term")
        define("exp", "term")
        define("term", "term", lit("*"), "number")
        define("term", "number")
        define("number", pat(r"\\d+"))

Every `define` call appends one alternative to the named rule. Plain strings
are rule references; `lit(text)` and `pat(pattern)` build terminal terms.
"""

from __future__ import annotations
from typing import Any, Callable

from .ast import LitSpec, PatSpec, RefSpec, RuleSpec, TermSpec
from ..errors import GrammarError


def lit(text: str) -> LitSpec:
    if not isinstance(text, str):
        raise GrammarError(f"literal term needs a string, got {text!r}")
    return LitSpec(text)


def pat(pattern: Any, flags: str = "") -> PatSpec:
    return PatSpec(pattern, flags)


def ref(name: str) -> RefSpec:
    return RefSpec(name)


def _as_term(arg: Any) -> TermSpec:
    if isinstance(arg, str):
        return RefSpec(arg)
    if isinstance(arg, (LitSpec, PatSpec, RefSpec)):
        return arg
    raise GrammarError(f"Unknown term descriptor: {arg!r}")


def define_rules(callback: Callable[..., Any]) -> RuleSpec:
    """Run `callback(define, lit, pat)` and return the collected RuleSpec."""
    spec = RuleSpec()

    def define(name: str, *terms: Any) -> None:
        if not terms:
            raise GrammarError(
                f"Rule '{name}' needs at least one term per alternative"
            )
        spec.add(name, [_as_term(t) for t in terms])

    callback(define, lit, pat)
    return spec
