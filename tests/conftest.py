from __future__ import annotations
from pathlib import Path

import pytest

from seedparse import compile_rules, define_rules

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def _arith(define, lit, pat):
    define("number", pat(r"\d+"))
    define("term", "term", lit("*"), "number")
    define("term", "number")
    define("exp", "exp", lit("+"), "term")
    define("exp", "term")


@pytest.fixture
def arith_spec():
    return define_rules(_arith)


@pytest.fixture
def arith_grammar(arith_spec):
    return compile_rules(arith_spec)


@pytest.fixture
def expr_path() -> Path:
    return EXAMPLES / "expr.g"
