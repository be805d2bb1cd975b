from __future__ import annotations

import pytest

from seedparse import (
    GrammarError, LitSpec, PatSpec, RefSpec, RuleSpec,
    compile_rules, define_rules, format_spec, lit, pat,
)


def test_define_rules_collects_alternatives_in_order():
    def rules(define, lit, pat):
        define("words", "word", "space")
        define("words", "words", "word", "space")
        define("word", pat(r"\w+"))
        define("space", lit(" "))

    spec = define_rules(rules)
    assert spec.names() == ["words", "word", "space"]
    assert spec.start == "words"
    assert spec.alternatives("words") == [
        [RefSpec("word"), RefSpec("space")],
        [RefSpec("words"), RefSpec("word"), RefSpec("space")],
    ]
    assert spec.alternatives("word") == [[PatSpec(r"\w+")]]
    assert spec.alternatives("space") == [[LitSpec(" ")]]
    assert "word" in spec and len(spec) == 3


def test_words_grammar_parses():
    def rules(define, lit, pat):
        define("word", pat(r"\w+"))
        define("space", lit(" "))
        define("words", "word", "space")
        define("words", "words", "word", "space")

    g = compile_rules(define_rules(rules))
    cur = g.parse("abc def ", "words")
    assert cur.at_end()


def test_define_needs_a_term():
    with pytest.raises(GrammarError):
        define_rules(lambda define, lit, pat: define("x"))


def test_define_rejects_unknown_descriptor():
    with pytest.raises(GrammarError):
        define_rules(lambda define, lit, pat: define("x", 42))


def test_lit_needs_a_string():
    with pytest.raises(GrammarError):
        lit(3)


@pytest.mark.parametrize("rules", [{"x": []}, {"x": [[]]}])
def test_compile_rejects_empty_definitions(rules):
    with pytest.raises(GrammarError):
        compile_rules(RuleSpec(rules=rules))


def test_compile_rejects_bad_pattern_up_front():
    spec = define_rules(lambda define, lit, pat: define("x", pat("^x")))
    with pytest.raises(GrammarError):
        compile_rules(spec)


def test_grammar_error_is_a_syntax_error():
    assert issubclass(GrammarError, SyntaxError)


def test_format_spec():
    def rules(define, lit, pat):
        define("exp", "exp", lit("+"), "num")
        define("exp", "num")
        define("num", pat(r"\d+"))

    assert format_spec(define_rules(rules)).splitlines() == [
        "%start exp ;",
        "exp : exp '+' num | num ;",
        r"num : /\d+/ ;",
    ]
