from __future__ import annotations
import re as stdlib_re

import pytest

from seedparse import GrammarError, RecursionLimitError, compile_rules, define_rules, parse
from seedparse.peg.cursor import Cursor
from seedparse.peg.engine import (
    Alt, Grammar, Literal, Reference, Rule,
    compile_pattern, lookup_or_parse, match_term,
)

EMPTY = Grammar()


# ---- terms ----

def test_literal_term_advances_only_on_match():
    c = Cursor("abc")
    assert match_term(Literal("ab"), c, EMPTY)
    assert c.pos == 2
    assert not match_term(Literal("x"), c, EMPTY)
    assert c.pos == 2


def test_pattern_term_is_anchored_at_cursor():
    c = Cursor("ab12")
    num = compile_pattern(r"\d+")
    assert not match_term(num, c, EMPTY)
    assert c.pos == 0
    c.pos = 2
    assert match_term(num, c, EMPTY)
    assert c.pos == 4


def test_pattern_flags():
    c = Cursor("ABC")
    assert match_term(compile_pattern("abc", "i"), c, EMPTY)
    assert c.pos == 3


def test_compiled_stdlib_pattern_is_accepted():
    t = compile_pattern(stdlib_re.compile(r"[a-z]+"))
    c = Cursor("12ab")
    c.pos = 2
    assert match_term(t, c, EMPTY)
    assert c.pos == 4


@pytest.mark.parametrize("bad", ["^abc", r"\Aabc", "(unclosed", 42, None])
def test_non_anchorable_or_invalid_patterns_fail_at_construction(bad):
    with pytest.raises(GrammarError):
        compile_pattern(bad)


def test_unknown_pattern_flag():
    with pytest.raises(GrammarError):
        compile_pattern("a", "q")


# ---- alternatives ----

def test_failing_alt_restores_position():
    c = Cursor("xab")
    c.pos = 1
    alt = Alt("ab", (Literal("a"), Literal("c")))
    assert not alt.parse(c, EMPTY)
    assert c.pos == 1
    assert c.matches == []


def test_successful_alt_records_match():
    c = Cursor("xab")
    c.pos = 1
    alt = Alt("ab", (Literal("a"), Literal("b")))
    assert alt.parse(c, EMPTY)
    assert c.pos == 3
    assert c.matches == [("ab", 1, 3)]


# ---- rules ----

def test_longest_match_wins_regardless_of_order():
    def short_first(define, lit, pat):
        define("x", lit("a"))
        define("x", lit("a"), lit("b"))
        define("x", lit("a"), lit("b"), lit("c"))

    def long_first(define, lit, pat):
        define("x", lit("a"), lit("b"), lit("c"))
        define("x", lit("a"))
        define("x", lit("a"), lit("b"))

    for build in (short_first, long_first):
        res = parse("abc", define_rules(build), "x")
        assert res.matched
        assert res.end == 3
        assert res.cursor.longest_match("x", 0) == 3


def test_no_false_positive():
    spec = define_rules(lambda define, lit, pat: define("ab", lit("a"), lit("b")))
    res = parse("ac", spec, "ab")
    assert not res.matched
    assert res.end == 0
    assert res.cursor.is_mismatch("ab", 0)


def test_prefix_match_is_not_a_full_match(arith_grammar):
    res = parse("1+2)", arith_grammar, "exp")
    assert not res.matched
    assert res.end == 3
    assert res.tree is not None
    assert res.tree.span == (0, 3)


def test_left_recursion_terminates_and_is_left_associative():
    def rules(define, lit, pat):
        define("R", "R", lit("+"), "term")
        define("R", "term")
        define("term", pat(r"\d+"))

    res = parse("1+1+1", define_rules(rules), "R")
    assert res.matched
    root = res.tree
    assert (root.name, root.span) == ("R", (0, 5))
    assert [c.name for c in root.children] == ["R", "term"]
    inner = root.children[0]
    assert inner.span == (0, 3)
    assert [c.name for c in inner.children] == ["R", "term"]
    assert inner.children[0].span == (0, 1)
    assert inner.children[1].span == (2, 3)


def test_right_recursion_also_parses():
    def rules(define, lit, pat):
        define("list", "item", lit(","), "list")
        define("list", "item")
        define("item", pat(r"[a-z]"))

    res = parse("a,b,c", define_rules(rules), "list")
    assert res.matched


def test_whole_grammar_example(arith_grammar):
    text = "1+2*3"
    res = parse(text, arith_grammar, "exp")
    assert res.matched
    root = res.tree
    assert (root.name, root.span) == ("exp", (0, 5))
    assert len(root.children) == 2

    left, right = root.children
    assert left.span == (0, 1)
    assert ("term", (0, 1)) in [(n.name, n.span) for n in left.walk()]

    assert (right.name, right.span) == ("term", (2, 5))
    assert right.text(text) == "2*3"
    assert [(c.name, c.span) for c in right.children] == [("term", (2, 3)), ("number", (4, 5))]


def test_match_order_is_completion_order(arith_grammar):
    cur = arith_grammar.parse("1+2*3", "exp")
    assert cur.matches == [
        ("number", 0, 1), ("term", 0, 1), ("exp", 0, 1),
        ("number", 2, 3), ("term", 2, 3),
        ("number", 4, 5), ("term", 2, 5),
        ("exp", 0, 5),
    ]


# ---- memo lookups ----

def test_memo_reads_are_idempotent_and_do_no_work(arith_grammar, monkeypatch):
    cur = arith_grammar.parse("12+3", "exp")
    recorded = cur.matches

    def boom(self, cursor, grammar):
        raise AssertionError(f"re-parsed {self.name}")

    monkeypatch.setattr(Rule, "parse", boom)
    for _ in range(2):
        cur.pos = 0
        assert lookup_or_parse(cur, arith_grammar, "exp")
        assert cur.pos == 4
    assert cur.matches == recorded


def test_lookup_honours_mismatch_before_matches(arith_grammar):
    cur = Cursor("1")
    cur.save_match("number", 0, 1)
    cur.save_mismatch("number", 0)
    assert not lookup_or_parse(cur, arith_grammar, "number")
    assert cur.pos == 0


def test_lookup_fails_for_rule_in_flight(arith_grammar):
    cur = Cursor("1")
    cur.save_started("number", 0)
    assert not lookup_or_parse(cur, arith_grammar, "number")
    assert cur.pos == 0


# ---- configuration errors ----

def test_unknown_reference_fails_at_parse_time_only():
    spec = define_rules(lambda define, lit, pat: define("a", "missing"))
    g = compile_rules(spec)
    with pytest.raises(GrammarError, match="missing"):
        g.parse("x", "a")


def test_unknown_start_rule(arith_grammar):
    with pytest.raises(GrammarError, match="nope"):
        arith_grammar.parse("1", "nope")


def test_default_start_rule_is_first_defined(arith_grammar):
    assert arith_grammar.start == "number"
    assert arith_grammar.parse("42").at_end()


def test_check_reports_unresolved_references():
    def rules(define, lit, pat):
        define("a", "b", "c")
        define("b", lit("b"))

    g = compile_rules(define_rules(rules))
    with pytest.raises(GrammarError, match="'c' \\(in rule 'a'\\)"):
        g.check()


def test_duplicate_rule_in_grammar():
    r = Rule("a", (Alt("a", (Literal("a"),)),))
    with pytest.raises(GrammarError):
        Grammar([r, r])


def test_reference_term_uses_grammar_lookup(arith_grammar):
    c = Cursor("7")
    assert match_term(Reference("number"), c, arith_grammar)
    assert c.pos == 1


# ---- recursion guard ----

def _parens(define, lit, pat):
    define("p", lit("("), "p", lit(")"))
    define("p", lit("x"))


def test_nesting_within_limit():
    text = "(" * 20 + "x" + ")" * 20
    assert parse(text, define_rules(_parens), "p").matched


def test_nesting_beyond_limit_raises_distinct_error():
    text = "(" * 50 + "x" + ")" * 50
    with pytest.raises(RecursionLimitError) as exc:
        parse(text, define_rules(_parens), "p", max_depth=10)
    assert exc.value.rule == "p"
    assert exc.value.depth == 10


def test_indirect_left_recursion_terminates():
    def rules(define, lit, pat):
        define("a", "b", lit("x"))
        define("a", lit("y"))
        define("b", "a", lit("z"))

    res = parse("yzx", define_rules(rules), "a")
    assert res.end in (1, 3)


def _list(define, lit, pat):
    define("list", "item", lit(","), "list")
    define("list", "item")
    define("item", pat(r"[a-z]"))


def test_long_right_recursive_list_needs_higher_limit():
    text = ",".join("a" * 150)
    with pytest.raises(RecursionLimitError):
        parse(text, define_rules(_list), "list", max_depth=100)
    res = parse(text, define_rules(_list), "list", max_depth=400)
    assert res.matched
    assert res.end == len(text)
