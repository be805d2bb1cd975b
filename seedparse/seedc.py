# seedparse/seedc.py
"""seedc – seedparse CLI

Usage:
    $ seedc check examples/expr.g -D
    $ seedc parse examples/expr.g --text "1+2*3"
    $ seedc parse examples/expr.g --input expr.txt --start term --json
    $ seedc parse examples/expr.g --text "(1+a)*b" --no-tree

Commands
--------
- check : load the grammar file, compile it and verify every rule reference
- parse : parse text with the grammar and print the reconstructed tree

With -D/--debug each stage reports to stderr.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import List, Optional

from .errors import RecursionLimitError
from .peg.cursor import DEFAULT_MAX_DEPTH

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _load_grammar(grammar_path: str, debug: bool):
    """Grammar file -> RuleSpec -> Grammar, with reference check."""
    from .grammar.loader import load_grammar_text
    from .grammar.parser import parse_grammar
    from .peg.compile import compile_rules

    src = load_grammar_text(grammar_path)
    spec = parse_grammar(src)
    if debug: _eprint("[DEBUG] RuleSpec ready | rules=%d alts=%d start=%s" %
                      (len(spec), sum(len(spec.alternatives(n)) for n in spec), spec.start))

    g = compile_rules(spec)
    g.check()
    if debug: _eprint("[DEBUG] Grammar compiled | rules=%d" % len(g))
    return spec, g


def _print_spec(spec) -> None:
    from .grammar.ast import format_spec
    _eprint("\n[RULES]\n" + format_spec(spec))

# ------------------------------
# commands
# ------------------------------

def cmd_check(args) -> int:
    try:
        spec, g = _load_grammar(args.file, debug=args.debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_spec(spec)

    n_alts = sum(len(r.alts) for r in g.rules())
    print(f"[CHECK OK] rules={len(g)} alts={n_alts} start={g.start}")
    return 0


def cmd_parse(args) -> int:
    from .peg.runtime import parse

    try:
        spec, g = _load_grammar(args.file, debug=args.debug)
        if args.text is not None:
            text = args.text
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                text = f.read()
        result = parse(text, g, args.start, max_depth=args.max_depth)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except RecursionLimitError as e:
        _eprint("[ERROR]", str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    cur = result.cursor
    if args.debug:
        _eprint("[DEBUG] parse done | end=%d/%d matches=%d mismatches=%d started=%d" %
                (cur.pos, len(text), len(cur.matches), len(cur.mismatches), len(cur.started)))

    start = args.start or g.start
    if result.matched:
        print(f"[MATCH] rule={start} end={result.end}")
    else:
        print(f"[PARTIAL] rule={start} end={result.end} of {len(text)}")
        furthest = cur.furthest_mismatch()
        if furthest is not None:
            print(f"  furthest failure: '{furthest[0]}' at {furthest[1]}")

    if result.tree is not None and args.tree:
        if args.json:
            print(json.dumps(result.tree.to_dict(text), indent=2))
        else:
            print(result.tree.pretty(text))
    return 0 if result.matched else 1

# ------------------------------
# entrypoint
# ------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="seedc", description="seedparse grammar CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="load and compile a grammar, verify references")
    p_check.add_argument("file", help="grammar file")
    p_check.add_argument("-D", "--debug", action="store_true", help="print stage details to stderr")
    p_check.set_defaults(func=cmd_check)

    p_parse = sub.add_parser("parse", help="parse text and print the parse tree")
    p_parse.add_argument("file", help="grammar file")
    src_group = p_parse.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="input text")
    src_group.add_argument("--input", help="input text file")
    p_parse.add_argument("-s", "--start", help="start rule (default: %%start or first rule)")
    p_parse.add_argument("--json", action="store_true", help="print the tree as JSON")
    p_parse.add_argument("--tree", action=argparse.BooleanOptionalAction, default=True,
                         help="print the parse tree (--no-tree: status line only)")
    p_parse.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, help="rule nesting limit")
    p_parse.add_argument("-D", "--debug", action="store_true", help="print stage details to stderr")
    p_parse.set_defaults(func=cmd_parse)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
