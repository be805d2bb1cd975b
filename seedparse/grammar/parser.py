"""Grammar file parser
- %start NAME ;
- rules: NAME : alt | alt ... ;   (':' or '::=')
- items: IDENT (rule reference), "..." / '...' (literal), /regex/flags (pattern)
- comments: // ..., # ..., /* ... */
- the semicolon closing every declaration and rule is mandatory
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import List, Optional, Tuple
import ast as _pyast

from .ast import Alternative, LitSpec, PatSpec, RefSpec, RuleSpec
from ..errors import GrammarError

# ---- tokens ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r"//[^\n]*"),
    ("HCOMMENT", r"#[^\n]*"),
    ("MCOMMENT", r"/\*.*?\*/"),
    ("PERCENT",  r"%"),
    ("ASSIGN",   r"::="),
    ("COLON",    r":"),
    ("SEMI",     r";"),
    ("OR",       r"\|"),
    ("REGEX",    r"/(?:\\.|[^/\\\n])+/[imsxA]*"),
    ("STRING",   r'"(?:\\.|[^"\\\n])*"'),
    ("SSTRING",  r"'(?:\\.|[^'\\\n])*'"),
    ("IDENT",    r"[A-Za-z_][A-Za-z0-9_]*"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC), re.S)

_SKIP = ("WS", "NEWLINE", "COMMENT", "HCOMMENT", "MCOMMENT")

@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int

def _scan(src: str) -> List[Tok]:
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            snippet = _snippet_caret_at_pos(src, i)
            raise GrammarError(f"Unexpected char {src[i]!r} at {line}:{col}\n{snippet}")
        kind = m.lastgroup or ""
        lex = m.group(0)
        start, end = i, m.end()

        if kind not in _SKIP:
            toks.append(Tok(kind, lex, start, end, line, col))

        nl_count = lex.count("\n")
        if nl_count:
            line += nl_count
            col = len(lex) - lex.rfind("\n")
        else:
            col += len(lex)
        i = end

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks

# ---------- error snippets ----------
def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """[start, end) of the line holding pos"""
    start = src.rfind("\n", 0, pos)
    start = 0 if start < 0 else start + 1
    end = src.find("\n", pos)
    end = len(src) if end < 0 else end
    return start, end

def _snippet_caret_at_pos(src: str, pos: int) -> str:
    start, end = _line_bounds(src, pos)
    col = (pos - start) + 1
    return f"{src[start:end]}\n{' ' * (col - 1)}^"

def _snippet_with_caret(src: str, tok: Tok) -> str:
    return _snippet_caret_at_pos(src, tok.start)

# ---- token stream ----
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def prev(self) -> Tok:
        return self.toks[self.i - 1] if self.i > 0 else self.toks[0]

    def eat(self, kind: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            raise self.error(f"Expected {kind}, got {t.kind}", t)
        self.i += 1
        return t

    def match(self, kind: str) -> Optional[Tok]:
        if self.la().kind == kind:
            return self.eat(kind)
        return None

    def error(self, msg: str, tok: Tok) -> GrammarError:
        snippet = _snippet_with_caret(self.src, tok)
        return GrammarError(f"{msg} at {tok.line}:{tok.col}\n{snippet}")

def _unquote(s: str) -> str:
    return _pyast.literal_eval(s)

def _strip_regex(s: str) -> Tuple[str, str]:
    last = s.rfind("/")
    return s[1:last], s[last + 1:]

def _require_semi(ts: _TS, context: str, example: str) -> None:
    if ts.match("SEMI"):
        return
    got = ts.la()
    found = "EOF" if got.kind == "EOF" else got.kind
    snippet = _snippet_caret_at_pos(ts.src, ts.prev().end)
    raise GrammarError(
        f"Missing ';' after {context} (semicolon is mandatory).\n"
        f"- Found: {found} at {got.line}:{got.col}\n"
        f"- Example: {example}\n\n"
        f"{snippet}"
    )

# ---- grammar ----
def parse_grammar(src: str) -> RuleSpec:
    ts = _TS(_scan(src), src)
    spec = RuleSpec()
    start: Optional[str] = None

    while ts.la().kind != "EOF":
        t = ts.la()
        if t.kind == "PERCENT":
            ts.eat("PERCENT")
            kw = ts.eat("IDENT")
            if kw.lexeme != "start":
                raise ts.error(f"Unknown directive %{kw.lexeme}", kw)
            if start is not None:
                raise ts.error("Duplicate %start directive", kw)
            start = ts.eat("IDENT").lexeme
            _require_semi(ts, "%start directive", "%start exp ;")
            continue

        lhs = ts.eat("IDENT").lexeme
        if not (ts.match("COLON") or ts.match("ASSIGN")):
            raise ts.error(f"Expected ':' after rule name '{lhs}', got {ts.la().kind}", ts.la())
        alts = [_parse_seq(ts, lhs)]
        while ts.match("OR"):
            alts.append(_parse_seq(ts, lhs))
        _require_semi(ts, f"rule '{lhs}'", f"{lhs} : ... ;")
        for alt in alts:
            spec.add(lhs, alt)

    if start is not None:
        spec.start = start
    return spec

def _parse_seq(ts: _TS, lhs: str) -> Alternative:
    items: Alternative = []
    while True:
        t = ts.la()
        if t.kind == "IDENT":
            items.append(RefSpec(ts.eat("IDENT").lexeme))
        elif t.kind in ("STRING", "SSTRING"):
            items.append(LitSpec(_unquote(ts.eat(t.kind).lexeme)))
        elif t.kind == "REGEX":
            pat, flags = _strip_regex(ts.eat("REGEX").lexeme)
            items.append(PatSpec(pat, flags))
        else:
            break
    if not items:
        raise ts.error(f"Empty alternative in rule '{lhs}'", ts.la())
    return items
