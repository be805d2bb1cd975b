# seedparse/grammar/ast.py
"""Rule specification (the declarative form of a grammar)

- LitSpec : exact text
- PatSpec : pattern matched at the cursor offset (str or compiled pattern)
- RefSpec : reference to another rule by name
- RuleSpec: name -> alternatives -> term descriptors, declaration order kept
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import Any, Dict, Iterator, List, Optional, Sequence, Union

@dataclass(frozen=True)
class LitSpec:
    text: str

@dataclass(frozen=True)
class PatSpec:
    pattern: Any    # source string or an object with match(string, pos)
    flags: str = ""

@dataclass(frozen=True)
class RefSpec:
    name: str

TermSpec = Union[LitSpec, PatSpec, RefSpec]
Alternative = List[TermSpec]


@dataclass
class RuleSpec:
    """Ordered mapping rule name -> list of alternatives.

    `start` is only a default for callers that do not name a start rule
    (the grammar-file `%start` directive, or the first declared rule).
    """
    rules: Dict[str, List[Alternative]] = field(default_factory=dict)
    start: Optional[str] = None

    def add(self, name: str, terms: Sequence[TermSpec]) -> None:
        self.rules.setdefault(name, []).append(list(terms))
        if self.start is None:
            self.start = name

    def names(self) -> List[str]:
        return list(self.rules)

    def alternatives(self, name: str) -> List[Alternative]:
        return self.rules[name]

    def __contains__(self, name: object) -> bool:
        return name in self.rules

    def __iter__(self) -> Iterator[str]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


def format_term(t: TermSpec) -> str:
    if isinstance(t, LitSpec):
        return repr(t.text)
    if isinstance(t, PatSpec):
        src = getattr(t.pattern, "pattern", t.pattern)
        return f"/{src}/{t.flags}"
    if isinstance(t, RefSpec):
        return t.name
    raise AssertionError(f"unknown term spec: {t!r}")


def format_spec(spec: RuleSpec) -> str:
    """Render a RuleSpec back into grammar-file syntax."""
    lines: List[str] = []
    if spec.start is not None:
        lines.append(f"%start {spec.start} ;")
    for name, alts in spec.rules.items():
        rhs = " | ".join(" ".join(format_term(t) for t in alt) for alt in alts)
        lines.append(f"{name} : {rhs} ;")
    return "\n".join(lines)
