# seedparse/peg/tree.py
"""Parse tree reconstruction from the flat match list.

The cursor records one (rule, start, end) triple per successful alternative,
in completion order: inner rules land before the rules that contain them.
`matches_to_tree` folds that stream into a nested tree with one "current"
node that grows to the right:

    [number 0 1] [term 0 1] [exp 0 1]           -> exp(term(number))
    [number 2 3] [term 2 3]                     -> sibling after the '+' gap
    [number 4 5] [term 2 5]                     -> regroups term(2 3) + number
    [exp 0 5]                                   -> covers everything: new root

A rule that opens or closes with a terminal, such as factor := "(" exp ")",
records a span wider than its children; it still covers them and wraps
them the same way.
Triples that fit none of the cases come from alternatives that were later
abandoned and are dropped.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


@dataclass
class ParseNode:
    name: Optional[str]
    start: int
    end: int
    children: List["ParseNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start, self.end)

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def walk(self) -> Iterator["ParseNode"]:
        """Pre-order traversal."""
        yield self
        for c in self.children:
            yield from c.walk()

    def to_dict(self, source: Optional[str] = None) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "start": self.start, "end": self.end}
        if source is not None:
            d["text"] = self.text(source)
        d["children"] = [c.to_dict(source) for c in self.children]
        return d

    def pretty(self, source: Optional[str] = None, indent: str = "  ") -> str:
        lines: List[str] = []

        def rec(n: "ParseNode", depth: int) -> None:
            label = n.name if n.name is not None else "<root>"
            line = f"{indent * depth}{label} [{n.start},{n.end})"
            if source is not None:
                line += f" {n.text(source)!r}"
            lines.append(line)
            for c in n.children:
                rec(c, depth + 1)

        rec(self, 0)
        return "\n".join(lines)


def _trailing_run(children: List[ParseNode], start: int, end: int) -> Optional[int]:
    """Index i such that children[i:] lies inside [start, end), if any.

    The run may leave room at either edge for terminals that recorded no
    match, but no child before it may reach past `start`.
    """
    if not children or children[-1].end > end:
        return None
    i = len(children)
    while i > 0 and children[i - 1].start >= start:
        i -= 1
    if i == len(children):
        return None
    if i > 0 and children[i - 1].end > start:
        return None
    return i


def matches_to_tree(matches: Iterable[Sequence[Any]]) -> Optional[ParseNode]:
    """Build the parse tree from (name, start, end) triples in recorded order.

    Returns None for an empty list.
    """
    cur: Optional[ParseNode] = None

    for name, start, end in matches:
        if cur is None:
            cur = ParseNode(None, start, end, [ParseNode(name, start, end)])
            continue

        children = cur.children
        last = children[-1] if children else None

        if last is not None and last.start == start and last.end == end:
            # same span as the last child: the new rule wraps it
            children[-1] = ParseNode(name, start, end, [last])
        elif start >= cur.end:
            # next sibling (gaps come from inline literals/patterns)
            children.append(ParseNode(name, start, end))
            cur.end = end
        elif start <= cur.start and end >= cur.end:
            # covers everything so far, possibly with terminals on either side
            cur.name = name
            cur.start, cur.end = start, end
            cur = ParseNode(None, start, end, [cur])
        else:
            i = _trailing_run(children, start, end)
            if i is not None:
                group = ParseNode(name, start, end, children[i:])
                del children[i:]
                children.append(group)
                cur.end = max(cur.end, end)

    if cur is None:
        return None
    while (cur.name is None and len(cur.children) == 1
           and cur.children[0].span == cur.span):
        cur = cur.children[0]
    return cur
