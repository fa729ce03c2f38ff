"""
Parser for the ``@diagram`` fence mini-language::

    - Client: Browser (icon: laptop)
    - Server: API
    - Client -> Server: HTTPS
    - Server -> Database

Nodes are created the first time they are referenced; a later ``Name: label``
line relabels an existing node without moving it.
"""
from typing import Dict

from .models import DiagramEdge, DiagramGraph, DiagramNode
from .text_utils import split_lines

BULLET_PREFIXES = ("- ", "+ ", "* ")


def parse_diagram(content: str) -> DiagramGraph:
    """
    Build the node/edge graph of a diagram fence.

    Args:
        content: Raw text between the diagram fences.

    Returns:
        Nodes in first-reference order and edges in line order. Input with
        nothing recognisable yields an empty graph.
    """
    graph = DiagramGraph()
    index: Dict[str, DiagramNode] = {}

    def ensure(name: str) -> DiagramNode:
        node = index.get(name)
        if node is None:
            node = DiagramNode(name=name, label=name)
            index[name] = node
            graph.nodes.append(node)
        return node

    for raw_line in split_lines(content):
        line = raw_line.strip()
        for prefix in BULLET_PREFIXES:
            if line.startswith(prefix):
                line = line[len(prefix):]
                break
        if not line:
            continue

        # Parenthetical metadata goes first so its colons are never mistaken
        # for a label separator.
        line = strip_trailing_parens(line)

        if " -> " in line:
            source, _, rest = line.partition(" -> ")
            target, sep, label = rest.partition(": ")
            source, target = source.strip(), target.strip()
            ensure(source)
            ensure(target)
            graph.edges.append(DiagramEdge(from_node=source, to_node=target, label=label.strip() if sep else ""))
        elif ": " in line:
            name, _, label = line.partition(": ")
            name = name.strip()
            if name:
                ensure(name).label = label.strip()
        else:
            name = line.strip()
            if name:
                ensure(name)

    return graph


def strip_trailing_parens(line: str) -> str:
    """Drop a trailing ``(key: value, ...)`` group that follows whitespace."""
    trimmed = line.rstrip()
    if not trimmed.endswith(")"):
        return trimmed
    start = trimmed.rfind("(")
    if start > 0 and trimmed[start - 1].isspace():
        return trimmed[:start].rstrip()
    return trimmed
