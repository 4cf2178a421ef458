# cardatlas/layout.py
"""Tree layout for a card's relationship network.

The tree grows from a root card: the children of a node are the cards that
link *to* it, so the drawing shows everything flowing into the root. Layout
runs in two passes, a post-order pass that sizes every subtree and a
pre-order pass that centres each child inside its own subtree slot. Sibling
subtrees therefore never overlap horizontally, at the price of some wasted
space next to wide subtrees.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Optional

from cardatlas.graph import LinkGraph
from cardatlas.lookup import LAYOUT_DEFAULTS
from cardatlas.models import Card

logger = logging.getLogger(__name__)

Point = tuple[float, float]


@dataclass(frozen=True)
class LayoutConfig:
    card_width: float = LAYOUT_DEFAULTS["card_width"]
    horizontal_spacing: float = LAYOUT_DEFAULTS["horizontal_spacing"]
    vertical_spacing: float = LAYOUT_DEFAULTS["vertical_spacing"]
    margin: float = LAYOUT_DEFAULTS["margin"]
    min_width: float = LAYOUT_DEFAULTS["min_width"]
    card_height: float = LAYOUT_DEFAULTS["card_height"]
    card_top_padding: float = LAYOUT_DEFAULTS["card_top_padding"]


@dataclass
class TreeNode:
    id: str
    card: Card
    children: list[TreeNode] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    depth: int = 0
    width: float = 0.0
    parent_id: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def extent(self) -> tuple[float, float]:
        """Horizontal interval covered by this node's subtree slot."""
        return (self.x - self.width / 2, self.x + self.width / 2)


@dataclass(frozen=True)
class Curve:
    """Quadratic Bézier from the bottom of a parent card to the top of a child."""

    parent_id: str
    child_id: str
    start: Point
    control: Point
    end: Point

    def to_svg_path(self) -> str:
        (sx, sy), (cx, cy), (ex, ey) = self.start, self.control, self.end
        return f"M {sx:g},{sy:g} Q {cx:g},{cy:g} {ex:g},{ey:g}"

    def to_dict(self) -> dict:
        return {
            "parent": self.parent_id,
            "child": self.child_id,
            "start": list(self.start),
            "control": list(self.control),
            "end": list(self.end),
        }


@dataclass
class TreeLayout:
    root: TreeNode
    nodes: list[TreeNode]
    curves: list[Curve]
    width: float
    height: float

    def find(self, card_id: str) -> Optional[TreeNode]:
        for node in self.nodes:
            if node.id == card_id:
                return node
        return None

    def placements(self) -> list[dict]:
        return [{"id": n.id, "x": n.x, "y": n.y} for n in self.nodes]

    def to_dict(self, svg: bool = False) -> dict:
        curves = [c.to_svg_path() for c in self.curves] if svg else [c.to_dict() for c in self.curves]
        return {
            "root": self.root.id,
            "width": self.width,
            "height": self.height,
            "nodes": [
                {"id": n.id, "x": n.x, "y": n.y, "depth": n.depth, "parent": n.parent_id}
                for n in self.nodes
            ],
            "curves": curves,
        }


# -------------------------------
# Tree construction
# -------------------------------

def build_tree(root_id: str, graph: LinkGraph) -> Optional[TreeNode]:
    """Depth-first tree of the cards linking (transitively) into ``root_id``.

    A card already placed is never attached again, so a cycle yields a
    finite tree with each card appearing once. Uses an explicit stack so
    long link chains do not hit the interpreter's recursion limit.
    """
    card = graph.get(root_id)
    if card is None:
        return None

    root = TreeNode(id=root_id, card=card)
    visited = {root_id}
    stack = [(root, iter(graph.sources_of(root_id)))]
    while stack:
        node, pending = stack[-1]
        for child_id in pending:
            if child_id in visited:
                continue
            visited.add(child_id)
            child = TreeNode(
                id=child_id,
                card=graph.get(child_id),
                depth=node.depth + 1,
                parent_id=node.id,
            )
            node.children.append(child)
            stack.append((child, iter(graph.sources_of(child_id))))
            break
        else:
            stack.pop()
    return root


def breadth_first(root: TreeNode) -> list[TreeNode]:
    nodes = []
    queue = deque([root])
    while queue:
        current = queue.popleft()
        nodes.append(current)
        queue.extend(current.children)
    return nodes


# -------------------------------
# Sizing + positioning
# -------------------------------

def _span(children: list[TreeNode], config: LayoutConfig) -> float:
    return sum(c.width for c in children) + (len(children) - 1) * config.horizontal_spacing


def _size_subtrees(nodes: list[TreeNode], config: LayoutConfig) -> None:
    # reversed breadth-first order visits children before parents
    for node in reversed(nodes):
        if node.is_leaf:
            node.width = config.card_width
        else:
            node.width = max(config.card_width, _span(node.children, config))


def _position(nodes: list[TreeNode], config: LayoutConfig, start_x: float) -> None:
    root = nodes[0]
    root.x, root.y = start_x, 0.0
    for node in nodes:
        if node.is_leaf:
            continue
        current_x = node.x - _span(node.children, config) / 2
        for child in node.children:
            child.x = current_x + child.width / 2
            child.y = node.y + config.vertical_spacing
            current_x += child.width + config.horizontal_spacing


def curve_between(parent: TreeNode, child: TreeNode, config: LayoutConfig) -> Curve:
    start = (parent.x, parent.y + config.card_top_padding + config.card_height)
    end = (child.x, child.y + config.card_top_padding)
    mid_y = (start[1] + end[1]) / 2
    return Curve(
        parent_id=parent.id,
        child_id=child.id,
        start=start,
        control=(parent.x, mid_y),
        end=end,
    )


# -------------------------------
# Grid cells
# -------------------------------

class GridCell(NamedTuple):
    row: int
    col: int
    has_children: bool


def _leaf_counts(nodes: list[TreeNode]) -> dict[str, int]:
    counts = {}
    for node in reversed(nodes):
        counts[node.id] = sum(counts[c.id] for c in node.children) if node.children else 1
    return counts


def grid_positions(root_id: str, cards: Iterable[Card]) -> dict[str, GridCell]:
    """Row/column cells for the relationship grid view.

    Same tree as ``layout``. A subtree spans one column per leaf; the root
    sits at row 0 in the middle column and each child takes the middle of
    its own span. ``has_children`` marks cards that some card links to.
    Returns an empty dict when the root is not in ``cards``.
    """
    graph = LinkGraph(cards)
    root = build_tree(root_id, graph)
    if root is None:
        return {}

    spans = _leaf_counts(breadth_first(root))

    def cell(node, row, col):
        return GridCell(row=row, col=col, has_children=graph.in_degree(node.id) > 0)

    root_col = spans[root.id] // 2
    cells = {root.id: cell(root, 0, root_col)}

    # frame: [node, pending children, current column, child being placed]
    stack = [[root, iter(root.children), root_col, None]]
    returned = 0
    while stack:
        frame = stack[-1]
        node, pending, current, active = frame
        if active is not None:
            current = current + 1 if spans[active.id] == 1 else returned
            frame[2], frame[3] = current, None

        child = next(pending, None)
        if child is None:
            stack.pop()
            returned = current if node.children else current + 1
            continue

        span = spans[child.id]
        col = current if span == 1 else current + span // 2
        cells[child.id] = cell(child, cells[node.id].row + 1, col)
        frame[3] = child
        stack.append([child, iter(child.children), col, None])
    return cells


def layout(root_id: str, cards: Iterable[Card], config: Optional[LayoutConfig] = None) -> Optional[TreeLayout]:
    """Position the relationship tree rooted at ``root_id``.

    Returns None when the root is not in ``cards``.
    """
    config = config or LayoutConfig()
    root = build_tree(root_id, LinkGraph(cards))
    if root is None:
        logger.debug("Layout requested for unknown root %r", root_id)
        return None

    nodes = breadth_first(root)
    _size_subtrees(nodes, config)
    start_x = max(root.width / 2, config.card_width) + config.margin
    _position(nodes, config, start_x)

    curves = [curve_between(node, child, config) for node in nodes for child in node.children]

    xs = [n.x for n in nodes]
    ys = [n.y for n in nodes]
    width = max(max(xs) - min(xs) + config.card_width, config.min_width)
    height = max(ys) - min(ys) + config.vertical_spacing

    logger.debug("Laid out %d cards under %r (%.0f x %.0f)", len(nodes), root_id, width, height)
    return TreeLayout(root=root, nodes=nodes, curves=curves, width=width, height=height)
