import pytest

from cardatlas.graph import LinkGraph
from cardatlas.layout import GridCell, LayoutConfig, build_tree, grid_positions, layout
from cardatlas.models import Card

CONFIG = LayoutConfig()


def _cards(*specs):
    return [Card(id=cid, field=cid, linked_to=target) for cid, target in specs]


def _by_depth(tree):
    levels = {}
    for node in tree.nodes:
        levels.setdefault(node.depth, []).append(node)
    return levels


class TestTreeLayout:

    def test_star_scenario(self):
        tree = layout("A", _cards(("A", None), ("B", "A"), ("C", "A")))

        assert tree.root.id == "A"
        assert [c.id for c in tree.root.children] == ["B", "C"]
        b, c = tree.root.children
        assert b.depth == c.depth == 1
        assert b.y == c.y == CONFIG.vertical_spacing
        assert b.x < c.x
        assert b.x + b.width / 2 <= c.x - c.width / 2

    def test_star_coordinates(self):
        tree = layout("A", _cards(("A", None), ("B", "A"), ("C", "A")))
        a = tree.root
        b, c = a.children

        assert a.width == pytest.approx(380)
        assert (a.x, a.y) == pytest.approx((200, 0))
        assert b.x == pytest.approx(85)
        assert c.x == pytest.approx(315)
        assert tree.width == pytest.approx(600)
        assert tree.height == pytest.approx(240)

    def test_curves_join_parent_bottom_to_child_top(self):
        tree = layout("A", _cards(("A", None), ("B", "A"), ("C", "A")))
        first = tree.curves[0]

        assert (first.parent_id, first.child_id) == ("A", "B")
        assert first.start == pytest.approx((200, 90))
        assert first.end == pytest.approx((85, 140))
        assert first.control == pytest.approx((200, 115))
        assert first.to_svg_path() == "M 200,90 Q 200,115 85,140"
        assert len(tree.curves) == 2

    def test_cycle_builds_finite_tree(self):
        tree = layout("A", _cards(("A", "B"), ("B", "A")))
        assert [n.id for n in tree.nodes] == ["A", "B"]
        assert tree.root.children[0].children == []

    def test_cycle_member_appears_once(self):
        # C -> B -> A -> C, plus D -> B
        cards = _cards(("A", "C"), ("B", "A"), ("C", "B"), ("D", "B"))
        tree = layout("A", cards)
        ids = [n.id for n in tree.nodes]
        assert sorted(ids) == ["A", "B", "C", "D"]
        assert len(ids) == len(set(ids))
        b = tree.find("B")
        assert [c.id for c in b.children] == ["C", "D"]

    def test_first_visit_wins_in_depth_first_order(self):
        # B is reached under A before X can claim it
        cards = _cards(("A", None), ("B", "A"), ("X", "B"))
        tree = build_tree("A", LinkGraph(cards))
        assert tree.children[0].id == "B"
        assert tree.children[0].children[0].id == "X"
        assert tree.children[0].children[0].depth == 2

    def test_self_link_root(self):
        tree = layout("A", _cards(("A", "A")))
        assert [n.id for n in tree.nodes] == ["A"]
        assert tree.curves == []

    def test_missing_root_returns_none(self):
        assert layout("ghost", _cards(("A", None))) is None
        assert layout("ghost", []) is None

    def test_single_card_uses_width_floor(self):
        tree = layout("A", _cards(("A", None)))
        assert tree.root.x == pytest.approx(160)
        assert tree.width == pytest.approx(CONFIG.min_width)
        assert tree.height == pytest.approx(CONFIG.vertical_spacing)

    def test_links_away_from_root_are_not_children(self):
        # A links to P; P is not part of A's tree
        tree = layout("A", _cards(("P", None), ("A", "P"), ("B", "A")))
        assert [n.id for n in tree.nodes] == ["A", "B"]

    def test_is_deterministic(self):
        cards = _cards(("A", None), ("B", "A"), ("C", "A"), ("D", "B"), ("E", "B"), ("F", "C"))
        first = layout("A", cards)
        second = layout("A", cards)
        assert first.to_dict() == second.to_dict()

    def test_long_chain_does_not_recurse(self):
        n = 3000
        cards = [Card(id="c0")] + [Card(id=f"c{i}", linked_to=f"c{i - 1}") for i in range(1, n)]
        tree = layout("c0", cards)
        assert len(tree.nodes) == n
        assert tree.nodes[-1].depth == n - 1
        assert tree.nodes[-1].y == pytest.approx((n - 1) * CONFIG.vertical_spacing)

    def test_custom_spacing(self):
        config = LayoutConfig(card_width=100, horizontal_spacing=20, vertical_spacing=50, min_width=0)
        tree = layout("A", _cards(("A", None), ("B", "A"), ("C", "A")), config)
        b, c = tree.root.children
        assert c.x - b.x == pytest.approx(120)
        assert b.y == pytest.approx(50)
        assert tree.width == pytest.approx(220)


def test_siblings_never_overlap_at_any_depth():
    specs = [("root", None)]
    # uneven fan-out: a wide subtree next to narrow ones
    for i in range(4):
        specs.append((f"a{i}", "root"))
    for j in range(5):
        specs.append((f"a1_{j}", "a1"))
        for k in range(3):
            specs.append((f"a1_{j}_{k}", f"a1_{j}"))
    specs.append(("a3_0", "a3"))
    tree = layout("root", _cards(*specs))

    for depth, level in _by_depth(tree).items():
        extents = sorted(node.extent() for node in level)
        for (_, right), (left, _) in zip(extents, extents[1:]):
            assert right <= left + 1e-9, f"overlap at depth {depth}"
        for node in level:
            assert node.y == pytest.approx(depth * CONFIG.vertical_spacing)


def test_children_centred_under_parent():
    cards = _cards(("A", None), ("B", "A"), ("C", "A"), ("D", "A"))
    tree = layout("A", cards)
    xs = [child.x for child in tree.root.children]
    assert (xs[0] + xs[-1]) / 2 == pytest.approx(tree.root.x)


def test_placements_and_dict_output():
    tree = layout("A", _cards(("A", None), ("B", "A")))
    assert tree.placements() == [
        {"id": "A", "x": tree.root.x, "y": 0.0},
        {"id": "B", "x": tree.root.children[0].x, "y": CONFIG.vertical_spacing},
    ]
    data = tree.to_dict(svg=True)
    assert data["root"] == "A"
    assert data["nodes"][1]["parent"] == "A"
    assert data["curves"][0].startswith("M ")


class TestGridPositions:

    def test_star_scenario(self):
        cells = grid_positions("A", _cards(("A", None), ("B", "A"), ("C", "A")))
        assert cells == {
            "A": GridCell(row=0, col=1, has_children=True),
            "B": GridCell(row=1, col=1, has_children=False),
            "C": GridCell(row=1, col=2, has_children=False),
        }

    def test_cycle_scenario(self):
        cells = grid_positions("A", _cards(("A", "B"), ("B", "A")))
        assert cells == {
            "A": GridCell(row=0, col=0, has_children=True),
            "B": GridCell(row=1, col=0, has_children=True),
        }

    def test_missing_root_returns_empty(self):
        assert grid_positions("Z", _cards(("A", None))) == {}

    def test_wide_subtree_takes_middle_of_its_span(self):
        # B has two leaves, C has none: A spans three columns
        cards = _cards(("A", None), ("B", "A"), ("C", "A"), ("D", "B"), ("E", "B"))
        cells = grid_positions("A", cards)
        assert cells["A"] == GridCell(0, 1, True)
        assert cells["B"] == GridCell(1, 2, True)
        assert cells["D"].row == cells["E"].row == 2
        assert cells["E"].col == cells["D"].col + 1
        assert cells["C"].row == 1

    def test_long_chain_does_not_recurse(self):
        n = 3000
        cards = [Card(id="c0")] + [Card(id=f"c{i}", linked_to=f"c{i - 1}") for i in range(1, n)]
        cells = grid_positions("c0", cards)
        assert len(cells) == n
        assert cells[f"c{n - 1}"] == GridCell(row=n - 1, col=0, has_children=False)
        assert {cell.col for cell in cells.values()} == {0}
