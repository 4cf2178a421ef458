# cardatlas/drawing.py
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch, PathPatch
from matplotlib.path import Path

from cardatlas.layout import LayoutConfig, TreeLayout
from cardatlas.lookup import CARD_EDGE_COLOR, CARD_FACE_COLOR, CONNECTOR_COLOR, ROOT_EDGE_COLOR

# -------------------------------
# Tree rendering
# -------------------------------

def curve_path(curve) -> Path:
    """Quadratic Bézier as a matplotlib path."""
    return Path(
        [curve.start, curve.control, curve.end],
        [Path.MOVETO, Path.CURVE3, Path.CURVE3],
    )


def draw_connections(ax, layout: TreeLayout, color=CONNECTOR_COLOR, linewidth=2):
    patches = []
    for curve in layout.curves:
        patch = PathPatch(curve_path(curve), facecolor="none", edgecolor=color, linewidth=linewidth, zorder=1)
        ax.add_patch(patch)
        patches.append(patch)
    return patches


def draw_cards(ax, layout: TreeLayout, config: LayoutConfig, dark_mode=True):
    """Draw each card as a rounded box centred on its node position."""
    text_color = "white" if dark_mode else "black"
    face = CARD_FACE_COLOR if dark_mode else "white"
    for node in layout.nodes:
        left = node.x - config.card_width / 2
        top = node.y + config.card_top_padding
        edge = ROOT_EDGE_COLOR if node is layout.root else CARD_EDGE_COLOR
        ax.add_patch(FancyBboxPatch(
            (left, top), config.card_width, config.card_height,
            boxstyle="round,pad=0,rounding_size=8",
            facecolor=face, edgecolor=edge, linewidth=1.5, zorder=2,
        ))
        label = node.card.field or node.id
        ax.text(
            node.x, top + config.card_height / 2, label,
            ha="center", va="center", fontsize=8, color=text_color, zorder=3,
        )
        if node.card.layer:
            ax.text(
                node.x, top + config.card_height - 8, node.card.layer,
                ha="center", va="bottom", fontsize=6, color=text_color, alpha=0.7, zorder=3,
            )


def render_layout(layout: TreeLayout, config=None, ax=None, dark_mode=True):
    """Render a positioned tree onto ``ax`` (a new figure if None)."""
    config = config or LayoutConfig()
    if ax is None:
        fig, ax = plt.subplots(figsize=(layout.width / 100, max(layout.height, config.vertical_spacing) / 100 + 1))
    else:
        fig = ax.figure

    if dark_mode:
        fig.patch.set_facecolor("black")
        ax.set_facecolor("black")

    draw_connections(ax, layout)
    draw_cards(ax, layout, config, dark_mode=dark_mode)

    xs = [n.x for n in layout.nodes]
    ys = [n.y for n in layout.nodes]
    pad = config.margin
    ax.set_xlim(min(xs) - config.card_width / 2 - pad, max(xs) + config.card_width / 2 + pad)
    # screen orientation: y grows downward
    ax.set_ylim(max(ys) + config.card_top_padding + config.card_height + pad, min(ys) - pad)
    ax.set_aspect("equal")
    ax.axis("off")
    return fig


def save_layout_figure(layout: TreeLayout, path, config=None, dark_mode=True, dpi=100):
    fig = render_layout(layout, config=config, dark_mode=dark_mode)
    fig.savefig(path, dpi=dpi, facecolor=fig.get_facecolor(), bbox_inches="tight")
    plt.close(fig)
    return path
