# cardatlas/orphans.py
from typing import Iterable, NamedTuple, Optional

from cardatlas.graph import LinkGraph
from cardatlas.lookup import ORPHAN_MODES
from cardatlas.models import Card, Taxonomy


class OrphanStatus(NamedTuple):
    is_orphan_endpoint: bool
    is_orphan_throughpoint: bool


def _classify(card: Card, graph: LinkGraph, taxonomy: Taxonomy) -> OrphanStatus:
    kind_endpoint = taxonomy.is_endpoint(card.layer)
    kind_throughpoint = taxonomy.is_throughpoint(card.layer)
    # A card linking to itself does not count as being linked to
    return OrphanStatus(
        is_orphan_endpoint=kind_endpoint and graph.in_degree(card.id, count_self=False) == 0,
        is_orphan_throughpoint=kind_throughpoint and not card.has_link,
    )


def classify(card: Card, all_cards: Iterable[Card], taxonomy: Taxonomy) -> OrphanStatus:
    """Classify one card against the full collection.

    An endpoint-layer card is an orphan when no other card links to it; a
    throughpoint-layer card is an orphan when it links nowhere. Cards on
    unregistered layers are never orphans.
    """
    return _classify(card, LinkGraph(all_cards), taxonomy)


def filter_orphans(cards: Iterable[Card], mode: Optional[str], taxonomy: Taxonomy) -> list[Card]:
    """Cards that are orphans for ``mode`` ("endpoints" or "throughpoints").

    ``None`` or "all" disables orphan filtering and returns every card.
    """
    cards = list(cards)
    if mode in (None, "", "all"):
        return cards
    if mode not in ORPHAN_MODES:
        raise ValueError(f"Unknown orphan mode {mode!r}; expected one of {ORPHAN_MODES}")

    graph = LinkGraph(cards)
    out = []
    for card in cards:
        status = _classify(card, graph, taxonomy)
        if mode == "endpoints" and status.is_orphan_endpoint:
            out.append(card)
        elif mode == "throughpoints" and status.is_orphan_throughpoint:
            out.append(card)
    return out
