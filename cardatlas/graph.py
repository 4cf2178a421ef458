# cardatlas/graph.py
import logging
from collections import deque
from typing import Iterable, Optional

import networkx as nx

from cardatlas.models import Card

logger = logging.getLogger(__name__)

# -------------------------------
# Link index
# -------------------------------

class LinkGraph:
    """Read-only index over a card snapshot.

    Holds a forward map (id -> linked id) and a reverse multimap
    (id -> ids linking to it), both built once in O(n). Cards are referred
    to by id only; the input sequence is never mutated.
    """

    def __init__(self, cards: Iterable[Card]):
        self._cards: dict[str, Card] = {}
        self._forward: dict[str, Optional[str]] = {}
        self._reverse: dict[str, list[str]] = {}

        for card in cards:
            if card.id in self._cards:
                logger.debug("Duplicate card id %r ignored", card.id)
                continue
            self._cards[card.id] = card
            self._forward[card.id] = card.linked_to
            if card.linked_to is not None:
                self._reverse.setdefault(card.linked_to, []).append(card.id)

        dangling = [cid for cid, target in self._forward.items()
                    if target is not None and target not in self._cards]
        if dangling:
            logger.debug("Cards with dangling links: %s", dangling)

    def __contains__(self, card_id) -> bool:
        return card_id in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def ids(self) -> list[str]:
        return list(self._cards)

    def get(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def target_of(self, card_id: str) -> Optional[str]:
        """The card ``card_id`` links to, or None if unlinked or dangling."""
        target = self._forward.get(card_id)
        if target is None or target not in self._cards:
            return None
        return target

    def sources_of(self, card_id: str) -> list[str]:
        """Ids of cards linking to ``card_id``, in collection order."""
        return list(self._reverse.get(card_id, ()))

    def in_degree(self, card_id: str, count_self: bool = True) -> int:
        sources = self._reverse.get(card_id, ())
        if count_self:
            return len(sources)
        return sum(1 for src in sources if src != card_id)

    def to_networkx(self) -> nx.DiGraph:
        """Directed graph with one node per card and one edge per resolvable link."""
        G = nx.DiGraph()
        G.add_nodes_from(self._cards)
        for card_id in self._cards:
            target = self.target_of(card_id)
            if target is not None:
                G.add_edge(card_id, target)
        return G


# -------------------------------
# Weak connectivity
# -------------------------------

def connected_ids(root_id: str, cards: Iterable[Card], graph: Optional[LinkGraph] = None) -> set[str]:
    """Ids weakly reachable from ``root_id`` (links treated as undirected).

    The root is always a member. If it is not in the collection the result
    is ``{root_id}`` with no further expansion. Cycles and dangling links
    are absorbed by the visited set.
    """
    graph = graph if graph is not None else LinkGraph(cards)
    if root_id not in graph:
        logger.debug("Root %r not in collection", root_id)
        return {root_id}

    visited = {root_id}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        neighbours = graph.sources_of(current)
        target = graph.target_of(current)
        if target is not None:
            neighbours.insert(0, target)
        for nbr in neighbours:
            if nbr not in visited:
                visited.add(nbr)
                queue.append(nbr)
    return visited


def connected_cards(root_id: str, cards: Iterable[Card]) -> list[Card]:
    """Cards in the root's network, in their original collection order."""
    cards = list(cards)
    ids = connected_ids(root_id, cards)
    return [card for card in cards if card.id in ids]


def components(cards: Iterable[Card]) -> list[set[str]]:
    """All weakly connected components, largest first."""
    G = LinkGraph(cards).to_networkx()
    comps = list(nx.weakly_connected_components(G))
    comps.sort(key=lambda comp: (-len(comp), min(comp)))
    return comps
