# cardatlas/filters.py
from typing import Iterable, Optional

from cardatlas.graph import connected_cards
from cardatlas.lookup import SEARCHABLE_FIELDS
from cardatlas.models import AtlasFilter, Card, Taxonomy
from cardatlas.orphans import filter_orphans


def matches_search(card: Card, term: str) -> bool:
    """Case-insensitive substring search over the card's text fields."""
    # whitespace is only ignored when the term is nothing but whitespace
    if not term or not term.strip():
        return True
    term = term.lower()
    text = " ".join(str(getattr(card, name)) for name in SEARCHABLE_FIELDS if getattr(card, name))
    return term in text.lower()


def filter_cards(cards: Iterable[Card], filters: AtlasFilter, taxonomy: Optional[Taxonomy] = None) -> list[Card]:
    """Apply the atlas filters to a card snapshot, keeping collection order.

    A relationships filter short-circuits everything else and returns the
    root's connected network.
    """
    cards = list(cards)
    if filters.relationships:
        return connected_cards(filters.relationships, cards)

    selected = [
        card for card in cards
        if (not filters.layer or card.layer == filters.layer)
        and (not filters.scope or card.scope == filters.scope)
        and (not filters.category or card.category == filters.category)
    ]

    if filters.orphans and filters.orphans != "all":
        # orphan status is judged against the whole collection, not the selection
        orphan_ids = {c.id for c in filter_orphans(cards, filters.orphans, taxonomy or Taxonomy.default())}
        selected = [card for card in selected if card.id in orphan_ids]

    return [card for card in selected if matches_search(card, filters.search_term)]
