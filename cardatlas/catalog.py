# cardatlas/catalog.py
"""Read-only access to exported card catalogs.

A catalog file is the JSON array written by the atlas export: one record per
card with camelCase keys (``linkedTo``). Taxonomy files hold
``[{"name": ..., "id": ..., "type": "endpoint" | "throughpoint"}]`` or a
plain ``{"Layer name": "endpoint"}`` mapping.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from cardatlas.lookup import CARD_KEYS
from cardatlas.models import Card, Taxonomy

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CatalogError(ValueError):
    """A card or taxonomy file could not be read."""


def _read_json(path: PathLike):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise CatalogError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"{path} is not valid JSON: {exc}") from exc


def parse_cards(records) -> list[Card]:
    if not isinstance(records, list):
        raise CatalogError("Invalid card data: expected an array of cards")
    cards = []
    for idx, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise CatalogError(f"Card #{idx} is not an object")
        try:
            cards.append(Card.from_dict(rec))
        except (TypeError, ValueError) as exc:
            raise CatalogError(f"Card #{idx}: {exc}") from exc
    return cards


def load_cards(path: PathLike) -> list[Card]:
    cards = parse_cards(_read_json(path))
    logger.debug("Loaded %d cards from %s", len(cards), path)
    return cards


def load_taxonomy(path: PathLike) -> Taxonomy:
    data = _read_json(path)
    try:
        if isinstance(data, dict):
            return Taxonomy.from_mapping(data)
        if isinstance(data, list):
            return Taxonomy.from_records(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid taxonomy in {path}: {exc}") from exc
    raise CatalogError(f"Invalid taxonomy in {path}: expected an array or object")


def cards_to_dataframe(cards: Iterable[Card]) -> pd.DataFrame:
    """Tabular view of a card snapshot, one row per card."""
    columns = list(CARD_KEYS.values())
    df = pd.DataFrame([c.to_dict() for c in cards], columns=columns)
    return df.set_index("id", drop=False)
