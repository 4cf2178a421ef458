"""
Data models for the card catalog and its layer taxonomy.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from cardatlas.lookup import CARD_KEYS, DEFAULT_DATA_LAYERS


@dataclass(frozen=True)
class Card:
    """A named data field with an optional single outgoing link."""

    id: str
    field: str = ""
    layer: str = ""
    location: str = ""
    type: str = ""
    scope: Optional[str] = None
    category: Optional[str] = None
    persists_in: tuple[str, ...] = ()
    linked_to: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        # An empty link is the same as no link
        if not self.linked_to:
            object.__setattr__(self, "linked_to", None)

    @property
    def has_link(self) -> bool:
        return self.linked_to is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Card":
        """Build a card from an exported record (camelCase ``linkedTo``)."""
        if data.get("id") is None:
            raise ValueError(f"Card record has no id: {dict(data)!r}")

        values = {}
        for attr, key in CARD_KEYS.items():
            if key in data and data[key] is not None:
                values[attr] = data[key]
        values["id"] = str(values["id"])
        if "linked_to" in values:
            values["linked_to"] = str(values["linked_to"])
        values["persists_in"] = _as_tuple(values.get("persists_in"))
        return cls(**values)

    def to_dict(self) -> dict:
        """Convert to an exported record, leaving out absent optional fields."""
        out = {}
        for attr, key in CARD_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if attr == "persists_in":
                if not value:
                    continue
                value = list(value)
            out[key] = value
        return out


def _as_tuple(value) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"persists_in must be a list of strings, not {type(value).__name__}")
    return tuple(str(v) for v in value)


class LayerType(str, Enum):
    ENDPOINT = "endpoint"
    THROUGHPOINT = "throughpoint"


@dataclass(frozen=True)
class DataLayer:
    name: str
    id: str
    type: LayerType

    def to_dict(self) -> dict:
        return {"name": self.name, "id": self.id, "type": self.type.value}


@dataclass(frozen=True)
class Taxonomy:
    """Two-tier layer taxonomy: endpoint layers vs. throughpoint layers.

    Cards refer to a layer by its display ``name``. A key that is not
    registered here belongs to neither bucket.
    """

    layers: tuple[DataLayer, ...] = ()

    @classmethod
    def default(cls) -> "Taxonomy":
        return cls(tuple(
            DataLayer(name=name, id=layer_id, type=LayerType(kind))
            for name, layer_id, kind in DEFAULT_DATA_LAYERS
        ))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "Taxonomy":
        """``{"Model": "endpoint", "Repository": "throughpoint"}`` -> Taxonomy."""
        return cls(tuple(
            DataLayer(name=name, id=_layer_id(name), type=LayerType(kind))
            for name, kind in mapping.items()
        ))

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "Taxonomy":
        layers = []
        for rec in records:
            name = str(rec["name"])
            layers.append(DataLayer(
                name=name,
                id=str(rec.get("id") or _layer_id(name)),
                type=LayerType(rec["type"]),
            ))
        return cls(tuple(layers))

    def endpoints(self) -> list[DataLayer]:
        return [layer for layer in self.layers if layer.type is LayerType.ENDPOINT]

    def throughpoints(self) -> list[DataLayer]:
        return [layer for layer in self.layers if layer.type is LayerType.THROUGHPOINT]

    def kind_of(self, layer_key: Optional[str]) -> Optional[LayerType]:
        for layer in self.layers:
            if layer.name == layer_key:
                return layer.type
        return None

    def is_endpoint(self, layer_key: Optional[str]) -> bool:
        return self.kind_of(layer_key) is LayerType.ENDPOINT

    def is_throughpoint(self, layer_key: Optional[str]) -> bool:
        return self.kind_of(layer_key) is LayerType.THROUGHPOINT


def _layer_id(name: str) -> str:
    return "-".join(name.lower().split())


@dataclass
class AtlasFilter:
    """Filter criteria for the atlas view.

    ``relationships`` holds a root card id; when set, every other criterion
    is ignored and only the root's connected network is shown.
    """

    layer: Optional[str] = None
    scope: Optional[str] = None
    category: Optional[str] = None
    search_term: str = ""
    orphans: Optional[str] = None
    relationships: Optional[str] = None
