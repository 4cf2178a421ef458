# cardatlas/lookup.py
# CONSTANTS - All the lookup data in one place

ENDPOINT = "endpoint"
THROUGHPOINT = "throughpoint"

# Default data layers: (name, id, kind)
DEFAULT_DATA_LAYERS = [
    # Endpoints - final destinations for data
    ("Model", "model", ENDPOINT),
    ("Pinia Store", "pinia-store", ENDPOINT),
    ("Local Storage", "local-storage", ENDPOINT),
    ("Session Storage", "session-storage", ENDPOINT),
    ("Database Table", "database-table", ENDPOINT),
    # Throughpoints - intermediate processing layers
    ("Repository", "repository", THROUGHPOINT),
    ("ViewController", "view-controller", THROUGHPOINT),
    ("Backend API", "backend-api", THROUGHPOINT),
]

ORPHAN_MODES = ("endpoints", "throughpoints")

# Tree layout, in pixels. CARD_WIDTH matches one rendered mini card.
LAYOUT_DEFAULTS = {
    "card_width": 150.0,
    "horizontal_spacing": 80.0,
    "vertical_spacing": 120.0,
    "margin": 10.0,
    "min_width": 600.0,
    "card_height": 70.0,
    "card_top_padding": 20.0,
}

# Card record keys as they appear in exported catalogs
CARD_KEYS = {
    "id": "id",
    "field": "field",
    "layer": "layer",
    "location": "location",
    "type": "type",
    "scope": "scope",
    "category": "category",
    "persists_in": "persists_in",
    "linked_to": "linkedTo",
    "notes": "notes",
}

SEARCHABLE_FIELDS = ("field", "location", "notes", "type")

CONNECTOR_COLOR = "#00bcd4"
CARD_FACE_COLOR = "#262730"
CARD_EDGE_COLOR = "#00bcd4"
ROOT_EDGE_COLOR = "gold"
