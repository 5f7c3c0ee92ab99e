from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"
DOCUMENT_VERSION: Final[str] = "1.0.0"

BAG_TYPES: Final[tuple] = ("carry-on", "personal-item", "checked", "backpack", "sling-bag", "custom")
QUANTITY_TYPES: Final[tuple] = ("single", "fixed", "dependent")
DROP_POSITIONS: Final[tuple] = ("before", "after")

DEFAULT_BAG_COLOR: Final[str] = "#65b8e0"
DEFAULT_BAG_ICON: Final[str] = "suitcase"
DEFAULT_CATEGORY_ICON: Final[str] = "box"
DEFAULT_LIST_NAME: Final[str] = "packing-list"

# name, icon
DEFAULT_CATEGORIES: Final[tuple] = (
    ("Clothing", "shirt"),
    ("Toiletries", "soap"),
    ("Electronics", "laptop"),
    ("Documents", "file"),
    ("Medical", "pills"),
    ("Miscellaneous", "box"),
)
DEFAULT_STAGES: Final[tuple] = ("Night Before", "Morning Of")

VIEWS: Final[tuple] = ("my-lists", "templates", "settings")
TOAST_TYPES: Final[tuple] = ("info", "success", "warning", "error")

EXPRESSION_DESCRIPTIONS: Final[dict[str, str]] = {
    "d": "one per day",
    "2d": "two per day",
    "3d": "three per day",
    "d+1": "one per day plus one extra",
    "d+2": "one per day plus two extra",
    "d-1": "one less than trip days",
    "2d+1": "two per day plus one extra",
    "2d+2": "two per day plus two extra",
    "d/2": "one every two days",
    "(d+1)/2": "half of days plus one",
}
