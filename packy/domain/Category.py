"""Category domain entity: groups items and may point at a default bag."""
from typing import Optional
from packy.utilities.constants import DEFAULT_CATEGORY_ICON
from packy.utilities.ids import generate_short_id


class Category:
    def __init__(self, name: str = "", icon: str = DEFAULT_CATEGORY_ICON,
                 default_bag_id: Optional[str] = None, id: Optional[str] = None):
        self.id = id or generate_short_id()
        self.name = name
        self.icon = icon
        self.default_bag_id = default_bag_id

    def __str__(self) -> str:
        return f"{self.name} (default bag: {self.default_bag_id or '-'})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Category(
            name=d.get("name", ""),
            icon=d.get("icon") or DEFAULT_CATEGORY_ICON,
            default_bag_id=d.get("defaultBagId"),
            id=d.get("id"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "defaultBagId": self.default_bag_id,
        }
