"""Bag domain entity: a container items get packed into."""
from typing import Optional
from packy.utilities.constants import BAG_TYPES, DEFAULT_BAG_COLOR, DEFAULT_BAG_ICON
from packy.utilities.ids import generate_short_id


class Bag:
    def __init__(self, name: str = "", bag_type: str = "custom", color: str = DEFAULT_BAG_COLOR,
                 icon: str = DEFAULT_BAG_ICON, id: Optional[str] = None):
        if bag_type not in BAG_TYPES:
            raise ValueError(f"Unknown bag type: {bag_type}")
        self.id = id or generate_short_id()
        self.name = name
        self.type = bag_type
        self.color = color
        self.icon = icon

    def __str__(self) -> str:
        return f"{self.name} [{self.type}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Bag from a JSON dict; missing fields take their defaults.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Bag(
            name=d.get("name", ""),
            bag_type=d.get("type") or "custom",
            color=d.get("color") or DEFAULT_BAG_COLOR,
            icon=d.get("icon") or DEFAULT_BAG_ICON,
            id=d.get("id"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "color": self.color,
            "icon": self.icon,
        }
