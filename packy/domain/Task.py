"""Task domain entity: a checklist entry inside a preparation stage."""
from typing import Optional
from packy.utilities.ids import generate_short_id


class Task:
    def __init__(self, description: str = "", completed: bool = False, order: int = 0,
                 id: Optional[str] = None):
        self.id = id or generate_short_id()
        self.description = description
        self.completed = completed
        self.order = order

    def __str__(self) -> str:
        mark = "x" if self.completed else " "
        return f"[{mark}] {self.description}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Task(
            description=d.get("description", ""),
            completed=bool(d.get("completed", False)),
            order=d.get("order", 0),
            id=d.get("id"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
            "order": self.order,
        }
