"""Stage domain entity: an ordered preparation phase ("Night Before") owning its tasks."""
from typing import List, Optional
from packy.domain.Task import Task
from packy.utilities.ids import generate_short_id


class Stage:
    def __init__(self, name: str = "", order: int = 0, tasks: Optional[List[Task]] = None,
                 id: Optional[str] = None):
        self.id = id or generate_short_id()
        self.name = name
        self.order = order
        self.tasks = tasks[:] if tasks else []

    def __str__(self) -> str:
        done = sum(1 for t in self.tasks if t.completed)
        return f"{self.name} ({done}/{len(self.tasks)} tasks)"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Stage(
            name=d.get("name", ""),
            order=d.get("order", 0),
            tasks=[Task.from_dict(t) for t in d.get("tasks") or []],
            id=d.get("id"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "order": self.order,
            "tasks": [task.to_dict() for task in self.tasks],
        }
