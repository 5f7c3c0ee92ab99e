"""PackingList aggregate: meta, trip, bags, categories, items and stages of one trip."""
from datetime import datetime, timezone
from typing import List, Optional
from packy.domain.Bag import Bag
from packy.domain.Category import Category
from packy.domain.Item import Item
from packy.domain.Stage import Stage
from packy.domain.Trip import Trip
from packy.logic.ordering.reorder import normalize_orders
from packy.utilities.constants import DOCUMENT_VERSION


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PackingList:
    def __init__(self, trip: Optional[Trip] = None, bags: Optional[List[Bag]] = None,
                 categories: Optional[List[Category]] = None, items: Optional[List[Item]] = None,
                 stages: Optional[List[Stage]] = None, meta: Optional[dict] = None):
        self.trip = trip
        self.bags = bags[:] if bags else []
        self.categories = categories[:] if categories else []
        self.items = items[:] if items else []
        self.stages = stages[:] if stages else []
        self.meta = dict(meta) if meta else self.new_meta()

    @staticmethod
    def new_meta(source_template: Optional[str] = None) -> dict:
        timestamp = now_iso()
        meta = {
            "version": DOCUMENT_VERSION,
            "createdAt": timestamp,
            "modifiedAt": timestamp,
            "isTemplate": False,
        }
        if source_template:
            meta["sourceTemplate"] = source_template
        return meta

    def __str__(self) -> str:
        packed = sum(1 for i in self.items if i.packed)
        return (f"{self.trip.name if self.trip else 'Untitled'} - {len(self.bags)} bags, "
                f"{len(self.categories)} categories, {packed}/{len(self.items)} items packed")

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return PackingList(
            trip=Trip.from_dict(d["trip"]) if d.get("trip") else None,
            bags=[Bag.from_dict(b) for b in d.get("bags") or []],
            categories=[Category.from_dict(c) for c in d.get("categories") or []],
            items=[Item.from_dict(i) for i in d.get("items") or []],
            stages=[Stage.from_dict(s) for s in d.get("stages") or []],
            meta=d.get("meta"),
        )

    def to_dict(self):
        return normalize_document({
            "meta": dict(self.meta),
            "trip": self.trip.to_dict() if self.trip else None,
            "bags": [b.to_dict() for b in self.bags],
            "categories": [c.to_dict() for c in self.categories],
            "items": [i.to_dict() for i in self.items],
            "stages": [s.to_dict() for s in self.stages],
        })


def normalize_document(document: dict) -> dict:
    '''Returns a copy of a list document whose item, stage and task orders are dense.

    Entries without an order keep their list position relative to each other.
    '''
    doc = dict(document)
    doc["items"] = normalize_orders(_positioned(doc.get("items")), "categoryId")
    doc["stages"] = [
        dict(stage, tasks=normalize_orders(_positioned(stage.get("tasks"))))
        for stage in normalize_orders(_positioned(doc.get("stages")))
    ]
    return doc


def _positioned(entries) -> List[dict]:
    result = []
    for idx, entry in enumerate(entries or []):
        order = entry.get("order")
        result.append(dict(entry, order=order if isinstance(order, int) else idx))
    return result
