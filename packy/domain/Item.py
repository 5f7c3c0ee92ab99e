"""Item domain entity: something to pack, owned by a category, optionally pinned to a bag."""
import logging
from typing import Optional
from packy.logic.quantity.expression import EXPRESSION_PARSER, ExpressionError
from packy.utilities.constants import QUANTITY_TYPES
from packy.utilities.ids import generate_short_id

logger = logging.getLogger(__name__)


class Item:
    def __init__(self, name: str = "", category_id: Optional[str] = None, bag_id: Optional[str] = None,
                 quantity_type: str = "single", quantity: int = 1,
                 quantity_expression: Optional[str] = None, packed: bool = False,
                 notes: str = "", order: int = 0, id: Optional[str] = None):
        if quantity_type not in QUANTITY_TYPES:
            raise ValueError(f"Unknown quantity type: {quantity_type}")
        self.id = id or generate_short_id()
        self.name = name
        self.category_id = category_id
        self.bag_id = bag_id
        self.quantity_type = quantity_type
        self.quantity = quantity
        self.quantity_expression = quantity_expression
        self.packed = packed
        self.notes = notes
        self.order = order

    def resolve_quantity(self, days: int) -> int:
        '''How many of this item to pack for a trip of `days` days.

        single -> 1, fixed -> quantity (1 when unset), dependent -> expression value.
        A broken expression falls back to 1 instead of failing the caller.
        '''
        if self.quantity_type == "fixed":
            return self.quantity or 1
        if self.quantity_type == "dependent":
            try:
                return EXPRESSION_PARSER.evaluate(self.quantity_expression, days)
            except ExpressionError as e:
                logger.warning(f"Item '{self.name}' has an invalid quantity expression: {e}")
                return 1
        return 1

    def __str__(self) -> str:
        state = "packed" if self.packed else "to pack"
        return f"{self.name} - {self.quantity_type} - {state}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an Item from a JSON dict. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Item(
            name=d.get("name", ""),
            category_id=d.get("categoryId"),
            bag_id=d.get("bagId"),
            quantity_type=d.get("quantityType") or "single",
            quantity=d.get("quantity", 1),
            quantity_expression=d.get("quantityExpression"),
            packed=bool(d.get("packed", False)),
            notes=d.get("notes") or "",
            order=d.get("order", 0),
            id=d.get("id"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "categoryId": self.category_id,
            "bagId": self.bag_id,
            "quantityType": self.quantity_type,
            "quantity": self.quantity,
            "quantityExpression": self.quantity_expression,
            "packed": self.packed,
            "notes": self.notes,
            "order": self.order,
        }
