"""
Input validation schemas using Pydantic for better data integrity.

Two groups of models live here:
  * request models for the HTTP API (TripInput, BagInput, ItemInput, ...)
  * document models used to check an imported packing list before it is loaded
"""
from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from packy.logic.quantity.expression import validate_expression

BagType = Literal["carry-on", "personal-item", "checked", "backpack", "sling-bag", "custom"]
QuantityType = Literal["single", "fixed", "dependent"]
DropPosition = Literal["before", "after"]


class _Input(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_fragment(self) -> Dict[str, Any]:
        '''JSON-ready dict with camelCase keys, only fields the caller actually sent.'''
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class TripInput(_Input):
    """Schema for trip details."""
    name: str = Field(..., min_length=1, max_length=200)
    departure_date: date = Field(..., alias="departureDate")
    return_date: date = Field(..., alias="returnDate")

    @field_validator('name', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)

    @model_validator(mode='after')
    def validate_range(self):
        if self.return_date < self.departure_date:
            raise ValueError('Return date must be on or after the departure date')
        return self


class TripFieldInput(_Input):
    field: Literal["name", "departureDate", "returnDate"]
    value: str = Field(..., min_length=1)


class BagInput(_Input):
    """Schema for bag creation."""
    name: str = Field(..., min_length=1, max_length=100)
    type: BagType = "custom"
    color: Optional[str] = Field(None, pattern=r'^#[0-9a-fA-F]{6}$')
    icon: Optional[str] = Field(None, max_length=50)

    @field_validator('name', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class BagUpdate(_Input):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[BagType] = None
    color: Optional[str] = Field(None, pattern=r'^#[0-9a-fA-F]{6}$')
    icon: Optional[str] = Field(None, max_length=50)


class CategoryInput(_Input):
    """Schema for category creation."""
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    default_bag_id: Optional[str] = Field(None, alias="defaultBagId")

    @field_validator('name', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class CategoryUpdate(_Input):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    default_bag_id: Optional[str] = Field(None, alias="defaultBagId")


def _check_expression(expression: Optional[str]) -> Optional[str]:
    if expression is None:
        return expression
    result = validate_expression(expression)
    if not result['valid']:
        raise ValueError(result['error'])
    return expression


class ItemInput(_Input):
    """Schema for item creation."""
    name: str = Field(..., min_length=1, max_length=200)
    category_id: str = Field(..., min_length=1, alias="categoryId")
    bag_id: Optional[str] = Field(None, alias="bagId")
    quantity_type: QuantityType = Field("single", alias="quantityType")
    quantity: int = Field(1, ge=1, le=10000)
    quantity_expression: Optional[str] = Field(None, alias="quantityExpression", max_length=100)
    notes: str = Field("", max_length=2000)

    @field_validator('name', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)

    @field_validator('quantity_expression')
    @classmethod
    def validate_quantity_expression(cls, v):
        return _check_expression(v)

    @model_validator(mode='after')
    def require_expression_when_dependent(self):
        if self.quantity_type == "dependent" and not self.quantity_expression:
            raise ValueError('Dependent quantity requires a quantity expression')
        return self


class ItemUpdate(_Input):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    bag_id: Optional[str] = Field(None, alias="bagId")
    quantity_type: Optional[QuantityType] = Field(None, alias="quantityType")
    quantity: Optional[int] = Field(None, ge=1, le=10000)
    quantity_expression: Optional[str] = Field(None, alias="quantityExpression", max_length=100)
    packed: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('quantity_expression')
    @classmethod
    def validate_quantity_expression(cls, v):
        return _check_expression(v)


class StageInput(_Input):
    name: str = Field(..., min_length=1, max_length=100)


class TaskInput(_Input):
    description: str = Field(..., min_length=1, max_length=500)

    @field_validator('description', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class TaskUpdate(_Input):
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    completed: Optional[bool] = None


class ReorderInput(_Input):
    """Drop gesture: place the dragged entity before/after target_id."""
    target_id: str = Field(..., min_length=1, alias="targetId")
    position: DropPosition


class BagAssignment(_Input):
    """bagId None clears the assignment."""
    bag_id: Optional[str] = Field(None, alias="bagId")


class CategoryAssignment(_Input):
    category_id: str = Field(..., min_length=1, alias="categoryId")


class PackAllInput(_Input):
    packed: bool = True


class NavigateInput(_Input):
    view: Literal["my-lists", "templates", "settings"]
    subview: Optional[str] = None


class ToastInput(_Input):
    message: str = Field(..., min_length=1, max_length=500)
    type: Literal["info", "success", "warning", "error"] = "info"


class ExpressionInput(_Input):
    expression: Optional[str] = None
    days: int = Field(1, ge=1, le=3650)


class TemplateCreateInput(_Input):
    template_id: Optional[str] = Field(None, alias="templateId")
    trip: TripInput


class SaveTemplateInput(_Input):
    template_name: str = Field(..., min_length=1, max_length=100, alias="templateName")
    description: str = Field("", max_length=500)


# --- Imported documents ------------------------------------------------------

class DocumentBag(BaseModel):
    model_config = ConfigDict(extra='allow')
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class DocumentItem(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1, alias="categoryId")
    quantity_type: QuantityType = Field(..., alias="quantityType")


class PackingListDocument(BaseModel):
    """Structure an exported/imported packing list must have."""
    model_config = ConfigDict(extra='allow')
    meta: Dict[str, Any]
    bags: List[DocumentBag]
    categories: List[Dict[str, Any]]
    items: List[DocumentItem]
    stages: Optional[List[Dict[str, Any]]] = None
    trip: Optional[Dict[str, Any]] = None


_ENTRY_LABELS = {'items': 'Item', 'bags': 'Bag', 'categories': 'Category', 'stages': 'Stage'}
_MISSING_TYPES = {'missing', 'string_too_short'}


def _describe_error(err: Dict[str, Any]) -> str:
    loc = err.get('loc', ())
    field = str(loc[0]) if loc else ''
    missing = err.get('type') in _MISSING_TYPES or err.get('input') is None

    if len(loc) == 1:
        if missing:
            return f"Missing required field: {field}"
        if err.get('type') == 'list_type':
            return f"{field.capitalize()} must be an array"
        return f"Invalid field {field}: {err.get('msg')}"

    label = _ENTRY_LABELS.get(field)
    if label and isinstance(loc[1], int):
        if len(loc) == 2:
            return f"{label} {loc[1]}: must be an object"
        name = loc[2]
        if missing:
            return f"{label} {loc[1]}: missing {name}"
        return f"{label} {loc[1]}: invalid {name} ({err.get('msg')})"

    return f"{'.'.join(str(p) for p in loc)}: {err.get('msg')}"


def validate_packing_list(data: Any) -> Tuple[bool, List[str]]:
    """Check an imported document; returns (valid, errors) with one message per problem."""
    if not isinstance(data, dict):
        return False, ['Data must be an object']
    try:
        PackingListDocument.model_validate(data)
    except ValidationError as e:
        return False, [_describe_error(err) for err in e.errors()]
    return True, []


class ImportValidationError(ValueError):
    """An imported document failed validation; nothing was loaded."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid file structure: {', '.join(self.errors)}")
