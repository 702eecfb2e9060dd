"""
Item schema.

The pydantic models in this module play the role of the store schema: the
item store runs every payload and filter through them before touching the
database, so required fields, types and numeric coercion are decided here
and nowhere else.
"""

from typing import Annotated, Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from catalog_service.app.errors import ValidationError

# Required strings reject "" the same way the store's NOT NULL columns
# reject a missing value.
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
Price = Annotated[float, Field(allow_inf_nan=False)]

ITEM_FIELDS = ("name", "price", "category")

_M = TypeVar("_M", bound=BaseModel)


class ItemCreate(BaseModel):
    """Fields required to create an item. Unknown keys (including ``id``) are dropped."""

    model_config = ConfigDict(extra="ignore")

    name: NonEmptyStr
    price: Price
    category: NonEmptyStr


class ItemUpdate(BaseModel):
    """
    A partial item used for merges.

    Only fields that are present and not null overwrite the stored value;
    everything else keeps what the store already holds.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[NonEmptyStr] = None
    price: Optional[Price] = None
    category: Optional[NonEmptyStr] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ItemFilter(BaseModel):
    """Equality filter for ``find``. Query-string prices are coerced to numbers."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    price: Optional[Price] = None
    category: Optional[str] = None

    def conditions(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Item(BaseModel):
    """A persisted item as returned by the store."""

    id: str
    name: str
    price: float
    category: str


def _validate(model: Type[_M], data: Any, label: str) -> _M:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        fields = []
        details = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "body"
            fields.append(field)
            details.append(f"{field}: {err['msg']}")
        raise ValidationError(
            f"{label} validation failed: " + "; ".join(details), fields
        ) from exc


def parse_new_item(fields: Mapping[str, Any]) -> ItemCreate:
    """Validate a create payload, raising ValidationError naming the bad fields."""
    return _validate(ItemCreate, fields, "Item")


def parse_item_update(fields: Mapping[str, Any]) -> ItemUpdate:
    """Validate an update payload, raising ValidationError naming the bad fields."""
    return _validate(ItemUpdate, fields, "Item update")


def parse_filter(filters: Optional[Mapping[str, Any]]) -> ItemFilter:
    """Validate a find filter; ``None`` means no constraint."""
    return _validate(ItemFilter, filters or {}, "Filter")
