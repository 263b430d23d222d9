from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Mapping, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError

# Optional "$", ASCII digits, optional "." or "," separator, up to two decimals.
CURRENCY_PATTERN = r"^\$?[0-9]+[.,]?[0-9]{0,2}$"


def _currency_text(value: Any) -> Any:
    # Persisted Decimals and JSON numbers are matched in their plain text form.
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return value


def _whole_number(value: Decimal) -> Decimal:
    if value != value.to_integral_value():
        raise PydanticCustomError("whole_number", "must be an integer")
    return value


Dimension = Annotated[Decimal, Field(ge=0)]
StockCount = Annotated[Decimal, Field(ge=1), AfterValidator(_whole_number)]
CurrencyText = Annotated[str, Field(pattern=CURRENCY_PATTERN), BeforeValidator(_currency_text)]


class SkuRecord(BaseModel):
    """
    Field rules for a complete SKU record.

    Fed the merged candidate attributes (persisted values overlaid with the
    incoming changes). ``None`` and whitespace-only strings count as absent,
    so a required field left blank is reported as ``missing``. Rules that
    need the database live in ``storefront.validators``.
    """

    code: str = Field(max_length=255)
    length: Dimension
    weight: Dimension
    thickness: Dimension
    attribute_value: Optional[str] = Field(default=None, max_length=255)
    attribute_type_id: Optional[int] = None
    stock: StockCount
    stock_warning_level: StockCount
    cost_value: CurrencyText
    price: CurrencyText
    product_id: Optional[int] = None
    active: bool

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {
                key: value
                for key, value in data.items()
                if value is not None and not (isinstance(value, str) and not value.strip())
            }
        return data


# Request bodies take raw JSON values; SkuRecord reports every bad field at once.
class SkuCreate(BaseModel):
    code: Any = None
    length: Any = None
    weight: Any = None
    thickness: Any = None
    attribute_value: Any = None
    attribute_type_id: Any = None
    stock: Any = None
    stock_warning_level: Any = None
    cost_value: Any = None
    price: Any = None
    product_id: Any = None
    active: Any = True


class SkuUpdate(BaseModel):
    code: Any = None
    length: Any = None
    weight: Any = None
    thickness: Any = None
    attribute_value: Any = None
    attribute_type_id: Any = None
    stock: Any = None
    stock_warning_level: Any = None
    cost_value: Any = None
    price: Any = None
    product_id: Any = None
    active: Any = None


class SkuRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    length: Decimal
    weight: Decimal
    thickness: Decimal
    attribute_value: Optional[str]
    attribute_type_id: Optional[int]
    stock: int
    stock_warning_level: int
    cost_value: Decimal
    price: Decimal
    product_id: Optional[int]
    active: bool
    created_at: datetime
    updated_at: datetime


class CountryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class CountryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ShippingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Optional[Decimal]
