from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import date
from enum import Enum

# --- Enumerations for Constrained Choices ---

class ListingType(str, Enum):
    SALE = "sale"
    RENT = "rent"

class Category(str, Enum):
    BOOKS = "books"
    VEHICLES = "vehicles"
    SNACKS = "snacks"
    CLOTHING = "clothing"


class ProductFields(BaseModel):
    """
    Listing fields as submitted by a client.

    Only types and enum membership are checked here; presence and the
    cross-field rules (price, phone, image, dates) are enforced by the
    listing service so that they apply to merged updates too.
    """

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None

    type: ListingType = ListingType.SALE
    category: Category = Category.BOOKS

    phone: Optional[str] = None
    address: Optional[str] = None
    deadline: Optional[date] = None
    expiry: Optional[date] = None  # Required for snacks

    @field_validator("address", "deadline", "expiry", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        # Forms submit untouched optional inputs as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value
