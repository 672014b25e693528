"""
Listing Service

CRUD over products, with the listing rules enforced before anything is
written. Listings created with a token belong to that user and only the owner
may change or remove them; listings created anonymously stay open.
"""

import logging
import math
import re
import uuid
from datetime import date
from typing import Iterable, Mapping, Optional, Union

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import (
    AuthenticationError,
    ForbiddenError,
    InternalError,
    InvalidIdError,
    NotFoundError,
    ValidationError,
)
from ..models.product import Category, ProductFields
from ..models.sql_product import SQLProduct

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"[6-9]\d{9}")
IMAGE_PREFIXES = ("http://", "https://", "data:image")

FieldsInput = Union[ProductFields, Mapping]


def _missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_fields(fields: FieldsInput) -> ProductFields:
    if isinstance(fields, ProductFields):
        return fields
    try:
        return ProductFields(**fields)
    except pydantic.ValidationError as e:
        raise ValidationError(e.errors()[0]["msg"])


def _parse_id(product_id: str) -> str:
    try:
        return str(uuid.UUID(str(product_id)))
    except ValueError:
        raise InvalidIdError("Invalid Product Id")


def _check_dates_not_past(values: dict, names: Iterable[str], today: date):
    if "expiry" in names and values.get("category") == Category.SNACKS.value:
        if values.get("expiry") and values["expiry"] < today:
            raise ValidationError("Expiry date is invalid or in the past")
    if "deadline" in names and values.get("deadline") and values["deadline"] < today:
        raise ValidationError("Deadline date is invalid or in the past")


def validate_listing(values: dict, today: date, dates_to_check: Iterable[str] = ("deadline", "expiry")):
    """
    Apply the listing rules to a complete set of field values.

    dates_to_check names the date fields that must be today or later; on update
    only the dates the caller actually sent are checked.
    """
    if _missing(values.get("name")) or values.get("price") is None or _missing(values.get("image")):
        raise ValidationError("Please provide all fields")

    if not math.isfinite(values["price"]) or values["price"] <= 0:
        raise ValidationError("Price must be positive")

    if not values["image"].startswith(IMAGE_PREFIXES):
        raise ValidationError("Please provide a valid image URL or upload a file")

    phone = values.get("phone")
    if _missing(phone):
        raise ValidationError("Phone number is required")
    if not PHONE_PATTERN.fullmatch(phone):
        raise ValidationError("Please enter a valid 10-digit Indian phone number")

    if values.get("category") == Category.SNACKS.value and not values.get("expiry"):
        raise ValidationError("Expiry date is required for snacks")

    _check_dates_not_past(values, set(dates_to_check), today)


def _fetch(db: Session, product_id: str) -> SQLProduct:
    product_id = _parse_id(product_id)
    try:
        sql_model = db.query(SQLProduct).filter(SQLProduct.id == product_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching product {product_id}: {e}")
        raise InternalError("Failed to fetch product")
    if sql_model is None:
        raise NotFoundError("Product not found")
    return sql_model


def _check_owner(sql_model: SQLProduct, subject: Optional[str]):
    if sql_model.owner_id is None:
        return
    if subject is None:
        raise AuthenticationError("Not authorized, no valid token")
    if subject != sql_model.owner_id:
        raise ForbiddenError("You can only modify your own listings")


# --- Operations ---

def list_products(
    db: Session,
    search: Optional[str] = None,
    listing_type: Optional[str] = None,
    category: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> list:
    """All products, newest first. Every filter is optional; with none the list is complete."""
    query = db.query(SQLProduct)
    if search:
        term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = query.filter(SQLProduct.name.ilike(f"%{term}%", escape="\\"))
    if listing_type:
        query = query.filter(SQLProduct.type == listing_type)
    if category:
        query = query.filter(SQLProduct.category == category)
    if owner_id:
        query = query.filter(SQLProduct.owner_id == owner_id)

    try:
        products = query.order_by(SQLProduct.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error in list_products: {e}")
        raise InternalError("Failed to fetch products")
    return [p.to_dict() for p in products]


def get_product(db: Session, product_id: str) -> dict:
    return _fetch(db, product_id).to_dict()


def create_product(db: Session, fields: FieldsInput, owner_id: Optional[str] = None,
                   today: Optional[date] = None) -> dict:
    data = _parse_fields(fields).model_dump()
    validate_listing(data, today or date.today())

    sql_model = SQLProduct(id=str(uuid.uuid4()), owner_id=owner_id, **data)
    try:
        db.add(sql_model)
        db.commit()
        db.refresh(sql_model)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in create_product: {e}")
        raise InternalError("Failed to create product")

    logger.info(f"Created product {sql_model.id}")
    return sql_model.to_dict()


def update_product(db: Session, product_id: str, fields: FieldsInput, subject: Optional[str] = None,
                   today: Optional[date] = None) -> dict:
    """
    Overlay the supplied fields on the stored listing and save the result.

    The id is checked before the store is queried; ownership before the body.
    """
    sql_model = _fetch(db, product_id)
    _check_owner(sql_model, subject)

    update_data = _parse_fields(fields).model_dump(exclude_unset=True)
    merged = {column: getattr(sql_model, column) for column in ProductFields.model_fields}
    merged.update(update_data)
    dates_to_check = set(update_data)
    # Moving a listing into snacks makes its stored expiry binding
    if "category" in update_data:
        dates_to_check.add("expiry")
    validate_listing(merged, today or date.today(), dates_to_check=dates_to_check)

    try:
        for key, value in merged.items():
            setattr(sql_model, key, value)
        db.commit()
        db.refresh(sql_model)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in update_product: {e}")
        raise InternalError("Failed to update product")

    logger.info(f"Updated product {sql_model.id}")
    return sql_model.to_dict()


def delete_product(db: Session, product_id: str, subject: Optional[str] = None):
    sql_model = _fetch(db, product_id)
    _check_owner(sql_model, subject)

    try:
        db.delete(sql_model)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in delete_product: {e}")
        raise InternalError("Failed to delete product")

    logger.info(f"Deleted product {product_id}")
