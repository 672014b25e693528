from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from ..core.auth import get_current_user_id, get_token_subject
from ..core.database_client import get_db
from ..models.product import Category, ListingType, ProductFields
from ..services import listings

router = APIRouter(prefix="/api/products", tags=["Products"])


# Get all products
@router.get("")
def get_products(
    search: Optional[str] = None,
    type: Optional[ListingType] = None,
    category: Optional[Category] = None,
    db: Session = Depends(get_db),
):
    products = listings.list_products(
        db,
        search=search,
        listing_type=type.value if type else None,
        category=category.value if category else None,
    )
    return {"success": True, "data": products}


# Listings owned by the caller (declared before /{product_id} so "mine" is not taken as an id)
@router.get("/mine")
def get_my_products(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return {"success": True, "data": listings.list_products(db, owner_id=user_id)}


@router.get("/{product_id}")
def get_product(product_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": listings.get_product(db, product_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductFields,
    subject: Optional[str] = Depends(get_token_subject),
    db: Session = Depends(get_db),
):
    created = listings.create_product(db, product, owner_id=subject)
    return {"success": True, "data": created}


@router.put("/{product_id}")
def update_product(
    product_id: str,
    product: ProductFields,
    subject: Optional[str] = Depends(get_token_subject),
    db: Session = Depends(get_db),
):
    updated = listings.update_product(db, product_id, product, subject=subject)
    return {"success": True, "data": updated}


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    subject: Optional[str] = Depends(get_token_subject),
    db: Session = Depends(get_db),
):
    listings.delete_product(db, product_id, subject=subject)
    return {"success": True, "data": {}, "message": "Product deleted successfully"}
