from sqlalchemy import Column, String, Float, Text, Date, DateTime, Enum
from datetime import datetime

from .base import Base


class SQLProduct(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)

    # Core Fields
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    image = Column(Text, nullable=False)  # http(s) URL or inline data:image payload

    # Enum Fields
    type = Column(Enum('sale', 'rent', name="listing_types"), nullable=False, default='sale')
    category = Column(Enum('books', 'vehicles', 'snacks', 'clothing', name="product_categories"),
                      nullable=False, default='books')

    # Contact / Dates
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
    deadline = Column(Date, nullable=True)
    expiry = Column(Date, nullable=True)

    # Creator's user id, null for listings created without a token
    owner_id = Column(String, nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "type": self.type,
            "category": self.category,
            "phone": self.phone,
            "address": self.address,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
