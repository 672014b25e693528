"""
User Model for Authentication

Handles user accounts and their stored password hashes.
"""

from sqlalchemy import Column, String, DateTime
from datetime import datetime
import uuid

from .base import Base
from ..core.security import get_password_hash


class User(Base):
    """User model for authentication"""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    # Exact match, no case folding
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plaintext: str):
        # Every write goes through bcrypt; hashed_password is never taken from input
        self.hashed_password = get_password_hash(plaintext)

    def to_dict(self):
        """Public profile (never includes the password hash)"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
        }
