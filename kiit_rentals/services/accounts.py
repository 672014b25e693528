"""
Account Service

Signup and login. Callers get back plain dicts (public profile plus token) or
one of the errors from core.errors.
"""

import logging
import uuid
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import AuthenticationError, ConflictError, InternalError, ValidationError
from ..core.security import create_access_token, get_password_hash, verify_password
from ..models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Checked against when the email is unknown so both failure paths cost a bcrypt round
    return get_password_hash(uuid.uuid4().hex)


def public_profile(user: User) -> dict:
    return user.to_dict()


def _with_token(user: User) -> dict:
    profile = public_profile(user)
    profile["token"] = create_access_token(data={"sub": user.id})
    return profile


def signup(db: Session, name: str, email: str, password: str) -> dict:
    """
    Register a new user

    Returns the public profile with a freshly issued token.

    Raises:
        ValidationError: A field is missing or the password is too long
        ConflictError: The email is already registered
    """
    if _is_blank(name) or _is_blank(email) or not password:
        raise ValidationError("All fields are required")

    if db.query(User).filter(User.email == email).first():
        raise ConflictError("User already exists")

    new_user = User(id=str(uuid.uuid4()), name=name, email=email)
    try:
        new_user.password = password
    except ValueError as e:
        raise ValidationError(str(e))

    try:
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("User already exists")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving user: {e}")
        raise InternalError()

    logger.info(f"Registered user {new_user.id}")
    return _with_token(new_user)


def login(db: Session, email: str, password: str) -> dict:
    """
    Authenticate by email and password

    An unknown email and a wrong password produce the same error.
    """
    if _is_blank(email) or not password:
        raise ValidationError("Email and password are required")

    user = db.query(User).filter(User.email == email).first()

    if user is None:
        verify_password(password, _dummy_hash())
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        raise AuthenticationError(INVALID_CREDENTIALS)

    return _with_token(user)
