"""
Authentication Router

Handles user signup, login, and the current-user endpoint.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional

from ..core.database_client import get_db
from ..core.auth import get_current_user
from ..models.user import User
from ..services import accounts


router = APIRouter(prefix="/api/user", tags=["Authentication"])


# Pydantic Models
# Fields are optional here so that missing ones get the service's own message
class UserSignup(BaseModel):
    """User registration request"""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    """User login request"""
    email: Optional[str] = None
    password: Optional[str] = None


# Endpoints

@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(user_data: UserSignup, db: Session = Depends(get_db)):
    """
    Register a new user

    - **name**: User's name
    - **email**: Email address (unique, exact match)
    - **password**: Password

    Returns the user's id, name, email and a bearer token
    """
    data = accounts.signup(db, user_data.name, user_data.email, user_data.password)
    return {"success": True, "data": data}


@router.post("/login")
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Login with email and password

    Returns the user's id, name, email and a bearer token
    """
    data = accounts.login(db, credentials.email, credentials.password)
    return {"success": True, "data": data}


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user information

    Requires: Bearer token in Authorization header
    """
    return {"success": True, "data": accounts.public_profile(current_user)}


@router.post("/logout")
def logout():
    """
    Logout endpoint (client-side token removal)

    Tokens are stateless, so logging out means the client discards its token.
    """
    return {"success": True, "message": "Logged out successfully. Please remove token from client."}
