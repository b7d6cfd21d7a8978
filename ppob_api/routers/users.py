"""
PPOB API - Users Router
Admin listing, user creation and status updates
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ppob_api.config import Settings
from ppob_api.database import get_db
from ppob_api.dependencies import get_settings
from ppob_api.exceptions import ConflictError
from ppob_api.middleware.auth import AuthContext, require_admin
from ppob_api.models.user import User, UserStatus
from ppob_api.services.password import hash_password

logger = logging.getLogger(__name__)

router = APIRouter()


class UserCreateRequest(BaseModel):
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


class UserStatusRequest(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def known_status(cls, v: str) -> str:
        v = v.upper()
        if v not in UserStatus.ALL:
            raise ValueError(f"status must be one of {', '.join(UserStatus.ALL)}")
        return v


@router.get("/")
async def list_users(admin: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    """List all users (admin only)"""
    return [u.to_dict() for u in db.query(User).order_by(User.id).all()]


@router.post("/")
async def create_user(
    data: UserCreateRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a user; the password is stored hashed"""
    if db.query(User).filter(or_(User.email == data.email, User.username == data.username)).first():
        raise ConflictError("User already exists")

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password, settings.BCRYPT_SALT_ROUNDS),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user.to_dict()


@router.api_route("/{user_id}/status", methods=["PUT", "PATCH"])
async def update_user_status(
    user_id: int,
    data: UserStatusRequest,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update a user's verification status (admin only)"""
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.status = data.status
    db.commit()
    db.refresh(user)

    logger.info(f"Admin {admin.user_id} set user {user.id} status to {user.status}")
    return user.to_dict()
