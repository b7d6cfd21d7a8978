"""
PPOB API - Authentication Router
Handles: register, login, refresh (rotation), logout, me
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ppob_api.config import Settings
from ppob_api.database import get_db
from ppob_api.dependencies import get_settings, get_token_service
from ppob_api.exceptions import ConflictError
from ppob_api.middleware.auth import AuthContext, authenticate
from ppob_api.models.user import User
from ppob_api.services.password import hash_password, verify_password
from ppob_api.services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter()

REFRESH_COOKIE = "refreshToken"


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


def set_refresh_cookie(response: Response, token: str):
    response.set_cookie(REFRESH_COOKIE, token, httponly=True, samesite="lax")


def _public_user(user: User) -> dict:
    return {"id": user.id, "username": user.username, "email": user.email}


async def _read_refresh_token(request: Request) -> Optional[str]:
    """Refresh token from the cookie, else from the JSON body"""
    token = request.cookies.get(REFRESH_COOKIE)
    if token:
        return token
    try:
        body = await request.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get(REFRESH_COOKIE), str):
        return body[REFRESH_COOKIE]
    return None


def _issue_tokens(user: User, response: Response, tokens: TokenService) -> dict:
    access_token = tokens.sign_access({"userId": user.id, "role": user.role})
    refresh_token = tokens.create_refresh(user.id)
    set_refresh_cookie(response, refresh_token)
    return {"accessToken": access_token, "refreshToken": refresh_token}


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user"""
    existing = db.query(User).filter(
        or_(User.email == data.email, User.username == data.username)
    ).first()
    if existing:
        raise ConflictError("User already exists")

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password, settings.BCRYPT_SALT_ROUNDS),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username})")
    return {"user": _public_user(user), **_issue_tokens(user, response, tokens)}


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email and password"""
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {"user": _public_user(user), **_issue_tokens(user, response, tokens)}


@router.post("/refresh")
async def refresh(
    request: Request,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange a refresh token for a new access token; the old one is revoked"""
    token = await _read_refresh_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="No refresh token")

    access_token, new_refresh = tokens.rotate_refresh(token)
    set_refresh_cookie(response, new_refresh)
    return {"accessToken": access_token, "refreshToken": new_refresh}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
):
    """Revoke the refresh token and clear the cookie"""
    token = await _read_refresh_token(request)
    if token:
        tokens.revoke_refresh(token)
    response.delete_cookie(REFRESH_COOKIE)
    return {"message": "Logged out"}


@router.get("/me")
async def me(auth: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """Profile of the authenticated user"""
    user = db.get(User, auth.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": user.to_dict()}
