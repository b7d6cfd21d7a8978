from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ppob_api.database import Base
from datetime import datetime


class Role:
    USER = "USER"
    ADMIN = "ADMIN"


class UserStatus:
    VERIFIED = "VERIFIED"
    UNVERIFIED = "UNVERIFIED"
    PENDING = "PENDING"

    ALL = (VERIFIED, UNVERIFIED, PENDING)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=Role.USER, nullable=False)
    status = Column(String(20), default=UserStatus.UNVERIFIED, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    refresh_tokens = relationship("RefreshToken", back_populates="user")
    transactions = relationship("Transaction", back_populates="user")

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class RefreshToken(Base):
    """One row per issued refresh token; rotation adds rows, never edits them"""
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(512), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="refresh_tokens")

    @property
    def is_expired(self):
        return self.expires_at < datetime.utcnow()
